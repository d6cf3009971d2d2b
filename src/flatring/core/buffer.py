"""
Flat coordinate buffer for a closed ring.

The buffer owns one read-only float64 array holding every vertex of the
ring back to back. Coordinates are replaced wholesale on each assignment;
every replacement bumps ``revision``, which keys the cached extent and
maximum edge length.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .cache import RevisionCache
from .errors import InvalidCoordinate, InvalidLayout
from .extent import Extent, extent_from_flat
from .flat import deflate_coordinates, inflate_coordinates, max_squared_delta
from .layout import (
    DEFAULT_LAYOUT,
    GeometryLayout,
    LayoutLike,
    as_layout,
    get_stride,
    infer_layout,
    layout_for_stride,
)

logger = logging.getLogger(__name__)


def _freeze(flat_coordinates: np.ndarray) -> np.ndarray:
    flat_coordinates.flags.writeable = False
    return flat_coordinates


class FlatRingBuffer:
    """
    A closed ring stored as a single flat coordinate array.

    Parameters
    ----------
    coordinates : sequence, optional
        Either nested vertex tuples, or (together with ``layout``) an
        already-flat sequence of numbers.
    layout : GeometryLayout or str, optional
        Coordinate layout. Inferred from the first vertex when omitted.

    Attributes
    ----------
    flat_coordinates : np.ndarray
        Read-only array of length ``vertex_count() * stride``.
    layout : GeometryLayout
        Layout of every vertex.
    stride : int
        Numbers per vertex.
    revision : int
        Incremented on every coordinate replacement.

    Example
    -------
    >>> ring = FlatRingBuffer([(0, 0), (0, 1), (1, 1), (1, 0), (0, 0)])
    >>> ring.stride, ring.vertex_count()
    (2, 5)
    """

    def __init__(
        self,
        coordinates: Optional[Sequence] = None,
        layout: Optional[LayoutLike] = None
    ):
        self.layout = DEFAULT_LAYOUT
        self.stride = get_stride(DEFAULT_LAYOUT)
        self.flat_coordinates = _freeze(np.empty(0, dtype=np.float64))
        self.revision = 0

        self._extent_cache = RevisionCache('extent')
        self._max_delta_cache = RevisionCache('max_delta')
        self.simplified_cache = RevisionCache('simplified')

        if coordinates is None:
            if layout is not None:
                self.set_flat_coordinates(layout, [])
        elif layout is not None and _is_flat(coordinates):
            self.set_flat_coordinates(layout, coordinates)
        else:
            self.set_from_nested_coordinates(coordinates, layout=layout)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(layout={self.layout.value}, "
                f"vertices={self.vertex_count()}, revision={self.revision})")

    def changed(self) -> None:
        """Bump the revision, invalidating every derived value."""
        self.revision += 1

    def set_from_nested_coordinates(
        self,
        points: Sequence[Sequence[float]],
        stride: Optional[int] = None,
        layout: Optional[LayoutLike] = None
    ) -> None:
        """
        Replace the ring with the given vertex tuples.

        Parameters
        ----------
        points : sequence of sequences
            Vertices of the closed ring (first vertex repeated as last).
        stride : int, optional
            Expected components per vertex.
        layout : GeometryLayout or str, optional
            Layout of the vertices. If neither ``stride`` nor ``layout``
            is given, it is inferred from the first vertex.

        Raises
        ------
        InvalidLayout
            If the layout is unknown, cannot be inferred, or disagrees
            with ``stride``.
        InvalidCoordinate
            If any vertex is not a sequence or has a length other than
            the stride.
        """
        if layout is not None:
            new_layout = as_layout(layout)
            if stride is not None and stride != get_stride(new_layout):
                raise InvalidLayout(
                    f"Layout {new_layout.value} has stride {get_stride(new_layout)}, got stride {stride}"
                )
        elif stride is not None:
            new_layout = layout_for_stride(stride)
        else:
            sample = points[0] if len(points) else None
            if sample is not None:
                try:
                    len(sample)
                except TypeError:
                    raise InvalidCoordinate(f"Vertex 0 is not a sequence: {sample!r}") from None
            new_layout = infer_layout(None, sample)

        new_stride = get_stride(new_layout)
        flat = deflate_coordinates(points, new_stride)
        self._replace(new_layout, flat)

    def set_flat_coordinates(self, layout: LayoutLike, flat_coordinates: Sequence[float]) -> None:
        """
        Replace the ring with an already-flat coordinate sequence.

        Raises
        ------
        InvalidLayout
            If the layout is unknown.
        InvalidCoordinate
            If the length is not a multiple of the stride or the values
            are not numeric.
        """
        new_layout = as_layout(layout)
        new_stride = get_stride(new_layout)
        try:
            flat = np.array(flat_coordinates, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidCoordinate(f"Flat coordinates are not numeric: {e}") from None
        if flat.ndim != 1:
            raise InvalidCoordinate(f"Expected a 1-D flat sequence, got shape {flat.shape}")
        if len(flat) % new_stride != 0:
            raise InvalidCoordinate(
                f"Flat length {len(flat)} is not a multiple of stride {new_stride}"
            )
        self._replace(new_layout, flat)

    def _replace(self, layout: GeometryLayout, flat: np.ndarray) -> None:
        self.flat_coordinates = _freeze(flat)
        self.layout = layout
        self.stride = get_stride(layout)
        self.changed()
        logger.debug("Ring replaced: layout=%s vertices=%s revision=%s",
                     layout.value, self.vertex_count(), self.revision)

    def to_nested_coordinates(self) -> List[Tuple[float, ...]]:
        return inflate_coordinates(self.flat_coordinates, self.stride)

    def vertex_count(self) -> int:
        return len(self.flat_coordinates) // self.stride

    def vertex_at(self, i: int) -> Tuple[float, ...]:
        start = i * self.stride
        return tuple(self.flat_coordinates[start:start + self.stride].tolist())

    def edge_at(self, i: int) -> Tuple[Tuple[float, ...], Tuple[float, ...]]:
        """
        Return the vertices ``(i, (i + 1) % vertex_count)``.

        The last index yields the closing edge back to vertex 0.

        Raises
        ------
        IndexError
            If ``i`` is outside ``0 <= i < vertex_count()``.
        """
        n = self.vertex_count()
        if not 0 <= i < n:
            raise IndexError(f"Edge index {i} out of range for {n} vertices")
        return self.vertex_at(i), self.vertex_at((i + 1) % n)

    def get_extent(self) -> Extent:
        return self._extent_cache.get(
            self.revision, lambda: extent_from_flat(self.flat_coordinates, self.stride))

    def get_max_delta(self) -> float:
        """Upper bound on edge length, valid for the current revision."""
        return self._max_delta_cache.get(
            self.revision,
            lambda: math.sqrt(max_squared_delta(self.flat_coordinates, self.stride)))

    def clone(self) -> 'FlatRingBuffer':
        """Independent copy with the same layout and coordinates."""
        copy = FlatRingBuffer()
        copy._replace(self.layout, self.flat_coordinates.copy())
        return copy


def _is_flat(coordinates: Sequence) -> bool:
    if isinstance(coordinates, np.ndarray):
        return coordinates.ndim == 1
    return len(coordinates) == 0 or not hasattr(coordinates[0], '__len__')
