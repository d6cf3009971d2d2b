"""
Ring Simplification Module

Reduces the vertex count of a ring with the Douglas-Peucker algorithm,
working directly on flat coordinate arrays.

Features:
- Iterative (explicit stack) recursion, no Python recursion limit
- Vectorized distance evaluation per sub-range
- Output is always a plain XY ring; Z/M are dropped
- Per-revision cache of simplified variants of a ring
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict

import numpy as np

from ..core.buffer import FlatRingBuffer
from ..core.flat import to_xy
from ..core.layout import GeometryLayout

logger = logging.getLogger(__name__)


def _squared_segment_distances(
    xs: np.ndarray,
    ys: np.ndarray,
    x1: float,
    y1: float,
    x2: float,
    y2: float
) -> np.ndarray:
    """
    Squared distances from points to the segment (x1, y1)-(x2, y2).

    A zero-length segment degrades to point distance, which is what the
    first chord of a closed ring looks like.
    """
    dx = x2 - x1
    dy = y2 - y1
    length_squared = dx * dx + dy * dy
    if length_squared == 0:
        return (xs - x1) ** 2 + (ys - y1) ** 2

    t = np.clip(((xs - x1) * dx + (ys - y1) * dy) / length_squared, 0.0, 1.0)
    return (xs - (x1 + t * dx)) ** 2 + (ys - (y1 + t * dy)) ** 2


def douglas_peucker(
    flat_coordinates: np.ndarray,
    stride: int,
    squared_tolerance: float
) -> np.ndarray:
    """
    Simplify a flat ring with the Douglas-Peucker algorithm.

    Parameters
    ----------
    flat_coordinates : np.ndarray
        Flat array of length ``N * stride``.
    stride : int
        Numbers per vertex.
    squared_tolerance : float
        A vertex is kept when its squared distance to the chord between
        its retained neighbours exceeds this value. Must be >= 0.

    Returns
    -------
    np.ndarray
        New flat XY array of the retained vertices, in input order. The
        first and last vertices are always retained.
    """
    if squared_tolerance < 0:
        raise ValueError(f"squared_tolerance must be >= 0, got {squared_tolerance}")

    n = len(flat_coordinates) // stride
    if n < 3 or squared_tolerance == 0:
        return to_xy(flat_coordinates, stride)

    xs = flat_coordinates[0::stride]
    ys = flat_coordinates[1::stride]

    markers = np.zeros(n, dtype=bool)
    markers[0] = markers[n - 1] = True

    stack = [(0, n - 1)]
    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue

        distances = _squared_segment_distances(
            xs[first + 1:last], ys[first + 1:last],
            xs[first], ys[first], xs[last], ys[last]
        )
        # argmax returns the first maximum, so ties go to the lower index
        offset = int(np.argmax(distances))
        if distances[offset] > squared_tolerance:
            index = first + 1 + offset
            markers[index] = True
            stack.append((first, index))
            stack.append((index, last))

    return np.column_stack((xs[markers], ys[markers])).ravel()


def simplify(ring: FlatRingBuffer, squared_tolerance: float) -> FlatRingBuffer:
    """
    Simplified copy of a ring.

    Parameters
    ----------
    ring : FlatRingBuffer
        Closed ring; not modified.
    squared_tolerance : float
        Squared distance tolerance, >= 0. Zero keeps every vertex.

    Returns
    -------
    FlatRingBuffer
        New XY ring.
    """
    simplified = douglas_peucker(ring.flat_coordinates, ring.stride, squared_tolerance)
    result = FlatRingBuffer(simplified, GeometryLayout.XY)
    logger.debug("Simplified ring: %s -> %s vertices (squared_tolerance=%s)",
                 ring.vertex_count(), result.vertex_count(), squared_tolerance)
    return result


@dataclass
class SimplifiedVariants:
    """Simplified versions of one revision of a ring."""
    by_tolerance: Dict[float, FlatRingBuffer] = field(default_factory=dict)
    # Largest tolerance known to remove no vertices; 0 means none known
    max_min_squared_tolerance: float = 0.0
    lock: threading.Lock = field(default_factory=threading.Lock)


def get_simplified(ring: FlatRingBuffer, squared_tolerance: float) -> FlatRingBuffer:
    """
    Simplified version of a ring, cached per ring revision.

    When simplification would not remove any vertex, the ring itself is
    returned (keeping its layout) and the tolerance is remembered, so any
    smaller tolerance short-circuits to the ring as well.

    Parameters
    ----------
    ring : FlatRingBuffer
        Closed ring.
    squared_tolerance : float
        Squared distance tolerance.

    Returns
    -------
    FlatRingBuffer
        Either ``ring`` or a cached simplified XY ring.
    """
    variants = ring.simplified_cache.get(ring.revision, SimplifiedVariants)

    with variants.lock:
        if squared_tolerance < 0 or (
            variants.max_min_squared_tolerance != 0
            and squared_tolerance <= variants.max_min_squared_tolerance
        ):
            return ring
        cached = variants.by_tolerance.get(squared_tolerance)
        if cached is not None:
            return cached

    simplified = simplify(ring, squared_tolerance)

    with variants.lock:
        if simplified.vertex_count() < ring.vertex_count():
            variants.by_tolerance[squared_tolerance] = simplified
            return simplified
        variants.max_min_squared_tolerance = max(
            variants.max_min_squared_tolerance, squared_tolerance
        )
    return ring
