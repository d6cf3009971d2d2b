"""
Closest Point Module

Finds the point on a ring's boundary nearest to a query point.

The search keeps a running best so that several rings can be queried in
turn and each one only needs to beat the best found so far:
- The whole ring is skipped when its extent is already farther away than
  the current best
- Edges whose start vertex is farther than ``sqrt(best) + max_delta`` are
  skipped, since no point on an edge of length <= max_delta can be closer
- The remaining edges are projected in one vectorized pass
"""

import logging
import math
from typing import Iterable, Optional, Tuple

import numpy as np

from ..core.buffer import FlatRingBuffer
from ..core.extent import Extent, squared_distance_to_extent

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


def closest_point_on_flat(
    flat_coordinates: np.ndarray,
    stride: int,
    max_delta: float,
    x: float,
    y: float,
    closest_point: Optional[Point] = None,
    min_squared_distance: float = math.inf
) -> Tuple[Optional[Point], float]:
    """
    Closest point on the edges of a flat ring.

    Edges join consecutive vertices, plus the wrap-around edge from the
    last vertex back to the first.

    Parameters
    ----------
    flat_coordinates : np.ndarray
        Flat array of length ``N * stride``.
    stride : int
        Numbers per vertex.
    max_delta : float
        Upper bound on edge length (see FlatRingBuffer.get_max_delta).
    x, y : float
        Query point.
    closest_point : tuple of float, optional
        Current best point.
    min_squared_distance : float
        Squared distance of the current best. Default infinity.

    Returns
    -------
    tuple
        ``(point, squared_distance)``. The inputs are returned unchanged
        unless a strictly closer point was found.
    """
    n = len(flat_coordinates) // stride
    if n == 0:
        return closest_point, min_squared_distance

    xs = flat_coordinates[0::stride]
    ys = flat_coordinates[1::stride]

    if max_delta == 0:
        # All vertices coincide, so test a single point
        squared_distance = (x - xs[0]) ** 2 + (y - ys[0]) ** 2
        if squared_distance < min_squared_distance:
            return (float(xs[0]), float(ys[0])), float(squared_distance)
        return closest_point, min_squared_distance

    x1 = xs
    y1 = ys
    x2 = np.roll(xs, -1)
    y2 = np.roll(ys, -1)

    if math.isfinite(min_squared_distance):
        reach = math.sqrt(min_squared_distance) + max_delta
        vertex_squared = (x1 - x) ** 2 + (y1 - y) ** 2
        candidates = np.flatnonzero(vertex_squared <= reach * reach)
        if candidates.size == 0:
            return closest_point, min_squared_distance
        x1, y1, x2, y2 = x1[candidates], y1[candidates], x2[candidates], y2[candidates]

    dx = x2 - x1
    dy = y2 - y1
    length_squared = dx * dx + dy * dy
    t = np.divide(
        (x - x1) * dx + (y - y1) * dy,
        length_squared,
        out=np.zeros_like(length_squared),
        where=length_squared > 0
    )
    t = np.clip(t, 0.0, 1.0)

    px = x1 + t * dx
    py = y1 + t * dy
    squared = (px - x) ** 2 + (py - y) ** 2

    # argmin returns the first minimum, so ties go to the lowest edge
    best = int(np.argmin(squared))
    if squared[best] < min_squared_distance:
        return (float(px[best]), float(py[best])), float(squared[best])
    return closest_point, min_squared_distance


def find_closest(
    ring: FlatRingBuffer,
    x: float,
    y: float,
    closest_point: Optional[Point] = None,
    min_squared_distance: float = math.inf,
    extent: Optional[Extent] = None
) -> Tuple[Optional[Point], float]:
    """
    Closest point on a ring's boundary to ``(x, y)``.

    Parameters
    ----------
    ring : FlatRingBuffer
        Closed ring to search.
    x, y : float
        Query point.
    closest_point : tuple of float, optional
        Best point found so far (e.g. on other rings).
    min_squared_distance : float
        Squared distance of ``closest_point``. Default infinity.
    extent : Extent, optional
        Extent of the ring. Defaults to the ring's cached extent.

    Returns
    -------
    tuple
        ``(point, squared_distance)`` where ``point`` is a new ``(x, y)``
        tuple. Never worse than the best passed in.

    Example
    -------
    >>> ring = FlatRingBuffer([(0, 0), (0, 1), (1, 1), (1, 0), (0, 0)])
    >>> find_closest(ring, 0.5, -1)
    ((0.5, 0.0), 1.0)
    """
    if extent is None:
        extent = ring.get_extent()
    if min_squared_distance < squared_distance_to_extent(extent, x, y):
        logger.debug("Ring skipped by extent for query (%s, %s)", x, y)
        return closest_point, min_squared_distance

    return closest_point_on_flat(
        ring.flat_coordinates, ring.stride, ring.get_max_delta(),
        x, y, closest_point, min_squared_distance
    )


def find_closest_among(
    rings: Iterable[FlatRingBuffer],
    x: float,
    y: float,
    closest_point: Optional[Point] = None,
    min_squared_distance: float = math.inf
) -> Tuple[Optional[Point], float]:
    """
    Closest point over several rings, keeping a running best.

    Rings are searched in order; earlier rings win ties.
    """
    for ring in rings:
        closest_point, min_squared_distance = find_closest(
            ring, x, y, closest_point, min_squared_distance
        )
    return closest_point, min_squared_distance
