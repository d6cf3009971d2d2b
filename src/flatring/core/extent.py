"""
Axis-aligned extents and the point-to-extent distance used for pruning.
"""

import math
from typing import NamedTuple, Sequence

import numpy as np


class Extent(NamedTuple):
    """Bounding box ``(min_x, min_y, max_x, max_y)``."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def is_empty(self) -> bool:
        return self.max_x < self.min_x or self.max_y < self.min_y


def create_empty() -> Extent:
    """Extent that contains nothing; every point is infinitely far from it."""
    return Extent(math.inf, math.inf, -math.inf, -math.inf)


def extent_from_flat(flat_coordinates: np.ndarray, stride: int) -> Extent:
    """
    Compute the extent of a flat coordinate array.

    Parameters
    ----------
    flat_coordinates : np.ndarray
        Flat array of length ``N * stride``.
    stride : int
        Numbers per vertex.

    Returns
    -------
    Extent
        Bounding box of the X/Y components, empty for an empty array.
    """
    if len(flat_coordinates) == 0:
        return create_empty()
    xs = flat_coordinates[0::stride]
    ys = flat_coordinates[1::stride]
    return Extent(float(xs.min()), float(ys.min()), float(xs.max()), float(ys.max()))


def squared_distance_to_extent(extent: Sequence[float], x: float, y: float) -> float:
    """
    Squared distance from ``(x, y)`` to the nearest point of an extent.

    Parameters
    ----------
    extent : Extent or sequence of 4 floats
        ``(min_x, min_y, max_x, max_y)``.
    x, y : float
        Query point.

    Returns
    -------
    float
        0.0 if the point is inside or on the boundary. An empty extent is
        infinitely far from every point.
    """
    min_x, min_y, max_x, max_y = extent

    if x < min_x:
        dx = min_x - x
    elif max_x < x:
        dx = x - max_x
    else:
        dx = 0.0

    if y < min_y:
        dy = min_y - y
    elif max_y < y:
        dy = y - max_y
    else:
        dy = 0.0

    return dx * dx + dy * dy
