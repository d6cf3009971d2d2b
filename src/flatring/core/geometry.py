"""
Core geometry operations on flat ring buffers.

Contains utility functions for:
- Signed ring area (shoelace formula)
- Winding order (CCW)
- Shapely/flat buffer conversions
"""

import numpy as np
from shapely.geometry import LinearRing, Polygon

from .buffer import FlatRingBuffer
from .flat import reverse_flat
from .layout import GeometryLayout


# Numerical tolerance for floating point comparisons
EPS = 1e-10


def signed_area_flat(flat_coordinates: np.ndarray, stride: int) -> float:
    """
    Compute the signed area of a ring using the shoelace formula.

    Parameters
    ----------
    flat_coordinates : np.ndarray
        Flat array of length ``N * stride``.
    stride : int
        Numbers per vertex. Only the X/Y components are used.

    Returns
    -------
    float
        Signed area, positive for counter-clockwise rings (y axis up).
        0.0 for fewer than 3 vertices.
    """
    n = len(flat_coordinates) // stride
    if n < 3:
        return 0.0

    x = flat_coordinates[0::stride]
    y = flat_coordinates[1::stride]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def signed_area(ring: FlatRingBuffer) -> float:
    """
    Signed planar area of a ring.

    Parameters
    ----------
    ring : FlatRingBuffer
        Closed ring.

    Returns
    -------
    float
        Positive for counter-clockwise winding, negative for clockwise.
    """
    return signed_area_flat(ring.flat_coordinates, ring.stride)


def ring_area(ring: FlatRingBuffer) -> float:
    """Unsigned area of a ring."""
    return abs(signed_area(ring))


def is_clockwise(ring: FlatRingBuffer) -> bool:
    return signed_area(ring) < 0


def ensure_ccw(ring: FlatRingBuffer) -> FlatRingBuffer:
    """
    Ensure ring vertices are in counter-clockwise order.

    Parameters
    ----------
    ring : FlatRingBuffer
        Closed ring.

    Returns
    -------
    FlatRingBuffer
        The ring itself if it is already CCW (or degenerate), otherwise
        a reversed copy with the same layout.
    """
    if not is_clockwise(ring):
        return ring
    return FlatRingBuffer(reverse_flat(ring.flat_coordinates, ring.stride), ring.layout)


def to_shapely(ring: FlatRingBuffer) -> LinearRing:
    """
    Convert a ring to a Shapely LinearRing.

    Z is kept for XYZ/XYZM rings; M is dropped. Shapely closes an open
    ring itself and needs at least four coordinates after closing, so
    rings with fewer vertices than that convert to an empty LinearRing.

    Parameters
    ----------
    ring : FlatRingBuffer
        Closed ring.

    Returns
    -------
    LinearRing
        Shapely ring with the same vertices.
    """
    n = ring.vertex_count()
    if n == 0:
        return LinearRing()
    n_components = 3 if ring.layout in (GeometryLayout.XYZ, GeometryLayout.XYZM) else 2
    coords = ring.flat_coordinates.reshape(-1, ring.stride)[:, :n_components]
    closed = np.array_equal(coords[0], coords[-1])
    if (n if closed else n + 1) < 4:
        return LinearRing()
    return LinearRing(coords)


def from_shapely(geom) -> FlatRingBuffer:
    """
    Convert a Shapely LinearRing or Polygon (its exterior) to a ring.

    Parameters
    ----------
    geom : LinearRing or Polygon
        Shapely geometry.

    Returns
    -------
    FlatRingBuffer
        XY or XYZ ring; Shapely rings are always closed.
    """
    if isinstance(geom, Polygon):
        geom = geom.exterior
    if not isinstance(geom, LinearRing):
        raise ValueError(f"Expected a LinearRing or Polygon, got {geom.geom_type}")

    layout = GeometryLayout.XYZ if geom.has_z else GeometryLayout.XY
    coords = np.asarray(geom.coords, dtype=np.float64)
    return FlatRingBuffer(coords.ravel(), layout)
