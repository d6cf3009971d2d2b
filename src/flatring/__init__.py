"""
Flatring - Flat-buffer geometry for closed polygon rings.

A ring is stored as one flat array of numbers with a fixed stride
(2 for XY, 3 for XYZ/XYM, 4 for XYZM) instead of nested point objects.
The algorithms read that array directly:
- Signed area and winding order
- Closest point on the ring boundary, pruned by extent and edge length
- Douglas-Peucker simplification

Main Functions
--------------
FlatRingBuffer : Flat coordinate storage with revision-tagged caches
signed_area : Signed planar area (positive = counter-clockwise)
find_closest : Closest boundary point, keeping a running best
simplify : Douglas-Peucker simplification to a new XY ring
squared_distance_to_extent : Squared distance from a point to an extent

Example
-------
>>> from flatring import FlatRingBuffer, signed_area, find_closest
>>> ring = FlatRingBuffer([(0, 0), (0, 1), (1, 1), (1, 0), (0, 0)])
>>> abs(signed_area(ring))
1.0
>>> find_closest(ring, 0.5, -1)
((0.5, 0.0), 1.0)
"""

import logging

from .core.errors import FlatRingError, InvalidLayout, InvalidCoordinate
from .core.layout import GeometryLayout, ResolvedLayout, resolve_layout
from .core.extent import Extent, squared_distance_to_extent
from .core.cache import RevisionCache
from .core.flat import close_ring
from .core.buffer import FlatRingBuffer
from .core.geometry import (
    EPS,
    signed_area,
    ring_area,
    is_clockwise,
    ensure_ccw,
    to_shapely,
    from_shapely,
)
from .algorithms.closest import find_closest, find_closest_among
from .algorithms.simplify import simplify, get_simplified

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Errors
    'FlatRingError',
    'InvalidLayout',
    'InvalidCoordinate',
    # Layouts
    'GeometryLayout',
    'ResolvedLayout',
    'resolve_layout',
    # Data model
    'FlatRingBuffer',
    'Extent',
    'RevisionCache',
    'close_ring',
    # Extent pruning
    'squared_distance_to_extent',
    # Area and orientation
    'EPS',
    'signed_area',
    'ring_area',
    'is_clockwise',
    'ensure_ccw',
    # Shapely interop
    'to_shapely',
    'from_shapely',
    # Closest point
    'find_closest',
    'find_closest_among',
    # Simplification
    'simplify',
    'get_simplified',
]
