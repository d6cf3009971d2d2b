"""
Core flat-buffer data model and geometry operations.
"""

from .errors import FlatRingError, InvalidLayout, InvalidCoordinate
from .layout import (
    DEFAULT_LAYOUT,
    GeometryLayout,
    ResolvedLayout,
    resolve_layout,
    layout_for_stride,
    get_stride,
)
from .extent import Extent, create_empty, extent_from_flat, squared_distance_to_extent
from .cache import RevisionCache
from .flat import (
    deflate_coordinates,
    inflate_coordinates,
    max_squared_delta,
    close_ring,
    reverse_flat,
)
from .buffer import FlatRingBuffer
from .geometry import (
    EPS,
    signed_area,
    signed_area_flat,
    ring_area,
    is_clockwise,
    ensure_ccw,
    to_shapely,
    from_shapely,
)

__all__ = [
    'FlatRingError',
    'InvalidLayout',
    'InvalidCoordinate',
    'DEFAULT_LAYOUT',
    'GeometryLayout',
    'ResolvedLayout',
    'resolve_layout',
    'layout_for_stride',
    'get_stride',
    'Extent',
    'create_empty',
    'extent_from_flat',
    'squared_distance_to_extent',
    'RevisionCache',
    'deflate_coordinates',
    'inflate_coordinates',
    'max_squared_delta',
    'close_ring',
    'reverse_flat',
    'FlatRingBuffer',
    'EPS',
    'signed_area',
    'signed_area_flat',
    'ring_area',
    'is_clockwise',
    'ensure_ccw',
    'to_shapely',
    'from_shapely',
]
