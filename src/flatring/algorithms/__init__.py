"""
Ring algorithms: closest point and simplification.
"""

from .closest import closest_point_on_flat, find_closest, find_closest_among
from .simplify import douglas_peucker, simplify, get_simplified

__all__ = [
    'closest_point_on_flat',
    'find_closest',
    'find_closest_among',
    'douglas_peucker',
    'simplify',
    'get_simplified',
]
