"""
Exceptions raised while building flat ring buffers.
"""


class FlatRingError(ValueError):
    """Base class for invalid ring input."""


class InvalidLayout(FlatRingError):
    """Layout tag is unknown or does not match the coordinate data."""


class InvalidCoordinate(FlatRingError):
    """
    A vertex does not fit the buffer's stride.

    Raised for tuples with the wrong number of components, non-numeric
    components, or flat sequences whose length is not a multiple of the
    stride.
    """
