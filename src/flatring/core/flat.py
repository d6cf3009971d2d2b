"""
Low-level helpers on flat coordinate arrays.

A flat array stores ``N`` vertices of ``stride`` numbers each as one
1-D float64 array: ``[x0, y0, (z0), (m0), x1, y1, ...]``.
"""

from numbers import Real
from typing import List, Sequence, Tuple

import numpy as np

from .errors import InvalidCoordinate


def deflate_coordinates(points: Sequence[Sequence[float]], stride: int) -> np.ndarray:
    """
    Flatten vertex tuples into a new flat array.

    Parameters
    ----------
    points : sequence of sequences
        Vertices, each with exactly ``stride`` numeric components.
    stride : int
        Numbers per vertex.

    Returns
    -------
    np.ndarray
        Array of shape (N * stride,), dtype float64.

    Raises
    ------
    InvalidCoordinate
        If any vertex has the wrong number of components or a
        non-numeric component.
    """
    flat = np.empty(len(points) * stride, dtype=np.float64)
    for i, point in enumerate(points):
        try:
            n_components = len(point)
        except TypeError:
            raise InvalidCoordinate(f"Vertex {i} is not a sequence: {point!r}") from None
        if n_components != stride:
            raise InvalidCoordinate(
                f"Vertex {i} has {n_components} components, expected {stride}"
            )
        for value in point:
            # bool is a Real subclass but never a coordinate
            if isinstance(value, bool) or not isinstance(value, (Real, np.number)):
                raise InvalidCoordinate(f"Vertex {i} has non-numeric component {value!r}")
        flat[i * stride:(i + 1) * stride] = point
    return flat


def inflate_coordinates(flat_coordinates: np.ndarray, stride: int) -> List[Tuple[float, ...]]:
    """Inverse of deflate_coordinates(): a list of float tuples."""
    return [tuple(vertex) for vertex in flat_coordinates.reshape(-1, stride).tolist()]


def max_squared_delta(flat_coordinates: np.ndarray, stride: int) -> float:
    """
    Largest squared X/Y distance between consecutive vertices.

    The wrap-around pair (last vertex, first vertex) is included, so the
    bound covers every edge the closest-point search visits. For a
    properly closed ring that pair has zero length.

    Returns
    -------
    float
        0.0 for fewer than two vertices or when all vertices coincide.
    """
    if len(flat_coordinates) < 2 * stride:
        return 0.0
    xs = flat_coordinates[0::stride]
    ys = flat_coordinates[1::stride]
    dx = np.roll(xs, -1) - xs
    dy = np.roll(ys, -1) - ys
    return float(np.max(dx * dx + dy * dy))


def close_ring(points: Sequence[Sequence[float]]) -> List[Sequence[float]]:
    """
    Return ``points`` as a list with the first vertex repeated at the end.

    Already-closed and empty inputs are returned as a plain list copy.
    """
    points = list(points)
    if points and tuple(points[0]) != tuple(points[-1]):
        points.append(points[0])
    return points


def reverse_flat(flat_coordinates: np.ndarray, stride: int) -> np.ndarray:
    """Copy of the array with vertex order reversed; each vertex stays intact."""
    return flat_coordinates.reshape(-1, stride)[::-1].ravel().copy()


def to_xy(flat_coordinates: np.ndarray, stride: int) -> np.ndarray:
    """Copy of the array with Z/M dropped."""
    if stride == 2:
        return flat_coordinates.copy()
    return flat_coordinates.reshape(-1, stride)[:, :2].ravel().copy()
