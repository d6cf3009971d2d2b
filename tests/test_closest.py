"""
Tests for closest-point search on ring boundaries.

Checks the known unit-square answer, the running-best contract, both
pruning tiers and agreement with Shapely's nearest-point computation.
"""

import math

import numpy as np
import pytest
from shapely.geometry import Point
from shapely.ops import nearest_points

from src.flatring.algorithms.closest import (
    closest_point_on_flat,
    find_closest,
    find_closest_among,
)
from src.flatring.core.buffer import FlatRingBuffer
from src.flatring.core.extent import Extent
from src.flatring.core.geometry import to_shapely


SQUARE = [(0, 0), (0, 1), (1, 1), (1, 0), (0, 0)]


def _star_ring(n_points: int = 40, seed: int = 0) -> FlatRingBuffer:
    """Closed star-shaped ring with jittered radii."""
    rng = np.random.default_rng(seed)
    angles = np.linspace(0, 2 * np.pi, n_points, endpoint=False)
    radii = rng.uniform(1.0, 3.0, n_points)
    points = [(r * math.cos(a), r * math.sin(a)) for r, a in zip(radii, angles)]
    points.append(points[0])
    return FlatRingBuffer(points)


class TestKnownAnswers:
    """Closest points with hand-computed answers."""

    def test_unit_square_below(self):
        """Query below the square should project onto the bottom edge."""
        ring = FlatRingBuffer(SQUARE)
        point, squared = find_closest(ring, 0.5, -1)

        assert point == pytest.approx((0.5, 0.0))
        assert squared == pytest.approx(1.0)

    def test_corner(self):
        """Query off a corner should snap to the corner."""
        ring = FlatRingBuffer(SQUARE)
        point, squared = find_closest(ring, 2.0, 2.0)

        assert point == pytest.approx((1.0, 1.0))
        assert squared == pytest.approx(2.0)

    def test_inside_query(self):
        """Query inside the ring should find the nearest edge."""
        ring = FlatRingBuffer(SQUARE)
        point, squared = find_closest(ring, 0.9, 0.5)

        assert point == pytest.approx((1.0, 0.5))
        assert squared == pytest.approx(0.01)

    def test_on_boundary(self):
        """A query on the boundary is its own closest point."""
        ring = FlatRingBuffer(SQUARE)
        point, squared = find_closest(ring, 0.0, 0.25)

        assert point == pytest.approx((0.0, 0.25))
        assert squared == 0.0

    def test_tie_goes_to_first_edge(self):
        """From the centre all four edges are equally close; edge 0 wins."""
        ring = FlatRingBuffer(SQUARE)
        point, squared = find_closest(ring, 0.5, 0.5)

        assert point == (0.0, 0.5)
        assert squared == pytest.approx(0.25)

    def test_tie_goes_to_first_edge_when_pruning(self):
        """The lowest edge still wins with a finite incoming best."""
        ring = FlatRingBuffer(SQUARE)
        point, squared = find_closest(ring, 0.5, 0.5, (9.0, 9.0), 0.3)

        assert point == (0.0, 0.5)
        assert squared == pytest.approx(0.25)

    def test_result_is_2d(self):
        """Z/M should never appear in the result point."""
        ring = FlatRingBuffer([(x, y, 10.0, 20.0) for x, y in SQUARE], 'XYZM')
        point, squared = find_closest(ring, 0.5, -1)

        assert len(point) == 2
        assert isinstance(point, tuple)
        assert point == pytest.approx((0.5, 0.0))
        assert squared == pytest.approx(1.0)

    def test_closing_edge_of_open_ring(self):
        """An unclosed buffer should still search its wrap-around edge."""
        ring = FlatRingBuffer([(0, 0), (4, 0), (4, 4)])
        point, squared = find_closest(ring, 0.0, 4.0)

        assert point == pytest.approx((2.0, 2.0))
        assert squared == pytest.approx(8.0)


class TestRunningBest:
    """The current best passed in bounds and seeds the search."""

    def test_never_worse_than_input(self):
        """A better incoming best should be returned untouched."""
        ring = FlatRingBuffer(SQUARE)
        best = (7.0, 7.0)
        point, squared = find_closest(ring, 0.5, -1, best, 0.25)

        assert point is best
        assert squared == 0.25

    def test_equal_is_not_better(self):
        """Only strictly closer points replace the incoming best."""
        ring = FlatRingBuffer(SQUARE)
        best = (0.5, -2.0)
        point, squared = find_closest(ring, 0.5, -1, best, 1.0)

        assert point is best
        assert squared == 1.0

    def test_improves_on_worse_input(self):
        """A worse incoming best should be replaced."""
        ring = FlatRingBuffer(SQUARE)
        point, squared = find_closest(ring, 0.5, -1, (9.0, 9.0), 50.0)

        assert point == pytest.approx((0.5, 0.0))
        assert squared == pytest.approx(1.0)

    @pytest.mark.parametrize("seed", range(5))
    def test_random_queries_never_worse(self, seed):
        """For random bests, the result never exceeds the input distance."""
        rng = np.random.default_rng(seed)
        ring = _star_ring(seed=seed)
        for qx, qy, best in rng.uniform([-5, -5, 0], [5, 5, 4], size=(30, 3)):
            _, squared = find_closest(ring, qx, qy, None, best)
            assert squared <= best


class TestPruning:
    """Extent and max-delta pruning must not change results."""

    def test_extent_skip(self):
        """A far-away ring should be skipped without touching the best."""
        ring = FlatRingBuffer([(100, 100), (101, 100), (101, 101), (100, 100)])
        best = (0.0, 0.0)
        point, squared = find_closest(ring, 0.0, 0.0, best, 1.0)

        assert point is best
        assert squared == 1.0

    def test_explicit_extent(self):
        """A caller-supplied extent should be used for the skip test."""
        ring = FlatRingBuffer(SQUARE)
        far_extent = Extent(50.0, 50.0, 60.0, 60.0)
        best = (3.0, 3.0)
        point, squared = find_closest(ring, 0.5, -1, best, 4.0, extent=far_extent)

        assert point is best

    @pytest.mark.parametrize("seed", range(5))
    def test_matches_brute_force(self, seed):
        """Pruned search should match an exhaustive per-edge search."""
        rng = np.random.default_rng(100 + seed)
        ring = _star_ring(n_points=60, seed=seed)
        coords = np.array(ring.to_nested_coordinates())

        for qx, qy in rng.uniform(-6, 6, size=(25, 2)):
            best_sq = math.inf
            for (x1, y1), (x2, y2) in zip(coords[:-1], coords[1:]):
                dx, dy = x2 - x1, y2 - y1
                t = ((qx - x1) * dx + (qy - y1) * dy) / (dx * dx + dy * dy)
                t = min(1.0, max(0.0, t))
                best_sq = min(best_sq, (x1 + t * dx - qx) ** 2 + (y1 + t * dy - qy) ** 2)

            # Seed with a loose bound so the max-delta prune is active
            _, squared = find_closest(ring, qx, qy, None, best_sq * 1.5 + 1e-9)
            assert squared == pytest.approx(best_sq, abs=1e-12)

    @pytest.mark.parametrize("seed", range(3))
    def test_matches_shapely(self, seed):
        """Closest point should agree with Shapely's nearest_points."""
        rng = np.random.default_rng(200 + seed)
        ring = _star_ring(seed=seed)
        shapely_ring = to_shapely(ring)

        for qx, qy in rng.uniform(-6, 6, size=(20, 2)):
            point, squared = find_closest(ring, qx, qy)
            expected = nearest_points(shapely_ring, Point(qx, qy))[0]

            assert math.sqrt(squared) == pytest.approx(shapely_ring.distance(Point(qx, qy)), abs=1e-9)
            assert point == pytest.approx((expected.x, expected.y), abs=1e-9)


class TestDegenerateRings:
    """Empty and single-point rings."""

    def test_empty_ring(self):
        """An empty ring returns the incoming best unchanged."""
        ring = FlatRingBuffer([])
        assert find_closest(ring, 1.0, 2.0) == (None, math.inf)

        best = (0.0, 0.0)
        assert find_closest(ring, 1.0, 2.0, best, 3.0) == (best, 3.0)

    def test_single_vertex(self):
        """A one-vertex ring behaves as a point."""
        ring = FlatRingBuffer([(3, 4)])
        point, squared = find_closest(ring, 0.0, 0.0)

        assert point == (3.0, 4.0)
        assert squared == pytest.approx(25.0)

    def test_repeated_vertex(self):
        """A ring of one repeated vertex behaves as a point."""
        ring = FlatRingBuffer([(3, 4, 1), (3, 4, 2), (3, 4, 3)])
        assert ring.get_max_delta() == 0.0

        point, squared = find_closest(ring, 0.0, 0.0)
        assert point == (3.0, 4.0)
        assert squared == pytest.approx(25.0)

    def test_single_vertex_not_better(self):
        """A point ring farther than the best leaves it unchanged."""
        ring = FlatRingBuffer([(3, 4)])
        best = (0.0, 1.0)
        assert find_closest(ring, 0.0, 0.0, best, 1.0) == (best, 1.0)

    def test_repeated_points_in_ring(self):
        """Zero-length edges inside a ring should be harmless."""
        ring = FlatRingBuffer([(0, 0), (0, 0), (2, 0), (2, 0), (2, 2), (0, 0)])
        point, squared = find_closest(ring, 1.0, -1.0)

        assert point == pytest.approx((1.0, 0.0))
        assert squared == pytest.approx(1.0)


class TestManyRings:
    """Fan-out over several rings with a running best."""

    def test_picks_nearest_ring(self):
        """The nearest ring's boundary point should win."""
        near = FlatRingBuffer(SQUARE)
        far = FlatRingBuffer([(10, 10), (11, 10), (11, 11), (10, 10)])

        point, squared = find_closest_among([far, near], 0.5, -1)
        assert point == pytest.approx((0.5, 0.0))
        assert squared == pytest.approx(1.0)

    def test_no_rings(self):
        """No rings means no closest point."""
        assert find_closest_among([], 0.0, 0.0) == (None, math.inf)

    def test_flat_kernel(self):
        """closest_point_on_flat should work on a bare array."""
        flat = np.array([0, 0, 0, 1, 1, 1, 1, 0, 0, 0], dtype=float)
        point, squared = closest_point_on_flat(flat, 2, 1.0, 0.5, -1)

        assert point == pytest.approx((0.5, 0.0))
        assert squared == pytest.approx(1.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
