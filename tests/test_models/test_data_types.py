"""
Tests for geometric value types and affine transforms.

Tests cover:
- Rectangle edges, union and intersection
- Strict containment
- AffineTransform construction, application and composition
"""
import math
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from vectorchart.models.data_types import Rectangle
from vectorchart.models.transform import AffineTransform


# ==================== TestRectangle ====================

class TestRectangle:
    """Test Rectangle."""

    def test_computed_edges(self):
        rect = Rectangle(10, 20, 30, 40)
        assert rect.x2 == 40
        assert rect.y2 == 60
        assert rect.center == (25, 40)
        assert rect.area == 1200

    def test_from_points(self):
        rect = Rectangle.from_points([(5, 8), (1, 9), (3, 2)])
        assert rect.as_tuple() == (1, 2, 4, 7)

    def test_from_no_points(self):
        assert Rectangle.from_points([]).as_tuple() == (0, 0, 0, 0)

    def test_union(self):
        union = Rectangle(0, 0, 10, 10).union(Rectangle(20, 5, 5, 20))
        assert union.as_tuple() == (0, 0, 25, 25)

    def test_intersection(self):
        overlap = Rectangle(0, 0, 10, 10).intersect(Rectangle(5, 5, 10, 10))
        assert overlap.as_tuple() == (5, 5, 5, 5)

    def test_disjoint_intersection_has_no_negative_size(self):
        overlap = Rectangle(0, 0, 10, 10).intersect(Rectangle(50, 50, 10, 10))
        assert overlap.width == 0
        assert overlap.height == 0

    def test_strictly_contains(self):
        outer = Rectangle(0, 0, 100, 100)
        assert outer.strictly_contains(Rectangle(1, 1, 98, 98))
        assert not outer.strictly_contains(Rectangle(0, 1, 50, 50))
        assert not outer.strictly_contains(outer)

    def test_corners_clockwise(self):
        assert Rectangle(0, 0, 2, 1).corners() == [(0, 0), (2, 0), (2, 1), (0, 1)]


# ==================== TestAffineTransform ====================

class TestAffineTransform:
    """Test AffineTransform."""

    def test_identity(self):
        transform = AffineTransform.identity()
        assert transform.is_identity
        assert transform.apply(3, 4) == (3, 4)

    def test_canvas_convention(self):
        """[a, b, c, d, e, f] maps (x, y) to (a*x + c*y + e, b*x + d*y + f)."""
        transform = AffineTransform.from_sequence([2, 0, 1, 3, 10, 20])
        assert transform.apply(1, 1) == (13, 23)

    def test_from_sequence_needs_six_values(self):
        with pytest.raises(ValueError):
            AffineTransform.from_sequence([1, 0, 0, 1])

    def test_as_sequence_round_trip(self):
        values = [1.5, 0.25, -0.5, 2.0, 7.0, -3.0]
        assert AffineTransform.from_sequence(values).as_sequence() == values

    def test_multiply_applies_right_operand_first(self):
        """scale.multiply(translate) translates, then scales."""
        combined = AffineTransform.scaling(2).multiply(AffineTransform.translation(5, 0))
        assert combined.apply(1, 1) == (12, 2)

    def test_apply_points_matches_apply(self):
        transform = AffineTransform.rotation(0.3).multiply(AffineTransform.translation(4, -2))
        points = [(0, 0), (1, 2), (-3, 5)]
        batch = transform.apply_points(points)
        for (x, y), row in zip(points, batch):
            assert tuple(row) == pytest.approx(transform.apply(x, y))

    def test_apply_points_empty(self):
        assert AffineTransform().apply_points([]).size == 0

    def test_inverse(self):
        transform = AffineTransform.rotation(math.pi / 3).multiply(AffineTransform.scaling(2, 4))
        assert np.allclose(transform.multiply(transform.inverse()).matrix, np.eye(3))

    def test_rotation_angle(self):
        assert AffineTransform.rotation(math.pi / 2).rotation_angle == pytest.approx(math.pi / 2)

    def test_copy_is_independent(self):
        transform = AffineTransform.translation(1, 1)
        copy_ = transform.copy()
        copy_.matrix[0, 2] = 99
        assert transform.apply(0, 0) == (1, 1)
