"""Tests for vector_math module."""
import math

import numpy as np
import pytest

from conftest import assert_vec
from cad_layout.errors import DegenerateVectorError
from cad_layout.vector_math import (
    X_AXIS,
    Y_AXIS,
    Z_AXIS,
    Plane,
    Vector3,
    alignment_rotation,
    angle_between,
    are_anti_parallel,
    are_parallel,
    distance_to_plane,
    line_plane_intersection,
    perpendicular_to,
    project_onto_plane,
    rotation_axis,
)


class TestVector3:
    """Immutable vector value type."""

    def test_arithmetic_returns_new_values(self):
        a = Vector3(1, 2, 3)
        b = Vector3(4, 5, 6)
        assert a + b == Vector3(5, 7, 9)
        assert b - a == Vector3(3, 3, 3)
        assert a * 2 == Vector3(2, 4, 6)
        assert 2 * a == Vector3(2, 4, 6)
        assert -a == Vector3(-1, -2, -3)
        assert a == Vector3(1, 2, 3)

    def test_dot_and_cross(self):
        assert X_AXIS.dot(Y_AXIS) == 0.0
        assert X_AXIS.cross(Y_AXIS) == Z_AXIS
        assert Y_AXIS.cross(X_AXIS) == -Z_AXIS

    def test_length_and_normalized(self):
        v = Vector3(3, 4, 0)
        assert v.length == pytest.approx(5.0)
        assert v.normalized().length == pytest.approx(1.0)

    @pytest.mark.parametrize("scale", [1e-300, 1e200])
    def test_length_and_normalized_at_extreme_scales(self, scale):
        v = Vector3(3 * scale, 4 * scale, 0.0)
        assert v.length == pytest.approx(5 * scale)
        assert_vec(v.normalized(), (0.6, 0.8, 0.0), abs_tol=1e-12)

    def test_normalize_zero_raises(self):
        with pytest.raises(DegenerateVectorError):
            Vector3.zero().normalized()

    def test_frozen(self):
        v = Vector3(1, 2, 3)
        with pytest.raises(AttributeError):
            v.x = 5

    def test_of_accepts_sequences_and_arrays(self):
        assert Vector3.of([1, 2, 3]) == Vector3(1, 2, 3)
        assert Vector3.of(np.array([1.0, 2.0, 3.0])) == Vector3(1, 2, 3)
        with pytest.raises(ValueError):
            Vector3.of([1, 2])


class TestAngles:
    """angle_between and the parallel predicates."""

    def test_right_angle(self):
        assert angle_between(X_AXIS, Y_AXIS) == pytest.approx(90.0)

    def test_opposite(self):
        assert angle_between(Z_AXIS, -Z_AXIS) == pytest.approx(180.0)

    def test_angle_to_method(self):
        assert Vector3(1, 1, 0).angle_to(X_AXIS) == pytest.approx(45.0)

    def test_zero_vector_raises(self):
        with pytest.raises(DegenerateVectorError):
            angle_between(Vector3.zero(), X_AXIS)

    def test_parallel_either_sense(self):
        assert are_parallel((0, 0, 2), (0, 0, 5))
        assert are_parallel((0, 0, 2), (0, 0, -5))
        assert not are_parallel(X_AXIS, Y_AXIS)

    def test_anti_parallel(self):
        assert are_anti_parallel((0, 0, 2), (0, 0, -5))
        assert not are_anti_parallel((0, 0, 2), (0, 0, 5))
        assert not are_anti_parallel(X_AXIS, Y_AXIS)


class TestPerpendicularAndAxes:
    """Deterministic perpendiculars and rotation axes."""

    @pytest.mark.parametrize("v", [(1, 0, 0), (0, 1, 0), (0, 0, 1), (1, 2, 3), (-4, 0.5, 0.5)])
    def test_perpendicular_is_unit_and_orthogonal(self, v):
        p = perpendicular_to(v)
        assert p.length == pytest.approx(1.0)
        assert p.dot(v) == pytest.approx(0.0, abs=1e-12)

    def test_perpendicular_is_deterministic(self):
        assert perpendicular_to((0, 0, 1)) == perpendicular_to((0, 0, 1))

    def test_perpendicular_of_tiny_vector(self):
        v = (1e-300, 0.0, 0.0)
        p = perpendicular_to(v)
        assert p.length == pytest.approx(1.0)
        assert p.dot(X_AXIS) == pytest.approx(0.0, abs=1e-12)

    def test_rotation_axis_degenerate_is_zero(self):
        assert rotation_axis(Z_AXIS, -Z_AXIS).is_zero()
        assert rotation_axis(Z_AXIS, Z_AXIS * 3).is_zero()

    def test_rotation_axis(self):
        assert_vec(rotation_axis(X_AXIS, Y_AXIS * 2), Z_AXIS)


class TestAlignmentRotation:
    """Axis/angle pairs with the 0 and 180 degree fallbacks."""

    def test_already_aligned(self):
        axis, angle = alignment_rotation(Z_AXIS, (0, 0, 4))
        assert angle == 0.0
        assert axis.is_zero()

    def test_opposite_uses_perpendicular(self):
        axis, angle = alignment_rotation(Z_AXIS, -Z_AXIS)
        assert angle == 180.0
        assert axis == perpendicular_to(Z_AXIS)

    def test_general(self):
        axis, angle = alignment_rotation(Z_AXIS, X_AXIS)
        assert angle == pytest.approx(90.0)
        assert_vec(axis, Y_AXIS)


class TestPlanes:
    """Point/line helpers against planes."""

    def test_signed_distance(self):
        assert distance_to_plane((0, 0, 5), (0, 0, 0), (0, 0, 2)) == pytest.approx(5.0)
        assert distance_to_plane((0, 0, -5), (0, 0, 0), Z_AXIS) == pytest.approx(-5.0)

    def test_project_onto_plane(self):
        assert_vec(project_onto_plane((1, 2, 3), Z_AXIS), (1, 2, 0))

    def test_line_plane_intersection(self):
        hit = line_plane_intersection((1, 1, 10), (0, 0, -1), (0, 0, 2), Z_AXIS)
        assert_vec(hit, (1, 1, 2))

    def test_line_parallel_to_plane(self):
        assert line_plane_intersection((0, 0, 1), X_AXIS, (0, 0, 0), Z_AXIS) is None

    def test_plane_to_world(self):
        plane = Plane.from_vectors((1, 2, 3), (2, 0, 0), (0, 0, 1))
        assert_vec(plane.y_dir, Y_AXIS)
        assert_vec(plane.to_world((1, 1, 1)), (2, 3, 4))

    def test_plane_rejects_zero_normal(self):
        with pytest.raises(DegenerateVectorError):
            Plane.from_vectors((0, 0, 0), X_AXIS, (0, 0, 0))

    def test_sqrt_two_diagonal(self):
        assert Vector3(1, 1, 0).length == pytest.approx(math.sqrt(2))
