"""Tests for explosion module."""
import pytest

from conftest import assert_vec
from cad_layout.errors import InvalidIdentifierError
from cad_layout.explosion import (
    ExplodablePart,
    axis_explode,
    directional_explode,
    explode_component,
    explode_parts,
    layered_explode,
    radial_explode,
)
from cad_layout.kernel import MeshSolid
from cad_layout.vector_math import Vector3


@pytest.fixture
def parts():
    return [MeshSolid.box(10, 10, 10, origin=(20 * i, 0, 0)) for i in range(3)]


class TestExplodeComponent:
    """Single-part translation."""

    def test_factor_zero_is_identity(self, unit_cube):
        moved = explode_component(unit_cube, (0, 0, 1), 50, factor=0.0)
        assert moved.bounding_box == unit_cube.bounding_box

    def test_full_factor(self, unit_cube):
        moved = explode_component(unit_cube, (0, 0, 4), 50, factor=1.0)
        assert_vec(moved.bounding_box.min, (0, 0, 50))

    def test_half_factor(self, unit_cube):
        moved = explode_component(unit_cube, (1, 0, 0), 20, factor=0.5)
        assert_vec(moved.bounding_box.min, (10, 0, 0))

    def test_factor_is_clamped(self, unit_cube):
        over = explode_component(unit_cube, (1, 0, 0), 20, factor=3.0)
        under = explode_component(unit_cube, (1, 0, 0), 20, factor=-1.0)
        assert_vec(over.bounding_box.min, (20, 0, 0))
        assert_vec(under.bounding_box.min, (0, 0, 0))

    def test_zero_direction_leaves_part(self, unit_cube):
        assert explode_component(unit_cube, (0, 0, 0), 20) is unit_cube


class TestRadialExplode:
    """Outward explosion from a centre point."""

    def test_part_at_center_is_unmoved(self, unit_cube):
        for factor in (0.0, 0.5, 1.0):
            (moved,) = radial_explode([unit_cube], (5, 5, 5), factor)
            assert moved.bounding_box == unit_cube.bounding_box

    def test_parts_move_by_their_distance(self, unit_cube):
        outer = MeshSolid.box(10, 10, 10, origin=(10, 0, 0))
        _, moved = radial_explode([unit_cube, outer], (5, 5, 5), factor=1.0)
        assert_vec(moved.bounding_box.center, (25, 5, 5))

    def test_partial_factor(self, unit_cube):
        outer = MeshSolid.box(10, 10, 10, origin=(0, 0, 10))
        (moved,) = radial_explode([outer], unit_cube.bounding_box.center, factor=0.5)
        assert_vec(moved.bounding_box.center, (5, 5, 20))


class TestListExplosions:
    """Directional, axis and layered variants."""

    def test_directional_defaults(self, parts):
        moved = directional_explode(parts, [None, (1, 0, 0)], [5])
        assert_vec(moved[0].bounding_box.min, (0, 0, 5))
        assert_vec(moved[1].bounding_box.min, (30, 0, 0))
        assert_vec(moved[2].bounding_box.min, (40, 0, 10))

    def test_directional_factor_zero(self, parts):
        moved = directional_explode(parts, [(1, 1, 1)] * 3, [10] * 3, factor=0.0)
        for before, after in zip(parts, moved):
            assert after.bounding_box == before.bounding_box

    def test_axis_explode(self, parts):
        moved = axis_explode(parts, "y", [0, 1, 2], spacing=10)
        assert [m.bounding_box.min.y for m in moved] == pytest.approx([0, 10, 20])
        assert [m.bounding_box.min.x for m in moved] == pytest.approx([0, 20, 40])

    def test_axis_is_case_insensitive(self, parts):
        moved = axis_explode(parts[:1], "Z", [3], spacing=2)
        assert moved[0].bounding_box.min.z == pytest.approx(6.0)

    def test_invalid_axis(self, parts):
        with pytest.raises(InvalidIdentifierError):
            axis_explode(parts, "w", [1, 2, 3])

    def test_layered_explode(self, parts):
        moved = layered_explode(parts, base_spacing=10, factor=0.5)
        assert [m.bounding_box.min.z for m in moved] == pytest.approx([5, 10, 15])

    def test_explode_parts(self, unit_cube):
        spec = [ExplodablePart(unit_cube, Vector3(0, -1, 0), 8.0)]
        (moved,) = explode_parts(spec, factor=0.25)
        assert_vec(moved.bounding_box.min, (0, -2, 0))
        assert unit_cube.bounding_box.min == Vector3(0, 0, 0)
