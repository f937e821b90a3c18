"""
Shared test fixtures for layout engine tests.
"""
import sys
from pathlib import Path

import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cad_layout.bounding_box import BoundingBox
from cad_layout.kernel import MeshSolid
from cad_layout.vector_math import Vector3


@pytest.fixture
def unit_cube():
    """A 10x10x10mm cube with its min corner at the origin."""
    return MeshSolid.box(10, 10, 10)


@pytest.fixture
def slab():
    """A 30x50x20mm box with its min corner at the origin."""
    return MeshSolid.box(30, 50, 20)


@pytest.fixture
def offset_box():
    """A 20x40x60mm box sitting away from the origin."""
    return MeshSolid.box(20, 40, 60, origin=(100, -50, 25))


@pytest.fixture
def sample_bbox():
    """Bounding box spanning (0, 0, 0) .. (10, 20, 30)."""
    return BoundingBox(Vector3(0, 0, 0), Vector3(10, 20, 30))


def assert_vec(actual, expected, abs_tol=1e-9):
    """Component-wise approximate comparison of two vectors."""
    assert tuple(Vector3.of(actual)) == pytest.approx(tuple(Vector3.of(expected)), abs=abs_tol)
