"""
Pattern placement: point generators and repeated part instances.

Generators return ``PatternPoint`` records (position, plane normal and the
orientation the part's local +Z should take). ``place_models_at_points``
turns them into solids by instancing a fresh part per point.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Sequence, Union

from cad_layout.kernel import MeshSolid, Solid, compound
from cad_layout.vector_math import (
    X_AXIS,
    Z_AXIS,
    Plane,
    Vector3,
    VectorLike,
    alignment_rotation,
)

logger = logging.getLogger(__name__)

ModelFactory = Callable[[], Solid]
ReferenceSelector = Callable[[Solid], VectorLike]


@dataclass(frozen=True)
class PatternPoint:
    position: Vector3
    direction: Vector3
    orientation: Vector3


@dataclass(frozen=True)
class Ray:
    """A positioned vector: points run from ``origin`` to ``origin + direction``."""

    origin: Vector3
    direction: Vector3


def ray(origin: VectorLike, direction: VectorLike) -> Ray:
    return Ray(Vector3.of(origin), Vector3.of(direction))


def center_selector(model: Solid) -> Vector3:
    """Reference point: the centre of the model's bounding box."""
    return model.bounding_box.center


def _unit_or_zero(vector: VectorLike) -> Vector3:
    v = Vector3.of(vector)
    return Vector3.zero() if v.is_zero() else v.normalized()


def create_rectangular_grid(
    plane: Plane,
    rows: int,
    cols: int,
    x_spacing: float,
    y_spacing: float,
    orientation: VectorLike = (0.0, 0.0, 1.0),
) -> List[PatternPoint]:
    """Grid of points on ``plane``, enumerated row by row.

    Point ``(row, col)`` sits at local ``(col * x_spacing, row * y_spacing, 0)``.
    """
    if rows < 0 or cols < 0:
        raise ValueError(f"Grid size must be non-negative, got {rows}x{cols}")
    orient = _unit_or_zero(orientation)
    points = []
    for index in range(rows * cols):
        row, col = divmod(index, cols)
        points.append(PatternPoint(
            position=plane.to_world((col * x_spacing, row * y_spacing, 0.0)),
            direction=plane.normal,
            orientation=orient,
        ))
    logger.debug("Rectangular grid: %d x %d points", rows, cols)
    return points


def create_linear_pattern(
    origin: VectorLike,
    direction: VectorLike,
    count: int,
    orientation: VectorLike = (0.0, 0.0, 1.0),
) -> List[PatternPoint]:
    """``count`` points evenly spread from ``origin`` to ``origin + direction``."""
    if count < 0:
        raise ValueError(f"Pattern count must be non-negative, got {count}")
    direction = Vector3.of(direction)
    if direction.is_zero():
        logger.debug("Zero-length pattern direction; all points at the origin")
        x_dir, length = X_AXIS, 0.0
    else:
        x_dir, length = direction.normalized(), direction.length

    # any normal perpendicular to the line works; prefer one in the horizontal plane
    if abs(x_dir.dot(Z_AXIS)) > 0.99:
        normal = X_AXIS
    else:
        normal = x_dir.cross(Z_AXIS).normalized()

    spacing = length / (count - 1) if count > 1 else 0.0
    return create_rectangular_grid(
        Plane(Vector3.of(origin), x_dir, normal),
        rows=1,
        cols=count,
        x_spacing=spacing,
        y_spacing=0.0,
        orientation=orientation,
    )


def place_models_at_points(
    model_factory: ModelFactory,
    reference_selector: ReferenceSelector,
    points: Iterable[PatternPoint],
) -> List[Solid]:
    """Instance a fresh model at every point.

    Each instance is translated so its reference point lands on the target
    position, then rotated about that position so its local +Z follows the
    point's orientation (or its direction when no orientation is set).
    """
    models = []
    for point in points:
        model = model_factory()
        reference = Vector3.of(reference_selector(model))
        model = model.translate(point.position - reference)

        target = point.orientation if not point.orientation.is_zero() else point.direction
        if not target.is_zero():
            axis, angle = alignment_rotation(Z_AXIS, target)
            if angle != 0.0:
                model = model.rotate(angle, point.position, axis)
        models.append(model)
    logger.debug("Placed %d models", len(models))
    return models


def create_models_along_ray(
    model_factory: ModelFactory,
    reference_selector: ReferenceSelector,
    line: Ray,
    count: int,
) -> List[Solid]:
    """``count`` models whose reference points run evenly along ``line``."""
    models = []
    for i in range(count):
        t = i / (count - 1) if count > 1 else 0.0
        model = model_factory()
        target = line.origin + line.direction * t
        models.append(model.translate(target - Vector3.of(reference_selector(model))))
    return models


def combine(*generators: Callable[..., Union[Solid, Sequence[Solid]]]) -> Callable[..., MeshSolid]:
    """Merge the output of several model generators into one compound."""
    def combined(*args, **kwargs) -> MeshSolid:
        solids: List[Solid] = []
        for generator in generators:
            result = generator(*args, **kwargs)
            if isinstance(result, (list, tuple)):
                solids.extend(result)
            else:
                solids.append(result)
        return compound(solids)

    return combined
