"""
Mate solver: rigid transforms that bring two bounding-box faces flush.

Each mate is computed fresh and applied once:

    1. rotation   - turn the moving part so its face normal opposes the
                    fixed face normal, pivoting about the moving face centre
    2. translation - carry the (unchanged) moving face centre onto the fixed
                    face centre

Because the pivot is the moving face centre, that point is a fixed point of
the rotation and the translation does not depend on the rotation at all.
Rotating about the part's bounding-box centre instead would leave a
residual offset along the normal.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np

from cad_layout.bounding_box import (
    CornerPosition,
    EdgePosition,
    Face,
    FacePosition,
    PositionSpec,
    edge_connecting_faces,
    face_center,
    face_normal,
    find_matching_faces,
    point_on_bounding_box,
)
from cad_layout.config import DEFAULT_CONFIG, ConstraintOptions
from cad_layout.kernel import Solid
from cad_layout.vector_math import (
    AXIS_TOLERANCE,
    Z_AXIS,
    Vector3,
    VectorLike,
    alignment_rotation,
    are_anti_parallel,
    distance_to_plane,
    perpendicular_to,
    project_onto_plane,
)

logger = logging.getLogger(__name__)

MATE_TOLERANCE = DEFAULT_CONFIG.mate_tolerance

FaceLike = Union[str, Face]


@dataclass(frozen=True)
class RigidTransform:
    """Rotation about ``pivot`` followed by a translation."""

    rotation_axis: Vector3
    rotation_angle_degrees: float
    translation: Vector3
    pivot: Vector3 = Vector3()

    @property
    def has_rotation(self) -> bool:
        return self.rotation_angle_degrees != 0.0 and self.rotation_axis.length > AXIS_TOLERANCE

    def apply(self, model: Solid) -> Solid:
        if self.has_rotation:
            model = model.rotate(self.rotation_angle_degrees, self.pivot, self.rotation_axis)
        if self.translation.length > 0.0:
            model = model.translate(self.translation)
        return model


def calculate_mate_transformation(
    model1: Solid,
    face1: FaceLike,
    model2: Solid,
    face2: FaceLike,
) -> RigidTransform:
    """Transform that mates ``face2`` of ``model2`` onto ``face1`` of ``model1``."""
    face1 = Face.parse(face1)
    face2 = Face.parse(face2)
    n1 = face_normal(face1)
    n2 = face_normal(face2)
    c1 = face_center(model1.bounding_box, face1)
    c2 = face_center(model2.bounding_box, face2)

    if are_anti_parallel(n1, n2):
        axis, angle = Vector3.zero(), 0.0
    else:
        axis, angle = alignment_rotation(n2, -n1)

    # c2 is the pivot, so it is where it was after the rotation
    gap = distance_to_plane(c2, c1, n1)
    in_plane = project_onto_plane(c1 - c2, n1)
    translation = in_plane - n1 * gap

    return RigidTransform(
        rotation_axis=axis,
        rotation_angle_degrees=angle,
        translation=translation,
        pivot=c2,
    )


def mate_bounding_box_faces(
    fixed: Solid,
    fixed_face: FaceLike,
    moving: Solid,
    moving_face: FaceLike,
) -> Solid:
    """Move ``moving`` so ``moving_face`` sits flush and centred on ``fixed_face``.

    If the two faces were not already anti-parallel the moving part is
    rotated, and the box face that ends up in contact is
    ``Face.parse(fixed_face).opposite``.
    """
    transform = calculate_mate_transformation(fixed, fixed_face, moving, moving_face)
    logger.debug(
        "Mate %s -> %s: rotate %.3f deg about %s, translate %s",
        Face.parse(moving_face).value,
        Face.parse(fixed_face).value,
        transform.rotation_angle_degrees,
        transform.rotation_axis.to_tuple(),
        transform.translation.to_tuple(),
    )
    return transform.apply(moving)


def auto_mate_bounding_boxes(
    fixed: Solid,
    moving: Solid,
    prefer_larger: bool = True,
) -> Solid:
    """Mate using the best anti-parallel face pair of the two bounding boxes."""
    fixed_face, moving_face = find_matching_faces(
        fixed.bounding_box, moving.bounding_box, prefer_larger
    )
    return mate_bounding_box_faces(fixed, fixed_face, moving, moving_face)


def offset_mated_model(
    model: Solid,
    face: FaceLike,
    distance: float,
    reference_face: Optional[FaceLike] = None,
) -> Solid:
    """Push a mated part ``distance`` away from the part it was mated to.

    The offset follows the outward normal of ``reference_face`` (the fixed
    part's face), so positive distances always open a gap regardless of the
    face pair. Without a reference face the moved part's own face is used,
    reversed.
    """
    if reference_face is not None:
        direction = face_normal(reference_face)
    else:
        direction = -face_normal(face)
    return model.translate(direction * float(distance))


def are_faces_mated(
    model1: Solid,
    face1: FaceLike,
    model2: Solid,
    face2: FaceLike,
    tol: float = MATE_TOLERANCE,
) -> bool:
    """True if the faces oppose each other and lie in the same plane."""
    n1 = face_normal(face1)
    n2 = face_normal(face2)
    if not are_anti_parallel(n1, n2):
        return False
    c1 = face_center(model1.bounding_box, face1)
    c2 = face_center(model2.bounding_box, face2)
    return abs(distance_to_plane(c2, c1, n1)) < tol


def place_on_top(base: Solid, part: Solid) -> Solid:
    """Stack ``part`` centred on top of ``base``."""
    return mate_bounding_box_faces(base, Face.TOP, part, Face.BOTTOM)


# ─── Point constraints ───────────────────────────────────────────────────────

def _normal_for_position(position: PositionSpec, options: ConstraintOptions) -> Vector3:
    if isinstance(position, FacePosition):
        return face_normal(position.face)
    if isinstance(position, EdgePosition):
        if options.face_for_edge is not None:
            return face_normal(options.face_for_edge)
        return face_normal(edge_connecting_faces(position.edge)[0])
    if isinstance(position, CornerPosition):
        if options.face_for_corner is not None:
            return face_normal(options.face_for_corner)
        return Z_AXIS
    return Z_AXIS


def _frame_axes(normal: Vector3, x_dir: Optional[Vector3]) -> Tuple[Vector3, Vector3, Vector3]:
    z = normal.normalized()
    if x_dir is None:
        x = perpendicular_to(z)
    else:
        x = project_onto_plane(x_dir, z)
        if x.is_zero():
            logger.debug("x_dir is parallel to the normal; using a perpendicular instead")
            x = perpendicular_to(z)
        x = x.normalized()
    return x, z.cross(x), z


def constraint_models_by_points(
    fixed: Solid,
    fixed_position: PositionSpec,
    moving: Solid,
    moving_position: PositionSpec,
    options: Optional[ConstraintOptions] = None,
) -> Solid:
    """Re-express ``moving`` in a local frame anchored on ``fixed``.

    The frame has its origin at the fixed anchor point, its z axis along the
    anchor normal and its x axis along ``options.x_dir`` (made orthogonal to
    the normal) or a perpendicular of the normal. The moving anchor point is
    taken as the moving part's local origin, so it lands on the fixed point,
    and the part's local +Z follows the frame normal.
    """
    options = options or ConstraintOptions()
    fixed_point = point_on_bounding_box(fixed.bounding_box, fixed_position)
    moving_point = point_on_bounding_box(moving.bounding_box, moving_position)

    if options.normal is not None:
        normal = Vector3.of(options.normal)
    else:
        normal = _normal_for_position(fixed_position, options)
    x_dir = Vector3.of(options.x_dir) if options.x_dir is not None else None
    x, y, z = _frame_axes(normal, x_dir)

    to_local_origin = np.eye(4)
    to_local_origin[:3, 3] = (-moving_point).to_array()
    frame = np.eye(4)
    frame[:3, 0] = x.to_array()
    frame[:3, 1] = y.to_array()
    frame[:3, 2] = z.to_array()
    frame[:3, 3] = fixed_point.to_array()

    logger.debug(
        "Point constraint at %s, normal %s, x_dir %s",
        fixed_point.to_tuple(), z.to_tuple(), x.to_tuple(),
    )
    return moving.transform(frame @ to_local_origin)


def offset_constrained_model(model: Solid, direction: VectorLike, distance: float) -> Solid:
    """Translate a constrained part ``distance`` along ``direction``."""
    direction = Vector3.of(direction)
    if direction.is_zero():
        logger.debug("Zero-length offset direction; part left in place")
        return model
    return model.translate(direction.normalized() * float(distance))
