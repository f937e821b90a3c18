"""
Parametric model catalogue.

Each builder takes plain numeric/string keyword parameters and returns a
``MeshSolid`` (or a ``ModelWithHelpers`` for models with helper spaces)
assembled with the layout engine. ``MODEL_FUNCTIONS`` maps display names to
builders; ``build_model`` resolves a name and calls the builder.
"""
from __future__ import annotations

import inspect
import logging
import re
from typing import Any, Callable, Dict, Union

from cad_layout.bounding_box import Face
from cad_layout.errors import InvalidIdentifierError
from cad_layout.explosion import layered_explode
from cad_layout.kernel import MeshSolid, compound
from cad_layout.mate import mate_bounding_box_faces, offset_mated_model, place_on_top
from cad_layout.pattern import (
    center_selector,
    create_models_along_ray,
    create_rectangular_grid,
    place_models_at_points,
    ray,
)
from cad_layout.technical_drawing import ModelWithHelpers, model_with_helpers
from cad_layout.vector_math import Plane

logger = logging.getLogger(__name__)

Model = Union[MeshSolid, ModelWithHelpers]


def create_cuboid(width: float = 100, depth: float = 100, height: float = 100) -> MeshSolid:
    """Box with its bottom-front-left corner at the origin."""
    return MeshSolid.box(width, depth, height, name="cuboid")


def create_l_profile(
    depth: float = 100,
    flange_x: float = 50,
    flange_z: float = 50,
    thickness: float = 5,
) -> MeshSolid:
    """Angle profile running along Y, centred on y = 0.

    Args:
        depth: Length of the profile along Y
        flange_x: Width of the horizontal flange along X
        flange_z: Height of the vertical flange along Z
        thickness: Thickness of both flanges
    """
    origin = (0.0, -depth / 2.0, 0.0)
    horizontal = MeshSolid.box(flange_x, depth, thickness, origin=origin)
    vertical = MeshSolid.box(thickness, depth, flange_z, origin=origin)
    profile = horizontal.fuse(vertical)
    profile.name = "l_profile"
    return profile


def create_cylinder(radius: float = 50, height: float = 100) -> MeshSolid:
    """Cylinder hanging below the origin: its top face is centred on (0, 0, 0)."""
    return MeshSolid.cylinder(radius, height, base=(0.0, 0.0, -height), name="cylinder")


def create_frustum(
    bottom_radius: float = 50,
    top_radius: float = 25,
    height: float = 100,
    location_x: float = 0,
    location_y: float = 0,
    location_z: float = 0,
    segments: int = 32,
) -> MeshSolid:
    """Truncated cone along +Z.

    Args:
        bottom_radius: Radius of the bottom circle
        top_radius: Radius of the top circle
        height: Distance between the two circles
        location_x, location_y, location_z: Centre of the bottom circle
        segments: Number of segments approximating each circle
    """
    return MeshSolid.frustum(
        bottom_radius, top_radius, height,
        base=(location_x, location_y, location_z),
        sections=int(segments),
        name="frustum",
    )


def create_drill(
    bottom_radius: float = 50,
    top_radius: float = 25,
    frustum_height: float = 80,
    cylinder_height: float = 40,
) -> MeshSolid:
    """Frustum with a shank of ``top_radius`` standing on its small end."""
    body = create_frustum(bottom_radius, top_radius, frustum_height)
    shank = place_on_top(body, MeshSolid.cylinder(top_radius, cylinder_height))
    drill = body.fuse(shank)
    drill.name = "drill"
    return drill


def create_ellipsoid(a_length: float = 80, b_length: float = 50, c_length: float = 30) -> MeshSolid:
    """Ellipsoid centred on the origin with semi-axes along X, Y and Z."""
    return MeshSolid.ellipsoid(a_length, b_length, c_length, name="ellipsoid")


def create_box(
    width: float = 30,
    height: float = 50,
    depth: float = 20,
    thickness: float = 2,
    corner_radius: float = 5,
) -> MeshSolid:
    """Open-topped container with rounded corners.

    The ``width`` x ``height`` outline lies centred in XY and is extruded
    ``depth`` along +Z; the top face is removed and the walls are
    ``thickness`` thick.
    """
    return MeshSolid.rounded_tray(width, height, depth, thickness, corner_radius, name="box")


def create_mated_cuboid_l(
    cuboid_width: float = 100,
    cuboid_depth: float = 100,
    cuboid_height: float = 50,
    l_length: float = 100,
    l_flange_x: float = 50,
    l_flange_z: float = 50,
    l_thickness: float = 5,
    cuboid_face: str = "BOTTOM",
    l_profile_face: str = "TOP",
    offset_distance: float = 0,
) -> MeshSolid:
    """Cuboid with an L-profile mated to one of its faces.

    A non-zero ``offset_distance`` pushes the profile away from the cuboid
    along the cuboid face's outward normal.
    """
    fixed_face = Face.parse(cuboid_face)
    moving_face = Face.parse(l_profile_face)
    cuboid = create_cuboid(cuboid_width, cuboid_depth, cuboid_height)
    profile = create_l_profile(l_length, l_flange_x, l_flange_z, l_thickness)

    mated = mate_bounding_box_faces(cuboid, fixed_face, profile, moving_face)
    if offset_distance:
        mated = offset_mated_model(mated, moving_face, offset_distance, fixed_face)
    return cuboid.fuse(mated)


def create_rectangular_cuboid_grid(
    origin_x: float = 0, origin_y: float = 0, origin_z: float = 0,
    direction_x: float = 1, direction_y: float = 0, direction_z: float = 0,
    normal_x: float = 0, normal_y: float = 0, normal_z: float = 1,
    rows: int = 3,
    cols: int = 3,
    x_spacing: float = 30,
    y_spacing: float = 30,
    box_width: float = 10,
    box_depth: float = 10,
    box_height: float = 10,
    orientation_x: float = 0, orientation_y: float = 0, orientation_z: float = 1,
) -> MeshSolid:
    plane = Plane.from_vectors(
        (origin_x, origin_y, origin_z),
        (direction_x, direction_y, direction_z),
        (normal_x, normal_y, normal_z),
    )
    points = create_rectangular_grid(
        plane, int(rows), int(cols), x_spacing, y_spacing,
        (orientation_x, orientation_y, orientation_z),
    )
    return compound(place_models_at_points(
        lambda: create_cuboid(box_width, box_depth, box_height),
        center_selector,
        points,
    ))


def create_diagonal_cuboid_pattern(
    count: int = 5,
    vector_x: float = 0, vector_y: float = 50, vector_z: float = 50,
    origin_x: float = 0, origin_y: float = 0, origin_z: float = 0,
    box_width: float = 10,
    box_depth: float = 10,
    box_height: float = 10,
) -> MeshSolid:
    """Cuboids centred at evenly spaced points along a ray."""
    return compound(create_models_along_ray(
        lambda: create_cuboid(box_width, box_depth, box_height),
        center_selector,
        ray((origin_x, origin_y, origin_z), (vector_x, vector_y, vector_z)),
        int(count),
    ))


def create_staircase(width: float = 100) -> MeshSolid:
    """Two 5 mm treads: a 200 deep one with a 280 deep one stacked on top."""
    bottom = create_cuboid(width, 200, 5)
    top = place_on_top(bottom, create_cuboid(width, 280, 5))
    return compound([bottom, top])


def create_helper_cuboid(
    width: float = 50,
    depth: float = 100,
    height: float = 200,
    show_helper: bool = True,
) -> ModelWithHelpers:
    """A thin plate plus the cuboid space it is meant to occupy, as a helper."""
    main = create_cuboid(width - 1, 20, 0.5)
    helpers = [create_cuboid(width, depth, height)] if show_helper else []
    return model_with_helpers(main, helpers)


def create_exploded_stack(
    layers: int = 3,
    width: float = 60,
    depth: float = 40,
    height: float = 10,
    spacing: float = 10,
    explode: float = 0.0,
) -> MeshSolid:
    """Stack of equal plates, optionally pulled apart along +Z."""
    layers = int(layers)
    if layers < 1:
        raise ValueError(f"An exploded stack needs at least one layer, got {layers}")
    parts = [create_cuboid(width, depth, height)]
    for _ in range(layers - 1):
        parts.append(place_on_top(parts[-1], create_cuboid(width, depth, height)))
    # the bottom plate stays on the ground; the rest lift by layer index
    lifted = layered_explode(parts[1:], base_spacing=spacing, factor=explode)
    return compound([parts[0]] + lifted)


MODEL_FUNCTIONS: Dict[str, Callable[..., Model]] = {
    "Cuboid": create_cuboid,
    "L-Profile": create_l_profile,
    "Cylinder": create_cylinder,
    "Frustum": create_frustum,
    "Drill": create_drill,
    "Ellipsoid": create_ellipsoid,
    "Box": create_box,
    "Mated Cuboid L": create_mated_cuboid_l,
    "Rectangular Cuboid Grid": create_rectangular_cuboid_grid,
    "Diagonal Cuboid Pattern": create_diagonal_cuboid_pattern,
    "Staircase": create_staircase,
    "Helper Cuboid": create_helper_cuboid,
    "Exploded Stack": create_exploded_stack,
}


def model_slug(name: str) -> str:
    """``"Mated Cuboid L"`` -> ``"mated_cuboid_l"``."""
    return re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_")


def resolve_model(name: str) -> str:
    """Display name for ``name``, given either the display name or its slug."""
    slug = model_slug(name)
    for display_name in MODEL_FUNCTIONS:
        if model_slug(display_name) == slug:
            return display_name
    raise InvalidIdentifierError(
        f"Unknown model: {name!r}. Valid options are: {', '.join(MODEL_FUNCTIONS)}"
    )


def model_parameters(name: str) -> Dict[str, Any]:
    """Parameter names of a model mapped to their defaults."""
    builder = MODEL_FUNCTIONS[resolve_model(name)]
    return {
        param.name: param.default
        for param in inspect.signature(builder).parameters.values()
    }


def build_model(name: str, **params: Any) -> Model:
    """Build a catalogue model by display name or slug.

    Raises:
        InvalidIdentifierError: unknown model or parameter name.
    """
    display_name = resolve_model(name)
    accepted = model_parameters(display_name)
    unknown = sorted(set(params) - set(accepted))
    if unknown:
        raise InvalidIdentifierError(
            f"Unknown parameter(s) for {display_name}: {', '.join(unknown)}. "
            f"Valid options are: {', '.join(accepted)}"
        )
    logger.debug("Building %s with %s", display_name, params)
    return MODEL_FUNCTIONS[display_name](**params)
