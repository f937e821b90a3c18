"""Public API for the cad_layout geometric constraint and layout engine."""

from cad_layout.bounding_box import (
    BoundingBox,
    CenterPosition,
    CornerPosition,
    Edge,
    EdgePosition,
    Face,
    FacePosition,
    PositionSpec,
    edge_connecting_faces,
    edge_direction,
    edge_end,
    edge_from_faces,
    edge_midpoint,
    edge_start,
    face_area,
    face_center,
    face_from_normal,
    face_normal,
    face_vertices,
    find_matching_faces,
    largest_face,
    point_on_bounding_box,
    point_on_edge,
    point_on_face,
)
from cad_layout.config import DEFAULT_CONFIG, ConstraintOptions, LayoutConfig
from cad_layout.errors import (
    DegenerateVectorError,
    InvalidEdgeError,
    InvalidIdentifierError,
    LayoutError,
)
from cad_layout.explosion import (
    ExplodablePart,
    axis_explode,
    directional_explode,
    explode_component,
    explode_parts,
    layered_explode,
    radial_explode,
)
from cad_layout.kernel import MeshSolid, Projection, ProjectedLines, Solid, compound
from cad_layout.mate import (
    RigidTransform,
    are_faces_mated,
    auto_mate_bounding_boxes,
    calculate_mate_transformation,
    constraint_models_by_points,
    mate_bounding_box_faces,
    offset_constrained_model,
    offset_mated_model,
    place_on_top,
)
from cad_layout.models import MODEL_FUNCTIONS, build_model
from cad_layout.pattern import (
    PatternPoint,
    Ray,
    center_selector,
    combine,
    create_linear_pattern,
    create_models_along_ray,
    create_rectangular_grid,
    place_models_at_points,
    ray,
)
from cad_layout.technical_drawing import (
    ModelWithHelpers,
    ViewBox,
    combine_view_boxes,
    create_orthographic_projections,
    exportable_model,
    model_with_helpers,
    process_projections_for_rendering,
    render_drawing_svg,
)
from cad_layout.vector_math import (
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

__all__ = [
    # vectors
    "Vector3", "Plane", "angle_between", "are_parallel", "are_anti_parallel",
    "perpendicular_to", "rotation_axis", "alignment_rotation",
    "project_onto_plane", "distance_to_plane", "line_plane_intersection",
    # bounding boxes
    "BoundingBox", "Face", "Edge", "PositionSpec", "FacePosition",
    "EdgePosition", "CornerPosition", "CenterPosition", "face_normal",
    "face_from_normal", "face_center", "face_vertices", "face_area",
    "largest_face", "point_on_face", "edge_connecting_faces",
    "edge_from_faces", "edge_direction", "edge_start", "edge_end",
    "edge_midpoint", "point_on_edge", "point_on_bounding_box",
    "find_matching_faces",
    # kernel
    "Solid", "MeshSolid", "Projection", "ProjectedLines", "compound",
    # mates
    "RigidTransform", "calculate_mate_transformation",
    "mate_bounding_box_faces", "auto_mate_bounding_boxes",
    "offset_mated_model", "are_faces_mated", "place_on_top",
    "constraint_models_by_points", "offset_constrained_model",
    # patterns
    "PatternPoint", "Ray", "ray", "center_selector", "create_rectangular_grid",
    "create_linear_pattern", "place_models_at_points",
    "create_models_along_ray", "combine",
    # explosion
    "ExplodablePart", "explode_component", "radial_explode",
    "directional_explode", "axis_explode", "layered_explode", "explode_parts",
    # drawings
    "ViewBox", "combine_view_boxes", "ModelWithHelpers", "model_with_helpers",
    "exportable_model", "create_orthographic_projections",
    "process_projections_for_rendering", "render_drawing_svg",
    # models and config
    "MODEL_FUNCTIONS", "build_model", "LayoutConfig", "ConstraintOptions",
    "DEFAULT_CONFIG", "LayoutError", "InvalidIdentifierError",
    "InvalidEdgeError", "DegenerateVectorError",
]
