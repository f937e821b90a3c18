"""Tolerances and defaults shared by the layout engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple, Union

if TYPE_CHECKING:
    from cad_layout.bounding_box import Face


@dataclass(frozen=True)
class LayoutConfig:
    """Numeric tolerances and drawing defaults."""

    parallel_tolerance: float = 1e-10   # |n1 x n2| below this => parallel
    axis_tolerance: float = 1e-10       # rotation axes shorter than this are skipped
    mate_tolerance: float = 1e-9        # face-plane distance for a valid mate
    angle_tolerance_deg: float = 1e-9
    radial_min_distance: float = 1e-3   # parts closer than this to the centre stay put
    default_view_box: Tuple[float, float, float, float] = (0.0, 0.0, 100.0, 100.0)
    view_box_padding: float = 5.0


DEFAULT_CONFIG = LayoutConfig()


@dataclass(frozen=True)
class ConstraintOptions:
    """Overrides for point-to-point constraints.

    ``normal`` and ``x_dir`` replace the frame axes derived from the fixed
    anchor. ``face_for_edge`` / ``face_for_corner`` pick the face whose
    normal is used when the fixed anchor is an edge or a corner.
    """

    normal: Optional[Tuple[float, float, float]] = None
    x_dir: Optional[Tuple[float, float, float]] = None
    face_for_edge: Optional[Union[str, Face]] = None
    face_for_corner: Optional[Union[str, Face]] = None
