"""
Kernel collaborator: the solid interface the layout engine relies on.

The engine never does solid modeling itself. It needs solids that report an
axis-aligned bounding box and can be translated, rotated, mirrored and
fused, each operation returning a new solid. ``Solid`` spells that
interface out; ``MeshSolid`` implements it on top of trimesh so models,
scripts and tests have a concrete kernel to work with.

``MeshSolid.project`` provides the orthographic projection the drawing code
consumes. It projects feature edges only and classifies an edge as visible
when one of its faces points at the viewer, which is exact for boxes and
extruded profiles but is not a general hidden-line algorithm.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

import numpy as np
import trimesh
from shapely.geometry import MultiLineString

from cad_layout.bounding_box import BoundingBox
from cad_layout.errors import InvalidIdentifierError
from cad_layout.technical_drawing import ViewBox
from cad_layout.vector_math import Vector3, VectorLike

logger = logging.getLogger(__name__)

CREASE_ANGLE_DEG = 30.0

# view -> (direction toward the viewer, drawing u axis, drawing v axis)
VIEW_AXES = {
    "front": (np.array([0.0, -1.0, 0.0]), 0, 2),
    "top": (np.array([0.0, 0.0, 1.0]), 0, 1),
    "right": (np.array([1.0, 0.0, 0.0]), 1, 2),
}

MIRROR_PLANES = {
    "XY": (0.0, 0.0, 1.0),
    "YZ": (1.0, 0.0, 0.0),
    "XZ": (0.0, 1.0, 0.0),
}


@runtime_checkable
class Solid(Protocol):
    """What the layout engine needs from a kernel solid."""

    @property
    def bounding_box(self) -> BoundingBox: ...

    def translate(self, vector: VectorLike) -> "Solid": ...

    def rotate(self, angle_deg: float, pivot: VectorLike, axis: VectorLike) -> "Solid": ...

    def mirror(self, plane: Union[str, VectorLike], center: Optional[VectorLike] = None) -> "Solid": ...

    def transform(self, matrix: np.ndarray) -> "Solid": ...

    def fuse(self, other: "Solid") -> "Solid": ...


@dataclass
class ProjectedLines:
    """2D line segments of one projection layer, in drawing coordinates."""

    segments: np.ndarray  # (N, 2, 2), v axis pointing up

    def __len__(self) -> int:
        return int(len(self.segments))

    def _svg_segments(self) -> np.ndarray:
        # SVG's y axis points down
        flipped = np.array(self.segments, dtype=float).reshape(-1, 2, 2).copy()
        flipped[:, :, 1] *= -1.0
        return flipped

    def to_svg_paths(self) -> List[str]:
        paths = []
        for (x1, y1), (x2, y2) in self._svg_segments():
            paths.append(
                f"M {ViewBox.format_number(x1)} {ViewBox.format_number(y1)} "
                f"L {ViewBox.format_number(x2)} {ViewBox.format_number(y2)}"
            )
        return paths

    def to_svg_view_box(self, padding: float = 0.0) -> str:
        """``"x y w h"`` enclosing all segments plus padding; empty if no segments."""
        if len(self) == 0:
            return ""
        min_x, min_y, max_x, max_y = MultiLineString(
            [tuple(map(tuple, seg)) for seg in self._svg_segments()]
        ).bounds
        return str(ViewBox(
            min_x - padding,
            min_y - padding,
            (max_x - min_x) + 2 * padding,
            (max_y - min_y) + 2 * padding,
        ))


@dataclass
class Projection:
    visible: ProjectedLines
    hidden: ProjectedLines


class MeshSolid:
    """A trimesh-backed solid. Every operation returns a new MeshSolid."""

    def __init__(self, mesh: trimesh.Trimesh, name: str = ""):
        self._mesh = mesh
        self.name = name

    @classmethod
    def box(
        cls,
        width: float,
        depth: float,
        height: float,
        origin: VectorLike = (0.0, 0.0, 0.0),
        name: str = "",
    ) -> "MeshSolid":
        """Box spanning ``origin`` .. ``origin + (width, depth, height)``."""
        size = np.array([width, depth, height], dtype=float)
        mesh = trimesh.creation.box(extents=size)
        mesh.apply_translation(Vector3.of(origin).to_array() + size / 2.0)
        return cls(mesh, name)

    @classmethod
    def frustum(
        cls,
        bottom_radius: float,
        top_radius: float,
        height: float,
        base: VectorLike = (0.0, 0.0, 0.0),
        sections: int = 32,
        name: str = "",
    ) -> "MeshSolid":
        """Cone frustum along +Z with its bottom centre at ``base``.

        Equal radii give a cylinder.
        """
        profile = [
            [0.0, 0.0],
            [bottom_radius, 0.0],
            [top_radius, height],
            [0.0, height],
        ]
        mesh = trimesh.creation.revolve(linestring=profile, sections=int(sections))
        mesh.apply_translation(Vector3.of(base).to_array())
        return cls(mesh, name)

    @classmethod
    def cylinder(
        cls,
        radius: float,
        height: float,
        base: VectorLike = (0.0, 0.0, 0.0),
        sections: int = 32,
        name: str = "",
    ) -> "MeshSolid":
        """Cylinder along +Z with its bottom centre at ``base``."""
        mesh = trimesh.creation.cylinder(radius=radius, height=height, sections=int(sections))
        mesh.apply_translation(Vector3.of(base).to_array() + np.array([0.0, 0.0, height / 2.0]))
        return cls(mesh, name)

    @classmethod
    def ellipsoid(
        cls,
        a: float,
        b: float,
        c: float,
        center: VectorLike = (0.0, 0.0, 0.0),
        subdivisions: int = 3,
        name: str = "",
    ) -> "MeshSolid":
        """Ellipsoid with semi-axes ``a``, ``b``, ``c`` along X, Y, Z."""
        mesh = trimesh.creation.icosphere(subdivisions=int(subdivisions), radius=1.0)
        mesh.apply_transform(np.diag([a, b, c, 1.0]))
        mesh.apply_translation(Vector3.of(center).to_array())
        return cls(mesh, name)

    @classmethod
    def rounded_tray(
        cls,
        width: float,
        length: float,
        height: float,
        thickness: float,
        corner_radius: float,
        corner_sections: int = 8,
        name: str = "",
    ) -> "MeshSolid":
        """Open-topped shell with rounded vertical corners.

        The outline is a ``width`` x ``length`` rounded rectangle centred on
        the origin in XY; walls and floor are ``thickness`` thick and grow
        inward, so the outer size stays as given. Spans z = 0 .. ``height``.
        """
        outer_radius = min(corner_radius, width / 2.0, length / 2.0)
        inner_radius = max(outer_radius - thickness, 0.0)
        outer = _rounded_outline(width / 2.0, length / 2.0, outer_radius, corner_sections)
        inner = _rounded_outline(
            width / 2.0 - thickness, length / 2.0 - thickness, inner_radius, corner_sections
        )
        n = len(outer)

        def ring(loop, z):
            return np.column_stack([loop, np.full(n, z)])

        # outer bottom, outer top, inner top, inner floor, then two centre points
        vertices = np.vstack([
            ring(outer, 0.0),
            ring(outer, height),
            ring(inner, height),
            ring(inner, thickness),
            [[0.0, 0.0, 0.0], [0.0, 0.0, thickness]],
        ])
        ob, ot, it, fl = 0, n, 2 * n, 3 * n
        bottom_centre, floor_centre = 4 * n, 4 * n + 1

        faces = []
        for i in range(n):
            j = (i + 1) % n
            faces += [
                [ob + i, ob + j, ot + j], [ob + i, ot + j, ot + i],  # outer wall
                [fl + i, it + j, fl + j], [fl + i, it + i, it + j],  # inner wall
                [ot + i, ot + j, it + j], [ot + i, it + j, it + i],  # rim
                [bottom_centre, ob + j, ob + i],
                [floor_centre, fl + i, fl + j],
            ]
        mesh = trimesh.Trimesh(vertices=vertices, faces=np.array(faces))
        return cls(mesh, name)

    @property
    def mesh(self) -> trimesh.Trimesh:
        return self._mesh

    @property
    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_bounds(self._mesh.bounds)

    def transform(self, matrix: np.ndarray) -> "MeshSolid":
        mesh = self._mesh.copy()
        mesh.apply_transform(np.asarray(matrix, dtype=float))
        return MeshSolid(mesh, self.name)

    def translate(self, vector: VectorLike) -> "MeshSolid":
        return self.transform(
            trimesh.transformations.translation_matrix(Vector3.of(vector).to_array())
        )

    def rotate(
        self,
        angle_deg: float,
        pivot: VectorLike = (0.0, 0.0, 0.0),
        axis: VectorLike = (0.0, 0.0, 1.0),
    ) -> "MeshSolid":
        """Rotate by ``angle_deg`` (right-hand rule) about ``axis`` through ``pivot``."""
        matrix = trimesh.transformations.rotation_matrix(
            math.radians(angle_deg),
            Vector3.of(axis).to_array(),
            point=Vector3.of(pivot).to_array(),
        )
        return self.transform(matrix)

    def mirror(
        self,
        plane: Union[str, VectorLike],
        center: Optional[VectorLike] = None,
    ) -> "MeshSolid":
        """Reflect across a plane given as "XY"/"YZ"/"XZ" or by its normal."""
        if isinstance(plane, str):
            if plane.upper() not in MIRROR_PLANES:
                raise InvalidIdentifierError(f"Unknown mirror plane: {plane!r}")
            normal = MIRROR_PLANES[plane.upper()]
        else:
            normal = plane
        point = Vector3.of(center) if center is not None else Vector3.zero()
        matrix = trimesh.transformations.reflection_matrix(
            point.to_array(), Vector3.of(normal).normalized().to_array()
        )
        return self.transform(matrix)

    def fuse(self, other: "MeshSolid") -> "MeshSolid":
        """Combine two solids into one compound (no boolean evaluation)."""
        return MeshSolid(trimesh.util.concatenate([self._mesh, other.mesh]), self.name)

    def mesh_data(self) -> Tuple[np.ndarray, np.ndarray]:
        """``(vertices, faces)`` arrays for rendering."""
        return np.asarray(self._mesh.vertices), np.asarray(self._mesh.faces)

    def export(self, path: str) -> str:
        self._mesh.export(path)
        return path

    def project(self, view: str, crease_angle_deg: float = CREASE_ANGLE_DEG) -> Projection:
        """Orthographic projection of feature edges for ``front``/``top``/``right``."""
        if view not in VIEW_AXES:
            raise InvalidIdentifierError(
                f"Unknown view: {view!r}. Valid options are: {', '.join(VIEW_AXES)}"
            )
        toward, u_axis, v_axis = VIEW_AXES[view]
        mesh = self._mesh
        facing = mesh.face_normals @ toward > 1e-9

        edges = []
        edge_visible = []
        if len(mesh.face_adjacency):
            sharp = mesh.face_adjacency_angles > math.radians(crease_angle_deg)
            for (a, b), pair in zip(mesh.face_adjacency[sharp], mesh.face_adjacency_edges[sharp]):
                edges.append(pair)
                edge_visible.append(bool(facing[a] or facing[b]))

        # open meshes: edges used by a single face
        unique, index, counts = np.unique(
            mesh.edges_sorted, axis=0, return_index=True, return_counts=True
        )
        for edge, face_index in zip(unique[counts == 1], mesh.edges_face[index[counts == 1]]):
            edges.append(edge)
            edge_visible.append(bool(facing[face_index]))

        visible, hidden = _split_segments(mesh.vertices, edges, edge_visible, u_axis, v_axis)
        logger.debug(
            "Projected %s view: %d visible, %d hidden segments",
            view, len(visible), len(hidden),
        )
        return Projection(ProjectedLines(visible), ProjectedLines(hidden))


def compound(solids: Iterable[MeshSolid]) -> MeshSolid:
    """Merge solids into a single compound solid."""
    solids = list(solids)
    if not solids:
        raise ValueError("Cannot build a compound from zero solids")
    return MeshSolid(trimesh.util.concatenate([s.mesh for s in solids]))


def _split_segments(
    vertices: np.ndarray,
    edges: Sequence,
    edge_visible: Sequence[bool],
    u_axis: int,
    v_axis: int,
) -> Tuple[np.ndarray, np.ndarray]:
    """Project edges to 2D, drop points and duplicates, hide lines under visible ones."""
    visible = {}
    hidden = {}
    for (i, j), is_visible in zip(edges, edge_visible):
        p = (float(vertices[i][u_axis]), float(vertices[i][v_axis]))
        q = (float(vertices[j][u_axis]), float(vertices[j][v_axis]))
        if math.hypot(q[0] - p[0], q[1] - p[1]) < 1e-9:
            continue
        key = tuple(sorted((tuple(np.round(p, 6)), tuple(np.round(q, 6)))))
        (visible if is_visible else hidden)[key] = (p, q)
    for key in visible:
        hidden.pop(key, None)
    return (
        np.array(list(visible.values()), dtype=float).reshape(-1, 2, 2),
        np.array(list(hidden.values()), dtype=float).reshape(-1, 2, 2),
    )


def _rounded_outline(half_x: float, half_y: float, radius: float, sections: int) -> np.ndarray:
    """Counter-clockwise (N, 2) outline of a rounded rectangle centred on the origin.

    Every corner contributes ``sections + 1`` points, so outlines built with
    the same ``sections`` pair up point for point.
    """
    centres = [
        (half_x - radius, half_y - radius),
        (-(half_x - radius), half_y - radius),
        (-(half_x - radius), -(half_y - radius)),
        (half_x - radius, -(half_y - radius)),
    ]
    points = []
    for quadrant, (cx, cy) in enumerate(centres):
        angles = np.linspace(0.0, math.pi / 2.0, int(sections) + 1) + quadrant * math.pi / 2.0
        points.append(np.column_stack([cx + radius * np.cos(angles), cy + radius * np.sin(angles)]))
    return np.vstack(points)
