"""
Symbolic addressing of axis-aligned bounding boxes.

A box has six faces (FRONT -Y, BACK +Y, LEFT -X, RIGHT +X, TOP +Z,
BOTTOM -Z) and twelve edges, each edge named by the two faces it borders.
Points on a box are addressed by a PositionSpec (face + (u, v), edge + t,
edge corner, or the box centre) so callers never deal in raw coordinates.

Face parametrization (u, v in [0, 1], clamped):

    FRONT / BACK   u -> +X, v -> +Z
    LEFT / RIGHT   u -> +Y, v -> +Z
    TOP / BOTTOM   u -> +X, v -> +Y

Edges run from the minimum to the maximum of the one axis neither of their
faces fixes; a corner is an edge's start or end point.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from itertools import product
from typing import Dict, FrozenSet, List, Tuple, Union

import numpy as np

from cad_layout.errors import DegenerateVectorError, InvalidEdgeError, InvalidIdentifierError
from cad_layout.vector_math import Vector3, VectorLike, are_anti_parallel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box reported by the kernel for a solid."""

    min: Vector3
    max: Vector3

    @classmethod
    def from_bounds(cls, bounds) -> "BoundingBox":
        """Build from a ``[[xmin, ymin, zmin], [xmax, ymax, zmax]]`` array."""
        arr = np.asarray(bounds, dtype=float).reshape(2, 3)
        return cls(Vector3.of(arr[0]), Vector3.of(arr[1]))

    @classmethod
    def from_points(cls, points) -> "BoundingBox":
        arr = np.asarray(points, dtype=float).reshape(-1, 3)
        return cls(Vector3.of(arr.min(axis=0)), Vector3.of(arr.max(axis=0)))

    @property
    def bounds(self) -> np.ndarray:
        return np.array([self.min.to_tuple(), self.max.to_tuple()])

    @property
    def center(self) -> Vector3:
        return (self.min + self.max) * 0.5

    @property
    def extents(self) -> Vector3:
        return self.max - self.min


class Face(Enum):
    """The six faces of an axis-aligned box, named by outward normal."""

    FRONT = "front"    # -Y
    BACK = "back"      # +Y
    LEFT = "left"      # -X
    RIGHT = "right"    # +X
    TOP = "top"        # +Z
    BOTTOM = "bottom"  # -Z

    @classmethod
    def parse(cls, value: Union[str, "Face"]) -> "Face":
        """Resolve ``"TOP"``, ``"top"`` or ``Face.TOP`` to a Face."""
        if isinstance(value, Face):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(f.name for f in cls)
            raise InvalidIdentifierError(
                f"Unknown face identifier: {value!r}. Valid options are: {valid}"
            ) from None

    @property
    def normal(self) -> Vector3:
        return face_normal(self)

    @property
    def opposite(self) -> "Face":
        return _OPPOSITE[self]


class Edge(Enum):
    """The twelve edges of an axis-aligned box."""

    FRONT_LEFT = "front_left"
    FRONT_RIGHT = "front_right"
    FRONT_TOP = "front_top"
    FRONT_BOTTOM = "front_bottom"
    BACK_LEFT = "back_left"
    BACK_RIGHT = "back_right"
    BACK_TOP = "back_top"
    BACK_BOTTOM = "back_bottom"
    LEFT_TOP = "left_top"
    LEFT_BOTTOM = "left_bottom"
    RIGHT_TOP = "right_top"
    RIGHT_BOTTOM = "right_bottom"

    @classmethod
    def parse(cls, value: Union[str, "Edge"]) -> "Edge":
        if isinstance(value, Edge):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidIdentifierError(f"Unknown edge identifier: {value!r}") from None

    @property
    def faces(self) -> Tuple[Face, Face]:
        return edge_connecting_faces(self)


# face -> (fixed axis, sits on max side, u axis, v axis)
_FACE_LAYOUT: Dict[Face, Tuple[int, bool, int, int]] = {
    Face.FRONT: (1, False, 0, 2),
    Face.BACK: (1, True, 0, 2),
    Face.LEFT: (0, False, 1, 2),
    Face.RIGHT: (0, True, 1, 2),
    Face.TOP: (2, True, 0, 1),
    Face.BOTTOM: (2, False, 0, 1),
}

_OPPOSITE = {
    Face.FRONT: Face.BACK,
    Face.BACK: Face.FRONT,
    Face.LEFT: Face.RIGHT,
    Face.RIGHT: Face.LEFT,
    Face.TOP: Face.BOTTOM,
    Face.BOTTOM: Face.TOP,
}

_EDGE_FACES: Dict[Edge, Tuple[Face, Face]] = {
    edge: tuple(Face(name) for name in edge.value.split("_"))  # type: ignore[misc]
    for edge in Edge
}
_FACES_EDGE: Dict[FrozenSet[Face], Edge] = {
    frozenset(faces): edge for edge, faces in _EDGE_FACES.items()
}


# ─── Faces ───────────────────────────────────────────────────────────────────

def face_normal(face: Union[str, Face]) -> Vector3:
    """Outward unit normal of a face."""
    axis, on_max, _, _ = _FACE_LAYOUT[Face.parse(face)]
    normal = [0.0, 0.0, 0.0]
    normal[axis] = 1.0 if on_max else -1.0
    return Vector3.of(normal)


def face_from_normal(normal: VectorLike) -> Face:
    """Face whose outward normal is closest to ``normal``.

    The dominant component picks the axis. Components of equal magnitude
    resolve in the fixed priority X > Y > Z, so ``(1, 1, 0)`` maps to RIGHT
    and ``(0, -1, 1)`` to FRONT.
    """
    n = Vector3.of(normal)
    if n.length == 0.0:
        raise DegenerateVectorError("Cannot derive a face from a zero-length normal")
    ax, ay, az = abs(n.x), abs(n.y), abs(n.z)
    if ax >= ay and ax >= az:
        return Face.RIGHT if n.x > 0 else Face.LEFT
    if ay >= az:
        return Face.BACK if n.y > 0 else Face.FRONT
    return Face.TOP if n.z > 0 else Face.BOTTOM


def face_center(box: BoundingBox, face: Union[str, Face]) -> Vector3:
    return point_on_face(box, face, 0.5, 0.5)


def face_vertices(box: BoundingBox, face: Union[str, Face]) -> List[Vector3]:
    """Four corners of a face, counter-clockwise seen from outside the box."""
    face = Face.parse(face)
    _, _, u_axis, v_axis = _FACE_LAYOUT[face]
    uv = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
    u_dir = np.zeros(3)
    u_dir[u_axis] = 1.0
    v_dir = np.zeros(3)
    v_dir[v_axis] = 1.0
    if np.dot(np.cross(u_dir, v_dir), face_normal(face).to_array()) < 0:
        uv = [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)]
    return [point_on_face(box, face, u, v) for u, v in uv]


def face_area(box: BoundingBox, face: Union[str, Face]) -> float:
    _, _, u_axis, v_axis = _FACE_LAYOUT[Face.parse(face)]
    extents = box.extents
    return float(extents[u_axis] * extents[v_axis])


def largest_face(box: BoundingBox) -> Face:
    """Face with the largest area; the first in enum order wins ties."""
    return max(Face, key=lambda f: face_area(box, f))


def point_on_face(box: BoundingBox, face: Union[str, Face], u: float = 0.5, v: float = 0.5) -> Vector3:
    """Point on a face at normalized coordinates ``(u, v)``, clamped to [0, 1]."""
    axis, on_max, u_axis, v_axis = _FACE_LAYOUT[Face.parse(face)]
    lo = box.min.to_array()
    hi = box.max.to_array()
    point = np.empty(3)
    point[axis] = hi[axis] if on_max else lo[axis]
    point[u_axis] = lo[u_axis] + (hi[u_axis] - lo[u_axis]) * _clamp01(u)
    point[v_axis] = lo[v_axis] + (hi[v_axis] - lo[v_axis]) * _clamp01(v)
    return Vector3.of(point)


# ─── Edges ───────────────────────────────────────────────────────────────────

def edge_connecting_faces(edge: Union[str, Edge]) -> Tuple[Face, Face]:
    return _EDGE_FACES[Edge.parse(edge)]


def edge_from_faces(face1: Union[str, Face], face2: Union[str, Face]) -> Edge:
    """Edge shared by two faces, in either order.

    Raises:
        InvalidEdgeError: if the faces are equal or opposite.
    """
    f1 = Face.parse(face1)
    f2 = Face.parse(face2)
    if f1 == f2:
        raise InvalidEdgeError("Cannot find edge between same face")
    edge = _FACES_EDGE.get(frozenset((f1, f2)))
    if edge is None:
        raise InvalidEdgeError(f"No edge connects faces {f1.value} and {f2.value}")
    return edge


def _edge_free_axis(edge: Edge) -> int:
    fixed = {_FACE_LAYOUT[f][0] for f in _EDGE_FACES[edge]}
    return ({0, 1, 2} - fixed).pop()


def edge_direction(edge: Union[str, Edge]) -> Vector3:
    """Unit vector along an edge, from its start to its end."""
    direction = [0.0, 0.0, 0.0]
    direction[_edge_free_axis(Edge.parse(edge))] = 1.0
    return Vector3.of(direction)


def _edge_point(box: BoundingBox, edge: Union[str, Edge], t: float) -> Vector3:
    edge = Edge.parse(edge)
    lo = box.min.to_array()
    hi = box.max.to_array()
    point = np.empty(3)
    for face in _EDGE_FACES[edge]:
        axis, on_max, _, _ = _FACE_LAYOUT[face]
        point[axis] = hi[axis] if on_max else lo[axis]
    free = _edge_free_axis(edge)
    point[free] = lo[free] + (hi[free] - lo[free]) * t
    return Vector3.of(point)


def edge_start(box: BoundingBox, edge: Union[str, Edge]) -> Vector3:
    return _edge_point(box, edge, 0.0)


def edge_end(box: BoundingBox, edge: Union[str, Edge]) -> Vector3:
    return _edge_point(box, edge, 1.0)


def edge_midpoint(box: BoundingBox, edge: Union[str, Edge]) -> Vector3:
    return _edge_point(box, edge, 0.5)


def point_on_edge(box: BoundingBox, edge: Union[str, Edge], t: float = 0.5) -> Vector3:
    """Linear interpolation from edge start to end; ``t`` is clamped to [0, 1]."""
    return _edge_point(box, edge, _clamp01(t))


# ─── Position specs ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FacePosition:
    face: Face
    u: float = 0.5
    v: float = 0.5


@dataclass(frozen=True)
class EdgePosition:
    edge: Edge
    t: float = 0.5


@dataclass(frozen=True)
class CornerPosition:
    edge: Edge
    end: str = "start"  # "start" | "end"


@dataclass(frozen=True)
class CenterPosition:
    pass


PositionSpec = Union[FacePosition, EdgePosition, CornerPosition, CenterPosition]


def point_on_bounding_box(box: BoundingBox, position: PositionSpec) -> Vector3:
    """Resolve a symbolic PositionSpec to a point on ``box``."""
    if isinstance(position, FacePosition):
        return point_on_face(box, position.face, position.u, position.v)
    if isinstance(position, EdgePosition):
        return point_on_edge(box, position.edge, position.t)
    if isinstance(position, CornerPosition):
        end = position.end.lower()
        if end == "start":
            return edge_start(box, position.edge)
        if end == "end":
            return edge_end(box, position.edge)
        raise InvalidIdentifierError(f"Invalid corner identifier: {position.end!r}")
    if isinstance(position, CenterPosition):
        return box.center
    raise InvalidIdentifierError(f"Unknown position type: {type(position).__name__}")


# ─── Face matching ───────────────────────────────────────────────────────────

def find_matching_faces(
    box1: BoundingBox,
    box2: BoundingBox,
    prefer_larger: bool = True,
) -> Tuple[Face, Face]:
    """Pick a face on each box whose normals are anti-parallel.

    With ``prefer_larger`` the 36 candidate pairs are ranked by the smaller of
    the two face areas (the most contact two faces can make), then by their
    summed area; ties keep enum order. Without it the first anti-parallel
    pair in enum order is returned.
    """
    pairs = list(product(Face, Face))
    if prefer_larger:
        def contact_key(pair):
            a1 = face_area(box1, pair[0])
            a2 = face_area(box2, pair[1])
            return (-min(a1, a2), -(a1 + a2))

        pairs.sort(key=contact_key)
    for f1, f2 in pairs:
        if are_anti_parallel(face_normal(f1), face_normal(f2)):
            return f1, f2
    logger.warning("No anti-parallel face pair found; falling back to largest faces")
    return largest_face(box1), largest_face(box2)


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))
