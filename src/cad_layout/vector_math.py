"""
Vector algebra for the layout engine.

``Vector3`` is an immutable value type; every operation returns a new
vector. The free functions below implement the angle, parallelism and
plane helpers shared by the mate solver, pattern placement and explosion
code, including the degenerate fallbacks (zero-length rotation axes,
180-degree flips) that those callers rely on.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple, Union

import numpy as np

from cad_layout.config import DEFAULT_CONFIG
from cad_layout.errors import DegenerateVectorError

PARALLEL_TOLERANCE = DEFAULT_CONFIG.parallel_tolerance
AXIS_TOLERANCE = DEFAULT_CONFIG.axis_tolerance
ANGLE_TOLERANCE_DEG = DEFAULT_CONFIG.angle_tolerance_deg


@dataclass(frozen=True)
class Vector3:
    """A 3D vector with double-precision components."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def of(cls, value: "VectorLike") -> "Vector3":
        """Coerce a Vector3, numpy array or 3-sequence into a Vector3."""
        if isinstance(value, Vector3):
            return value
        arr = np.asarray(value, dtype=float).reshape(-1)
        if arr.shape[0] != 3:
            raise ValueError(f"Expected 3 components, got {arr.shape[0]}")
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    @classmethod
    def zero(cls) -> "Vector3":
        return cls(0.0, 0.0, 0.0)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    def __getitem__(self, index: int) -> float:
        return self.to_tuple()[index]

    # ── arithmetic ──────────────────────────────────────────────────────

    def add(self, other: "VectorLike") -> "Vector3":
        o = Vector3.of(other)
        return Vector3(self.x + o.x, self.y + o.y, self.z + o.z)

    def sub(self, other: "VectorLike") -> "Vector3":
        o = Vector3.of(other)
        return Vector3(self.x - o.x, self.y - o.y, self.z - o.z)

    def multiply(self, scalar: float) -> "Vector3":
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def dot(self, other: "VectorLike") -> float:
        o = Vector3.of(other)
        return self.x * o.x + self.y * o.y + self.z * o.z

    def cross(self, other: "VectorLike") -> "Vector3":
        o = Vector3.of(other)
        return Vector3(
            self.y * o.z - self.z * o.y,
            self.z * o.x - self.x * o.z,
            self.x * o.y - self.y * o.x,
        )

    @property
    def length(self) -> float:
        return math.hypot(self.x, self.y, self.z)

    def is_zero(self, tol: float = AXIS_TOLERANCE) -> bool:
        return self.length < tol

    def normalized(self) -> "Vector3":
        """Unit vector in the same direction.

        Raises:
            DegenerateVectorError: if the vector has zero length.
        """
        length = self.length
        if length == 0.0:
            raise DegenerateVectorError("Cannot normalize a zero-length vector")
        return Vector3(self.x / length, self.y / length, self.z / length)

    def angle_to(self, other: "VectorLike") -> float:
        return angle_between(self, other)

    def __add__(self, other: "VectorLike") -> "Vector3":
        return self.add(other)

    def __sub__(self, other: "VectorLike") -> "Vector3":
        return self.sub(other)

    def __mul__(self, scalar: float) -> "Vector3":
        return self.multiply(scalar)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector3":
        return Vector3(-self.x, -self.y, -self.z)


VectorLike = Union[Vector3, Sequence[float], np.ndarray]

X_AXIS = Vector3(1.0, 0.0, 0.0)
Y_AXIS = Vector3(0.0, 1.0, 0.0)
Z_AXIS = Vector3(0.0, 0.0, 1.0)


def angle_between(v1: VectorLike, v2: VectorLike) -> float:
    """Angle between two vectors in degrees, in [0, 180].

    Raises:
        DegenerateVectorError: if either vector has zero length.
    """
    a = Vector3.of(v1)
    b = Vector3.of(v2)
    if a.length == 0.0 or b.length == 0.0:
        raise DegenerateVectorError("Angle is undefined for a zero-length vector")
    # atan2 keeps precision near 0 and 180 degrees where acos does not
    return math.degrees(math.atan2(a.cross(b).length, a.dot(b)))


def are_parallel(v1: VectorLike, v2: VectorLike, tol: float = PARALLEL_TOLERANCE) -> bool:
    """True if the vectors point along the same line (either sense)."""
    n1 = Vector3.of(v1).normalized()
    n2 = Vector3.of(v2).normalized()
    return n1.cross(n2).length < tol


def are_anti_parallel(v1: VectorLike, v2: VectorLike, tol: float = PARALLEL_TOLERANCE) -> bool:
    """True if the vectors point in exactly opposite directions."""
    n1 = Vector3.of(v1).normalized()
    n2 = Vector3.of(v2).normalized()
    return n1.cross(n2).length < tol and n1.dot(n2) < 0


def perpendicular_to(v: VectorLike) -> Vector3:
    """Deterministic unit vector perpendicular to ``v``.

    Zeroes the smallest component of the normalized vector (first index wins
    on ties) and swaps/negates the other two.
    """
    n = Vector3.of(v).normalized().to_tuple()
    magnitudes = [abs(c) for c in n]
    smallest = magnitudes.index(min(magnitudes))
    j, k = [i for i in range(3) if i != smallest]
    perp = [0.0, 0.0, 0.0]
    perp[j] = -n[k]
    perp[k] = n[j]
    return Vector3(*perp).normalized()


def rotation_axis(v1: VectorLike, v2: VectorLike, tol: float = AXIS_TOLERANCE) -> Vector3:
    """Normalized ``v1 x v2``; the zero vector when the inputs are (anti-)parallel."""
    axis = Vector3.of(v1).cross(v2)
    if axis.length < tol:
        return Vector3.zero()
    return axis.normalized()


def alignment_rotation(
    v_from: VectorLike,
    v_to: VectorLike,
    tol: float = AXIS_TOLERANCE,
) -> Tuple[Vector3, float]:
    """Axis and angle (degrees) that rotate ``v_from`` onto ``v_to``.

    Returns ``(Vector3.zero(), 0.0)`` when no rotation is needed. For
    opposite vectors the cross product vanishes, so the axis falls back to
    ``perpendicular_to(v_from)`` with a 180-degree turn.
    """
    angle = angle_between(v_from, v_to)
    if angle < ANGLE_TOLERANCE_DEG:
        return Vector3.zero(), 0.0
    axis = rotation_axis(v_from, v_to, tol)
    if axis.is_zero(tol) or abs(angle - 180.0) < ANGLE_TOLERANCE_DEG:
        return perpendicular_to(v_from), 180.0
    return axis, angle


def project_onto_plane(vector: VectorLike, plane_normal: VectorLike) -> Vector3:
    """Component of ``vector`` lying in the plane with the given normal."""
    v = Vector3.of(vector)
    n = Vector3.of(plane_normal).normalized()
    return v - n * v.dot(n)


def distance_to_plane(point: VectorLike, plane_point: VectorLike, plane_normal: VectorLike) -> float:
    """Signed distance from ``point`` to a plane, positive on the normal side."""
    n = Vector3.of(plane_normal).normalized()
    return Vector3.of(point).sub(plane_point).dot(n)


def line_plane_intersection(
    line_point: VectorLike,
    line_direction: VectorLike,
    plane_point: VectorLike,
    plane_normal: VectorLike,
    tol: float = PARALLEL_TOLERANCE,
) -> Optional[Vector3]:
    """Intersection of a line with a plane, or None if the line is parallel to it."""
    n = Vector3.of(plane_normal).normalized()
    d = Vector3.of(line_direction).normalized()
    denominator = d.dot(n)
    if abs(denominator) < tol:
        return None
    p0 = Vector3.of(line_point)
    t = Vector3.of(plane_point).sub(p0).dot(n) / denominator
    return p0 + d * t


@dataclass(frozen=True)
class Plane:
    """A local 2D frame in space: origin, in-plane x direction and normal.

    ``x_dir`` must be perpendicular to ``normal``; the constructor helper
    normalizes both but does not orthogonalize them.
    """

    origin: Vector3
    x_dir: Vector3
    normal: Vector3

    @classmethod
    def from_vectors(cls, origin: VectorLike, x_dir: VectorLike, normal: VectorLike) -> "Plane":
        return cls(
            Vector3.of(origin),
            Vector3.of(x_dir).normalized(),
            Vector3.of(normal).normalized(),
        )

    @property
    def y_dir(self) -> Vector3:
        return self.normal.cross(self.x_dir)

    def to_world(self, local: VectorLike) -> Vector3:
        lx, ly, lz = Vector3.of(local)
        return self.origin + self.x_dir * lx + self.y_dir * ly + self.normal * lz
