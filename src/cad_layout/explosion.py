"""
Exploded-view transforms.

All functions translate already-placed parts outward by ``factor`` in
``[0, 1]``: 0 leaves every part where it is, 1 gives the fully exploded
layout. Inputs are never modified; each call returns new solids.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from cad_layout.config import DEFAULT_CONFIG
from cad_layout.errors import InvalidIdentifierError
from cad_layout.kernel import Solid
from cad_layout.vector_math import Vector3, VectorLike

logger = logging.getLogger(__name__)

RADIAL_MIN_DISTANCE = DEFAULT_CONFIG.radial_min_distance
DEFAULT_DIRECTION = (0.0, 0.0, 1.0)
DEFAULT_DISTANCE = 10.0

AXES = {"x": 0, "y": 1, "z": 2}


@dataclass(frozen=True)
class ExplodablePart:
    shape: Solid
    direction: Vector3
    distance: float


def _clamp_factor(factor: float) -> float:
    return min(max(float(factor), 0.0), 1.0)


def explode_component(
    part: Solid,
    direction: VectorLike,
    distance: float,
    factor: float = 1.0,
) -> Solid:
    """Translate ``part`` by ``normalize(direction) * distance * factor``.

    A zero direction leaves the part in place.
    """
    direction = Vector3.of(direction)
    factor = _clamp_factor(factor)
    if direction.is_zero() or factor == 0.0 or distance == 0.0:
        return part
    return part.translate(direction.normalized() * (float(distance) * factor))


def radial_explode(parts: Sequence[Solid], center: VectorLike, factor: float = 1.0) -> List[Solid]:
    """Push every part away from ``center`` by its own distance to it.

    Parts whose bounding-box centre sits on ``center`` stay put.
    """
    center = Vector3.of(center)
    exploded = []
    for part in parts:
        offset = part.bounding_box.center - center
        if offset.length < RADIAL_MIN_DISTANCE:
            logger.debug("Part at explosion centre; left unmoved")
            exploded.append(part)
            continue
        exploded.append(explode_component(part, offset, offset.length, factor))
    logger.debug("Radial explode: %d parts, factor %.3f", len(exploded), _clamp_factor(factor))
    return exploded


def directional_explode(
    parts: Sequence[Solid],
    directions: Sequence[Optional[VectorLike]],
    distances: Sequence[Optional[float]],
    factor: float = 1.0,
) -> List[Solid]:
    """Per-part directions and distances.

    Missing entries (lists shorter than ``parts``, or ``None``) default to
    +Z and a distance of 10.
    """
    exploded = []
    for index, part in enumerate(parts):
        direction = directions[index] if index < len(directions) else None
        distance = distances[index] if index < len(distances) else None
        exploded.append(explode_component(
            part,
            DEFAULT_DIRECTION if direction is None else direction,
            DEFAULT_DISTANCE if distance is None else distance,
            factor,
        ))
    logger.debug("Directional explode: %d parts, factor %.3f", len(exploded), _clamp_factor(factor))
    return exploded


def axis_explode(
    parts: Sequence[Solid],
    axis: str,
    positions: Sequence[float],
    spacing: float = 10.0,
    factor: float = 1.0,
) -> List[Solid]:
    """Separate parts along one world axis: part ``i`` moves ``positions[i] * spacing``.

    Raises:
        InvalidIdentifierError: if ``axis`` is not one of ``x``, ``y``, ``z``.
    """
    key = str(axis).lower()
    if key not in AXES:
        raise InvalidIdentifierError(
            f"Invalid axis: {axis!r}. Valid options are: {', '.join(AXES)}"
        )
    direction = [0.0, 0.0, 0.0]
    direction[AXES[key]] = 1.0

    exploded = []
    for index, part in enumerate(parts):
        position = positions[index] if index < len(positions) else 0.0
        exploded.append(explode_component(part, direction, position * spacing, factor))
    logger.debug("Axis explode along %s: %d parts", key, len(exploded))
    return exploded


def layered_explode(parts: Sequence[Solid], base_spacing: float = 10.0, factor: float = 1.0) -> List[Solid]:
    """Lift part ``i`` by ``base_spacing * (i + 1)`` along +Z."""
    return [
        explode_component(part, DEFAULT_DIRECTION, base_spacing * (index + 1), factor)
        for index, part in enumerate(parts)
    ]


def explode_parts(parts: Sequence[ExplodablePart], factor: float = 1.0) -> List[Solid]:
    return [
        explode_component(part.shape, part.direction, part.distance, factor)
        for part in parts
    ]
