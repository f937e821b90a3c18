"""
Technical drawings: orthographic projections combined into one sheet.

The kernel projects a solid into a visible and a hidden line set, each with
its own SVG viewBox. Overlaying them only works when both share a coordinate
frame, so every view's boxes are merged into the smallest rectangle that
contains both before rendering.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

import svgwrite

from cad_layout.config import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

STANDARD_VIEWS = ("front", "top", "right")


@dataclass(frozen=True)
class ViewBox:
    """An SVG ``x y width height`` rectangle."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def default(cls) -> "ViewBox":
        return cls(*DEFAULT_CONFIG.default_view_box)

    @classmethod
    def parse(cls, value: Optional[str], default: Optional["ViewBox"] = None) -> "ViewBox":
        """Parse ``"x y w h"`` (spaces or commas); anything unusable gives ``default``."""
        fallback = default if default is not None else cls.default()
        if not value or not isinstance(value, str):
            logger.debug("Missing viewBox, using default %s", fallback)
            return fallback
        parts = value.replace(",", " ").split()
        try:
            numbers = [float(p) for p in parts]
        except ValueError:
            numbers = []
        if (
            len(numbers) != 4
            or not all(math.isfinite(n) for n in numbers)
            or numbers[2] < 0
            or numbers[3] < 0
        ):
            logger.debug("Invalid viewBox %r, using default %s", value, fallback)
            return fallback
        return cls(*numbers)

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    def union(self, other: "ViewBox") -> "ViewBox":
        min_x = min(self.x, other.x)
        min_y = min(self.y, other.y)
        max_x = max(self.max_x, other.max_x)
        max_y = max(self.max_y, other.max_y)
        return ViewBox(min_x, min_y, max_x - min_x, max_y - min_y)

    @staticmethod
    def format_number(value: float) -> str:
        # + 0.0 turns -0.0 into 0.0
        return f"{round(float(value), 6) + 0.0:.10g}"

    def __str__(self) -> str:
        return " ".join(
            self.format_number(v) for v in (self.x, self.y, self.width, self.height)
        )


def combine_view_boxes(vb1: Optional[str], vb2: Optional[str]) -> str:
    """Smallest viewBox containing both inputs.

    >>> combine_view_boxes("0 0 10 10", "5 5 10 10")
    '0 0 15 15'
    """
    return str(ViewBox.parse(vb1).union(ViewBox.parse(vb2)))


# ─── Model containers ────────────────────────────────────────────────────────

@dataclass
class ModelWithHelpers:
    """A main solid plus helper volumes shown in drawings but never exported."""

    main: Any
    helper_spaces: List[Any] = field(default_factory=list)


def model_with_helpers(main: Any, helper_spaces: Sequence[Any]) -> ModelWithHelpers:
    return ModelWithHelpers(main=main, helper_spaces=list(helper_spaces))


def exportable_model(model: Union[ModelWithHelpers, Any]) -> Any:
    """The solid to export: the main model, stripped of helper spaces."""
    if isinstance(model, ModelWithHelpers):
        return model.main
    return model


# ─── Projections ─────────────────────────────────────────────────────────────

@dataclass
class PartProjections:
    name: str
    views: Dict[str, Any]


@dataclass
class OrthographicProjections:
    """Kernel projections keyed by view name, for the model and its parts."""

    standard: Dict[str, Any]
    parts: List[PartProjections] = field(default_factory=list)


@dataclass
class RenderedView:
    """One view ready to draw: both stroke sets in a shared viewBox."""

    visible_paths: List[str]
    hidden_paths: List[str]
    view_box: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "visible": {"paths": list(self.visible_paths)},
            "hidden": {"paths": list(self.hidden_paths)},
            "viewBox": self.view_box,
        }


@dataclass
class RenderedPart:
    name: str
    views: Dict[str, RenderedView]


@dataclass
class ProcessedProjections:
    standard: Dict[str, RenderedView]
    parts: List[RenderedPart] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "standard": {name: view.to_dict() for name, view in self.standard.items()},
            "parts": [
                {
                    "name": part.name,
                    "views": {name: view.to_dict() for name, view in part.views.items()},
                }
                for part in self.parts
            ],
        }


def create_orthographic_projections(model: Union[ModelWithHelpers, Any]) -> OrthographicProjections:
    """Front, top and right projections of the exportable model.

    Models with helper spaces additionally get one set of views for the main
    component and one per helper space.
    """
    main = exportable_model(model)
    standard = {view: main.project(view) for view in STANDARD_VIEWS}

    parts: List[PartProjections] = []
    if isinstance(model, ModelWithHelpers):
        parts.append(PartProjections(
            name="Main Component",
            views={view: model.main.project(view) for view in STANDARD_VIEWS},
        ))
        for index, helper in enumerate(model.helper_spaces):
            parts.append(PartProjections(
                name=f"Helper Space {index + 1}",
                views={view: helper.project(view) for view in STANDARD_VIEWS},
            ))
    logger.debug("Created projections: %d standard views, %d parts", len(standard), len(parts))
    return OrthographicProjections(standard=standard, parts=parts)


def _render_view(view: Any, padding: float) -> RenderedView:
    layers = []
    for layer in (getattr(view, "visible", None), getattr(view, "hidden", None)):
        if layer is None:
            layers.append(([], ""))
        else:
            layers.append((list(layer.to_svg_paths()), layer.to_svg_view_box(padding)))
    (visible_paths, visible_box), (hidden_paths, hidden_box) = layers

    boxes = [box for box in (visible_box, hidden_box) if box]
    if len(boxes) == 2:
        view_box = combine_view_boxes(*boxes)
    elif boxes:
        view_box = str(ViewBox.parse(boxes[0]))
    else:
        view_box = str(ViewBox.default())
    return RenderedView(visible_paths, hidden_paths, view_box)


def process_projections_for_rendering(
    projections: OrthographicProjections,
    padding: float = DEFAULT_CONFIG.view_box_padding,
) -> ProcessedProjections:
    """Extract SVG paths per view and give visible/hidden strokes one viewBox."""
    standard = {
        name: _render_view(view, padding) for name, view in projections.standard.items()
    }
    parts = [
        RenderedPart(
            name=part.name,
            views={name: _render_view(view, padding) for name, view in part.views.items()},
        )
        for part in projections.parts
    ]
    return ProcessedProjections(standard=standard, parts=parts)


# ─── SVG sheet ───────────────────────────────────────────────────────────────

SHEET_STYLE = """
    .visible { stroke: #000000; stroke-width: 1; fill: none; vector-effect: non-scaling-stroke; }
    .hidden { stroke: #777777; stroke-width: 0.5; stroke-dasharray: 3 1; fill: none; vector-effect: non-scaling-stroke; }
    .frame { stroke: #aaaaaa; stroke-width: 0.5; fill: #f8f8f8; }
    .title { font-size: 10px; font-family: Arial, sans-serif; fill: #333; }
"""


def _add_view(dwg, view: RenderedView, title: str, x: float, y: float, width: float, height: float):
    dwg.add(dwg.rect(insert=(x, y), size=(width, height), class_="frame"))
    dwg.add(dwg.text(title, insert=(x + 4, y + 12), class_="title"))
    box = ViewBox.parse(view.view_box)
    # zero-size boxes (a view of a flat part seen edge-on) still need a scale
    box = ViewBox(box.x, box.y, max(box.width, 1e-6), max(box.height, 1e-6))
    nested = dwg.svg(insert=(x, y + 16), size=(width, height - 16), viewBox=str(box))
    for d in view.hidden_paths:
        nested.add(dwg.path(d=d, class_="hidden"))
    for d in view.visible_paths:
        nested.add(dwg.path(d=d, class_="visible"))
    dwg.add(nested)


def render_drawing_svg(
    processed: ProcessedProjections,
    filepath: str,
    view_size: float = 200.0,
    margin: float = 20.0,
    include_parts: bool = True,
) -> str:
    """Lay out the standard views on one SVG sheet and save it.

    Top view above the front view, right view beside it; part views follow
    in rows below at half size.

    Returns:
        Path to the created SVG file
    """
    cell = view_size + margin
    slots = {
        "top": (margin, margin),
        "front": (margin, margin + cell),
        "right": (margin + cell, margin + cell),
    }
    part_size = view_size / 2
    part_rows = len(processed.parts) if include_parts else 0
    width = margin + 2 * cell
    height = margin + 2 * cell + part_rows * (part_size + margin + 14)

    dwg = svgwrite.Drawing(
        filepath,
        size=(f"{width}mm", f"{height}mm"),
        viewBox=f"0 0 {width} {height}",
    )
    dwg.defs.add(dwg.style(SHEET_STYLE))

    for name, view in processed.standard.items():
        if name not in slots:
            continue
        x, y = slots[name]
        _add_view(dwg, view, f"{name.title()} View", x, y, view_size, view_size)

    y = margin + 2 * cell
    for part in processed.parts if include_parts else []:
        dwg.add(dwg.text(part.name, insert=(margin, y + 10), class_="title"))
        x = margin
        for name, view in part.views.items():
            _add_view(dwg, view, name, x, y + 14, part_size, part_size)
            x += part_size + margin / 2
        y += part_size + margin + 14

    dwg.save()
    logger.debug("Wrote drawing %s (%d standard views)", filepath, len(processed.standard))
    return filepath
