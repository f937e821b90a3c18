#!/usr/bin/env python3
"""Build one catalogue model and export it as STL plus a technical drawing."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cad_layout import LayoutError
from cad_layout.models import MODEL_FUNCTIONS, build_model, model_parameters, model_slug
from cad_layout.technical_drawing import (
    create_orthographic_projections,
    exportable_model,
    process_projections_for_rendering,
    render_drawing_svg,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build a parametric model, export STL and an SVG drawing"
    )
    parser.add_argument(
        "--model", default="Cuboid", help="Model display name or slug (see --list)"
    )
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Model parameter override; repeatable",
    )
    parser.add_argument(
        "--explode",
        type=float,
        default=None,
        help="Explosion factor 0-1 for models that support it",
    )
    parser.add_argument("--out-dir", default="output", help="Output directory")
    parser.add_argument(
        "--list", action="store_true", help="List models and their parameters"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logs"
    )
    return parser


def parse_value(raw: str) -> Any:
    """``"3"`` -> 3, ``"2.5"`` -> 2.5, ``"true"`` -> True, else the string."""
    lowered = raw.strip().lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    for cast in (int, float):
        try:
            return cast(raw)
        except ValueError:
            continue
    return raw.strip()


def parse_params(items: List[str]) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Expected KEY=VALUE, got {item!r}")
        params[key.strip()] = parse_value(value)
    return params


def _list_models() -> None:
    for name in MODEL_FUNCTIONS:
        defaults = ", ".join(f"{k}={v}" for k, v in model_parameters(name).items())
        print(f"{model_slug(name):<26} {name}  ({defaults})")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        _list_models()
        return 0

    try:
        params = parse_params(args.param)
        if args.explode is not None:
            params["explode"] = args.explode
        model = build_model(args.model, **params)
    except (LayoutError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    slug = model_slug(args.model)

    stl_path = exportable_model(model).export(str(out_dir / f"{slug}.stl"))
    processed = process_projections_for_rendering(create_orthographic_projections(model))
    svg_path = render_drawing_svg(processed, str(out_dir / f"{slug}_drawing.svg"))
    logger.info("Built %s", args.model)

    print(stl_path)
    print(svg_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
