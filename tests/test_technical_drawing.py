"""Tests for technical_drawing module and the kernel projection it consumes."""
import pytest
import trimesh

from cad_layout.errors import InvalidIdentifierError
from cad_layout.kernel import MeshSolid
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


class TestViewBoxes:
    """Parsing and combining SVG viewBoxes."""

    def test_combine_overlapping(self):
        assert combine_view_boxes("0 0 10 10", "5 5 10 10") == "0 0 15 15"

    def test_combine_disjoint_negative(self):
        assert combine_view_boxes("-10 -20 5 5", "3 4 2 1") == "-10 -20 15 25"

    def test_combine_is_symmetric(self):
        a, b = "1.5 2 3 4", "-1 7 2 2"
        assert combine_view_boxes(a, b) == combine_view_boxes(b, a)

    def test_missing_uses_default(self):
        assert combine_view_boxes(None, "200 200 10 10") == "0 0 210 210"
        assert combine_view_boxes("", "") == "0 0 100 100"

    @pytest.mark.parametrize("bad", ["1 2 3", "a b c d", "0 0 -5 5", "0 0 nan 1"])
    def test_invalid_uses_default(self, bad):
        assert ViewBox.parse(bad) == ViewBox.default()

    def test_parse_commas(self):
        assert ViewBox.parse("1,2, 3,4") == ViewBox(1, 2, 3, 4)

    def test_number_formatting(self):
        assert str(ViewBox(-0.0, 1.25, 10.0, 1e-9)) == "0 1.25 10 0"


class TestProjection:
    """MeshSolid.project feature-edge projection."""

    def test_cube_front_view(self, unit_cube):
        projection = unit_cube.project("front")
        assert len(projection.visible) == 4
        assert len(projection.hidden) == 0
        assert projection.visible.to_svg_view_box(5) == "-5 -15 20 20"

    def test_svg_paths_flip_y(self, unit_cube):
        paths = unit_cube.project("top").visible.to_svg_paths()
        assert len(paths) == 4
        assert all(p.startswith("M ") and " L " in p for p in paths)
        assert any("-10" in p for p in paths)

    def test_back_facing_sheet_is_hidden(self):
        mesh = trimesh.Trimesh(
            vertices=[[0, 0, 0], [1, 0, 0], [0, 0, 1]], faces=[[0, 2, 1]], process=False
        )
        projection = MeshSolid(mesh).project("front")
        assert len(projection.visible) == 0
        assert len(projection.hidden) == 3

    def test_empty_layer_has_no_view_box(self, unit_cube):
        assert unit_cube.project("front").hidden.to_svg_view_box(5) == ""

    def test_unknown_view(self, unit_cube):
        with pytest.raises(InvalidIdentifierError):
            unit_cube.project("isometric")


class TestProcessing:
    """Projection sets to renderable views."""

    def test_standard_views(self, unit_cube):
        processed = process_projections_for_rendering(create_orthographic_projections(unit_cube))
        assert set(processed.standard) == {"front", "top", "right"}
        for view in processed.standard.values():
            assert view.view_box == "-5 -15 20 20"
            assert len(view.visible_paths) == 4
        assert processed.parts == []

    def test_helper_parts(self, unit_cube, slab):
        model = model_with_helpers(unit_cube, [slab])
        projections = create_orthographic_projections(model)
        assert [p.name for p in projections.parts] == ["Main Component", "Helper Space 1"]
        processed = process_projections_for_rendering(projections).to_dict()
        assert processed["parts"][1]["views"]["front"]["viewBox"] == "-5 -25 40 30"
        assert set(processed["standard"]["top"]) == {"visible", "hidden", "viewBox"}

    def test_hidden_only_view_keeps_its_box(self):
        mesh = trimesh.Trimesh(
            vertices=[[0, 0, 0], [1, 0, 0], [0, 0, 1]], faces=[[0, 2, 1]], process=False
        )
        processed = process_projections_for_rendering(
            create_orthographic_projections(MeshSolid(mesh)), padding=0
        )
        assert processed.standard["front"].view_box == "0 -1 1 1"

    def test_exportable_model_strips_helpers(self, unit_cube, slab):
        assert exportable_model(ModelWithHelpers(unit_cube, [slab])) is unit_cube
        assert exportable_model(slab) is slab


class TestRenderDrawing:
    """SVG sheet output."""

    def test_writes_svg(self, unit_cube, slab, tmp_path):
        model = model_with_helpers(unit_cube, [slab])
        processed = process_projections_for_rendering(create_orthographic_projections(model))
        path = render_drawing_svg(processed, str(tmp_path / "drawing.svg"))
        text = (tmp_path / "drawing.svg").read_text(encoding="utf-8")
        assert path.endswith("drawing.svg")
        assert "<svg" in text
        assert "Front View" in text
        assert "Helper Space 1" in text
        assert "stroke-dasharray" in text
        assert 'viewBox="-5 -15 20 20"' in text
