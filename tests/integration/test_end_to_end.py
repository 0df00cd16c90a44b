from __future__ import annotations

from io import BytesIO
from pathlib import Path

import pytest
from openpyxl import Workbook
from openpyxl.drawing.image import Image as XLImage

from excelpdf import (
    ConvertOptions,
    UnsupportedWorkbookError,
    WorkbookNotFoundError,
    convert_xlsx_to_html,
    convert_xlsx_to_pdf,
    layout_workbook,
    load_workbook,
)
from excelpdf.layout import compose_pages, resolve_targets
from excelpdf.model import FormulaResult, NumberValue
from excelpdf.renderer import render_pages
from tests.helpers import RecordingRenderer


def test_reader_projects_workbook(sample_workbook: Path) -> None:
    workbook = load_workbook(sample_workbook)

    assert workbook.sheet_names == ["Summary", "Detail", "Secret"]
    assert workbook.sheets[2].hidden
    summary = workbook.sheets[0]

    assert summary.merges[0].ref == "A1:C1"
    assert summary.cell(1, 2).value == NumberValue(1234.5)
    formula = summary.cell(2, 2).value
    assert isinstance(formula, FormulaResult)
    assert formula.formula == "=1+2"
    assert summary.col_widths[0] == 20 * 256
    assert summary.row_heights[0] == 30.0
    assert summary.images[(1, 3)].format == "png"

    title = summary.cell(0, 0).style
    assert title.font.family == "Arial"
    assert title.font.bold
    assert title.border_top.style == "thick"
    assert summary.cell(2, 1).style.rotation == 90


def test_formulas_can_be_skipped(sample_workbook: Path) -> None:
    workbook = load_workbook(sample_workbook, ConvertOptions(include_formulas=False))
    # the unstyled formula cell has no cached value to keep
    assert workbook.sheets[0].cell(2, 2) is None


def test_layout_skips_hidden_sheets(sample_workbook: Path) -> None:
    pages = layout_workbook(sample_workbook)

    assert [page.sheet_name for page in pages] == ["Summary", "Detail"]
    assert pages[0].bound.ref == "A1:D3"
    assert pages[1].bound.ref == "A1:B2"


def test_summary_page_units(sample_workbook: Path) -> None:
    page = layout_workbook(sample_workbook)[0]

    title = page.unit_at(0, 0)
    assert title.colspan == 3
    assert title.box.borders.top == 2.5
    assert title.text_layer.text == "Quarterly report"
    assert page.row_heights[0] == 30.0

    assert page.unit_at(1, 0).box.borders.right == 1.5
    assert page.unit_at(1, 1).box.borders.left == 1.5
    amount = page.unit_at(1, 2).text_layer
    assert amount.text == "1,234.50"
    assert amount.orientation.h_align == "right"

    assert page.unit_at(1, 3).image_layer.pixel_width == 40
    assert page.unit_at(2, 0).box.fill == "FFFF00"
    assert page.unit_at(2, 1).text_layer.orientation.sideways
    # no cached result was saved for the formula
    assert page.unit_at(2, 2) is None


def test_overlay_applies_to_every_sheet(sample_workbook: Path) -> None:
    pages = layout_workbook(sample_workbook, values={"B2": "New Value"})
    assert [page.unit_at(1, 1).text_layer.text for page in pages] == ["New Value", "New Value"]


def test_scoped_layout(sample_workbook: Path) -> None:
    pages = layout_workbook(sample_workbook, scopes=["Detail!A1:B2", "Summary!C2"])

    assert [(page.sheet_name, page.bound.ref) for page in pages] == [("Detail", "A1:B2"), ("Summary", "C2")]
    assert [unit.text_layer.text for unit in pages[0].units] == ["Item", "Qty", "Widget", "4"]


def test_pdf_output(sample_workbook: Path, tmp_path: Path) -> None:
    output = convert_xlsx_to_pdf(sample_workbook, tmp_path / "out" / "report.pdf")

    assert output.exists()
    assert output.read_bytes().startswith(b"%PDF")


def test_html_output(sample_workbook: Path) -> None:
    html = convert_xlsx_to_html(sample_workbook, values={"B2": "New Value"})

    assert "<title>sample.xlsx</title>" in html
    assert html.count('<table class="sv-grid">') == 2
    assert 'colspan="3"' in html
    assert "Quarterly report" in html
    assert "New Value" in html
    assert "Original" not in html
    assert "hidden" not in html.split("<body>")[1]


def test_recording_renderer_sees_row_major_order(sample_workbook: Path) -> None:
    workbook = load_workbook(sample_workbook)
    pages = compose_pages(workbook, resolve_targets(workbook, ["Detail"]))
    renderer = RecordingRenderer()

    assert render_pages(pages, renderer) == 1
    assert [call[1:3] for call in renderer.placed()] == [(0, 0), (0, 1), (1, 0), (1, 1)]


def test_missing_workbook(tmp_path: Path) -> None:
    with pytest.raises(WorkbookNotFoundError):
        layout_workbook(tmp_path / "missing.xlsx")


def test_unsupported_workbook(tmp_path: Path) -> None:
    path = tmp_path / "data.csv"
    path.write_text("a,b\n1,2\n", encoding="utf-8")
    with pytest.raises(UnsupportedWorkbookError):
        load_workbook(path)

    broken = tmp_path / "broken.xlsx"
    broken.write_bytes(b"not a zip")
    with pytest.raises(UnsupportedWorkbookError):
        load_workbook(broken)


def test_duplicate_picture_anchor_keeps_first(tmp_path: Path, png_bytes: bytes) -> None:
    wb = Workbook()
    ws = wb.active
    ws["A1"] = "logo"
    ws.add_image(XLImage(BytesIO(png_bytes)), "B2")
    ws.add_image(XLImage(BytesIO(png_bytes)), "B2")
    path = tmp_path / "pictures.xlsx"
    wb.save(path)

    workbook = load_workbook(path)
    assert list(workbook.sheets[0].images) == [(1, 1)]
    assert len(workbook.warnings) == 1
    assert "more than one picture" in workbook.warnings[0]
