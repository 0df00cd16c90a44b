from __future__ import annotations

from io import BytesIO
from pathlib import Path

import pytest
from loguru import logger
from openpyxl import Workbook
from openpyxl.drawing.image import Image as XLImage
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from PIL import Image


@pytest.fixture
def caplog(caplog):
    handler_id = logger.add(
        caplog.handler,
        format="{message}",
        level=0,
        filter=lambda record: record["level"].no >= caplog.handler.level,
        enqueue=False,
    )
    yield caplog
    logger.remove(handler_id)


@pytest.fixture(scope="session")
def png_bytes() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (40, 20), (200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def sample_workbook(tmp_path: Path, png_bytes: bytes) -> Path:
    """Two visible sheets and one hidden sheet covering merges, borders, fills, rotation and a picture."""
    wb = Workbook()

    summary = wb.active
    summary.title = "Summary"
    summary["A1"] = "Quarterly report"
    summary.merge_cells("A1:C1")
    summary["A1"].font = Font(name="Arial", size=14, bold=True)
    summary["A1"].border = Border(top=Side(style="thick"))
    summary["A2"] = "Region"
    summary["B2"] = "Original"
    summary["C2"] = 1234.5
    summary["C2"].number_format = "#,##0.00"
    summary["A3"] = "Total"
    summary["C3"] = "=1+2"
    summary["A3"].fill = PatternFill(fill_type="solid", fgColor="FFFFFF00")
    summary["B3"].alignment = Alignment(text_rotation=90, vertical="top")
    summary["B3"] = "Up"
    summary["A2"].border = Border(right=Side(style="thin"))
    summary["B2"].border = Border(left=Side(style="medium"))
    summary.column_dimensions["A"].width = 20
    summary.row_dimensions[1].height = 30
    summary.add_image(XLImage(BytesIO(png_bytes)), "D2")

    detail = wb.create_sheet("Detail")
    detail["A1"] = "Item"
    detail["B1"] = "Qty"
    detail["A2"] = "Widget"
    detail["B2"] = 4

    secret = wb.create_sheet("Secret")
    secret["A1"] = "hidden"
    secret.sheet_state = "hidden"

    path = tmp_path / "sample.xlsx"
    wb.save(path)
    return path
