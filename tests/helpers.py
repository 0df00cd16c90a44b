from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

from excelpdf.model import (
    BorderSpec,
    CellData,
    CellRange,
    ConvertOptions,
    SheetDoc,
    SheetImage,
    Style,
    WorkbookDoc,
)
from excelpdf.reader.colors import ColorPalette
from excelpdf.reader.utils import coord_to_rowcol, parse_range_ref
from excelpdf.reader.values import to_cell_value


def style(**kwargs: Any) -> Style:
    """Style with border shorthands: top="thick" becomes border_top=BorderSpec("thick")."""
    for side in ("top", "bottom", "left", "right"):
        if side in kwargs:
            kwargs[f"border_{side}"] = BorderSpec(kwargs.pop(side))
    return Style(**kwargs)


def make_sheet(
    cells: dict[str, Any] | None = None,
    *,
    name: str = "Sheet1",
    index: int = 0,
    state: str = "visible",
    styles: dict[str, Style] | None = None,
    merges: Sequence[str] = (),
    col_widths: dict[int, float] | None = None,
    row_heights: dict[int, float] | None = None,
    images: dict[str, bytes] | None = None,
) -> SheetDoc:
    sheet = SheetDoc(index=index, name=name, state=state)
    coords = set(cells or {}) | set(styles or {})
    for coord in coords:
        row, col = coord_to_rowcol(coord)
        raw = (cells or {}).get(coord)
        # plain python values go through the reader; model values pass as-is
        value = to_cell_value(raw) if isinstance(raw, (str, int, float, type(None))) else raw
        sheet.cells[(row, col)] = CellData(
            row=row,
            col=col,
            value=value,
            style=(styles or {}).get(coord, Style()),
        )
    sheet.merges = [parse_range_ref(ref) for ref in merges]
    sheet.col_widths = dict(col_widths or {})
    sheet.row_heights = dict(row_heights or {})
    for coord, data in (images or {}).items():
        row, col = coord_to_rowcol(coord)
        sheet.images[(row, col)] = SheetImage(row=row, col=col, data=data, format="png")
    return sheet


def make_workbook(*sheets: SheetDoc) -> WorkbookDoc:
    return WorkbookDoc(
        source_path=Path("memory.xlsx"),
        options=ConvertOptions(),
        palette=ColorPalette(),
        sheets=list(sheets),
    )


def bound(ref: str) -> CellRange:
    return parse_range_ref(ref)


class RecordingRenderer:
    """Page renderer that records every call for inspection."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.closed = False

    def begin_page(self, page) -> None:
        self.calls.append(("begin_page", page.sheet_name))

    def define_columns(self, relative_widths) -> None:
        self.calls.append(("define_columns", list(relative_widths)))

    def place_cell(self, row, col, rowspan, colspan, box, layers) -> None:
        self.calls.append(("place_cell", row, col, rowspan, colspan, box, list(layers)))

    def end_page(self) -> None:
        self.calls.append(("end_page",))

    def close(self) -> None:
        self.closed = True

    def placed(self) -> list[tuple]:
        return [call for call in self.calls if call[0] == "place_cell"]
