from __future__ import annotations

from typing import Literal

from ..model import BorderSpec, BorderWidths, CellRange, MergedRegion, SheetDoc

Side = Literal["top", "bottom", "left", "right"]

BORDER_WIDTHS = {
    "none": 0.0,
    "thin": 1.0,
    "medium": 1.5,
    "thick": 2.5,
}
DEFAULT_BORDER_WIDTH = 1.0

OPPOSITE: dict[str, str] = {
    "top": "bottom",
    "bottom": "top",
    "left": "right",
    "right": "left",
}


def border_width(spec: BorderSpec | None) -> float:
    if spec is None or not spec.style:
        return 0.0
    return BORDER_WIDTHS.get(spec.style, DEFAULT_BORDER_WIDTH)


def effective_border_width(
    sheet: SheetDoc,
    row: int,
    col: int,
    side: Side,
    region: MergedRegion | None = None,
) -> float:
    """Width of one edge of a cell, or of a merged region's whole edge.

    Each position along the edge takes the wider of the cell's own border and
    the touching neighbour's opposite border; the edge is the widest of those.
    """
    span = region or CellRange(row, row, col, col)
    if side not in OPPOSITE:
        raise ValueError(f"Unknown border side: {side!r}")

    widest = 0.0
    for own_row, own_col, near_row, near_col in _edge_pairs(span, side):
        own = _side_width(sheet, own_row, own_col, side)
        near = _side_width(sheet, near_row, near_col, OPPOSITE[side])
        widest = max(widest, own, near)
    return widest


def resolve_borders(sheet: SheetDoc, row: int, col: int, region: MergedRegion | None = None) -> BorderWidths:
    return BorderWidths(
        top=effective_border_width(sheet, row, col, "top", region),
        bottom=effective_border_width(sheet, row, col, "bottom", region),
        left=effective_border_width(sheet, row, col, "left", region),
        right=effective_border_width(sheet, row, col, "right", region),
    )


def _edge_pairs(span: CellRange, side: str):
    if side == "top":
        return [(span.first_row, c, span.first_row - 1, c) for c in span.cols]
    if side == "bottom":
        return [(span.last_row, c, span.last_row + 1, c) for c in span.cols]
    if side == "left":
        return [(r, span.first_col, r, span.first_col - 1) for r in span.rows]
    return [(r, span.last_col, r, span.last_col + 1) for r in span.rows]


def _side_width(sheet: SheetDoc, row: int, col: int, side: str) -> float:
    if row < 0 or col < 0:
        return 0.0
    cell = sheet.cell(row, col)
    if cell is None:
        return 0.0
    return border_width(cell.style.border(side))
