from __future__ import annotations

from reportlab.lib import pagesizes
from reportlab.lib.units import cm

from ..model import CellRange, ConvertOptions, SheetDoc

POINTS_PER_CHAR = 6.0
DEFAULT_ROW_HEIGHT = 15.0


def column_points(raw: float) -> float:
    """Column width in 1/256 character units to points."""
    return raw / 256 * POINTS_PER_CHAR


def row_points(sheet: SheetDoc, row: int) -> float:
    height = sheet.row_heights.get(row)
    if height is not None and height > 0:
        return height
    if sheet.default_row_height is not None and sheet.default_row_height > 0:
        return sheet.default_row_height
    return DEFAULT_ROW_HEIGHT


def page_geometry(options: ConvertOptions) -> tuple[float, float, float]:
    size = getattr(pagesizes, options.page_size.upper(), None)
    if not isinstance(size, tuple):
        raise ValueError(f"Unknown page size: {options.page_size!r}")
    if options.orientation == "landscape":
        size = pagesizes.landscape(size)
    else:
        size = pagesizes.portrait(size)
    return float(size[0]), float(size[1]), options.margin_cm * cm


class SheetDimensions:
    def __init__(self, sheet: SheetDoc, bound: CellRange, printable_width: float) -> None:
        self.bound = bound
        self.printable_width = printable_width
        self.column_points = [
            column_points(sheet.col_widths.get(col, sheet.default_col_width)) for col in bound.cols
        ]
        self.total_points = sum(self.column_points)
        self.row_heights = [row_points(sheet, row) for row in bound.rows]

    def page_width(self, col: int) -> float:
        idx = col - self.bound.first_col
        if idx < 0 or idx >= len(self.column_points):
            return 0.0
        if self.total_points <= 0:
            return self.printable_width / len(self.column_points)
        return self.column_points[idx] / self.total_points * self.printable_width

    @property
    def column_widths(self) -> list[float]:
        return [self.page_width(col) for col in self.bound.cols]

    @property
    def relative_widths(self) -> list[float]:
        if self.total_points <= 0:
            return [1.0] * len(self.column_points)
        return list(self.column_points)

    def span_width(self, first_col: int, last_col: int) -> float:
        first = max(first_col, self.bound.first_col)
        last = min(last_col, self.bound.last_col)
        return sum(self.page_width(col) for col in range(first, last + 1))

    def span_height(self, first_row: int, last_row: int) -> float:
        first = max(first_row, self.bound.first_row)
        last = min(last_row, self.bound.last_row)
        offset = self.bound.first_row
        return sum(self.row_heights[row - offset] for row in range(first, last + 1))
