from __future__ import annotations

import math
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Sequence

from loguru import logger
from reportlab.lib.colors import HexColor
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from .model import BoxStyle, ContentLayer, ConvertOptions, ImageLayer, PageLayout, TextLayer

CELL_PADDING = 1.5
LEADING_FACTOR = 1.2

STANDARD_FONTS = {
    "Helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "Times": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "Courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
}

SERIF_HINTS = ("times", "georgia", "cambria", "garamond", "mincho", "serif")
MONO_HINTS = ("courier", "consolas", "mono", "menlo", "gothic mono")


def pdf_font_name(family: str, *, bold: bool = False, italic: bool = False) -> str:
    lowered = (family or "").lower()
    if any(hint in lowered for hint in MONO_HINTS):
        base = "Courier"
    elif any(hint in lowered for hint in SERIF_HINTS) and "sans" not in lowered:
        base = "Times"
    else:
        base = "Helvetica"
    regular, bold_name, italic_name, bold_italic = STANDARD_FONTS[base]
    if bold and italic:
        return bold_italic
    if bold:
        return bold_name
    if italic:
        return italic_name
    return regular


@dataclass(slots=True)
class _PlacedCell:
    row: int
    col: int
    rowspan: int
    colspan: int
    box: BoxStyle
    layers: Sequence[ContentLayer]


class PdfPageRenderer:
    def __init__(self, output: str | Path | BinaryIO, options: ConvertOptions | None = None) -> None:
        self.options = options or ConvertOptions()
        target = str(output) if isinstance(output, (str, Path)) else output
        self._canvas = canvas.Canvas(target)
        self._page: PageLayout | None = None
        self._col_x: list[float] = []
        self._col_w: list[float] = []
        self._cells: list[_PlacedCell] = []
        self.physical_pages = 0

    def begin_page(self, page: PageLayout) -> None:
        self._page = page
        self._cells = []
        self._col_x = []
        self._col_w = []

    def define_columns(self, relative_widths: Sequence[float]) -> None:
        page = self._require_page()
        total = sum(relative_widths)
        if total <= 0:
            widths = [page.printable_width / max(1, len(relative_widths))] * len(relative_widths)
        else:
            widths = [w / total * page.printable_width for w in relative_widths]
        x = page.margin
        for width in widths:
            self._col_x.append(x)
            self._col_w.append(width)
            x += width

    def place_cell(
        self,
        row: int,
        col: int,
        rowspan: int,
        colspan: int,
        box: BoxStyle,
        layers: Sequence[ContentLayer],
    ) -> None:
        self._require_page()
        self._cells.append(_PlacedCell(row, col, rowspan, colspan, box, layers))

    def end_page(self) -> None:
        page = self._require_page()
        for first, last in self._paginate(page):
            self._draw_physical_page(page, first, last)
        self._page = None

    def close(self) -> None:
        if self.physical_pages == 0:
            logger.warning("No pages were rendered; writing an empty PDF")
        self._canvas.save()

    def _require_page(self) -> PageLayout:
        if self._page is None:
            raise RuntimeError("begin_page() must be called first")
        return self._page

    def _paginate(self, page: PageLayout) -> list[tuple[int, int]]:
        heights = page.row_heights
        if not heights:
            return [(0, -1)]
        # a break before row r is allowed unless some span crosses it
        blocked = [False] * (len(heights) + 1)
        for cell in self._cells:
            for r in range(cell.row + 1, min(cell.row + cell.rowspan, len(heights))):
                blocked[r] = True

        limit = page.printable_height
        chunks: list[tuple[int, int]] = []
        start = 0
        used = 0.0
        for r, height in enumerate(heights):
            if used + height > limit and r > start:
                cut = r
                while cut > start and blocked[cut]:
                    cut -= 1
                if cut == start:
                    cut = r
                chunks.append((start, cut - 1))
                start = cut
                used = sum(heights[start:r])
            used += height
        chunks.append((start, len(heights) - 1))
        return chunks

    def _draw_physical_page(self, page: PageLayout, first_row: int, last_row: int) -> None:
        c = self._canvas
        c.setPageSize((page.page_width, page.page_height))
        if page.page_color and page.page_color.upper() != "FFFFFF":
            c.setFillColor(HexColor("#" + page.page_color))
            c.rect(0, 0, page.page_width, page.page_height, stroke=0, fill=1)

        row_y: dict[int, float] = {}
        y = page.page_height - page.margin
        for r in range(first_row, last_row + 1):
            row_y[r] = y
            y -= page.row_heights[r]

        cells = [cell for cell in self._cells if first_row <= cell.row <= last_row]
        boxes = [(cell, self._cell_rect(page, cell, row_y)) for cell in cells]
        for cell, rect in boxes:
            self._draw_fill(cell.box, rect)
            for layer in cell.layers:
                if isinstance(layer, ImageLayer):
                    self._draw_image(layer, rect)
                elif isinstance(layer, TextLayer):
                    self._draw_text(layer, rect)
        for cell, rect in boxes:
            self._draw_borders(cell.box, rect)

        c.showPage()
        self.physical_pages += 1

    def _cell_rect(self, page: PageLayout, cell: _PlacedCell, row_y: dict[int, float]) -> tuple[float, float, float, float]:
        last_col = min(cell.col + cell.colspan, len(self._col_w))
        x = self._col_x[cell.col]
        width = sum(self._col_w[cell.col:last_col])
        last_row = min(cell.row + cell.rowspan, len(page.row_heights))
        height = sum(page.row_heights[cell.row:last_row])
        top = row_y[cell.row]
        return x, top - height, width, height

    def _draw_fill(self, box: BoxStyle, rect: tuple[float, float, float, float]) -> None:
        if not box.fill:
            return
        x, y, w, h = rect
        self._canvas.setFillColor(HexColor("#" + box.fill))
        self._canvas.rect(x, y, w, h, stroke=0, fill=1)

    def _draw_borders(self, box: BoxStyle, rect: tuple[float, float, float, float]) -> None:
        x, y, w, h = rect
        c = self._canvas
        c.setStrokeColor(HexColor("#000000"))
        edges = (
            (box.borders.top, (x, y + h, x + w, y + h)),
            (box.borders.bottom, (x, y, x + w, y)),
            (box.borders.left, (x, y, x, y + h)),
            (box.borders.right, (x + w, y, x + w, y + h)),
        )
        for width, line in edges:
            if width <= 0:
                continue
            c.setLineWidth(width)
            c.line(*line)

    def _draw_image(self, layer: ImageLayer, rect: tuple[float, float, float, float]) -> None:
        x, y, w, h = rect
        max_w = min(layer.max_width, w)
        max_h = min(layer.max_height, h)
        scale = min(max_w / layer.pixel_width, max_h / layer.pixel_height)
        draw_w = layer.pixel_width * scale
        draw_h = layer.pixel_height * scale
        self._canvas.drawImage(
            ImageReader(BytesIO(layer.data)),
            x + (w - draw_w) / 2,
            y + (h - draw_h) / 2,
            width=draw_w,
            height=draw_h,
            mask="auto",
        )

    def _draw_text(self, layer: TextLayer, rect: tuple[float, float, float, float]) -> None:
        x, y, w, h = rect
        orient = layer.orientation
        font = pdf_font_name(layer.font.family, bold=layer.font.bold, italic=layer.font.italic)
        size = layer.font.size or self.options.default_font_size
        leading = size * LEADING_FACTOR

        avail_w = w - 2 * CELL_PADDING - orient.padding_left
        avail_h = h - 2 * CELL_PADDING
        if avail_w <= 0 or avail_h <= 0:
            return

        if orient.sideways:
            angle = 90.0 if orient.direction == "left" else -90.0
            lines = layer.text.split("\n")
        else:
            angle = -orient.rotation
            # rotated text keeps its own line breaks
            if orient.wrap and not angle:
                lines = simpleSplit(layer.text, font, size, avail_w)
            else:
                lines = layer.text.split("\n")
        if not lines:
            return

        block_w = max(stringWidth(line, font, size) for line in lines)
        block_h = leading * len(lines)
        rad = math.radians(angle)
        bound_w = abs(math.cos(rad)) * block_w + abs(math.sin(rad)) * block_h
        bound_h = abs(math.sin(rad)) * block_w + abs(math.cos(rad)) * block_h
        scale = 1.0
        if orient.scale_to_fit and bound_w > 0 and bound_h > 0:
            scale = min(1.0, avail_w / bound_w, avail_h / bound_h)

        left = x + CELL_PADDING + orient.padding_left
        half_w = bound_w * scale / 2
        half_h = bound_h * scale / 2
        if orient.h_align == "right":
            cx = x + w - CELL_PADDING - half_w
        elif orient.h_align == "center":
            cx = x + w / 2
        else:
            cx = left + half_w
        if orient.v_align == "top":
            cy = y + h - CELL_PADDING - half_h
        elif orient.v_align == "bottom":
            cy = y + CELL_PADDING + half_h
        else:
            cy = y + h / 2

        line_align = "left" if orient.sideways else orient.h_align
        c = self._canvas
        c.saveState()
        c.translate(cx, cy)
        if angle:
            c.rotate(angle)
        c.scale(scale, scale)
        c.setFillColor(HexColor("#" + layer.color))
        c.setFont(font, size)
        baseline = block_h / 2 - size
        for line in lines:
            if line_align == "right":
                c.drawRightString(block_w / 2, baseline, line)
            elif line_align == "center":
                c.drawCentredString(0, baseline, line)
            else:
                c.drawString(-block_w / 2, baseline, line)
            if layer.font.underline and line:
                line_w = stringWidth(line, font, size)
                if line_align == "right":
                    start = block_w / 2 - line_w
                elif line_align == "center":
                    start = -line_w / 2
                else:
                    start = -block_w / 2
                c.setStrokeColor(HexColor("#" + layer.color))
                c.setLineWidth(max(0.5, size / 18))
                c.line(start, baseline - size * 0.12, start + line_w, baseline - size * 0.12)
            baseline -= leading
        c.restoreState()
