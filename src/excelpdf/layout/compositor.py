from __future__ import annotations

from typing import Iterable

from loguru import logger

from ..model import (
    DEFAULT_STYLE,
    BoxStyle,
    CellData,
    CellRange,
    ContentLayer,
    ConvertOptions,
    Font,
    ImageLayer,
    MergedRegion,
    PageLayout,
    PrintTarget,
    RenderableUnit,
    SheetDoc,
    Style,
    TextLayer,
    WorkbookDoc,
)
from ..reader.colors import ColorPalette
from ..reader.images import ImageInfo, probe_image
from ..reader.utils import rowcol_to_coord
from ..reader.values import display_text, is_numeric
from .borders import resolve_borders
from .color import resolve_fill_color, resolve_font_color
from .dimensions import SheetDimensions, page_geometry
from .merges import MergeIndex
from .orientation import resolve_orientation
from .overlay import EMPTY_OVERLAY, OverlayStore

MIN_CONTENT_SIZE = 1.0
TRIM_CHARS = " \n"


class CellCompositor:
    def __init__(
        self,
        sheet: SheetDoc,
        palette: ColorPalette,
        options: ConvertOptions | None = None,
        overlay: OverlayStore | None = None,
        log=None,
    ) -> None:
        self.sheet = sheet
        self.palette = palette
        self.options = options or ConvertOptions()
        self.overlay = overlay or EMPTY_OVERLAY
        self.log = (log or logger).bind(sheet=sheet.name)
        self.merges = MergeIndex(sheet.merges, sheet_name=sheet.name, log=self.log)
        self._probed: dict[bytes, ImageInfo | None] = {}

    def compose(self, bound: CellRange) -> PageLayout:
        page_width, page_height, margin = page_geometry(self.options)
        dims = SheetDimensions(self.sheet, bound, page_width - 2 * margin)
        page = PageLayout(
            sheet_name=self.sheet.name,
            bound=bound,
            page_width=page_width,
            page_height=page_height,
            margin=margin,
            page_color=self.options.page_color,
            column_widths=dims.column_widths,
            row_heights=list(dims.row_heights),
        )

        visible = {region: region.intersection(bound) for region in self.merges.regions_in(bound)}
        for row in bound.rows:
            for col in bound.cols:
                unit = self._compose_position(row, col, bound, dims, visible)
                if unit is not None:
                    page.units.append(unit)

        self.log.info(
            "Composed {} unit(s) for {}!{}",
            len(page.units),
            self.sheet.name,
            bound.ref,
        )
        return page

    def _compose_position(
        self,
        row: int,
        col: int,
        bound: CellRange,
        dims: SheetDimensions,
        visible: dict[MergedRegion, CellRange],
    ) -> RenderableUnit | None:
        region = self.merges.region_at(row, col)
        span = CellRange(row, row, col, col)
        anchor_row, anchor_col = row, col
        if region is not None:
            # a region clipped by the bound emits at its first visible position
            clipped = visible[region]
            if (row, col) != (clipped.first_row, clipped.first_col):
                return None
            span = clipped
            anchor_row, anchor_col = region.first_row, region.first_col

        cell = self.sheet.cell(anchor_row, anchor_col)
        style = cell.style if cell is not None else DEFAULT_STYLE
        width = dims.span_width(span.first_col, span.last_col)
        height = dims.span_height(span.first_row, span.last_row)
        box = BoxStyle(
            borders=resolve_borders(self.sheet, span.first_row, span.first_col, span if region else None),
            fill=resolve_fill_color(style, self.palette),
        )

        text = self._text_for(anchor_row, anchor_col, region, cell)
        coord = rowcol_to_coord(row, col)
        layers: list[ContentLayer] = []
        if width < MIN_CONTENT_SIZE or height < MIN_CONTENT_SIZE:
            if text:
                self.log.debug("Dropping content of {}: {:.2f}x{:.2f}pt is too small", coord, width, height)
        else:
            image = self._image_layer(anchor_row, anchor_col, region, width, height, coord)
            if image is not None:
                layers.append(image)
            if text:
                layers.append(self._text_layer(text, cell, style))

        if self.options.debug:
            self._trace(coord, cell, style, text, width, height, box)

        if not layers and box.is_trivial and region is None:
            return None

        return RenderableUnit(
            row=row,
            col=col,
            grid_row=row - bound.first_row,
            grid_col=col - bound.first_col,
            rowspan=span.last_row - span.first_row + 1,
            colspan=span.last_col - span.first_col + 1,
            width=width,
            height=height,
            box=box,
            layers=layers,
        )

    def _text_for(self, row: int, col: int, region: MergedRegion | None, cell: CellData | None) -> str:
        override = self.overlay.value_for(row, col, region)
        if override is not None:
            return override
        if cell is None:
            return ""
        return display_text(cell.value, cell.style.number_format).strip(TRIM_CHARS)

    def _text_layer(self, text: str, cell: CellData | None, style: Style) -> TextLayer:
        if cell is None:
            font = Font(family=self.options.default_font_family, size=self.options.default_font_size)
        else:
            font = style.font
        orientation = resolve_orientation(
            style.rotation,
            style.horizontal,
            style.vertical,
            numeric=cell is not None and is_numeric(cell.value),
            indent=style.indent,
        )
        return TextLayer(
            text=text,
            font=font,
            orientation=orientation,
            color=resolve_font_color(style, self.palette),
        )

    def _image_layer(
        self,
        row: int,
        col: int,
        region: MergedRegion | None,
        width: float,
        height: float,
        coord: str,
    ) -> ImageLayer | None:
        data = self.overlay.image_for(row, col, region)
        if data is None:
            data = self._embedded_image(row, col, region)
        if data is None:
            return None

        if data not in self._probed:
            self._probed[data] = probe_image(data, label=f"{self.sheet.name}!{coord}", log=self.log)
        info = self._probed[data]
        if info is None:
            return None
        return ImageLayer(
            data=data,
            format=info.format,
            pixel_width=info.width,
            pixel_height=info.height,
            max_width=width,
            max_height=height,
        )

    def _embedded_image(self, row: int, col: int, region: MergedRegion | None) -> bytes | None:
        picture = self.sheet.images.get((row, col))
        if picture is not None:
            return picture.data
        if region is None:
            return None
        inside = sorted(key for key in self.sheet.images if region.contains(*key))
        if not inside:
            return None
        return self.sheet.images[inside[0]].data

    def _trace(
        self,
        coord: str,
        cell: CellData | None,
        style: Style,
        text: str,
        width: float,
        height: float,
        box: BoxStyle,
    ) -> None:
        font = style.font
        flags = " ".join(
            name for name, on in (("bold", font.bold), ("italic", font.italic), ("underline", font.underline)) if on
        )
        self.log.debug(
            "cell {} value={!r} size={:.2f}x{:.2f}pt rotation={} align={}/{} font={} {}pt {} fill={} present={}",
            coord,
            text,
            width,
            height,
            style.rotation,
            style.horizontal,
            style.vertical,
            font.family,
            font.size,
            flags or "regular",
            box.fill or "none",
            cell is not None,
        )


def compose_pages(
    workbook: WorkbookDoc,
    targets: Iterable[PrintTarget],
    overlay: OverlayStore | None = None,
    options: ConvertOptions | None = None,
    log=None,
) -> list[PageLayout]:
    options = options or workbook.options
    compositors: dict[int, CellCompositor] = {}
    pages: list[PageLayout] = []
    for target in targets:
        compositor = compositors.get(target.sheet.index)
        if compositor is None:
            compositor = CellCompositor(target.sheet, workbook.palette, options, overlay, log)
            compositors[target.sheet.index] = compositor
        pages.append(compositor.compose(target.bound))
    return pages
