from __future__ import annotations

from pathlib import Path
from zipfile import BadZipFile

from loguru import logger
from openpyxl import load_workbook as openpyxl_load_workbook
from openpyxl.utils.cell import column_index_from_string, range_boundaries
from openpyxl.utils.exceptions import InvalidFileException

from ..errors import UnsupportedWorkbookError, WorkbookNotFoundError
from ..model import (
    BLANK,
    DEFAULT_STYLE,
    BorderSpec,
    CellData,
    CellRange,
    ColorRef,
    ConvertOptions,
    Fill,
    Font,
    FormulaResult,
    NO_BORDER,
    SheetDoc,
    SheetImage,
    Style,
    WorkbookDoc,
)
from .colors import ColorPalette
from .values import to_cell_value

SUPPORTED_SUFFIXES = {".xlsx", ".xlsm"}


class OpenpyxlWorkbookReader:
    def __init__(self, source_path: str | Path, options: ConvertOptions) -> None:
        self.source_path = Path(source_path)
        self.options = options
        self._style_cache: dict[int, Style] = {}
        self._log = logger.bind(source=self.source_path.name)

    def parse(self) -> WorkbookDoc:
        if not self.source_path.exists():
            raise WorkbookNotFoundError(f"Workbook not found: {self.source_path}")
        if self.source_path.suffix.lower() not in SUPPORTED_SUFFIXES:
            raise UnsupportedWorkbookError(
                f"Only .xlsx and .xlsm workbooks are supported, got {self.source_path.suffix!r}"
            )

        wb = self._open(data_only=True, read_only=False)
        formulas = self._collect_formulas() if self.options.include_formulas else {}

        workbook = WorkbookDoc(
            source_path=self.source_path,
            options=self.options,
            palette=ColorPalette.from_workbook(wb),
        )
        for index, ws in enumerate(wb.worksheets):
            sheet = self._parse_sheet(index, ws, formulas.get(ws.title, {}), workbook.warnings)
            workbook.sheets.append(sheet)

        self._log.info(
            "Loaded {} sheet(s) from {} ({} hidden)",
            len(workbook.sheets),
            self.source_path.name,
            sum(1 for sheet in workbook.sheets if sheet.hidden),
        )
        return workbook

    def _open(self, *, data_only: bool, read_only: bool):
        try:
            return openpyxl_load_workbook(self.source_path, data_only=data_only, read_only=read_only)
        except (InvalidFileException, BadZipFile, KeyError) as exc:
            raise UnsupportedWorkbookError(f"Cannot open workbook {self.source_path}: {exc}") from exc

    def _collect_formulas(self) -> dict[str, dict[tuple[int, int], str]]:
        wb = self._open(data_only=False, read_only=True)
        formulas: dict[str, dict[tuple[int, int], str]] = {}
        try:
            for ws in wb.worksheets:
                sheet_formulas: dict[tuple[int, int], str] = {}
                for row in ws.iter_rows():
                    for cell in row:
                        if getattr(cell, "data_type", None) != "f":
                            continue
                        text = getattr(cell.value, "text", cell.value)
                        sheet_formulas[(cell.row - 1, cell.column - 1)] = str(text)
                formulas[ws.title] = sheet_formulas
        finally:
            wb.close()
        return formulas

    def _parse_sheet(
        self,
        index: int,
        ws,
        formulas: dict[tuple[int, int], str],
        warnings: list[str],
    ) -> SheetDoc:
        sheet = SheetDoc(index=index, name=ws.title, state=ws.sheet_state or "visible")

        for row in ws.iter_rows():
            for cell in row:
                if cell.value is None and not cell.has_style:
                    continue
                key = (cell.row - 1, cell.column - 1)
                value = to_cell_value(cell.value, cell.data_type)
                if key in formulas:
                    value = FormulaResult(formula=formulas[key], cached=value)
                sheet.cells[key] = CellData(
                    row=key[0],
                    col=key[1],
                    value=value,
                    style=self._style_for(cell),
                )

        # formulas saved without a cached result read back as empty unstyled cells
        for key, formula in formulas.items():
            if key in sheet.cells:
                continue
            cell = ws._cells.get((key[0] + 1, key[1] + 1))
            sheet.cells[key] = CellData(
                row=key[0],
                col=key[1],
                value=FormulaResult(formula=formula, cached=BLANK),
                style=self._style_for(cell) if cell is not None else DEFAULT_STYLE,
            )

        for merged in ws.merged_cells.ranges:
            min_col, min_row, max_col, max_row = range_boundaries(str(merged))
            sheet.merges.append(CellRange(min_row - 1, max_row - 1, min_col - 1, max_col - 1))

        self._parse_dimensions(ws, sheet)
        self._parse_images(ws, sheet, warnings)
        return sheet

    def _parse_dimensions(self, ws, sheet: SheetDoc) -> None:
        sheet_format = ws.sheet_format
        default_width = sheet_format.defaultColWidth or sheet_format.baseColWidth or 8
        sheet.default_col_width = float(default_width) * 256
        if sheet_format.defaultRowHeight:
            sheet.default_row_height = float(sheet_format.defaultRowHeight)

        for key, dim in ws.column_dimensions.items():
            if not dim.width:
                continue
            first = dim.min or column_index_from_string(key)
            last = dim.max or first
            for col in range(first, last + 1):
                sheet.col_widths[col - 1] = float(dim.width) * 256

        for idx, dim in ws.row_dimensions.items():
            if dim.ht is not None:
                sheet.row_heights[idx - 1] = float(dim.ht)

    def _parse_images(self, ws, sheet: SheetDoc, warnings: list[str]) -> None:
        for image in getattr(ws, "_images", []):
            anchor = image.anchor
            if isinstance(anchor, str):
                min_col, min_row, _, _ = range_boundaries(anchor)
                row, col = min_row - 1, min_col - 1
            else:
                marker = getattr(anchor, "_from", None)
                if marker is None:
                    self._log.debug("Skipping picture without a cell anchor on {}", ws.title)
                    continue
                row, col = marker.row, marker.col

            if (row, col) in sheet.images:
                message = f"{ws.title}: more than one picture anchored at row {row + 1}, col {col + 1}; keeping the first"
                warnings.append(message)
                self._log.warning(message)
                continue
            sheet.images[(row, col)] = SheetImage(
                row=row,
                col=col,
                data=image._data(),
                format=(getattr(image, "format", None) or "").lower() or None,
            )

    def _style_for(self, cell) -> Style:
        style_id = cell.style_id
        cached = self._style_cache.get(style_id)
        if cached is not None:
            return cached

        alignment = cell.alignment
        rotation = int(alignment.textRotation or 0)
        style = Style(
            fill=_fill(cell.fill),
            border_top=_border_side(cell.border.top),
            border_bottom=_border_side(cell.border.bottom),
            border_left=_border_side(cell.border.left),
            border_right=_border_side(cell.border.right),
            horizontal=alignment.horizontal or "general",
            vertical=alignment.vertical or "bottom",
            rotation=rotation,
            indent=int(alignment.indent or 0),
            font=_font(cell.font),
            number_format=cell.number_format or "General",
        )
        self._style_cache[style_id] = style
        return style


def _color_ref(color) -> ColorRef | None:
    if color is None:
        return None
    tint = float(getattr(color, "tint", 0.0) or 0.0)
    kind = getattr(color, "type", None)
    if kind == "rgb":
        return ColorRef("rgb", color.rgb, tint)
    if kind == "indexed":
        return ColorRef("indexed", color.indexed, tint)
    if kind == "theme":
        return ColorRef("theme", color.theme, tint)
    if kind == "auto":
        return ColorRef("auto", None, tint)
    return None


def _fill(fill) -> Fill:
    pattern = getattr(fill, "patternType", None)
    if not pattern or pattern == "none":
        return Fill()
    return Fill(pattern=pattern, color=_color_ref(fill.fgColor))


def _border_side(side) -> BorderSpec:
    if side is None or not side.style:
        return NO_BORDER
    return BorderSpec(style=side.style)


def _font(font) -> Font:
    underline = font.u not in (None, "none")
    return Font(
        family=font.name or "Calibri",
        size=float(font.sz or 11.0),
        bold=bool(font.b),
        italic=bool(font.i),
        underline=underline,
        color=_color_ref(font.color),
    )
