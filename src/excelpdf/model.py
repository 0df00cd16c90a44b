from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal, Union

if TYPE_CHECKING:
    from .reader.colors import ColorPalette


@dataclass(slots=True)
class ConvertOptions:
    page_size: str = "A4"
    orientation: Literal["portrait", "landscape"] = "portrait"
    margin_cm: float = 0.5
    page_color: str = "FFFFFF"
    default_font_family: str = "Arial"
    default_font_size: float = 10.0
    include_formulas: bool = True
    debug: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConvertOptions":
        known = {name: data[name] for name in cls.__dataclass_fields__ if name in data}
        return cls(**known)


@dataclass(slots=True, frozen=True)
class CellRange:
    first_row: int
    last_row: int
    first_col: int
    last_col: int

    @property
    def ref(self) -> str:
        from .reader.utils import rowcol_to_coord

        start = rowcol_to_coord(self.first_row, self.first_col)
        if self.first_row == self.last_row and self.first_col == self.last_col:
            return start
        return f"{start}:{rowcol_to_coord(self.last_row, self.last_col)}"

    @property
    def rows(self) -> range:
        return range(self.first_row, self.last_row + 1)

    @property
    def cols(self) -> range:
        return range(self.first_col, self.last_col + 1)

    def contains(self, row: int, col: int) -> bool:
        return self.first_row <= row <= self.last_row and self.first_col <= col <= self.last_col

    def intersection(self, other: "CellRange") -> "CellRange | None":
        first_row = max(self.first_row, other.first_row)
        last_row = min(self.last_row, other.last_row)
        first_col = max(self.first_col, other.first_col)
        last_col = min(self.last_col, other.last_col)
        if first_row > last_row or first_col > last_col:
            return None
        return CellRange(first_row, last_row, first_col, last_col)


MergedRegion = CellRange


@dataclass(slots=True, frozen=True)
class TextValue:
    text: str


@dataclass(slots=True, frozen=True)
class NumberValue:
    number: float
    is_date: bool = False


@dataclass(slots=True, frozen=True)
class BooleanValue:
    flag: bool


@dataclass(slots=True, frozen=True)
class BlankValue:
    pass


@dataclass(slots=True, frozen=True)
class ErrorValue:
    code: str


@dataclass(slots=True, frozen=True)
class FormulaResult:
    formula: str
    cached: "CellValue"


CellValue = Union[TextValue, NumberValue, BooleanValue, FormulaResult, BlankValue, ErrorValue]

BLANK = BlankValue()


@dataclass(slots=True, frozen=True)
class ColorRef:
    kind: Literal["rgb", "indexed", "theme", "auto"]
    value: str | int | None = None
    tint: float = 0.0


@dataclass(slots=True, frozen=True)
class Font:
    family: str = "Calibri"
    size: float = 11.0
    bold: bool = False
    italic: bool = False
    underline: bool = False
    color: ColorRef | None = None


@dataclass(slots=True, frozen=True)
class BorderSpec:
    style: str = "none"


NO_BORDER = BorderSpec()


@dataclass(slots=True, frozen=True)
class Fill:
    pattern: str | None = None
    color: ColorRef | None = None


@dataclass(slots=True, frozen=True)
class Style:
    fill: Fill = field(default_factory=Fill)
    border_top: BorderSpec = NO_BORDER
    border_bottom: BorderSpec = NO_BORDER
    border_left: BorderSpec = NO_BORDER
    border_right: BorderSpec = NO_BORDER
    horizontal: str = "general"
    vertical: str = "bottom"
    rotation: int = 0
    indent: int = 0
    font: Font = field(default_factory=Font)
    number_format: str = "General"

    def border(self, side: str) -> BorderSpec:
        return getattr(self, f"border_{side}")


DEFAULT_STYLE = Style()


@dataclass(slots=True, frozen=True)
class CellData:
    row: int
    col: int
    value: CellValue = BLANK
    style: Style = DEFAULT_STYLE

    @property
    def coord(self) -> str:
        from .reader.utils import rowcol_to_coord

        return rowcol_to_coord(self.row, self.col)


@dataclass(slots=True, frozen=True)
class SheetImage:
    row: int
    col: int
    data: bytes
    format: str | None = None


@dataclass(slots=True)
class SheetDoc:
    index: int
    name: str
    state: str = "visible"
    cells: dict[tuple[int, int], CellData] = field(default_factory=dict)
    merges: list[CellRange] = field(default_factory=list)
    col_widths: dict[int, float] = field(default_factory=dict)
    row_heights: dict[int, float] = field(default_factory=dict)
    default_col_width: float = 8 * 256
    default_row_height: float | None = None
    images: dict[tuple[int, int], SheetImage] = field(default_factory=dict)

    @property
    def hidden(self) -> bool:
        return self.state != "visible"

    @property
    def extent(self) -> CellRange | None:
        coords = list(self.cells) + list(self.images)
        if not coords:
            return None
        first_row = min(row for row, _ in coords)
        last_row = max(row for row, _ in coords)
        last_col = max(col for _, col in coords)
        return CellRange(first_row, last_row, 0, last_col)

    def cell(self, row: int, col: int) -> CellData | None:
        return self.cells.get((row, col))


@dataclass(slots=True)
class WorkbookDoc:
    source_path: Path
    options: ConvertOptions
    palette: "ColorPalette"
    sheets: list[SheetDoc] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self.sheets]


@dataclass(slots=True, frozen=True)
class PrintScope:
    sheet_name: str | None = None
    bound: CellRange | None = None


@dataclass(slots=True, frozen=True)
class PrintTarget:
    sheet: SheetDoc
    bound: CellRange


@dataclass(slots=True, frozen=True)
class BorderWidths:
    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not (self.top or self.bottom or self.left or self.right)


@dataclass(slots=True, frozen=True)
class BoxStyle:
    borders: BorderWidths = field(default_factory=BorderWidths)
    fill: str | None = None

    @property
    def is_trivial(self) -> bool:
        return self.fill is None and self.borders.is_empty


@dataclass(slots=True, frozen=True)
class TextOrientation:
    rotation: float = 0.0
    sideways: bool = False
    direction: Literal["left", "right"] | None = None
    h_align: Literal["left", "center", "right"] = "left"
    v_align: Literal["top", "middle", "bottom"] = "middle"
    padding_left: float = 0.0
    wrap: bool = True
    scale_to_fit: bool = True


@dataclass(slots=True, frozen=True)
class TextLayer:
    text: str
    font: Font
    orientation: TextOrientation
    color: str = "000000"
    kind: Literal["text"] = "text"


@dataclass(slots=True, frozen=True)
class ImageLayer:
    data: bytes
    format: str
    pixel_width: int
    pixel_height: int
    max_width: float
    max_height: float
    h_align: Literal["center"] = "center"
    v_align: Literal["middle"] = "middle"
    kind: Literal["image"] = "image"


ContentLayer = Union[TextLayer, ImageLayer]


@dataclass(slots=True)
class RenderableUnit:
    row: int
    col: int
    grid_row: int
    grid_col: int
    rowspan: int
    colspan: int
    width: float
    height: float
    box: BoxStyle
    layers: list[ContentLayer] = field(default_factory=list)

    @property
    def coord(self) -> str:
        from .reader.utils import rowcol_to_coord

        return rowcol_to_coord(self.row, self.col)

    @property
    def text_layer(self) -> TextLayer | None:
        for layer in self.layers:
            if isinstance(layer, TextLayer):
                return layer
        return None

    @property
    def image_layer(self) -> ImageLayer | None:
        for layer in self.layers:
            if isinstance(layer, ImageLayer):
                return layer
        return None


@dataclass(slots=True)
class PageLayout:
    sheet_name: str
    bound: CellRange
    page_width: float
    page_height: float
    margin: float
    page_color: str
    column_widths: list[float] = field(default_factory=list)
    row_heights: list[float] = field(default_factory=list)
    units: list[RenderableUnit] = field(default_factory=list)

    @property
    def printable_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def printable_height(self) -> float:
        return self.page_height - 2 * self.margin

    def unit_at(self, row: int, col: int) -> RenderableUnit | None:
        for unit in self.units:
            if unit.row == row and unit.col == col:
                return unit
        return None
