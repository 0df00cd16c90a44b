from __future__ import annotations

from xml.etree import ElementTree as ET

from openpyxl.styles.colors import COLOR_INDEX

from ..model import ColorRef

DRAWING_MAIN_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"

# dk1, lt1, dk2, lt2, accent1-6, hlink, folHlink of the stock Office theme
DEFAULT_THEME_COLORS = [
    "000000",
    "FFFFFF",
    "44546A",
    "E7E6E6",
    "4472C4",
    "ED7D31",
    "A5A5A5",
    "FFC000",
    "5B9BD5",
    "70AD47",
    "0563C1",
    "954F72",
]

# Cell styles address theme slots with light/dark swapped relative to clrScheme order.
THEME_SLOT_ORDER = [1, 0, 3, 2, 4, 5, 6, 7, 8, 9, 10, 11]


class ColorPalette:
    def __init__(self, indexed: list[str] | None = None, theme: list[str] | None = None) -> None:
        self.indexed = [_rgb_hex(value) for value in (indexed or COLOR_INDEX)]
        self.theme = list(theme or DEFAULT_THEME_COLORS)

    @classmethod
    def from_workbook(cls, workbook) -> "ColorPalette":
        indexed = list(getattr(workbook, "_colors", None) or []) or None
        theme = parse_theme_colors(getattr(workbook, "loaded_theme", None))
        return cls(indexed=indexed, theme=theme or None)

    def rgb_for(self, color: ColorRef | None) -> tuple[int, int, int] | None:
        hex_value = self.hex_for(color)
        if not hex_value:
            return None
        return int(hex_value[0:2], 16), int(hex_value[2:4], 16), int(hex_value[4:6], 16)

    def hex_for(self, color: ColorRef | None) -> str | None:
        if color is None:
            return None
        if color.kind == "rgb" and isinstance(color.value, str):
            return _rgb_hex(color.value) or None
        if color.kind == "indexed" and isinstance(color.value, int):
            if 0 <= color.value < len(self.indexed):
                return self.indexed[color.value] or None
            return None
        if color.kind == "theme" and isinstance(color.value, int):
            if 0 <= color.value < len(THEME_SLOT_ORDER):
                slot = THEME_SLOT_ORDER[color.value]
                if slot < len(self.theme):
                    return self.theme[slot]
            return None
        return None


def parse_theme_colors(theme_xml: bytes | str | None) -> list[str]:
    if not theme_xml:
        return []
    try:
        root = ET.fromstring(theme_xml)
    except ET.ParseError:
        return []
    clr_scheme = root.find(f".//{{{DRAWING_MAIN_NS}}}clrScheme")
    if clr_scheme is None:
        return []

    color_list: list[str] = []
    for child in list(clr_scheme):
        srgb = child.find(f"{{{DRAWING_MAIN_NS}}}srgbClr")
        if srgb is not None and srgb.attrib.get("val"):
            color_list.append(srgb.attrib["val"].upper())
            continue
        sys_clr = child.find(f"{{{DRAWING_MAIN_NS}}}sysClr")
        if sys_clr is not None and sys_clr.attrib.get("lastClr"):
            color_list.append(sys_clr.attrib["lastClr"].upper())
    return color_list


def _rgb_hex(value: str) -> str:
    raw = str(value or "").strip().lstrip("#").upper()
    if len(raw) == 8:
        raw = raw[2:]
    if len(raw) != 6:
        return ""
    try:
        int(raw, 16)
    except ValueError:
        return ""
    return raw
