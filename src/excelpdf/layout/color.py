from __future__ import annotations

import math

from ..model import ColorRef, Style
from ..reader.colors import ColorPalette

RGB = tuple[int, int, int]


def apply_tint(rgb: RGB, tint: float) -> RGB:
    if not tint:
        return rgb
    tint = max(-1.0, min(1.0, float(tint)))
    out: list[int] = []
    for channel in rgb:
        if tint < 0:
            value = channel * (1 + tint)
        else:
            value = channel * (1 - tint) + 255 * tint
        out.append(_clamp(math.floor(value + 0.5)))
    return out[0], out[1], out[2]


def to_hex(rgb: RGB) -> str:
    return "".join(f"{_clamp(channel):02X}" for channel in rgb)


def resolve_color(color: ColorRef | None, palette: ColorPalette) -> str | None:
    if color is None or color.kind == "auto":
        return None
    rgb = palette.rgb_for(color)
    if rgb is None:
        return None
    return to_hex(apply_tint(rgb, color.tint))


def resolve_fill_color(style: Style, palette: ColorPalette) -> str | None:
    if not style.fill.pattern or style.fill.pattern == "none":
        return None
    return resolve_color(style.fill.color, palette)


def resolve_font_color(style: Style, palette: ColorPalette) -> str:
    return resolve_color(style.font.color, palette) or "000000"


def _clamp(value: int) -> int:
    return max(0, min(255, int(value)))
