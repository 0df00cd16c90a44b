from __future__ import annotations

from ..model import TextOrientation

STACKED = 255
LEFT_PADDING = 2.0

SIDEWAYS_H_ALIGN = {
    "top": "right",
    "center": "center",
    "bottom": "left",
}

SIDEWAYS_V_ALIGN = {
    "justify": "bottom",
    "left": "bottom",
    "center": "middle",
    "right": "top",
}

V_ALIGN = {
    "top": "top",
    "center": "middle",
    "bottom": "bottom",
}

H_ALIGN = {
    "left": "left",
    "center": "center",
    "centerContinuous": "center",
    "right": "right",
    "justify": "left",
    "fill": "left",
    "distributed": "left",
}


def page_rotation(theta: int | float) -> float:
    # 0-90 turns counter-clockwise, 91-180 turns clockwise; 255 is stacked text
    if theta == STACKED:
        theta = 0
    theta = float(theta)
    if theta <= 90:
        return -theta
    return theta - 90


def is_sideways(rho: float) -> bool:
    return abs(abs(rho) - 90) < 1


def resolve_orientation(
    rotation: int | float,
    horizontal: str | None,
    vertical: str | None,
    *,
    numeric: bool = False,
    indent: int = 0,
) -> TextOrientation:
    rho = page_rotation(rotation or 0)
    horizontal = horizontal or "general"

    if is_sideways(rho):
        if horizontal == "general":
            horizontal = "justify"
        return TextOrientation(
            rotation=rho,
            sideways=True,
            direction="left" if rho < 0 else "right",
            h_align=SIDEWAYS_H_ALIGN.get(vertical or "", "center"),
            v_align=SIDEWAYS_V_ALIGN.get(horizontal, "bottom"),
            wrap=False,
            scale_to_fit=True,
        )

    if horizontal == "general":
        h_align = "right" if numeric else "left"
    else:
        h_align = H_ALIGN.get(horizontal, "left")

    padding = 0.0
    # general text resolves to left and is padded like explicit left
    if horizontal in ("left", "general") and h_align == "left" and not indent:
        padding = LEFT_PADDING

    return TextOrientation(
        rotation=rho,
        sideways=False,
        direction=None,
        h_align=h_align,
        v_align=V_ALIGN.get(vertical or "", "middle"),
        padding_left=padding,
        wrap=True,
        scale_to_fit=True,
    )
