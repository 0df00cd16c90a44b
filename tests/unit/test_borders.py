from __future__ import annotations

import pytest

from excelpdf.layout.borders import border_width, effective_border_width, resolve_borders
from excelpdf.model import BorderSpec, BorderWidths
from tests.helpers import bound, make_sheet, style

STYLES = ["none", "thin", "medium", "thick", "dashed"]


@pytest.mark.parametrize("right", STYLES)
@pytest.mark.parametrize("left", STYLES)
def test_shared_vertical_edge_is_symmetric(left: str, right: str) -> None:
    sheet = make_sheet(styles={"A1": style(right=left), "B1": style(left=right)})

    expected = max(border_width(BorderSpec(left)), border_width(BorderSpec(right)))
    assert effective_border_width(sheet, 0, 0, "right") == expected
    assert effective_border_width(sheet, 0, 1, "left") == expected


def test_shared_horizontal_edge_is_symmetric() -> None:
    sheet = make_sheet(styles={"A1": style(bottom="thin"), "A2": style(top="medium")})
    assert effective_border_width(sheet, 0, 0, "bottom") == 1.5
    assert effective_border_width(sheet, 1, 0, "top") == 1.5


def test_width_mapping() -> None:
    assert border_width(BorderSpec("none")) == 0.0
    assert border_width(BorderSpec("thin")) == 1.0
    assert border_width(BorderSpec("medium")) == 1.5
    assert border_width(BorderSpec("thick")) == 2.5
    assert border_width(BorderSpec("double")) == 1.0
    assert border_width(None) == 0.0


def test_merged_region_with_thick_top() -> None:
    region = bound("A1:B2")
    sheet = make_sheet({"A1": "merged"}, styles={"A1": style(top="thick")}, merges=["A1:B2"])

    widths = resolve_borders(sheet, 0, 0, region)
    assert widths == BorderWidths(top=2.5, bottom=0.0, left=0.0, right=0.0)


def test_merged_region_bottom_pairs_with_next_row_top() -> None:
    region = bound("A1:B2")
    sheet = make_sheet(styles={"A1": style(top="thick"), "B3": style(top="medium")}, merges=["A1:B2"])
    assert effective_border_width(sheet, 0, 0, "bottom", region) == 1.5


def test_region_edge_takes_widest_along_span() -> None:
    region = bound("B2:C4")
    sheet = make_sheet(styles={"B3": style(left="thin"), "A4": style(right="thick")}, merges=["B2:C4"])
    assert effective_border_width(sheet, 1, 1, "left", region) == 2.5


def test_missing_neighbours_contribute_nothing() -> None:
    sheet = make_sheet(styles={"A1": style(top="thin", left="medium")})
    assert effective_border_width(sheet, 0, 0, "top") == 1.0
    assert effective_border_width(sheet, 0, 0, "left") == 1.5
    assert effective_border_width(sheet, 5, 5, "bottom") == 0.0


def test_unknown_side_raises() -> None:
    with pytest.raises(ValueError):
        effective_border_width(make_sheet(), 0, 0, "diagonal")
