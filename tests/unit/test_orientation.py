from __future__ import annotations

import pytest

from excelpdf.layout.orientation import is_sideways, page_rotation, resolve_orientation


@pytest.mark.parametrize(
    ("theta", "rho"),
    [(0, 0.0), (45, -45.0), (90, -90.0), (91, 1.0), (135, 45.0), (180, 90.0), (255, 0.0)],
)
def test_page_rotation(theta: int, rho: float) -> None:
    assert page_rotation(theta) == rho


def test_sideways_threshold() -> None:
    assert is_sideways(-90.0)
    assert is_sideways(89.5)
    assert not is_sideways(89.0)
    assert not is_sideways(0.0)


def test_upward_text_with_top_alignment() -> None:
    orient = resolve_orientation(90, "general", "top")
    assert orient.sideways
    assert orient.direction == "left"
    assert orient.h_align == "right"
    assert orient.v_align == "bottom"
    assert not orient.wrap


def test_downward_text() -> None:
    orient = resolve_orientation(180, "center", "bottom")
    assert orient.sideways
    assert orient.direction == "right"
    assert orient.h_align == "left"
    assert orient.v_align == "middle"


@pytest.mark.parametrize(
    ("horizontal", "v_align"),
    [("left", "bottom"), ("justify", "bottom"), ("center", "middle"), ("right", "top")],
)
def test_sideways_horizontal_becomes_vertical(horizontal: str, v_align: str) -> None:
    assert resolve_orientation(90, horizontal, "center").v_align == v_align


def test_sideways_vertical_becomes_horizontal() -> None:
    assert resolve_orientation(90, "left", "center").h_align == "center"
    assert resolve_orientation(90, "left", "bottom").h_align == "left"


def test_stacked_text_is_laid_out_flat() -> None:
    orient = resolve_orientation(255, "center", "center")
    assert orient.rotation == 0.0
    assert not orient.sideways
    assert orient.h_align == "center"


def test_general_alignment_depends_on_value() -> None:
    assert resolve_orientation(0, "general", None, numeric=True).h_align == "right"
    assert resolve_orientation(0, "general", None).h_align == "left"
    assert resolve_orientation(0, None, None).v_align == "middle"


def test_left_alignment_padding() -> None:
    assert resolve_orientation(0, "left", "top").padding_left == 2.0
    assert resolve_orientation(0, "left", "top", indent=2).padding_left == 0.0
    assert resolve_orientation(0, "right", "top").padding_left == 0.0
    assert resolve_orientation(0, "general", "bottom").padding_left == 2.0
    assert resolve_orientation(0, "general", "bottom", numeric=True).padding_left == 0.0
    assert resolve_orientation(0, "general", "bottom", indent=1).padding_left == 0.0
    assert resolve_orientation(0, "justify", "bottom").padding_left == 0.0


@pytest.mark.parametrize("horizontal", ["justify", "fill", "distributed"])
def test_block_alignments_fall_back_to_left(horizontal: str) -> None:
    assert resolve_orientation(0, horizontal, "top").h_align == "left"


def test_diagonal_text_keeps_alignment() -> None:
    orient = resolve_orientation(45, "right", "top")
    assert orient.rotation == -45.0
    assert not orient.sideways
    assert orient.h_align == "right"
    assert orient.v_align == "top"
