from __future__ import annotations

from datetime import datetime

from excelpdf.model import (
    BLANK,
    BooleanValue,
    ErrorValue,
    FormulaResult,
    NumberValue,
    TextValue,
)
from excelpdf.reader.values import display_text, format_number, is_numeric, to_cell_value


def test_to_cell_value_variants() -> None:
    assert to_cell_value(None) is BLANK
    assert to_cell_value("") is BLANK
    assert to_cell_value("abc") == TextValue("abc")
    assert to_cell_value(True) == BooleanValue(True)
    assert to_cell_value(3) == NumberValue(3.0)
    assert to_cell_value("#DIV/0!", "e") == ErrorValue("#DIV/0!")


def test_datetimes_become_date_serials() -> None:
    value = to_cell_value(datetime(2023, 3, 15))
    assert value == NumberValue(45000.0, is_date=True)
    assert display_text(value) == "2023-03-15"


def test_display_text_for_each_variant() -> None:
    assert display_text(TextValue("x")) == "x"
    assert display_text(NumberValue(3.0)) == "3"
    assert display_text(NumberValue(2.5)) == "2.5"
    assert display_text(BooleanValue(False)) == "FALSE"
    assert display_text(ErrorValue("#N/A")) == "#N/A"
    assert display_text(BLANK) == ""


def test_formula_result_displays_cached_value() -> None:
    value = FormulaResult(formula="=A1*2", cached=NumberValue(0.25))
    assert display_text(value, "0%") == "25%"
    assert is_numeric(value)
    assert not is_numeric(FormulaResult(formula="=A1", cached=TextValue("a")))


def test_number_formats() -> None:
    assert format_number(1234.5, "#,##0.00") == "1,234.50"
    assert format_number(0.125, "0.0%") == "12.5%"
    assert format_number(7, "@") == "7"
    assert format_number(45000, "yyyy-mm-dd") == "2023-03-15"
    assert format_number(45000.5, "yyyy-mm-dd hh:mm") == "2023-03-15 12:00:00"
