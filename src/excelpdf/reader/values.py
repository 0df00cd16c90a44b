from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Any

from openpyxl.utils.datetime import from_excel, to_excel

from ..model import (
    BLANK,
    BlankValue,
    BooleanValue,
    CellValue,
    ErrorValue,
    FormulaResult,
    NumberValue,
    TextValue,
)

DATE_TOKEN_RE = re.compile(r"(?:^|[^\\])(?:y+|m+|d+|h+|s+|AM/PM)", re.IGNORECASE)


def to_cell_value(raw: Any, data_type: str | None = None) -> CellValue:
    if raw is None:
        return BLANK
    if isinstance(raw, bool):
        return BooleanValue(raw)
    if isinstance(raw, (int, float)):
        return NumberValue(float(raw))
    if isinstance(raw, timedelta):
        return NumberValue(raw.total_seconds() / 86400.0, is_date=True)
    if isinstance(raw, (datetime, date, time)):
        return NumberValue(float(to_excel(raw)), is_date=True)
    text = str(raw)
    if data_type == "e":
        return ErrorValue(text)
    if text == "":
        return BLANK
    return TextValue(text)


def is_numeric(value: CellValue) -> bool:
    if isinstance(value, FormulaResult):
        return is_numeric(value.cached)
    return isinstance(value, NumberValue)


def display_text(value: CellValue, number_format: str = "General") -> str:
    if isinstance(value, TextValue):
        return value.text
    if isinstance(value, NumberValue):
        return format_number(value.number, number_format, is_date=value.is_date)
    if isinstance(value, BooleanValue):
        return "TRUE" if value.flag else "FALSE"
    if isinstance(value, ErrorValue):
        return value.code
    if isinstance(value, FormulaResult):
        return display_text(value.cached, number_format)
    if isinstance(value, BlankValue):
        return ""
    raise TypeError(f"Unknown cell value variant: {type(value).__name__}")


def format_number(number: float, fmt: str, *, is_date: bool = False) -> str:
    fmt = (fmt or "").strip()
    if not fmt or fmt.lower() == "general":
        if is_date:
            return _format_excel_date(number, "yyyy-mm-dd")
        return _normalize_general_number(number)

    primary = fmt.split(";")[0]
    if primary == "@":
        return _normalize_general_number(number)
    if is_date or _is_date_format(primary):
        return _format_excel_date(number, primary)
    if "%" in primary:
        return _format_percent(number, primary)
    if any(token in primary for token in ("0", "#")):
        return _format_decimal(number, primary)
    return _normalize_general_number(number)


def _normalize_general_number(number: float) -> str:
    if abs(number - round(number)) < 1e-11:
        return str(int(round(number)))
    return f"{number:.10g}"


def _is_date_format(fmt: str) -> bool:
    cleaned = _strip_quoted(fmt)
    cleaned = re.sub(r"\[[^\]]*\]", "", cleaned)
    return bool(DATE_TOKEN_RE.search(cleaned))


def _strip_quoted(fmt: str) -> str:
    out: list[str] = []
    in_quote = False
    for ch in fmt:
        if ch == '"':
            in_quote = not in_quote
            continue
        if not in_quote:
            out.append(ch)
    return "".join(out)


def _format_excel_date(number: float, fmt: str) -> str:
    dt = from_excel(number)
    if isinstance(dt, timedelta):
        dt = datetime(1899, 12, 30) + dt
    elif isinstance(dt, time):
        dt = datetime.combine(date(1899, 12, 30), dt)
    cleaned = _strip_quoted(fmt).lower()
    has_date = any(t in cleaned for t in ("y", "d")) or ("m" in cleaned and "h" not in cleaned)
    has_time = any(t in cleaned for t in ("h", "s")) or "am/pm" in cleaned
    if has_date and has_time:
        return dt.strftime("%Y-%m-%d %H:%M:%S")
    if has_time:
        return dt.strftime("%H:%M:%S")
    return dt.strftime("%Y-%m-%d")


def _format_percent(number: float, fmt: str) -> str:
    decimals = 0
    if "." in fmt:
        after = fmt.split(".", 1)[1]
        decimals = sum(1 for ch in after if ch in {"0", "#"})
    value = number * 100
    return f"{value:.{decimals}f}%"


def _format_decimal(number: float, fmt: str) -> str:
    use_grouping = "," in fmt.split(".", 1)[0]
    decimals = 0
    if "." in fmt:
        after = fmt.split(".", 1)[1]
        decimals = sum(1 for ch in after if ch in {"0", "#"})

    if use_grouping:
        return f"{number:,.{decimals}f}"
    return f"{number:.{decimals}f}"
