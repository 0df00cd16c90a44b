from __future__ import annotations

import re

from ..errors import CellAddressError
from ..model import CellRange

CELL_RE = re.compile(r"^\$?([A-Z]{1,3})\$?([0-9]+)$")
RANGE_RE = re.compile(r"^\$?([A-Z]{1,3})\$?([0-9]+):\$?([A-Z]{1,3})\$?([0-9]+)$")

MAX_ROWS = 1_048_576
MAX_COLS = 16_384


def col_to_index(col: str) -> int:
    value = 0
    for char in col.upper():
        value = value * 26 + (ord(char) - 64)
    return value - 1


def index_to_col(index: int) -> str:
    if index < 0:
        raise CellAddressError("Column index must be >= 0")
    result: list[str] = []
    value = index + 1
    while value > 0:
        value, rem = divmod(value - 1, 26)
        result.append(chr(65 + rem))
    return "".join(reversed(result))


def coord_to_rowcol(coord: str) -> tuple[int, int]:
    match = CELL_RE.match(coord.strip().upper())
    if not match:
        raise CellAddressError(f"Invalid cell address: {coord!r}")
    return _checked(match.group(1), match.group(2), coord)


def rowcol_to_coord(row: int, col: int) -> str:
    if row < 0 or col < 0:
        raise CellAddressError("row/col must be >= 0")
    return f"{index_to_col(col)}{row + 1}"


def parse_range_ref(ref: str) -> CellRange:
    normalized = ref.strip().upper()
    range_match = RANGE_RE.match(normalized)
    if range_match:
        sr, sc = _checked(range_match.group(1), range_match.group(2), ref)
        er, ec = _checked(range_match.group(3), range_match.group(4), ref)
        return CellRange(
            first_row=min(sr, er),
            last_row=max(sr, er),
            first_col=min(sc, ec),
            last_col=max(sc, ec),
        )

    cell_match = CELL_RE.match(normalized)
    if not cell_match:
        raise CellAddressError(f"Invalid range reference: {ref!r}")
    row, col = _checked(cell_match.group(1), cell_match.group(2), ref)
    return CellRange(first_row=row, last_row=row, first_col=col, last_col=col)


def _checked(letters: str, digits: str, source: str) -> tuple[int, int]:
    row = int(digits) - 1
    col = col_to_index(letters)
    if row < 0 or row >= MAX_ROWS or col >= MAX_COLS:
        raise CellAddressError(f"Cell address out of sheet bounds: {source!r}")
    return row, col
