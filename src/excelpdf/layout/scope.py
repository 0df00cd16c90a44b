from __future__ import annotations

import re
from typing import Iterable, Sequence

from loguru import logger

from ..errors import CellAddressError, ScopeParseError
from ..model import PrintScope, PrintTarget, WorkbookDoc
from ..reader.utils import CELL_RE, parse_range_ref

PLAIN_SHEET_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")


def parse_scope(text: str, sheet_names: Sequence[str]) -> PrintScope:
    raw = (text or "").strip()
    if not raw:
        raise ScopeParseError("Empty print scope")

    if "!" in raw:
        sheet_part, _, range_part = raw.rpartition("!")
        sheet_name = _unquote(sheet_part.strip())
        if not sheet_name:
            raise ScopeParseError(f"Missing sheet name in print scope: {text!r}")
        bound = _parse_bound(range_part, text)
        return PrintScope(sheet_name=_canonical_name(sheet_name, sheet_names) or sheet_name, bound=bound)

    token = _unquote(raw)
    matched = _canonical_name(token, sheet_names)
    if matched is not None:
        return PrintScope(sheet_name=matched)
    return PrintScope(bound=_parse_bound(token, text))


def format_scope(scope: PrintScope) -> str:
    if scope.sheet_name is None:
        return scope.bound.ref if scope.bound is not None else ""
    name = _quote(scope.sheet_name)
    if scope.bound is None:
        return name
    return f"{name}!{scope.bound.ref}"


def resolve_targets(
    workbook: WorkbookDoc,
    scopes: Iterable[str | PrintScope] | None = None,
    log=None,
) -> list[PrintTarget]:
    sink = log or logger
    parsed = [
        scope if isinstance(scope, PrintScope) else parse_scope(scope, workbook.sheet_names)
        for scope in (scopes or [])
    ]
    if not parsed:
        parsed = [PrintScope()]

    visible = [sheet for sheet in workbook.sheets if not sheet.hidden]
    targets: list[PrintTarget] = []
    for scope in parsed:
        sheets = visible
        if scope.sheet_name is not None:
            wanted = scope.sheet_name.lower()
            matched = [sheet for sheet in workbook.sheets if sheet.name.lower() == wanted]
            if not matched:
                sink.warning(
                    "No sheet named {!r}; applying {} to every visible sheet",
                    scope.sheet_name,
                    scope.bound.ref if scope.bound is not None else "the full extent",
                )
            else:
                for sheet in matched:
                    if sheet.hidden:
                        sink.info("Skipping hidden sheet {!r}", sheet.name)
                sheets = [sheet for sheet in matched if not sheet.hidden]

        for sheet in sheets:
            bound = scope.bound or sheet.extent
            if bound is None:
                sink.info("Skipping empty sheet {!r}", sheet.name)
                continue
            targets.append(PrintTarget(sheet=sheet, bound=bound))
    return targets


def _parse_bound(ref: str, source: str):
    try:
        return parse_range_ref(ref)
    except CellAddressError as exc:
        raise ScopeParseError(f"Invalid print scope {source!r}: {exc}") from exc


def _canonical_name(name: str, sheet_names: Sequence[str]) -> str | None:
    wanted = name.lower()
    for candidate in sheet_names:
        if candidate.lower() == wanted:
            return candidate
    return None


def _unquote(name: str) -> str:
    if len(name) >= 2 and name[0] == "'" and name[-1] == "'":
        return name[1:-1].replace("''", "'")
    return name


def _quote(name: str) -> str:
    if PLAIN_SHEET_NAME_RE.match(name) and not CELL_RE.match(name.upper()):
        return name
    escaped = name.replace("'", "''")
    return f"'{escaped}'"
