from __future__ import annotations

from bisect import bisect_right
from typing import Iterable

from loguru import logger

from ..model import CellRange, MergedRegion


class MergeIndex:
    def __init__(self, regions: Iterable[MergedRegion] = (), *, sheet_name: str = "", log=None) -> None:
        sink = log or logger
        self.regions: list[MergedRegion] = []
        self._rows: dict[int, list[MergedRegion]] = {}
        self._starts: dict[int, list[int]] = {}

        for region in sorted(regions, key=lambda r: (r.first_row, r.first_col)):
            if region.first_row == region.last_row and region.first_col == region.last_col:
                continue
            clash = self._overlapping(region)
            if clash is not None:
                sink.warning(
                    "{}: merged region {} overlaps {}; ignoring it",
                    sheet_name or "<sheet>",
                    region.ref,
                    clash.ref,
                )
                continue
            self._insert(region)

    def region_at(self, row: int, col: int) -> MergedRegion | None:
        starts = self._starts.get(row)
        if not starts:
            return None
        pos = bisect_right(starts, col) - 1
        if pos < 0:
            return None
        region = self._rows[row][pos]
        if col <= region.last_col:
            return region
        return None

    def is_anchor(self, row: int, col: int, region: MergedRegion | None = None) -> bool:
        region = region or self.region_at(row, col)
        if region is None:
            return False
        return row == region.first_row and col == region.first_col

    def regions_in(self, bound: CellRange) -> list[MergedRegion]:
        return [region for region in self.regions if region.intersection(bound) is not None]

    def _overlapping(self, region: MergedRegion) -> MergedRegion | None:
        for row in region.rows:
            for other in self._rows.get(row, []):
                if other.first_col <= region.last_col and region.first_col <= other.last_col:
                    return other
        return None

    def _insert(self, region: MergedRegion) -> None:
        self.regions.append(region)
        for row in region.rows:
            starts = self._starts.setdefault(row, [])
            bucket = self._rows.setdefault(row, [])
            pos = bisect_right(starts, region.first_col)
            starts.insert(pos, region.first_col)
            bucket.insert(pos, region)
