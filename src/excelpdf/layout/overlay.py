from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from loguru import logger

from ..model import MergedRegion
from ..reader.utils import coord_to_rowcol

ImageSource = bytes | str | Path


@dataclass(slots=True, frozen=True)
class OverlayStore:
    # keys are not sheet-scoped
    values: dict[tuple[int, int], str] = field(default_factory=dict)
    images: dict[tuple[int, int], bytes] = field(default_factory=dict)

    @classmethod
    def from_mappings(
        cls,
        values: Mapping[str, object] | None = None,
        images: Mapping[str, ImageSource] | None = None,
        log=None,
    ) -> "OverlayStore":
        sink = log or logger
        parsed_values = {
            coord_to_rowcol(coord): str(value) for coord, value in (values or {}).items() if value is not None
        }

        parsed_images: dict[tuple[int, int], bytes] = {}
        for coord, source in (images or {}).items():
            if source is None:
                continue
            key = coord_to_rowcol(coord)
            if isinstance(source, (bytes, bytearray)):
                parsed_images[key] = bytes(source)
                continue
            path = Path(source)
            if not path.is_file():
                sink.warning("Overlay image for {} not found: {}", coord, path)
                continue
            parsed_images[key] = path.read_bytes()

        return cls(values=parsed_values, images=parsed_images)

    @property
    def is_empty(self) -> bool:
        return not self.values and not self.images

    def value_for(self, row: int, col: int, region: MergedRegion | None = None) -> str | None:
        return _lookup(self.values, row, col, region)

    def image_for(self, row: int, col: int, region: MergedRegion | None = None) -> bytes | None:
        return _lookup(self.images, row, col, region)


EMPTY_OVERLAY = OverlayStore()


def _lookup(mapping: dict, row: int, col: int, region: MergedRegion | None):
    if not mapping:
        return None
    if (row, col) in mapping:
        return mapping[(row, col)]
    if region is None:
        return None
    # first hit in row-major order
    hits = [key for key in mapping if region.contains(*key)]
    if not hits:
        return None
    return mapping[min(hits)]
