from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO

from loguru import logger
from PIL import Image, UnidentifiedImageError


@dataclass(slots=True, frozen=True)
class ImageInfo:
    format: str
    width: int
    height: int


def probe_image(data: bytes, *, label: str = "", log=None) -> ImageInfo | None:
    """Return format and pixel size of encoded image bytes, or None if Pillow cannot decode them."""
    sink = log or logger
    if not data:
        sink.warning("Empty image data at {}", label or "<unknown>")
        return None
    try:
        with Image.open(BytesIO(data)) as image:
            image.verify()
        # verify() leaves the image unusable; reopen for the size
        with Image.open(BytesIO(data)) as image:
            width, height = image.size
            fmt = (image.format or "").lower()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        sink.warning("Undecodable image at {}: {}", label or "<unknown>", exc)
        return None
    if width <= 0 or height <= 0:
        sink.warning("Image with empty size at {}", label or "<unknown>")
        return None
    return ImageInfo(format=fmt or "png", width=width, height=height)
