# nespal/image_io.py
from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, ImageOps

from .constants import JPEG_QUALITY, OUTPUT_FORMATS
from .core_types import U8Image, assert_u8_image_rgb
from .errors import UnsupportedOutputFormatError

"""
Image I/O helpers. Images are opaque RGB; any alpha channel is dropped.
"""


def _convert_to_rgb(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    if im.mode == "RGB":
        return im
    if im.mode in ("RGBA", "LA", "PA") or (im.mode == "P" and "transparency" in im.info):
        # Drop alpha without compositing so colour values stay exact.
        return im.convert("RGBA").convert("RGB")
    return im.convert("RGB")


def load_image_rgb(path: Path) -> U8Image:
    """Decode any Pillow-readable image into a uint8 [H,W,3] array."""
    with Image.open(path) as im0:
        im = _convert_to_rgb(im0)
        arr = np.array(im, dtype=np.uint8)
    return arr


def output_format_for(path: Path) -> str:
    """Pillow format name for `path`'s extension, or UnsupportedOutputFormatError."""
    fmt = OUTPUT_FORMATS.get(Path(path).suffix.lower())
    if fmt is None:
        raise UnsupportedOutputFormatError(str(path))
    return fmt


def save_image_rgb(path: Path, rgb: U8Image) -> Path:
    """Encode a uint8 [H,W,3] array as PNG or JPEG, chosen by extension."""
    fmt = output_format_for(path)
    rgb = assert_u8_image_rgb(np.ascontiguousarray(rgb))
    im = Image.fromarray(rgb)
    if fmt == "JPEG":
        im.save(path, format=fmt, quality=JPEG_QUALITY)
    else:
        im.save(path, format=fmt)
    return Path(path)


__all__ = [
    "load_image_rgb",
    "output_format_for",
    "save_image_rgb",
]
