# nespal/verify.py
from __future__ import annotations

"""
Palette verification.

An image "uses" a palette when it is a fixed point of the nearest-colour
projection: every pixel's nearest palette entry is the pixel itself.

Functions:
  iter_pixels(img_rgb) -> row-major (r, g, b) tuples
  is_fixed_point(rgb, palette) -> bool
  uses_palette(img_rgb, palette) -> bool
"""

from typing import Dict, Iterator

from .core_types import Palette, RGBTuple, U8Image, assert_u8_image_rgb
from .nearest import nearest_colour


def iter_pixels(img_rgb: U8Image) -> Iterator[RGBTuple]:
    """Yield every pixel in row-major order as an (r, g, b) tuple."""
    for row in img_rgb:
        for r, g, b in row.tolist():
            yield (r, g, b)


def is_fixed_point(rgb: RGBTuple, palette: Palette) -> bool:
    """True if `rgb` projects onto itself."""
    return nearest_colour(rgb, palette).rgb == rgb


def uses_palette(img_rgb: U8Image, palette: Palette) -> bool:
    """
    True if every pixel already sits on its nearest palette entry.

    Stops at the first pixel that does not. Verdicts are remembered per colour
    for the duration of this call only. Neither argument is modified.
    """
    img_rgb = assert_u8_image_rgb(img_rgb)
    seen: Dict[RGBTuple, bool] = {}

    def _matches(rgb: RGBTuple) -> bool:
        verdict = seen.get(rgb)
        if verdict is None:
            verdict = seen[rgb] = is_fixed_point(rgb, palette)
        return verdict

    return all(_matches(rgb) for rgb in iter_pixels(img_rgb))


__all__ = ["iter_pixels", "is_fixed_point", "uses_palette"]
