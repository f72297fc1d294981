# nespal/remap.py
from __future__ import annotations

"""
Remap engine: replace every pixel with its nearest palette entry.

The work is done once per unique colour, then scattered back to pixels
through the inverse index, which is identical to a per-pixel pass.
"""

from typing import Tuple

import numpy as np

from .core_types import Palette, U8Image, U8Rows, assert_u8_image_rgb
from .nearest import nearest_palette_indices


def _unique_colours_with_inverse(img_rgb: U8Image) -> Tuple[U8Rows, np.ndarray]:
    """
    Unique RGB rows and the inverse index.

    Returns:
      unique_rgb: uint8 [U,3]
      inverse_idx: int64 [H*W], unique_rgb[inverse_idx] rebuilds the flat image
    """
    flat = img_rgb.reshape(-1, 3)
    if flat.shape[0] == 0:
        return np.zeros((0, 3), dtype=np.uint8), np.zeros((0,), dtype=np.int64)
    unique_rgb, inverse_idx = np.unique(flat, axis=0, return_inverse=True)
    return (
        unique_rgb.astype(np.uint8, copy=False),
        inverse_idx.reshape(-1).astype(np.int64, copy=False),
    )


def remap_image(img_rgb: U8Image, palette: Palette) -> U8Image:
    """
    Project every pixel onto the palette.

    Args:
      img_rgb: uint8 [H,W,3], left untouched
      palette: target Palette
    Returns:
      fresh uint8 [H,W,3] whose pixels are all palette entries
    """
    img_rgb = assert_u8_image_rgb(img_rgb)
    unique_rgb, inverse_idx = _unique_colours_with_inverse(img_rgb)
    nearest_idx = nearest_palette_indices(unique_rgb, palette)
    mapped_unique = palette.rgb[nearest_idx]
    return mapped_unique[inverse_idx].reshape(img_rgb.shape).astype(np.uint8, copy=False)


__all__ = ["remap_image"]
