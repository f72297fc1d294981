# nespal/nearest.py
from __future__ import annotations

"""
Nearest palette entry under the weighted distance.

Ties go to the entry with the lowest palette index, in both the scalar and
the vectorised form.
"""

from typing import Sequence

import numpy as np

from .colour_distance import weighted_distance, weighted_distance_matrix
from .constants import MAX_DISTANCE, NEAREST_CHUNK_ROWS
from .core_types import Color, Palette, U8Rows


def nearest_index(color: Sequence[int], palette: Palette) -> int:
    """Index of the first palette entry at minimum distance from `color`."""
    best_distance = MAX_DISTANCE
    best_index = -1
    for index, entry in enumerate(palette):
        distance = weighted_distance(color, entry)
        if distance < best_distance:
            best_distance = distance
            best_index = index
    return best_index


def nearest_colour(color: Sequence[int], palette: Palette) -> Color:
    """Closest palette entry, as a fresh opaque Color."""
    entry = palette[nearest_index(color, palette)]
    return Color(entry.r, entry.g, entry.b)


def nearest_palette_indices(src_rgb: U8Rows, palette: Palette) -> np.ndarray:
    """
    Vectorised nearest_index over rows.

    Args:
      src_rgb: uint8 [N,3]
    Returns:
      int64 [N]. np.argmin keeps the first minimum, same tie-break as the scan.

    Rows are processed in blocks of NEAREST_CHUNK_ROWS so memory stays
    bounded regardless of N.
    """
    src = np.asarray(src_rgb).reshape(-1, 3)
    out = np.empty((src.shape[0],), dtype=np.int64)
    step = max(1, int(NEAREST_CHUNK_ROWS))
    for start in range(0, src.shape[0], step):
        block = src[start : start + step]
        dist = weighted_distance_matrix(block, palette.rgb)
        out[start : start + block.shape[0]] = np.argmin(dist, axis=1)
    return out


__all__ = ["nearest_index", "nearest_colour", "nearest_palette_indices"]
