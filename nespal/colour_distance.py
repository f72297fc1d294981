# nespal/colour_distance.py
from __future__ import annotations

"""
Weighted RGB distance.

  d(a, b) = 2*dr^2 + 3*dg^2 + 1*db^2

Squared, so no square root. Weights come from constants.CHANNEL_WEIGHTS.
Alpha never takes part.
"""

from typing import Sequence

import numpy as np

from .constants import CHANNEL_WEIGHTS
from .core_types import U8Rows

def weighted_distance(a: Sequence[int], b: Sequence[int]) -> int:
    """Weighted squared distance between two RGB colours (Color or 3-tuple)."""
    wr, wg, wb = CHANNEL_WEIGHTS
    ar, ag, ab = (int(v) for v in a)
    br, bg, bb = (int(v) for v in b)
    dr = ar - br
    dg = ag - bg
    db = ab - bb
    return wr * dr * dr + wg * dg * dg + wb * db * db


def weighted_distance_matrix(src_rgb: U8Rows, pal_rgb: U8Rows) -> np.ndarray:
    """
    Pairwise weighted distances.

    Args:
      src_rgb: uint8 [N,3]
      pal_rgb: uint8 [P,3]
    Returns:
      int32 [N,P]. Accumulated per channel, so the largest temporary is
      [N,P] rather than [N,P,3].
    """
    src = np.asarray(src_rgb, dtype=np.int32).reshape(-1, 3)
    pal = np.asarray(pal_rgb, dtype=np.int32).reshape(-1, 3)
    out = np.zeros((src.shape[0], pal.shape[0]), dtype=np.int32)
    for channel, weight in enumerate(CHANNEL_WEIGHTS):
        diff = src[:, channel, None] - pal[None, :, channel]
        diff *= diff
        diff *= weight
        out += diff
    return out


__all__ = ["weighted_distance", "weighted_distance_matrix"]
