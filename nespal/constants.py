# nespal/constants.py
"""
Fixed format values and tunables used across the project.

- Palette file layout (PALETTE_SIZE, PALETTE_BYTES, PALETTE_EXTENSION)
- Distance weights (CHANNEL_WEIGHTS)
- Output encoders (OUTPUT_FORMATS, JPEG_QUALITY)
- Environment configuration (PALETTE_DIR_ENV)
"""
from __future__ import annotations

from typing import Dict, Tuple

# =========================
# Palette file layout
# =========================
PALETTE_SIZE: int = 64
CHANNELS: int = 3
PALETTE_BYTES: int = PALETTE_SIZE * CHANNELS  # 192
PALETTE_EXTENSION: str = ".pal"

# =========================
# Distance metric
# =========================
# (red, green, blue). Green weighs most, then red, then blue.
CHANNEL_WEIGHTS: Tuple[int, int, int] = (2, 3, 1)

# Strictly greater than any weighted distance between two 8-bit colours.
MAX_DISTANCE: int = sum(CHANNEL_WEIGHTS) * 255 * 255 + 1

# =========================
# Output encoders
# =========================
# extension -> Pillow format name
OUTPUT_FORMATS: Dict[str, str] = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
}
JPEG_QUALITY: int = 75

# =========================
# Vectorised nearest search
# =========================
# Rows per distance block; each block holds a [rows, 64] int32 matrix.
NEAREST_CHUNK_ROWS: int = 65_536

# =========================
# Environment
# =========================
PALETTE_DIR_ENV: str = "NESPAL_PALETTE_DIR"

# =========================
# CLI exit codes
# =========================
EXIT_OK: int = 0
EXIT_FAILURE: int = 1
EXIT_USAGE: int = 2

__all__ = [
    "PALETTE_SIZE",
    "CHANNELS",
    "PALETTE_BYTES",
    "PALETTE_EXTENSION",
    "CHANNEL_WEIGHTS",
    "MAX_DISTANCE",
    "OUTPUT_FORMATS",
    "JPEG_QUALITY",
    "NEAREST_CHUNK_ROWS",
    "PALETTE_DIR_ENV",
    "EXIT_OK",
    "EXIT_FAILURE",
    "EXIT_USAGE",
]
