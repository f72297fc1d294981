# nespal/palette_data.py
from __future__ import annotations

"""
Palette decoding, built-in palette tables, and palette collections.

Exports:
  load_palette(byte_source, name=None) -> Palette
  BUILTIN_PALETTES: list[tuple[str, bytes]]   # [(name, 192 raw bytes), ...]
  BuiltinPalettes()       -> collection over BUILTIN_PALETTES
  DirectoryPalettes(path) -> collection over <path>/*.pal
  default_collection(palette_dir=None) -> whichever of the two applies
"""

import os
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from .constants import (
    CHANNELS,
    PALETTE_BYTES,
    PALETTE_DIR_ENV,
    PALETTE_EXTENSION,
    PALETTE_SIZE,
)
from .core_types import ByteSource, Color, Palette, hex_to_rgb
from .errors import MalformedPaletteError, UnknownPaletteError


# Decoding


def _read_exactly(byte_source: ByteSource, size: int) -> bytes:
    """
    Take the first `size` bytes from a buffer or stream.

    Streams are read in a loop since read() may return short. Returns fewer
    than `size` bytes only when the source is exhausted.
    """
    if isinstance(byte_source, (bytes, bytearray, memoryview)):
        return bytes(byte_source[:size])

    chunks: List[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = byte_source.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def load_palette(byte_source: ByteSource, name: Optional[str] = None) -> Palette:
    """
    Decode PALETTE_SIZE consecutive (R, G, B) triplets into a Palette.

    Reads exactly PALETTE_BYTES bytes and never looks past them. Any byte value
    is taken as-is. Raises MalformedPaletteError when the source is shorter.
    """
    data = _read_exactly(byte_source, PALETTE_BYTES)
    if len(data) < PALETTE_BYTES:
        raise MalformedPaletteError(len(data), name)

    colors = tuple(
        Color(data[i], data[i + 1], data[i + 2])
        for i in range(0, PALETTE_BYTES, CHANNELS)
    )
    return Palette(colors)


def palette_to_bytes(palette: Palette) -> bytes:
    """Inverse of load_palette: the 192-byte file image of a palette."""
    return bytes(channel for color in palette for channel in color.rgb)


# Built-in tables

# RGB PPU (2C03 / PlayChoice-10 / Vs. System). Three bits per channel, one
# octal digit each, rows $00-$0F .. $30-$3F.
_RGB_PPU_2C03: Tuple[str, ...] = (
    "333", "014", "006", "326", "403", "503", "510", "420",
    "320", "120", "031", "040", "022", "000", "000", "000",
    "555", "036", "027", "407", "507", "704", "700", "630",
    "430", "140", "040", "053", "044", "000", "000", "000",
    "777", "357", "447", "637", "707", "737", "740", "750",
    "660", "360", "070", "276", "077", "000", "000", "000",
    "777", "567", "657", "757", "747", "755", "764", "772",
    "773", "572", "473", "276", "467", "000", "000", "000",
)  # fmt: skip

# NTSC 2C02 approximation as commonly circulated.
_NES_CLASSIC: Tuple[str, ...] = (
    "#7c7c7c", "#0000fc", "#0000bc", "#4428bc", "#940084", "#a80020", "#a81000", "#881400",
    "#503000", "#007800", "#006800", "#005800", "#004058", "#000000", "#000000", "#000000",
    "#bcbcbc", "#0078f8", "#0058f8", "#6844fc", "#d800cc", "#e40058", "#f83800", "#e45c10",
    "#ac7c00", "#00b800", "#00a800", "#00a844", "#008888", "#000000", "#000000", "#000000",
    "#f8f8f8", "#3cbcfc", "#6888fc", "#9878f8", "#f878f8", "#f85898", "#f87858", "#fca044",
    "#f8b800", "#b8f818", "#58d854", "#58f898", "#00e8d8", "#787878", "#000000", "#000000",
    "#fcfcfc", "#a4e4fc", "#b8b8f8", "#d8b8f8", "#f8b8f8", "#f8a4c0", "#f0d0b0", "#fce0a8",
    "#f8d878", "#d8f878", "#b8f8b8", "#b8f8d8", "#00fcfc", "#f8d8f8", "#000000", "#000000",
)  # fmt: skip


def _expand_3bit(digits: str) -> Tuple[int, int, int]:
    """'573' -> 8-bit channels, d * 255 / 7 rounded to nearest."""
    r, g, b = ((int(d) * 255 + 3) // 7 for d in digits)
    return (r, g, b)


def _pack(rows: Sequence[Tuple[int, int, int]]) -> bytes:
    if len(rows) != PALETTE_SIZE:
        raise ValueError(f"built-in table needs {PALETTE_SIZE} rows, got {len(rows)}")
    return bytes(channel for row in rows for channel in row)


BUILTIN_PALETTES: List[Tuple[str, bytes]] = [
    ("2C03", _pack([_expand_3bit(d) for d in _RGB_PPU_2C03])),
    ("nes-classic", _pack([hex_to_rgb(hx) for hx in _NES_CLASSIC])),
]


# Collections


class PaletteCollection:
    """
    Ordered, named palette byte sources.

    Subclasses implement iter_sources(); lookups are built on top of it.
    """

    def iter_sources(self) -> Iterator[Tuple[str, bytes]]:
        raise NotImplementedError

    def names(self) -> List[str]:
        return [name for name, _src in self.iter_sources()]

    def read(self, name: str) -> bytes:
        """Byte source of the palette called `name` (case-insensitive)."""
        wanted = name.strip().lower()
        for candidate, source in self.iter_sources():
            if candidate.lower() == wanted:
                return source
        raise UnknownPaletteError(name, self.names())


class BuiltinPalettes(PaletteCollection):
    """Palettes shipped inside the package."""

    def __init__(self, table: Sequence[Tuple[str, bytes]] = BUILTIN_PALETTES) -> None:
        self._table = list(table)

    def iter_sources(self) -> Iterator[Tuple[str, bytes]]:
        return iter(self._table)


class DirectoryPalettes(PaletteCollection):
    """Every `*.pal` file directly inside `root`, sorted by file name."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _paths(self) -> List[Path]:
        paths = [
            p
            for p in self.root.iterdir()
            if p.is_file() and p.suffix.lower() == PALETTE_EXTENSION
        ]
        paths.sort(key=lambda p: p.name)
        return paths

    def iter_sources(self) -> Iterator[Tuple[str, bytes]]:
        for path in self._paths():
            yield path.stem, path.read_bytes()

    def names(self) -> List[str]:
        return [p.stem for p in self._paths()]

    def read(self, name: str) -> bytes:
        """Read only the file whose stem matches `name` (case-insensitive)."""
        wanted = name.strip().lower()
        paths = self._paths()
        for path in paths:
            if path.stem.lower() == wanted:
                return path.read_bytes()
        raise UnknownPaletteError(name, [p.stem for p in paths])


def default_collection(palette_dir: Optional[Path] = None) -> PaletteCollection:
    """
    Pick the palette collection for this run.

    Precedence: explicit palette_dir, then $NESPAL_PALETTE_DIR, then built-ins.
    """
    if palette_dir is None:
        env_dir = os.environ.get(PALETTE_DIR_ENV, "").strip()
        if env_dir:
            palette_dir = Path(env_dir)
    if palette_dir is not None:
        return DirectoryPalettes(palette_dir)
    return BuiltinPalettes()


__all__ = [
    "load_palette",
    "palette_to_bytes",
    "BUILTIN_PALETTES",
    "PaletteCollection",
    "BuiltinPalettes",
    "DirectoryPalettes",
    "default_collection",
]
