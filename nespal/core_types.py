# nespal/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass, field
from typing import BinaryIO, Iterator, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .constants import PALETTE_SIZE

# Basic aliases

RGBTuple = Tuple[int, int, int]
RGBATuple = Tuple[int, int, int, int]
HexStr = str

U8Image = NDArray[np.uint8]  # (H, W, 3)
U8Rows = NDArray[np.uint8]  # (N, 3)

# Anything load_palette() accepts: a buffer or a binary stream
ByteSource = Union[bytes, bytearray, memoryview, BinaryIO]


# Value objects


@dataclass(frozen=True)
class Color:
    """Opaque 8-bit RGB colour. Alpha is always 255."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"channel out of range: {channel}")

    @property
    def rgb(self) -> RGBTuple:
        return (self.r, self.g, self.b)

    @property
    def rgba(self) -> RGBATuple:
        return (self.r, self.g, self.b, 255)

    def __iter__(self) -> Iterator[int]:
        return iter((self.r, self.g, self.b))


@dataclass(frozen=True)
class Palette:
    """
    Exactly PALETTE_SIZE colours in file order.

    `rgb` is a read-only uint8 [P,3] view of the same entries for the
    vectorised paths. It does not take part in equality.
    """

    colors: Tuple[Color, ...]
    rgb: U8Rows = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "colors", tuple(self.colors))
        if len(self.colors) != PALETTE_SIZE:
            raise ValueError(
                f"palette needs {PALETTE_SIZE} entries, got {len(self.colors)}"
            )
        arr = np.array([c.rgb for c in self.colors], dtype=np.uint8)
        arr.setflags(write=False)
        object.__setattr__(self, "rgb", arr)

    def __len__(self) -> int:
        return len(self.colors)

    def __iter__(self) -> Iterator[Color]:
        return iter(self.colors)

    def __getitem__(self, index: int) -> Color:
        return self.colors[index]

    def __contains__(self, item: object) -> bool:
        return item in self.colors


# Small helpers


def rgb_to_hex(rgb: Sequence[int]) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{int(rgb[0]):02x}{int(rgb[1]):02x}{int(rgb[2]):02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rrggbb' or 'rrggbb' (case-insensitive) into an RGB tuple."""
    s = hex_str.strip().lower().lstrip("#")
    if len(s) != 6:
        raise ValueError("hex must be '#rrggbb'")
    return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))


def assert_u8_image_rgb(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,3) image and return it typed as U8Image."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] != 3:
        raise TypeError("expected uint8 (H,W,3) image")
    return image


__all__ = [
    # aliases / types
    "RGBTuple",
    "RGBATuple",
    "HexStr",
    "U8Image",
    "U8Rows",
    "ByteSource",
    # value objects
    "Color",
    "Palette",
    # helpers
    "rgb_to_hex",
    "hex_to_rgb",
    "assert_u8_image_rgb",
]
