# nespal/__init__.py
"""
nespal package.

Purpose:
  Identify which NES/Famicom palette an image was drawn with, or remap an
  image onto one. See nespal.cli for the command line.

Public API:
  load_palette     : decode 192 bytes into a 64-entry Palette.
  weighted_distance: 2/3/1 weighted squared RGB distance.
  nearest_colour   : closest palette entry, lowest index wins ties.
  uses_palette     : True if an image is already expressed in a palette.
  remap_image      : project every pixel onto a palette.
  identify         : first matching palette from a candidate set.

Quick start:
  from nespal import load_palette, identify, remap_image, BuiltinPalettes
  from nespal.image_io import load_image_rgb, save_image_rgb
"""

__version__ = "0.1.0"

from .core_types import Color, Palette
from .errors import (
    MalformedPaletteError,
    MissingCandidateError,
    NespalError,
    UnknownPaletteError,
    UnsupportedOutputFormatError,
    UnsupportedPaletteFormatError,
    UsageError,
)
from .palette_data import (
    BUILTIN_PALETTES,
    BuiltinPalettes,
    DirectoryPalettes,
    load_palette,
)
from .colour_distance import weighted_distance
from .nearest import nearest_colour
from .verify import uses_palette
from .remap import remap_image
from .identify import IdentifyResult, identify

__all__ = [
    "__version__",
    "Color",
    "Palette",
    "NespalError",
    "MalformedPaletteError",
    "MissingCandidateError",
    "UnknownPaletteError",
    "UnsupportedOutputFormatError",
    "UnsupportedPaletteFormatError",
    "UsageError",
    "BUILTIN_PALETTES",
    "BuiltinPalettes",
    "DirectoryPalettes",
    "load_palette",
    "weighted_distance",
    "nearest_colour",
    "uses_palette",
    "remap_image",
    "IdentifyResult",
    "identify",
]
