# nespal/errors.py
from __future__ import annotations

"""
Exception types raised by nespal.

Every error carries the CLI exit code it maps to:
  1 -> fatal I/O or decode problem
  2 -> usage / configuration problem
"""

from typing import Iterable

from .constants import (
    EXIT_FAILURE,
    EXIT_USAGE,
    OUTPUT_FORMATS,
    PALETTE_BYTES,
    PALETTE_EXTENSION,
)


class NespalError(Exception):
    """Base class for all nespal errors."""

    exit_code: int = EXIT_FAILURE


class MalformedPaletteError(NespalError):
    """Palette byte source ended before PALETTE_BYTES bytes were read."""

    exit_code = EXIT_FAILURE

    def __init__(self, got: int, name: str | None = None) -> None:
        self.got = got
        self.name = name
        where = f" '{name}'" if name else ""
        super().__init__(
            f"malformed palette{where}: expected {PALETTE_BYTES} bytes, got {got}"
        )


class UsageError(NespalError):
    """Bad command line arguments."""

    exit_code = EXIT_USAGE


class UnsupportedOutputFormatError(UsageError):
    """Remap output path has an extension no encoder handles."""

    def __init__(self, path: str) -> None:
        self.path = path
        supported = ", ".join(sorted(OUTPUT_FORMATS))
        super().__init__(
            f"output type of '{path}' is not a supported format (expected one of {supported})"
        )


class UnsupportedPaletteFormatError(UsageError):
    """Palette path does not end in PALETTE_EXTENSION."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"unsupported palette file format for '{path}', expected '{PALETTE_EXTENSION}'"
        )


class MissingCandidateError(UsageError):
    """Custom-only identification requested without any custom palettes."""

    def __init__(self) -> None:
        super().__init__("flag 'custom-only' requires input color palettes")


class UnknownPaletteError(UsageError):
    """Named palette is not part of the palette collection."""

    def __init__(self, name: str, known: Iterable[str] = ()) -> None:
        self.name = name
        self.known = list(known)
        super().__init__(f"palette '{name}' not in the palette list")


__all__ = [
    "NespalError",
    "MalformedPaletteError",
    "UsageError",
    "UnsupportedOutputFormatError",
    "UnsupportedPaletteFormatError",
    "MissingCandidateError",
    "UnknownPaletteError",
]
