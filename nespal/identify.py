# nespal/identify.py
from __future__ import annotations

"""
Palette identification.

Walks a candidate set in priority order (custom palettes, then the palette
collection) and reports the first palette the image verifies against.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from .core_types import ByteSource, Palette, U8Image
from .errors import MissingCandidateError
from .palette_data import PaletteCollection, load_palette
from .verify import uses_palette

Candidate = Tuple[str, ByteSource]  # (name, byte source)


@dataclass(frozen=True)
class IdentifyResult:
    """Outcome of identify(). name is None when nothing matched."""

    name: Optional[str]
    palette: Optional[Palette] = None
    tried: int = 0

    @property
    def matched(self) -> bool:
        return self.name is not None


def iter_candidates(
    custom: Sequence[Candidate],
    collection: Optional[PaletteCollection],
    custom_only: bool = False,
) -> Iterator[Candidate]:
    """
    Candidate set in priority order.

    The collection is only touched once the custom palettes are exhausted,
    and never when custom_only is set.
    """
    if custom_only and not custom:
        raise MissingCandidateError()
    yield from custom
    if not custom_only and collection is not None:
        yield from collection.iter_sources()


def identify(
    img_rgb: U8Image,
    custom: Sequence[Candidate] = (),
    collection: Optional[PaletteCollection] = None,
    *,
    custom_only: bool = False,
) -> IdentifyResult:
    """
    Find the first candidate palette the image is already expressed in.

    Raises MissingCandidateError for custom_only without custom palettes.
    A malformed candidate aborts the whole search. No match is a normal
    result with name=None.
    """
    candidates: Iterable[Candidate] = iter_candidates(custom, collection, custom_only)
    tried = 0
    for name, source in candidates:
        palette = load_palette(source, name)
        tried += 1
        if uses_palette(img_rgb, palette):
            return IdentifyResult(name=name, palette=palette, tried=tried)
    return IdentifyResult(name=None, tried=tried)


__all__ = ["Candidate", "IdentifyResult", "iter_candidates", "identify"]
