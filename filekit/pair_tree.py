"""Derive "pair tree" directory paths from barcode strings."""
from __future__ import annotations

from pathlib import Path
from typing import List

from .errors import InvalidArgumentError

LIBRARY_PREFIX = "36105"
"""Barcode prefix that is kept whole as the first path segment."""

SHORT_PREFIX_LENGTH = 3
PAIR_CHARACTERS = 6


def _pairs(text: str) -> List[str]:
    return [text[index:index + 2] for index in range(0, len(text), 2)]


def pair_tree_from_barcode(barcode: str) -> str:
    """Return the slash-delimited pair tree dirname for ``barcode``.

    Barcodes starting with ``36105`` keep that prefix as the first segment and
    use the next six characters as three two-character segments. Any other
    barcode uses its first three characters as the prefix instead::

        >>> pair_tree_from_barcode("36105123456")
        '36105/12/34/56'
        >>> pair_tree_from_barcode("ABC123456")
        'ABC/12/34/56'

    Barcodes shorter than the expected length are truncated rather than
    rejected: only the characters present contribute segments, and a trailing
    odd character becomes a one-character segment.
    """

    if not isinstance(barcode, str):
        raise InvalidArgumentError("Barcode must be a String")

    prefix = barcode[:len(LIBRARY_PREFIX)]
    if prefix != LIBRARY_PREFIX:
        prefix = barcode[:SHORT_PREFIX_LENGTH]
    start = len(prefix)

    segments = [prefix, *_pairs(barcode[start:start + PAIR_CHARACTERS])]
    return "/".join(segment for segment in segments if segment)


def pair_tree_path(root: Path | str, barcode: str) -> Path:
    """Return the pair tree directory for ``barcode`` beneath ``root``."""

    return Path(root) / pair_tree_from_barcode(barcode)


__all__ = ["LIBRARY_PREFIX", "pair_tree_from_barcode", "pair_tree_path"]
