"""Canonical forms for indexed paths and search queries.

Both sides of a lookup must agree, so every key stored in the index and
every query run against it passes through here. Case folding is ASCII-only;
no Unicode normalization is applied.
"""

from __future__ import annotations

import re

from driveplane.config.constants import PATH_SEPARATOR

_ASCII_FOLD = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ",
    "abcdefghijklmnopqrstuvwxyz",
)

_DOUBLED_SEPARATOR = re.compile(re.escape(PATH_SEPARATOR) + "{2,}")


def ascii_lower(text: str) -> str:
    """Lowercase A-Z only; every other character passes through unchanged."""
    return text.translate(_ASCII_FOLD)


def normalize_path(raw: str) -> str:
    """Return the index key for a raw drive path.

    Lowercases, trims surrounding whitespace and collapses runs of path
    separators into one. Idempotent.
    """
    return _DOUBLED_SEPARATOR.sub(PATH_SEPARATOR, ascii_lower(raw).strip())


def normalize_query(raw: str) -> str:
    """Return the comparable form of a user query.

    Like normalize_path, but every space is dropped so multi-word input
    matches regardless of where separators fall in the path.
    """
    return ascii_lower(raw).strip().replace(" ", "")
