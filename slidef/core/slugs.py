"""Filesystem- and URL-safe identifiers for slide decks.

``allocate_slug`` is a pure function over a snapshot of existing slugs.
It does not reserve anything: callers that may run imports concurrently
must re-read the existing slugs and serialize the check-then-create step
themselves (one writer per store).
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Collection

FALLBACK_SLUG = "untitled"
SEPARATOR = "-"

_ILLEGAL = re.compile(r"[^a-z0-9]+")


def normalize_slug(base_name: str) -> str:
    """Normalize a display name into a slug token.

    Lowercases, folds accents to ASCII, collapses every run of whitespace or
    illegal characters into a single ``-`` and trims separators from both
    ends.  Names with nothing usable left become ``"untitled"``.
    """
    folded = (
        unicodedata.normalize("NFKD", base_name)
        .encode("ascii", "ignore")
        .decode("ascii")
        .lower()
    )
    token = _ILLEGAL.sub(SEPARATOR, folded).strip(SEPARATOR)
    return token or FALLBACK_SLUG


def allocate_slug(base_name: str, existing: Collection[str]) -> str:
    """Return a slug for *base_name* that is not in *existing*.

    >>> allocate_slug("My Talk", set())
    'my-talk'
    >>> allocate_slug("My Talk", {"my-talk"})
    'my-talk-2'
    >>> allocate_slug("My Talk", {"my-talk", "my-talk-2"})
    'my-talk-3'
    """
    slug = normalize_slug(base_name)
    if slug not in existing:
        return slug

    counter = 2
    while f"{slug}{SEPARATOR}{counter}" in existing:
        counter += 1
    return f"{slug}{SEPARATOR}{counter}"


def is_valid_slug(slug: str) -> bool:
    """Whether *slug* is already in normalized form."""
    return bool(slug) and normalize_slug(slug) == slug
