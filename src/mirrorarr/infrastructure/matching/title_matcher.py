"""Title similarity for matching mirror search results against a query.

Pure transformation logic with no I/O and no framework dependencies.

Uses **rapidfuzz** for fuzzy comparison and **unidecode** so that accented
titles ("Amélie") compare equal to their ASCII spelling.
"""

from __future__ import annotations

import re

from rapidfuzz import fuzz
from unidecode import unidecode as _unidecode

# Matches any character that is NOT a word character or whitespace.
# Strips punctuation so "Spider-Man: No Way Home" == "spider man no way home".
_PUNCT_RE = re.compile(r"[^\w\s]")

# Apostrophes are dropped rather than turned into spaces ("Ocean's" -> "oceans").
_APOSTROPHE_RE = re.compile(r"['’`]")

DEFAULT_SIMILARITY_THRESHOLD = 0.9


def normalize_title(text: str) -> str:
    """Lowercase, transliterate Unicode→ASCII, strip punctuation, collapse ws."""
    text = _unidecode(text.lower())
    text = _APOSTROPHE_RE.sub("", text)
    text = _PUNCT_RE.sub(" ", text)
    return " ".join(text.split())


def title_similarity(a: str, b: str) -> float:
    """Return the similarity of two titles in ``0.0``–``1.0``."""
    norm_a = normalize_title(a)
    norm_b = normalize_title(b)
    if not norm_a or not norm_b:
        return 0.0
    if norm_a == norm_b:
        return 1.0
    # processor=None because the strings are already normalised.
    return fuzz.ratio(norm_a, norm_b, processor=None) / 100.0


def is_similar_title(
    a: str,
    b: str,
    threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> bool:
    """Case- and punctuation-insensitive fuzzy title equality.

    ``threshold`` is the minimum rapidfuzz ratio (``0.0``–``1.0``).  Sequels
    differ by a single token and usually fall below the default of ``0.9``
    for short titles ("Iron Man" vs "Iron Man 2" scores ~0.89).
    """
    return title_similarity(a, b) >= threshold
