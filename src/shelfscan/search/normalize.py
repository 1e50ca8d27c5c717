from __future__ import annotations

import re

_LOWER_TO_UPPER_OR_DIGIT_RE = re.compile(r"([a-z])([A-Z0-9])")
_DIGIT_TO_UPPER_RE = re.compile(r"(\d)([A-Z])")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def split_words(title: str) -> str:
    """Insert spaces at camel-case and letter/digit case transitions.

    Runs of digits stay together and titles without an internal
    lowercase-to-uppercase (or digit-to-uppercase) transition are left alone.
    """

    spaced = _LOWER_TO_UPPER_OR_DIGIT_RE.sub(r"\1 \2", title)
    return _DIGIT_TO_UPPER_RE.sub(r"\1 \2", spaced)


def normalize_title(title: str) -> str:
    """Return the lowercased, word-segmented search key for *title*.

    >>> normalize_title("HalfLife2")
    'half life 2'
    """

    return normalize_whitespace(split_words(title)).lower()


def search_tokens(title: str) -> list[str]:
    """Split the search key of *title* into tokens."""

    return normalize_title(title).split()
