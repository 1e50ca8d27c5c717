"""Search key derivation and title matching."""

from .normalize import normalize_title, search_tokens

__all__ = ["normalize_title", "search_tokens"]
