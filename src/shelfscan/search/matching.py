"""Title lookup over inventory records by search key."""

from __future__ import annotations

from typing import Iterable

from shelfscan.library.models import ItemRecord
from shelfscan.search.normalize import normalize_title


def match_title(query: str, records: Iterable[ItemRecord]) -> list[ItemRecord]:
    """Return records whose title matches *query*.

    An exact search-key match wins outright. Otherwise every record whose key
    contains all query tokens is returned, shortest title first, so
    ``"path of exile"`` prefers *Path of Exile* over *Path of Exile 2*.
    """

    key = normalize_title(query)
    if not key:
        return []

    candidates = list(records)
    exact = [record for record in candidates if record.search_key == key]
    if exact:
        return exact

    query_tokens = key.split()
    partial: list[ItemRecord] = []
    for record in candidates:
        record_tokens = record.search_key.split()
        if all(any(token in word for word in record_tokens) for token in query_tokens):
            partial.append(record)

    partial.sort(key=lambda record: (len(record.name), record.app_id))
    return partial
