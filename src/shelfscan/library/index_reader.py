"""Library root extraction from a parsed ``libraryfolders.vdf`` tree."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from shelfscan.keyvalues.parser import FormatNode, first_block, lookup
from shelfscan.library.models import LibraryRoot, ScanWarning, WarningKind

logger = logging.getLogger(__name__)

INDEX_ROOT_KEY = "libraryfolders"


@dataclass(slots=True)
class IndexFormatError(Exception):
    """The root index has no library folder block at all."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class IndexReading:
    roots: list[LibraryRoot] = field(default_factory=list)
    warnings: list[ScanWarning] = field(default_factory=list)


def _read_apps(entry: FormatNode) -> dict[str, str]:
    apps = lookup(entry, "apps")
    if not isinstance(apps, dict):
        return {}
    return {app_id: token for app_id, token in apps.items() if isinstance(token, str)}


def read_index(node: FormatNode, *, source: str | None = None) -> IndexReading:
    """Collect library roots from a parsed root index document.

    Numerically keyed children of the root block are library folders; the
    ordinal key itself is discarded. Entries without a ``path`` are skipped
    with a warning and a missing ``apps`` block yields an empty mapping.
    """

    folders = first_block(node, INDEX_ROOT_KEY)
    if folders is None:
        raise IndexFormatError("Root index has no library folder block")

    reading = IndexReading()
    for ordinal, entry in folders.items():
        if not ordinal.isdigit():
            logger.debug("Ignoring non-library key %r in root index", ordinal)
            continue

        if not isinstance(entry, dict):
            reading.warnings.append(
                ScanWarning(
                    kind=WarningKind.VALIDATION_FAULT,
                    message=f"Library entry {ordinal} is not a block",
                    path=source,
                )
            )
            continue

        path = lookup(entry, "path")
        if not isinstance(path, str) or not path.strip():
            reading.warnings.append(
                ScanWarning(
                    kind=WarningKind.VALIDATION_FAULT,
                    message=f"Library entry {ordinal} has no path",
                    path=source,
                )
            )
            continue

        reading.roots.append(LibraryRoot(path=path, apps=_read_apps(entry)))

    return reading
