"""Item record extraction from a parsed ``appmanifest_*.acf`` tree."""

from __future__ import annotations

from dataclasses import dataclass, field

from shelfscan.keyvalues.parser import FormatNode, first_block, lookup
from shelfscan.library.models import ItemRecord, ScanWarning, WarningKind

MANIFEST_ROOT_KEY = "AppState"


@dataclass(slots=True)
class ManifestError(Exception):
    """A manifest lacks a field every item record requires."""

    message: str
    path: str | None = None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message} (path={self.path})"


@dataclass(slots=True)
class ManifestResult:
    record: ItemRecord
    warnings: list[ScanWarning] = field(default_factory=list)


def _scalar(state: FormatNode, key: str) -> str | None:
    value = lookup(state, key)
    if isinstance(value, str):
        return value.strip()
    return None


def _parse_int(
    state: FormatNode,
    key: str,
    *,
    path: str | None,
    app_id: int | None,
    warnings: list[ScanWarning],
) -> int:
    raw = _scalar(state, key)
    if raw is None or raw == "":
        return 0
    try:
        return int(raw)
    except ValueError:
        warnings.append(
            ScanWarning(
                kind=WarningKind.VALIDATION_FAULT,
                message=f"Non-numeric {key} value {raw!r}; using 0",
                path=path,
                app_id=app_id,
            )
        )
        return 0


def read_manifest(
    node: FormatNode,
    *,
    path: str | None = None,
    library_path: str | None = None,
) -> ManifestResult:
    """Build an :class:`ItemRecord` from one parsed manifest.

    ``appid`` and ``name`` are required; every other field is optional.
    Numeric fields, ``appid`` included, fall back to zero with a warning when
    their value is not an integer.
    """

    state = first_block(node, MANIFEST_ROOT_KEY)
    if state is None:
        raise ManifestError("Manifest has no app state block", path)

    if not _scalar(state, "appid"):
        raise ManifestError("Manifest is missing appid", path)
    name = _scalar(state, "name")
    if not name:
        raise ManifestError("Manifest is missing name", path)

    warnings: list[ScanWarning] = []
    app_id = _parse_int(state, "appid", path=path, app_id=None, warnings=warnings)
    record = ItemRecord(
        app_id=app_id,
        name=name,
        install_dir=_scalar(state, "installdir") or None,
        size_on_disk=_parse_int(state, "SizeOnDisk", path=path, app_id=app_id, warnings=warnings),
        last_updated=_parse_int(state, "LastUpdated", path=path, app_id=app_id, warnings=warnings),
        state_flags=_parse_int(state, "StateFlags", path=path, app_id=app_id, warnings=warnings),
        manifest_path=path,
        library_path=library_path,
    )
    return ManifestResult(record=record, warnings=warnings)
