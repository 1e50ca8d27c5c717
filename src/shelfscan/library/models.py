"""Canonical data structures shared by the index reader, manifest reader and scanner."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import PurePath

from shelfscan.library.paths import to_platform_path
from shelfscan.search.normalize import normalize_title

# StateFlags bit set by the client once every depot of the app is on disk.
STATE_FULLY_INSTALLED = 4


class WarningKind(Enum):
    PARSE_FAULT = "parse-fault"
    VALIDATION_FAULT = "validation-fault"
    COLLISION = "collision"
    IO_FAULT = "io-fault"


@dataclass(frozen=True, slots=True)
class ScanWarning:
    """A non-fatal problem recorded while building an inventory."""

    kind: WarningKind
    message: str
    path: str | None = None
    app_id: int | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "path": self.path,
            "app_id": self.app_id,
        }


@dataclass(frozen=True, slots=True)
class LibraryRoot:
    """One library folder declared by the root index."""

    path: str
    apps: dict[str, str] = field(default_factory=dict)

    @property
    def location(self) -> PurePath:
        return to_platform_path(self.path)

    def to_dict(self) -> dict[str, object]:
        return {"path": self.path, "apps": dict(self.apps)}


@dataclass(frozen=True, slots=True)
class ItemRecord:
    """Normalized description of one installed app."""

    app_id: int
    name: str
    install_dir: str | None = None
    size_on_disk: int = 0
    last_updated: int = 0
    state_flags: int = 0
    manifest_path: str | None = None
    library_path: str | None = None

    @property
    def search_key(self) -> str:
        return normalize_title(self.name)

    @property
    def last_updated_at(self) -> datetime | None:
        if self.last_updated <= 0:
            return None
        try:
            return datetime.fromtimestamp(self.last_updated, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            # Outside the platform's representable range.
            return None

    @property
    def is_fully_installed(self) -> bool:
        return bool(self.state_flags & STATE_FULLY_INSTALLED)

    def to_dict(self) -> dict[str, object]:
        updated_at = self.last_updated_at
        return {
            "app_id": self.app_id,
            "name": self.name,
            "search_key": self.search_key,
            "install_dir": self.install_dir,
            "size_on_disk": self.size_on_disk,
            "last_updated": self.last_updated,
            "last_updated_at": updated_at.isoformat() if updated_at else None,
            "state_flags": self.state_flags,
            "fully_installed": self.is_fully_installed,
            "manifest_path": self.manifest_path,
            "library_path": self.library_path,
        }


Inventory = dict[int, ItemRecord]


@dataclass(slots=True)
class ScanResult:
    """Inventory snapshot plus the warnings collected during one scan."""

    index_path: str
    roots: list[LibraryRoot] = field(default_factory=list)
    inventory: Inventory = field(default_factory=dict)
    warnings: list[ScanWarning] = field(default_factory=list)

    def warnings_of(self, kind: WarningKind) -> list[ScanWarning]:
        return [warning for warning in self.warnings if warning.kind is kind]

    def to_dict(self) -> dict[str, object]:
        return {
            "index_path": self.index_path,
            "roots": [root.to_dict() for root in self.roots],
            "items": [self.inventory[app_id].to_dict() for app_id in sorted(self.inventory)],
            "warnings": [warning.to_dict() for warning in self.warnings],
        }
