"""Runtime configuration for scanning and profile storage."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping

from shelfscan.library.files import MANIFEST_PATTERN
from shelfscan.profiles.store import DEFAULT_PROFILES_PATH

DEFAULT_SCAN_WORKERS = 1

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(*, name: str, raw_value: str) -> bool:
    value = raw_value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (got {raw_value!r})")


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer (got {raw_value!r})") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class ShelfSettings:
    """Validated scanner and profile store settings."""

    library_index: Path | None = None
    profiles_path: Path = Path(DEFAULT_PROFILES_PATH)
    manifest_pattern: str = MANIFEST_PATTERN
    strict_parse: bool = False
    scan_workers: int = DEFAULT_SCAN_WORKERS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ShelfSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        index_raw = source.get("SHELFSCAN_LIBRARY_INDEX", "").strip()
        profiles_raw = source.get("SHELFSCAN_PROFILES_PATH", DEFAULT_PROFILES_PATH).strip()
        pattern_raw = source.get("SHELFSCAN_MANIFEST_PATTERN", MANIFEST_PATTERN).strip()
        strict_raw = source.get("SHELFSCAN_STRICT_PARSE", "false")
        workers_raw = source.get("SHELFSCAN_SCAN_WORKERS", str(DEFAULT_SCAN_WORKERS)).strip()

        if not profiles_raw:
            raise ValueError("SHELFSCAN_PROFILES_PATH cannot be empty")
        if not pattern_raw:
            raise ValueError("SHELFSCAN_MANIFEST_PATTERN cannot be empty")
        if not workers_raw:
            raise ValueError("SHELFSCAN_SCAN_WORKERS cannot be empty")

        return cls(
            library_index=Path(index_raw).expanduser() if index_raw else None,
            profiles_path=Path(profiles_raw).expanduser(),
            manifest_pattern=pattern_raw,
            strict_parse=_parse_bool(name="SHELFSCAN_STRICT_PARSE", raw_value=strict_raw),
            scan_workers=_parse_positive_int(name="SHELFSCAN_SCAN_WORKERS", raw_value=workers_raw),
        )
