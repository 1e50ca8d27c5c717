"""Default filesystem capabilities used by the scanner."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Iterable

from charset_normalizer import from_bytes

from shelfscan.library.paths import STEAMAPPS_DIR

MANIFEST_PATTERN = "appmanifest_*.acf"
INDEX_FILENAME = "libraryfolders.vdf"


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    best = from_bytes(raw).best()
    if best and best.encoding:
        return raw.decode(best.encoding, errors="replace")
    return raw.decode("utf-8", errors="replace")


def read_document(path: str | Path) -> str:
    """Read a KeyValues document as text.

    The client writes UTF-8, but hand-edited or very old files turn up in
    legacy code pages, so anything that is not valid UTF-8 goes through
    charset detection.
    """

    return _decode(Path(path).read_bytes())


def list_manifest_files(directory: str | Path, pattern: str = MANIFEST_PATTERN) -> list[Path]:
    """Return manifest candidates under *directory* in a stable order."""

    target = Path(directory)
    if not target.is_dir():
        raise FileNotFoundError(f"Library directory not found: {target}")
    return sorted(path for path in target.glob(pattern) if path.is_file())


def default_index_candidates() -> list[Path]:
    home = Path.home()
    if sys.platform.startswith("win"):
        roots = [
            Path(r"C:\Program Files (x86)\Steam"),
            Path(r"C:\Program Files\Steam"),
        ]
    elif sys.platform == "darwin":
        roots = [home / "Library" / "Application Support" / "Steam"]
    else:
        roots = [
            home / ".steam" / "steam",
            home / ".steam" / "root",
            home / ".local" / "share" / "Steam",
            home / ".var" / "app" / "com.valvesoftware.Steam" / ".steam" / "steam",
        ]
    return [root / STEAMAPPS_DIR / INDEX_FILENAME for root in roots]


def find_library_index(candidates: Iterable[Path] | None = None) -> Path | None:
    """Return the first existing root index among the usual install locations."""

    for candidate in candidates if candidates is not None else default_index_candidates():
        if candidate.is_file():
            return candidate
    return None
