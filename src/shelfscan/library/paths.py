"""Path-style detection for library folder values."""

from __future__ import annotations

import re
from pathlib import Path, PurePath, PureWindowsPath

_DRIVE_ROOT_RE = re.compile(r"^[A-Za-z]:\\")

STEAMAPPS_DIR = "steamapps"


def is_drive_rooted(path: str) -> bool:
    """Return True when *path* starts with a drive letter followed by ``:\\``."""

    return bool(_DRIVE_ROOT_RE.match(path))


def to_platform_path(raw: str) -> PurePath:
    """Turn a ``path`` value from the root index into a usable library root.

    Drive-rooted values are already absolute Windows roots and are kept as
    :class:`PureWindowsPath`; anything else is treated as a POSIX-style
    path with ``~`` expanded.
    """

    if is_drive_rooted(raw):
        return PureWindowsPath(raw)
    return Path(raw).expanduser()


def manifest_directory(root: PurePath) -> PurePath:
    return root / STEAMAPPS_DIR
