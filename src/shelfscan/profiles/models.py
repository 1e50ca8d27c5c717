"""DXVK profile records and the builtin profile set."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

LOG_LEVELS = ("none", "error", "warn", "info", "debug", "trace")

# profiles.json stores camelCase keys.
_JSON_FIELDS = {
    "id": "id",
    "name": "name",
    "description": "description",
    "is_builtin": "isBuiltin",
    "enable_async": "enableAsync",
    "num_compiler_threads": "numCompilerThreads",
    "max_frame_latency": "maxFrameLatency",
    "sync_interval": "syncInterval",
    "log_level": "logLevel",
    "enable_hdr": "enableHDR",
    "hud": "hud",
}


def _optional_bool(payload: Mapping[str, Any], key: str) -> bool | None:
    value = payload.get(key)
    if value is not None and not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean")
    return value


def _optional_int(payload: Mapping[str, Any], key: str) -> int | None:
    value = payload.get(key)
    # bool is an int subclass; true/false is not a count.
    if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
        raise ValueError(f"{key} must be an integer")
    return value


@dataclass(frozen=True, slots=True)
class Profile:
    """One named set of DXVK overrides."""

    id: str
    name: str
    description: str = ""
    is_builtin: bool = False
    enable_async: bool | None = None
    num_compiler_threads: int | None = None
    max_frame_latency: int | None = None
    sync_interval: int | None = None
    log_level: str | None = None
    enable_hdr: bool | None = None
    hud: tuple[str, ...] = field(default_factory=tuple)

    def to_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for attribute, value in asdict(self).items():
            if value is None:
                continue
            if attribute == "hud":
                if not value:
                    continue
                value = list(value)
            payload[_JSON_FIELDS[attribute]] = value
        return payload

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "Profile":
        """Build a profile from a stored entry; raises ValueError when invalid."""

        profile_id = payload.get("id")
        name = payload.get("name")
        if not isinstance(profile_id, str) or not profile_id:
            raise ValueError("profile id must be a non-empty string")
        if not isinstance(name, str):
            raise ValueError("profile name must be a string")
        is_builtin = payload.get("isBuiltin", False)
        if not isinstance(is_builtin, bool):
            raise ValueError("isBuiltin must be a boolean")
        log_level = payload.get("logLevel")
        if log_level is not None and log_level not in LOG_LEVELS:
            raise ValueError(f"unknown logLevel {log_level!r}")
        hud = payload.get("hud") or ()
        if not isinstance(hud, (list, tuple)) or not all(isinstance(item, str) for item in hud):
            raise ValueError("hud must be a list of strings")

        return cls(
            id=profile_id,
            name=name,
            description=str(payload.get("description") or ""),
            is_builtin=is_builtin,
            enable_async=_optional_bool(payload, "enableAsync"),
            num_compiler_threads=_optional_int(payload, "numCompilerThreads"),
            max_frame_latency=_optional_int(payload, "maxFrameLatency"),
            sync_interval=_optional_int(payload, "syncInterval"),
            log_level=log_level,
            enable_hdr=_optional_bool(payload, "enableHDR"),
            hud=tuple(hud),
        )


BUILTIN_PROFILES: tuple[Profile, ...] = (
    Profile(
        id="builtin-default",
        name="DXVK Defaults",
        description="Standard DXVK behavior with no overrides.",
        is_builtin=True,
        enable_async=True,
        log_level="warn",
    ),
    Profile(
        id="builtin-performance",
        name="Max Performance",
        description="Optimized for lowest latency and highest throughput.",
        is_builtin=True,
        enable_async=True,
        num_compiler_threads=0,  # auto
        max_frame_latency=1,
        sync_interval=0,  # no vsync
        log_level="none",
        enable_hdr=False,
    ),
    Profile(
        id="builtin-compatibility",
        name="Compatibility Mode",
        description="Safest settings for troublesome games.",
        is_builtin=True,
        enable_async=False,
        num_compiler_threads=1,
        max_frame_latency=3,
        log_level="info",
    ),
    Profile(
        id="builtin-debugging",
        name="Debugging",
        description="Enables HUD and detailed logging.",
        is_builtin=True,
        enable_async=True,
        hud=("full",),
        log_level="debug",
    ),
)

BUILTIN_PROFILE_IDS = frozenset(profile.id for profile in BUILTIN_PROFILES)
