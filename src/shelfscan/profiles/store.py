"""JSON-backed profile store composing builtin and user profiles at read time."""

from __future__ import annotations

from dataclasses import dataclass, replace
import json
import logging
from pathlib import Path
import uuid

from shelfscan.profiles.models import BUILTIN_PROFILE_IDS, BUILTIN_PROFILES, Profile

logger = logging.getLogger(__name__)

DEFAULT_PROFILES_PATH = ".shelfscan-profiles.json"


@dataclass(slots=True)
class BuiltinProfileError(Exception):
    """Builtin profiles are read-only."""

    profile_id: str

    def __str__(self) -> str:
        return f"Cannot modify built-in profile: {self.profile_id}"


class ProfileStore:
    """Builtin profiles plus user profiles persisted as a JSON array."""

    def __init__(self, path: str | Path = DEFAULT_PROFILES_PATH) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _load_user_profiles(self) -> list[Profile]:
        if not self._path.exists():
            return []

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Failed to load profiles from %s: %s", self._path, exc)
            return []

        if not isinstance(data, list):
            logger.warning("Invalid profiles format in %s: not an array", self._path)
            return []

        profiles: list[Profile] = []
        for entry in data:
            if not isinstance(entry, dict):
                continue
            try:
                profiles.append(Profile.from_json(entry))
            except ValueError as exc:
                logger.debug("Rejected stored profile: %s", exc)

        skipped = len(data) - len(profiles)
        if skipped:
            logger.warning("Skipped %d invalid profile(s) in %s", skipped, self._path)
        return profiles

    def _save_user_profiles(self, profiles: list[Profile]) -> None:
        payload = [profile.to_json() for profile in profiles]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError:
            logger.exception("Failed to save profiles to %s", self._path)
            raise

    def all_profiles(self) -> list[Profile]:
        return [*BUILTIN_PROFILES, *self._load_user_profiles()]

    def get(self, profile_id: str) -> Profile | None:
        for profile in self.all_profiles():
            if profile.id == profile_id:
                return profile
        return None

    def save(self, profile: Profile) -> Profile:
        """Insert or replace a user profile; an empty id gets a fresh uuid4."""

        profile_id = profile.id or str(uuid.uuid4())
        if profile_id in BUILTIN_PROFILE_IDS:
            raise BuiltinProfileError(profile_id)

        stored = replace(profile, id=profile_id, is_builtin=False)
        user_profiles = self._load_user_profiles()
        for index, existing in enumerate(user_profiles):
            if existing.id == profile_id:
                user_profiles[index] = stored
                break
        else:
            user_profiles.append(stored)

        self._save_user_profiles(user_profiles)
        return stored

    def delete(self, profile_id: str) -> bool:
        """Remove a user profile, returning False when it does not exist."""

        if profile_id in BUILTIN_PROFILE_IDS:
            raise BuiltinProfileError(profile_id)

        user_profiles = self._load_user_profiles()
        remaining = [profile for profile in user_profiles if profile.id != profile_id]
        if len(remaining) == len(user_profiles):
            return False

        self._save_user_profiles(remaining)
        return True
