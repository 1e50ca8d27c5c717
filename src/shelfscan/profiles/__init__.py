"""DXVK profile catalog with immutable builtins and persisted user entries."""

from .models import BUILTIN_PROFILE_IDS, BUILTIN_PROFILES, Profile
from .store import BuiltinProfileError, ProfileStore

__all__ = ["BUILTIN_PROFILES", "BUILTIN_PROFILE_IDS", "BuiltinProfileError", "Profile", "ProfileStore"]
