"""User profile (settings screen) stored in the preference store."""

from __future__ import annotations

from typing import Any

from lifesync.models import Coordinate, Profile
from lifesync.prefs import PreferenceStore

PROFILE_KEYS = ("name", "firstName", "email", "homeAddress", "workAddress", "homeLocation", "workLocation")


def load_profile(prefs: PreferenceStore) -> Profile:
    """Read the profile keys; missing keys come back empty."""
    data = {key: prefs.get(key) for key in PROFILE_KEYS}
    return Profile.from_dict(data)


def save_profile(prefs: PreferenceStore, profile: Profile) -> None:
    """Write every profile key in a single preference write."""
    prefs.update(profile.to_dict())


def update_profile(prefs: PreferenceStore, updates: dict[str, Any]) -> Profile:
    """Merge camelCase updates into the stored profile and save it.

    Raises ValueError for out-of-range coordinates.
    """
    current = load_profile(prefs).to_dict()
    for key, value in updates.items():
        if key in PROFILE_KEYS:
            current[key] = value
    profile = Profile.from_dict(current)
    save_profile(prefs, profile)
    return profile


def set_place_location(prefs: PreferenceStore, place: str, location: Coordinate | None) -> Profile:
    """Cache resolved coordinates for "home" or "work"."""
    if place not in {"home", "work"}:
        raise ValueError(f"Unknown place: {place}")
    profile = load_profile(prefs)
    if place == "home":
        profile.home_location = location
    else:
        profile.work_location = location
    save_profile(prefs, profile)
    return profile
