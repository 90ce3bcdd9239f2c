"""Distance to home/work and presence detection for LifeSync."""

from __future__ import annotations

import math

from lifesync.models import Coordinate, PlaceDistance, Presence, Profile

EARTH_RADIUS_KM = 6371.0088
DEFAULT_RADIUS_KM = 1.0


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates (haversine)."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def place_distance(place: str, current: Coordinate, target: Coordinate | None,
                   radius_km: float = DEFAULT_RADIUS_KM) -> PlaceDistance:
    if target is None:
        return PlaceDistance(place=place)
    d = distance_km(current, target)
    return PlaceDistance(place=place, distance_km=d, at_place=d <= radius_km)


def presence(current: Coordinate, home: Coordinate | None, work: Coordinate | None,
             radius_km: float = DEFAULT_RADIUS_KM) -> Presence:
    """Where the user is relative to home and work.

    A place with no known coordinates reports no distance and is never "at".
    """
    return Presence(
        home=place_distance("home", current, home, radius_km),
        work=place_distance("work", current, work, radius_km),
    )


def presence_for_profile(current: Coordinate, profile: Profile,
                         radius_km: float = DEFAULT_RADIUS_KM) -> Presence:
    return presence(current, profile.home_location, profile.work_location, radius_km)


def format_distance(km: float | None) -> str:
    if km is None:
        return "unknown"
    return f"{km:.2f} km"
