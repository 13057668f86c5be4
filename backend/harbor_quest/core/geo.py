"""Geo Utility — great-circle distance and bearing over a spherical Earth.

Invariants:
    - Coordinate is valid on construction: latitude ∈ [-90, 90], longitude ∈ [-180, 180]
    - haversine_distance is symmetric and returns 0.0 for identical coordinates
    - All functions are PURE: no IO, no side effects

Design Decisions:
    - Haversine over Vincenty: sub-percent error at Finnish-coast scale, closed form, no iteration
    - Mean Earth radius in meters so callers never convert units
"""

import math
from dataclasses import dataclass

from harbor_quest.core.domain_types import Meters
from harbor_quest.core.errors import InvalidCoordinateError


EARTH_RADIUS_M: float = 6_371_000.0
COORDINATE_TOLERANCE_M: float = 1e-6

_COMPASS_POINTS: tuple[str, ...] = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


@dataclass(frozen=True)
class Coordinate:
    """A point in decimal degrees."""
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        lat, lng = self.latitude, self.longitude
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise InvalidCoordinateError(lat, lng)
        if not -90.0 <= lat <= 90.0 or not -180.0 <= lng <= 180.0:
            raise InvalidCoordinateError(lat, lng)


def haversine_distance(a: Coordinate, b: Coordinate) -> Meters:
    """Great-circle distance in meters between two coordinates."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lng = math.radians(b.longitude - a.longitude)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    )
    # Rounding can push h a hair outside [0, 1] for antipodal points
    h = min(1.0, max(0.0, h))
    return Meters(2 * EARTH_RADIUS_M * math.asin(math.sqrt(h)))


def same_point(a: Coordinate, b: Coordinate) -> bool:
    """True when a and b are within COORDINATE_TOLERANCE_M of each other."""
    return haversine_distance(a, b) <= COORDINATE_TOLERANCE_M


def initial_bearing(origin: Coordinate, target: Coordinate) -> float:
    """Forward azimuth from origin to target, degrees in [0, 360)."""
    lat1, lat2 = math.radians(origin.latitude), math.radians(target.latitude)
    d_lng = math.radians(target.longitude - origin.longitude)
    x = math.sin(d_lng) * math.cos(lat2)
    y = (
        math.cos(lat1) * math.sin(lat2)
        - math.sin(lat1) * math.cos(lat2) * math.cos(d_lng)
    )
    return math.degrees(math.atan2(x, y)) % 360.0


def compass_direction(bearing: float) -> str:
    """Eight-point compass name for a bearing in degrees."""
    index = int(((bearing % 360.0) + 22.5) // 45.0) % len(_COMPASS_POINTS)
    return _COMPASS_POINTS[index]
