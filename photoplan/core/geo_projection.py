# core/geo_projection.py
"""
Local tangent plane <-> geodetic conversion.

Equirectangular (flat-earth) approximation around a reference point. Suitable
for survey areas of a few kilometres; error grows with distance from the
origin and with |lat0|.

    x = East displacement in meters
    y = North displacement in meters
"""

import math
from typing import Iterable, Tuple

EARTH_RADIUS_M = 6378137.0  # WGS84 equatorial radius
HAVERSINE_RADIUS_M = 6371000.0


def to_planar(lat0: float, lon0: float, lat: float, lon: float) -> Tuple[float, float]:
    """Convert lat/lon to meters from the reference point (lat0, lon0)."""
    d_lat = math.radians(lat - lat0)
    d_lon = math.radians(lon - lon0)
    y = d_lat * EARTH_RADIUS_M
    x = d_lon * EARTH_RADIUS_M * math.cos(math.radians(lat0))
    return x, y


def to_geodetic(lat0: float, lon0: float, x: float, y: float) -> Tuple[float, float]:
    """Convert meters from the reference point back to (lat, lon).

    Exact algebraic inverse of to_planar() for the same lat0.
    """
    lat = lat0 + math.degrees(y / EARTH_RADIUS_M)
    lon = lon0 + math.degrees(x / (EARTH_RADIUS_M * math.cos(math.radians(lat0))))
    return lat, lon


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate distance between two GPS coordinates in meters."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (math.sin(delta_lat / 2) * math.sin(delta_lat / 2) +
         math.cos(lat1_rad) * math.cos(lat2_rad) *
         math.sin(delta_lon / 2) * math.sin(delta_lon / 2))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return HAVERSINE_RADIUS_M * c


def path_length(points: Iterable[Tuple[float, float]]) -> float:
    """Total horizontal length in meters of a (lat, lon) polyline."""
    total = 0.0
    prev = None
    for lat, lon in points:
        if prev is not None:
            total += haversine_distance(prev[0], prev[1], lat, lon)
        prev = (lat, lon)
    return total
