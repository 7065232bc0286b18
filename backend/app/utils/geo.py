"""Geodesic helpers for proximity checks and radius queries."""

import math
from typing import Tuple

EARTH_RADIUS_METERS = 6_371_008.8
METERS_PER_MILE = 1609.34
# widens the prefilter box past float rounding at its edges
BOX_MARGIN_DEGREES = 1e-9


def miles_to_meters(miles: float) -> float:
    return float(miles) * METERS_PER_MILE


def haversine_meters(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


def bounding_box(longitude: float, latitude: float, radius_meters: float) -> Tuple[float, float, float, float]:
    """Degree box ``(west, south, east, north)`` enclosing a circle of ``radius_meters``.

    Used as an index-friendly SQL prefilter; callers refine with :func:`haversine_meters`.
    Near the poles the longitude span widens to the full range.
    """
    angular = radius_meters / EARTH_RADIUS_METERS
    lat_delta = math.degrees(angular) + BOX_MARGIN_DEGREES
    south = max(-90.0, latitude - lat_delta)
    north = min(90.0, latitude + lat_delta)
    cos_lat = math.cos(math.radians(latitude))
    if angular >= math.pi / 2 or math.sin(angular) >= cos_lat or north >= 90.0 or south <= -90.0:
        return -180.0, south, 180.0, north
    # widest longitude reach of a spherical cap, wider than radius / cos(latitude)
    lon_delta = math.degrees(math.asin(math.sin(angular) / cos_lat)) + BOX_MARGIN_DEGREES
    if lon_delta >= 180.0:
        return -180.0, south, 180.0, north
    west = longitude - lon_delta
    east = longitude + lon_delta
    if west < -180.0:
        west += 360.0
    if east > 180.0:
        east -= 360.0
    return west, south, east, north


def validate_coordinates(longitude: float, latitude: float) -> bool:
    return -180.0 <= longitude <= 180.0 and -90.0 <= latitude <= 90.0
