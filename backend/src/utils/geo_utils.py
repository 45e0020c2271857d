"""Great-circle distance helpers for report lookups."""

import math

# Earth's radius in miles
EARTH_RADIUS_MILES = 3959.0


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Args:
        lat1: Latitude of first point in degrees
        lon1: Longitude of first point in degrees
        lat2: Latitude of second point in degrees
        lon2: Longitude of second point in degrees

    Returns:
        Distance in miles
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_MILES * c


def is_within_radius(
    center_lat: float,
    center_lon: float,
    lat: float,
    lon: float,
    radius_miles: float,
) -> bool:
    """Boundary is inclusive: a point exactly radius_miles away is inside."""
    return haversine_distance(center_lat, center_lon, lat, lon) <= radius_miles


def bounding_box(
    lat: float, lon: float, radius_miles: float
) -> tuple[float, float, float, float]:
    """
    Calculate a bounding box around a point for coarse pre-filtering.

    The box is padded slightly so it never excludes a point the exact
    haversine check would keep.

    Returns:
        Tuple of (min_lat, max_lat, min_lon, max_lon) in degrees
    """
    # Angular radius, padded 1%
    angle = radius_miles * 1.01 / EARTH_RADIUS_MILES
    delta_lat = math.degrees(angle)
    cos_lat = math.cos(math.radians(lat))

    # The circle contains a pole or spans every meridian
    if lat + delta_lat >= 90.0 or lat - delta_lat <= -90.0 or math.sin(angle) >= cos_lat:
        delta_lon = 180.0
    else:
        delta_lon = math.degrees(math.asin(math.sin(angle) / cos_lat))

    return (
        max(lat - delta_lat, -90.0),
        min(lat + delta_lat, 90.0),
        lon - delta_lon,
        lon + delta_lon,
    )
