"""
Geographic utility functions.

This is the SINGLE SOURCE OF TRUTH for geographic calculations.
DO NOT duplicate these functions elsewhere.

haversine takes plain degrees; the other helpers take any objects
exposing ``lat`` and ``lng`` attributes (Coordinate schemas, ORM rows).
"""
import math
from typing import Iterable, Protocol, Sequence

# Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0


class LatLng(Protocol):
    lat: float
    lng: float


def haversine(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate great-circle distance between two points.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) *
        math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def leg_distance(a: LatLng, b: LatLng) -> float:
    """Haversine distance between two coordinate objects, in km."""
    return haversine(a.lat, a.lng, b.lat, b.lng)


def calculate_total_distance(points: Sequence[LatLng]) -> float:
    """
    Calculate total distance for a route.

    Args:
        points: Ordered coordinates

    Returns:
        Total distance in kilometers (unrounded)
    """
    total = 0.0

    for i in range(1, len(points)):
        total += leg_distance(points[i - 1], points[i])

    return total


def calculate_bounds(points: Iterable[LatLng]) -> tuple[float, float, float, float]:
    """
    Extreme latitudes/longitudes of a point set.

    Returns:
        (north, south, east, west)

    Raises:
        ValueError: If points is empty
    """
    points = list(points)
    if not points:
        raise ValueError("Cannot compute bounds of an empty point set")

    lats = [p.lat for p in points]
    lngs = [p.lng for p in points]
    return max(lats), min(lats), max(lngs), min(lngs)


def bounds_center(
    north: float, south: float,
    east: float, west: float
) -> tuple[float, float]:
    """Midpoint of a bounding box as (lat, lng)."""
    return (north + south) / 2, (east + west) / 2


def route_bounds(
    points: Iterable[LatLng]
) -> tuple[tuple[float, float], tuple[float, float]]:
    """
    Bounding box in the [[south, west], [north, east]] form map widgets
    expect for ``fitBounds``.
    """
    north, south, east, west = calculate_bounds(points)
    return (south, west), (north, east)
