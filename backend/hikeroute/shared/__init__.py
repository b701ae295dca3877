"""
Shared utilities (NOT business logic).

Usage:
    from hikeroute.shared import haversine, calculate_total_distance
    from hikeroute.shared.storage import LocalObjectStore
"""
from .geo import (
    haversine,
    leg_distance,
    calculate_total_distance,
    calculate_bounds,
    bounds_center,
    route_bounds,
    EARTH_RADIUS_KM,
)
from .repository import BaseRepository

__all__ = [
    # geo
    "haversine",
    "leg_distance",
    "calculate_total_distance",
    "calculate_bounds",
    "bounds_center",
    "route_bounds",
    "EARTH_RADIUS_KM",
    # repository
    "BaseRepository",
]
