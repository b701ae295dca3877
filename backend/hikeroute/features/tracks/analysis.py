"""
Geometry Engine

Distance, elevation and bounding-box statistics for a trackpoint sequence.
"""

import math
from typing import Sequence

from hikeroute.exceptions import InsufficientPointsError
from hikeroute.shared.geo import (
    haversine,
    leg_distance,
    calculate_bounds,
    calculate_total_distance,
    bounds_center,
)
from .schemas import BoundingBox, Coordinate, LatLng, ProfilePoint, RouteAnalysis


def round_meters(value: float) -> int:
    """Round to the nearest meter, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def calculate_elevation_changes(points: Sequence[Coordinate]) -> tuple[float, float]:
    """
    Total elevation gain and loss, unrounded.

    Only pairs where both points carry an elevation contribute; a missing
    value is not a zero-delta.
    """
    gain = 0.0
    loss = 0.0

    for prev, curr in zip(points, points[1:]):
        if prev.elevation is None or curr.elevation is None:
            continue
        diff = curr.elevation - prev.elevation
        if diff > 0:
            gain += diff
        else:
            loss += abs(diff)

    return gain, loss


def calculate_bounding_box(points: Sequence[Coordinate]) -> BoundingBox:
    """Bounding box with its center and corner radius."""
    north, south, east, west = calculate_bounds(points)
    center_lat, center_lng = bounds_center(north, south, east, west)

    # Distance to the NE corner approximates an enclosing radius
    radius = haversine(center_lat, center_lng, north, east)

    return BoundingBox(
        center=LatLng(lat=center_lat, lng=center_lng),
        radius_km=round(radius, 2),
        north=north,
        south=south,
        east=east,
        west=west,
    )


def analyze_route(points: Sequence[Coordinate]) -> RouteAnalysis:
    """
    Analyze a route.

    Args:
        points: Ordered trackpoints (at least 2)

    Returns:
        RouteAnalysis with distance rounded to 0.01 km and
        gain/loss rounded to whole meters

    Raises:
        InsufficientPointsError: If fewer than 2 points are given
    """
    if len(points) < 2:
        raise InsufficientPointsError(len(points))

    total_distance = calculate_total_distance(points)
    gain, loss = calculate_elevation_changes(points)

    return RouteAnalysis(
        total_distance_km=round(total_distance, 2),
        elevation_gain_m=round_meters(gain),
        elevation_loss_m=round_meters(loss),
        bounding_box=calculate_bounding_box(points),
    )


def calculate_elevation_profile(points: Sequence[Coordinate]) -> list[ProfilePoint]:
    """
    Elevation profile for charting, one sample per point.

    Missing elevation is charted as 0.
    """
    profile: list[ProfilePoint] = []
    cumulative = 0.0

    for i, point in enumerate(points):
        if i > 0:
            cumulative += leg_distance(points[i - 1], point)
        profile.append(ProfilePoint(
            cumulative_distance_km=round(cumulative, 2),
            elevation_m=point.elevation or 0.0,
        ))

    return profile
