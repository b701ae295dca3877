"""
Day-Split Advisor

Suggests where to break a long route into roughly equal-distance days.
"""

import logging
from typing import Sequence

from hikeroute.shared.geo import leg_distance
from .analysis import analyze_route
from .schemas import Coordinate, SplitSuggestion

logger = logging.getLogger(__name__)

# A day closes once this share of the per-day target is covered
DAY_TARGET_RATIO = 0.9


def suggest_day_splits(
    points: Sequence[Coordinate],
    target_days: int,
) -> list[SplitSuggestion]:
    """
    Suggest split points for a multi-day route.

    Greedy single pass: a split is emitted at the first point where the
    distance walked since the previous split reaches 90% of the per-day
    target. At most target_days - 1 splits are returned.

    Args:
        points: Ordered trackpoints
        target_days: Number of days to spread the route over

    Returns:
        Split suggestions in route order; empty if target_days <= 1 or
        the route has fewer than 2 points per day. distance_km and
        elevation_gain_m cover the points from the previous split through
        split_index, so consecutive days share their boundary point.
    """
    if target_days <= 1 or len(points) < target_days * 2:
        return []

    analysis = analyze_route(points)
    target_per_day = analysis.total_distance_km / target_days
    threshold = target_per_day * DAY_TARGET_RATIO

    suggestions: list[SplitSuggestion] = []
    accumulated = 0.0
    last_split = 0

    for i in range(1, len(points)):
        if len(suggestions) >= target_days - 1:
            break

        accumulated += leg_distance(points[i - 1], points[i])
        if accumulated < threshold:
            continue

        day = analyze_route(points[last_split:i + 1])
        day_number = len(suggestions) + 1
        suggestions.append(SplitSuggestion(
            split_index=i,
            coordinate=points[i],
            reason=f"Day {day_number} → Day {day_number + 1}",
            distance_km=day.total_distance_km,
            elevation_gain_m=day.elevation_gain_m,
        ))

        last_split = i
        accumulated = 0.0

    logger.debug(
        f"Day splits: {len(suggestions)} for {target_days} days, "
        f"target {target_per_day:.2f} km/day"
    )
    return suggestions
