"""
Route Simplifier

Douglas-Peucker polyline simplification over (lng, lat) in degree units.
"""

from typing import Sequence

from .schemas import Coordinate

DEFAULT_TOLERANCE = 0.0001


def _sq_segment_distance(p: Coordinate, a: Coordinate, b: Coordinate) -> float:
    """Squared planar distance from p to segment a-b."""
    x, y = a.lng, a.lat
    dx = b.lng - x
    dy = b.lat - y

    if dx != 0 or dy != 0:
        t = ((p.lng - x) * dx + (p.lat - y) * dy) / (dx * dx + dy * dy)
        if t > 1:
            x, y = b.lng, b.lat
        elif t > 0:
            x += dx * t
            y += dy * t

    dx = p.lng - x
    dy = p.lat - y
    return dx * dx + dy * dy


def simplify_indices(points: Sequence[Coordinate], tolerance: float) -> list[int]:
    """
    Indices of the points Douglas-Peucker keeps, in ascending order.

    Uses an explicit stack of (first, last) ranges so long tracks do not
    hit the recursion limit.
    """
    last_index = len(points) - 1
    if last_index < 2:
        return list(range(len(points)))

    sq_tolerance = tolerance * tolerance
    keep = {0, last_index}
    stack = [(0, last_index)]

    while stack:
        first, last = stack.pop()
        max_sq_dist = sq_tolerance
        index = None

        for i in range(first + 1, last):
            sq_dist = _sq_segment_distance(points[i], points[first], points[last])
            if sq_dist > max_sq_dist:
                index = i
                max_sq_dist = sq_dist

        if index is not None:
            keep.add(index)
            if index - first > 1:
                stack.append((first, index))
            if last - index > 1:
                stack.append((index, last))

    return sorted(keep)


def simplify_route(
    points: Sequence[Coordinate],
    tolerance: float = DEFAULT_TOLERANCE,
) -> list[Coordinate]:
    """
    Reduce point count while keeping the path within tolerance.

    Args:
        points: Ordered trackpoints
        tolerance: Max deviation in degrees

    Returns:
        Surviving points with their original elevation; first and
        last points are always kept
    """
    if len(points) <= 2:
        return list(points)

    return [points[i] for i in simplify_indices(points, tolerance)]
