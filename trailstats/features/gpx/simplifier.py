"""
Polyline Simplifier

Reduces a dense track to a smaller, shape-preserving point sequence.

Two reductions are available and may run in sequence:
- simplify(): Ramer-Douglas-Peucker, keeps shape within a tolerance but
  gives no hard bound on output size
- reduce_to_max_points(): uniform index sampling, guarantees a ceiling
  on output size regardless of geometry

Both return an ordered subsequence of the input, always
including the first and last point.
"""

import math
from typing import List, Sequence

from trailstats.shared import Point, METERS_PER_DEGREE, round_half_up


def perpendicular_distance(point: Point, line_start: Point, line_end: Point) -> float:
    """
    Distance from a point to the segment line_start-line_end.

    (lat, lng) are treated as planar Cartesian coordinates, so the result
    is in degrees. Only relative comparisons matter to the simplifier.
    """
    x, y = point.lat, point.lng
    x1, y1 = line_start.lat, line_start.lng
    x2, y2 = line_end.lat, line_end.lng

    c = x2 - x1
    d = y2 - y1
    len_sq = c * c + d * d

    # Degenerate chord: distance to the start point
    param = -1.0
    if len_sq != 0:
        param = ((x - x1) * c + (y - y1) * d) / len_sq

    if param < 0:
        xx, yy = x1, y1
    elif param > 1:
        xx, yy = x2, y2
    else:
        xx, yy = x1 + param * c, y1 + param * d

    return math.hypot(x - xx, y - yy)


def ramer_douglas_peucker(points: Sequence[Point], epsilon: float) -> List[Point]:
    """
    Ramer-Douglas-Peucker reduction with tolerance in degrees.

    Each sub-range either collapses to its endpoints or splits at the
    point farthest from its chord. Sub-ranges are kept on an explicit
    stack so long tracks never hit the interpreter recursion limit.
    """
    n = len(points)
    if n <= 2:
        return list(points)

    keep = [False] * n
    keep[0] = keep[-1] = True
    stack = [(0, n - 1)]

    while stack:
        start, end = stack.pop()
        if end - start < 2:
            continue

        max_distance = -1.0
        max_index = start
        for i in range(start + 1, end):
            dist = perpendicular_distance(points[i], points[start], points[end])
            if dist > max_distance:
                max_distance = dist
                max_index = i

        if max_distance > epsilon:
            keep[max_index] = True
            stack.append((max_index, end))
            stack.append((start, max_index))

    return [p for p, kept in zip(points, keep) if kept]


def simplify(points: Sequence[Point], tolerance_m: float) -> List[Point]:
    """
    Simplify a track within a perpendicular tolerance.

    The tolerance is converted with a flat 111320 m/degree factor, which
    loosens it east-west at high latitudes.

    Args:
        points: Ordered track points
        tolerance_m: Maximum deviation in meters

    Returns:
        Simplified points (input unchanged when it has 2 points or fewer)
    """
    if len(points) <= 2:
        return list(points)

    tolerance_degrees = tolerance_m / METERS_PER_DEGREE
    return ramer_douglas_peucker(points, tolerance_degrees)


def reduce_to_max_points(points: Sequence[Point], max_points: int) -> List[Point]:
    """
    Cap a track at max_points by uniform index sampling.

    First and last points are always kept; max_points - 2 interior points
    are taken at equal index strides (nearest index).

    Raises:
        ValueError: If max_points is below 2
    """
    if max_points < 2:
        raise ValueError(f"max_points must be at least 2, got {max_points}")

    if len(points) <= max_points:
        return list(points)

    step = (len(points) - 1) / (max_points - 1)
    result = [points[0]]

    for i in range(1, max_points - 1):
        result.append(points[int(round_half_up(i * step))])

    result.append(points[-1])
    return result
