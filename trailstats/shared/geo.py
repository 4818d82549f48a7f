"""
Geographic utility functions.

This is the SINGLE SOURCE OF TRUTH for geographic calculations.
DO NOT duplicate these functions elsewhere.
"""
import math
from typing import Sequence

from .track_types import Point

# Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate great-circle distance between two points.

    Out-of-range coordinates are not validated and still produce a number.

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


def distance(p1: Point, p2: Point) -> float:
    """Great-circle distance between two points in kilometers."""
    return haversine(p1.lat, p1.lng, p2.lat, p2.lng)


def calculate_total_distance(points: Sequence[Point]) -> float:
    """
    Calculate total distance for a route.

    Args:
        points: Ordered track points

    Returns:
        Total distance in kilometers
    """
    total = 0.0

    for i in range(1, len(points)):
        total += distance(points[i - 1], points[i])

    return total


def segment_distances_m(points: Sequence) -> list[float]:
    """
    Ground distance of every consecutive pair, in meters.

    Works for anything with lat/lng attributes (points or elevation samples).
    """
    return [
        haversine(a.lat, a.lng, b.lat, b.lng) * 1000
        for a, b in zip(points, points[1:])
    ]
