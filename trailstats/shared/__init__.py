"""
Shared utilities (NOT business logic).

Usage:
    from trailstats.shared import haversine, Point
    from trailstats.shared.elevation import smooth_elevations
"""
from .track_types import Point, ElevationSample
from .geo import (
    haversine,
    distance,
    calculate_total_distance,
    segment_distances_m,
    EARTH_RADIUS_KM,
)
from .elevation import (
    smooth_elevations,
    naive_elevation_gain,
    median,
    round_half_up,
)
from .constants import (
    ElevationSource,
    FilterMethod,
    METERS_PER_DEGREE,
)

__all__ = [
    # types
    "Point",
    "ElevationSample",
    # geo
    "haversine",
    "distance",
    "calculate_total_distance",
    "segment_distances_m",
    "EARTH_RADIUS_KM",
    # elevation
    "smooth_elevations",
    "naive_elevation_gain",
    "median",
    "round_half_up",
    # constants
    "ElevationSource",
    "FilterMethod",
    "METERS_PER_DEGREE",
]
