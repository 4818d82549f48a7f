"""
Elevation profile for track previews.

Builds a light, evenly spaced distance/elevation series suitable for a
small chart, cached on the saved track by the caller.
"""

import math
from typing import List, Sequence

from trailstats.shared import Point, distance, round_half_up
from .resolver import ElevationResolver
from .schemas import ProfilePoint

DEFAULT_SPACING_M = 80.0
DEFAULT_MAX_POINTS = 180


def resample_by_distance(
    points: Sequence[Point],
    spacing_m: float = DEFAULT_SPACING_M,
    max_points: int = DEFAULT_MAX_POINTS,
) -> List[Point]:
    """
    Resample a track to roughly uniform spacing.

    Segments longer than spacing_m are split by linear interpolation; the
    last point is always kept. If the result exceeds max_points it is
    thinned by a fixed stride, again keeping the last point.
    """
    if len(points) < 2:
        return list(points)

    out: List[Point] = [points[0]]
    for a, b in zip(points, points[1:]):
        seg_m = distance(a, b) * 1000
        if seg_m <= spacing_m:
            out.append(b)
            continue

        steps = max(1, math.floor(seg_m / spacing_m))
        for s in range(1, steps + 1):
            t = s / steps
            out.append(Point(
                lat=a.lat + (b.lat - a.lat) * t,
                lng=a.lng + (b.lng - a.lng) * t,
            ))

    last = points[-1]
    if (out[-1].lat, out[-1].lng) != (last.lat, last.lng):
        out.append(last)

    if len(out) > max_points:
        stride = math.ceil(len(out) / max_points)
        thinned = out[::stride]
        if thinned[-1] is not out[-1]:
            thinned.append(out[-1])
        return thinned

    return out


async def build_elevation_profile(
    points: Sequence[Point],
    resolver: ElevationResolver,
    spacing_m: float = DEFAULT_SPACING_M,
    max_points: int = DEFAULT_MAX_POINTS,
) -> List[ProfilePoint]:
    """
    Distance/elevation series for a track.

    Returns an empty list for tracks with fewer than 2 points.
    """
    if len(points) < 2:
        return []

    sampling = resample_by_distance(points, spacing_m, max_points)
    samples = await resolver.fetch_elevations(sampling)

    profile = []
    cumulative_km = 0.0
    for i, sample in enumerate(samples):
        if i > 0:
            cumulative_km += distance(sampling[i - 1], sampling[i])
        profile.append(ProfilePoint(
            distance_km=round_half_up(cumulative_km, 3),
            elevation_m=round_half_up(sample.elevation or 0),
        ))

    return profile
