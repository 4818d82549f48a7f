"""
Track statistics service.

Main entry point: fetch elevations for a track and compute its stats.
"""

import logging
from typing import Callable, Optional, Sequence

from trailstats.shared import Point, ElevationSource, calculate_total_distance, round_half_up
from .providers import get_elevation_provider, resolve_source
from .resolver import ElevationResolver
from .schemas import TrackStats, ElevationTuning
from .stats import compute_stats

logger = logging.getLogger(__name__)


ResolverFactory = Callable[[ElevationSource], ElevationResolver]


def default_resolver_factory(source: ElevationSource) -> ElevationResolver:
    """One resolver (and provider) per call, so tile caches stay call-scoped."""
    return ElevationResolver(get_elevation_provider(source))


class TrackStatsService:
    """
    Service for computing track statistics.

    Usage:
        service = TrackStatsService()
        stats = await service.calculate_track_stats(points)

        # Alternative filter / source:
        tuning = ElevationTuning(method=FilterMethod.HYSTERESIS)
        stats = await service.calculate_track_stats(points, tuning, "terrainrgb")
    """

    def __init__(self, resolver_factory: Optional[ResolverFactory] = None):
        self._resolver_factory = resolver_factory or default_resolver_factory

    def resolver_for(self, source: ElevationSource | str | None = None) -> ElevationResolver:
        """Resolver for a (possibly 'auto') source."""
        return self._resolver_factory(resolve_source(source))

    async def calculate_track_stats(
        self,
        points: Sequence[Point],
        tuning: Optional[ElevationTuning] = None,
        source: ElevationSource | str | None = None,
    ) -> TrackStats:
        """
        Fetch elevations and compute statistics.

        Tracks with fewer than 2 points get all-zero stats without any
        upstream request.

        Args:
            points: Track points
            tuning: Filter overrides
            source: Elevation source (None = configured, 'auto' = default)

        Returns:
            TrackStats
        """
        if len(points) < 2:
            return TrackStats(length_km=round_half_up(calculate_total_distance(points), 2))

        resolver = self.resolver_for(source)
        logger.info(
            f"Calculating stats for {len(points)} points "
            f"(source={resolver.provider.source.value})"
        )

        samples = await resolver.fetch_elevations(points)
        return compute_stats(points, samples, tuning)
