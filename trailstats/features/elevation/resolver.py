"""
Elevation Resolver

Fetches raw elevation samples for a point sequence from one provider.

Batches are issued strictly one after another with a fixed pause in
between to stay under third-party rate limits. This is throttling by
delay, not a true rate limiter: a burst right after a pause is possible.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from trailstats.config import settings
from trailstats.shared import Point, ElevationSample
from .providers import (
    ElevationProvider,
    ElevationError,
    ElevationProviderError,
    get_elevation_provider,
)

logger = logging.getLogger(__name__)


class ElevationResolver:
    """
    Resolve elevations for a track, degrading to a flat profile on failure.

    Usage:
        resolver = ElevationResolver(get_elevation_provider("auto"))
        samples = await resolver.fetch_elevations(points)
    """

    def __init__(
        self,
        provider: Optional[ElevationProvider] = None,
        batch_size: int = settings.elevation_batch_size,
        batch_delay_seconds: float = settings.elevation_batch_delay_seconds,
    ):
        self.provider = provider or get_elevation_provider()
        self.batch_size = batch_size
        self.batch_delay_seconds = batch_delay_seconds

    async def fetch_elevations(self, points: Sequence[Point]) -> List[ElevationSample]:
        """
        Elevation sample for every point, in input order.

        Any provider failure (network, HTTP status, payload, count mismatch)
        abandons the whole operation and returns zero elevation for every
        point: downstream treats zero as "statistics unavailable".

        Args:
            points: Track points

        Returns:
            One ElevationSample per point (len(output) == len(points))
        """
        if not points:
            return []

        try:
            return await self._fetch_batches(points)
        except ElevationError as e:
            logger.error(
                f"Elevation lookup failed ({self.provider.source.value}), "
                f"using flat profile for {len(points)} points: {e}"
            )
            return [ElevationSample(lat=p.lat, lng=p.lng, elevation=0.0) for p in points]

    async def _fetch_batches(self, points: Sequence[Point]) -> List[ElevationSample]:
        samples: List[ElevationSample] = []
        total_batches = (len(points) + self.batch_size - 1) // self.batch_size

        for batch_number, start in enumerate(range(0, len(points), self.batch_size), 1):
            batch = points[start:start + self.batch_size]
            logger.debug(
                f"Fetching elevations for {len(batch)} points "
                f"(batch {batch_number}/{total_batches})"
            )

            elevations = await self.provider.lookup(batch)
            if len(elevations) != len(batch):
                raise ElevationProviderError(
                    f"Expected {len(batch)} elevations, received {len(elevations)}"
                )

            samples.extend(
                ElevationSample(lat=p.lat, lng=p.lng, elevation=ele)
                for p, ele in zip(batch, elevations)
            )

            if start + self.batch_size < len(points):
                await asyncio.sleep(self.batch_delay_seconds)

        return samples
