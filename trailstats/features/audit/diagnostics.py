"""
Elevation diagnostics.

Developer tools for judging elevation sources and filter methods on
real stored tracks:
- compare_sources: API vs terrain-rgb gain/loss per track
- verify_track: every method x source combination for one track
"""

import asyncio
import logging
from typing import List, Optional

from trailstats.shared import ElevationSource, FilterMethod
from trailstats.features.elevation import TrackStatsService, ElevationTuning, compute_stats
from trailstats.features.tracks import TrackStore
from .schemas import (
    SourceComparison,
    SourceComparisonRow,
    Verification,
    VerificationRow,
)

logger = logging.getLogger(__name__)

COMPARE_PACING_SECONDS = 0.2

VERIFY_SOURCES = (ElevationSource.API, ElevationSource.TERRAIN_RGB)
VERIFY_METHODS = (FilterMethod.HYSTERESIS, FilterMethod.SIMPLE)


def suggest_combination(results: List[VerificationRow]) -> Optional[VerificationRow]:
    """
    Pick the combination to trust for a track.

    Descending tracks (loss > gain on average) are judged by loss,
    everything else by gain; the combination with the largest value wins.
    """
    usable = [r for r in results if r.error is None]
    if not usable:
        return None

    mean_gain = sum(r.gain for r in usable) / len(usable)
    mean_loss = sum(r.loss for r in usable) / len(usable)

    if mean_loss > mean_gain:
        return max(usable, key=lambda r: r.loss)
    return max(usable, key=lambda r: r.gain)


class ElevationDiagnostics:
    """
    Source and method diagnostics over a track store.

    Usage:
        diagnostics = ElevationDiagnostics(store)
        comparison = await diagnostics.compare_sources(max_tracks=10)
        verification = await diagnostics.verify_track("Morning Ridge")
    """

    def __init__(
        self,
        store: TrackStore,
        stats_service: Optional[TrackStatsService] = None,
        pacing_seconds: float = COMPARE_PACING_SECONDS,
    ):
        self.store = store
        self.stats_service = stats_service or TrackStatsService()
        self.pacing_seconds = pacing_seconds

    async def compare_sources(
        self,
        max_tracks: Optional[int] = None,
        tuning: Optional[ElevationTuning] = None,
    ) -> SourceComparison:
        """
        Compute gain/loss with both sources for each track.

        Tracks with fewer than 2 points are ignored; a track that fails
        is logged and left out of the aggregate.
        """
        tracks = [t for t in await self.store.list_tracks() if len(t.points) >= 2]
        if max_tracks is not None:
            tracks = tracks[:max_tracks]

        rows: List[SourceComparisonRow] = []
        for track in tracks:
            try:
                api = await self.stats_service.calculate_track_stats(
                    track.points, tuning, ElevationSource.API
                )
                dem = await self.stats_service.calculate_track_stats(
                    track.points, tuning, ElevationSource.TERRAIN_RGB
                )
            except Exception as e:
                logger.warning(f"Source comparison failed for {track.name}: {e}")
                continue

            rows.append(SourceComparisonRow(
                id=track.id,
                name=track.name,
                points=len(track.points),
                api_gain=api.elevation_gain_m,
                api_loss=api.elevation_loss_m,
                dem_gain=dem.elevation_gain_m,
                dem_loss=dem.elevation_loss_m,
            ))

            await asyncio.sleep(self.pacing_seconds)

        count = len(rows)
        mean_gain = sum(r.d_gain for r in rows) / count if count else 0.0
        mean_loss = sum(r.d_loss for r in rows) / count if count else 0.0

        logger.info(
            f"Compared sources on {count} tracks: "
            f"mean dD+ {mean_gain:+.1f} m, mean dD- {mean_loss:+.1f} m"
        )
        return SourceComparison(
            rows=rows,
            count=count,
            mean_gain_delta=mean_gain,
            mean_loss_delta=mean_loss,
        )

    async def verify_track(
        self,
        id_or_name: str,
        tuning: Optional[ElevationTuning] = None,
    ) -> Optional[Verification]:
        """
        Run every method x source combination over the same points.

        Elevations are fetched once per source; both methods then run on
        those samples.

        Returns:
            Verification, or None if the track is unknown or too short
        """
        track = await self.store.get_track(id_or_name)
        if track is None or len(track.points) < 2:
            logger.warning(f"Track not found or too short: {id_or_name}")
            return None

        base = tuning or ElevationTuning()
        results: List[VerificationRow] = []

        for source in VERIFY_SOURCES:
            samples = await self.stats_service.resolver_for(source).fetch_elevations(track.points)

            for method in VERIFY_METHODS:
                try:
                    stats = compute_stats(
                        track.points,
                        samples,
                        base.model_copy(update={"method": method}),
                    )
                except Exception as e:
                    logger.warning(f"{track.name}: {method.value}/{source.value} failed: {e}")
                    results.append(VerificationRow(method=method, source=source, error=str(e)))
                    continue

                results.append(VerificationRow(
                    method=method,
                    source=source,
                    length_km=stats.length_km,
                    gain=stats.elevation_gain_m,
                    loss=stats.elevation_loss_m,
                    min_elevation=stats.min_elevation_m,
                    max_elevation=stats.max_elevation_m,
                ))

        return Verification(
            track_id=track.id,
            track_name=track.name,
            points=len(track.points),
            results=results,
            suggested=suggest_combination(results),
        )
