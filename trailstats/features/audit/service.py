"""
Elevation audit service.

Batch-recomputes statistics for stored tracks, compares them with the
cached values and optionally writes corrections back.

A track is corrected when any of these holds:
- |gain diff| >= min_diff_meters or |loss diff| >= min_diff_meters
- |gain diff %| >= min_diff_percent or |loss diff %| >= min_diff_percent

The absolute rule catches long tracks with small relative drift; the
relative rule catches short tracks where a few meters matter.
"""

import asyncio
import logging
from typing import List, Optional

from trailstats.shared import ElevationSource
from trailstats.shared.constants import (
    SKIP_TOO_FEW_POINTS,
    SKIP_ALREADY_COMPUTED,
    SKIP_CALCULATION_ERROR,
)
from trailstats.features.elevation import (
    TrackStatsService,
    TrackStats,
    ElevationTuning,
    ProfilePoint,
    build_elevation_profile,
)
from trailstats.features.tracks import SavedTrack, TrackStore, TrackStatsUpdate
from .schemas import AuditOptions, AuditRow, AuditSummary

logger = logging.getLogger(__name__)


def _percent(diff: float, old: Optional[float]) -> Optional[float]:
    if old is None or old <= 0:
        return None
    return diff / old * 100


def build_audit_row(
    track: SavedTrack,
    stats: TrackStats,
    options: AuditOptions,
) -> AuditRow:
    """
    Compare stored and fresh gain/loss for one track.

    Missing stored values count as zero for the absolute diff and have
    no percent diff.
    """
    old_gain = track.elevation_gain_m
    old_loss = track.elevation_loss_m
    new_gain = stats.elevation_gain_m
    new_loss = stats.elevation_loss_m

    diff_gain = new_gain - old_gain if old_gain is not None else new_gain
    diff_loss = new_loss - old_loss if old_loss is not None else new_loss
    diff_gain_pct = _percent(diff_gain, old_gain)
    diff_loss_pct = _percent(diff_loss, old_loss)

    should_update = options.update_storage and (
        abs(diff_gain) >= options.min_diff_meters
        or abs(diff_loss) >= options.min_diff_meters
        or (diff_gain_pct is not None and abs(diff_gain_pct) >= options.min_diff_percent)
        or (diff_loss_pct is not None and abs(diff_loss_pct) >= options.min_diff_percent)
    )

    return AuditRow(
        id=track.id,
        name=track.name,
        points=len(track.points),
        old_gain=old_gain,
        old_loss=old_loss,
        new_gain=new_gain,
        new_loss=new_loss,
        diff_gain=diff_gain,
        diff_loss=diff_loss,
        diff_gain_pct=diff_gain_pct,
        diff_loss_pct=diff_loss_pct,
        updated=should_update,
    )


class ElevationAuditService:
    """
    Audit stored elevation statistics.

    Tracks are processed strictly one at a time with a pause between
    recomputes; a failure on one track is recorded and the run continues.

    Usage:
        service = ElevationAuditService(store)
        summary = await service.audit(AuditOptions(update_storage=True))
    """

    def __init__(
        self,
        store: TrackStore,
        stats_service: Optional[TrackStatsService] = None,
    ):
        self.store = store
        self.stats_service = stats_service or TrackStatsService()

    async def audit(self, options: Optional[AuditOptions] = None) -> AuditSummary:
        """
        Run the audit.

        Args:
            options: Audit options (defaults from settings)

        Returns:
            AuditSummary with one row per processed track
        """
        options = options or AuditOptions()

        tracks = await self.store.list_tracks()
        target = tracks[:options.max_tracks] if options.max_tracks is not None else tracks

        rows: List[AuditRow] = []
        pending: List[TrackStatsUpdate] = []
        skipped = 0

        for i, track in enumerate(target):
            label = f"({i + 1}/{len(target)}) {track.name}"

            if len(track.points) < 2:
                rows.append(AuditRow(
                    id=track.id,
                    name=track.name,
                    points=len(track.points),
                    skipped_reason=SKIP_TOO_FEW_POINTS,
                ))
                skipped += 1
                continue

            if not options.force_recalculate and track.has_elevation_stats:
                rows.append(AuditRow(
                    id=track.id,
                    name=track.name,
                    points=len(track.points),
                    old_gain=track.elevation_gain_m,
                    old_loss=track.elevation_loss_m,
                    new_gain=track.elevation_gain_m,
                    new_loss=track.elevation_loss_m,
                    skipped_reason=SKIP_ALREADY_COMPUTED,
                ))
                skipped += 1
                continue

            try:
                stats = await self.stats_service.calculate_track_stats(
                    track.points,
                    options.tuning_overrides,
                    options.source,
                )
                row = build_audit_row(track, stats, options)
            except Exception as e:
                logger.warning(f"{label}: recalculation failed: {e}")
                rows.append(AuditRow(
                    id=track.id,
                    name=track.name,
                    points=len(track.points),
                    skipped_reason=SKIP_CALCULATION_ERROR,
                ))
                skipped += 1
                continue

            rows.append(row)
            if row.updated:
                pending.append(TrackStatsUpdate(
                    track_id=track.id,
                    elevation_gain_m=row.new_gain,
                    elevation_loss_m=row.new_loss,
                ))
            logger.debug(
                f"{label}: D+ {row.old_gain} -> {row.new_gain}, "
                f"D- {row.old_loss} -> {row.new_loss}, updated={row.updated}"
            )

            # Pause before the next track's elevation fetch
            if i < len(target) - 1:
                await asyncio.sleep(options.batch_delay_ms / 1000)

        if pending:
            await self.store.update_stats(pending)

        summary = AuditSummary(
            total=len(tracks),
            processed=len(target),
            updated=len(pending),
            skipped=skipped,
            rows=rows,
        )
        logger.info(
            f"Elevation audit: {summary.processed}/{summary.total} processed, "
            f"{summary.updated} updated, {summary.skipped} skipped"
        )
        return summary

    async def recalc_track(
        self,
        id_or_name: str,
        tuning: Optional[ElevationTuning] = None,
        source: ElevationSource | str | None = None,
    ) -> Optional[SavedTrack]:
        """
        Recompute and persist gain, loss and length for one track.

        Returns:
            Updated track, or None if not found / too few points
        """
        track = await self.store.get_track(id_or_name)
        if track is None:
            logger.warning(f"Track not found: {id_or_name}")
            return None

        if len(track.points) < 2:
            logger.warning(f"Track {track.name}: {SKIP_TOO_FEW_POINTS}")
            return None

        stats = await self.stats_service.calculate_track_stats(track.points, tuning, source)
        updated = await self.store.update_stats([TrackStatsUpdate(
            track_id=track.id,
            elevation_gain_m=stats.elevation_gain_m,
            elevation_loss_m=stats.elevation_loss_m,
            length_km=stats.length_km,
        )])

        logger.info(
            f"Recalculated {track.name}: D+ {stats.elevation_gain_m}, "
            f"D- {stats.elevation_loss_m}, {stats.length_km} km"
        )
        return updated[0] if updated else None

    async def refresh_profile(
        self,
        id_or_name: str,
        source: ElevationSource | str | None = None,
        force: bool = False,
    ) -> List[ProfilePoint]:
        """
        Elevation profile for a track, built and cached on first use.

        Args:
            id_or_name: Track ID or name
            source: Elevation source
            force: Rebuild even if a cached profile exists

        Returns:
            Profile points (empty if the track is unknown or too short)
        """
        track = await self.store.get_track(id_or_name)
        if track is None or len(track.points) < 2:
            return []

        if track.elevation_profile and not force:
            return track.elevation_profile

        resolver = self.stats_service.resolver_for(source)
        profile = await build_elevation_profile(track.points, resolver)
        await self.store.save_elevation_profile(track.id, profile)
        return profile
