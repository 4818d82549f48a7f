"""
Saved track repository.

Data access layer for SavedTrackRecord, plus the SQL-backed TrackStore.
"""

from typing import Iterable, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from trailstats.shared import Point
from trailstats.shared.repository import BaseRepository
from trailstats.features.elevation.schemas import ProfilePoint
from .models import SavedTrackRecord
from .schemas import SavedTrack, TrackStatsUpdate
from .store import TrackStore, TrackChangeListener


class SavedTrackRepository(BaseRepository[SavedTrackRecord]):
    """Repository for saved track operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, SavedTrackRecord)

    async def list_ordered(self) -> list[SavedTrackRecord]:
        """All tracks, oldest first."""
        result = await self.db.execute(
            select(SavedTrackRecord).order_by(
                SavedTrackRecord.created_at, SavedTrackRecord.id
            )
        )
        return list(result.scalars().all())

    async def get_by_id_or_name(self, id_or_name: str) -> SavedTrackRecord | None:
        """
        Get track by ID, falling back to a case-insensitive name match.

        Args:
            id_or_name: Track ID or name

        Returns:
            First matching track or None
        """
        record = await self.get_by_id(id_or_name)
        if record:
            return record

        result = await self.db.execute(
            select(SavedTrackRecord)
            .where(func.lower(SavedTrackRecord.name) == id_or_name.lower())
            .limit(1)
        )
        return result.scalar_one_or_none()


def to_saved_track(record: SavedTrackRecord) -> SavedTrack:
    """Convert a stored record to the pipeline's SavedTrack."""
    profile = None
    if record.elevation_profile:
        profile = [ProfilePoint(**p) for p in record.elevation_profile]

    return SavedTrack(
        id=record.id,
        name=record.name or "",
        description=record.description,
        points=[Point.from_dict(p) for p in record.points or []],
        elevation_gain_m=record.elevation_gain_m,
        elevation_loss_m=record.elevation_loss_m,
        length_km=record.length_km,
        elevation_profile=profile,
    )


class SQLTrackStore(TrackStore):
    """
    TrackStore over SQLAlchemy async sessions.

    Each call runs in its own session and commits on success.

    Usage:
        store = SQLTrackStore(AsyncSessionLocal)
        tracks = await store.list_tracks()
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        listeners: Optional[Iterable[TrackChangeListener]] = None,
    ):
        super().__init__(listeners)
        self._session_factory = session_factory

    async def add_track(
        self,
        name: str,
        points: Sequence[Point],
        description: Optional[str] = None,
    ) -> SavedTrack:
        """Store a new track without statistics."""
        async with self._session_factory() as db:
            record = await SavedTrackRepository(db).create(
                name=name,
                description=description,
                points=[p.to_dict() for p in points],
            )
            await db.commit()
            return to_saved_track(record)

    async def list_tracks(self) -> List[SavedTrack]:
        async with self._session_factory() as db:
            records = await SavedTrackRepository(db).list_ordered()
            return [to_saved_track(r) for r in records]

    async def get_track(self, id_or_name: str) -> Optional[SavedTrack]:
        async with self._session_factory() as db:
            record = await SavedTrackRepository(db).get_by_id_or_name(id_or_name)
            return to_saved_track(record) if record else None

    async def _write_stats(self, updates: Sequence[TrackStatsUpdate]) -> List[SavedTrack]:
        updated = []
        async with self._session_factory() as db:
            repo = SavedTrackRepository(db)
            for update in updates:
                record = await repo.get_by_id(update.track_id)
                if record is None:
                    continue

                changes = {
                    "elevation_gain_m": update.elevation_gain_m,
                    "elevation_loss_m": update.elevation_loss_m,
                }
                if update.length_km is not None:
                    changes["length_km"] = update.length_km

                record = await repo.update(record, **changes)
                updated.append(to_saved_track(record))

            await db.commit()
        return updated

    async def save_elevation_profile(self, track_id, profile):
        async with self._session_factory() as db:
            repo = SavedTrackRepository(db)
            record = await repo.get_by_id(track_id)
            if record is None:
                return None
            record = await repo.update(
                record,
                elevation_profile=[p.model_dump() for p in profile],
            )
            await db.commit()
            return to_saved_track(record)
