"""
Track storage collaborator.

The statistics pipeline reads track points and writes back recomputed
statistics through this interface; how tracks are stored is up to the
implementation. Dependent views subscribe with add_listener() and are
told about writes through TrackChangeEvent.
"""

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, Union

from trailstats.features.elevation.schemas import ProfilePoint
from .schemas import SavedTrack, TrackStatsUpdate, TrackChangeEvent, TRACKS_UPDATED

logger = logging.getLogger(__name__)


TrackChangeListener = Callable[[TrackChangeEvent], Union[None, Awaitable[None]]]


class TrackStore(ABC):
    """
    Base class for track storage.

    Subclasses implement the data access; change notification is shared.
    """

    def __init__(self, listeners: Optional[Iterable[TrackChangeListener]] = None):
        self._listeners: List[TrackChangeListener] = list(listeners or [])

    def add_listener(self, listener: TrackChangeListener) -> None:
        """Subscribe to change events."""
        self._listeners.append(listener)

    def remove_listener(self, listener: TrackChangeListener) -> None:
        """Unsubscribe from change events."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def _notify(self, event: TrackChangeEvent) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Track change listener failed for {event.kind}: {e}")

    @abstractmethod
    async def list_tracks(self) -> List[SavedTrack]:
        """All tracks in storage order."""

    @abstractmethod
    async def get_track(self, id_or_name: str) -> Optional[SavedTrack]:
        """Track by exact ID or case-insensitive name."""

    @abstractmethod
    async def _write_stats(self, updates: Sequence[TrackStatsUpdate]) -> List[SavedTrack]:
        """Persist updates, return the updated tracks (unknown IDs skipped)."""

    @abstractmethod
    async def save_elevation_profile(
        self,
        track_id: str,
        profile: Sequence[ProfilePoint],
    ) -> Optional[SavedTrack]:
        """Cache a profile on a track. Does not notify listeners."""

    async def update_stats(self, updates: Sequence[TrackStatsUpdate]) -> List[SavedTrack]:
        """
        Write statistics for several tracks in one go.

        Listeners get a single TRACKS_UPDATED event for the whole batch.

        Returns:
            Updated tracks (IDs not found are ignored)
        """
        if not updates:
            return []

        updated = await self._write_stats(updates)
        if updated:
            await self._notify(TrackChangeEvent(
                kind=TRACKS_UPDATED,
                track_ids=[t.id for t in updated],
            ))
        return updated


def _matches(track: SavedTrack, id_or_name: str) -> bool:
    return (
        track.id == id_or_name
        or (bool(track.name) and track.name.lower() == id_or_name.lower())
    )


class InMemoryTrackStore(TrackStore):
    """Track store backed by a dict, for tests and scripting."""

    def __init__(
        self,
        tracks: Optional[Iterable[SavedTrack]] = None,
        listeners: Optional[Iterable[TrackChangeListener]] = None,
    ):
        super().__init__(listeners)
        self._tracks: Dict[str, SavedTrack] = {t.id: t for t in tracks or []}

    async def add_track(self, track: SavedTrack) -> SavedTrack:
        self._tracks[track.id] = track
        return track

    async def list_tracks(self) -> List[SavedTrack]:
        return list(self._tracks.values())

    async def get_track(self, id_or_name: str) -> Optional[SavedTrack]:
        if id_or_name in self._tracks:
            return self._tracks[id_or_name]
        return next((t for t in self._tracks.values() if _matches(t, id_or_name)), None)

    async def _write_stats(self, updates: Sequence[TrackStatsUpdate]) -> List[SavedTrack]:
        updated = []
        for update in updates:
            track = self._tracks.get(update.track_id)
            if track is None:
                logger.warning(f"Track {update.track_id} not found, update skipped")
                continue

            changes = {
                "elevation_gain_m": update.elevation_gain_m,
                "elevation_loss_m": update.elevation_loss_m,
            }
            if update.length_km is not None:
                changes["length_km"] = update.length_km

            track = track.model_copy(update=changes)
            self._tracks[track.id] = track
            updated.append(track)

        return updated

    async def save_elevation_profile(self, track_id, profile):
        track = self._tracks.get(track_id)
        if track is None:
            return None
        track = track.model_copy(update={"elevation_profile": list(profile)})
        self._tracks[track_id] = track
        return track
