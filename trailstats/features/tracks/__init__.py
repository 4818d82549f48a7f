"""
Track storage module.

Usage:
    from trailstats.features.tracks import TrackStore, InMemoryTrackStore
    from trailstats.features.tracks import SQLTrackStore  # SQLAlchemy-backed

Components:
- SavedTrack / TrackStatsUpdate: Pydantic schemas at the storage boundary
- TrackStore: Storage interface with change listeners
- InMemoryTrackStore / SQLTrackStore: Implementations
- SavedTrackRecord / SavedTrackRepository: SQLAlchemy model and repository
"""

from .schemas import SavedTrack, TrackStatsUpdate, TrackChangeEvent, TRACKS_UPDATED
from .store import TrackStore, InMemoryTrackStore, TrackChangeListener
from .models import SavedTrackRecord
from .repository import SavedTrackRepository, SQLTrackStore, to_saved_track

__all__ = [
    # Schemas
    "SavedTrack",
    "TrackStatsUpdate",
    "TrackChangeEvent",
    "TRACKS_UPDATED",
    # Stores
    "TrackStore",
    "InMemoryTrackStore",
    "SQLTrackStore",
    "TrackChangeListener",
    # Model / repository
    "SavedTrackRecord",
    "SavedTrackRepository",
    "to_saved_track",
]
