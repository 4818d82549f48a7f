"""
Track storage schemas.

Pydantic models exchanged with the track storage collaborator.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, field_validator

from trailstats.shared import Point, round_half_up
from trailstats.features.elevation.schemas import ProfilePoint


class SavedTrack(BaseModel):
    """A persisted track as seen by the statistics pipeline."""

    id: str
    name: str = ""
    description: Optional[str] = None
    points: List[Point] = []

    # Cached statistics (None = never computed)
    elevation_gain_m: Optional[float] = None
    elevation_loss_m: Optional[float] = None
    length_km: Optional[float] = None

    elevation_profile: Optional[List[ProfilePoint]] = None

    @property
    def has_elevation_stats(self) -> bool:
        return self.elevation_gain_m is not None and self.elevation_loss_m is not None


class TrackStatsUpdate(BaseModel):
    """Statistics to write back for one track."""

    track_id: str
    elevation_gain_m: float
    elevation_loss_m: float
    length_km: Optional[float] = None

    @field_validator('elevation_gain_m', 'elevation_loss_m')
    @classmethod
    def whole_meters(cls, v: float) -> float:
        return round_half_up(v)

    @field_validator('length_km')
    @classmethod
    def two_decimals(cls, v: Optional[float]) -> Optional[float]:
        return round_half_up(v, 2) if v is not None else None


TRACKS_UPDATED = "tracks:updated"


@dataclass
class TrackChangeEvent:
    """Sent to store listeners after statistics are written."""
    kind: str
    track_ids: List[str] = field(default_factory=list)
