"""
Base types for track geometry.

This module contains only dataclasses with NO project imports
to avoid circular dependencies.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Point:
    """
    A position on a track.

    Points have no identity beyond their position and are never mutated;
    filtering and resampling produce new sequences.
    """
    lat: float
    lng: float
    elevation: Optional[float] = None
    time: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Serialize to the JSON shape used by track storage."""
        data: dict = {"lat": self.lat, "lng": self.lng}
        if self.elevation is not None:
            data["elevation"] = self.elevation
        if self.time is not None:
            data["time"] = self.time.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Point":
        """Build from a stored point; accepts 'lon' and 'ele' spellings too."""
        lng = data.get("lng", data.get("lon"))
        elevation = data.get("elevation", data.get("ele"))
        time = data.get("time")
        if isinstance(time, str):
            # fromisoformat() only reads a "Z" suffix from Python 3.11
            if time.endswith("Z"):
                time = time[:-1] + "+00:00"
            time = datetime.fromisoformat(time)
        return cls(
            lat=float(data["lat"]),
            lng=float(lng),
            elevation=float(elevation) if elevation is not None else None,
            time=time,
        )


@dataclass(frozen=True)
class ElevationSample:
    """Elevation looked up for the point with the same index."""
    lat: float
    lng: float
    elevation: float
