"""
GPX-related schemas.

Pydantic models for GPX decoding.
"""

from pydantic import BaseModel, Field
from typing import List, Optional

from trailstats.config import settings
from trailstats.shared import Point


class GPXParseOptions(BaseModel):
    """Options controlling simplification of an imported track."""

    simplify: bool = True
    tolerance_m: float = Field(
        default_factory=lambda: settings.gpx_simplify_tolerance_m,
        ge=0,
    )
    max_points: Optional[int] = Field(default=None, ge=2)


class ParsedTrack(BaseModel):
    """Decoded GPX track, after simplification."""

    name: Optional[str] = None
    description: Optional[str] = None

    points: List[Point]

    # Metrics over the final (simplified) points
    distance_km: float
    elevation_gain_naive_m: float

    # Pre-simplification view
    raw_points_count: int
    raw_distance_km: float

    @property
    def points_count(self) -> int:
        return len(self.points)
