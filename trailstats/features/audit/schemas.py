"""
Audit and diagnostics schemas.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from trailstats.config import settings
from trailstats.shared import ElevationSource, FilterMethod
from trailstats.features.elevation.schemas import ElevationTuning


class AuditOptions(BaseModel):
    """Options for a batch elevation audit."""

    max_tracks: Optional[int] = Field(default=None, ge=0)
    force_recalculate: bool = False
    min_diff_meters: float = Field(default_factory=lambda: settings.audit_min_diff_meters)
    min_diff_percent: float = Field(default_factory=lambda: settings.audit_min_diff_percent)
    update_storage: bool = False
    batch_delay_ms: int = Field(default_factory=lambda: settings.audit_batch_delay_ms, ge=0)
    tuning_overrides: Optional[ElevationTuning] = None
    source: Optional[ElevationSource] = None


class AuditRow(BaseModel):
    """Before/after values for one audited track."""

    id: str
    name: str
    points: int

    old_gain: Optional[float] = None
    old_loss: Optional[float] = None
    new_gain: float = 0
    new_loss: float = 0

    diff_gain: float = 0
    diff_loss: float = 0
    diff_gain_pct: Optional[float] = None
    diff_loss_pct: Optional[float] = None

    updated: bool = False
    skipped_reason: Optional[str] = None


class AuditSummary(BaseModel):
    """Result of an audit run."""

    total: int
    processed: int
    updated: int
    skipped: int
    rows: List[AuditRow]


class SourceComparisonRow(BaseModel):
    """API vs terrain-rgb statistics for one track."""

    id: str
    name: str
    points: int
    api_gain: float
    api_loss: float
    dem_gain: float
    dem_loss: float

    @property
    def d_gain(self) -> float:
        return self.dem_gain - self.api_gain

    @property
    def d_loss(self) -> float:
        return self.dem_loss - self.api_loss


class SourceComparison(BaseModel):
    """Per-track rows plus mean deltas (terrain-rgb minus API)."""

    rows: List[SourceComparisonRow]
    count: int
    mean_gain_delta: float
    mean_loss_delta: float


class VerificationRow(BaseModel):
    """Statistics for one method/source combination."""

    method: FilterMethod
    source: ElevationSource
    length_km: float = 0
    gain: float = 0
    loss: float = 0
    min_elevation: float = 0
    max_elevation: float = 0
    error: Optional[str] = None


class Verification(BaseModel):
    """Method x source grid for one track."""

    track_id: str
    track_name: str
    points: int
    results: List[VerificationRow]
    suggested: Optional[VerificationRow] = None
