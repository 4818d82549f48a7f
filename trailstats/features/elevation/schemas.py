"""
Elevation-related schemas.

Pydantic models for statistics, tuning overrides and profiles.
"""

from pydantic import BaseModel, Field

from trailstats.shared.constants import (
    FilterMethod,
    SPIKE_SHORT_METERS,
    SPIKE_SHORT_JUMP_M,
    MAX_REALISTIC_SLOPE,
    NOISE_THRESHOLD_M,
)


class TrackStats(BaseModel):
    """Computed statistics for one track."""

    length_km: float = 0.0
    elevation_gain_m: float = 0.0
    elevation_loss_m: float = 0.0
    min_elevation_m: float = 0.0
    max_elevation_m: float = 0.0


class ElevationTuning(BaseModel):
    """
    Overrides for the gain/loss filter.

    Defaults reproduce the simple method. Values are not range-checked:
    out-of-range settings give degenerate output (e.g. zero gain), never
    an error.
    """

    method: FilterMethod = FilterMethod.SIMPLE

    # Spike rules (both methods)
    spike_short_meters: float = SPIKE_SHORT_METERS
    spike_short_jump: float = SPIKE_SHORT_JUMP_M
    spike_slope: float = MAX_REALISTIC_SLOPE
    spike_slope_min_jump: float = 0.0

    # Simple method
    noise_threshold: float = NOISE_THRESHOLD_M

    # Hysteresis method
    win: int = Field(default=3, description="Smoothing window (points)")
    k: float = Field(default=0.3, description="Threshold per meter of median spacing")
    floor: float = Field(default=0.5, description="Minimum threshold (m)")
    cap: float = Field(default=10.0, description="Maximum threshold (m)")


class ProfilePoint(BaseModel):
    """One point of an elevation profile chart."""

    distance_km: float
    elevation_m: float
