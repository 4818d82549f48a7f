"""
Statistics Engine

Turns a point sequence plus raw elevation samples into track statistics.

Raw samples from any source carry both sub-meter jitter and outright
spikes (tile boundaries, bad lookups), so a plain sum of deltas wildly
overstates gain and loss. The engine works in two passes:

1. Segment distances between consecutive samples and their median
   (typical spacing of this trace, robust to a few very long or very
   short segments).
2. Filtered accumulation of elevation deltas by a pluggable strategy:
   - SimpleFilter: discard spikes, unrealistic slopes and noise, sum the rest
   - HysteresisFilter: drop spikes, smooth, then commit changes only once
     they exceed a threshold derived from the median spacing

Min/max elevation are taken over all raw samples; only gain/loss are
filtered. Missing or bad elevation data never raises: affected fields
fall back to zero.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from trailstats.shared import (
    Point,
    ElevationSample,
    FilterMethod,
    calculate_total_distance,
    segment_distances_m,
    smooth_elevations,
    median,
    round_half_up,
)
from .schemas import TrackStats, ElevationTuning

logger = logging.getLogger(__name__)


@dataclass
class FilterReport:
    """How many consecutive pairs each rule consumed."""
    spikes: int = 0
    slopes: int = 0
    noise: int = 0
    accepted: int = 0

    @property
    def filtered(self) -> int:
        return self.spikes + self.slopes + self.noise


def slope_of(delta: float, segment_m: float) -> float:
    """Grade as |delta| / horizontal meters; infinite over zero distance."""
    if segment_m > 0:
        return abs(delta) / segment_m
    return math.inf if delta != 0 else 0.0


# =============================================================================
# Filter strategies
# =============================================================================

class DeltaFilter(ABC):
    """Base class for gain/loss accumulation strategies."""

    def __init__(self, tuning: ElevationTuning):
        self.tuning = tuning

    def is_spike(self, delta: float, segment_m: float) -> bool:
        """Large jump over negligible horizontal movement."""
        return (
            abs(delta) > self.tuning.spike_short_jump
            and segment_m < self.tuning.spike_short_meters
        )

    def is_too_steep(self, delta: float, segment_m: float) -> bool:
        """Grade beyond anything rideable."""
        return (
            slope_of(delta, segment_m) > self.tuning.spike_slope
            and abs(delta) > self.tuning.spike_slope_min_jump
        )

    @abstractmethod
    def accumulate(
        self,
        elevations: Sequence[float],
        segment_m: Sequence[float],
        median_segment_m: float,
    ) -> Tuple[float, float, FilterReport]:
        """
        Filtered gain and loss.

        Args:
            elevations: Raw elevation per sample
            segment_m: Horizontal distance between consecutive samples
            median_segment_m: Median of segment_m

        Returns:
            (gain_m, loss_m, report)
        """


class SimpleFilter(DeltaFilter):
    """
    Per-pair classification.

    A delta is discarded as a spike, an unrealistic slope, or noise
    (below noise_threshold); every other delta counts in full.
    """

    def accumulate(self, elevations, segment_m, median_segment_m):
        gain = 0.0
        loss = 0.0
        report = FilterReport()

        for i in range(len(elevations) - 1):
            delta = elevations[i + 1] - elevations[i]
            seg = segment_m[i]

            if not math.isfinite(delta):
                report.noise += 1
                continue

            if self.is_spike(delta, seg):
                report.spikes += 1
                continue

            if self.is_too_steep(delta, seg):
                report.slopes += 1
                if abs(delta) > 20:
                    logger.debug(
                        f"Filtered unrealistic slope: {delta:.1f} m over {seg:.1f} m"
                    )
                continue

            if abs(delta) < self.tuning.noise_threshold:
                report.noise += 1
                continue

            report.accepted += 1
            if delta > 0:
                gain += delta
            elif delta < 0:
                loss += abs(delta)

        return gain, loss, report


class HysteresisFilter(DeltaFilter):
    """
    Smoothed accumulation with a dead band.

    Spike and slope pairs are removed by holding the previous value, the
    cleaned series is smoothed over `win` points, and a change is committed
    only when the smoothed value moves at least `threshold` away from the
    last committed reference. threshold = clamp(k * median spacing, floor, cap).
    """

    def threshold(self, median_segment_m: float) -> float:
        t = self.tuning
        return min(t.cap, max(t.floor, t.k * median_segment_m))

    def _despike(
        self,
        elevations: Sequence[float],
        segment_m: Sequence[float],
        report: FilterReport,
    ) -> List[float]:
        cleaned = [elevations[0]]

        for i in range(len(elevations) - 1):
            delta = elevations[i + 1] - elevations[i]
            seg = segment_m[i]

            if not math.isfinite(delta):
                report.noise += 1
                delta = 0.0
            elif self.is_spike(delta, seg):
                report.spikes += 1
                delta = 0.0
            elif self.is_too_steep(delta, seg):
                report.slopes += 1
                delta = 0.0

            cleaned.append(cleaned[-1] + delta)

        return cleaned

    def accumulate(self, elevations, segment_m, median_segment_m):
        report = FilterReport()
        if not math.isfinite(elevations[0]):
            return 0.0, 0.0, report

        cleaned = self._despike(elevations, segment_m, report)
        smoothed = smooth_elevations(cleaned, self.tuning.win)
        threshold = self.threshold(median_segment_m)

        gain = 0.0
        loss = 0.0
        reference = smoothed[0]

        for value in smoothed[1:]:
            diff = value - reference
            if diff > 0 and diff >= threshold:
                gain += diff
            elif diff < 0 and -diff >= threshold:
                loss += -diff
            else:
                continue
            report.accepted += 1
            reference = value

        logger.debug(f"Hysteresis threshold: {threshold:.2f} m")
        return gain, loss, report


def get_filter(tuning: ElevationTuning) -> DeltaFilter:
    """Strategy for the tuning's method."""
    if tuning.method == FilterMethod.HYSTERESIS:
        return HysteresisFilter(tuning)
    return SimpleFilter(tuning)


# =============================================================================
# Engine
# =============================================================================

def compute_stats(
    points: Sequence[Point],
    samples: Sequence[ElevationSample],
    tuning: Optional[ElevationTuning] = None,
) -> TrackStats:
    """
    Compute length, filtered gain/loss and elevation range.

    Length always comes from the points, whatever the state of the
    elevation data. With fewer than 2 samples every elevation field is 0.

    Args:
        points: Track points (length source)
        samples: Elevation samples, one per point
        tuning: Filter overrides (simple method defaults when omitted)

    Returns:
        TrackStats rounded to whole meters and 0.01 km
    """
    tuning = tuning or ElevationTuning()
    length_km = round_half_up(calculate_total_distance(points), 2)

    if len(samples) < 2:
        if len(points) >= 2:
            logger.warning("No elevation data received, returning length only")
        return TrackStats(length_km=length_km)

    # Pass 1: segment distances
    segment_m = segment_distances_m(samples)
    median_segment_m = median(segment_m)
    logger.debug(f"Median segment distance: {median_segment_m:.1f} m")

    # Pass 2: filtered accumulation
    elevations = [s.elevation for s in samples]
    gain, loss, report = get_filter(tuning).accumulate(
        elevations, segment_m, median_segment_m
    )

    finite = [e for e in elevations if math.isfinite(e)]
    min_elevation = min(finite) if finite else 0.0
    max_elevation = max(finite) if finite else 0.0

    logger.info(
        f"Track stats ({tuning.method.value}): {length_km:.2f} km, "
        f"D+ {gain:.1f} m, D- {loss:.1f} m, "
        f"filtered {report.filtered} (spikes={report.spikes}, "
        f"slopes={report.slopes}, noise={report.noise})"
    )

    return TrackStats(
        length_km=length_km,
        elevation_gain_m=round_half_up(gain),
        elevation_loss_m=round_half_up(loss),
        min_elevation_m=round_half_up(min_elevation),
        max_elevation_m=round_half_up(max_elevation),
    )
