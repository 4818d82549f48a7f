"""
Tests for the statistics engine.

Points are laid out along a meridian so segment lengths are known:
one degree of latitude is about 111195 m on the haversine sphere.
"""

import math

import pytest

from trailstats.shared import Point, ElevationSample, FilterMethod
from trailstats.features.elevation import (
    compute_stats,
    get_filter,
    SimpleFilter,
    HysteresisFilter,
    ElevationTuning,
    TrackStats,
)
from trailstats.features.elevation.stats import slope_of

METERS_PER_LAT_DEGREE = 6371000 * math.pi / 180


def track(elevations, spacing_m=20.0):
    """Points and matching samples spaced spacing_m apart."""
    points = [
        Point(lat=43.0 + i * spacing_m / METERS_PER_LAT_DEGREE, lng=76.0)
        for i in range(len(elevations))
    ]
    samples = [
        ElevationSample(lat=p.lat, lng=p.lng, elevation=e)
        for p, e in zip(points, elevations)
    ]
    return points, samples


def simple_stats(elevations, spacing_m=20.0, **tuning):
    points, samples = track(elevations, spacing_m)
    return compute_stats(points, samples, ElevationTuning(**tuning))


def hysteresis_stats(elevations, spacing_m=20.0, **tuning):
    points, samples = track(elevations, spacing_m)
    return compute_stats(
        points, samples, ElevationTuning(method=FilterMethod.HYSTERESIS, **tuning)
    )


# =============================================================================
# Test Simple Filter
# =============================================================================

class TestSimpleFilter:
    """Tests for per-pair filtering."""

    def test_noise_ignored(self):
        """1.5 m over 10 m is below the noise threshold."""
        stats = simple_stats([100, 101.5], spacing_m=10)
        assert stats.elevation_gain_m == 0
        assert stats.elevation_loss_m == 0

    def test_short_spike_ignored(self):
        """80 m over 0.5 m is a spike."""
        stats = simple_stats([100, 180], spacing_m=0.5)
        assert stats.elevation_gain_m == 0

    def test_steep_slope_ignored(self):
        """15 m over 10 m (150% grade) is not realistic."""
        stats = simple_stats([100, 115], spacing_m=10)
        assert stats.elevation_gain_m == 0

    def test_realistic_climb_counted(self):
        """5 m over 20 m counts in full."""
        stats = simple_stats([100, 105], spacing_m=20)
        assert stats.elevation_gain_m == 5
        assert stats.elevation_loss_m == 0

    def test_up_and_down(self):
        """100 -> 110 -> 100 gives 10 up and 10 down."""
        stats = simple_stats([100, 110, 100])
        assert stats.elevation_gain_m == 10
        assert stats.elevation_loss_m == 10

    def test_zero_distance_jump_is_too_steep(self):
        """Any real jump without horizontal movement is filtered."""
        points = [Point(43.0, 76.0), Point(43.0, 76.0)]
        samples = [ElevationSample(43.0, 76.0, 100.0), ElevationSample(43.0, 76.0, 105.0)]
        assert compute_stats(points, samples).elevation_gain_m == 0

    def test_slope_min_jump_override(self):
        """Raising spike_slope_min_jump lets moderate steep deltas through."""
        stats = simple_stats([100, 115], spacing_m=10, spike_slope_min_jump=20)
        assert stats.elevation_gain_m == 15

    def test_noise_threshold_override(self):
        """A lower noise threshold keeps small deltas."""
        stats = simple_stats([100, 101.5], spacing_m=10, noise_threshold=1)
        assert stats.elevation_gain_m == 2  # 1.5 rounds to 2

    def test_report_counts(self):
        """Each consumed pair is counted by its rule."""
        flt = SimpleFilter(ElevationTuning())
        # spike, steep, noise, accepted
        elevations = [100, 180, 195, 196, 201]
        segment_m = [0.5, 10, 10, 20]
        gain, loss, report = flt.accumulate(elevations, segment_m, 10)

        assert (report.spikes, report.slopes, report.noise, report.accepted) == (1, 1, 1, 1)
        assert report.filtered == 3
        assert gain == 5
        assert loss == 0


# =============================================================================
# Test Hysteresis Filter
# =============================================================================

class TestHysteresisFilter:
    """Tests for smoothed dead-band accumulation."""

    def test_threshold_clamped(self):
        """threshold = clamp(k * median, floor, cap)."""
        flt = HysteresisFilter(ElevationTuning(method=FilterMethod.HYSTERESIS))
        assert flt.threshold(20) == pytest.approx(6.0)
        assert flt.threshold(0.1) == pytest.approx(0.5)
        assert flt.threshold(1000) == pytest.approx(10.0)

    def test_steady_climb(self):
        """Steady climb commits in threshold-sized steps."""
        stats = hysteresis_stats([100, 105, 110, 115, 120, 125, 130])
        # smoothed: 102.5, 105, ..., 125, 127.5; committed at 110, 120, 127.5
        assert stats.elevation_gain_m == 25
        assert stats.elevation_loss_m == 0

    def test_jitter_suppressed(self):
        """Oscillation below the threshold adds nothing."""
        stats = hysteresis_stats([100, 101] * 20)
        assert stats.elevation_gain_m == 0
        assert stats.elevation_loss_m == 0

    def test_spike_removed_before_smoothing(self):
        """A steep spike is held flat and never committed."""
        stats = hysteresis_stats([100, 100, 100, 300, 100, 100])
        assert stats.elevation_gain_m == 0
        assert stats.elevation_loss_m == 0
        # Range still covers raw samples
        assert stats.max_elevation_m == 300

    def test_get_filter(self):
        """Method selects the strategy."""
        assert isinstance(get_filter(ElevationTuning()), SimpleFilter)
        assert isinstance(
            get_filter(ElevationTuning(method=FilterMethod.HYSTERESIS)), HysteresisFilter
        )


# =============================================================================
# Test Engine
# =============================================================================

class TestComputeStats:
    """Tests for the two-pass engine."""

    def test_too_few_samples(self):
        """Fewer than 2 samples gives zero elevation stats."""
        points, samples = track([100])
        assert compute_stats(points, samples) == TrackStats()

    def test_no_samples_keeps_length(self):
        """Length comes from points even without elevation data."""
        points, _ = track([0, 0, 0], spacing_m=500)
        stats = compute_stats(points, [])

        assert stats.length_km == pytest.approx(1.0, abs=0.01)
        assert stats.elevation_gain_m == 0
        assert stats.max_elevation_m == 0

    def test_flat_track(self):
        """Flat elevation: no gain/loss, min == max."""
        stats = simple_stats([100] * 10)
        assert stats.elevation_gain_m == 0
        assert stats.elevation_loss_m == 0
        assert stats.min_elevation_m == 100
        assert stats.max_elevation_m == 100

    def test_min_max_include_filtered_samples(self):
        """Range is over all samples, including spikes."""
        stats = simple_stats([100, 180, 100], spacing_m=0.5)
        assert stats.min_elevation_m == 100
        assert stats.max_elevation_m == 180

    def test_rounding(self):
        """Gain/loss/range in whole meters, length to 0.01 km."""
        stats = simple_stats([100, 105.4, 110.9], spacing_m=20)
        assert stats.elevation_gain_m == 11
        assert stats.max_elevation_m == 111
        assert stats.length_km == round(stats.length_km, 2)

    def test_half_meters_round_up(self):
        """A 2.5 m climb to 102.5 m reports 3 m and 103 m."""
        stats = simple_stats([100.0, 102.5], spacing_m=20)
        assert stats.elevation_gain_m == 3
        assert stats.max_elevation_m == 103
        assert stats.min_elevation_m == 100

    def test_non_finite_elevation(self):
        """NaN samples never raise and are left out of the range."""
        points, samples = track([100, float("nan"), 110])
        stats = compute_stats(points, samples)

        assert stats.elevation_gain_m == 0
        assert stats.min_elevation_m == 100
        assert stats.max_elevation_m == 110

    def test_gain_loss_non_negative(self):
        """Gain and loss are never negative."""
        stats = simple_stats([300, 290, 270, 260, 250], spacing_m=25)
        assert stats.elevation_gain_m == 0
        assert stats.elevation_loss_m == 50


class TestSlopeOf:
    """Tests for grade calculation."""

    def test_regular(self):
        """Grade is |delta| / distance."""
        assert slope_of(-5, 10) == 0.5

    def test_zero_distance(self):
        """Zero distance: infinite for a jump, zero for no change."""
        assert slope_of(3, 0) == math.inf
        assert slope_of(0, 0) == 0.0
