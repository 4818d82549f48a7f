"""
Tests for source comparison and method verification.
"""

import pytest

from conftest import fake_stats_service, make_track, run
from trailstats.shared import ElevationSource, FilterMethod
from trailstats.features.audit import ElevationDiagnostics, VerificationRow, suggest_combination

# Terrain-rgb reads 10% higher than the API in these tests
SCALES = {ElevationSource.TERRAIN_RGB: 1.1}


def diagnostics(store) -> ElevationDiagnostics:
    return ElevationDiagnostics(store, fake_stats_service(SCALES))


# =============================================================================
# Test Compare Sources
# =============================================================================

class TestCompareSources:
    """Tests for API vs terrain-rgb comparison."""

    def test_rows_and_means(self, store, sleeps):
        """Per-track deltas and their mean."""
        run(store.add_track(make_track("a", [100, 200, 150])))
        run(store.add_track(make_track("b", [100, 300])))

        comparison = run(diagnostics(store).compare_sources())
        a, b = comparison.rows

        assert (a.api_gain, a.dem_gain, a.d_gain) == (100, 110, 10)
        assert (a.api_loss, a.dem_loss, a.d_loss) == (50, 55, 5)
        assert b.d_gain == 20
        assert comparison.count == 2
        assert comparison.mean_gain_delta == pytest.approx(15)
        assert comparison.mean_loss_delta == pytest.approx(2.5)

    def test_pacing(self, store, sleeps):
        """200 ms pause after each compared track."""
        run(store.add_track(make_track("a", [100, 200])))
        run(store.add_track(make_track("b", [100, 200])))

        run(diagnostics(store).compare_sources())

        assert sleeps == [0.2, 0.2]

    def test_short_and_failing_tracks_left_out(self, store, sleeps):
        """Short tracks are ignored, failures are skipped."""
        run(store.add_track(make_track("short", [100])))
        run(store.add_track(make_track("broken", [100, None])))
        run(store.add_track(make_track("ok", [100, 200])))

        comparison = run(diagnostics(store).compare_sources())

        assert [r.id for r in comparison.rows] == ["ok"]
        assert comparison.count == 1

    def test_max_tracks(self, store, sleeps):
        """Cap applies after dropping short tracks."""
        run(store.add_track(make_track("short", [100])))
        run(store.add_track(make_track("a", [100, 200])))
        run(store.add_track(make_track("b", [100, 200])))

        comparison = run(diagnostics(store).compare_sources(max_tracks=1))

        assert [r.id for r in comparison.rows] == ["a"]

    def test_empty_store(self, store, sleeps):
        """No tracks, zero means."""
        comparison = run(diagnostics(store).compare_sources())

        assert comparison.count == 0
        assert comparison.mean_gain_delta == 0


# =============================================================================
# Test Verify Track
# =============================================================================

class TestVerifyTrack:
    """Tests for the method x source grid."""

    def test_grid(self, store):
        """Four combinations over the same points."""
        run(store.add_track(make_track("a", [100, 200, 300], name="Climb")))

        verification = run(diagnostics(store).verify_track("climb"))
        combos = [(r.method, r.source) for r in verification.results]

        assert combos == [
            (FilterMethod.HYSTERESIS, ElevationSource.API),
            (FilterMethod.SIMPLE, ElevationSource.API),
            (FilterMethod.HYSTERESIS, ElevationSource.TERRAIN_RGB),
            (FilterMethod.SIMPLE, ElevationSource.TERRAIN_RGB),
        ]
        simple_dem = verification.results[3]
        assert simple_dem.gain == 220
        assert simple_dem.max_elevation == 330
        assert verification.suggested == simple_dem

    def test_unknown_track(self, store):
        """Unknown or short tracks give None."""
        run(store.add_track(make_track("short", [100])))

        assert run(diagnostics(store).verify_track("missing")) is None
        assert run(diagnostics(store).verify_track("short")) is None


class TestSuggestCombination:
    """Tests for picking the combination to trust."""

    def rows(self):
        return [
            VerificationRow(method=FilterMethod.SIMPLE, source=ElevationSource.API, gain=300, loss=900),
            VerificationRow(method=FilterMethod.HYSTERESIS, source=ElevationSource.API, gain=250, loss=950),
            VerificationRow(method=FilterMethod.SIMPLE, source=ElevationSource.TERRAIN_RGB, error="x"),
        ]

    def test_descent_prefers_largest_loss(self):
        """Loss dominates: pick by loss."""
        suggested = suggest_combination(self.rows())
        assert suggested.method == FilterMethod.HYSTERESIS

    def test_climb_prefers_largest_gain(self):
        """Gain dominates: pick by gain."""
        rows = [
            VerificationRow(method=FilterMethod.SIMPLE, source=ElevationSource.API, gain=900, loss=300),
            VerificationRow(method=FilterMethod.HYSTERESIS, source=ElevationSource.API, gain=850, loss=350),
        ]
        assert suggest_combination(rows).method == FilterMethod.SIMPLE

    def test_all_failed(self):
        """No usable rows, no suggestion."""
        rows = [VerificationRow(method=FilterMethod.SIMPLE, source=ElevationSource.API, error="x")]
        assert suggest_combination(rows) is None
