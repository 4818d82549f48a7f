"""
Tests for shared geographic functions.

Tests the haversine distance and track distance helpers.
"""

import pytest

from trailstats.shared import Point, ElevationSample
from trailstats.shared.geo import (
    haversine,
    distance,
    calculate_total_distance,
    segment_distances_m,
    EARTH_RADIUS_KM,
)


# =============================================================================
# Test Haversine Distance
# =============================================================================

class TestHaversine:
    """Tests for haversine function."""

    def test_same_point(self):
        """Distance between same point should be 0."""
        assert haversine(43.0, 76.0, 43.0, 76.0) == 0.0

    def test_small_distance(self):
        """0.001 degree of latitude is about 111 meters."""
        dist = haversine(43.0, 76.0, 43.001, 76.0)
        assert 0.1 < dist < 0.12

    def test_symmetry(self):
        """Distance A->B should equal B->A."""
        dist_ab = haversine(43.0, 76.0, 44.0, 77.0)
        dist_ba = haversine(44.0, 77.0, 43.0, 76.0)
        assert dist_ab == pytest.approx(dist_ba, rel=0.0001)

    def test_east_west_distance(self):
        """At equator, 1 degree longitude is about 111 km."""
        dist = haversine(0.0, 0.0, 0.0, 1.0)
        assert 110 < dist < 112

    def test_earth_radius_constant(self):
        """Verify Earth radius constant is correct."""
        assert EARTH_RADIUS_KM == 6371.0

    def test_cross_hemisphere(self):
        """90 degrees of latitude is a quarter meridian (~10,000 km)."""
        dist = haversine(45.0, 0.0, -45.0, 0.0)
        assert 9900 < dist < 10100

    def test_out_of_range_coordinates_still_return_number(self):
        """Invalid coordinates are not validated."""
        dist = haversine(95.0, 200.0, -95.0, -200.0)
        assert dist >= 0


# =============================================================================
# Test Track Distances
# =============================================================================

class TestTrackDistance:
    """Tests for point-based distance helpers."""

    def test_distance_between_points(self):
        """distance() matches haversine on the same coordinates."""
        a = Point(lat=43.0, lng=76.0)
        b = Point(lat=43.01, lng=76.01)
        assert distance(a, b) == haversine(43.0, 76.0, 43.01, 76.01)

    def test_total_distance_empty(self):
        """No points, no distance."""
        assert calculate_total_distance([]) == 0.0

    def test_total_distance_single_point(self):
        """One point has zero length."""
        assert calculate_total_distance([Point(lat=43.0, lng=76.0)]) == 0.0

    def test_total_distance_sums_segments(self):
        """Total is the sum of consecutive segments."""
        points = [
            Point(lat=43.0, lng=76.0),
            Point(lat=43.001, lng=76.0),
            Point(lat=43.002, lng=76.0),
        ]
        total = calculate_total_distance(points)
        assert total == pytest.approx(
            distance(points[0], points[1]) + distance(points[1], points[2])
        )

    def test_segment_distances_in_meters(self):
        """Segment list has n - 1 entries in meters."""
        points = [Point(lat=43.0, lng=76.0), Point(lat=43.001, lng=76.0)]
        segments = segment_distances_m(points)
        assert len(segments) == 1
        assert 100 < segments[0] < 120

    def test_segment_distances_accept_samples(self):
        """Elevation samples carry lat/lng and work too."""
        samples = [
            ElevationSample(lat=0.0, lng=0.0, elevation=10.0),
            ElevationSample(lat=0.0, lng=0.0, elevation=12.0),
        ]
        assert segment_distances_m(samples) == [0.0]
