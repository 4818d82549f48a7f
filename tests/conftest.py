"""Global pytest fixtures & helpers.

Fake elevation providers, track factories and a sleep recorder shared by
the elevation, tracks and audit tests.
"""

import asyncio
import math
from typing import Callable, Optional, Sequence

import pytest

from trailstats.shared import Point, ElevationSource
from trailstats.features.elevation import (
    ElevationProvider,
    ElevationProviderError,
    ElevationResolver,
    TrackStatsService,
)
from trailstats.features.tracks import SavedTrack, InMemoryTrackStore

METERS_PER_LAT_DEGREE = 6371000 * math.pi / 180


# --- Factory helpers -------------------------------------------------
def make_points(elevations: Sequence[Optional[float]], spacing_m: float = 500.0) -> list[Point]:
    """Points along a meridian, spacing_m apart, carrying the given elevations."""
    return [
        Point(lat=43.0 + i * spacing_m / METERS_PER_LAT_DEGREE, lng=76.0, elevation=e)
        for i, e in enumerate(elevations)
    ]


def make_track(
    track_id: str,
    elevations: Sequence[Optional[float]],
    gain: Optional[float] = None,
    loss: Optional[float] = None,
    name: Optional[str] = None,
) -> SavedTrack:
    return SavedTrack(
        id=track_id,
        name=name or f"Track {track_id}",
        points=make_points(elevations),
        elevation_gain_m=gain,
        elevation_loss_m=loss,
    )


class FakeProvider(ElevationProvider):
    """
    Provider that echoes the elevation carried by each point, times scale.

    A point without elevation raises RuntimeError (an unexpected failure,
    not a provider error). fail_on_call / short_on_call break the n-th
    lookup (1-based) with a provider error or a short response.
    """

    def __init__(
        self,
        source: ElevationSource = ElevationSource.API,
        scale: float = 1.0,
        fail_on_call: Optional[int] = None,
        short_on_call: Optional[int] = None,
    ):
        super().__init__()
        self.source = source
        self.scale = scale
        self.fail_on_call = fail_on_call
        self.short_on_call = short_on_call
        self.calls: list[int] = []

    async def lookup(self, points):
        self.calls.append(len(points))
        n = len(self.calls)

        if self.fail_on_call == n:
            raise ElevationProviderError("upstream unavailable")

        values = []
        for p in points:
            if p.elevation is None:
                raise RuntimeError("point has no elevation")
            values.append(p.elevation * self.scale)

        if self.short_on_call == n:
            values = values[:-1]
        return values


def fake_stats_service(scales: Optional[dict] = None) -> TrackStatsService:
    """
    TrackStatsService over FakeProviders, no delays.

    scales maps a source to a factor applied to every elevation.
    """
    scales = scales or {}

    def factory(source: ElevationSource) -> ElevationResolver:
        provider = FakeProvider(source=source, scale=scales.get(source, 1.0))
        return ElevationResolver(provider, batch_size=100, batch_delay_seconds=0)

    return TrackStatsService(resolver_factory=factory)


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
    """Record asyncio.sleep delays instead of waiting."""
    recorded: list[float] = []

    async def fake_sleep(delay, *args, **kwargs):
        recorded.append(delay)

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    return recorded


@pytest.fixture
def stats_service() -> TrackStatsService:
    return fake_stats_service()


@pytest.fixture
def events() -> list:
    return []


@pytest.fixture
def store(events) -> InMemoryTrackStore:
    """Empty in-memory store recording change events."""
    return InMemoryTrackStore(listeners=[events.append])


def run(coro):
    """Run a coroutine to completion."""
    return asyncio.run(coro)
