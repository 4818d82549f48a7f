"""
Elevation module.

Usage:
    from trailstats.features.elevation import TrackStatsService, ElevationTuning
    from trailstats.features.elevation import ElevationResolver, compute_stats

Components:
- ElevationProvider: OpenElevationProvider (API), TerrainRGBProvider (tiles)
- ElevationResolver: Batched, throttled lookups with flat-profile fallback
- compute_stats: Two-pass statistics engine (simple / hysteresis)
- TrackStatsService: Resolver + engine for one track
- build_elevation_profile: Chart series for previews
"""

from .providers import (
    ElevationProvider,
    OpenElevationProvider,
    TerrainRGBProvider,
    ElevationError,
    ElevationProviderError,
    get_elevation_provider,
    resolve_source,
)
from .resolver import ElevationResolver
from .stats import (
    compute_stats,
    get_filter,
    DeltaFilter,
    SimpleFilter,
    HysteresisFilter,
    FilterReport,
)
from .profile import resample_by_distance, build_elevation_profile
from .schemas import TrackStats, ElevationTuning, ProfilePoint
from .service import TrackStatsService

__all__ = [
    # Providers
    "ElevationProvider",
    "OpenElevationProvider",
    "TerrainRGBProvider",
    "ElevationError",
    "ElevationProviderError",
    "get_elevation_provider",
    "resolve_source",
    # Resolver
    "ElevationResolver",
    # Engine
    "compute_stats",
    "get_filter",
    "DeltaFilter",
    "SimpleFilter",
    "HysteresisFilter",
    "FilterReport",
    # Profile
    "resample_by_distance",
    "build_elevation_profile",
    # Schemas
    "TrackStats",
    "ElevationTuning",
    "ProfilePoint",
    # Service
    "TrackStatsService",
]
