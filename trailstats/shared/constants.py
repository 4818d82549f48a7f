"""
Unified constants for elevation sources and filter methods.

This module provides a single source of truth for the names used in
configuration, tuning overrides and diagnostics.
"""

from enum import Enum


class ElevationSource(str, Enum):
    """
    Upstream elevation supplier.

    AUTO is never passed to a provider directly: it is resolved to the
    configured default at the boundary (see resolve_source).
    """
    API = "api"                 # Lookup service (open-elevation compatible)
    TERRAIN_RGB = "terrainrgb"  # Raster DEM tiles (Mapbox terrain-rgb)
    AUTO = "auto"


class FilterMethod(str, Enum):
    """Gain/loss filtering strategy used by the statistics engine."""
    SIMPLE = "simple"
    HYSTERESIS = "hysteresis"


# Flat-Earth conversion used by the simplifier (1 degree ≈ 111.32 km).
# Degrades at high latitudes where a degree of longitude is much shorter.
METERS_PER_DEGREE = 111320.0

# GPX decoding
DEFAULT_SIMPLIFY_TOLERANCE_M = 10.0

# Elevation provider limits
ELEVATION_BATCH_SIZE = 100
ELEVATION_BATCH_DELAY_SECONDS = 0.5

# Simple filter thresholds
SPIKE_SHORT_METERS = 1.0     # Horizontal movement below this...
SPIKE_SHORT_JUMP_M = 50.0    # ...with a jump above this is a spike
MAX_REALISTIC_SLOPE = 1.0    # 100% grade
NOISE_THRESHOLD_M = 2.0      # Deltas below this are jitter

# Audit skip reasons
SKIP_TOO_FEW_POINTS = "too few points"
SKIP_ALREADY_COMPUTED = "already computed"
SKIP_CALCULATION_ERROR = "calculation error"
