"""
GPX decoding module.

Usage:
    from trailstats.features.gpx import GPXParserService, GPXParseOptions
    from trailstats.features.gpx import simplify, reduce_to_max_points

Components:
- GPXParserService: Parse GPX files, extract points, simplify
- simplify / reduce_to_max_points: Polyline reduction
- GPXParseOptions / ParsedTrack: Pydantic schemas
"""

from .parser import GPXParserService, GPXError, GPXParseError, EmptyTrackError
from .simplifier import (
    simplify,
    reduce_to_max_points,
    ramer_douglas_peucker,
    perpendicular_distance,
)
from .schemas import GPXParseOptions, ParsedTrack

__all__ = [
    # Service
    "GPXParserService",
    # Errors
    "GPXError",
    "GPXParseError",
    "EmptyTrackError",
    # Simplifier
    "simplify",
    "reduce_to_max_points",
    "ramer_douglas_peucker",
    "perpendicular_distance",
    # Schemas
    "GPXParseOptions",
    "ParsedTrack",
]
