"""
GPX Parser Service

Parses GPX files into track points and runs simplification.
"""

import logging
from typing import List, Optional, Union

import gpxpy
import gpxpy.gpx

from trailstats.shared import Point, calculate_total_distance, naive_elevation_gain, round_half_up
from .schemas import GPXParseOptions, ParsedTrack
from .simplifier import simplify, reduce_to_max_points

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class GPXError(ValueError):
    """Base GPX error."""
    pass


class GPXParseError(GPXError):
    """Document is not well-formed GPX."""
    pass


class EmptyTrackError(GPXError):
    """Document has no track points."""
    pass


# =============================================================================
# Parser
# =============================================================================

class GPXParserService:
    """Service for parsing GPX files."""

    @staticmethod
    def _load(content: Union[bytes, str]) -> gpxpy.gpx.GPX:
        if isinstance(content, bytes):
            try:
                content = content.decode('utf-8')
            except UnicodeDecodeError as e:
                raise GPXParseError(f"Invalid GPX file: {e}") from e

        try:
            return gpxpy.parse(content)
        except gpxpy.gpx.GPXException as e:
            logger.error(f"Failed to parse GPX: {e}")
            raise GPXParseError(f"Invalid GPX file: {e}") from e

    @staticmethod
    def _track_points(gpx: gpxpy.gpx.GPX) -> List[Point]:
        points: List[Point] = []

        for track in gpx.tracks:
            for segment in track.segments:
                for point in segment.points:
                    points.append(Point(
                        lat=point.latitude,
                        lng=point.longitude,
                        elevation=point.elevation,
                        time=point.time,
                    ))

        return points

    @staticmethod
    def parse(
        content: Union[bytes, str],
        options: Optional[GPXParseOptions] = None
    ) -> ParsedTrack:
        """
        Parse GPX content, simplify it and compute preview metrics.

        Args:
            content: GPX file content (bytes are decoded as UTF-8)
            options: Simplification options (defaults apply when omitted)

        Returns:
            ParsedTrack with simplified points and metrics

        Raises:
            GPXParseError: If the document is not valid GPX
            EmptyTrackError: If the document has no track points
        """
        options = options or GPXParseOptions()
        gpx = GPXParserService._load(content)

        points = GPXParserService._track_points(gpx)
        if not points:
            raise EmptyTrackError("No track points found in GPX file")

        name = gpx.tracks[0].name or gpx.name
        description = gpx.tracks[0].description or gpx.description

        simplified = points
        if options.simplify and len(points) > 2:
            simplified = simplify(points, options.tolerance_m)

        if options.max_points and len(simplified) > options.max_points:
            simplified = reduce_to_max_points(simplified, options.max_points)

        logger.info(f"GPX simplified: {len(points)} -> {len(simplified)} points")

        gain = naive_elevation_gain([p.elevation for p in simplified])

        return ParsedTrack(
            name=name,
            description=description,
            points=simplified,
            distance_km=round_half_up(calculate_total_distance(simplified), 2),
            elevation_gain_naive_m=round_half_up(gain),
            raw_points_count=len(points),
            raw_distance_km=round_half_up(calculate_total_distance(points), 2),
        )

    @staticmethod
    def extract_points(content: Union[bytes, str]) -> List[Point]:
        """
        Extract raw track points without simplification.

        Args:
            content: GPX file content

        Returns:
            Track points in document order (may be empty)
        """
        return GPXParserService._track_points(GPXParserService._load(content))
