"""
Track Parser Service

Parses uploaded GPX files into trackpoints and waypoints.
"""

import logging
from typing import Optional

import gpxpy
import gpxpy.gpx
from pydantic import ValidationError

from hikeroute.exceptions import ParseError, EmptyTrackError, FileTooLargeError
from .schemas import Coordinate, ParsedTrack, Waypoint

logger = logging.getLogger(__name__)

DEFAULT_WAYPOINT_NAME = "Unnamed"


class TrackParserService:
    """Service for parsing GPX track files."""

    @staticmethod
    def parse(content: bytes | str, max_bytes: Optional[int] = None) -> ParsedTrack:
        """
        Parse GPX content and extract trackpoints and waypoints.

        Trackpoints are returned in document order across all tracks and
        segments. Route points (<rtept>) are not trackpoints and are ignored.

        Args:
            content: GPX file content
            max_bytes: Size bound enforced before parsing

        Returns:
            ParsedTrack with points, waypoints and has_elevation_data

        Raises:
            FileTooLargeError: If content exceeds max_bytes
            ParseError: If content is not well-formed GPX
            EmptyTrackError: If the file has no trackpoints
        """
        raw = content.encode("utf-8") if isinstance(content, str) else content
        if max_bytes is not None and len(raw) > max_bytes:
            raise FileTooLargeError(len(raw), max_bytes)

        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"GPX file is not valid UTF-8: {e}") from e

        try:
            gpx = gpxpy.parse(text)
        except (gpxpy.gpx.GPXException, ValueError) as e:
            logger.warning(f"Failed to parse GPX: {e}")
            raise ParseError(f"Invalid GPX file: {e}") from e

        try:
            trackpoints = [
                Coordinate(lat=point.latitude, lng=point.longitude, elevation=point.elevation)
                for track in gpx.tracks
                for segment in track.segments
                for point in segment.points
            ]
            waypoints = [
                Waypoint(
                    name=(wpt.name or "").strip() or DEFAULT_WAYPOINT_NAME,
                    description=(wpt.description or "").strip() or None,
                    coordinate=Coordinate(
                        lat=wpt.latitude,
                        lng=wpt.longitude,
                        elevation=wpt.elevation,
                    ),
                )
                for wpt in gpx.waypoints
            ]
        except ValidationError as e:
            raise ParseError(f"Invalid coordinates in GPX file: {e}") from e

        if not trackpoints:
            raise EmptyTrackError()

        has_elevation_data = any(p.elevation for p in trackpoints)

        logger.info(
            f"Parsed GPX: {len(trackpoints)} trackpoints, {len(waypoints)} waypoints, "
            f"elevation data: {has_elevation_data}"
        )

        return ParsedTrack(
            trackpoints=trackpoints,
            waypoints=waypoints,
            has_elevation_data=has_elevation_data,
        )
