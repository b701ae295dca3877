"""
Track ingestion and analysis.

Usage:
    from hikeroute.features.tracks import analyze_route, suggest_day_splits
    from hikeroute.features.tracks import TrackIngestionService

Components:
- TrackParserService: GPX -> trackpoints + waypoints
- analyze_route / calculate_elevation_profile: Geometry engine
- ElevationBackfillService: Fill missing elevation from the lookup API
- simplify_route: Douglas-Peucker simplification
- suggest_day_splits: Multi-day split advisor
- UploadRateLimiter: Sliding-window upload counter
- TrackIngestionService: Upload orchestration
"""

from .models import TrackFile, UploadRateLimit
from .schemas import (
    BoundingBox,
    Coordinate,
    ParsedTrack,
    ProfilePoint,
    RouteAnalysis,
    SplitSuggestion,
    TrackFileInfo,
    TrackUploadResponse,
    UploadQuota,
    Waypoint,
)
from .parser import TrackParserService
from .analysis import analyze_route, calculate_elevation_profile
from .elevation import (
    ElevationBackfillService,
    estimate_elevation,
    interpolate_missing,
)
from .simplifier import simplify_route
from .day_splits import suggest_day_splits
from .rate_limit import UploadRateLimiter
from .repository import TrackFileRepository
from .service import TrackIngestionService

__all__ = [
    # Models
    "TrackFile",
    "UploadRateLimit",
    # Schemas
    "BoundingBox",
    "Coordinate",
    "ParsedTrack",
    "ProfilePoint",
    "RouteAnalysis",
    "SplitSuggestion",
    "TrackFileInfo",
    "TrackUploadResponse",
    "UploadQuota",
    "Waypoint",
    # Services
    "TrackParserService",
    "analyze_route",
    "calculate_elevation_profile",
    "ElevationBackfillService",
    "estimate_elevation",
    "interpolate_missing",
    "simplify_route",
    "suggest_day_splits",
    "UploadRateLimiter",
    "TrackFileRepository",
    "TrackIngestionService",
]
