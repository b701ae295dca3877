"""
Track-related schemas.

Pydantic models shared by the parser, the geometry engine and the API.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """Single trackpoint."""

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    elevation: Optional[float] = None

    @property
    def needs_elevation(self) -> bool:
        # 0 is treated as "no data" the same way as a missing value
        return not self.elevation


class LatLng(BaseModel):
    lat: float
    lng: float


class Waypoint(BaseModel):
    """Named point of interest from a <wpt> element."""

    name: str
    description: Optional[str] = None
    coordinate: Coordinate


class BoundingBox(BaseModel):
    """
    Extent of a route.

    radius_km is the distance from center to the north-east corner,
    not a minimal enclosing circle.
    """

    center: LatLng
    radius_km: float
    north: float
    south: float
    east: float
    west: float


class RouteAnalysis(BaseModel):
    """Aggregate statistics of a route."""

    total_distance_km: float = Field(ge=0)
    elevation_gain_m: int = Field(ge=0)
    elevation_loss_m: int = Field(ge=0)
    bounding_box: BoundingBox


class SplitSuggestion(BaseModel):
    """Proposed boundary between two days of a multi-day route."""

    split_index: int
    coordinate: Coordinate
    reason: str
    distance_km: float
    elevation_gain_m: int


class ProfilePoint(BaseModel):
    """One sample of an elevation profile chart."""

    cumulative_distance_km: float
    elevation_m: float


class ParsedTrack(BaseModel):
    """Parser output."""

    trackpoints: list[Coordinate]
    waypoints: list[Waypoint] = Field(default_factory=list)
    has_elevation_data: bool = False


class TrackUploadResponse(BaseModel):
    """Response for a track upload."""

    model_config = ConfigDict(populate_by_name=True)

    trackpoints: list[Coordinate]
    waypoints: list[Waypoint]
    has_elevation_data: bool = Field(alias="hasElevationData")
    needs_elevation_fetch: bool = Field(alias="needsElevationFetch")
    analysis: RouteAnalysis


class TrackFileInfo(BaseModel):
    """Stored track file record."""

    model_config = ConfigDict(from_attributes=True)

    owner_id: str
    original_filename: str
    storage_path: str
    total_distance_km: float
    total_elevation_gain_m: int
    total_points: int
    uploaded_at: datetime


class UploadQuota(BaseModel):
    """Caller's usage of the upload rate limit."""

    used: int
    remaining: int
    limit: int
    window_minutes: int


# =============================================================================
# Request bodies
# =============================================================================

class RoutePointsRequest(BaseModel):
    points: list[Coordinate]


class SimplifyRequest(RoutePointsRequest):
    tolerance: Optional[float] = Field(default=None, gt=0)


class DaySplitRequest(RoutePointsRequest):
    target_days: int = Field(le=60)
