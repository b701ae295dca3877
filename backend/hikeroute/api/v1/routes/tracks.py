"""
Track Routes

Endpoints for uploading tour tracks and for the route analysis tools
used by the tour editor (profile, simplification, day splits).
"""

from fastapi import APIRouter, UploadFile, File, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hikeroute.api.deps import get_current_user_id, get_elevation_service
from hikeroute.config import settings
from hikeroute.db.session import get_async_db
from hikeroute.features.tracks import (
    Coordinate,
    ElevationBackfillService,
    ProfilePoint,
    RouteAnalysis,
    SplitSuggestion,
    TrackFileInfo,
    TrackIngestionService,
    TrackUploadResponse,
    UploadQuota,
    UploadRateLimiter,
    analyze_route,
    calculate_elevation_profile,
    simplify_route,
    suggest_day_splits,
)
from hikeroute.features.tracks.schemas import (
    DaySplitRequest,
    RoutePointsRequest,
    SimplifyRequest,
)
from hikeroute.shared.storage import ObjectStore, get_object_store

router = APIRouter()


@router.post("/{tour_id}/upload", response_model=TrackUploadResponse)
async def upload_track(
    tour_id: str,
    file: UploadFile = File(...),
    fetch_elevation: bool = Query(default=True),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
    store: ObjectStore = Depends(get_object_store),
    elevation_service: ElevationBackfillService = Depends(get_elevation_service),
):
    """
    Upload and parse a GPX track for a tour.

    Returns trackpoints, waypoints and route statistics. Elevation is
    backfilled from the lookup API when the file has none.
    """
    if not file.filename or not file.filename.lower().endswith('.gpx'):
        raise HTTPException(status_code=400, detail="Only .gpx files are allowed")

    # One byte over the limit is enough for the parser to reject it
    content = await file.read(settings.max_upload_bytes + 1)

    if len(content) == 0:
        raise HTTPException(status_code=400, detail="File is empty")

    service = TrackIngestionService(db, store, elevation_service=elevation_service)
    return await service.ingest(
        user_id=user_id,
        tour_id=tour_id,
        filename=file.filename,
        content=content,
        fetch_elevation=fetch_elevation,
    )


@router.get("/uploads/quota", response_model=UploadQuota)
async def upload_quota(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
):
    """Uploads used and left in the caller's current rate-limit window."""
    return await UploadRateLimiter(db).get_usage(user_id)


@router.get("/{tour_id}", response_model=TrackFileInfo)
async def get_track(
    tour_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_db),
    store: ObjectStore = Depends(get_object_store),
):
    """Get the stored track record of a tour."""
    service = TrackIngestionService(db, store)
    return await service.get_track_file(user_id, tour_id)


@router.post("/analyze", response_model=RouteAnalysis)
async def analyze(request: RoutePointsRequest):
    """Distance, elevation gain/loss and bounding box of a route."""
    return analyze_route(request.points)


@router.post("/profile", response_model=list[ProfilePoint])
async def elevation_profile(request: RoutePointsRequest):
    """Elevation profile (cumulative distance vs elevation)."""
    return calculate_elevation_profile(request.points)


@router.post("/simplify", response_model=list[Coordinate])
async def simplify(request: SimplifyRequest):
    """Simplify a route for storage and display."""
    tolerance = request.tolerance or settings.simplify_tolerance
    return simplify_route(request.points, tolerance)


@router.post("/day-splits", response_model=list[SplitSuggestion])
async def day_splits(request: DaySplitRequest):
    """Suggest where to split a route into multiple days."""
    return suggest_day_splits(request.points, request.target_days)


@router.post("/elevation", response_model=list[Coordinate])
async def backfill_elevation(
    request: RoutePointsRequest,
    elevation_service: ElevationBackfillService = Depends(get_elevation_service),
):
    """Fill missing elevation; returns the input unchanged if the lookup fails."""
    return await elevation_service.backfill(request.points)
