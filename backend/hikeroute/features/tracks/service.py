"""
Track Ingestion Service

Orchestrates a track upload:
    authorize -> parse -> analyze -> (backfill elevation) -> store file
    -> rate-limit + write record -> respond

The stored file, the TrackFile row and the rate-limit hit either all
persist or none of them does. Inside the transaction the rate-limit hit
comes first: it locks the uploader's counter row, which orders concurrent
uploads to the same tour before the previous record is read.
"""

import logging
import re
import uuid
from pathlib import PureWindowsPath
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hikeroute.config import settings
from hikeroute.exceptions import (
    EmptyTrackError,
    InsufficientPointsError,
    NotFoundError,
    StorageFailure,
    UnauthorizedError,
)
from hikeroute.features.owners import TourRepository
from hikeroute.shared.storage import ObjectStore
from .analysis import analyze_route
from .elevation import ElevationBackfillService
from .models import TrackFile
from .parser import TrackParserService
from .rate_limit import UploadRateLimiter
from .repository import TrackFileRepository
from .schemas import RouteAnalysis, TrackUploadResponse

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(filename: str) -> str:
    """Basename of an uploaded filename, reduced to storage-safe characters."""
    name = PureWindowsPath(filename or "").name
    name = _UNSAFE_FILENAME_CHARS.sub("_", name).strip("._")
    return name or "track.gpx"


class TrackIngestionService:
    """Upload pipeline for tour track files."""

    def __init__(
        self,
        db: AsyncSession,
        store: ObjectStore,
        elevation_service: Optional[ElevationBackfillService] = None,
        rate_limiter: Optional[UploadRateLimiter] = None,
    ):
        self.db = db
        self.store = store
        self.elevation_service = elevation_service or ElevationBackfillService()
        self.rate_limiter = rate_limiter or UploadRateLimiter(db)
        self.tours = TourRepository(db)
        self.track_files = TrackFileRepository(db)

    async def ingest(
        self,
        user_id: str,
        tour_id: str,
        filename: str,
        content: bytes,
        fetch_elevation: bool = True,
    ) -> TrackUploadResponse:
        """
        Ingest an uploaded track file for a tour.

        Args:
            user_id: Authenticated caller
            tour_id: Tour the track belongs to
            filename: Original filename
            content: Raw file content
            fetch_elevation: Backfill elevation if the file has none

        Returns:
            Parsed points, waypoints and route analysis

        Raises:
            UnauthorizedError: Caller does not own the tour
            ParseError, FileTooLargeError, EmptyTrackError: Bad upload
            RateLimitExceededError: Too many uploads in the window
            StorageFailure: File or record could not be persisted
        """
        await self.authorize(user_id, tour_id)

        parsed = TrackParserService.parse(content, max_bytes=settings.max_upload_bytes)
        points = parsed.trackpoints

        try:
            analysis = analyze_route(points)
        except InsufficientPointsError as e:
            raise EmptyTrackError("GPX file needs at least 2 trackpoints") from e

        if fetch_elevation and not parsed.has_elevation_data:
            points = await self.elevation_service.backfill(points)
            analysis = analyze_route(points)

        has_elevation_data = any(p.elevation for p in points)

        previous_path = await self._persist(
            user_id, tour_id, filename, content, analysis, len(points),
        )

        if previous_path:
            await self._discard(previous_path)

        logger.info(
            f"Ingested track for tour {tour_id}: {len(points)} points, "
            f"{analysis.total_distance_km} km, +{analysis.elevation_gain_m} m"
        )

        return TrackUploadResponse(
            trackpoints=points,
            waypoints=parsed.waypoints,
            has_elevation_data=has_elevation_data,
            needs_elevation_fetch=not has_elevation_data,
            analysis=analysis,
        )

    async def authorize(self, user_id: str, tour_id: str) -> None:
        if not await self.tours.is_owned_by(tour_id, user_id):
            logger.warning(f"User {user_id} tried to modify tour {tour_id}")
            raise UnauthorizedError(tour_id)

    async def get_track_file(self, user_id: str, tour_id: str) -> TrackFile:
        """Stored track record of a tour owned by the caller."""
        await self.authorize(user_id, tour_id)
        track_file = await self.track_files.get_by_owner(tour_id)
        if not track_file:
            raise NotFoundError(f"No track file for tour {tour_id}")
        return track_file

    async def _persist(
        self,
        user_id: str,
        tour_id: str,
        filename: str,
        content: bytes,
        analysis: RouteAnalysis,
        total_points: int,
    ) -> Optional[str]:
        """Store the file and write the record; returns the replaced file's path."""
        name = safe_filename(filename)
        key = f"tracks/{tour_id}/{uuid.uuid4().hex}-{name}"
        storage_path = await self.store.put(key, content)

        try:
            await self.rate_limiter.hit(user_id)
            previous_path = await self.track_files.get_storage_path(tour_id)
            await self.track_files.upsert(
                owner_id=tour_id,
                original_filename=filename or name,
                storage_path=storage_path,
                analysis=analysis,
                total_points=total_points,
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            await self._discard(storage_path)
            logger.error(f"Failed to save track record for tour {tour_id}: {e}")
            raise StorageFailure("Failed to save track record") from e
        except Exception:
            await self.db.rollback()
            await self._discard(storage_path)
            raise

        return previous_path

    async def _discard(self, storage_path: str) -> None:
        try:
            await self.store.delete(storage_path)
        except StorageFailure as e:
            logger.error(f"Could not remove stored file {storage_path}: {e}")
