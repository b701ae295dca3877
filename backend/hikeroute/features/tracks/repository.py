"""
Track file repository.

Data access layer for TrackFile records.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hikeroute.shared.repository import BaseRepository, dialect_insert
from .models import TrackFile
from .schemas import RouteAnalysis


class TrackFileRepository(BaseRepository[TrackFile]):
    """Repository for TrackFile operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, TrackFile)

    async def get_by_owner(self, owner_id: str) -> Optional[TrackFile]:
        return await self.get_by(owner_id=owner_id)

    async def get_storage_path(self, owner_id: str) -> Optional[str]:
        """Storage path of the owner's current file, read from the database."""
        result = await self.db.execute(
            select(TrackFile.storage_path).where(TrackFile.owner_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        owner_id: str,
        original_filename: str,
        storage_path: str,
        analysis: RouteAnalysis,
        total_points: int,
    ) -> TrackFile:
        """
        Create or overwrite the track file record of an owner.

        A single INSERT ... ON CONFLICT (owner_id) DO UPDATE, so two
        uploads racing for the same owner both succeed and the later
        one wins.

        Args:
            owner_id: Tour the track belongs to
            original_filename: Filename as uploaded
            storage_path: Object store key of the raw file
            analysis: Route statistics
            total_points: Number of trackpoints

        Returns:
            The written TrackFile (not committed)
        """
        fields = dict(
            original_filename=original_filename,
            storage_path=storage_path,
            total_distance_km=analysis.total_distance_km,
            total_elevation_gain_m=analysis.elevation_gain_m,
            total_points=total_points,
            uploaded_at=datetime.utcnow(),
        )

        stmt = dialect_insert(self.db, TrackFile).values(owner_id=owner_id, **fields)
        await self.db.execute(
            stmt.on_conflict_do_update(index_elements=["owner_id"], set_=fields)
        )

        result = await self.db.execute(
            select(TrackFile)
            .where(TrackFile.owner_id == owner_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()
