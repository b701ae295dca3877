"""
Owner repositories.

Data access for User and Tour, used by the ingestion boundary to
resolve the caller and check tour ownership.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hikeroute.shared.repository import BaseRepository
from .models import User, Tour


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    async def get_by_api_token(self, token: str) -> User | None:
        return await self.get_by(api_token=token)


class TourRepository(BaseRepository[Tour]):
    """Repository for Tour operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Tour)

    async def is_owned_by(self, tour_id: str, user_id: str) -> bool:
        """
        Check whether a tour belongs to a guide.

        Args:
            tour_id: Tour to check
            user_id: Caller's user id

        Returns:
            True only if the tour exists and its guide is user_id
        """
        result = await self.db.execute(
            select(Tour.guide_id).where(Tour.id == tour_id)
        )
        guide_id = result.scalar_one_or_none()
        return guide_id is not None and guide_id == user_id
