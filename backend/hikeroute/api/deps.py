"""
Shared API dependencies.
"""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from hikeroute.db.session import get_async_db
from hikeroute.exceptions import AuthenticationError
from hikeroute.features.owners import UserRepository
from hikeroute.features.tracks import ElevationBackfillService


async def get_current_user_id(
    authorization: str | None = Header(default=None),
    db: AsyncSession = Depends(get_async_db),
) -> str:
    """Resolve ``Authorization: Bearer <token>`` to a user id."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError()

    user = await UserRepository(db).get_by_api_token(token.strip())
    if not user:
        raise AuthenticationError()
    return user.id


def get_elevation_service() -> ElevationBackfillService:
    return ElevationBackfillService()
