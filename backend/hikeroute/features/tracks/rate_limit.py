"""
Upload rate limiting.

Sliding-window counter persisted in upload_rate_limits: at most
``settings.upload_rate_limit`` uploads per user within the last
``settings.upload_rate_window_minutes``.

The check and the increment happen in one read-modify-write inside the
caller's transaction. The per-user row is written before it is read,
which takes the row lock on PostgreSQL and the database write lock on
SQLite, so concurrent uploads from one account are serialized.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hikeroute.config import settings
from hikeroute.exceptions import RateLimitExceededError
from hikeroute.shared.repository import dialect_insert
from .models import UploadRateLimit

logger = logging.getLogger(__name__)


class UploadRateLimiter:
    """Transactional sliding-window limiter for track uploads."""

    def __init__(
        self,
        db: AsyncSession,
        limit: Optional[int] = None,
        window_minutes: Optional[int] = None,
    ):
        self.db = db
        self.limit = limit or settings.upload_rate_limit
        self.window_minutes = window_minutes or settings.upload_rate_window_minutes
        self.window = timedelta(minutes=self.window_minutes)

    async def hit(self, user_id: str, now: Optional[datetime] = None) -> int:
        """
        Record one upload if the user is under the limit.

        Does not commit; the caller's transaction decides whether the
        hit sticks.

        Args:
            user_id: Uploading user
            now: Current time (naive UTC), injectable for tests

        Returns:
            Uploads left in the current window

        Raises:
            RateLimitExceededError: If the window is already full
        """
        now = now or datetime.utcnow()
        row = await self._lock_row(user_id, now)

        events = self._active_events(row, now)
        if len(events) >= self.limit:
            retry_after = math.ceil((min(events) + self.window - now).total_seconds())
            logger.warning(
                f"Upload rate limit hit: {len(events)}/{self.limit} "
                f"in {self.window_minutes} min for user {user_id}"
            )
            raise RateLimitExceededError(self.limit, self.window_minutes, max(retry_after, 1))

        events.append(now)
        row.events = [ts.isoformat() for ts in events]
        row.updated_at = now
        await self.db.flush()

        return self.limit - len(events)

    async def get_usage(self, user_id: str, now: Optional[datetime] = None) -> dict:
        """Current window usage, without recording a hit."""
        now = now or datetime.utcnow()
        row = await self.db.get(UploadRateLimit, user_id)
        used = len(self._active_events(row, now)) if row else 0
        return {
            "used": used,
            "remaining": max(self.limit - used, 0),
            "limit": self.limit,
            "window_minutes": self.window_minutes,
        }

    def _active_events(self, row: UploadRateLimit, now: datetime) -> list[datetime]:
        cutoff = now - self.window
        events = (datetime.fromisoformat(ts) for ts in (row.events or []))
        return sorted(ts for ts in events if ts > cutoff)

    async def _lock_row(self, user_id: str, now: datetime) -> UploadRateLimit:
        """Write-touch the user's counter row (creating it if needed) and load it."""
        await self.db.execute(self._insert_if_missing(user_id, now))
        await self.db.execute(
            update(UploadRateLimit)
            .where(UploadRateLimit.user_id == user_id)
            .values(updated_at=now)
            .execution_options(synchronize_session=False)
        )

        result = await self.db.execute(
            select(UploadRateLimit)
            .where(UploadRateLimit.user_id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    def _insert_if_missing(self, user_id: str, now: datetime):
        """INSERT ... ON CONFLICT DO NOTHING for the dialect in use."""
        return (
            dialect_insert(self.db, UploadRateLimit)
            .values(user_id=user_id, events=[], updated_at=now)
            .on_conflict_do_nothing(index_elements=["user_id"])
        )
