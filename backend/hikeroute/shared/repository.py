"""
Base repository with common async data access.

Usage:
    class TourRepository(BaseRepository[Tour]):
        def __init__(self, db: AsyncSession):
            super().__init__(db, Tour)

Repositories only flush or execute; committing is left to the caller so
that several repository calls can share one transaction.
"""

from typing import TypeVar, Generic, Type
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


def dialect_insert(db: AsyncSession, model):
    """
    INSERT construct supporting ON CONFLICT for the session's dialect.

    Raises:
        NotImplementedError: For dialects other than PostgreSQL and SQLite
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise NotImplementedError(f"Upsert not supported on {dialect}")
    return insert(model)


class BaseRepository(Generic[T]):
    """Generic data access for one SQLAlchemy model."""

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    def _filtered(self, query, **kwargs):
        for key, value in kwargs.items():
            query = query.where(getattr(self.model, key) == value)
        return query

    async def get_by(self, **kwargs) -> T | None:
        """
        Get single entity by field values.

        Args:
            **kwargs: Field name-value pairs to filter by

        Returns:
            Matching entity or None
        """
        result = await self.db.execute(self._filtered(select(self.model), **kwargs))
        return result.scalar_one_or_none()
