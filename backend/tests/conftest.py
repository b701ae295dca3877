"""Shared test fixtures."""

from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from hikeroute.features.owners import Tour, User
from hikeroute.models import Base, register_models

from factories import (
    GUIDE_ID,
    GUIDE_TOKEN,
    OTHER_ID,
    OTHER_TOKEN,
    TOUR_ID,
    InMemoryObjectStore,
)


@pytest.fixture
def store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """SQLite file with all tables and two guides, the first owning TOUR_ID."""
    path = tmp_path / "test.db"
    register_models()

    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        session.add_all([
            User(id=GUIDE_ID, api_token=GUIDE_TOKEN, name="Guide"),
            User(id=OTHER_ID, api_token=OTHER_TOKEN, name="Other"),
        ])
        session.flush()
        session.add(Tour(id=TOUR_ID, guide_id=GUIDE_ID, title="Haute Route"))
        session.commit()
    engine.dispose()

    return path


@pytest.fixture
def session_factory(db_path: Path) -> async_sessionmaker:
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory: async_sessionmaker):
    async with session_factory() as session:
        yield session
