"""Async SQLAlchemy engine and session factory for the primary offline tier."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from soilsense.config import get_settings
from soilsense.models import Base


def build_engine(database_url: str | None = None) -> AsyncEngine:
    url = database_url or get_settings().database_url
    return create_async_engine(url, future=True)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


engine = build_engine()
async_session_factory = build_session_factory(engine)


async def create_schema(target: AsyncEngine) -> None:
    """Create every table registered on ``Base.metadata`` if missing."""
    async with target.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
