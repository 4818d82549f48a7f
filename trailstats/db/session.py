"""
Database Session Management

Provides the async engine and session factory used by SQLTrackStore.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from trailstats.config import settings
from .base import Base


def _get_async_url(url: str) -> str:
    """Convert sync database URL to async version."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///")
    elif url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://")
    return url


def create_engine_for(url: str) -> AsyncEngine:
    """Create an async engine for a (sync or async) database URL."""
    async_url = _get_async_url(url)

    if async_url.startswith("sqlite"):
        return create_async_engine(
            async_url,
            connect_args={"check_same_thread": False}
        )
    elif async_url.startswith("postgresql"):
        # PostgreSQL with connection pool settings
        return create_async_engine(
            async_url,
            pool_size=5,
            max_overflow=10,
            pool_timeout=30,
            pool_recycle=1800,  # 30 minutes
        )
    return create_async_engine(async_url)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


# Default engine for the configured database
async_engine = create_engine_for(settings.database_url)

# Async session factory
AsyncSessionLocal = create_session_factory(async_engine)


async def init_db(engine: AsyncEngine = async_engine) -> None:
    """Create storage tables if they do not exist."""
    # Import models to register them
    from trailstats.features.tracks import models  # noqa

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
