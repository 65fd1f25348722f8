"""Database engine and session factory construction."""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from sitetracker.core.config import Settings


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured store endpoint."""
    url = settings.database_url_async
    engine_kwargs = {
        "echo": settings.DB_ECHO,
        "future": True,
    }

    if "sqlite" in url:
        # For SQLite, use StaticPool without pool size parameters
        engine_kwargs["poolclass"] = StaticPool
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
        engine_kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW
        engine_kwargs["pool_pre_ping"] = settings.DB_POOL_PRE_PING
        engine_kwargs["pool_recycle"] = settings.DB_POOL_RECYCLE

    return create_async_engine(url, **engine_kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
