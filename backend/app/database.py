"""
Watchlist store connection: one async engine (and pool) per process,
plus the per-request session the routers depend on.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import get_settings


class Base(DeclarativeBase):
    pass


def _build_engine():
    settings = get_settings()
    return create_async_engine(
        settings.sqlalchemy_url,
        echo=settings.log_level == "DEBUG",
        pool_pre_ping=True,  # Detect stale connections
    )


engine = _build_engine()

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request. The store functions only flush, so this is the
    single commit point; any exception out of the route (ApiError included)
    rolls the whole request back.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create missing tables. Only called when DB_CREATE_TABLES is set."""
    async with engine.begin() as conn:
        # watchlists must be registered on Base.metadata before create_all
        import app.models  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close pooled connections on shutdown."""
    await engine.dispose()
