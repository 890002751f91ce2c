"""
Database Module

Async SQLAlchemy engine, session factory and declarative Base.
One AsyncSession is handed out per request through `get_db`.
"""

import logging
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from quiz_engine.core.config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs() -> dict:
    kwargs = {"echo": settings.SQLALCHEMY_ECHO, "pool_pre_ping": True}
    # Pool sizing only applies to server databases
    if settings.DB_POOL_MIN_SIZE is not None:
        kwargs["pool_size"] = settings.DB_POOL_MIN_SIZE
    if settings.DB_POOL_MAX_SIZE is not None:
        kwargs["max_overflow"] = max(
            0, settings.DB_POOL_MAX_SIZE - (settings.DB_POOL_MIN_SIZE or 5)
        )
    return kwargs


engine = create_async_engine(settings.DATABASE_URL, **_engine_kwargs())

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def check_db_connection() -> bool:
    """Run a trivial query to confirm the database is reachable."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False
