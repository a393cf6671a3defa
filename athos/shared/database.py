"""Database connection and session management for PostgreSQL + Redis."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import redis.asyncio as redis
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from athos.shared.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


# ===================
# SQLAlchemy Base
# ===================


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


# ===================
# PostgreSQL
# ===================

# Store engine per event loop ID to avoid cross-loop connection issues
_engines: dict[int, AsyncEngine] = {}
_session_factories: dict[int, async_sessionmaker[AsyncSession]] = {}


def _get_loop_id() -> int:
    """Get current event loop ID for tracking connections."""
    try:
        loop = asyncio.get_running_loop()
        return id(loop)
    except RuntimeError:
        return 0


def get_engine() -> AsyncEngine:
    """Get SQLAlchemy async engine for current event loop."""
    loop_id = _get_loop_id()

    if loop_id not in _engines:
        _engines[loop_id] = create_async_engine(
            settings.database_url,
            echo=False,
            pool_pre_ping=True,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
        )
    return _engines[loop_id]


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get SQLAlchemy session factory for current event loop."""
    loop_id = _get_loop_id()

    if loop_id not in _session_factories:
        _session_factories[loop_id] = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _session_factories[loop_id]


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session context manager.

    Commits when the block exits cleanly and rolls back otherwise.

    Usage:
        async with get_db_session() as session:
            result = await session.execute(query)
    """
    factory = get_session_factory()
    async with factory() as session:
        try:
            yield session
            try:
                await session.commit()
            except Exception:
                # Rollback if commit itself fails to prevent connection leak
                await session.rollback()
                raise
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """Create all tables.

    Schema migrations are managed outside this service; this is meant for
    development databases and the CLI seed command.
    """
    # Register models on the metadata before create_all
    import athos.modules.catalog.models  # noqa: F401
    import athos.modules.learners.models  # noqa: F401
    import athos.modules.progress.models  # noqa: F401

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of every engine created by this process."""
    for loop_id, engine in list(_engines.items()):
        try:
            await engine.dispose()
        except Exception as e:
            logger.warning(f"Error disposing engine for loop {loop_id}: {e}")
    _engines.clear()
    _session_factories.clear()


# ===================
# Redis
# ===================

_redis_pool: redis.ConnectionPool | None = None


async def get_redis() -> redis.Redis:
    """Get Redis connection from pool.

    Usage:
        redis_client = await get_redis()
        await redis_client.rpush("key", "value")
    """
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = redis.ConnectionPool.from_url(
            settings.redis_url,
            decode_responses=True,
        )
    return redis.Redis(connection_pool=_redis_pool)


async def close_redis() -> None:
    """Close Redis connection pool."""
    global _redis_pool
    if _redis_pool is not None:
        try:
            await _redis_pool.aclose()
        except Exception as e:
            logger.warning(f"Error closing Redis pool: {e}")
        finally:
            _redis_pool = None


# ===================
# Lifecycle Helpers
# ===================


async def check_db_health(max_retries: int = 3, retry_delay: float = 1.0) -> bool:
    """Check database health with retries.

    Args:
        max_retries: Maximum number of retry attempts
        retry_delay: Delay between retries in seconds

    Returns:
        True if database is healthy, False otherwise
    """
    for attempt in range(max_retries):
        try:
            engine = get_engine()
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            logger.debug("Database health check passed")
            return True
        except Exception as e:
            logger.warning(f"Database health check failed (attempt {attempt + 1}/{max_retries}): {e}")
            if attempt < max_retries - 1:
                await asyncio.sleep(retry_delay)
    return False


async def check_redis_health(max_retries: int = 3, retry_delay: float = 1.0) -> bool:
    """Check Redis health with retries.

    Args:
        max_retries: Maximum number of retry attempts
        retry_delay: Delay between retries in seconds

    Returns:
        True if Redis is healthy, False otherwise
    """
    for attempt in range(max_retries):
        try:
            redis_client = await get_redis()
            await redis_client.ping()
            logger.debug("Redis health check passed")
            return True
        except Exception as e:
            logger.warning(f"Redis health check failed (attempt {attempt + 1}/{max_retries}): {e}")
            if attempt < max_retries - 1:
                await asyncio.sleep(retry_delay)
    return False


async def startup(use_database: bool, use_redis: bool) -> None:
    """Verify the backing services the current configuration relies on."""
    if use_database:
        if not await check_db_health(max_retries=5, retry_delay=2.0):
            raise RuntimeError("Failed to connect to database after retries")
        await init_db()

    if use_redis:
        if not await check_redis_health(max_retries=5, retry_delay=2.0):
            raise RuntimeError("Failed to connect to Redis after retries")

    logger.info(
        "Backing services initialized",
        extra={"database": use_database, "redis": use_redis},
    )


async def shutdown() -> None:
    """Close all connections on application shutdown."""
    await close_db()
    await close_redis()
    logger.info("All database connections closed")
