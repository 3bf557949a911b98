"""
Database Configuration.

SQLAlchemy async engine, session management and transaction scopes.
Uses lazy initialization to prevent import-time failures when .env is not configured.
"""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from notekeeper.core.logging import get_logger

logger = get_logger(__name__)

# Module-level state for lazy initialization
_engine: Any = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def _create_engine() -> Any:
    """Create async SQLAlchemy engine."""
    from notekeeper.core.config import get_app_config, get_database_url

    db_config = get_app_config().database

    engine = create_async_engine(
        get_database_url(),
        isolation_level=db_config.isolation_level,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_recycle=db_config.pool_recycle,
        echo=db_config.echo,
    )
    logger.debug(
        "Database engine created",
        extra={"host": db_config.host, "isolation_level": db_config.isolation_level},
    )
    return engine


def get_engine() -> Any:
    """Get the database engine, creating it on first use."""
    global _engine
    if _engine is None:
        _engine = _create_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory, creating it on first use."""
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_factory


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    Mutating service calls open their own transaction scope on this
    session; the final commit here only closes read transactions.

    Usage in endpoints:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Open a transaction scope on the session.

    The yielded session is the scope handle every participating store
    operation runs on. The scope commits when the block exits normally and
    rolls back when it raises; nothing written inside it is visible after
    a rollback.

    If the session already has a transaction open (e.g. autobegun by an
    earlier read), the scope is a SAVEPOINT within it so the block can
    still be rolled back on its own.

    Usage:
        async with transaction(session) as tx:
            await OrderedPartitionStore(tx).open_slot_at_top(key)
            ...
    """
    if session.in_transaction():
        async with session.begin_nested():
            yield session
    else:
        async with session.begin():
            yield session


async def create_schema() -> None:
    """Create all tables for the registered models."""
    from notekeeper.models.base import Base
    import notekeeper.models.note  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema created", extra={"tables": sorted(Base.metadata.tables)})


async def dispose_engine() -> None:
    """Close all pooled connections. Safe to call when no engine was created."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session_factory = None
