from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool, StaticPool
from typing import AsyncGenerator, Optional

from app.core.config import settings

# Relational store: accounts, students, settings, notifications
Base = declarative_base()

# Activity log store, kept on its own metadata so it can be bound to a separate database
ActivityBase = declarative_base()

# Lazy engine initialization - create on first use to avoid import-time issues
_engine: Optional[AsyncEngine] = None
_activity_engine: Optional[AsyncEngine] = None
_async_session_local: Optional[async_sessionmaker[AsyncSession]] = None
_activity_session_local: Optional[async_sessionmaker[AsyncSession]] = None


def get_database_url(db_url: Optional[str] = None) -> str:
    """Get properly formatted database URL"""
    db_url = db_url or settings.DATABASE_URL
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+asyncpg://")
    return db_url


def _is_memory_sqlite(db_url: str) -> bool:
    return db_url.rstrip("/").endswith(("sqlite+aiosqlite:", ":memory:"))


def create_engine_for_url(db_url: str) -> AsyncEngine:
    """
    Build an async engine for the given URL.

    Connection pooling strategy:
    - In-memory SQLite: StaticPool (one shared connection, otherwise every
      connection sees an empty database)
    - File SQLite: NullPool (required for thread safety)
    - Everything else: default QueuePool with pre-ping
    """
    db_url = get_database_url(db_url)

    if "sqlite" in db_url:
        return create_async_engine(
            db_url,
            echo=settings.DB_ECHO,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool if _is_memory_sqlite(db_url) else NullPool,
        )

    return create_async_engine(
        db_url,
        echo=settings.DB_ECHO,
        pool_pre_ping=True,  # Verify connections before use
    )


def get_engine() -> AsyncEngine:
    """Get or create the relational database engine (lazy initialization)"""
    global _engine
    if _engine is None:
        _engine = create_engine_for_url(settings.DATABASE_URL)
    return _engine


def get_activity_engine() -> AsyncEngine:
    """Get or create the activity log engine; shares the main engine unless configured apart"""
    global _activity_engine
    if _activity_engine is None:
        if get_database_url(settings.activity_database_url) == get_database_url(settings.DATABASE_URL):
            _activity_engine = get_engine()
        else:
            _activity_engine = create_engine_for_url(settings.activity_database_url)
    return _activity_engine


def get_session_local() -> async_sessionmaker[AsyncSession]:
    """Get or create the session factory (lazy initialization)"""
    global _async_session_local
    if _async_session_local is None:
        _async_session_local = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False
        )
    return _async_session_local


def get_activity_session_local() -> async_sessionmaker[AsyncSession]:
    """Get or create the activity log session factory"""
    global _activity_session_local
    if _activity_session_local is None:
        _activity_session_local = async_sessionmaker(
            get_activity_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False
        )
    return _activity_session_local


def AsyncSessionLocal():
    """Create a new async session"""
    return get_session_local()()


# Dependency to get DB session
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get relational database session - only commits if there are pending changes"""
    session_factory = get_session_local()
    async with session_factory() as session:
        try:
            yield session
            # Only commit if there are pending changes (new, dirty, or deleted objects)
            if session.new or session.dirty or session.deleted:
                await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_activity_db() -> AsyncGenerator[AsyncSession, None]:
    """Get activity log database session (read side; writes go through the recorder)"""
    session_factory = get_activity_session_local()
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# Database initialization
async def init_db():
    """Create relational and activity log tables"""
    import app.models  # noqa: F401  register models on the metadata

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with get_activity_engine().begin() as conn:
        await conn.run_sync(ActivityBase.metadata.create_all)


async def drop_db():
    """Drop every table (used by tests)"""
    async with get_activity_engine().begin() as conn:
        await conn.run_sync(ActivityBase.metadata.drop_all)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def close_db():
    """Close database connections"""
    global _engine, _activity_engine, _async_session_local, _activity_session_local
    if _activity_engine is not None and _activity_engine is not _engine:
        await _activity_engine.dispose()
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _activity_engine = None
    _async_session_local = None
    _activity_session_local = None
