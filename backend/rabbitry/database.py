"""
Rabbitry Backend — Database Engine & Session Factory
=====================================================

What:  Async SQLAlchemy engine, session factory and declarative base.
How:   `build_engine()` creates an engine for a URL; the module-level
       `engine` / `async_session_factory` are built from settings at import.
       Sessions are opened by BreedService, one per operation, so the
       service owns every transaction boundary.
Who:   BreedService, the health route, Alembic and the test fixtures.

Connection pooling (PostgreSQL):
    pool_size / max_overflow come from settings, pre-ping catches stale
    connections and pool_recycle=3600 retires long-lived ones.

SQLite (tests and local runs):
    SQLite leaves foreign keys off unless asked per connection, so a connect
    hook turns them on. Without it ON DELETE CASCADE is silently ignored.
    An in-memory URL gets a StaticPool so every session sees the same
    database.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from rabbitry.config import settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine configured for the backend named in the URL.

    Args:
        database_url: postgresql+asyncpg://... or sqlite+aiosqlite://...
        echo: Log every SQL statement (used when LOG_LEVEL=DEBUG)

    Returns:
        AsyncEngine; no connection is opened until first use.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url.rstrip("/").endswith("sqlite+aiosqlite:"):
            kwargs["poolclass"] = StaticPool
        sqlite_engine = create_async_engine(database_url, echo=echo, **kwargs)
        event.listen(sqlite_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine

    return create_async_engine(
        database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
        echo=echo,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: rows stay readable after the transaction closes
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.database_url, echo=settings.log_level == "DEBUG")
async_session_factory = build_session_factory(engine)


class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Its metadata is what Alembic autogenerates against and what the test
    fixtures use to create the schema in SQLite.
    """
    pass


async def dispose_engine() -> None:
    """Close every pooled connection. Called from the app lifespan on shutdown."""
    await engine.dispose()
