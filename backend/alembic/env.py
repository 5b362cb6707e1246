"""
Alembic Migration Environment
==============================

What:  Runs the breed schema migrations against PostgreSQL or SQLite.
How:   The URL always comes from rabbitry settings (DATABASE_URL), never
       from alembic.ini. Online runs build their engine with
       rabbitry.database.build_engine, so SQLite gets the same foreign-key
       pragma the application uses. A caller that already holds a sync
       connection can pass it as config.attributes["connection"].

    alembic upgrade head          # uses DATABASE_URL
    alembic upgrade head --sql    # prints SQL, no connection
"""

import asyncio
from logging.config import fileConfig

from alembic import context

import rabbitry.models  # noqa: F401  (registers tables on Base.metadata)
from rabbitry.config import settings
from rabbitry.database import Base, build_engine

config = context.config

if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    _configure(
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_on(connection) -> None:
    # SQLite cannot ALTER constraints in place; batch mode recreates the table
    _configure(connection=connection, render_as_batch=connection.dialect.name == "sqlite")
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_async() -> None:
    engine = build_engine(settings.database_url)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(run_migrations_on)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
elif config.attributes.get("connection") is not None:
    run_migrations_on(config.attributes["connection"])
else:
    asyncio.run(run_migrations_async())
