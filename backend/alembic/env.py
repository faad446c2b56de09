"""
Alembic Migration Environment
=============================

What:  Runs NotesVault migrations against the async engine.
How:   The URL comes from `-x dburl=...` when given, otherwise from
       Settings.database_url (DATABASE_URL); alembic.ini never holds one.
       SQLite targets use batch mode so ALTER-style migrations work there.

Usage:
    alembic upgrade head
    alembic -x dburl=sqlite+aiosqlite:///./notesvault.db upgrade head
    alembic upgrade head --sql        (offline: print SQL only)
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine
from alembic import context

from notesvault.config import settings
from notesvault.database import Base

# Registers the notes table on Base.metadata for --autogenerate
from notesvault.models.note import NoteRow  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def resolve_database_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("dburl") or settings.database_url


def configure_options(url: str) -> dict:
    return {
        "target_metadata": target_metadata,
        "render_as_batch": url.startswith("sqlite"),
        "compare_type": True,
    }


def run_offline(url: str) -> None:
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **configure_options(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection, url: str) -> None:
    context.configure(connection=connection, **configure_options(url))
    with context.begin_transaction():
        context.run_migrations()


async def run_online(url: str) -> None:
    engine = create_async_engine(url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate, url)
    finally:
        await engine.dispose()


database_url = resolve_database_url()

if context.is_offline_mode():
    run_offline(database_url)
else:
    asyncio.run(run_online(database_url))
