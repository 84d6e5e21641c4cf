"""Async SQLModel engine, sessions and startup migrations."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from pathlib import Path

import sqlalchemy
from alembic import command
from alembic.config import Config
from alembic.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from notepress import db_models  # noqa: F401

logger = logging.getLogger("notepress.database")

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"
BASELINE_REVISION = "001"

_engine = None
_session_factory = None


def database_url(raw: str) -> str:
    """Turn a bare SQLite path into an aiosqlite URL, creating its directory."""
    if raw.startswith("sqlite"):
        return raw
    Path(raw).parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+aiosqlite:///{raw}"


async def init_db(url: str = "sqlite+aiosqlite:///notepress.db") -> None:
    global _engine, _session_factory
    connect_args = {"check_same_thread": False, "timeout": 30} if "sqlite" in url else {}
    _engine = create_async_engine(url, connect_args=connect_args, pool_pre_ping=True)
    _session_factory = sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)  # type: ignore[call-overload]

    async with _engine.begin() as conn:
        if "sqlite" in url:
            await conn.execute(text("PRAGMA journal_mode=WAL"))
        # Alembic's command API is synchronous.
        await conn.run_sync(migrate)


def _alembic_config(sync_conn) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.attributes["connection"] = sync_conn
    return cfg


def migrate(sync_conn) -> None:
    """Bring the schema on ``sync_conn`` up to the newest revision.

    A store whose ``posts`` table predates migration tracking is stamped
    at the baseline instead of having its tables created again.
    """
    cfg = _alembic_config(sync_conn)
    tables = set(sqlalchemy.inspect(sync_conn).get_table_names())
    if "posts" in tables and "alembic_version" not in tables:
        logger.info("Untracked post store found, stamping at %s", BASELINE_REVISION)
        command.stamp(cfg, BASELINE_REVISION)

    current = MigrationContext.configure(sync_conn).get_current_revision()
    head = ScriptDirectory.from_config(cfg).get_current_head()
    if current == head:
        logger.debug("Schema is at %s", current)
        return
    logger.info("Migrating schema %s -> %s", current or "(empty)", head)
    command.upgrade(cfg, "head")


async def close_db() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    assert _session_factory is not None, "init_db() has not run"
    async with _session_factory() as session:
        yield session
