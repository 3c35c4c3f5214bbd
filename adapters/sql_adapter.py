"""Relational storage connection pool.

The engine is created once at startup, injected into repositories, and
disposed at shutdown. Every repository call checks a connection out of the
pool for a single statement and returns it right after.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.config import Settings, settings as default_settings

logger = logging.getLogger("nutrilog.storage")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON;")
    cursor.close()


def create_db_engine(
    url: Optional[str] = None, config: Optional[Settings] = None, **engine_kwargs
) -> Engine:
    """Build the pooled engine for ``url`` (defaults to ``settings.database_url``).

    SQLite connections get foreign-key enforcement switched on so that profile
    deletes cascade the same way they do on PostgreSQL.
    """
    config = config or default_settings
    url = url or config.database_url

    if url.startswith("sqlite"):
        engine = create_engine(url, echo=config.db_echo, **engine_kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    else:
        options = {
            "pool_size": config.db_pool_size,
            "pool_timeout": config.db_pool_timeout_sec,
            "pool_recycle": config.db_pool_recycle_sec,
            "pool_pre_ping": True,
        }
        options.update(engine_kwargs)
        engine = create_engine(url, echo=config.db_echo, **options)

    logger.info("Created database engine for %s", engine.url.render_as_string(hide_password=True))
    return engine


def dispose_engine(engine: Optional[Engine]) -> None:
    """Release every pooled connection."""
    if engine is None:
        return
    try:
        engine.dispose()
        logger.info("Database engine disposed")
    except SQLAlchemyError:
        logger.exception("Error disposing database engine")


def check_connection(engine: Engine) -> bool:
    """Run ``SELECT 1``; False if the database is unreachable."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as exc:
        logger.warning("Database connectivity check failed: %s", exc)
        return False
