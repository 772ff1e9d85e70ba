"""Centralized database configuration

**DATABASE POLICY**: Paper Library uses ONE SQLite database (PAPERLIB_DB_PATH,
default paperlib/data/paperlib.db). Every namespace of records lives in the
``records`` table of that file.

Provides:
- Connection factory with consistent settings (WAL, Row factory)
- ``get_db_connection()`` / ``db_transaction()`` context managers
- Schema initialization
"""

from __future__ import annotations

import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from paperlib.config import DB_CONNECT_TIMEOUT, DB_PATH
from paperlib.observability.logging import get_logger
from paperlib.observability.telemetry import counter

logger = get_logger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    namespace TEXT PRIMARY KEY,
    payload TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""


def _create_connection(db_path: Path) -> sqlite3.Connection:
    """
    Open a configured SQLite connection.

    Side Effects:
        - Creates the parent directory of the database file if missing
        - Sets journal_mode=WAL and synchronous=NORMAL
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), timeout=DB_CONNECT_TIMEOUT)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA synchronous=NORMAL")
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_db_connection(db_path: Path | None = None) -> Generator[sqlite3.Connection, None, None]:
    """
    Read connection, closed on exit.

    Usage:
        with get_db_connection() as conn:
            row = conn.execute("SELECT ...").fetchone()
    """
    conn = _create_connection(db_path or DB_PATH)
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def db_transaction(db_path: Path | None = None) -> Generator[sqlite3.Connection, None, None]:
    """
    Write connection: commits on success, rolls back and re-raises on error.

    Side Effects:
        - Commits or rolls back the transaction
        - Increments database.transaction_errors on failure
    """
    conn = _create_connection(db_path or DB_PATH)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        counter("database.transaction_errors")
        raise
    finally:
        conn.close()


def init_database(db_path: Path | None = None) -> None:
    """Create tables if they don't exist."""
    path = db_path or DB_PATH
    with db_transaction(path) as conn:
        conn.execute(SCHEMA)
    logger.info("Database initialized at %s", path)
