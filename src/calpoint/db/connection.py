"""SQLite access for the profile and log store."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from calpoint.db.schema import SCHEMA_VERSION, get_schema_sql

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Opens short-lived sqlite3 connections to one database file.

    The parent directory is created on construction so a fresh install can
    point at ~/.calpoint/calpoint.db without any setup step.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Yield a connection that is one transaction.

        The block commits if it finishes and rolls back if it raises, so a
        log write and the current-weight update it triggers are atomic.

        Example:
            with db.get_connection() as conn:
                LogQueries.create_log(conn, profile, day, 1800)
        """
        conn = self._connect()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def schema_version(self) -> int:
        """Version stamped by initialize_schema (0 for a new file)."""
        with self.get_connection() as conn:
            return conn.execute("PRAGMA user_version").fetchone()[0]

    def initialize_schema(self) -> None:
        """Create tables on first use; a no-op once the file is current."""
        current = self.schema_version()
        if current >= SCHEMA_VERSION:
            return

        logger.debug(
            "Creating schema v%s at %s (found v%s)", SCHEMA_VERSION, self.db_path, current
        )
        with self.get_connection() as conn:
            conn.executescript(get_schema_sql())
            # PRAGMA does not accept bound parameters
            conn.execute(f"PRAGMA user_version = {int(SCHEMA_VERSION)}")


_db: Optional[DatabaseConnection] = None


def get_db() -> DatabaseConnection:
    """Shared database for the configured path, opened on first call."""
    global _db
    if _db is None:
        from calpoint.config import get_settings

        _db = DatabaseConnection(get_settings().database.path)
    return _db


def set_db(db: Optional[DatabaseConnection]) -> None:
    """Replace the shared database (tests), or pass None to reset it."""
    global _db
    _db = db
