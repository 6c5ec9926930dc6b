"""SQLite storage for profiles and daily logs."""

from calpoint.db.connection import DatabaseConnection, get_db, set_db

__all__ = ["DatabaseConnection", "get_db", "set_db"]
