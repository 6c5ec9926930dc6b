"""Tests for the database connection wrapper."""

from __future__ import annotations

import sqlite3

import pytest

from calpoint.db.connection import DatabaseConnection
from calpoint.db.schema import SCHEMA_VERSION


class TestSchema:
    """Tests for schema creation."""

    def test_new_file_has_version_zero(self, tmp_path) -> None:
        db = DatabaseConnection(tmp_path / "sub" / "new.db")
        assert db.schema_version() == 0

    def test_initialize_stamps_version(self, temp_db) -> None:
        assert temp_db.schema_version() == SCHEMA_VERSION

    def test_initialize_is_idempotent(self, temp_db) -> None:
        temp_db.initialize_schema()
        with temp_db.get_connection() as conn:
            tables = {
                row["name"]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        assert {"user_profiles", "daily_logs"} <= tables


class TestTransactions:
    """Tests for commit and rollback in get_connection."""

    def test_rollback_on_error(self, temp_db, stored_profile) -> None:
        with pytest.raises(RuntimeError):
            with temp_db.get_connection() as conn:
                conn.execute(
                    "UPDATE user_profiles SET current_weight = 60 WHERE user_id = ?",
                    (stored_profile.user_id,),
                )
                raise RuntimeError("boom")

        with temp_db.get_connection() as conn:
            row = conn.execute("SELECT current_weight FROM user_profiles").fetchone()
        assert row["current_weight"] == 80.0

    def test_one_log_per_day(self, temp_db, stored_profile) -> None:
        insert = (
            "INSERT INTO daily_logs (user_id, date, calories_consumed, diet_points, "
            "workout_points, total_points) VALUES (?, '2025-01-02', 1800, 0.4, 0, 0.4)"
        )
        with temp_db.get_connection() as conn:
            conn.execute(insert, (stored_profile.user_id,))

        with pytest.raises(sqlite3.IntegrityError):
            with temp_db.get_connection() as conn:
                conn.execute(insert, (stored_profile.user_id,))

    def test_log_requires_profile(self, temp_db) -> None:
        with pytest.raises(sqlite3.IntegrityError):
            with temp_db.get_connection() as conn:
                conn.execute(
                    "INSERT INTO daily_logs (user_id, date, calories_consumed, diet_points, "
                    "workout_points, total_points) VALUES (99, '2025-01-02', 1800, 0.4, 0, 0.4)"
                )
