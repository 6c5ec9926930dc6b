"""Database queries for profiles and daily logs.

Queries run inside the caller's connection and never commit on their own:
`DatabaseConnection.get_connection()` commits once the block finishes, so a
log write and the profile weight update it triggers share one transaction.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from typing import Optional

from calpoint.profiles.body_calc import calculate_tdee
from calpoint.tracking.models import (
    DailyLogEntry,
    UserProfile,
    should_update_current_weight,
)
from calpoint.tracking.points import calculate_daily_points

logger = logging.getLogger(__name__)


class DuplicateLogError(ValueError):
    """A log already exists for this user and date."""


class LogNotFoundError(LookupError):
    """No log with this id belongs to the user."""


_PROFILE_COLUMNS = """
    user_id, height_cm, age, sex, starting_weight, goal_weight,
    current_weight, tdee, target_calories, start_date, created_at
"""

_LOG_COLUMNS = """
    log_id, user_id, date, calories_consumed, workout_calories, weight,
    notes, diet_points, workout_points, total_points
"""


def _row_to_profile(row: sqlite3.Row) -> UserProfile:
    return UserProfile(
        user_id=row["user_id"],
        height_cm=row["height_cm"],
        age=row["age"],
        sex=row["sex"],
        starting_weight=row["starting_weight"],
        goal_weight=row["goal_weight"],
        current_weight=row["current_weight"],
        tdee=row["tdee"],
        target_calories=row["target_calories"],
        start_date=date.fromisoformat(row["start_date"]),
        created_at=datetime.fromisoformat(row["created_at"]) if row["created_at"] else None,
    )


def _row_to_log(row: sqlite3.Row) -> DailyLogEntry:
    return DailyLogEntry(
        log_id=row["log_id"],
        user_id=row["user_id"],
        date=date.fromisoformat(row["date"]),
        calories_consumed=row["calories_consumed"],
        workout_calories=row["workout_calories"],
        weight=row["weight"],
        notes=row["notes"],
        diet_points=row["diet_points"],
        workout_points=row["workout_points"],
        total_points=row["total_points"],
    )


class UserQueries:
    """Database queries for user profiles."""

    @staticmethod
    def create_profile(conn: sqlite3.Connection, profile: UserProfile) -> int:
        """Create a new user profile and return the user_id."""
        cursor = conn.execute(
            """
            INSERT INTO user_profiles (height_cm, age, sex, starting_weight,
                                       goal_weight, current_weight, tdee,
                                       target_calories, start_date)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                profile.height_cm,
                profile.age,
                profile.sex,
                profile.starting_weight,
                profile.goal_weight,
                profile.current_weight,
                profile.tdee,
                profile.target_calories,
                profile.start_date.isoformat(),
            ),
        )
        profile.user_id = cursor.lastrowid or 0
        logger.info("Created profile %s (tdee=%s)", profile.user_id, profile.tdee)
        return profile.user_id

    @staticmethod
    def get_profile(conn: sqlite3.Connection, user_id: int) -> Optional[UserProfile]:
        """Get user profile by ID."""
        row = conn.execute(
            f"SELECT {_PROFILE_COLUMNS} FROM user_profiles WHERE user_id = ?",
            (user_id,),
        ).fetchone()

        return _row_to_profile(row) if row else None

    @staticmethod
    def get_default_profile(conn: sqlite3.Connection) -> Optional[UserProfile]:
        """Get the first (default) user profile."""
        row = conn.execute(
            f"SELECT {_PROFILE_COLUMNS} FROM user_profiles ORDER BY user_id LIMIT 1"
        ).fetchone()

        return _row_to_profile(row) if row else None

    @staticmethod
    def update_profile(conn: sqlite3.Connection, profile: UserProfile) -> None:
        """Update an existing user profile.

        The stored tdee is written as given; use refresh_tdee to recompute it.
        """
        if profile.user_id is None:
            raise ValueError("Cannot update profile without user_id")

        conn.execute(
            """
            UPDATE user_profiles
            SET height_cm = ?, age = ?, sex = ?, starting_weight = ?,
                goal_weight = ?, current_weight = ?, tdee = ?,
                target_calories = ?, start_date = ?
            WHERE user_id = ?
            """,
            (
                profile.height_cm,
                profile.age,
                profile.sex,
                profile.starting_weight,
                profile.goal_weight,
                profile.current_weight,
                profile.tdee,
                profile.target_calories,
                profile.start_date.isoformat(),
                profile.user_id,
            ),
        )
        logger.info("Updated profile %s", profile.user_id)

    @staticmethod
    def set_current_weight(conn: sqlite3.Connection, user_id: int, weight: float) -> None:
        """Overwrite the cached current weight."""
        conn.execute(
            "UPDATE user_profiles SET current_weight = ? WHERE user_id = ?",
            (weight, user_id),
        )

    @staticmethod
    def refresh_tdee(conn: sqlite3.Connection, profile: UserProfile) -> int:
        """
        Recompute tdee from the profile's current weight and store it.

        Existing logs keep the points they were written with.
        """
        if profile.user_id is None:
            raise ValueError("Cannot refresh tdee without user_id")

        new_tdee = calculate_tdee(
            profile.current_weight, profile.height_cm, profile.age, profile.sex
        )
        conn.execute(
            "UPDATE user_profiles SET tdee = ? WHERE user_id = ?",
            (new_tdee, profile.user_id),
        )
        logger.info(
            "Refreshed tdee for profile %s: %s -> %s",
            profile.user_id,
            profile.tdee,
            new_tdee,
        )
        profile.tdee = new_tdee
        return new_tdee


class LogQueries:
    """Database queries for daily log entries."""

    @staticmethod
    def create_log(
        conn: sqlite3.Connection,
        profile: UserProfile,
        log_date: date,
        calories_consumed: int,
        workout_calories: int = 0,
        weight: Optional[float] = None,
        notes: Optional[str] = None,
    ) -> DailyLogEntry:
        """
        Add a daily log, computing points from the profile's current tdee.

        Raises:
            DuplicateLogError: If a log already exists for this date
        """
        if profile.user_id is None:
            raise ValueError("Cannot log for a profile without user_id")

        if LogQueries.get_log_by_date(conn, profile.user_id, log_date) is not None:
            raise DuplicateLogError(
                f"Log for {log_date.isoformat()} already exists. Edit it instead."
            )

        points = calculate_daily_points(profile.tdee, calories_consumed, workout_calories)

        cursor = conn.execute(
            """
            INSERT INTO daily_logs (user_id, date, calories_consumed, workout_calories,
                                    weight, notes, diet_points, workout_points, total_points)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                profile.user_id,
                log_date.isoformat(),
                calories_consumed,
                workout_calories,
                weight,
                notes,
                points.diet_points,
                points.workout_points,
                points.total_points,
            ),
        )

        entry = DailyLogEntry(
            log_id=cursor.lastrowid,
            user_id=profile.user_id,
            date=log_date,
            calories_consumed=calories_consumed,
            workout_calories=workout_calories,
            weight=weight,
            notes=notes,
            diet_points=points.diet_points,
            workout_points=points.workout_points,
            total_points=points.total_points,
        )
        logger.info("Logged %s: %+.3f points", log_date, entry.total_points)

        LogQueries._sync_current_weight(conn, profile, entry)
        return entry

    @staticmethod
    def update_log(
        conn: sqlite3.Connection,
        profile: UserProfile,
        log_id: int,
        calories_consumed: int,
        workout_calories: int = 0,
        weight: Optional[float] = None,
        notes: Optional[str] = None,
    ) -> DailyLogEntry:
        """
        Edit a log, recomputing all points from the profile's current tdee.

        Raises:
            LogNotFoundError: If the log does not exist for this user
        """
        if profile.user_id is None:
            raise ValueError("Cannot edit logs for a profile without user_id")

        existing = LogQueries.get_log(conn, profile.user_id, log_id)
        if existing is None:
            raise LogNotFoundError(f"Log {log_id} not found")

        points = calculate_daily_points(profile.tdee, calories_consumed, workout_calories)

        conn.execute(
            """
            UPDATE daily_logs
            SET calories_consumed = ?, workout_calories = ?, weight = ?, notes = ?,
                diet_points = ?, workout_points = ?, total_points = ?
            WHERE log_id = ? AND user_id = ?
            """,
            (
                calories_consumed,
                workout_calories,
                weight,
                notes,
                points.diet_points,
                points.workout_points,
                points.total_points,
                log_id,
                profile.user_id,
            ),
        )

        entry = DailyLogEntry(
            log_id=log_id,
            user_id=profile.user_id,
            date=existing.date,
            calories_consumed=calories_consumed,
            workout_calories=workout_calories,
            weight=weight,
            notes=notes,
            diet_points=points.diet_points,
            workout_points=points.workout_points,
            total_points=points.total_points,
        )
        logger.info("Updated log %s (%s): %+.3f points", log_id, entry.date, entry.total_points)

        weight_cleared = existing.weight is not None and weight is None
        LogQueries._sync_current_weight(conn, profile, entry, weight_cleared)
        return entry

    @staticmethod
    def delete_log(conn: sqlite3.Connection, user_id: int, log_id: int) -> None:
        """
        Delete a log.

        Raises:
            LogNotFoundError: If the log does not exist for this user
        """
        cursor = conn.execute(
            "DELETE FROM daily_logs WHERE log_id = ? AND user_id = ?",
            (log_id, user_id),
        )
        if cursor.rowcount == 0:
            raise LogNotFoundError(f"Log {log_id} not found")
        logger.info("Deleted log %s", log_id)

    @staticmethod
    def get_log(
        conn: sqlite3.Connection, user_id: int, log_id: int
    ) -> Optional[DailyLogEntry]:
        """Get a log by id, scoped to the user."""
        row = conn.execute(
            f"SELECT {_LOG_COLUMNS} FROM daily_logs WHERE log_id = ? AND user_id = ?",
            (log_id, user_id),
        ).fetchone()

        return _row_to_log(row) if row else None

    @staticmethod
    def get_log_by_date(
        conn: sqlite3.Connection, user_id: int, log_date: date
    ) -> Optional[DailyLogEntry]:
        """Get the log for a specific date."""
        row = conn.execute(
            f"SELECT {_LOG_COLUMNS} FROM daily_logs WHERE user_id = ? AND date = ?",
            (user_id, log_date.isoformat()),
        ).fetchone()

        return _row_to_log(row) if row else None

    @staticmethod
    def get_latest_log(
        conn: sqlite3.Connection, user_id: int
    ) -> Optional[DailyLogEntry]:
        """Get the most recent dated log."""
        row = conn.execute(
            f"""
            SELECT {_LOG_COLUMNS} FROM daily_logs
            WHERE user_id = ?
            ORDER BY date DESC LIMIT 1
            """,
            (user_id,),
        ).fetchone()

        return _row_to_log(row) if row else None

    @staticmethod
    def get_latest_weighed_log(
        conn: sqlite3.Connection, user_id: int
    ) -> Optional[DailyLogEntry]:
        """Get the most recent log that has a weight."""
        row = conn.execute(
            f"""
            SELECT {_LOG_COLUMNS} FROM daily_logs
            WHERE user_id = ? AND weight IS NOT NULL
            ORDER BY date DESC LIMIT 1
            """,
            (user_id,),
        ).fetchone()

        return _row_to_log(row) if row else None

    @staticmethod
    def get_logs(
        conn: sqlite3.Connection,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        descending: bool = False,
    ) -> list[DailyLogEntry]:
        """
        Get logs for a user.

        Args:
            user_id: User ID
            start_date: If set, return entries on or after this date
            end_date: If set, return entries on or before this date
            descending: Newest first instead of chronological order
        """
        query = f"SELECT {_LOG_COLUMNS} FROM daily_logs WHERE user_id = ?"
        params: list = [user_id]

        if start_date:
            query += " AND date >= ?"
            params.append(start_date.isoformat())
        if end_date:
            query += " AND date <= ?"
            params.append(end_date.isoformat())

        query += " ORDER BY date DESC" if descending else " ORDER BY date"

        rows = conn.execute(query, params).fetchall()
        return [_row_to_log(row) for row in rows]

    @staticmethod
    def get_points_total(conn: sqlite3.Connection, user_id: int) -> float:
        """Sum of total points over all logs."""
        row = conn.execute(
            "SELECT SUM(total_points) FROM daily_logs WHERE user_id = ?",
            (user_id,),
        ).fetchone()

        return row[0] if row and row[0] is not None else 0.0

    @staticmethod
    def _sync_current_weight(
        conn: sqlite3.Connection,
        profile: UserProfile,
        entry: DailyLogEntry,
        weight_cleared: bool = False,
    ) -> None:
        """
        Copy the entry's weight to the profile if it is the latest dated log.

        When an edit removes the weight from the latest log, the current
        weight falls back to the newest remaining weighed log, or to the
        starting weight if there is none.
        """
        if entry.weight is None and not weight_cleared:
            return

        latest = LogQueries.get_latest_log(conn, entry.user_id)
        latest_date = latest.date if latest else None

        if not should_update_current_weight(entry.date, latest_date):
            logger.debug(
                "Kept current weight: %s is older than latest log %s",
                entry.date,
                latest_date,
            )
            return

        if entry.weight is None:
            weighed = LogQueries.get_latest_weighed_log(conn, entry.user_id)
            fallback = weighed.weight if weighed else profile.starting_weight
            UserQueries.set_current_weight(conn, entry.user_id, fallback)
            profile.current_weight = fallback
            logger.debug("Weight cleared on %s; current weight now %s", entry.date, fallback)
            return

        UserQueries.set_current_weight(conn, entry.user_id, entry.weight)
        profile.current_weight = entry.weight
        logger.debug("Current weight set to %s from %s", entry.weight, entry.date)
