"""Pytest fixtures for calpoint tests."""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest

from calpoint.db.connection import DatabaseConnection
from calpoint.tracking.models import DailyLogEntry, UserProfile
from calpoint.tracking.points import calculate_daily_points


def make_profile(**overrides) -> UserProfile:
    """Build a loss-mode profile: 80 -> 70 kg, tdee 2200, target 1700."""
    fields = {
        "user_id": 1,
        "height_cm": 180,
        "age": 30,
        "sex": "male",
        "starting_weight": 80.0,
        "goal_weight": 70.0,
        "current_weight": 80.0,
        "tdee": 2200,
        "target_calories": 1700,
        "start_date": date(2025, 1, 1),
    }
    fields.update(overrides)
    return UserProfile(**fields)


def make_log(
    log_date: date,
    calories_consumed: int,
    workout_calories: int = 0,
    tdee: int = 2200,
    weight: float | None = None,
) -> DailyLogEntry:
    """Build a log entry with points computed as they would be at write time."""
    points = calculate_daily_points(tdee, calories_consumed, workout_calories)
    return DailyLogEntry(
        log_id=None,
        user_id=1,
        date=log_date,
        calories_consumed=calories_consumed,
        workout_calories=workout_calories,
        weight=weight,
        diet_points=points.diet_points,
        workout_points=points.workout_points,
        total_points=points.total_points,
    )


def make_points_log(log_date: date, total_points: float) -> DailyLogEntry:
    """Build a log entry with a given total (all from diet)."""
    return DailyLogEntry(
        log_id=None,
        user_id=1,
        date=log_date,
        calories_consumed=0,
        diet_points=total_points,
        total_points=total_points,
    )


@pytest.fixture
def temp_db():
    """Create a temporary database with schema."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    db = DatabaseConnection(db_path)
    db.initialize_schema()

    yield db

    # Cleanup
    db_path.unlink(missing_ok=True)


@pytest.fixture
def profile() -> UserProfile:
    """Loss-mode profile without a user_id (not yet stored)."""
    return make_profile(user_id=None)


@pytest.fixture
def stored_profile(temp_db, profile):
    """Profile saved in the temporary database."""
    from calpoint.tracking.queries import UserQueries

    with temp_db.get_connection() as conn:
        UserQueries.create_profile(conn, profile)
    return profile
