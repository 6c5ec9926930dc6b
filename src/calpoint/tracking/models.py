"""Data models for profiles and daily logs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from calpoint.tracking.points import calculate_running_totals


# Onboarding form bounds
HEIGHT_RANGE_CM = (100, 250)
AGE_RANGE = (16, 100)
VALID_SEXES = ("male", "female")


@dataclass
class UserProfile:
    """User profile with goal and cached maintenance calories.

    `tdee` is stored, not derived on read: it only changes when the user
    asks for a refresh. `current_weight` follows the latest dated log that
    carries a weight.
    """

    user_id: Optional[int]
    height_cm: float
    age: int
    sex: str  # 'male' or 'female'
    starting_weight: float  # kg
    goal_weight: float  # kg
    current_weight: float  # kg
    tdee: int  # kcal/day
    target_calories: int  # kcal/day
    start_date: date
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.sex not in VALID_SEXES:
            raise ValueError(f"sex must be 'male' or 'female', got '{self.sex}'")
        low, high = HEIGHT_RANGE_CM
        if not low <= self.height_cm <= high:
            raise ValueError(
                f"height_cm must be between {low} and {high}, got {self.height_cm}"
            )
        low, high = AGE_RANGE
        if not low <= self.age <= high:
            raise ValueError(f"age must be between {low} and {high}, got {self.age}")
        for name in ("starting_weight", "goal_weight", "current_weight"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.target_calories <= 0:
            raise ValueError(
                f"target_calories must be positive, got {self.target_calories}"
            )


@dataclass
class DailyLogEntry:
    """A single day's log with points computed at write time."""

    log_id: Optional[int]
    user_id: int
    date: date
    calories_consumed: int
    workout_calories: int = 0
    weight: Optional[float] = None  # kg
    notes: Optional[str] = None
    diet_points: float = 0.0
    workout_points: float = 0.0
    total_points: float = 0.0


@dataclass
class LogWithRunningTotal:
    """A log entry paired with the cumulative points up to its date."""

    entry: DailyLogEntry
    running_total: float


def should_update_current_weight(entry_date: date, latest_date: Optional[date]) -> bool:
    """
    Decide whether a weighed entry may overwrite the profile's current weight.

    Only the chronologically latest dated entry wins, so editing an older
    entry never clobbers a newer weigh-in.
    """
    return latest_date is None or entry_date >= latest_date


def with_running_totals(logs: Iterable[DailyLogEntry]) -> list[LogWithRunningTotal]:
    """
    Attach running totals to logs, newest first.

    Totals are accumulated in ascending date order whatever order the logs
    arrive in; the result is then reversed for display.
    """
    ordered = sorted(logs, key=lambda e: e.date)
    totals = calculate_running_totals(e.total_points for e in ordered)
    return [
        LogWithRunningTotal(entry=entry, running_total=total)
        for entry, total in reversed(list(zip(ordered, totals)))
    ]
