"""Pace comparison and time-to-goal projection.

The goal mode is picked once from the profile weights and passed to every
function that cares about direction:

- LOSS: starting weight above goal. Points should be positive (deficit).
- GAIN: goal above starting weight. Points should be negative (surplus).
- MAINTENANCE: weights equal. No pass/fail, no projection.

Projections are linear extrapolations from the all-time average pace over
logged days. There is no smoothing or recency weighting, so one very good
or very bad day moves the projection noticeably.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional

from calpoint.tracking.points import CALORIES_PER_POINT


class GoalMode(Enum):
    """Direction of the weight goal."""
    LOSS = "loss"
    GAIN = "gain"
    MAINTENANCE = "maintenance"

    @property
    def direction(self) -> int:
        """Sign of points that move toward the goal (+1, -1 or 0)."""
        return _DIRECTIONS[self]

    @classmethod
    def from_weights(cls, starting_weight: float, goal_weight: float) -> "GoalMode":
        """Pick the mode from sign(starting_weight - goal_weight)."""
        if starting_weight > goal_weight:
            return cls.LOSS
        if goal_weight > starting_weight:
            return cls.GAIN
        return cls.MAINTENANCE


_DIRECTIONS = {
    GoalMode.LOSS: 1,
    GoalMode.GAIN: -1,
    GoalMode.MAINTENANCE: 0,
}


@dataclass
class PaceReport:
    """Planned vs actual pace with projection."""

    mode: GoalMode
    target_points_per_day: float
    actual_avg_points_per_day: float
    on_track: Optional[bool]  # None in maintenance mode
    pace_difference_percent: float
    days_to_goal: Optional[int]
    projected_completion_date: Optional[date]

    def to_dict(self) -> dict:
        """Convert to dict for JSON output."""
        return {
            "target_points_per_day": round(self.target_points_per_day, 3),
            "actual_avg_points_per_day": round(self.actual_avg_points_per_day, 3),
            "days_to_goal": self.days_to_goal,
            "projected_completion_date": (
                self.projected_completion_date.isoformat()
                if self.projected_completion_date
                else None
            ),
            "on_track": self.on_track,
            "pace_difference_percent": round(self.pace_difference_percent, 1),
        }


def calculate_target_points_per_day(tdee: float, target_calories: float) -> float:
    """
    Planned daily pace implied by the calorie target.

    Example:
        >>> calculate_target_points_per_day(2200, 1700)
        0.5
    """
    return (tdee - target_calories) / CALORIES_PER_POINT


def calculate_average_points_per_day(points_collected: float, days_logged: int) -> float:
    """Average points per logged day, 0 when nothing has been logged."""
    if days_logged == 0:
        return 0.0
    return points_collected / days_logged


def calculate_days_elapsed(start_date: date, today: date) -> int:
    """Calendar days since the start date (display only, never negative)."""
    return max(0, (today - start_date).days)


def is_on_track(
    actual: float,
    target: float,
    mode: GoalMode,
    days_logged: Optional[int] = None,
) -> Optional[bool]:
    """
    Compare actual pace to planned pace in the goal's direction.

    In gain mode the surplus must exceed the planned surplus, so the
    comparison flips. Maintenance mode has no pass/fail and returns None.
    With no logged days the answer is False.
    """
    if mode is GoalMode.MAINTENANCE:
        return None
    if days_logged == 0:
        return False
    if mode is GoalMode.GAIN:
        return actual <= target
    return actual >= target


def calculate_pace_difference(actual: float, target: float) -> float:
    """Percent difference of actual vs target pace, 0 when target is 0."""
    if target == 0:
        return 0.0
    return (actual - target) / abs(target) * 100


def calculate_goal_progress(points_collected: float, mode: GoalMode) -> float:
    """Points collected in the goal's direction (negative if moving away)."""
    return points_collected * mode.direction


def calculate_days_to_goal(
    total_points_needed: float,
    points_collected: float,
    avg_points_per_day: float,
    mode: GoalMode,
) -> Optional[int]:
    """
    Days left at the current average pace.

    Returns None when the pace is zero, points the wrong way, or the goal
    has already been reached.
    """
    if avg_points_per_day == 0:
        return None
    if avg_points_per_day * mode.direction <= 0:
        return None

    remaining = total_points_needed - calculate_goal_progress(points_collected, mode)
    if remaining <= 0:
        return None

    return math.ceil(remaining / abs(avg_points_per_day))


def calculate_projected_completion(
    days_to_goal: Optional[int],
    today: date,
) -> Optional[date]:
    """Projected completion date, None whenever days_to_goal is None."""
    if days_to_goal is None:
        return None
    return today + timedelta(days=days_to_goal)


def build_pace_report(
    tdee: float,
    target_calories: float,
    total_points_needed: float,
    points_collected: float,
    days_logged: int,
    mode: GoalMode,
    today: date,
) -> PaceReport:
    """Assemble the full pace section for a profile."""
    target = calculate_target_points_per_day(tdee, target_calories)
    actual = calculate_average_points_per_day(points_collected, days_logged)

    if mode is GoalMode.MAINTENANCE:
        pace_difference = 0.0
        days_to_goal = None
    else:
        pace_difference = calculate_pace_difference(actual, target)
        days_to_goal = calculate_days_to_goal(
            total_points_needed, points_collected, actual, mode
        )

    return PaceReport(
        mode=mode,
        target_points_per_day=target,
        actual_avg_points_per_day=actual,
        on_track=is_on_track(actual, target, mode, days_logged),
        pace_difference_percent=pace_difference,
        days_to_goal=days_to_goal,
        projected_completion_date=calculate_projected_completion(days_to_goal, today),
    )
