"""Aggregate progress report for a profile and its logs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from calpoint.tracking.calories import CalorieSummary, calculate_calorie_summary
from calpoint.tracking.models import DailyLogEntry, UserProfile
from calpoint.tracking.pace import (
    GoalMode,
    PaceReport,
    build_pace_report,
    calculate_days_elapsed,
    calculate_goal_progress,
)
from calpoint.tracking.points import (
    calculate_total_points_needed,
    calculate_weight_change,
)


@dataclass
class WeightChange:
    """Measured change between starting and current weight."""

    value: float  # kg, always >= 0
    direction: str  # 'lost', 'gained' or 'unchanged'


@dataclass
class ProgressSummary:
    """Weight journey overview."""

    start_date: date
    days_elapsed: int
    days_logged: int
    starting_weight: float
    goal_weight: float
    current_weight: float
    weight_change: WeightChange
    estimated_weight_change: float  # kg moved toward goal, from points
    weight_remaining: float
    progress_percent: float


@dataclass
class PointsSummary:
    """Points needed, collected and remaining."""

    total_needed: float
    collected: float
    remaining: float
    progress_percent: float


@dataclass
class StatsReport:
    """Combined stats report."""

    mode: GoalMode
    summary: ProgressSummary
    points: PointsSummary
    pace: PaceReport
    calories: CalorieSummary

    def to_dict(self) -> dict:
        """Convert to dict for JSON output."""
        summary = self.summary
        return {
            "mode": self.mode.value,
            "summary": {
                "start_date": summary.start_date.isoformat(),
                "days_elapsed": summary.days_elapsed,
                "days_logged": summary.days_logged,
                "starting_weight": summary.starting_weight,
                "goal_weight": summary.goal_weight,
                "current_weight": summary.current_weight,
                "weight_change": {
                    "value": summary.weight_change.value,
                    "direction": summary.weight_change.direction,
                },
                "estimated_weight_change": summary.estimated_weight_change,
                "weight_remaining": summary.weight_remaining,
                "progress_percent": summary.progress_percent,
            },
            "points": {
                "total_needed": self.points.total_needed,
                "collected": self.points.collected,
                "remaining": self.points.remaining,
                "progress_percent": self.points.progress_percent,
            },
            "pace": self.pace.to_dict(),
            "calories": self.calories.to_dict(),
        }


def calculate_weight_change_direction(starting_weight: float, current_weight: float) -> WeightChange:
    """Describe the measured weight change since the start."""
    diff = round(current_weight - starting_weight, 2)
    if diff < 0:
        direction = "lost"
    elif diff > 0:
        direction = "gained"
    else:
        direction = "unchanged"
    return WeightChange(value=abs(diff), direction=direction)


def calculate_progress_percent(progress: float, total_needed: float) -> float:
    """Share of the goal covered, clamped to 0-100. A zero goal is complete."""
    if total_needed == 0:
        return 100.0
    percent = progress / total_needed * 100
    return round(min(100.0, max(0.0, percent)), 1)


def compute_stats(
    profile: UserProfile,
    logs: Sequence[DailyLogEntry],
    today: date,
) -> StatsReport:
    """
    Compute the full stats report.

    Averages use the number of logged days. Calendar days since the start
    date are reported for display only.

    Args:
        profile: User profile
        logs: All log entries for the profile (any order)
        today: Current date in the configured timezone

    Returns:
        StatsReport with summary, points, pace and calorie sections
    """
    mode = GoalMode.from_weights(profile.starting_weight, profile.goal_weight)

    points_collected = sum(log.total_points for log in logs)
    days_logged = len(logs)
    total_needed = calculate_total_points_needed(
        profile.starting_weight, profile.goal_weight
    )
    progress = calculate_goal_progress(points_collected, mode)
    progress_percent = calculate_progress_percent(progress, total_needed)

    estimated_change = calculate_weight_change(progress)
    goal_distance = abs(profile.starting_weight - profile.goal_weight)

    summary = ProgressSummary(
        start_date=profile.start_date,
        days_elapsed=calculate_days_elapsed(profile.start_date, today),
        days_logged=days_logged,
        starting_weight=profile.starting_weight,
        goal_weight=profile.goal_weight,
        current_weight=profile.current_weight,
        weight_change=calculate_weight_change_direction(
            profile.starting_weight, profile.current_weight
        ),
        estimated_weight_change=round(estimated_change, 2),
        weight_remaining=round(max(0.0, goal_distance - estimated_change), 2),
        progress_percent=progress_percent,
    )

    points = PointsSummary(
        total_needed=round(total_needed, 2),
        collected=round(points_collected, 2),
        remaining=round(max(0.0, total_needed - progress), 2),
        progress_percent=progress_percent,
    )

    pace = build_pace_report(
        tdee=profile.tdee,
        target_calories=profile.target_calories,
        total_points_needed=total_needed,
        points_collected=points_collected,
        days_logged=days_logged,
        mode=mode,
        today=today,
    )

    calories = calculate_calorie_summary(
        tdee=profile.tdee,
        target_calories=profile.target_calories,
        starting_weight=profile.starting_weight,
        goal_weight=profile.goal_weight,
        points_collected=points_collected,
        days_logged=days_logged,
    )

    return StatsReport(
        mode=mode,
        summary=summary,
        points=points,
        pace=pace,
        calories=calories,
    )
