"""Chart-ready series built from the log history.

Everything is recomputed from the full ascending log sequence in a single
pass. Nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional, Sequence

from calpoint.tracking.models import DailyLogEntry, UserProfile
from calpoint.tracking.pace import (
    GoalMode,
    calculate_target_points_per_day,
    is_on_track,
)
from calpoint.tracking.points import (
    CALORIES_PER_POINT,
    calculate_total_points_needed,
)

# Heatmap thresholds on a day's total points, highest level first.
# Fixed scale: 4 great, 3 good, 2 maintenance, 1 slight surplus, 0 surplus.
HEATMAP_THRESHOLDS = (
    (0.7, 4),
    (0.4, 3),
    (0.0, 2),
    (-0.4, 1),
)


def heatmap_level(total_points: float) -> int:
    """
    Bucket a day's points into a 0-4 activity level.

    Example:
        >>> [heatmap_level(p) for p in (0.75, 0.5, 0, -0.2, -0.5)]
        [4, 3, 2, 1, 0]
    """
    for threshold, level in HEATMAP_THRESHOLDS:
        if total_points >= threshold:
            return level
    return 0


def week_start(day: date) -> date:
    """Sunday on or before the given date."""
    # date.weekday() is 0 for Monday, 6 for Sunday
    return day - timedelta(days=(day.weekday() + 1) % 7)


@dataclass
class WeeklyBucket:
    """Running total for one Sunday-aligned week."""

    week: date
    total: float = 0.0
    count: int = 0

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0


@dataclass
class ChartSeries:
    """All chart series for a profile."""

    progress_data: list[dict] = field(default_factory=list)
    weight_data: list[dict] = field(default_factory=list)
    daily_points_data: list[dict] = field(default_factory=list)
    deficit_data: list[dict] = field(default_factory=list)
    weekly_data: list[dict] = field(default_factory=list)
    heatmap_data: list[dict] = field(default_factory=list)
    points_breakdown: dict = field(default_factory=lambda: {"diet": 0.0, "workout": 0.0})
    total_points_needed: float = 0.0
    target_points_per_day: float = 0.0
    goal_weight: Optional[float] = None

    def to_dict(self) -> dict:
        """Convert to dict for JSON output."""
        return {
            "progress_data": self.progress_data,
            "weight_data": self.weight_data,
            "daily_points_data": self.daily_points_data,
            "deficit_data": self.deficit_data,
            "weekly_data": self.weekly_data,
            "heatmap_data": self.heatmap_data,
            "points_breakdown": self.points_breakdown,
            "summary": {
                "total_points_needed": self.total_points_needed,
                "target_points_per_day": round(self.target_points_per_day, 3),
                "goal_weight": self.goal_weight,
            },
        }


def compute_chart_series(
    profile: UserProfile,
    logs: Sequence[DailyLogEntry],
) -> ChartSeries:
    """
    Build chart series from logs.

    Args:
        profile: User profile (tdee, target calories, weights)
        logs: Log entries; sorted ascending by date before folding

    Returns:
        ChartSeries with cumulative, daily, weekly and heatmap data
    """
    mode = GoalMode.from_weights(profile.starting_weight, profile.goal_weight)
    target_ppd = calculate_target_points_per_day(profile.tdee, profile.target_calories)

    series = ChartSeries(
        total_points_needed=calculate_total_points_needed(
            profile.starting_weight, profile.goal_weight
        ),
        target_points_per_day=target_ppd,
        goal_weight=profile.goal_weight,
    )

    cumulative_points = 0.0
    total_diet = 0.0
    total_workout = 0.0
    weeks: dict[date, WeeklyBucket] = {}

    for index, log in enumerate(sorted(logs, key=lambda e: e.date)):
        day = log.date.isoformat()
        cumulative_points += log.total_points
        cumulative_target = (index + 1) * target_ppd
        total_diet += log.diet_points
        total_workout += log.workout_points

        series.progress_data.append({
            "date": day,
            "actual": round(cumulative_points, 2),
            "target": round(cumulative_target, 2),
        })

        if log.weight is not None:
            series.weight_data.append({
                "date": day,
                "weight": log.weight,
                "goal": profile.goal_weight,
            })

        series.daily_points_data.append({
            "date": day,
            "points": round(log.total_points, 2),
            "target": round(target_ppd, 2),
        })

        series.deficit_data.append({
            "date": day,
            "deficit": round(cumulative_points * CALORIES_PER_POINT),
            "target": round(cumulative_target * CALORIES_PER_POINT),
        })

        series.heatmap_data.append({
            "date": day,
            "points": round(log.total_points, 2),
            "level": heatmap_level(log.total_points),
        })

        key = week_start(log.date)
        bucket = weeks.setdefault(key, WeeklyBucket(week=key))
        bucket.total += log.total_points
        bucket.count += 1

    series.weekly_data = [
        {
            "week": bucket.week.isoformat(),
            "avg_points": round(bucket.average, 2),
            "on_track": is_on_track(bucket.average, target_ppd, mode),
        }
        for bucket in weeks.values()
    ]

    series.points_breakdown = {
        "diet": round(total_diet, 2),
        "workout": round(total_workout, 2),
    }

    return series
