"""Calorie-balance summary in kcal terms."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from calpoint.tracking.points import CALORIES_PER_KG, CALORIES_PER_POINT


@dataclass
class CalorieSummary:
    """Deficit needed, created and remaining for a goal."""

    total_deficit_needed: int
    deficit_created: int
    deficit_remaining: int
    planned_daily_deficit: float  # negative in gain mode
    tdee: float
    target_calories: float
    avg_daily_deficit: int

    def to_dict(self) -> dict:
        return asdict(self)


def calculate_calorie_summary(
    tdee: float,
    target_calories: float,
    starting_weight: float,
    goal_weight: float,
    points_collected: float,
    days_logged: int,
) -> CalorieSummary:
    """
    Summarise the energy balance behind a goal.

    Args:
        tdee: Maintenance calories
        target_calories: Planned daily intake
        starting_weight: Starting weight in kg
        goal_weight: Goal weight in kg
        points_collected: Sum of total points over all logs
        days_logged: Number of logged days

    Returns:
        CalorieSummary with whole-kcal totals
    """
    total_deficit_needed = abs(starting_weight - goal_weight) * CALORIES_PER_KG
    deficit_created = points_collected * CALORIES_PER_POINT
    deficit_remaining = total_deficit_needed - deficit_created

    avg_daily_deficit = 0
    if days_logged > 0:
        avg_daily_deficit = round(deficit_created / days_logged)

    return CalorieSummary(
        total_deficit_needed=round(total_deficit_needed),
        deficit_created=round(deficit_created),
        deficit_remaining=round(deficit_remaining),
        planned_daily_deficit=tdee - target_calories,
        tdee=tdee,
        target_calories=target_calories,
        avg_daily_deficit=avg_daily_deficit,
    )
