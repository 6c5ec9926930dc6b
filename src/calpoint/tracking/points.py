"""Points currency for energy balance.

One point is 1000 kcal of deficit against TDEE. A day's points are split
into diet points (eating below or above TDEE) and workout points (calories
burned in exercise):

    diet_points    = (tdee - calories_consumed) / 1000
    workout_points = workout_calories / 1000
    total_points   = diet_points + workout_points

Positive points mean a deficit (progress toward a weight-loss goal),
negative points mean a surplus.

Goal conversion uses the common approximation of 7700 kcal per kg of body
mass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

CALORIES_PER_POINT = 1000

# Standard calories per kg of body fat
CALORIES_PER_KG = 7700

# Stored points precision
POINTS_PRECISION = 3


@dataclass(frozen=True)
class DailyPoints:
    """Points earned for a single day."""

    diet_points: float
    workout_points: float
    total_points: float

    def to_dict(self) -> dict:
        return {
            "diet_points": self.diet_points,
            "workout_points": self.workout_points,
            "total_points": self.total_points,
        }


def calculate_diet_points(tdee: float, calories_consumed: float) -> float:
    """Calculate unrounded diet points (positive = deficit)."""
    return (tdee - calories_consumed) / CALORIES_PER_POINT


def calculate_workout_points(workout_calories: float) -> float:
    """Calculate unrounded workout points."""
    return workout_calories / CALORIES_PER_POINT


def calculate_daily_points(
    tdee: float,
    calories_consumed: float,
    workout_calories: float = 0,
) -> DailyPoints:
    """
    Calculate the points for one day.

    Components are kept unrounded until the output, and the total is
    rounded from the unrounded sum so it stays consistent with its parts.

    Args:
        tdee: Maintenance calories in effect when the day is logged
        calories_consumed: Calories eaten
        workout_calories: Calories burned in exercise (default 0)

    Returns:
        DailyPoints rounded to 3 decimal places

    Example:
        >>> calculate_daily_points(2200, 1800, 300)
        DailyPoints(diet_points=0.4, workout_points=0.3, total_points=0.7)
    """
    diet = calculate_diet_points(tdee, calories_consumed)
    workout = calculate_workout_points(workout_calories)

    return DailyPoints(
        diet_points=round(diet, POINTS_PRECISION),
        workout_points=round(workout, POINTS_PRECISION),
        total_points=round(diet + workout, POINTS_PRECISION),
    )


def calculate_total_points_needed(starting_weight: float, goal_weight: float) -> float:
    """
    Calculate points needed to move from starting weight to goal weight.

    Direction-agnostic: the same figure serves loss and gain goals.

    Args:
        starting_weight: Starting weight in kg
        goal_weight: Goal weight in kg

    Returns:
        Non-negative number of points
    """
    return abs(starting_weight - goal_weight) * CALORIES_PER_KG / CALORIES_PER_POINT


def calculate_weight_change(points: float) -> float:
    """
    Convert points into kg of body mass.

    Follows the deficit convention: positive points give a positive number
    of kg lost. Gain-mode callers negate the input.
    """
    return points * CALORIES_PER_POINT / CALORIES_PER_KG


def calculate_running_totals(totals: Iterable[float]) -> list[float]:
    """
    Prefix sums of daily totals, in the order given.

    Example:
        >>> calculate_running_totals([0.5, -0.2, 0.3])
        [0.5, 0.3, 0.6]
    """
    running = 0.0
    result = []
    for total in totals:
        running += total
        result.append(round(running, POINTS_PRECISION))
    return result
