"""Body metrics calculator for maintenance calories.

Calculates BMR (Basal Metabolic Rate) and TDEE (Total Daily Energy
Expenditure) from height, age, sex and weight.

Uses Mifflin-St Jeor equation for BMR as it's widely validated for
calculating resting metabolic rate. Only the sedentary activity level is
modelled: exercise is logged separately as workout calories, so TDEE here
is the "do nothing" baseline.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Union


class Sex(Enum):
    """Biological sex for BMR calculation."""
    MALE = "male"
    FEMALE = "female"


# Harris-Benedict sedentary factor (little or no exercise)
SEDENTARY_MULTIPLIER = 1.2

# Mifflin-St Jeor sex offsets
SEX_OFFSETS = {
    Sex.MALE: 5,
    Sex.FEMALE: -161,
}


def _round_half_up(value: float) -> int:
    """Round to nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def calculate_bmr(
    weight_kg: float,
    height_cm: float,
    age: int,
    sex: Union[Sex, str],
) -> float:
    """Calculate Basal Metabolic Rate using Mifflin-St Jeor equation.

    Args:
        weight_kg: Weight in kilograms
        height_cm: Height in centimetres
        age: Age in years
        sex: Biological sex (Sex or "male"/"female")

    Returns:
        BMR in calories per day

    Example:
        >>> calculate_bmr(80, 180, 30, "male")
        1780.0
    """
    sex_enum = Sex(sex.lower()) if isinstance(sex, str) else sex

    base = (10 * weight_kg) + (6.25 * height_cm) - (5 * age)
    return base + SEX_OFFSETS[sex_enum]


def calculate_tdee(
    weight_kg: float,
    height_cm: float,
    age: int,
    sex: Union[Sex, str],
) -> int:
    """Calculate sedentary Total Daily Energy Expenditure.

    Args:
        weight_kg: Weight in kilograms
        height_cm: Height in centimetres
        age: Age in years
        sex: Biological sex

    Returns:
        TDEE in whole calories per day (BMR x 1.2, rounded)
    """
    bmr = calculate_bmr(weight_kg, height_cm, age, sex)
    return _round_half_up(bmr * SEDENTARY_MULTIPLIER)
