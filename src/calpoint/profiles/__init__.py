"""Body metrics calculations."""

from calpoint.profiles.body_calc import Sex, calculate_bmr, calculate_tdee

__all__ = ["Sex", "calculate_bmr", "calculate_tdee"]
