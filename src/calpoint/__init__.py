"""Calpoint: calorie points tracker with goal projection."""

__version__ = "0.1.0"
