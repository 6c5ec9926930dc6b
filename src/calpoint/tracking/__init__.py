"""Points tracking, pace projection and reporting.

Daily calorie intake and exercise are converted into points (1 point =
1000 kcal of deficit). Points feed the stats report (progress, pace,
projected completion, calorie balance) and the chart series.

Key components:
- Points calculator and goal conversion (7700 kcal per kg)
- Pace and projection with explicit loss/gain/maintenance modes
- Stats report and chart series over the ordered log history
- Profile and log queries
"""

from __future__ import annotations

from calpoint.tracking.charts import ChartSeries, compute_chart_series, heatmap_level
from calpoint.tracking.models import DailyLogEntry, LogWithRunningTotal, UserProfile
from calpoint.tracking.pace import GoalMode, PaceReport
from calpoint.tracking.points import DailyPoints, calculate_daily_points
from calpoint.tracking.stats import StatsReport, compute_stats

__all__ = [
    "ChartSeries",
    "DailyLogEntry",
    "DailyPoints",
    "GoalMode",
    "LogWithRunningTotal",
    "PaceReport",
    "StatsReport",
    "UserProfile",
    "calculate_daily_points",
    "compute_chart_series",
    "compute_stats",
    "heatmap_level",
]
