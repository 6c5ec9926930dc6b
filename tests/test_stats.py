"""Tests for the aggregate stats report."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from calpoint.tracking.pace import GoalMode
from calpoint.tracking.stats import (
    calculate_progress_percent,
    calculate_weight_change_direction,
    compute_stats,
)
from conftest import make_log, make_points_log, make_profile

TODAY = date(2025, 1, 31)


def ten_days_at(points: float) -> list:
    start = date(2025, 1, 1)
    return [make_points_log(start + timedelta(days=i), points) for i in range(10)]


class TestComputeStatsLoss:
    """Stats for an 80 -> 70 kg goal with tdee 2200 and target 1700."""

    def test_summary(self) -> None:
        profile = make_profile(current_weight=78.5)
        report = compute_stats(profile, ten_days_at(0.75), TODAY)

        assert report.mode is GoalMode.LOSS
        assert report.summary.days_elapsed == 30
        assert report.summary.days_logged == 10
        assert report.summary.weight_change.direction == "lost"
        assert report.summary.weight_change.value == pytest.approx(1.5)
        assert report.summary.estimated_weight_change == pytest.approx(0.97)
        assert report.summary.weight_remaining == pytest.approx(9.03)
        assert report.summary.progress_percent == pytest.approx(9.7)

    def test_points(self) -> None:
        report = compute_stats(make_profile(), ten_days_at(0.75), TODAY)

        assert report.points.total_needed == pytest.approx(77.0)
        assert report.points.collected == pytest.approx(7.5)
        assert report.points.remaining == pytest.approx(69.5)

    def test_pace_uses_logged_days(self) -> None:
        """7.5 points over 10 logged days is 0.75/day, not 7.5/30."""
        report = compute_stats(make_profile(), ten_days_at(0.75), TODAY)

        assert report.pace.actual_avg_points_per_day == pytest.approx(0.75)
        assert report.pace.target_points_per_day == pytest.approx(0.5)
        assert report.pace.on_track is True
        assert report.pace.days_to_goal == 93
        assert report.pace.projected_completion_date == TODAY + timedelta(days=93)

    def test_calories(self) -> None:
        report = compute_stats(make_profile(), ten_days_at(0.75), TODAY)

        assert report.calories.total_deficit_needed == 77000
        assert report.calories.deficit_created == 7500
        assert report.calories.avg_daily_deficit == 750
        assert report.calories.planned_daily_deficit == 500

    def test_no_logs(self) -> None:
        report = compute_stats(make_profile(), [], TODAY)

        assert report.summary.days_logged == 0
        assert report.points.collected == 0
        assert report.pace.actual_avg_points_per_day == 0
        assert report.pace.days_to_goal is None
        assert report.pace.projected_completion_date is None
        assert report.pace.on_track is False
        assert report.calories.avg_daily_deficit == 0

    def test_behind_pace(self) -> None:
        report = compute_stats(make_profile(), ten_days_at(0.25), TODAY)

        assert report.pace.on_track is False
        assert report.pace.pace_difference_percent == pytest.approx(-50.0)

    def test_surplus_has_no_projection(self) -> None:
        report = compute_stats(make_profile(), ten_days_at(-0.3), TODAY)

        assert report.pace.days_to_goal is None
        assert report.points.progress_percent == 0
        assert report.points.remaining == pytest.approx(80.0)

    def test_goal_reached_caps_progress(self) -> None:
        logs = [make_points_log(date(2025, 1, 1) + timedelta(days=i), 1.0) for i in range(80)]
        report = compute_stats(make_profile(), logs, date(2025, 4, 1))

        assert report.points.progress_percent == 100.0
        assert report.points.remaining == 0
        assert report.summary.weight_remaining == 0
        assert report.pace.days_to_goal is None

    def test_real_logs(self) -> None:
        logs = [
            make_log(date(2025, 1, 1), 1800, 300),
            make_log(date(2025, 1, 2), 2400),
            make_log(date(2025, 1, 3), 1700, 100),
        ]
        report = compute_stats(make_profile(), logs, TODAY)

        # 0.7 - 0.2 + 0.6
        assert report.points.collected == pytest.approx(1.1)
        assert report.pace.actual_avg_points_per_day == pytest.approx(1.1 / 3)


class TestComputeStatsGain:
    """Stats for a 60 -> 65 kg goal with tdee 2000 and target 2300."""

    def gain_profile(self):
        return make_profile(
            starting_weight=60.0,
            goal_weight=65.0,
            current_weight=61.0,
            tdee=2000,
            target_calories=2300,
        )

    def test_mode_and_progress(self) -> None:
        report = compute_stats(self.gain_profile(), ten_days_at(-0.385), TODAY)

        assert report.mode is GoalMode.GAIN
        assert report.points.total_needed == pytest.approx(38.5)
        assert report.points.collected == pytest.approx(-3.85)
        assert report.points.progress_percent == pytest.approx(10.0)
        assert report.summary.weight_change.direction == "gained"
        assert report.summary.estimated_weight_change == pytest.approx(0.5)

    def test_on_track_when_surplus_exceeds_target(self) -> None:
        report = compute_stats(self.gain_profile(), ten_days_at(-0.4), TODAY)

        assert report.pace.target_points_per_day == pytest.approx(-0.3)
        assert report.pace.on_track is True
        assert report.pace.days_to_goal is not None

    def test_behind_when_surplus_is_small(self) -> None:
        report = compute_stats(self.gain_profile(), ten_days_at(-0.1), TODAY)

        assert report.pace.on_track is False

    def test_deficit_days_have_no_projection(self) -> None:
        report = compute_stats(self.gain_profile(), ten_days_at(0.2), TODAY)

        assert report.pace.days_to_goal is None
        assert report.pace.projected_completion_date is None


class TestComputeStatsMaintenance:
    """Stats when starting weight equals goal weight."""

    def test_maintenance_state(self) -> None:
        profile = make_profile(starting_weight=70.0, goal_weight=70.0, current_weight=70.0)
        report = compute_stats(profile, ten_days_at(0.1), TODAY)

        assert report.mode is GoalMode.MAINTENANCE
        assert report.pace.on_track is None
        assert report.pace.days_to_goal is None
        assert report.pace.pace_difference_percent == 0
        assert report.points.total_needed == 0
        assert report.points.progress_percent == 100.0
        assert report.summary.weight_change.direction == "unchanged"


class TestHelpers:
    """Tests for summary helpers."""

    def test_weight_change_direction(self) -> None:
        assert calculate_weight_change_direction(80, 78.2).direction == "lost"
        assert calculate_weight_change_direction(80, 78.2).value == pytest.approx(1.8)
        assert calculate_weight_change_direction(60, 60.4).direction == "gained"

    def test_progress_percent_clamped(self) -> None:
        assert calculate_progress_percent(-5, 77) == 0
        assert calculate_progress_percent(100, 77) == 100.0
        assert calculate_progress_percent(38.5, 77) == pytest.approx(50.0)


class TestToDict:
    """Tests for StatsReport.to_dict."""

    def test_sections(self) -> None:
        data = compute_stats(make_profile(), ten_days_at(0.75), TODAY).to_dict()

        assert data["mode"] == "loss"
        assert set(data) == {"mode", "summary", "points", "pace", "calories"}
        assert data["summary"]["start_date"] == "2025-01-01"
        assert data["pace"]["days_to_goal"] == 93
        assert data["pace"]["projected_completion_date"] == "2025-05-04"
