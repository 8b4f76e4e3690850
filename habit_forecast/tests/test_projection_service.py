"""
Tests for ProjectionService.

Tests cover:
1. Success probability formula and clamping
2. Confidence decay over the forecast horizon
3. Trajectory length and dates
"""
import math
import pytest
from datetime import timedelta

from habit_forecast.services.projection_service import ProjectionService
from habit_forecast.schemas import HabitPatternProfile


def make_profile(**overrides):
    values = dict(
        base_success_rate=0.5,
        trend_factor=1.0,
        cyclical_pattern=[0.5] * 7,
        mood_correlation=0.0,
        streak_factor=1.0,
        recency_factor=1.0,
    )
    values.update(overrides)
    return HabitPatternProfile(**values)


class TestSuccessProbability:
    """Tests for calculate_success_probability"""

    def test_multiplies_all_factors(self, today):
        """0.8 * 1.1 * 0.5 * 1.2 * 0.9 = 0.4752"""
        profile = make_profile(
            base_success_rate=0.8,
            trend_factor=1.1,
            streak_factor=1.2,
            recency_factor=0.9,
        )

        probability, _ = ProjectionService(today).calculate_success_probability(today, profile)

        assert probability == pytest.approx(0.4752)

    def test_uses_weekday_of_target_date(self, today):
        """Reference date is a Sunday, so the next day uses the Monday factor"""
        profile = make_profile(cyclical_pattern=[0.2, 0.8, 0.5, 0.5, 0.5, 0.5, 0.5])
        service = ProjectionService(today)

        sunday, _ = service.calculate_success_probability(today, profile)
        monday, _ = service.calculate_success_probability(today + timedelta(days=1), profile)

        assert sunday == pytest.approx(0.1)
        assert monday == pytest.approx(0.4)

    def test_mood_correlation_scales_probability(self, today):
        """Correlation of 1.0 adds 10% to the probability"""
        profile = make_profile(mood_correlation=1.0)

        probability, _ = ProjectionService(today).calculate_success_probability(today, profile)

        assert probability == pytest.approx(0.25 * 1.1)

    def test_probability_clamped_to_upper_bound(self, today):
        profile = make_profile(base_success_rate=0.9, trend_factor=1.5, cyclical_pattern=[1.0] * 7)

        probability, _ = ProjectionService(today).calculate_success_probability(today, profile)

        assert probability == 0.95

    def test_probability_clamped_to_lower_bound(self, today):
        profile = make_profile(base_success_rate=0.1, cyclical_pattern=[0.0] * 7)

        probability, _ = ProjectionService(today).calculate_success_probability(today, profile)

        assert probability == 0.05


class TestConfidence:
    """Tests for confidence decay"""

    def test_confidence_capped_on_reference_date(self, today):
        _, confidence = ProjectionService(today).calculate_success_probability(today, make_profile())

        assert confidence == 0.95

    def test_confidence_decays_with_distance(self, today):
        """Ten days out gives exp(-0.2)"""
        target = today + timedelta(days=10)

        _, confidence = ProjectionService(today).calculate_success_probability(target, make_profile())

        assert confidence == pytest.approx(math.exp(-0.2))

    def test_confidence_scaled_by_recency(self, today):
        target = today + timedelta(days=10)
        profile = make_profile(recency_factor=0.5)

        _, confidence = ProjectionService(today).calculate_success_probability(target, profile)

        assert confidence == pytest.approx(0.5 * math.exp(-0.2))

    def test_confidence_floor(self, today):
        target = today + timedelta(days=61)

        _, confidence = ProjectionService(today).calculate_success_probability(target, make_profile())

        assert confidence == 0.3


class TestTrajectory:
    """Tests for project_trajectory"""

    def test_default_horizon_is_ninety_days(self, daily_habit, perfect_history, today):
        trajectory = ProjectionService(today).project_trajectory(daily_habit, perfect_history)

        assert len(trajectory) == 90
        assert trajectory[0].date == today
        assert trajectory[-1].date == today + timedelta(days=89)

    def test_dates_are_consecutive(self, daily_habit, perfect_history, today):
        trajectory = ProjectionService(today).project_trajectory(daily_habit, perfect_history, days=14)

        for previous, current in zip(trajectory, trajectory[1:]):
            assert current.date - previous.date == timedelta(days=1)

    def test_perfect_history_saturates(self, daily_habit, perfect_history, today):
        """0.9 * 1.0 * 1.0 * 1.2255 * 1.0 exceeds the cap every day"""
        trajectory = ProjectionService(today).project_trajectory(daily_habit, perfect_history)

        assert all(point.probability == 0.95 for point in trajectory)
        assert all(point.predicted for point in trajectory)

    def test_cold_start_is_uniform(self, daily_habit, today):
        """Neutral profile gives 0.5 * 0.5 = 0.25, below the success threshold"""
        trajectory = ProjectionService(today).project_trajectory(daily_habit, [], days=30)

        assert all(point.probability == pytest.approx(0.25) for point in trajectory)
        assert not any(point.predicted for point in trajectory)

    def test_zero_days_returns_empty(self, daily_habit, perfect_history, today):
        assert ProjectionService(today).project_trajectory(daily_habit, perfect_history, days=0) == []

    def test_values_stay_in_bounds(self, daily_habit, monday_only_history, today):
        trajectory = ProjectionService(today).project_trajectory(daily_habit, monday_only_history, days=365)

        assert len(trajectory) == 365
        for point in trajectory:
            assert 0.05 <= point.probability <= 0.95
            assert 0.3 <= point.confidence <= 0.95
