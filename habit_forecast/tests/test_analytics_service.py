"""
Tests for AnalyticsService.
"""
import pytest

from habit_forecast.services.analytics_service import AnalyticsService
from habit_forecast.services.prediction_service import PredictionService
from habit_forecast.services.stats_service import StatsService
from habit_forecast.schemas import HabitData


def predict(habit, completions, reference_date):
    stats = StatsService.calculate_habit_stats(habit.id, completions)
    return PredictionService(reference_date).generate_prediction(habit, completions, stats)


class TestAggregateAnalytics:
    """Tests for aggregate_analytics"""

    def test_empty_portfolio(self):
        analytics = AnalyticsService.aggregate_analytics([], [])

        assert analytics.total_habits == 0
        assert analytics.avg_success_probability == 0.0
        assert analytics.high_risk_habits == 0
        assert analytics.goal_achievement_rate == 0.0
        assert analytics.optimal_habit_load == 2
        assert analytics.best_performance_days == []
        assert analytics.worst_performance_days == []

    def test_perfect_and_cold_start_habits(self, daily_habit, perfect_history, today):
        new_habit = HabitData(id=3, name="Journaling")
        predictions = [
            predict(daily_habit, perfect_history, today),
            predict(new_habit, perfect_history, today),
        ]

        analytics = AnalyticsService.aggregate_analytics([daily_habit, new_habit], predictions)

        expected_goal_rate = (
            (0.95 ** 30 + 0.95 ** 60 + 0.95) / 3
            + (0.25 ** 30 + 0.25 ** 60 + 0.0) / 3
        ) / 2
        assert analytics.total_habits == 2
        assert analytics.avg_success_probability == pytest.approx(0.6)
        assert analytics.high_risk_habits == 1
        assert analytics.goal_achievement_rate == pytest.approx(expected_goal_rate)
        assert analytics.optimal_habit_load == 3

    def test_equal_weekdays_keep_calendar_order(self, daily_habit, perfect_history, today):
        predictions = [predict(daily_habit, perfect_history, today)]

        analytics = AnalyticsService.aggregate_analytics([daily_habit], predictions)

        assert analytics.best_performance_days == [0, 1, 2]
        assert analytics.worst_performance_days == [0, 1]

    def test_monday_only_weekdays(self, daily_habit, monday_only_history, today):
        predictions = [predict(daily_habit, monday_only_history, today)]

        analytics = AnalyticsService.aggregate_analytics([daily_habit], predictions)

        assert analytics.best_performance_days == [1, 0, 2]
        assert analytics.worst_performance_days == [0, 2]


class TestWeekdayPerformance:
    def test_uses_first_week_only(self, daily_habit, monday_only_history, today):
        prediction = predict(daily_habit, monday_only_history, today)

        averages = AnalyticsService.weekday_performance([prediction])

        monday = prediction.predictions[1]
        assert averages[1] == pytest.approx(monday.probability)
        assert averages[0] == pytest.approx(0.05)
