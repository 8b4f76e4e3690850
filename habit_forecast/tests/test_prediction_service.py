"""
Tests for PredictionService.

Tests cover:
1. Full prediction for perfect, cold start and weekday-skewed histories
2. Trend and risk level classification
3. Recommendation generation
"""
import pytest
from datetime import timedelta

from habit_forecast.services.prediction_service import PredictionService
from habit_forecast.services.stats_service import StatsService
from habit_forecast.schemas import HabitPatternProfile, PredictionDataPoint, RiskFactor


def make_points(start, probabilities):
    return [
        PredictionDataPoint(
            date=start + timedelta(days=offset),
            predicted=probability > 0.5,
            confidence=0.5,
            probability=probability,
        )
        for offset, probability in enumerate(probabilities)
    ]


def make_risk(factor, impact):
    return RiskFactor(factor=factor, impact=impact, description=factor)


class TestGeneratePrediction:
    """Tests for generate_prediction"""

    def test_perfect_history(self, daily_habit, perfect_history, today):
        stats = StatsService.calculate_habit_stats(daily_habit.id, perfect_history)

        prediction = PredictionService(today).generate_prediction(daily_habit, perfect_history, stats)

        assert prediction.habit_id == 1
        assert prediction.habit_name == "Morning run"
        assert prediction.current_streak == 90
        assert len(prediction.predictions) == 90
        assert prediction.overall_trend == "stable"
        assert prediction.risk_level == "medium"
        assert [risk.factor for risk in prediction.risk_factors] == ["streak_length"]
        assert prediction.recommendations == ["Plan for rest days or modified versions to prevent burnout"]
        assert prediction.next_risk_date is None
        assert len(prediction.goal_predictions) == 3

    def test_cold_start(self, daily_habit, today):
        stats = StatsService.calculate_habit_stats(daily_habit.id, [])

        prediction = PredictionService(today).generate_prediction(daily_habit, [], stats)

        assert prediction.current_streak == 0
        assert prediction.overall_trend == "stable"
        assert prediction.risk_level == "high"
        assert prediction.next_risk_date == today
        assert prediction.recommendations == [
            "Consider habit stacking or environmental changes to improve consistency"
        ]

    def test_monday_only_history(self, daily_habit, monday_only_history, today):
        stats = StatsService.calculate_habit_stats(daily_habit.id, monday_only_history)

        prediction = PredictionService(today).generate_prediction(daily_habit, monday_only_history, stats)

        assert prediction.risk_level == "high"
        assert prediction.next_risk_date == today
        assert prediction.recommendations == [
            "Consider habit stacking or environmental changes to improve consistency",
            "Identify and address barriers on low-performance days",
            "Consider scheduling more important habits on Mondays",
            "Create special strategies for Sundays when motivation is lower",
        ]

    def test_confidence_score_is_mean_confidence(self, daily_habit, perfect_history, today):
        stats = StatsService.calculate_habit_stats(daily_habit.id, perfect_history)

        prediction = PredictionService(today).generate_prediction(daily_habit, perfect_history, stats)

        expected = sum(point.confidence for point in prediction.predictions) / 90
        assert prediction.confidence_score == pytest.approx(expected)

    def test_same_inputs_give_identical_prediction(self, daily_habit, make_history, make_mood, today):
        """Repeated calls with the same records and moods agree exactly"""
        history = make_history(daily_habit.id, [True, False] * 5)
        moods = [make_mood(record.date, 4 if record.completed else 2) for record in history]
        stats = StatsService.calculate_habit_stats(daily_habit.id, history)
        service = PredictionService(today)

        first = service.generate_prediction(daily_habit, history, stats, moods)
        second = service.generate_prediction(daily_habit, history, stats, moods)

        assert first == second

    def test_longer_streak_goal_is_less_likely(self, daily_habit, monday_only_history, today):
        """A 60-day streak is never more likely than a 30-day one"""
        stats = StatsService.calculate_habit_stats(daily_habit.id, monday_only_history)

        prediction = PredictionService(today).generate_prediction(daily_habit, monday_only_history, stats)

        thirty, sixty = prediction.goal_predictions[0], prediction.goal_predictions[1]
        assert (thirty.target, sixty.target) == (30, 60)
        assert 0.0 <= sixty.probability <= thirty.probability < 1.0


class TestClassifyTrend:
    """Tests for classify_trend"""

    def test_improving(self, today):
        points = make_points(today, [0.3] * 14 + [0.5] * 14)

        assert PredictionService.classify_trend(points) == "improving"

    def test_declining(self, today):
        points = make_points(today, [0.5] * 14 + [0.3] * 14)

        assert PredictionService.classify_trend(points) == "declining"

    def test_small_change_is_stable(self, today):
        points = make_points(today, [0.5] * 14 + [0.54] * 14)

        assert PredictionService.classify_trend(points) == "stable"


class TestClassifyRiskLevel:
    """Tests for classify_risk_level"""

    def test_no_risks_is_low(self):
        assert PredictionService.classify_risk_level([]) == "low"

    def test_below_low_threshold(self):
        assert PredictionService.classify_risk_level([make_risk("streak_length", 0.29)]) == "low"

    def test_medium_band_is_inclusive_at_lower_bound(self):
        assert PredictionService.classify_risk_level([make_risk("streak_length", 0.3)]) == "medium"

    def test_impacts_are_summed(self):
        risks = [make_risk("weekly_pattern", 0.35), make_risk("streak_length", 0.3)]

        assert PredictionService.classify_risk_level(risks) == "high"


class TestRecommendations:
    """Tests for generate_recommendations"""

    def test_only_top_two_risks_are_used(self):
        profile = HabitPatternProfile(
            base_success_rate=0.5,
            trend_factor=1.0,
            cyclical_pattern=[0.5] * 7,
            mood_correlation=0.0,
            streak_factor=1.0,
            recency_factor=1.0,
        )
        risks = [
            make_risk("recent_performance", 0.9),
            make_risk("mood_correlation", 0.5),
            make_risk("streak_length", 0.1),
        ]

        result = PredictionService.generate_recommendations(profile, risks, "stable")

        assert result == [
            "Consider habit stacking or environmental changes to improve consistency",
            "Focus on mood management and stress reduction techniques",
        ]

    def test_capped_at_five(self):
        profile = HabitPatternProfile(
            base_success_rate=0.5,
            trend_factor=1.0,
            cyclical_pattern=[0.1, 0.9, 0.5, 0.5, 0.5, 0.5, 0.5],
            mood_correlation=0.0,
            streak_factor=1.0,
            recency_factor=1.0,
        )
        risks = [make_risk("recent_performance", 0.9), make_risk("weekly_pattern", 0.4)]

        result = PredictionService.generate_recommendations(profile, risks, "declining")

        assert len(result) == 5
        assert result[0] == "Consider reducing habit frequency temporarily to rebuild consistency"
        assert result[-1] == "Consider scheduling more important habits on Mondays"

    def test_improving_trend_suggestions(self):
        profile = HabitPatternProfile(
            base_success_rate=0.5,
            trend_factor=1.0,
            cyclical_pattern=[0.5] * 7,
            mood_correlation=0.0,
            streak_factor=1.0,
            recency_factor=1.0,
        )

        result = PredictionService.generate_recommendations(profile, [], "improving")

        assert result == [
            "Great progress! Consider gradually increasing habit frequency",
            "Use this momentum to add complementary habits",
        ]
