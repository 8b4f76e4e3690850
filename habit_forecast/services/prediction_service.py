"""
Comprehensive prediction service.
Combines patterns, forecast, risks and goals into one HabitPrediction per habit.
"""
import logging
from datetime import date
from typing import List, Optional, Sequence

from habit_forecast.schemas import (
    HabitData, CompletionData, MoodData, HabitStats, HabitPrediction,
    HabitPatternProfile, PredictionDataPoint, RiskFactor
)
from habit_forecast.services.pattern_service import PatternService
from habit_forecast.services.projection_service import ProjectionService
from habit_forecast.services.risk_service import RiskService
from habit_forecast.services.goal_service import GoalService, mean_confidence
from habit_forecast.constants import (
    DAY_NAMES,
    GOAL_COMPLETION_WINDOW,
    TREND_IMPROVING,
    TREND_DECLINING,
    TREND_STABLE,
    TREND_WINDOW_DAYS,
    TREND_CHANGE_THRESHOLD,
    RISK_LEVEL_LOW,
    RISK_LEVEL_MEDIUM,
    RISK_LEVEL_HIGH,
    RISK_LEVEL_LOW_MAX,
    RISK_LEVEL_MEDIUM_MAX,
    RISK_RECENT_PERFORMANCE,
    RISK_STREAK_LENGTH,
    RISK_WEEKLY_PATTERN,
    RISK_MOOD_CORRELATION,
    NEXT_RISK_PROBABILITY,
    MAX_RISK_RECOMMENDATIONS,
    MAX_RECOMMENDATIONS,
    WEEKDAY_GAP_THRESHOLD,
)

logger = logging.getLogger("habit_forecast.prediction")

RISK_RECOMMENDATIONS = {
    RISK_RECENT_PERFORMANCE: "Consider habit stacking or environmental changes to improve consistency",
    RISK_STREAK_LENGTH: "Plan for rest days or modified versions to prevent burnout",
    RISK_WEEKLY_PATTERN: "Identify and address barriers on low-performance days",
    RISK_MOOD_CORRELATION: "Focus on mood management and stress reduction techniques",
}

TREND_RECOMMENDATIONS = {
    TREND_DECLINING: [
        "Consider reducing habit frequency temporarily to rebuild consistency",
        "Focus on your strongest days of the week to maintain momentum",
    ],
    TREND_IMPROVING: [
        "Great progress! Consider gradually increasing habit frequency",
        "Use this momentum to add complementary habits",
    ],
}


def mean_probability(points: Sequence[PredictionDataPoint]) -> float:
    if not points:
        return 0.0
    return sum(point.probability for point in points) / len(points)


class PredictionService:
    """Service for comprehensive habit predictions"""

    def __init__(self, reference_date: date):
        self.reference_date = reference_date
        self.pattern_service = PatternService(reference_date)
        self.projection_service = ProjectionService(reference_date)
        self.risk_service = RiskService(reference_date)
        self.goal_service = GoalService(reference_date)

    def generate_prediction(
        self,
        habit: HabitData,
        completions: Sequence[CompletionData],
        stats: HabitStats,
        moods: Optional[Sequence[MoodData]] = None
    ) -> HabitPrediction:
        """
        Generate the full prediction for one habit.

        Args:
            habit: Habit to forecast
            completions: Completion records (any habit, any order)
            stats: Current streak statistics supplied by the caller
            moods: Optional daily mood entries

        Returns:
            HabitPrediction with a 90-day forecast
        """
        patterns = self.pattern_service.analyze_patterns(habit, completions, moods)
        trajectory = list(self.projection_service.iter_trajectory(patterns, GOAL_COMPLETION_WINDOW))
        risk_factors = self.risk_service.identify_risks(habit, completions, moods)
        goal_predictions = self.goal_service.goals_from_trajectory(habit, trajectory)

        overall_trend = self.classify_trend(trajectory)
        risk_level = self.classify_risk_level(risk_factors)

        next_risk_date = next(
            (point.date for point in trajectory if point.probability < NEXT_RISK_PROBABILITY),
            None
        )

        logger.debug(
            f"Habit {habit.id}: trend={overall_trend}, risk={risk_level}, "
            f"{len(risk_factors)} risk factors"
        )

        return HabitPrediction(
            habit_id=habit.id,
            habit_name=habit.name,
            current_streak=stats.current_streak,
            predictions=trajectory,
            overall_trend=overall_trend,
            risk_level=risk_level,
            risk_factors=risk_factors,
            goal_predictions=goal_predictions,
            recommendations=self.generate_recommendations(patterns, risk_factors, overall_trend),
            confidence_score=mean_confidence(trajectory),
            next_risk_date=next_risk_date,
        )

    @staticmethod
    def classify_trend(trajectory: Sequence[PredictionDataPoint]) -> str:
        """Compare the first two weeks of the forecast with the following two"""
        recent = mean_probability(trajectory[:TREND_WINDOW_DAYS])
        later = mean_probability(trajectory[TREND_WINDOW_DAYS:TREND_WINDOW_DAYS * 2])
        direction = later - recent

        if direction > TREND_CHANGE_THRESHOLD:
            return TREND_IMPROVING
        if direction < -TREND_CHANGE_THRESHOLD:
            return TREND_DECLINING
        return TREND_STABLE

    @staticmethod
    def classify_risk_level(risk_factors: Sequence[RiskFactor]) -> str:
        total_risk = sum(risk.impact for risk in risk_factors)
        if total_risk < RISK_LEVEL_LOW_MAX:
            return RISK_LEVEL_LOW
        if total_risk < RISK_LEVEL_MEDIUM_MAX:
            return RISK_LEVEL_MEDIUM
        return RISK_LEVEL_HIGH

    @staticmethod
    def generate_recommendations(
        patterns: HabitPatternProfile,
        risk_factors: Sequence[RiskFactor],
        trend: str
    ) -> List[str]:
        """Trend, risk and weekday based suggestions, at most 5"""
        recommendations: List[str] = list(TREND_RECOMMENDATIONS.get(trend, []))

        for risk in risk_factors[:MAX_RISK_RECOMMENDATIONS]:
            suggestion = RISK_RECOMMENDATIONS.get(risk.factor)
            if suggestion:
                recommendations.append(suggestion)

        pattern = patterns.cyclical_pattern
        best_day = pattern.index(max(pattern))
        worst_day = pattern.index(min(pattern))

        if pattern[best_day] > pattern[worst_day] + WEEKDAY_GAP_THRESHOLD:
            recommendations.append(f"Consider scheduling more important habits on {DAY_NAMES[best_day]}s")
            recommendations.append(
                f"Create special strategies for {DAY_NAMES[worst_day]}s when motivation is lower"
            )

        return recommendations[:MAX_RECOMMENDATIONS]
