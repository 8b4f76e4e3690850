"""
Cross-habit analytics service.
Summarizes a set of habit predictions into portfolio-level metrics.
"""
import math
from typing import List, Sequence

from habit_forecast.schemas import HabitData, HabitPrediction, PredictionAnalytics
from habit_forecast.services.date_service import DateService
from habit_forecast.services.prediction_service import mean_probability
from habit_forecast.constants import (
    RISK_LEVEL_HIGH,
    ANALYTICS_WINDOW_DAYS,
    ANALYTICS_WEEK_DAYS,
    OPTIMAL_LOAD_OFFSET,
    BEST_DAYS_COUNT,
    WORST_DAYS_COUNT,
)


class AnalyticsService:
    """Service for portfolio analytics"""

    @staticmethod
    def aggregate_analytics(
        habits: Sequence[HabitData],
        predictions: Sequence[HabitPrediction]
    ) -> PredictionAnalytics:
        """
        Aggregate predictions across habits.

        Metrics:
        1. Average 30-day success probability
        2. Number of high-risk habits
        3. Average goal achievement probability
        4. Optimal habit load: floor(total × avg probability + 2)
        5. Best 3 / worst 2 weekdays from the first week of each forecast

        Args:
            habits: All habits the predictions belong to
            predictions: One prediction per habit

        Returns:
            PredictionAnalytics (zeros for an empty portfolio)
        """
        total_habits = len(habits)

        if total_habits == 0:
            return PredictionAnalytics(
                total_habits=0,
                avg_success_probability=0.0,
                high_risk_habits=0,
                goal_achievement_rate=0.0,
                optimal_habit_load=OPTIMAL_LOAD_OFFSET,
                best_performance_days=[],
                worst_performance_days=[],
            )

        avg_success_probability = sum(
            mean_probability(prediction.predictions[:ANALYTICS_WINDOW_DAYS])
            for prediction in predictions
        ) / total_habits

        high_risk_habits = sum(1 for prediction in predictions if prediction.risk_level == RISK_LEVEL_HIGH)

        goal_achievement_rate = sum(
            sum(goal.probability for goal in prediction.goal_predictions) / len(prediction.goal_predictions)
            for prediction in predictions
            if prediction.goal_predictions
        ) / total_habits

        optimal_habit_load = math.floor(total_habits * avg_success_probability + OPTIMAL_LOAD_OFFSET)

        day_averages = AnalyticsService.weekday_performance(predictions)
        best_days = sorted(range(7), key=lambda day: day_averages[day], reverse=True)
        worst_days = sorted(range(7), key=lambda day: day_averages[day])

        return PredictionAnalytics(
            total_habits=total_habits,
            avg_success_probability=avg_success_probability,
            high_risk_habits=high_risk_habits,
            goal_achievement_rate=goal_achievement_rate,
            optimal_habit_load=optimal_habit_load,
            best_performance_days=best_days[:BEST_DAYS_COUNT],
            worst_performance_days=worst_days[:WORST_DAYS_COUNT],
        )

    @staticmethod
    def weekday_performance(predictions: Sequence[HabitPrediction]) -> List[float]:
        """Average near-term probability per weekday (Sunday first, 0 when unobserved)"""
        totals = [0.0] * 7
        counts = [0] * 7

        for prediction in predictions:
            for point in prediction.predictions[:ANALYTICS_WEEK_DAYS]:
                day = DateService.weekday_index(point.date)
                totals[day] += point.probability
                counts[day] += 1

        return [totals[day] / counts[day] if counts[day] > 0 else 0.0 for day in range(7)]
