"""
Goal prediction service.
Estimates the odds of reaching streak and completion-rate milestones from the 90-day forecast.
"""
import math
from datetime import date
from typing import List, Optional, Sequence

from habit_forecast.schemas import (
    HabitData, CompletionData, MoodData, GoalPrediction, PredictionDataPoint
)
from habit_forecast.services.projection_service import ProjectionService
from habit_forecast.constants import (
    FREQUENCY_WEEKLY,
    GOAL_STREAK_WINDOWS,
    GOAL_COMPLETION_TARGET,
    GOAL_COMPLETION_WINDOW,
    GOAL_COMPLETION_RATIO,
    GOAL_COMPLETION_BOOST,
    GOAL_COMPLETION_DISCOUNT,
    GOAL_PROBABILITY_MAX,
    WEEKS_PER_MONTH,
    MONTHLY_GOAL_BOOST,
    MONTHLY_GOAL_CONFIDENCE,
    MONTHLY_GOAL_DAYS,
)


def mean_confidence(points: Sequence[PredictionDataPoint]) -> float:
    if not points:
        return 0.0
    return sum(point.confidence for point in points) / len(points)


class GoalService:
    """Service for goal achievement predictions"""

    def __init__(self, reference_date: date):
        self.reference_date = reference_date
        self.projection_service = ProjectionService(reference_date)

    def predict_goals(
        self,
        habit: HabitData,
        completions: Sequence[CompletionData],
        moods: Optional[Sequence[MoodData]] = None
    ) -> List[GoalPrediction]:
        """Goal predictions computed from a fresh 90-day trajectory"""
        trajectory = self.projection_service.project_trajectory(
            habit, completions, GOAL_COMPLETION_WINDOW, moods
        )
        return self.goals_from_trajectory(habit, trajectory)

    def goals_from_trajectory(
        self,
        habit: HabitData,
        trajectory: Sequence[PredictionDataPoint]
    ) -> List[GoalPrediction]:
        """
        Build goal predictions from an existing forecast.

        Goals:
        1. 30-day and 60-day streaks: every day in the window must succeed
        2. 80% completion over 90 days
        3. Monthly completion count (weekly habits only)
        """
        goals: List[GoalPrediction] = []

        for window in GOAL_STREAK_WINDOWS:
            window_points = trajectory[:window]
            goals.append(GoalPrediction(
                type="streak",
                target=window,
                period=f"{window}-day",
                probability=self.calculate_streak_probability(window_points),
                confidence=mean_confidence(window_points),
                estimated_date=trajectory[window - 1].date if len(trajectory) >= window else None,
                days_remaining=window
            ))

        completion_fraction = self.predicted_fraction(trajectory)
        if completion_fraction >= GOAL_COMPLETION_RATIO:
            completion_probability = min(GOAL_PROBABILITY_MAX, completion_fraction * GOAL_COMPLETION_BOOST)
        else:
            completion_probability = completion_fraction * GOAL_COMPLETION_DISCOUNT

        goals.append(GoalPrediction(
            type="completion",
            target=GOAL_COMPLETION_TARGET,
            period=f"{GOAL_COMPLETION_WINDOW}-day",
            probability=completion_probability,
            confidence=mean_confidence(trajectory),
            days_remaining=GOAL_COMPLETION_WINDOW
        ))

        if habit.frequency == FREQUENCY_WEEKLY:
            goals.append(GoalPrediction(
                type="completion",
                target=math.floor(len(habit.target_days) * WEEKS_PER_MONTH),
                period="monthly",
                probability=min(GOAL_PROBABILITY_MAX, completion_fraction * MONTHLY_GOAL_BOOST),
                confidence=MONTHLY_GOAL_CONFIDENCE,
                days_remaining=MONTHLY_GOAL_DAYS
            ))

        return goals

    @staticmethod
    def calculate_streak_probability(points: Sequence[PredictionDataPoint]) -> float:
        """Probability that every day in the sequence succeeds"""
        return math.prod(point.probability for point in points)

    @staticmethod
    def predicted_fraction(points: Sequence[PredictionDataPoint]) -> float:
        """Share of forecast days predicted to succeed"""
        if not points:
            return 0.0
        return sum(1 for point in points if point.predicted) / len(points)
