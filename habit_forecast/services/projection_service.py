"""
Probability projection service.
Turns a habit's pattern profile into a day-by-day completion forecast.
"""
import math
from datetime import date
from typing import Iterator, List, Optional, Sequence

from habit_forecast.schemas import (
    HabitData, CompletionData, MoodData, HabitPatternProfile, PredictionDataPoint
)
from habit_forecast.services.date_service import DateService
from habit_forecast.services.pattern_service import PatternService, clamp
from habit_forecast.constants import (
    DEFAULT_FORECAST_DAYS,
    MOOD_ADJUSTMENT_WEIGHT,
    CONFIDENCE_DECAY_RATE,
    CONFIDENCE_MIN,
    CONFIDENCE_MAX,
    PROBABILITY_MIN,
    PROBABILITY_MAX,
    PREDICTED_SUCCESS_THRESHOLD,
)


class ProjectionService:
    """Service for success probability forecasts"""

    def __init__(self, reference_date: date):
        self.reference_date = reference_date
        self.pattern_service = PatternService(reference_date)

    def calculate_success_probability(
        self,
        target_date: date,
        patterns: HabitPatternProfile
    ) -> tuple[float, float]:
        """
        Probability and confidence for a single future date.

        Formula: P = Base × Trend × Weekday × Streak × Recency × (1 + MoodCorrelation × 0.1)

        Args:
            target_date: Date to forecast
            patterns: Pattern profile of the habit

        Returns:
            Tuple of (probability, confidence)
        """
        weekday_factor = patterns.cyclical_pattern[DateService.weekday_index(target_date)]

        probability = (
            patterns.base_success_rate
            * patterns.trend_factor
            * weekday_factor
            * patterns.streak_factor
            * patterns.recency_factor
        )

        if patterns.mood_correlation != 0:
            probability *= 1 + patterns.mood_correlation * MOOD_ADJUSTMENT_WEIGHT

        # Further dates are reported with less confidence
        days_from_now = DateService.days_between(self.reference_date, target_date)
        distance_factor = math.exp(-days_from_now * CONFIDENCE_DECAY_RATE)
        confidence = clamp(distance_factor * patterns.recency_factor, CONFIDENCE_MIN, CONFIDENCE_MAX)

        return clamp(probability, PROBABILITY_MIN, PROBABILITY_MAX), confidence

    def iter_trajectory(
        self,
        patterns: HabitPatternProfile,
        days: int = DEFAULT_FORECAST_DAYS
    ) -> Iterator[PredictionDataPoint]:
        """Yield one data point per day starting at the reference date"""
        for target_date in DateService.date_range(self.reference_date, days):
            probability, confidence = self.calculate_success_probability(target_date, patterns)
            yield PredictionDataPoint(
                date=target_date,
                predicted=probability > PREDICTED_SUCCESS_THRESHOLD,
                confidence=confidence,
                probability=probability,
            )

    def project_trajectory(
        self,
        habit: HabitData,
        completions: Sequence[CompletionData],
        days: int = DEFAULT_FORECAST_DAYS,
        moods: Optional[Sequence[MoodData]] = None
    ) -> List[PredictionDataPoint]:
        """
        Forecast the next `days` days of a habit.

        Returns:
            Exactly `days` data points with consecutive dates from the reference date
        """
        patterns = self.pattern_service.analyze_patterns(habit, completions, moods)
        return list(self.iter_trajectory(patterns, days))
