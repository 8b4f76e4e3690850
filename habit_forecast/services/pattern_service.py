"""
Pattern analysis service.
Extracts the statistical profile of a habit (base rate, trend, weekly cycle,
mood correlation, streak and recency weighting) that every forecast is built on.
"""
import logging
import math
import statistics
from datetime import date
from typing import List, Optional, Sequence

from habit_forecast.schemas import HabitData, CompletionData, MoodData, HabitPatternProfile
from habit_forecast.services.date_service import DateService
from habit_forecast.constants import (
    MIN_RECORDS_FOR_PATTERNS,
    NEUTRAL_RATE,
    BASE_RATE_MIN,
    BASE_RATE_MAX,
    TREND_SHORT_WINDOW,
    TREND_LONG_WINDOW,
    TREND_SHORT_WEIGHT,
    TREND_LONG_WEIGHT,
    TREND_FACTOR_MIN,
    TREND_FACTOR_MAX,
    MIN_MOOD_PAIRS,
    MOOD_STRESS_INVERT,
    STREAK_LOG_FACTOR,
    STREAK_FACTOR_MAX,
    RECENCY_DECAY_RATE,
    RECENCY_FACTOR_MIN,
    RECENCY_FACTOR_MAX,
)

logger = logging.getLogger("habit_forecast.prediction")


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def completion_rate(records: Sequence[CompletionData]) -> float:
    """Fraction of records marked completed (0 for no records)"""
    if not records:
        return 0.0
    return sum(1 for record in records if record.completed) / len(records)


class PatternService:
    """Service for habit pattern extraction"""

    def __init__(self, reference_date: date):
        self.reference_date = reference_date

    @staticmethod
    def neutral_profile() -> HabitPatternProfile:
        """Profile used when there is too little history to trust statistics"""
        return HabitPatternProfile(
            base_success_rate=NEUTRAL_RATE,
            trend_factor=1.0,
            cyclical_pattern=[NEUTRAL_RATE] * 7,
            mood_correlation=0.0,
            streak_factor=1.0,
            recency_factor=1.0,
        )

    @staticmethod
    def habit_history(habit_id: int, completions: Sequence[CompletionData]) -> List[CompletionData]:
        """Completion records of one habit, oldest first"""
        return sorted(
            (c for c in completions if c.habit_id == habit_id),
            key=lambda c: c.date
        )

    def analyze_patterns(
        self,
        habit: HabitData,
        completions: Sequence[CompletionData],
        moods: Optional[Sequence[MoodData]] = None
    ) -> HabitPatternProfile:
        """
        Build the pattern profile of a habit.

        Args:
            habit: Habit to analyze
            completions: Completion records (any habit, any order)
            moods: Optional daily mood entries

        Returns:
            HabitPatternProfile, or the neutral profile for fewer than 7 records
        """
        history = self.habit_history(habit.id, completions)

        if len(history) < MIN_RECORDS_FOR_PATTERNS:
            logger.debug(
                f"Habit {habit.id}: {len(history)} records, using neutral profile"
            )
            return self.neutral_profile()

        raw_base_rate = completion_rate(history)

        return HabitPatternProfile(
            base_success_rate=clamp(raw_base_rate, BASE_RATE_MIN, BASE_RATE_MAX),
            trend_factor=self.calculate_trend_factor(history, raw_base_rate),
            cyclical_pattern=self.analyze_cyclical_pattern(history),
            mood_correlation=self.calculate_mood_correlation(history, moods) if moods else 0.0,
            streak_factor=self.calculate_streak_factor(history),
            recency_factor=self.calculate_recency_factor(history),
        )

    @staticmethod
    def calculate_trend_factor(history: Sequence[CompletionData], base_rate: float) -> float:
        """
        Recent momentum relative to the all-time rate.

        Blends the last 7 records (weight 0.7) with the last 30 (weight 0.3)
        and divides by the unclamped base rate.
        """
        if base_rate <= 0:
            return 1.0

        recent_rate = completion_rate(history[-TREND_SHORT_WINDOW:])
        monthly_rate = completion_rate(history[-TREND_LONG_WINDOW:])
        trend = (recent_rate * TREND_SHORT_WEIGHT + monthly_rate * TREND_LONG_WEIGHT) / base_rate

        return clamp(trend, TREND_FACTOR_MIN, TREND_FACTOR_MAX)

    @staticmethod
    def analyze_cyclical_pattern(history: Sequence[CompletionData]) -> List[float]:
        """Success rate per weekday (Sunday first); unobserved weekdays stay neutral"""
        completed = [0] * 7
        counts = [0] * 7

        for record in history:
            day = DateService.weekday_index(record.date)
            counts[day] += 1
            if record.completed:
                completed[day] += 1

        return [
            completed[day] / counts[day] if counts[day] > 0 else NEUTRAL_RATE
            for day in range(7)
        ]

    @staticmethod
    def mood_score(mood: MoodData) -> float:
        """Composite daily mood with stress inverted"""
        return (mood.mood + mood.energy + (MOOD_STRESS_INVERT - mood.stress) + mood.sleep) / 4

    @staticmethod
    def calculate_mood_correlation(
        history: Sequence[CompletionData],
        moods: Sequence[MoodData]
    ) -> float:
        """
        Pearson correlation between completion (0/1) and the composite mood score.

        Only days with both a completion record and a mood entry count.
        Fewer than 5 paired days, or a zero-variance series, yields 0.
        """
        moods_by_date = {mood.date: mood for mood in moods}
        pairs = []
        for record in history:
            mood = moods_by_date.get(record.date)
            if mood is not None:
                pairs.append((1.0 if record.completed else 0.0, PatternService.mood_score(mood)))

        if len(pairs) < MIN_MOOD_PAIRS:
            return 0.0

        completions, scores = zip(*pairs)
        try:
            correlation = statistics.correlation(completions, scores)
        except statistics.StatisticsError:
            # One of the series is constant
            return 0.0
        if math.isnan(correlation):
            return 0.0

        return clamp(correlation, -1.0, 1.0)

    @staticmethod
    def calculate_current_streak(history: Sequence[CompletionData]) -> int:
        """Consecutive completed records counted back from the most recent one"""
        streak = 0
        for record in sorted(history, key=lambda c: c.date, reverse=True):
            if not record.completed:
                break
            streak += 1
        return streak

    @staticmethod
    def calculate_streak_factor(history: Sequence[CompletionData]) -> float:
        """1 + ln(streak + 1) * 0.05, capped at 1.3"""
        streak = PatternService.calculate_current_streak(history)
        return min(STREAK_FACTOR_MAX, 1 + math.log(streak + 1) * STREAK_LOG_FACTOR)

    def calculate_recency_factor(self, history: Sequence[CompletionData]) -> float:
        """Exponential decay on the age of the most recent record"""
        if not history:
            return NEUTRAL_RATE

        most_recent = max(record.date for record in history)
        days_since = abs(DateService.days_between(most_recent, self.reference_date))

        return clamp(
            math.exp(-days_since * RECENCY_DECAY_RATE),
            RECENCY_FACTOR_MIN,
            RECENCY_FACTOR_MAX
        )

    @staticmethod
    def pattern_stddev(pattern: Sequence[float]) -> float:
        """Population standard deviation of the weekday pattern"""
        if not pattern:
            return 0.0
        return statistics.pstdev(pattern)
