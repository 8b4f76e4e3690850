"""
Risk detection service.
Flags signals that raise the chance of a habit being abandoned.
"""
from datetime import date
from typing import List, Optional, Sequence

from habit_forecast.schemas import HabitData, CompletionData, MoodData, RiskFactor
from habit_forecast.services.date_service import DateService
from habit_forecast.services.pattern_service import PatternService, completion_rate
from habit_forecast.constants import (
    RISK_STREAK_LENGTH,
    RISK_RECENT_PERFORMANCE,
    RISK_WEEKLY_PATTERN,
    RISK_MOOD_CORRELATION,
    RISK_RECENT_WINDOW_DAYS,
    RISK_RECENT_RATE_THRESHOLD,
    RISK_RECENT_RATE_BASELINE,
    RISK_STREAK_THRESHOLD,
    RISK_STREAK_SCALE,
    RISK_STREAK_IMPACT_MAX,
    RISK_PATTERN_STDDEV_THRESHOLD,
    RISK_PATTERN_IMPACT_MAX,
    RISK_MOOD_THRESHOLD,
    RISK_MOOD_IMPACT_WEIGHT,
)


class RiskService:
    """Service for risk factor detection"""

    def __init__(self, reference_date: date):
        self.reference_date = reference_date
        self.pattern_service = PatternService(reference_date)

    def identify_risks(
        self,
        habit: HabitData,
        completions: Sequence[CompletionData],
        moods: Optional[Sequence[MoodData]] = None
    ) -> List[RiskFactor]:
        """
        Evaluate every risk rule independently.

        Rules:
        1. Recent performance: trailing 7-day rate below 40%
        2. Streak length: streak over 30 days (burnout)
        3. Weekly pattern: weekday success rates spread too widely
        4. Mood correlation: completion suppressed by low mood

        Returns:
            Risk factors sorted by impact, highest first
        """
        patterns = self.pattern_service.analyze_patterns(habit, completions, moods)
        history = self.pattern_service.habit_history(habit.id, completions)
        risks: List[RiskFactor] = []

        recent_rate = self.recent_completion_rate(history)
        if recent_rate < RISK_RECENT_RATE_THRESHOLD:
            risks.append(RiskFactor(
                factor=RISK_RECENT_PERFORMANCE,
                impact=(RISK_RECENT_RATE_BASELINE - recent_rate) / RISK_RECENT_RATE_BASELINE,
                description=(
                    f"Recent completion rate is {round(recent_rate * 100)}%, "
                    f"indicating declining motivation"
                )
            ))

        current_streak = self.pattern_service.calculate_current_streak(history)
        if current_streak > RISK_STREAK_THRESHOLD:
            risks.append(RiskFactor(
                factor=RISK_STREAK_LENGTH,
                impact=min(RISK_STREAK_IMPACT_MAX, (current_streak - RISK_STREAK_THRESHOLD) / RISK_STREAK_SCALE),
                description=f"Long streak of {current_streak} days may lead to burnout or complacency"
            ))

        pattern_stddev = self.pattern_service.pattern_stddev(patterns.cyclical_pattern)
        if pattern_stddev > RISK_PATTERN_STDDEV_THRESHOLD:
            risks.append(RiskFactor(
                factor=RISK_WEEKLY_PATTERN,
                impact=min(RISK_PATTERN_IMPACT_MAX, pattern_stddev),
                description="Inconsistent weekly pattern makes predictions less reliable"
            ))

        if patterns.mood_correlation < RISK_MOOD_THRESHOLD:
            risks.append(RiskFactor(
                factor=RISK_MOOD_CORRELATION,
                impact=abs(patterns.mood_correlation) * RISK_MOOD_IMPACT_WEIGHT,
                description=(
                    "Strong negative mood correlation suggests external factors "
                    "affecting habit completion"
                )
            ))

        return sorted(risks, key=lambda risk: risk.impact, reverse=True)

    def recent_completion_rate(self, history: Sequence[CompletionData]) -> float:
        """Completion rate over records dated within the trailing window (0 when empty)"""
        recent = [
            record for record in history
            if 0 <= DateService.days_between(record.date, self.reference_date) <= RISK_RECENT_WINDOW_DAYS
        ]
        return completion_rate(recent)
