"""
Schedule optimization service.
Suggests best weekdays per habit and flags overloaded or weak parts of the week.
"""
from datetime import date
from typing import Dict, List, Optional, Sequence

from habit_forecast.schemas import HabitData, CompletionData, MoodData, ScheduleOptimization
from habit_forecast.services.pattern_service import PatternService
from habit_forecast.constants import (
    DAY_NAMES,
    OPTIMAL_DAYS_MAX,
    LOW_BASE_RATE_THRESHOLD,
    POOR_WEEKDAY_THRESHOLD,
    LOAD_IMBALANCE_THRESHOLD,
    MAX_RECOMMENDATIONS,
)


class ScheduleService:
    """Service for habit schedule optimization"""

    def __init__(self, reference_date: date):
        self.reference_date = reference_date
        self.pattern_service = PatternService(reference_date)

    def optimize_schedule(
        self,
        habits: Sequence[HabitData],
        completions: Sequence[CompletionData],
        moods: Optional[Sequence[MoodData]] = None
    ) -> ScheduleOptimization:
        """
        Analyze all habits together.

        Args:
            habits: Habits to schedule
            completions: Completion records for any of the habits
            moods: Optional daily mood entries

        Returns:
            ScheduleOptimization with up to 5 recommendations, most impactful first
        """
        optimal_days: Dict[int, List[int]] = {}
        load_distribution = [0] * 7
        # (impact, recommendation) pairs; impact is the shortfall below the threshold
        candidates: List[tuple[float, str]] = []

        for habit in habits:
            patterns = self.pattern_service.analyze_patterns(habit, completions, moods)
            pattern = patterns.cyclical_pattern

            optimal_days[habit.id] = self.best_days(pattern, min(OPTIMAL_DAYS_MAX, len(habit.target_days)))

            for day in habit.target_days:
                if 0 <= day < 7:
                    load_distribution[day] += 1

            if patterns.base_success_rate < LOW_BASE_RATE_THRESHOLD:
                candidates.append((
                    (LOW_BASE_RATE_THRESHOLD - patterns.base_success_rate) / LOW_BASE_RATE_THRESHOLD,
                    f'Consider reducing frequency for "{habit.name}" to build consistency'
                ))

            worst_rate = min(pattern)
            if worst_rate < POOR_WEEKDAY_THRESHOLD:
                worst_day = pattern.index(worst_rate)
                candidates.append((
                    (POOR_WEEKDAY_THRESHOLD - worst_rate) / POOR_WEEKDAY_THRESHOLD,
                    f'"{habit.name}" performs poorly on {DAY_NAMES[worst_day]}s - consider rescheduling'
                ))

        load_spread = max(load_distribution) - min(load_distribution)
        if load_spread > LOAD_IMBALANCE_THRESHOLD:
            candidates.append((
                min(1.0, load_spread / max(1, len(habits))),
                "Consider redistributing habits across the week for better balance"
            ))

        ranked = sorted(candidates, key=lambda candidate: candidate[0], reverse=True)

        return ScheduleOptimization(
            recommendations=[text for _, text in ranked[:MAX_RECOMMENDATIONS]],
            optimal_days=optimal_days,
            load_distribution=load_distribution,
        )

    @staticmethod
    def best_days(pattern: Sequence[float], count: int) -> List[int]:
        """Weekdays with the highest success rate; ties keep the earlier weekday"""
        ranked = sorted(range(len(pattern)), key=lambda day: pattern[day], reverse=True)
        return ranked[:max(0, count)]
