"""
Habit statistics service.
Derives streaks and completion rates from raw completion records.
"""
from typing import Sequence

from habit_forecast.schemas import CompletionData, HabitStats
from habit_forecast.services.pattern_service import PatternService


class StatsService:
    """Service for habit statistics"""

    @staticmethod
    def calculate_habit_stats(habit_id: int, completions: Sequence[CompletionData]) -> HabitStats:
        """
        Calculate streak and completion statistics for one habit.

        Args:
            habit_id: Habit to summarize
            completions: Completion records (any habit, any order)

        Returns:
            HabitStats (all zero when the habit has no records)
        """
        history = PatternService.habit_history(habit_id, completions)
        if not history:
            return HabitStats(habit_id=habit_id)

        total_completions = sum(1 for record in history if record.completed)

        longest_streak = 0
        running = 0
        for record in history:
            if record.completed:
                running += 1
                longest_streak = max(longest_streak, running)
            else:
                running = 0

        completed_dates = [record.date for record in history if record.completed]

        return HabitStats(
            habit_id=habit_id,
            current_streak=PatternService.calculate_current_streak(history),
            longest_streak=longest_streak,
            completion_rate=total_completions / len(history) * 100,
            total_completions=total_completions,
            last_completed=completed_dates[-1] if completed_dates else None,
        )
