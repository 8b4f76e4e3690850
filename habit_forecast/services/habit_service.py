"""
Habit management service.
Handles habits, daily completion logging and mood check-ins.
"""
import json
from typing import List
from sqlalchemy.orm import Session

from habit_forecast.models import Habit, HabitCompletion, MoodEntry
from habit_forecast.schemas import HabitCreate, HabitUpdate, CompletionCreate, MoodCreate
from habit_forecast.repositories.habit_repository import (
    HabitRepository, CompletionRepository, MoodRepository
)
from habit_forecast.exceptions import (
    HabitNotFoundException, CompletionNotFoundException, MoodEntryNotFoundException,
    ValidationException
)
from habit_forecast.constants import FREQUENCY_INTERVAL


class HabitService:
    """Service for managing habits and their records"""

    def __init__(self, db: Session):
        self.db = db
        self.habit_repo = HabitRepository()
        self.completion_repo = CompletionRepository()
        self.mood_repo = MoodRepository()

    # ===== Habits =====

    def get_habits(self, include_archived: bool = False) -> List[Habit]:
        """Get all habits"""
        return self.habit_repo.get_all(self.db, include_archived)

    def get_habit(self, habit_id: int) -> Habit:
        """Get a habit or raise HabitNotFoundException"""
        habit = self.habit_repo.get_by_id(self.db, habit_id)
        if not habit:
            raise HabitNotFoundException(habit_id)
        return habit

    def create_habit(self, habit_data: HabitCreate) -> Habit:
        """Create a new habit"""
        self._check_interval(habit_data.frequency, habit_data.interval_days)
        values = habit_data.model_dump()
        values["target_days"] = json.dumps(values["target_days"])
        return self.habit_repo.create(self.db, Habit(**values))

    def update_habit(self, habit_id: int, habit_update: HabitUpdate) -> Habit:
        """Update an existing habit"""
        habit = self.get_habit(habit_id)

        update_data = habit_update.model_dump(exclude_unset=True)
        self._check_interval(
            update_data.get("frequency", habit.frequency),
            update_data.get("interval_days", habit.interval_days)
        )
        if update_data.get("target_days") is not None:
            update_data["target_days"] = json.dumps(update_data["target_days"])
        for key, value in update_data.items():
            setattr(habit, key, value)

        return self.habit_repo.update(self.db, habit)

    @staticmethod
    def _check_interval(frequency: str, interval_days) -> None:
        if frequency == FREQUENCY_INTERVAL and not interval_days:
            raise ValidationException("interval_days", "required when frequency is 'interval'")

    def delete_habit(self, habit_id: int) -> None:
        """Delete a habit and its completion history"""
        habit = self.get_habit(habit_id)
        self.habit_repo.delete(self.db, habit)

    # ===== Completions =====

    def get_completions(self, habit_id: int) -> List[HabitCompletion]:
        """Get completion history of a habit"""
        self.get_habit(habit_id)
        return self.completion_repo.get_for_habit(self.db, habit_id)

    def log_completion(self, completion_data: CompletionCreate) -> HabitCompletion:
        """
        Record the outcome of a habit for a day.

        There is at most one record per habit per date, so logging the same
        day again overwrites the earlier outcome.
        """
        self.get_habit(completion_data.habit_id)

        existing = self.completion_repo.get_by_habit_and_date(
            self.db, completion_data.habit_id, completion_data.date
        )
        if existing:
            existing.completed = completion_data.completed
            existing.notes = completion_data.notes
            return self.completion_repo.update(self.db, existing)

        return self.completion_repo.create(self.db, HabitCompletion(**completion_data.model_dump()))

    def delete_completion(self, completion_id: int) -> None:
        """Delete a completion record"""
        completion = self.completion_repo.get_by_id(self.db, completion_id)
        if not completion:
            raise CompletionNotFoundException(completion_id)
        self.completion_repo.delete(self.db, completion)

    # ===== Moods =====

    def get_moods(self) -> List[MoodEntry]:
        """Get all mood entries"""
        return self.mood_repo.get_all(self.db)

    def log_mood(self, mood_data: MoodCreate) -> MoodEntry:
        """Record the mood check-in for a day (one entry per date)"""
        existing = self.mood_repo.get_by_date(self.db, mood_data.date)
        if existing:
            for key, value in mood_data.model_dump().items():
                setattr(existing, key, value)
            return self.mood_repo.update(self.db, existing)

        return self.mood_repo.create(self.db, MoodEntry(**mood_data.model_dump()))

    def delete_mood(self, mood_id: int) -> None:
        """Delete a mood entry"""
        mood = self.mood_repo.get_by_id(self.db, mood_id)
        if not mood:
            raise MoodEntryNotFoundException(mood_id)
        self.mood_repo.delete(self.db, mood)
