"""
Habit repository - Data access layer for habits, completions and mood entries.
Handles all database queries that feed the prediction engine.
"""
from datetime import date
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from habit_forecast.models import Habit, HabitCompletion, MoodEntry
from habit_forecast.exceptions import DatabaseException


class HabitRepository:
    """Repository for Habit data access"""

    @staticmethod
    def get_by_id(db: Session, habit_id: int) -> Optional[Habit]:
        """Get habit by ID"""
        return db.query(Habit).filter(Habit.id == habit_id).first()

    @staticmethod
    def get_all(db: Session, include_archived: bool = False) -> List[Habit]:
        """Get all habits, active ones only by default"""
        query = db.query(Habit)
        if not include_archived:
            query = query.filter(Habit.is_archived == False)
        return query.order_by(Habit.id).all()

    @staticmethod
    def create(db: Session, habit: Habit) -> Habit:
        """Create new habit"""
        db.add(habit)
        db.commit()
        db.refresh(habit)
        return habit

    @staticmethod
    def update(db: Session, habit: Habit) -> Habit:
        """Update existing habit"""
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise DatabaseException("update", f"habit {habit.id}: {e.orig}")
        db.refresh(habit)
        return habit

    @staticmethod
    def delete(db: Session, habit: Habit) -> None:
        """Delete a habit together with its completion records"""
        db.query(HabitCompletion).filter(HabitCompletion.habit_id == habit.id).delete()
        db.delete(habit)
        db.commit()


class CompletionRepository:
    """Repository for HabitCompletion data access"""

    @staticmethod
    def get_by_id(db: Session, completion_id: int) -> Optional[HabitCompletion]:
        """Get completion record by ID"""
        return db.query(HabitCompletion).filter(HabitCompletion.id == completion_id).first()

    @staticmethod
    def get_by_habit_and_date(db: Session, habit_id: int, target_date: date) -> Optional[HabitCompletion]:
        """Get the single record of a habit for a date"""
        return db.query(HabitCompletion).filter(
            HabitCompletion.habit_id == habit_id,
            HabitCompletion.date == target_date
        ).first()

    @staticmethod
    def get_for_habit(db: Session, habit_id: int) -> List[HabitCompletion]:
        """Get all records of a habit, oldest first"""
        return db.query(HabitCompletion).filter(
            HabitCompletion.habit_id == habit_id
        ).order_by(HabitCompletion.date).all()

    @staticmethod
    def get_for_habits(db: Session, habit_ids: List[int]) -> List[HabitCompletion]:
        """Get records of several habits, oldest first"""
        if not habit_ids:
            return []
        return db.query(HabitCompletion).filter(
            HabitCompletion.habit_id.in_(habit_ids)
        ).order_by(HabitCompletion.date).all()

    @staticmethod
    def create(db: Session, completion: HabitCompletion) -> HabitCompletion:
        """Create new completion record (one per habit per date)"""
        db.add(completion)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise DatabaseException("insert", f"completion for habit {completion.habit_id} on {completion.date}: {e.orig}")
        db.refresh(completion)
        return completion

    @staticmethod
    def update(db: Session, completion: HabitCompletion) -> HabitCompletion:
        """Update existing completion record"""
        db.commit()
        db.refresh(completion)
        return completion

    @staticmethod
    def delete(db: Session, completion: HabitCompletion) -> None:
        """Delete a completion record"""
        db.delete(completion)
        db.commit()


class MoodRepository:
    """Repository for MoodEntry data access"""

    @staticmethod
    def get_by_id(db: Session, mood_id: int) -> Optional[MoodEntry]:
        """Get mood entry by ID"""
        return db.query(MoodEntry).filter(MoodEntry.id == mood_id).first()

    @staticmethod
    def get_by_date(db: Session, target_date: date) -> Optional[MoodEntry]:
        """Get mood entry for a date"""
        return db.query(MoodEntry).filter(MoodEntry.date == target_date).first()

    @staticmethod
    def get_all(db: Session) -> List[MoodEntry]:
        """Get all mood entries, oldest first"""
        return db.query(MoodEntry).order_by(MoodEntry.date).all()

    @staticmethod
    def create(db: Session, mood: MoodEntry) -> MoodEntry:
        """Create new mood entry (one per date)"""
        db.add(mood)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise DatabaseException("insert", f"mood entry on {mood.date}: {e.orig}")
        db.refresh(mood)
        return mood

    @staticmethod
    def update(db: Session, mood: MoodEntry) -> MoodEntry:
        """Update existing mood entry"""
        db.commit()
        db.refresh(mood)
        return mood

    @staticmethod
    def delete(db: Session, mood: MoodEntry) -> None:
        """Delete a mood entry"""
        db.delete(mood)
        db.commit()
