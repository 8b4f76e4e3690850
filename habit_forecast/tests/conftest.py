"""
Shared fixtures for the habit forecast tests.
"""
import pytest
from datetime import date, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from habit_forecast.database import Base
from habit_forecast.models import Habit, HabitCompletion, Settings
from habit_forecast.schemas import HabitData, CompletionData, MoodData

# A Sunday, so weekday index 0
REFERENCE_DATE = date(2025, 6, 15)


@pytest.fixture
def db_session():
    """In-memory database shared by every connection of the test"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def default_settings(db_session):
    settings = Settings()
    db_session.add(settings)
    db_session.commit()
    db_session.refresh(settings)
    return settings


@pytest.fixture
def today():
    return REFERENCE_DATE


@pytest.fixture
def yesterday(today):
    return today - timedelta(days=1)


@pytest.fixture
def daily_habit():
    return HabitData(id=1, name="Morning run", frequency="daily", target_days=[0, 1, 2, 3, 4, 5, 6])


@pytest.fixture
def weekly_habit():
    return HabitData(id=2, name="Piano practice", frequency="weekly", target_days=[1, 3, 5])


@pytest.fixture
def make_history():
    """
    Build consecutive daily records ending at end_date.

    outcomes[-1] is the record for end_date.
    """
    def _make(habit_id, outcomes, end_date=REFERENCE_DATE):
        start = end_date - timedelta(days=len(outcomes) - 1)
        return [
            CompletionData(habit_id=habit_id, date=start + timedelta(days=offset), completed=bool(outcome))
            for offset, outcome in enumerate(outcomes)
        ]
    return _make


@pytest.fixture
def make_mood():
    """Mood entry whose composite score equals `score` (stress is inverted)"""
    def _make(target_date, score):
        return MoodData(date=target_date, mood=score, energy=score, stress=6 - score, sleep=score)
    return _make


@pytest.fixture
def perfect_history(make_history):
    """90 consecutive completed days of habit 1 ending at the reference date"""
    return make_history(1, [True] * 90)


@pytest.fixture
def monday_only_history(make_history):
    """10 full weeks of daily records for habit 1, completed on Mondays only"""
    # 70 days ending on a Sunday start on a Monday
    return make_history(1, [offset % 7 == 0 for offset in range(70)])


def create_habit_with_history(db, outcomes, end_date=REFERENCE_DATE, **fields):
    """Persist a habit plus consecutive daily records ending at end_date"""
    values = {"name": "Morning run", "frequency": "daily", "target_days": "[0,1,2,3,4,5,6]"}
    values.update(fields)
    habit = Habit(**values)
    db.add(habit)
    db.commit()
    db.refresh(habit)

    start = end_date - timedelta(days=len(outcomes) - 1)
    for offset, outcome in enumerate(outcomes):
        db.add(HabitCompletion(habit_id=habit.id, date=start + timedelta(days=offset), completed=bool(outcome)))
    db.commit()
    return habit
