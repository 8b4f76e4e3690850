from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, ForeignKey, UniqueConstraint
from datetime import datetime
from habit_forecast.database import Base
from habit_forecast.constants import DEFAULT_DAY_START_TIME, DEFAULT_RISK_DIGEST_TIME, DEFAULT_FORECAST_DAYS


class Habit(Base):
    __tablename__ = "habits"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)

    # Scheduling
    frequency = Column(String, default="daily")  # daily, weekly, interval
    target_days = Column(String, default="[0,1,2,3,4,5,6]")  # JSON array, 0=Sunday
    interval_days = Column(Integer, nullable=True)  # For interval frequency

    is_archived = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)


class HabitCompletion(Base):
    __tablename__ = "habit_completions"
    __table_args__ = (
        UniqueConstraint("habit_id", "date", name="uq_completion_habit_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    habit_id = Column(Integer, ForeignKey("habits.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    completed = Column(Boolean, default=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.now)


class MoodEntry(Base):
    __tablename__ = "mood_entries"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, unique=True, index=True)

    # Sub-scores on a 1-5 scale (stress: higher is worse)
    mood = Column(Integer, nullable=False)
    energy = Column(Integer, nullable=False)
    stress = Column(Integer, nullable=False)
    sleep = Column(Integer, nullable=False)

    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.now)


class Settings(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)

    # Day boundary: before day_start_time the effective date is still yesterday
    day_start_enabled = Column(Boolean, default=False)
    day_start_time = Column(String, default=DEFAULT_DAY_START_TIME)

    # Forecast horizon used by the API when no explicit days are requested
    forecast_days = Column(Integer, default=DEFAULT_FORECAST_DAYS)

    # Daily risk digest
    risk_digest_enabled = Column(Boolean, default=True)
    risk_digest_time = Column(String, default=DEFAULT_RISK_DIGEST_TIME)
    last_digest_date = Column(Date, nullable=True)

    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
