from pydantic import BaseModel, Field, field_validator
from datetime import datetime, date
from typing import Optional, List, Dict
import json

from habit_forecast.constants import FREQUENCY_DAILY, ALL_WEEKDAYS


def _parse_target_days(value):
    """Accept the JSON string stored in the database as well as a plain list"""
    if isinstance(value, str):
        return json.loads(value) if value else []
    return value


# ===== Engine input snapshots =====

class HabitData(BaseModel):
    """Habit definition as seen by the prediction engine (read-only)"""
    id: int
    name: str
    frequency: str = Field(default=FREQUENCY_DAILY, pattern="^(daily|weekly|interval)$")
    target_days: List[int] = Field(default_factory=lambda: list(ALL_WEEKDAYS))  # 0=Sunday
    interval_days: Optional[int] = None

    @field_validator("target_days", mode="before")
    @classmethod
    def parse_target_days(cls, value):
        return _parse_target_days(value)

    class Config:
        from_attributes = True


class CompletionData(BaseModel):
    """One outcome per habit per calendar day"""
    habit_id: int
    date: date
    completed: bool = False

    class Config:
        from_attributes = True


class MoodData(BaseModel):
    """Daily mood check-in, every sub-score on a 1-5 scale"""
    date: date
    mood: int = Field(..., ge=1, le=5)
    energy: int = Field(..., ge=1, le=5)
    stress: int = Field(..., ge=1, le=5)  # Higher is worse
    sleep: int = Field(..., ge=1, le=5)

    class Config:
        from_attributes = True


class HabitStats(BaseModel):
    habit_id: int
    current_streak: int = 0
    longest_streak: int = 0
    completion_rate: float = 0.0  # Percentage
    total_completions: int = 0
    last_completed: Optional[date] = None


# ===== Engine outputs =====

class HabitPatternProfile(BaseModel):
    base_success_rate: float
    trend_factor: float
    cyclical_pattern: List[float]  # Success rate by weekday, Sunday first
    mood_correlation: float
    streak_factor: float
    recency_factor: float


class PredictionDataPoint(BaseModel):
    date: date
    predicted: bool
    confidence: float
    probability: float


class RiskFactor(BaseModel):
    factor: str = Field(
        ...,
        pattern="^(streak_length|recent_performance|weekly_pattern|mood_correlation|frequency_mismatch)$"
    )
    impact: float = Field(..., ge=0.0, le=1.0)
    description: str


class GoalPrediction(BaseModel):
    type: str = Field(..., pattern="^(streak|completion)$")
    target: int
    period: str = Field(..., pattern="^(weekly|monthly|30-day|60-day|90-day)$")
    probability: float
    confidence: float
    estimated_date: Optional[date] = None
    days_remaining: Optional[int] = None


class HabitPrediction(BaseModel):
    habit_id: int
    habit_name: str
    current_streak: int
    predictions: List[PredictionDataPoint]
    overall_trend: str = Field(..., pattern="^(improving|declining|stable)$")
    risk_level: str = Field(..., pattern="^(low|medium|high)$")
    risk_factors: List[RiskFactor] = []
    goal_predictions: List[GoalPrediction]
    recommendations: List[str]
    confidence_score: float
    next_risk_date: Optional[date] = None


class ScheduleOptimization(BaseModel):
    recommendations: List[str]
    optimal_days: Dict[int, List[int]]  # habit id -> weekdays
    load_distribution: List[int]  # Habits scheduled per weekday, Sunday first


class PredictionAnalytics(BaseModel):
    total_habits: int
    avg_success_probability: float
    high_risk_habits: int
    goal_achievement_rate: float
    optimal_habit_load: int
    best_performance_days: List[int]
    worst_performance_days: List[int]


class PortfolioPredictionResponse(BaseModel):
    reference_date: date
    predictions: List[HabitPrediction]
    analytics: PredictionAnalytics


# ===== Habit schemas =====

class HabitBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    frequency: str = Field(default=FREQUENCY_DAILY, pattern="^(daily|weekly|interval)$")
    target_days: List[int] = Field(default_factory=lambda: list(ALL_WEEKDAYS))
    interval_days: Optional[int] = Field(None, ge=1, le=365)

    @field_validator("target_days", mode="before")
    @classmethod
    def parse_target_days(cls, value):
        return _parse_target_days(value)

    @field_validator("target_days")
    @classmethod
    def validate_target_days(cls, value: List[int]) -> List[int]:
        if any(day < 0 or day > 6 for day in value):
            raise ValueError("target_days must contain weekday indices 0-6 (0=Sunday)")
        return sorted(set(value))


class HabitCreate(HabitBase):
    pass


class HabitUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    frequency: Optional[str] = Field(None, pattern="^(daily|weekly|interval)$")
    target_days: Optional[List[int]] = None
    interval_days: Optional[int] = Field(None, ge=1, le=365)
    is_archived: Optional[bool] = None

    @field_validator("name", "frequency", "target_days", "is_archived", mode="before")
    @classmethod
    def reject_null(cls, value, info):
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    @field_validator("target_days")
    @classmethod
    def validate_target_days(cls, value: Optional[List[int]]) -> Optional[List[int]]:
        if value is None:
            return value
        if any(day < 0 or day > 6 for day in value):
            raise ValueError("target_days must contain weekday indices 0-6 (0=Sunday)")
        return sorted(set(value))


class HabitResponse(HabitBase):
    id: int
    is_archived: bool = False
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ===== Completion schemas =====

class CompletionCreate(BaseModel):
    habit_id: int
    date: date
    completed: bool = True
    notes: Optional[str] = Field(None, max_length=500)


class CompletionResponse(CompletionCreate):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True


# ===== Mood schemas =====

class MoodCreate(MoodData):
    notes: Optional[str] = Field(None, max_length=500)


class MoodResponse(MoodCreate):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True


# ===== Settings schemas =====

class SettingsBase(BaseModel):
    # Day boundary settings
    day_start_enabled: bool = Field(default=False)
    day_start_time: str = Field(default="06:00", pattern=r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$")

    # Forecast horizon
    forecast_days: int = Field(default=90, ge=1, le=365)

    # Risk digest
    risk_digest_enabled: bool = Field(default=True)
    risk_digest_time: str = Field(default="07:00", pattern=r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$")


class SettingsUpdate(SettingsBase):
    pass


class SettingsResponse(SettingsBase):
    id: int
    updated_at: datetime
    last_digest_date: Optional[date] = None
    effective_date: Optional[date] = None  # Current effective date based on day_start_time

    class Config:
        from_attributes = True
