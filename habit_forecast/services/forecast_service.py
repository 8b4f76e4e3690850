"""
Forecast service.
Loads habit, completion and mood snapshots from the database and runs the
prediction engine against the effective date.
"""
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from habit_forecast.schemas import (
    HabitData, CompletionData, MoodData, HabitStats, HabitPrediction, HabitPatternProfile,
    PredictionDataPoint, RiskFactor, GoalPrediction, ScheduleOptimization,
    PortfolioPredictionResponse
)
from habit_forecast.repositories.habit_repository import (
    HabitRepository, CompletionRepository, MoodRepository
)
from habit_forecast.repositories.settings_repository import SettingsRepository
from habit_forecast.services.date_service import DateService
from habit_forecast.services.pattern_service import PatternService
from habit_forecast.services.projection_service import ProjectionService
from habit_forecast.services.risk_service import RiskService
from habit_forecast.services.goal_service import GoalService
from habit_forecast.services.schedule_service import ScheduleService
from habit_forecast.services.prediction_service import PredictionService
from habit_forecast.services.analytics_service import AnalyticsService
from habit_forecast.services.stats_service import StatsService
from habit_forecast.exceptions import HabitNotFoundException


class ForecastService:
    """Service bridging stored records and the prediction engine"""

    def __init__(self, db: Session, reference_date: Optional[date] = None):
        self.db = db
        self.habit_repo = HabitRepository()
        self.completion_repo = CompletionRepository()
        self.mood_repo = MoodRepository()
        self.settings_repo = SettingsRepository()
        self.reference_date = reference_date or self.get_effective_date()

    def get_effective_date(self, now: Optional[datetime] = None) -> date:
        """Effective "today" according to the day start settings"""
        settings = self.settings_repo.get(self.db)
        return DateService.get_effective_date(settings, now)

    # ===== Snapshots =====

    def _load_habit(self, habit_id: int) -> HabitData:
        habit = self.habit_repo.get_by_id(self.db, habit_id)
        if not habit:
            raise HabitNotFoundException(habit_id)
        return HabitData.model_validate(habit)

    def _load_habits(self) -> List[HabitData]:
        return [HabitData.model_validate(habit) for habit in self.habit_repo.get_all(self.db)]

    def _load_completions(self, habit_ids: List[int]) -> List[CompletionData]:
        return [
            CompletionData.model_validate(record)
            for record in self.completion_repo.get_for_habits(self.db, habit_ids)
        ]

    def _load_moods(self) -> List[MoodData]:
        return [MoodData.model_validate(mood) for mood in self.mood_repo.get_all(self.db)]

    # ===== Single habit =====

    def get_stats(self, habit_id: int) -> HabitStats:
        habit = self._load_habit(habit_id)
        return StatsService.calculate_habit_stats(habit.id, self._load_completions([habit.id]))

    def get_patterns(self, habit_id: int) -> HabitPatternProfile:
        habit = self._load_habit(habit_id)
        return PatternService(self.reference_date).analyze_patterns(
            habit, self._load_completions([habit.id]), self._load_moods()
        )

    def get_trajectory(self, habit_id: int, days: Optional[int] = None) -> List[PredictionDataPoint]:
        """Forecast for `days` days (settings.forecast_days when omitted)"""
        habit = self._load_habit(habit_id)
        if days is None:
            days = self.settings_repo.get(self.db).forecast_days
        return ProjectionService(self.reference_date).project_trajectory(
            habit, self._load_completions([habit.id]), days, self._load_moods()
        )

    def get_risks(self, habit_id: int) -> List[RiskFactor]:
        habit = self._load_habit(habit_id)
        return RiskService(self.reference_date).identify_risks(
            habit, self._load_completions([habit.id]), self._load_moods()
        )

    def get_goals(self, habit_id: int) -> List[GoalPrediction]:
        habit = self._load_habit(habit_id)
        return GoalService(self.reference_date).predict_goals(
            habit, self._load_completions([habit.id]), self._load_moods()
        )

    def predict_habit(self, habit_id: int) -> HabitPrediction:
        """Comprehensive prediction for one habit"""
        habit = self._load_habit(habit_id)
        completions = self._load_completions([habit.id])
        stats = StatsService.calculate_habit_stats(habit.id, completions)
        return PredictionService(self.reference_date).generate_prediction(
            habit, completions, stats, self._load_moods()
        )

    # ===== All habits =====

    def predict_all(self) -> PortfolioPredictionResponse:
        """Predictions for every active habit plus portfolio analytics"""
        habits = self._load_habits()
        completions = self._load_completions([habit.id for habit in habits])
        moods = self._load_moods()

        prediction_service = PredictionService(self.reference_date)
        predictions = [
            prediction_service.generate_prediction(
                habit,
                completions,
                StatsService.calculate_habit_stats(habit.id, completions),
                moods
            )
            for habit in habits
        ]

        return PortfolioPredictionResponse(
            reference_date=self.reference_date,
            predictions=predictions,
            analytics=AnalyticsService.aggregate_analytics(habits, predictions),
        )

    def optimize_schedule(self) -> ScheduleOptimization:
        habits = self._load_habits()
        return ScheduleService(self.reference_date).optimize_schedule(
            habits,
            self._load_completions([habit.id for habit in habits]),
            self._load_moods()
        )
