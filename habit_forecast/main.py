from fastapi import FastAPI, Depends, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from contextlib import asynccontextmanager
import logging
import os
from pathlib import Path

from habit_forecast.database import engine, get_db, Base
from habit_forecast import models  # Import all models to register them with Base
from habit_forecast.schemas import (
    HabitCreate, HabitUpdate, HabitResponse, HabitStats,
    CompletionCreate, CompletionResponse,
    MoodCreate, MoodResponse,
    SettingsUpdate, SettingsResponse,
    HabitPrediction, HabitPatternProfile, PredictionDataPoint, RiskFactor, GoalPrediction,
    ScheduleOptimization, PortfolioPredictionResponse
)
from habit_forecast.auth import verify_api_key
from habit_forecast.exceptions import (
    HabitNotFoundException, CompletionNotFoundException, MoodEntryNotFoundException,
    InvalidDateFormatException, ValidationException, DatabaseException
)
from habit_forecast.repositories.settings_repository import SettingsRepository
from habit_forecast.services.date_service import DateService
from habit_forecast.services.habit_service import HabitService
from habit_forecast.services.forecast_service import ForecastService
from habit_forecast.services.scheduler_service import start_scheduler, stop_scheduler
from habit_forecast.constants import (
    DEFAULT_LOG_DIRECTORY_PROD, DEFAULT_LOG_DIRECTORY_DEV, CORS_ALLOWED_ORIGINS, MAX_FORECAST_DAYS
)

LOG_DIR = os.getenv("HABIT_FORECAST_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("HABIT_FORECAST_LOG_FILE", "app.log")

# Fall back to a local directory when /var/log is not writable
try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    LOG_DIR = DEFAULT_LOG_DIRECTORY_DEV
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger("habit_forecast")


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info(f"Habit Forecast API started. Logging to: {log_path}")
    start_scheduler()
    yield
    logger.info("Shutting down Habit Forecast API")
    stop_scheduler()


app = FastAPI(
    title="Habit Forecast API",
    description="Habit tracking with completion forecasts, risk detection and goal predictions",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HabitNotFoundException)
@app.exception_handler(CompletionNotFoundException)
@app.exception_handler(MoodEntryNotFoundException)
async def not_found_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvalidDateFormatException)
@app.exception_handler(ValidationException)
async def bad_request_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(DatabaseException)
async def database_error_handler(request: Request, exc: DatabaseException):
    logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


def _forecast_service(db: Session, as_of: Optional[str]) -> ForecastService:
    """Forecast service for an explicit YYYY-MM-DD reference date or the effective date"""
    reference_date = DateService.parse_iso_date(as_of) if as_of else None
    return ForecastService(db, reference_date=reference_date)


# Health check (no auth required)
@app.get("/")
async def root():
    return {"message": "Habit Forecast API", "status": "active"}


# ===== HABIT ENDPOINTS =====

@app.get("/api/habits", response_model=List[HabitResponse], dependencies=[Depends(verify_api_key)])
async def get_habits(include_archived: bool = False, db: Session = Depends(get_db)):
    """Get all habits"""
    return HabitService(db).get_habits(include_archived)


@app.post("/api/habits", response_model=HabitResponse, status_code=status.HTTP_201_CREATED, dependencies=[Depends(verify_api_key)])
async def create_habit(habit: HabitCreate, db: Session = Depends(get_db)):
    """Create a new habit"""
    return HabitService(db).create_habit(habit)


@app.get("/api/habits/{habit_id}", response_model=HabitResponse, dependencies=[Depends(verify_api_key)])
async def get_habit(habit_id: int, db: Session = Depends(get_db)):
    """Get a specific habit"""
    return HabitService(db).get_habit(habit_id)


@app.put("/api/habits/{habit_id}", response_model=HabitResponse, dependencies=[Depends(verify_api_key)])
async def update_habit(habit_id: int, habit_update: HabitUpdate, db: Session = Depends(get_db)):
    """Update a habit"""
    return HabitService(db).update_habit(habit_id, habit_update)


@app.delete("/api/habits/{habit_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(verify_api_key)])
async def delete_habit(habit_id: int, db: Session = Depends(get_db)):
    """Delete a habit and its completion history"""
    HabitService(db).delete_habit(habit_id)


@app.get("/api/habits/{habit_id}/stats", response_model=HabitStats, dependencies=[Depends(verify_api_key)])
async def get_habit_stats(habit_id: int, db: Session = Depends(get_db)):
    """Get streak and completion statistics"""
    return ForecastService(db).get_stats(habit_id)


# ===== COMPLETION ENDPOINTS =====

@app.get("/api/habits/{habit_id}/completions", response_model=List[CompletionResponse], dependencies=[Depends(verify_api_key)])
async def get_completions(habit_id: int, db: Session = Depends(get_db)):
    """Get completion history of a habit (oldest first)"""
    return HabitService(db).get_completions(habit_id)


@app.post("/api/completions", response_model=CompletionResponse, dependencies=[Depends(verify_api_key)])
async def log_completion(completion: CompletionCreate, db: Session = Depends(get_db)):
    """Log a habit outcome for a day (overwrites an existing record for that day)"""
    return HabitService(db).log_completion(completion)


@app.delete("/api/completions/{completion_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(verify_api_key)])
async def delete_completion(completion_id: int, db: Session = Depends(get_db)):
    """Delete a completion record"""
    HabitService(db).delete_completion(completion_id)


# ===== MOOD ENDPOINTS =====

@app.get("/api/moods", response_model=List[MoodResponse], dependencies=[Depends(verify_api_key)])
async def get_moods(db: Session = Depends(get_db)):
    """Get all mood entries"""
    return HabitService(db).get_moods()


@app.post("/api/moods", response_model=MoodResponse, dependencies=[Depends(verify_api_key)])
async def log_mood(mood: MoodCreate, db: Session = Depends(get_db)):
    """Log the mood check-in for a day"""
    return HabitService(db).log_mood(mood)


@app.delete("/api/moods/{mood_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(verify_api_key)])
async def delete_mood(mood_id: int, db: Session = Depends(get_db)):
    """Delete a mood entry"""
    HabitService(db).delete_mood(mood_id)


# ===== PREDICTION ENDPOINTS =====

@app.get("/api/predictions", response_model=PortfolioPredictionResponse, dependencies=[Depends(verify_api_key)])
async def get_predictions(as_of: Optional[str] = None, db: Session = Depends(get_db)):
    """Predictions for all active habits plus portfolio analytics"""
    return _forecast_service(db, as_of).predict_all()


@app.get("/api/predictions/{habit_id}", response_model=HabitPrediction, dependencies=[Depends(verify_api_key)])
async def get_habit_prediction(habit_id: int, as_of: Optional[str] = None, db: Session = Depends(get_db)):
    """Comprehensive prediction for one habit"""
    return _forecast_service(db, as_of).predict_habit(habit_id)


@app.get("/api/predictions/{habit_id}/trajectory", response_model=List[PredictionDataPoint], dependencies=[Depends(verify_api_key)])
async def get_habit_trajectory(
    habit_id: int,
    days: Optional[int] = Query(None, ge=1, le=MAX_FORECAST_DAYS),
    as_of: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Day-by-day forecast (defaults to the forecast_days setting)"""
    return _forecast_service(db, as_of).get_trajectory(habit_id, days)


@app.get("/api/predictions/{habit_id}/patterns", response_model=HabitPatternProfile, dependencies=[Depends(verify_api_key)])
async def get_habit_patterns(habit_id: int, as_of: Optional[str] = None, db: Session = Depends(get_db)):
    """Statistical pattern profile of a habit"""
    return _forecast_service(db, as_of).get_patterns(habit_id)


@app.get("/api/predictions/{habit_id}/risks", response_model=List[RiskFactor], dependencies=[Depends(verify_api_key)])
async def get_habit_risks(habit_id: int, as_of: Optional[str] = None, db: Session = Depends(get_db)):
    """Risk factors of a habit, highest impact first"""
    return _forecast_service(db, as_of).get_risks(habit_id)


@app.get("/api/predictions/{habit_id}/goals", response_model=List[GoalPrediction], dependencies=[Depends(verify_api_key)])
async def get_habit_goals(habit_id: int, as_of: Optional[str] = None, db: Session = Depends(get_db)):
    """Goal achievement predictions of a habit"""
    return _forecast_service(db, as_of).get_goals(habit_id)


@app.get("/api/schedule/optimize", response_model=ScheduleOptimization, dependencies=[Depends(verify_api_key)])
async def get_schedule_optimization(as_of: Optional[str] = None, db: Session = Depends(get_db)):
    """Optimal weekdays, weekly load and scheduling recommendations"""
    return _forecast_service(db, as_of).optimize_schedule()


# ===== SETTINGS ENDPOINTS =====

@app.get("/api/settings", response_model=SettingsResponse, dependencies=[Depends(verify_api_key)])
async def get_settings_endpoint(db: Session = Depends(get_db)):
    """Get settings with effective date"""
    settings = SettingsRepository.get(db)
    response = SettingsResponse.model_validate(settings)
    response.effective_date = DateService.get_effective_date(settings)
    return response


@app.put("/api/settings", response_model=SettingsResponse, dependencies=[Depends(verify_api_key)])
async def update_settings_endpoint(settings_update: SettingsUpdate, db: Session = Depends(get_db)):
    """Update settings"""
    settings = SettingsRepository.apply_update(db, settings_update.model_dump())
    response = SettingsResponse.model_validate(settings)
    response.effective_date = DateService.get_effective_date(settings)
    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("habit_forecast.main:app", host="0.0.0.0", port=8000, reload=False)
