"""
Background scheduler for the daily risk digest.
Handles:
- Computing predictions for all active habits once per effective day
- Logging portfolio analytics and a warning for every high-risk habit
"""

import logging
from datetime import datetime
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from habit_forecast.database import SessionLocal
from habit_forecast.repositories.settings_repository import SettingsRepository
from habit_forecast.services.date_service import DateService
from habit_forecast.services.forecast_service import ForecastService
from habit_forecast.constants import RISK_LEVEL_HIGH, DEFAULT_RISK_DIGEST_TIME

logger = logging.getLogger("habit_forecast.scheduler")

# Create scheduler instance
scheduler = AsyncIOScheduler()


def build_risk_digest(db: Session, now: Optional[datetime] = None) -> Optional[dict]:
    """
    Compute the risk digest if it is due.

    The digest is due once the configured time has passed and it has not
    run yet for the current effective date.

    Returns:
        Digest summary, or None when disabled or not due
    """
    now = now or datetime.now()
    settings = SettingsRepository.get(db)
    if not settings.risk_digest_enabled:
        return None

    today = DateService.get_effective_date(settings, now)
    if settings.last_digest_date == today:
        return None
    if not DateService.is_time_reached(now, settings.risk_digest_time or DEFAULT_RISK_DIGEST_TIME):
        return None

    portfolio = ForecastService(db, reference_date=today).predict_all()
    analytics = portfolio.analytics

    logger.info(
        f"Risk digest for {today}: {analytics.total_habits} habits, "
        f"avg success {analytics.avg_success_probability:.0%}, "
        f"{analytics.high_risk_habits} high risk, optimal load {analytics.optimal_habit_load}"
    )

    high_risk = [p for p in portfolio.predictions if p.risk_level == RISK_LEVEL_HIGH]
    for prediction in high_risk:
        factors = ", ".join(risk.factor for risk in prediction.risk_factors)
        logger.warning(f'High risk habit "{prediction.habit_name}" ({prediction.habit_id}): {factors}')

    SettingsRepository.mark_digest_sent(db, today)

    return {
        "date": today,
        "total_habits": analytics.total_habits,
        "high_risk_habits": [p.habit_id for p in high_risk],
    }


async def run_risk_digest():
    """Job: daily risk digest"""
    db = SessionLocal()
    try:
        build_risk_digest(db)
    except Exception as e:
        logger.error(f"Scheduler Error (Risk Digest): {e}")
    finally:
        db.close()


def start_scheduler():
    """Start the scheduler"""
    if not scheduler.running:
        # The job checks every minute whether the digest is due
        scheduler.add_job(
            run_risk_digest,
            CronTrigger(minute='*'),
            id='risk_digest',
            replace_existing=True
        )

        scheduler.start()
        logger.info("APScheduler started")
        logger.info(f"Scheduled jobs: {[job.id for job in scheduler.get_jobs()]}")


def stop_scheduler():
    """Stop the scheduler"""
    if scheduler.running:
        scheduler.shutdown()
