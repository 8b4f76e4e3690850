"""
Date calculation service.
Handles effective dates, day start time logic, and weekday indexing used by the forecasts.
"""
from datetime import datetime, timedelta, date
from typing import List, Optional

from habit_forecast.models import Settings
from habit_forecast.exceptions import InvalidDateFormatException
from habit_forecast.constants import DEFAULT_DAY_START_TIME


class DateService:
    """Service for date-related operations"""

    @staticmethod
    def get_effective_date(settings: Settings, now: Optional[datetime] = None) -> date:
        """
        Calendar date the user is currently living in.

        With day_start enabled, moments before day_start_time still belong to
        the previous date (a 02:00 check-in with a 06:00 day start counts for
        yesterday). A malformed day_start_time is ignored.

        Args:
            settings: Settings row with day_start_enabled and day_start_time
            now: Moment to evaluate, the wall clock when omitted

        Returns:
            now.date() or the day before it
        """
        now = now or datetime.now()
        today = now.date()

        if not settings.day_start_enabled:
            return today

        try:
            day_started = DateService.is_time_reached(now, settings.day_start_time or DEFAULT_DAY_START_TIME)
        except (ValueError, IndexError, AttributeError):
            return today

        return today if day_started else today - timedelta(days=1)

    @staticmethod
    def parse_time(time_str: str) -> tuple[int, int]:
        """Split an "HH:MM" string, raising ValueError when it is not a valid time of day"""
        hour_part, minute_part = time_str.split(":")
        hour, minute = int(hour_part), int(minute_part)
        if not (0 <= hour < 24 and 0 <= minute < 60):
            raise ValueError(f"Time out of range: {time_str}")
        return hour, minute

    @staticmethod
    def is_time_reached(now: datetime, time_str: str) -> bool:
        """Check whether the HH:MM time of day has been reached"""
        hour, minute = DateService.parse_time(time_str)
        return now.hour * 60 + now.minute >= hour * 60 + minute

    @staticmethod
    def parse_iso_date(date_str: str) -> date:
        """
        Parse a YYYY-MM-DD string.

        Raises:
            InvalidDateFormatException: If the string is not an ISO date
        """
        try:
            return date.fromisoformat(date_str)
        except (TypeError, ValueError):
            raise InvalidDateFormatException(date_str)

    @staticmethod
    def weekday_index(target_date: date) -> int:
        """Weekday index with Sunday=0 ... Saturday=6"""
        return (target_date.weekday() + 1) % 7

    @staticmethod
    def days_between(start: date, end: date) -> int:
        """Signed number of days from start to end"""
        return (end - start).days

    @staticmethod
    def date_range(start: date, days: int) -> List[date]:
        """Consecutive dates starting at start (inclusive)"""
        return [start + timedelta(days=offset) for offset in range(max(0, days))]
