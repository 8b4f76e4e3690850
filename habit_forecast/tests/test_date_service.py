"""
Tests for DateService.

Tests cover:
1. Effective date calculation based on day_start_time
2. Weekday indexing with Sunday first
3. ISO date parsing
4. Time-of-day checks and date ranges
"""
import pytest
from datetime import date, datetime
from unittest.mock import patch

from habit_forecast.services.date_service import DateService
from habit_forecast.exceptions import InvalidDateFormatException


class TestEffectiveDate:
    """Tests for get_effective_date function"""

    def test_returns_today_when_day_start_disabled(self, default_settings):
        """Should return the calendar date when day_start is disabled"""
        default_settings.day_start_enabled = False

        result = DateService.get_effective_date(default_settings, datetime(2025, 6, 15, 3, 0))

        assert result == date(2025, 6, 15)

    def test_returns_today_when_after_day_start(self, default_settings):
        """Should return today when current time is after day_start_time"""
        default_settings.day_start_enabled = True
        default_settings.day_start_time = "06:00"

        result = DateService.get_effective_date(default_settings, datetime(2025, 6, 15, 10, 0))

        assert result == date(2025, 6, 15)

    def test_returns_yesterday_when_before_day_start(self, default_settings):
        """Should return yesterday when current time is before day_start_time"""
        default_settings.day_start_enabled = True
        default_settings.day_start_time = "06:00"

        result = DateService.get_effective_date(default_settings, datetime(2025, 6, 15, 3, 0))

        assert result == date(2025, 6, 14)

    def test_invalid_day_start_falls_back_to_today(self, default_settings):
        """A malformed day_start_time should not shift the date"""
        default_settings.day_start_enabled = True
        default_settings.day_start_time = "garbage"

        result = DateService.get_effective_date(default_settings, datetime(2025, 6, 15, 3, 0))

        assert result == date(2025, 6, 15)

    def test_uses_wall_clock_when_now_omitted(self, default_settings):
        """Without an explicit moment the current time is used"""
        default_settings.day_start_enabled = False

        with patch('habit_forecast.services.date_service.datetime') as mock_dt:
            mock_dt.now.return_value = datetime(2025, 6, 15, 10, 0, 0)
            result = DateService.get_effective_date(default_settings)

        assert result == date(2025, 6, 15)


class TestWeekdayIndex:
    """Tests for weekday_index function"""

    def test_sunday_is_zero(self):
        assert DateService.weekday_index(date(2025, 6, 15)) == 0

    def test_monday_is_one(self):
        assert DateService.weekday_index(date(2025, 6, 16)) == 1

    def test_saturday_is_six(self):
        assert DateService.weekday_index(date(2025, 6, 21)) == 6


class TestParseIsoDate:
    """Tests for parse_iso_date function"""

    def test_parses_valid_date(self):
        assert DateService.parse_iso_date("2025-06-15") == date(2025, 6, 15)

    def test_rejects_invalid_date(self):
        """Should raise InvalidDateFormatException for non-ISO strings"""
        with pytest.raises(InvalidDateFormatException) as exc_info:
            DateService.parse_iso_date("15/06/2025")

        assert exc_info.value.date_str == "15/06/2025"


class TestTimeHelpers:
    """Tests for parse_time, is_time_reached, days_between and date_range"""

    def test_parse_time(self):
        assert DateService.parse_time("07:30") == (7, 30)

    def test_parse_time_out_of_range(self):
        with pytest.raises(ValueError):
            DateService.parse_time("25:00")

    def test_time_reached(self):
        assert DateService.is_time_reached(datetime(2025, 6, 15, 7, 0), "07:00")
        assert not DateService.is_time_reached(datetime(2025, 6, 15, 6, 59), "07:00")

    def test_days_between_is_signed(self):
        assert DateService.days_between(date(2025, 6, 10), date(2025, 6, 15)) == 5
        assert DateService.days_between(date(2025, 6, 15), date(2025, 6, 10)) == -5

    def test_date_range(self):
        result = DateService.date_range(date(2025, 6, 30), 3)

        assert result == [date(2025, 6, 30), date(2025, 7, 1), date(2025, 7, 2)]

    def test_empty_date_range(self):
        assert DateService.date_range(date(2025, 6, 30), 0) == []
