"""
Custom exceptions for the habit forecast application.
Provides specific exception types for the persistence and HTTP layers.
The prediction engine itself never raises for well-formed input.
"""


class HabitForecastException(Exception):
    """Base exception for habit forecast application"""
    pass


class HabitNotFoundException(HabitForecastException):
    """Raised when a habit is not found"""
    def __init__(self, habit_id: int):
        self.habit_id = habit_id
        super().__init__(f"Habit with ID {habit_id} not found")


class CompletionNotFoundException(HabitForecastException):
    """Raised when a completion record is not found"""
    def __init__(self, completion_id: int):
        self.completion_id = completion_id
        super().__init__(f"Completion with ID {completion_id} not found")


class MoodEntryNotFoundException(HabitForecastException):
    """Raised when a mood entry is not found"""
    def __init__(self, mood_id: int):
        self.mood_id = mood_id
        super().__init__(f"Mood entry with ID {mood_id} not found")


class InvalidDateFormatException(HabitForecastException):
    """Raised when a date string cannot be parsed"""
    def __init__(self, date_str: str):
        self.date_str = date_str
        super().__init__(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")


class DatabaseException(HabitForecastException):
    """Raised when database operations fail"""
    def __init__(self, operation: str, details: str):
        self.operation = operation
        self.details = details
        super().__init__(f"Database {operation} failed: {details}")


class ValidationException(HabitForecastException):
    """Raised when data validation fails"""
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error for {field}: {message}")
