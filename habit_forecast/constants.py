"""
Application constants.
Engine thresholds below are empirically tuned values, kept together so they can be adjusted in one place.
"""

# Logging
DEFAULT_LOG_DIRECTORY_PROD = "/var/log/habit_forecast"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"

# Database
DEFAULT_DATABASE_URL = "sqlite:///./habit_forecast.db"

# Settings defaults
DEFAULT_DAY_START_TIME = "06:00"
DEFAULT_RISK_DIGEST_TIME = "07:00"

# CORS
CORS_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
]

# Habit frequency modes
FREQUENCY_DAILY = "daily"
FREQUENCY_WEEKLY = "weekly"
FREQUENCY_INTERVAL = "interval"

# Weekdays, Sunday first (index 0)
DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
ALL_WEEKDAYS = [0, 1, 2, 3, 4, 5, 6]

# Trend / risk labels
TREND_IMPROVING = "improving"
TREND_DECLINING = "declining"
TREND_STABLE = "stable"

RISK_LEVEL_LOW = "low"
RISK_LEVEL_MEDIUM = "medium"
RISK_LEVEL_HIGH = "high"

RISK_STREAK_LENGTH = "streak_length"
RISK_RECENT_PERFORMANCE = "recent_performance"
RISK_WEEKLY_PATTERN = "weekly_pattern"
RISK_MOOD_CORRELATION = "mood_correlation"

# === Pattern analysis ===
MIN_RECORDS_FOR_PATTERNS = 7
NEUTRAL_RATE = 0.5

BASE_RATE_MIN = 0.1
BASE_RATE_MAX = 0.9

TREND_SHORT_WINDOW = 7
TREND_LONG_WINDOW = 30
TREND_SHORT_WEIGHT = 0.7
TREND_LONG_WEIGHT = 0.3
TREND_FACTOR_MIN = 0.5
TREND_FACTOR_MAX = 1.5

MIN_MOOD_PAIRS = 5
MOOD_STRESS_INVERT = 6

STREAK_LOG_FACTOR = 0.05
STREAK_FACTOR_MAX = 1.3

RECENCY_DECAY_RATE = 0.1
RECENCY_FACTOR_MIN = 0.3
RECENCY_FACTOR_MAX = 1.0

# === Projection ===
DEFAULT_FORECAST_DAYS = 90
MAX_FORECAST_DAYS = 365
MOOD_ADJUSTMENT_WEIGHT = 0.1
CONFIDENCE_DECAY_RATE = 0.02
CONFIDENCE_MIN = 0.3
CONFIDENCE_MAX = 0.95
PROBABILITY_MIN = 0.05
PROBABILITY_MAX = 0.95
PREDICTED_SUCCESS_THRESHOLD = 0.5

# === Risk detection ===
RISK_RECENT_WINDOW_DAYS = 7
RISK_RECENT_RATE_THRESHOLD = 0.4
RISK_RECENT_RATE_BASELINE = 0.6
RISK_STREAK_THRESHOLD = 30
RISK_STREAK_SCALE = 100
RISK_STREAK_IMPACT_MAX = 0.3
RISK_PATTERN_STDDEV_THRESHOLD = 0.3
RISK_PATTERN_IMPACT_MAX = 0.5
RISK_MOOD_THRESHOLD = -0.3
RISK_MOOD_IMPACT_WEIGHT = 0.5

# === Goals ===
GOAL_STREAK_WINDOWS = (30, 60)
GOAL_COMPLETION_TARGET = 80
GOAL_COMPLETION_WINDOW = 90
GOAL_COMPLETION_RATIO = 0.8
GOAL_COMPLETION_BOOST = 1.1
GOAL_COMPLETION_DISCOUNT = 0.8
GOAL_PROBABILITY_MAX = 0.95
WEEKS_PER_MONTH = 4.33
MONTHLY_GOAL_BOOST = 1.05
MONTHLY_GOAL_CONFIDENCE = 0.8
MONTHLY_GOAL_DAYS = 30

# === Schedule optimization ===
OPTIMAL_DAYS_MAX = 3
LOW_BASE_RATE_THRESHOLD = 0.4
POOR_WEEKDAY_THRESHOLD = 0.3
LOAD_IMBALANCE_THRESHOLD = 2
MAX_RECOMMENDATIONS = 5

# === Comprehensive prediction ===
TREND_WINDOW_DAYS = 14
TREND_CHANGE_THRESHOLD = 0.05
RISK_LEVEL_LOW_MAX = 0.3
RISK_LEVEL_MEDIUM_MAX = 0.6
NEXT_RISK_PROBABILITY = 0.4
MAX_RISK_RECOMMENDATIONS = 2
WEEKDAY_GAP_THRESHOLD = 0.3

# === Analytics ===
ANALYTICS_WINDOW_DAYS = 30
ANALYTICS_WEEK_DAYS = 7
OPTIMAL_LOAD_OFFSET = 2
BEST_DAYS_COUNT = 3
WORST_DAYS_COUNT = 2
