"""
Application constants.
Engine thresholds, record defaults and deployment paths.
"""

# Points engine
DAILY_POINTS_GOAL = 100  # Day counts as "reached" at this total
WEEKLY_BONUS_CAP = 200  # Max spendable bonus pool per week
GOOD_DAY_THRESHOLD = 80  # Below DAILY_POINTS_GOAL but still "good"
OVERALL_STREAK_WINDOW_DAYS = 90

# Activity defaults
DEFAULT_GOAL_POINTS = 10
DEFAULT_NEGATIVE_POINTS_PER_MINUTE = 0.5

# Breakdown sources
SOURCE_ACTIVITY = "activity"
SOURCE_TODO = "todo"

# Day achievement status
DAY_STATUS_EXCELLENT = "excellent"
DAY_STATUS_GOOD = "good"
DAY_STATUS_POOR = "poor"

# Storage
DEFAULT_DATABASE_URL = "sqlite:///./lifetracker.db"

# Logging
DEFAULT_LOG_DIRECTORY_PROD = "/var/log/lifetracker"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"

# HTTP
CORS_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8081",
]

# Auth
API_KEY_HEADER = "X-API-Key"
DEFAULT_API_KEY = "your-secret-key-change-me"
