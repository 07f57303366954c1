"""Centralized constants for the Cadence scheduler.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Quality scale ----------
MIN_SCORE = 0.0
MAX_SCORE = 5.0
PASSING_SCORE = 3.0
MIN_CONFIDENCE = 1
MAX_CONFIDENCE = 5

# ---------- Response time ----------
OPTIMAL_RESPONSE_MS = 3000
MAX_RESPONSE_MS = 30000
SLOW_RESPONSE_FACTOR = 0.5

# ---------- Ease factor ----------
MIN_EASE_FACTOR = 1.3
MAX_EASE_FACTOR = 2.5
INITIAL_EASE_FACTOR = 2.5

# ---------- Adaptive difficulty ----------
MIN_DIFFICULTY = 1.0
MAX_DIFFICULTY = 10.0
INITIAL_DIFFICULTY = 5.0
DIFFICULTY_STEP = 0.1
EASY_SCORE_THRESHOLD = 4.5
EASY_MIN_REPETITIONS = 3

# ---------- Averages / stability ----------
QUALITY_RECENCY_WEIGHT = 0.3
STABILITY_REPETITION_CAP = 10
STABILITY_WEIGHT_REPETITIONS = 0.4
STABILITY_WEIGHT_QUALITY = 0.4
STABILITY_WEIGHT_EASE = 0.2
MIN_STABILITY = 0.0
MAX_STABILITY = 1.0

# ---------- Intervals ----------
FAILED_INTERVAL = 1
FIRST_SUCCESS_INTERVAL = 6
MAX_INTERVAL = 365
STABILITY_INTERVAL_BONUS = 0.3
DIFFICULTY_INTERVAL_STEP = 0.1

# ---------- Load balancing ----------
DEFAULT_MAX_REVIEWS_PER_DAY = 50
DEFAULT_MAX_DEFER_DAYS = 365
PRIORITY_STABILITY_OFFSET = 0.1

# ---------- Forecasting ----------
DEFAULT_FORECAST_DAYS = 30
DEFAULT_UPCOMING_DAYS = 7
MIN_HALF_LIFE = 1.0

# ---------- Legacy quality mapping ----------
LEGACY_RESPONSE_MS = 5000

# ---------- Learning insights ----------
MASTERY_REPETITIONS = 3
MAX_STREAK_DAYS = 365
DEFAULT_REVIEW_HOUR = 9
MAX_REVIEW_HOUR_SHIFT = 3
MIN_REVIEWS_FOR_PATTERN = 10
