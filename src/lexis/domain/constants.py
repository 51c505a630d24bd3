"""Centralized constants for the lexis scheduler.

All magic numbers and policy defaults live here so every layer
imports from a single source of truth.
"""

# ---------- SM-2 ----------
DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
PASSING_QUALITY = 3
MIN_QUALITY = 0
MAX_QUALITY = 5
EASE_DECIMALS = 2
FIRST_INTERVAL = 1  # days
SECOND_INTERVAL = 6  # days
LAPSE_INTERVAL = 1  # days

# ---------- Time ----------
SECONDS_PER_DAY = 86400

# ---------- Coarse rating ----------
COARSE_RATING_DAYS = {1: 1, 2: 3, 3: 7}

# ---------- Mastery ----------
# Repetitions needed to reach LEARNING, YOUNG, MATURE, PROFICIENT, MASTERED.
DEFAULT_MASTERY_THRESHOLDS = (1, 2, 3, 5, 8)
OUTCOME_WINDOW = 2
DEMOTION_STREAK = 2
MASTERY_REACTIVATION_DAYS = 90

# ---------- Pass/fail ----------
# Base interval (days) per mastery level, indexed by MasteryLevel value.
LEVEL_INTERVAL_DAYS = (1, 3, 7, 21, 60, 180)
