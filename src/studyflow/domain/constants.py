"""Centralized constants for studyflow.

All scheduling and timing defaults live here so every layer imports from a
single source of truth.
"""

# ---------- SM-2 ----------
DEFAULT_INTERVAL = 1
DEFAULT_REPETITIONS = 0
DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
SECOND_INTERVAL = 6  # days, after the second consecutive correct review
QUALITY_CORRECT = 5
QUALITY_INCORRECT = 2

# ---------- Pomodoro ----------
FOCUS_DURATION_SECONDS = 25 * 60
BREAK_DURATION_SECONDS = 5 * 60

# ---------- Revision mode ----------
REVISION_MIN_SECONDS = 30
REVISION_MAX_SECONDS = 60 * 60
REVISION_DEFAULT_SECONDS = 30
REVISION_PRESETS = (60, 120, 300, 600)

# ---------- Tick driver ----------
TICK_INTERVAL = 1.0  # seconds
