from __future__ import annotations

"""Настройки Foc.Us: константы приложения и переопределения через окружение."""

import os
from pathlib import Path


# Paths
FOCUSS_HOME = Path(os.environ.get("FOCUSS_HOME", Path.home() / ".focuss"))
DB_PATH = Path(os.environ.get("FOCUSS_DB", FOCUSS_HOME / "focuss.db"))
LOG_LEVEL = os.environ.get("FOCUSS_LOG_LEVEL", "INFO").upper()

# Storage keys
USER_KEY = "focuss_user"
SESSIONS_KEY = "focuss_sessions"

# Timer
TICK_INTERVAL_MS = int(os.environ.get("FOCUSS_TICK_INTERVAL_MS", "1000"))
DEFAULT_SESSION_MINUTES = 25
QUICK_TEST_MINUTES = 1
PRESET_MINUTES = (15, 20, 25, 30)

# Profile
DEFAULT_DAILY_GOAL_MINUTES = 60
COMPLETION_BONUS = 10

# Statistics
STATS_WINDOW_DAYS = 7

# Adaptive engine
ADAPTIVE_WINDOW = 7
ADAPTIVE_MIN_SESSIONS = 3
ADAPTIVE_RATE_THRESHOLD = 0.4
ADAPTIVE_STEP_MINUTES = 5
ADAPTIVE_FLOOR_MINUTES = 10


def ensure_home() -> Path:
    """Создает домашнюю директорию приложения, если ее нет."""
    FOCUSS_HOME.mkdir(parents=True, exist_ok=True)
    return FOCUSS_HOME
