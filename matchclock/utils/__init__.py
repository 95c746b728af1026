"""
Utilities package for the match timeline engine.

This package contains utility functions and constants used throughout the
application.
"""
from .time_utils import fmt_mmss, now_ts, to_minute_second, to_seconds
from .constants import (
    APP_TITLE, DEFAULT_HOST, DEFAULT_PORT, DEFAULT_LOG_LEVEL, AUTOSAVE_DIR,
    MAX_COMMAND_HISTORY, REGULAR_PERIOD_LABEL, EXTRA_PERIOD_LABEL, INTERVAL_LABEL
)

__all__ = [
    "fmt_mmss", "now_ts", "to_minute_second", "to_seconds", "APP_TITLE",
    "DEFAULT_HOST", "DEFAULT_PORT", "DEFAULT_LOG_LEVEL", "AUTOSAVE_DIR",
    "MAX_COMMAND_HISTORY", "REGULAR_PERIOD_LABEL", "EXTRA_PERIOD_LABEL",
    "INTERVAL_LABEL"
]
