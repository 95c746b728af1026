"""
Constants for the match timeline engine.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Matchday Timeline"

# Web server defaults (overridable through the environment in run_web.py)
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7122
DEFAULT_LOG_LEVEL = "INFO"

# Persistence
AUTOSAVE_DIR = "autosave"
AUTOSAVE_PREFIX = "match_autosave"
RECENT_SAVES_LIMIT = 10

# Undo/redo depth kept by the command manager
MAX_COMMAND_HISTORY = 50

# Period labels, numbered per period type ("{n}" is 1-based)
REGULAR_PERIOD_LABEL = "{n}° Tempo"
EXTRA_PERIOD_LABEL = "{n}° Supplementare"
INTERVAL_LABEL = "Intervallo"

# Description suffixes written on goal events
OWN_GOAL_DESCRIPTION = "Goal (nostro)"
OPPONENT_GOAL_DESCRIPTION = "Goal avversario"
