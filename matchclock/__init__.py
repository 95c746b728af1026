"""
Matchday Timeline

The match timeline engine of a sports-club roster tool: it tracks playing
time across regular, extra and interval periods, rebuilds the on-field
lineup from the substitution history, attributes every event to the period
it happened in, and keeps the scoreboard consistent with the event log.

The engine is a set of pure commands over an immutable match state; a Flask
JSON API exposes them to the match console.
"""
from .models import MatchState, MatchPlayer, Substitution, MatchEvent, Period, PeriodType
from .services import (
    apply_command, CommandResult, MatchCommandManager, PersistenceService, ReportService
)
from .ui import create_app, run_web_app
from .utils import fmt_mmss, now_ts, APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "MatchState", "MatchPlayer", "Substitution", "MatchEvent", "Period", "PeriodType",
    "apply_command", "CommandResult", "MatchCommandManager", "PersistenceService",
    "ReportService", "create_app", "run_web_app", "fmt_mmss", "now_ts", "APP_TITLE"
]
