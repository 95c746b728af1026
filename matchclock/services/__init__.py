"""
Services package for the match timeline engine.

This package contains the engine components (clock, period sequence, lineup
replay, event mapping, score ledger), the command layer composing them, and
the persistence and reporting services built on top.
"""
from .period_clock import PeriodClock
from .period_sequence import PeriodSequence, period_label
from .lineup_service import reconstruct, validate_lineup, derive_initial_lineup, replay_order
from .event_mapper import (
    PeriodWindow, period_windows, map_event_to_period, resolve_period_index, group_by_period
)
from .score_ledger import Score, ScoreLedger, count_goals
from .match_commands import (
    Command, CommandResult, MatchCommandManager, apply_command, apply_commands,
    Start, Resume, Pause, AddPeriod, StartInterval, RemoveLastPeriod, Finish,
    ContinueLastPeriod, SetInitialLineup, ApplySubstitution, RemoveSubstitution,
    AddGoal, RemoveGoal, AddEvent, RemoveEvent
)
from .persistence_service import PersistenceService
from .report_service import ReportService, MatchReportExporter, compute_player_stats

__all__ = [
    "PeriodClock", "PeriodSequence", "period_label",
    "reconstruct", "validate_lineup", "derive_initial_lineup", "replay_order",
    "PeriodWindow", "period_windows", "map_event_to_period", "resolve_period_index",
    "group_by_period", "Score", "ScoreLedger", "count_goals",
    "Command", "CommandResult", "MatchCommandManager", "apply_command", "apply_commands",
    "Start", "Resume", "Pause", "AddPeriod", "StartInterval", "RemoveLastPeriod",
    "Finish", "ContinueLastPeriod", "SetInitialLineup", "ApplySubstitution",
    "RemoveSubstitution", "AddGoal", "RemoveGoal", "AddEvent", "RemoveEvent",
    "PersistenceService", "ReportService", "MatchReportExporter", "compute_player_stats"
]
