"""
Models package for the match timeline engine.

This package contains the core data models used throughout the application.
"""
from .errors import ErrorKind, ValidationError, MatchCommandError
from .period import Period, PeriodType
from .lineup import MatchPlayer, Substitution
from .events import EventType, TeamSide, MatchEvent, CARD_TYPES
from .match_state import MatchState, MatchStatus, HomeAway
from .match_report import MatchReport, PeriodReport, SideStatistics, PlayerMatchStats

__all__ = [
    "ErrorKind", "ValidationError", "MatchCommandError",
    "Period", "PeriodType", "MatchPlayer", "Substitution",
    "EventType", "TeamSide", "MatchEvent", "CARD_TYPES",
    "MatchState", "MatchStatus", "HomeAway",
    "MatchReport", "PeriodReport", "SideStatistics", "PlayerMatchStats"
]
