"""
MatchState model for the match timeline engine.

This module contains the MatchState aggregate which represents the complete,
persisted state of one match: its periods, lineups, substitution history,
event log, score and clock anchor.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .events import MatchEvent, TeamSide
from .lineup import MatchPlayer, Substitution
from .period import Period


class HomeAway(Enum):
    """Whether our team plays at home or away."""
    HOME = "home"
    AWAY = "away"


class MatchStatus(Enum):
    """Derived lifecycle status; never stored."""
    SCHEDULED = "scheduled"
    RUNNING = "running"
    PAUSED = "paused"
    INTERVAL = "interval"
    FINISHED = "finished"


@dataclass(frozen=True)
class MatchState:
    """
    Represents the complete state of a match.

    Every engine transition returns a new instance; nothing mutates in place.

    Attributes:
        match_id: Identifier of the match in the club's store
        opponent: Opponent team name
        home_away: Whether our team plays home or away
        periods: Ordered periods; the last one is current
        initial_lineup: Starting lineup, the root of every lineup replay
        lineup: Current on-field lineup (derived from initial_lineup and substitutions)
        opponent_lineup: Opponent jersey numbers
        substitutions: Substitution history in insertion order
        events: Event log in insertion order
        home_score: Goals of the home team
        away_score: Goals of the away team
        is_running: Whether the current period's clock is running
        last_timestamp: Wall-clock anchor of the running clock (epoch seconds)
        is_finished: Whether the match has been ended
    """
    match_id: str = ""
    opponent: str = ""
    home_away: HomeAway = HomeAway.HOME
    periods: Tuple[Period, ...] = ()
    initial_lineup: Tuple[MatchPlayer, ...] = ()
    lineup: Tuple[MatchPlayer, ...] = ()
    opponent_lineup: Tuple[int, ...] = ()
    substitutions: Tuple[Substitution, ...] = ()
    events: Tuple[MatchEvent, ...] = ()
    home_score: int = 0
    away_score: int = 0
    is_running: bool = False
    last_timestamp: Optional[float] = None
    is_finished: bool = False

    @property
    def has_started(self) -> bool:
        return bool(self.periods)

    @property
    def current_period_index(self) -> Optional[int]:
        return len(self.periods) - 1 if self.periods else None

    @property
    def current_period(self) -> Optional[Period]:
        return self.periods[-1] if self.periods else None

    @property
    def in_interval(self) -> bool:
        current = self.current_period
        return current is not None and current.is_interval

    @property
    def status(self) -> MatchStatus:
        if not self.periods:
            return MatchStatus.SCHEDULED
        if self.is_finished:
            return MatchStatus.FINISHED
        if self.in_interval:
            return MatchStatus.INTERVAL
        return MatchStatus.RUNNING if self.is_running else MatchStatus.PAUSED

    def score_for(self, side: TeamSide) -> int:
        """Score of our team or the opponent, whichever side plays home."""
        own_is_home = self.home_away is HomeAway.HOME
        if (side is TeamSide.OWN) == own_is_home:
            return self.home_score
        return self.away_score

    def find_substitution(self, substitution_id: str) -> Optional[Substitution]:
        return next((s for s in self.substitutions if s.id == substitution_id), None)

    def find_event(self, event_id: str) -> Optional[MatchEvent]:
        return next((e for e in self.events if e.id == event_id), None)

    def to_json(self) -> dict:
        """
        Convert MatchState to JSON-serializable dictionary.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        return {
            "match_id": self.match_id,
            "opponent": self.opponent,
            "home_away": self.home_away.value,
            "periods": [p.to_json() for p in self.periods],
            "initial_lineup": [p.to_json() for p in self.initial_lineup],
            "lineup": [p.to_json() for p in self.lineup],
            "opponent_lineup": list(self.opponent_lineup),
            "substitutions": [s.to_json() for s in self.substitutions],
            "events": [e.to_json() for e in self.events],
            "home_score": self.home_score,
            "away_score": self.away_score,
            "is_running": self.is_running,
            "last_timestamp": self.last_timestamp,
            "is_finished": self.is_finished,
        }

    @staticmethod
    def from_json(data: dict) -> "MatchState":
        """
        Create MatchState from JSON dictionary.

        Accepts both this package's snake_case keys and the camelCase keys
        written by the club's REST backend.

        Args:
            data: Dictionary with match state data

        Returns:
            New MatchState instance
        """
        # Import here to avoid circular dependency
        from ..services.lineup_service import derive_initial_lineup

        def _get(key: str, camel: str, default: Any = None) -> Any:
            value = data.get(key)
            if value is None:
                value = data.get(camel, default)
            return default if value is None else value

        periods = tuple(Period.from_json(p) for p in _get("periods", "periods", []))
        lineup = tuple(MatchPlayer.from_json(p) for p in _get("lineup", "lineups", []))
        substitutions = tuple(
            Substitution.from_json(s) for s in _get("substitutions", "substitutions", [])
        )
        raw_initial = _get("initial_lineup", "initialLineup", None)
        if raw_initial is not None:
            initial_lineup = tuple(MatchPlayer.from_json(p) for p in raw_initial)
        else:
            # Older saves only kept the current lineup
            initial_lineup = derive_initial_lineup(lineup, substitutions)

        opponent_lineup = tuple(
            int(o["jerseyNumber"]) if isinstance(o, dict) else int(o)
            for o in _get("opponent_lineup", "opponentLineup", [])
        )
        status = str(data.get("status", "")).lower()
        last_timestamp = _get("last_timestamp", "lastTimestamp", None)
        if last_timestamp is not None:
            last_timestamp = float(last_timestamp)
            # The REST backend stores milliseconds
            if "lastTimestamp" in data and "last_timestamp" not in data:
                last_timestamp /= 1000.0

        return MatchState(
            match_id=str(_get("match_id", "id", "")),
            opponent=_get("opponent", "opponent", ""),
            home_away=HomeAway(_get("home_away", "homeAway", HomeAway.HOME.value)),
            periods=periods,
            initial_lineup=initial_lineup,
            lineup=lineup,
            opponent_lineup=opponent_lineup,
            substitutions=substitutions,
            events=tuple(MatchEvent.from_json(e) for e in _get("events", "events", [])),
            home_score=int(_get("home_score", "homeScore", 0)),
            away_score=int(_get("away_score", "awayScore", 0)),
            is_running=bool(_get("is_running", "isRunning", False)),
            last_timestamp=last_timestamp,
            is_finished=bool(_get("is_finished", "isFinished", status == "finished")),
        )
