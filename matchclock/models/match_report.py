"""Dataclasses representing post-match reports for the timeline engine."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .events import MatchEvent
from .lineup import MatchPlayer, Substitution


@dataclass
class PeriodReport:
    """Events and substitutions attributed to one period."""

    index: int
    label: str
    period_type: str
    duration_seconds: float
    start_seconds: float
    end_seconds: float
    duration_label: str
    events: List[MatchEvent] = field(default_factory=list)
    substitutions: List[Substitution] = field(default_factory=list)


@dataclass
class SideStatistics:
    """Per-side counters shown in the match statistics panel."""

    goals: int = 0
    cards: int = 0
    substitutions: int = 0
    fouls: int = 0
    corners: int = 0


@dataclass
class MatchReport:
    """Snapshot of a match grouped by period."""

    generated_ts: float
    match_id: str
    opponent: str
    home_away: str
    status: str
    home_score: int
    away_score: int
    total_seconds: float
    starting_lineup: List[MatchPlayer] = field(default_factory=list)
    final_lineup: List[MatchPlayer] = field(default_factory=list)
    periods: List[PeriodReport] = field(default_factory=list)
    unassigned_events: List[MatchEvent] = field(default_factory=list)
    own: SideStatistics = field(default_factory=SideStatistics)
    opponent_stats: SideStatistics = field(default_factory=SideStatistics)
    score_consistent: bool = True


@dataclass
class PlayerMatchStats:
    """Aggregated per-player statistics over finished matches."""

    player_id: str
    matches_played: int = 0
    goals: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    last_jersey_number: Optional[int] = None
    events_by_type: Dict[str, int] = field(default_factory=dict)
