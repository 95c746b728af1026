"""
Score ledger for the match timeline engine.

The score is a view of the event log. The ledger keeps incrementally
maintained counters next to the log for cheap reads, and can recount the log
from scratch at any time; the recount is authoritative whenever the two
disagree.
"""
import logging
import uuid
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple

from ..models import EventType, HomeAway, MatchEvent, MatchState, TeamSide
from ..utils.constants import OPPONENT_GOAL_DESCRIPTION, OWN_GOAL_DESCRIPTION

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Score:
    """Goals per side, in own/opponent terms."""
    own: int = 0
    opponent: int = 0

    def get(self, side: TeamSide) -> int:
        return self.own if side is TeamSide.OWN else self.opponent

    def home_away(self, home_away: HomeAway) -> Tuple[int, int]:
        """``(home_score, away_score)`` for the side our team plays on."""
        if home_away is HomeAway.HOME:
            return self.own, self.opponent
        return self.opponent, self.own

    @classmethod
    def from_home_away(cls, home: int, away: int, home_away: HomeAway) -> "Score":
        if home_away is HomeAway.HOME:
            return cls(own=home, opponent=away)
        return cls(own=away, opponent=home)


def count_goals(events: Iterable[MatchEvent]) -> Score:
    """Recount goals per side from the event log."""
    own = opponent = 0
    for event in events:
        if not event.is_goal:
            continue
        if event.team_type is TeamSide.OWN:
            own += 1
        else:
            opponent += 1
    return Score(own, opponent)


@dataclass(frozen=True)
class ScoreLedger:
    """
    Event log plus the incrementally maintained scoreboard.

    Attributes:
        events: Event log in recording order
        score: Counters maintained by add/remove operations
    """
    events: Tuple[MatchEvent, ...] = ()
    score: Score = Score()

    @classmethod
    def from_state(cls, state: MatchState) -> "ScoreLedger":
        return cls(
            events=state.events,
            score=Score.from_home_away(state.home_score, state.away_score, state.home_away),
        )

    def apply_to(self, state: MatchState) -> MatchState:
        home, away = self.score.home_away(state.home_away)
        return replace(state, events=self.events, home_score=home, away_score=away)

    def add_goal(
        self,
        side: TeamSide,
        scorer_id: str,
        minute: int,
        second: int = 0,
        *,
        event_id: Optional[str] = None,
        period_index: Optional[int] = None,
        description: Optional[str] = None,
    ) -> "ScoreLedger":
        """Append a goal event for ``side`` and bump that side's counter."""
        if description is None:
            description = OWN_GOAL_DESCRIPTION if side is TeamSide.OWN else OPPONENT_GOAL_DESCRIPTION
        goal = MatchEvent(
            id=event_id or uuid.uuid4().hex,
            type=EventType.GOAL,
            minute=int(minute),
            second=int(second),
            player_id=str(scorer_id),
            description=description,
            team_type=side,
            period_index=period_index,
        )
        return self._with(self.events + (goal,), self._bump(side, 1))

    def latest_goal(self, side: TeamSide) -> Optional[MatchEvent]:
        """Most recent goal for ``side``: larger minute first, then larger second."""
        goals = [e for e in self.events if e.is_goal and e.team_type is side]
        if not goals:
            return None
        return max(goals, key=lambda e: (e.minute, e.second))

    def remove_last_goal(self, side: TeamSide) -> "ScoreLedger":
        """
        Remove the latest goal for ``side``.

        A side already at zero is left alone; callers guard the button, so
        this is not an error.
        """
        if self.score.get(side) == 0:
            return self
        goal = self.latest_goal(side)
        if goal is None:
            logger.warning("Score for %s is %d but no goal event exists", side.value, self.score.get(side))
            return self._with(self.events, self._bump(side, -1))
        remaining = tuple(e for e in self.events if e.id != goal.id)
        return self._with(remaining, self._bump(side, -1))

    def remove_event(self, event_id: str) -> Optional["ScoreLedger"]:
        """
        Generic removal path for any event, goals included.

        Returns:
            The updated ledger, or None when no event has that id
        """
        event = next((e for e in self.events if e.id == event_id), None)
        if event is None:
            return None
        remaining = tuple(e for e in self.events if e.id != event_id)
        score = self._bump(event.team_type, -1) if event.is_goal else self.score
        return self._with(remaining, score)

    def add_event(self, event: MatchEvent) -> "ScoreLedger":
        """Append any event; goals also move the scoreboard."""
        score = self._bump(event.team_type, 1) if event.is_goal else self.score
        return self._with(self.events + (event,), score)

    def recompute(self) -> Score:
        return count_goals(self.events)

    def is_consistent(self) -> bool:
        return self.recompute() == self.score

    def reconciled(self) -> "ScoreLedger":
        """Ledger whose counters are the recount of the log."""
        recount = self.recompute()
        if recount != self.score:
            logger.warning(
                "Scoreboard %d-%d disagrees with event log %d-%d; using the log",
                self.score.own, self.score.opponent, recount.own, recount.opponent,
            )
            return self._with(self.events, recount)
        return self

    def _bump(self, side: TeamSide, delta: int) -> Score:
        if side is TeamSide.OWN:
            return replace(self.score, own=max(0, self.score.own + delta))
        return replace(self.score, opponent=max(0, self.score.opponent + delta))

    def _with(self, events: Tuple[MatchEvent, ...], score: Score) -> "ScoreLedger":
        return ScoreLedger(events=events, score=score)
