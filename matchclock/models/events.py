"""
Match event model for the match timeline engine.

This module contains the closed set of event kinds recorded during a match
and the event record itself.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..utils import to_seconds


class EventType(Enum):
    """Event kinds recorded during a match."""
    GOAL = "goal"
    YELLOW_CARD = "yellow-card"
    SECOND_YELLOW_CARD = "second-yellow-card"
    RED_CARD = "red-card"
    BLUE_CARD = "blue-card"
    EXPULSION = "expulsion"
    WARNING = "warning"
    FOUL = "foul"
    CORNER = "corner"
    OFFSIDE = "offside"
    FREE_KICK = "free-kick"
    PENALTY = "penalty"
    THROW_IN = "throw-in"
    INJURY = "injury"

    @property
    def is_card(self) -> bool:
        return self in CARD_TYPES

    @property
    def is_caution(self) -> bool:
        return self in (EventType.YELLOW_CARD, EventType.SECOND_YELLOW_CARD)

    @property
    def is_sending_off(self) -> bool:
        return self in (EventType.RED_CARD, EventType.EXPULSION)


CARD_TYPES = frozenset({
    EventType.YELLOW_CARD,
    EventType.SECOND_YELLOW_CARD,
    EventType.RED_CARD,
    EventType.BLUE_CARD,
})


class TeamSide(Enum):
    """Which team an event belongs to."""
    OWN = "own"
    OPPONENT = "opponent"

    @property
    def other(self) -> "TeamSide":
        return TeamSide.OPPONENT if self is TeamSide.OWN else TeamSide.OWN


@dataclass(frozen=True)
class MatchEvent:
    """
    A timestamped occurrence attributed to a player, a side and a period.

    Opponent players are identified by their jersey number rendered as a
    string, since the opponent roster is not known by name.
    """
    id: str
    type: EventType
    minute: int
    second: int
    player_id: str
    description: str = ""
    team_type: TeamSide = TeamSide.OWN
    period_index: Optional[int] = None

    @property
    def absolute_seconds(self) -> int:
        return to_seconds(self.minute, self.second)

    @property
    def is_goal(self) -> bool:
        return self.type is EventType.GOAL

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "minute": self.minute,
            "second": self.second,
            "player_id": self.player_id,
            "description": self.description,
            "team_type": self.team_type.value,
            "period_index": self.period_index,
        }

    @staticmethod
    def from_json(data: Dict[str, Any]) -> "MatchEvent":
        period_index = data.get("period_index", data.get("periodIndex"))
        team_type = data.get("team_type", data.get("teamType")) or TeamSide.OWN.value
        return MatchEvent(
            id=str(data["id"]),
            type=EventType(data["type"]),
            minute=int(data.get("minute", 0)),
            second=int(data.get("second") or 0),
            player_id=str(data.get("player_id", data.get("playerId", ""))),
            description=data.get("description") or "",
            team_type=TeamSide(str(team_type).lower()),
            period_index=int(period_index) if period_index is not None else None,
        )
