"""
Lineup models for the match timeline engine.

This module contains the lineup entry and substitution records that the
lineup reconstructor replays.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..utils import to_seconds


@dataclass(frozen=True)
class MatchPlayer:
    """
    A lineup slot: the player currently filling it, the jersey number and
    the position. Substitutions swap the player and keep the slot.
    """
    player_id: str
    jersey_number: int
    position: str = ""

    def to_json(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "jersey_number": self.jersey_number,
            "position": self.position,
        }

    @staticmethod
    def from_json(data: Dict[str, Any]) -> "MatchPlayer":
        return MatchPlayer(
            player_id=str(data.get("player_id", data.get("playerId"))),
            jersey_number=int(data.get("jersey_number", data.get("jerseyNumber", 0))),
            position=data.get("position") or "",
        )


@dataclass(frozen=True)
class Substitution:
    """
    One player leaving the field for another.

    Attributes:
        id: Unique identifier, used to remove the substitution later
        minute: Match minute of the substitution
        second: Second within the minute
        player_out: Player leaving the field
        player_in: Player entering the field
        period_index: Period stamped when the substitution was recorded
    """
    id: str
    minute: int
    second: int
    player_out: str
    player_in: str
    period_index: Optional[int] = None

    @property
    def absolute_seconds(self) -> int:
        return to_seconds(self.minute, self.second)

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "minute": self.minute,
            "second": self.second,
            "player_out": self.player_out,
            "player_in": self.player_in,
            "period_index": self.period_index,
        }

    @staticmethod
    def from_json(data: Dict[str, Any]) -> "Substitution":
        period_index = data.get("period_index", data.get("periodIndex"))
        return Substitution(
            id=str(data["id"]),
            minute=int(data.get("minute", 0)),
            second=int(data.get("second") or 0),
            player_out=str(data.get("player_out", data.get("playerOut", data.get("playerOutId")))),
            player_in=str(data.get("player_in", data.get("playerIn", data.get("playerInId")))),
            period_index=int(period_index) if period_index is not None else None,
        )
