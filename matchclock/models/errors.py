"""
Typed validation failures returned by the match timeline engine.

Failures are values, not exceptions: every command returns either a new
state or a :class:`ValidationError`, and the prior state stays authoritative
when a command is rejected.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Enumeration of the ways a command can be rejected."""
    PLAYER_NOT_ON_FIELD = "player_not_on_field"
    PLAYER_ALREADY_ON_FIELD = "player_already_on_field"
    DUPLICATE_JERSEY_NUMBER = "duplicate_jersey_number"
    DUPLICATE_PLAYER = "duplicate_player"
    INVALID_PERIOD_REMOVAL = "invalid_period_removal"
    NO_ACTIVE_PERIOD = "no_active_period"
    MATCH_FINISHED = "match_finished"
    INTERVAL_IN_PROGRESS = "interval_in_progress"
    INVALID_CONTINUATION = "invalid_continuation"
    UNKNOWN_SUBSTITUTION = "unknown_substitution"
    UNKNOWN_EVENT = "unknown_event"
    INVALID_MATCH_TIME = "invalid_match_time"


@dataclass(frozen=True)
class ValidationError:
    """A rejected command: what went wrong and a message for the operator."""
    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message

    def to_json(self) -> dict:
        return {"kind": self.kind.value, "message": self.message}


class MatchCommandError(Exception):
    """Raised by ``CommandResult.unwrap()`` for callers that prefer exceptions."""

    def __init__(self, error: ValidationError):
        super().__init__(error.message)
        self.error = error

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind


def player_not_on_field(player_id: str) -> ValidationError:
    return ValidationError(
        ErrorKind.PLAYER_NOT_ON_FIELD, f"Player {player_id} is not on the field"
    )


def player_already_on_field(player_id: str) -> ValidationError:
    return ValidationError(
        ErrorKind.PLAYER_ALREADY_ON_FIELD, f"Player {player_id} is already on the field"
    )


def no_active_period() -> ValidationError:
    return ValidationError(ErrorKind.NO_ACTIVE_PERIOD, "The match has not started yet")


def match_finished() -> ValidationError:
    return ValidationError(
        ErrorKind.MATCH_FINISHED, "The match is finished; continue the last period first"
    )


def invalid_match_time(minute: Optional[int], second: Optional[int]) -> ValidationError:
    return ValidationError(
        ErrorKind.INVALID_MATCH_TIME,
        f"Invalid match time {minute}:{second}; minute must be >= 0 and second 0-59",
    )
