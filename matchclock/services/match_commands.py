"""
Command layer for the match timeline engine.

Every operator action is a command object applied to an immutable
:class:`MatchState`: ``apply_command(state, command, now)`` returns a
:class:`CommandResult` holding either the new state or a typed validation
error together with the untouched prior state. All validation runs before a
new state is built, so a rejected command never leaves partial changes.

The engine assumes a single writer per match. Nothing here locks; callers
that share a match between writers must serialize commands themselves.
"""
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple, Union

from ..models import (
    EventType, MatchEvent, MatchPlayer, MatchState, PeriodType, Substitution, TeamSide
)
from ..models.errors import (
    ErrorKind, MatchCommandError, ValidationError, invalid_match_time,
    match_finished, no_active_period, player_not_on_field
)
from ..utils import MAX_COMMAND_HISTORY, now_ts, to_minute_second, to_seconds
from .event_mapper import map_event_to_period
from .lineup_service import is_on_field, reconstruct, validate_lineup
from .period_sequence import PeriodSequence
from .score_ledger import ScoreLedger

logger = logging.getLogger(__name__)

Outcome = Union[MatchState, ValidationError]


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command: the state to keep and the error, if any."""
    state: MatchState
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> MatchState:
        """Return the new state or raise :class:`MatchCommandError`."""
        if self.error is not None:
            raise MatchCommandError(self.error)
        return self.state


class Command(ABC):
    """Abstract base class for all match commands - Command pattern."""

    # Only the recovery action may run on a finished match
    allowed_when_finished = False

    @abstractmethod
    def apply(self, state: MatchState, now: float) -> Outcome:
        """
        Compute the state after this command.

        Returns:
            The new state, or the validation error that rejects the command
        """

    @property
    @abstractmethod
    def description(self) -> str:
        """Get human-readable description of the command."""


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------
def _sequence_outcome(
    state: MatchState, outcome: Union[PeriodSequence, ValidationError]
) -> Outcome:
    if isinstance(outcome, ValidationError):
        return outcome
    return outcome.apply_to(state)


def _live_guard(
    state: MatchState, minute: Optional[int], second: Optional[int] = None
) -> Optional[ValidationError]:
    """Events need a started match and a valid stamp; live stamps cannot land in an interval."""
    if not state.has_started:
        return no_active_period()
    if (minute is not None and minute < 0) or (second is not None and not 0 <= second < 60):
        return invalid_match_time(minute, second)
    if minute is None and state.in_interval:
        return ValidationError(
            ErrorKind.INTERVAL_IN_PROGRESS, "No events can be recorded during an interval"
        )
    return None


def _stamp(
    state: MatchState, now: float, minute: Optional[int], second: Optional[int]
) -> Tuple[int, int, Optional[int]]:
    """
    Match time and period for a new event or substitution.

    Without an explicit time the item is stamped with the live match clock
    and the current period; an explicit time is mapped structurally.
    """
    sequence = PeriodSequence.from_state(state)
    if minute is None:
        m, s = to_minute_second(sequence.total_elapsed(now))
        return m, s, sequence.current_index
    sec = int(second or 0)
    t = to_seconds(minute, sec)
    return int(minute), sec, map_event_to_period(sequence.live_periods(now), t)


def _ledger_outcome(state: MatchState, ledger: ScoreLedger) -> MatchState:
    return ledger.reconciled().apply_to(state)


# ----------------------------------------------------------------------
# Clock and period commands
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Start(Command):
    """Kick off the match, or resume the current period."""

    def apply(self, state: MatchState, now: float) -> Outcome:
        return _sequence_outcome(state, PeriodSequence.from_state(state).start(now))

    @property
    def description(self) -> str:
        return "Start"


@dataclass(frozen=True)
class Resume(Command):
    """Restart the clock of the current period."""

    def apply(self, state: MatchState, now: float) -> Outcome:
        return _sequence_outcome(state, PeriodSequence.from_state(state).resume(now))

    @property
    def description(self) -> str:
        return "Resume"


@dataclass(frozen=True)
class Pause(Command):
    """Stop the clock of the current period."""

    def apply(self, state: MatchState, now: float) -> Outcome:
        return _sequence_outcome(state, PeriodSequence.from_state(state).pause(now))

    @property
    def description(self) -> str:
        return "Pause"


@dataclass(frozen=True)
class AddPeriod(Command):
    """Append a regular, extra or interval period."""
    period_type: PeriodType = PeriodType.REGULAR
    label: Optional[str] = None

    def apply(self, state: MatchState, now: float) -> Outcome:
        sequence = PeriodSequence.from_state(state)
        return _sequence_outcome(state, sequence.add_period(self.period_type, now, self.label))

    @property
    def description(self) -> str:
        return f"Add {self.period_type.value} period"


@dataclass(frozen=True)
class StartInterval(Command):
    """Pause play and open a running interval."""
    label: Optional[str] = None

    def apply(self, state: MatchState, now: float) -> Outcome:
        sequence = PeriodSequence.from_state(state)
        return _sequence_outcome(state, sequence.start_interval(now, self.label))

    @property
    def description(self) -> str:
        return "Start interval"


@dataclass(frozen=True)
class RemoveLastPeriod(Command):
    """Drop the last period."""

    def apply(self, state: MatchState, now: float) -> Outcome:
        return _sequence_outcome(state, PeriodSequence.from_state(state).remove_last_period())

    @property
    def description(self) -> str:
        return "Remove last period"


@dataclass(frozen=True)
class Finish(Command):
    """End the match; freezes periods, clock and lineup."""

    def apply(self, state: MatchState, now: float) -> Outcome:
        return _sequence_outcome(state, PeriodSequence.from_state(state).finish(now))

    @property
    def description(self) -> str:
        return "Finish match"


@dataclass(frozen=True)
class ContinueLastPeriod(Command):
    """Re-open the final regular period of a finished match."""
    allowed_when_finished = True

    def apply(self, state: MatchState, now: float) -> Outcome:
        sequence = PeriodSequence.from_state(state)
        return _sequence_outcome(state, sequence.continue_last_period(now))

    @property
    def description(self) -> str:
        return "Continue last period"


# ----------------------------------------------------------------------
# Lineup commands
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class SetInitialLineup(Command):
    """
    Replace the starting lineup.

    Recorded substitutions are replayed on the new lineup, so a starting
    lineup that contradicts the history is rejected.
    """
    lineup: Tuple[MatchPlayer, ...] = ()
    opponent_lineup: Optional[Tuple[int, ...]] = None

    def apply(self, state: MatchState, now: float) -> Outcome:
        checked = validate_lineup(self.lineup)
        if isinstance(checked, ValidationError):
            return checked
        current = reconstruct(checked, state.substitutions)
        if isinstance(current, ValidationError):
            return current
        opponent = state.opponent_lineup if self.opponent_lineup is None else tuple(self.opponent_lineup)
        return replace(state, initial_lineup=checked, lineup=current, opponent_lineup=opponent)

    @property
    def description(self) -> str:
        return "Set lineup"


@dataclass(frozen=True)
class ApplySubstitution(Command):
    """Swap an on-field player for one on the bench."""
    player_out: str = ""
    player_in: str = ""
    minute: Optional[int] = None
    second: Optional[int] = None
    substitution_id: Optional[str] = None

    def apply(self, state: MatchState, now: float) -> Outcome:
        guard = _live_guard(state, self.minute, self.second)
        if guard is not None:
            return guard
        minute, second, period_index = _stamp(state, now, self.minute, self.second)
        substitution = Substitution(
            id=self.substitution_id or uuid.uuid4().hex,
            minute=minute,
            second=second,
            player_out=self.player_out,
            player_in=self.player_in,
            period_index=period_index,
        )
        history = state.substitutions + (substitution,)
        lineup = reconstruct(state.initial_lineup, history)
        if isinstance(lineup, ValidationError):
            return lineup
        return replace(state, substitutions=history, lineup=lineup)

    @property
    def description(self) -> str:
        return f"Substitute {self.player_out} → {self.player_in}"


@dataclass(frozen=True)
class RemoveSubstitution(Command):
    """Delete a substitution and replay the rest from the starting lineup."""
    substitution_id: str = ""

    def apply(self, state: MatchState, now: float) -> Outcome:
        if state.find_substitution(self.substitution_id) is None:
            return ValidationError(
                ErrorKind.UNKNOWN_SUBSTITUTION, f"Substitution {self.substitution_id} not found"
            )
        history = tuple(s for s in state.substitutions if s.id != self.substitution_id)
        lineup = reconstruct(state.initial_lineup, history)
        if isinstance(lineup, ValidationError):
            return lineup
        return replace(state, substitutions=history, lineup=lineup)

    @property
    def description(self) -> str:
        return f"Remove substitution {self.substitution_id}"


# ----------------------------------------------------------------------
# Score and event commands
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class AddGoal(Command):
    """Record a goal for one side and move the scoreboard."""
    side: TeamSide = TeamSide.OWN
    scorer_id: str = ""
    minute: Optional[int] = None
    second: Optional[int] = None
    event_id: Optional[str] = None
    description_text: Optional[str] = None

    def apply(self, state: MatchState, now: float) -> Outcome:
        guard = _live_guard(state, self.minute, self.second)
        if guard is not None:
            return guard
        # A live goal for our side must come from a player on the field
        if (
            self.side is TeamSide.OWN
            and self.minute is None
            and not is_on_field(state.lineup, self.scorer_id)
        ):
            return player_not_on_field(self.scorer_id)
        minute, second, period_index = _stamp(state, now, self.minute, self.second)
        ledger = ScoreLedger.from_state(state).add_goal(
            self.side,
            self.scorer_id,
            minute,
            second,
            event_id=self.event_id,
            period_index=period_index,
            description=self.description_text,
        )
        return _ledger_outcome(state, ledger)

    @property
    def description(self) -> str:
        return f"Goal ({self.side.value}) {self.scorer_id}"


@dataclass(frozen=True)
class RemoveGoal(Command):
    """Take back the latest goal of one side."""
    side: TeamSide = TeamSide.OWN

    def apply(self, state: MatchState, now: float) -> Outcome:
        return _ledger_outcome(state, ScoreLedger.from_state(state).remove_last_goal(self.side))

    @property
    def description(self) -> str:
        return f"Remove goal ({self.side.value})"


@dataclass(frozen=True)
class AddEvent(Command):
    """Record any event: cards, fouls, corners and goals alike."""
    event_type: EventType = EventType.FOUL
    player_id: str = ""
    side: TeamSide = TeamSide.OWN
    minute: Optional[int] = None
    second: Optional[int] = None
    description_text: str = ""
    event_id: Optional[str] = None

    def apply(self, state: MatchState, now: float) -> Outcome:
        if self.event_type is EventType.GOAL:
            return AddGoal(
                side=self.side,
                scorer_id=self.player_id,
                minute=self.minute,
                second=self.second,
                event_id=self.event_id,
                description_text=self.description_text or None,
            ).apply(state, now)

        guard = _live_guard(state, self.minute, self.second)
        if guard is not None:
            return guard
        minute, second, period_index = _stamp(state, now, self.minute, self.second)
        event = MatchEvent(
            id=self.event_id or uuid.uuid4().hex,
            type=self.event_type,
            minute=minute,
            second=second,
            player_id=str(self.player_id),
            description=self.description_text,
            team_type=self.side,
            period_index=period_index,
        )
        return _ledger_outcome(state, ScoreLedger.from_state(state).add_event(event))

    @property
    def description(self) -> str:
        return f"{self.event_type.value} ({self.side.value}) {self.player_id}"


@dataclass(frozen=True)
class RemoveEvent(Command):
    """Delete any event by id; removing a goal moves the scoreboard back."""
    event_id: str = ""

    def apply(self, state: MatchState, now: float) -> Outcome:
        ledger = ScoreLedger.from_state(state).remove_event(self.event_id)
        if ledger is None:
            return ValidationError(ErrorKind.UNKNOWN_EVENT, f"Event {self.event_id} not found")
        return _ledger_outcome(state, ledger)

    @property
    def description(self) -> str:
        return f"Remove event {self.event_id}"


# ----------------------------------------------------------------------
# Dispatch
# ----------------------------------------------------------------------
def apply_command(
    state: MatchState, command: Command, now: Optional[float] = None
) -> CommandResult:
    """
    Apply one command to a match.

    Args:
        state: Current match state
        command: Command to apply
        now: Wall-clock time in epoch seconds (defaults to the current time)

    Returns:
        CommandResult with the new state, or the prior state and the error
    """
    now = now_ts() if now is None else now
    if state.is_finished and not command.allowed_when_finished:
        error = match_finished()
    else:
        outcome = command.apply(state, now)
        if not isinstance(outcome, ValidationError):
            logger.debug("Applied %s to match %s", command.description, state.match_id or "-")
            return CommandResult(outcome)
        error = outcome

    logger.info("Rejected %s: %s (%s)", command.description, error.message, error.kind.value)
    return CommandResult(state, error)


def apply_commands(
    state: MatchState, commands: Sequence[Command], now: Optional[float] = None
) -> CommandResult:
    """Apply commands in order, stopping at the first rejection."""
    result = CommandResult(state)
    for command in commands:
        result = apply_command(result.state, command, now)
        if not result.ok:
            break
    return result


@dataclass(frozen=True)
class _HistoryEntry:
    command: Command
    before: MatchState
    after: MatchState


class MatchCommandManager:
    """
    Owner of one match session: current state plus undo/redo history.

    Undo and redo swap in the recorded states rather than re-running
    commands, so they are unaffected by the wall clock.
    """

    def __init__(self, state: Optional[MatchState] = None, max_history: int = MAX_COMMAND_HISTORY):
        """
        Initialize command manager.

        Args:
            state: Initial match state (a fresh pre-start match by default)
            max_history: Maximum number of commands to keep in history
        """
        self.state = state or MatchState()
        self.max_history = max_history
        self._command_history: List[_HistoryEntry] = []
        self._current_index = -1

    def execute_command(self, command: Command, now: Optional[float] = None) -> CommandResult:
        """
        Execute a command and add it to history when it is accepted.

        Args:
            command: Command to execute
            now: Wall-clock time in epoch seconds

        Returns:
            The command's result; the session state follows accepted results only
        """
        result = apply_command(self.state, command, now)

        if result.ok:
            # Remove any commands after current index (for redo functionality)
            self._command_history = self._command_history[:self._current_index + 1]
            self._command_history.append(_HistoryEntry(command, self.state, result.state))
            self._current_index += 1
            self.state = result.state

            if len(self._command_history) > self.max_history:
                self._command_history.pop(0)
                self._current_index -= 1

        return result

    def undo(self) -> bool:
        """Restore the state before the last accepted command."""
        if not self.can_undo():
            return False
        self.state = self._command_history[self._current_index].before
        self._current_index -= 1
        return True

    def redo(self) -> bool:
        """Restore the state after the next undone command."""
        if not self.can_redo():
            return False
        self._current_index += 1
        self.state = self._command_history[self._current_index].after
        return True

    def can_undo(self) -> bool:
        return self._current_index >= 0

    def can_redo(self) -> bool:
        return self._current_index < len(self._command_history) - 1

    def get_command_history(self) -> List[str]:
        """Get history of command descriptions."""
        return [entry.command.description for entry in self._command_history]

    def reset(self, state: Optional[MatchState] = None) -> None:
        """Replace the session state and clear history (e.g. after loading a save)."""
        self.state = state or MatchState()
        self._command_history.clear()
        self._current_index = -1
