"""
Period sequence for the match timeline engine.

This module owns the ordered list of periods and the clock that applies to
the last (current) one: starting the match, pausing and resuming, appending
regular/extra periods and intervals, removing the last period, finishing the
match and re-opening its final regular period.
"""
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple, Union

from ..models import MatchState, Period, PeriodType
from ..models.errors import (
    ErrorKind, ValidationError, match_finished, no_active_period
)
from ..utils import EXTRA_PERIOD_LABEL, INTERVAL_LABEL, REGULAR_PERIOD_LABEL
from .period_clock import PeriodClock


def period_label(period_type: PeriodType, number: int) -> str:
    """Default display label for the ``number``-th period of a type (1-based)."""
    if period_type is PeriodType.INTERVAL:
        return INTERVAL_LABEL
    template = EXTRA_PERIOD_LABEL if period_type is PeriodType.EXTRA else REGULAR_PERIOD_LABEL
    return template.format(n=number)


@dataclass(frozen=True)
class PeriodSequence:
    """
    Ordered periods plus the clock state of the current one.

    Every operation returns a new sequence or a :class:`ValidationError`;
    a rejected operation leaves the receiver untouched.

    Attributes:
        periods: Ordered periods; the last one is current
        is_running: Whether the current period's clock is running
        last_timestamp: Clock anchor while running, time of the last stop otherwise
        is_finished: Whether the match has been ended
    """
    periods: Tuple[Period, ...] = ()
    is_running: bool = False
    last_timestamp: Optional[float] = None
    is_finished: bool = False

    @classmethod
    def from_state(cls, state: MatchState) -> "PeriodSequence":
        return cls(
            periods=state.periods,
            is_running=state.is_running,
            last_timestamp=state.last_timestamp,
            is_finished=state.is_finished,
        )

    def apply_to(self, state: MatchState) -> MatchState:
        return replace(
            state,
            periods=self.periods,
            is_running=self.is_running,
            last_timestamp=self.last_timestamp,
            is_finished=self.is_finished,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def current_index(self) -> Optional[int]:
        return len(self.periods) - 1 if self.periods else None

    @property
    def current(self) -> Optional[Period]:
        return self.periods[-1] if self.periods else None

    def clock(self) -> PeriodClock:
        """Clock of the current period, rebuilt from the persisted shape."""
        if not self.periods:
            return PeriodClock()
        return PeriodClock.restore(
            self.periods[-1].duration, self.is_running, self.last_timestamp
        )

    def elapsed(self, now: Optional[float] = None) -> float:
        """Elapsed seconds of the current period, including the running stretch."""
        return self.clock().elapsed(now)

    def durations(self, now: Optional[float] = None) -> List[float]:
        """Per-period durations with the live value for the current period."""
        if not self.periods:
            return []
        values = [p.duration for p in self.periods[:-1]]
        values.append(self.elapsed(now))
        return values

    def live_periods(self, now: Optional[float] = None) -> Tuple[Period, ...]:
        """Periods with the current one's duration brought up to ``now``."""
        if not self.periods:
            return ()
        return self.periods[:-1] + (self.periods[-1].with_duration(self.elapsed(now)),)

    def total_elapsed(self, now: Optional[float] = None) -> float:
        """Seconds since kick-off, intervals included."""
        return sum(self.durations(now))

    def next_label(self, period_type: PeriodType) -> str:
        count = sum(1 for p in self.periods if p.type is period_type)
        return period_label(period_type, count + 1)

    # ------------------------------------------------------------------
    # Clock controls
    # ------------------------------------------------------------------
    def start(self, now: float) -> Union["PeriodSequence", ValidationError]:
        """Kick off the match (creating period 0) or resume the current period."""
        if self.is_finished:
            return match_finished()
        if not self.periods:
            first = Period(PeriodType.REGULAR, period_label(PeriodType.REGULAR, 1))
            return replace(self, periods=(first,))._with_clock(PeriodClock().start(now), now)
        return self.resume(now)

    def resume(self, now: float) -> Union["PeriodSequence", ValidationError]:
        if not self.periods:
            return no_active_period()
        if self.is_finished:
            return match_finished()
        return self._with_clock(self.clock().start(now), now)

    def pause(self, now: float) -> Union["PeriodSequence", ValidationError]:
        if not self.periods:
            return no_active_period()
        if self.is_finished:
            return match_finished()
        return self._with_clock(self.clock().pause(now), now)

    # ------------------------------------------------------------------
    # Structural changes
    # ------------------------------------------------------------------
    def add_period(
        self, period_type: PeriodType, now: float, label: Optional[str] = None
    ) -> Union["PeriodSequence", ValidationError]:
        """
        Close the current period and append a new, stopped one.

        The previous period's running time is banked and frozen; the new
        period starts at zero and waits for an explicit start.
        """
        if not self.periods:
            return no_active_period()
        if self.is_finished:
            return match_finished()

        stopped = self._with_clock(self.clock().pause(now), now)
        closed = stopped.periods[:-1] + (stopped.periods[-1].finished(),)
        new_period = Period(period_type, label or self.next_label(period_type))
        return replace(
            stopped,
            periods=closed + (new_period,),
            is_running=False,
            last_timestamp=now,
        )

    def start_interval(
        self, now: float, label: Optional[str] = None
    ) -> Union["PeriodSequence", ValidationError]:
        """
        Pause play and open an interval whose clock runs, so the break's
        real length is recorded.
        """
        if self.current is not None and self.current.is_interval and not self.is_finished:
            return ValidationError(
                ErrorKind.INTERVAL_IN_PROGRESS, "An interval is already in progress"
            )
        added = self.add_period(PeriodType.INTERVAL, now, label)
        if isinstance(added, ValidationError):
            return added
        return added._with_clock(added.clock().start(now), now)

    def remove_last_period(self) -> Union["PeriodSequence", ValidationError]:
        """
        Drop the last period and make the previous one current again.

        The re-opened period keeps its banked duration and stays stopped.
        Events already attributed to the removed period are not remapped.
        """
        if not self.periods:
            return no_active_period()
        if self.is_finished:
            return match_finished()
        if len(self.periods) == 1:
            return ValidationError(
                ErrorKind.INVALID_PERIOD_REMOVAL, "Cannot remove the only period of the match"
            )
        remaining = self.periods[:-1]
        reopened = remaining[-1].finished(False)
        return replace(self, periods=remaining[:-1] + (reopened,), is_running=False)

    def finish(self, now: float) -> Union["PeriodSequence", ValidationError]:
        """Stop the clock, close the last period and mark the match finished."""
        if not self.periods:
            return no_active_period()
        if self.is_finished:
            return match_finished()
        stopped = self._with_clock(self.clock().pause(now), now)
        closed = stopped.periods[:-1] + (stopped.periods[-1].finished(),)
        return replace(stopped, periods=closed, is_finished=True)

    def continue_last_period(self, now: float) -> Union["PeriodSequence", ValidationError]:
        """Re-open the final regular period of a finished match and restart its clock."""
        if not self.is_finished or self.current is None:
            return ValidationError(
                ErrorKind.INVALID_CONTINUATION, "Only a finished match can be continued"
            )
        if self.current.type is not PeriodType.REGULAR:
            return ValidationError(
                ErrorKind.INVALID_CONTINUATION, "Only a regular period can be continued"
            )
        reopened = replace(
            self,
            periods=self.periods[:-1] + (self.current.finished(False),),
            is_finished=False,
        )
        return reopened._with_clock(reopened.clock().start(now), now)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _with_clock(self, clock: PeriodClock, now: float) -> "PeriodSequence":
        periods = self.periods[:-1] + (self.periods[-1].with_duration(clock.duration),)
        return replace(
            self,
            periods=periods,
            is_running=clock.is_running,
            last_timestamp=clock.anchor if clock.is_running else now,
        )
