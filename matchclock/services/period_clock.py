"""
Period clock for the match timeline engine.

The clock never accumulates time through periodic writes. It keeps the
fractional seconds already banked for the current period plus, while running, the
wall-clock anchor it was started at; elapsed time is computed on read.
"""
from dataclasses import dataclass
from typing import Optional

from ..utils import now_ts


@dataclass(frozen=True)
class PeriodClock:
    """
    Stopwatch for the period currently in progress.

    Attributes:
        duration: Seconds banked by previous start/pause cycles
        anchor: Epoch seconds the clock was started at, None when stopped
    """
    duration: float = 0.0
    anchor: Optional[float] = None

    @property
    def is_running(self) -> bool:
        return self.anchor is not None

    @classmethod
    def restore(
        cls, duration: float, is_running: bool, last_timestamp: Optional[float]
    ) -> "PeriodClock":
        """
        Rebuild a clock from its persisted shape after a crash or reload.

        A running clock whose anchor was lost restarts from its banked
        duration on the next start rather than guessing the gap.
        """
        if is_running and last_timestamp is not None:
            return cls(duration=float(duration), anchor=float(last_timestamp))
        return cls(duration=float(duration))

    def start(self, now: Optional[float] = None) -> "PeriodClock":
        """Stopped -> Running. Starting a running clock keeps its anchor."""
        if self.is_running:
            return self
        return PeriodClock(self.duration, now_ts() if now is None else now)

    def pause(self, now: Optional[float] = None) -> "PeriodClock":
        """Running -> Stopped, banking the time run since the anchor."""
        if not self.is_running:
            return self
        return PeriodClock(self.elapsed(now), None)

    def elapsed(self, now: Optional[float] = None) -> float:
        """Banked duration plus the running stretch, without mutating anything."""
        if self.anchor is None:
            return self.duration
        current = now_ts() if now is None else now
        # Wall-clock skew must never make the period shorter
        return self.duration + max(0.0, current - self.anchor)
