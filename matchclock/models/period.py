"""
Period model for the match timeline engine.

A match is an ordered sequence of periods. Regular and extra periods hold
play; intervals (half-time and similar breaks) consume real time but never
receive events.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict


class PeriodType(Enum):
    """Closed set of period kinds."""
    REGULAR = "regular"
    EXTRA = "extra"
    INTERVAL = "interval"


@dataclass(frozen=True)
class Period:
    """
    A contiguous, labeled span of match time.

    Attributes:
        type: Regular, extra or interval
        label: Display label (e.g. "1° Tempo", "Intervallo")
        duration: Accumulated seconds (fractional), excluding any time still running
        is_finished: Whether the period has been superseded or closed
    """
    type: PeriodType
    label: str
    duration: float = 0.0
    is_finished: bool = False

    @property
    def is_interval(self) -> bool:
        return self.type is PeriodType.INTERVAL

    def with_duration(self, duration: float) -> "Period":
        return replace(self, duration=max(0.0, float(duration)))

    def finished(self, value: bool = True) -> "Period":
        return replace(self, is_finished=value)

    def to_json(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "label": self.label,
            "duration": self.duration,
            "is_finished": self.is_finished,
        }

    @staticmethod
    def from_json(data: Dict[str, Any]) -> "Period":
        return Period(
            type=PeriodType(data.get("type", PeriodType.REGULAR.value)),
            label=data.get("label", ""),
            duration=float(data.get("duration", 0) or 0),
            is_finished=bool(data.get("is_finished", data.get("isFinished", False))),
        )
