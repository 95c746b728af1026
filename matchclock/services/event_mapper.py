"""
Event-to-period mapping for the match timeline engine.

Events and substitutions carry an absolute match time (minute and second
since kick-off, intervals included). This module attributes that time to the
period it falls in, never to an interval.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, TypeVar

from ..models import Period, PeriodType
from ..utils import to_seconds


class TimedItem(Protocol):
    """Anything stamped with a match time and an optional period index."""

    minute: int
    second: int
    period_index: Optional[int]


T = TypeVar("T", bound=TimedItem)


@dataclass(frozen=True)
class PeriodWindow:
    """Half-open ``[start, end)`` span of absolute seconds covered by a period."""
    index: int
    period_type: PeriodType
    start: float
    end: float

    def contains(self, t: float) -> bool:
        return self.start <= t < self.end


def period_windows(periods: Sequence[Period]) -> List[PeriodWindow]:
    """Cumulative windows from running sums of the period durations."""
    windows: List[PeriodWindow] = []
    cursor = 0.0
    for idx, period in enumerate(periods):
        end = cursor + max(0.0, period.duration)
        windows.append(PeriodWindow(idx, period.type, cursor, end))
        cursor = end
    return windows


def last_playing_index(periods: Sequence[Period]) -> Optional[int]:
    """Index of the last non-interval period, or None if there is none."""
    for idx in range(len(periods) - 1, -1, -1):
        if not periods[idx].is_interval:
            return idx
    return None


def map_event_to_period(periods: Sequence[Period], t: float) -> Optional[int]:
    """
    Attribute absolute time ``t`` (seconds) to a non-interval period.

    A time inside an interval belongs to the next playing period; a time past
    the end of the recorded periods belongs to the last playing period.

    Returns:
        The period index, or None when no playing period exists yet
    """
    fallback = last_playing_index(periods)
    if fallback is None:
        return None

    for window in period_windows(periods):
        if not window.contains(t):
            continue
        if window.period_type is not PeriodType.INTERVAL:
            return window.index
        for idx in range(window.index + 1, len(periods)):
            if not periods[idx].is_interval:
                return idx
        return fallback
    return fallback


def resolve_period_index(periods: Sequence[Period], item: TimedItem) -> Optional[int]:
    """
    Period of an event or substitution for reporting.

    An explicit stamp captured when the item was recorded wins while it
    still points at an existing playing period; otherwise the structural
    mapping is recomputed from the current periods.
    """
    stamped = item.period_index
    if stamped is not None and 0 <= stamped < len(periods) and not periods[stamped].is_interval:
        return stamped
    return map_event_to_period(periods, to_seconds(item.minute, item.second))


def group_by_period(
    periods: Sequence[Period], items: Iterable[T]
) -> Dict[Optional[int], List[T]]:
    """Bucket items by resolved period index, each bucket in match-time order."""
    grouped: Dict[Optional[int], List[T]] = {}
    for item in items:
        grouped.setdefault(resolve_period_index(periods, item), []).append(item)
    for bucket in grouped.values():
        bucket.sort(key=lambda i: (i.minute, i.second))
    return grouped
