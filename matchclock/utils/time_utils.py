"""
Time helpers for the match timeline engine.

This module contains the small time functions shared by the clock, the
period mapper and the reporting layer.
"""
import time
from typing import Tuple


def fmt_mmss(seconds: float) -> str:
    """
    Format seconds as MM:SS string.

    Args:
        seconds: Number of seconds to format

    Returns:
        Formatted time string in MM:SS format

    Example:
        >>> fmt_mmss(90)
        '01:30'
        >>> fmt_mmss(3661)
        '61:01'
    """
    seconds = max(0, int(seconds))
    m = seconds // 60
    s = seconds % 60
    return f"{m:02d}:{s:02d}"


def now_ts() -> float:
    """
    Get current timestamp in epoch seconds.

    Returns:
        Current time as floating point epoch seconds
    """
    return time.time()


def to_minute_second(seconds: float) -> Tuple[int, int]:
    """Split an absolute match time into ``(minute, second)``."""
    seconds = max(0, int(seconds))
    return seconds // 60, seconds % 60


def to_seconds(minute: int, second: int = 0) -> int:
    """Absolute match time in seconds for a ``minute``/``second`` stamp."""
    return int(minute) * 60 + int(second or 0)
