"""Tests for attributing event times to periods."""

import itertools

import pytest

from matchclock.models import MatchEvent, EventType, Period, PeriodType, Substitution
from matchclock.services import (
    group_by_period, map_event_to_period, period_windows, resolve_period_index
)

R, E, I = PeriodType.REGULAR, PeriodType.EXTRA, PeriodType.INTERVAL


def periods(*layout):
    return tuple(Period(kind, kind.value, duration) for kind, duration in layout)


def event(event_id, minute, second=0, period_index=None):
    return MatchEvent(
        id=event_id, type=EventType.FOUL, minute=minute, second=second,
        player_id="P1", period_index=period_index,
    )


HALVES = periods((R, 60), (I, 10), (R, 30))


def test_windows_are_cumulative_and_include_intervals():
    windows = period_windows(HALVES)
    assert [(w.start, w.end) for w in windows] == [(0, 60), (60, 70), (70, 100)]
    assert windows[1].period_type is I


def test_time_inside_interval_maps_to_next_playing_period():
    assert map_event_to_period(HALVES, 65) == 2


@pytest.mark.parametrize(
    "t, expected",
    [(0, 0), (59, 0), (60, 2), (69, 2), (70, 2), (99, 2), (100, 2), (5000, 2)],
)
def test_mapping_boundaries(t, expected):
    assert map_event_to_period(HALVES, t) == expected


def test_trailing_interval_falls_back_to_last_playing_period():
    seq = periods((R, 60), (I, 10))
    assert map_event_to_period(seq, 65) == 0
    assert map_event_to_period(seq, 1000) == 0


def test_extra_time_windows():
    seq = periods((R, 60), (I, 10), (R, 60), (I, 5), (E, 15), (E, 15))
    assert map_event_to_period(seq, 132) == 4
    assert map_event_to_period(seq, 150) == 5
    assert map_event_to_period(seq, 400) == 5


def test_zero_length_current_period_receives_late_events():
    seq = periods((R, 60), (I, 10), (R, 0))
    assert map_event_to_period(seq, 70) == 2


def test_no_playing_period_maps_to_none():
    assert map_event_to_period((), 10) is None
    assert map_event_to_period(periods((I, 30)), 10) is None


def test_never_maps_to_an_interval():
    for length in range(1, 5):
        for kinds in itertools.product((R, E, I), repeat=length):
            if all(kind is I for kind in kinds):
                continue
            for durations in itertools.product((0, 7), repeat=length):
                seq = periods(*zip(kinds, durations))
                total = sum(durations)
                for t in range(0, total + 3):
                    index = map_event_to_period(seq, t)
                    assert index is not None
                    assert not seq[index].is_interval, (kinds, durations, t)


def test_explicit_stamp_wins_while_valid():
    assert resolve_period_index(HALVES, event("e1", 0, 30, period_index=2)) == 2


def test_stale_stamp_falls_back_to_structural_mapping():
    shortened = HALVES[:2]
    # Period 2 was removed after the event was stamped
    assert resolve_period_index(shortened, event("e1", 1, 15, period_index=2)) == 0
    assert resolve_period_index(HALVES, event("e2", 1, 5, period_index=1)) == 2


def test_substitutions_resolve_like_events():
    substitution = Substitution("s1", minute=1, second=10, player_out="A", player_in="B")
    assert resolve_period_index(HALVES, substitution) == 2


def test_group_by_period_sorts_each_bucket():
    items = [event("late", 0, 50), event("break", 1, 5), event("early", 0, 10)]
    grouped = group_by_period(HALVES, items)
    assert [e.id for e in grouped[0]] == ["early", "late"]
    assert [e.id for e in grouped[2]] == ["break"]
    assert 1 not in grouped
