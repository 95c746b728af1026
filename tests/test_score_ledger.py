"""Tests for the score ledger."""

import random

from matchclock.models import EventType, HomeAway, MatchEvent, MatchState, TeamSide
from matchclock.services import Score, ScoreLedger, count_goals

OWN, OPP = TeamSide.OWN, TeamSide.OPPONENT


def test_add_goal_appends_event_and_counts():
    ledger = ScoreLedger().add_goal(OWN, "P1", 10, 5, event_id="g1", period_index=0)
    assert ledger.score == Score(own=1, opponent=0)
    goal = ledger.events[0]
    assert goal.id == "g1"
    assert goal.type is EventType.GOAL
    assert goal.team_type is OWN
    assert (goal.minute, goal.second, goal.period_index) == (10, 5, 0)
    assert goal.description == "Goal (nostro)"
    assert ScoreLedger().add_goal(OPP, "9", 1).events[0].description == "Goal avversario"


def test_remove_last_goal_uses_match_time_not_recording_order():
    ledger = (
        ScoreLedger()
        .add_goal(OWN, "P1", 30, 0, event_id="a")
        .add_goal(OWN, "P2", 30, 15, event_id="b")
        .add_goal(OWN, "P3", 10, 0, event_id="c")
        .add_goal(OPP, "9", 40, 0, event_id="d")
    )
    ledger = ledger.remove_last_goal(OWN)
    assert [e.id for e in ledger.events] == ["a", "c", "d"]
    assert ledger.score == Score(own=2, opponent=1)


def test_remove_last_goal_at_zero_is_noop():
    ledger = ScoreLedger().add_goal(OPP, "9", 3)
    assert ledger.remove_last_goal(OWN) is ledger


def test_remove_event_generic_path():
    ledger = (
        ScoreLedger()
        .add_goal(OWN, "P1", 5, event_id="g1")
        .add_event(MatchEvent("f1", EventType.FOUL, 6, 0, "P2"))
    )
    without_foul = ledger.remove_event("f1")
    assert without_foul.score == Score(1, 0)
    without_goal = ledger.remove_event("g1")
    assert without_goal.score == Score(0, 0)
    assert [e.id for e in without_goal.events] == ["f1"]
    assert ledger.remove_event("missing") is None


def test_reconciled_trusts_the_event_log():
    goal = MatchEvent("g1", EventType.GOAL, 12, 0, "P1", team_type=OWN)
    drifted = ScoreLedger(events=(goal,), score=Score(0, 3))
    assert not drifted.is_consistent()
    fixed = drifted.reconciled()
    assert fixed.score == Score(1, 0)
    assert fixed.is_consistent()


def test_score_orientation_follows_home_away():
    assert Score(2, 1).home_away(HomeAway.HOME) == (2, 1)
    assert Score(2, 1).home_away(HomeAway.AWAY) == (1, 2)
    assert Score.from_home_away(1, 2, HomeAway.AWAY) == Score(own=2, opponent=1)


def test_state_round_trip_for_away_match():
    state = MatchState(home_away=HomeAway.AWAY)
    ledger = ScoreLedger.from_state(state).add_goal(OWN, "P1", 3)
    updated = ledger.apply_to(state)
    assert (updated.home_score, updated.away_score) == (0, 1)
    assert updated.score_for(OWN) == 1
    assert ScoreLedger.from_state(updated).score == Score(1, 0)


def test_incremental_counters_match_recount():
    rng = random.Random(20240917)
    ledger = ScoreLedger()
    for step in range(400):
        roll = rng.random()
        side = rng.choice([OWN, OPP])
        if roll < 0.45:
            ledger = ledger.add_goal(side, "P1", rng.randint(0, 95), rng.randint(0, 59))
        elif roll < 0.6:
            ledger = ledger.add_event(
                MatchEvent(f"x{step}", EventType.CORNER, rng.randint(0, 95), 0, "P2", team_type=side)
            )
        elif roll < 0.8:
            ledger = ledger.remove_last_goal(side)
        elif ledger.events:
            ledger = ledger.remove_event(rng.choice(ledger.events).id)
        assert ledger.recompute() == ledger.score
        assert count_goals(ledger.events) == ledger.score
