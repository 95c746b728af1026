"""
Unit tests for PersistenceService.

Covers saving and loading match state, resuming a running clock after a
reload, reading the REST backend's camelCase documents, and auto-save.
"""
import json
import os
import shutil
import tempfile
import unittest

from matchclock.models import (
    EventType, HomeAway, MatchEvent, MatchPlayer, MatchState, Period, PeriodType,
    Substitution, TeamSide
)
from matchclock.services import PeriodSequence, PersistenceService


class TestPersistenceService(unittest.TestCase):
    """Test cases for saving and loading matches."""

    def setUp(self) -> None:
        self.temp_dir = tempfile.mkdtemp()
        self.file_path = os.path.join(self.temp_dir, "match.json")
        self.state = MatchState(
            match_id="m1",
            opponent="Rivals",
            home_away=HomeAway.AWAY,
            periods=(
                Period(PeriodType.REGULAR, "1° Tempo", 2700, True),
                Period(PeriodType.INTERVAL, "Intervallo", 900, True),
                Period(PeriodType.REGULAR, "2° Tempo", 60),
            ),
            initial_lineup=(MatchPlayer("P1", 4, "DF"), MatchPlayer("P2", 7, "MF")),
            lineup=(MatchPlayer("P3", 4, "DF"), MatchPlayer("P2", 7, "MF")),
            opponent_lineup=(5, 10),
            substitutions=(Substitution("s1", 30, 0, "P1", "P3", 0),),
            events=(
                MatchEvent("g1", EventType.GOAL, 12, 5, "P2", "Goal (nostro)", TeamSide.OWN, 0),
                MatchEvent("c1", EventType.YELLOW_CARD, 40, 0, "P1", "", TeamSide.OWN, 0),
            ),
            home_score=0,
            away_score=1,
            is_running=True,
            last_timestamp=1000.0,
        )

    def tearDown(self) -> None:
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_save_and_load_round_trip(self) -> None:
        PersistenceService.save_match_to_file(self.state, self.file_path)
        loaded = PersistenceService.load_match_from_file(self.file_path)
        self.assertEqual(loaded, self.state)

    def test_save_creates_missing_directory(self) -> None:
        nested = os.path.join(self.temp_dir, "saves", "match.json")
        PersistenceService.save_match_to_file(self.state, nested)
        self.assertTrue(os.path.exists(nested))

    def test_running_clock_resumes_after_load(self) -> None:
        PersistenceService.save_match_to_file(self.state, self.file_path)
        loaded = PersistenceService.load_match_from_file(self.file_path)

        sequence = PeriodSequence.from_state(loaded)
        self.assertEqual(sequence.elapsed(1100), 160)
        self.assertEqual(sequence.total_elapsed(1100), 2700 + 900 + 160)

    def test_saved_document_keeps_clock_anchor(self) -> None:
        PersistenceService.save_match_to_file(self.state, self.file_path)
        with open(self.file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        self.assertTrue(data["is_running"])
        self.assertEqual(data["last_timestamp"], 1000.0)
        self.assertEqual(data["periods"][2]["duration"], 60)

    def test_load_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            PersistenceService.load_match_from_file(os.path.join(self.temp_dir, "nope.json"))

    def test_load_invalid_json(self) -> None:
        with open(self.file_path, "w", encoding="utf-8") as f:
            f.write("{not json")
        with self.assertRaises(json.JSONDecodeError):
            PersistenceService.load_match_from_file(self.file_path)

    def test_load_non_object(self) -> None:
        with open(self.file_path, "w", encoding="utf-8") as f:
            json.dump([1, 2, 3], f)
        with self.assertRaises(ValueError):
            PersistenceService.load_match_from_file(self.file_path)

    def test_load_event_without_id(self) -> None:
        with open(self.file_path, "w", encoding="utf-8") as f:
            json.dump({"events": [{"type": "goal", "minute": 3}]}, f)
        with self.assertRaises(ValueError):
            PersistenceService.load_match_from_file(self.file_path)

    def test_load_backend_document(self) -> None:
        document = {
            "id": 42,
            "opponent": "Rivals",
            "homeAway": "away",
            "status": "live",
            "periods": [
                {"type": "regular", "label": "1° Tempo", "duration": 600, "isFinished": False}
            ],
            "lineups": [
                {"playerId": "P4", "jerseyNumber": 4, "position": "DF"},
                {"playerId": "P2", "jerseyNumber": 7, "position": "MF"},
            ],
            "opponentLineup": [{"jerseyNumber": 5}, {"jerseyNumber": 9}],
            "substitutions": [
                {"id": "s1", "minute": 5, "second": 0, "playerOut": "P1", "playerIn": "P4"}
            ],
            "events": [
                {"id": "e1", "type": "goal", "minute": 3, "second": 10,
                 "playerId": "P2", "teamType": "OWN"}
            ],
            "homeScore": 0,
            "awayScore": 1,
            "isRunning": True,
            "lastTimestamp": 1700000000000,
        }
        with open(self.file_path, "w", encoding="utf-8") as f:
            json.dump(document, f)

        loaded = PersistenceService.load_match_from_file(self.file_path)

        self.assertEqual(loaded.match_id, "42")
        self.assertEqual(loaded.home_away, HomeAway.AWAY)
        self.assertEqual(loaded.last_timestamp, 1700000000.0)
        self.assertEqual(loaded.opponent_lineup, (5, 9))
        self.assertEqual(loaded.initial_lineup[0], MatchPlayer("P1", 4, "DF"))
        self.assertEqual(loaded.events[0].team_type, TeamSide.OWN)
        self.assertEqual(loaded.score_for(TeamSide.OWN), 1)
        self.assertFalse(loaded.is_finished)

    def test_finished_status_marks_match_finished(self) -> None:
        with open(self.file_path, "w", encoding="utf-8") as f:
            json.dump({"id": "x", "status": "FINISHED"}, f)
        self.assertTrue(PersistenceService.load_match_from_file(self.file_path).is_finished)

    def test_auto_save_and_recent_saves(self) -> None:
        path = PersistenceService.auto_save(self.state, self.temp_dir)
        self.assertIsNotNone(path)
        self.assertTrue(os.path.basename(path).startswith("match_autosave_"))

        saves = PersistenceService.get_recent_saves(self.temp_dir)
        self.assertEqual([name for name, _ in saves], [os.path.basename(path)])

    def test_recent_saves_only_lists_autosaves(self) -> None:
        PersistenceService.save_match_to_file(self.state, os.path.join(self.temp_dir, "notes.json"))
        path = PersistenceService.auto_save(self.state, self.temp_dir)
        self.assertIn("_m1_", os.path.basename(path))
        self.assertEqual(
            [name for name, _ in PersistenceService.get_recent_saves(self.temp_dir)],
            [os.path.basename(path)],
        )

    def test_document_round_trip_without_files(self) -> None:
        data = PersistenceService.serialize_match_state(self.state)
        self.assertEqual(PersistenceService.deserialize_match_state(data), self.state)
        with self.assertRaises(ValueError):
            PersistenceService.deserialize_match_state("not a match")

    def test_auto_save_failure_returns_none(self) -> None:
        blocker = os.path.join(self.temp_dir, "not_a_dir")
        with open(blocker, "w", encoding="utf-8") as f:
            f.write("x")
        with self.assertLogs("matchclock.services.persistence_service", level="WARNING"):
            self.assertIsNone(PersistenceService.auto_save(self.state, blocker))

    def test_recent_saves_missing_directory(self) -> None:
        self.assertEqual(PersistenceService.get_recent_saves(os.path.join(self.temp_dir, "none")), [])


if __name__ == "__main__":
    unittest.main()
