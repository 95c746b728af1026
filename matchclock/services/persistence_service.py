"""
Persistence service for the match timeline engine.

This module handles saving and loading match state to/from JSON files. The
saved shape is exactly what the engine needs to rehydrate: periods, lineups,
substitutions, events, score, and the clock's running flag and anchor.
Elapsed time is never folded in at save time; a running clock resumes
correctly on load because elapsed time is computed from the anchor.
"""
import datetime
import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from ..models import MatchState
from ..utils.constants import AUTOSAVE_DIR, AUTOSAVE_PREFIX, RECENT_SAVES_LIMIT

logger = logging.getLogger(__name__)


class PersistenceService:
    """Service for persisting match state to JSON documents and files."""

    @staticmethod
    def serialize_match_state(state: MatchState) -> Dict[str, Any]:
        """Persisted JSON document for ``state``."""
        return state.to_json()

    @staticmethod
    def deserialize_match_state(data: Any) -> MatchState:
        """
        Rebuild a match from a persisted document.

        Raises:
            ValueError: If the document is not an object or misses required fields
        """
        if not isinstance(data, dict):
            raise ValueError("Match data must be a JSON object")
        try:
            return MatchState.from_json(data)
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Invalid match data: {exc}") from exc

    @staticmethod
    def save_match_to_file(state: MatchState, file_path: str) -> None:
        """
        Save match state to a JSON file.

        Args:
            state: The match state to save
            file_path: Path where to save the file

        Raises:
            OSError: If the file cannot be written or the path is invalid
        """
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(PersistenceService.serialize_match_state(state), f, indent=2)
        logger.info("Saved match %s to %s", state.match_id or "-", file_path)

    @staticmethod
    def load_match_from_file(file_path: str) -> MatchState:
        """
        Load match state from a JSON file.

        Args:
            file_path: Path to the JSON file to load

        Returns:
            MatchState instance loaded from file

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file contains invalid JSON
            ValueError: If JSON structure is invalid
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Match file not found: {file_path}")

        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        try:
            state = PersistenceService.deserialize_match_state(data)
        except ValueError as exc:
            raise ValueError(f"{file_path}: {exc}") from exc
        logger.info("Loaded match %s from %s", state.match_id or "-", file_path)
        return state

    @staticmethod
    def auto_save(state: MatchState, auto_save_dir: str = AUTOSAVE_DIR) -> Optional[str]:
        """
        Write the match to a timestamped file in ``auto_save_dir``.

        Returns:
            Path to saved file, or None if save failed
        """
        stamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        match_part = f"_{state.match_id}" if state.match_id.isalnum() else ""
        file_path = os.path.join(auto_save_dir, f"{AUTOSAVE_PREFIX}{match_part}_{stamp}.json")
        try:
            PersistenceService.save_match_to_file(state, file_path)
        except OSError as exc:
            # A failed autosave must never reject the command that triggered it
            logger.warning("Auto-save to %s failed: %s", file_path, exc)
            return None
        return file_path

    @staticmethod
    def get_recent_saves(
        save_dir: str = AUTOSAVE_DIR, limit: int = RECENT_SAVES_LIMIT
    ) -> List[Tuple[str, float]]:
        """
        Autosave files in ``save_dir``, newest first.

        Returns:
            ``(filename, modification_time)`` pairs, at most ``limit`` of them
        """
        try:
            entries = [
                (entry.name, entry.stat().st_mtime)
                for entry in os.scandir(save_dir)
                if entry.is_file()
                and entry.name.startswith(AUTOSAVE_PREFIX)
                and entry.name.endswith(".json")
            ]
        except OSError:
            return []
        return sorted(entries, key=lambda item: item[1], reverse=True)[:limit]
