"""
Web application module for the match timeline engine.

This module contains the Flask web server exposing the match state and every
operator command as JSON API endpoints. The server keeps one in-process match
session; it assumes a single operator drives the match at a time.
"""
import json
import logging
import os
from typing import Any, Dict, Optional, Tuple

from flask import Flask, Response, jsonify, request

from ..models import (
    EventType, HomeAway, MatchPlayer, MatchState, PeriodType, TeamSide, ValidationError
)
from ..services import (
    AddEvent, AddGoal, AddPeriod, ApplySubstitution, Command, CommandResult,
    ContinueLastPeriod, Finish, MatchCommandManager, Pause, PeriodSequence,
    PersistenceService, RemoveEvent, RemoveGoal, RemoveLastPeriod,
    RemoveSubstitution, ReportService, Resume, SetInitialLineup, Start, StartInterval
)
from ..utils import AUTOSAVE_DIR, DEFAULT_HOST, DEFAULT_PORT, fmt_mmss, now_ts

logger = logging.getLogger(__name__)


class WebAppState:
    """
    State holder for the web application: one match session and its services.

    With an ``autosave_dir`` every accepted command is followed by an autosave,
    so a crashed console can be restored from the most recent file.
    """

    def __init__(self, state: Optional[MatchState] = None, autosave_dir: Optional[str] = None):
        self.session = MatchCommandManager(state)
        self.persistence_service = PersistenceService()
        self.autosave_dir = autosave_dir

    @property
    def match(self) -> MatchState:
        return self.session.state

    def load(self, state: MatchState) -> None:
        """Replace the session after loading a save; history does not survive."""
        self.session.reset(state)

    def autosave(self) -> Optional[str]:
        if not self.autosave_dir:
            return None
        return self.persistence_service.auto_save(self.match, self.autosave_dir)


class BadRequest(Exception):
    """Malformed request payload."""


def _payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


def _enum(enum_cls, value: Any, field: str):
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise BadRequest(f"Invalid {field} '{value}' (expected one of: {allowed})")


def _optional_int(data: Dict[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequest(f"'{key}' must be an integer")


def _required(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None or str(value).strip() == "":
        raise BadRequest(f"'{key}' is required")
    return str(value)


def build_match_payload(state: MatchState, now: Optional[float] = None) -> Dict[str, Any]:
    """Serialize the match plus the derived values the UI renders."""
    now = now_ts() if now is None else now
    sequence = PeriodSequence.from_state(state)
    periods = []
    for idx, (period, duration) in enumerate(zip(state.periods, sequence.durations(now))):
        periods.append({
            **period.to_json(),
            "index": idx,
            "duration": duration,
            "duration_label": fmt_mmss(duration),
            "is_current": idx == sequence.current_index,
        })
    data = state.to_json()
    data.update({
        "status": state.status.value,
        "periods": periods,
        "current_period_index": sequence.current_index,
        "period_elapsed_seconds": sequence.elapsed(now),
        "period_elapsed_label": fmt_mmss(sequence.elapsed(now)),
        "match_elapsed_seconds": sequence.total_elapsed(now),
        "own_score": state.score_for(TeamSide.OWN),
        "opponent_score": state.score_for(TeamSide.OPPONENT),
    })
    return data


def create_app(app_state: Optional[WebAppState] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        app_state: Session holder to serve (a fresh match by default)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    state_holder = app_state or WebAppState()
    app.config["MATCH_STATE"] = state_holder

    def _respond(result: CommandResult) -> Tuple[Any, int]:
        if result.ok:
            return jsonify({"success": True, "match": build_match_payload(result.state)}), 200
        return _error(result.error)

    def _error(error: ValidationError) -> Tuple[Any, int]:
        return jsonify({
            "success": False,
            "error": error.message,
            "kind": error.kind.value,
            "match": build_match_payload(state_holder.match),
        }), 400

    def _run(command: Command) -> Tuple[Any, int]:
        result = state_holder.session.execute_command(command)
        if result.ok:
            state_holder.autosave()
        return _respond(result)

    @app.errorhandler(BadRequest)
    def handle_bad_request(exc: BadRequest):
        return jsonify({"success": False, "error": str(exc)}), 400

    # ==================== Match state ==================== #

    @app.route("/api/match", methods=["GET"])
    def get_match():
        """Current match state with live clock values."""
        return jsonify({"success": True, "match": build_match_payload(state_holder.match)})

    @app.route("/api/match", methods=["POST"])
    def new_match():
        """Start a fresh, pre-start match session."""
        data = _payload()
        state = MatchState(
            match_id=str(data.get("match_id", "")),
            opponent=str(data.get("opponent", "")),
            home_away=_enum(HomeAway, data.get("home_away", "home"), "home_away"),
        )
        state_holder.load(state)
        return jsonify({"success": True, "match": build_match_payload(state)}), 201

    # ==================== Clock and periods ==================== #

    @app.route("/api/match/start", methods=["POST"])
    def start_match():
        return _run(Start())

    @app.route("/api/match/pause", methods=["POST"])
    def pause_match():
        return _run(Pause())

    @app.route("/api/match/resume", methods=["POST"])
    def resume_match():
        return _run(Resume())

    @app.route("/api/match/finish", methods=["POST"])
    def finish_match():
        return _run(Finish())

    @app.route("/api/match/continue", methods=["POST"])
    def continue_match():
        return _run(ContinueLastPeriod())

    @app.route("/api/periods", methods=["POST"])
    def add_period():
        data = _payload()
        period_type = _enum(PeriodType, data.get("type", "regular"), "type")
        return _run(AddPeriod(period_type=period_type, label=data.get("label")))

    @app.route("/api/periods/interval", methods=["POST"])
    def start_interval():
        return _run(StartInterval(label=_payload().get("label")))

    @app.route("/api/periods/last", methods=["DELETE"])
    def remove_last_period():
        return _run(RemoveLastPeriod())

    # ==================== Lineup and substitutions ==================== #

    @app.route("/api/lineup", methods=["PUT"])
    def set_lineup():
        data = _payload()
        raw = data.get("lineup")
        if not isinstance(raw, list):
            raise BadRequest("'lineup' must be a list")
        try:
            lineup = tuple(MatchPlayer.from_json(entry) for entry in raw)
            opponent = data.get("opponent_lineup")
            opponent_lineup = tuple(int(n) for n in opponent) if opponent is not None else None
        except (TypeError, ValueError, AttributeError) as exc:
            raise BadRequest(f"Invalid lineup: {exc}")
        return _run(SetInitialLineup(lineup=lineup, opponent_lineup=opponent_lineup))

    @app.route("/api/substitutions", methods=["POST"])
    def add_substitution():
        data = _payload()
        return _run(ApplySubstitution(
            player_out=_required(data, "player_out"),
            player_in=_required(data, "player_in"),
            minute=_optional_int(data, "minute"),
            second=_optional_int(data, "second"),
        ))

    @app.route("/api/substitutions/<substitution_id>", methods=["DELETE"])
    def remove_substitution(substitution_id: str):
        return _run(RemoveSubstitution(substitution_id=substitution_id))

    # ==================== Score and events ==================== #

    @app.route("/api/goals", methods=["POST"])
    def add_goal():
        data = _payload()
        return _run(AddGoal(
            side=_enum(TeamSide, data.get("side", "own"), "side"),
            scorer_id=_required(data, "scorer_id"),
            minute=_optional_int(data, "minute"),
            second=_optional_int(data, "second"),
        ))

    @app.route("/api/goals/<side>/last", methods=["DELETE"])
    def remove_goal(side: str):
        return _run(RemoveGoal(side=_enum(TeamSide, side, "side")))

    @app.route("/api/events", methods=["POST"])
    def add_event():
        data = _payload()
        return _run(AddEvent(
            event_type=_enum(EventType, _required(data, "type"), "type"),
            player_id=_required(data, "player_id"),
            side=_enum(TeamSide, data.get("side", "own"), "side"),
            minute=_optional_int(data, "minute"),
            second=_optional_int(data, "second"),
            description_text=str(data.get("description", "")),
        ))

    @app.route("/api/events/<event_id>", methods=["DELETE"])
    def remove_event(event_id: str):
        return _run(RemoveEvent(event_id=event_id))

    # ==================== History ==================== #

    @app.route("/api/undo", methods=["POST"])
    def undo():
        success = state_holder.session.undo()
        return jsonify({"success": success, "match": build_match_payload(state_holder.match)})

    @app.route("/api/redo", methods=["POST"])
    def redo():
        success = state_holder.session.redo()
        return jsonify({"success": success, "match": build_match_payload(state_holder.match)})

    @app.route("/api/command-history", methods=["GET"])
    def command_history():
        session = state_holder.session
        return jsonify({
            "success": True,
            "history": session.get_command_history(),
            "can_undo": session.can_undo(),
            "can_redo": session.can_redo(),
        })

    # ==================== Reports ==================== #

    @app.route("/api/report", methods=["GET"])
    def match_report():
        report = ReportService(state_holder.match).generate_match_report()
        periods = [
            {
                "index": p.index,
                "label": p.label,
                "type": p.period_type,
                "duration_seconds": p.duration_seconds,
                "duration_label": p.duration_label,
                "start_seconds": p.start_seconds,
                "end_seconds": p.end_seconds,
                "events": [e.to_json() for e in p.events],
                "substitutions": [s.to_json() for s in p.substitutions],
            }
            for p in report.periods
        ]
        return jsonify({
            "success": True,
            "report": {
                "status": report.status,
                "home_score": report.home_score,
                "away_score": report.away_score,
                "total_seconds": report.total_seconds,
                "periods": periods,
                "own": vars(report.own),
                "opponent": vars(report.opponent_stats),
                "score_consistent": report.score_consistent,
            },
        })

    @app.route("/api/report/export", methods=["GET"])
    def export_report():
        csv_content = ReportService(state_holder.match).export_match_report_csv()
        filename = f"match_report_{state_holder.match.match_id or 'current'}.csv"
        return Response(
            csv_content,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    # ==================== Persistence ==================== #

    @app.route("/api/save", methods=["POST"])
    def save_match():
        """Return the persisted document for client-side saving."""
        data = state_holder.persistence_service.serialize_match_state(state_holder.match)
        return jsonify({"success": True, "data": data})

    @app.route("/api/saves", methods=["GET"])
    def recent_saves():
        """Autosave files the console can restore from, newest first."""
        if not state_holder.autosave_dir:
            return jsonify({"success": True, "saves": []})
        saves = state_holder.persistence_service.get_recent_saves(state_holder.autosave_dir)
        return jsonify({
            "success": True,
            "saves": [{"name": name, "modified": modified} for name, modified in saves],
        })

    @app.route("/api/load", methods=["POST"])
    def load_match():
        """Load a match from an uploaded document or from a listed autosave."""
        data = _payload()
        service = state_holder.persistence_service
        try:
            if "match_data" in data:
                state = service.deserialize_match_state(data["match_data"])
            else:
                state = service.load_match_from_file(_autosave_path(_required(data, "save_name")))
        except FileNotFoundError as exc:
            return jsonify({"success": False, "error": str(exc)}), 404
        except (ValueError, json.JSONDecodeError) as exc:
            return jsonify({"success": False, "error": str(exc)}), 400
        state_holder.load(state)
        return jsonify({"success": True, "match": build_match_payload(state)})

    def _autosave_path(name: str) -> str:
        # Only files from the autosave listing are readable
        directory = state_holder.autosave_dir
        listed = state_holder.persistence_service.get_recent_saves(directory) if directory else []
        if name not in {entry for entry, _ in listed}:
            raise FileNotFoundError(f"No autosave named {name}")
        return os.path.join(directory, name)

    return app


def run_web_app(
    host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, autosave_dir: Optional[str] = AUTOSAVE_DIR
) -> None:
    """
    Run the web application.

    Args:
        host: Host address to bind to (default: localhost only)
        port: Port number to listen on
        autosave_dir: Directory for autosaves after each command (None disables them)
    """
    app = create_app(WebAppState(autosave_dir=autosave_dir))
    logger.info("Serving match API on http://%s:%d", host, port)
    app.run(host=host, port=port, debug=False)


if __name__ == "__main__":
    run_web_app(
        host=os.environ.get("MATCHCLOCK_HOST", DEFAULT_HOST),
        port=int(os.environ.get("MATCHCLOCK_PORT", DEFAULT_PORT)),
        autosave_dir=os.environ.get("MATCHCLOCK_AUTOSAVE_DIR", AUTOSAVE_DIR),
    )
