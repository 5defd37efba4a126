"""Web API routes for recut."""

import threading
import uuid
from dataclasses import asdict

from flask import Blueprint, current_app, jsonify, request

from recut.engine import EditSession
from recut.manifest import (
    analysis_from_dict,
    command_result_to_dict,
    decision_from_dict,
    decision_to_dict,
)
from recut.timemap import original_to_preview, preview_to_original

bp = Blueprint("web", __name__)

# In-memory session store: session_id -> {"session": EditSession, "lock": Lock}
_sessions: dict[str, dict] = {}


def _lookup(session_id: str) -> dict | None:
    return _sessions.get(session_id)


def _state(session_id: str, session: EditSession) -> dict:
    return {
        "session_id": session_id,
        "duration": session.duration,
        "edits": [decision_to_dict(d) for d in session.decisions],
        "can_undo": session.store.can_undo,
        "can_redo": session.store.can_redo,
        "command_history": session.command_history,
    }


def _not_found():
    return jsonify({"error": "Session not found"}), 404


@bp.route("/api/sessions", methods=["POST"])
def create_session():
    data = request.get_json(silent=True) or {}
    try:
        analysis = analysis_from_dict(data["analysis"]) if "analysis" in data else None
        if "duration" in data:
            duration = float(data["duration"])
        elif analysis is not None:
            duration = analysis.duration
        else:
            return jsonify({"error": "Provide 'duration' or 'analysis'"}), 400
        decisions = [decision_from_dict(d) for d in data.get("edits", [])]
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"error": f"Invalid session payload: {e}"}), 400

    session = EditSession(
        duration=duration,
        analysis=analysis,
        decisions=decisions,
        interpreter=current_app.config["INTERPRETER"],
        config=current_app.config["SESSION_CONFIG"],
        interpreter_config=current_app.config["INTERPRETER_CONFIG"],
    )
    session_id = uuid.uuid4().hex[:12]
    _sessions[session_id] = {"session": session, "lock": threading.Lock()}
    return jsonify(_state(session_id, session))


@bp.route("/api/sessions/<session_id>")
def get_session(session_id: str):
    entry = _lookup(session_id)
    if entry is None:
        return _not_found()
    with entry["lock"]:
        return jsonify(_state(session_id, entry["session"]))


@bp.route("/api/sessions/<session_id>", methods=["DELETE"])
def delete_session(session_id: str):
    entry = _sessions.pop(session_id, None)
    if entry is None:
        return _not_found()
    return jsonify({"session_id": session_id, "deleted": True})


@bp.route("/api/sessions/<session_id>/duration", methods=["PUT"])
def set_duration(session_id: str):
    entry = _lookup(session_id)
    if entry is None:
        return _not_found()
    data = request.get_json(silent=True) or {}
    try:
        duration = float(data["duration"])
    except (KeyError, TypeError, ValueError):
        return jsonify({"error": "Provide a numeric 'duration'"}), 400
    with entry["lock"]:
        entry["session"].set_duration(duration)
        return jsonify(_state(session_id, entry["session"]))


@bp.route("/api/sessions/<session_id>/edits", methods=["POST"])
def add_edits(session_id: str):
    entry = _lookup(session_id)
    if entry is None:
        return _not_found()
    data = request.get_json(silent=True) or {}
    try:
        decisions = [decision_from_dict(d) for d in data.get("edits", [])]
    except (TypeError, ValueError) as e:
        return jsonify({"error": f"Invalid edit: {e}"}), 400

    with entry["lock"]:
        added = entry["session"].store.add(decisions)
        state = _state(session_id, entry["session"])
    state["added"] = [d.id for d in added]
    return jsonify(state)


@bp.route("/api/sessions/<session_id>/edits/<edit_id>", methods=["DELETE"])
def remove_edit(session_id: str, edit_id: str):
    entry = _lookup(session_id)
    if entry is None:
        return _not_found()
    with entry["lock"]:
        removed = entry["session"].store.remove(edit_id)
        state = _state(session_id, entry["session"])
    state["removed"] = removed
    return jsonify(state)


def _history_action(session_id: str, action: str):
    entry = _lookup(session_id)
    if entry is None:
        return _not_found()
    with entry["lock"]:
        changed = getattr(entry["session"].store, action)()
        state = _state(session_id, entry["session"])
    state["changed"] = changed
    return jsonify(state)


@bp.route("/api/sessions/<session_id>/clear", methods=["POST"])
def clear_edits(session_id: str):
    return _history_action(session_id, "clear")


@bp.route("/api/sessions/<session_id>/undo", methods=["POST"])
def undo(session_id: str):
    return _history_action(session_id, "undo")


@bp.route("/api/sessions/<session_id>/redo", methods=["POST"])
def redo(session_id: str):
    return _history_action(session_id, "redo")


@bp.route("/api/sessions/<session_id>/preview")
def preview(session_id: str):
    entry = _lookup(session_id)
    if entry is None:
        return _not_found()
    with entry["lock"]:
        timeline = entry["session"].preview()
    return jsonify(asdict(timeline))


@bp.route("/api/sessions/<session_id>/map")
def map_time(session_id: str):
    entry = _lookup(session_id)
    if entry is None:
        return _not_found()

    original = request.args.get("original", type=float)
    preview_t = request.args.get("preview", type=float)
    if (original is None) == (preview_t is None):
        return jsonify({"error": "Provide exactly one of 'original' or 'preview'"}), 400

    with entry["lock"]:
        timeline = entry["session"].preview()
    if original is not None:
        return jsonify({"original": original, "preview": original_to_preview(original, timeline)})
    return jsonify({"preview": preview_t, "original": preview_to_original(preview_t, timeline)})


@bp.route("/api/sessions/<session_id>/export")
def export_plan(session_id: str):
    entry = _lookup(session_id)
    if entry is None:
        return _not_found()
    with entry["lock"]:
        plan = entry["session"].export_plan()
    return jsonify(asdict(plan))


@bp.route("/api/sessions/<session_id>/commands", methods=["POST"])
def run_command(session_id: str):
    entry = _lookup(session_id)
    if entry is None:
        return _not_found()
    data = request.get_json(silent=True) or {}
    command = data.get("command")
    if not isinstance(command, str) or not command.strip():
        return jsonify({"error": "Provide a 'command' string"}), 400

    # The interpreter call happens under the lock so edits land in order.
    with entry["lock"]:
        result = entry["session"].execute_command(command)
        state = _state(session_id, entry["session"])
    state["result"] = command_result_to_dict(result)
    return jsonify(state)
