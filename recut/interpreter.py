"""Command interpretation boundary.

Quick commands are resolved locally; everything else goes to an injected
interpreter callable (typically an LLM client owned by the caller). Whatever
the interpreter does, the result is a CommandResult and never a partial set
of edits.
"""

import json
import logging
from typing import Any, Callable

from recut.analyzers.quick_commands import try_quick_command
from recut.manifest import InterpreterConfig, decision_from_dict
from recut.models import CommandResult, TimeRange, VideoAnalysis

logger = logging.getLogger(__name__)

# Called with (prompt, analysis, config); returns the raw JSON-like payload.
# config.model names the model the collaborator should query.
Interpreter = Callable[[str, VideoAnalysis, InterpreterConfig], dict[str, Any]]

COMMAND_SYSTEM_PROMPT = """\
You are a video editing assistant. The user will give you a natural language command about editing a video.
Based on the video analysis data provided, interpret the command and return specific edit decisions.

AVAILABLE EDIT TYPES:
- "cut": Remove a time range from the video
- "keep": Mark a range to keep (implies cutting everything else)
- "speed": Change playback speed of a range (params.factor)
- "caption": Add text overlay (params.text, params.position)
- "zoom": Add digital zoom effect (params.scale, params.x, params.y)
- "audio": Adjust audio (params.volume, params.normalize, params.mute)

RULES:
1. All times must be in seconds
2. startTime must be less than endTime
3. Times must be within the video duration
4. Be precise with timing based on the transcript and annotations
5. Return empty edits array if the command cannot be fulfilled

Respond with JSON: {"success": bool, "interpretation": str, "edits": [{"type", "startTime", "endTime", "params"}], "error": str?}"""


class InterpreterError(RuntimeError):
    """Raised when an interpreter payload cannot be turned into edits."""


def _annotation_json(analysis: VideoAnalysis, limit: int) -> str:
    return json.dumps(
        [
            {"type": a.type, "startTime": a.start_time, "endTime": a.end_time,
             "confidence": a.confidence, "label": a.label}
            for a in analysis.annotations[:limit]
        ],
        indent=2,
    )


def _transcript_json(analysis: VideoAnalysis, limit: int) -> str:
    return json.dumps(
        [
            {"startTime": t.start_time, "endTime": t.end_time, "text": t.text,
             "speaker": t.speaker, "isFiller": t.is_filler}
            for t in analysis.transcript[:limit]
        ],
        indent=2,
    )


def build_prompt(
    command: str,
    analysis: VideoAnalysis,
    config: InterpreterConfig | None = None,
) -> str:
    """Render the prompt an external interpreter receives for *command*."""
    config = config or InterpreterConfig()
    return f"""{COMMAND_SYSTEM_PROMPT}

VIDEO ANALYSIS:
- Duration: {analysis.duration} seconds
- Detected speakers: {analysis.detected_speakers}
- Filler word count: {analysis.filler_word_count}
- Silence gaps: {analysis.silence_gap_count}
- Scene changes: {analysis.scene_change_count}

ANNOTATIONS (first {config.max_annotations}):
{_annotation_json(analysis, config.max_annotations)}

TRANSCRIPT (first {config.max_transcript_segments} segments):
{_transcript_json(analysis, config.max_transcript_segments)}

USER COMMAND: "{command}"

Interpret this command and return edit decisions."""


def parse_interpreter_payload(command: str, payload: Any) -> CommandResult:
    """Convert a raw interpreter payload into a CommandResult.

    Raises InterpreterError if the payload or any of its edits is malformed.
    """
    if not isinstance(payload, dict):
        raise InterpreterError(f"Interpreter returned {type(payload).__name__}, expected an object")
    success = payload.get("success")
    if not isinstance(success, bool):
        raise InterpreterError("Interpreter 'success' must be a boolean")
    interpretation = payload.get("interpretation")
    if not isinstance(interpretation, str):
        raise InterpreterError("Interpreter 'interpretation' must be a string")
    raw_edits = payload.get("edits", [])
    if not isinstance(raw_edits, list):
        raise InterpreterError("Interpreter 'edits' must be a list")

    try:
        edits = [decision_from_dict({**e, "id": None}, command=command) for e in raw_edits]
    except (ValueError, TypeError) as e:
        raise InterpreterError(f"Malformed edit from interpreter: {e}") from e

    if not success:
        edits = []

    error = payload.get("error")
    return CommandResult(
        success=success,
        command=command,
        interpretation=interpretation,
        edits=edits,
        affected_time_ranges=[TimeRange(start=e.start, end=e.end) for e in edits],
        error=str(error) if error is not None else None,
    )


def _failed(command: str, interpretation: str, error: str) -> CommandResult:
    return CommandResult(
        success=False,
        command=command,
        interpretation=interpretation,
        error=error,
    )


def interpret_command(
    command: str,
    analysis: VideoAnalysis,
    interpreter: Interpreter | None = None,
    config: InterpreterConfig | None = None,
) -> CommandResult:
    """Turn *command* into edit decisions.

    Quick commands win; otherwise *interpreter* is consulted. Interpreter
    failures come back as a failed result with no edits.
    """
    quick = try_quick_command(command, analysis)
    if quick is not None:
        return quick

    if interpreter is None:
        return _failed(
            command,
            "No quick command matched",
            "No interpreter configured for free-form commands.",
        )

    config = config or InterpreterConfig()
    prompt = build_prompt(command, analysis, config)
    try:
        payload = interpreter(prompt, analysis, config)
        result = parse_interpreter_payload(command, payload)
    except Exception as e:
        logger.warning("Interpreter failed for %r: %s", command, e)
        return _failed(command, "Failed to interpret command", str(e) or type(e).__name__)

    logger.info("Interpreter produced %d edits for %r", len(result.edits), command)
    return result
