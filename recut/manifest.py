"""JSON manifest schema — the contract between CLI/API and engine.

Edit decisions, annotations and transcript segments use the camelCase keys of
the external analysis/interpreter payloads (``startTime``, ``endTime``, ...).
"""

import json
import math
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from recut.models import (
    ANNOTATION_TYPES,
    Annotation,
    AudioParams,
    CaptionParams,
    CommandResult,
    CutParams,
    EditDecision,
    EditKind,
    EditParams,
    SpeedParams,
    TimeRange,
    TranscriptSegment,
    TranscriptWord,
    VideoAnalysis,
    ZoomParams,
    new_decision_id,
)

CAPTION_POSITIONS = ("top", "center", "bottom")
CAPTION_STYLES = ("default", "bold", "outline")


@dataclass
class InterpreterConfig:
    """Settings handed to the external command interpreter."""

    model: str = "gemini-2.0-flash"
    max_annotations: int = 50
    max_transcript_segments: int = 20


@dataclass
class SessionConfig:
    """Configuration for an editing session."""

    command_history_limit: int = 50
    max_history: int | None = None


@dataclass
class Manifest:
    """Top-level editing manifest."""

    duration: float
    version: str = "1"
    decisions: list[EditDecision] = field(default_factory=list)
    analysis: VideoAnalysis | None = None
    session: SessionConfig = field(default_factory=SessionConfig)
    interpreter: InterpreterConfig = field(default_factory=InterpreterConfig)


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{name}' must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"'{name}' must be finite, got {value!r}")
    return float(value)


def _optional_number(params: dict, key: str) -> float | None:
    return _number(params[key], key) if params.get(key) is not None else None


def _choice(params: dict, key: str, allowed: tuple[str, ...]) -> str | None:
    value = params.get(key)
    if value is not None and value not in allowed:
        raise ValueError(f"'{key}' must be one of {', '.join(allowed)}, got {value!r}")
    return value


def params_from_dict(kind: EditKind, params: dict | None) -> EditParams | None:
    """Build the kind-specific parameter object for *kind*."""
    params = params or {}
    if not isinstance(params, dict):
        raise ValueError(f"'params' must be an object, got {params!r}")

    if kind == EditKind.CUT:
        return CutParams(reason=params.get("reason"))
    if kind == EditKind.SPEED:
        raw = params.get("factor", params.get("speed"))
        if raw is None:
            raise ValueError("Speed edits require a 'factor'")
        factor = _number(raw, "factor")
        if factor <= 0:
            raise ValueError(f"Speed factor must be positive, got {factor}")
        return SpeedParams(factor=factor)
    if kind == EditKind.CAPTION:
        text = params.get("text")
        if not isinstance(text, str):
            raise ValueError("Caption edits require a 'text' string")
        return CaptionParams(
            text=text,
            position=_choice(params, "position", CAPTION_POSITIONS),
            style=_choice(params, "style", CAPTION_STYLES),
        )
    if kind == EditKind.ZOOM:
        scale = _optional_number(params, "scale")
        return ZoomParams(
            scale=1.0 if scale is None else scale,
            x=_optional_number(params, "x"),
            y=_optional_number(params, "y"),
        )
    if kind == EditKind.AUDIO:
        return AudioParams(
            volume=_optional_number(params, "volume"),
            normalize=bool(params.get("normalize", False)),
            mute=bool(params.get("mute", False)),
        )
    return None


def params_to_dict(params: EditParams | None) -> dict:
    if params is None:
        return {}
    return {k: v for k, v in vars(params).items() if v is not None}


def decision_from_dict(data: dict, command: str | None = None) -> EditDecision:
    """Parse one edit decision; raises ValueError on malformed input."""
    if not isinstance(data, dict):
        raise ValueError(f"Edit decision must be an object, got {data!r}")
    try:
        kind = EditKind(data.get("type"))
    except ValueError:
        raise ValueError(f"Unknown edit type {data.get('type')!r}") from None

    start = _number(data.get("startTime"), "startTime")
    end = _number(data.get("endTime"), "endTime")
    if end < start:
        raise ValueError(f"endTime {end} precedes startTime {start}")

    created_at = data.get("createdAt")
    extra = {"created_at": datetime.fromisoformat(created_at)} if created_at else {}

    return EditDecision(
        id=str(data.get("id") or new_decision_id()),
        kind=kind,
        range=TimeRange(start=start, end=end),
        params=params_from_dict(kind, data.get("params")),
        command=data.get("command", command),
        **extra,
    )


def decision_to_dict(decision: EditDecision) -> dict:
    return {
        "id": decision.id,
        "type": decision.kind.value,
        "startTime": decision.start,
        "endTime": decision.end,
        "params": params_to_dict(decision.params),
        "command": decision.command,
        "createdAt": decision.created_at.isoformat(),
    }


def _word_from_dict(data: dict) -> TranscriptWord:
    return TranscriptWord(
        word=data["word"],
        start_time=float(data["startTime"]),
        end_time=float(data["endTime"]),
        confidence=float(data.get("confidence", 1.0)),
        speaker_id=data.get("speakerId"),
    )


def annotation_from_dict(data: dict) -> Annotation:
    if data.get("type") not in ANNOTATION_TYPES:
        raise ValueError(f"Unknown annotation type {data.get('type')!r}")
    return Annotation(
        id=str(data.get("id") or new_decision_id()),
        type=data["type"],
        start_time=float(data["startTime"]),
        end_time=float(data["endTime"]),
        confidence=float(data.get("confidence", 1.0)),
        label=data.get("label"),
        metadata=data.get("metadata") or {},
    )


def transcript_segment_from_dict(data: dict) -> TranscriptSegment:
    return TranscriptSegment(
        id=str(data.get("id") or new_decision_id()),
        start_time=float(data["startTime"]),
        end_time=float(data["endTime"]),
        text=data.get("text", ""),
        speaker=data.get("speaker"),
        is_filler=bool(data.get("isFiller", False)),
        words=[_word_from_dict(w) for w in data.get("words") or []],
    )


def analysis_from_dict(data: dict) -> VideoAnalysis:
    if "duration" not in data:
        raise ValueError("Analysis must contain a 'duration' field")
    return VideoAnalysis(
        duration=float(data["duration"]),
        annotations=[annotation_from_dict(a) for a in data.get("annotations", [])],
        transcript=[transcript_segment_from_dict(t) for t in data.get("transcript", [])],
        summary=data.get("summary", ""),
        detected_speakers=int(data.get("detectedSpeakers", 0)),
        filler_word_count=int(data.get("fillerWordCount", 0)),
        silence_gap_count=int(data.get("silenceGapCount", 0)),
        scene_change_count=int(data.get("sceneChangeCount", 0)),
    )


def manifest_from_dict(data: dict) -> Manifest:
    """Build a Manifest from parsed JSON. Raises ValueError on any bad field."""
    try:
        return _manifest_from_dict(data)
    except KeyError as e:
        raise ValueError(f"Manifest is missing required field {e}") from e
    except TypeError as e:
        raise ValueError(f"Invalid manifest: {e}") from e


def _manifest_from_dict(data: dict) -> Manifest:
    analysis = analysis_from_dict(data["analysis"]) if "analysis" in data else None
    if "duration" in data:
        duration = float(data["duration"])
    elif analysis is not None:
        duration = analysis.duration
    else:
        raise ValueError("Manifest must contain a 'duration' or an 'analysis' field")

    session = SessionConfig(**data["session"]) if "session" in data else SessionConfig()
    interpreter = (
        InterpreterConfig(**data["interpreter"]) if "interpreter" in data else InterpreterConfig()
    )

    return Manifest(
        version=data.get("version", "1"),
        duration=duration,
        decisions=[decision_from_dict(d) for d in data.get("decisions", [])],
        analysis=analysis,
        session=session,
        interpreter=interpreter,
    )


def load_manifest(path: str | Path) -> Manifest:
    """Load and validate a manifest from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text())
    return manifest_from_dict(data)


def command_result_to_dict(result: CommandResult) -> dict:
    return {
        "success": result.success,
        "command": result.command,
        "interpretation": result.interpretation,
        "edits": [decision_to_dict(e) for e in result.edits],
        "affectedTimeRanges": [{"start": r.start, "end": r.end} for r in result.affected_time_ranges],
        "error": result.error,
    }
