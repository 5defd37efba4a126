"""Shared data types used across recut."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union


@dataclass(frozen=True)
class TimeRange:
    """A start/end time pair in seconds (half-open: [start, end))."""

    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start


class EditKind(str, Enum):
    """The kind of edit an EditDecision performs."""

    CUT = "cut"
    KEEP = "keep"
    SPEED = "speed"
    CAPTION = "caption"
    ZOOM = "zoom"
    AUDIO = "audio"


@dataclass(frozen=True)
class CutParams:
    reason: str | None = None


@dataclass(frozen=True)
class SpeedParams:
    """Playback speed: 0.5 is half speed, 2 is double speed."""

    factor: float = 1.0


@dataclass(frozen=True)
class CaptionParams:
    text: str
    position: str | None = None  # top / center / bottom
    style: str | None = None  # default / bold / outline


@dataclass(frozen=True)
class ZoomParams:
    """Digital zoom; x/y are the 0-1 center point."""

    scale: float = 1.0
    x: float | None = None
    y: float | None = None


@dataclass(frozen=True)
class AudioParams:
    volume: float | None = None  # 0-2, 1 = normal
    normalize: bool = False
    mute: bool = False


EditParams = Union[CutParams, SpeedParams, CaptionParams, ZoomParams, AudioParams]


@dataclass(frozen=True)
class EditDecision:
    """A declarative edit over a time range of the original media."""

    id: str
    kind: EditKind
    range: TimeRange
    params: EditParams | None = None
    command: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def start(self) -> float:
        return self.range.start

    @property
    def end(self) -> float:
        return self.range.end


def new_decision_id() -> str:
    return uuid.uuid4().hex[:12]


def new_decision(
    kind: EditKind,
    start: float,
    end: float,
    params: EditParams | None = None,
    command: str | None = None,
) -> EditDecision:
    """Create an EditDecision with a fresh id and a UTC creation time."""
    return EditDecision(
        id=new_decision_id(),
        kind=EditKind(kind),
        range=TimeRange(start=start, end=end),
        params=params,
        command=command,
    )


ANNOTATION_TYPES = ("talking", "silence", "scene", "filler", "noise", "music")


@dataclass
class Annotation:
    """A labeled time span produced by the external analysis pipeline."""

    id: str
    type: str
    start_time: float
    end_time: float
    confidence: float = 1.0
    label: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def range(self) -> TimeRange:
        return TimeRange(start=self.start_time, end=self.end_time)


@dataclass
class TranscriptWord:
    word: str
    start_time: float
    end_time: float
    confidence: float = 1.0
    speaker_id: str | None = None


@dataclass
class TranscriptSegment:
    """A timed transcript segment, optionally carrying word timings."""

    id: str
    start_time: float
    end_time: float
    text: str
    speaker: str | None = None
    is_filler: bool = False
    words: list[TranscriptWord] = field(default_factory=list)

    @property
    def range(self) -> TimeRange:
        return TimeRange(start=self.start_time, end=self.end_time)


@dataclass
class VideoAnalysis:
    """Annotations and transcript for one media file."""

    duration: float
    annotations: list[Annotation] = field(default_factory=list)
    transcript: list[TranscriptSegment] = field(default_factory=list)
    summary: str = ""
    detected_speakers: int = 0
    filler_word_count: int = 0
    silence_gap_count: int = 0
    scene_change_count: int = 0

    def annotations_of(self, type_: str) -> list[Annotation]:
        return [a for a in self.annotations if a.type == type_]


@dataclass
class CommandResult:
    """Outcome of interpreting one free-text command."""

    success: bool
    command: str
    interpretation: str
    edits: list[EditDecision] = field(default_factory=list)
    affected_time_ranges: list[TimeRange] = field(default_factory=list)
    error: str | None = None
