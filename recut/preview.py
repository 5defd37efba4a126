"""Preview timeline builder — applies cuts and speed changes non-destructively."""

import logging
from dataclasses import dataclass
from typing import Sequence

from recut.intervals import (
    clip_to_duration,
    contains,
    contains_time,
    merge_overlapping,
    split_at,
    subtract_from_duration,
    total_duration,
)
from recut.models import EditDecision, EditKind, SpeedParams, TimeRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreviewSegment:
    """A kept span of the original media and where it lands in the preview."""

    original_start: float
    original_end: float
    preview_start: float
    preview_end: float
    speed_factor: float = 1.0
    is_cut: bool = False

    @property
    def original_range(self) -> TimeRange:
        return TimeRange(start=self.original_start, end=self.original_end)


@dataclass(frozen=True)
class PreviewTimeline:
    segments: tuple[PreviewSegment, ...]
    original_duration: float
    preview_duration: float
    total_cut_duration: float
    cut_count: int


@dataclass(frozen=True)
class EditSavings:
    saved_seconds: float
    saved_percentage: float
    original_duration: float
    new_duration: float


def _speed_factor(decision: EditDecision) -> float:
    params = decision.params
    if isinstance(params, SpeedParams) and params.factor > 0:
        return params.factor
    return 1.0


def _factor_for(piece: TimeRange, speed_edits: Sequence[EditDecision]) -> float:
    # First containing edit in input order wins; factors never stack.
    for edit in speed_edits:
        if contains(edit.range, piece):
            return _speed_factor(edit)
    return 1.0


def _cut_ranges(decisions: Sequence[EditDecision]) -> list[TimeRange]:
    return [d.range for d in decisions if d.kind == EditKind.CUT]


def build_preview_timeline(
    duration: float, decisions: Sequence[EditDecision]
) -> PreviewTimeline:
    """Derive the preview timeline for *decisions* over media of *duration*.

    Cuts always win over speed edits covering the same time. A kept range is
    split where speed edits begin or end inside it, and each piece plays at
    the factor of the first speed edit containing it.
    """
    cut_ranges = _cut_ranges(decisions)
    speed_edits = [d for d in decisions if d.kind == EditKind.SPEED]

    merged_cuts = merge_overlapping(clip_to_duration(cut_ranges, max(duration, 0.0)))
    kept_ranges = subtract_from_duration(duration, merged_cuts)

    boundaries = [t for e in speed_edits for t in (e.start, e.end)]
    segments: list[PreviewSegment] = []
    preview_time = 0.0

    for kept in kept_ranges:
        pieces: list[tuple[TimeRange, float]] = []
        for piece in split_at(kept, boundaries):
            factor = _factor_for(piece, speed_edits)
            if pieces and pieces[-1][1] == factor:
                prev, _ = pieces[-1]
                pieces[-1] = (TimeRange(start=prev.start, end=piece.end), factor)
            else:
                pieces.append((piece, factor))

        for piece, factor in pieces:
            length = piece.duration / factor
            segments.append(
                PreviewSegment(
                    original_start=piece.start,
                    original_end=piece.end,
                    preview_start=preview_time,
                    preview_end=preview_time + length,
                    speed_factor=factor,
                )
            )
            preview_time += length

    timeline = PreviewTimeline(
        segments=tuple(segments),
        original_duration=duration,
        preview_duration=preview_time,
        total_cut_duration=total_duration(merged_cuts),
        cut_count=len(merged_cuts),
    )
    logger.debug(
        "Built preview: %d segments, %.3fs -> %.3fs, %d cuts",
        len(segments), duration, preview_time, timeline.cut_count,
    )
    return timeline


def is_time_cut(t: float, decisions: Sequence[EditDecision]) -> bool:
    """True if original time *t* falls inside any cut."""
    return cut_at_time(t, decisions) is not None


def cut_at_time(t: float, decisions: Sequence[EditDecision]) -> EditDecision | None:
    """Return the first cut decision covering original time *t*, if any."""
    for d in decisions:
        if d.kind == EditKind.CUT and contains_time(d.range, t):
            return d
    return None


def calculate_edit_savings(timeline: PreviewTimeline) -> EditSavings:
    saved = timeline.original_duration - timeline.preview_duration
    pct = saved / timeline.original_duration * 100 if timeline.original_duration > 0 else 0.0
    return EditSavings(
        saved_seconds=saved,
        saved_percentage=pct,
        original_duration=timeline.original_duration,
        new_duration=timeline.preview_duration,
    )
