"""Quick commands — canonical intents resolved from annotations without AI.

Rules are checked in a fixed order and the first one whose trigger matches
produces the result, even when it finds nothing to cut.
"""

import logging
import re
from dataclasses import dataclass

from recut.analyzers.fillers import is_filler_segment
from recut.intervals import merge_overlapping, subtract_from_duration
from recut.models import (
    CommandResult,
    CutParams,
    EditDecision,
    EditKind,
    TimeRange,
    VideoAnalysis,
    new_decision,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuickCommand:
    id: str
    label: str
    command: str
    description: str = ""


QUICK_COMMANDS: tuple[QuickCommand, ...] = (
    QuickCommand(
        id="remove-silence",
        label="Remove Silence",
        command="remove all silence",
        description="Cut out all silent gaps in the video",
    ),
    QuickCommand(
        id="cut-fillers",
        label="Cut Fillers",
        command="cut filler words",
        description="Remove um, uh, like, you know, etc.",
    ),
    QuickCommand(
        id="keep-talking",
        label="Keep Talking Only",
        command="keep only talking segments",
        description="Keep only parts where someone is speaking",
    ),
    QuickCommand(
        id="remove-long-pauses",
        label="Remove Long Pauses",
        command="remove pauses longer than 2 seconds",
        description="Cut pauses that are too long",
    ),
)

_PAUSE_RE = re.compile(
    r"remove.*pause.*(?:longer|over|more)\s*(?:than)?\s*(\d+(?:\.\d+)?)\s*(?:second|sec|s)?",
    re.IGNORECASE,
)
_UM_UH_RE = re.compile(r"\bu+[mh]+\b")


def _cuts(ranges: list[TimeRange], reason: str, command: str) -> list[EditDecision]:
    return [
        new_decision(EditKind.CUT, r.start, r.end, params=CutParams(reason=reason), command=command)
        for r in ranges
    ]


def _nothing_found(command: str, interpretation: str) -> CommandResult:
    return CommandResult(success=True, command=command, interpretation=interpretation)


def _remove_silence(command: str, analysis: VideoAnalysis) -> CommandResult:
    ranges = [a.range for a in analysis.annotations_of("silence")]
    if not ranges:
        return _nothing_found(command, "No silence segments found in the video.")

    return CommandResult(
        success=True,
        command=command,
        interpretation=f"Found {len(ranges)} silence segments to remove.",
        edits=_cuts(ranges, "silence", command),
        affected_time_ranges=ranges,
    )


def _cut_fillers(command: str, analysis: VideoAnalysis) -> CommandResult:
    ranges = [a.range for a in analysis.annotations_of("filler")]
    ranges += [t.range for t in analysis.transcript if is_filler_segment(t)]
    merged = merge_overlapping(ranges)
    if not merged:
        return _nothing_found(command, "No filler words found in the video.")

    return CommandResult(
        success=True,
        command=command,
        interpretation=f"Found {len(merged)} filler word segments to remove.",
        edits=_cuts(merged, "filler", command),
        affected_time_ranges=merged,
    )


def _gap_reason(gap: TimeRange, duration: float) -> str:
    if gap.start <= 0:
        return "before first keep range"
    if gap.end >= duration:
        return "after last keep range"
    return "between keep ranges"


def _keep_talking(command: str, analysis: VideoAnalysis) -> CommandResult:
    talking = [a.range for a in analysis.annotations_of("talking")]
    if not talking:
        return CommandResult(
            success=False,
            command=command,
            interpretation="No talking segments found to keep.",
            error="No talking segments detected in the video.",
        )

    gaps = subtract_from_duration(analysis.duration, talking)
    edits = [
        new_decision(
            EditKind.CUT, g.start, g.end,
            params=CutParams(reason=_gap_reason(g, analysis.duration)),
            command=command,
        )
        for g in gaps
    ]
    return CommandResult(
        success=True,
        command=command,
        interpretation=f"Keeping {len(talking)} talking segments, cutting the rest.",
        edits=edits,
        affected_time_ranges=gaps,
    )


def _remove_long_pauses(command: str, analysis: VideoAnalysis, threshold: float) -> CommandResult:
    ranges = [
        a.range for a in analysis.annotations_of("silence")
        if a.end_time - a.start_time > threshold
    ]
    if not ranges:
        return _nothing_found(command, f"No pauses longer than {threshold:g} seconds found.")

    return CommandResult(
        success=True,
        command=command,
        interpretation=f"Found {len(ranges)} pauses longer than {threshold:g}s to remove.",
        edits=_cuts(ranges, "long pause", command),
        affected_time_ranges=ranges,
    )


def match_rule(command: str) -> str | None:
    """Return the id of the quick command *command* triggers, if any."""
    text = command.lower().strip()

    if "remove" in text and "silence" in text:
        return "remove-silence"
    if "filler" in text or ("cut" in text and _UM_UH_RE.search(text)):
        return "cut-fillers"
    if "keep" in text and any(w in text for w in ("talking", "speech", "speaking")):
        return "keep-talking"
    if _PAUSE_RE.search(text):
        return "remove-long-pauses"
    return None


def try_quick_command(command: str, analysis: VideoAnalysis) -> CommandResult | None:
    """Resolve *command* with a quick rule, or return None to delegate."""
    rule = match_rule(command)
    if rule is None:
        return None

    logger.info("Quick command %r matched rule %s", command, rule)
    if rule == "remove-silence":
        return _remove_silence(command, analysis)
    if rule == "cut-fillers":
        return _cut_fillers(command, analysis)
    if rule == "keep-talking":
        return _keep_talking(command, analysis)

    threshold = float(_PAUSE_RE.search(command.lower().strip()).group(1))
    return _remove_long_pauses(command, analysis, threshold)
