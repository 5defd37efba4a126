"""Export planner — turns a preview timeline into an ffmpeg filter graph plan.

Nothing here runs ffmpeg; the plan and argv are handed to an external
transcoder.
"""

from dataclasses import dataclass, field
from pathlib import Path

from recut.preview import PreviewTimeline

# atempo only accepts factors in this range per stage
ATEMPO_MIN = 0.5
ATEMPO_MAX = 2.0


@dataclass(frozen=True)
class ExportSegment:
    """A span of the original media to keep, played at *speed*."""

    start: float
    end: float
    speed: float = 1.0


@dataclass(frozen=True)
class ExportPlan:
    segments: tuple[ExportSegment, ...]
    filter_graph: str | None = None
    output_maps: tuple[str, ...] = field(default_factory=tuple)


def _num(value: float) -> str:
    """Format a number for filter arguments without float noise."""
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


def atempo_chain(speed: float) -> list[float]:
    """Split *speed* into atempo stages that each stay within range."""
    stages: list[float] = []
    remaining = speed
    while remaining > ATEMPO_MAX:
        stages.append(ATEMPO_MAX)
        remaining /= ATEMPO_MAX
    while remaining < ATEMPO_MIN:
        stages.append(ATEMPO_MIN)
        remaining /= ATEMPO_MIN
    stages.append(remaining)
    return stages


def build_filter_graph(segments: tuple[ExportSegment, ...]) -> tuple[str, tuple[str, ...]]:
    """Build trim(+retime)(+concat) filters and the matching output maps."""
    filter_parts: list[str] = []
    stream_labels: list[tuple[str, str]] = []

    for i, seg in enumerate(segments):
        v, a = f"v{i}", f"a{i}"
        filter_parts.append(
            f"[0:v]trim=start={_num(seg.start)}:end={_num(seg.end)},setpts=PTS-STARTPTS[{v}]"
        )
        filter_parts.append(
            f"[0:a]atrim=start={_num(seg.start)}:end={_num(seg.end)},asetpts=PTS-STARTPTS[{a}]"
        )

        if seg.speed != 1:
            tempo = ",".join(f"atempo={_num(s)}" for s in atempo_chain(seg.speed))
            filter_parts.append(f"[{v}]setpts={_num(1 / seg.speed)}*PTS[{v}s]")
            filter_parts.append(f"[{a}]{tempo}[{a}s]")
            v, a = f"{v}s", f"{a}s"

        stream_labels.append((v, a))

    if len(segments) > 1:
        concat_input = "".join(f"[{v}][{a}]" for v, a in stream_labels)
        filter_parts.append(f"{concat_input}concat=n={len(segments)}:v=1:a=1[outv][outa]")
        out_v, out_a = "outv", "outa"
    else:
        out_v, out_a = stream_labels[0]

    return ";".join(filter_parts), ("-map", f"[{out_v}]", "-map", f"[{out_a}]")


def build_export_plan(timeline: PreviewTimeline) -> ExportPlan:
    """Map preview segments 1:1 to export segments in original time."""
    segments = tuple(
        ExportSegment(start=s.original_start, end=s.original_end, speed=s.speed_factor)
        for s in timeline.segments
    )
    if not segments:
        return ExportPlan(segments=())

    filter_graph, output_maps = build_filter_graph(segments)
    return ExportPlan(segments=segments, filter_graph=filter_graph, output_maps=output_maps)


def build_ffmpeg_command(input_path: Path, output_path: Path, plan: ExportPlan) -> list[str]:
    """Return the ffmpeg argv that renders *plan*. The caller runs it."""
    if plan.filter_graph is None:
        raise ValueError("Export plan has no segments — entire video would be removed")

    return [
        "ffmpeg", "-y",
        "-i", str(input_path),
        "-filter_complex", plan.filter_graph,
        *plan.output_maps,
        str(output_path),
    ]
