"""Original <-> preview time conversion for synchronized seeking."""

import math

from recut.preview import PreviewTimeline


def original_to_preview(t: float, timeline: PreviewTimeline) -> float | None:
    """Map original time *t* onto the preview.

    Returns None when *t* is inside a cut (or outside the media); the playback
    clock should then jump to the next kept segment, see :func:`snap_to_kept`.
    """
    for seg in timeline.segments:
        if seg.original_start <= t < seg.original_end:
            mapped = seg.preview_start + (t - seg.original_start) / seg.speed_factor
            # Rounding must not push a kept time onto the next segment's start.
            return min(mapped, math.nextafter(seg.preview_end, seg.preview_start))
    return None


def preview_to_original(t: float, timeline: PreviewTimeline) -> float:
    """Map preview time *t* back onto the original media. Never raises."""
    segments = timeline.segments
    if not segments:
        return 0.0
    if t < segments[0].preview_start:
        return segments[0].original_start

    for seg in segments:
        if seg.preview_start <= t < seg.preview_end:
            mapped = seg.original_start + (t - seg.preview_start) * seg.speed_factor
            return min(mapped, math.nextafter(seg.original_end, seg.original_start))

    # Past the end of the preview
    return segments[-1].original_end


def snap_to_kept(t: float, timeline: PreviewTimeline) -> float:
    """Preview time for original *t*, snapping forward out of cuts."""
    mapped = original_to_preview(t, timeline)
    if mapped is not None:
        return mapped
    for seg in timeline.segments:
        if seg.original_start >= t:
            return seg.preview_start
    return timeline.preview_duration
