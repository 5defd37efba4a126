"""Interval algebra over half-open time ranges.

All functions are pure: inputs are never mutated and results are new lists.
Ranges are half-open ``[start, end)``, so two ranges that only touch at a
boundary are merged.
"""

import logging
from typing import Iterable

from recut.models import TimeRange

logger = logging.getLogger(__name__)


def overlap(a: TimeRange, b: TimeRange) -> bool:
    """True if the two ranges share any time."""
    return a.start < b.end and b.start < a.end


def contains(outer: TimeRange, inner: TimeRange) -> bool:
    """True if *inner* lies entirely within *outer*."""
    return outer.start <= inner.start and inner.end <= outer.end


def contains_time(r: TimeRange, t: float) -> bool:
    return r.start <= t < r.end


def total_duration(ranges: Iterable[TimeRange]) -> float:
    return sum(r.duration for r in ranges)


def merge_overlapping(ranges: Iterable[TimeRange]) -> list[TimeRange]:
    """Merge overlapping or touching ranges.

    Zero-length and inverted ranges are dropped before merging. The result is
    sorted by start, non-overlapping, and has the fewest ranges possible.
    """
    candidates = sorted(
        (r for r in ranges if not r.is_empty), key=lambda r: (r.start, r.end)
    )
    if not candidates:
        return []

    merged: list[TimeRange] = [candidates[0]]
    for current in candidates[1:]:
        last = merged[-1]
        if current.start <= last.end:
            merged[-1] = TimeRange(start=last.start, end=max(last.end, current.end))
        else:
            merged.append(current)

    if len(merged) < len(candidates):
        logger.debug("Merged %d ranges into %d", len(candidates), len(merged))
    return merged


def clip_to_duration(ranges: Iterable[TimeRange], duration: float) -> list[TimeRange]:
    """Intersect each range with [0, duration), dropping ranges left empty."""
    clipped: list[TimeRange] = []
    for r in ranges:
        c = TimeRange(start=max(r.start, 0.0), end=min(r.end, duration))
        if not c.is_empty:
            clipped.append(c)
    return clipped


def subtract_from_duration(
    duration: float, cut_ranges: Iterable[TimeRange]
) -> list[TimeRange]:
    """Return the kept ranges of [0, duration) once *cut_ranges* are removed.

    Cuts reaching outside the media are clipped; a cut covering the whole
    duration leaves nothing.
    """
    if duration <= 0:
        return []

    merged = merge_overlapping(clip_to_duration(cut_ranges, duration))
    kept: list[TimeRange] = []
    cursor = 0.0

    for cut in merged:
        if cut.start > cursor:
            kept.append(TimeRange(start=cursor, end=cut.start))
        cursor = max(cursor, cut.end)

    if cursor < duration:
        kept.append(TimeRange(start=cursor, end=duration))
    return kept


def split_at(r: TimeRange, points: Iterable[float]) -> list[TimeRange]:
    """Split *r* at every point strictly inside it."""
    inner = sorted({p for p in points if r.start < p < r.end})
    bounds = [r.start, *inner, r.end]
    return [TimeRange(start=a, end=b) for a, b in zip(bounds, bounds[1:])]
