"""Filler-word detection over transcript segments."""

import re

from recut.models import TranscriptSegment

FILLER_WORDS = frozenset({
    "um", "uh", "er", "ah", "like", "you know", "basically", "actually",
    "literally", "right", "so", "well", "i mean", "kind of", "sort of",
    "okay", "ok", "yeah", "hmm", "huh",
})

_PUNCTUATION = re.compile(r"[.,!?]")


def _normalize(word: str) -> str:
    return _PUNCTUATION.sub("", word.lower()).strip()


def is_filler_word(word: str) -> bool:
    return _normalize(word) in FILLER_WORDS


def _tokens(segment: TranscriptSegment) -> list[str]:
    if segment.words:
        return [_normalize(w.word) for w in segment.words]
    return [_normalize(w) for w in segment.text.split()]


def is_filler_segment(segment: TranscriptSegment) -> bool:
    """True if the segment is pre-flagged or contains any filler word.

    A single filler token (or two-word phrase such as "you know") marks the
    whole segment.
    """
    if segment.is_filler:
        return True
    tokens = [t for t in _tokens(segment) if t]
    if any(t in FILLER_WORDS for t in tokens):
        return True
    return any(f"{a} {b}" in FILLER_WORDS for a, b in zip(tokens, tokens[1:]))
