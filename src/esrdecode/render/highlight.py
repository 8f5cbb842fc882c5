from __future__ import annotations

import enum
from dataclasses import dataclass

MARKER = "#"
TERMINATORS = (".", "!", "?")


class Emphasis(enum.Enum):
    PLAIN = "plain"
    ACCENT = "accent"


@dataclass(frozen=True)
class Segment:
    text: str
    emphasis: Emphasis


def _sentence_end(text: str, start: int) -> int:
    """Index of the earliest terminator at or after start, or -1."""
    end = -1
    for term in TERMINATORS:
        p = text.find(term, start)
        if p != -1 and (end == -1 or p < end):
            end = p
    return end


def highlight(description: str) -> list[Segment]:
    """
    Split a description into plain and accented runs.

    Each accented run starts at a '#' marker and extends through the first
    sentence terminator after it, or to the end of the text if none follows.
    Joining the segment texts gives back the description unchanged.
    """
    segments: list[Segment] = []
    cursor = 0
    length = len(description)

    while cursor < length:
        hash_idx = description.find(MARKER, cursor)
        if hash_idx == -1:
            segments.append(Segment(description[cursor:], Emphasis.PLAIN))
            break
        if hash_idx > cursor:
            segments.append(Segment(description[cursor:hash_idx], Emphasis.PLAIN))

        p = _sentence_end(description, hash_idx)
        if p == -1:
            segments.append(Segment(description[hash_idx:], Emphasis.ACCENT))
            break
        segments.append(Segment(description[hash_idx:p + 1], Emphasis.ACCENT))
        cursor = p + 1

    return segments
