"""Segment-to-record extraction: one rule per heading family"""

import re
from typing import Callable, Iterable, Optional

from mdstudy.core.models import (
    Difficulty, FlashcardRecord, QuestionRecord, Record, Segment, SegmentKind,
)


Q_MARKER = '**Q:**'
A_MARKER = '**A:**'

# Markers that end a card's answer text.
TRAILER_RE = re.compile(r'\*\*(?:Difficulty|Frequency):\*\*|\*\*Tags:?\*\*')
DIFFICULTY_RE = re.compile(r'\*\*Difficulty:\*\*[ \t]*(.*)')
FREQUENCY_RE = re.compile(r'\*\*Frequency:\*\*[ \t]*(.*)')
TAGS_RE = re.compile(r'\*\*Tags:?\*\*:?[ \t]*(.*)')
DIFFICULTY_WORD_RE = re.compile(r'\b(easy|medium|hard)\b', re.IGNORECASE)

DIFFICULTY_EMOJI: dict[str, Difficulty] = {
    '🟢': Difficulty.easy,
    '🟡': Difficulty.medium,
    '🔴': Difficulty.hard,
}
DEFAULT_FREQUENCY = 3


def parse_difficulty(value: Optional[str]) -> Difficulty:
    """Map marker text like '🟡 Medium' to a Difficulty.

    None (no marker) defaults to Medium; marker text that names no level is Unparsed.
    """
    if value is None:
        return Difficulty.medium
    if m := DIFFICULTY_WORD_RE.search(value):
        return Difficulty(m.group(1).capitalize())
    for emoji, level in DIFFICULTY_EMOJI.items():
        if emoji in value:
            return level
    return Difficulty.unparsed


def parse_frequency(value: Optional[str]) -> int:
    """Count star emoji in a Frequency marker; default when absent or starless."""
    stars = value.count('⭐') if value else 0
    return stars or DEFAULT_FREQUENCY


def parse_tags(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [t.lstrip('#') for t in re.split(r'[\s,]+', value) if t.lstrip('#')]


def _marker_value(pattern: re.Pattern, text: str) -> Optional[str]:
    m = pattern.search(text)
    return m.group(1).strip() if m else None


def extract_question(segment: Segment) -> Optional[QuestionRecord]:
    return QuestionRecord(number=segment.ordinal, title=segment.title, content=segment.body)


def extract_card(segment: Segment) -> Optional[FlashcardRecord]:
    """Build a FlashcardRecord from a **Q:** ... **A:** body, or None when either marker is missing."""
    body = segment.body
    q = body.find(Q_MARKER)
    if q < 0:
        return None
    a = body.find(A_MARKER, q + len(Q_MARKER))
    if a < 0:
        return None

    rest = body[a + len(A_MARKER):]
    trailer = TRAILER_RE.search(rest)
    answer = rest[:trailer.start()] if trailer else rest

    return FlashcardRecord(
        number=segment.ordinal,
        title=segment.title,
        question=body[q + len(Q_MARKER):a].strip(),
        answer=answer.strip(),
        difficulty=parse_difficulty(_marker_value(DIFFICULTY_RE, body)),
        frequency=parse_frequency(_marker_value(FREQUENCY_RE, body)),
        tags=parse_tags(_marker_value(TAGS_RE, rest)),
    )


EXTRACTORS: dict[SegmentKind, Callable[[Segment], Optional[Record]]] = {
    SegmentKind.question: extract_question,
    SegmentKind.card:     extract_card,
}


def extract_record(segment: Segment) -> Optional[Record]:
    """Dispatch on segment kind; None means the segment yields no record."""
    extractor = EXTRACTORS.get(segment.kind)
    return extractor(segment) if extractor else None


def extract_records(segments: Iterable[Segment]) -> list[Record]:
    """Extract records in segment order, dropping segments that yield none."""
    records = []
    for seg in sorted(segments, key=lambda s: s.position):
        record = extract_record(seg)
        if record is not None:
            records.append(record)
    return records
