"""Intermediate data models for the fetch, segment and extract pipeline"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel


class Topic(BaseModel):
    """One manifest entry: a folder of markdown files shown as a topic or deck."""
    folder: str = ""
    icon:   str = ""
    name:   str = ""
    files:  list[str] = []
    count:  int = 0

    @property
    def paths(self) -> list[str]:
        """Fetch paths for every file, relative to the base URL."""
        folder = self.folder.strip("/")
        return [f"{folder}/{f.lstrip('/')}" if folder else f.lstrip("/") for f in self.files]


Manifest = dict[str, Topic]


@dataclass
class RawDocument:
    """Fetched markdown text; transient, held only until segmented."""
    path:        str
    text:        str                # full fetched text (includes frontmatter)
    markdown:    str = ""           # body only (frontmatter stripped)
    frontmatter: dict[str, Any] = field(default_factory=dict)


class SegmentKind(str, Enum):
    """Heading family a segment was recognized by"""
    question = "question"
    card = "card"
    unrecognized = "unrecognized"


class Segment(BaseModel):
    """One heading-delimited slice of a document, in document order."""
    kind:     SegmentKind
    ordinal:  int                   # number embedded in the heading; identity
    heading:  str                   # heading text without the '##' marker
    title:    str
    body:     str
    position: int                   # positional index; ordering tiebreak only


class Difficulty(str, Enum):
    easy = "Easy"
    medium = "Medium"
    hard = "Hard"
    unparsed = "Unparsed"


class QuestionRecord(BaseModel):
    number:  int
    title:   str
    content: str                    # raw markdown body, not interpreted


class FlashcardRecord(BaseModel):
    number:     int
    title:      str
    question:   str
    answer:     str
    difficulty: Difficulty = Difficulty.medium
    frequency:  int = 3             # star rating from the Frequency marker
    tags:       list[str] = []


Record = Union[QuestionRecord, FlashcardRecord]


class DeckResult(BaseModel):
    """Records extracted from one document of a topic."""
    path:        str
    frontmatter: dict[str, Any] = {}
    records:     list[Record] = []


class SearchResult(BaseModel):
    topic:   str
    file:    str
    title:   str
    snippet: str
