"""Split a markdown body into Question/Card segments by h2 heading boundaries"""

import re

from mdstudy.core.models import Segment, SegmentKind
from mdstudy.core.parse import make_parser


HEADING_RE = re.compile(r'^(Question|Card)\s+(\d+)\s*:\s*(.+?)\s*$')
RULE_LINE = '---'
NEWLINES_RE = re.compile(r'\r\n?')

FAMILIES: dict[str, SegmentKind] = {
    'Question': SegmentKind.question,
    'Card':     SegmentKind.card,
}


def classify_heading(text: str) -> tuple[SegmentKind, int, str]:
    """Return (kind, ordinal, title) for heading text; kind is unrecognized on no match."""
    m = HEADING_RE.match(text.strip())
    if not m:
        return SegmentKind.unrecognized, 0, text.strip()
    return FAMILIES[m.group(1)], int(m.group(2)), m.group(3)


def _boundaries(tokens: list, source_lines: list[str]) -> list[tuple[int, str | None]]:
    """Collect (line, heading_text) for recognized top-level h2 headings and (line, None) for '---' lines.

    A '---' directly under a text line parses as a setext heading underline; it
    still ends the segment, and the text above it stays in the body.
    """
    found = []
    for i, tok in enumerate(tokens):
        if tok.level != 0 or not tok.map:
            continue
        if tok.type == 'hr' and source_lines[tok.map[0]].strip() == RULE_LINE:
            found.append((tok.map[0], None))
        elif tok.type == 'heading_open' and tok.markup == '-':
            underline = tok.map[1] - 1
            if source_lines[underline].strip() == RULE_LINE:
                found.append((underline, None))
        elif tok.type == 'heading_open' and tok.tag == 'h2' and tok.markup == '##':
            text = tokens[i + 1].content if i + 1 < len(tokens) else ''
            if classify_heading(text)[0] is not SegmentKind.unrecognized:
                found.append((tok.map[0], text))
    return found


def segment(markdown: str, parser_config: str = 'gfm-like') -> list[Segment]:
    """Split markdown into ordered segments.

    A segment starts at a '## Question N: Title' or '## Card N: Title' heading and
    runs until the next such heading, a '---' line, or end of document.
    Other headings stay inside the preceding segment's body; text with no
    preceding segment is dropped.
    """
    # token.map counts '\n'-separated lines only
    markdown = NEWLINES_RE.sub('\n', markdown)
    source_lines = markdown.split('\n')
    tokens = make_parser(parser_config).parse(markdown)
    segments: list[Segment] = []
    open_at: tuple[int, str] | None = None   # (first body line, heading text)

    def _close(end: int) -> None:
        start, heading = open_at
        kind, ordinal, title = classify_heading(heading)
        segments.append(Segment(
            kind=kind,
            ordinal=ordinal,
            heading=heading.strip(),
            title=title,
            body='\n'.join(source_lines[start:end]).strip(),
            position=len(segments),
        ))

    for line, heading in _boundaries(tokens, source_lines):
        if open_at is not None:
            _close(line)
            open_at = None
        if heading is not None:
            open_at = (line + 1, heading)
    if open_at is not None:
        _close(len(source_lines))

    return segments
