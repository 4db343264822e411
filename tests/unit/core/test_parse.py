"""Unit tests for core/parse.py"""

import pytest

from mdstudy.core.models import RawDocument
from mdstudy.core.parse import parse_document, plain_text, strip_frontmatter


def test_strip_frontmatter_with_yaml():
    """strip_frontmatter extracts YAML header and returns body."""
    text = "---\ntitle: Hello\n---\n# Body\n"
    fm, body = strip_frontmatter(text)
    assert fm == {"title": "Hello"}
    assert body == "# Body\n"


def test_strip_frontmatter_no_frontmatter():
    """strip_frontmatter returns empty dict and full text when no header."""
    text = "# No frontmatter\n"
    fm, body = strip_frontmatter(text)
    assert fm == {}
    assert body == text


def test_strip_frontmatter_invalid_yaml():
    """A header that is not valid YAML raises ValueError."""
    with pytest.raises(ValueError, match="Invalid YAML frontmatter"):
        strip_frontmatter("---\nkey: [unclosed\n---\n# Body\n")


def test_strip_frontmatter_not_a_mapping():
    """A YAML list header raises ValueError."""
    with pytest.raises(ValueError, match="expected a mapping"):
        strip_frontmatter("---\n- a\n- b\n---\n# Body\n")


def test_parse_document_splits_frontmatter():
    """parse_document keeps the raw text and exposes body and frontmatter separately."""
    raw = "---\ntopic: react\n---\n## Card 1: Hooks\n"
    doc = parse_document("decks/react.md", raw)
    assert isinstance(doc, RawDocument)
    assert doc.path == "decks/react.md"
    assert doc.text == raw
    assert doc.frontmatter == {"topic": "react"}
    assert doc.markdown == "## Card 1: Hooks\n"


def test_parse_document_malformed_frontmatter_kept_as_body(log_messages):
    """A malformed header is logged and the whole text becomes the body."""
    raw = "---\nkey: [unclosed\n---\n## Card 1: Hooks\n"
    doc = parse_document("bad.md", raw)
    assert doc.frontmatter == {}
    assert doc.markdown == raw
    assert any("bad.md" in m for m in log_messages)


def test_plain_text_strips_markup():
    """plain_text drops emphasis and heading markers but keeps code."""
    text = plain_text("# Title\n\nSome **bold** text.\n\n```js\nlet x = 1;\n```\n")
    assert text == "Title Some bold text. let x = 1;"
