"""Frontmatter splitting and markdown-it tokenization"""

import re
from typing import Any

import yaml
from loguru import logger
from markdown_it import MarkdownIt

from mdstudy.core.models import RawDocument


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*(?:\n|$)', re.DOTALL)


def make_parser(preset: str = 'gfm-like') -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with the YAML header removed.

    Raises ValueError when a header is present but is not a YAML mapping.
    """
    m = FRONTMATTER_RE.match(text)
    if m:
        try:
            fm = yaml.safe_load(m.group(1)) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
        if not isinstance(fm, dict):
            raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
        return fm, text[m.end():]
    return {}, text


def parse_document(path: str, text: str) -> RawDocument:
    """Split frontmatter off fetched text. A malformed header is kept as body text."""
    try:
        frontmatter, body = strip_frontmatter(text)
    except ValueError as e:
        logger.warning(f"{path}: {e}")
        frontmatter, body = {}, text
    return RawDocument(path=path, text=text, markdown=body, frontmatter=frontmatter)


def plain_text(markdown: str, preset: str = 'gfm-like') -> str:
    """Flatten markdown to whitespace-normalized text (inline content and code only)."""
    parts = []
    for tok in make_parser(preset).parse(markdown):
        if tok.type == 'inline':
            parts.extend(c.content for c in tok.children or [] if c.content)
        elif tok.type in ('fence', 'code_block'):
            parts.append(tok.content)
    return ' '.join(' '.join(parts).split())
