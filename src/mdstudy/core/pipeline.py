"""Deck loading: fetch -> segment -> extract, with per-deck failure isolation"""

import asyncio

from loguru import logger

from mdstudy.core.extract.records import extract_records
from mdstudy.core.extract.sections import segment
from mdstudy.core.fetch import DocumentFetcher, FetchError
from mdstudy.core.models import (
    DeckResult, FlashcardRecord, Manifest, QuestionRecord, RawDocument, Record,
)


def records_from_document(doc: RawDocument, parser_config: str = 'gfm-like') -> list[Record]:
    """Segment and extract an already fetched document, preserving source order."""
    segments = segment(doc.markdown, parser_config)
    records = extract_records(segments)
    dropped = len(segments) - len(records)
    if dropped:
        logger.debug(f"{doc.path}: {dropped} of {len(segments)} segment(s) produced no record")
    return records


async def _load(fetcher: DocumentFetcher, path: str, parser_config: str) -> DeckResult | None:
    try:
        doc = await fetcher.load_markdown_file(path)
    except FetchError as e:
        logger.error(f"Error loading deck {path}: {e}")
        return None
    return DeckResult(
        path=path,
        frontmatter=doc.frontmatter,
        records=records_from_document(doc, parser_config),
    )


async def load_deck(fetcher: DocumentFetcher, path: str, parser_config: str = 'gfm-like') -> list[Record]:
    """Fetch and parse one document. Fetch failures are logged and yield []."""
    result = await _load(fetcher, path, parser_config)
    return result.records if result else []


async def load_flashcards(fetcher: DocumentFetcher, path: str, parser_config: str = 'gfm-like') -> list[FlashcardRecord]:
    return [r for r in await load_deck(fetcher, path, parser_config) if isinstance(r, FlashcardRecord)]


async def load_questions(fetcher: DocumentFetcher, path: str, parser_config: str = 'gfm-like') -> list[QuestionRecord]:
    return [r for r in await load_deck(fetcher, path, parser_config) if isinstance(r, QuestionRecord)]


async def load_topic(
    fetcher: DocumentFetcher,
    manifest: Manifest,
    key: str,
    parser_config: str = 'gfm-like',
    ) -> list[DeckResult]:
    """Load every file of a topic; results follow manifest order and skip files that failed."""
    topic = manifest.get(key)
    if topic is None:
        logger.info(f"No manifest entry for topic {key!r}")
        return []
    results = await asyncio.gather(*(_load(fetcher, p, parser_config) for p in topic.paths))
    return [r for r in results if r is not None]
