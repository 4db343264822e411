"""Full-text search over the questions of every manifest topic"""

from mdstudy.core.fetch import DocumentFetcher
from mdstudy.core.models import Manifest, QuestionRecord, SearchResult
from mdstudy.core.parse import plain_text
from mdstudy.core.pipeline import load_topic


SNIPPET_RADIUS = 60


def make_snippet(text: str, query: str, radius: int = SNIPPET_RADIUS) -> str:
    """Return text around the first case-insensitive match of query, with ellipses where cut."""
    idx = text.lower().find(query.lower())
    if idx < 0:
        return text[:2 * radius].rstrip() + ('...' if len(text) > 2 * radius else '')
    start = max(0, idx - radius)
    end = min(len(text), idx + len(query) + radius)
    return ('...' if start else '') + text[start:end].strip() + ('...' if end < len(text) else '')


def match_question(record: QuestionRecord, query: str, parser_config: str = 'gfm-like') -> str | None:
    """Snippet for a question whose title or body contains query, else None."""
    q = query.lower()
    text = plain_text(record.content, parser_config)
    if q in record.title.lower() or q in text.lower():
        return make_snippet(text, query)
    return None


async def search_topics(
    fetcher: DocumentFetcher,
    manifest: Manifest,
    query: str,
    limit: int = 0,
    parser_config: str = 'gfm-like',
    ) -> list[SearchResult]:
    """Search question titles and bodies across all topics. limit=0 means unlimited."""
    if not query.strip():
        return []
    results: list[SearchResult] = []
    for key in manifest:
        for deck in await load_topic(fetcher, manifest, key, parser_config):
            for record in deck.records:
                if not isinstance(record, QuestionRecord):
                    continue
                snippet = match_question(record, query, parser_config)
                if snippet is None:
                    continue
                results.append(SearchResult(topic=key, file=deck.path, title=record.title, snippet=snippet))
                if limit and len(results) >= limit:
                    return results
    return results
