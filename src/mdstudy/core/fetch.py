"""Async HTTP retrieval of manifest and markdown documents"""

from __future__ import annotations

import httpx
from loguru import logger

from mdstudy.core.models import RawDocument
from mdstudy.core.parse import parse_document


class FetchError(Exception):
    """A document could not be retrieved (transport error or non-2xx status)."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to load {path}: {reason}")
        self.path = path
        self.reason = reason


class DocumentFetcher:
    """Fetch text relative to a base URL.

    Use as an async context manager so the underlying client is closed:

        async with DocumentFetcher("https://example.org/prep/") as fetcher:
            text = await fetcher.fetch_text("manifest.json")
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        ):
        self.base_url = base_url
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> DocumentFetcher:
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.aclose()

    async def fetch_text(self, path: str) -> str:
        """Return the response body for path; an empty 2xx body is returned as ''."""
        try:
            response = await self.client.get(path)
        except httpx.HTTPError as e:
            raise FetchError(path, f"{type(e).__name__}: {e}") from e
        if not response.is_success:
            raise FetchError(path, f"HTTP {response.status_code}")
        logger.debug(f"Fetched {path} ({len(response.content)} bytes)")
        return response.text

    async def load_markdown_file(self, path: str) -> RawDocument:
        """Fetch one markdown file and split off its frontmatter. Raises FetchError."""
        return parse_document(path, await self.fetch_text(path))
