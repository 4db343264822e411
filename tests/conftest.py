"""Root test configuration: runtime artifact cleanup, log capture, and mock HTTP fixtures"""

import shutil
from pathlib import Path

import httpx
import pytest
from loguru import logger

from mdstudy.core.fetch import DocumentFetcher


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["mdstudy.db", "test.db"]
_CLEANUP_DIRS: list[str] = []

BASE_URL = "http://test.local/"


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()
    for name in _CLEANUP_DIRS:
        p = _PROJECT_ROOT / name
        if p.exists():
            shutil.rmtree(p)


@pytest.fixture(name="log_messages")
def log_messages_fixture():
    """Collect loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture(name="make_transport")
def make_transport_fixture():
    """Build an httpx.MockTransport from {url_path: body | (status, body) | Exception}.

    Unknown paths answer 404. When calls is given, every requested path is appended to it.
    """
    def _make(routes: dict, calls: list = None) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            path = request.url.path
            if calls is not None:
                calls.append(path)
            route = routes.get(path)
            if route is None:
                return httpx.Response(404, text="Not Found")
            if isinstance(route, Exception):
                raise route
            if isinstance(route, tuple):
                status, body = route
                return httpx.Response(status, text=body)
            return httpx.Response(200, text=route)
        return httpx.MockTransport(handler)
    return _make


@pytest.fixture(name="make_fetcher")
def make_fetcher_fixture(make_transport):
    """DocumentFetcher against BASE_URL served by make_transport routes."""
    def _make(routes: dict, calls: list = None, base_url: str = BASE_URL) -> DocumentFetcher:
        return DocumentFetcher(base_url, transport=make_transport(routes, calls))
    return _make
