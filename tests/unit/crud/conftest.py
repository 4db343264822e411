"""Shared fixtures for crud unit tests"""

import pytest

from mdstudy.crud.database import make_engine
from mdstudy.crud.models import DocumentRoot
from mdstudy.crud.progress import ProgressTracker
from mdstudy.crud.storage import MemoryStorage, SQLStorage


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine; SQLStorage creates its table on construction."""
    engine = make_engine("sqlite://")
    yield engine
    engine.dispose()


@pytest.fixture(name="storage", params=["memory", "sql"])
def storage_fixture(request, engine):
    """Each storage test runs against both backends."""
    if request.param == "memory":
        return MemoryStorage()
    return SQLStorage(engine)


@pytest.fixture(name="root")
def root_fixture():
    return DocumentRoot()


@pytest.fixture(name="tracker")
def tracker_fixture(root):
    return ProgressTracker(MemoryStorage(), root)
