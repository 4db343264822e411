"""Namespaced key-value storage with a versioned JSON codec

Every value is written as {"v": SCHEMA_VERSION, "data": <payload>}. Reads unwrap
the envelope and migrate older payloads forward; bare JSON written without an
envelope counts as version 0. Undecodable values read back as the caller's
default, and failed writes are logged and reported as False.
"""

import json
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Optional

from loguru import logger
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from mdstudy.crud.database import init_db
from mdstudy.crud.models import StorageEntry


DEFAULT_PREFIX = "frontend-master-"
SCHEMA_VERSION = 1

Migration = Callable[[Any], Any]

# version -> step that upgrades a payload to version + 1
MIGRATIONS: dict[int, Migration] = {
    0: lambda data: data,      # unversioned payloads already match the v1 shapes
}


def encode(value: Any) -> str:
    return json.dumps({"v": SCHEMA_VERSION, "data": value}, ensure_ascii=False)


def migrate(version: int, data: Any, migrations: dict[int, Migration]) -> Any:
    """Apply migration steps from version up to SCHEMA_VERSION."""
    if version > SCHEMA_VERSION:
        raise ValueError(f"schema version {version} is newer than supported version {SCHEMA_VERSION}")
    while version < SCHEMA_VERSION:
        step = migrations.get(version)
        if step is None:
            raise ValueError(f"no migration from schema version {version}")
        data = step(data)
        version += 1
    return data


def decode(raw: str, migrations: dict[int, Migration] = MIGRATIONS) -> Any:
    """Decode a stored value to the current schema. Raises ValueError on corrupt data."""
    payload = json.loads(raw)
    if isinstance(payload, dict) and payload.keys() == {"v", "data"} and isinstance(payload["v"], int):
        return migrate(payload["v"], payload["data"], migrations)
    return migrate(0, payload, migrations)


class StorageGateway(ABC):
    """Typed access to a prefixed key namespace; backends implement the raw string ops."""

    substrate_errors: tuple[type[Exception], ...] = (OSError,)

    def __init__(self, prefix: str = DEFAULT_PREFIX, migrations: Optional[dict[int, Migration]] = None):
        self.prefix = prefix
        self.migrations = MIGRATIONS if migrations is None else migrations

    def key(self, name: str) -> str:
        return f"{self.prefix}{name}"

    @abstractmethod
    def _get_raw(self, key: str) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    def _set_raw(self, key: str, raw: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def _delete_raw(self, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def _raw_keys(self) -> list[str]:
        """All full keys held by the backend that start with this gateway's prefix."""
        raise NotImplementedError

    def read(self, name: str, default: Any = None) -> Any:
        """Return the decoded value, or default when absent or undecodable."""
        key = self.key(name)
        try:
            raw = self._get_raw(key)
        except self.substrate_errors as e:
            logger.error(f"Storage read failed for {key}: {e}")
            return default
        if raw is None:
            return default
        try:
            return decode(raw, self.migrations)
        except ValueError as e:
            logger.warning(f"Ignoring undecodable value under {key}: {e}")
            return default

    def write(self, name: str, value: Any) -> bool:
        """Encode and store value. Returns False (after logging) if the write failed."""
        key = self.key(name)
        try:
            raw = encode(value)
        except (TypeError, ValueError) as e:
            logger.error(f"Cannot encode value for {key}: {e}")
            return False
        try:
            self._set_raw(key, raw)
        except self.substrate_errors as e:
            logger.error(f"Storage write failed for {key}: {e}")
            return False
        return True

    def remove(self, name: str) -> None:
        """Delete a key; missing keys are ignored."""
        key = self.key(name)
        try:
            self._delete_raw(key)
        except self.substrate_errors as e:
            logger.error(f"Storage remove failed for {key}: {e}")

    def keys(self) -> list[str]:
        """Key names (without prefix) in this namespace, sorted."""
        return sorted(k[len(self.prefix):] for k in self._raw_keys())

    def clear(self) -> None:
        """Remove every key in this namespace; keys under other prefixes are kept."""
        for name in self.keys():
            self.remove(name)


class MemoryStorage(StorageGateway):
    """Dict-backed storage for tests and throwaway sessions."""

    def __init__(self, prefix: str = DEFAULT_PREFIX, migrations: Optional[dict[int, Migration]] = None):
        super().__init__(prefix, migrations)
        self.data: dict[str, str] = {}

    def _get_raw(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def _set_raw(self, key: str, raw: str) -> None:
        self.data[key] = raw

    def _delete_raw(self, key: str) -> None:
        self.data.pop(key, None)

    def _raw_keys(self) -> list[str]:
        return [k for k in self.data if k.startswith(self.prefix)]


class SQLStorage(StorageGateway):
    """storage_entries table backend; each write commits its own transaction."""

    substrate_errors = (SQLAlchemyError, OSError)

    def __init__(self, engine: Engine, prefix: str = DEFAULT_PREFIX, migrations: Optional[dict[int, Migration]] = None):
        super().__init__(prefix, migrations)
        self.engine = engine
        init_db(engine)

    def _get_raw(self, key: str) -> Optional[str]:
        with Session(self.engine) as session:
            entry = session.get(StorageEntry, key)
            return entry.value if entry else None

    def _set_raw(self, key: str, raw: str) -> None:
        with Session(self.engine) as session:
            entry = session.get(StorageEntry, key)
            if entry:
                entry.value = raw
                entry.updated_at = datetime.now()
            else:
                entry = StorageEntry(key=key, value=raw)
            session.add(entry)
            session.commit()

    def _delete_raw(self, key: str) -> None:
        with Session(self.engine) as session:
            entry = session.get(StorageEntry, key)
            if entry:
                session.delete(entry)
                session.commit()

    def _raw_keys(self) -> list[str]:
        with Session(self.engine) as session:
            keys = session.exec(select(StorageEntry.key)).all()
        return [k for k in keys if k.startswith(self.prefix)]
