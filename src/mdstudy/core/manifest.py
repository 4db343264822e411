"""Manifest retrieval and tolerant validation"""

import json
from typing import Any

from loguru import logger
from pydantic import ValidationError

from mdstudy.core.fetch import DocumentFetcher, FetchError
from mdstudy.core.models import Manifest, Topic


MANIFEST_FILE = "manifest.json"


def _coerce_topic(key: str, entry: Any) -> Topic | None:
    """Accept a topic object, a single path, or a list of paths; None for anything else."""
    if isinstance(entry, str):
        entry = [entry]
    if isinstance(entry, list) and all(isinstance(p, str) for p in entry):
        return Topic(name=key, files=entry, count=len(entry))
    if isinstance(entry, dict):
        try:
            topic = Topic.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Skipping manifest entry {key!r}: {e.error_count()} validation error(s)")
            return None
        return topic if topic.name else topic.model_copy(update={"name": key})
    logger.warning(f"Skipping manifest entry {key!r}: unsupported type {type(entry).__name__}")
    return None


def parse_manifest(data: Any) -> Manifest:
    """Build a Manifest from decoded JSON; a non-object top level yields {}."""
    if not isinstance(data, dict):
        logger.warning(f"Manifest is not an object (got {type(data).__name__}); treating as empty")
        return {}
    manifest: Manifest = {}
    for key, entry in data.items():
        if (topic := _coerce_topic(key, entry)) is not None:
            manifest[key] = topic
    return manifest


async def load_manifest(fetcher: DocumentFetcher, path: str = MANIFEST_FILE) -> Manifest:
    """Fetch and decode the manifest. Any failure is logged and yields {}."""
    try:
        text = await fetcher.fetch_text(path)
    except FetchError as e:
        logger.error(f"Error loading manifest: {e}")
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Error decoding manifest {path}: {e}")
        return {}
    return parse_manifest(data)


def topic_paths(manifest: Manifest, key: str) -> list[str]:
    """Document paths for a topic; unknown keys mean no content."""
    topic = manifest.get(key)
    return topic.paths if topic else []


def filter_topics(manifest: Manifest, query: str) -> Manifest:
    """Topics whose display name contains query (case-insensitive), in manifest order."""
    q = query.lower()
    return {k: t for k, t in manifest.items() if q in t.name.lower()}
