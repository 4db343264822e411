"""CLI command implementations"""

import asyncio
from typing import Annotated, Optional

import typer

from mdstudy.config import Settings, load_config
from mdstudy.core.fetch import DocumentFetcher
from mdstudy.core.manifest import filter_topics, load_manifest
from mdstudy.core.models import FlashcardRecord, QuestionRecord
from mdstudy.core.pipeline import load_deck, load_topic
from mdstudy.core.search import search_topics
from mdstudy.core.utils.log import configure_logging
from mdstudy.crud.database import make_engine
from mdstudy.crud.models import Theme
from mdstudy.crud.progress import ProgressTracker
from mdstudy.crud.storage import SQLStorage


BaseUrlOption = Annotated[Optional[str], typer.Option("--base-url", help="Base URL for manifest and documents")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then set up logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings.log_level)
    return settings


def _fetcher(settings: Settings) -> DocumentFetcher:
    return DocumentFetcher(settings.base_url, timeout=settings.request_timeout)


def _tracker(settings: Settings) -> ProgressTracker:
    return ProgressTracker(SQLStorage(make_engine(settings.storage_url), prefix=settings.storage_prefix))


def _echo_record(record) -> None:
    if isinstance(record, FlashcardRecord):
        typer.echo(f"Card {record.number}: {record.title} [{record.difficulty.value}]")
        typer.echo(f"  Q: {record.question}")
        typer.echo(f"  A: {record.answer}")
    elif isinstance(record, QuestionRecord):
        typer.echo(f"Question {record.number}: {record.title}")


def manifest_cmd(
    base_url: BaseUrlOption = None,
    query: Annotated[Optional[str], typer.Option("--filter", help="Only topics whose name contains this text")] = None,
    ):
    """List the topics in the manifest."""
    settings = _settings(overrides={"base_url": base_url})

    async def _run():
        async with _fetcher(settings) as fetcher:
            return await load_manifest(fetcher, settings.manifest_path)

    manifest = asyncio.run(_run())
    if query:
        manifest = filter_topics(manifest, query)
    if not manifest:
        typer.echo("No topics found.")
        raise typer.Exit(1)
    for key, topic in manifest.items():
        label = f"{topic.icon} {topic.name}".strip()
        typer.echo(f"{key}\t{label} ({len(topic.files)} file(s))")


def deck_cmd(
    path: Annotated[str, typer.Argument(help="Document path relative to the base URL")],
    base_url: BaseUrlOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print records as JSON lines")] = False,
    ):
    """Extract questions and flashcards from one document."""
    settings = _settings(overrides={"base_url": base_url})

    async def _run():
        async with _fetcher(settings) as fetcher:
            return await load_deck(fetcher, path, settings.parser_config)

    records = asyncio.run(_run())
    if not records:
        typer.echo(f"No records found in {path}.")
        raise typer.Exit(1)
    for record in records:
        if as_json:
            typer.echo(record.model_dump_json())
        else:
            _echo_record(record)
    typer.echo(f"{len(records)} record(s)", err=True)


def topic_cmd(
    key: Annotated[str, typer.Argument(help="Manifest topic key")],
    base_url: BaseUrlOption = None,
    ):
    """Load every document of a topic and list its records."""
    settings = _settings(overrides={"base_url": base_url})

    async def _run():
        async with _fetcher(settings) as fetcher:
            manifest = await load_manifest(fetcher, settings.manifest_path)
            return await load_topic(fetcher, manifest, key, settings.parser_config)

    decks = asyncio.run(_run())
    if not decks:
        typer.echo(f"No content for topic '{key}'.")
        raise typer.Exit(1)
    for deck in decks:
        typer.echo(f"# {deck.path}")
        for record in deck.records:
            _echo_record(record)


def search_cmd(
    query: Annotated[str, typer.Argument(help="Text to look for in question titles and bodies")],
    base_url: BaseUrlOption = None,
    limit: Annotated[Optional[int], typer.Option("--limit", help="Max results; 0 = unlimited")] = None,
    ):
    """Search all topics."""
    settings = _settings(overrides={"base_url": base_url, "search_limit": limit})

    async def _run():
        async with _fetcher(settings) as fetcher:
            manifest = await load_manifest(fetcher, settings.manifest_path)
            return await search_topics(fetcher, manifest, query, settings.search_limit, settings.parser_config)

    results = asyncio.run(_run())
    if not results:
        typer.echo(f"No matches for '{query}'.")
        raise typer.Exit(1)
    for r in results:
        typer.echo(f"[{r.topic}] {r.file}: {r.title}")
        typer.echo(f"  {r.snippet}")


def progress_cmd():
    """Show study progress and streak."""
    progress = _tracker(_settings()).get_progress()
    typer.echo(f"Streak:   {progress.streak} day(s)")
    typer.echo(f"Studied:  {progress.total_cards} card(s)")
    typer.echo(f"Mastered: {progress.mastered_cards} card(s)")
    typer.echo(f"Last:     {progress.last_studied or 'never'}")


def review_cmd(
    correct: Annotated[bool, typer.Option("--correct/--incorrect", help="Whether the card was answered correctly")] = True,
    ):
    """Record one reviewed card and advance the daily streak."""
    progress = _tracker(_settings()).record_review(correct)
    typer.echo(f"Recorded. Streak: {progress.streak} day(s), {progress.total_cards} card(s) studied.")


def theme_cmd(
    theme: Annotated[Optional[Theme], typer.Argument(help="light or dark; omit to show the current theme")] = None,
    toggle: Annotated[bool, typer.Option("--toggle", help="Switch between light and dark")] = False,
    ):
    """Show or change the saved theme."""
    tracker = _tracker(_settings())
    if toggle:
        theme = tracker.toggle_theme()
    elif theme is not None:
        if not tracker.save_theme(theme):
            _fail(f"Could not save theme '{theme.value}'")
    else:
        theme = tracker.get_theme()
    typer.echo(theme.value)


def reset_cmd(
    yes: Annotated[bool, typer.Option("--yes", help="Skip confirmation")] = False,
    ):
    """Clear study progress and the active session."""
    if not yes:
        typer.confirm("Reset all study progress?", abort=True)
    _tracker(_settings()).reset()
    typer.echo("Progress reset.")
