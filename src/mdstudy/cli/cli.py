"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdstudy.cli.commands import (
    deck_cmd, manifest_cmd, progress_cmd, reset_cmd, review_cmd, search_cmd, theme_cmd, topic_cmd,
)


app = typer.Typer(name="mdstudy", no_args_is_help=True, help="Markdown study decks and progress tracking")

app.command(name="manifest")(manifest_cmd)
app.command(name="deck")(deck_cmd)
app.command(name="topic")(topic_cmd)
app.command(name="search")(search_cmd)
app.command(name="progress")(progress_cmd)
app.command(name="review")(review_cmd)
app.command(name="theme")(theme_cmd)
app.command(name="reset")(reset_cmd)
