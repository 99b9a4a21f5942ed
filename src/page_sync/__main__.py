"""Command-line entry points for page-sync.

``page-sync [SOURCE] [TARGET]`` runs one sync; ``page-sync-watch [SOURCE]
[TARGET]`` keeps the target in step while the source is edited.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from dotenv import find_dotenv, load_dotenv

from page_sync.cli import sync_command, watch_command
from page_sync.watcher import DEFAULT_DEBOUNCE_DELAY, DEFAULT_POLL_INTERVAL

# Environment variables (PAGE_SYNC_CONFIG, PAGE_SYNC_LOG_LEVEL) may come from a
# .env file in the working directory
load_dotenv(find_dotenv(usecwd=True))

app = typer.Typer(name="page-sync", add_completion=False)
watch_app = typer.Typer(name="page-sync-watch", add_completion=False)


@app.command()
def sync(
    source: Annotated[
        Path | None,
        typer.Argument(
            help="React source file", show_default="./src/app/page.js"
        ),
    ] = None,
    target: Annotated[
        Path | None,
        typer.Argument(help="Standalone HTML file", show_default="./index.html"),
    ] = None,
) -> None:
    """Sync extracted React functions and state into the standalone HTML page.

    Example:
        page-sync src/app/page.js index.html

    """
    sync_command(source, target)


@watch_app.command()
def watch(
    source: Annotated[
        Path | None,
        typer.Argument(
            help="React source file", show_default="./src/app/page.js"
        ),
    ] = None,
    target: Annotated[
        Path | None,
        typer.Argument(help="Standalone HTML file", show_default="./index.html"),
    ] = None,
    poll_interval: Annotated[
        float,
        typer.Option("--poll-interval", help="Seconds between change checks", min=0.05),
    ] = DEFAULT_POLL_INTERVAL,
    debounce: Annotated[
        float,
        typer.Option("--debounce", help="Quiet period before syncing, in seconds", min=0.0),
    ] = DEFAULT_DEBOUNCE_DELAY,
) -> None:
    """Watch the React source and re-sync the HTML page after every change."""
    watch_command(source, target, poll_interval, debounce)


def main() -> None:
    """Run the sync command."""
    app()


if __name__ == "__main__":
    main()
