"""CLI command implementation for watch mode."""

from __future__ import annotations

import logging
from pathlib import Path

from page_sync.cli.errors import cli_error_handler, load_command_config
from page_sync.logging import setup_logging
from page_sync.orchestrator import SyncOrchestrator
from page_sync.reporting import ReportFormatter
from page_sync.watcher import SourceWatcher

logger = logging.getLogger(__name__)


def watch_command(
    source_path: Path | None,
    target_path: Path | None,
    poll_interval: float,
    debounce_delay: float,
) -> None:
    """Watch the source file and sync the target after every change.

    Args:
        source_path: React source file (configured default if None)
        target_path: Standalone HTML file (configured default if None)
        poll_interval: Seconds between modification time checks
        debounce_delay: Quiet period before a change is synced

    Raises:
        typer.Exit: With code 1 if the configuration cannot be loaded

    """
    setup_logging()

    with cli_error_handler("watch", "Watch failed"):
        config = load_command_config("watch")
        watcher = SourceWatcher(
            source_path or config.source_path,
            target_path or config.target_path,
            SyncOrchestrator(config),
            poll_interval=poll_interval,
            debounce_delay=debounce_delay,
            on_report=ReportFormatter().print_report,
        )

    watcher.run()
