"""CLI command implementation for a single sync run."""

from __future__ import annotations

import logging
from pathlib import Path

from page_sync.cli.errors import cli_error_handler, load_command_config, require_file
from page_sync.logging import setup_logging
from page_sync.orchestrator import SyncOrchestrator
from page_sync.reporting import ReportFormatter

logger = logging.getLogger(__name__)


def sync_command(source_path: Path | None, target_path: Path | None) -> None:
    """Sync the target file from the source file and print the summary.

    Args:
        source_path: React source file (configured default if None)
        target_path: Standalone HTML file (configured default if None)

    Raises:
        typer.Exit: With code 1 if the sync fails

    """
    setup_logging()

    with cli_error_handler("sync", "Sync failed"):
        config = load_command_config("sync")
        source = source_path or config.source_path
        target = target_path or config.target_path
        require_file(source, "React file", "sync")
        require_file(target, "HTML file", "sync")

        report = SyncOrchestrator(config).sync(source, target)

    ReportFormatter().print_report(report)
