"""Output formatting for sync results."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.table import Table

from page_sync.models import SyncReport

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Sync completed successfully!"
ISSUES_MESSAGE = "Sync completed with some issues. Check warnings above."


class ReportFormatter:
    """Renders a SyncReport to the console."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialise the formatter.

        Args:
            console: Rich console to print to (a new stdout console if None)

        """
        self._console = console or Console()

    def print_report(self, report: SyncReport) -> None:
        """Print counts, warnings and the final status line."""
        table = Table(title="📊 Sync Results", show_header=False)
        table.add_column("Metric", style="bold")
        table.add_column("Count", justify="right")
        table.add_row("Functions extracted", str(report.functions_extracted))
        table.add_row("State variables extracted", str(report.state_extracted))
        table.add_row("Updates applied", str(report.updated_count))
        table.add_row("Items skipped", str(report.skipped_count))
        self._console.print()
        self._console.print(table)

        if report.warnings:
            self._console.print("\n[bold yellow]⚠️  Warnings:[/bold yellow]")
            for warning in report.warnings:
                # Warnings carry source names, which must not be read as markup
                self._console.print(f"  - {warning}", markup=False)
                logger.warning(warning)

        if report.is_clean:
            self._console.print(f"\n[green]✅ {SUCCESS_MESSAGE}[/green]")
        else:
            self._console.print(f"\n[yellow]⚡ {ISSUES_MESSAGE}[/yellow]")
