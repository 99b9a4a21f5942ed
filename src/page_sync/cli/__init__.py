"""CLI command implementations for page-sync."""

from page_sync.cli.errors import CLIError, cli_error_handler
from page_sync.cli.sync import sync_command
from page_sync.cli.watch import watch_command

__all__ = [
    "CLIError",
    "cli_error_handler",
    "sync_command",
    "watch_command",
]
