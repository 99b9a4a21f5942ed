"""Reporting of command failures as rich panels."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from page_sync.config import CONFIG_ENV_VAR, SyncConfig, load_config
from page_sync.errors import ConfigError, PageSyncError

logger = logging.getLogger(__name__)
console = Console(stderr=True)

PATHS_HINT = "Pass SOURCE and TARGET explicitly, or run from the project root."
CONFIG_HINT = f"Check the YAML file named by {CONFIG_ENV_VAR}, or unset it to use defaults."


class CLIError(PageSyncError):
    """A command failure that can be explained to the user.

    Commands raise it with a hint for failures they understand. Anything
    else escaping a command is wrapped into one by cli_error_handler.
    """

    def __init__(
        self,
        message: str,
        command: str | None = None,
        original_error: Exception | None = None,
        hint: str | None = None,
    ) -> None:
        """Initialise the error.

        Args:
            message: What went wrong
            command: Command that failed ("sync" or "watch")
            original_error: Exception this one was raised from
            hint: What the user can do about it

        """
        super().__init__(message)
        self.command = command
        self.original_error = original_error
        self.hint = hint

    def render(self) -> Text:
        """Return the panel body: the message, then the hint."""
        label = f"{self.command}: " if self.command else ""
        text = Text(f"{label}{self.args[0]}", style="red")
        if self.hint:
            text.append(f"\n{self.hint}", style="yellow")
        return text


def load_command_config(command: str) -> SyncConfig:
    """Load the configuration, turning a ConfigError into a CLIError."""
    try:
        return load_config()
    except ConfigError as e:
        raise CLIError(str(e), command=command, original_error=e, hint=CONFIG_HINT) from e


def require_file(path: Path, description: str, command: str) -> None:
    """Raise a CLIError unless path is an existing file."""
    if not path.is_file():
        raise CLIError(f"{description} not found: {path}", command=command, hint=PATHS_HINT)


@contextmanager
def cli_error_handler(command: str, title: str) -> Generator[None]:
    """Print any failure in the block as a panel and exit with code 1.

    Args:
        command: Command name recorded on wrapped errors
        title: Panel title

    """
    try:
        yield
    except Exception as e:
        if isinstance(e, CLIError):
            error = e
        else:
            error = CLIError(str(e), command=command, original_error=e)
        logger.error("%s: %s", title, error.render().plain)
        console.print(Panel(error.render(), title=f"❌ {title}", border_style="red"))
        raise typer.Exit(1) from e
