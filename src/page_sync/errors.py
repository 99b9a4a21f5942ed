"""Error classes for page-sync.

This module provides:
- PageSyncError: Base exception class for all page-sync errors
- ParseError: Source text is not valid in the supported grammar
- SyncError: A sync run failed before the target was written
- ConfigError: Configuration could not be loaded or validated
"""


class PageSyncError(Exception):
    """Base exception for all page-sync errors."""

    pass


class ParseError(PageSyncError):
    """Raised when source code cannot be parsed.

    Carries the parser diagnostics (one human-readable line per syntax error
    location) so callers can surface them without re-parsing.
    """

    def __init__(self, message: str, diagnostics: list[str] | None = None) -> None:
        """Initialise parse error with diagnostics.

        Args:
            message: Human-readable error message
            diagnostics: Parser diagnostic lines, most relevant first

        """
        super().__init__(message)
        self.diagnostics = diagnostics or []


class SyncError(PageSyncError):
    """Raised when a sync run fails during extraction."""

    pass


class ConfigError(PageSyncError):
    """Raised when configuration is invalid."""

    pass
