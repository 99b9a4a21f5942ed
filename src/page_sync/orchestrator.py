"""Sync orchestration: validate, extract, patch, report.

A run moves through ``IDLE -> VALIDATING_PATHS -> EXTRACTING -> PATCHING ->
REPORTING -> DONE``; any failure before patching moves it to ``FAILED`` and
leaves the target file untouched. The target is written once, after every
patch has been applied in memory.
"""

import logging
from enum import StrEnum
from pathlib import Path

from page_sync.config import SyncConfig
from page_sync.errors import ParseError, SyncError
from page_sync.events import EventLog
from page_sync.extractor import ReactExtractor
from page_sync.models import ExtractionResult, PatchResult, SyncReport
from page_sync.patcher import TargetPatcher
from page_sync.transform import CodeTransformer

logger = logging.getLogger(__name__)

_DEFAULT_ENCODING = "utf-8"


class SyncState(StrEnum):
    """States of a sync run."""

    IDLE = "idle"
    VALIDATING_PATHS = "validating_paths"
    EXTRACTING = "extracting"
    PATCHING = "patching"
    REPORTING = "reporting"
    DONE = "done"
    FAILED = "failed"


class SyncOrchestrator:
    """Runs one extraction-and-patch cycle from a source file to a target file."""

    def __init__(
        self,
        config: SyncConfig | None = None,
        extractor: ReactExtractor | None = None,
        patcher: TargetPatcher | None = None,
    ) -> None:
        """Initialise the orchestrator.

        Args:
            config: Sync configuration (defaults if None)
            extractor: Extractor to use (built from config if None)
            patcher: Patcher to use (built from config if None)

        """
        self._config = config or SyncConfig()
        self._extractor = extractor or ReactExtractor(
            self._config.extractor, CodeTransformer(self._config.transform)
        )
        self._patcher = patcher or TargetPatcher(self._config.patcher)
        self._state = SyncState.IDLE

    @property
    def state(self) -> SyncState:
        """Return the state of the current or last run."""
        return self._state

    def _transition(self, state: SyncState) -> None:
        logger.debug("Sync state: %s -> %s", self._state, state)
        self._state = state

    def sync(
        self, source_path: Path | None = None, target_path: Path | None = None
    ) -> SyncReport:
        """Sync the target file from the source file.

        Args:
            source_path: React source file (configured default if None)
            target_path: Standalone HTML file (configured default if None)

        Returns:
            SyncReport with counts and warnings

        Raises:
            FileNotFoundError: If either file does not exist
            SyncError: If the source cannot be parsed or extraction fails

        """
        source_path = source_path or self._config.source_path
        target_path = target_path or self._config.target_path
        self._transition(SyncState.IDLE)
        logger.info("Starting React -> HTML sync")

        try:
            self._transition(SyncState.VALIDATING_PATHS)
            self._validate_paths(source_path, target_path)

            self._transition(SyncState.EXTRACTING)
            extraction = self._extract(source_path)
            target_text = target_path.read_text(encoding=_DEFAULT_ENCODING)

            self._transition(SyncState.PATCHING)
            patch = self._patch(target_text, extraction, target_path)

            self._transition(SyncState.REPORTING)
            target_path.write_text(patch.text, encoding=_DEFAULT_ENCODING)
        except Exception:
            self._transition(SyncState.FAILED)
            raise

        report = self._build_report(
            source_path, target_path, extraction, patch, patch.text != target_text
        )
        self._transition(SyncState.DONE)
        return report

    def _validate_paths(self, source_path: Path, target_path: Path) -> None:
        if not source_path.is_file():
            raise FileNotFoundError(f"React file not found: {source_path}")
        if not target_path.is_file():
            raise FileNotFoundError(f"HTML file not found: {target_path}")

    def _extract(self, source_path: Path) -> ExtractionResult:
        logger.info("Parsing React file: %s", source_path)
        events = EventLog()
        try:
            source_code = source_path.read_text(encoding=_DEFAULT_ENCODING)
            extraction = self._extractor.extract(source_code, events)
        except ParseError as e:
            for diagnostic in e.diagnostics:
                logger.error("%s: %s", source_path, diagnostic)
            raise SyncError(f"Failed to parse React file: {e}") from e
        except Exception as e:
            raise SyncError(f"Failed to extract from React file: {e}") from e
        events.drain_to(logger)
        return extraction

    def _patch(
        self, target_text: str, extraction: ExtractionResult, target_path: Path
    ) -> PatchResult:
        logger.info("Updating HTML file: %s", target_path)
        events = EventLog()
        patch = self._patcher.patch(target_text, extraction, events)
        events.drain_to(logger)
        return patch

    def _build_report(
        self,
        source_path: Path,
        target_path: Path,
        extraction: ExtractionResult,
        patch: PatchResult,
        changed: bool,
    ) -> SyncReport:
        return SyncReport(
            source_path=str(source_path),
            target_path=str(target_path),
            functions_extracted=len(extraction.functions),
            state_extracted=len(extraction.state),
            logic_extracted=len(extraction.logic),
            updated_count=patch.outcome.updated_count,
            skipped_count=patch.outcome.skipped_count,
            warnings=[*extraction.warnings, *patch.outcome.warnings],
            target_changed=changed,
        )
