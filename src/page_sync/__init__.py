"""page-sync: keep a standalone HTML mirror of a React page in step with it."""

from page_sync.config import (
    ExtractorConfig,
    PatcherConfig,
    SyncConfig,
    TransformConfig,
    load_config,
)
from page_sync.errors import ConfigError, PageSyncError, ParseError, SyncError
from page_sync.events import EventKind, EventLog, SyncEvent
from page_sync.extractor import ReactExtractor
from page_sync.models import (
    ExtractionResult,
    FunctionKind,
    FunctionRecord,
    LogicRecord,
    PatchOutcome,
    PatchResult,
    StateRecord,
    SyncReport,
)
from page_sync.orchestrator import SyncOrchestrator, SyncState
from page_sync.parser import ParsedSource, SourceParser
from page_sync.patcher import TargetPatcher, indent_code
from page_sync.transform import CodeTransformer

__all__ = [
    # Configuration
    "ExtractorConfig",
    "PatcherConfig",
    "SyncConfig",
    "TransformConfig",
    "load_config",
    # Errors
    "ConfigError",
    "PageSyncError",
    "ParseError",
    "SyncError",
    # Events
    "EventKind",
    "EventLog",
    "SyncEvent",
    # Models
    "ExtractionResult",
    "FunctionKind",
    "FunctionRecord",
    "LogicRecord",
    "PatchOutcome",
    "PatchResult",
    "StateRecord",
    "SyncReport",
    # Components
    "CodeTransformer",
    "ParsedSource",
    "ReactExtractor",
    "SourceParser",
    "SyncOrchestrator",
    "SyncState",
    "TargetPatcher",
    "indent_code",
]
