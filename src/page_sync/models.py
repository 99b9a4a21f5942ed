"""Data models for extraction and patch results."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class FunctionKind(StrEnum):
    """How a function record was derived from the source."""

    PLAIN_FUNCTION = "plain_function"
    ARROW_CONVERTED_FUNCTION = "arrow_converted_function"
    HOOK_DERIVED_ASYNC_FUNCTION = "hook_derived_async_function"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class FunctionRecord(_Record):
    """A function extracted from the source and rendered for the target."""

    name: str
    generated_text: str
    kind: FunctionKind
    parameter_names: list[str] = []


class StateRecord(_Record):
    """A (reader, writer) state declaration with its initial value."""

    reader_name: str
    writer_name: str
    initial_value_literal: str  # already serialised as target literal text
    generated_text: str


class LogicRecord(_Record):
    """An effect body and the names it depends on."""

    kind: str = "effect"
    generated_text: str
    dependency_names: list[str] = []


class ExtractionResult(_Record):
    """Result of extracting constructs from one source file.

    ``functions`` is keyed by name; its insertion order is discovery order and
    a later declaration with the same name replaces the earlier one.
    """

    functions: dict[str, FunctionRecord] = {}
    state: list[StateRecord] = []
    logic: list[LogicRecord] = []
    warnings: list[str] = []


class PatchOutcome(_Record):
    """Counts and warnings from one patch pass."""

    updated_count: int = 0
    skipped_count: int = 0
    warnings: list[str] = []


class PatchResult(_Record):
    """Updated target text together with its outcome."""

    text: str
    outcome: PatchOutcome


class SyncReport(_Record):
    """Aggregate summary of a completed sync run."""

    source_path: str
    target_path: str
    functions_extracted: int
    state_extracted: int
    logic_extracted: int
    updated_count: int
    skipped_count: int
    warnings: list[str] = []
    target_changed: bool = False

    @property
    def is_clean(self) -> bool:
        """True when nothing was skipped and no warnings were raised."""
        return self.skipped_count == 0 and not self.warnings
