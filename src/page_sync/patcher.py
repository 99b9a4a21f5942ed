"""Splicing extracted code into the standalone HTML page.

The target is not parsed. Function declarations are located by their
``function <name>(...) {`` header and the body is delimited by brace
balancing; when the body cannot be balanced, three increasingly permissive
patterns are tried in turn. Functions with no existing declaration are
inserted before the closing script marker. State variables either have their
``let`` initialiser replaced or are appended to the global state region.

Problems never raise: they are recorded as warnings and counted as skips.
"""

import logging
import re
from dataclasses import dataclass, field

from page_sync.config import PatcherConfig
from page_sync.events import EventKind, EventLog
from page_sync.models import (
    ExtractionResult,
    FunctionRecord,
    PatchOutcome,
    PatchResult,
    StateRecord,
)
from page_sync.scanner import find_matching, find_statement_end
from page_sync.transform import remove_undefined_tokens

logger = logging.getLogger(__name__)

_LEADING_WHITESPACE = re.compile(r"[ \t]*")
_BODY_OPEN = re.compile(r"\s*\{")

# Body patterns used when brace balancing fails, applied after the opening
# brace: a closing brace on its own line, the first closing brace, a return
# followed by a closing brace
_LEGACY_BODY_PATTERNS = (
    ("closing-line", re.compile(r"[\s\S]*?\n\s*\}")),
    ("first-brace", re.compile(r"[\s\S]*?\}")),
    ("return", re.compile(r"[\s\S]*?return[^}]*\}")),
)


def indent_code(code: str, indent: str | int) -> str:
    """Prefix every non-blank line with indent; blank lines are kept as-is.

    Args:
        code: Text to indent
        indent: Indent string, or a number of spaces

    Returns:
        Indented text

    """
    prefix = " " * indent if isinstance(indent, int) else indent
    return "\n".join(prefix + line if line.strip() else line for line in code.split("\n"))


def _line_start(text: str, index: int) -> int:
    return text.rfind("\n", 0, index) + 1


def _line_indent(text: str, index: int) -> str:
    match = _LEADING_WHITESPACE.match(text, _line_start(text, index))
    return match.group(0) if match else ""


@dataclass(frozen=True)
class FunctionMatch:
    """Location of an existing function declaration in the target."""

    start: int
    end: int
    indent: str
    strategy: str


@dataclass
class _Tally:
    updated: int = 0
    skipped: int = 0
    warnings: list[str] = field(default_factory=list)

    def skip(self, warning: str) -> None:
        self.skipped += 1
        self.warnings.append(warning)
        logger.debug("Skipped: %s", warning)


class TargetPatcher:
    """Applies an ExtractionResult to the text of the standalone page."""

    def __init__(self, config: PatcherConfig | None = None) -> None:
        """Initialise the patcher.

        Args:
            config: Anchors and matching behaviour (defaults if None)

        """
        self._config = config or PatcherConfig()
        self._region_pattern = self._build_region_pattern()

    def _build_region_pattern(self) -> re.Pattern[str]:
        comment = r"\s+".join(
            re.escape(word) for word in self._config.state_region_comment.split()
        )
        terminators = "|".join(
            re.escape(term)
            for term in (*self._config.region_terminators, self._config.insertion_marker)
        )
        return re.compile(
            rf"//\s*{comment}[\s\S]*?(?=\n\s*(?:{terminators}))", re.IGNORECASE
        )

    @staticmethod
    def _header_prefix(name: str) -> re.Pattern[str]:
        return re.compile(rf"(?<![\w$.])(?:async\s+)?function\s+{re.escape(name)}\s*\(")

    def _find_header(self, text: str, name: str) -> tuple[int, int] | None:
        """Return (start, body brace index) of the first declaration of name.

        The parameter list is closed by bracket matching, so defaults such
        as ``now = new Date()`` do not end it early.
        """
        for prefix in self._header_prefix(name).finditer(text):
            params_close = find_matching(text, prefix.end() - 1)
            if params_close is None:
                continue
            brace = _BODY_OPEN.match(text, params_close + 1)
            if brace is not None:
                return prefix.start(), brace.end() - 1
        return None

    def patch(
        self,
        target_text: str,
        extraction: ExtractionResult,
        events: EventLog | None = None,
    ) -> PatchResult:
        """Apply extracted functions and state to the target text.

        Args:
            target_text: Current content of the target file
            extraction: Result of extracting the source file
            events: Optional collector for confirmation events

        Returns:
            PatchResult with the updated text and the counts and warnings

        """
        events = events if events is not None else EventLog()
        tally = _Tally()
        text = target_text

        for name, record in extraction.functions.items():
            text = self._update_function(text, name, record, tally, events)

        for state in extraction.state:
            text = self._update_state(text, state, tally, events)

        if extraction.logic:
            logger.debug(
                "%d effect blocks extracted; effects are reported, not patched",
                len(extraction.logic),
            )

        return PatchResult(
            text=text,
            outcome=PatchOutcome(
                updated_count=tally.updated,
                skipped_count=tally.skipped,
                warnings=tally.warnings,
            ),
        )

    # -- functions ------------------------------------------------------------

    def find_function(self, text: str, name: str) -> FunctionMatch | None:
        """Locate an existing declaration of name in text.

        Brace balancing is tried first (when enabled); then, in order, a body
        ending with a closing brace on its own line, a body ending at the
        first closing brace, and a body with a return before a closing brace.
        The first strategy that matches wins.
        """
        header = self._find_header(text, name)
        if header is None:
            return None
        start, brace = header
        indent = _line_indent(text, start)

        if self._config.balanced_matching:
            close = find_matching(text, brace)
            if close is not None:
                return FunctionMatch(
                    start=start, end=close + 1, indent=indent, strategy="balanced"
                )

        for strategy, pattern in _LEGACY_BODY_PATTERNS:
            match = pattern.match(text, brace + 1)
            if match is not None:
                return FunctionMatch(
                    start=start, end=match.end(), indent=indent, strategy=strategy
                )
        return None

    def _update_function(
        self,
        text: str,
        name: str,
        record: FunctionRecord,
        tally: _Tally,
        events: EventLog,
    ) -> str:
        code = remove_undefined_tokens(record.generated_text).strip()

        match = self.find_function(text, name)
        if match is not None:
            logger.debug("Matched %s with the %s strategy", name, match.strategy)
            # The header keeps its existing indentation; only continuation
            # lines are re-indented
            replacement = indent_code(code, match.indent)[len(match.indent) :]
            tally.updated += 1
            events.emit(EventKind.FUNCTION_UPDATED, name)
            return text[: match.start] + replacement + text[match.end :]

        marker_index = text.rfind(self._config.insertion_marker)
        if marker_index == -1:
            tally.skip(f"Could not find insertion point for function: {name}")
            return text

        line_start = _line_start(text, marker_index)
        insert_at = line_start if not text[line_start:marker_index].strip() else marker_index
        block = "\n" + indent_code(code, self._config.insertion_indent) + "\n\n"
        tally.updated += 1
        events.emit(EventKind.FUNCTION_INSERTED, name)
        return text[:insert_at] + block + text[insert_at:]

    # -- state ----------------------------------------------------------------

    def _update_state(
        self, text: str, state: StateRecord, tally: _Tally, events: EventLog
    ) -> str:
        reader = re.escape(state.reader_name)
        declaration = re.search(rf"(?<![\w$.])let\s+{reader}\s*=[ \t]*", text)

        if declaration is not None:
            # Only the initialiser changes; its terminator (";" or end of
            # line) and any trailing comment stay
            value_start = declaration.end()
            value_end = find_statement_end(text, value_start)
            while value_end > value_start and text[value_end - 1] in " \t":
                value_end -= 1
            tally.updated += 1
            events.emit(EventKind.STATE_UPDATED, state.reader_name)
            return text[:value_start] + state.initial_value_literal + text[value_end:]

        region = self._region_pattern.search(text)
        if region is not None:
            indent = _line_indent(text, region.start())
            line = (
                f"\n{indent}let {state.reader_name} = "
                f"{state.initial_value_literal}; // {state.writer_name}"
            )
            tally.updated += 1
            events.emit(EventKind.STATE_INSERTED, state.reader_name)
            return text[: region.end()] + line + text[region.end() :]

        tally.skip(f"Could not update state variable: {state.reader_name}")
        return text
