"""Extraction of functions, state and effects from React source.

The extractor walks the syntax tree once, in document order, and classifies
the nodes it cares about:

- named function declarations on the allow-list
- allow-listed variables bound to an arrow or function expression
- ``const [value, setValue] = useState(initial)`` declarations
- ``useEffect(callback, deps)`` registrations
- allow-listed variables bound to ``useCallback(callback, deps)``

Everything else is ignored. Function records are keyed by name, so a later
declaration of the same name replaces an earlier one.
"""

import logging
from collections.abc import Callable

from tree_sitter import Node

from page_sync.config import ExtractorConfig
from page_sync.events import EventKind, EventLog
from page_sync.models import (
    ExtractionResult,
    FunctionKind,
    FunctionRecord,
    LogicRecord,
    StateRecord,
)
from page_sync.parser import SourceParser
from page_sync.syntax import (
    FUNCTION_VALUE_KINDS,
    NodeKind,
    SourceText,
    binding_name,
    callee_name,
    classify,
    find_ancestor,
    is_async,
    named_arguments,
)
from page_sync.transform import CodeTransformer

logger = logging.getLogger(__name__)

# Line index offset (tree-sitter uses 0-based, we want 1-based)
_LINE_INDEX_OFFSET = 1

_Visitor = Callable[[Node], None]


class _ExtractionPass:
    """State of a single traversal; discarded once the result is built."""

    def __init__(
        self,
        config: ExtractorConfig,
        transformer: CodeTransformer,
        source: SourceText,
        events: EventLog,
    ) -> None:
        self._config = config
        self._transformer = transformer
        self._source = source
        self._events = events

        self.functions: dict[str, FunctionRecord] = {}
        self.state: list[StateRecord] = []
        self.logic: list[LogicRecord] = []
        self.warnings: list[str] = []

        self._visitors: dict[NodeKind, _Visitor] = {
            NodeKind.FUNCTION_DECLARATION: self._visit_function_declaration,
            NodeKind.VARIABLE_DECLARATOR: self._visit_variable_declarator,
            NodeKind.CALL_EXPRESSION: self._visit_call_expression,
        }
        self._call_handlers: dict[str, _Visitor] = {
            config.effect_hook: self._extract_effect,
            config.callback_hook: self._extract_callback,
        }

    def run(self, root: Node) -> ExtractionResult:
        """Visit every node once in pre-order and build the result."""
        stack = [root]
        while stack:
            node = stack.pop()
            visitor = self._visitors.get(classify(node))
            if visitor is not None:
                visitor(node)
            stack.extend(reversed(node.children))

        return ExtractionResult(
            functions=self.functions,
            state=self.state,
            logic=self.logic,
            warnings=self.warnings,
        )

    def _is_target(self, name: str) -> bool:
        return name in self._config.target_functions

    def _store_function(self, record: FunctionRecord) -> None:
        if record.name in self.functions:
            # Reassignment keeps the position of the first definition
            logger.debug("Replacing earlier definition of %s", record.name)
        self.functions[record.name] = record

    # -- visitors -------------------------------------------------------------

    def _visit_function_declaration(self, node: Node) -> None:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return
        name = self._source.node_text(name_node)
        if not self._is_target(name):
            return

        self._store_function(
            FunctionRecord(
                name=name,
                generated_text=self._transformer.render_declaration(node, self._source),
                kind=FunctionKind.PLAIN_FUNCTION,
                parameter_names=self._transformer.parameter_names(node, self._source),
            )
        )
        self._events.emit(EventKind.FUNCTION_EXTRACTED, name)

    def _visit_variable_declarator(self, node: Node) -> None:
        value = node.child_by_field_name("value")
        if value is None:
            return
        value_kind = classify(value)

        if value_kind in FUNCTION_VALUE_KINDS:
            self._extract_arrow_function(node, value)
        elif value_kind is NodeKind.CALL_EXPRESSION:
            if callee_name(value, self._source) == self._config.state_hook:
                self._extract_state(node, value)

    def _visit_call_expression(self, node: Node) -> None:
        name = callee_name(node, self._source)
        if name is None:
            return
        handler = self._call_handlers.get(name)
        if handler is not None:
            handler(node)

    # -- extraction -----------------------------------------------------------

    def _extract_arrow_function(self, declarator: Node, func_node: Node) -> None:
        name = binding_name(declarator, self._source)
        if name is None or not self._is_target(name):
            return

        self._store_function(
            FunctionRecord(
                name=name,
                generated_text=self._transformer.render_function(
                    name, func_node, self._source, is_async=is_async(func_node)
                ),
                kind=FunctionKind.ARROW_CONVERTED_FUNCTION,
                parameter_names=self._transformer.parameter_names(func_node, self._source),
            )
        )
        self._events.emit(EventKind.ARROW_FUNCTION_EXTRACTED, name)

    def _extract_state(self, declarator: Node, call: Node) -> None:
        pattern = declarator.child_by_field_name("name")
        if pattern is None or classify(pattern) is not NodeKind.ARRAY_PATTERN:
            return
        arguments = named_arguments(call)
        if len(arguments) != 1:
            return

        elements = [
            child
            for child in pattern.named_children
            if classify(child) is not NodeKind.COMMENT
        ]
        if len(elements) != 2 or any(
            classify(element) is not NodeKind.IDENTIFIER for element in elements
        ):
            # Destructuring into anything but two plain identifiers is not mirrored
            return

        reader, writer = (self._source.node_text(element) for element in elements)
        initial_value = self._transformer.serialize_initial_value(
            arguments[0], self._source
        )
        self.state.append(
            StateRecord(
                reader_name=reader,
                writer_name=writer,
                initial_value_literal=initial_value,
                generated_text=self._transformer.render_state(
                    reader, writer, initial_value
                ),
            )
        )
        self._events.emit(EventKind.STATE_EXTRACTED, reader)

    def _extract_effect(self, call: Node) -> None:
        arguments = named_arguments(call)
        if not arguments:
            return

        dependencies = arguments[1] if len(arguments) > 1 else None
        self.logic.append(
            LogicRecord(
                kind="effect",
                generated_text=self._transformer.render_effect(arguments[0], self._source),
                dependency_names=self._transformer.effect_dependencies(
                    dependencies, self._source
                ),
            )
        )
        self._events.emit(EventKind.EFFECT_EXTRACTED, self._config.effect_hook)

    def _extract_callback(self, call: Node) -> None:
        declarator = find_ancestor(call, NodeKind.VARIABLE_DECLARATOR)
        if declarator is None:
            return
        name = binding_name(declarator, self._source)
        if name is None or not self._is_target(name):
            return

        arguments = named_arguments(call)
        callback = arguments[0] if arguments else None
        if callback is None or classify(callback) not in FUNCTION_VALUE_KINDS:
            line = call.start_point[0] + _LINE_INDEX_OFFSET
            self.warnings.append(
                f"{self._config.callback_hook} for {name} at line {line} "
                "has no function argument"
            )
            return

        self._store_function(
            FunctionRecord(
                name=name,
                generated_text=self._transformer.render_function(
                    name, callback, self._source, is_async=True
                ),
                kind=FunctionKind.HOOK_DERIVED_ASYNC_FUNCTION,
                parameter_names=self._transformer.parameter_names(callback, self._source),
            )
        )
        self._events.emit(EventKind.CALLBACK_EXTRACTED, name)


class ReactExtractor:
    """Extracts functions, state and effects from React source code."""

    def __init__(
        self,
        config: ExtractorConfig | None = None,
        transformer: CodeTransformer | None = None,
        parser: SourceParser | None = None,
    ) -> None:
        """Initialise the extractor.

        Args:
            config: Names to recognise (defaults if None)
            transformer: Code generator for extracted nodes
            parser: Source parser (a new TSX parser if None)

        """
        self._config = config or ExtractorConfig()
        self._transformer = transformer or CodeTransformer()
        self._parser = parser or SourceParser()

    @property
    def config(self) -> ExtractorConfig:
        """Return the extractor configuration."""
        return self._config

    def extract(self, source_code: str, events: EventLog | None = None) -> ExtractionResult:
        """Parse source code and extract everything the target mirrors.

        Args:
            source_code: React/Next.js source text
            events: Optional collector for confirmation events

        Returns:
            ExtractionResult with functions, state, logic and warnings

        Raises:
            ParseError: If the source does not parse

        """
        parsed = self._parser.parse(source_code)
        extraction = _ExtractionPass(
            self._config,
            self._transformer,
            parsed.source,
            events if events is not None else EventLog(),
        )
        result = extraction.run(parsed.root)
        logger.debug(
            "Extracted %d functions, %d state variables, %d effects",
            len(result.functions),
            len(result.state),
            len(result.logic),
        )
        return result
