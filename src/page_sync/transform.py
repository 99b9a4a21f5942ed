"""Conversion of React source constructs into plain JavaScript text.

The transformer turns selected syntax nodes back into text and rewrites
framework idioms (imports, state setters, environment lookups, axios calls,
bundled fallback data) into forms that run in the standalone page. It never
raises: anything it cannot classify falls back to a safe literal or to the
node's own text.
"""

import re
from collections.abc import Callable

from tree_sitter import Node

from page_sync.config import TransformConfig
from page_sync.scanner import find_matching, find_top_level
from page_sync.syntax import (
    FUNCTION_VALUE_KINDS,
    NodeKind,
    SourceText,
    classify,
)

# Default, namespace and named imports (named lists may span lines), then
# side-effect imports
_IMPORT_PATTERN = re.compile(
    r"(?<![\w$.])import\s+(?:type\s+)?"
    r"(?:[\w$]+\s*,?\s*)?(?:\{[^}]*\}|\*\s*as\s+[\w$]+)?"
    r"\s*from\s*['\"][^'\"\n]*['\"];?\n?"
    r"|(?<![\w$.])import\s*['\"][^'\"\n]*['\"];?\n?"
)
_SETTER_PATTERN = re.compile(r"(?<![\w$.])set([A-Z][\w$]*)\(")
_UNDEFINED_PATTERN = re.compile(r"(?<![\w$.])undefined(?![\w$])")
_BLANK_LINES_PATTERN = re.compile(r"\n\s*\n")
_LEADING_TABS_PATTERN = re.compile(r"^\t+", re.MULTILINE)


def remove_undefined_tokens(code: str) -> str:
    """Delete literal ``undefined`` tokens left over from generation."""
    return _UNDEFINED_PATTERN.sub("", code)


def _first_argument(args: str) -> str:
    """Return the text of the first top-level argument in an argument list."""
    comma = find_top_level(args, ",")
    return (args if comma is None else args[:comma]).strip()


def _rewrite_calls(
    text: str,
    pattern: re.Pattern[str],
    build: Callable[[re.Match[str], str], str | None],
) -> str:
    """Replace every call matched by pattern with build(match, arguments).

    The pattern must end at the call's opening parenthesis. Calls nested in
    the arguments are rewritten first. When build returns None, or the
    arguments are unbalanced, the call is left as it is.
    """
    pieces: list[str] = []
    pos = 0
    search_from = 0
    while (match := pattern.search(text, search_from)) is not None:
        open_index = match.end() - 1
        close_index = find_matching(text, open_index)
        if close_index is None:
            search_from = match.end()
            continue
        args = _rewrite_calls(text[open_index + 1 : close_index], pattern, build)
        replacement = build(match, args)
        if replacement is None:
            search_from = match.end()
            continue
        pieces.append(text[pos : match.start()])
        pieces.append(replacement)
        pos = search_from = close_index + 1
    pieces.append(text[pos:])
    return "".join(pieces)


def _decapitalise(name: str) -> str:
    return name[:1].lower() + name[1:]


def _double_quoted(raw: str) -> str:
    """Re-quote a JavaScript string literal with double quotes."""
    if len(raw) < 2 or raw[0] == '"':
        return raw
    body = raw[1:-1]
    out: list[str] = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            out.append("'" if nxt == "'" else ch + nxt)
            i += 2
            continue
        out.append('\\"' if ch == '"' else ch)
        i += 1
    return '"' + "".join(out) + '"'


class CodeTransformer:
    """Generates plain-JavaScript text from React syntax nodes."""

    def __init__(self, config: TransformConfig | None = None) -> None:
        """Initialise the transformer.

        Args:
            config: Substitution settings (defaults if None)

        """
        self._config = config or TransformConfig()
        self._env_pattern = re.compile(re.escape(self._config.env_lookup) + r"(?![\w$])")
        self._fetch_pattern = re.compile(
            r"(?<![\w$.])" + re.escape(self._config.fetch_callee) + r"\("
        )
        self._fallback_pattern = re.compile(
            r"(?<![\w$.])" + re.escape(self._config.fallback_identifier) + r"(?![\w$])"
        )
        self._indent_unit = " " * self._config.indent_width

    # -- serialisation --------------------------------------------------------

    def serialize(self, node: Node, source: SourceText) -> str:
        """Turn a node back into text with its continuation lines de-indented.

        Lines after the first lose the indentation of the line the node starts
        on, so a nested construct reads as if it were written at column 0.
        Leading tabs become spaces.
        """
        text = source.node_text(node)
        base_indent = source.line_indent(node.start_point[0])
        lines = text.split("\n")
        for index in range(1, len(lines)):
            line = lines[index]
            if not line.strip():
                lines[index] = ""
            elif base_indent and line.startswith(base_indent):
                lines[index] = line[len(base_indent) :]
        return _LEADING_TABS_PATTERN.sub(
            lambda m: self._indent_unit * len(m.group(0)), "\n".join(lines)
        )

    def clean(self, code: str) -> str:
        """Apply the framework-to-plain-JavaScript substitutions, in order."""
        code = _IMPORT_PATTERN.sub("", code)
        code = _rewrite_calls(code, _SETTER_PATTERN, self._setter_to_assignment)
        code = self._env_pattern.sub(lambda _: self._config.env_replacement, code)
        code = _rewrite_calls(code, self._fetch_pattern, self._fetch_to_native)
        code = self._fallback_pattern.sub(lambda _: self._config.fallback_accessor, code)
        code = remove_undefined_tokens(code)
        code = _BLANK_LINES_PATTERN.sub("\n", code)
        return code.strip()

    def _setter_to_assignment(self, match: re.Match[str], args: str) -> str | None:
        if f"set{match.group(1)}" in self._config.preserved_calls:
            return None
        return f"{_decapitalise(match.group(1))} = {args}"

    def _fetch_to_native(self, match: re.Match[str], args: str) -> str:
        return f"fetch({_first_argument(args)}).then(res => res.json())"

    # -- functions ------------------------------------------------------------

    def parameter_names(self, func_node: Node, source: SourceText) -> list[str]:
        """Return parameter names of a function node ("param" for patterns)."""
        single = func_node.child_by_field_name("parameter")
        if single is not None:
            return [self._parameter_name(single, source)]

        params = func_node.child_by_field_name("parameters")
        if params is None:
            return []
        return [
            self._parameter_name(child, source)
            for child in params.named_children
            if classify(child) is not NodeKind.COMMENT
        ]

    def _parameter_name(self, node: Node, source: SourceText) -> str:
        if classify(node) is NodeKind.IDENTIFIER:
            return source.node_text(node)
        # TypeScript grammars wrap parameters; the binding is the pattern field
        pattern = node.child_by_field_name("pattern")
        if classify(pattern) is NodeKind.IDENTIFIER:
            return source.node_text(pattern)  # type: ignore[arg-type]
        return "param"

    def function_body(self, func_node: Node, source: SourceText) -> str:
        """Return a function's body as a block, wrapping expression bodies."""
        body = func_node.child_by_field_name("body")
        if body is None:
            return "{}"
        if classify(body) is NodeKind.STATEMENT_BLOCK:
            return self.serialize(body, source)
        return f"{{ return {self.serialize(body, source)}; }}"

    def render_function(
        self, name: str, func_node: Node, source: SourceText, is_async: bool
    ) -> str:
        """Render a function value as a named function declaration.

        Args:
            name: Name for the generated declaration
            func_node: Arrow function or function expression node
            source: Source text the node belongs to
            is_async: Whether to emit an async declaration

        Returns:
            Cleaned declaration text

        """
        params = ", ".join(self.parameter_names(func_node, source))
        prefix = "async function" if is_async else "function"
        body = self.function_body(func_node, source)
        return self.clean(f"{prefix} {name}({params}) {body}")

    def render_declaration(self, node: Node, source: SourceText) -> str:
        """Render a function declaration node as-is, cleaned."""
        return self.clean(self.serialize(node, source))

    # -- state and effects ----------------------------------------------------

    def serialize_initial_value(self, node: Node | None, source: SourceText) -> str:
        """Serialise a state initial value as a single-line literal.

        Scalars keep their literal text (strings are re-quoted with double
        quotes). Arrays and objects become ``[]`` and ``{}``; their contents
        are not preserved. Anything else is ``null``.
        """
        kind = classify(node)
        if node is None or kind is NodeKind.NULL:
            return "null"
        if kind in (NodeKind.TRUE, NodeKind.FALSE, NodeKind.NUMBER):
            return source.node_text(node)
        if kind is NodeKind.STRING:
            return _double_quoted(source.node_text(node))
        if kind is NodeKind.ARRAY:
            return "[]"
        if kind is NodeKind.OBJECT:
            return "{}"
        return "null"

    def render_state(self, reader: str, writer: str, initial_value: str) -> str:
        """Render the plain-JavaScript equivalent of a state declaration."""
        return (
            f"let {reader} = {initial_value};\n"
            f"function {writer}(newValue) {{ {reader} = newValue; }}"
        )

    def render_effect(self, callback: Node, source: SourceText) -> str:
        """Render the body of an effect callback.

        Function arguments contribute their body; anything else (a reference
        to a named function, say) contributes its own text.
        """
        if classify(callback) in FUNCTION_VALUE_KINDS:
            body = callback.child_by_field_name("body")
            if body is not None:
                return self.clean(self.serialize(body, source))
        return self.clean(self.serialize(callback, source))

    def effect_dependencies(self, node: Node | None, source: SourceText) -> list[str]:
        """Return the names in an effect dependency array.

        Identifiers contribute their name and literals their value; falsy
        literals and other expressions are dropped.
        """
        if node is None or classify(node) is not NodeKind.ARRAY:
            return []

        names: list[str] = []
        for element in node.named_children:
            kind = classify(element)
            text = source.node_text(element)
            if kind is NodeKind.IDENTIFIER:
                names.append(text)
            elif kind is NodeKind.STRING and len(text) > 2:
                names.append(text[1:-1])
            elif kind is NodeKind.TRUE:
                names.append(text)
            elif kind is NodeKind.NUMBER and not _is_zero(text):
                names.append(text)
        return names


def _is_zero(number_text: str) -> bool:
    try:
        return float(number_text.replace("_", "")) == 0
    except ValueError:
        return False
