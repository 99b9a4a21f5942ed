"""Syntax tree helpers and node classification.

Tree-sitter reports node types as strings. The extractor never compares those
strings directly: ``classify`` maps each node to a NodeKind once, and the
extractor dispatches on the enum.
"""

from enum import Enum, auto

from tree_sitter import Node

_DEFAULT_ENCODING = "utf-8"


class NodeKind(Enum):
    """Node kinds the extractor and transformer distinguish."""

    PROGRAM = auto()
    FUNCTION_DECLARATION = auto()
    FUNCTION_EXPRESSION = auto()
    ARROW_FUNCTION = auto()
    VARIABLE_DECLARATOR = auto()
    CALL_EXPRESSION = auto()
    ARRAY_PATTERN = auto()
    IDENTIFIER = auto()
    STATEMENT_BLOCK = auto()
    ARRAY = auto()
    OBJECT = auto()
    STRING = auto()
    NUMBER = auto()
    TRUE = auto()
    FALSE = auto()
    NULL = auto()
    COMMENT = auto()
    OTHER = auto()


# Tree-sitter node type -> NodeKind ("function" is the pre-0.21 name of
# function_expression)
_NODE_KINDS: dict[str, NodeKind] = {
    "program": NodeKind.PROGRAM,
    "function_declaration": NodeKind.FUNCTION_DECLARATION,
    "function_expression": NodeKind.FUNCTION_EXPRESSION,
    "function": NodeKind.FUNCTION_EXPRESSION,
    "arrow_function": NodeKind.ARROW_FUNCTION,
    "variable_declarator": NodeKind.VARIABLE_DECLARATOR,
    "call_expression": NodeKind.CALL_EXPRESSION,
    "array_pattern": NodeKind.ARRAY_PATTERN,
    "identifier": NodeKind.IDENTIFIER,
    "statement_block": NodeKind.STATEMENT_BLOCK,
    "array": NodeKind.ARRAY,
    "object": NodeKind.OBJECT,
    "string": NodeKind.STRING,
    "number": NodeKind.NUMBER,
    "true": NodeKind.TRUE,
    "false": NodeKind.FALSE,
    "null": NodeKind.NULL,
    "comment": NodeKind.COMMENT,
}

FUNCTION_VALUE_KINDS = frozenset({NodeKind.ARROW_FUNCTION, NodeKind.FUNCTION_EXPRESSION})


def classify(node: Node | None) -> NodeKind:
    """Return the NodeKind of a tree-sitter node (OTHER for unknown types)."""
    if node is None:
        return NodeKind.OTHER
    return _NODE_KINDS.get(node.type, NodeKind.OTHER)


class SourceText:
    """Source code with its encoded bytes, for slicing node text.

    Tree-sitter positions are byte offsets, so text is always sliced from the
    encoded form rather than the str.
    """

    def __init__(self, source_code: str) -> None:
        """Initialise from the original source string."""
        self.code = source_code
        self.data = source_code.encode(_DEFAULT_ENCODING)
        self._lines: list[bytes] | None = None

    def node_text(self, node: Node) -> str:
        """Get the text content of an AST node."""
        return self.data[node.start_byte : node.end_byte].decode(_DEFAULT_ENCODING)

    def line_indent(self, row: int) -> str:
        """Return the leading whitespace of a 0-based source line."""
        if self._lines is None:
            self._lines = self.data.split(b"\n")
        if row >= len(self._lines):
            return ""
        line = self._lines[row]
        stripped = line.lstrip(b" \t")
        return line[: len(line) - len(stripped)].decode(_DEFAULT_ENCODING)


def named_arguments(call_node: Node) -> list[Node]:
    """Return the argument expressions of a call, ignoring comments."""
    arguments = call_node.child_by_field_name("arguments")
    if arguments is None:
        return []
    return [
        child
        for child in arguments.named_children
        if classify(child) is not NodeKind.COMMENT
    ]


def callee_name(call_node: Node, source: SourceText) -> str | None:
    """Return the callee identifier of a call, or None for member/other callees."""
    callee = call_node.child_by_field_name("function")
    if classify(callee) is not NodeKind.IDENTIFIER:
        return None
    return source.node_text(callee)  # type: ignore[arg-type]


def binding_name(declarator: Node, source: SourceText) -> str | None:
    """Return the bound identifier of a variable declarator, if it is one."""
    name_node = declarator.child_by_field_name("name")
    if name_node is None or classify(name_node) is not NodeKind.IDENTIFIER:
        return None
    return source.node_text(name_node)


def is_async(node: Node) -> bool:
    """Check if a function node carries the async keyword."""
    return any(child.type == "async" for child in node.children)


def find_ancestor(node: Node, kind: NodeKind) -> Node | None:
    """Find the nearest enclosing node of a given kind."""
    parent = node.parent
    while parent is not None:
        if classify(parent) is kind:
            return parent
        parent = parent.parent
    return None


def iter_error_nodes(root: Node) -> list[Node]:
    """Collect ERROR and MISSING nodes in document order."""
    results: list[Node] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            results.append(node)
            continue
        if node.has_error:
            stack.extend(reversed(node.children))
    return results
