"""Source code parser using tree-sitter."""

from dataclasses import dataclass

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from page_sync.errors import ParseError
from page_sync.syntax import SourceText, iter_error_nodes

# Maximum number of syntax error locations reported in a ParseError
_MAX_DIAGNOSTICS = 5

# Line index offset (tree-sitter uses 0-based, we want 1-based)
_LINE_INDEX_OFFSET = 1

# Longest snippet of unexpected text quoted in a diagnostic
_SNIPPET_LIMIT = 40


def _get_tree_sitter_language() -> Language:
    """Return the TSX language binding.

    TSX covers both the JSX and the TypeScript syntax a Next.js page may use.
    """
    return Language(tree_sitter_typescript.language_tsx())


@dataclass(frozen=True)
class ParsedSource:
    """A successfully parsed source file."""

    root: Node
    source: SourceText


class SourceParser:
    """Parser for React/Next.js source code using tree-sitter."""

    def __init__(self) -> None:
        """Initialise the parser with the TSX grammar."""
        self.parser = Parser()
        self.parser.language = _get_tree_sitter_language()

    def parse(self, source_code: str) -> ParsedSource:
        """Parse source code string.

        Args:
            source_code: Source code to parse

        Returns:
            ParsedSource holding the program node and the source text

        Raises:
            ParseError: If the source contains syntax errors

        """
        source = SourceText(source_code)
        tree = self.parser.parse(source.data)
        root = tree.root_node

        if root.has_error:
            diagnostics = self._diagnostics(root, source)
            first = diagnostics[0] if diagnostics else "unknown location"
            raise ParseError(f"Failed to parse source: {first}", diagnostics)

        return ParsedSource(root=root, source=source)

    def _diagnostics(self, root: Node, source: SourceText) -> list[str]:
        """Describe the syntax error locations of a tree."""
        diagnostics: list[str] = []
        for node in iter_error_nodes(root)[:_MAX_DIAGNOSTICS]:
            line = node.start_point[0] + _LINE_INDEX_OFFSET
            column = node.start_point[1] + _LINE_INDEX_OFFSET
            if node.is_missing:
                diagnostics.append(f"line {line}, column {column}: missing '{node.type}'")
                continue
            snippet = source.node_text(node).strip().splitlines()
            text = snippet[0][:_SNIPPET_LIMIT] if snippet else ""
            diagnostics.append(f"line {line}, column {column}: unexpected '{text}'")
        return diagnostics
