"""Bracket matching over JavaScript text.

The patcher works on target files it does not parse, and the transformer
rewrites call arguments as text. Both need to find the bracket that closes a
given one without being fooled by brackets inside strings, template literals,
comments or regular expression literals. The scanner is lexical only; it does
not validate the code.
"""

import re

_PAIRS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = frozenset(_PAIRS.values())
_STRING_QUOTES = "'\""

# Characters after which a "/" starts a regular expression rather than a division
_REGEX_PRECEDERS = frozenset("(,=:[!&|?{};+-*%<>~^")
_REGEX_KEYWORDS = re.compile(
    r"(?<![\w$])(?:return|typeof|case|in|of|void|yield|await|delete|instanceof|new)\s*$"
)


def _skip_string(text: str, start: int) -> int | None:
    """Return the index after the string literal starting at start."""
    quote = text[start]
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n":
            return None
        i += 1
    return None


def _skip_template(text: str, start: int) -> int | None:
    """Return the index after the template literal starting at start."""
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "`":
            return i + 1
        if ch == "$" and text.startswith("{", i + 1):
            close = find_matching(text, i + 1)
            if close is None:
                return None
            i = close + 1
            continue
        i += 1
    return None


def _skip_regex(text: str, start: int) -> int | None:
    """Return the index after the regex literal starting at start, flags included."""
    in_class = False
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == "\n":
            return None
        if in_class:
            if ch == "]":
                in_class = False
        elif ch == "[":
            in_class = True
        elif ch == "/":
            i += 1
            while i < len(text) and (text[i].isalnum() or text[i] in "_$"):
                i += 1
            return i
        i += 1
    return None


def _regex_allowed(text: str, index: int, previous: str) -> bool:
    if not previous or previous in _REGEX_PRECEDERS:
        return True
    return _REGEX_KEYWORDS.search(text, max(0, index - 16), index) is not None


def _skip_trivia(text: str, i: int) -> int | None:
    """Skip a literal or comment starting at i.

    Returns the index after it, -1 if nothing starts at i, or None if the
    literal or comment is unterminated.
    """
    ch = text[i]
    if ch in _STRING_QUOTES:
        return _skip_string(text, i)
    if ch == "`":
        return _skip_template(text, i)
    if text.startswith("//", i):
        end = text.find("\n", i)
        return len(text) if end == -1 else end
    if text.startswith("/*", i):
        end = text.find("*/", i + 2)
        return None if end == -1 else end + 2
    return -1


def find_matching(text: str, open_index: int) -> int | None:
    """Return the index of the bracket closing the one at open_index.

    Args:
        text: JavaScript text
        open_index: Index of an opening "(", "[" or "{"

    Returns:
        Index of the matching closer, or None if brackets are unbalanced,
        mismatched, or a literal is unterminated

    """
    if open_index >= len(text) or text[open_index] not in _PAIRS:
        return None

    expected: list[str] = []
    previous = ""
    i = open_index
    while i < len(text):
        ch = text[i]
        skipped = _skip_trivia(text, i)
        if skipped is None:
            return None
        if skipped >= 0:
            if ch in _STRING_QUOTES or ch == "`":
                previous = ch
            i = skipped
            continue

        if ch == "/" and _regex_allowed(text, i, previous):
            end = _skip_regex(text, i)
            if end is not None:
                previous = "/"
                i = end
                continue

        if ch in _PAIRS:
            expected.append(_PAIRS[ch])
        elif ch in _CLOSERS:
            if not expected or expected.pop() != ch:
                return None
            if not expected:
                return i
        if not ch.isspace():
            previous = ch
        i += 1
    return None


def find_top_level(text: str, target: str, start: int = 0) -> int | None:
    """Return the index of the first target character outside any brackets.

    Args:
        text: JavaScript text, such as a call's argument list
        target: Single character to find
        start: Index to start scanning from

    Returns:
        Index of the character, or None if it does not occur at top level

    """
    i = start
    while i < len(text):
        ch = text[i]
        if ch == target:
            return i
        skipped = _skip_trivia(text, i)
        if skipped is None:
            return None
        if skipped >= 0:
            i = skipped
            continue
        if ch in _PAIRS:
            close = find_matching(text, i)
            if close is None:
                return None
            i = close + 1
            continue
        i += 1
    return None


def find_statement_end(text: str, start: int = 0) -> int:
    """Return the end of the expression statement starting at start.

    The statement ends at the first ";", newline or comment outside brackets
    and literals, so an initialiser without a semicolon stops at its own line.
    Brackets spanning several lines are skipped whole. Unbalanced brackets
    or unterminated literals end the statement at their line.

    Args:
        text: JavaScript text
        start: Index of the first character of the expression

    Returns:
        Index of the terminating ";", newline or comment, or len(text)

    """
    i = start
    while i < len(text):
        ch = text[i]
        if ch in ";\n" or text.startswith(("//", "/*"), i):
            return i
        skipped = _skip_trivia(text, i)
        if skipped is None:
            return _line_end(text, i)
        if skipped >= 0:
            i = skipped
            continue
        if ch in _PAIRS:
            close = find_matching(text, i)
            if close is None:
                return _line_end(text, i)
            i = close + 1
            continue
        i += 1
    return len(text)


def _line_end(text: str, index: int) -> int:
    end = text.find("\n", index)
    return len(text) if end == -1 else end
