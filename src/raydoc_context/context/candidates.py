"""Candidate Extractor: identifier positions worth resolving as types.

There is no scope analysis: every identifier in the function body is a
candidate unless it is a structural keyword, the function's own name, or
is immediately followed by "(" (a call). Each candidate's whole-word
occurrences are reported in order; the resolver stops at the first
occurrence that yields a result.
"""

from __future__ import annotations

import re

from raydoc_context.context.types import FunctionDefinition, Position

_IDENTIFIER = re.compile(r"[a-zA-Z_$][a-zA-Z0-9_$]*")
_WORD_CHAR = re.compile(r"[a-zA-Z0-9_$]")

STRUCTURAL_KEYWORDS: frozenset[str] = frozenset(
    {
        # shared
        "function", "func", "def", "class", "interface", "struct", "enum", "type",
        "return", "if", "else", "elif", "for", "while", "do", "switch", "case",
        "default", "break", "continue", "try", "catch", "except", "finally",
        "throw", "raise", "new", "delete", "in", "of", "is", "not", "and", "or",
        "import", "from", "export", "as", "with", "yield", "await", "async",
        "pass", "lambda", "global", "nonlocal", "del", "assert",
        # declarations and modifiers
        "const", "let", "var", "static", "public", "private", "protected",
        "readonly", "abstract", "extends", "implements", "package", "go", "defer",
        "select", "chan", "map", "range",
        # literals and receivers
        "self", "this", "super", "cls", "true", "false", "True", "False",
        "None", "null", "undefined", "nil", "void",
    }
)


def candidate_tokens(text: str, function_name: str = "") -> list[str]:
    """Enumerate identifier tokens worth resolving, in first-seen order.

    Args:
        text: Function body text.
        function_name: The function's own name (excluded).

    Returns:
        Deduplicated tokens.

    """
    seen: set[str] = set()
    tokens: list[str] = []
    for match in _IDENTIFIER.finditer(text):
        word = match.group(0)
        if word in seen:
            continue
        seen.add(word)
        if word in STRUCTURAL_KEYWORDS or word == function_name:
            continue
        if _is_called(text, word):
            continue
        tokens.append(word)
    return tokens


def _is_called(text: str, word: str) -> bool:
    pattern = rf"(?<![a-zA-Z0-9_$]){re.escape(word)}\s*\("
    return re.search(pattern, text) is not None


def word_positions(function: FunctionDefinition, word: str) -> list[Position]:
    """Document positions of every whole-word occurrence of word in function.

    Offsets on the first line are shifted by the function's start column.
    """
    positions: list[Position] = []
    base_line = function.range.start.line
    base_char = function.range.start.character

    for i, line in enumerate(function.text.split("\n")):
        start = 0
        while True:
            index = line.find(word, start)
            if index == -1:
                break
            before = line[index - 1] if index > 0 else " "
            end = index + len(word)
            after = line[end] if end < len(line) else " "
            if not _WORD_CHAR.match(before) and not _WORD_CHAR.match(after):
                column = index + base_char if i == 0 else index
                positions.append(Position(base_line + i, column))
            start = end
    return positions


def extract_candidates(function: FunctionDefinition) -> list[tuple[str, list[Position]]]:
    """Pair each candidate token with its occurrence positions.

    Tokens without any whole-word occurrence are dropped.
    """
    result: list[tuple[str, list[Position]]] = []
    for word in candidate_tokens(function.text, function.name):
        positions = word_positions(function, word)
        if positions:
            result.append((word, positions))
    return result
