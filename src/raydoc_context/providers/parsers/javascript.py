"""JavaScript/TypeScript symbol extraction using regex + brace counting.

Extracts functions, classes (with their methods and constructor), arrow
functions, interfaces, enums and type aliases. Arrow functions and type
aliases are reported as variables/constants, the way editors report them;
the classifier recognizes them by their text. Braces inside strings,
template literals and comments are not counted.
"""

from __future__ import annotations

import logging
import re

from raydoc_context.context.types import SymbolKind
from raydoc_context.providers.parsers.base import (
    JS_LEXICON,
    ParsedSymbol,
    check_size,
    code_chars,
    matching_brace,
    offset_to_line_col,
)

logger = logging.getLogger(__name__)

_EXPORT = r"^(?:export\s+(?:default\s+)?)?"

# Declaration patterns, each paired with the kind it produces
_SYMBOL_PATTERNS: list[tuple[re.Pattern[str], SymbolKind]] = [
    (
        re.compile(_EXPORT + r"(?:async\s+)?function\s*\*?\s*(\w+)\s*(?:<[^(]*>)?\s*\(", re.MULTILINE),
        SymbolKind.FUNCTION,
    ),
    (re.compile(_EXPORT + r"(?:abstract\s+)?class\s+(\w+)", re.MULTILINE), SymbolKind.CLASS),
    (re.compile(_EXPORT + r"interface\s+(\w+)", re.MULTILINE), SymbolKind.INTERFACE),
    (re.compile(_EXPORT + r"(?:declare\s+)?(?:const\s+)?enum\s+(\w+)", re.MULTILINE), SymbolKind.ENUM),
    (re.compile(r"^(?:export\s+)?type\s+(\w+)\s*(?:<[^=]*>)?\s*=", re.MULTILINE), SymbolKind.VARIABLE),
    (
        re.compile(
            r"^(?:export\s+)?(const|let|var)\s+(\w+)\s*(?::\s*[^=]+)?=\s*(?:async\s+)?"
            r"(?:\([^)]*\)|\w+)\s*(?::\s*[^=>\n]+)?\s*=>",
            re.MULTILINE,
        ),
        SymbolKind.VARIABLE,
    ),
]

# Methods inside a class body: name(...) {, with optional modifiers
_METHOD_PATTERN = re.compile(
    r"^([ \t]+)(?:(?:public|private|protected|static|async|readonly|override|abstract)\s+)*"
    r"(?:get\s+|set\s+)?\*?(\w+)\s*(?:<[^(]*>)?\s*\([^)]*\)\s*(?::\s*[^{;]+)?\{",
    re.MULTILINE,
)

_NOT_METHODS = frozenset({"if", "for", "while", "switch", "catch", "with", "function", "return"})

# How far past a declaration header the body brace may appear
_HEADER_LIMIT = 500


def parse_js_symbols(content: str) -> list[ParsedSymbol]:
    """Extract symbols from JavaScript/TypeScript source.

    Args:
        content: JS/TS source code.

    Returns:
        Symbols sorted by position.

    Raises:
        ValueError: If content exceeds MAX_PARSE_SIZE.

    """
    check_size(content)

    symbols: list[ParsedSymbol] = []
    claimed: set[int] = set()

    for pattern, kind in _SYMBOL_PATTERNS:
        for match in pattern.finditer(content):
            if match.start() in claimed:
                continue
            claimed.add(match.start())

            is_const_binding = match.lastindex == 2 and match.group(1) == "const"
            symbol_kind = SymbolKind.CONSTANT if is_const_binding else kind
            end = _declaration_end(content, match.end())
            symbols.append(_make_symbol(content, match.group(match.lastindex or 1), symbol_kind, match.start(), end))

            if kind is SymbolKind.CLASS:
                symbols.extend(_class_members(content, match.end(), end))

    symbols.sort(key=lambda s: (s.start_line, s.start_char))
    return symbols


def _make_symbol(content: str, name: str, kind: SymbolKind, start: int, end: int) -> ParsedSymbol:
    start_line, start_char = offset_to_line_col(content, start)
    end_line, end_char = offset_to_line_col(content, end)
    return ParsedSymbol(name, kind, start_line, start_char, end_line, end_char)


def _body_brace(content: str, header_end: int) -> int | None:
    """Offset of the body brace following a declaration header.

    A ";" or a line break followed by a new statement means there is no
    braced body.
    """
    limit = min(header_end + _HEADER_LIMIT, len(content))
    for i, ch in code_chars(content, header_end, JS_LEXICON, limit):
        if ch == "{":
            return i
        if ch == ";" or (ch == "\n" and content[i + 1 : i + 2].isalpha()):
            return None
    return None


def _declaration_end(content: str, header_end: int) -> int:
    """Offset just past a declaration whose header ends at header_end."""
    brace = _body_brace(content, header_end)
    if brace is None:
        # Expression body: the rest of the line
        eol = content.find("\n", header_end)
        return len(content) if eol == -1 else eol

    close = matching_brace(content, brace, JS_LEXICON)
    return len(content) if close is None else close + 1


def _class_members(content: str, header_end: int, class_end: int) -> list[ParsedSymbol]:
    brace = _body_brace(content, header_end)
    if brace is None:
        return []

    members: list[ParsedSymbol] = []
    pos = brace + 1
    while True:
        match = _METHOD_PATTERN.search(content, pos, class_end)
        if match is None:
            break
        name = match.group(2)
        end = _declaration_end(content, match.end() - 1)
        if name not in _NOT_METHODS:
            kind = SymbolKind.CONSTRUCTOR if name == "constructor" else SymbolKind.METHOD
            members.append(_make_symbol(content, name, kind, match.end(1), end))
        # Resume after the body so nested blocks are not taken for methods
        pos = max(end, match.end())
    return members
