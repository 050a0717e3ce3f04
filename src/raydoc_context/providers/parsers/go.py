"""Go symbol extraction using regex + brace counting.

gofmt puts every top-level declaration at column 0, which keeps the
patterns simple. Methods are reported under their bare name; the
receiver type is not part of the symbol name.
"""

from __future__ import annotations

import logging
import re

from raydoc_context.context.types import SymbolKind
from raydoc_context.providers.parsers.base import (
    GO_LEXICON,
    ParsedSymbol,
    check_size,
    code_chars,
    matching_brace,
    offset_to_line_col,
)

logger = logging.getLogger(__name__)

_TYPE_PARAMS = r"(?:\[[^\]]*\])?"

# Order matters: a method claims its offset before the plain func pattern
_PATTERNS: list[tuple[re.Pattern[str], SymbolKind]] = [
    (
        re.compile(rf"^func\s+\(\s*\w+\s+\*?\w+{_TYPE_PARAMS}\s*\)\s+(\w+)\s*{_TYPE_PARAMS}\(", re.MULTILINE),
        SymbolKind.METHOD,
    ),
    (re.compile(rf"^func\s+(\w+)\s*{_TYPE_PARAMS}\(", re.MULTILINE), SymbolKind.FUNCTION),
    (re.compile(rf"^type\s+(\w+){_TYPE_PARAMS}\s+struct\s*\{{", re.MULTILINE), SymbolKind.STRUCT),
    (re.compile(rf"^type\s+(\w+){_TYPE_PARAMS}\s+interface\s*\{{", re.MULTILINE), SymbolKind.INTERFACE),
]

# Body-less declarations (assembly stubs) have no brace nearby
_BODY_SEARCH_LIMIT = 500


def parse_go_symbols(content: str) -> list[ParsedSymbol]:
    """Extract symbols from Go source.

    Args:
        content: Go source code.

    Returns:
        Symbols sorted by position.

    Raises:
        ValueError: If content exceeds MAX_PARSE_SIZE.

    """
    check_size(content)

    symbols: list[ParsedSymbol] = []
    claimed: set[int] = set()

    for pattern, kind in _PATTERNS:
        for match in pattern.finditer(content):
            if match.start() in claimed:
                continue
            brace = _body_brace(content, match)
            if brace is None:
                continue
            claimed.add(match.start())

            close = matching_brace(content, brace, GO_LEXICON)
            end = len(content) if close is None else close + 1
            start_line, start_char = offset_to_line_col(content, match.start())
            end_line, end_char = offset_to_line_col(content, end)
            symbols.append(ParsedSymbol(match.group(1), kind, start_line, start_char, end_line, end_char))

    symbols.sort(key=lambda s: (s.start_line, s.start_char))
    return symbols


def _body_brace(content: str, match: re.Match[str]) -> int | None:
    # struct/interface patterns end on their brace
    if content[match.end() - 1] == "{":
        return match.end() - 1
    limit = min(match.end() + _BODY_SEARCH_LIMIT, len(content))
    for i, ch in code_chars(content, match.end(), GO_LEXICON, limit):
        if ch == "{":
            return i
    return None
