"""Heuristic language parsers used by the offline provider.

Each parser turns source text into a flat list of ParsedSymbol.
"""

from collections.abc import Callable

from raydoc_context.providers.parsers.base import MAX_PARSE_SIZE, ParsedSymbol
from raydoc_context.providers.parsers.go import parse_go_symbols
from raydoc_context.providers.parsers.javascript import parse_js_symbols
from raydoc_context.providers.parsers.python import parse_python_symbols

Parser = Callable[[str], list[ParsedSymbol]]

PARSERS: dict[str, Parser] = {
    "python": parse_python_symbols,
    "javascript": parse_js_symbols,
    "javascriptreact": parse_js_symbols,
    "typescript": parse_js_symbols,
    "typescriptreact": parse_js_symbols,
    "go": parse_go_symbols,
}

__all__ = [
    "MAX_PARSE_SIZE",
    "PARSERS",
    "ParsedSymbol",
    "parse_go_symbols",
    "parse_js_symbols",
    "parse_python_symbols",
]
