"""Python symbol extraction using AST.

Extracts functions, async functions, classes, methods and enum members
from Python source with the stdlib ast module. Nested definitions are
reported with their own ranges; the provider nests them by containment.
"""

from __future__ import annotations

import ast
import logging

from raydoc_context.context.types import SymbolKind
from raydoc_context.providers.parsers.base import ParsedSymbol, check_size

logger = logging.getLogger(__name__)

_ENUM_BASES = frozenset({"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"})


def parse_python_symbols(content: str) -> list[ParsedSymbol]:
    """Extract symbols from Python source.

    Args:
        content: Python source code.

    Returns:
        Symbols sorted by position.

    Raises:
        ValueError: If content exceeds MAX_PARSE_SIZE or has syntax errors.

    """
    check_size(content)
    try:
        tree = ast.parse(content)
    except SyntaxError as e:
        raise ValueError(f"Python syntax error: {e}") from e

    symbols = _extract_symbols(tree.body, in_class=False)
    symbols.sort(key=lambda s: (s.start_line, s.start_char))
    return symbols


def _base_name(node: ast.expr) -> str:
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return ""


def _is_enum(node: ast.ClassDef) -> bool:
    return any(_base_name(base) in _ENUM_BASES for base in node.bases)


def _symbol(node: ast.stmt, name: str, kind: SymbolKind) -> ParsedSymbol:
    # Ranges start at the def/class keyword, decorators excluded
    end_line = node.end_lineno or node.lineno
    end_char = node.end_col_offset if node.end_col_offset is not None else 0
    return ParsedSymbol(
        name=name,
        kind=kind,
        start_line=node.lineno - 1,
        start_char=node.col_offset,
        end_line=end_line - 1,
        end_char=end_char,
    )


def _extract_symbols(body: list[ast.stmt], in_class: bool) -> list[ParsedSymbol]:
    symbols: list[ParsedSymbol] = []

    for node in body:
        if isinstance(node, ast.ClassDef):
            if _is_enum(node):
                symbols.append(_symbol(node, node.name, SymbolKind.ENUM))
                symbols.extend(_enum_members(node))
            else:
                symbols.append(_symbol(node, node.name, SymbolKind.CLASS))
                symbols.extend(_extract_symbols(node.body, in_class=True))

        elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            if in_class:
                kind = SymbolKind.CONSTRUCTOR if node.name == "__init__" else SymbolKind.METHOD
            else:
                kind = SymbolKind.FUNCTION
            symbols.append(_symbol(node, node.name, kind))
            symbols.extend(_extract_symbols(node.body, in_class=False))

    return symbols


def _enum_members(node: ast.ClassDef) -> list[ParsedSymbol]:
    members: list[ParsedSymbol] = []
    for stmt in node.body:
        if isinstance(stmt, ast.Assign):
            targets = [t for t in stmt.targets if isinstance(t, ast.Name)]
        elif isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
            targets = [stmt.target]
        else:
            targets = []
        members.extend(_symbol(stmt, t.id, SymbolKind.ENUM_MEMBER) for t in targets)
    return members
