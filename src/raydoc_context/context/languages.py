"""Language detection and per-language symbol classification.

The classifier table maps a language identifier to a pair of predicates
{is_function_like, is_type_like} over native symbol kinds. Languages
without a native anonymous-function kind (JavaScript/TypeScript) also
reclassify VARIABLE symbols by matching their source text against an
arrow-function or type-alias pattern. Unknown languages classify every
symbol as neither.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Literal

from raydoc_context.context.types import SymbolKind

# Language detection by file extension
_LANGUAGE_MAP: dict[str, str] = {
    ".py": "python",
    ".pyw": "python",
    ".pyi": "python",
    ".js": "javascript",
    ".jsx": "javascriptreact",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescriptreact",
    ".go": "go",
    ".c": "c",
    ".h": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".java": "java",
    ".cs": "csharp",
    ".rs": "rust",
}

LanguageFamily = Literal["brace", "indentation"]

_INDENTATION_LANGUAGES = frozenset({"python"})

# (params) => / x => / (a: T): R => with optional const/let/var and export
ARROW_FUNCTION_PATTERN = re.compile(
    r"^\s*(?:export\s+)?(?:(?:const|let|var)\s+)?\w+\s*(?::\s*[^=]+)?=\s*"
    r"(?:async\s+)?(?:\([^)]*\)|\w+)\s*(?::\s*[^=>\n]+)?\s*=>"
)
TYPE_ALIAS_PATTERN = re.compile(r"^\s*(?:export\s+)?type\s+\w+\s*(?:<[^=]*>)?\s*=")

SymbolPredicate = Callable[[SymbolKind, str], bool]


@dataclass(frozen=True, slots=True)
class SymbolClassifier:
    """Pair of predicates deciding whether a symbol is function- or type-like.

    Both predicates receive the symbol kind and the symbol's source text.
    """

    is_function_like: SymbolPredicate
    is_type_like: SymbolPredicate


def _kinds(*kinds: SymbolKind) -> SymbolPredicate:
    allowed = frozenset(kinds)
    return lambda kind, _text: kind in allowed


def _script_function_like(kind: SymbolKind, text: str) -> bool:
    if kind in (SymbolKind.FUNCTION, SymbolKind.METHOD, SymbolKind.CONSTRUCTOR):
        return True
    if kind in (SymbolKind.VARIABLE, SymbolKind.CONSTANT):
        return ARROW_FUNCTION_PATTERN.match(text) is not None
    return False


def _script_type_like(kind: SymbolKind, text: str) -> bool:
    if kind in (SymbolKind.CLASS, SymbolKind.INTERFACE, SymbolKind.ENUM):
        return True
    if kind in (SymbolKind.VARIABLE, SymbolKind.CONSTANT):
        return TYPE_ALIAS_PATTERN.match(text) is not None
    return False


def _never(_kind: SymbolKind, _text: str) -> bool:
    return False


_FUNCTION_KINDS = (SymbolKind.FUNCTION, SymbolKind.METHOD, SymbolKind.CONSTRUCTOR)

_SCRIPT = SymbolClassifier(_script_function_like, _script_type_like)

_CLASSIFIERS: dict[str, SymbolClassifier] = {
    "python": SymbolClassifier(_kinds(*_FUNCTION_KINDS), _kinds(SymbolKind.CLASS, SymbolKind.ENUM)),
    "javascript": _SCRIPT,
    "javascriptreact": _SCRIPT,
    "typescript": _SCRIPT,
    "typescriptreact": _SCRIPT,
    "go": SymbolClassifier(
        _kinds(SymbolKind.FUNCTION, SymbolKind.METHOD),
        _kinds(SymbolKind.STRUCT, SymbolKind.INTERFACE, SymbolKind.CLASS),
    ),
    "c": SymbolClassifier(_kinds(SymbolKind.FUNCTION), _kinds(SymbolKind.STRUCT, SymbolKind.ENUM)),
    "cpp": SymbolClassifier(
        _kinds(*_FUNCTION_KINDS),
        _kinds(SymbolKind.CLASS, SymbolKind.STRUCT, SymbolKind.ENUM),
    ),
    "java": SymbolClassifier(
        _kinds(SymbolKind.METHOD, SymbolKind.CONSTRUCTOR),
        _kinds(SymbolKind.CLASS, SymbolKind.INTERFACE, SymbolKind.ENUM),
    ),
    "csharp": SymbolClassifier(
        _kinds(SymbolKind.METHOD, SymbolKind.CONSTRUCTOR),
        _kinds(SymbolKind.CLASS, SymbolKind.INTERFACE, SymbolKind.STRUCT, SymbolKind.ENUM),
    ),
    "rust": SymbolClassifier(
        _kinds(SymbolKind.FUNCTION, SymbolKind.METHOD),
        _kinds(SymbolKind.STRUCT, SymbolKind.ENUM, SymbolKind.INTERFACE),
    ),
}

_UNSUPPORTED = SymbolClassifier(_never, _never)


def classifier_for(language_id: str) -> SymbolClassifier:
    """Return the classifier for a language, or one that accepts nothing."""
    return _CLASSIFIERS.get(language_id, _UNSUPPORTED)


def detect_language(path: str) -> str:
    """Detect a language identifier from a file extension ("unknown" if none)."""
    suffix = PurePosixPath(path.replace("\\", "/")).suffix.lower()
    return _LANGUAGE_MAP.get(suffix, "unknown")


def language_family(language_id: str) -> LanguageFamily:
    """Return the boundary-search family of a language."""
    return "indentation" if language_id in _INDENTATION_LANGUAGES else "brace"
