"""Shared fixtures for raydoc-context tests.

FakeProvider is an in-memory Capability Provider: documents are plain
strings keyed by absolute path, and lookups are keyed by the identifier
under the queried position. Every call is recorded so tests can assert on
which queries were (or were not) issued.
"""

from __future__ import annotations

import pytest

from raydoc_context.context.types import DocumentSymbol, Location, Position, Range, SymbolKind
from raydoc_context.core.exceptions import ProviderError
from raydoc_context.providers.local import word_at

WORKSPACE = "/ws"


def sym(
    name: str,
    kind: SymbolKind,
    start_line: int,
    start_char: int,
    end_line: int,
    end_char: int,
    children: tuple[DocumentSymbol, ...] = (),
) -> DocumentSymbol:
    """Build a DocumentSymbol from four integers."""
    return DocumentSymbol(name, kind, Range.of(start_line, start_char, end_line, end_char), children)


def loc(uri: str, start_line: int, start_char: int = 0, end_line: int | None = None, end_char: int = 1) -> Location:
    """Build a Location (single-line unless end_line is given)."""
    return Location(uri, Range.of(start_line, start_char, start_line if end_line is None else end_line, end_char))


class FakeProvider:
    """In-memory Capability Provider keyed by identifier name."""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files: dict[str, str] = dict(files or {})
        self.symbols: dict[str, list[DocumentSymbol]] = {}
        self.definitions: dict[str, list[Location]] = {}
        self.type_definitions: dict[str, list[Location]] = {}
        self.declarations: dict[str, list[Location]] = {}
        self.references: dict[str, list[Location]] = {}
        self.failing: set[str] = set()
        self.calls: list[tuple[str, str, Position | None]] = []

    def _record(self, operation: str, uri: str, position: Position | None = None) -> None:
        self.calls.append((operation, uri, position))
        if operation in self.failing:
            raise ProviderError(f"{operation} failed", operation=operation, uri=uri)

    def _word(self, uri: str, position: Position) -> str | None:
        lines = self.files.get(uri, "").split("\n")
        if not 0 <= position.line < len(lines):
            return None
        return word_at(lines[position.line], position.character)

    def _lookup(self, table: dict[str, list[Location]], uri: str, position: Position) -> list[Location]:
        word = self._word(uri, position)
        return list(table.get(word, [])) if word else []

    def calls_of(self, operation: str) -> list[tuple[str, str, Position | None]]:
        return [call for call in self.calls if call[0] == operation]

    async def symbols_of(self, uri: str) -> list[DocumentSymbol]:
        self._record("symbols_of", uri)
        return list(self.symbols.get(uri, []))

    async def definitions_at(self, uri: str, position: Position) -> list[Location]:
        self._record("definitions_at", uri, position)
        return self._lookup(self.definitions, uri, position)

    async def type_definitions_at(self, uri: str, position: Position) -> list[Location]:
        self._record("type_definitions_at", uri, position)
        return self._lookup(self.type_definitions, uri, position)

    async def declarations_at(self, uri: str, position: Position) -> list[Location]:
        self._record("declarations_at", uri, position)
        return self._lookup(self.declarations, uri, position)

    async def references_at(self, uri: str, position: Position) -> list[Location]:
        self._record("references_at", uri, position)
        return self._lookup(self.references, uri, position)

    async def read_text(self, uri: str) -> str:
        self._record("read_text", uri)
        if uri not in self.files:
            raise FileNotFoundError(uri)
        return self.files[uri]

    async def exists(self, path: str) -> bool:
        return path in self.files

    async def is_dir(self, path: str) -> bool:
        return any(uri.startswith(path.rstrip("/") + "/") for uri in self.files)


@pytest.fixture
def provider() -> FakeProvider:
    """Empty FakeProvider; tests add files and lookups."""
    return FakeProvider()
