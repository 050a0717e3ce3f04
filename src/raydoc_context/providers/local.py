"""Offline Capability Provider backed by the heuristic parsers.

Lets the CLI and project sweeps run without an editor. Lookups are by
name: the identifier under a position is matched against symbols of the
same document first, then against a lazily built workspace index.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from raydoc_context.context.file_tree import enumerate_files
from raydoc_context.context.languages import classifier_for, detect_language
from raydoc_context.context.types import (
    DocumentSymbol,
    Location,
    Position,
    Range,
    text_in_range,
)
from raydoc_context.core.config import DEFAULT_TREE_EXCLUDES
from raydoc_context.core.exceptions import ProviderError
from raydoc_context.providers.parsers import PARSERS, ParsedSymbol

logger = logging.getLogger(__name__)

# Cap on files parsed into the workspace index
DEFAULT_INDEX_LIMIT = 2000

_IDENTIFIER_CHAR = re.compile(r"[A-Za-z0-9_$]")


@dataclass(frozen=True, slots=True)
class IndexedSymbol:
    """A parsed symbol with its owning file and classification."""

    name: str
    location: Location
    type_like: bool


@dataclass
class _Node:
    symbol: ParsedSymbol
    children: list[_Node] = field(default_factory=list)

    def freeze(self) -> DocumentSymbol:
        return DocumentSymbol(
            name=self.symbol.name,
            kind=self.symbol.kind,
            range=self.symbol.range,
            children=tuple(child.freeze() for child in self.children),
        )


def nest_symbols(flat: list[ParsedSymbol]) -> list[DocumentSymbol]:
    """Nest flat symbols into a tree by range containment.

    Args:
        flat: Parsed symbols in any order.

    Returns:
        Top-level DocumentSymbols with their children.

    """
    ordered = sorted(flat, key=lambda s: (s.range.start, _negated_end(s.range)))
    roots: list[_Node] = []
    stack: list[_Node] = []
    for symbol in ordered:
        node = _Node(symbol)
        while stack and not stack[-1].symbol.range.contains_range(symbol.range):
            stack.pop()
        (stack[-1].children if stack else roots).append(node)
        stack.append(node)
    return [node.freeze() for node in roots]


def _negated_end(rng: Range) -> tuple[int, int]:
    # Outer symbols sort before inner ones sharing a start position
    return (-rng.end.line, -rng.end.character)


def word_at(line: str, character: int) -> str | None:
    """Return the identifier covering character on line, if any."""
    if not 0 <= character < len(line) or not _IDENTIFIER_CHAR.match(line[character]):
        return None
    start = character
    while start > 0 and _IDENTIFIER_CHAR.match(line[start - 1]):
        start -= 1
    end = character
    while end < len(line) and _IDENTIFIER_CHAR.match(line[end]):
        end += 1
    word = line[start:end]
    return None if word[0].isdigit() else word


class LocalProvider:
    """Filesystem-backed Capability Provider.

    Args:
        workspace_root: Absolute workspace root.
        exclude: Globs excluded from the workspace index.
        index_limit: Maximum number of files indexed.

    """

    def __init__(
        self,
        workspace_root: str | Path,
        exclude: list[str] | None = None,
        index_limit: int = DEFAULT_INDEX_LIMIT,
    ) -> None:
        self._root = Path(workspace_root)
        self._exclude = list(exclude) if exclude is not None else list(DEFAULT_TREE_EXCLUDES)
        self._index_limit = index_limit
        self._texts: dict[str, str] = {}
        self._parsed: dict[str, list[ParsedSymbol]] = {}
        self._index: dict[str, list[IndexedSymbol]] | None = None
        self._indexed_files: list[str] = []

    # Filesystem

    async def read_text(self, uri: str) -> str:
        return self._read(uri)

    async def exists(self, path: str) -> bool:
        return Path(path).exists()

    async def is_dir(self, path: str) -> bool:
        return Path(path).is_dir()

    def _read(self, uri: str) -> str:
        if uri not in self._texts:
            self._texts[uri] = Path(uri).read_text(encoding="utf-8")
        return self._texts[uri]

    # Symbols

    async def symbols_of(self, uri: str) -> list[DocumentSymbol]:
        try:
            return nest_symbols(self._parse(uri))
        except (OSError, UnicodeDecodeError) as e:
            raise ProviderError(f"Cannot parse {uri}: {e}", operation="symbols_of", uri=uri) from e

    def _parse(self, uri: str) -> list[ParsedSymbol]:
        if uri in self._parsed:
            return self._parsed[uri]

        parser = PARSERS.get(detect_language(uri))
        symbols: list[ParsedSymbol] = []
        if parser is not None:
            try:
                symbols = parser(self._read(uri))
            except ValueError as e:
                logger.debug("No symbols for %s: %s", uri, e)
        self._parsed[uri] = symbols
        return symbols

    def _indexed(self, uri: str) -> list[IndexedSymbol]:
        language = detect_language(uri)
        classifier = classifier_for(language)
        text = self._read(uri)
        result: list[IndexedSymbol] = []
        for symbol in self._parse(uri):
            type_like = classifier.is_type_like(symbol.kind, text_in_range(text, symbol.range))
            result.append(IndexedSymbol(symbol.name, Location(uri, symbol.range), type_like))
        return result

    def _workspace_index(self) -> dict[str, list[IndexedSymbol]]:
        if self._index is not None:
            return self._index

        index: dict[str, list[IndexedSymbol]] = {}
        try:
            files = enumerate_files(self._root, self._exclude, self._index_limit)
        except OSError as e:
            logger.warning("Cannot index workspace %s: %s", self._root, e)
            files = []

        for rel_path in files:
            uri = str(self._root / rel_path)
            if detect_language(uri) not in PARSERS:
                continue
            try:
                entries = self._indexed(uri)
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("Skipping %s in index: %s", rel_path, e)
                continue
            self._indexed_files.append(uri)
            for entry in entries:
                index.setdefault(entry.name, []).append(entry)

        logger.debug("Indexed %d files, %d names", len(self._indexed_files), len(index))
        self._index = index
        return index

    # Lookups

    async def definitions_at(self, uri: str, position: Position) -> list[Location]:
        return self._lookup(uri, position, types_only=False)

    async def declarations_at(self, uri: str, position: Position) -> list[Location]:
        return self._lookup(uri, position, types_only=False)

    async def type_definitions_at(self, uri: str, position: Position) -> list[Location]:
        return self._lookup(uri, position, types_only=True)

    def _word(self, uri: str, position: Position) -> str | None:
        lines = self._read(uri).split("\n")
        if not 0 <= position.line < len(lines):
            return None
        return word_at(lines[position.line], position.character)

    def _lookup(self, uri: str, position: Position, types_only: bool) -> list[Location]:
        name = self._word(uri, position)
        if name is None:
            return []

        local = [
            entry.location
            for entry in self._indexed(uri)
            if entry.name == name and (entry.type_like or not types_only)
        ]
        if local:
            return local

        matches = [
            entry.location
            for entry in self._workspace_index().get(name, [])
            if entry.location.uri != uri and (entry.type_like or not types_only)
        ]
        return sorted(matches, key=lambda loc: (loc.uri, loc.range.start))

    async def references_at(self, uri: str, position: Position) -> list[Location]:
        name = self._word(uri, position)
        if name is None:
            return []

        self._workspace_index()
        pattern = re.compile(rf"(?<![A-Za-z0-9_$]){re.escape(name)}(?![A-Za-z0-9_$])")
        uris = dict.fromkeys([uri, *self._indexed_files])
        locations: list[Location] = []
        for candidate in uris:
            try:
                text = self._read(candidate)
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("Skipping %s for references: %s", candidate, e)
                continue
            for line_number, line in enumerate(text.split("\n")):
                for match in pattern.finditer(line):
                    locations.append(
                        Location(candidate, Range.of(line_number, match.start(), line_number, match.end()))
                    )
        return locations
