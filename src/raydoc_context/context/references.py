"""Referenced-function discovery.

For every line of the enclosing function, every word-start position is
queried for definitions, declarations and type definitions (and, when
enabled, references). Each location outside the function is mapped back
to the symbol declared there with the smallest-enclosing lookup.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from raydoc_context.context.symbols import locate_symbol
from raydoc_context.context.types import (
    DeclarationRef,
    FunctionDefinition,
    Location,
    Position,
    TextDocument,
)
from raydoc_context.providers.base import (
    CapabilityProvider,
    open_document,
    safe_locations,
    safe_symbols,
)

logger = logging.getLogger(__name__)

_WORD_START = re.compile(r"(?<![a-zA-Z])[a-zA-Z]")


def word_starts(line: str) -> list[int]:
    """Columns where an alphabetic run begins."""
    return [m.start() for m in _WORD_START.finditer(line)]


def _inside(location: Location, function: FunctionDefinition) -> bool:
    return (
        location.uri == function.uri
        and location.range.start.line >= function.start_line
        and location.range.end.line <= function.end_line
    )


def _unique(locations: list[Location]) -> list[Location]:
    return list(dict.fromkeys(locations))


class ReferenceCollector:
    """Collects functions referenced from an enclosing function.

    Args:
        provider: Capability provider.
        workspace_root: Absolute workspace root.
        is_ignored: Predicate rejecting vendor/stdlib/out-of-workspace paths.
        include_references: Also query reference locations.

    """

    def __init__(
        self,
        provider: CapabilityProvider,
        workspace_root: str,
        is_ignored: Callable[[str], bool],
        include_references: bool = False,
    ) -> None:
        self._provider = provider
        self._root = workspace_root
        self._is_ignored = is_ignored
        self._include_references = include_references
        self._documents: dict[str, TextDocument | None] = {}

    async def collect(self, doc: TextDocument, function: FunctionDefinition) -> list[FunctionDefinition]:
        """Return the functions referenced from function, deduplicated.

        The function itself is never part of the result.
        """
        found: dict[DeclarationRef | str, FunctionDefinition] = {}
        seen_locations: set[Location] = set()

        for line_number in range(function.start_line, function.end_line + 1):
            for column in word_starts(doc.line_at(line_number)):
                position = Position(line_number, column)
                for location in await self._locations(doc.uri, position):
                    if location in seen_locations or _inside(location, function):
                        continue
                    seen_locations.add(location)
                    if self._is_ignored(location.uri):
                        continue
                    referenced = await self._declaring_symbol(location)
                    if referenced is None or referenced.ref == function.ref:
                        continue
                    found.setdefault(referenced.ref or referenced.name, referenced)

        return list(found.values())

    async def _locations(self, uri: str, position: Position) -> list[Location]:
        locations = await safe_locations(self._provider.definitions_at, uri, position)
        locations += await safe_locations(self._provider.declarations_at, uri, position)
        locations += await safe_locations(self._provider.type_definitions_at, uri, position)
        if self._include_references:
            locations += await safe_locations(self._provider.references_at, uri, position)
        return _unique(locations)

    async def _declaring_symbol(self, location: Location) -> FunctionDefinition | None:
        target = await self._document(location.uri)
        if target is None:
            return None
        symbols = await safe_symbols(self._provider, target.uri)
        return locate_symbol(
            target,
            symbols,
            location.range.start,
            workspace_root=self._root,
            mode="smallest",
            include_types=True,
            fallback_to_document=False,
        )

    async def _document(self, uri: str) -> TextDocument | None:
        if uri not in self._documents:
            self._documents[uri] = await open_document(self._provider, uri)
        return self._documents[uri]
