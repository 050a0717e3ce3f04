"""Symbol Locator: find the enclosing function-like or type-like symbol.

The provider's symbol tree is flattened into a SymbolArena scoped to one
document session; the engine refers to entries by SymbolHandle
(arena id, index) and only copies (document, range) out of it.

Two lookup modes are supported and deliberately kept distinct:

- largest: among qualifying symbols containing the position keep the one
  with the greatest span. Multi-line symbols always outrank single-line
  ones. Used for the cursor/diagnostic enclosing function.
- smallest: keep the minimal-span qualifying symbol, but only if it starts
  on the query line; otherwise nothing is found. Used when mapping a
  definition location back to the symbol it declares, so a position deep
  inside a large type is not attributed to the type itself.

When the document has no symbols, or none qualify, a pseudo-symbol named
"Entire Document" spanning the whole file is used instead.
"""

from __future__ import annotations

import itertools
import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

from raydoc_context.context.languages import classifier_for
from raydoc_context.context.types import (
    DeclarationRef,
    DocumentSymbol,
    FunctionDefinition,
    Position,
    Range,
    SymbolHandle,
    SymbolKind,
    TextDocument,
)

logger = logging.getLogger(__name__)

ENTIRE_DOCUMENT = "Entire Document"

# Weight of one line in span comparisons; dominates any column difference.
LINE_WEIGHT = 1 << 53

LookupMode = Literal["largest", "smallest"]

_arena_ids = itertools.count(1)


@dataclass(frozen=True, slots=True)
class ArenaEntry:
    """One flattened symbol.

    Attributes:
        name: Symbol name.
        kind: Native symbol kind.
        range: Symbol range.
        parent: Index of the parent entry, or None for roots.

    """

    name: str
    kind: SymbolKind
    range: Range
    parent: int | None


class SymbolArena:
    """Flattened, index-addressed view of one document's symbol tree."""

    def __init__(self, uri: str, symbols: list[DocumentSymbol]) -> None:
        self.uri = uri
        self.arena_id = next(_arena_ids)
        self._entries: list[ArenaEntry] = []
        self._flatten(symbols, None)

    def _flatten(self, symbols: tuple[DocumentSymbol, ...] | list[DocumentSymbol], parent: int | None) -> None:
        for symbol in symbols:
            index = len(self._entries)
            self._entries.append(ArenaEntry(symbol.name, symbol.kind, symbol.range, parent))
            if symbol.children:
                self._flatten(symbol.children, index)

    def __len__(self) -> int:
        return len(self._entries)

    def handles(self) -> Iterator[SymbolHandle]:
        for index in range(len(self._entries)):
            yield SymbolHandle(self.arena_id, index)

    def entry(self, handle: SymbolHandle) -> ArenaEntry:
        """Resolve a handle issued by this arena.

        Raises:
            KeyError: If the handle belongs to another arena or is out of range.

        """
        if handle.arena_id != self.arena_id or not 0 <= handle.index < len(self._entries):
            raise KeyError(f"Handle {handle} does not belong to arena {self.arena_id}")
        return self._entries[handle.index]

    def parent_kind(self, handle: SymbolHandle) -> SymbolKind | None:
        parent = self.entry(handle).parent
        return None if parent is None else self._entries[parent].kind


def span_size(rng: Range) -> int:
    """Comparable size of a range.

    Multi-line: (end line - start line) * LINE_WEIGHT + end column.
    Single-line: end column - start column.
    """
    if rng.start.line != rng.end.line:
        return (rng.end.line - rng.start.line) * LINE_WEIGHT + rng.end.character
    return rng.end.character - rng.start.character


def _qualifies(
    arena: SymbolArena,
    handle: SymbolHandle,
    doc: TextDocument,
    include_types: bool,
) -> bool:
    entry = arena.entry(handle)
    if arena.parent_kind(handle) is SymbolKind.ENUM:
        return False
    classifier = classifier_for(doc.language_id)
    text = doc.text_in(entry.range)
    if classifier.is_function_like(entry.kind, text):
        return True
    return include_types and classifier.is_type_like(entry.kind, text)


def find_enclosing_handle(
    arena: SymbolArena,
    doc: TextDocument,
    position: Position,
    mode: LookupMode = "largest",
    include_types: bool = False,
) -> SymbolHandle | None:
    """Return the handle of the best enclosing symbol, or None.

    Args:
        arena: Flattened symbols of doc.
        doc: Document snapshot (used for text-based reclassification).
        position: Query position.
        mode: "largest" or "smallest" enclosing lookup.
        include_types: Also accept type-like symbols.

    Returns:
        Matching handle, or None if no candidate qualifies (or, in
        smallest mode, the best candidate starts on another line).

    """
    best: SymbolHandle | None = None
    best_size = 0

    for handle in arena.handles():
        entry = arena.entry(handle)
        if not entry.range.contains(position):
            continue
        if not _qualifies(arena, handle, doc, include_types):
            continue
        size = span_size(entry.range)
        if best is None:
            best, best_size = handle, size
        elif mode == "largest" and size > best_size:
            best, best_size = handle, size
        elif mode == "smallest" and size < best_size:
            best, best_size = handle, size

    if best is not None and mode == "smallest":
        if arena.entry(best).range.start.line != position.line:
            return None
    return best


def whole_document_range(doc: TextDocument) -> Range:
    lines = doc.lines
    return Range.of(0, 0, len(lines) - 1, len(lines[-1]))


def relative_path(uri: str, workspace_root: str | None) -> str:
    """Workspace-relative form of uri (uri unchanged outside the root)."""
    if not workspace_root:
        return uri
    try:
        rel = os.path.relpath(uri, workspace_root)
    except ValueError:
        return uri
    if rel.startswith(".."):
        return uri
    return rel.replace(os.sep, "/")


def definition_from_range(
    doc: TextDocument,
    name: str,
    rng: Range,
    workspace_root: str | None,
) -> FunctionDefinition:
    """Build a FunctionDefinition from a symbol's range and text."""
    return FunctionDefinition(
        name=name,
        filename=relative_path(doc.uri, workspace_root),
        uri=doc.uri,
        text=doc.text_in(rng),
        range=rng,
        ref=DeclarationRef(doc.uri, rng),
    )


def locate_symbol(
    doc: TextDocument,
    symbols: list[DocumentSymbol],
    position: Position,
    *,
    workspace_root: str | None = None,
    mode: LookupMode = "largest",
    include_types: bool = False,
    fallback_to_document: bool = True,
) -> FunctionDefinition | None:
    """Find the enclosing unit at position and extract it.

    Pure function of (document state, symbols, position, mode, language).

    Args:
        doc: Document snapshot.
        symbols: Provider symbol tree for doc.
        position: Query position.
        workspace_root: Root used to compute the relative filename.
        mode: "largest" or "smallest" enclosing lookup.
        include_types: Also accept type-like symbols.
        fallback_to_document: Synthesize an "Entire Document" unit when no
            symbol qualifies. A smallest-mode miss caused by the start-line
            rule is always reported as None.

    Returns:
        FunctionDefinition, or None if nothing was found.

    """
    arena = SymbolArena(doc.uri, symbols)
    if len(arena):
        handle = find_enclosing_handle(arena, doc, position, mode, include_types)
        if handle is not None:
            entry = arena.entry(handle)
            return definition_from_range(doc, entry.name, entry.range, workspace_root)
        if mode == "smallest" and _has_candidate(arena, doc, position, include_types):
            logger.debug("No symbol starts on line %d in %s", position.line, doc.uri)
            return None

    if not fallback_to_document:
        return None
    logger.debug("No enclosing symbol at %s:%d, using whole document", doc.uri, position.line)
    return definition_from_range(doc, ENTIRE_DOCUMENT, whole_document_range(doc), workspace_root)


def _has_candidate(arena: SymbolArena, doc: TextDocument, position: Position, include_types: bool) -> bool:
    return any(
        arena.entry(h).range.contains(position) and _qualifies(arena, h, doc, include_types)
        for h in arena.handles()
    )


def function_like_symbols(doc: TextDocument, symbols: list[DocumentSymbol]) -> list[tuple[str, Range]]:
    """(name, range) of every function-like symbol in doc, in document order."""
    arena = SymbolArena(doc.uri, symbols)
    found = [
        (arena.entry(h).name, arena.entry(h).range)
        for h in arena.handles()
        if _qualifies(arena, h, doc, include_types=False)
    ]
    return sorted(found, key=lambda item: (item[1].start, item[1].end))
