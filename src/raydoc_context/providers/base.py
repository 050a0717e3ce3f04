"""Capability Provider interface.

The Capability Provider is the external language-intelligence service the
engine relies on: symbol trees, definition/type-definition/declaration/
reference lookups, and document text. Every call is fallible; an empty or
missing result means "not found", never an error.

The safe_* wrappers below are the only way the engine calls a provider:
they convert any failure into an empty result and log it, so no provider
exception escapes a public entry point.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Protocol, runtime_checkable

from raydoc_context.context.languages import detect_language
from raydoc_context.context.types import (
    DocumentSymbol,
    Location,
    Position,
    TextDocument,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class CapabilityProvider(Protocol):
    """Language-intelligence operations consumed by the engine."""

    async def symbols_of(self, uri: str) -> list[DocumentSymbol]: ...

    async def definitions_at(self, uri: str, position: Position) -> list[Location]: ...

    async def type_definitions_at(self, uri: str, position: Position) -> list[Location]: ...

    async def declarations_at(self, uri: str, position: Position) -> list[Location]: ...

    async def references_at(self, uri: str, position: Position) -> list[Location]: ...

    async def read_text(self, uri: str) -> str: ...

    async def exists(self, path: str) -> bool: ...

    async def is_dir(self, path: str) -> bool: ...


LocationQuery = Callable[[str, Position], Awaitable[list[Location] | None]]


def _clean_locations(locations: Iterable[Location | None] | None) -> list[Location]:
    """Drop None entries and locations without a uri or range."""
    if not locations:
        return []
    return [loc for loc in locations if loc is not None and loc.uri and loc.range is not None]


async def safe_locations(query: LocationQuery, uri: str, position: Position) -> list[Location]:
    """Run a location query, converting any failure into an empty list.

    Args:
        query: Bound provider method (e.g. provider.definitions_at).
        uri: Document to query.
        position: Position inside the document.

    Returns:
        Cleaned list of locations (possibly empty).

    """
    try:
        result = await query(uri, position)
    except Exception as e:
        logger.warning(
            "Provider %s failed at %s:%d:%d: %s",
            getattr(query, "__name__", "query"),
            uri,
            position.line,
            position.character,
            e,
        )
        return []
    return _clean_locations(result)


async def safe_symbols(provider: CapabilityProvider, uri: str) -> list[DocumentSymbol]:
    """Return the symbol tree of a document, or [] on failure."""
    try:
        symbols = await provider.symbols_of(uri)
    except Exception as e:
        logger.warning("Provider symbols_of failed for %s: %s", uri, e)
        return []
    return list(symbols or [])


async def safe_read_text(provider: CapabilityProvider, uri: str) -> str | None:
    """Return a document's text, or None if it cannot be read."""
    try:
        return await provider.read_text(uri)
    except Exception as e:
        logger.warning("Cannot read %s: %s", uri, e)
        return None


async def open_document(
    provider: CapabilityProvider,
    uri: str,
    language_id: str | None = None,
) -> TextDocument | None:
    """Snapshot a document through the provider.

    Args:
        provider: Capability provider.
        uri: Absolute document path.
        language_id: Optional override (skips extension detection).

    Returns:
        TextDocument, or None if the text could not be read.

    """
    text = await safe_read_text(provider, uri)
    if text is None:
        return None
    return TextDocument(uri=uri, language_id=language_id or detect_language(uri), text=text)
