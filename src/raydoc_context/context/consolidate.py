"""Merge several ContextBundles into one.

Scalar fields concatenate or take the first non-empty value; referenced
functions and type definitions deduplicate on declaration identity (the
document and range they were extracted from), so two distinct declarations
that share a name and file both survive while two entries for the literal
same declaration collapse.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable
from typing import TypeVar

from raydoc_context.context.types import ContextBundle, FunctionDefinition, TypeDefinition

logger = logging.getLogger(__name__)

_T = TypeVar("_T", FunctionDefinition, TypeDefinition)


def _identity(item: FunctionDefinition | TypeDefinition) -> Hashable:
    # Entries without a declaration ref compare by value.
    return item.ref if item.ref is not None else item


def dedupe_by_declaration(items: Iterable[_T]) -> list[_T]:
    """Keep the first entry per declaration identity, preserving order."""
    seen: set[Hashable] = set()
    result: list[_T] = []
    for item in items:
        identity = _identity(item)
        if identity in seen:
            continue
        seen.add(identity)
        result.append(item)
    return result


def _join(values: Iterable[str | None], separator: str) -> str:
    return separator.join(v for v in values if v and v.strip())


def consolidate(bundles: list[ContextBundle]) -> ContextBundle:
    """Merge bundles in input order.

    Args:
        bundles: Bundles from independent extraction passes.

    Returns:
        One bundle; an empty input yields a default bundle.

    """
    merged = ContextBundle()
    if not bundles:
        return merged

    first = bundles[0]
    merged.source_file = first.source_file
    merged.line = first.line
    merged.runtime_version = next((b.runtime_version for b in bundles if b.runtime_version), None)

    merged.focus_lines = _join((b.focus_lines for b in bundles), "\n")
    merged.error_message = _join((b.error_message for b in bundles), "; ") or None

    languages: list[str] = []
    for bundle in bundles:
        for language in bundle.language_id.split(","):
            language = language.strip()
            if language and language not in languages:
                languages.append(language)
    merged.language_id = ",".join(languages)

    for bundle in bundles:
        merged.packages.update(bundle.packages)

    merged.function = next(
        (b.function for b in bundles if b.function is not None and b.function.text.strip()),
        None,
    )
    merged.referenced_functions = dedupe_by_declaration(
        f for b in bundles for f in b.referenced_functions
    )
    merged.type_definitions = dedupe_by_declaration(t for b in bundles for t in b.type_definitions)

    for bundle in bundles:
        merged.touched_files |= bundle.touched_files

    merged.file_tree = next(
        (b.file_tree for b in bundles if b.file_tree is not None and b.file_tree.children),
        None,
    )

    logger.debug(
        "Consolidated %d bundles: %d functions, %d types",
        len(bundles),
        len(merged.referenced_functions),
        len(merged.type_definitions),
    )
    return merged
