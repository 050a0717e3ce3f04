"""Context assembly: cursor, diagnostic and whole-project extraction.

Pipeline: open document → locate enclosing function → resolve types
(candidate mode for the cursor, recursive name mode for diagnostics)
→ optional referenced functions → touched files → file tree.

Every public method degrades instead of raising: a missing workspace root
or an unreadable document yields None, and during a sweep a failing file
is logged and skipped.
"""

from __future__ import annotations

import logging
from pathlib import Path

from raydoc_context.context.consolidate import consolidate
from raydoc_context.context.file_tree import build_file_tree, enumerate_files
from raydoc_context.context.languages import detect_language
from raydoc_context.context.references import ReferenceCollector
from raydoc_context.context.resolver import TypeResolver
from raydoc_context.context.symbols import function_like_symbols, locate_symbol, relative_path
from raydoc_context.context.types import (
    ContextBundle,
    FunctionDefinition,
    Position,
    TextDocument,
    TypeDefinition,
)
from raydoc_context.core.config import ContextConfig
from raydoc_context.core.exceptions import WorkspaceError
from raydoc_context.providers.base import CapabilityProvider, open_document, safe_symbols

logger = logging.getLogger(__name__)

# Cap on files visited by a whole-project sweep
MAX_SWEEP_FILES = 2000

FOCUS_MARKER = ">>> "


def focus_lines(doc: TextDocument, line: int, radius: int = 3) -> str:
    """Lines around line (clamped), the focus line prefixed with ">>> "."""
    start = max(0, line - radius)
    end = min(doc.line_count - 1, line + radius)
    excerpt: list[str] = []
    for i in range(start, end + 1):
        text = doc.line_at(i)
        excerpt.append(f"{FOCUS_MARKER}{text}" if i == line else text)
    return "\n".join(excerpt)


class ContextEngine:
    """Builds ContextBundles from a Capability Provider.

    Args:
        provider: Capability provider.
        workspace_root: Absolute workspace root, or None when unavailable.
        config: Extraction configuration.

    Example:
        >>> engine = ContextEngine(LocalProvider(root), root)
        >>> bundle = await engine.gather_context("/abs/file.py", Position(10, 4))

    """

    def __init__(
        self,
        provider: CapabilityProvider,
        workspace_root: str | Path | None,
        config: ContextConfig | None = None,
    ) -> None:
        self._provider = provider
        self._root = str(Path(workspace_root)) if workspace_root else None
        self._config = config or ContextConfig()

    @property
    def config(self) -> ContextConfig:
        return self._config

    def _require_root(self) -> str:
        if not self._root:
            raise WorkspaceError("No workspace root available")
        return self._root

    async def gather_context(
        self,
        uri: str,
        position: Position,
        *,
        language_id: str | None = None,
        packages: dict[str, str] | None = None,
        runtime_version: str | None = None,
    ) -> ContextBundle | None:
        """Build the context bundle for a cursor position.

        Types are resolved through the identifiers of the enclosing
        function (candidate mode).

        Returns:
            ContextBundle, or None if no context is available.

        """
        return await self._gather(
            uri,
            position,
            error_message=None,
            language_id=language_id,
            packages=packages,
            runtime_version=runtime_version,
        )

    async def gather_error_context(
        self,
        uri: str,
        position: Position,
        message: str,
        *,
        language_id: str | None = None,
        packages: dict[str, str] | None = None,
        runtime_version: str | None = None,
    ) -> ContextBundle | None:
        """Build the context bundle for a diagnostic starting at position.

        Types are resolved recursively from the capitalized names used in
        the enclosing function, up to the configured depth.

        Returns:
            ContextBundle, or None if no context is available.

        """
        return await self._gather(
            uri,
            position,
            error_message=message,
            language_id=language_id,
            packages=packages,
            runtime_version=runtime_version,
        )

    async def _gather(
        self,
        uri: str,
        position: Position,
        *,
        error_message: str | None,
        language_id: str | None,
        packages: dict[str, str] | None,
        runtime_version: str | None,
    ) -> ContextBundle | None:
        try:
            root = self._require_root()
        except WorkspaceError as e:
            logger.error("No context available: %s", e)
            return None

        doc = await open_document(self._provider, uri, language_id)
        if doc is None:
            logger.warning("No context available: cannot read %s", uri)
            return None

        symbols = await safe_symbols(self._provider, doc.uri)
        function = locate_symbol(doc, symbols, position, workspace_root=root, mode="largest")
        if function is None:
            logger.debug("No enclosing unit at %s:%d", uri, position.line)
            return None

        resolver = TypeResolver(self._provider, root, self._config)
        if error_message is None:
            types = await resolver.types_for_candidates(doc, function)
        else:
            types = await resolver.types_for_function(doc, function)

        referenced: list[FunctionDefinition] = []
        if self._config.referenced_functions:
            collector = ReferenceCollector(
                self._provider,
                root,
                resolver.is_ignored,
                include_references=self._config.include_references,
            )
            referenced = await collector.collect(doc, function)

        bundle = ContextBundle(
            source_file=relative_path(doc.uri, root),
            line=position.line,
            focus_lines=focus_lines(doc, position.line, self._config.focus_radius),
            error_message=error_message,
            language_id=doc.language_id,
            runtime_version=runtime_version,
            packages=dict(packages or {}),
            function=function,
            referenced_functions=referenced,
            type_definitions=types,
            touched_files=touched_files(doc.uri, types, referenced),
        )
        bundle.file_tree = build_file_tree(root, self._config.file_tree)
        return bundle

    async def sweep_project(self) -> ContextBundle | None:
        """Resolve every function-like symbol in the workspace and consolidate.

        Files are processed one at a time in sorted order; a file whose
        provider calls or reads fail is logged and skipped.

        Returns:
            Consolidated bundle, or None without a workspace root.

        """
        try:
            root = self._require_root()
        except WorkspaceError as e:
            logger.error("No context available: %s", e)
            return None

        bundles: list[ContextBundle] = []
        resolver = TypeResolver(self._provider, root, self._config)
        try:
            files = enumerate_files(Path(root), self._config.file_tree.exclude, MAX_SWEEP_FILES)
        except OSError as e:
            logger.error("Cannot enumerate workspace %s: %s", root, e)
            return None

        for rel_path in files:
            uri = str(Path(root) / rel_path)
            if detect_language(uri) == "unknown":
                continue
            try:
                bundles.extend(await self._sweep_file(resolver, root, uri))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Skipping %s: %s", rel_path, e)
            except Exception as e:
                logger.warning("Skipping %s after provider failure: %s", rel_path, e)

        merged = consolidate(bundles)
        merged.file_tree = build_file_tree(root, self._config.file_tree)
        logger.info("Swept %d files into %d bundles", len(files), len(bundles))
        return merged

    async def _sweep_file(self, resolver: TypeResolver, root: str, uri: str) -> list[ContextBundle]:
        text = await self._provider.read_text(uri)
        doc = TextDocument(uri=uri, language_id=detect_language(uri), text=text)
        symbols = await self._provider.symbols_of(uri)

        bundles: list[ContextBundle] = []
        for name, rng in function_like_symbols(doc, list(symbols or [])):
            function = locate_symbol(doc, symbols, rng.start, workspace_root=root, mode="smallest")
            if function is None:
                continue
            types = await resolver.types_for_function(doc, function)
            bundles.append(
                ContextBundle(
                    source_file=relative_path(uri, root),
                    line=rng.start.line,
                    language_id=doc.language_id,
                    function=function,
                    type_definitions=types,
                    touched_files=touched_files(uri, types, []),
                )
            )
            logger.debug("Swept %s in %s: %d types", name, uri, len(types))
        return bundles


def touched_files(
    origin: str,
    types: list[TypeDefinition],
    referenced: list[FunctionDefinition],
) -> set[str]:
    """Absolute paths of the origin file plus every contributing file."""
    files = {origin}
    files.update(t.uri for t in types if t.uri)
    files.update(f.uri for f in referenced if f.uri)
    return files
