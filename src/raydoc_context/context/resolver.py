"""Type Resolution Engine.

Three entry points over the same provider lookups:

- types_at(): position mode. Type-definition locations for a position
  (falling back to plain definitions), filtered against the vendor/stdlib
  denylist and the workspace root, each expanded to its full declaration.
- resolve(): recursive name mode. A depth-first walk over the implicit
  graph whose nodes are type names and whose edges are "appears as a
  capitalized identifier inside the declaration of". Depth is the only
  bound; a name visited once within a call is never queried again.
- types_for_candidates() / types_for_function(): drive the two modes from
  an enclosing function.

Nothing here raises: provider and filesystem failures are logged by the
providers.base wrappers and contribute nothing.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from raydoc_context.context.boundary import (
    Declaration,
    declared_name,
    expand_declaration,
    strip_comments,
)
from raydoc_context.context.candidates import extract_candidates
from raydoc_context.context.languages import detect_language
from raydoc_context.context.symbols import relative_path
from raydoc_context.context.types import (
    DeclarationRef,
    FunctionDefinition,
    Location,
    Position,
    ResolutionState,
    TextDocument,
    TypeDefinition,
)
from raydoc_context.core.config import ContextConfig
from raydoc_context.providers.base import (
    CapabilityProvider,
    safe_locations,
    safe_read_text,
)

logger = logging.getLogger(__name__)

UNRESOLVED_TYPE_NAME = "UnknownType"

_CUSTOM_TYPE = re.compile(r"\b([A-Z]\w+)\b")


def find_custom_types(text: str) -> list[str]:
    """Capitalized identifiers that look like type names, in first-seen order."""
    return list(dict.fromkeys(_CUSTOM_TYPE.findall(text)))


def dedupe_types(types: list[TypeDefinition]) -> list[TypeDefinition]:
    """Keep the first TypeDefinition per (type_name, filename)."""
    seen: set[tuple[str, str]] = set()
    result: list[TypeDefinition] = []
    for type_defn in types:
        if type_defn.key in seen:
            continue
        seen.add(type_defn.key)
        result.append(type_defn)
    return result


class TypeResolver:
    """Resolves type names and positions into TypeDefinitions.

    One resolver serves one extraction pass; it caches file text for the
    duration of the pass but keeps no resolution state between calls.

    Args:
        provider: Capability provider.
        workspace_root: Absolute workspace root; locations outside it are ignored.
        config: Extraction configuration (depth, denylist, comment handling).

    """

    def __init__(
        self,
        provider: CapabilityProvider,
        workspace_root: str,
        config: ContextConfig | None = None,
    ) -> None:
        self._provider = provider
        self._root = Path(workspace_root)
        self._config = config or ContextConfig()
        self._texts: dict[str, str | None] = {}

    @property
    def workspace_root(self) -> str:
        return str(self._root)

    def is_ignored(self, uri: str) -> bool:
        """True for denylisted paths and paths outside the workspace root."""
        normalized = uri.replace("\\", "/")
        if any(fragment in normalized for fragment in self._config.ignore_type_paths):
            return True
        return not Path(uri).is_relative_to(self._root)

    async def read(self, uri: str) -> str | None:
        if uri not in self._texts:
            self._texts[uri] = await safe_read_text(self._provider, uri)
        return self._texts[uri]

    # Position mode

    async def types_at(self, doc: TextDocument, position: Position) -> list[TypeDefinition]:
        """Resolve the type(s) of whatever is at position.

        Args:
            doc: Document containing position.
            position: Query position.

        Returns:
            TypeDefinitions (possibly empty).

        """
        locations = await safe_locations(self._provider.type_definitions_at, doc.uri, position)
        found = await self._types_from_locations(locations)
        if found:
            return found

        locations = await safe_locations(self._provider.definitions_at, doc.uri, position)
        return await self._types_from_locations(locations)

    async def _types_from_locations(self, locations: list[Location]) -> list[TypeDefinition]:
        found: list[TypeDefinition] = []
        for location in locations:
            if self.is_ignored(location.uri):
                logger.debug("Ignoring type location %s", location.uri)
                continue
            declaration = await self._expand(location)
            if declaration is None:
                continue
            name = declared_name(declaration.text) or UNRESOLVED_TYPE_NAME
            found.append(self._make_type(name, location.uri, declaration))
        return dedupe_types(found)

    async def _expand(self, location: Location) -> Declaration | None:
        text = await self.read(location.uri)
        if text is None:
            return None
        return expand_declaration(text, location.range, detect_language(location.uri))

    def _make_type(self, name: str, uri: str, declaration: Declaration) -> TypeDefinition:
        text = declaration.text
        if not self._config.include_comments:
            text = strip_comments(text, detect_language(uri))
        return TypeDefinition(
            type_name=name,
            filename=relative_path(uri, str(self._root)),
            text=text,
            uri=uri,
            ref=DeclarationRef(uri, declaration.range),
        )

    # Name mode

    async def resolve(
        self,
        doc: TextDocument,
        type_name: str,
        depth: int,
        visited: set[str] | None = None,
    ) -> list[TypeDefinition]:
        """Resolve type_name and, recursively, the types its declaration uses.

        Args:
            doc: Document in which type_name is referenced.
            type_name: Name to resolve.
            depth: Remaining depth budget; nothing is resolved at 0.
            visited: Names already visited during this top-level call.

        Returns:
            TypeDefinitions in depth-first discovery order.

        """
        state = ResolutionState(visited=set() if visited is None else visited)
        return await self._resolve(state, (doc,), type_name, depth)

    async def _resolve(
        self,
        state: ResolutionState,
        search: tuple[TextDocument, ...],
        type_name: str,
        depth: int,
    ) -> list[TypeDefinition]:
        if depth <= 0 or type_name in state.visited:
            return []
        state.visited.add(type_name)

        location = await self._defining_location(search, type_name)
        if location is None:
            logger.debug("No definition found for type %s", type_name)
            return []

        declaration = await self._expand(location)
        if declaration is None:
            return []

        results = [self._make_type(type_name, location.uri, declaration)]

        # Nested names are looked up in the origin document first, then in
        # the file that declared this type.
        nested_search = search[:1]
        if location.uri != search[0].uri:
            text = await self.read(location.uri)
            if text is not None:
                nested_search += (TextDocument(location.uri, detect_language(location.uri), text),)

        for nested in find_custom_types(declaration.text):
            results.extend(await self._resolve(state, nested_search, nested, depth - 1))
        return results

    async def _defining_location(
        self,
        search: tuple[TextDocument, ...],
        type_name: str,
    ) -> Location | None:
        for doc in search:
            position = _first_occurrence(doc, type_name)
            if position is None:
                continue
            for query in (self._provider.type_definitions_at, self._provider.definitions_at):
                for location in await safe_locations(query, doc.uri, position):
                    if not self.is_ignored(location.uri):
                        return location
        return None

    # Function-driven modes

    async def types_for_candidates(
        self,
        doc: TextDocument,
        function: FunctionDefinition,
    ) -> list[TypeDefinition]:
        """Resolve the types of identifiers used in function.

        Each candidate's occurrences are tried in order; the first one that
        yields a result ends the search for that candidate.
        """
        found: list[TypeDefinition] = []
        for word, positions in extract_candidates(function):
            for position in positions:
                types = await self.types_at(doc, position)
                if types:
                    logger.debug("Resolved %s at %d:%d", word, position.line, position.character)
                    found.extend(types)
                    break
        return dedupe_types(found)

    async def types_for_function(
        self,
        doc: TextDocument,
        function: FunctionDefinition,
        depth: int | None = None,
    ) -> list[TypeDefinition]:
        """Recursively resolve every capitalized name used in function.

        All names share one visited set, so a type reached from two names
        is resolved once.
        """
        budget = self._config.depth if depth is None else depth
        visited: set[str] = set()
        found: list[TypeDefinition] = []
        for type_name in find_custom_types(function.text):
            found.extend(await self.resolve(doc, type_name, budget, visited))
        return dedupe_types(found)


def _first_occurrence(doc: TextDocument, name: str) -> Position | None:
    for line_number, line in enumerate(doc.lines):
        index = line.find(name)
        if index != -1:
            return Position(line_number, index)
    return None
