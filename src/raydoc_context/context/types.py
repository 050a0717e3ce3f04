"""Core data types for the context extraction engine.

Defines the position/range primitives exchanged with the Capability
Provider, the provider's symbol tree, and the value types produced by the
engine (FunctionDefinition, TypeDefinition, FileTreeNode, ContextBundle).

Lines and characters are 0-indexed throughout, matching editor protocols.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum


class SymbolKind(str, Enum):
    """Symbol kinds reported by a Capability Provider."""

    FILE = "file"
    MODULE = "module"
    FUNCTION = "function"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    CLASS = "class"
    INTERFACE = "interface"
    STRUCT = "struct"
    ENUM = "enum"
    ENUM_MEMBER = "enum_member"
    VARIABLE = "variable"
    CONSTANT = "constant"
    PROPERTY = "property"
    FIELD = "field"


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """A 0-indexed (line, character) position in a document."""

    line: int
    character: int


@dataclass(frozen=True, slots=True)
class Range:
    """A half-open text range between two positions."""

    start: Position
    end: Position

    @classmethod
    def of(cls, start_line: int, start_char: int, end_line: int, end_char: int) -> Range:
        """Build a Range from four integers."""
        return cls(Position(start_line, start_char), Position(end_line, end_char))

    def contains(self, position: Position) -> bool:
        """Return True if position lies within the range (inclusive ends)."""
        return self.start <= position <= self.end

    def contains_range(self, other: Range) -> bool:
        """Return True if other lies entirely within this range."""
        return self.contains(other.start) and self.contains(other.end)

    @property
    def is_single_line(self) -> bool:
        return self.start.line == self.end.line


@dataclass(frozen=True, slots=True)
class Location:
    """A range inside a document identified by its absolute path."""

    uri: str
    range: Range


@dataclass(frozen=True, slots=True)
class DocumentSymbol:
    """A node of the provider's per-document symbol tree."""

    name: str
    kind: SymbolKind
    range: Range
    children: tuple[DocumentSymbol, ...] = ()


@dataclass(frozen=True, slots=True)
class SymbolHandle:
    """Opaque reference to a symbol inside one flattened symbol arena.

    Handles are only meaningful for the arena that issued them; the
    arena id makes a handle from another document session compare unequal.
    """

    arena_id: int
    index: int


@dataclass(frozen=True, slots=True)
class DeclarationRef:
    """Stable identity of a declaration: the document and its range.

    Two entries pointing at the literal same declaration share a ref even
    when produced by independent extraction passes.
    """

    uri: str
    range: Range


@dataclass(frozen=True, slots=True)
class TextDocument:
    """Snapshot of a document's text and language.

    Attributes:
        uri: Absolute path of the document.
        language_id: Editor language identifier (e.g. "python").
        text: Full document text.

    """

    uri: str
    language_id: str
    text: str
    _lines: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Split once; lookups hit the same document many times
        object.__setattr__(self, "_lines", tuple(self.text.split("\n")))

    @property
    def lines(self) -> tuple[str, ...]:
        return self._lines

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_at(self, line: int) -> str:
        if 0 <= line < len(self._lines):
            return self._lines[line].rstrip("\r")
        return ""

    def text_in(self, rng: Range) -> str:
        """Return the text covered by rng, clamped to the document."""
        return _slice_lines(self._lines, rng)


def text_in_range(text: str, rng: Range) -> str:
    """Slice text by a line/character range, clamping out-of-bounds ends."""
    return _slice_lines(text.split("\n"), rng)


def _slice_lines(lines: Sequence[str], rng: Range) -> str:
    if not lines or rng.start.line >= len(lines):
        return ""
    start_line = max(rng.start.line, 0)
    end_line = min(rng.end.line, len(lines) - 1)
    if end_line < start_line:
        return ""
    end_char = rng.end.character if end_line == rng.end.line else len(lines[end_line])
    if start_line == end_line:
        return lines[start_line][rng.start.character : end_char]
    parts = [lines[start_line][rng.start.character :]]
    parts.extend(lines[start_line + 1 : end_line])
    parts.append(lines[end_line][:end_char])
    return "\n".join(parts)


@dataclass(frozen=True, slots=True)
class FunctionDefinition:
    """An extracted function-like (or type-like) unit of code.

    Attributes:
        name: Symbol name ("Entire Document" for the whole-file fallback).
        filename: Workspace-relative path of the owning file.
        uri: Absolute path of the owning file.
        text: Extracted source text.
        range: Symbol range in the owning file.
        ref: Declaration identity used for deduplication.

    """

    name: str
    filename: str
    uri: str
    text: str
    range: Range
    ref: DeclarationRef | None = None

    @property
    def start_line(self) -> int:
        return self.range.start.line

    @property
    def end_line(self) -> int:
        return self.range.end.line


@dataclass(frozen=True, slots=True)
class TypeDefinition:
    """A resolved type declaration.

    Identity within one bundle is (type_name, filename).
    """

    type_name: str
    filename: str
    text: str
    uri: str = ""
    ref: DeclarationRef | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.type_name, self.filename)


@dataclass
class ResolutionState:
    """Bookkeeping for one top-level recursive resolve call.

    Attributes:
        visited: Type names already queried during this call.

    The remaining depth is passed down each recursive step rather than
    stored here, since it differs per branch.

    """

    visited: set[str] = field(default_factory=set)


@dataclass
class FileTreeNode:
    """A node of the workspace file tree snapshot."""

    name: str
    path: str
    is_dir: bool
    children: list[FileTreeNode] = field(default_factory=list)

    def child(self, name: str) -> FileTreeNode | None:
        for node in self.children:
            if node.name == name:
                return node
        return None

    def count(self) -> int:
        """Return the number of nodes below this one (self excluded)."""
        return sum(1 + c.count() for c in self.children)


@dataclass
class ContextBundle:
    """Aggregate output of one extraction pass (or a consolidation).

    Attributes:
        source_file: Workspace-relative path of the originating file.
        line: 0-indexed focus line.
        focus_lines: Excerpt around the focus line.
        error_message: Diagnostic message, if extraction was diagnostic-driven.
        language_id: Language identifier (comma-joined after consolidation).
        runtime_version: Optional runtime description supplied by the caller.
        packages: Optional package -> version metadata supplied by the caller.
        function: Primary enclosing FunctionDefinition.
        referenced_functions: Functions referenced from the primary one.
        type_definitions: Resolved type declarations.
        touched_files: Absolute paths of every file that contributed text.
        file_tree: Workspace snapshot with touched files marked on render.

    """

    source_file: str = ""
    line: int = 0
    focus_lines: str = ""
    error_message: str | None = None
    language_id: str = ""
    runtime_version: str | None = None
    packages: dict[str, str] = field(default_factory=dict)
    function: FunctionDefinition | None = None
    referenced_functions: list[FunctionDefinition] = field(default_factory=list)
    type_definitions: list[TypeDefinition] = field(default_factory=list)
    touched_files: set[str] = field(default_factory=set)
    file_tree: FileTreeNode | None = None
