"""Flat symbol record and brace scanning shared by the heuristic parsers."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from raydoc_context.context.types import Range, SymbolKind

# Maximum file size for parsing (100KB)
MAX_PARSE_SIZE = 100 * 1024


@dataclass(frozen=True, slots=True)
class ParsedSymbol:
    """A symbol found by a parser, before nesting.

    Attributes:
        name: Bare symbol name (no class/receiver qualification).
        kind: Native symbol kind.
        start_line: 0-indexed first line.
        start_char: Column of the declaration on start_line.
        end_line: 0-indexed last line (inclusive).
        end_char: Column just past the declaration on end_line.

    """

    name: str
    kind: SymbolKind
    start_line: int
    start_char: int
    end_line: int
    end_char: int

    @property
    def range(self) -> Range:
        return Range.of(self.start_line, self.start_char, self.end_line, self.end_char)


def check_size(content: str) -> None:
    """Raise ValueError if content is too large to parse."""
    if len(content.encode("utf-8")) > MAX_PARSE_SIZE:
        raise ValueError(f"File exceeds {MAX_PARSE_SIZE} bytes, skipping parse")


def offset_to_line_col(content: str, offset: int) -> tuple[int, int]:
    """Convert a character offset to a 0-indexed (line, column) pair."""
    line = content.count("\n", 0, offset)
    line_start = content.rfind("\n", 0, offset) + 1
    return line, offset - line_start


@dataclass(frozen=True, slots=True)
class Lexicon:
    """Literal syntax skipped while scanning for structural braces.

    Attributes:
        escaped_quotes: Quote characters whose strings honor backslash escapes.
        raw_quotes: Quote characters whose strings have no escapes.
        template_quote: Quote opening a template literal with ${...} holes.

    """

    escaped_quotes: str
    raw_quotes: str = ""
    template_quote: str = ""


JS_LEXICON = Lexicon(escaped_quotes="'\"", template_quote="`")
GO_LEXICON = Lexicon(escaped_quotes="\"'", raw_quotes="`")


def code_chars(
    content: str,
    start: int,
    lexicon: Lexicon,
    end: int | None = None,
) -> Iterator[tuple[int, str]]:
    """Yield (offset, char) for every character outside literals and comments.

    Line comments end before their newline, so the newline itself is
    yielded.
    """
    stop = len(content) if end is None else min(end, len(content))
    i = start
    while i < stop:
        ch = content[i]
        if content.startswith("//", i):
            newline = content.find("\n", i, stop)
            i = stop if newline == -1 else newline
        elif content.startswith("/*", i):
            close = content.find("*/", i + 2, stop)
            i = stop if close == -1 else close + 2
        elif ch in lexicon.escaped_quotes:
            i = _skip_quoted(content, i, stop, ch)
        elif ch in lexicon.raw_quotes:
            close = content.find(ch, i + 1, stop)
            i = stop if close == -1 else close + 1
        elif lexicon.template_quote and ch == lexicon.template_quote:
            i = _skip_template(content, i, stop, lexicon)
        else:
            yield i, ch
            i += 1


def matching_brace(content: str, brace_pos: int, lexicon: Lexicon) -> int | None:
    """Offset of the brace closing the one at brace_pos, or None if unbalanced."""
    depth = 0
    for i, ch in code_chars(content, brace_pos, lexicon):
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def _skip_quoted(content: str, i: int, stop: int, quote: str) -> int:
    j = i + 1
    while j < stop:
        if content[j] == "\\":
            j += 2
            continue
        if content[j] == quote:
            return j + 1
        j += 1
    return stop


def _skip_template(content: str, i: int, stop: int, lexicon: Lexicon) -> int:
    j = i + 1
    while j < stop:
        ch = content[j]
        if ch == "\\":
            j += 2
        elif ch == lexicon.template_quote:
            return j + 1
        elif content.startswith("${", j):
            j = _skip_hole(content, j + 2, stop, lexicon)
        else:
            j += 1
    return stop


def _skip_hole(content: str, j: int, stop: int, lexicon: Lexicon) -> int:
    # Inside ${...}: braces nest, quoted strings are opaque
    depth = 1
    while j < stop:
        ch = content[j]
        if ch in lexicon.escaped_quotes:
            j = _skip_quoted(content, j, stop, ch)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return j + 1
        j += 1
    return stop
