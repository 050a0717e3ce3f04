"""Boundary search: expand a reference location into a full declaration.

Two language families:

- brace: walk upward from the reference line to the nearest declaration
  keyword line, then forward counting "{" / "}" until the count returns
  to zero.
- indentation: walk upward to the declaration keyword line, record its
  indentation column, then forward until a non-blank line is indented
  strictly less than that column (that line excluded). No line can be
  indented less than column 0, so a top-level declaration takes the rest
  of the file, including any unrelated code after it.

Lines are matched as raw text: keywords inside strings or comments are not
excluded.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from raydoc_context.context.languages import language_family
from raydoc_context.context.types import Range, text_in_range

logger = logging.getLogger(__name__)

DECLARATION_LINE = re.compile(
    r"^\s*(?:(?:export|default|declare|abstract|public|private|protected|static)\s+)*"
    r"(interface|type|class|enum)\s+\w+"
)
DECLARED_NAME = re.compile(r"\b(?:interface|class|type|enum)\s+(\w+)")

# First tokens marking header text rather than a declaration
_HEADER_MARKERS = frozenset({"package", "import", "module", "from"})

_BLOCK_OR_LINE_COMMENT = re.compile(r"/\*[\s\S]*?\*/|([^\\:]|^)//.*$", re.MULTILINE)
_HASH_COMMENT = re.compile(r"(^|\s)#.*$", re.MULTILINE)


def find_declaration_start(lines: list[str], line: int) -> int:
    """Walk upward from line to the nearest declaration keyword line.

    Stops at line 0 when no keyword line exists above.
    """
    start = min(max(line, 0), len(lines) - 1)
    while start > 0 and not DECLARATION_LINE.match(lines[start]):
        start -= 1
    return start


def brace_slice(lines: list[str], ref_start: int, ref_end: int) -> tuple[int, int]:
    """Return (start, end) lines of a brace-delimited declaration.

    If the braces never balance, the slice ends at the reference end line.
    """
    start = find_declaration_start(lines, ref_start)
    end = max(ref_end, start)
    depth = 0
    seen_open = False

    for i in range(start, len(lines)):
        opens = lines[i].count("{")
        closes = lines[i].count("}")
        if opens:
            seen_open = True
        depth += opens - closes
        if seen_open and depth <= 0:
            end = i
            break

    return start, min(end, len(lines) - 1)


def indentation_slice(lines: list[str], ref_start: int) -> tuple[int, int]:
    """Return (start, end) lines of an indentation-delimited declaration.

    Nested declarations at equal-or-deeper indentation stay included;
    trailing blank lines are not part of the slice.
    """
    start = find_declaration_start(lines, ref_start)
    column = _indentation(lines[start])
    end = start

    for i in range(start + 1, len(lines)):
        line = lines[i]
        if not line.strip():
            continue
        if _indentation(line) < column:
            break
        end = i

    return start, end


def _indentation(line: str) -> int:
    return len(line) - len(line.lstrip())


@dataclass(frozen=True, slots=True)
class Declaration:
    """Expanded declaration text and the lines it spans."""

    text: str
    range: Range


def expand_declaration(text: str, rng: Range, language_id: str) -> Declaration | None:
    """Expand rng in text to the enclosing declaration.

    Args:
        text: Full text of the file containing rng.
        rng: Reference range (e.g. a definition location).
        language_id: Language of the file (selects the boundary family).

    Returns:
        The declaration, the original short extraction when the expansion
        overshoots into header text, or None if both are empty.

    """
    lines = text.split("\n")
    if rng.start.line >= len(lines):
        return None

    if language_family(language_id) == "indentation":
        start, end = indentation_slice(lines, rng.start.line)
    else:
        start, end = brace_slice(lines, rng.start.line, rng.end.line)

    expanded = "\n".join(lines[start : end + 1]).rstrip()
    if expanded.strip() and expanded.split(maxsplit=1)[0] not in _HEADER_MARKERS:
        return Declaration(expanded, Range.of(start, 0, end, len(lines[end])))

    short = text_in_range(text, rng).strip()
    if expanded.strip():
        logger.debug("Declaration expansion hit header text at line %d, using short form", start)
    return Declaration(short, rng) if short else None


def declared_name(text: str) -> str | None:
    """Return the identifier following the first declaration keyword."""
    match = DECLARED_NAME.search(text)
    return match.group(1) if match else None


def strip_comments(text: str, language_id: str) -> str:
    """Remove comments from declaration text.

    Brace-family languages lose block and line comments; indentation-family
    languages lose hash comments. Runs of blank lines collapse to one.
    """
    if language_family(language_id) == "indentation":
        stripped = _HASH_COMMENT.sub(lambda m: m.group(1), text)
    else:
        stripped = _BLOCK_OR_LINE_COMMENT.sub(lambda m: m.group(1) or "", text)

    result: list[str] = []
    for line in stripped.split("\n"):
        line = line.rstrip()
        if not line and (not result or not result[-1]):
            continue
        result.append(line)
    return "\n".join(result).strip()
