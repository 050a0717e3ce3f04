"""Tests for the heuristic language parsers."""

import pytest

from raydoc_context.context.types import SymbolKind
from raydoc_context.providers.parsers import (
    MAX_PARSE_SIZE,
    PARSERS,
    parse_go_symbols,
    parse_js_symbols,
    parse_python_symbols,
)
from raydoc_context.providers.parsers.base import (
    GO_LEXICON,
    JS_LEXICON,
    code_chars,
    matching_brace,
    offset_to_line_col,
)


def _summary(symbols) -> list[tuple[str, SymbolKind, int, int, int, int]]:
    return [(s.name, s.kind, s.start_line, s.start_char, s.end_line, s.end_char) for s in symbols]


class TestOffsets:
    """Tests for offset conversion."""

    def test_offset_to_line_col(self) -> None:
        content = "ab\ncde\nf"
        assert offset_to_line_col(content, 0) == (0, 0)
        assert offset_to_line_col(content, 4) == (1, 1)
        assert offset_to_line_col(content, 7) == (2, 0)


class TestBraceScanning:
    """Tests for the literal-aware scanner."""

    def test_comments_and_strings_skipped(self) -> None:
        content = "a // {\nb /* } */ \"{\" '}' c"
        assert "".join(ch for _, ch in code_chars(content, 0, JS_LEXICON)) == "a \nb    c"

    def test_escaped_quote_stays_in_string(self) -> None:
        content = '{ s = "\\"}"; }'
        assert matching_brace(content, 0, JS_LEXICON) == len(content) - 1

    def test_template_hole_is_opaque(self) -> None:
        content = "{ `${ {a: 1} } }` }"
        assert matching_brace(content, 0, JS_LEXICON) == len(content) - 1

    def test_go_raw_string(self) -> None:
        content = "{ x := `}\\` }"
        assert matching_brace(content, 0, GO_LEXICON) == len(content) - 1

    def test_unbalanced(self) -> None:
        assert matching_brace("{ {", 0, JS_LEXICON) is None


class TestPythonParser:
    """Tests for AST-based Python extraction."""

    def test_classes_methods_and_functions(self) -> None:
        code = (
            "class Service:\n"
            "    def __init__(self):\n"
            "        pass\n"
            "\n"
            "    async def run(self):\n"
            "        def inner():\n"
            "            pass\n"
            "        return inner\n"
            "\n"
            "@cache\n"
            "def helper():\n"
            "    return 1\n"
        )
        assert _summary(parse_python_symbols(code)) == [
            ("Service", SymbolKind.CLASS, 0, 0, 7, 20),
            ("__init__", SymbolKind.CONSTRUCTOR, 1, 4, 2, 12),
            ("run", SymbolKind.METHOD, 4, 4, 7, 20),
            ("inner", SymbolKind.FUNCTION, 5, 8, 6, 16),
            ("helper", SymbolKind.FUNCTION, 10, 0, 11, 12),
        ]

    def test_enum_members(self) -> None:
        code = "class Color(Enum):\n    RED = 1\n    GREEN: int = 2\n"
        assert _summary(parse_python_symbols(code)) == [
            ("Color", SymbolKind.ENUM, 0, 0, 2, 18),
            ("RED", SymbolKind.ENUM_MEMBER, 1, 4, 1, 11),
            ("GREEN", SymbolKind.ENUM_MEMBER, 2, 4, 2, 18),
        ]

    def test_syntax_error(self) -> None:
        with pytest.raises(ValueError, match="syntax error"):
            parse_python_symbols("def broken(:\n")

    def test_size_limit(self) -> None:
        with pytest.raises(ValueError, match="exceeds"):
            parse_python_symbols("x = 1\n" * (MAX_PARSE_SIZE // 6 + 1))


JS_SOURCE = """import { x } from './x';

export interface User {
  name: string;
}

export type Id = string;

export const add = (a: number, b: number) => {
  return a + b;
};

export class Service {
  constructor(private repo: Repo) {}

  async find(id: Id): Promise<User> {
    if (id) {
      return this.repo.get(id);
    }
    return null;
  }
}

function helper() {
  const s = "}";
  return s;
}
enum Color { Red, Green }
"""


class TestJavaScriptParser:
    """Tests for regex + brace counting JS/TS extraction."""

    def test_declarations(self) -> None:
        assert _summary(parse_js_symbols(JS_SOURCE)) == [
            ("User", SymbolKind.INTERFACE, 2, 0, 4, 1),
            ("Id", SymbolKind.VARIABLE, 6, 0, 6, 24),
            ("add", SymbolKind.CONSTANT, 8, 0, 10, 1),
            ("Service", SymbolKind.CLASS, 12, 0, 21, 1),
            ("constructor", SymbolKind.CONSTRUCTOR, 13, 2, 13, 36),
            ("find", SymbolKind.METHOD, 15, 2, 20, 3),
            ("helper", SymbolKind.FUNCTION, 23, 0, 26, 1),
            ("Color", SymbolKind.ENUM, 27, 0, 27, 25),
        ]

    def test_expression_arrow_ends_at_line(self) -> None:
        code = "const double = (x) => x * 2;\nconst triple = (x) => x * 3;\n"
        assert _summary(parse_js_symbols(code)) == [
            ("double", SymbolKind.CONSTANT, 0, 0, 0, 28),
            ("triple", SymbolKind.CONSTANT, 1, 0, 1, 28),
        ]

    def test_template_literal_braces_ignored(self) -> None:
        code = "function render(name) {\n  return `${name} }`;\n}\n"
        assert _summary(parse_js_symbols(code)) == [("render", SymbolKind.FUNCTION, 0, 0, 2, 1)]

    def test_unbalanced_runs_to_end(self) -> None:
        code = "function open() {\n  if (x) {\n"
        symbols = parse_js_symbols(code)
        assert symbols[0].end_line == 2


GO_SOURCE = """package main

type User struct {
\tName string
}

type Store interface {
\tGet(id string) User
}

func (u *User) Greet() string {
\treturn "hi {" + u.Name
}

func main() {
}
"""


class TestGoParser:
    """Tests for Go extraction."""

    def test_declarations(self) -> None:
        assert _summary(parse_go_symbols(GO_SOURCE)) == [
            ("User", SymbolKind.STRUCT, 2, 0, 4, 1),
            ("Store", SymbolKind.INTERFACE, 6, 0, 8, 1),
            ("Greet", SymbolKind.METHOD, 10, 0, 12, 1),
            ("main", SymbolKind.FUNCTION, 14, 0, 15, 1),
        ]


class TestParserTable:
    """Tests for the language dispatch table."""

    def test_supported_languages(self) -> None:
        assert PARSERS["python"] is parse_python_symbols
        assert PARSERS["typescriptreact"] is parse_js_symbols
        assert PARSERS["go"] is parse_go_symbols
        assert "rust" not in PARSERS
