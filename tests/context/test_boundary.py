"""Tests for declaration boundary search and comment stripping."""

from raydoc_context.context.boundary import (
    brace_slice,
    declared_name,
    expand_declaration,
    find_declaration_start,
    indentation_slice,
    strip_comments,
)
from raydoc_context.context.types import Range


class TestBraceFamily:
    """Tests for brace-delimited declarations."""

    def test_class_returned_verbatim(self) -> None:
        text = "class Foo {\n  x: 1\n}\n"
        decl = expand_declaration(text, Range.of(0, 6, 0, 9), "typescript")
        assert decl is not None
        assert decl.text == "class Foo {\n  x: 1\n}"
        assert decl.range == Range.of(0, 0, 2, 1)

    def test_walks_up_from_member_to_declaration(self) -> None:
        lines = ["import x", "", "interface User {", "  id: string;", "  name: string;", "}", "const a = 1;"]
        assert find_declaration_start(lines, 4) == 2
        assert brace_slice(lines, 4, 4) == (2, 5)

    def test_nested_braces(self) -> None:
        text = "type Box = {\n  inner: { value: number };\n  size: number;\n};\nconst y = 2;"
        decl = expand_declaration(text, Range.of(0, 5, 0, 8), "typescript")
        assert decl is not None
        assert decl.text == "type Box = {\n  inner: { value: number };\n  size: number;\n};"

    def test_unbalanced_braces_end_at_reference(self) -> None:
        lines = ["class Broken {", "  a: 1", "  b: 2"]
        assert brace_slice(lines, 0, 1) == (0, 1)

    def test_header_overshoot_uses_short_form(self) -> None:
        text = "package main\n\nvar Limit = 10\n"
        decl = expand_declaration(text, Range.of(2, 4, 2, 9), "go")
        assert decl is not None
        assert decl.text == "Limit"
        assert decl.range == Range.of(2, 4, 2, 9)

    def test_out_of_range_reference(self) -> None:
        assert expand_declaration("class A {}", Range.of(5, 0, 5, 1), "typescript") is None


class TestIndentationFamily:
    """Tests for indentation-delimited declarations."""

    def test_stops_before_dedent(self) -> None:
        lines = [
            "def top():",
            "    class Inner:",
            "        a: int",
            "",
            "        def method(self):",
            "            pass",
            "x = top()",
        ]
        assert indentation_slice(lines, 2) == (1, 5)

    def test_top_level_class_extends_to_end(self) -> None:
        text = "class User:\n    id: int\n\nclass Order:\n    user: User\n"
        decl = expand_declaration(text, Range.of(0, 6, 0, 10), "python")
        assert decl is not None
        assert decl.text == "class User:\n    id: int\n\nclass Order:\n    user: User"

    def test_top_level_declaration_takes_unrelated_code(self) -> None:
        text = "class Config:\n    name: str\n\ndef unrelated():\n    return 42\n\nSECRET = 1"
        decl = expand_declaration(text, Range.of(0, 6, 0, 12), "python")
        assert decl is not None
        assert decl.text == text
        assert decl.range.end.line == 6

    def test_trailing_blank_lines_not_included(self) -> None:
        lines = ["    class A:", "        x = 1", "", "", "y = 2"]
        assert indentation_slice(lines, 0) == (0, 1)


class TestDeclaredName:
    """Tests for name extraction."""

    def test_first_keyword_match(self) -> None:
        assert declared_name("export interface User extends Base {}") == "User"
        assert declared_name("type Id = string") == "Id"
        assert declared_name("const x = 1") is None


class TestStripComments:
    """Tests for comment removal."""

    def test_brace_comments(self) -> None:
        text = "/** Docs */\ninterface A {\n  // note\n  url: string; // trailing\n  home = 'https://x.y';\n}"
        assert strip_comments(text, "typescript") == "interface A {\n\n  url: string;\n  home = 'https://x.y';\n}"

    def test_hash_comments(self) -> None:
        text = "class A:\n    # field\n    x: int  # trailing\n"
        assert strip_comments(text, "python") == "class A:\n\n    x: int"
