"""Tests for context value types."""

import pytest

from raydoc_context.context.types import (
    ContextBundle,
    DeclarationRef,
    FileTreeNode,
    FunctionDefinition,
    Position,
    Range,
    ResolutionState,
    TextDocument,
    TypeDefinition,
    text_in_range,
)


class TestRange:
    """Tests for Range containment."""

    def test_contains_is_inclusive(self) -> None:
        rng = Range.of(1, 4, 3, 2)
        assert rng.contains(Position(1, 4))
        assert rng.contains(Position(3, 2))
        assert rng.contains(Position(2, 100))
        assert not rng.contains(Position(1, 3))
        assert not rng.contains(Position(3, 3))

    def test_contains_range(self) -> None:
        outer = Range.of(0, 0, 10, 0)
        assert outer.contains_range(Range.of(2, 0, 4, 1))
        assert not outer.contains_range(Range.of(2, 0, 11, 0))

    def test_single_line(self) -> None:
        assert Range.of(5, 0, 5, 10).is_single_line
        assert not Range.of(5, 0, 6, 0).is_single_line


class TestTextInRange:
    """Tests for range slicing."""

    def test_single_line_slice(self) -> None:
        assert text_in_range("hello world", Range.of(0, 6, 0, 11)) == "world"

    def test_multi_line_slice(self) -> None:
        text = "a = 1\ndef f():\n    return a\nb = 2"
        assert text_in_range(text, Range.of(1, 0, 2, 12)) == "def f():\n    return a"

    def test_out_of_bounds_is_clamped(self) -> None:
        text = "one\ntwo"
        assert text_in_range(text, Range.of(1, 0, 9, 0)) == "two"
        assert text_in_range(text, Range.of(5, 0, 6, 0)) == ""


class TestTextDocument:
    """Tests for TextDocument helpers."""

    def test_line_at_out_of_range(self) -> None:
        doc = TextDocument("/ws/a.py", "python", "x = 1\ny = 2")
        assert doc.line_count == 2
        assert doc.line_at(1) == "y = 2"
        assert doc.line_at(7) == ""

    def test_lines_split_once(self) -> None:
        doc = TextDocument("/ws/a.py", "python", "a = 1\nb = 2\nc = 3")
        assert doc.lines is doc.lines
        assert doc.lines == ("a = 1", "b = 2", "c = 3")

    def test_text_in_matches_text_in_range(self) -> None:
        text = "class A:\n    x = 1\n    y = 2"
        doc = TextDocument("/ws/a.py", "python", text)
        for rng in (Range.of(0, 6, 0, 7), Range.of(1, 4, 2, 9), Range.of(2, 0, 8, 0)):
            assert doc.text_in(rng) == text_in_range(text, rng)

    def test_equality_ignores_cached_lines(self) -> None:
        assert TextDocument("/ws/a.py", "python", "x") == TextDocument("/ws/a.py", "python", "x")


class TestResolutionState:
    """Tests for recursive resolution bookkeeping."""

    def test_only_tracks_visited_names(self) -> None:
        state = ResolutionState()
        assert state.visited == set()
        assert not hasattr(state, "depth")


class TestDefinitions:
    """Tests for FunctionDefinition and TypeDefinition."""

    def test_function_lines(self) -> None:
        fn = FunctionDefinition("f", "a.py", "/ws/a.py", "def f(): ...", Range.of(3, 0, 8, 4))
        assert fn.start_line == 3
        assert fn.end_line == 8

    def test_function_definition_is_immutable(self) -> None:
        fn = FunctionDefinition("f", "a.py", "/ws/a.py", "", Range.of(0, 0, 0, 0))
        with pytest.raises(AttributeError):
            fn.name = "g"  # type: ignore[misc]

    def test_type_identity_key(self) -> None:
        ref = DeclarationRef("/ws/a.ts", Range.of(0, 0, 2, 1))
        first = TypeDefinition("User", "a.ts", "interface User {}", "/ws/a.ts", ref)
        second = TypeDefinition("User", "a.ts", "interface User { id: string }")
        assert first.key == second.key == ("User", "a.ts")


class TestFileTreeNode:
    """Tests for FileTreeNode helpers."""

    def test_child_and_count(self) -> None:
        leaf = FileTreeNode("a.py", "/ws/src/a.py", False)
        src = FileTreeNode("src", "/ws/src", True, [leaf])
        root = FileTreeNode("ws", "/ws", True, [src])
        assert root.child("src") is src
        assert root.child("missing") is None
        assert root.count() == 2


class TestContextBundle:
    """Tests for ContextBundle defaults."""

    def test_defaults_are_independent(self) -> None:
        first = ContextBundle()
        second = ContextBundle()
        first.touched_files.add("/ws/a.py")
        first.packages["x"] = "1"
        assert second.touched_files == set()
        assert second.packages == {}
        assert first.function is None
        assert first.error_message is None
