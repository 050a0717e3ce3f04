"""Tests for the File Tree Builder."""

from pathlib import Path

import pytest

from raydoc_context.context.file_tree import (
    build_file_tree,
    enumerate_files,
    is_excluded,
    render_file_tree,
)
from raydoc_context.context.types import FileTreeNode
from raydoc_context.core.config import DEFAULT_TREE_EXCLUDES, FileTreeConfig


def _touch(root: Path, *paths: str) -> None:
    for rel in paths:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x\n", encoding="utf-8")


def _all_paths(node: FileTreeNode) -> list[str]:
    paths = []
    for child in node.children:
        paths.append(child.path)
        paths.extend(_all_paths(child))
    return paths


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    _touch(
        tmp_path,
        "README.md",
        "src/app.ts",
        "src/models/user.ts",
        "src/models/order.ts",
        "node_modules/react/index.js",
        "src/lib/vendor.js",
        ".venv/pyvenv.cfg",
        "pkg/__pycache__/mod.cpython-312.pyc",
        "pkg/mod.py",
    )
    return tmp_path


class TestIsExcluded:
    """Tests for glob matching."""

    def test_matches_at_root_and_nested(self) -> None:
        patterns = list(DEFAULT_TREE_EXCLUDES)
        assert is_excluded("node_modules", patterns, is_dir=True)
        assert is_excluded("src/lib", patterns, is_dir=True)
        assert is_excluded("a/b/node_modules/x.js", patterns)
        assert is_excluded("pyvenv.cfg", patterns)
        assert not is_excluded("src/library.ts", patterns)
        assert not is_excluded("src", patterns, is_dir=True)


class TestEnumerateFiles:
    """Tests for workspace enumeration."""

    def test_sorted_and_pruned(self, workspace: Path) -> None:
        files = enumerate_files(workspace, list(DEFAULT_TREE_EXCLUDES), 200)
        assert files == [
            "README.md",
            "pkg/mod.py",
            "src/app.ts",
            "src/models/order.ts",
            "src/models/user.ts",
        ]

    def test_limit_caps_files(self, workspace: Path) -> None:
        assert len(enumerate_files(workspace, list(DEFAULT_TREE_EXCLUDES), 2)) == 2


class TestBuildFileTree:
    """Tests for build_file_tree()."""

    def test_structure(self, workspace: Path) -> None:
        tree = build_file_tree(workspace)
        assert tree.is_dir
        assert tree.path == str(workspace)
        src = tree.child("src")
        assert src is not None and src.is_dir
        models = src.child("models")
        assert models is not None
        assert [c.name for c in models.children] == ["order.ts", "user.ts"]
        assert not models.children[0].is_dir

    def test_excluded_paths_never_appear(self, workspace: Path) -> None:
        paths = _all_paths(build_file_tree(workspace))
        for fragment in ("node_modules", "/lib/", ".venv", "__pycache__"):
            assert not any(fragment in p for p in paths)

    @pytest.mark.parametrize("limit", [1, 2, 3, 4, 7])
    def test_node_count_never_exceeds_limit(self, workspace: Path, limit: int) -> None:
        tree = build_file_tree(workspace, FileTreeConfig(limit=limit))
        assert tree.count() <= limit

    def test_missing_root_yields_empty_tree(self, tmp_path: Path) -> None:
        tree = build_file_tree(tmp_path / "missing")
        assert tree.children == []


class TestRenderFileTree:
    """Tests for render_file_tree()."""

    def test_directories_first_and_touched_marker(self, workspace: Path) -> None:
        tree = build_file_tree(workspace)
        touched = {str(workspace / "src" / "app.ts")}
        lines = render_file_tree(tree, touched)
        assert lines[0] == workspace.name
        assert lines[1:] == [
            "  pkg",
            "    mod.py",
            "  src",
            "    models",
            "      order.ts",
            "      user.ts",
            "    app.ts *",
            "  README.md",
        ]
