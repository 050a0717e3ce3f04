"""File Tree Builder: bounded, deterministic workspace snapshot.

Files under the workspace root are enumerated (excluded globs pruned),
sorted, and inserted segment by segment into a FileTreeNode hierarchy.
The tree never holds more nodes than the configured limit. Rendering
lists directories first, then files, each level sorted by name, and
marks touched files with " *".
"""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from raydoc_context.context.types import FileTreeNode
from raydoc_context.core.config import FileTreeConfig

logger = logging.getLogger(__name__)

TOUCHED_MARKER = " *"


def is_excluded(rel_path: str, patterns: Iterable[str], is_dir: bool = False) -> bool:
    """Check a workspace-relative path against exclusion globs.

    Paths are matched with a leading "/" so "**/name/**" also matches at
    the root; directories are matched with a trailing "/".
    """
    candidate = "/" + rel_path.replace(os.sep, "/").strip("/")
    if is_dir:
        candidate += "/"
    return any(fnmatch.fnmatchcase(candidate, pattern) for pattern in patterns)


def enumerate_files(root: Path, patterns: list[str], limit: int) -> list[str]:
    """Relative paths of up to limit files under root, sorted.

    Directories are walked in sorted order and excluded ones are pruned,
    so the same workspace always yields the same prefix.
    """
    files: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = os.path.relpath(dirpath, root)
        rel_dir = "" if rel_dir == "." else rel_dir
        dirnames[:] = sorted(
            d for d in dirnames if not is_excluded(os.path.join(rel_dir, d), patterns, is_dir=True)
        )
        for name in sorted(filenames):
            rel_path = os.path.join(rel_dir, name) if rel_dir else name
            if is_excluded(rel_path, patterns):
                continue
            files.append(rel_path.replace(os.sep, "/"))
            if len(files) >= limit:
                return sorted(files)
    return sorted(files)


def build_file_tree(workspace_root: str | Path, config: FileTreeConfig | None = None) -> FileTreeNode:
    """Snapshot the workspace as a FileTreeNode hierarchy.

    Args:
        workspace_root: Absolute workspace root.
        config: Limit and exclusion settings.

    Returns:
        Root node; the total number of nodes below it never exceeds the limit.

    """
    config = config or FileTreeConfig()
    root_path = Path(workspace_root)
    root = FileTreeNode(name=root_path.name or str(root_path), path=str(root_path), is_dir=True)

    try:
        files = enumerate_files(root_path, config.exclude, config.limit)
    except OSError as e:
        logger.warning("Cannot enumerate workspace %s: %s", root_path, e)
        return root

    remaining = config.limit
    for rel_path in files:
        segments = rel_path.split("/")
        needed = _missing_nodes(root, segments)
        if needed > remaining:
            logger.debug("File tree limit %d reached at %s", config.limit, rel_path)
            break
        _insert(root, segments)
        remaining -= needed

    return root


def _missing_nodes(root: FileTreeNode, segments: list[str]) -> int:
    node: FileTreeNode | None = root
    for depth, segment in enumerate(segments):
        node = node.child(segment) if node is not None else None
        if node is None:
            return len(segments) - depth
    return 0


def _insert(base: FileTreeNode, segments: list[str]) -> None:
    for segment in segments:
        child = base.child(segment)
        if child is None:
            child_path = os.path.join(base.path, segment)
            child = FileTreeNode(name=segment, path=child_path, is_dir=os.path.isdir(child_path))
            base.children.append(child)
        base = child


def _sort_key(node: FileTreeNode) -> tuple[bool, str]:
    return (not node.is_dir, node.name)


def render_file_tree(
    node: FileTreeNode,
    touched_files: set[str] | frozenset[str] = frozenset(),
    indent: str = "",
) -> list[str]:
    """Render node depth-first, one indented line per node.

    Args:
        node: Tree (or subtree) to render.
        touched_files: Absolute paths marked with " *".
        indent: Prefix for this level; children add two spaces.

    Returns:
        Rendered lines.

    """
    mark = TOUCHED_MARKER if node.path in touched_files else ""
    lines = [f"{indent}{node.name}{mark}"]
    if node.is_dir:
        for child in sorted(node.children, key=_sort_key):
            lines.extend(render_file_tree(child, touched_files, indent + "  "))
    return lines
