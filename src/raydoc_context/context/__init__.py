"""Context extraction engine.

Builds a bounded context bundle around a cursor position or diagnostic:
the enclosing function, the custom types it uses (resolved recursively,
depth-bounded and cycle-safe), optionally the functions it references,
and a workspace file tree marking every file that contributed.

Pipeline: locate_symbol() → extract_candidates() → TypeResolver
→ consolidate() → build_file_tree() → render_bundle()

Only the value types are exported here; import the engine from
raydoc_context.context.gather.
"""

from raydoc_context.context.types import (
    ContextBundle,
    DocumentSymbol,
    FileTreeNode,
    FunctionDefinition,
    Location,
    Position,
    Range,
    SymbolKind,
    TextDocument,
    TypeDefinition,
)

__all__ = [
    "ContextBundle",
    "DocumentSymbol",
    "FileTreeNode",
    "FunctionDefinition",
    "Location",
    "Position",
    "Range",
    "SymbolKind",
    "TextDocument",
    "TypeDefinition",
]
