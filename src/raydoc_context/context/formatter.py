"""Format a ContextBundle into the plain-text block handed to prompt builders.

Sections, each gated by OutputConfig:
    === Error ===
    === Focus Lines ===
    === Context ===
    === Environment ===
    === Packages ===
    === Enclosing Function (file) ===
    === Type Definitions ===
    === Workspace File Tree ===
    === Referenced Functions ===
"""

from __future__ import annotations

import logging

from raydoc_context.context.file_tree import render_file_tree
from raydoc_context.context.types import ContextBundle
from raydoc_context.core.config import OutputConfig

logger = logging.getLogger(__name__)


def render_bundle(bundle: ContextBundle, output: OutputConfig | None = None) -> str:
    """Render bundle as labeled text sections.

    Line numbers are rendered 1-based.

    Args:
        bundle: Context to render.
        output: Section toggles; defaults enable everything except the
            file tree and referenced functions.

    Returns:
        Rendered text.

    """
    output = output or OutputConfig()
    parts: list[str] = []

    if bundle.error_message:
        parts.append("=== Error ===")
        parts.append(f"Error Message: {bundle.error_message}")
        parts.append("")

    if output.focused_lines and bundle.focus_lines:
        parts.append("=== Focus Lines ===")
        parts.append(bundle.focus_lines)
        parts.append("")

    if bundle.source_file:
        parts.append("=== Context ===")
        parts.append(f"File: {bundle.source_file}")
        parts.append(f"Line: {bundle.line + 1}")
        parts.append("")

    if output.environment:
        parts.append("=== Environment ===")
        if bundle.language_id:
            parts.append(f"Language: {bundle.language_id}")
        if output.runtime_version and bundle.runtime_version:
            parts.append(f"Version: {bundle.runtime_version}")
        parts.append("")

    if output.packages and bundle.packages:
        parts.append("=== Packages ===")
        parts.extend(f"{name}: {version}" for name, version in bundle.packages.items())
        parts.append("")

    if output.function_definition and bundle.function is not None:
        fn = bundle.function
        parts.append(f"=== Enclosing Function ({fn.filename}) ===")
        parts.append(fn.text)
        parts.append("")

    if output.type_definitions and bundle.type_definitions:
        parts.append("=== Type Definitions ===")
        for type_defn in bundle.type_definitions:
            parts.append(f'--- Custom Type: "{type_defn.type_name}" ({type_defn.filename}) ---')
            parts.append(type_defn.text)
            parts.append("")

    if output.file_tree and bundle.file_tree is not None:
        parts.append("=== Workspace File Tree ===")
        parts.extend(render_file_tree(bundle.file_tree, bundle.touched_files))
        parts.append("")

    if output.referenced_functions and bundle.referenced_functions:
        parts.append("=== Referenced Functions ===")
        for ref_fn in bundle.referenced_functions:
            parts.append(f"--- {ref_fn.name} ({ref_fn.filename}) ---")
            parts.append(ref_fn.text)
            parts.append("")

    result = "\n".join(parts).rstrip("\n") + "\n"
    logger.debug("Rendered bundle for %s: %d chars", bundle.source_file, len(result))
    return result
