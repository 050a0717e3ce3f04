"""Configuration models for context extraction.

Provides Pydantic models for the extraction engine, the file tree
snapshot and the text renderer, plus a YAML loader.

Example:
    >>> from raydoc_context.core.config import ContextConfig
    >>> config = ContextConfig(depth=3, referenced_functions=True)
    >>> config.file_tree.limit
    200

"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

from raydoc_context.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Maximum config file size (1MB)
MAX_CONFIG_SIZE = 1024 * 1024

DEFAULT_IGNORE_TYPE_PATHS: tuple[str, ...] = (
    "node_modules",
    "lib.es",
    "go/src",
    "stdlib",
    "python3",
    "site-packages",
    "toml.hpp",
)

DEFAULT_TREE_EXCLUDES: tuple[str, ...] = (
    "**/node_modules/**",
    "**/lib/**",
    "**/bin/**",
    "**/dist/**",
    "**/build/**",
    "**/.git/**",
    "**/.venv/**",
    "**/venv/**",
    "**/__pycache__/**",
    "**/pyvenv.cfg",
    "**/isympy.1",
)


class FileTreeConfig(BaseModel):
    """Configuration for the workspace file tree snapshot.

    Attributes:
        limit: Maximum number of nodes (files and directories) in the tree.
        exclude: Glob patterns (matched against "/"-prefixed relative paths)
            of build, vendor and virtual-environment locations.

    """

    model_config = ConfigDict(frozen=True)

    limit: int = Field(
        default=200,
        ge=1,
        le=10000,
        description="Maximum number of tree nodes enumerated (default 200)",
    )
    exclude: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TREE_EXCLUDES),
        description="Glob patterns excluded from the tree",
    )


class OutputConfig(BaseModel):
    """Section toggles for the plain-text bundle renderer."""

    model_config = ConfigDict(frozen=True)

    environment: bool = Field(True, description="Include language/runtime section")
    runtime_version: bool = Field(True, description="Include runtime version")
    focused_lines: bool = Field(True, description="Include lines around the cursor")
    packages: bool = Field(True, description="Include package dependencies")
    file_tree: bool = Field(False, description="Include the workspace file tree")
    function_definition: bool = Field(True, description="Include the enclosing function")
    type_definitions: bool = Field(True, description="Include resolved type declarations")
    referenced_functions: bool = Field(False, description="Include referenced functions")


class ContextConfig(BaseModel):
    """Root configuration for context extraction.

    Attributes:
        depth: Recursion budget for name-based type resolution.
        include_comments: Keep comments in emitted type declarations.
        ignore_type_paths: Substrings marking vendor/stdlib/runtime locations.
        referenced_functions: Collect functions referenced by the enclosing one.
        include_references: Also query reference locations for referenced
            functions (expensive on large workspaces).
        focus_radius: Lines shown before and after the focus line.
        file_tree: File tree snapshot settings.
        output: Renderer section toggles.

    """

    model_config = ConfigDict(frozen=True)

    depth: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Nested type resolution depth (default 2)",
    )
    include_comments: bool = Field(
        default=False,
        description="Keep comments in type definition text",
    )
    ignore_type_paths: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE_TYPE_PATHS),
        description="Paths ignored when retrieving types (substring match)",
    )
    referenced_functions: bool = Field(
        default=False,
        description="Collect referenced function definitions",
    )
    include_references: bool = Field(
        default=False,
        description="Query reference locations when collecting referenced functions",
    )
    focus_radius: int = Field(
        default=3,
        ge=0,
        le=50,
        description="Lines before/after the focus line in the excerpt",
    )
    file_tree: FileTreeConfig = Field(default_factory=FileTreeConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def load_config(path: Path | None) -> ContextConfig:
    """Load and validate configuration from a YAML file.

    Args:
        path: Path to the YAML file, or None for defaults.

    Returns:
        Validated ContextConfig.

    Raises:
        ConfigError: On file/parse/validation errors.

    """
    if path is None:
        return ContextConfig()

    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    if not path.is_file():
        raise ConfigError(f"Config path is not a file: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read(MAX_CONFIG_SIZE + 1)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    if len(content) > MAX_CONFIG_SIZE:
        raise ConfigError(f"Config {path} exceeds 1MB limit")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        logger.debug("Config %s is empty, using defaults", path)
        return ContextConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a YAML mapping, got {type(data).__name__}")

    try:
        return ContextConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Config validation failed for {path}: {e}") from e
