"""Shared CLI utilities for raydoc-context.

Exit codes, the console singleton, logging setup and message helpers.
"""

import logging
import os
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from raydoc_context.core.config import ContextConfig, load_config
from raydoc_context.core.exceptions import ConfigError

# Exit codes following Unix conventions
EXIT_SUCCESS: int = 0
EXIT_ERROR: int = 1  # No context available, file not found
EXIT_CONFIG_ERROR: int = 2  # Configuration/usage error

# Config file picked up from the workspace root when --config is not given
DEFAULT_CONFIG_NAME = ".raydoc-context.yaml"

LOG_LEVEL_ENV = "RAYDOC_LOG_LEVEL"

# When stdout is piped, Rich strips ANSI codes
_is_tty = sys.stdout.isatty()

console = Console(force_terminal=_is_tty, no_color=not _is_tty)

logger = logging.getLogger(__name__)


def _error(message: str) -> None:
    """Display error message with red styling."""
    console.print(f"[red]Error:[/red] {message}")


def _setup_logging(verbose: bool, quiet: bool) -> None:
    """Configure logging based on verbosity flags.

    Args:
        verbose: If True, set DEBUG level.
        quiet: If True, set ERROR level.

    Note:
        verbose takes precedence over quiet. Default level is WARNING.
        RAYDOC_LOG_LEVEL overrides both flags.

    """
    env_level = os.environ.get(LOG_LEVEL_ENV, "").upper()
    if env_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        level = getattr(logging, env_level)
    elif verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    # Avoid duplicate handlers across invocations
    logging.root.handlers.clear()

    handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    handler.setLevel(level)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
    )


def _validate_workspace(workspace: str | None) -> Path:
    """Resolve the workspace root (current directory by default).

    Raises:
        typer.Exit: If the path is not an existing directory.

    """
    path = Path(workspace).expanduser().resolve() if workspace else Path.cwd()
    if not path.is_dir():
        _error(f"Workspace is not a directory: {path}")
        raise typer.Exit(code=EXIT_ERROR)
    return path


def _load_config_or_exit(config_path: str | None, workspace: Path) -> ContextConfig:
    """Load --config, else the workspace default file, else defaults.

    Raises:
        typer.Exit: With EXIT_CONFIG_ERROR on any ConfigError.

    """
    if config_path:
        path: Path | None = Path(config_path).expanduser()
    else:
        candidate = workspace / DEFAULT_CONFIG_NAME
        path = candidate if candidate.is_file() else None

    try:
        return load_config(path)
    except ConfigError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from e
