"""raydoc-context command line.

Commands:
    context  Context bundle for a cursor position or diagnostic.
    sweep    Consolidated context for every function in the workspace.
"""

import asyncio
import logging
from pathlib import Path

import typer

from raydoc_context import __version__
from raydoc_context.cli_utils import (
    EXIT_ERROR,
    EXIT_SUCCESS,
    _error,
    _load_config_or_exit,
    _setup_logging,
    _validate_workspace,
    console,
)
from raydoc_context.context.environment import runtime_version
from raydoc_context.context.formatter import render_bundle
from raydoc_context.context.gather import ContextEngine
from raydoc_context.context.languages import detect_language
from raydoc_context.context.types import ContextBundle, Position
from raydoc_context.core.config import ContextConfig
from raydoc_context.providers.local import LocalProvider

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="raydoc-context",
    help="Build code context bundles for prompts",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"raydoc-context {__version__}")
        raise typer.Exit(code=EXIT_SUCCESS)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Build code context bundles for prompts."""


def _apply_overrides(
    config: ContextConfig,
    depth: int | None,
    tree: bool,
    referenced: bool,
) -> ContextConfig:
    update: dict[str, object] = {}
    output_update: dict[str, bool] = {}
    if depth is not None:
        update["depth"] = depth
    if tree:
        output_update["file_tree"] = True
    if referenced:
        update["referenced_functions"] = True
        output_update["referenced_functions"] = True
    if output_update:
        update["output"] = config.output.model_copy(update=output_update)
    return config.model_copy(update=update) if update else config


def _print_bundle(bundle: ContextBundle | None, config: ContextConfig) -> None:
    if bundle is None:
        _error("No context available")
        raise typer.Exit(code=EXIT_ERROR)
    console.print(render_bundle(bundle, config.output), markup=False, highlight=False, soft_wrap=True)


@app.command()
def context(
    file: str = typer.Argument(..., help="Source file"),
    line: int = typer.Option(..., "--line", "-l", min=1, help="1-based line number"),
    column: int = typer.Option(1, "--column", "-c", min=1, help="1-based column"),
    error: str | None = typer.Option(
        None,
        "--error",
        "-e",
        help="Diagnostic message; resolves types recursively from the enclosing function",
    ),
    workspace: str | None = typer.Option(
        None, "--workspace", "-w", help="Workspace root (default: current directory)"
    ),
    config_path: str | None = typer.Option(None, "--config", help="YAML configuration file"),
    depth: int | None = typer.Option(None, "--depth", "-d", min=0, max=10, help="Type resolution depth"),
    tree: bool = typer.Option(False, "--tree", help="Include the workspace file tree"),
    referenced: bool = typer.Option(False, "--referenced", help="Include referenced functions"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
) -> None:
    """Print the context bundle for a position in FILE.

    Examples:
        raydoc-context context src/app.py --line 42
        raydoc-context context src/app.ts -l 10 -c 5 --error "Property 'id' does not exist"

    """
    _setup_logging(verbose=verbose, quiet=quiet)
    root = _validate_workspace(workspace)
    config = _apply_overrides(_load_config_or_exit(config_path, root), depth, tree, referenced)

    path = Path(file).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    if not path.is_file():
        _error(f"File not found: {path}")
        raise typer.Exit(code=EXIT_ERROR)

    provider = LocalProvider(root, exclude=config.file_tree.exclude)
    engine = ContextEngine(provider, root, config)
    position = Position(line - 1, column - 1)
    version = runtime_version(detect_language(str(path))) if config.output.runtime_version else None

    if error is None:
        bundle = asyncio.run(engine.gather_context(str(path), position, runtime_version=version))
    else:
        bundle = asyncio.run(
            engine.gather_error_context(str(path), position, error, runtime_version=version)
        )
    _print_bundle(bundle, config)


@app.command()
def sweep(
    workspace: str | None = typer.Option(
        None, "--workspace", "-w", help="Workspace root (default: current directory)"
    ),
    config_path: str | None = typer.Option(None, "--config", help="YAML configuration file"),
    depth: int | None = typer.Option(None, "--depth", "-d", min=0, max=10, help="Type resolution depth"),
    tree: bool = typer.Option(False, "--tree", help="Include the workspace file tree"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
) -> None:
    """Print consolidated context for every function in the workspace."""
    _setup_logging(verbose=verbose, quiet=quiet)
    root = _validate_workspace(workspace)
    config = _apply_overrides(_load_config_or_exit(config_path, root), depth, tree, False)

    provider = LocalProvider(root, exclude=config.file_tree.exclude)
    engine = ContextEngine(provider, root, config)
    _print_bundle(asyncio.run(engine.sweep_project()), config)


if __name__ == "__main__":
    app()
