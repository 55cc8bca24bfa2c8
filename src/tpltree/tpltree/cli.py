"""tpltree CLI

Usage:
    tpltree types pkg.module:template              # Print the data shape
    tpltree render pkg.module:template data.yaml   # Render to stdout
    tpltree render ... --check                     # Run form checks
    tpltree render ... -o out.html                 # Write to file
"""

from __future__ import annotations

import importlib
import logging
import os
import sys
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler

from tpltree import __version__
from tpltree.config import EngineConfig
from tpltree.engine import check_render, extract_type, render
from tpltree.engine.tree import Template
from tpltree.exceptions import TplTreeError

log = logging.getLogger(__name__)

console = Console(stderr=True)

app = typer.Typer(add_completion=False, help="Typed HTML template renderer.")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the tpltree CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (-v): INFO level
    - Debug (TPLTREE_DEBUG=1): DEBUG level - tree sizes, loops, failed checks
    """
    if os.environ.get("TPLTREE_DEBUG"):
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=bool(os.environ.get("TPLTREE_DEBUG")),
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("tpltree")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Exit the program with an error message."""
    typer.echo(f"Error: {message}", err=True)
    sys.exit(exit_code)


def handle_error(error: Exception) -> NoReturn:
    """Report an error raised while extracting or rendering, then exit.

    Template errors get a plain message. Anything else comes from user code
    (a transform, check or template definition) and keeps its traceback in
    the debug log.
    """
    if isinstance(error, TplTreeError):
        exit_with_error(str(error))
    log.debug("Traceback for unexpected error", exc_info=error)
    typer.echo(f"Unexpected error: {error}", err=True)
    sys.exit(1)


def load_template(ref: str) -> Template:
    """Import a template callable from a ``module.path:attribute`` reference."""
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        exit_with_error(f"Template must be given as module:attribute, got '{ref}'")

    # Allow templates that live next to the caller
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        exit_with_error(f"Cannot import '{module_name}': {e}")

    template = getattr(module, attr, None)
    if not callable(template):
        exit_with_error(f"'{ref}' is not a template callable")
    return template


def load_data(path: Path) -> Any:
    """Load a data record from a YAML or JSON file."""
    if not path.exists():
        exit_with_error(f"Data file not found: {path}")
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tpltree {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    setup_logging(verbose)


@app.command()
def types(
    template: str = typer.Argument(..., help="Template as module:attribute."),
) -> None:
    """Print the data shape a template requires."""
    tmpl = load_template(template)
    try:
        description = extract_type(tmpl)
    except Exception as e:
        handle_error(e)
    typer.echo(description.format())


@app.command("render")
def render_cmd(
    template: str = typer.Argument(..., help="Template as module:attribute."),
    data: Path = typer.Argument(..., help="YAML or JSON data file."),
    check: bool = typer.Option(False, "--check", help="Run form field checks."),
    config_path: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Path to tpltree.yaml."
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write output to file instead of stdout."
    ),
) -> None:
    """Render a template against a data record."""
    tmpl = load_template(template)
    record = load_data(data)
    config = EngineConfig.load(config_path or Path("tpltree.yaml"))

    failed_checks = 0
    try:
        if check:
            result = check_render(tmpl, record, config)
            text, failed_checks = result.output, result.failed_checks
        else:
            text = render(tmpl, record, config)
    except Exception as e:
        handle_error(e)

    if output:
        output.write_text(text)
        log.info("Wrote %s", output)
    else:
        typer.echo(text)

    if check:
        style = "green" if failed_checks == 0 else "red"
        console.print(f"[{style}]{failed_checks} failed check(s)[/{style}]")
        if failed_checks:
            raise typer.Exit(2)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
