"""CLI utilities package.

This package provides utilities for CLI commands including:
- CLIContext: Context management for commands
- CliPrinter: Formatted and JSON output
- Logging setup and file writing helpers
"""

from pathlib import Path

import click
import typer

from middleflow.cli.utils.context import CLIContext
from middleflow.cli.utils.log import configure_logging
from middleflow.cli.utils.printer import CliPrinter
from middleflow.common.exceptions import OutputWriteError

__all__ = [
    "CLIContext",
    "CliPrinter",
    "configure_logging",
    "parse_pairs",
    "safe_write_file",
]


def parse_pairs(values: list[str] | None, option: str) -> dict[str, str]:
    """Parse repeated ``KEY=VALUE`` options into a dict.

    Raises:
        typer.BadParameter: If an item has no ``=`` or an empty key
    """
    pairs: dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"expected KEY=VALUE, got '{item}'", param_hint=option)
        pairs[key.strip()] = value
    return pairs


def safe_write_file(file_path: Path, content: str, verbose: bool = False) -> None:
    """Safely write content to file with error handling.

    Args:
        file_path: Path to output file
        content: Content to write
        verbose: Whether to show detailed information

    Raises:
        OutputWriteError: If writing fails
    """
    try:
        # Create parent directories if they don't exist
        file_path.parent.mkdir(parents=True, exist_ok=True)

        if verbose:
            click.echo(f"Writing output to {file_path}")

        with open(file_path, "w", encoding="utf-8") as f:
            f.write(content)

        if verbose:
            click.echo(f"Successfully wrote {len(content)} characters to {file_path}")

    except PermissionError as e:
        raise OutputWriteError(f"Permission denied writing to {file_path}", file_path=str(file_path)) from e

    except OSError as e:
        raise OutputWriteError(f"Failed to write to {file_path}: {e}", file_path=str(file_path)) from e
