"""
CLI Context for middleflow.

Provides centralized pipeline loading and context management for all CLI commands.
"""

from dataclasses import dataclass, field
from typing import Any

import typer
from rich.console import Console

from middleflow.analysis import validate_pipeline
from middleflow.cli.utils.printer import CliPrinter
from middleflow.common.exceptions import LoadError, PipelineDocumentError
from middleflow.models import ValidationResult
from middleflow.pipeline import Pipeline
from middleflow.schema import load_pipeline


@dataclass
class CLIContext:
    """
    Context object for CLI commands.

    This context is created once and passed to all commands via Typer's
    context injection. It centralizes:
    - Pipeline loading and validation
    - Error handling and reporting
    - Console output management
    - Verbose mode control
    - JSON mode control (suppresses all non-JSON output)

    Attributes:
        console: Rich console for output
        verbose: Enable verbose output (ignored when json_mode is True)
        printer: CLI printer for formatted output (always initialized)
        pipeline: Loaded pipeline (if loading succeeded)
        validation: Validation result of the loaded pipeline
        source: Source file path
        json_mode: When True, suppress all non-JSON output (set by commands)
    """

    console: Console
    verbose: bool = False
    printer: CliPrinter = field(init=False)  # Will be initialized in __post_init__
    pipeline: Pipeline | None = None
    validation: ValidationResult | None = None
    source: str = ""
    json_mode: bool = False

    def __post_init__(self):
        """Initialize printer."""
        self.printer = CliPrinter(console=self.console, verbose=self.verbose)

    def set_json_mode(self, json_mode: bool) -> None:
        self.json_mode = json_mode
        self.printer.json_mode = json_mode

    def _should_print_verbose(self) -> bool:
        """Check if verbose output should be printed (not in JSON mode)."""
        return self.verbose and not self.json_mode

    def print_verbose(self, message: str, **kwargs) -> None:
        """
        Print a message only if verbose mode is enabled and not in JSON mode.

        Args:
            message: Message to print
            **kwargs: Additional arguments passed to console.print()
        """
        if self._should_print_verbose():
            self.console.print(message, **kwargs)

    def print_progress(self, message: str) -> None:
        """Print a progress message (only in verbose mode, not in JSON mode)."""
        if self._should_print_verbose():
            self.printer.show_progress(message)

    def print_error(self, message: str, details: list[str] | None = None) -> None:
        """
        Report an error as JSON in JSON mode, as red text otherwise.

        Args:
            message: Error message to print
            details: Individual error lines, if any
        """
        if self.json_mode:
            payload: dict[str, Any] = {"error": message}
            if details:
                payload["errors"] = details
            self.printer.print_json(payload)
            return
        self.printer.print_error(message)
        for detail in details or []:
            self.printer.print(f"  • {detail}", markup=False)

    def load_pipeline_or_exit(self, source: str, require_valid: bool = True) -> Pipeline:
        """
        Load a pipeline document and exit on failure.

        This is the primary method for commands that require a pipeline.
        It handles all error reporting and exits the CLI with code 1 when the
        document cannot be read, is malformed, or (with ``require_valid``)
        fails validation.

        Args:
            source: File path of the pipeline document
            require_valid: Refuse pipelines with validation errors

        Returns:
            Pipeline instance (only if successful; otherwise exits)

        Raises:
            typer.Exit: If loading fails
        """
        self.source = source
        self.print_verbose(f"[dim]Loading pipeline from: {source}[/dim]")

        try:
            pipeline = load_pipeline(source)
        except PipelineDocumentError as e:
            self.print_error(f"Invalid pipeline document {source}: {e.message}", e.errors)
            raise typer.Exit(code=1) from e
        except LoadError as e:
            self.print_error(e.message)
            raise typer.Exit(code=1) from e

        self.pipeline = pipeline
        self.validation = validate_pipeline(pipeline)

        if require_valid and not self.validation.valid:
            self.print_error(
                f"Pipeline '{pipeline.name}' has {len(self.validation.errors)} validation error(s)",
                [f"[{issue.middleware_id}] {issue.message}" for issue in self.validation.errors],
            )
            raise typer.Exit(code=1)

        self.print_verbose("[green]✓ Pipeline loaded successfully[/green]")
        return pipeline

    def require_pipeline(self) -> Pipeline:
        """
        Get the loaded pipeline or raise an error.

        Raises:
            RuntimeError: If no pipeline has been loaded
        """
        if self.pipeline is None:
            raise RuntimeError(
                "No pipeline loaded. Ensure load_pipeline_or_exit() is called before commands that require a pipeline."
            )
        return self.pipeline

    def print(self, message: str, **kwargs) -> None:
        """Print message to console."""
        self.console.print(message, **kwargs)
