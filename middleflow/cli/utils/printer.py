"""CLI Printer for consistent output formatting."""

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from middleflow.handlers import MinimalApiEndpoint
from middleflow.models import SimulationResult, StepDecision, ValidationResult

DECISION_STYLES = {
    StepDecision.CONTINUE: "green",
    StepDecision.TERMINATE: "red",
    StepDecision.TRUE_BRANCH: "cyan",
    StepDecision.FALSE_BRANCH: "magenta",
    StepDecision.INFO: "yellow",
}


class CliPrinter:
    """Centralized printer for CLI output.

    This class handles all printing operations for the CLI, ensuring consistent
    formatting across commands and proper handling of verbose/JSON modes.
    """

    def __init__(
        self, console: Console, verbose: bool = False, json_mode: bool = False
    ):
        """Initialize printer with console and mode settings.

        Args:
            console: Rich console for output
            verbose: Whether to show detailed output
            json_mode: Whether to output in JSON format (can be set later)
        """
        self.console = console
        self.verbose = verbose
        self.json_mode = json_mode

    def print_validation_result(
        self, name: str, result: ValidationResult, json_mode: bool | None = None
    ) -> None:
        """Print validation errors and warnings.

        Args:
            name: Pipeline name for the heading
            result: Validation result
            json_mode: If True, output as JSON. If None, uses self.json_mode
        """
        json_mode = json_mode if json_mode is not None else self.json_mode

        if json_mode:
            self.print_json(result.to_dict())
            return

        self.console.print(f"[bold]Pipeline:[/bold] {escape(name)}")
        self.console.print(
            f"Summary: {len(result.errors)} error(s), {len(result.warnings)} warning(s)"
        )
        for issue in result.errors:
            self.console.print(f"[red]✗ ERROR[/red] {escape(f'[{issue.middleware_id}] {issue.message}')}")
        for issue in result.warnings:
            self.console.print(f"[yellow]⚠ WARNING[/yellow] {escape(f'[{issue.middleware_id}] {issue.message}')}")

        if result.valid:
            self.show_success("Pipeline is valid")

    def print_simulation_result(
        self, result: SimulationResult, json_mode: bool | None = None
    ) -> None:
        """Print the step trace and final response of a simulation."""
        json_mode = json_mode if json_mode is not None else self.json_mode

        if json_mode:
            self.print_json(result.to_dict())
            return

        table = Table(title="Simulation trace")
        table.add_column("#", justify="right")
        table.add_column("Middleware")
        table.add_column("Decision")
        table.add_column("Action")
        for step in result.steps:
            style = DECISION_STYLES.get(step.decision, "white")
            table.add_row(
                str(step.order),
                escape(step.middleware_name),
                f"[{style}]{step.decision}[/{style}]",
                escape(step.action),
            )
        self.console.print(table)

        response = result.response
        summary = f"{response.status_code} {response.status_text}"
        if response.terminated_by:
            summary += f" (terminated by {response.terminated_by})"
        colour = "green" if result.success else "red"
        self.console.print(f"[bold]Response:[/bold] [{colour}]{summary}[/{colour}]")
        if self.verbose:
            for header, value in response.headers.items():
                self.console.print(f"  {header}: {value}", markup=False)
            if response.body:
                self.console.print(f"  Body: {response.body}", markup=False)
            self.console.print(f"  Duration: {result.duration:.3f} ms")

    def print_endpoints(
        self, endpoints: list[MinimalApiEndpoint], json_mode: bool | None = None
    ) -> None:
        json_mode = json_mode if json_mode is not None else self.json_mode

        if json_mode:
            self.print_json({"endpoints": [endpoint.to_dict() for endpoint in endpoints]})
            return
        if not endpoints:
            self.console.print("No Minimal API endpoints mapped")
            return

        table = Table(title="Minimal API endpoints")
        table.add_column("Method")
        table.add_column("Path")
        table.add_column("Handler")
        for endpoint in endpoints:
            table.add_row(escape(endpoint.method), escape(endpoint.path), escape(endpoint.handler_code))
        self.console.print(table)

    def show_progress(self, message: str) -> None:
        """Show progress message if verbose mode is enabled.

        Args:
            message: Progress message to show
        """
        if self.verbose:
            self.console.print(f"🔄 {message}")

    def show_success(self, message: str) -> None:
        """Show success message with green checkmark.

        Args:
            message: Success message to show
        """
        self.console.print(f"✅ {message}")

    def print_json(self, data: Any) -> None:
        """Print data as JSON.

        Args:
            data: Data to print as JSON
        """
        self.console.print_json(data=data)

    def print_text(self, text: str) -> None:
        """Print generated text verbatim (no markup, emoji codes, highlighting or wrapping)."""
        self.console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True, end="")

    def print(self, message: str, **kwargs) -> None:
        """Print message to console.

        Args:
            message: Message to print
            **kwargs: Additional arguments for rich.console.print
        """
        self.console.print(message, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message with red formatting.

        Args:
            message: Error message to print
        """
        self.console.print(f"[red]❌ Error:[/red] {escape(message)}")
