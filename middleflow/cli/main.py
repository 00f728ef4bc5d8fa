"""middleflow CLI - Typer-based command line interface."""

from typing import Annotated

import typer
from rich.console import Console

from middleflow.cli.commands import (
    codegen_command,
    diagram_command,
    endpoints_command,
    simulate_command,
    validate_command,
)
from middleflow.cli.utils import CLIContext, configure_logging

# Create main app and console
app = typer.Typer(
    name="middleflow",
    help="middleflow: design, validate and simulate ASP.NET Core style middleware pipelines",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable verbose output")
    ] = False,
):
    """
    middleflow CLI callback - sets up context for all commands.

    Commands access the shared CLIContext via ctx.obj, which provides
    pipeline loading, error reporting and console output.
    """
    configure_logging(verbose)
    ctx.obj = CLIContext(console=console, verbose=verbose)


app.command(name="validate")(validate_command)
app.command(name="simulate")(simulate_command)
app.command(name="codegen")(codegen_command)
app.command(name="diagram")(diagram_command)
app.command(name="endpoints")(endpoints_command)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
