"""Codegen command for rendering a pipeline as C#."""

from pathlib import Path
from typing import Annotated

import typer

from middleflow.cli.utils import safe_write_file
from middleflow.common.exceptions import OutputWriteError
from middleflow.codegen import generate_csharp_code


def codegen_command(
    ctx: typer.Context,
    source: Annotated[str, typer.Argument(help="Pipeline document (JSON/YAML)")],
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Output file path (default: stdout)")
    ] = None,
):
    """Generate ASP.NET Core Program.cs code for a pipeline."""
    cli_ctx = ctx.obj

    pipeline = cli_ctx.load_pipeline_or_exit(source)

    cli_ctx.print_progress("Generating C# code...")
    code = generate_csharp_code(pipeline)

    if output is None:
        cli_ctx.printer.print_text(code)
        return

    try:
        safe_write_file(output, code, verbose=False)
    except OutputWriteError as e:
        cli_ctx.print_error(str(e))
        raise typer.Exit(1) from e
    cli_ctx.printer.show_success(f"C# code written to {output}")
