"""Diagram command for generating pipeline visualizations."""

from pathlib import Path
from typing import Annotated

import typer

from middleflow.cli.utils import safe_write_file
from middleflow.common.exceptions import OutputWriteError
from middleflow.visualization.mermaid import MermaidDiagramGenerator


def diagram_command(
    ctx: typer.Context,
    source: Annotated[str, typer.Argument(help="Pipeline document (JSON/YAML)")],
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Output file path (default: stdout)")
    ] = None,
):
    """Generate a Mermaid flowchart of a pipeline."""
    cli_ctx = ctx.obj

    pipeline = cli_ctx.load_pipeline_or_exit(source)

    cli_ctx.print_progress("Generating diagram...")
    diagram = MermaidDiagramGenerator().generate_pipeline_diagram(pipeline)

    if output is None:
        cli_ctx.printer.print_text(diagram + "\n")
        return

    # Ensure .md extension
    if not output.suffix:
        output = output.with_suffix(".md")

    try:
        safe_write_file(output, diagram + "\n", verbose=False)
    except OutputWriteError as e:
        cli_ctx.print_error(str(e))
        raise typer.Exit(1) from e
    cli_ctx.printer.show_success(f"Diagram written to {output}")
