"""Validate command for checking pipeline structure and ordering."""

from typing import Annotated

import typer


def validate_command(
    ctx: typer.Context,
    source: Annotated[str, typer.Argument(help="Pipeline document (JSON/YAML)")],
    json_output: Annotated[
        bool, typer.Option("--json", help="Output in JSON format")
    ] = False,
):
    """
    Validate a pipeline for cycles, aliased nodes and ordering issues.

    Exits with code 1 when the pipeline has errors. Warnings never fail
    validation.
    """
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)

    pipeline = cli_ctx.load_pipeline_or_exit(source, require_valid=False)
    result = cli_ctx.validation

    cli_ctx.printer.print_validation_result(pipeline.name, result)
    if not result.valid:
        raise typer.Exit(1)
