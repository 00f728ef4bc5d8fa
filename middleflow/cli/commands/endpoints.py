"""Endpoints command for listing mapped Minimal API endpoints."""

from typing import Annotated

import typer

from middleflow.handlers import extract_minimal_api_endpoints


def endpoints_command(
    ctx: typer.Context,
    source: Annotated[str, typer.Argument(help="Pipeline document (JSON/YAML)")],
    json_output: Annotated[
        bool, typer.Option("--json", help="Output in JSON format")
    ] = False,
):
    """List the Minimal API endpoints mapped by a pipeline."""
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)

    pipeline = cli_ctx.load_pipeline_or_exit(source)
    cli_ctx.printer.print_endpoints(extract_minimal_api_endpoints(pipeline))
