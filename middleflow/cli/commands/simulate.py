"""Simulate command for tracing a request through a pipeline."""

from typing import Annotated

import typer

from middleflow.cli.utils import parse_pairs
from middleflow.common.exceptions import SimulationError
from middleflow.models import SimulationRequest
from middleflow.simulator import PipelineSimulator


def simulate_command(
    ctx: typer.Context,
    source: Annotated[str, typer.Argument(help="Pipeline document (JSON/YAML)")],
    method: Annotated[
        str, typer.Option("--method", "-m", help="HTTP method of the simulated request")
    ] = "GET",
    path: Annotated[
        str, typer.Option("--path", "-p", help="Request path")
    ] = "/",
    header: Annotated[
        list[str] | None,
        typer.Option("--header", "-H", help="Request header as KEY=VALUE (repeatable)"),
    ] = None,
    claim: Annotated[
        list[str] | None,
        typer.Option("--claim", "-c", help="User claim as KEY=VALUE (repeatable)"),
    ] = None,
    cookie: Annotated[
        list[str] | None,
        typer.Option("--cookie", help="Cookie as KEY=VALUE (repeatable)"),
    ] = None,
    authenticated: Annotated[
        bool, typer.Option("--authenticated", help="Treat the user as already authenticated")
    ] = False,
    repeat: Annotated[
        int, typer.Option("--repeat", "-n", min=1, help="Number of identical requests to send")
    ] = 1,
    json_output: Annotated[
        bool, typer.Option("--json", help="Output in JSON format")
    ] = False,
):
    """
    Simulate a request flowing through a pipeline.

    Prints every step the request takes and the final response. Use
    --repeat to exercise rate limiting policies across several requests.
    """
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)

    request = SimulationRequest(
        method=method.upper(),
        path=path,
        headers=parse_pairs(header, "--header"),
        is_authenticated=authenticated,
        claims=parse_pairs(claim, "--claim"),
        cookies=parse_pairs(cookie, "--cookie"),
    )

    pipeline = cli_ctx.load_pipeline_or_exit(source)

    cli_ctx.print_progress(f"Simulating {request.method} {request.path} ({repeat} request(s))...")
    try:
        result = PipelineSimulator().simulate(pipeline, request, repeat_count=repeat)
    except SimulationError as e:
        cli_ctx.print_error(str(e))
        raise typer.Exit(1) from e

    cli_ctx.printer.print_simulation_result(result)
