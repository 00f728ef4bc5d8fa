"""Minimal API endpoint handler.

``app.MapGet()`` and friends only register a route. The endpoint runs after
every ``app.Use()`` middleware regardless of where it was mapped, which is
why the simulator and the validator treat endpoint nodes specially through
:attr:`MinimalApiEndpointHandler.is_endpoint`.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..models.base import MiddlewareConfig
from ..models.enums import HttpMethod, MiddlewareKind, StepDecision
from ..models.simulation import MiddlewareSimulationResult, SimulationContext, SimulationStep
from .base import RoutingMiddlewareHandler

if TYPE_CHECKING:
    from ..pipeline import Pipeline

ENDPOINT_NOTE = (
    "Note: app.MapXxx() only registers this endpoint. Every app.Use() middleware runs "
    "before the endpoint handler at runtime, even when it is declared after the mapping."
)


@dataclass(frozen=True)
class MinimalApiEndpoint:
    """A mapped endpoint extracted from a pipeline."""

    method: str
    path: str
    handler_code: str
    middleware_id: str

    def to_dict(self) -> dict[str, str]:
        return {
            "method": self.method,
            "path": self.path,
            "handlerCode": self.handler_code,
            "middlewareId": self.middleware_id,
        }


def map_method_name(http_method: str) -> str:
    """``GET`` -> ``Get`` as used in ``MapGet``."""
    return http_method[:1].upper() + http_method[1:].lower()


class MinimalApiEndpointHandler(RoutingMiddlewareHandler):
    kind = MiddlewareKind.MINIMAL_API_ENDPOINT
    is_endpoint = True

    def default_config(self) -> MiddlewareConfig:
        return {
            "httpMethod": HttpMethod.GET.value,
            "path": "/api/hello",
            "handlerCode": '"Hello World"',
        }

    @staticmethod
    def matches(config: MiddlewareConfig, context: SimulationContext) -> bool:
        return config.get("httpMethod") == context.method and config.get("path") == context.path

    def simulate(
        self,
        config: MiddlewareConfig,
        context: SimulationContext,
        steps: list[SimulationStep],
    ) -> MiddlewareSimulationResult:
        http_method = config.get("httpMethod")
        path = config.get("path")

        if not self.matches(config, context):
            self.record(
                steps,
                f"Minimal API endpoint not matched (expected {http_method} {path}, "
                f"got {context.method} {context.path})",
                StepDecision.CONTINUE,
                {"expected": f"{http_method} {path}", "actual": f"{context.method} {context.path}"},
            )
            return self.continue_result()

        self.record(
            steps,
            f"Minimal API endpoint matched: {http_method} {path}",
            StepDecision.TERMINATE,
            {"method": http_method, "path": path, "isTerminal": True},
        )
        self.record(
            steps,
            ENDPOINT_NOTE,
            StepDecision.INFO,
            {"reason": "Endpoint registration vs middleware pipeline"},
            middleware_name="Pipeline Info",
        )

        body = f"[Handler result: {config.get('handlerCode')}]"
        context.response.status_code = 200
        context.response.body = body
        return self.success_result(body, content_type="application/json")

    def generate_code(self, config: MiddlewareConfig, indent: str = "") -> str:
        http_method = config.get("httpMethod")
        path = config.get("path")
        handler_code = config.get("handlerCode")
        if not (http_method and path and handler_code):
            return ""

        if "=>" not in handler_code and "async" not in handler_code:
            handler_code = f"() => {handler_code}"
        code = f'{indent}app.Map{map_method_name(http_method)}("{path}", {handler_code})'
        if config.get("policyName"):
            code += f'\n{indent}    .RequireRateLimiting("{config["policyName"]}")'
        return code + ";\n"

    def summarize(self, config: MiddlewareConfig) -> str:
        return f"{config.get('httpMethod')} {config.get('path')}"


def extract_minimal_api_endpoints(pipeline: "Pipeline") -> list[MinimalApiEndpoint]:
    """List the fully configured endpoints mapped at the top level of a pipeline."""
    endpoints = []
    for node in pipeline.middlewares:
        if node.type != MiddlewareKind.MINIMAL_API_ENDPOINT:
            continue
        config = node.config
        if config.get("httpMethod") and config.get("path") and config.get("handlerCode"):
            endpoints.append(
                MinimalApiEndpoint(
                    method=config["httpMethod"],
                    path=config["path"],
                    handler_code=config["handlerCode"],
                    middleware_id=node.id,
                )
            )
    return endpoints
