"""Routing middleware handler."""

from ..models.base import MiddlewareConfig
from ..models.enums import MiddlewareKind, StepDecision
from ..models.simulation import MiddlewareSimulationResult, SimulationContext, SimulationStep
from .base import RoutingMiddlewareHandler

WILDCARD = "*"


def route_matches(route: str, path: str) -> bool:
    """A route matches on ``*``, on equality, or as a prefix once ``*`` is stripped."""
    return route == WILDCARD or path == route or path.startswith(route.replace(WILDCARD, "", 1))


class RoutingHandler(RoutingMiddlewareHandler):
    kind = MiddlewareKind.ROUTING

    def default_config(self) -> MiddlewareConfig:
        return {"routes": [WILDCARD]}

    def simulate(
        self,
        config: MiddlewareConfig,
        context: SimulationContext,
        steps: list[SimulationStep],
    ) -> MiddlewareSimulationResult:
        routes = list(config.get("routes") or [])
        # An empty route table routes everything.
        matched = not routes or any(route_matches(route, context.path) for route in routes)

        self.record(
            steps,
            f"Matched route: {context.path}" if matched else "No route matched",
            StepDecision.CONTINUE if matched else StepDecision.TERMINATE,
            {"matched": matched, "path": context.path},
        )
        if not matched:
            return self.not_found_result("Route not found")
        return self.continue_result()

    def generate_code(self, config: MiddlewareConfig, indent: str = "") -> str:
        return f"{indent}app.UseRouting();\n"

    def summarize(self, config: MiddlewareConfig) -> str:
        return f"Routes: {', '.join(config.get('routes') or []) or 'none'}"
