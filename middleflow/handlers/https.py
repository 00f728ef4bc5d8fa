"""HTTPS redirection middleware handler."""

from ..models.base import MiddlewareConfig
from ..models.enums import MiddlewareKind, StepDecision
from ..models.simulation import MiddlewareSimulationResult, SimulationContext, SimulationStep
from .base import InfrastructureMiddlewareHandler


class HttpsHandler(InfrastructureMiddlewareHandler):
    kind = MiddlewareKind.HTTPS

    def default_config(self) -> MiddlewareConfig:
        return {}

    def simulate(
        self,
        config: MiddlewareConfig,
        context: SimulationContext,
        steps: list[SimulationStep],
    ) -> MiddlewareSimulationResult:
        self.record(steps, "HTTPS redirection configured", StepDecision.CONTINUE)
        return self.continue_result()

    def generate_code(self, config: MiddlewareConfig, indent: str = "") -> str:
        return f"{indent}app.UseHttpsRedirection();\n"

    def summarize(self, config: MiddlewareConfig) -> str:
        return "Redirect HTTP to HTTPS"
