"""Custom middleware handler."""

from ..models.base import MiddlewareConfig
from ..models.enums import MiddlewareKind, StepDecision
from ..models.simulation import MiddlewareSimulationResult, SimulationContext, SimulationStep
from .base import InfrastructureMiddlewareHandler

ANONYMOUS = "Anonymous"


class CustomHandler(InfrastructureMiddlewareHandler):
    """User supplied middleware: either an inline delegate or a middleware class."""

    kind = MiddlewareKind.CUSTOM

    def default_config(self) -> MiddlewareConfig:
        return {"customCode": "// Your custom middleware code here"}

    def simulate(
        self,
        config: MiddlewareConfig,
        context: SimulationContext,
        steps: list[SimulationStep],
    ) -> MiddlewareSimulationResult:
        class_name = config.get("className")
        self.record(
            steps,
            f"Custom middleware executed: {class_name or ANONYMOUS}",
            StepDecision.CONTINUE,
            {"className": class_name},
        )
        return self.continue_result()

    def generate_code(self, config: MiddlewareConfig, indent: str = "") -> str:
        custom_code = config.get("customCode")
        class_name = config.get("className")
        if custom_code:
            code = f"{indent}// Custom middleware: {class_name or ANONYMOUS}\n"
            code += f"{indent}app.Use(async (context, next) =>\n"
            code += f"{indent}{{\n"
            for line in str(custom_code).split("\n"):
                code += f"{indent}    {line}\n"
            code += f"{indent}    await next();\n"
            code += f"{indent}}});\n"
            return code
        if class_name:
            return f"{indent}app.UseMiddleware<{class_name}>();\n"
        return ""

    def summarize(self, config: MiddlewareConfig) -> str:
        return f"Class: {config.get('className') or ANONYMOUS}"
