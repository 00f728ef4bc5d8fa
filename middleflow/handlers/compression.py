"""Response compression middleware handler."""

from ..models.base import MiddlewareConfig
from ..models.enums import MiddlewareKind, StepDecision
from ..models.simulation import MiddlewareSimulationResult, SimulationContext, SimulationStep
from .base import PerformanceMiddlewareHandler


class CompressionHandler(PerformanceMiddlewareHandler):
    """Negotiates a ``Content-Encoding`` from ``Accept-Encoding``; never terminates."""

    kind = MiddlewareKind.COMPRESSION

    def default_config(self) -> MiddlewareConfig:
        return {"algorithms": ["gzip", "brotli"], "enableForHttps": False}

    def simulate(
        self,
        config: MiddlewareConfig,
        context: SimulationContext,
        steps: list[SimulationStep],
    ) -> MiddlewareSimulationResult:
        algorithms = list(config.get("algorithms") or ["gzip"])
        accept_encoding = context.header("Accept-Encoding")

        negotiated = None
        if accept_encoding:
            negotiated = next((alg for alg in algorithms if alg in accept_encoding), None)
            if negotiated:
                context.response.headers["Content-Encoding"] = negotiated

        self.record(
            steps,
            f"Compression configured: {', '.join(algorithms)}",
            StepDecision.CONTINUE,
            {"algorithms": algorithms, "acceptEncoding": accept_encoding, "negotiated": negotiated},
        )
        return self.continue_result()

    def generate_code(self, config: MiddlewareConfig, indent: str = "") -> str:
        return f"{indent}app.UseResponseCompression();\n"

    def generate_service_registration(self, config: MiddlewareConfig) -> str:
        return self.combine_service_registrations([config])

    def combine_service_registrations(self, configs: list[MiddlewareConfig]) -> str:
        if not configs:
            return ""
        code = "// Add response compression services\n"
        if any(config.get("enableForHttps") for config in configs):
            code += "// WARNING: Enabling compression for HTTPS has security implications (CRIME and BREACH attacks)\n"
            code += "// Only enable this if you understand the risks and have mitigations in place\n"
            code += "builder.Services.AddResponseCompression(options =>\n"
            code += "{\n"
            code += "    options.EnableForHttps = true;\n"
            code += "});\n"
        else:
            code += "builder.Services.AddResponseCompression();\n"
        return code

    def summarize(self, config: MiddlewareConfig) -> str:
        return f"Algorithms: {', '.join(config.get('algorithms') or []) or 'none'}"
