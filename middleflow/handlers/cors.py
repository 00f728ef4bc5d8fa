"""CORS middleware handler."""

from ..models.base import MiddlewareConfig
from ..models.enums import MiddlewareKind, StepDecision
from ..models.simulation import MiddlewareSimulationResult, SimulationContext, SimulationStep
from .base import SecurityMiddlewareHandler, quoted_list

ANY_ORIGIN = "*"


class CorsHandler(SecurityMiddlewareHandler):
    """Rejects cross-origin requests whose ``Origin`` is not allowed.

    Requests without an ``Origin`` header always pass. An allowed origin is
    mirrored into the shared response headers.
    """

    kind = MiddlewareKind.CORS

    def default_config(self) -> MiddlewareConfig:
        return {
            "allowedOrigins": [ANY_ORIGIN],
            "allowedMethods": ["GET", "POST", "PUT", "DELETE"],
            "allowCredentials": False,
        }

    def simulate(
        self,
        config: MiddlewareConfig,
        context: SimulationContext,
        steps: list[SimulationStep],
    ) -> MiddlewareSimulationResult:
        origin = context.header("Origin")
        configured = config.get("allowedOrigins")
        allowed_origins = list(configured) if configured is not None else [ANY_ORIGIN]
        allowed = ANY_ORIGIN in allowed_origins or (bool(origin) and origin in allowed_origins)

        if origin and not allowed:
            self.record(
                steps,
                f'CORS check failed: Origin "{origin}" not allowed',
                StepDecision.TERMINATE,
                {"origin": origin, "allowedOrigins": allowed_origins},
            )
            return self.forbidden_result("CORS policy violation")

        cors_headers: dict[str, str] = {}
        if origin and allowed:
            cors_headers["Access-Control-Allow-Origin"] = origin
            if config.get("allowCredentials"):
                cors_headers["Access-Control-Allow-Credentials"] = "true"
            context.response.headers.update(cors_headers)

        self.record(
            steps,
            "CORS check passed",
            StepDecision.CONTINUE,
            {"origin": origin, "allowed": allowed, "corsHeaders": cors_headers},
        )
        return self.continue_result()

    def generate_code(self, config: MiddlewareConfig, indent: str = "") -> str:
        origins = config.get("allowedOrigins") or []
        if not origins:
            return f"{indent}app.UseCors();\n"

        code = f"{indent}app.UseCors(policy => policy\n"
        code += f"{indent}    .WithOrigins({quoted_list(origins)})\n"
        methods = config.get("allowedMethods") or []
        if methods:
            code += f"{indent}    .WithMethods({quoted_list(methods)})\n"
        if config.get("allowCredentials"):
            code += f"{indent}    .AllowCredentials()\n"
        code += f"{indent});\n"
        return code

    def generate_service_registration(self, config: MiddlewareConfig) -> str:
        return "// Add CORS services\nbuilder.Services.AddCors();\n"

    def summarize(self, config: MiddlewareConfig) -> str:
        return f"Origins: {', '.join(config.get('allowedOrigins') or []) or 'none'}"
