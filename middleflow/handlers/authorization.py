"""Authorization middleware handler."""

from typing import TYPE_CHECKING

from ..models.base import MiddlewareConfig
from ..models.enums import IssueType, MiddlewareKind, StepDecision
from ..models.simulation import MiddlewareSimulationResult, SimulationContext, SimulationStep
from ..models.validation import ValidationIssue
from .base import SecurityMiddlewareHandler

if TYPE_CHECKING:
    from ..pipeline import Pipeline


class AuthorizationHandler(SecurityMiddlewareHandler):
    """Grants access when any configured policy name is present as a claim key."""

    kind = MiddlewareKind.AUTHORIZATION
    service_group = "authentication and authorization"

    def default_config(self) -> MiddlewareConfig:
        return {"policies": []}

    def simulate(
        self,
        config: MiddlewareConfig,
        context: SimulationContext,
        steps: list[SimulationStep],
    ) -> MiddlewareSimulationResult:
        policies = list(config.get("policies") or [])
        # Claim values are ignored, only the key matters.
        authorized = not policies or any(policy in context.claims for policy in policies)

        if not authorized:
            self.record(
                steps,
                "Authorization failed: Missing required policy",
                StepDecision.TERMINATE,
                {"policies": policies, "claims": dict(context.claims)},
            )
            return self.forbidden_result("Access denied")

        self.record(
            steps,
            "Authorization successful",
            StepDecision.CONTINUE,
            {"policies": policies, "authorized": True},
        )
        return self.continue_result()

    def validate(self, config: MiddlewareConfig, pipeline: "Pipeline", middleware_id: str) -> list[ValidationIssue]:
        own_index = pipeline.index_of(middleware_id)
        auth_index = pipeline.first_index_of(MiddlewareKind.AUTHENTICATION)
        if own_index != -1 and auth_index != -1 and own_index < auth_index:
            return [
                self.warning(
                    middleware_id,
                    "Authorization should typically come after Authentication",
                    IssueType.ORDERING,
                )
            ]
        return []

    def generate_code(self, config: MiddlewareConfig, indent: str = "") -> str:
        return f"{indent}app.UseAuthorization();\n"

    def generate_service_registration(self, config: MiddlewareConfig) -> str:
        return "builder.Services.AddAuthorization();\n"

    def summarize(self, config: MiddlewareConfig) -> str:
        return f"Policies: {', '.join(config.get('policies') or []) or 'none'}"
