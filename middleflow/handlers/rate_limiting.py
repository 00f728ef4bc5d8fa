"""Rate limiting middleware handler.

Counters live in ``SimulationContext.rate_limit_state`` keyed by policy name
and survive across the repeated requests of one simulation call. There is
no time decay: a fixed window that never rolls over keeps the simulation
deterministic.
"""

from typing import TYPE_CHECKING, Any

from ..models.base import MiddlewareConfig
from ..models.enums import LimiterType, MiddlewareKind, StepDecision
from ..models.simulation import (
    MiddlewareSimulationResult,
    RateLimitCounter,
    SimulationContext,
    SimulationStep,
)
from ..models.validation import ValidationIssue
from .base import PerformanceMiddlewareHandler

if TYPE_CHECKING:
    from ..pipeline import Pipeline

DEFAULT_POLICY = "default"
DEFAULT_PERMIT_LIMIT = 10
DEFAULT_WINDOW_SECONDS = 60
NUMERIC_SETTINGS = {"permitLimit": DEFAULT_PERMIT_LIMIT, "window": DEFAULT_WINDOW_SECONDS}


def _as_int(value: Any, default: int) -> int:
    """Integer setting, or ``default`` when missing, zero or not numeric."""
    try:
        return int(value or default)
    except (TypeError, ValueError):
        return default


class RateLimitingHandler(PerformanceMiddlewareHandler):
    kind = MiddlewareKind.RATE_LIMITING

    def default_config(self) -> MiddlewareConfig:
        return {
            "policyName": DEFAULT_POLICY,
            "limiterType": LimiterType.FIXED_WINDOW.value,
            "permitLimit": DEFAULT_PERMIT_LIMIT,
            "window": DEFAULT_WINDOW_SECONDS,
            "queueLimit": 0,
        }

    @staticmethod
    def _settings(config: MiddlewareConfig) -> tuple[str, str, int, int]:
        return (
            config.get("policyName") or DEFAULT_POLICY,
            config.get("limiterType") or LimiterType.FIXED_WINDOW.value,
            _as_int(config.get("permitLimit"), DEFAULT_PERMIT_LIMIT),
            _as_int(config.get("window"), DEFAULT_WINDOW_SECONDS),
        )

    def simulate(
        self,
        config: MiddlewareConfig,
        context: SimulationContext,
        steps: list[SimulationStep],
    ) -> MiddlewareSimulationResult:
        policy_name, limiter_type, permit_limit, window = self._settings(config)

        counter = context.rate_limit_state.setdefault(policy_name, RateLimitCounter(count=0, limit=permit_limit))
        counter.count += 1
        details = {
            "policyName": policy_name,
            "limiterType": limiter_type,
            "permitLimit": permit_limit,
            "currentCount": counter.count,
            "requestNumber": context.request_number,
        }

        if counter.count > permit_limit:
            self.record(
                steps,
                f'Rate limit EXCEEDED for policy "{policy_name}" ({limiter_type}): '
                f"{counter.count}/{permit_limit} requests",
                StepDecision.TERMINATE,
                {**details, "exceeded": True},
            )
            return self.rate_limit_result(
                f"Rate limit exceeded. Request {counter.count} exceeded limit of {permit_limit}. "
                "Please try again later.",
                window,
            )

        self.record(
            steps,
            f"Rate limit OK ({limiter_type}): {counter.count}/{permit_limit} requests (policy: {policy_name})",
            StepDecision.CONTINUE,
            details,
        )
        return self.continue_result()

    def validate(self, config: MiddlewareConfig, pipeline: "Pipeline", middleware_id: str) -> list[ValidationIssue]:
        issues = []
        for key, default in NUMERIC_SETTINGS.items():
            value = config.get(key)
            if value is None:
                continue
            try:
                int(value)
            except (TypeError, ValueError):
                issues.append(
                    self.warning(middleware_id, f"Rate limit {key} must be a whole number; using {default}")
                )
        return issues

    def generate_code(self, config: MiddlewareConfig, indent: str = "") -> str:
        code = f"{indent}app.UseRateLimiter();\n"
        if config.get("policyName"):
            code += f"{indent}// Rate Limiting Policy: {config['policyName']}\n"
            code += f"{indent}// Limiter Type: {config.get('limiterType') or LimiterType.FIXED_WINDOW.value}\n"
        return code

    def _policy_block(self, config: MiddlewareConfig) -> str:
        policy_name, limiter_type, permit_limit, window = self._settings(config)
        queue_limit = config.get("queueLimit") or 0

        lines = [
            f'    options.AddPolicy("{policy_name}", context =>',
            f"        RateLimitPartition.Get{limiter_type}(",
            '            partitionKey: context.Connection.RemoteIpAddress?.ToString() ?? "unknown",',
        ]
        if limiter_type == LimiterType.SLIDING_WINDOW:
            lines += [
                "            factory: _ => new SlidingWindowRateLimiterOptions",
                "            {",
                f"                PermitLimit = {permit_limit},",
                f"                Window = TimeSpan.FromSeconds({window}),",
                "                SegmentsPerWindow = 5,",
                f"                QueueLimit = {queue_limit}",
            ]
        elif limiter_type == LimiterType.TOKEN_BUCKET:
            lines += [
                "            factory: _ => new TokenBucketRateLimiterOptions",
                "            {",
                f"                TokenLimit = {permit_limit},",
                f"                TokensPerPeriod = {config.get('tokensPerPeriod') or 5},",
                f"                ReplenishmentPeriod = TimeSpan.FromSeconds({config.get('replenishmentPeriod') or 60}),",
                f"                QueueLimit = {queue_limit}",
            ]
        elif limiter_type == LimiterType.CONCURRENCY:
            lines += [
                "            factory: _ => new ConcurrencyLimiterOptions",
                "            {",
                f"                PermitLimit = {permit_limit},",
                f"                QueueLimit = {queue_limit}",
            ]
        else:
            lines += [
                "            factory: _ => new FixedWindowRateLimiterOptions",
                "            {",
                f"                PermitLimit = {permit_limit},",
                f"                Window = TimeSpan.FromSeconds({window}),",
                f"                QueueLimit = {queue_limit}",
            ]
        lines.append("            }));")
        return "\n".join(lines) + "\n"

    def generate_service_registration(self, config: MiddlewareConfig) -> str:
        return self.combine_service_registrations([config])

    def combine_service_registrations(self, configs: list[MiddlewareConfig]) -> str:
        # One AddRateLimiter call holding one policy per distinct policy name.
        if not configs:
            return ""
        code = "// Add rate limiting services\n"
        code += "builder.Services.AddRateLimiter(options =>\n"
        code += "{\n"
        seen: set[str] = set()
        for config in configs:
            policy_name = self._settings(config)[0]
            if policy_name in seen:
                continue
            seen.add(policy_name)
            code += self._policy_block(config)
        code += "});\n"
        return code

    def summarize(self, config: MiddlewareConfig) -> str:
        policy_name, limiter_type, permit_limit, window = self._settings(config)
        return f"{limiter_type}: {permit_limit}/{window}s ({policy_name})"
