"""Base classes for middleware handlers.

Every middleware kind has one handler: a stateless strategy object that
knows the kind's default configuration, how it behaves against a simulated
request, what it contributes to pipeline validation and how it is rendered
as C#. Category bases only add shared result builders.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from ..models.base import MiddlewareConfig
from ..models.enums import HandlerCategory, IssueSeverity, IssueType, MiddlewareKind, StepDecision
from ..models.simulation import MiddlewareSimulationResult, SimulationContext, SimulationStep
from ..models.validation import ValidationIssue

if TYPE_CHECKING:
    from ..pipeline import Pipeline

logger = logging.getLogger(__name__)


class MiddlewareHandler(ABC):
    """Abstract base class for all middleware handlers.

    Subclasses set ``kind`` and ``category`` and implement
    :meth:`default_config`, :meth:`simulate` and :meth:`generate_code`.

    Contract for :meth:`simulate`: at least one step is appended to
    ``steps`` before returning, and the returned ``terminated`` flag agrees
    with whether a terminating step was recorded.
    """

    kind: MiddlewareKind
    category: HandlerCategory
    # Endpoint handlers register routes rather than run in sequence.
    is_endpoint: bool = False
    # Kinds sharing a group are registered under one builder comment.
    service_group: str | None = None

    @abstractmethod
    def default_config(self) -> MiddlewareConfig:
        """Return a fresh default configuration for this kind."""
        pass

    @abstractmethod
    def simulate(
        self,
        config: MiddlewareConfig,
        context: SimulationContext,
        steps: list[SimulationStep],
    ) -> MiddlewareSimulationResult:
        """Simulate this middleware against one request.

        Args:
            config: Node configuration (missing keys are defaulted here)
            context: Mutable request-scoped simulation state
            steps: Trace to append to

        Returns:
            The handler outcome; ``terminated`` stops the pipeline
        """
        pass

    @abstractmethod
    def generate_code(self, config: MiddlewareConfig, indent: str = "") -> str:
        """Render the ``app.UseXxx()`` style statement(s) for this node."""
        pass

    def generate_service_registration(self, config: MiddlewareConfig) -> str:
        """Render ``builder.Services.AddXxx()`` statements; empty when none are needed."""
        return ""

    def combine_service_registrations(self, configs: list[MiddlewareConfig]) -> str:
        """Merge the registrations of every node of this kind into one block.

        Identical blocks are emitted once; handlers whose registrations
        must share a single builder call override this.
        """
        blocks: list[str] = []
        for config in configs:
            block = self.generate_service_registration(config)
            if block and block not in blocks:
                blocks.append(block)
        return "".join(blocks)

    def validate(self, config: MiddlewareConfig, pipeline: "Pipeline", middleware_id: str) -> list[ValidationIssue]:
        """Kind-specific validation of a node in the context of its pipeline."""
        return []

    def supports_branching(self) -> bool:
        return True

    def summarize(self, config: MiddlewareConfig) -> str:
        """One-line configuration summary for listings."""
        return ""

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def record(
        self,
        steps: list[SimulationStep],
        action: str,
        decision: str,
        context: dict[str, Any] | None = None,
        middleware_name: str | None = None,
    ) -> SimulationStep:
        """Append a step attributed to this handler's kind and return it."""
        step = SimulationStep(
            order=len(steps) + 1,
            middleware_name=middleware_name or str(self.kind),
            middleware_type=str(self.kind),
            action=action,
            decision=decision,
            context=context or {},
        )
        steps.append(step)
        if decision == StepDecision.TERMINATE:
            logger.debug("%s terminated request: %s", self.kind, action)
        return step

    def warning(
        self,
        middleware_id: str,
        message: str,
        issue_type: IssueType = IssueType.CONFIGURATION,
    ) -> ValidationIssue:
        return ValidationIssue(
            severity=IssueSeverity.WARNING,
            middleware_id=middleware_id,
            message=message,
            issue_type=issue_type,
        )

    @staticmethod
    def continue_result() -> MiddlewareSimulationResult:
        return MiddlewareSimulationResult(terminated=False, status_code=200, status_text="OK")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!s})"


class SecurityMiddlewareHandler(MiddlewareHandler):
    """Base for handlers that can reject a request as 401 or 403."""

    category = HandlerCategory.SECURITY

    def unauthorized_result(self, message: str, www_authenticate: str = "Bearer") -> MiddlewareSimulationResult:
        return MiddlewareSimulationResult(
            terminated=True,
            status_code=401,
            status_text="Unauthorized",
            headers={"WWW-Authenticate": www_authenticate},
            body=message,
        )

    def forbidden_result(self, message: str) -> MiddlewareSimulationResult:
        return MiddlewareSimulationResult(
            terminated=True,
            status_code=403,
            status_text="Forbidden",
            body=message,
        )


class RoutingMiddlewareHandler(MiddlewareHandler):
    """Base for handlers that resolve or serve a request path."""

    category = HandlerCategory.ROUTING

    def not_found_result(self, message: str) -> MiddlewareSimulationResult:
        return MiddlewareSimulationResult(
            terminated=True,
            status_code=404,
            status_text="Not Found",
            body=message,
        )

    def success_result(self, body: str, content_type: str = "application/octet-stream") -> MiddlewareSimulationResult:
        return MiddlewareSimulationResult(
            terminated=True,
            status_code=200,
            status_text="OK",
            headers={"Content-Type": content_type},
            body=body,
        )


class PerformanceMiddlewareHandler(MiddlewareHandler):
    """Base for throughput related handlers."""

    category = HandlerCategory.PERFORMANCE

    def rate_limit_result(self, message: str, retry_after: int) -> MiddlewareSimulationResult:
        return MiddlewareSimulationResult(
            terminated=True,
            status_code=429,
            status_text="Too Many Requests",
            headers={"Retry-After": str(retry_after)},
            body=message,
        )


class InfrastructureMiddlewareHandler(MiddlewareHandler):
    """Base for handlers that never reject a request."""

    category = HandlerCategory.INFRASTRUCTURE


def quoted_list(values: list[str]) -> str:
    """Render ``['a', 'b']`` as ``"a", "b"``."""
    return ", ".join(f'"{value}"' for value in values)


def csharp_bool(value: Any) -> str:
    return "true" if value else "false"
