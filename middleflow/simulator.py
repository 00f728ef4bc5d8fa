"""Pipeline simulation engine.

Runs a pipeline against a simulated request and returns the step-by-step
trace plus the final response. The run is synchronous, does no I/O, and
builds a fresh :class:`SimulationContext` for every simulated request; only
the rate limiter counters are shared between the repeated requests of one
call.

Endpoint nodes (``MapGet`` and friends) only register routes, so every
non-endpoint node declared after the first endpoint is hoisted to run
before any endpoint is matched. The trace notes when that happens.
"""

import logging
import time
from collections.abc import Mapping
from typing import Any

from .common.exceptions import SimulationError
from .condition import describe_condition, evaluate_condition
from .config import MiddleflowConfig, get_config
from .models.enums import StepDecision
from .models.simulation import (
    MiddlewareSimulationResult,
    RateLimitCounter,
    SimulationContext,
    SimulationRequest,
    SimulationResponse,
    SimulationResult,
    SimulationStep,
)
from .pipeline import MiddlewareNode, Pipeline
from .registry import HandlerRegistry, get_default_registry

logger = logging.getLogger(__name__)

PIPELINE_INFO = "Pipeline Info"
EXECUTION_ORDER_NOTE = (
    "Note: Code order ≠ Execution order! Some middleware appears after MapXxx() in code "
    "but runs BEFORE the endpoint. Simulation shows actual execution order."
)

# (terminal result, node that produced it)
Outcome = tuple[MiddlewareSimulationResult, MiddlewareNode] | None


class PipelineSimulator:
    """
    Simulates how requests flow through a pipeline.

    The simulator itself holds no per-run state and can be reused across
    calls; everything request-scoped lives in the context passed down the
    recursion.
    """

    def __init__(self, registry: HandlerRegistry | None = None, config: MiddleflowConfig | None = None):
        self.registry = registry or get_default_registry()
        self.config = config or get_config()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def simulate(
        self,
        pipeline: Pipeline,
        request: SimulationRequest | Mapping[str, Any],
        repeat_count: int = 1,
    ) -> SimulationResult:
        """
        Simulate ``repeat_count`` identical requests through a pipeline.

        Args:
            pipeline: Pipeline to run
            request: Request object or its camelCase mapping
            repeat_count: Number of logical requests to send

        Returns:
            SimulationResult whose ``response`` is the last request's response

        Raises:
            SimulationError: If ``repeat_count`` is below 1 or branches nest too deeply
        """
        if repeat_count < 1:
            raise SimulationError("repeat_count must be at least 1", context={"repeat_count": repeat_count})
        if not isinstance(request, SimulationRequest):
            request = SimulationRequest.from_dict(request)

        logger.debug(
            "Simulating %s %s through pipeline %s (%d request(s))",
            request.method, request.path, pipeline.id, repeat_count,
        )
        start = time.perf_counter()
        steps: list[SimulationStep] = []
        responses: list[SimulationResponse] = []
        rate_limit_state: dict[str, RateLimitCounter] = {}

        for request_number in range(1, repeat_count + 1):
            context = SimulationContext.from_request(
                request,
                rate_limit_state=rate_limit_state,
                request_number=request_number,
                total_requests=repeat_count,
            )
            if repeat_count > 1:
                steps.append(
                    SimulationStep(
                        order=len(steps) + 1,
                        middleware_name="Request",
                        middleware_type="Request",
                        action=f"Processing request {request_number} of {repeat_count}",
                        decision=StepDecision.CONTINUE,
                        context={"requestNumber": request_number},
                    )
                )
            responses.append(self._simulate_request(pipeline, context, steps))

        response = responses[-1]
        duration = (time.perf_counter() - start) * 1000
        logger.debug(
            "Simulation of pipeline %s finished with %d after %d step(s)",
            pipeline.id, response.status_code, len(steps),
        )
        return SimulationResult(
            success=not response.terminated or response.status_code < 400,
            steps=steps,
            response=response,
            duration=duration,
            responses=responses,
        )

    @staticmethod
    def execution_order(
        nodes: list[MiddlewareNode],
        registry: HandlerRegistry | None = None,
    ) -> tuple[list[MiddlewareNode], list[MiddlewareNode]]:
        """
        Compute the runtime order of a node list.

        Nodes are sorted by ``order`` (stable). Every non-endpoint node after
        the first endpoint is hoisted ahead of the endpoints.

        Returns:
            Tuple of (execution order, hoisted nodes)
        """
        registry = registry or get_default_registry()
        ordered = sorted(nodes, key=lambda node: node.order)

        first_endpoint = next(
            (index for index, node in enumerate(ordered) if registry.get(node.type).is_endpoint),
            None,
        )
        if first_endpoint is None:
            return ordered, []

        tail = ordered[first_endpoint:]
        endpoints = [node for node in tail if registry.get(node.type).is_endpoint]
        hoisted = [node for node in tail if not registry.get(node.type).is_endpoint]
        return ordered[:first_endpoint] + hoisted + endpoints, hoisted

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _simulate_request(
        self,
        pipeline: Pipeline,
        context: SimulationContext,
        steps: list[SimulationStep],
    ) -> SimulationResponse:
        outcome = self._run_sequence(pipeline.middlewares, context, steps, depth=0)

        if outcome is None:
            return SimulationResponse(
                status_code=200,
                status_text="OK",
                headers=dict(context.response.headers),
                body=context.response.body,
                terminated=False,
            )

        result, node = outcome
        return SimulationResponse(
            status_code=result.status_code,
            status_text=result.status_text,
            headers={**context.response.headers, **result.headers},
            body=result.body if result.body is not None else context.response.body,
            terminated=True,
            terminated_by=str(node.type),
        )

    def _run_sequence(
        self,
        nodes: list[MiddlewareNode],
        context: SimulationContext,
        steps: list[SimulationStep],
        depth: int,
    ) -> Outcome:
        ordered, hoisted = self.execution_order(nodes, self.registry)
        if hoisted:
            steps.append(
                SimulationStep(
                    order=len(steps) + 1,
                    middleware_name=PIPELINE_INFO,
                    middleware_type="Pipeline",
                    action=EXECUTION_ORDER_NOTE,
                    decision=StepDecision.INFO,
                    context={
                        "warning": "execution-order-differs-from-code-order",
                        "hoisted": [node.id for node in hoisted],
                    },
                )
            )

        for node in ordered:
            outcome = self._simulate_node(node, context, steps, depth)
            if outcome is not None:
                return outcome
        return None

    def _simulate_node(
        self,
        node: MiddlewareNode,
        context: SimulationContext,
        steps: list[SimulationStep],
        depth: int,
    ) -> Outcome:
        handler = self.registry.get(node.type)
        result = handler.simulate(node.config, context, steps)
        if result.terminated:
            logger.debug("Request %d terminated by %s (%s)", context.request_number, node.type, node.id)
            return result, node

        if node.branch is None:
            return None

        if depth >= self.config.max_branch_depth:
            raise SimulationError(
                "Branch nesting exceeds the maximum depth; validate the pipeline for cycles",
                middleware_id=node.id,
                context={"max_branch_depth": self.config.max_branch_depth},
            )

        condition_met = evaluate_condition(node.branch.condition, context)
        steps.append(
            SimulationStep(
                order=len(steps) + 1,
                middleware_name=str(node.type),
                middleware_type=str(node.type),
                action=f"Branch condition evaluated: {describe_condition(node.branch.condition)}",
                decision=StepDecision.TRUE_BRANCH if condition_met else StepDecision.FALSE_BRANCH,
                context={"condition": node.branch.condition.to_dict(), "result": condition_met},
            )
        )
        return self._run_sequence(node.branch.arm(condition_met), context, steps, depth + 1)


def simulate_pipeline(
    pipeline: Pipeline,
    request: SimulationRequest | Mapping[str, Any],
    repeat_count: int = 1,
) -> SimulationResult:
    """Simulate a pipeline with the default registry and settings."""
    return PipelineSimulator().simulate(pipeline, request, repeat_count)
