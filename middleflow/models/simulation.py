"""
Simulation models for middleflow.

Data structures threaded through a single simulation run: the incoming
request, the mutable request-scoped context, the append-only trace and the
responses produced by handlers and by the engine.
"""

import time
from dataclasses import dataclass, field
from typing import Any

from .base import SimulationRequestDict
from .enums import StepDecision

__all__ = [
    "SimulationRequest",
    "SimulationStep",
    "RateLimitCounter",
    "ResponseState",
    "SimulationContext",
    "MiddlewareSimulationResult",
    "SimulationResponse",
    "SimulationResult",
]


def _lookup_header(headers: dict[str, str], name: str) -> str | None:
    """Find a header by exact name first, then case-insensitively."""
    if name in headers:
        return headers[name]
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


@dataclass
class SimulationRequest:
    """A request-like input for the simulator.

    Header keys are stored as given; lookups through :meth:`header` are
    case-insensitive.
    """

    method: str = "GET"
    path: str = "/"
    headers: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    body: str | None = None
    is_authenticated: bool = False
    claims: dict[str, str] = field(default_factory=dict)
    cookies: dict[str, str] = field(default_factory=dict)

    def header(self, name: str) -> str | None:
        return _lookup_header(self.headers, name)

    @classmethod
    def from_dict(cls, data: SimulationRequestDict | dict[str, Any]) -> "SimulationRequest":
        """Build a request from a camelCase (or snake_case) mapping."""
        is_authenticated = data.get("isAuthenticated", data.get("is_authenticated", False))
        return cls(
            method=data.get("method", "GET"),
            path=data.get("path", "/"),
            headers=dict(data.get("headers") or {}),
            query=dict(data.get("query") or {}),
            body=data.get("body"),
            is_authenticated=bool(is_authenticated),
            claims=dict(data.get("claims") or {}),
            cookies=dict(data.get("cookies") or {}),
        )

    def to_dict(self) -> SimulationRequestDict:
        result: SimulationRequestDict = {
            "method": self.method,
            "path": self.path,
            "headers": dict(self.headers),
            "query": dict(self.query),
            "isAuthenticated": self.is_authenticated,
            "claims": dict(self.claims),
            "cookies": dict(self.cookies),
        }
        if self.body is not None:
            result["body"] = self.body
        return result


@dataclass(frozen=True)
class SimulationStep:
    """Append-only trace record produced while simulating a pipeline."""

    order: int
    middleware_name: str
    middleware_type: str
    action: str
    decision: str
    context: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    @property
    def is_terminal(self) -> bool:
        return self.decision == StepDecision.TERMINATE

    def to_dict(self) -> dict[str, Any]:
        return {
            "order": self.order,
            "middlewareName": self.middleware_name,
            "middlewareType": self.middleware_type,
            "action": self.action,
            "decision": str(self.decision),
            "context": self.context,
            "timestamp": self.timestamp,
        }


@dataclass
class RateLimitCounter:
    """Per-policy counter shared across repeated simulated requests."""

    count: int = 0
    limit: int = 0


@dataclass
class ResponseState:
    """Response object accumulated by handlers during one request."""

    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None


@dataclass
class SimulationContext:
    """Mutable request-scoped state threaded through one simulation run.

    A fresh context is created for every simulated request. Only
    ``rate_limit_state`` is carried over between the repeated requests of a
    single simulation call.
    """

    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    body: str | None = None
    is_authenticated: bool = False
    claims: dict[str, str] = field(default_factory=dict)
    cookies: dict[str, str] = field(default_factory=dict)
    response: ResponseState = field(default_factory=ResponseState)
    rate_limit_state: dict[str, RateLimitCounter] = field(default_factory=dict)
    request_number: int = 1
    total_requests: int = 1

    @classmethod
    def from_request(
        cls,
        request: SimulationRequest,
        rate_limit_state: dict[str, RateLimitCounter] | None = None,
        request_number: int = 1,
        total_requests: int = 1,
    ) -> "SimulationContext":
        """Create a context holding copies of the request's mutable views."""
        return cls(
            method=request.method,
            path=request.path,
            headers=dict(request.headers),
            query=dict(request.query),
            body=request.body,
            is_authenticated=request.is_authenticated,
            claims=dict(request.claims),
            cookies=dict(request.cookies),
            rate_limit_state=rate_limit_state if rate_limit_state is not None else {},
            request_number=request_number,
            total_requests=total_requests,
        )

    def header(self, name: str) -> str | None:
        return _lookup_header(self.headers, name)

    @property
    def has_cookie(self) -> bool:
        """True when any cookie or a ``Cookie`` header is present."""
        return bool(self.cookies) or bool(self.header("Cookie"))


@dataclass(frozen=True)
class MiddlewareSimulationResult:
    """Outcome returned by a handler's ``simulate``."""

    terminated: bool
    status_code: int = 200
    status_text: str = "OK"
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None


@dataclass(frozen=True)
class SimulationResponse:
    """Final response of one simulated request."""

    status_code: int
    status_text: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None
    terminated: bool = False
    terminated_by: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "statusCode": self.status_code,
            "statusText": self.status_text,
            "headers": dict(self.headers),
            "terminated": self.terminated,
        }
        if self.body is not None:
            result["body"] = self.body
        if self.terminated_by is not None:
            result["terminatedBy"] = self.terminated_by
        return result


@dataclass(frozen=True)
class SimulationResult:
    """Aggregate returned by ``simulate_pipeline``.

    ``response`` is the response of the last simulated request and
    ``responses`` holds one entry per request in order.
    """

    success: bool
    steps: list[SimulationStep]
    response: SimulationResponse
    duration: float
    responses: list[SimulationResponse] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "duration": self.duration,
            "steps": [step.to_dict() for step in self.steps],
            "response": self.response.to_dict(),
            "responses": [response.to_dict() for response in self.responses],
        }
