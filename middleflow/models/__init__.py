"""
middleflow models package.

This package is the single source of truth for the enums, TypedDicts and
dataclasses shared by the simulator, the validator and the code generator.

Usage:
    from middleflow.models import (
        MiddlewareKind,
        SimulationRequest,
        ValidationResult,
    )
"""

from .base import (
    BranchConditionDict,
    BranchConfigDict,
    ConditionOperatorLiteral,
    ConditionTypeLiteral,
    MiddlewareConfig,
    MiddlewareNodeDict,
    PipelineDict,
    SimulationRequestDict,
)
from .enums import (
    AuthScheme,
    ConditionOperator,
    ConditionType,
    HandlerCategory,
    HttpMethod,
    IssueSeverity,
    IssueType,
    LimiterType,
    MiddlewareKind,
    StepDecision,
)
from .simulation import (
    MiddlewareSimulationResult,
    RateLimitCounter,
    ResponseState,
    SimulationContext,
    SimulationRequest,
    SimulationResponse,
    SimulationResult,
    SimulationStep,
)
from .validation import ValidationIssue, ValidationResult

__all__ = [
    # Enums
    "AuthScheme",
    "ConditionOperator",
    "ConditionType",
    "HandlerCategory",
    "HttpMethod",
    "IssueSeverity",
    "IssueType",
    "LimiterType",
    "MiddlewareKind",
    "StepDecision",
    # Document shapes
    "BranchConditionDict",
    "BranchConfigDict",
    "ConditionOperatorLiteral",
    "ConditionTypeLiteral",
    "MiddlewareConfig",
    "MiddlewareNodeDict",
    "PipelineDict",
    "SimulationRequestDict",
    # Simulation
    "MiddlewareSimulationResult",
    "RateLimitCounter",
    "ResponseState",
    "SimulationContext",
    "SimulationRequest",
    "SimulationResponse",
    "SimulationResult",
    "SimulationStep",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
