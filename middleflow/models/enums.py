"""
Enums and constants for middleflow pipelines.

This module defines all enums used to describe middleware pipelines, branch
conditions, simulation traces and validation issues, so the rest of the
codebase never compares against magic strings.

Usage:
    from middleflow.models.enums import (
        MiddlewareKind,
        ConditionType,
        StepDecision,
    )
"""

from enum import StrEnum

# ============================================================================
# Pipeline Enums
# ============================================================================


class MiddlewareKind(StrEnum):
    """Closed set of middleware kinds a pipeline node can carry."""

    ROUTING = "Routing"
    AUTHENTICATION = "Authentication"
    AUTHORIZATION = "Authorization"
    CORS = "CORS"
    STATIC_FILES = "StaticFiles"
    EXCEPTION_HANDLING = "ExceptionHandling"
    COMPRESSION = "Compression"
    RATE_LIMITING = "RateLimiting"
    HTTPS = "HTTPS"
    CUSTOM = "Custom"
    MINIMAL_API_ENDPOINT = "MinimalAPIEndpoint"


class HandlerCategory(StrEnum):
    """Grouping used by the handler registry and CLI listings."""

    SECURITY = "security"
    ROUTING = "routing"
    PERFORMANCE = "performance"
    INFRASTRUCTURE = "infrastructure"


class AuthScheme(StrEnum):
    """Authentication schemes understood by the Authentication handler."""

    JWT_BEARER = "JwtBearer"
    OPEN_ID_CONNECT = "OpenIdConnect"
    COOKIE = "Cookie"


class LimiterType(StrEnum):
    """Rate limiter algorithms that can be emitted as service registrations."""

    FIXED_WINDOW = "FixedWindow"
    SLIDING_WINDOW = "SlidingWindow"
    TOKEN_BUCKET = "TokenBucket"
    CONCURRENCY = "Concurrency"


class HttpMethod(StrEnum):
    """HTTP methods accepted by minimal API endpoints."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


# ============================================================================
# Branch Condition Enums
# ============================================================================


class ConditionType(StrEnum):
    """Request attribute a branch condition inspects."""

    HEADER = "header"
    METHOD = "method"
    PATH = "path"
    CLAIM = "claim"
    AUTHENTICATED = "authenticated"


class ConditionOperator(StrEnum):
    """Comparison applied by a branch condition."""

    EQUALS = "=="
    NOT_EQUALS = "!="
    CONTAINS = "contains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"


# ============================================================================
# Simulation & Validation Enums
# ============================================================================


class StepDecision(StrEnum):
    """Decision recorded on a simulation step."""

    CONTINUE = "continue"
    TERMINATE = "terminate"
    TRUE_BRANCH = "true-branch"
    FALSE_BRANCH = "false-branch"
    INFO = "info"


class IssueSeverity(StrEnum):
    """Severity of a pipeline validation issue."""

    ERROR = "error"
    WARNING = "warning"


class IssueType(StrEnum):
    """Categorized validation issue types."""

    CIRCULAR_BRANCH = "circular_branch"
    ALIASED_NODE = "aliased_node"
    DUPLICATE_ID = "duplicate_id"
    ORDERING = "ordering"
    EXECUTION_ORDER = "execution_order"
    CONFIGURATION = "configuration"


# ============================================================================
# Constants
# ============================================================================

PIPELINE_FIELDS = ("id", "name", "middlewares")
NODE_FIELDS = ("id", "type", "order", "config", "branch")
BRANCH_FIELDS = ("condition", "onTrue", "onFalse")
