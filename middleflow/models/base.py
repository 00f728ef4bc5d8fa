"""
Base model definitions for middleflow.

This module is the single source of truth for the TypedDict shapes of a
pipeline document as it travels over the wire (JSON/YAML). Keys keep the
camelCase spelling used by pipeline documents.
"""

from typing import Any, Literal

from typing_extensions import NotRequired, TypedDict

__all__ = [
    # Condition types
    "ConditionTypeLiteral",
    "ConditionOperatorLiteral",
    "BranchConditionDict",
    # Node types
    "MiddlewareConfig",
    "BranchConfigDict",
    "MiddlewareNodeDict",
    # Document types
    "PipelineDict",
    "SimulationRequestDict",
]

ConditionTypeLiteral = Literal["header", "method", "path", "claim", "authenticated"]
ConditionOperatorLiteral = Literal["==", "!=", "contains", "startsWith", "endsWith"]

# Open key/value bag; recognized keys depend on the owning node's kind.
MiddlewareConfig = dict[str, Any]


class BranchConditionDict(TypedDict):
    """Serialized branch condition."""

    type: ConditionTypeLiteral
    operator: ConditionOperatorLiteral
    key: NotRequired[str]
    value: NotRequired[str]


class BranchConfigDict(TypedDict):
    """Serialized branch with its two arms."""

    condition: BranchConditionDict
    onTrue: list["MiddlewareNodeDict"]
    onFalse: NotRequired[list["MiddlewareNodeDict"]]


class MiddlewareNodeDict(TypedDict):
    """Serialized middleware node."""

    id: str
    type: str
    order: int
    config: MiddlewareConfig
    branch: NotRequired[BranchConfigDict]


class PipelineDict(TypedDict):
    """Top level pipeline document."""

    id: str
    name: str
    middlewares: list[MiddlewareNodeDict]


class SimulationRequestDict(TypedDict, total=False):
    """Loose request mapping accepted by the simulator and the CLI."""

    method: str
    path: str
    headers: dict[str, str]
    query: dict[str, str]
    body: str | None
    isAuthenticated: bool
    claims: dict[str, str]
    cookies: dict[str, str]
