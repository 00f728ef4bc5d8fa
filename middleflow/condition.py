"""Branch condition evaluation.

The evaluator is a pure function of a :class:`BranchCondition` and a
request-like object exposing ``method``, ``path``, ``claims``,
``is_authenticated`` and a case-insensitive ``header(name)`` lookup. Both
:class:`SimulationRequest` and :class:`SimulationContext` qualify.

Unsupported combinations (an unknown type, or an operator a type does not
support such as ``startsWith`` on ``method``) evaluate to ``False``.
"""

from collections.abc import Callable
from typing import Any, Protocol

from .models.base import BranchConditionDict
from .models.enums import ConditionOperator, ConditionType
from .pipeline import BranchCondition

__all__ = [
    "ConditionSubject",
    "evaluate_condition",
    "render_condition",
    "describe_condition",
]


class ConditionSubject(Protocol):
    method: str
    path: str
    claims: dict[str, str]
    is_authenticated: bool

    def header(self, name: str) -> str | None: ...


_STRING_OPERATORS: dict[str, Callable[[str, str], bool]] = {
    ConditionOperator.EQUALS: lambda actual, expected: actual == expected,
    ConditionOperator.NOT_EQUALS: lambda actual, expected: actual != expected,
    ConditionOperator.CONTAINS: lambda actual, expected: expected in actual,
    ConditionOperator.STARTS_WITH: lambda actual, expected: actual.startswith(expected),
    ConditionOperator.ENDS_WITH: lambda actual, expected: actual.endswith(expected),
}

# Operators each condition type understands
_SUPPORTED_OPERATORS: dict[str, frozenset[str]] = {
    ConditionType.HEADER: frozenset(_STRING_OPERATORS),
    ConditionType.CLAIM: frozenset(_STRING_OPERATORS),
    ConditionType.PATH: frozenset(_STRING_OPERATORS),
    ConditionType.METHOD: frozenset({ConditionOperator.EQUALS, ConditionOperator.NOT_EQUALS}),
}


def _as_condition(condition: BranchCondition | BranchConditionDict) -> BranchCondition:
    if isinstance(condition, BranchCondition):
        return condition
    return BranchCondition.from_dict(condition)


def _subject_value(condition: BranchCondition, subject: ConditionSubject) -> str:
    key = condition.key or ""
    if condition.type == ConditionType.HEADER:
        return subject.header(key) or ""
    if condition.type == ConditionType.CLAIM:
        return subject.claims.get(key) or ""
    if condition.type == ConditionType.METHOD:
        return subject.method
    return subject.path


def evaluate_condition(
    condition: BranchCondition | BranchConditionDict,
    subject: ConditionSubject,
) -> bool:
    """Test one branch condition against a request-like subject.

    Args:
        condition: Condition object or its serialized form
        subject: Request or simulation context to inspect

    Returns:
        Whether the condition holds; ``False`` for unsupported conditions
    """
    condition = _as_condition(condition)

    if condition.type == ConditionType.AUTHENTICATED:
        return bool(subject.is_authenticated)

    supported = _SUPPORTED_OPERATORS.get(condition.type)
    if supported is None or condition.operator not in supported:
        return False
    # header and claim conditions without a key are malformed
    if condition.type in (ConditionType.HEADER, ConditionType.CLAIM) and not condition.key:
        return False

    actual = _subject_value(condition, subject)
    return _STRING_OPERATORS[condition.operator](actual, condition.value or "")


def render_condition(condition: BranchCondition | BranchConditionDict) -> str:
    """Render a condition as the equivalent C# boolean expression over ``ctx``.

    Combinations without a natural C# form render as ``true``.
    """
    condition = _as_condition(condition)
    key = condition.key
    value = condition.value
    op = condition.operator

    if condition.type == ConditionType.HEADER:
        if op == ConditionOperator.EQUALS:
            return f'ctx.Request.Headers["{key}"] == "{value}"'
        if op == ConditionOperator.NOT_EQUALS:
            return f'ctx.Request.Headers["{key}"] != "{value}"'
        if op == ConditionOperator.CONTAINS:
            return f'ctx.Request.Headers["{key}"].ToString().Contains("{value}")'
        if op == ConditionOperator.STARTS_WITH:
            return f'ctx.Request.Headers["{key}"].ToString().StartsWith("{value}")'
        if op == ConditionOperator.ENDS_WITH:
            return f'ctx.Request.Headers["{key}"].ToString().EndsWith("{value}")'

    elif condition.type == ConditionType.METHOD:
        if op == ConditionOperator.EQUALS:
            return f'ctx.Request.Method == "{value}"'
        if op == ConditionOperator.NOT_EQUALS:
            return f'ctx.Request.Method != "{value}"'

    elif condition.type == ConditionType.PATH:
        if op == ConditionOperator.EQUALS:
            return f'ctx.Request.Path == "{value}"'
        if op == ConditionOperator.NOT_EQUALS:
            return f'ctx.Request.Path != "{value}"'
        if op == ConditionOperator.STARTS_WITH:
            return f'ctx.Request.Path.StartsWithSegments("{value}")'
        if op == ConditionOperator.CONTAINS:
            return f'ctx.Request.Path.Value?.Contains("{value}") ?? false'
        if op == ConditionOperator.ENDS_WITH:
            return f'ctx.Request.Path.Value?.EndsWith("{value}") ?? false'

    elif condition.type == ConditionType.CLAIM:
        if op == ConditionOperator.EQUALS:
            return f'ctx.User.HasClaim("{key}", "{value}")'
        if op == ConditionOperator.NOT_EQUALS:
            return f'!ctx.User.HasClaim("{key}", "{value}")'

    elif condition.type == ConditionType.AUTHENTICATED:
        return "ctx.User.Identity?.IsAuthenticated ?? false"

    return "true"


def describe_condition(condition: BranchCondition | BranchConditionDict) -> str:
    """Human readable one-liner, e.g. ``header == [X-Api] "v"``."""
    condition = _as_condition(condition)
    parts: list[Any] = [str(condition.type), str(condition.operator)]
    if condition.key:
        parts.append(f"[{condition.key}]")
    if condition.value:
        parts.append(f'"{condition.value}"')
    return " ".join(parts)
