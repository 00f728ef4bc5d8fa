"""Pipeline builders for middleflow tests.

Plain functions rather than fixtures so tests can build exactly the shape
they need inline, including branch arms and deliberately broken trees.
"""

import itertools
from typing import Any

from middleflow import BranchCondition, BranchConfig, MiddlewareKind, MiddlewareNode, Pipeline
from middleflow.registry import get_handler

_ids = itertools.count(1)


def node(
    kind: MiddlewareKind | str,
    config: dict[str, Any] | None = None,
    node_id: str | None = None,
    order: int = 0,
    branch: BranchConfig | None = None,
) -> MiddlewareNode:
    """Build a node, falling back to the kind's default configuration."""
    handler = get_handler(kind)
    return MiddlewareNode(
        id=node_id or f"{str(handler.kind).lower()}-{next(_ids)}",
        type=handler.kind,
        order=order,
        config=handler.default_config() if config is None else config,
        branch=branch,
    )


def pipeline(*nodes: MiddlewareNode, name: str = "Test Pipeline", renumber: bool = True) -> Pipeline:
    """Build a pipeline whose nodes run in argument order unless ``renumber`` is off."""
    if renumber:
        for index, item in enumerate(nodes):
            item.order = index
    return Pipeline(id="test-pipeline", name=name, middlewares=list(nodes))


def branch(
    condition_type: str,
    on_true: list[MiddlewareNode] | None = None,
    on_false: list[MiddlewareNode] | None = None,
    operator: str = "==",
    key: str | None = None,
    value: str | None = None,
) -> BranchConfig:
    """Build a branch; arm nodes are numbered in list order."""
    for arm in (on_true or [], on_false or []):
        for index, item in enumerate(arm):
            item.order = index
    return BranchConfig(
        condition=BranchCondition(type=condition_type, operator=operator, key=key, value=value),
        on_true=on_true if on_true is not None else [],
        on_false=on_false,
    )


def jwt_header(token: str = "header.payload.signature") -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
