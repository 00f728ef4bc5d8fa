"""Pipeline document objects for middleflow.

A :class:`Pipeline` owns an ordered list of :class:`MiddlewareNode` objects.
Nesting happens only through a node's :class:`BranchConfig`, whose two arms
are themselves independently owned node lists. Top level sequencing is
decided by ``order`` alone; ties keep their list position.
"""

import copy
import logging
import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from .common.exceptions import MiddlewareNotFoundError, UnknownMiddlewareKindError
from .models.base import (
    BranchConditionDict,
    BranchConfigDict,
    MiddlewareConfig,
    MiddlewareNodeDict,
    PipelineDict,
)
from .models.enums import ConditionOperator, ConditionType, MiddlewareKind

logger = logging.getLogger(__name__)

__all__ = [
    "BranchCondition",
    "BranchConfig",
    "MiddlewareNode",
    "Pipeline",
    "coerce_kind",
]


def coerce_kind(value: "MiddlewareKind | str") -> MiddlewareKind:
    """Convert a raw type tag into a :class:`MiddlewareKind`.

    Raises:
        UnknownMiddlewareKindError: If the tag is not a known kind
    """
    try:
        return MiddlewareKind(value)
    except ValueError as e:
        raise UnknownMiddlewareKindError(str(value)) from e


def _coerce_enum(enum_cls, value: str) -> str:
    """Return the enum member for ``value`` when it is known, else the raw value."""
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass
class BranchCondition:
    """Condition deciding which arm of a branch runs.

    ``type`` and ``operator`` hold enum members when recognized; unknown
    values are kept verbatim so they evaluate to ``False`` instead of
    failing.
    """

    type: ConditionType | str
    operator: ConditionOperator | str = ConditionOperator.EQUALS
    key: str | None = None
    value: str | None = None

    def __post_init__(self):
        self.type = _coerce_enum(ConditionType, self.type)
        self.operator = _coerce_enum(ConditionOperator, self.operator)

    @classmethod
    def from_dict(cls, data: BranchConditionDict) -> "BranchCondition":
        return cls(
            type=data["type"],
            operator=data.get("operator", ConditionOperator.EQUALS),
            key=data.get("key"),
            value=data.get("value"),
        )

    def to_dict(self) -> BranchConditionDict:
        result: dict[str, Any] = {"type": str(self.type), "operator": str(self.operator)}
        if self.key is not None:
            result["key"] = self.key
        if self.value is not None:
            result["value"] = self.value
        return result  # type: ignore[return-value]


@dataclass
class BranchConfig:
    """A conditional fork with an ``on_true`` arm and an optional ``on_false`` arm."""

    condition: BranchCondition
    on_true: list["MiddlewareNode"] | None = field(default_factory=list)
    on_false: list["MiddlewareNode"] | None = None

    @property
    def true_nodes(self) -> list["MiddlewareNode"]:
        return self.on_true or []

    @property
    def false_nodes(self) -> list["MiddlewareNode"]:
        return self.on_false or []

    def arm(self, outcome: bool) -> list["MiddlewareNode"]:
        """Return the node list selected by a condition outcome."""
        return self.true_nodes if outcome else self.false_nodes

    def children(self) -> list["MiddlewareNode"]:
        return [*self.true_nodes, *self.false_nodes]

    @classmethod
    def from_dict(cls, data: BranchConfigDict) -> "BranchConfig":
        on_true = data.get("onTrue")
        on_false = data.get("onFalse")
        return cls(
            condition=BranchCondition.from_dict(data["condition"]),
            on_true=[MiddlewareNode.from_dict(node) for node in on_true] if on_true is not None else None,
            on_false=[MiddlewareNode.from_dict(node) for node in on_false] if on_false is not None else None,
        )

    def to_dict(self) -> BranchConfigDict:
        result: dict[str, Any] = {"condition": self.condition.to_dict()}
        if self.on_true is not None:
            result["onTrue"] = [node.to_dict() for node in self.on_true]
        if self.on_false is not None:
            result["onFalse"] = [node.to_dict() for node in self.on_false]
        return result  # type: ignore[return-value]


@dataclass
class MiddlewareNode:
    """One stage of the simulated request pipeline."""

    id: str
    type: MiddlewareKind
    order: int = 0
    config: MiddlewareConfig = field(default_factory=dict)
    branch: BranchConfig | None = None

    def __post_init__(self):
        self.type = coerce_kind(self.type)

    @property
    def has_branch(self) -> bool:
        return self.branch is not None

    @classmethod
    def from_dict(cls, data: MiddlewareNodeDict) -> "MiddlewareNode":
        branch = data.get("branch")
        return cls(
            id=data["id"],
            type=data["type"],  # type: ignore[arg-type]
            order=data["order"],
            config=copy.deepcopy(dict(data.get("config") or {})),
            branch=BranchConfig.from_dict(branch) if branch is not None else None,
        )

    def to_dict(self) -> MiddlewareNodeDict:
        result: dict[str, Any] = {
            "id": self.id,
            "type": str(self.type),
            "order": self.order,
            "config": copy.deepcopy(self.config),
        }
        if self.branch is not None:
            result["branch"] = self.branch.to_dict()
        return result  # type: ignore[return-value]


@dataclass
class Pipeline:
    """Top level pipeline document.

    The editor operations below keep ``order`` contiguous (0..n-1) after
    every structural change, the same way a drag-and-drop editor renumbers
    its cards.
    """

    id: str
    name: str
    middlewares: list[MiddlewareNode] = field(default_factory=list)

    @classmethod
    def create(cls, name: str = "My Pipeline", pipeline_id: str | None = None) -> "Pipeline":
        """Create an empty pipeline with a generated id."""
        return cls(id=pipeline_id or str(uuid.uuid4()), name=name)

    @classmethod
    def from_dict(cls, data: PipelineDict) -> "Pipeline":
        """Build pipeline objects from an already shape-checked document."""
        return cls(
            id=data["id"],
            name=data["name"],
            middlewares=[MiddlewareNode.from_dict(node) for node in data["middlewares"]],
        )

    def to_dict(self) -> PipelineDict:
        return {
            "id": self.id,
            "name": self.name,
            "middlewares": [node.to_dict() for node in self.middlewares],
        }

    def copy(self) -> "Pipeline":
        return Pipeline.from_dict(self.to_dict())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.middlewares)

    @property
    def is_empty(self) -> bool:
        return not self.middlewares

    def sorted_middlewares(self) -> list[MiddlewareNode]:
        """Top level nodes sorted by ``order``; ties keep list position."""
        return sorted(self.middlewares, key=lambda node: node.order)

    def get_middleware(self, middleware_id: str) -> MiddlewareNode | None:
        """Find a top level node by id."""
        for node in self.middlewares:
            if node.id == middleware_id:
                return node
        return None

    def find_middleware(self, middleware_id: str) -> MiddlewareNode | None:
        """Find a node by id anywhere in the tree, branch arms included."""
        for node in self.walk():
            if node.id == middleware_id:
                return node
        return None

    def index_of(self, middleware_id: str) -> int:
        """Position of a top level node in execution (sorted) order, or -1."""
        for index, node in enumerate(self.sorted_middlewares()):
            if node.id == middleware_id:
                return index
        return -1

    def first_index_of(self, kind: MiddlewareKind) -> int:
        """Sorted position of the first top level node of ``kind``, or -1."""
        for index, node in enumerate(self.sorted_middlewares()):
            if node.type == kind:
                return index
        return -1

    def walk(self) -> Iterator[MiddlewareNode]:
        """Yield every reachable node once, depth first, in sorted order.

        Each node object is yielded at most once, so aliased or cyclic
        trees terminate.
        """
        seen: set[int] = set()
        stack = list(reversed(self.sorted_middlewares()))
        while stack:
            node = stack.pop()
            if id(node) in seen:
                continue
            seen.add(id(node))
            yield node
            if node.branch is not None:
                stack.extend(reversed(node.branch.children()))

    # ------------------------------------------------------------------
    # Editor operations
    # ------------------------------------------------------------------

    def _require(self, middleware_id: str) -> MiddlewareNode:
        node = self.get_middleware(middleware_id)
        if node is None:
            raise MiddlewareNotFoundError(middleware_id, {"pipeline": self.id})
        return node

    def _renumber(self, nodes: list[MiddlewareNode]) -> None:
        for index, node in enumerate(nodes):
            node.order = index
        self.middlewares = nodes

    def add_middleware(
        self,
        kind: MiddlewareKind | str,
        config: MiddlewareConfig | None = None,
        middleware_id: str | None = None,
    ) -> MiddlewareNode:
        """Append a node, defaulting its config from the kind's handler.

        Raises:
            UnknownMiddlewareKindError: If ``kind`` has no handler
        """
        from .registry import get_handler

        handler = get_handler(kind)
        node = MiddlewareNode(
            id=middleware_id or str(uuid.uuid4()),
            type=handler.kind,
            order=len(self.middlewares),
            config=copy.deepcopy(config) if config is not None else handler.default_config(),
        )
        self.middlewares.append(node)
        logger.debug("Added %s node %s to pipeline %s", node.type, node.id, self.id)
        return node

    def remove_middleware(self, middleware_id: str) -> MiddlewareNode:
        """Remove a top level node and renumber the remaining ones."""
        node = self._require(middleware_id)
        self._renumber([n for n in self.sorted_middlewares() if n is not node])
        return node

    def move_middleware(self, middleware_id: str, index: int) -> None:
        """Move a top level node to ``index`` in execution order."""
        node = self._require(middleware_id)
        nodes = [n for n in self.sorted_middlewares() if n is not node]
        index = max(0, min(index, len(nodes)))
        nodes.insert(index, node)
        self._renumber(nodes)

    def update_middleware(
        self,
        middleware_id: str,
        config: MiddlewareConfig | None = None,
        branch: BranchConfig | None = None,
    ) -> MiddlewareNode:
        """Replace a top level node's configuration and/or branch."""
        node = self._require(middleware_id)
        if config is not None:
            node.config = copy.deepcopy(config)
        if branch is not None:
            node.branch = branch
        return node

    def attach_branch(self, middleware_id: str, branch: BranchConfig) -> MiddlewareNode:
        """Attach (or replace) the branch of a top level node."""
        node = self._require(middleware_id)
        node.branch = branch
        return node

    def detach_branch(self, middleware_id: str) -> BranchConfig | None:
        """Remove and return the branch of a top level node."""
        node = self._require(middleware_id)
        branch, node.branch = node.branch, None
        return branch

    def clear(self) -> None:
        self.middlewares = []
