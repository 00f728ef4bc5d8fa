"""Structural analysis of a pipeline's branch tree.

Handles tree-wide ownership checks:
- Circular branches (a node reachable from itself)
- Aliased nodes (one node object reachable from two places)
- Duplicate node ids
"""

from collections import defaultdict

from middleflow.models import IssueSeverity, IssueType, ValidationIssue
from middleflow.pipeline import MiddlewareNode, Pipeline

CIRCULAR_BRANCH = "Circular branch detected"
ALIASED_NODE = "Middleware node is referenced from more than one place"


class BranchGraphAnalyzer:
    """Walks ``branch.onTrue``/``branch.onFalse`` edges depth first.

    A node is "on the stack" while its subtree is being walked. Meeting a
    node that is on the stack (same object, or a copy carrying the same id)
    is a cycle; meeting an already finished node object is aliasing.

    Issues returned:
        - CIRCULAR_BRANCH
        - ALIASED_NODE
        - DUPLICATE_ID
    """

    def __init__(self, pipeline: Pipeline):
        """Initialize with the pipeline to inspect."""
        self.pipeline = pipeline

    def get_issues(self) -> list[ValidationIssue]:
        """Run all structural checks."""
        self._issues: list[ValidationIssue] = []
        self._reported: set[tuple[str, str]] = set()
        self._visited: dict[int, MiddlewareNode] = {}

        for node in self.pipeline.sorted_middlewares():
            self._visit(node, stack_objects=set(), stack_ids=set())

        self._check_duplicate_ids()
        return self._issues

    # =========================================================================
    # Traversal
    # =========================================================================

    def _visit(self, node: MiddlewareNode, stack_objects: set[int], stack_ids: set[str]) -> None:
        key = id(node)
        if key in stack_objects or node.id in stack_ids:
            self._error(node.id, CIRCULAR_BRANCH, IssueType.CIRCULAR_BRANCH)
            return
        if key in self._visited:
            self._error(node.id, ALIASED_NODE, IssueType.ALIASED_NODE)
            return

        self._visited[key] = node
        if node.branch is None:
            return

        stack_objects.add(key)
        stack_ids.add(node.id)
        for child in node.branch.children():
            self._visit(child, stack_objects, stack_ids)
        stack_objects.discard(key)
        stack_ids.discard(node.id)

    def _check_duplicate_ids(self) -> None:
        nodes_by_id: dict[str, list[MiddlewareNode]] = defaultdict(list)
        for node in self._visited.values():
            nodes_by_id[node.id].append(node)

        for middleware_id, nodes in nodes_by_id.items():
            if len(nodes) > 1:
                self._error(
                    middleware_id,
                    f"Duplicate middleware id '{middleware_id}' is used by {len(nodes)} nodes",
                    IssueType.DUPLICATE_ID,
                )

    def _error(self, middleware_id: str, message: str, issue_type: IssueType) -> None:
        # One issue per (node, message)
        if (middleware_id, message) in self._reported:
            return
        self._reported.add((middleware_id, message))
        self._issues.append(ValidationIssue(
            severity=IssueSeverity.ERROR,
            middleware_id=middleware_id,
            message=message,
            issue_type=issue_type,
        ))
