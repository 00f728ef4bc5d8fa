"""Ordering analysis for endpoint registrations.

``app.MapXxx()`` only registers an endpoint; the endpoint runs after every
``app.Use()`` middleware. Nodes declared after the first endpoint therefore
run earlier than their code position suggests.
"""

from middleflow.models import IssueSeverity, IssueType, ValidationIssue
from middleflow.pipeline import Pipeline
from middleflow.registry import HandlerRegistry


class EndpointOrderAnalyzer:
    """Flags every non-endpoint node positioned after the first endpoint.

    Issues returned:
        - EXECUTION_ORDER (warning, one per displaced node)
    """

    def __init__(self, pipeline: Pipeline, registry: HandlerRegistry):
        self.pipeline = pipeline
        self.registry = registry

    def get_issues(self) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        ordered = self.pipeline.sorted_middlewares()

        for index, node in enumerate(ordered):
            handler = self.registry.get(node.type)
            if not handler.is_endpoint:
                continue

            endpoint = handler.summarize(node.config)
            for later in ordered[index + 1:]:
                if self.registry.get(later.type).is_endpoint:
                    continue
                issues.append(ValidationIssue(
                    severity=IssueSeverity.WARNING,
                    middleware_id=later.id,
                    message=(
                        f"Code order ≠ Execution order: This middleware appears after the endpoint "
                        f"({endpoint}) in code, but will actually execute BEFORE the endpoint handler "
                        f"runs. app.MapXxx() only registers endpoints - all app.Use() middleware runs "
                        f"before endpoint execution regardless of code position."
                    ),
                    issue_type=IssueType.EXECUTION_ORDER,
                    details={"endpointId": node.id},
                ))
            # Only the first endpoint matters
            break

        return issues
