"""Main PipelineAnalyzer for middleflow pipeline validation.

Orchestrates sub-analyzers to provide complete pipeline validation:
- BranchGraphAnalyzer: tree structure (cycles, aliasing, duplicate ids)
- EndpointOrderAnalyzer: code order vs execution order around endpoints
- Handler validation: each node's handler ``validate`` contribution

Usage:
    from middleflow.analysis import validate_pipeline

    result = validate_pipeline(pipeline)
    if not result.valid:
        ...
"""

import logging

from middleflow.models import ValidationIssue, ValidationResult
from middleflow.pipeline import Pipeline
from middleflow.registry import HandlerRegistry, get_default_registry

from .graph import BranchGraphAnalyzer
from .ordering import EndpointOrderAnalyzer

logger = logging.getLogger(__name__)


class PipelineAnalyzer:
    """Unified pipeline analyzer orchestrating scope-specific sub-analyzers.

    Attributes:
        pipeline: Pipeline under analysis
        registry: Handler registry used for per-kind validation
    """

    def __init__(self, pipeline: Pipeline, registry: HandlerRegistry | None = None):
        """Initialize PipelineAnalyzer.

        Args:
            pipeline: Pipeline to analyze
            registry: Handler registry, the shared default when omitted
        """
        self.pipeline = pipeline
        self.registry = registry or get_default_registry()

    def get_issues(self) -> list[ValidationIssue]:
        """Run all analysis checks.

        Returns:
            List of all detected issues, errors and warnings mixed
        """
        if self.pipeline.is_empty:
            return []

        issues: list[ValidationIssue] = []

        # Phase 1: Tree structure
        issues.extend(BranchGraphAnalyzer(self.pipeline).get_issues())

        # Phase 2: Endpoint execution order
        issues.extend(EndpointOrderAnalyzer(self.pipeline, self.registry).get_issues())

        # Phase 3: Handler contributions, once per reachable node
        for node in self.pipeline.walk():
            handler = self.registry.get(node.type)
            issues.extend(handler.validate(node.config, self.pipeline, node.id))

        logger.debug("Pipeline %s analysis found %d issue(s)", self.pipeline.id, len(issues))
        return issues

    def validate(self) -> ValidationResult:
        return ValidationResult.from_issues(self.get_issues())


def validate_pipeline(pipeline: Pipeline, registry: HandlerRegistry | None = None) -> ValidationResult:
    """Validate a pipeline; ``valid`` is true iff no errors were found."""
    return PipelineAnalyzer(pipeline, registry).validate()
