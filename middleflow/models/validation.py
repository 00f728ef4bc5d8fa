"""
Validation models for middleflow pipelines.

Issues are plain data: validation never raises for a structurally odd
pipeline, it reports.
"""

from dataclasses import dataclass, field
from typing import Any

from .enums import IssueSeverity, IssueType


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem found in a pipeline."""

    severity: IssueSeverity
    middleware_id: str
    message: str
    issue_type: IssueType = IssueType.CONFIGURATION
    details: dict = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return self.severity == IssueSeverity.ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": str(self.severity),
            "middlewareId": self.middleware_id,
            "message": self.message,
        }


@dataclass(frozen=True)
class ValidationResult:
    """Aggregate validation outcome; ``valid`` ignores warnings."""

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def issues(self) -> list[ValidationIssue]:
        return [*self.errors, *self.warnings]

    @classmethod
    def from_issues(cls, issues: list[ValidationIssue]) -> "ValidationResult":
        return cls(
            errors=[issue for issue in issues if issue.is_error],
            warnings=[issue for issue in issues if not issue.is_error],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [issue.to_dict() for issue in self.errors],
            "warnings": [issue.to_dict() for issue in self.warnings],
        }
