"""Pydantic models describing the pipeline document shape.

These models only check shape; pipeline objects are built from the
original document afterwards so that every key the author wrote survives
a round trip. Node ``config`` bags are free-form because each handler
defaults its own missing keys.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from middleflow.models.enums import MiddlewareKind


class BaseDocumentModel(BaseModel):
    """Base model with common configuration for all document models."""

    model_config = ConfigDict(
        extra="forbid",  # Unknown structural keys are document errors
        frozen=True,
    )


class BranchConditionModel(BaseDocumentModel):
    """Branch condition; unknown types and operators evaluate to false at runtime."""

    type: StrictStr = Field(description="header, method, path, claim or authenticated")
    operator: StrictStr = Field(default="==", description="Comparison operator")
    key: StrictStr | None = Field(default=None, description="Header or claim name")
    value: StrictStr | None = Field(default=None, description="Operand to compare against")


class BranchConfigModel(BaseDocumentModel):
    condition: BranchConditionModel
    on_true: list["MiddlewareNodeModel"] | None = Field(default=None, alias="onTrue")
    on_false: list["MiddlewareNodeModel"] | None = Field(default=None, alias="onFalse")


class MiddlewareNodeModel(BaseDocumentModel):
    """One middleware node and its optional branch."""

    id: StrictStr = Field(min_length=1)
    type: StrictStr
    order: StrictInt
    config: dict[str, Any] = Field(default_factory=dict)
    branch: BranchConfigModel | None = None

    @field_validator("type")
    @classmethod
    def validate_kind(cls, value: str) -> str:
        known = [kind.value for kind in MiddlewareKind]
        if value not in known:
            raise ValueError(f"Unknown middleware type '{value}'. Expected one of: {', '.join(known)}")
        return value


class PipelineModel(BaseDocumentModel):
    """Top level pipeline document: ``id``, ``name`` and ``middlewares`` are required."""

    id: StrictStr
    name: StrictStr
    middlewares: list[MiddlewareNodeModel]


BranchConfigModel.model_rebuild()
