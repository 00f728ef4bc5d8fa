"""Pipeline document schema and I/O."""

from .loader import (
    FileReader,
    export_to_json,
    import_from_json,
    load_pipeline,
    parse_pipeline,
    save_pipeline,
)
from .models import BranchConditionModel, BranchConfigModel, MiddlewareNodeModel, PipelineModel

__all__ = [
    "FileReader",
    "export_to_json",
    "import_from_json",
    "load_pipeline",
    "parse_pipeline",
    "save_pipeline",
    "PipelineModel",
    "MiddlewareNodeModel",
    "BranchConfigModel",
    "BranchConditionModel",
]
