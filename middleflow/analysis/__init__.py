"""Pipeline analysis for middleflow."""

from .analyzer import PipelineAnalyzer, validate_pipeline
from .graph import BranchGraphAnalyzer
from .ordering import EndpointOrderAnalyzer

__all__ = [
    "PipelineAnalyzer",
    "BranchGraphAnalyzer",
    "EndpointOrderAnalyzer",
    "validate_pipeline",
]
