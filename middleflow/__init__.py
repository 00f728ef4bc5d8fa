"""
middleflow: an interpreter and validator for web middleware pipelines.

middleflow models an ASP.NET Core style request pipeline as data, then
validates its structure, simulates requests flowing through it and renders
it as C# code. Every middleware kind is backed by one handler that knows
its defaults, its simulated behaviour and its generated code.

Core Components:
    - Pipeline / MiddlewareNode / BranchConfig: the pipeline document
    - HandlerRegistry: middleware kind to handler dispatch
    - PipelineSimulator: step-by-step request simulation
    - PipelineAnalyzer: cycle, aliasing and ordering validation
    - CSharpCodeGenerator: Program.cs rendering

Example Usage:
    ```python
    from middleflow import load_pipeline, simulate_pipeline, validate_pipeline

    pipeline = load_pipeline("path/to/pipeline.json")

    result = validate_pipeline(pipeline)
    print(f"Valid: {result.valid}")

    simulation = simulate_pipeline(pipeline, {"method": "GET", "path": "/api/users"})
    print(f"Status: {simulation.response.status_code}")
    ```
"""

__version__ = "0.1.0"

# Public API exports - Core functionality
from .analysis import PipelineAnalyzer, validate_pipeline
from .codegen import CSharpCodeGenerator, generate_csharp_code
from .common.exceptions import (
    LoadError,
    MiddleflowError,
    MiddlewareNotFoundError,
    OutputWriteError,
    PipelineDocumentError,
    SimulationError,
    UnknownMiddlewareKindError,
)
from .condition import describe_condition, evaluate_condition, render_condition
from .config import MiddleflowConfig, get_config
from .handlers import MiddlewareHandler, MinimalApiEndpoint, extract_minimal_api_endpoints
from .models import (
    ConditionOperator,
    ConditionType,
    MiddlewareKind,
    SimulationRequest,
    SimulationResult,
    SimulationStep,
    StepDecision,
    ValidationIssue,
    ValidationResult,
)
from .pipeline import BranchCondition, BranchConfig, MiddlewareNode, Pipeline
from .registry import HandlerRegistry, get_default_registry, get_handler
from .schema import export_to_json, import_from_json, load_pipeline, save_pipeline
from .simulator import PipelineSimulator, simulate_pipeline

__all__ = [
    # Pipeline document
    "Pipeline",
    "MiddlewareNode",
    "BranchConfig",
    "BranchCondition",
    "MiddlewareKind",
    "ConditionType",
    "ConditionOperator",
    # Engines
    "PipelineSimulator",
    "simulate_pipeline",
    "PipelineAnalyzer",
    "validate_pipeline",
    "CSharpCodeGenerator",
    "generate_csharp_code",
    "evaluate_condition",
    "render_condition",
    "describe_condition",
    # Handlers
    "MiddlewareHandler",
    "HandlerRegistry",
    "get_default_registry",
    "get_handler",
    "MinimalApiEndpoint",
    "extract_minimal_api_endpoints",
    # Results
    "SimulationRequest",
    "SimulationResult",
    "SimulationStep",
    "StepDecision",
    "ValidationIssue",
    "ValidationResult",
    # Document I/O
    "export_to_json",
    "import_from_json",
    "load_pipeline",
    "save_pipeline",
    # Configuration and errors
    "MiddleflowConfig",
    "get_config",
    "MiddleflowError",
    "PipelineDocumentError",
    "UnknownMiddlewareKindError",
    "MiddlewareNotFoundError",
    "OutputWriteError",
    "SimulationError",
    "LoadError",
    "__version__",
]
