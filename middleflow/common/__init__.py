"""Shared utilities for middleflow."""

from .exceptions import (
    ConfigurationError,
    LoadError,
    MiddleflowError,
    MiddlewareNotFoundError,
    OutputWriteError,
    PipelineDocumentError,
    SimulationError,
    UnknownMiddlewareKindError,
)

__all__ = [
    "ConfigurationError",
    "LoadError",
    "MiddleflowError",
    "MiddlewareNotFoundError",
    "OutputWriteError",
    "PipelineDocumentError",
    "SimulationError",
    "UnknownMiddlewareKindError",
]
