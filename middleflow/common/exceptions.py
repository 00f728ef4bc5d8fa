"""Common exceptions for the middleflow framework.

This module defines the exception types used throughout middleflow. Only
structural problems are raised: malformed documents, unknown middleware
kinds and misuse of the editor or simulator API. Pipeline validity issues
and simulated HTTP failures are returned as values.
"""

from typing import Any


class MiddleflowError(Exception):
    """Base exception for all middleflow-related errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        """Initialize exception with message and optional context."""
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value!r}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class PipelineDocumentError(MiddleflowError):
    """Raised when a pipeline document does not have the required shape."""

    def __init__(
        self,
        message: str,
        errors: list[str] | None = None,
        context: dict[str, Any] | None = None
    ):
        """Initialize document error with the individual shape violations."""
        super().__init__(message, context)
        self.errors = errors or []

    def __str__(self) -> str:
        base = super().__str__()
        if not self.errors:
            return base
        bullet_list = "\n".join(f"  - {error}" for error in self.errors)
        return f"{base}\n{bullet_list}"


class UnknownMiddlewareKindError(MiddleflowError):
    """Raised when no handler is registered for a middleware kind."""

    def __init__(self, kind: str, context: dict[str, Any] | None = None):
        """Initialize with the offending kind."""
        super().__init__(f"No handler registered for type: {kind}", context)
        self.kind = kind


class MiddlewareNotFoundError(MiddleflowError):
    """Raised when an editor operation targets a node id that does not exist."""

    def __init__(self, middleware_id: str, context: dict[str, Any] | None = None):
        """Initialize with the missing node id."""
        super().__init__(f"Middleware '{middleware_id}' not found in pipeline", context)
        self.middleware_id = middleware_id


class SimulationError(MiddleflowError):
    """Raised when a simulation cannot be carried out."""

    def __init__(
        self,
        message: str,
        middleware_id: str | None = None,
        context: dict[str, Any] | None = None
    ):
        """Initialize simulation error with the node being simulated."""
        super().__init__(message, context)
        self.middleware_id = middleware_id


class LoadError(MiddleflowError):
    """Raised when a pipeline file cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        context: dict[str, Any] | None = None
    ):
        """Initialize loader error with the file involved."""
        super().__init__(message, context)
        self.file_path = file_path


class OutputWriteError(MiddleflowError):
    """Raised when generated output cannot be written to disk."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        context: dict[str, Any] | None = None
    ):
        """Initialize write error with the destination file."""
        super().__init__(message, context)
        self.file_path = file_path


class ConfigurationError(MiddleflowError):
    """Raised when middleflow settings are invalid."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        context: dict[str, Any] | None = None
    ):
        """Initialize configuration error with the offending key."""
        super().__init__(message, context)
        self.config_key = config_key


# Exception hierarchy for type checking
__all__ = [
    'MiddleflowError',
    'PipelineDocumentError',
    'UnknownMiddlewareKindError',
    'MiddlewareNotFoundError',
    'SimulationError',
    'LoadError',
    'OutputWriteError',
    'ConfigurationError',
]
