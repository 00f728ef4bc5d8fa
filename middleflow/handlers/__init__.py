"""Middleware handlers, one per middleware kind."""

from .authentication import AuthenticationHandler
from .authorization import AuthorizationHandler
from .base import (
    InfrastructureMiddlewareHandler,
    MiddlewareHandler,
    PerformanceMiddlewareHandler,
    RoutingMiddlewareHandler,
    SecurityMiddlewareHandler,
)
from .compression import CompressionHandler
from .cors import CorsHandler
from .custom import CustomHandler
from .endpoint import MinimalApiEndpoint, MinimalApiEndpointHandler, extract_minimal_api_endpoints
from .exception_handling import ExceptionHandlingHandler
from .https import HttpsHandler
from .rate_limiting import RateLimitingHandler
from .routing import RoutingHandler
from .static_files import StaticFilesHandler

__all__ = [
    # Bases
    "MiddlewareHandler",
    "SecurityMiddlewareHandler",
    "RoutingMiddlewareHandler",
    "PerformanceMiddlewareHandler",
    "InfrastructureMiddlewareHandler",
    # Handlers
    "AuthenticationHandler",
    "AuthorizationHandler",
    "CompressionHandler",
    "CorsHandler",
    "CustomHandler",
    "ExceptionHandlingHandler",
    "HttpsHandler",
    "MinimalApiEndpointHandler",
    "RateLimitingHandler",
    "RoutingHandler",
    "StaticFilesHandler",
    # Endpoints
    "MinimalApiEndpoint",
    "extract_minimal_api_endpoints",
]
