"""Handler registry for middleflow.

Maps every :class:`MiddlewareKind` to its handler. The default registry is
built once at import time and is read-only afterwards, so it can be shared
freely between simulations.
"""

import logging

from .common.exceptions import UnknownMiddlewareKindError
from .handlers import (
    AuthenticationHandler,
    AuthorizationHandler,
    CompressionHandler,
    CorsHandler,
    CustomHandler,
    ExceptionHandlingHandler,
    HttpsHandler,
    MinimalApiEndpointHandler,
    MiddlewareHandler,
    RateLimitingHandler,
    RoutingHandler,
    StaticFilesHandler,
)
from .models.enums import HandlerCategory, MiddlewareKind

logger = logging.getLogger(__name__)

# Registration order is also the order service registrations are emitted in.
DEFAULT_HANDLERS: tuple[type[MiddlewareHandler], ...] = (
    AuthenticationHandler,
    AuthorizationHandler,
    CorsHandler,
    RateLimitingHandler,
    CompressionHandler,
    ExceptionHandlingHandler,
    RoutingHandler,
    StaticFilesHandler,
    MinimalApiEndpointHandler,
    HttpsHandler,
    CustomHandler,
)


class HandlerRegistry:
    """
    Dispatch table from middleware kind to handler instance.

    Each kind has exactly one handler. Looking up a kind without a handler
    raises :class:`UnknownMiddlewareKindError`.
    """

    def __init__(self, handlers: list[MiddlewareHandler] | None = None):
        """Initialize registry with the given handlers (none by default)."""
        self._handlers: dict[MiddlewareKind, MiddlewareHandler] = {}
        for handler in handlers or []:
            self.register(handler)

    @classmethod
    def default(cls) -> "HandlerRegistry":
        """Create a registry holding one handler for every built-in kind."""
        return cls([handler_cls() for handler_cls in DEFAULT_HANDLERS])

    def register(self, handler: MiddlewareHandler) -> None:
        """
        Register a handler for its kind.

        Args:
            handler: Handler instance; its ``kind`` must be a MiddlewareKind

        Raises:
            ValueError: If a handler for the kind is already registered
        """
        if handler.kind in self._handlers:
            raise ValueError(f"Handler for '{handler.kind}' is already registered")
        self._handlers[handler.kind] = handler

    def get(self, kind: MiddlewareKind | str) -> MiddlewareHandler:
        """
        Get the handler for a middleware kind.

        Args:
            kind: Kind enum member or its string tag

        Returns:
            The registered handler

        Raises:
            UnknownMiddlewareKindError: If no handler is registered for ``kind``
        """
        try:
            key = MiddlewareKind(kind)
        except ValueError as e:
            raise UnknownMiddlewareKindError(str(kind)) from e
        handler = self._handlers.get(key)
        if handler is None:
            logger.debug("Handler lookup failed for %s", kind)
            raise UnknownMiddlewareKindError(str(kind))
        return handler

    def __contains__(self, kind: object) -> bool:
        try:
            return MiddlewareKind(kind) in self._handlers
        except ValueError:
            return False

    def __iter__(self):
        return iter(self._handlers.values())

    def __len__(self) -> int:
        return len(self._handlers)

    def all(self) -> list[MiddlewareHandler]:
        return list(self._handlers.values())

    def by_category(self, category: HandlerCategory | str) -> list[MiddlewareHandler]:
        return [handler for handler in self._handlers.values() if handler.category == category]

    def kinds(self) -> list[MiddlewareKind]:
        return list(self._handlers)


# Global registry instance
_default_registry = HandlerRegistry.default()


def get_default_registry() -> HandlerRegistry:
    """Get the shared default handler registry."""
    return _default_registry


def get_handler(kind: MiddlewareKind | str) -> MiddlewareHandler:
    """Get a handler from the default registry."""
    return _default_registry.get(kind)
