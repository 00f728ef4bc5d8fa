"""Tests for the handler registry."""

import pytest

from middleflow import HandlerRegistry, MiddlewareKind, UnknownMiddlewareKindError, get_default_registry, get_handler
from middleflow.handlers import CustomHandler, RoutingHandler
from middleflow.models import HandlerCategory


class TestDefaultRegistry:
    def test_every_kind_has_a_handler(self):
        registry = get_default_registry()

        for kind in MiddlewareKind:
            assert registry.get(kind).kind == kind

    def test_lookup_by_string_tag(self):
        assert get_handler("RateLimiting").kind == MiddlewareKind.RATE_LIMITING

    def test_shared_instance(self):
        """The helper reads from the shared default registry."""
        assert get_handler(MiddlewareKind.CORS) is get_default_registry().get("CORS")

    def test_unknown_kind(self):
        with pytest.raises(UnknownMiddlewareKindError) as exc_info:
            get_handler("Bogus")

        assert exc_info.value.message == "No handler registered for type: Bogus"

    def test_iteration_follows_registration_order(self):
        kinds = get_default_registry().kinds()

        assert kinds[:3] == [MiddlewareKind.AUTHENTICATION, MiddlewareKind.AUTHORIZATION, MiddlewareKind.CORS]
        assert len(kinds) == len(MiddlewareKind)

    def test_membership(self):
        registry = get_default_registry()

        assert "CORS" in registry
        assert MiddlewareKind.HTTPS in registry
        assert "Nope" not in registry

    def test_by_category(self):
        kinds = {handler.kind for handler in get_default_registry().by_category(HandlerCategory.SECURITY)}

        assert kinds == {MiddlewareKind.AUTHENTICATION, MiddlewareKind.AUTHORIZATION, MiddlewareKind.CORS}


class TestCustomRegistry:
    def test_empty_registry_rejects_lookups(self):
        registry = HandlerRegistry()

        with pytest.raises(UnknownMiddlewareKindError):
            registry.get(MiddlewareKind.ROUTING)

    def test_register_and_get(self):
        registry = HandlerRegistry([RoutingHandler()])

        assert len(registry) == 1
        assert isinstance(registry.get("Routing"), RoutingHandler)

    def test_duplicate_registration(self):
        registry = HandlerRegistry([CustomHandler()])

        with pytest.raises(ValueError, match="already registered"):
            registry.register(CustomHandler())
