"""Tests for pipeline objects and editor operations."""

import pytest

from middleflow import (
    BranchCondition,
    BranchConfig,
    MiddlewareKind,
    MiddlewareNode,
    MiddlewareNotFoundError,
    Pipeline,
    UnknownMiddlewareKindError,
)
from middleflow.registry import get_handler
from tests.fixtures.pipelines import branch, node, pipeline


class TestPipelineCreation:
    def test_create(self):
        created = Pipeline.create("Orders API")

        assert created.name == "Orders API"
        assert created.id
        assert created.middlewares == []
        assert created.is_empty

    def test_create_with_id(self):
        assert Pipeline.create("x", pipeline_id="fixed").id == "fixed"

    def test_unknown_node_type(self):
        with pytest.raises(UnknownMiddlewareKindError):
            MiddlewareNode(id="n", type="Firewall")

    def test_node_type_is_coerced(self):
        assert MiddlewareNode(id="n", type="CORS").type is MiddlewareKind.CORS


class TestEditorOperations:
    def test_add_uses_default_config(self):
        subject = Pipeline.create()

        added = subject.add_middleware(MiddlewareKind.RATE_LIMITING)

        assert added.order == 0
        assert added.config == get_handler(MiddlewareKind.RATE_LIMITING).default_config()

    def test_add_appends_in_order(self):
        subject = Pipeline.create()

        subject.add_middleware("HTTPS", middleware_id="a")
        second = subject.add_middleware("Routing", {"routes": ["/api"]}, middleware_id="b")

        assert second.order == 1
        assert second.config == {"routes": ["/api"]}

    def test_add_copies_config(self):
        config = {"routes": ["/api"]}
        subject = Pipeline.create()

        added = subject.add_middleware("Routing", config)
        config["routes"].append("/other")

        assert added.config == {"routes": ["/api"]}

    def test_add_unknown_kind(self):
        with pytest.raises(UnknownMiddlewareKindError):
            Pipeline.create().add_middleware("Firewall")

    def test_remove_renumbers(self):
        subject = pipeline(
            node(MiddlewareKind.HTTPS, node_id="a"),
            node(MiddlewareKind.ROUTING, node_id="b"),
            node(MiddlewareKind.CUSTOM, node_id="c"),
        )

        removed = subject.remove_middleware("b")

        assert removed.id == "b"
        assert [(n.id, n.order) for n in subject.middlewares] == [("a", 0), ("c", 1)]

    def test_move(self):
        subject = pipeline(
            node(MiddlewareKind.HTTPS, node_id="a"),
            node(MiddlewareKind.ROUTING, node_id="b"),
            node(MiddlewareKind.CUSTOM, node_id="c"),
        )

        subject.move_middleware("c", 0)

        assert [(n.id, n.order) for n in subject.sorted_middlewares()] == [("c", 0), ("a", 1), ("b", 2)]

    def test_move_clamps_index(self):
        subject = pipeline(node(MiddlewareKind.HTTPS, node_id="a"), node(MiddlewareKind.ROUTING, node_id="b"))

        subject.move_middleware("a", 99)

        assert [n.id for n in subject.sorted_middlewares()] == ["b", "a"]

    def test_update(self):
        subject = pipeline(node(MiddlewareKind.ROUTING, node_id="r"))
        new_branch = branch("authenticated", on_true=[node(MiddlewareKind.CUSTOM)])

        subject.update_middleware("r", config={"routes": []}, branch=new_branch)

        updated = subject.get_middleware("r")
        assert updated.config == {"routes": []}
        assert updated.branch is new_branch

    def test_update_keeps_unspecified_parts(self):
        subject = pipeline(node(MiddlewareKind.ROUTING, {"routes": ["/a"]}, node_id="r"))

        subject.update_middleware("r")

        assert subject.get_middleware("r").config == {"routes": ["/a"]}

    def test_missing_node(self):
        subject = pipeline()

        with pytest.raises(MiddlewareNotFoundError, match="'ghost' not found"):
            subject.remove_middleware("ghost")
        with pytest.raises(MiddlewareNotFoundError):
            subject.update_middleware("ghost", config={})

    def test_attach_and_detach_branch(self):
        subject = pipeline(node(MiddlewareKind.HTTPS, node_id="h"))
        attached = BranchConfig(condition=BranchCondition(type="method", value="POST"))

        subject.attach_branch("h", attached)
        detached = subject.detach_branch("h")

        assert detached is attached
        assert subject.get_middleware("h").branch is None

    def test_clear(self, api_pipeline):
        api_pipeline.clear()

        assert api_pipeline.is_empty


class TestQueries:
    def test_sorted_middlewares_is_stable(self):
        first = node(MiddlewareKind.HTTPS, node_id="first", order=1)
        second = node(MiddlewareKind.ROUTING, node_id="second", order=1)
        zero = node(MiddlewareKind.CUSTOM, node_id="zero", order=0)
        subject = pipeline(first, second, zero, renumber=False)

        assert [n.id for n in subject.sorted_middlewares()] == ["zero", "first", "second"]

    def test_find_nested(self):
        nested = node(MiddlewareKind.CUSTOM, node_id="nested")
        subject = pipeline(node(MiddlewareKind.HTTPS, branch=branch("authenticated", on_false=[nested])))

        assert subject.find_middleware("nested") is nested
        assert subject.get_middleware("nested") is None

    def test_walk_visits_each_node_once(self):
        shared = node(MiddlewareKind.CUSTOM, node_id="shared")
        loop = node(MiddlewareKind.HTTPS, node_id="loop")
        loop.branch = branch("authenticated", on_true=[shared, loop], on_false=[shared])

        assert [n.id for n in pipeline(loop).walk()] == ["loop", "shared"]

    def test_walk_is_depth_first(self):
        inner = node(MiddlewareKind.CUSTOM, node_id="inner")
        outer = node(MiddlewareKind.HTTPS, node_id="outer", branch=branch("authenticated", on_true=[inner]))
        subject = pipeline(outer, node(MiddlewareKind.ROUTING, node_id="after"))

        assert [n.id for n in subject.walk()] == ["outer", "inner", "after"]

    def test_index_queries(self, api_pipeline):
        assert api_pipeline.index_of("authz") == 2
        assert api_pipeline.index_of("missing") == -1
        assert api_pipeline.first_index_of(MiddlewareKind.AUTHENTICATION) == 1
        assert api_pipeline.first_index_of(MiddlewareKind.CORS) == -1

    def test_copy_is_independent(self, api_pipeline):
        copied = api_pipeline.copy()
        copied.get_middleware("authz").config["policies"].append("ops")

        assert api_pipeline.get_middleware("authz").config["policies"] == ["admin"]
        assert copied != api_pipeline
