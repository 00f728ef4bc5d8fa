"""Tests for branch condition evaluation and rendering."""

import pytest

from middleflow import BranchCondition, SimulationRequest, describe_condition, evaluate_condition, render_condition
from middleflow.models import SimulationContext


def make_request(**kwargs) -> SimulationRequest:
    defaults = {"method": "GET", "path": "/api/users"}
    defaults.update(kwargs)
    return SimulationRequest(**defaults)


class TestHeaderConditions:
    """Header conditions compare a header value, looked up case-insensitively."""

    @pytest.mark.parametrize(
        "operator,value,expected",
        [
            ("==", "v2", True),
            ("==", "v1", False),
            ("!=", "v1", True),
            ("contains", "2", True),
            ("startsWith", "v", True),
            ("endsWith", "2", True),
            ("endsWith", "v", False),
        ],
    )
    def test_operators(self, operator, value, expected):
        """Every string operator applies to header values."""
        condition = BranchCondition(type="header", operator=operator, key="X-Api", value=value)

        assert evaluate_condition(condition, make_request(headers={"X-Api": "v2"})) is expected

    def test_lookup_is_case_insensitive(self):
        """Header names match regardless of case."""
        condition = BranchCondition(type="header", operator="==", key="X-API", value="v2")

        assert evaluate_condition(condition, make_request(headers={"x-api": "v2"})) is True

    def test_missing_header_compares_as_empty(self):
        """An absent header behaves as an empty string."""
        equals = BranchCondition(type="header", operator="==", key="X-Api", value="v2")
        not_equals = BranchCondition(type="header", operator="!=", key="X-Api", value="v2")

        assert evaluate_condition(equals, make_request()) is False
        assert evaluate_condition(not_equals, make_request()) is True

    def test_header_without_key_is_false(self):
        """A header condition with no key never holds, whatever the operator."""
        condition = BranchCondition(type="header", operator="!=", value="anything")

        assert evaluate_condition(condition, make_request(headers={"X-Api": "v2"})) is False


class TestMethodAndPathConditions:
    def test_method_equality(self):
        condition = BranchCondition(type="method", operator="==", value="POST")

        assert evaluate_condition(condition, make_request(method="POST")) is True
        assert evaluate_condition(condition, make_request(method="GET")) is False

    def test_method_not_equals(self):
        condition = BranchCondition(type="method", operator="!=", value="POST")

        assert evaluate_condition(condition, make_request(method="GET")) is True

    def test_method_rejects_string_operators(self):
        """``startsWith`` on a method is unsupported and evaluates to false."""
        condition = BranchCondition(type="method", operator="startsWith", value="G")

        assert evaluate_condition(condition, make_request(method="GET")) is False

    @pytest.mark.parametrize(
        "operator,value,expected",
        [
            ("==", "/api/users", True),
            ("!=", "/api/users", False),
            ("startsWith", "/api", True),
            ("contains", "users", True),
            ("endsWith", "/users", True),
            ("startsWith", "/admin", False),
        ],
    )
    def test_path_operators(self, operator, value, expected):
        condition = BranchCondition(type="path", operator=operator, value=value)

        assert evaluate_condition(condition, make_request()) is expected


class TestClaimAndAuthenticatedConditions:
    def test_claim_equality(self):
        condition = BranchCondition(type="claim", operator="==", key="role", value="admin")

        assert evaluate_condition(condition, make_request(claims={"role": "admin"})) is True
        assert evaluate_condition(condition, make_request(claims={"role": "user"})) is False

    def test_missing_claim_compares_as_empty(self):
        condition = BranchCondition(type="claim", operator="!=", key="role", value="admin")

        assert evaluate_condition(condition, make_request()) is True

    def test_claim_string_operators(self):
        condition = BranchCondition(type="claim", operator="startsWith", key="scope", value="read")

        assert evaluate_condition(condition, make_request(claims={"scope": "read:users"})) is True

    def test_authenticated_ignores_operator_and_value(self):
        """``authenticated`` only looks at the request's authentication flag."""
        condition = BranchCondition(type="authenticated", operator="!=", value="nonsense")

        assert evaluate_condition(condition, make_request(is_authenticated=True)) is True
        assert evaluate_condition(condition, make_request(is_authenticated=False)) is False


class TestMalformedConditions:
    def test_unknown_type_is_false(self):
        condition = BranchCondition(type="cookie", operator="==", key="session", value="1")

        assert evaluate_condition(condition, make_request()) is False

    def test_unknown_operator_is_false(self):
        condition = BranchCondition(type="path", operator="matches", value="/api/users")

        assert evaluate_condition(condition, make_request()) is False

    def test_unknown_values_are_kept_verbatim(self):
        """Unrecognized tags survive so they can be written back unchanged."""
        condition = BranchCondition(type="cookie", operator="matches")

        assert condition.to_dict() == {"type": "cookie", "operator": "matches"}


class TestEvaluationSubjects:
    def test_accepts_serialized_condition(self):
        condition = {"type": "path", "operator": "startsWith", "value": "/api"}

        assert evaluate_condition(condition, make_request()) is True

    def test_accepts_simulation_context(self):
        """Contexts expose the same fields as requests."""
        context = SimulationContext.from_request(make_request(headers={"X-Api": "v2"}))
        condition = BranchCondition(type="header", key="x-api", value="v2")

        assert evaluate_condition(condition, context) is True

    def test_evaluation_does_not_mutate_request(self):
        request = make_request(headers={"X-Api": "v2"}, claims={"role": "admin"})
        snapshot = request.to_dict()

        for condition_type in ("header", "claim", "path", "method", "authenticated"):
            evaluate_condition(BranchCondition(type=condition_type, key="X-Api", value="v2"), request)

        assert request.to_dict() == snapshot


class TestRenderCondition:
    @pytest.mark.parametrize(
        "condition,expected",
        [
            (
                BranchCondition(type="header", operator="==", key="X-Api", value="v2"),
                'ctx.Request.Headers["X-Api"] == "v2"',
            ),
            (
                BranchCondition(type="header", operator="contains", key="Accept", value="json"),
                'ctx.Request.Headers["Accept"].ToString().Contains("json")',
            ),
            (
                BranchCondition(type="method", operator="!=", value="GET"),
                'ctx.Request.Method != "GET"',
            ),
            (
                BranchCondition(type="path", operator="startsWith", value="/api"),
                'ctx.Request.Path.StartsWithSegments("/api")',
            ),
            (
                BranchCondition(type="path", operator="endsWith", value=".json"),
                'ctx.Request.Path.Value?.EndsWith(".json") ?? false',
            ),
            (
                BranchCondition(type="claim", operator="==", key="role", value="admin"),
                'ctx.User.HasClaim("role", "admin")',
            ),
            (
                BranchCondition(type="claim", operator="!=", key="role", value="admin"),
                '!ctx.User.HasClaim("role", "admin")',
            ),
            (
                BranchCondition(type="authenticated"),
                "ctx.User.Identity?.IsAuthenticated ?? false",
            ),
        ],
    )
    def test_render(self, condition, expected):
        assert render_condition(condition) == expected

    def test_unrenderable_combination_is_true(self):
        """Combinations without a C# form render as ``true``."""
        assert render_condition(BranchCondition(type="method", operator="contains", value="G")) == "true"
        assert render_condition(BranchCondition(type="claim", operator="startsWith", key="a", value="b")) == "true"


class TestDescribeCondition:
    def test_describe_with_key_and_value(self):
        condition = BranchCondition(type="header", operator="==", key="X-Api", value="v2")

        assert describe_condition(condition) == 'header == [X-Api] "v2"'

    def test_describe_without_key(self):
        assert describe_condition(BranchCondition(type="authenticated")) == "authenticated =="
