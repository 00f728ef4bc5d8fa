"""Tests for pipeline validation."""

from middleflow import MiddlewareKind, PipelineAnalyzer, validate_pipeline
from middleflow.analysis import BranchGraphAnalyzer, EndpointOrderAnalyzer
from middleflow.analysis.graph import ALIASED_NODE, CIRCULAR_BRANCH
from middleflow.models import IssueSeverity, IssueType
from middleflow.registry import get_default_registry
from tests.fixtures.pipelines import branch, node, pipeline


def messages(issues) -> list[str]:
    return [issue.message for issue in issues]


class TestBranchGraph:
    def test_self_reference_is_circular(self):
        loop = node(MiddlewareKind.CUSTOM, node_id="loop")
        loop.branch = branch("authenticated", on_true=[loop])

        result = validate_pipeline(pipeline(loop))

        assert result.valid is False
        assert messages(result.errors) == [CIRCULAR_BRANCH]
        assert result.errors[0].middleware_id == "loop"
        assert result.errors[0].issue_type == IssueType.CIRCULAR_BRANCH

    def test_mutual_reference_is_circular(self):
        first = node(MiddlewareKind.CUSTOM, node_id="a")
        second = node(MiddlewareKind.CUSTOM, node_id="b")
        first.branch = branch("authenticated", on_true=[second])
        second.branch = branch("authenticated", on_false=[first])

        result = validate_pipeline(pipeline(first))

        assert result.valid is False
        assert CIRCULAR_BRANCH in messages(result.errors)

    def test_copy_with_ancestor_id_is_circular(self):
        """A deserialized cycle shows up as a copy carrying an ancestor's id."""
        copy_of_root = node(MiddlewareKind.CUSTOM, node_id="root")
        middle = node(MiddlewareKind.HTTPS, node_id="middle", branch=branch("authenticated", on_true=[copy_of_root]))
        root = node(MiddlewareKind.CUSTOM, node_id="root", branch=branch("authenticated", on_true=[middle]))

        issues = BranchGraphAnalyzer(pipeline(root)).get_issues()

        assert messages(issues) == [CIRCULAR_BRANCH]

    def test_aliased_node(self):
        shared = node(MiddlewareKind.CUSTOM, node_id="shared")
        first = node(MiddlewareKind.HTTPS, node_id="a", branch=branch("authenticated", on_true=[shared]))
        second = node(MiddlewareKind.ROUTING, node_id="b", branch=branch("authenticated", on_false=[shared]))

        result = validate_pipeline(pipeline(first, second))

        assert result.valid is False
        assert messages(result.errors) == [ALIASED_NODE]
        assert result.errors[0].middleware_id == "shared"

    def test_duplicate_ids(self):
        result = validate_pipeline(
            pipeline(node(MiddlewareKind.HTTPS, node_id="dup"), node(MiddlewareKind.CUSTOM, node_id="dup"))
        )

        assert messages(result.errors) == ["Duplicate middleware id 'dup' is used by 2 nodes"]

    def test_independent_arms_are_fine(self):
        gateway = node(
            MiddlewareKind.ROUTING,
            branch=branch(
                "header",
                key="X-Api",
                value="v2",
                on_true=[node(MiddlewareKind.CUSTOM)],
                on_false=[node(MiddlewareKind.CUSTOM)],
            ),
        )

        assert validate_pipeline(pipeline(gateway)).valid is True


class TestOrderingWarnings:
    def test_authorization_before_authentication(self):
        result = validate_pipeline(
            pipeline(
                node(MiddlewareKind.AUTHORIZATION, node_id="authz"),
                node(MiddlewareKind.AUTHENTICATION, node_id="auth"),
            )
        )

        related = [issue for issue in result.warnings if "Authorization" in issue.message]
        assert result.valid is True
        assert len(related) == 1
        assert related[0].middleware_id == "authz"
        assert related[0].severity == IssueSeverity.WARNING

    def test_authentication_then_authorization(self, api_pipeline):
        assert validate_pipeline(api_pipeline).warnings == []

    def test_late_exception_handling(self):
        result = validate_pipeline(
            pipeline(
                node(MiddlewareKind.HTTPS),
                node(MiddlewareKind.ROUTING),
                node(MiddlewareKind.CORS),
                node(MiddlewareKind.EXCEPTION_HANDLING, node_id="errors"),
            )
        )

        assert [issue.middleware_id for issue in result.warnings] == ["errors"]
        assert "Exception" in result.warnings[0].message

    def test_early_exception_handling(self):
        result = validate_pipeline(
            pipeline(
                node(MiddlewareKind.HTTPS),
                node(MiddlewareKind.ROUTING),
                node(MiddlewareKind.EXCEPTION_HANDLING),
            )
        )

        assert result.warnings == []

    def test_nodes_after_endpoint(self):
        endpoint = node(MiddlewareKind.MINIMAL_API_ENDPOINT, node_id="hello")
        subject = pipeline(
            node(MiddlewareKind.ROUTING, node_id="routing"),
            endpoint,
            node(MiddlewareKind.CUSTOM, node_id="custom"),
            node(MiddlewareKind.MINIMAL_API_ENDPOINT, node_id="other"),
            node(MiddlewareKind.HTTPS, node_id="https"),
        )

        issues = EndpointOrderAnalyzer(subject, get_default_registry()).get_issues()

        assert [issue.middleware_id for issue in issues] == ["custom", "https"]
        for issue in issues:
            assert "Code order" in issue.message and "Execution order" in issue.message
            assert "(GET /api/hello)" in issue.message
            assert issue.details == {"endpointId": "hello"}
            assert issue.issue_type == IssueType.EXECUTION_ORDER

    def test_endpoint_warnings_do_not_invalidate(self):
        subject = pipeline(node(MiddlewareKind.MINIMAL_API_ENDPOINT), node(MiddlewareKind.CUSTOM))

        result = validate_pipeline(subject)

        assert result.valid is True
        assert len(result.warnings) == 1


class TestPipelineAnalyzer:
    def test_empty_pipeline_is_valid(self):
        result = validate_pipeline(pipeline())

        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_branch_nodes_are_analyzed_once(self):
        """Handler checks run for nodes nested in arms without duplicates."""
        nested = node(MiddlewareKind.AUTHORIZATION, node_id="nested")
        gateway = node(MiddlewareKind.ROUTING, branch=branch("authenticated", on_true=[nested]))

        issues = PipelineAnalyzer(pipeline(gateway, node(MiddlewareKind.AUTHENTICATION))).get_issues()

        # Nested nodes have no top level position, so ordering rules skip them
        assert issues == []

    def test_validation_never_raises_on_cycles(self):
        loop = node(MiddlewareKind.EXCEPTION_HANDLING, node_id="loop")
        loop.branch = branch("authenticated", on_true=[loop], on_false=[loop])

        result = validate_pipeline(pipeline(loop))

        assert messages(result.errors) == [CIRCULAR_BRANCH]

    def test_result_to_dict(self):
        result = validate_pipeline(
            pipeline(node(MiddlewareKind.AUTHORIZATION, node_id="authz"), node(MiddlewareKind.AUTHENTICATION))
        )

        assert result.to_dict() == {
            "valid": True,
            "errors": [],
            "warnings": [
                {
                    "type": "warning",
                    "middlewareId": "authz",
                    "message": "Authorization should typically come after Authentication",
                }
            ],
        }
