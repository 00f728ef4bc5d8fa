"""Tests for Mermaid diagram generation."""

from middleflow import MiddlewareKind
from middleflow.visualization import MermaidDiagramGenerator
from tests.fixtures.pipelines import branch, node, pipeline


class TestMermaidDiagramGenerator:
    """Test Mermaid diagram generation functionality."""

    def test_init(self):
        """Test generator initialization."""
        generator = MermaidDiagramGenerator()
        assert generator.node_counter == 0

    def test_linear_pipeline(self, api_pipeline):
        """Top level nodes are chained between the request and response terminals."""
        result = MermaidDiagramGenerator().generate_pipeline_diagram(api_pipeline)
        lines = result.split("\n")

        assert lines[0] == "```mermaid"
        assert lines[1] == "flowchart TD"
        assert lines[-1] == "```"
        assert '    Start(["Request: API Pipeline"])' in lines
        assert "    Start --> N0" in lines
        assert "    N0 --> N1" in lines
        assert "    N3 --> End" in lines
        assert '    N3["MinimalAPIEndpoint<br/>GET /api/users"]' in lines

    def test_unfenced(self, api_pipeline):
        result = MermaidDiagramGenerator().generate_pipeline_diagram(api_pipeline, fenced=False)

        assert result.startswith("flowchart TD")
        assert "```" not in result

    def test_empty_pipeline(self):
        result = MermaidDiagramGenerator().generate_pipeline_diagram(pipeline(), fenced=False)

        assert "    Start --> End" in result.split("\n")

    def test_branch_arms(self):
        gateway = node(
            MiddlewareKind.ROUTING,
            branch=branch(
                "header",
                key="X-Api",
                value="v2",
                on_true=[node(MiddlewareKind.CUSTOM, {"className": "V2"})],
                on_false=[node(MiddlewareKind.HTTPS)],
            ),
        )
        subject = pipeline(gateway, node(MiddlewareKind.COMPRESSION))

        lines = MermaidDiagramGenerator().generate_pipeline_diagram(subject).split("\n")

        assert '    N0_if{"header == [X-Api] #quot;v2#quot;"}' in lines
        assert "    N0 -.-> N0_if" in lines
        assert "    N0_if -->|true| N1" in lines
        assert "    N0_if -->|false| N2" in lines
        assert "    N0 --> N3" in lines
        assert "    N1 -.-> N3" in lines
        assert "    N2 -.-> N3" in lines

    def test_category_styling(self, api_pipeline):
        result = MermaidDiagramGenerator().generate_pipeline_diagram(api_pipeline)

        assert "    class Start,End terminal" in result
        assert "    class N1,N2 security" in result
        assert "    class N0 infrastructure" in result

    def test_cycle_terminates(self):
        """A self-referencing branch points back at the existing box."""
        loop = node(MiddlewareKind.CUSTOM)
        loop.branch = branch("authenticated", on_true=[loop])

        lines = MermaidDiagramGenerator().generate_pipeline_diagram(pipeline(loop)).split("\n")

        assert "    N0_if -->|true| N0" in lines

    def test_counter_resets_between_diagrams(self, api_pipeline):
        generator = MermaidDiagramGenerator()

        first = generator.generate_pipeline_diagram(api_pipeline)
        second = generator.generate_pipeline_diagram(api_pipeline)

        assert first == second
