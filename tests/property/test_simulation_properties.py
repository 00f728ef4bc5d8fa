"""Property-based tests for simulation and rendering.

Key properties tested:
- Step orders are consecutive and start at 1
- A response is terminated exactly when a terminating step was recorded
- Success follows the termination status
- Simulation, code generation and diagrams are deterministic and total
  over structurally valid pipelines
"""

import re

import pytest
from hypothesis import given

from middleflow import (
    Pipeline,
    SimulationRequest,
    StepDecision,
    generate_csharp_code,
    simulate_pipeline,
)
from middleflow.visualization import MermaidDiagramGenerator
from tests.property.generators import pipeline_strategy, simulation_request

pytestmark = pytest.mark.property

NODE_LINE = re.compile(r"^    N\d+\[\"", re.MULTILINE)


class TestSimulationProperties:
    @given(pipeline=pipeline_strategy(), http_request=simulation_request())
    def test_step_orders_are_consecutive(self, pipeline: Pipeline, http_request: SimulationRequest):
        result = simulate_pipeline(pipeline, http_request)

        assert [step.order for step in result.steps] == list(range(1, len(result.steps) + 1))

    @given(pipeline=pipeline_strategy(), http_request=simulation_request())
    def test_termination_matches_steps(self, pipeline: Pipeline, http_request: SimulationRequest):
        result = simulate_pipeline(pipeline, http_request)
        response = result.response
        terminating = [step for step in result.steps if step.decision == StepDecision.TERMINATE]

        assert response.terminated is (response.terminated_by is not None)
        if response.terminated:
            assert terminating
        else:
            assert terminating == []
            assert response.status_code == 200

    @given(pipeline=pipeline_strategy(), http_request=simulation_request())
    def test_success_follows_status(self, pipeline: Pipeline, http_request: SimulationRequest):
        result = simulate_pipeline(pipeline, http_request)

        assert result.success is (not result.response.terminated or result.response.status_code < 400)

    @given(pipeline=pipeline_strategy(), http_request=simulation_request())
    def test_simulation_is_deterministic(self, pipeline: Pipeline, http_request: SimulationRequest):
        first = simulate_pipeline(pipeline, http_request)
        second = simulate_pipeline(pipeline, http_request)

        assert [step.action for step in first.steps] == [step.action for step in second.steps]
        assert first.response.status_code == second.response.status_code

    @given(pipeline=pipeline_strategy(max_nodes=3), http_request=simulation_request())
    def test_repeat_produces_one_response_per_request(self, pipeline: Pipeline, http_request: SimulationRequest):
        result = simulate_pipeline(pipeline, http_request, repeat_count=2)

        assert len(result.responses) == 2
        assert result.response is result.responses[-1]


class TestRenderingProperties:
    @given(pipeline=pipeline_strategy())
    def test_codegen_is_complete(self, pipeline: Pipeline):
        code = generate_csharp_code(pipeline)

        assert code.startswith("// Generated Middleware Pipeline:")
        assert "var app = builder.Build();" in code
        assert code.endswith("\napp.Run();\n")

    @given(pipeline=pipeline_strategy())
    def test_one_use_when_per_branch_arm(self, pipeline: Pipeline):
        body = generate_csharp_code(pipeline).split("var app = builder.Build();", 1)[1]
        branched = [node for node in pipeline.walk() if node.branch is not None]
        expected = len(branched) + sum(1 for node in branched if node.branch.false_nodes)

        assert body.count("app.UseWhen(\n") == expected

    @given(pipeline=pipeline_strategy())
    def test_diagram_has_one_box_per_node(self, pipeline: Pipeline):
        diagram = MermaidDiagramGenerator().generate_pipeline_diagram(pipeline, fenced=False)

        assert len(NODE_LINE.findall(diagram)) == len(list(pipeline.walk()))
        assert diagram.startswith("flowchart TD")
