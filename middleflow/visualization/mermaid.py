"""Mermaid diagram generation for middleflow pipelines."""

from middleflow.condition import describe_condition
from middleflow.models.enums import HandlerCategory
from middleflow.pipeline import MiddlewareNode, Pipeline
from middleflow.registry import HandlerRegistry, get_default_registry

CATEGORY_STYLES = {
    HandlerCategory.SECURITY: "fill:#ffebee,stroke:#c62828",
    HandlerCategory.ROUTING: "fill:#e3f2fd,stroke:#1565c0",
    HandlerCategory.PERFORMANCE: "fill:#fff3e0,stroke:#ef6c00",
    HandlerCategory.INFRASTRUCTURE: "fill:#f3e5f5,stroke:#6a1b9a",
}


def _escape(text: str) -> str:
    return text.replace('"', "#quot;")


class MermaidDiagramGenerator:
    """
    Generator for Mermaid flowcharts of middleware pipelines.

    Top level nodes are chained in code order between a ``Request`` and a
    ``Response`` terminal. Branch arms hang off their owning node on edges
    labelled ``true``/``false`` and rejoin the main chain with a dotted edge.
    """

    def __init__(self, registry: HandlerRegistry | None = None):
        """Initialize Mermaid generator."""
        self.registry = registry or get_default_registry()
        self.node_counter = 0

    def generate_pipeline_diagram(self, pipeline: Pipeline, fenced: bool = True) -> str:
        """
        Generate a Mermaid flowchart for a pipeline.

        Args:
            pipeline: Pipeline to visualize
            fenced: Wrap the diagram in a ```mermaid markdown fence

        Returns:
            Mermaid markdown string
        """
        self.node_counter = 0
        self._names: dict[int, str] = {}
        self._classes: dict[str, list[str]] = {}

        lines = []
        if fenced:
            lines.append("```mermaid")
        lines.append("flowchart TD")
        lines.append(f'    Start(["Request: {_escape(pipeline.name)}"])')
        lines.append("    End([Response])")

        previous = "Start"
        pending_tails: list[str] = []
        for node in pipeline.sorted_middlewares():
            name = self._add_node(node, lines)
            lines.append(f"    {previous} --> {name}")
            for tail in pending_tails:
                lines.append(f"    {tail} -.-> {name}")
            pending_tails = self._add_branch(node, name, lines)
            previous = name
        lines.append(f"    {previous} --> End")
        for tail in pending_tails:
            lines.append(f"    {tail} -.-> End")

        lines.extend(self._generate_styling())
        if fenced:
            lines.append("```")
        return "\n".join(lines)

    def _add_node(self, node: MiddlewareNode, lines: list[str]) -> str:
        name = f"N{self.node_counter}"
        self.node_counter += 1
        self._names[id(node)] = name

        handler = self.registry.get(node.type)
        label = str(node.type)
        summary = handler.summarize(node.config)
        if summary:
            label += f"<br/>{summary}"
        lines.append(f'    {name}["{_escape(label)}"]')
        self._classes.setdefault(str(handler.category), []).append(name)
        return name

    def _add_branch(self, node: MiddlewareNode, name: str, lines: list[str]) -> list[str]:
        """Draw both arms of a node's branch; returns the arm tail names."""
        if node.branch is None:
            return []

        condition = _escape(describe_condition(node.branch.condition))
        decision = f"{name}_if"
        lines.append(f'    {decision}{{"{condition}"}}')
        lines.append(f"    {name} -.-> {decision}")

        tails = []
        for outcome, arm in (("true", node.branch.true_nodes), ("false", node.branch.false_nodes)):
            previous, label = decision, outcome
            for child in sorted(arm, key=lambda n: n.order):
                if id(child) in self._names:
                    # Aliased or cyclic reference: point at the existing box
                    lines.append(f"    {previous} -->|{label}| {self._names[id(child)]}")
                    previous = None
                    break
                child_name = self._add_node(child, lines)
                lines.append(f"    {previous} -->|{label}| {child_name}" if label else f"    {previous} --> {child_name}")
                self._add_branch(child, child_name, lines)
                previous, label = child_name, ""
            if previous and previous != decision:
                tails.append(previous)
        return tails

    def _generate_styling(self) -> list[str]:
        lines = ["", "    %% Styling", "    classDef terminal fill:#e1f5fe"]
        for category, style in CATEGORY_STYLES.items():
            lines.append(f"    classDef {category} {style}")
        lines.append("    class Start,End terminal")
        for category, names in self._classes.items():
            lines.append(f"    class {','.join(names)} {category}")
        return lines


# Short alias
MermaidGenerator = MermaidDiagramGenerator
