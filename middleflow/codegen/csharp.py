"""C# code generation for middleflow pipelines.

Renders a pipeline as an ASP.NET Core ``Program.cs`` style listing:
builder bootstrap, service registrations, ``app.UseXxx()`` calls in code
order (branches as ``app.UseWhen`` blocks) and a closing ``app.Run()``.
The output is display text and is never parsed back.
"""

import logging
from datetime import datetime, timezone

from middleflow.common.exceptions import MiddleflowError
from middleflow.condition import render_condition
from middleflow.models.base import MiddlewareConfig
from middleflow.models.enums import MiddlewareKind
from middleflow.pipeline import BranchConfig, MiddlewareNode, Pipeline
from middleflow.registry import HandlerRegistry, get_default_registry

logger = logging.getLogger(__name__)

BRANCH_INDENT = "        "


class CSharpCodeGenerator:
    """Generator for ASP.NET Core pipeline code.

    Every kind-specific fragment comes from the kind's handler; this class
    only decides where the fragments go.
    """

    def __init__(self, registry: HandlerRegistry | None = None):
        self.registry = registry or get_default_registry()

    def generate(self, pipeline: Pipeline, generated_at: datetime | None = None) -> str:
        """
        Generate the full C# listing for a pipeline.

        Args:
            pipeline: Pipeline to render
            generated_at: Timestamp for the header comment, now when omitted

        Returns:
            C# source text
        """
        generated_at = generated_at or datetime.now(timezone.utc)

        code = f"// Generated Middleware Pipeline: {pipeline.name}\n"
        code += f"// Generated on: {generated_at.isoformat()}\n\n"
        code += "var builder = WebApplication.CreateBuilder(args);\n\n"
        code += self.generate_service_registrations(pipeline)
        code += "var app = builder.Build();\n\n"
        code += self.generate_nodes(pipeline.middlewares)
        code += "\napp.Run();\n"

        logger.debug("Generated %d characters of C# for pipeline %s", len(code), pipeline.id)
        return code

    # ------------------------------------------------------------------
    # Service registrations
    # ------------------------------------------------------------------

    def _configs_by_kind(self, pipeline: Pipeline) -> dict[MiddlewareKind, list[MiddlewareConfig]]:
        configs: dict[MiddlewareKind, list[MiddlewareConfig]] = {}
        for node in pipeline.walk():
            configs.setdefault(node.type, []).append(node.config)
        return configs

    def generate_service_registrations(self, pipeline: Pipeline) -> str:
        """Render one registration section per kind present, in registry order.

        Kinds sharing a ``service_group`` are emitted together under a
        single ``// Add ... services`` comment.
        """
        configs = self._configs_by_kind(pipeline)
        groups: dict[str, list[str]] = {}
        sections: list[str | tuple[str, list[str]]] = []

        for handler in self.registry:
            if handler.kind not in configs:
                continue
            block = handler.combine_service_registrations(configs[handler.kind])
            if not block:
                continue

            if handler.service_group is None:
                sections.append(block)
            elif handler.service_group in groups:
                groups[handler.service_group].append(block)
            else:
                groups[handler.service_group] = [block]
                sections.append((handler.service_group, groups[handler.service_group]))

        code = ""
        for section in sections:
            if isinstance(section, tuple):
                group, blocks = section
                code += f"// Add {group} services\n" + "".join(blocks) + "\n"
            else:
                code += section + "\n"
        return code

    # ------------------------------------------------------------------
    # Middleware calls
    # ------------------------------------------------------------------

    def generate_nodes(
        self,
        nodes: list[MiddlewareNode],
        indent: str = "",
        ancestors: frozenset[int] = frozenset(),
    ) -> str:
        """Render nodes in code order, recursing into branch arms.

        Raises:
            MiddleflowError: If a node branches back into one of its ancestors
        """
        code = ""
        for node in sorted(nodes, key=lambda n: n.order):
            if id(node) in ancestors:
                raise MiddleflowError(
                    "Circular branch detected; cannot generate code",
                    context={"middleware_id": node.id},
                )
            code += self.registry.get(node.type).generate_code(node.config, indent)
            if node.branch is not None:
                code += self.generate_branch(node.branch, indent, ancestors | {id(node)})
        return code

    def generate_branch(
        self,
        branch: BranchConfig,
        indent: str = "",
        ancestors: frozenset[int] = frozenset(),
    ) -> str:
        condition = render_condition(branch.condition)
        code = self._use_when(condition, branch.true_nodes, indent, ancestors)
        if branch.false_nodes:
            code += self._use_when(f"!({condition})", branch.false_nodes, indent, ancestors)
        return code

    def _use_when(
        self,
        predicate: str,
        nodes: list[MiddlewareNode],
        indent: str,
        ancestors: frozenset[int],
    ) -> str:
        code = f"{indent}app.UseWhen(\n"
        code += f"{indent}    ctx => {predicate},\n"
        code += f"{indent}    branch =>\n"
        code += f"{indent}    {{\n"
        code += self.generate_nodes(nodes, indent + BRANCH_INDENT, ancestors)
        code += f"{indent}    }});\n"
        return code


def generate_csharp_code(pipeline: Pipeline, generated_at: datetime | None = None) -> str:
    """Render a pipeline as C# using the default handler registry."""
    return CSharpCodeGenerator().generate(pipeline, generated_at)
