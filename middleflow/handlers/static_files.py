"""Static files middleware handler."""

import re

from ..models.base import MiddlewareConfig
from ..models.enums import MiddlewareKind, StepDecision
from ..models.simulation import MiddlewareSimulationResult, SimulationContext, SimulationStep
from .base import RoutingMiddlewareHandler

STATIC_FILE_PATTERN = re.compile(r"\.(css|js|png|jpg|jpeg|gif|svg|ico|woff|woff2|ttf)$")
DEFAULT_DIRECTORY = "wwwroot"


class StaticFilesHandler(RoutingMiddlewareHandler):
    """Serves paths with a known static extension and short-circuits the pipeline."""

    kind = MiddlewareKind.STATIC_FILES

    def default_config(self) -> MiddlewareConfig:
        return {"directory": DEFAULT_DIRECTORY, "defaultFiles": ["index.html"]}

    def simulate(
        self,
        config: MiddlewareConfig,
        context: SimulationContext,
        steps: list[SimulationStep],
    ) -> MiddlewareSimulationResult:
        directory = config.get("directory") or DEFAULT_DIRECTORY

        if STATIC_FILE_PATTERN.search(context.path):
            self.record(
                steps,
                f"Static file served: {context.path}",
                StepDecision.TERMINATE,
                {"directory": directory, "file": context.path},
            )
            return self.success_result(f"[Static file content from {directory}{context.path}]")

        self.record(
            steps,
            "Not a static file, continuing",
            StepDecision.CONTINUE,
            {"directory": directory, "isStaticFile": False},
        )
        return self.continue_result()

    def generate_code(self, config: MiddlewareConfig, indent: str = "") -> str:
        directory = config.get("directory")
        if not directory:
            return f"{indent}app.UseStaticFiles();\n"
        return (
            f"{indent}app.UseStaticFiles(new StaticFileOptions\n"
            f"{indent}{{\n"
            f"{indent}    FileProvider = new PhysicalFileProvider(\n"
            f'{indent}        Path.Combine(builder.Environment.ContentRootPath, "{directory}")),\n'
            f'{indent}    RequestPath = "/{directory}"\n'
            f"{indent}}});\n"
        )

    def summarize(self, config: MiddlewareConfig) -> str:
        return f"Directory: {config.get('directory') or DEFAULT_DIRECTORY}"
