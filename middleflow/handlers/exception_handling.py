"""Exception handling middleware handler.

Nothing throws during a simulation, so this handler only records that a
handler is registered. Its real weight is in validation (it belongs near
the front of the pipeline) and in the generated code.
"""

from typing import TYPE_CHECKING

from ..config import get_config
from ..models.base import MiddlewareConfig
from ..models.enums import IssueType, MiddlewareKind, StepDecision
from ..models.simulation import MiddlewareSimulationResult, SimulationContext, SimulationStep
from ..models.validation import ValidationIssue
from .base import InfrastructureMiddlewareHandler, csharp_bool

if TYPE_CHECKING:
    from ..pipeline import Pipeline

DEFAULT_ERROR_ROUTE = "/error"

IEXCEPTION_HANDLER_TEMPLATE = """
// ========== IExceptionHandler Implementation ==========
// See: https://learn.microsoft.com/en-us/aspnet/core/fundamentals/error-handling

public class {class_name} : IExceptionHandler
{{
    private readonly ILogger<{class_name}> _logger;

    public {class_name}(ILogger<{class_name}> logger)
    {{
        _logger = logger;
    }}

    public async ValueTask<bool> TryHandleAsync(
        HttpContext httpContext,
        Exception exception,
        CancellationToken cancellationToken)
    {{
        _logger.LogError(exception, "An unhandled exception occurred: {{Message}}", exception.Message);

        if (exception is ArgumentException argEx)
        {{
            httpContext.Response.StatusCode = StatusCodes.Status400BadRequest;
            await httpContext.Response.WriteAsJsonAsync(new ProblemDetails
            {{
                Status = StatusCodes.Status400BadRequest,
                Title = "Bad Request",
                Detail = argEx.Message
            }}, cancellationToken);

            return true;
        }}

        httpContext.Response.StatusCode = StatusCodes.Status500InternalServerError;
        await httpContext.Response.WriteAsJsonAsync(new ProblemDetails
        {{
            Status = StatusCodes.Status500InternalServerError,
            Title = "An error occurred",
            Detail = "An unexpected error occurred. Please try again later."
        }}, cancellationToken);

        // true stops the handler chain, false passes to the next IExceptionHandler
        return {return_handled};
    }}
}}

"""


class ExceptionHandlingHandler(InfrastructureMiddlewareHandler):
    kind = MiddlewareKind.EXCEPTION_HANDLING

    def default_config(self) -> MiddlewareConfig:
        return {
            "errorHandlerRoute": DEFAULT_ERROR_ROUTE,
            "useIExceptionHandler": False,
            "returnHandled": True,
        }

    @staticmethod
    def _uses_handler_class(config: MiddlewareConfig) -> bool:
        return bool(config.get("useIExceptionHandler") and config.get("exceptionHandlerClass"))

    def simulate(
        self,
        config: MiddlewareConfig,
        context: SimulationContext,
        steps: list[SimulationStep],
    ) -> MiddlewareSimulationResult:
        if config.get("useIExceptionHandler"):
            handler_class = config.get("exceptionHandlerClass") or "Handler"
            return_handled = config.get("returnHandled", True)
            outcome = "true (handled, stops chain)" if return_handled else "false (passes to next handler)"
            self.record(
                steps,
                f"IExceptionHandler: {handler_class}.TryHandleAsync() -> {outcome}",
                StepDecision.CONTINUE,
                {"handlerClass": config.get("exceptionHandlerClass"), "returnHandled": return_handled},
            )
        else:
            route = config.get("errorHandlerRoute") or DEFAULT_ERROR_ROUTE
            self.record(
                steps,
                f"Exception handler registered: {route}",
                StepDecision.CONTINUE,
                {"errorRoute": route},
            )
        return self.continue_result()

    def validate(self, config: MiddlewareConfig, pipeline: "Pipeline", middleware_id: str) -> list[ValidationIssue]:
        index = pipeline.index_of(middleware_id)
        if index >= get_config().exception_front_window:
            return [
                self.warning(
                    middleware_id,
                    "Exception handling is typically placed early in the pipeline",
                    IssueType.ORDERING,
                )
            ]
        return []

    def generate_code(self, config: MiddlewareConfig, indent: str = "") -> str:
        if self._uses_handler_class(config):
            returns = "true (handled)" if config.get("returnHandled", True) else "false (continue to next)"
            return (
                f"{indent}app.UseExceptionHandler(options => {{ }});\n"
                f"{indent}// IExceptionHandler: {config['exceptionHandlerClass']}\n"
                f"{indent}// Returns: {returns}\n"
            )
        route = config.get("errorHandlerRoute") or DEFAULT_ERROR_ROUTE
        return f'{indent}app.UseExceptionHandler("{route}");\n'

    def generate_service_registration(self, config: MiddlewareConfig) -> str:
        return self.combine_service_registrations([config])

    def combine_service_registrations(self, configs: list[MiddlewareConfig]) -> str:
        class_names: list[tuple[str, bool]] = []
        for config in configs:
            if self._uses_handler_class(config):
                entry = (config["exceptionHandlerClass"], bool(config.get("returnHandled", True)))
                if entry[0] not in [name for name, _ in class_names]:
                    class_names.append(entry)
        if not class_names:
            return ""

        code = "// Add exception handler services\n"
        for class_name, _ in class_names:
            code += f"builder.Services.AddExceptionHandler<{class_name}>();\n"
        code += "builder.Services.AddProblemDetails();\n"
        for class_name, return_handled in class_names:
            code += IEXCEPTION_HANDLER_TEMPLATE.format(
                class_name=class_name,
                return_handled=csharp_bool(return_handled),
            )
        return code

    def summarize(self, config: MiddlewareConfig) -> str:
        if config.get("useIExceptionHandler"):
            returns = "true" if config.get("returnHandled", True) else "false"
            return f"IExceptionHandler: {config.get('exceptionHandlerClass') or 'Handler'} (returns {returns})"
        return f"Route: {config.get('errorHandlerRoute') or DEFAULT_ERROR_ROUTE}"
