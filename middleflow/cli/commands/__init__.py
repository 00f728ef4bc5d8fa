"""CLI commands module for middleflow."""

from middleflow.cli.commands.codegen import codegen_command
from middleflow.cli.commands.diagram import diagram_command
from middleflow.cli.commands.endpoints import endpoints_command
from middleflow.cli.commands.simulate import simulate_command
from middleflow.cli.commands.validate import validate_command

__all__ = [
    "codegen_command",
    "diagram_command",
    "endpoints_command",
    "simulate_command",
    "validate_command",
]
