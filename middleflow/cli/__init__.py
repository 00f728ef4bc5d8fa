"""
Command-line interface module for middleflow.

This module provides the CLI entry point and command implementations
for validating, simulating and rendering middleware pipelines.
"""

from middleflow.cli.main import main

__all__ = ["main"]
