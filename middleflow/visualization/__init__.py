"""
Visualization module for middleflow.

This module provides pipeline visualization as Mermaid flowcharts.
"""

from middleflow.visualization.mermaid import MermaidDiagramGenerator, MermaidGenerator

__all__ = [
    "MermaidDiagramGenerator",
    "MermaidGenerator",
]
