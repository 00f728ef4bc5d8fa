"""Test fixtures for middleflow.

- pipelines: builders for nodes, branches and pipelines used across the suite

Pytest fixtures themselves live in ``tests/conftest.py``.
"""

__all__ = [
    "pipelines",
]
