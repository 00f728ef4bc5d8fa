"""Property-based tests for middleflow.

Hypothesis generates pipelines, conditions and requests to check the
invariants the example-based unit tests only sample: document round trips,
pure condition evaluation and well-formed simulation traces.
"""
