"""Graph module for directed graph construction and topological sorting.

This module provides a name-keyed directed graph with Kahn's-algorithm
topological sorting, a single discriminated error type, and diagnostics
for cycle reporting and visualization.
"""

from src.graph.errors import GraphError, GraphErrorKind
from src.graph.graph import Graph
from src.graph.inspector import GraphInspector

__all__ = ["Graph", "GraphError", "GraphErrorKind", "GraphInspector"]
