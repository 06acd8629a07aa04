"""Graph diagnostics: cycle path reporting and text visualization.

top_sort() only says which vertices could not be ordered. GraphInspector
walks the graph to find one concrete cycle through them, and renders the
graph as a Mermaid flowchart or Graphviz DOT digraph.
"""

from typing import TYPE_CHECKING

from src.log_config import get_logger

if TYPE_CHECKING:
    from src.graph.graph import Graph

logger = get_logger(__name__)


class GraphInspector:
    """Read-only diagnostics over a Graph."""

    def __init__(self):
        """Initialize the graph inspector."""
        self._visited: set[str] = set()
        self._rec_stack: set[str] = set()
        self._path: list[str] = []

    def find_cycle(self, graph: "Graph") -> list[str] | None:
        """Find one cycle in the graph using DFS.

        Args:
            graph: The Graph to inspect

        Returns:
            Closed cycle path such as ``["A", "B", "A"]``, or None if acyclic
        """
        self._visited = set()
        self._rec_stack = set()
        self._path = []

        for vertex in graph.vertices:
            if vertex not in self._visited:
                cycle = self._dfs_cycle_detect(vertex, graph)
                if cycle:
                    logger.debug("cycle_path_found", cycle=cycle)
                    return cycle

        return None

    def _dfs_cycle_detect(self, start: str, graph: "Graph") -> list[str] | None:
        """DFS-based cycle detection that returns the cycle path.

        Walks with an explicit stack of (vertex, successor iterator) pairs,
        so path length is not bounded by the recursion limit.

        Args:
            start: Vertex the walk starts from
            graph: The graph being walked

        Returns:
            List representing the cycle path if found, None otherwise
        """
        self._enter(start)
        stack = [(start, iter(graph.successors(start)))]

        while stack:
            vertex, successors = stack[-1]
            successor = next(successors, None)

            if successor is None:
                # Backtrack
                stack.pop()
                self._rec_stack.remove(vertex)
                self._path.pop()
            elif successor not in self._visited:
                self._enter(successor)
                stack.append((successor, iter(graph.successors(successor))))
            elif successor in self._rec_stack:
                cycle_start_idx = self._path.index(successor)
                return [*self._path[cycle_start_idx:], successor]

        return None

    def _enter(self, vertex: str) -> None:
        self._visited.add(vertex)
        self._rec_stack.add(vertex)
        self._path.append(vertex)

    def generate_visualization(self, graph: "Graph", output_format: str = "mermaid") -> str:
        """Generate a visual representation of the graph.

        Args:
            graph: The Graph to visualize
            output_format: Output format ('mermaid' or 'dot'), case-insensitive

        Returns:
            String representation of the graph in the requested format

        Raises:
            ValueError: If an unsupported format is requested
        """
        output_format = output_format.lower().strip()

        if output_format == "mermaid":
            return self._generate_mermaid(graph)
        if output_format == "dot":
            return self._generate_graphviz(graph)
        error_msg = f"Unsupported format: {output_format}. Use 'mermaid' or 'dot'."
        raise ValueError(error_msg)

    def _generate_mermaid(self, graph: "Graph") -> str:
        lines = ["graph TD"]

        if not len(graph):
            lines.append("    Empty[Empty Graph]")
            return "\n".join(lines)

        # Mermaid ids must be plain identifiers; labels keep the real name
        ids = {name: f"v{index}" for index, name in enumerate(graph.vertices)}
        for name, node_id in ids.items():
            label = name.replace('"', "#quot;")
            lines.append(f'    {node_id}["{label}"]')

        lines.extend(f"    {ids[source]} --> {ids[target]}" for source, target in graph.edges())

        return "\n".join(lines)

    def _generate_graphviz(self, graph: "Graph") -> str:
        def escape_dot_string(s: str) -> str:
            """Escape double quotes for DOT format."""
            return s.replace('"', '\\"')

        lines = ["digraph Topograph {"]
        lines.append("    rankdir=LR;")
        lines.append("    node [shape=box, style=rounded];")

        if not len(graph):
            lines.append('    Empty [label="Empty Graph"];')
        else:
            lines.extend(f'    "{escape_dot_string(name)}";' for name in graph.vertices)
            lines.extend(
                f'    "{escape_dot_string(source)}" -> "{escape_dot_string(target)}";'
                for source, target in graph.edges()
            )

        lines.append("}")
        return "\n".join(lines)
