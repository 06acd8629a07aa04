"""Unit tests for GraphInspector cycle reporting and visualization."""

import pytest

from src.graph.graph import Graph
from src.graph.inspector import GraphInspector


@pytest.fixture
def inspector():
    """Fixture to create a GraphInspector instance."""
    return GraphInspector()


def build_graph(vertices, edges):
    graph = Graph()
    for name in vertices:
        graph.add_vertex(name)
    for source, target in edges:
        graph.add_edge(source, target)
    return graph


class TestFindCycle:
    """Test cycle path reporting."""

    def test_acyclic_graph_has_no_cycle(self, inspector):
        """Test that a DAG yields None."""
        graph = build_graph(["A", "B", "C"], [("A", "B"), ("B", "C"), ("A", "C")])

        assert inspector.find_cycle(graph) is None

    def test_empty_graph_has_no_cycle(self, inspector):
        """Test that an empty graph yields None."""
        assert inspector.find_cycle(Graph()) is None

    def test_three_vertex_cycle_path(self, inspector):
        """Test that the ring is reported as a closed path."""
        graph = build_graph(["A", "B", "C"], [("A", "B"), ("B", "C"), ("C", "A")])

        assert inspector.find_cycle(graph) == ["A", "B", "C", "A"]

    def test_self_loop_path(self, inspector):
        """Test that a self-loop is reported as a one-vertex cycle."""
        graph = build_graph(["A"], [("A", "A")])

        assert inspector.find_cycle(graph) == ["A", "A"]

    def test_cycle_behind_acyclic_prefix(self, inspector):
        """Test that the path starts at the cycle, not at the entry vertex."""
        graph = build_graph(
            ["start", "B", "C"],
            [("start", "B"), ("B", "C"), ("C", "B")],
        )

        assert inspector.find_cycle(graph) == ["B", "C", "B"]

    def test_inspector_is_reusable(self, inspector):
        """Test that state from a previous search does not leak."""
        cyclic = build_graph(["A", "B"], [("A", "B"), ("B", "A")])
        acyclic = build_graph(["A", "B"], [("A", "B")])

        assert inspector.find_cycle(cyclic) == ["A", "B", "A"]
        assert inspector.find_cycle(acyclic) is None


class TestVisualization:
    """Test Mermaid and DOT rendering."""

    def test_mermaid_output(self, inspector):
        """Test Mermaid nodes carry labels and edges use node ids."""
        graph = build_graph(["A", "my-task"], [("A", "my-task")])

        output = inspector.generate_visualization(graph, "mermaid")

        assert output.splitlines() == [
            "graph TD",
            '    v0["A"]',
            '    v1["my-task"]',
            "    v0 --> v1",
        ]

    def test_dot_output(self, inspector):
        """Test DOT output lists nodes and edges."""
        graph = build_graph(["A", "B"], [("A", "B")])

        output = inspector.generate_visualization(graph, "dot")

        assert output.startswith("digraph Topograph {")
        assert '    "A";' in output
        assert '    "A" -> "B";' in output
        assert output.endswith("}")

    def test_dot_escapes_quotes(self, inspector):
        """Test that quotes in names are escaped for DOT."""
        graph = build_graph(['say "hi"'], [])

        output = inspector.generate_visualization(graph, "dot")

        assert '"say \\"hi\\""' in output

    def test_format_is_case_insensitive(self, inspector):
        """Test that ' DOT ' is accepted."""
        graph = build_graph(["A"], [])

        assert inspector.generate_visualization(graph, " DOT ").startswith("digraph")

    @pytest.mark.parametrize("output_format", ["mermaid", "dot"])
    def test_empty_graph(self, inspector, output_format):
        """Test that an empty graph renders a placeholder node."""
        output = inspector.generate_visualization(Graph(), output_format)

        assert "Empty Graph" in output

    def test_unsupported_format(self, inspector):
        """Test that an unknown format is rejected."""
        with pytest.raises(ValueError, match="Unsupported format"):
            inspector.generate_visualization(Graph(), "svg")


class TestLongPaths:
    """Test cycle search on paths longer than the recursion limit."""

    RING_SIZE = 3000

    def test_long_ring(self, inspector):
        """Test a ring of thousands of vertices is walked without recursion."""
        names = [f"v{i}" for i in range(self.RING_SIZE)]
        edges = [(names[i], names[(i + 1) % self.RING_SIZE]) for i in range(self.RING_SIZE)]
        graph = build_graph(names, edges)

        cycle = inspector.find_cycle(graph)

        assert cycle == [*names, "v0"]

    def test_long_chain_has_no_cycle(self, inspector):
        """Test a long acyclic chain backtracks all the way out."""
        names = [f"v{i}" for i in range(self.RING_SIZE)]
        edges = list(zip(names, names[1:]))
        graph = build_graph(names, edges)

        assert inspector.find_cycle(graph) is None
