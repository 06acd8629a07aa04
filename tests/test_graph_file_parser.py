"""
Tests for the graph file parser module.
"""

import io

import pytest

from src.graph.errors import GraphError, GraphErrorKind
from src.loader.parser import GraphFileParser

CHAIN_TEXT = """[Vertex]
A,B,C
[Edges]
A:B,B:C
"""


class TestGraphFileParser:
    """Test suite for GraphFileParser class."""

    @pytest.fixture
    def parser(self):
        """Fixture to create a GraphFileParser instance."""
        return GraphFileParser()

    # Well-formed input

    def test_parse_chain(self, parser):
        """Test the basic vertex and edge sections."""
        parsed = parser.parse_text(CHAIN_TEXT)

        assert parsed.vertices == ["A", "B", "C"]
        assert parsed.edges == [("A", "B"), ("B", "C")]
        assert parsed.graph.top_sort() == ["A", "B", "C"]

    def test_comment_lines_before_vertex_section(self, parser):
        """Test that everything before [Vertex] is ignored."""
        text = "This is a graph\nA:B is not an edge here\n[Edges]\n[Vertex]\nA,B\n[Edges]\nA:B\n"

        parsed = parser.parse_text(text)

        assert parsed.vertices == ["A", "B"]
        assert parsed.edges == [("A", "B")]

    def test_markers_are_case_insensitive(self, parser):
        """Test that section markers match regardless of case and padding."""
        parsed = parser.parse_text("  [VERTEX]  \nA,B\n[edges]\nA:B\n")

        assert parsed.vertices == ["A", "B"]

    def test_whitespace_and_blank_lines(self, parser):
        """Test that names are trimmed and blank lines skipped."""
        text = "[Vertex]\n\n  A , B  \n\nC\n[Edges]\n\n A : B , B:C \n\n"

        parsed = parser.parse_text(text)

        assert parsed.vertices == ["A", "B", "C"]
        assert parsed.edges == [("A", "B"), ("B", "C")]

    def test_multiple_edge_lines(self, parser):
        """Test edges spread across lines."""
        text = "[Vertex]\nA,B,C,D\n[Edges]\nA:B, A:C\nB:D\nC:D\n"

        parsed = parser.parse_text(text)

        assert len(parsed.edges) == 4
        assert parsed.graph.in_degree("D") == 2

    def test_trailing_comma_is_tolerated(self, parser):
        """Test that one trailing comma does not create an empty item."""
        parsed = parser.parse_text("[Vertex]\nA,B,\n[Edges]\nA:B,\n")

        assert parsed.vertices == ["A", "B"]
        assert parsed.edges == [("A", "B")]

    def test_empty_edges_section(self, parser):
        """Test a graph with vertices but no edges."""
        parsed = parser.parse_text("[Vertex]\nA,B\n[Edges]\n")

        assert parsed.edges == []
        assert parsed.graph.top_sort() == ["A", "B"]

    def test_repeated_edge_is_echoed_but_counted_once(self, parser):
        """Test that a repeated pair is reported as read but not double counted."""
        parsed = parser.parse_text("[Vertex]\nA,B\n[Edges]\nA:B,A:B\n")

        assert parsed.edges == [("A", "B"), ("A", "B")]
        assert parsed.graph.in_degree("B") == 1

    def test_parse_stream(self, parser):
        """Test parsing from an open text stream."""
        stream = io.StringIO(CHAIN_TEXT)

        parsed = parser.parse_stream(stream)

        assert parsed.vertices == ["A", "B", "C"]
        assert parsed.source_name == "<stream>"
        assert not stream.closed

    def test_parse_path(self, parser, tmp_path):
        """Test parsing a file on disk."""
        graph_file = tmp_path / "chain.txt"
        graph_file.write_text(CHAIN_TEXT, encoding="utf-8")

        parsed = parser.parse_path(graph_file)

        assert parsed.source_name == "chain.txt"
        assert parsed.graph.top_sort() == ["A", "B", "C"]

    def test_parse_missing_path(self, parser, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Graph file not found"):
            parser.parse_path(tmp_path / "missing.txt")

    def test_parse_path_not_utf8(self, parser, tmp_path):
        """Test that undecodable bytes are malformed input."""
        graph_file = tmp_path / "latin1.txt"
        graph_file.write_bytes(b"[Vertex]\nA,\xff\xfe\n[Edges]\n")

        with pytest.raises(GraphError) as exc_info:
            parser.parse_path(graph_file)

        assert exc_info.value.kind is GraphErrorKind.MALFORMED_INPUT
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    # Malformed input

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "no sections at all\n",
            "[Edges]\nA:B\n",
            "[Vertex]\nA,B\n",
        ],
    )
    def test_missing_sections(self, parser, text):
        """Test that a missing [Vertex] or [Edges] marker is malformed input."""
        with pytest.raises(GraphError) as exc_info:
            parser.parse_text(text)

        assert exc_info.value.kind is GraphErrorKind.MALFORMED_INPUT
        assert "No [Vertex] or [Edges] section" in str(exc_info.value)

    @pytest.mark.parametrize("pair", ["A", "A:B:C", ":B", "A:", "A-B"])
    def test_malformed_edge_pair(self, parser, pair):
        """Test that pairs without exactly one source and target are rejected."""
        text = f"[Vertex]\nA,B,C\n[Edges]\n{pair}\n"

        with pytest.raises(GraphError) as exc_info:
            parser.parse_text(text)

        assert exc_info.value.kind is GraphErrorKind.MALFORMED_INPUT
        assert exc_info.value.line_number == 4

    def test_empty_vertex_name(self, parser):
        """Test that an empty name between commas is malformed input."""
        with pytest.raises(GraphError) as exc_info:
            parser.parse_text("[Vertex]\nA,,B\n[Edges]\n")

        assert exc_info.value.kind is GraphErrorKind.MALFORMED_INPUT
        assert exc_info.value.line_number == 2

    # Graph rule violations keep their own kind

    def test_duplicate_vertex_keeps_kind(self, parser):
        """Test that a repeated vertex is reported as DUPLICATE_VERTEX with its line."""
        with pytest.raises(GraphError) as exc_info:
            parser.parse_text("comment\n[Vertex]\nA,B\nB\n[Edges]\n")

        assert exc_info.value.kind is GraphErrorKind.DUPLICATE_VERTEX
        assert exc_info.value.line_number == 4
        assert str(exc_info.value).startswith("line 4:")

    def test_unknown_vertex_keeps_kind(self, parser):
        """Test that an edge to an undeclared vertex is UNKNOWN_VERTEX."""
        with pytest.raises(GraphError) as exc_info:
            parser.parse_text("[Vertex]\nA\n[Edges]\nA:Z\n")

        assert exc_info.value.kind is GraphErrorKind.UNKNOWN_VERTEX
        assert exc_info.value.vertices == ("Z",)
        assert exc_info.value.line_number == 4
