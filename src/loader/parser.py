"""Parser for the sectioned graph text format.

A graph file looks like::

    Any leading lines are comments
    [Vertex]
    A,B,C
    [Edges]
    A:B, B:C

Vertex lines hold comma-separated names; edge lines hold comma-separated
``source:target`` pairs. Blank lines are skipped in both sections.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, TextIO

from src.graph.errors import GraphError, GraphErrorKind
from src.graph.graph import Graph
from src.log_config import get_logger

logger = get_logger(__name__)


@dataclass
class ParsedGraph:
    """A graph built from text, plus what was read to build it.

    Attributes:
        graph: The populated Graph
        vertices: Vertex names in the order they were read
        edges: (source, target) pairs in the order they were read, repeats included
        source_name: Where the text came from (file name or "<string>")
    """

    graph: Graph
    vertices: list[str] = field(default_factory=list)
    edges: list[tuple[str, str]] = field(default_factory=list)
    source_name: str = "<string>"


class GraphFileParser:
    """Parser turning ``[Vertex]``/``[Edges]`` text into a Graph."""

    VERTEX_MARKER: ClassVar[str] = "[vertex]"
    EDGES_MARKER: ClassVar[str] = "[edges]"
    PAIR_SEPARATOR: ClassVar[str] = ":"

    def parse_path(self, path: str | Path) -> ParsedGraph:
        """Parse a graph file.

        Args:
            path: Path to the graph file

        Returns:
            The parsed graph

        Raises:
            FileNotFoundError: If the file does not exist
            OSError: If the file cannot be read, e.g. it is a directory
            GraphError: If the content is not UTF-8 text, is malformed, or
                violates graph rules
        """
        graph_path = Path(path)
        if not graph_path.exists():
            msg = f"Graph file not found: {graph_path}"
            raise FileNotFoundError(msg)

        logger.info("loading_graph_file", path=str(graph_path))

        try:
            with graph_path.open(encoding="utf-8") as f:
                return self.parse_lines(f, source_name=graph_path.name)
        except UnicodeDecodeError as e:
            error_msg = f"{graph_path.name} is not valid UTF-8 text: {e.reason} at byte {e.start}"
            logger.exception("graph_file_not_utf8", path=str(graph_path), error=str(e))
            raise GraphError(GraphErrorKind.MALFORMED_INPUT, error_msg) from e

    def parse_stream(self, stream: TextIO, source_name: str = "<stream>") -> ParsedGraph:
        """Parse graph text from an open text stream. The stream is not closed."""
        return self.parse_lines(stream, source_name=source_name)

    def parse_text(self, text: str, source_name: str = "<string>") -> ParsedGraph:
        """Parse graph text held in a string."""
        return self.parse_lines(text.splitlines(), source_name=source_name)

    def parse_lines(self, lines: Iterable[str], source_name: str = "<string>") -> ParsedGraph:
        """Parse graph text given as an iterable of lines.

        Args:
            lines: Lines of graph text, with or without trailing newlines
            source_name: Name used in error messages and logs

        Returns:
            The parsed graph

        Raises:
            GraphError: MALFORMED_INPUT for missing sections or bad syntax;
                DUPLICATE_VERTEX or UNKNOWN_VERTEX (tagged with the line
                number) when the content breaks graph rules
        """
        parsed = ParsedGraph(graph=Graph(), source_name=source_name)
        section = None
        line_number = 0

        for line_number, raw_line in enumerate(lines, 1):
            line = raw_line.strip()
            marker = line.lower()

            if section is None:
                # Everything before [Vertex] is a comment
                if marker == self.VERTEX_MARKER:
                    section = "vertex"
                continue

            if section == "vertex" and marker == self.EDGES_MARKER:
                section = "edges"
                continue

            if not line:
                continue

            try:
                if section == "vertex":
                    self._parse_vertex_line(line, line_number, parsed)
                else:
                    self._parse_edge_line(line, line_number, parsed)
            except GraphError as e:
                if e.line_number is not None:
                    raise
                raise e.with_line(line_number) from e

        if section != "edges":
            error_msg = f"No [Vertex] or [Edges] section found in {source_name}"
            logger.error(
                "graph_section_missing",
                source=source_name,
                reached_section=section,
                line_count=line_number,
            )
            raise GraphError(GraphErrorKind.MALFORMED_INPUT, error_msg)

        logger.info(
            "graph_parsed",
            source=source_name,
            vertex_count=len(parsed.vertices),
            edge_count=len(parsed.edges),
        )

        return parsed

    def _parse_vertex_line(self, line: str, line_number: int, parsed: ParsedGraph) -> None:
        names = self._split_items(line, line_number, "vertex name")
        for name in names:
            parsed.graph.add_vertex(name)
            parsed.vertices.append(name)

    def _parse_edge_line(self, line: str, line_number: int, parsed: ParsedGraph) -> None:
        for item in self._split_items(line, line_number, "edge"):
            parts = [part.strip() for part in item.split(self.PAIR_SEPARATOR)]
            if len(parts) != 2 or not all(parts):
                error_msg = f"Edge {item!r} must be in format source:target"
                logger.error("malformed_edge", edge=item, line_number=line_number)
                raise GraphError(GraphErrorKind.MALFORMED_INPUT, error_msg, line_number=line_number)

            source, target = parts
            parsed.graph.add_edge(source, target)
            parsed.edges.append((source, target))

    def _split_items(self, line: str, line_number: int, what: str) -> list[str]:
        """Split a comma-separated line, tolerating one trailing comma."""
        items = [item.strip() for item in line.split(",")]
        if items and not items[-1]:
            items.pop()

        if not items or not all(items):
            error_msg = f"Empty {what} in {line!r}"
            logger.error("empty_item", what=what, line=line, line_number=line_number)
            raise GraphError(GraphErrorKind.MALFORMED_INPUT, error_msg, line_number=line_number)

        return items
