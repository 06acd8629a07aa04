"""Error kinds raised while building, loading and sorting graphs.

All failures are reported through a single exception type, GraphError,
whose ``kind`` attribute discriminates between the possible causes.
"""

from enum import Enum


class GraphErrorKind(Enum):
    """Classification of graph failures.

    Attributes:
        INVALID_ARGUMENT: A vertex name was missing, empty or not a string
        DUPLICATE_VERTEX: A vertex name was registered twice
        UNKNOWN_VERTEX: An edge referenced a vertex that was never registered
        CYCLE_DETECTED: The graph has a cycle, so no topological order exists
        MALFORMED_INPUT: A graph file did not follow the section/pair format
    """

    INVALID_ARGUMENT = "invalid_argument"
    DUPLICATE_VERTEX = "duplicate_vertex"
    UNKNOWN_VERTEX = "unknown_vertex"
    CYCLE_DETECTED = "cycle_detected"
    MALFORMED_INPUT = "malformed_input"


class GraphError(Exception):
    """Exception raised for any graph construction, parsing or sorting failure.

    Attributes:
        kind: Which failure occurred
        message: Human-readable description
        vertices: Vertex names involved in the failure, if any
        line_number: 1-based input line the failure was found on, if any
    """

    def __init__(
        self,
        kind: GraphErrorKind,
        message: str,
        vertices: tuple[str, ...] = (),
        line_number: int | None = None,
    ):
        """Initialize the exception.

        Args:
            kind: Which failure occurred
            message: Description of the failure
            vertices: Vertex names involved in the failure
            line_number: Input line number, for errors found while parsing
        """
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.vertices = tuple(vertices)
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"line {self.line_number}: {self.message}"

    def with_line(self, line_number: int) -> "GraphError":
        """Return a copy of this error tagged with an input line number."""
        return GraphError(self.kind, self.message, self.vertices, line_number)
