"""Directed graph with incremental in-degree bookkeeping and Kahn's sort.

This module provides the Graph class: vertices are registered by name,
edges connect registered vertices, and top_sort() returns a topological
order or raises a CYCLE_DETECTED GraphError.
"""

from collections import deque
from collections.abc import Iterator

from src.graph.errors import GraphError, GraphErrorKind
from src.log_config import get_logger

logger = get_logger(__name__)


def _require_name(value: object, role: str) -> str:
    if not isinstance(value, str) or not value.strip():
        error_msg = f"{role} must be a non-empty string, got {value!r}"
        logger.error("invalid_vertex_name", role=role, value=repr(value))
        raise GraphError(GraphErrorKind.INVALID_ARGUMENT, error_msg)
    return value


class Graph:
    """Directed graph keyed by vertex name.

    The graph keeps two maps with identical key sets: the adjacency map
    (vertex name to the names it points to) and the in-degree map (vertex
    name to the number of distinct vertices pointing at it). Successors are
    kept in insertion order, so top_sort() is deterministic: vertices of
    equal rank come out in the order they were added.

    Repeating an identical (source, target) edge is ignored. It neither
    grows the adjacency nor the target's in-degree.

    Thread-safety:
        This class is NOT thread-safe. Protect all method calls with
        external synchronization (e.g., threading.Lock) if it is shared.

    Example:
        >>> graph = Graph()
        >>> graph.add_vertex("A")
        >>> graph.add_vertex("B")
        >>> graph.add_edge("A", "B")
        True
        >>> graph.top_sort()
        ['A', 'B']
    """

    def __init__(self):
        """Initialize an empty graph."""
        # dict values act as an insertion-ordered set of successors
        self._adjacency: dict[str, dict[str, None]] = {}
        self._in_degrees: dict[str, int] = {}
        self._is_sorted = False

        logger.debug("graph_initialized")

    def add_vertex(self, name: str) -> None:
        """Register a new vertex with no edges.

        Args:
            name: Unique, non-empty vertex name

        Raises:
            GraphError: INVALID_ARGUMENT for a missing or empty name,
                DUPLICATE_VERTEX if the name is already registered
        """
        name = _require_name(name, "Vertex name")
        if name in self._adjacency or name in self._in_degrees:
            error_msg = f"Vertex {name!r} is already registered"
            logger.error("duplicate_vertex", vertex=name)
            raise GraphError(GraphErrorKind.DUPLICATE_VERTEX, error_msg, (name,))

        self._reopen("add_vertex")
        self._adjacency[name] = {}
        self._in_degrees[name] = 0

        logger.debug("vertex_added", vertex=name, vertex_count=len(self._adjacency))

    def add_edge(self, source: str, target: str) -> bool:
        """Add a directed edge from source to target.

        Args:
            source: Name of a registered vertex the edge starts at
            target: Name of a registered vertex the edge points to

        Returns:
            True if the edge was new, False if it was already present

        Raises:
            GraphError: INVALID_ARGUMENT for a missing or empty name,
                UNKNOWN_VERTEX if either endpoint is not registered
        """
        source = _require_name(source, "Edge source")
        target = _require_name(target, "Edge target")
        if source not in self._adjacency:
            error_msg = f"Edge source {source!r} is not a vertex"
            logger.error("unknown_edge_source", source=source, target=target)
            raise GraphError(GraphErrorKind.UNKNOWN_VERTEX, error_msg, (source,))
        if target not in self._in_degrees:
            error_msg = f"Edge target {target!r} is not a vertex"
            logger.error("unknown_edge_target", source=source, target=target)
            raise GraphError(GraphErrorKind.UNKNOWN_VERTEX, error_msg, (target,))

        successors = self._adjacency[source]
        if target in successors:
            logger.debug("duplicate_edge_ignored", source=source, target=target)
            return False

        self._reopen("add_edge")
        successors[target] = None
        self._in_degrees[target] += 1

        logger.debug(
            "edge_added",
            source=source,
            target=target,
            target_in_degree=self._in_degrees[target],
        )
        return True

    def top_sort(self) -> list[str]:
        """Return the vertices in topological order using Kahn's algorithm.

        The graph itself is not modified; the sort works on a copy of the
        in-degree map and may be called again after further mutation.

        Returns:
            Every vertex name exactly once, each edge source before its target

        Raises:
            GraphError: CYCLE_DETECTED if the graph contains a cycle. The
                error's ``vertices`` are the names that were never freed.
        """
        in_degrees = dict(self._in_degrees)
        queue = deque(name for name, degree in in_degrees.items() if degree == 0)
        order: list[str] = []

        logger.info(
            "topological_sort_started",
            vertex_count=len(in_degrees),
            edge_count=self.edge_count,
            initial_frontier=len(queue),
        )

        while queue:
            vertex = queue.popleft()
            order.append(vertex)
            for successor in self._adjacency[vertex]:
                in_degrees[successor] -= 1
                if in_degrees[successor] == 0:
                    queue.append(successor)

        if len(order) != len(in_degrees):
            blocked = tuple(sorted(name for name, degree in in_degrees.items() if degree > 0))
            error_msg = f"Cycle detected in graph: {len(blocked)} vertices cannot be ordered"
            logger.warning(
                "cycle_detected_in_graph",
                sorted_count=len(order),
                vertex_count=len(in_degrees),
                blocked=list(blocked),
            )
            raise GraphError(GraphErrorKind.CYCLE_DETECTED, error_msg, blocked)

        self._is_sorted = True
        logger.info("topological_sort_complete", vertex_count=len(order))
        return order

    def _reopen(self, operation: str) -> None:
        if self._is_sorted:
            logger.warning(
                "mutating_sorted_graph",
                operation=operation,
                message="Graph already sorted. Next top_sort() uses a fresh snapshot.",
            )
            self._is_sorted = False

    @property
    def vertices(self) -> tuple[str, ...]:
        """Vertex names in insertion order."""
        return tuple(self._adjacency)

    @property
    def edge_count(self) -> int:
        """Number of distinct edges."""
        return sum(len(successors) for successors in self._adjacency.values())

    @property
    def is_sorted(self) -> bool:
        """Whether top_sort() succeeded since the last mutation."""
        return self._is_sorted

    def successors(self, name: str) -> tuple[str, ...]:
        """Return the names ``name`` points to, in edge insertion order.

        Raises:
            GraphError: UNKNOWN_VERTEX if ``name`` is not registered
        """
        if name not in self._adjacency:
            raise GraphError(GraphErrorKind.UNKNOWN_VERTEX, f"{name!r} is not a vertex", (name,))
        return tuple(self._adjacency[name])

    def in_degree(self, name: str) -> int:
        """Return the number of distinct vertices pointing at ``name``.

        Raises:
            GraphError: UNKNOWN_VERTEX if ``name`` is not registered
        """
        if name not in self._in_degrees:
            raise GraphError(GraphErrorKind.UNKNOWN_VERTEX, f"{name!r} is not a vertex", (name,))
        return self._in_degrees[name]

    def edges(self) -> Iterator[tuple[str, str]]:
        """Iterate over (source, target) pairs in insertion order."""
        for source, successors in self._adjacency.items():
            for target in successors:
                yield source, target

    def get_stats(self) -> dict[str, int]:
        """Get statistics about the current graph.

        Returns:
            Dictionary with:
                - vertex_count: Number of vertices
                - edge_count: Number of distinct edges
                - source_count: Vertices with in-degree zero
                - sink_count: Vertices with no successors
                - is_sorted: Whether the last sort succeeded since mutation
        """
        stats = {
            "vertex_count": len(self._adjacency),
            "edge_count": self.edge_count,
            "source_count": sum(1 for degree in self._in_degrees.values() if degree == 0),
            "sink_count": sum(1 for successors in self._adjacency.values() if not successors),
            "is_sorted": self._is_sorted,
        }

        logger.debug("graph_stats_retrieved", **stats)

        return stats

    def __len__(self) -> int:
        return len(self._adjacency)

    def __contains__(self, name: object) -> bool:
        return name in self._adjacency

    def __repr__(self) -> str:
        return f"Graph(vertices={len(self._adjacency)}, edges={self.edge_count})"
