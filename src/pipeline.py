"""Parse-then-sort pipeline.

run_pipeline() reads the configured graph source, builds the graph,
sorts it, and returns a SortOutcome. A cyclic graph is an expected
outcome and is reported through SortOutcome rather than raised; every
other GraphError propagates to the caller.
"""

from dataclasses import dataclass

from src.config import GraphSource, PipelineConfig
from src.graph.errors import GraphError, GraphErrorKind
from src.graph.inspector import GraphInspector
from src.loader.parser import GraphFileParser, ParsedGraph
from src.log_config import bind_context, get_logger, unbind_context

logger = get_logger(__name__)


@dataclass
class SortOutcome:
    """Result of sorting a parsed graph.

    Exactly one of ``order`` and ``cycle`` is set.

    Attributes:
        parsed: The parsed graph and what was read to build it
        order: Vertex names in topological order, or None if cyclic
        cycle: One cycle path (first vertex repeated at the end), or None
        blocked: Vertices that could not be ordered because of cycles
    """

    parsed: ParsedGraph
    order: list[str] | None = None
    cycle: list[str] | None = None
    blocked: tuple[str, ...] = ()

    @property
    def cycle_detected(self) -> bool:
        """Whether the graph turned out to be cyclic."""
        return self.order is None

    def summary(self) -> str:
        """Render the nodes and edges read, then the order or the cycle."""
        lines = ["", "Nodes:"]
        lines.extend(self.parsed.vertices)
        lines.append("")
        lines.append("Edges:")
        lines.extend(f"{source} {target}" for source, target in self.parsed.edges)

        if self.cycle_detected:
            lines.append("Cycle detected in the graph")
            if self.cycle:
                lines.append(f"  {' -> '.join(self.cycle)}")
            return "\n".join(lines)

        lines.append("")
        lines.append("")
        lines.append("Graph nodes in topological order:")
        lines.extend(self.order)
        lines.append("End of graph")
        return "\n".join(lines)


def load_source(source: GraphSource, parser: GraphFileParser | None = None) -> ParsedGraph:
    """Parse whichever input the GraphSource names.

    Raises:
        FileNotFoundError: If a source path does not exist
        GraphError: If the content is malformed or violates graph rules
    """
    parser = parser or GraphFileParser()
    if source.path is not None:
        return parser.parse_path(source.path)
    if source.text is not None:
        return parser.parse_text(source.text)
    return parser.parse_stream(source.stream)


def sort_parsed(parsed: ParsedGraph) -> SortOutcome:
    """Topologically sort a parsed graph, turning a cycle into an outcome."""
    try:
        order = parsed.graph.top_sort()
    except GraphError as e:
        if e.kind is not GraphErrorKind.CYCLE_DETECTED:
            raise
        cycle = GraphInspector().find_cycle(parsed.graph)
        logger.info("graph_is_cyclic", cycle=cycle, blocked=list(e.vertices))
        return SortOutcome(parsed=parsed, cycle=cycle, blocked=e.vertices)

    return SortOutcome(parsed=parsed, order=order)


def run_pipeline(config: PipelineConfig) -> SortOutcome:
    """Load, parse and sort the graph described by ``config``.

    Args:
        config: Pipeline configuration naming the graph source

    Returns:
        SortOutcome holding either the order or the detected cycle

    Raises:
        FileNotFoundError: If the configured file does not exist
        GraphError: For malformed input or graph rule violations
    """
    bind_context(source=config.source.name)
    try:
        logger.info("pipeline_started")
        outcome = sort_parsed(load_source(config.source))
        logger.info(
            "pipeline_complete",
            vertex_count=len(outcome.parsed.graph),
            cycle_detected=outcome.cycle_detected,
        )
        return outcome
    finally:
        unbind_context("source")
