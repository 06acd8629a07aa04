#!/usr/bin/env python3
"""Main Entry Point and CLI Integration.

Reads a graph file in the ``[Vertex]``/``[Edges]`` format, prints the
nodes and edges it read, then prints the vertices in topological order
or reports that the graph has a cycle.
"""

import argparse
import sys
from pathlib import Path

from src.config import OUTPUT_FORMATS, GraphSource, PipelineConfig, load_config
from src.graph.errors import GraphError
from src.graph.inspector import GraphInspector
from src.log_config import configure_logging, get_logger
from src.pipeline import SortOutcome, run_pipeline

logger = get_logger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Combine the optional configuration file with command-line overrides.

    Raises:
        FileNotFoundError: If no graph file is given and no config file is found
        ValueError: If the configuration is invalid
    """
    if args.config:
        config = PipelineConfig.from_yaml(args.config)
    elif args.file:
        config = PipelineConfig(source=GraphSource(path=args.file))
    else:
        config = load_config()

    overrides = {}
    if args.file:
        overrides["source"] = GraphSource(path=args.file)
    if args.format:
        overrides["output_format"] = args.format
    if args.log_level:
        overrides["logging_level"] = args.log_level
    if args.json_logs:
        overrides["json_logs"] = True

    # argparse choices have already validated these values
    return config.model_copy(update=overrides)


def render(outcome: SortOutcome, output_format: str) -> str:
    """Render an outcome as the text report or as a graph diagram."""
    if output_format == "text":
        return outcome.summary()
    return GraphInspector().generate_visualization(outcome.parsed.graph, output_format)


def run(args: argparse.Namespace) -> int:
    """Run the CLI with parsed arguments.

    Returns:
        Exit code: 0 when a result was printed (cycles included), 1 on failure
    """
    configure_logging(args.log_level or "WARNING", json_logs=args.json_logs)

    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        logger.exception("configuration_error", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    configure_logging(config.logging_level, json_logs=config.json_logs)

    try:
        outcome = run_pipeline(config)
    except OSError as e:
        logger.exception("graph_file_unreadable", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except GraphError as e:
        logger.exception("graph_load_failed", kind=e.kind.value, error=str(e))
        print(f"Error ({e.kind.value}): {e}", file=sys.stderr)
        return 1

    print(render(outcome, config.output_format))
    return 0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Topologically sort a directed graph read from a [Vertex]/[Edges] file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sort a graph file
  python main.py graphs/diamond.txt

  # Use a configuration file
  python main.py --config topograph.yaml

  # Print a Mermaid diagram instead of the order
  python main.py graphs/diamond.txt --format mermaid

  # Debug logging as JSON
  python main.py graphs/diamond.txt --log-level DEBUG --json-logs
        """,
    )

    parser.add_argument(
        "file",
        nargs="?",
        type=Path,
        help="Graph file to sort (overrides the configured source)",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Path to configuration YAML file",
    )

    parser.add_argument(
        "-f",
        "--format",
        type=str.lower,
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: text)",
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Set logging level (default: WARNING)",
    )

    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Render logs as JSON",
    )

    return parser.parse_args(argv)


def main() -> None:
    """Main entry point: parse arguments, run, and exit with the result code."""
    sys.exit(run(parse_args()))


if __name__ == "__main__":
    main()
