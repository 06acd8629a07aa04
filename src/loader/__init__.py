"""Graph file loading."""

from .parser import GraphFileParser, ParsedGraph

__all__ = ["GraphFileParser", "ParsedGraph"]
