"""Rendering of graphs to Graphviz DOT text and images."""

from ._dot import GraphingError, to_dot, write_dot
from ._graphviz import OUTPUT_FORMATS, GraphRenderer, GraphvizNotFoundError, GraphvizRenderer, RenderResult

__all__ = [
    "OUTPUT_FORMATS",
    "GraphRenderer",
    "GraphingError",
    "GraphvizNotFoundError",
    "GraphvizRenderer",
    "RenderResult",
    "to_dot",
    "write_dot",
]
