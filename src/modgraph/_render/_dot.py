"""Graphviz DOT serialization of a graph and its styles."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from modgraph._style import Color, EdgeStyle, LineEnding, LineStyle, NodeStyle, Orientation, css_color

if TYPE_CHECKING:
    from modgraph._graph import Edge, Graph, Node

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_ID = "gid"
FONT_NAME = "Helvetica"

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}

_ARROW_NAMES = {
    LineEnding.NONE: "none",
    LineEnding.ARROW: "normal",
    LineEnding.DOT: "dot",
    LineEnding.HOLLOW_DOT: "odot",
    LineEnding.INVERT_ARROW: "inv",
    LineEnding.INVERT_ARROW_DOT: "invdot",
    LineEnding.INVERT_ARROW_HOLLOW_DOT: "invodot",
}


class GraphingError(Exception):
    """Error raised while turning a graph into a drawing."""


def to_dot(graph: Graph) -> str:
    """Serialize a graph to DOT text.

    Nodes and edges are written in insertion order, preceded by graph, node
    and edge default blocks derived from ``graph.style``.

    Args:
        graph: The graph to serialize.

    Returns:
        The DOT document, ending with a newline.

    Raises:
        GraphingError: If a style holds a colour that cannot be parsed.

    """
    ids = _VizIds()
    title = graph.style.title
    graph_id = _to_viz_id(title) if title else ""

    lines = [
        "// Auto generated dot file from modgraph.",
        f'digraph "{graph_id or DEFAULT_GRAPH_ID}" {{',
        "",
    ]
    lines.extend(_defaults(graph))
    for node in graph.get_nodes():
        lines.extend(_node(node, ids))
    for edge in graph.get_edges():
        lines.extend(_edge(edge, ids))
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_dot(graph: Graph, path: Path | str) -> Path:
    """Write the DOT text of ``graph`` to ``path``, creating parent directories.

    Returns:
        The path written to.

    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_dot(graph), encoding="utf-8")
    logger.debug(f"Wrote DOT file {path}")
    return path


def _defaults(graph: Graph) -> list[str]:
    style = graph.style
    graph_attrs: list[str] = []
    if style.background_color is not None:
        graph_attrs.append(f'bgcolor="{_color(style.background_color)}"')
    if style.title:
        graph_attrs.append(f'fontname="{FONT_NAME}"')
        graph_attrs.append(f'fontsize="{style.font_size}"')
        graph_attrs.append(f'label="{_escape(style.title)}"')
        graph_attrs.append('labeljust="l"')
    if style.title_color is not None:
        graph_attrs.append(f'fontcolor="{_color(style.title_color)}"')
    match style.orientation:
        case Orientation.LEFT_TO_RIGHT:
            graph_attrs.append('rankdir="LR"')
        case _:
            graph_attrs.append('rankdir="TB"')

    node_defaults = NodeStyle()
    edge_defaults = EdgeStyle()
    return [
        "  // Graph Defaults",
        *_block("graph", graph_attrs),
        "",
        "  // Node Defaults.",
        *_block("node", [f'fontname="{FONT_NAME}"', f'fontsize="{node_defaults.font_size}"', 'shape="box"']),
        "",
        "  // Edge Defaults.",
        *_block("edge", ['arrowsize="0.8"', f'fontsize="{edge_defaults.font_size}"']),
    ]


def _node(node: Node, ids: _VizIds) -> list[str]:
    style = node.style
    attrs = [f'label="{_escape(node.label)}"']
    if style.border_color is not None:
        attrs.append(f'color="{_color(style.border_color)}"')
    if style.background_color is not None:
        attrs.append("style=filled")
        attrs.append(f'fillcolor="{_color(style.background_color)}"')
    if style.label_color is not None:
        attrs.append(f'fontcolor="{_color(style.label_color)}"')
    if style.font_size > 0:
        attrs.append(f'fontsize="{style.font_size}"')
    if style.group:
        attrs.append(f'group="{_escape(style.group)}"')
    attrs.append("shape=box")
    return ["", "  // Node", *_block(f'"{ids.get(node.label)}"', attrs)]


def _edge(edge: Edge, ids: _VizIds) -> list[str]:
    style = edge.style
    attrs: list[str] = []
    match style.line_style:
        case LineStyle.BOLD:
            attrs.append('style="bold"')
        case LineStyle.DASHED:
            attrs.append('style="dotted"')
    if style.line_color is not None:
        attrs.append(f'color="{_color(style.line_color)}"')
    if style.line_label:
        attrs.append(f'label="{_escape(style.line_label)}"')
        attrs.append(f'fontname="{FONT_NAME}"')
        if style.font_size > 0:
            attrs.append(f'fontsize="{style.font_size}"')
    if style.line_tail is not LineEnding.NONE:
        attrs.append("dir=both")
    attrs.append(f"arrowtail={_ARROW_NAMES[style.line_tail]}")
    attrs.append(f"arrowhead={_ARROW_NAMES[style.line_head]}")
    head = f'"{ids.get(edge.source.label)}" -> "{ids.get(edge.target.label)}"'
    return ["", "  // Edge", *_block(head, attrs)]


def _block(head: str, attrs: list[str]) -> list[str]:
    lines = [f"  {head} ["]
    lines.extend(f"    {attr}," for attr in attrs[:-1])
    if attrs:
        lines.append(f"    {attrs[-1]}")
    lines.append("  ];")
    return lines


class _VizIds:
    """Stable DOT identifiers for node labels, unique within one document."""

    def __init__(self) -> None:
        self._ids: dict[str, str] = {}
        self._used: set[str] = set()

    def get(self, label: str) -> str:
        viz_id = self._ids.get(label)
        if viz_id is not None:
            return viz_id

        base = _to_viz_id(label) or f"N{len(self._ids) + 1}"
        viz_id = base
        suffix = 2
        while viz_id in self._used:
            viz_id = f"{base}_{suffix}"
            suffix += 1

        self._ids[label] = viz_id
        self._used.add(viz_id)
        return viz_id


def _to_viz_id(raw: str) -> str:
    """Keep letters and digits (upper-cased), map ``-`` and ``_`` to ``_``, drop the rest."""
    chars: list[str] = []
    for c in raw:
        if c.isalnum():
            chars.append(c.upper())
        elif c in "-_":
            chars.append("_")
    return "".join(chars)


def _escape(text: str) -> str:
    return "".join(_ESCAPES.get(c, c) for c in text)


def _color(value: Color) -> str:
    try:
        return css_color(value)
    except ValueError as e:
        raise GraphingError(str(e)) from e
