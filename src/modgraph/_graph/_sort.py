"""Depth-first topological sorting of graph nodes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ._cycle import VisitState
from ._model import Graph, Node

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


def topological_sort(target: Node | Graph) -> list[str]:
    """Sort node labels so that every node comes after all of its children.

    Labels are collected in depth-first postorder: a node is listed once all
    nodes reachable from it have been listed, i.e. dependencies first. Ties
    between independent subtrees follow the order of each node's children,
    which is the order their edges were added.

    Args:
        target: A node, to sort the subgraph reachable from it (the node
            itself is last), or a graph, to sort all of its nodes. For a graph,
            traversals are started from its nodes in insertion order.

    Returns:
        List of node labels in topological order.

    Note:
        The input must be acyclic. No cycle check is made here; on a cyclic
        graph the result is still finite but not a valid ordering.

    Example:
        >>> graph = Graph()
        >>> _ = graph.add_edge("a", "b"), graph.add_edge("b", "c")
        >>> topological_sort(graph.get_node("a"))
        ['c', 'b', 'a']

    """
    order: list[str] = []
    states: dict[str, VisitState] = {}

    match target:
        case Node():
            _visit(target, states, order)
        case Graph():
            for node in target.get_nodes():
                if states.get(node.label, VisitState.NOT_VISITED) is VisitState.NOT_VISITED:
                    _visit(node, states, order)
        case _:
            msg = f"Cannot sort {type(target).__name__!r}: expected a Node or a Graph"
            raise TypeError(msg)

    logger.debug(f"Sorted {len(order)} nodes")
    return order


def _visit(start: Node, states: dict[str, VisitState], order: list[str]) -> None:
    states[start.label] = VisitState.VISITING
    stack: list[tuple[Node, Iterator[Node]]] = [(start, iter(start.children))]

    while stack:
        current, children = stack[-1]
        for child in children:
            if states.get(child.label, VisitState.NOT_VISITED) is VisitState.NOT_VISITED:
                states[child.label] = VisitState.VISITING
                stack.append((child, iter(child.children)))
                break
        else:
            states[current.label] = VisitState.VISITED
            order.append(current.label)
            stack.pop()
