"""Cycle detection over the children of graph nodes."""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ._model import Graph, Node


class VisitState(Enum):
    """Colour of a node during a depth-first traversal."""

    NOT_VISITED = auto()
    VISITING = auto()  # on the traversal stack
    VISITED = auto()  # fully explored


def introduces_cycle(node: Node, states: dict[str, VisitState] | None = None) -> list[str] | None:
    """Look for a cycle reachable from ``node``.

    Performs a depth-first traversal along child edges. Reaching a node that
    is still on the traversal stack closes a cycle.

    Args:
        node: Node to start the traversal from.
        states: Visit states keyed by node label. Pass the same mapping to
            several calls to share the traversal across them (nodes already
            ``VISITED`` are not explored again). A fresh mapping is used when
            omitted.

    Returns:
        The labels of the cycle in traversal order, starting and ending with
        the same label (e.g. ``["a", "b", "c", "a"]``), or None.

    Example:
        >>> graph = Graph()
        >>> _ = graph.add_edge("a", "b"), graph.add_edge("b", "a")
        >>> introduces_cycle(graph.get_node("a"))
        ['a', 'b', 'a']

    """
    if states is None:
        states = {}

    trace: list[str] = [node.label]
    stack: list[tuple[Node, Iterator[Node]]] = [(node, iter(node.children))]
    states[node.label] = VisitState.VISITING

    while stack:
        current, children = stack[-1]
        for child in children:
            state = states.get(child.label, VisitState.NOT_VISITED)
            if state is VisitState.NOT_VISITED:
                states[child.label] = VisitState.VISITING
                trace.append(child.label)
                stack.append((child, iter(child.children)))
                break
            if state is VisitState.VISITING:
                trace.append(child.label)
                return trace[trace.index(child.label) :]
        else:
            states[current.label] = VisitState.VISITED
            trace.pop()
            stack.pop()

    return None


def find_cycle(graph: Graph) -> list[str] | None:
    """Return the first cycle found in ``graph``, or None if it is acyclic.

    Nodes are tried as traversal roots in insertion order, sharing one state
    map so every node is explored at most once.
    """
    states: dict[str, VisitState] = {}
    for node in graph.get_nodes():
        if states.get(node.label, VisitState.NOT_VISITED) is VisitState.NOT_VISITED:
            cycle = introduces_cycle(node, states)
            if cycle is not None:
                return cycle
    return None


def cycle_to_string(cycle: list[str]) -> str:
    """Render a cycle as ``"a --> b --> c --> a"``."""
    return " --> ".join(cycle)
