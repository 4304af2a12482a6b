"""Directed acyclic graph enforcing acyclicity on every edge insertion."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ._cycle import cycle_to_string, introduces_cycle
from ._model import Graph, GraphConstraintError, NodeNotFoundError
from ._sort import topological_sort

if TYPE_CHECKING:
    from ._model import Edge

logger = logging.getLogger(__name__)


class CycleDetectedError(GraphConstraintError):
    """Raised when adding an edge to a :class:`Dag` would create a cycle.

    Attributes:
        cycle: Labels of the cycle, first and last label being the same.

    """

    def __init__(self, message: str, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__(message)

    def cycle_to_string(self) -> str:
        """Return the cycle as ``"a --> b --> c --> a"``."""
        return cycle_to_string(self.cycle)

    def __str__(self) -> str:
        return f"{super().__str__()} {self.cycle_to_string()}"


class Dag(Graph):
    """A graph that never contains a cycle.

    Every :meth:`add_edge` is checked: an edge that closes a cycle is removed
    again and :class:`CycleDetectedError` is raised, so the DAG is never
    observably cyclic.

    Example:
        >>> dag = Dag()
        >>> _ = dag.add_edge("a", "b"), dag.add_edge("b", "c")
        >>> dag.add_edge("c", "a")
        Traceback (most recent call last):
        ...
        modgraph._graph._dag.CycleDetectedError: Edge between 'c' and 'a' introduces to cycle in the graph a --> b --> c --> a

    """

    def _assert_graph_constraints(self, edge: Edge) -> None:
        super()._assert_graph_constraints(edge)

        cycle = introduces_cycle(edge.source)
        if cycle is None:
            return

        if self.remove_edge(edge) is None:
            msg = f"Unable to remove edge {edge!r}"
            raise RuntimeError(msg)

        source, target = edge.key
        logger.debug(f"Rejected edge {source!r} -> {target!r}: {cycle_to_string(cycle)}")
        msg = f"Edge between '{source}' and '{target}' introduces to cycle in the graph"
        raise CycleDetectedError(msg, _rotate_to(cycle, target))

    def get_successor_labels(self, label: str) -> list[str]:
        """Return the topological order of everything reachable from ``label``.

        Args:
            label: Label of the node to start from.

        Returns:
            Labels in topological order; ``label`` itself is always last.

        Raises:
            NodeNotFoundError: If there is no node labelled ``label``.

        """
        node = self.get_node(label)
        if node is None:
            raise NodeNotFoundError(label)

        if node.is_leaf:
            return [label]

        return topological_sort(node)

    def topological_order(self) -> list[str]:
        """Return all node labels in topological order (dependencies first)."""
        return topological_sort(self)


def _rotate_to(cycle: list[str], label: str) -> list[str]:
    """Rotate a closed cycle so that it starts and ends at ``label``."""
    if label not in cycle:
        return cycle
    ring = cycle[:-1]
    start = ring.index(label)
    rotated = ring[start:] + ring[:start]
    return [*rotated, rotated[0]]
