"""Node, edge and graph data model."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Self

from modgraph._style import EdgeStyle, GraphStyle, NodeStyle

logger = logging.getLogger(__name__)


class GraphConstraintError(Exception):
    """Raised when a graph mutation would violate a structural constraint.

    The graph is left unchanged when this error surfaces.
    """


class NodeNotFoundError(GraphConstraintError, KeyError):
    """Raised when a label that must name an existing node is unknown."""

    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(f"No node labelled '{label}' in the graph")

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0])


@dataclass(eq=False, slots=True)
class Node:
    """A uniquely labelled vertex of a :class:`Graph`.

    Adjacency is stored as ordered lists of labels and resolved through the
    node table of the owning graph, so a node only ever refers to nodes of the
    same graph. Nodes compare equal by label.

    Nodes are created by :meth:`Graph.add_node` (or implicitly by
    :meth:`Graph.add_edge`); their adjacency is only changed by the graph.
    """

    label: str
    style: NodeStyle = field(default_factory=NodeStyle)
    _table: dict[str, Node] = field(default_factory=dict, repr=False)
    _child_labels: list[str] = field(default_factory=list, repr=False)
    _parent_labels: list[str] = field(default_factory=list, repr=False)

    @property
    def children(self) -> list[Node]:
        """Direct children, in the order their edges were added."""
        return [self._table[label] for label in self._child_labels]

    @property
    def parents(self) -> list[Node]:
        """Direct parents, in the order their edges were added."""
        return [self._table[label] for label in self._parent_labels]

    @property
    def child_labels(self) -> list[str]:
        return list(self._child_labels)

    @property
    def parent_labels(self) -> list[str]:
        return list(self._parent_labels)

    @property
    def is_leaf(self) -> bool:
        """True if the node has no children."""
        return not self._child_labels

    @property
    def is_root(self) -> bool:
        """True if the node has no parents."""
        return not self._parent_labels

    @property
    def is_connected(self) -> bool:
        """True if the node is a root or a leaf."""
        return self.is_root or self.is_leaf

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.label == other.label

    def __hash__(self) -> int:
        return hash(self.label)

    def __repr__(self) -> str:
        return f"Node(label={self.label!r}, parents={len(self._parent_labels)}, children={len(self._child_labels)})"


@dataclass(eq=False, slots=True)
class Edge:
    """A directed edge between two nodes of the same graph."""

    source: Node
    target: Node
    style: EdgeStyle = field(default_factory=EdgeStyle)

    @property
    def key(self) -> tuple[str, str]:
        """The ``(source, target)`` label pair identifying this edge."""
        return (self.source.label, self.target.label)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"Edge({self.source.label!r} -> {self.target.label!r})"


class Graph:
    """A directed graph of uniquely labelled nodes.

    Nodes and edges are kept in insertion order so that iteration, sorting and
    rendering are deterministic. A graph is meant to be mutated by a single
    caller at a time; it does no locking of its own.

    Example:
        >>> graph = Graph()
        >>> graph.add_edge("app", "core")
        Edge('app' -> 'core')
        >>> [node.label for node in graph.get_nodes()]
        ['app', 'core']

    """

    def __init__(self, style: GraphStyle | None = None) -> None:
        self._nodes: dict[str, Node] = {}
        self._edges: list[Edge] = []
        self.style = style if style is not None else GraphStyle()

    def add_node(self, label: str) -> Node:
        """Return the node labelled ``label``, creating it if needed.

        Args:
            label: The node label. Must be a non-empty string.

        Returns:
            The existing node for ``label``, or a newly registered one.

        Raises:
            GraphConstraintError: If ``label`` is not a non-empty string.

        """
        _check_label(label)
        node = self._nodes.get(label)
        if node is not None:
            return node

        node = Node(label, _table=self._nodes)
        self._nodes[label] = node
        logger.debug(f"Added node {label!r}")
        return node

    def add_edge(self, source: str | Node, target: str | Node) -> Edge:
        """Add a directed edge, creating missing endpoint nodes.

        Adding an edge that is already present returns the existing edge and
        changes nothing. After linking, :meth:`_assert_graph_constraints` is
        run; if it rejects the edge, the edge and any endpoint node created by
        this call are removed again before the error propagates.

        Args:
            source: Label (or node) the edge starts from.
            target: Label (or node) the edge points to.

        Returns:
            The new edge, or the existing one for a duplicate insertion.

        Raises:
            GraphConstraintError: If the edge violates a graph constraint.

        """
        source_label = _check_label(_label_of(source))
        target_label = _check_label(_label_of(target))

        existing = self.get_edge(source_label, target_label)
        if existing is not None:
            return existing

        created = [label for label in dict.fromkeys((source_label, target_label)) if label not in self._nodes]
        edge = Edge(self.add_node(source_label), self.add_node(target_label))
        self._link(edge)

        try:
            self._assert_graph_constraints(edge)
        except GraphConstraintError:
            self._rollback(edge, created)
            raise

        logger.debug(f"Added edge {source_label!r} -> {target_label!r}")
        return edge

    def remove_edge(self, edge: Edge) -> Edge | None:
        """Remove an edge and detach it from both endpoints.

        Nodes left without edges stay in the graph.

        Args:
            edge: The edge to remove (matched by its endpoint labels).

        Returns:
            The removed edge, or None if the graph holds no such edge.

        """
        for index, candidate in enumerate(self._edges):
            if candidate.key == edge.key:
                del self._edges[index]
                candidate.source._child_labels.remove(candidate.target.label)  # noqa: SLF001
                candidate.target._parent_labels.remove(candidate.source.label)  # noqa: SLF001
                logger.debug(f"Removed edge {candidate!r}")
                return candidate
        return None

    def get_node(self, label: str) -> Node | None:
        """Return the node labelled ``label``, or None if there is none."""
        return self._nodes.get(label)

    def get_nodes(self) -> list[Node]:
        """Return all nodes in insertion order."""
        return list(self._nodes.values())

    def get_edge(self, source: str | Node, target: str | Node) -> Edge | None:
        """Return the edge between two labels, or None if there is none."""
        key = (_label_of(source), _label_of(target))
        for edge in self._edges:
            if edge.key == key:
                return edge
        return None

    def get_edges(self) -> list[Edge]:
        """Return all edges in insertion order."""
        return list(self._edges)

    def copy(self) -> Self:
        """Return an independent deep copy of this graph.

        The copy has the same concrete class, node and edge order, adjacency
        order and (copied) styles.
        """
        clone = type(self)(copy.deepcopy(self.style))
        for node in self._nodes.values():
            clone._nodes[node.label] = Node(  # noqa: SLF001
                node.label,
                style=copy.deepcopy(node.style),
                _table=clone._nodes,  # noqa: SLF001
                _child_labels=list(node._child_labels),  # noqa: SLF001
                _parent_labels=list(node._parent_labels),  # noqa: SLF001
            )
        for edge in self._edges:
            clone._edges.append(  # noqa: SLF001
                Edge(
                    clone._nodes[edge.source.label],  # noqa: SLF001
                    clone._nodes[edge.target.label],  # noqa: SLF001
                    style=copy.deepcopy(edge.style),
                ),
            )
        return clone

    def _assert_graph_constraints(self, edge: Edge) -> None:
        """Check a just-linked edge; subclasses add their own constraints.

        Raises:
            GraphConstraintError: If an endpoint is not a node of this graph.

        """
        for node in (edge.source, edge.target):
            if self._nodes.get(node.label) is not node:
                msg = f"Edge endpoint '{node.label}' is not a node of this graph"
                raise GraphConstraintError(msg)

    def _link(self, edge: Edge) -> None:
        source, target = edge.source, edge.target
        if target.label not in source._child_labels:  # noqa: SLF001
            source._child_labels.append(target.label)  # noqa: SLF001
        if source.label not in target._parent_labels:  # noqa: SLF001
            target._parent_labels.append(source.label)  # noqa: SLF001
        self._edges.append(edge)

    def _rollback(self, edge: Edge, created: list[str]) -> None:
        self.remove_edge(edge)
        for label in created:
            node = self._nodes.get(label)
            if node is not None and node.is_root and node.is_leaf:
                del self._nodes[label]
        logger.debug(f"Rolled back edge {edge!r}")

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._nodes)

    def __contains__(self, label: object) -> bool:
        """Check if a node with the given label is in the graph."""
        if isinstance(label, Node):
            label = label.label
        return label in self._nodes

    def __repr__(self) -> str:
        return f"{type(self).__name__}(nodes={len(self._nodes)}, edges={len(self._edges)})"


def _label_of(value: str | Node) -> str:
    if isinstance(value, Node):
        return value.label
    return value


def _check_label(label: object) -> str:
    if not isinstance(label, str) or not label:
        msg = f"Node label must be a non-empty string, got {label!r}"
        raise GraphConstraintError(msg)
    return label
