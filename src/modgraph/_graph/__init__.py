"""Graph module providing the graph model and its algorithms.

This module contains:
- Graph, Node, Edge: a mutable directed graph of uniquely labelled nodes
- Dag: a Graph that rejects edges introducing a cycle
- introduces_cycle, find_cycle: cycle detection
- topological_sort: dependency-first ordering of node labels
"""

from ._cycle import VisitState, cycle_to_string, find_cycle, introduces_cycle
from ._dag import CycleDetectedError, Dag
from ._model import Edge, Graph, GraphConstraintError, Node, NodeNotFoundError
from ._sort import topological_sort

__all__ = [
    "CycleDetectedError",
    "Dag",
    "Edge",
    "Graph",
    "GraphConstraintError",
    "Node",
    "NodeNotFoundError",
    "VisitState",
    "cycle_to_string",
    "find_cycle",
    "introduces_cycle",
    "topological_sort",
]
