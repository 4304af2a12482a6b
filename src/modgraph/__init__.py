"""Module dependency graphs: DAG model, topological ordering and Graphviz rendering."""

__all__ = [
    "OUTPUT_FORMATS",
    "CycleDetectedError",
    "Dag",
    "Dependency",
    "Edge",
    "EdgeStyle",
    "Graph",
    "GraphConstraintError",
    "GraphRenderer",
    "GraphStyle",
    "GraphingError",
    "GraphvizNotFoundError",
    "GraphvizRenderer",
    "LineEnding",
    "LineStyle",
    "Module",
    "Node",
    "NodeNotFoundError",
    "NodeStyle",
    "Orientation",
    "RenderResult",
    "VisitState",
    "Workspace",
    "WorkspaceError",
    "build_module_graph",
    "css_color",
    "cycle_to_string",
    "find_cycle",
    "introduces_cycle",
    "load_workspace",
    "to_dot",
    "topological_sort",
    "write_dot",
]

from ._graph import (
    CycleDetectedError,
    Dag,
    Edge,
    Graph,
    GraphConstraintError,
    Node,
    NodeNotFoundError,
    VisitState,
    cycle_to_string,
    find_cycle,
    introduces_cycle,
    topological_sort,
)
from ._render import (
    OUTPUT_FORMATS,
    GraphingError,
    GraphRenderer,
    GraphvizNotFoundError,
    GraphvizRenderer,
    RenderResult,
    to_dot,
    write_dot,
)
from ._style import EdgeStyle, GraphStyle, LineEnding, LineStyle, NodeStyle, Orientation, css_color
from ._workspace import Dependency, Module, Workspace, WorkspaceError, build_module_graph, load_workspace
