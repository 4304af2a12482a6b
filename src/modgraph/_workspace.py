"""Multi-module workspace descriptions and the module graph built from them.

A workspace is a TOML file listing modules and their dependencies:

    title = "Module Relationship"

    [[modules]]
    group = "org.example"
    name = "app"
    version = "1.0"

    [[modules.dependencies]]
    group = "org.example"
    name = "core"

Dependencies that name another module of the workspace become edges of the
module graph; external dependencies are only logged.
"""

import logging
import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from modgraph._graph import Dag, Graph, Node
from modgraph._style import Orientation

logger = logging.getLogger(__name__)

AGGREGATE_PACKAGING = "aggregate"
"""Packaging of modules that only group other modules; they are not drawn."""

TEST_EDGE_COLOR = "#0000ff"
TEST_NODE_COLOR = (200, 200, 255)


class WorkspaceError(Exception):
    """Error in a workspace description."""


class Dependency(BaseModel):
    """A dependency declared by a module."""

    model_config = ConfigDict(extra="forbid")

    group: str
    name: str
    version: str | None = None
    packaging: str = "lib"
    scope: str = "main"

    @property
    def is_test(self) -> bool:
        return self.scope == "test"

    def __str__(self) -> str:
        version = f":{self.version}" if self.version else ""
        return f"{self.group}:{self.name}:{self.packaging}{version}:{self.scope}"


class Module(BaseModel):
    """A module of the workspace."""

    model_config = ConfigDict(extra="forbid")

    group: str
    name: str
    version: str = "0.0.0"
    packaging: str = "lib"
    dependencies: list[Dependency] = Field(default_factory=list)

    @property
    def id(self) -> str:
        return f"{self.group}:{self.name}:{self.packaging}:{self.version}"


class Workspace(BaseModel):
    """A set of modules to draw together."""

    model_config = ConfigDict(extra="forbid")

    title: str = "Module Relationship"
    modules: list[Module] = Field(default_factory=list)

    def find_module(self, name: str) -> Module | None:
        """Find a module by name, or by ``group:name``."""
        for module in self.modules:
            if name in (module.name, f"{module.group}:{module.name}"):
                return module
        return None


def module_label(group: str, name: str, version: str | None, packaging: str, *, ignore_versions: bool = True) -> str:
    """Build the node label of a module, one coordinate per line.

    Example:
        >>> module_label("org.example", "core", "1.0", "lib")
        'org.example\\ncore\\nlib'

    """
    parts = [group, name]
    if not ignore_versions:
        parts.append(version or "")
    parts.append(packaging)
    return "\n".join(parts)


def label_of(module: Module, *, ignore_versions: bool = True) -> str:
    return module_label(module.group, module.name, module.version, module.packaging, ignore_versions=ignore_versions)


def load_workspace(path: Path | str) -> Workspace:
    """Load and validate a workspace TOML file.

    Args:
        path: Path to the workspace TOML file.

    Returns:
        The validated Workspace.

    Raises:
        WorkspaceError: If the file is not valid TOML or not a valid workspace.

    """
    path = Path(path)
    with path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {path}: {e}"
            raise WorkspaceError(msg) from e

    try:
        workspace = Workspace.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid workspace description in {path}:\n{e}"
        raise WorkspaceError(msg) from e

    logger.debug(f"Loaded {len(workspace.modules)} module(s) from {path}")
    return workspace


def dump_workspace(workspace: Workspace, path: Path | str) -> None:
    """Write a workspace description as TOML."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(workspace.model_dump(exclude_none=True), f)


def sample_workspace() -> Workspace:
    """Return a small example workspace, as written by ``modgraph init``."""
    group = "org.example"
    return Workspace(
        modules=[
            Module(group=group, name="parent", packaging=AGGREGATE_PACKAGING),
            Module(group=group, name="util", version="1.0"),
            Module(
                group=group,
                name="core",
                version="1.0",
                dependencies=[Dependency(group=group, name="util")],
            ),
            Module(
                group=group,
                name="app",
                version="1.0",
                packaging="app",
                dependencies=[
                    Dependency(group=group, name="core"),
                    Dependency(group="org.thirdparty", name="http-client", version="2.3"),
                    Dependency(group=group, name="util", scope="test"),
                ],
            ),
        ],
    )


def is_workspace_dependency(workspace: Workspace, dep: Dependency, *, ignore_versions: bool = True) -> bool:
    """Check whether ``dep`` refers to a module of the workspace.

    Matches on group, name and packaging, and also on version unless
    ``ignore_versions`` is set.
    """
    for module in workspace.modules:
        if (module.group, module.name, module.packaging) != (dep.group, dep.name, dep.packaging):
            continue
        if ignore_versions or module.version == dep.version:
            return True
    return False


def build_module_graph(
    workspace: Workspace,
    *,
    ignore_versions: bool = True,
    filter_tests: bool = True,
    acyclic: bool = False,
) -> Graph:
    """Build the graph of module-to-module dependencies.

    Args:
        workspace: The workspace to draw.
        ignore_versions: Leave versions out of labels and dependency matching.
        filter_tests: Skip test-scoped dependencies. When False they are kept
            and drawn in blue.
        acyclic: Build a :class:`Dag`, so that a dependency cycle raises
            :class:`~modgraph.CycleDetectedError`.

    Returns:
        A Graph (or Dag) with one node per non-aggregate module and one edge
        from each module to each module it depends on.

    """
    graph: Graph = Dag() if acyclic else Graph()
    graph.style.title = workspace.title
    graph.style.orientation = Orientation.LEFT_TO_RIGHT

    logger.info(f"Found {len(workspace.modules)} module(s)")
    for module in workspace.modules:
        if module.packaging == AGGREGATE_PACKAGING:
            continue

        node = graph.add_node(label_of(module, ignore_versions=ignore_versions))
        logger.info(f"   Module: {module.id}  - {len(module.dependencies)} dep(s)")
        _add_dependencies(
            graph,
            workspace,
            node,
            module.dependencies,
            ignore_versions=ignore_versions,
            filter_tests=filter_tests,
        )

    return graph


def _add_dependencies(
    graph: Graph,
    workspace: Workspace,
    node: Node,
    deps: list[Dependency],
    *,
    ignore_versions: bool,
    filter_tests: bool,
) -> None:
    for dep in deps:
        if filter_tests and dep.is_test:
            continue

        is_module = is_workspace_dependency(workspace, dep, ignore_versions=ignore_versions)
        if is_module:
            label = module_label(dep.group, dep.name, dep.version, dep.packaging, ignore_versions=ignore_versions)
            edge = graph.add_edge(node, label)
            if dep.is_test:
                edge.style.line_color = TEST_EDGE_COLOR
                edge.target.style.background_color = TEST_NODE_COLOR
                edge.target.style.border_color = TEST_NODE_COLOR

        logger.info(f"     {'* ' if is_module else '  '}{dep}")
