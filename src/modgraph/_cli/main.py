import logging
from pathlib import Path
from typing import Annotated, cast

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from modgraph._graph import CycleDetectedError, Dag, NodeNotFoundError
from modgraph._render import GraphingError, GraphRenderer, GraphvizNotFoundError, GraphvizRenderer
from modgraph._style import Orientation
from modgraph._workspace import (
    AGGREGATE_PACKAGING,
    Workspace,
    WorkspaceError,
    build_module_graph,
    dump_workspace,
    label_of,
    load_workspace,
    sample_workspace,
)

from .config import ConfigError, ModgraphConfig, get_config
from .graph_render import build_node_table, display_label, render_cycle, render_order, render_tree

logger = logging.getLogger(__name__)

app = typer.Typer()

# Console for stderr (info/errors); no emoji codes, module labels are ":"-joined
# Console for stderr (info/errors); module labels contain ":" so emoji codes stay off
err_console = Console(stderr=True, emoji=False)
# Console for stdout (results)
out_console = Console(emoji=False)

DEFAULT_WORKSPACE = Path("modgraph.toml")
DEFAULT_OUTPUT = Path("build/graph-multimodule.png")

WorkspaceArgument = Annotated[
    Path | None,
    typer.Argument(help="Path to the workspace TOML file (defaults to [tool.modgraph].workspace or modgraph.toml)"),
]
IgnoreVersionsOption = Annotated[
    bool | None,
    typer.Option("--ignore-versions/--no-ignore-versions", help="Leave versions out of labels and matching"),
]
FilterTestsOption = Annotated[
    bool | None,
    typer.Option("--filter-tests/--no-filter-tests", help="Skip test-scoped dependencies"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Modgraph CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _load_config() -> ModgraphConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _load_workspace(path: Path | None, config: ModgraphConfig) -> Workspace:
    """Load the workspace from the CLI path, the config, or the default location."""
    workspace_path = path or config.workspace or DEFAULT_WORKSPACE
    err_console.print(f"[cyan]Loading workspace from:[/cyan] {workspace_path}")

    if not workspace_path.exists():
        err_console.print(f"[red]Error: Workspace file not found: {workspace_path}[/red]")
        raise typer.Exit(code=1)

    try:
        workspace = load_workspace(workspace_path)
    except WorkspaceError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    err_console.print(f"[cyan]Workspace:[/cyan] [bold]{escape(workspace.title)}[/bold]")
    err_console.print()
    return workspace


def _build_dag(workspace: Workspace, *, ignore_versions: bool, filter_tests: bool) -> Dag:
    """Build the module DAG, exiting with the cycle report if there is one."""
    try:
        graph = build_module_graph(
            workspace,
            ignore_versions=ignore_versions,
            filter_tests=filter_tests,
            acyclic=True,
        )
    except CycleDetectedError as e:
        logger.debug(str(e))
        err_console.print()
        render_cycle(e, err_console)
        err_console.print()
        raise typer.Exit(code=1) from e

    return cast("Dag", graph)


def _pick(value: bool | None, configured: bool | None, *, default: bool) -> bool:  # noqa: FBT001
    if value is not None:
        return value
    if configured is not None:
        return configured
    return default


@app.command()
def render(  # noqa: PLR0913
    workspace_path: WorkspaceArgument = None,
    *,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Image to write; the extension selects the format"),
    ] = None,
    ignore_versions: IgnoreVersionsOption = None,
    filter_tests: FilterTestsOption = None,
    orientation: Annotated[
        Orientation | None,
        typer.Option("--orientation", help="Layout direction of the graph"),
    ] = None,
    title: Annotated[
        str | None,
        typer.Option("--title", help="Graph title (defaults to the workspace title)"),
    ] = None,
) -> None:
    """Render the module dependency graph with Graphviz."""
    config = _load_config()
    err_console.print()
    workspace = _load_workspace(workspace_path, config)

    graph = build_module_graph(
        workspace,
        ignore_versions=_pick(ignore_versions, config.ignore_versions, default=True),
        filter_tests=_pick(filter_tests, config.filter_tests, default=True),
    )
    graph.style.title = title or config.title or workspace.title
    graph.style.orientation = orientation or config.orientation or Orientation.LEFT_TO_RIGHT

    output_file = output or config.output or DEFAULT_OUTPUT
    err_console.print(f"[cyan]Rendering graph to:[/cyan] {output_file}")
    renderer: GraphRenderer = GraphvizRenderer()
    try:
        result = renderer.render(graph, output_file)
    except GraphvizNotFoundError as e:
        err_console.print(f"[yellow]⚠ {escape(str(e))}[/yellow]")
        if e.dot_file is not None:
            err_console.print(f"[yellow]  DOT file kept at:[/yellow] {e.dot_file}")
        err_console.print()
        raise typer.Exit(code=0) from e
    except GraphingError as e:
        err_console.print(f"[red]✗ Unable to generate graph: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    err_console.print(f"[dim]DOT file: {result.dot_file}[/dim]")
    err_console.print()
    err_console.print("[green]✓ Graph rendered[/green]")
    err_console.print()


@app.command()
def order(
    workspace_path: WorkspaceArgument = None,
    *,
    start: Annotated[
        str | None,
        typer.Option("--from", help="Only order the modules NAME depends on (NAME or group:NAME)"),
    ] = None,
    ignore_versions: IgnoreVersionsOption = None,
    filter_tests: FilterTestsOption = None,
) -> None:
    """Print the build order of the modules (dependencies first)."""
    config = _load_config()
    err_console.print()
    workspace = _load_workspace(workspace_path, config)
    resolved_ignore_versions = _pick(ignore_versions, config.ignore_versions, default=True)
    dag = _build_dag(
        workspace,
        ignore_versions=resolved_ignore_versions,
        filter_tests=_pick(filter_tests, config.filter_tests, default=True),
    )

    if start is None:
        labels = dag.topological_order()
    else:
        module = workspace.find_module(start)
        if module is None or module.packaging == AGGREGATE_PACKAGING:
            err_console.print(f"[red]Error: No module named '{escape(start)}' in the workspace[/red]")
            raise typer.Exit(code=1)
        try:
            labels = dag.get_successor_labels(label_of(module, ignore_versions=resolved_ignore_versions))
        except NodeNotFoundError as e:
            err_console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(code=1) from e

    render_order(labels, out_console)


@app.command()
def check(
    workspace_path: WorkspaceArgument = None,
    *,
    ignore_versions: IgnoreVersionsOption = None,
    filter_tests: FilterTestsOption = None,
) -> None:
    """Check that the module dependencies contain no cycle."""
    config = _load_config()
    err_console.print()
    workspace = _load_workspace(workspace_path, config)

    err_console.print("[cyan]Validating dependencies...[/cyan]")
    dag = _build_dag(
        workspace,
        ignore_versions=_pick(ignore_versions, config.ignore_versions, default=True),
        filter_tests=_pick(filter_tests, config.filter_tests, default=True),
    )
    err_console.print()

    err_console.print(
        Panel(
            build_node_table(dag),
            title=f"[bold]Workspace: {escape(workspace.title)}[/bold]",
            border_style="cyan",
        ),
    )
    err_console.print(f"[dim]Total: {len(dag)} modules, {len(dag.get_edges())} dependencies[/dim]")
    err_console.print()
    err_console.print("[green]✓ No dependency cycles[/green]")
    err_console.print()


@app.command()
def tree(
    workspace_path: WorkspaceArgument = None,
    *,
    start: Annotated[
        str,
        typer.Option("--from", help="Module whose dependencies to show (NAME or group:NAME)"),
    ],
    ignore_versions: IgnoreVersionsOption = None,
    filter_tests: FilterTestsOption = None,
) -> None:
    """Show the dependency tree of a module."""
    config = _load_config()
    err_console.print()
    workspace = _load_workspace(workspace_path, config)
    resolved_ignore_versions = _pick(ignore_versions, config.ignore_versions, default=True)
    dag = _build_dag(
        workspace,
        ignore_versions=resolved_ignore_versions,
        filter_tests=_pick(filter_tests, config.filter_tests, default=True),
    )

    module = workspace.find_module(start)
    node = None if module is None else dag.get_node(label_of(module, ignore_versions=resolved_ignore_versions))
    if node is None:
        err_console.print(f"[red]Error: No module named '{escape(start)}' in the graph[/red]")
        raise typer.Exit(code=1)

    logger.debug(f"Tree root: {display_label(node.label)}")
    render_tree(node, out_console)


@app.command()
def init(
    *,
    output: Annotated[
        Path,
        typer.Option("-o", "--output", help="Path to output workspace TOML file"),
    ] = DEFAULT_WORKSPACE,
) -> None:
    """Generate a sample workspace TOML file."""
    err_console.print()
    err_console.print(f"[cyan]Writing sample workspace to:[/cyan] {output}")
    dump_workspace(sample_workspace(), output)
    err_console.print()
    err_console.print("[green]✓ Sample workspace generated[/green]")
    err_console.print()


def main() -> None:
    app()
