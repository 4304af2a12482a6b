"""Rich rendering utilities for graph commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

if TYPE_CHECKING:
    from rich.console import Console

    from modgraph._graph import CycleDetectedError, Graph, Node


def display_label(label: str) -> str:
    """Return a node label on one line (module labels are multi-line)."""
    return ":".join(label.splitlines())


def build_node_table(graph: Graph) -> Table:
    """Build a Rich table listing the nodes of a graph in insertion order."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Module", style="bold")
    table.add_column("Deps", justify="right")
    table.add_column("Dependents", justify="right")
    table.add_column("Kind")

    for node in graph.get_nodes():
        table.add_row(
            escape(display_label(node.label)),
            str(len(node.child_labels)),
            str(len(node.parent_labels)),
            _get_kind(node),
        )
    return table


def render_order(labels: list[str], console: Console) -> None:
    """Render a build order as a numbered list.

    Args:
        labels: Node labels in topological order.
        console: Rich Console to output to.

    """
    width = len(str(len(labels)))
    for index, label in enumerate(labels, start=1):
        console.print(f"[dim]{index:>{width}}.[/dim] {escape(display_label(label))}")


def render_cycle(error: CycleDetectedError, console: Console) -> None:
    """Render a rejected dependency cycle."""
    console.print("[red]✗ Dependency cycle detected:[/red]")
    for label in error.cycle:
        console.print(f"  [red]→[/red] {escape(display_label(label))}")


def render_tree(node: Node, console: Console) -> None:
    """Render the dependencies of a node using Rich Tree.

    A node reached again through another path is shown once more but not
    expanded a second time.

    Args:
        node: Root node of the tree.
        console: Rich Console to output to.

    """
    rich_tree = Tree(f"[bold]{escape(display_label(node.label))}[/bold]")
    _add_tree_children(rich_tree, node, {node.label})
    console.print(rich_tree)


def _add_tree_children(parent: Tree, node: Node, expanded: set[str]) -> None:
    """Recursively add children to a Rich Tree.

    Args:
        parent: Parent Tree node to add children to.
        node: Graph node whose children to add.
        expanded: Labels already expanded in the tree.

    """
    for child in node.children:
        child_text = escape(display_label(child.label))
        if child.label in expanded:
            parent.add(f"{child_text} [dim](see above)[/dim]")
            continue
        expanded.add(child.label)
        child_tree = parent.add(child_text)
        _add_tree_children(child_tree, child, expanded)


def _get_kind(node: Node) -> str:
    """Get a styled description of where a node sits in the graph."""
    match (node.is_root, node.is_leaf):
        case (True, True):
            return "[dim]isolated[/dim]"
        case (True, False):
            return "[blue]root[/blue]"
        case (False, True):
            return "[green]leaf[/green]"
        case _:
            return "inner"
