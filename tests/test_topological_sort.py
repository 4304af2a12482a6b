"""Tests for topological sorting."""

import pytest

from modgraph import Dag, Graph, topological_sort


def _dag(nodes: list[str], edges: list[tuple[str, str]]) -> Dag:
    dag = Dag()
    for label in nodes:
        dag.add_node(label)
    for source, target in edges:
        dag.add_edge(source, target)
    return dag


class TestSortGraph:
    def test_simple_forward(self) -> None:
        # a --> b --> c
        dag = _dag([], [("a", "b"), ("b", "c")])

        assert topological_sort(dag) == ["c", "b", "a"]

    def test_simple_reverse(self) -> None:
        # a <-- b <-- c
        dag = _dag(["a", "b", "c"], [("b", "a"), ("c", "b")])

        assert topological_sort(dag) == ["a", "b", "c"]

    def test_complex_one(self) -> None:
        #  a --> b --> c --> e
        #        |     |     |
        #        |     V     V
        #          --> d <-- f --> g
        dag = _dag(
            ["a", "b", "c", "d", "e", "f"],
            [("a", "b"), ("b", "c"), ("b", "d"), ("c", "d"), ("c", "e"), ("f", "d"), ("e", "f"), ("f", "g")],
        )

        assert topological_sort(dag) == ["d", "g", "f", "e", "c", "b", "a"]

    def test_complex_two(self) -> None:
        # same shape without g, nodes inserted in a scrambled order
        dag = _dag(
            ["f", "e", "d", "c", "a", "b"],
            [("a", "b"), ("b", "c"), ("b", "d"), ("c", "d"), ("c", "e"), ("f", "d"), ("e", "f")],
        )

        assert topological_sort(dag) == ["d", "f", "e", "c", "b", "a"]

    def test_insertion_ordered_nodes(self) -> None:
        dag = _dag(
            ["a", "b", "c", "d", "e", "f"],
            [("a", "b"), ("b", "c"), ("b", "d"), ("c", "d"), ("c", "e"), ("e", "f"), ("f", "d")],
        )

        assert topological_sort(dag) == ["d", "f", "e", "c", "b", "a"]

    def test_isolated_nodes_keep_insertion_order(self) -> None:
        dag = _dag(["x", "y", "z"], [])

        assert topological_sort(dag) == ["x", "y", "z"]

    def test_empty_graph(self) -> None:
        assert topological_sort(Graph()) == []

    def test_every_node_after_its_children(self) -> None:
        graph = Graph()
        graph.add_edge("main", "parse")
        graph.add_edge("parse", "execute")
        graph.add_edge("main", "init")
        graph.add_edge("main", "cleanup")
        graph.add_edge("execute", "make_string")
        graph.add_edge("execute", "printf")
        graph.add_edge("init", "make_string")
        graph.add_edge("main", "printf")
        graph.add_edge("execute", "compare")

        result = topological_sort(graph)

        assert sorted(result) == sorted(node.label for node in graph.get_nodes())
        position = {label: index for index, label in enumerate(result)}
        for edge in graph.get_edges():
            assert position[edge.target.label] < position[edge.source.label]


class TestSortNode:
    def test_reachable_subgraph_only(self) -> None:
        dag = _dag([], [("a", "b"), ("b", "c"), ("x", "b")])
        node = dag.get_node("b")
        assert node is not None

        assert topological_sort(node) == ["c", "b"]

    def test_node_is_last(self) -> None:
        dag = _dag([], [("a", "b"), ("a", "c"), ("c", "d")])
        node = dag.get_node("a")
        assert node is not None

        assert topological_sort(node) == ["b", "d", "c", "a"]

    def test_leaf(self) -> None:
        dag = _dag(["a"], [])
        node = dag.get_node("a")
        assert node is not None

        assert topological_sort(node) == ["a"]

    def test_deep_chain(self) -> None:
        graph = Graph()
        depth = 2000
        for i in range(depth):
            graph.add_edge(f"n{i}", f"n{i + 1}")
        node = graph.get_node("n0")
        assert node is not None

        result = topological_sort(node)

        assert result[0] == f"n{depth}"
        assert result[-1] == "n0"
        assert len(result) == depth + 1


class TestSortInvalidInput:
    def test_rejects_other_types(self) -> None:
        with pytest.raises(TypeError, match="expected a Node or a Graph"):
            topological_sort("a")  # type: ignore[arg-type]
