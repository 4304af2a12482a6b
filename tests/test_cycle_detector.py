"""Tests for cycle detection."""

from modgraph import Graph, VisitState, cycle_to_string, find_cycle, introduces_cycle


def _graph(*edges: tuple[str, str]) -> Graph:
    graph = Graph()
    for source, target in edges:
        graph.add_edge(source, target)
    return graph


class TestIntroducesCycle:
    def test_three_node_cycle(self) -> None:
        graph = _graph(("a", "b"), ("b", "c"), ("c", "a"))
        node = graph.get_node("a")
        assert node is not None

        assert introduces_cycle(node) == ["a", "b", "c", "a"]

    def test_cycle_starting_mid_path(self) -> None:
        # x leads into the cycle but is not part of it
        graph = _graph(("x", "a"), ("a", "b"), ("b", "a"))
        node = graph.get_node("x")
        assert node is not None

        assert introduces_cycle(node) == ["a", "b", "a"]

    def test_self_loop(self) -> None:
        graph = _graph(("a", "a"))
        node = graph.get_node("a")
        assert node is not None

        assert introduces_cycle(node) == ["a", "a"]

    def test_acyclic(self) -> None:
        graph = _graph(("a", "b"), ("a", "c"), ("b", "d"), ("c", "d"))
        node = graph.get_node("a")
        assert node is not None

        assert introduces_cycle(node) is None

    def test_diamond_is_not_a_cycle(self) -> None:
        # d is reached twice but never while still on the stack
        graph = _graph(("a", "b"), ("b", "d"), ("a", "c"), ("c", "d"), ("d", "e"))
        node = graph.get_node("a")
        assert node is not None

        assert introduces_cycle(node) is None

    def test_leaf(self) -> None:
        graph = Graph()
        node = graph.add_node("a")

        assert introduces_cycle(node) is None

    def test_records_states(self) -> None:
        graph = _graph(("a", "b"), ("b", "c"))
        node = graph.get_node("a")
        assert node is not None
        states: dict[str, VisitState] = {}

        introduces_cycle(node, states)

        assert states == {
            "a": VisitState.VISITED,
            "b": VisitState.VISITED,
            "c": VisitState.VISITED,
        }

    def test_skips_visited_nodes(self) -> None:
        graph = _graph(("a", "b"), ("b", "a"))
        node = graph.get_node("a")
        assert node is not None

        assert introduces_cycle(node, {"b": VisitState.VISITED}) is None

    def test_deep_chain(self) -> None:
        graph = Graph()
        depth = 2000
        for i in range(depth):
            graph.add_edge(f"n{i}", f"n{i + 1}")
        graph.add_edge(f"n{depth}", "n0")
        node = graph.get_node("n0")
        assert node is not None

        cycle = introduces_cycle(node)

        assert cycle is not None
        assert len(cycle) == depth + 2
        assert cycle[0] == cycle[-1] == "n0"


class TestFindCycle:
    def test_empty_graph(self) -> None:
        assert find_cycle(Graph()) is None

    def test_acyclic_graph(self) -> None:
        assert find_cycle(_graph(("a", "b"), ("b", "c"), ("a", "c"))) is None

    def test_cycle_not_reachable_from_first_node(self) -> None:
        graph = _graph(("a", "b"), ("c", "d"), ("d", "c"))

        assert find_cycle(graph) == ["c", "d", "c"]


class TestCycleToString:
    def test_joins_labels(self) -> None:
        assert cycle_to_string(["a", "b", "c", "a"]) == "a --> b --> c --> a"

    def test_single_label(self) -> None:
        assert cycle_to_string(["a"]) == "a"
