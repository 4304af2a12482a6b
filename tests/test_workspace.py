"""Tests for workspace loading and module graph construction."""

from pathlib import Path

import pytest

from modgraph import CycleDetectedError, Dag, Dependency, Module, Orientation, Workspace, WorkspaceError
from modgraph._workspace import (
    TEST_EDGE_COLOR,
    TEST_NODE_COLOR,
    build_module_graph,
    dump_workspace,
    is_workspace_dependency,
    load_workspace,
    module_label,
    sample_workspace,
)

UTIL = "org.example\nutil\nlib"
CORE = "org.example\ncore\nlib"
APP = "org.example\napp\napp"


class TestModuleLabel:
    def test_without_version(self) -> None:
        assert module_label("org.example", "core", "1.0", "lib") == CORE

    def test_with_version(self) -> None:
        assert module_label("org.example", "core", "1.0", "lib", ignore_versions=False) == "org.example\ncore\n1.0\nlib"


class TestLoadWorkspace:
    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "modgraph.toml"
        path.write_text(
            """
title = "Demo"

[[modules]]
group = "org.example"
name = "app"
version = "2.0"

[[modules.dependencies]]
group = "org.example"
name = "core"
scope = "test"
""",
        )

        workspace = load_workspace(path)

        assert workspace.title == "Demo"
        assert len(workspace.modules) == 1
        module = workspace.modules[0]
        assert module.id == "org.example:app:lib:2.0"
        assert module.dependencies[0].is_test
        assert str(module.dependencies[0]) == "org.example:core:lib:test"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "modgraph.toml"
        path.write_text("[[modules]\n")

        with pytest.raises(WorkspaceError, match="Invalid TOML"):
            load_workspace(path)

    def test_unknown_key(self, tmp_path: Path) -> None:
        path = tmp_path / "modgraph.toml"
        path.write_text('[[modules]]\ngroup = "g"\nname = "a"\ncolour = "red"\n')

        with pytest.raises(WorkspaceError, match="Invalid workspace description"):
            load_workspace(path)

    def test_missing_name(self, tmp_path: Path) -> None:
        path = tmp_path / "modgraph.toml"
        path.write_text('[[modules]]\ngroup = "g"\n')

        with pytest.raises(WorkspaceError):
            load_workspace(path)

    def test_dump_and_load(self, tmp_path: Path) -> None:
        path = tmp_path / "out" / "modgraph.toml"

        dump_workspace(sample_workspace(), path)

        assert load_workspace(path) == sample_workspace()


class TestFindModule:
    def test_by_name(self) -> None:
        module = sample_workspace().find_module("core")
        assert module is not None
        assert module.name == "core"

    def test_by_group_and_name(self) -> None:
        module = sample_workspace().find_module("org.example:app")
        assert module is not None
        assert module.packaging == "app"

    def test_missing(self) -> None:
        assert sample_workspace().find_module("nope") is None


class TestIsWorkspaceDependency:
    def test_matching_module(self) -> None:
        dep = Dependency(group="org.example", name="util", version="9.9")
        assert is_workspace_dependency(sample_workspace(), dep)

    def test_version_mismatch(self) -> None:
        dep = Dependency(group="org.example", name="util", version="9.9")
        assert not is_workspace_dependency(sample_workspace(), dep, ignore_versions=False)

    def test_external(self) -> None:
        dep = Dependency(group="org.thirdparty", name="http-client", version="2.3")
        assert not is_workspace_dependency(sample_workspace(), dep)


class TestBuildModuleGraph:
    def test_sample(self) -> None:
        graph = build_module_graph(sample_workspace())

        assert [n.label for n in graph.get_nodes()] == [UTIL, CORE, APP]
        assert [e.key for e in graph.get_edges()] == [(CORE, UTIL), (APP, CORE)]
        assert graph.style.title == "Module Relationship"
        assert graph.style.orientation is Orientation.LEFT_TO_RIGHT

    def test_aggregate_modules_are_skipped(self) -> None:
        graph = build_module_graph(sample_workspace())

        assert "org.example\nparent\naggregate" not in graph

    def test_external_dependencies_are_not_drawn(self) -> None:
        graph = build_module_graph(sample_workspace())

        assert not any("http-client" in node.label for node in graph.get_nodes())

    def test_keep_test_dependencies(self) -> None:
        graph = build_module_graph(sample_workspace(), filter_tests=False)

        edge = graph.get_edge(APP, UTIL)
        assert edge is not None
        assert edge.style.line_color == TEST_EDGE_COLOR
        assert edge.target.style.background_color == TEST_NODE_COLOR
        assert edge.target.style.border_color == TEST_NODE_COLOR
        core_edge = graph.get_edge(APP, CORE)
        assert core_edge is not None
        assert core_edge.style.line_color is None

    def test_match_versions(self) -> None:
        workspace = Workspace(
            modules=[
                Module(group="g", name="a", version="1.0", dependencies=[Dependency(group="g", name="b", version="2.0")]),
                Module(group="g", name="b", version="2.0"),
                Module(group="g", name="c", version="1.0", dependencies=[Dependency(group="g", name="b", version="1.0")]),
            ],
        )

        graph = build_module_graph(workspace, ignore_versions=False)

        assert [n.label for n in graph.get_nodes()] == ["g\na\n1.0\nlib", "g\nb\n2.0\nlib", "g\nc\n1.0\nlib"]
        assert [e.key for e in graph.get_edges()] == [("g\na\n1.0\nlib", "g\nb\n2.0\nlib")]

    def test_acyclic(self) -> None:
        graph = build_module_graph(sample_workspace(), acyclic=True)

        assert isinstance(graph, Dag)
        assert graph.get_successor_labels(APP) == [UTIL, CORE, APP]

    def test_cycle_is_reported(self) -> None:
        workspace = Workspace(
            modules=[
                Module(group="g", name="a", dependencies=[Dependency(group="g", name="b")]),
                Module(group="g", name="b", dependencies=[Dependency(group="g", name="a")]),
            ],
        )

        with pytest.raises(CycleDetectedError) as exc_info:
            build_module_graph(workspace, acyclic=True)

        assert exc_info.value.cycle == ["g\na\nlib", "g\nb\nlib", "g\na\nlib"]

    def test_cycle_allowed_without_acyclic(self) -> None:
        workspace = Workspace(
            modules=[
                Module(group="g", name="a", dependencies=[Dependency(group="g", name="b")]),
                Module(group="g", name="b", dependencies=[Dependency(group="g", name="a")]),
            ],
        )

        graph = build_module_graph(workspace)

        assert len(graph.get_edges()) == 2
