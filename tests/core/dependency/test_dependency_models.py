"""Tests for DependencyNode and DependencyTree."""

from __future__ import annotations

from skillpm.core.dependency import DependencyNode, DependencyTree


def _sample_root() -> DependencyNode:
    d1 = DependencyNode("D", "1.0.0", depth=2, installed=True)
    d2 = DependencyNode("D", "1.0.0", depth=2, installed=True)
    b = DependencyNode("B", "1.0.0", children=[d1], depth=1)
    c = DependencyNode("C", "1.0.0", children=[d2], depth=1)
    return DependencyNode("A", "1.0.0", children=[b, c])


class TestDependencyNode:

    def test_key(self) -> None:
        assert DependencyNode("ao-basics", "1.2.0").key == "ao-basics@1.2.0"

    def test_defaults(self) -> None:
        node = DependencyNode("x", "1")
        assert node.children == []
        assert node.depth == 0
        assert node.installed is False
        assert node.install_path is None

    def test_children_not_shared_between_instances(self) -> None:
        a, b = DependencyNode("a", "1"), DependencyNode("b", "1")
        a.children.append(DependencyNode("c", "1"))
        assert b.children == []

    def test_walk_is_pre_order(self) -> None:
        assert [n.name for n in _sample_root().walk()] == ["A", "B", "D", "C", "D"]


class TestDependencyTree:

    def test_from_root_statistics(self) -> None:
        tree = DependencyTree.from_root(_sample_root(), ["mcp__x"])
        assert tree.total_count == 5
        assert tree.max_depth == 2
        assert tree.installed_count == 2
        assert tree.external_services == ["mcp__x"]

    def test_unique_names(self) -> None:
        tree = DependencyTree.from_root(_sample_root())
        assert tree.unique_names() == ["A", "B", "D", "C"]

    def test_find(self) -> None:
        tree = DependencyTree.from_root(_sample_root())
        found = tree.find(lambda n: n.name == "C")
        assert found is not None and found.depth == 1
        assert tree.find(lambda n: n.name == "Z") is None
