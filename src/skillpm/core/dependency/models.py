"""Dependency tree data structures.

The resolver produces a *tree of value nodes*, not a shared graph: each
``DependencyNode`` owns its children, and a skill reached through two
branches (a diamond) appears as two distinct node instances. Algorithms
that need a deduplicated view (fetch cache, sort in-degree table) build
one themselves.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# DependencyNode: one occurrence of a skill in the tree
# ---------------------------------------------------------------------------


@dataclass
class DependencyNode:
    """A skill at a specific version, at one position in the dependency tree.

    Attributes:
        name: Skill name.
        version: Version served by the registry.
        storage_ref: Opaque content address of the skill bundle.
        children: Resolved dependencies, in declaration order.
        depth: Number of edges from the root (root = 0).
        installed: True if the lock file already records this name and version.
        install_path: Where the installed copy lives, when ``installed``.
    """

    name: str
    version: str
    storage_ref: str = ""
    children: list[DependencyNode] = field(default_factory=list)
    depth: int = 0
    installed: bool = False
    install_path: str | None = None

    @property
    def key(self) -> str:
        """Identity used for cycle detection: ``name@version``."""
        return f"{self.name}@{self.version}"

    def walk(self) -> Iterator[DependencyNode]:
        """Yield this node and every descendant in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


# ---------------------------------------------------------------------------
# DependencyTree: a resolved root plus summary statistics
# ---------------------------------------------------------------------------


@dataclass
class DependencyTree:
    """A fully resolved dependency tree.

    Attributes:
        root: The requested skill.
        flat_list: Every node in pre-order, duplicates included.
        max_depth: Deepest node depth in the tree.
        total_count: ``len(flat_list)``.
        installed_count: Nodes flagged as already installed.
        external_services: External-service references encountered during
            resolution, de-duplicated in first-seen order.
    """

    root: DependencyNode
    flat_list: list[DependencyNode]
    max_depth: int
    total_count: int
    installed_count: int
    external_services: list[str] = field(default_factory=list)

    @classmethod
    def from_root(
        cls,
        root: DependencyNode,
        external_services: list[str] | None = None,
    ) -> DependencyTree:
        """Build a tree and its statistics from a root node."""
        flat_list = list(root.walk())
        return cls(
            root=root,
            flat_list=flat_list,
            max_depth=max(node.depth for node in flat_list),
            total_count=len(flat_list),
            installed_count=sum(1 for node in flat_list if node.installed),
            external_services=list(external_services or []),
        )

    def unique_names(self) -> list[str]:
        """Skill names in the tree, de-duplicated in pre-order."""
        return list(dict.fromkeys(node.name for node in self.flat_list))

    def find(self, predicate: Callable[[DependencyNode], bool]) -> DependencyNode | None:
        """Return the first node (pre-order) matching ``predicate``."""
        return next((node for node in self.flat_list if predicate(node)), None)


# ---------------------------------------------------------------------------
# Cycle: a circular reference found in a tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Cycle:
    """A circular dependency path, e.g. ``["a", "b", "c", "a"]``.

    The first and last names are always the same skill. A skill depending
    directly on itself is ``["a", "a"]``.
    """

    path: tuple[str, ...]

    @property
    def description(self) -> str:
        """Arrow-joined path, e.g. ``"a→b→c→a"``."""
        return "→".join(self.path)
