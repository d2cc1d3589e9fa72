"""Installation ordering via Kahn's topological sort.

Edges run from each dependency to its dependent ("child must precede
node"), so repeatedly emitting zero in-degree names yields dependencies
before the skills that need them. Skills are de-duplicated by name here,
unlike in the raw tree, so a shared dependency is emitted exactly once.
"""

from __future__ import annotations

from collections import deque

from skillpm.core.dependency.models import DependencyTree
from skillpm.exceptions import CircularDependencyError


def topological_sort(tree: DependencyTree) -> list[str]:
    """Compute an installation order for a dependency tree.

    Ties between independent skills are broken by first appearance in the
    tree's pre-order walk, so a given tree always sorts the same way.

    Args:
        tree: A cycle-free dependency tree.

    Returns:
        Unique skill names, every dependency before its dependents.

    Raises:
        CircularDependencyError: If some names can never reach in-degree
            zero, i.e. the tree contains a cycle the caller did not reject.
    """
    # Distinct edges only: a diamond adds one edge per (child, parent) pair.
    dependents: dict[str, list[str]] = {}
    in_degree: dict[str, int] = {}
    for node in tree.flat_list:
        dependents.setdefault(node.name, [])
        in_degree.setdefault(node.name, 0)

    seen_edges: set[tuple[str, str]] = set()
    for node in tree.flat_list:
        for child in node.children:
            edge = (child.name, node.name)
            if edge in seen_edges:
                continue
            seen_edges.add(edge)
            dependents[child.name].append(node.name)
            in_degree[node.name] += 1

    queue: deque[str] = deque(name for name, degree in in_degree.items() if degree == 0)
    order: list[str] = []
    while queue:
        current = queue.popleft()
        order.append(current)
        for dependent in dependents[current]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    if len(order) != len(in_degree):
        stuck = [name for name, degree in in_degree.items() if degree > 0]
        raise CircularDependencyError(
            "Topological sort failed - cycle detected among: "
            f"{', '.join(stuck)}\n"
            "→ Solution: Remove circular dependencies from skill manifests",
            stuck[0],
            stuck,
        )
    return order
