"""Circular dependency detection over a resolved dependency tree.

Standard three-colour depth-first search:

- WHITE: not visited yet
- GRAY: on the current DFS path
- BLACK: fully explored

Meeting a GRAY node means the current path has looped back onto one of its
own ancestors. Nodes are identified by ``name@version``, so the same skill
at a different version is never a cycle, and a diamond (two branches
reaching the same BLACK node) is never a cycle either.
"""

from __future__ import annotations

from skillpm.core.dependency.models import Cycle, DependencyNode, DependencyTree

WHITE, GRAY, BLACK = 0, 1, 2


def detect_circular(tree: DependencyTree) -> list[Cycle]:
    """Find every circular reference reachable from the tree root.

    Cycles in independent branches are all reported, not just the first.

    Args:
        tree: A resolved (or hand-built) dependency tree.

    Returns:
        The cycles found, in discovery order. Empty if the tree is acyclic.
    """
    color: dict[str, int] = {node.key: WHITE for node in tree.flat_list}
    path: list[DependencyNode] = []
    cycles: list[Cycle] = []

    def _dfs(node: DependencyNode) -> None:
        color[node.key] = GRAY
        path.append(node)
        for child in node.children:
            state = color.get(child.key, WHITE)
            if state == GRAY:
                start = next(i for i, n in enumerate(path) if n.key == child.key)
                names = [n.name for n in path[start:]] + [child.name]
                cycles.append(Cycle(path=tuple(names)))
            elif state == WHITE:
                _dfs(child)
        path.pop()
        color[node.key] = BLACK

    _dfs(tree.root)
    return cycles
