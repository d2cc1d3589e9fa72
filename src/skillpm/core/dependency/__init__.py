"""Dependency resolution, cycle detection, and installation ordering.

The package is split into focused submodules:

- ``models``: ``DependencyNode``, ``DependencyTree``, and ``Cycle``.
- ``resolver``: async depth-first resolution against a registry.
- ``cycles``: three-colour DFS cycle detection over a resolved tree.
- ``sorter``: Kahn's algorithm producing an installation order.

All public names are re-exported here so callers can write
``from skillpm.core.dependency import resolve, topological_sort``.
"""

from skillpm.core.dependency.cycles import detect_circular
from skillpm.core.dependency.models import Cycle, DependencyNode, DependencyTree
from skillpm.core.dependency.resolver import (
    DEFAULT_MAX_DEPTH,
    DependencyResolver,
    ResolverOptions,
    resolve,
)
from skillpm.core.dependency.sorter import topological_sort

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "Cycle",
    "DependencyNode",
    "DependencyResolver",
    "DependencyTree",
    "ResolverOptions",
    "detect_circular",
    "resolve",
    "topological_sort",
]
