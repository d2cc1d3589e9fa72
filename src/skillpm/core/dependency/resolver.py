"""Recursive dependency resolution against a skill registry.

Builds a ``DependencyTree`` by walking declared dependencies depth-first
from a root skill name. Three independent guards keep the walk finite and
the result installable:

1. **Depth limit**: a node deeper than ``max_depth`` fails before its record
   is fetched, whatever the cause of the nesting.
2. **Same-path cycle check**: a (name, version) that reappears among its own
   ancestors fails immediately, naming the full path.
3. **Full cycle pass**: once the tree is built, ``detect_circular`` runs over
   it and every cycle found is reported together.

Each ``resolve`` call owns a fetch cache keyed by skill name, so a skill
referenced from several branches costs exactly one registry lookup while
still appearing once per branch in the tree. Lookups are awaited one at a
time in depth-first order; this keeps the cache write-once per key and the
tree order deterministic.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from skillpm.core.dependency.cycles import detect_circular
from skillpm.core.dependency.models import DependencyNode, DependencyTree
from skillpm.core.lockfile.models import InstalledSkillRecord
from skillpm.exceptions import (
    CircularDependencyError,
    DepthLimitExceededError,
    SkillNotFoundError,
)
from skillpm.registry.base import SkillRecord, SkillRegistry, is_external_service

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH: int = 10


@dataclass
class ResolverOptions:
    """Options for a single resolution.

    Attributes:
        max_depth: Deepest allowed node depth (root = 0).
        skip_installed: Do not expand the dependencies of skills the lock
            file already records at the same version.
        verbose: Log progress at INFO instead of DEBUG. Never changes the
            result.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    skip_installed: bool = True
    verbose: bool = False


@dataclass
class _WalkState:
    """Mutable state scoped to one ``resolve`` call."""

    options: ResolverOptions
    cache: dict[str, SkillRecord] = field(default_factory=dict)
    external_services: dict[str, None] = field(default_factory=dict)
    lookups: int = 0


class DependencyResolver:
    """Resolve a skill's transitive dependencies into a tree.

    Args:
        registry: Where skill records are looked up.
        installed: Records of skills already installed (typically
            ``LockFile.skills``, or a name -> record mapping); used to flag
            installed nodes.
    """

    def __init__(
        self,
        registry: SkillRegistry,
        installed: Iterable[InstalledSkillRecord] | Mapping[str, InstalledSkillRecord] | None = None,
    ) -> None:
        self._registry = registry
        if isinstance(installed, Mapping):
            installed = installed.values()
        self._installed: dict[str, InstalledSkillRecord] = {
            record.name: record for record in (installed or [])
        }

    async def resolve(
        self, root_name: str, options: ResolverOptions | None = None
    ) -> DependencyTree:
        """Resolve ``root_name`` and all of its dependencies.

        Args:
            root_name: The skill the user asked for.
            options: Resolution options; defaults if omitted.

        Returns:
            The resolved, cycle-free tree.

        Raises:
            SkillNotFoundError: If the root or any dependency is unknown.
            DepthLimitExceededError: If nesting exceeds ``max_depth``.
            CircularDependencyError: If a skill depends on itself.
            RegistryError: If a registry lookup fails.
        """
        state = _WalkState(options=options or ResolverOptions())
        log = logger.info if state.options.verbose else logger.debug
        log("Starting dependency resolution for %r", root_name)
        started = time.monotonic()

        root = await self._build_node(root_name, 0, (), state)
        tree = DependencyTree.from_root(root, list(state.external_services))
        log(
            "Dependency tree built: %d total dependencies (%d already installed), "
            "%d registry lookups",
            tree.total_count, tree.installed_count, state.lookups,
        )

        cycles = detect_circular(tree)
        if cycles:
            listing = "\n".join(f"  - {c.description}" for c in cycles)
            raise CircularDependencyError(
                f"Circular dependency detected:\n{listing}\n"
                "→ Solution: Remove circular dependencies from skill manifests",
                cycles[0].path[0],
                list(cycles[0].path),
                cycles=cycles,
            )

        log("Resolution of %r completed in %.2fs", root_name, time.monotonic() - started)
        return tree

    async def _build_node(
        self,
        name: str,
        depth: int,
        ancestors: tuple[tuple[str, str], ...],
        state: _WalkState,
    ) -> DependencyNode:
        """Fetch ``name`` and recursively build its subtree.

        ``ancestors`` holds the (name, version) pairs on the path from the
        root down to, but excluding, this node.
        """
        options = state.options
        path = [ancestor for ancestor, _ in ancestors] + [name]

        if depth > options.max_depth:
            raise DepthLimitExceededError(
                f"Dependency depth limit exceeded (max: {options.max_depth} levels)\n"
                "→ Solution: Reduce dependency nesting or check for circular dependencies\n"
                f"→ Path: {'→'.join(path)}",
                name,
                path,
            )

        record = await self._fetch(name, state)
        if record is None:
            required_by = ""
            if ancestors:
                required_by = f"\n→ Required by: {'→'.join(path[:-1])}"
            raise SkillNotFoundError(
                f"Dependency '{name}' not found in registry\n"
                "→ Solution: Verify the skill name and ensure it has been published"
                f"{required_by}",
                name,
                path,
            )

        if (name, record.version) in ancestors:
            raise CircularDependencyError(
                f"Circular dependency detected: {'→'.join(path)}\n"
                "→ Solution: Remove circular dependencies from skill manifests",
                name,
                path,
            )

        existing = self._installed.get(record.name)
        installed = existing is not None and existing.version == record.version
        node = DependencyNode(
            name=record.name,
            version=record.version,
            storage_ref=record.storage_ref,
            depth=depth,
            installed=installed,
            install_path=existing.installed_path if installed and existing else None,
        )

        for service in record.external_services:
            state.external_services.setdefault(service, None)

        if installed and options.skip_installed:
            if options.verbose:
                logger.info("'%s' already installed - skipping its dependencies", node.key)
            return node

        deps = record.skill_dependencies
        if deps:
            logger.debug("%s declares %d dependencies: %s", node.key, len(deps), ", ".join(deps))

        child_ancestors = ancestors + ((name, record.version),)
        for dep_name in deps:
            child = await self._build_node(dep_name, depth + 1, child_ancestors, state)
            node.children.append(child)
        return node

    async def _fetch(self, name: str, state: _WalkState) -> SkillRecord | None:
        """Look up ``name``, consulting the per-resolution cache first."""
        cached = state.cache.get(name)
        if cached is not None:
            return cached

        if state.options.verbose:
            logger.info("Fetching metadata for '%s'", name)
        state.lookups += 1
        record = await self._registry.get_skill(name)
        if record is not None:
            state.cache[name] = record
        return record


async def resolve(
    root_name: str,
    registry: SkillRegistry,
    options: ResolverOptions | None = None,
    *,
    installed: Iterable[InstalledSkillRecord] | None = None,
) -> DependencyTree:
    """Resolve ``root_name`` against ``registry``.

    Convenience wrapper around ``DependencyResolver(registry, installed)``.
    """
    return await DependencyResolver(registry, installed).resolve(root_name, options)
