"""Install planning: resolve, validate, order, and record.

Ties the dependency engine to the lock file. ``plan_install`` produces an
``InstallPlan`` (the resolved tree, the order to install in, and the
external services the user has to set up by hand). Downloading and
extracting bundles happens elsewhere; once every skill in the plan has been
installed, ``record_installation`` writes the whole outcome to the lock
file in a single pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

from skillpm.core.dependency.cycles import detect_circular
from skillpm.core.dependency.models import DependencyNode, DependencyTree
from skillpm.core.dependency.resolver import DependencyResolver, ResolverOptions
from skillpm.core.dependency.sorter import topological_sort
from skillpm.core.lockfile import operations as lock_ops
from skillpm.core.lockfile.models import InstalledSkillRecord, LockFile, now_ms
from skillpm.exceptions import CircularDependencyError
from skillpm.registry.base import SkillRegistry

logger = logging.getLogger(__name__)

GLOBAL_INSTALL_LOCATION = "~/.claude/skills"
LOCAL_INSTALL_LOCATION = "./.claude/skills"


def default_install_location(global_install: bool) -> str:
    """Return the default skills directory for a global or local install."""
    return GLOBAL_INSTALL_LOCATION if global_install else LOCAL_INSTALL_LOCATION


def resolve_install_location(
    install_dir: str | None,
    global_install: bool,
    configured: str | None = None,
) -> str:
    """Pick the skills directory for a command.

    Precedence: an explicit directory, then ``--global``, then the
    configured location, then the local default.
    """
    if install_dir:
        return install_dir
    if global_install:
        return default_install_location(True)
    return configured or default_install_location(False)


@dataclass
class InstallPlan:
    """The outcome of planning an install.

    Attributes:
        tree: The resolved dependency tree.
        order: Skill names, dependencies before dependents; the root is last.
        external_services: External-service references that must be
            installed separately.
    """

    tree: DependencyTree
    order: list[str]
    external_services: list[str] = field(default_factory=list)

    @property
    def root_name(self) -> str:
        return self.tree.root.name

    @property
    def dependency_count(self) -> int:
        """Unique transitive dependencies, not counting the root."""
        return len(self.order) - 1

    @property
    def pending(self) -> list[str]:
        """Names in ``order`` that are not already installed at this version."""
        installed = {node.name for node in self.tree.flat_list if node.installed}
        return [name for name in self.order if name not in installed]

    def advisories(self) -> list[str]:
        """One notice per external service the installer will not touch."""
        return [
            f"Skipping MCP server: {service} (must be installed separately)"
            for service in self.external_services
        ]


async def plan_install(
    root_name: str,
    registry: SkillRegistry,
    options: ResolverOptions | None = None,
    lock_file: LockFile | None = None,
) -> InstallPlan:
    """Resolve ``root_name`` and compute its installation order.

    Args:
        root_name: The skill the user asked for.
        registry: Where skill records are looked up.
        options: Resolver options.
        lock_file: Current lock file, used to flag already-installed skills.

    Returns:
        An ``InstallPlan``.

    Raises:
        DependencyError: If resolution fails (unknown skill, depth limit,
            circular dependency).
        RegistryError: If a registry lookup fails.
    """
    installed = lock_file.skills if lock_file is not None else None
    tree = await DependencyResolver(registry, installed).resolve(root_name, options)

    # The resolver already rejects cyclic trees; checked again here because
    # the sorter's contract requires it.
    cycles = detect_circular(tree)
    if cycles:
        raise CircularDependencyError(
            "Circular dependency detected:\n"
            + "\n".join(f"  - {c.description}" for c in cycles),
            cycles[0].path[0],
            list(cycles[0].path),
            cycles=cycles,
        )

    order = topological_sort(tree)
    logger.debug("Install order for %r: %s", root_name, " → ".join(order))
    return InstallPlan(tree=tree, order=order, external_services=list(tree.external_services))


# ---------------------------------------------------------------------------
# Lock file records
# ---------------------------------------------------------------------------


def _nested_record(node: DependencyNode) -> InstalledSkillRecord:
    return InstalledSkillRecord(
        name=node.name,
        version=node.version,
        storage_ref=node.storage_ref,
        dependencies=[_nested_record(child) for child in node.children],
        is_direct_dependency=False,
    )


def build_installed_records(
    tree: DependencyTree,
    install_location: str,
    installed_at: int | None = None,
    existing: LockFile | None = None,
) -> list[InstalledSkillRecord]:
    """Build one lock file record per unique skill, in install order.

    Each record's ``dependencies`` mirror the children of the skill's first
    occurrence in the tree. The root is a direct dependency, and so is any
    skill ``existing`` already records as direct.

    A skill that was already installed and whose subtree was not expanded
    keeps its ``existing`` record (nested dependencies, timestamp, path)
    unchanged apart from the direct flag.

    Args:
        tree: The resolved tree.
        install_location: Skills directory the bundles were extracted into.
        installed_at: Timestamp for every new record; now if omitted.
        existing: The lock file the tree was resolved against.
    """
    timestamp = installed_at if installed_at is not None else now_ms()
    first_seen: dict[str, DependencyNode] = {}
    for node in tree.flat_list:
        first_seen.setdefault(node.name, node)
    previous = {r.name: r for r in existing.skills} if existing is not None else {}

    records = []
    for name in topological_sort(tree):
        node = first_seen[name]
        prior = previous.get(name)
        direct = node is tree.root or (prior is not None and prior.is_direct_dependency)
        if prior is not None and node.installed and not node.children:
            records.append(replace(prior, is_direct_dependency=direct))
            continue
        records.append(
            InstalledSkillRecord(
                name=node.name,
                version=node.version,
                storage_ref=node.storage_ref,
                installed_at=timestamp,
                installed_path=node.install_path or str(Path(install_location) / node.name),
                dependencies=[_nested_record(child) for child in node.children],
                is_direct_dependency=direct,
            )
        )
    return records


def record_installation(
    plan: InstallPlan,
    install_location: str,
    lock_path: Path | str | None = None,
) -> LockFile:
    """Write a completed installation to the lock file.

    Call only after every skill in ``plan.order`` installed successfully.
    All records are merged in a single read/merge/write pass.

    Args:
        plan: The plan that was carried out.
        install_location: Skills directory the bundles were extracted into.
        lock_path: Lock file path; derived from ``install_location`` if omitted.

    Returns:
        The lock file as written.

    Raises:
        FileSystemError: If the lock file cannot be read or written.
    """
    path = Path(lock_path) if lock_path is not None else lock_ops.resolve_lock_file_path(install_location)
    current = lock_ops.read(path, install_location)
    records = build_installed_records(plan.tree, install_location, existing=current)
    lock_file = lock_ops.merge(current, records)
    lock_ops.write(lock_file, path)
    logger.info("Recorded %d skills in %s", len(records), path)
    return lock_file
