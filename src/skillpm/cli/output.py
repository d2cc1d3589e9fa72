"""Rich output formatting helpers for the skillpm CLI.

Provides terminal rendering of dependency trees, install orders, external
service advisories, and lock file contents, plus the JSON shapes printed
with ``--format json``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from skillpm.core.dependency.models import DependencyNode
from skillpm.core.install import InstallPlan
from skillpm.core.lockfile.models import LockFile

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through Rich; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _node_label(node: DependencyNode) -> str:
    label = f"[bold]{node.name}[/bold]@{node.version}"
    if node.installed:
        label += " [green](installed)[/green]"
    return label


def _add_children(branch: Tree, node: DependencyNode) -> None:
    for child in node.children:
        _add_children(branch.add(_node_label(child)), child)


def print_plan(plan: InstallPlan) -> None:
    """Print the dependency tree, install order, counts, and advisories."""
    tree = Tree(_node_label(plan.tree.root))
    _add_children(tree, plan.tree.root)
    console.print(tree)

    table = Table(title="Install Order", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Skill", style="bold")
    table.add_column("Status", justify="center")
    pending = set(plan.pending)
    for index, name in enumerate(plan.order, start=1):
        status = "[yellow]pending[/yellow]" if name in pending else "[green]installed[/green]"
        table.add_row(str(index), name, status)
    console.print(table)

    parts = [
        f"[bold]{plan.dependency_count}[/bold] dependencies",
        f"{plan.tree.total_count} nodes",
        f"max depth {plan.tree.max_depth}",
    ]
    if plan.tree.installed_count:
        parts.append(f"[green]{plan.tree.installed_count} already installed[/green]")
    console.print(" | ".join(parts))

    for advisory in plan.advisories():
        console.print(f"[yellow]⚠ {advisory}[/yellow]")


def plan_to_dict(plan: InstallPlan) -> dict[str, Any]:
    """JSON-ready view of an install plan."""

    def node_dict(node: DependencyNode) -> dict[str, Any]:
        return {
            "name": node.name,
            "version": node.version,
            "depth": node.depth,
            "installed": node.installed,
            "children": [node_dict(child) for child in node.children],
        }

    return {
        "root": plan.root_name,
        "order": plan.order,
        "pending": plan.pending,
        "dependencyCount": plan.dependency_count,
        "totalCount": plan.tree.total_count,
        "maxDepth": plan.tree.max_depth,
        "installedCount": plan.tree.installed_count,
        "externalServices": plan.external_services,
        "advisories": plan.advisories(),
        "tree": node_dict(plan.tree.root),
    }


def _format_ms(epoch_ms: int) -> str:
    if not epoch_ms:
        return "-"
    stamp = datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc)
    return stamp.strftime("%Y-%m-%d %H:%M:%S UTC")


def print_lock_file(lock_file: LockFile, lock_path: str) -> None:
    """Print a table of the skills recorded in a lock file."""
    console.print(f"[bold]Lock file:[/bold] {lock_path}")
    console.print(f"[bold]Install location:[/bold] {lock_file.install_location}")
    if not lock_file.skills:
        console.print("[dim]No skills installed.[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Skill", style="bold")
    table.add_column("Version")
    table.add_column("Direct", justify="center")
    table.add_column("Dependencies", justify="right")
    table.add_column("Installed At", style="dim")
    for record in lock_file.skills:
        table.add_row(
            record.name,
            record.version,
            "yes" if record.is_direct_dependency else "no",
            str(len(record.dependencies)),
            _format_ms(record.installed_at),
        )
    console.print(table)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(Text.assemble(("Error: ", "bold red"), message))
