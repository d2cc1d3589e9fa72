"""``skillpm resolve <name>``: plan an install without touching the disk.

Resolves a skill's transitive dependencies against the registry, validates
the tree, and prints the dependency tree, the order skills would be
installed in, and any external services that need manual setup.

Exit Codes:
    0 - Plan computed successfully.
    1 - Dependency error (unknown skill, depth limit, circular dependency)
        or invalid configuration.
    2 - Registry or filesystem failure.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import click

from skillpm.config import load_config
from skillpm.core.dependency.resolver import ResolverOptions
from skillpm.core.install import plan_install, resolve_install_location
from skillpm.core.lockfile import read, resolve_lock_file_path
from skillpm.exceptions import SkillPmError, exit_code_for
from skillpm.registry.base import SkillRegistry
from skillpm.registry.http_registry import HttpSkillRegistry
from skillpm.registry.memory import InMemoryRegistry

logger = logging.getLogger(__name__)


def _run_async(coro: object) -> object:
    """Run an async coroutine in a synchronous context.

    Args:
        coro: Awaitable coroutine to execute.

    Returns:
        The coroutine's return value.
    """
    return asyncio.run(coro)  # type: ignore[arg-type]


def _build_registry(
    registry_file: str | None, registry_url: str, timeout_s: float
) -> SkillRegistry:
    if registry_file:
        return InMemoryRegistry.from_json_file(Path(registry_file))
    return HttpSkillRegistry(registry_url, timeout=timeout_s)


@click.command("resolve")
@click.argument("name")
@click.option("--max-depth", type=click.IntRange(min=0), default=None,
              help="Maximum dependency depth (default: from config, else 10).")
@click.option("--force", is_flag=True, default=False,
              help="Re-resolve dependencies of skills that are already installed.")
@click.option("--global", "global_install", is_flag=True, default=False,
              help="Use the global skills directory (~/.claude/skills); overrides config.")
@click.option("--install-dir", type=click.Path(file_okay=False), default=None,
              help="Skills directory (overrides --global and config).")
@click.option("--registry-url", default=None, help="HTTP registry endpoint.")
@click.option("--registry-file", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Resolve against a local JSON registry index instead of HTTP.")
@click.option("--config", "config_path", type=click.Path(), default=None,
              help="Path to a .skillsrc file.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Log resolution progress.")
def resolve_command(
    name: str,
    max_depth: int | None,
    force: bool,
    global_install: bool,
    install_dir: str | None,
    registry_url: str | None,
    registry_file: str | None,
    config_path: str | None,
    output_format: str,
    verbose: bool,
) -> None:
    """Resolve NAME and show what installing it would do.

    Exit code 0 on success, 1 on dependency or configuration errors,
    2 on registry or filesystem failures.
    """
    from skillpm.cli.output import (
        configure_logging,
        plan_to_dict,
        print_error,
        print_plan,
    )

    if verbose:
        configure_logging(True)

    try:
        cfg = load_config(config_path)
        install_location = resolve_install_location(
            install_dir, global_install, cfg.install_location
        )
        lock_path = resolve_lock_file_path(install_location)
        lock_file = read(lock_path, install_location)

        registry = _build_registry(registry_file, registry_url or cfg.registry_url, cfg.timeout_s)
        logger.debug("Resolving %r against %s", name, registry.registry_name)
        options = ResolverOptions(
            max_depth=max_depth if max_depth is not None else cfg.max_depth,
            skip_installed=not force,
            verbose=verbose,
        )
        plan = _run_async(plan_install(name, registry, options, lock_file))
    except SkillPmError as exc:
        print_error(str(exc))
        sys.exit(exit_code_for(exc))

    if output_format == "json":
        click.echo(json.dumps(plan_to_dict(plan), indent=2))
    else:
        print_plan(plan)
    sys.exit(0)
