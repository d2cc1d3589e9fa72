"""skillpm CLI: dependency resolution and lock files for agent skills.

Entry point for the ``skillpm`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve    Resolve a skill's dependencies and show the install plan.
    lock show  Show the skills recorded in skills-lock.json.
    lock path  Print where skills-lock.json lives for an install location.

Usage::

    skillpm resolve ao-basics
    skillpm resolve ao-basics --global --format json
    skillpm resolve ao-basics --registry-file ./index.json --max-depth 5
    skillpm lock show --global
    skillpm lock path --install-dir ./.claude/skills
"""

from __future__ import annotations

import click

from skillpm import __version__
from skillpm.cli.lock_cmd import lock_command
from skillpm.cli.output import configure_logging
from skillpm.cli.resolve_cmd import resolve_command


@click.group()
@click.version_option(version=__version__, prog_name="skillpm")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """skillpm: Dependency resolution for agent skills.

    Resolve a skill's transitive dependencies, compute a safe installation
    order, and keep skills-lock.json in step with what is installed.
    """
    configure_logging(verbose)


# Register all subcommands
cli.add_command(resolve_command)
cli.add_command(lock_command)
