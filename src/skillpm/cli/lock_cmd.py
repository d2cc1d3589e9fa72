"""``skillpm lock``: inspect the skills lock file.

Subcommands:
    show - Print the skills recorded for an install location.
    path - Print where the lock file for an install location lives.

The install location is picked the same way ``skillpm resolve`` picks it:
``--install-dir``, then ``--global``, then ``.skillsrc`` /
``SKILLPM_INSTALL_DIR``, then ``./.claude/skills``.
"""

from __future__ import annotations

import json
import sys

import click

from skillpm.config import load_config
from skillpm.core.install import resolve_install_location
from skillpm.core.lockfile import read, resolve_lock_file_path
from skillpm.exceptions import SkillPmError, exit_code_for


def _location(global_install: bool, install_dir: str | None, config_path: str | None) -> str:
    if install_dir:
        return install_dir
    cfg = load_config(config_path)
    return resolve_install_location(None, global_install, cfg.install_location)


_global_option = click.option(
    "--global", "global_install", is_flag=True, default=False,
    help="Use the global skills directory (~/.claude/skills); overrides config.",
)
_install_dir_option = click.option(
    "--install-dir", type=click.Path(file_okay=False), default=None,
    help="Skills directory (overrides --global and config).",
)
_config_option = click.option(
    "--config", "config_path", type=click.Path(), default=None,
    help="Path to a .skillsrc file.",
)


@click.group("lock")
def lock_command() -> None:
    """Inspect skills-lock.json."""


@lock_command.command("show")
@_global_option
@_install_dir_option
@_config_option
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def show_command(
    global_install: bool,
    install_dir: str | None,
    config_path: str | None,
    output_format: str,
) -> None:
    """Show the skills recorded in the lock file.

    A missing or unparsable lock file shows as empty.
    """
    from skillpm.cli.output import print_error, print_lock_file

    try:
        location = _location(global_install, install_dir, config_path)
        lock_path = resolve_lock_file_path(location)
        lock_file = read(lock_path, location)
    except SkillPmError as exc:
        print_error(str(exc))
        sys.exit(exit_code_for(exc))

    if output_format == "json":
        click.echo(json.dumps(lock_file.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_lock_file(lock_file, str(lock_path))


@lock_command.command("path")
@_global_option
@_install_dir_option
@_config_option
def path_command(global_install: bool, install_dir: str | None, config_path: str | None) -> None:
    """Print the lock file path for an install location."""
    from skillpm.cli.output import print_error

    try:
        location = _location(global_install, install_dir, config_path)
    except SkillPmError as exc:
        print_error(str(exc))
        sys.exit(exit_code_for(exc))
    click.echo(str(resolve_lock_file_path(location)))
