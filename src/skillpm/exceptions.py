"""skillpm exception hierarchy.

All public exceptions inherit from SkillPmError, giving callers a single
base class to catch when they want to handle any skillpm-specific failure
without swallowing unrelated errors.
"""

from __future__ import annotations

from typing import Any

# CLI exit codes: user-correctable problems vs. system failures.
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1
EXIT_SYSTEM_ERROR = 2


class SkillPmError(Exception):
    """Base exception for all skillpm errors."""


class DependencyError(SkillPmError):
    """Raised when dependency resolution fails.

    Attributes:
        dependency_name: The skill at which resolution stopped.
        dependency_path: Skill names from the root down to the failure point.
    """

    def __init__(
        self,
        message: str,
        dependency_name: str,
        dependency_path: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.dependency_name = dependency_name
        self.dependency_path = list(dependency_path or [])


class SkillNotFoundError(DependencyError):
    """Raised when the root skill or a transitive dependency is not in the registry."""


class DepthLimitExceededError(DependencyError):
    """Raised when the dependency tree nests deeper than the configured maximum."""


class CircularDependencyError(DependencyError):
    """Raised when a skill transitively depends on itself.

    Covers the resolver's same-path check, the full cycle detection pass,
    and the topological sorter's leftover in-degree guard.

    Attributes:
        cycles: Every ``Cycle`` found, when the full detection pass ran.
    """

    def __init__(
        self,
        message: str,
        dependency_name: str,
        dependency_path: list[str] | None = None,
        cycles: list[Any] | None = None,
    ) -> None:
        super().__init__(message, dependency_name, dependency_path)
        self.cycles = list(cycles or [])


class FileSystemError(SkillPmError):
    """Raised for lock file I/O failures other than a missing or corrupt file.

    Attributes:
        path: The file that could not be read or written.
    """

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class RegistryError(SkillPmError):
    """Raised when the skill registry cannot be queried.

    Covers HTTP errors, exhausted retries on timeouts, and responses
    that are not valid skill records. A skill that simply does not exist
    is *not* a RegistryError; registries report it by returning None.
    """

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class ConfigurationError(SkillPmError):
    """Raised when a ``.skillsrc`` file or environment override is invalid."""

    def __init__(self, message: str, config_key: str = "") -> None:
        super().__init__(message)
        self.config_key = config_key


def exit_code_for(error: BaseException) -> int:
    """Map an exception to the CLI exit code it should produce.

    Args:
        error: The exception that aborted a command.

    Returns:
        ``EXIT_USER_ERROR`` for problems the user can fix (missing skills,
        cycles, bad configuration), ``EXIT_SYSTEM_ERROR`` for everything else.
    """
    if isinstance(error, (DependencyError, ConfigurationError)):
        return EXIT_USER_ERROR
    return EXIT_SYSTEM_ERROR
