"""Base classes and data models for skill registry lookups.

Defines the ``SkillRegistry`` abstract base class that concrete registries
(in-memory index, HTTP gateway) implement, along with the ``SkillRecord``
data model returned by a lookup.

The dependency resolver only ever asks one question of a registry: "given a
skill name, what is its record?" A registry answers with a ``SkillRecord``
or ``None`` for an unknown name. Any other failure must raise, never be
reported as not-found.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

# Dependency entries with this prefix name companion MCP servers. They are
# informational only and are never resolved or installed.
EXTERNAL_SERVICE_PREFIX: str = "mcp__"


def is_external_service(name: str) -> bool:
    """Return True if a declared dependency names an external service."""
    return name.startswith(EXTERNAL_SERVICE_PREFIX)


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SkillRecord:
    """Registry metadata for the published version of a skill.

    Attributes:
        name: Skill name (e.g. "ao-basics").
        version: Version the registry currently serves for the name.
        storage_ref: Opaque content address of the skill bundle (an
            Arweave transaction ID on the public registry).
        dependencies: Declared dependency names, in manifest order. May
            include external-service references.
        description: Short description from the registry, if any.
        author: Author display name, if any.
    """

    name: str
    version: str
    storage_ref: str
    dependencies: tuple[str, ...] = field(default_factory=tuple)
    description: str = ""
    author: str = ""

    @property
    def skill_dependencies(self) -> list[str]:
        """Declared dependencies that are installable skills."""
        return [d for d in self.dependencies if not is_external_service(d)]

    @property
    def external_services(self) -> list[str]:
        """Declared dependencies that are external-service references."""
        return [d for d in self.dependencies if is_external_service(d)]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SkillRecord:
        """Build a record from a registry JSON object.

        Accepts the registry's ``arweaveTxId`` key as well as
        ``storageRef``/``storage_ref`` for the storage reference.

        Raises:
            ValueError: If ``name`` or ``version`` is missing, or
                ``dependencies`` is not a list of strings.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Skill record must be an object, got {type(data).__name__}")
        name = data.get("name")
        version = data.get("version")
        if not name or not version:
            raise ValueError("Skill record requires 'name' and 'version'")

        deps = data.get("dependencies") or []
        if not isinstance(deps, list) or not all(isinstance(d, str) for d in deps):
            raise ValueError(f"Skill {name!r} has malformed 'dependencies'")

        storage_ref = (
            data.get("arweaveTxId")
            or data.get("storageRef")
            or data.get("storage_ref")
            or ""
        )
        return cls(
            name=str(name),
            version=str(version),
            storage_ref=str(storage_ref),
            dependencies=tuple(deps),
            description=str(data.get("description", "")),
            author=str(data.get("author", "")),
        )


# ---------------------------------------------------------------------------
# Abstract base registry
# ---------------------------------------------------------------------------


class SkillRegistry(ABC):
    """Abstract name -> record lookup used by the dependency resolver."""

    @property
    @abstractmethod
    def registry_name(self) -> str:
        """Human-readable name of this registry (e.g. 'HTTP registry')."""

    @abstractmethod
    async def get_skill(self, name: str) -> SkillRecord | None:
        """Fetch the record for a skill.

        Args:
            name: Skill name to look up.

        Returns:
            The ``SkillRecord``, or None if the registry has no such skill.

        Raises:
            RegistryError: If the lookup itself failed.
        """
