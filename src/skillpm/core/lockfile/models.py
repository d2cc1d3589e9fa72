"""Lock file data models: ``InstalledSkillRecord`` and ``LockFile``.

Defines the structures persisted in ``skills-lock.json`` and their mapping
to and from the on-disk JSON shape (camelCase keys). These are plain data
holders with no I/O, safe to import from anywhere without
circular-dependency concerns.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any

# Schema version written by this release. Files carrying a newer version
# are read best-effort and their version number is preserved.
LOCK_FILE_VERSION: int = 1

LOCK_FILE_NAME: str = "skills-lock.json"

_KNOWN_KEYS = frozenset({"lockfileVersion", "generatedAt", "skills", "installLocation"})


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


# ---------------------------------------------------------------------------
# InstalledSkillRecord: one installed skill, with its dependency subtree
# ---------------------------------------------------------------------------


@dataclass
class InstalledSkillRecord:
    """A single installed skill entry in the lock file.

    Attributes:
        name: Skill name (e.g. "ao-basics").
        version: Installed version.
        storage_ref: Content address the bundle was fetched from.
        installed_at: Install time, epoch milliseconds.
        installed_path: Directory the skill was extracted into.
        dependencies: Records for this skill's dependencies, nested to
            mirror the resolved tree.
        is_direct_dependency: True if the user asked for this skill by
            name, False if it was pulled in transitively.
    """

    name: str
    version: str
    storage_ref: str = ""
    installed_at: int = 0
    installed_path: str = ""
    dependencies: list[InstalledSkillRecord] = field(default_factory=list)
    is_direct_dependency: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "arweaveTxId": self.storage_ref,
            "installedAt": self.installed_at,
            "installedPath": self.installed_path,
            "dependencies": [dep.to_dict() for dep in self.dependencies],
            "isDirectDependency": self.is_direct_dependency,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InstalledSkillRecord:
        """Deserialize a record (and its nested dependencies).

        Raises:
            ValueError: If the entry is not an object or lacks a name/version.
        """
        if not isinstance(data, dict):
            raise ValueError("Installed skill record must be an object")
        if not data.get("name") or "version" not in data:
            raise ValueError("Installed skill record requires 'name' and 'version'")
        deps = data.get("dependencies", [])
        if not isinstance(deps, list):
            raise ValueError(f"Record {data['name']!r} has malformed 'dependencies'")
        return cls(
            name=str(data["name"]),
            version=str(data["version"]),
            storage_ref=str(data.get("arweaveTxId", "")),
            installed_at=int(data.get("installedAt", 0)),
            installed_path=str(data.get("installedPath", "")),
            dependencies=[cls.from_dict(dep) for dep in deps],
            is_direct_dependency=bool(data.get("isDirectDependency", False)),
        )


# ---------------------------------------------------------------------------
# LockFile: the whole document
# ---------------------------------------------------------------------------


@dataclass
class LockFile:
    """The ``skills-lock.json`` document for one installation location.

    Attributes:
        lockfile_version: Schema version of the document.
        generated_at: Last update time, epoch milliseconds.
        install_location: Skills directory this lock file tracks.
        skills: Installed skill records, in install order.
        extra: Top-level fields this release does not know about, written
            back unchanged.
    """

    lockfile_version: int = LOCK_FILE_VERSION
    generated_at: int = field(default_factory=now_ms)
    install_location: str = ""
    skills: list[InstalledSkillRecord] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    # -- Skill access -------------------------------------------------------

    def get_skill(self, name: str) -> InstalledSkillRecord | None:
        """Return the record for ``name``, or None if it is not installed."""
        return next((s for s in self.skills if s.name == name), None)

    @property
    def skill_names(self) -> list[str]:
        """Installed skill names, in lock file order."""
        return [s.name for s in self.skills]

    # -- Serialization ------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the on-disk JSON shape, known keys first."""
        data: dict[str, Any] = {
            "lockfileVersion": self.lockfile_version,
            "generatedAt": self.generated_at,
            "skills": [s.to_dict() for s in self.skills],
            "installLocation": self.install_location,
        }
        for key, value in self.extra.items():
            data.setdefault(key, value)
        return data

    def to_json(self, indent: int = 2) -> str:
        """Serialize to indented JSON with a trailing newline."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False) + "\n"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LockFile:
        """Deserialize from parsed JSON.

        Raises:
            ValueError: If the document does not have the lock file shape.
        """
        if not isinstance(data, dict):
            raise ValueError("Lock file must be a JSON object")
        version = data.get("lockfileVersion", LOCK_FILE_VERSION)
        skills = data.get("skills", [])
        if not isinstance(version, int) or isinstance(version, bool):
            raise ValueError("'lockfileVersion' must be an integer")
        if not isinstance(skills, list):
            raise ValueError("'skills' must be a list")
        return cls(
            lockfile_version=version,
            generated_at=int(data.get("generatedAt", 0)),
            install_location=str(data.get("installLocation", "")),
            skills=[InstalledSkillRecord.from_dict(s) for s in skills],
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )
