"""Skill Lock File: the record of what is installed at a location.

This package implements the ``skills-lock.json`` format. One lock file
sits beside each skills directory and records every installed skill, its
version, the content address it came from, and its resolved dependencies.

The package is split into focused submodules:

- ``models``: Data classes (``InstalledSkillRecord``, ``LockFile``) and
  their JSON mapping.
- ``operations``: Disk I/O (``read``, atomic ``write``), ``merge``,
  ``update``, and lock file path resolution.

All public names are re-exported here so callers can write
``from skillpm.core.lockfile import LockFile, read, write``.
"""

# Re-export data models
from skillpm.core.lockfile.models import (
    LOCK_FILE_NAME,
    LOCK_FILE_VERSION,
    InstalledSkillRecord,
    LockFile,
)

# Re-export operations
from skillpm.core.lockfile import operations as _ops
from skillpm.core.lockfile.operations import (
    create_empty_lock_file,
    merge,
    read,
    resolve_lock_file_path,
    update,
    write,
)

# Attach operations to LockFile as methods/classmethods
LockFile.read = staticmethod(_ops.read)
LockFile.write = _ops.write
LockFile.merge = _ops.merge

__all__ = [
    "LOCK_FILE_NAME",
    "LOCK_FILE_VERSION",
    "InstalledSkillRecord",
    "LockFile",
    "create_empty_lock_file",
    "merge",
    "read",
    "resolve_lock_file_path",
    "update",
    "write",
]
