"""Lock file operations: read, atomic write, merge, update, path resolution.

A damaged lock file must never block an install. ``read`` therefore treats
a missing file and an unparsable file the same way, by starting from an
empty lock file; only the damaged file's own history is lost. Real I/O
failures (permissions, a directory in the way) still raise
``FileSystemError``.

``write`` replaces the file atomically: the document is written to
``<path>.tmp`` in the same directory and renamed over the target, and the
temporary file is removed on every failure path. A crash mid-write leaves
either the old file or the new one, never a truncated one.

There is no cross-process locking around ``update``'s read-merge-write:
two concurrent updates race and the last rename wins.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Iterable
from dataclasses import replace
from pathlib import Path

from skillpm.core.lockfile.models import (
    LOCK_FILE_NAME,
    LOCK_FILE_VERSION,
    InstalledSkillRecord,
    LockFile,
    now_ms,
)
from skillpm.exceptions import FileSystemError

logger = logging.getLogger(__name__)


def create_empty_lock_file(install_location: str) -> LockFile:
    """Return a lock file with no skills, stamped with the current time."""
    return LockFile(
        lockfile_version=LOCK_FILE_VERSION,
        generated_at=now_ms(),
        install_location=install_location,
        skills=[],
    )


def read(path: Path | str, install_location: str | None = None) -> LockFile:
    """Read a lock file from disk.

    Args:
        path: Path to ``skills-lock.json``.
        install_location: ``install_location`` for the empty lock file
            returned when the file is missing or unparsable. Defaults to
            the lock file's parent directory.

    Returns:
        The parsed lock file, or a fresh empty one.

    Raises:
        FileSystemError: If the file exists but cannot be read.
    """
    path = Path(path)
    fallback_location = install_location if install_location is not None else str(path.parent)

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No lock file at %s, starting empty", path)
        return create_empty_lock_file(fallback_location)
    except UnicodeDecodeError:
        logger.debug("Lock file %s is not UTF-8, starting empty", path)
        return create_empty_lock_file(fallback_location)
    except OSError as exc:
        raise FileSystemError(
            f"Failed to read lock file: {exc.strerror or exc}\n"
            f"→ Solution: Check file permissions for {path}",
            str(path),
        ) from exc

    try:
        lock_file = LockFile.from_dict(json.loads(text))
    except (ValueError, TypeError) as exc:
        # json.JSONDecodeError is a ValueError.
        logger.debug("Lock file %s is unparsable (%s), starting empty", path, exc)
        return create_empty_lock_file(fallback_location)

    if lock_file.lockfile_version > LOCK_FILE_VERSION:
        logger.debug(
            "Lock file %s uses newer schema version %d, reading best-effort",
            path, lock_file.lockfile_version,
        )
    return lock_file


def write(lock_file: LockFile, path: Path | str) -> None:
    """Atomically write a lock file to disk.

    Creates parent directories as needed.

    Args:
        lock_file: The document to write.
        path: Destination path.

    Raises:
        FileSystemError: If the directory cannot be created or the file
            cannot be written or renamed.
    """
    path = Path(path)
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(lock_file.to_json(), encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError as exc:
        raise FileSystemError(
            f"Failed to write lock file: {exc.strerror or exc}\n"
            f"→ Solution: Check disk space and permissions for {path.parent}",
            str(path),
        ) from exc
    finally:
        # Cleanup must not mask the FileSystemError above.
        with contextlib.suppress(OSError):
            if tmp_path.is_file():
                tmp_path.unlink()
    logger.debug("Wrote lock file %s (%d skills)", path, len(lock_file.skills))


def merge(existing: LockFile, new_records: Iterable[InstalledSkillRecord]) -> LockFile:
    """Merge installed-skill records into a lock file.

    A record whose name is already present replaces that entry in place
    (e.g. a version bump); any other record is appended. ``existing`` is
    not modified.

    Args:
        existing: The current lock file.
        new_records: Records to add or replace.

    Returns:
        A new ``LockFile`` with the merged skills and a fresh ``generated_at``.
    """
    merged = list(existing.skills)
    index = {record.name: i for i, record in enumerate(merged)}
    for record in new_records:
        if record.name in index:
            merged[index[record.name]] = record
        else:
            index[record.name] = len(merged)
            merged.append(record)
    return replace(existing, skills=merged, extra=dict(existing.extra), generated_at=now_ms())


def update(record: InstalledSkillRecord, path: Path | str) -> LockFile:
    """Record a single installed skill: read, merge, and write back.

    Returns:
        The lock file as written.

    Raises:
        FileSystemError: If the lock file cannot be read or written.
    """
    lock_file = merge(read(path), [record])
    write(lock_file, path)
    return lock_file


def resolve_lock_file_path(install_location: Path | str) -> Path:
    """Map a skills directory to its lock file path.

    The lock file is a *sibling* of the skills directory, not a child:
    ``~/.claude/skills/`` maps to ``~/.claude/skills-lock.json``. A leading
    ``~`` expands to the current user's home directory and relative paths
    are resolved against the working directory.
    """
    location = Path(install_location).expanduser().resolve()
    return location.parent / LOCK_FILE_NAME
