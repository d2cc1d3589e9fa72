"""In-memory skill registry, optionally loaded from a local JSON index.

Useful for offline resolution against a mirrored index file and as the
registry backing tests. The index file is either a JSON list of skill
records or an object with a ``skills`` list::

    {"skills": [{"name": "ao-basics", "version": "1.0.0",
                 "arweaveTxId": "abc...", "dependencies": []}]}
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from skillpm.exceptions import RegistryError
from skillpm.registry.base import SkillRecord, SkillRegistry

logger = logging.getLogger(__name__)


class InMemoryRegistry(SkillRegistry):
    """Registry backed by a dict of name -> ``SkillRecord``.

    A name maps to a single record; adding a record for an existing name
    replaces it, mirroring how the public registry serves only the latest
    version.
    """

    def __init__(self, records: Iterable[SkillRecord] = ()) -> None:
        self._records: dict[str, SkillRecord] = {}
        for record in records:
            self.add(record)

    @property
    def registry_name(self) -> str:
        return "In-memory registry"

    def add(self, record: SkillRecord) -> None:
        """Publish (or replace) a record."""
        self._records[record.name] = record

    def __len__(self) -> int:
        return len(self._records)

    async def get_skill(self, name: str) -> SkillRecord | None:
        return self._records.get(name)

    @classmethod
    def from_json_file(cls, path: Path) -> InMemoryRegistry:
        """Load a registry from a local JSON index file.

        Args:
            path: Path to the index file.

        Returns:
            A registry containing every record in the file.

        Raises:
            RegistryError: If the file cannot be read or is not a valid index.
        """
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise RegistryError(f"Cannot read registry index {path}: {exc}", str(path)) from exc
        except json.JSONDecodeError as exc:
            raise RegistryError(f"Registry index {path} is not valid JSON: {exc}", str(path)) from exc

        items = data.get("skills", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise RegistryError(f"Registry index {path} has no 'skills' list", str(path))

        try:
            records = [SkillRecord.from_dict(item) for item in items]
        except ValueError as exc:
            raise RegistryError(f"Invalid record in registry index {path}: {exc}", str(path)) from exc

        logger.debug("Loaded %d skill records from %s", len(records), path)
        return cls(records)
