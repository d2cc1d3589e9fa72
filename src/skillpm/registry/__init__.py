"""Skill registry lookups.

The resolver consumes a single capability from a registry: fetch a skill
record by name, or learn that the name is unknown.

Public API::

    from skillpm.registry import SkillRegistry, SkillRecord, InMemoryRegistry
    from skillpm.registry.http_registry import HttpSkillRegistry
"""

from __future__ import annotations

from skillpm.registry.base import (
    EXTERNAL_SERVICE_PREFIX,
    SkillRecord,
    SkillRegistry,
    is_external_service,
)
from skillpm.registry.memory import InMemoryRegistry

__all__ = [
    "EXTERNAL_SERVICE_PREFIX",
    "InMemoryRegistry",
    "SkillRecord",
    "SkillRegistry",
    "is_external_service",
]
