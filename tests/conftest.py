"""Shared fixtures for skillpm tests."""

from __future__ import annotations

import pathlib
from collections.abc import Callable

import pytest

from skillpm.core.lockfile import InstalledSkillRecord, LockFile
from skillpm.registry import InMemoryRegistry, SkillRecord

RegistryFactory = Callable[..., InMemoryRegistry]


@pytest.fixture
def make_registry() -> RegistryFactory:
    """Build an in-memory registry from a ``{name: [deps]}`` mapping.

    Every skill is published at version 1.0.0 unless ``versions`` says
    otherwise; storage refs are ``tx-<name>``.
    """

    def _make(
        graph: dict[str, list[str]],
        versions: dict[str, str] | None = None,
    ) -> InMemoryRegistry:
        versions = versions or {}
        return InMemoryRegistry(
            SkillRecord(
                name=name,
                version=versions.get(name, "1.0.0"),
                storage_ref=f"tx-{name}",
                dependencies=tuple(deps),
            )
            for name, deps in graph.items()
        )

    return _make


@pytest.fixture
def diamond_registry(make_registry: RegistryFactory) -> InMemoryRegistry:
    """A depends on B and C, both of which depend on D."""
    return make_registry({"A": ["B", "C"], "B": ["D"], "C": ["D"], "D": []})


@pytest.fixture
def installed_lock_file(tmp_path: pathlib.Path) -> LockFile:
    """A lock file recording D@1.0.0 as installed."""
    return LockFile(
        generated_at=1_700_000_000_000,
        install_location=str(tmp_path / "skills"),
        skills=[
            InstalledSkillRecord(
                name="D",
                version="1.0.0",
                storage_ref="tx-D",
                installed_at=1_700_000_000_000,
                installed_path=str(tmp_path / "skills" / "D"),
            )
        ],
    )
