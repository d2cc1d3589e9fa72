"""Tests for the in-memory registry and its JSON index loader."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from skillpm.exceptions import RegistryError
from skillpm.registry import InMemoryRegistry, SkillRecord


class TestInMemoryRegistry:

    def test_lookup(self) -> None:
        registry = InMemoryRegistry([SkillRecord("a", "1.0.0", "tx")])
        assert asyncio.run(registry.get_skill("a")).version == "1.0.0"
        assert asyncio.run(registry.get_skill("b")) is None

    def test_add_replaces(self) -> None:
        registry = InMemoryRegistry([SkillRecord("a", "1.0.0", "tx")])
        registry.add(SkillRecord("a", "2.0.0", "tx2"))
        assert len(registry) == 1
        assert asyncio.run(registry.get_skill("a")).version == "2.0.0"

    def test_registry_name(self) -> None:
        assert InMemoryRegistry().registry_name == "In-memory registry"


class TestFromJsonFile:

    def test_list_index(self, tmp_path: Path) -> None:
        path = tmp_path / "index.json"
        path.write_text(json.dumps([
            {"name": "a", "version": "1", "arweaveTxId": "t", "dependencies": ["b"]},
            {"name": "b", "version": "2"},
        ]))
        registry = InMemoryRegistry.from_json_file(path)
        assert len(registry) == 2
        assert asyncio.run(registry.get_skill("a")).dependencies == ("b",)

    def test_object_index(self, tmp_path: Path) -> None:
        path = tmp_path / "index.json"
        path.write_text(json.dumps({"skills": [{"name": "a", "version": "1"}]}))
        assert len(InMemoryRegistry.from_json_file(path)) == 1

    @pytest.mark.parametrize("content", [
        "not json",
        '{"skills": {}}',
        '[{"name": "a"}]',
    ])
    def test_invalid_index(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "index.json"
        path.write_text(content)
        with pytest.raises(RegistryError):
            InMemoryRegistry.from_json_file(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RegistryError) as exc_info:
            InMemoryRegistry.from_json_file(tmp_path / "absent.json")
        assert exc_info.value.url.endswith("absent.json")
