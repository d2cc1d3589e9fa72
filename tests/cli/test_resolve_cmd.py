"""Tests for the ``skillpm resolve`` CLI command.

Resolution runs against local JSON registry index files; no network.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from skillpm.cli.main import cli
from skillpm.core.lockfile import InstalledSkillRecord, LockFile, resolve_lock_file_path, write
from skillpm.exceptions import RegistryError


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def runner() -> CliRunner:
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Keep ~/.skillsrc, ./.skillsrc and SKILLPM_* out of the tests."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for var in ("SKILLPM_REGISTRY_URL", "SKILLPM_TIMEOUT", "SKILLPM_MAX_DEPTH", "SKILLPM_INSTALL_DIR"):
        monkeypatch.delenv(var, raising=False)
    return home


def _write_index(path: Path, graph: dict[str, list[str]]) -> Path:
    path.write_text(json.dumps({"skills": [
        {"name": name, "version": "1.0.0", "arweaveTxId": f"tx-{name}", "dependencies": deps}
        for name, deps in graph.items()
    ]}))
    return path


@pytest.fixture
def diamond_index(tmp_path: Path) -> Path:
    return _write_index(
        tmp_path / "index.json",
        {"A": ["B", "C", "mcp__pixel-art"], "B": ["D"], "C": ["D"], "D": []},
    )


def _invoke(runner: CliRunner, *args: str) -> object:
    return runner.invoke(cli, ["resolve", *args])


# ---------------------------------------------------------------------------
# Success
# ---------------------------------------------------------------------------


class TestResolveSuccess:

    def test_text_output(self, runner, diamond_index, tmp_path) -> None:
        result = _invoke(runner, "A", "--registry-file", str(diamond_index),
                         "--install-dir", str(tmp_path / "skills"))
        assert result.exit_code == 0, result.output
        assert "Install Order" in result.output
        assert "3 dependencies" in result.output
        assert "Skipping MCP server: mcp__pixel-art" in result.output

    def test_json_output(self, runner, diamond_index, tmp_path) -> None:
        result = _invoke(runner, "A", "--registry-file", str(diamond_index),
                         "--install-dir", str(tmp_path / "skills"), "--format", "json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["order"] == ["D", "B", "C", "A"]
        assert data["dependencyCount"] == 3
        assert data["totalCount"] == 5
        assert data["maxDepth"] == 2
        assert data["externalServices"] == ["mcp__pixel-art"]
        assert data["tree"]["children"][0]["name"] == "B"

    def test_installed_skills_marked(self, runner, diamond_index, tmp_path) -> None:
        skills = tmp_path / "skills"
        write(
            LockFile(
                generated_at=1,
                install_location=str(skills),
                skills=[InstalledSkillRecord(name="D", version="1.0.0")],
            ),
            resolve_lock_file_path(skills),
        )
        result = _invoke(runner, "A", "--registry-file", str(diamond_index),
                         "--install-dir", str(skills), "--format", "json")
        data = json.loads(result.output)
        assert data["installedCount"] == 2
        assert data["pending"] == ["B", "C", "A"]

    def test_does_not_write_lock_file(self, runner, diamond_index, tmp_path) -> None:
        skills = tmp_path / "skills"
        _invoke(runner, "A", "--registry-file", str(diamond_index), "--install-dir", str(skills))
        assert not resolve_lock_file_path(skills).exists()

    def test_verbose_flag_accepted(self, runner, diamond_index, tmp_path) -> None:
        result = _invoke(runner, "A", "--registry-file", str(diamond_index),
                         "--install-dir", str(tmp_path / "skills"), "--verbose")
        assert result.exit_code == 0

    def test_local_default_install_dir(self, runner, diamond_index) -> None:
        """Without --install-dir the lock file is looked up under ./.claude."""
        result = _invoke(runner, "A", "--registry-file", str(diamond_index), "--format", "json")
        assert result.exit_code == 0

    def test_http_registry_used_by_default(self, runner, tmp_path) -> None:
        from skillpm.registry.base import SkillRecord

        with patch(
            "skillpm.registry.http_registry.HttpSkillRegistry.get_skill",
            new=AsyncMock(return_value=SkillRecord("solo", "1.0.0", "tx")),
        ):
            result = _invoke(runner, "solo", "--registry-url", "https://r.test/get",
                             "--install-dir", str(tmp_path / "skills"), "--format", "json")
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["order"] == ["solo"]


# ---------------------------------------------------------------------------
# Failures and exit codes
# ---------------------------------------------------------------------------


class TestResolveExitCodes:

    def test_missing_skill_exit_1(self, runner, diamond_index, tmp_path) -> None:
        result = _invoke(runner, "ghost", "--registry-file", str(diamond_index),
                         "--install-dir", str(tmp_path / "skills"))
        assert result.exit_code == 1
        assert "ghost" in result.output

    def test_cycle_exit_1(self, runner, tmp_path) -> None:
        index = _write_index(tmp_path / "cyc.json", {"A": ["B"], "B": ["A"]})
        result = _invoke(runner, "A", "--registry-file", str(index),
                         "--install-dir", str(tmp_path / "skills"))
        assert result.exit_code == 1
        assert "Circular dependency" in result.output

    def test_depth_limit_exit_1(self, runner, diamond_index, tmp_path) -> None:
        result = _invoke(runner, "A", "--registry-file", str(diamond_index),
                         "--install-dir", str(tmp_path / "skills"), "--max-depth", "1")
        assert result.exit_code == 1
        assert "depth limit" in result.output

    def test_bad_registry_file_exit_2(self, runner, tmp_path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{oops")
        result = _invoke(runner, "A", "--registry-file", str(bad),
                         "--install-dir", str(tmp_path / "skills"))
        assert result.exit_code == 2

    def test_registry_failure_exit_2(self, runner, tmp_path) -> None:
        with patch(
            "skillpm.registry.http_registry.HttpSkillRegistry.get_skill",
            new=AsyncMock(side_effect=RegistryError("Registry returned HTTP 500", "u")),
        ):
            result = _invoke(runner, "A", "--install-dir", str(tmp_path / "skills"))
        assert result.exit_code == 2
        assert "HTTP 500" in result.output

    def test_missing_config_exit_1(self, runner, diamond_index, tmp_path) -> None:
        result = _invoke(runner, "A", "--registry-file", str(diamond_index),
                         "--config", str(tmp_path / "nope.json"))
        assert result.exit_code == 1

    def test_unreadable_lock_file_exit_2(self, runner, diamond_index, tmp_path) -> None:
        skills = tmp_path / "skills"
        resolve_lock_file_path(skills).mkdir(parents=True)
        result = _invoke(runner, "A", "--registry-file", str(diamond_index),
                         "--install-dir", str(skills))
        assert result.exit_code == 2

    def test_missing_name_argument(self, runner) -> None:
        result = runner.invoke(cli, ["resolve"])
        assert result.exit_code == 2
        assert "Missing argument" in result.output or "Usage" in result.output


class TestConfigIntegration:

    def test_config_max_depth_applies(self, runner, diamond_index, tmp_path) -> None:
        cfg = tmp_path / "skillsrc.json"
        cfg.write_text(json.dumps({"max_depth": 1}))
        result = _invoke(runner, "A", "--registry-file", str(diamond_index),
                         "--install-dir", str(tmp_path / "skills"), "--config", str(cfg))
        assert result.exit_code == 1

    def test_flag_overrides_config(self, runner, diamond_index, tmp_path) -> None:
        cfg = tmp_path / "skillsrc.json"
        cfg.write_text(json.dumps({"max_depth": 1}))
        result = _invoke(runner, "A", "--registry-file", str(diamond_index),
                         "--install-dir", str(tmp_path / "skills"), "--config", str(cfg),
                         "--max-depth", "5")
        assert result.exit_code == 0

    def _lock_with_d(self, skills: Path) -> None:
        write(
            LockFile(generated_at=1, install_location=str(skills),
                     skills=[InstalledSkillRecord(name="D", version="1.0.0")]),
            resolve_lock_file_path(skills),
        )

    def test_env_install_dir_used(self, runner, diamond_index, tmp_path, monkeypatch) -> None:
        skills = tmp_path / "env-skills"
        self._lock_with_d(skills)
        monkeypatch.setenv("SKILLPM_INSTALL_DIR", str(skills))
        result = _invoke(runner, "A", "--registry-file", str(diamond_index), "--format", "json")
        assert json.loads(result.output)["installedCount"] == 2

    def test_global_overrides_env_install_dir(
        self, runner, diamond_index, tmp_path, isolated_home, monkeypatch
    ) -> None:
        self._lock_with_d(tmp_path / "env-skills")
        monkeypatch.setenv("SKILLPM_INSTALL_DIR", str(tmp_path / "env-skills"))
        result = _invoke(runner, "A", "--registry-file", str(diamond_index),
                         "--global", "--format", "json")
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["installedCount"] == 0

        self._lock_with_d(isolated_home / ".claude" / "skills")
        result = _invoke(runner, "A", "--registry-file", str(diamond_index),
                         "--global", "--format", "json")
        assert json.loads(result.output)["installedCount"] == 2


class TestVersion:

    def test_version(self, runner) -> None:
        from skillpm import __version__

        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
