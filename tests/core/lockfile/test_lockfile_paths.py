"""Tests for mapping an install location to its lock file path."""

from __future__ import annotations

from pathlib import Path

from skillpm.core.lockfile import LOCK_FILE_NAME, resolve_lock_file_path


class TestResolveLockFilePath:
    """The lock file is a sibling of the skills directory."""

    def test_sibling_of_skills_dir(self, tmp_path: Path) -> None:
        base = tmp_path.resolve()
        skills = base / ".claude" / "skills"
        assert resolve_lock_file_path(skills) == base / ".claude" / "skills-lock.json"

    def test_trailing_slash_ignored(self, tmp_path: Path) -> None:
        assert resolve_lock_file_path(f"{tmp_path}/skills/") == tmp_path.resolve() / LOCK_FILE_NAME

    def test_tilde_expands_to_home(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        path = resolve_lock_file_path("~/.claude/skills")
        assert path == tmp_path.resolve() / ".claude" / "skills-lock.json"

    def test_relative_resolved_against_cwd(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        path = resolve_lock_file_path("./.claude/skills")
        assert path == tmp_path.resolve() / ".claude" / "skills-lock.json"
        assert path.is_absolute()
