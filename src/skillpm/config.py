"""``.skillsrc`` configuration loading.

Lookup order: an explicit path if one is given, otherwise ``./.skillsrc``
then ``~/.skillsrc``, otherwise built-in defaults. ``SKILLPM_*``
environment variables override whatever the file said.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from skillpm.core.dependency.resolver import DEFAULT_MAX_DEPTH
from skillpm.exceptions import ConfigurationError
from skillpm.registry.http_client import DEFAULT_TIMEOUT
from skillpm.registry.http_registry import DEFAULT_REGISTRY_URL

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".skillsrc"

# camelCase spellings accepted in .skillsrc alongside the field names.
_KEY_ALIASES = {
    "registryUrl": "registry_url",
    "timeout": "timeout_s",
    "maxDepth": "max_depth",
    "installLocation": "install_location",
}


@dataclass(frozen=True)
class Config:
    registry_url: str = DEFAULT_REGISTRY_URL
    timeout_s: float = DEFAULT_TIMEOUT
    max_depth: int = DEFAULT_MAX_DEPTH
    install_location: str | None = None  # None: pick from --global


def candidate_paths() -> list[Path]:
    return [Path.cwd() / CONFIG_FILE_NAME, Path.home() / CONFIG_FILE_NAME]


def _parse_file(path: Path) -> Config:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(
            f"Failed to read configuration file {path.name}: {exc.strerror or exc}\n"
            "→ Solution: Ensure you have read permissions for the config file",
            "configPath",
        ) from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigurationError(
            f"Configuration file {path.name} contains malformed JSON\n"
            "→ Solution: Ensure .skillsrc is valid JSON",
            "json",
        ) from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(
            f"Configuration file {path.name} must contain a JSON object", "json"
        )

    allowed = {f.name for f in fields(Config)}
    filtered: dict[str, Any] = {}
    for key, value in raw.items():
        key = _KEY_ALIASES.get(key, key)
        if key in allowed:
            filtered[key] = value
    return _coerce(Config(**filtered), source=path.name)


def _coerce(cfg: Config, source: str) -> Config:
    """Validate field types, converting numeric strings where possible."""
    if isinstance(cfg.timeout_s, bool) or isinstance(cfg.max_depth, bool):
        raise ConfigurationError(
            f"Invalid numeric setting in {source}: booleans are not numbers",
            "timeout_s/max_depth",
        )
    try:
        timeout_s = float(cfg.timeout_s)
        max_depth = _as_int(cfg.max_depth)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"Invalid numeric setting in {source}: {exc}", "timeout_s/max_depth"
        ) from exc
    if timeout_s <= 0:
        raise ConfigurationError(f"timeout_s must be positive (from {source})", "timeout_s")
    if max_depth < 0:
        raise ConfigurationError(f"max_depth must not be negative (from {source})", "max_depth")
    if not isinstance(cfg.registry_url, str) or not cfg.registry_url:
        raise ConfigurationError(f"registry_url must be a non-empty string (from {source})", "registry_url")
    if cfg.install_location is not None and (
        not isinstance(cfg.install_location, str) or not cfg.install_location
    ):
        raise ConfigurationError(
            f"install_location must be a non-empty string (from {source})", "install_location"
        )
    return replace(cfg, timeout_s=timeout_s, max_depth=max_depth)


def _as_int(value: Any) -> int:
    """Accept ints and integral numeric strings; reject 2.7 and "2.7"."""
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"max_depth must be a whole number, got {value!r}")
        return int(value)
    return int(value)


def _apply_env(cfg: Config) -> Config:
    updates: dict[str, Any] = {}
    if url := os.getenv("SKILLPM_REGISTRY_URL", "").strip():
        updates["registry_url"] = url
    if timeout := os.getenv("SKILLPM_TIMEOUT", "").strip():
        updates["timeout_s"] = timeout
    if depth := os.getenv("SKILLPM_MAX_DEPTH", "").strip():
        updates["max_depth"] = depth
    if install_dir := os.getenv("SKILLPM_INSTALL_DIR", "").strip():
        updates["install_location"] = install_dir
    if not updates:
        return cfg
    return _coerce(replace(cfg, **updates), source="environment")


def load_config(path: str | Path | None = None) -> Config:
    """Load configuration.

    Args:
        path: Explicit ``.skillsrc`` path. When given it must exist and
            parse; otherwise the default locations are tried in turn and
            broken candidates are skipped with a warning.

    Raises:
        ConfigurationError: If the explicit file is missing or invalid, or
            an environment override is not a valid number.
    """
    if path is not None:
        explicit = Path(path).expanduser()
        if not explicit.is_file():
            raise ConfigurationError(
                f"Configuration file not found at {explicit}", "configPath"
            )
        return _apply_env(_parse_file(explicit))

    cfg = Config()
    for candidate in candidate_paths():
        if not candidate.is_file():
            continue
        try:
            cfg = _parse_file(candidate)
        except ConfigurationError as exc:
            logger.warning("Ignoring %s: %s", candidate, exc)
            continue
        logger.debug("Loaded configuration from %s", candidate)
        break
    return _apply_env(cfg)
