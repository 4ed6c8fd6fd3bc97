"""Load and merge configuration from .gitstate.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from gitstate.config.schema import (
    LOG_LEVELS,
    OUTPUT_FORMATS,
    GitConfig,
    GitStateConfig,
    LoggingConfig,
    OutputConfig,
    StatusConfig,
)
from gitstate.errors import GitStateError

CONFIG_FILENAME = ".gitstate.toml"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


class ConfigError(GitStateError):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: GitStateConfig) -> None:
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output format: {cfg.output.format!r}")
    if str(cfg.logging.level).upper() not in LOG_LEVELS:
        raise ConfigError(f"Invalid log level: {cfg.logging.level!r}")
    cfg.logging.level = str(cfg.logging.level).upper()  # type: ignore[assignment]
    if not isinstance(cfg.status.entry_limit, int) or cfg.status.entry_limit < 0:
        raise ConfigError(f"entry_limit must be a non-negative integer: {cfg.status.entry_limit!r}")
    if not isinstance(cfg.git.timeout, int) or cfg.git.timeout <= 0:
        raise ConfigError(f"git timeout must be a positive integer: {cfg.git.timeout!r}")
    if not isinstance(cfg.status.no_optional_locks, bool):
        raise ConfigError(
            f"no_optional_locks must be true or false: {cfg.status.no_optional_locks!r}"
        )
    if not isinstance(cfg.output.show_summary, bool):
        raise ConfigError(f"show_summary must be true or false: {cfg.output.show_summary!r}")


def _merge_env_overrides(cfg: GitStateConfig) -> None:
    """Apply GITSTATE_* environment variable overrides. Invalid values are ignored."""
    if val := os.environ.get("GITSTATE_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("GITSTATE_ENTRY_LIMIT"):
        try:
            limit = int(val)
        except ValueError:
            pass
        else:
            if limit >= 0:
                cfg.status.entry_limit = limit
    if val := os.environ.get("GITSTATE_NO_OPTIONAL_LOCKS"):
        if val.lower() in _TRUE:
            cfg.status.no_optional_locks = True
        elif val.lower() in _FALSE:
            cfg.status.no_optional_locks = False
    if val := os.environ.get("GITSTATE_GIT"):
        cfg.git.executable = val
    if val := os.environ.get("GITSTATE_LOG_LEVEL"):
        if val.upper() in LOG_LEVELS:
            cfg.logging.level = val.upper()  # type: ignore[assignment]


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> GitStateConfig:
    """Load, validate, and return a GitStateConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = GitStateConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = GitStateConfig(
                version=raw.get("version", "1.0"),
                status=_build_section(raw, StatusConfig, "status"),
                output=_build_section(raw, OutputConfig, "output"),
                git=_build_section(raw, GitConfig, "git"),
                logging=_build_section(raw, LoggingConfig, "logging"),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
