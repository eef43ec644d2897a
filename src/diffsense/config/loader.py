"""Load and merge configuration from .diffsense.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from diffsense.config.schema import (
    OUTPUT_FORMATS,
    DiffConfig,
    DiffSenseConfig,
    HistoryConfig,
    OutputConfig,
    RedactionConfig,
    ScopeConfig,
)
from diffsense.errors import DiffSenseError

CONFIG_FILENAME = ".diffsense.toml"


class ConfigError(DiffSenseError):
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
    return cls(**{k: v for k, v in raw.items() if k in valid_fields})


def _validate(cfg: DiffSenseConfig) -> None:
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output format: {cfg.output.format!r}")
    if not isinstance(cfg.diff.context_lines, int) or cfg.diff.context_lines < 0:
        raise ConfigError("diff.context_lines must be a non-negative integer")
    if not isinstance(cfg.history.limit, int) or cfg.history.limit < 1:
        raise ConfigError("history.limit must be a positive integer")
    if not isinstance(cfg.scope.map, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in cfg.scope.map.items()
    ):
        raise ConfigError("scope.map must map path substrings to scope names")


def _merge_env_overrides(cfg: DiffSenseConfig) -> None:
    """Apply DIFFSENSE_* environment variable overrides; invalid values are ignored."""
    if val := os.environ.get("DIFFSENSE_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("DIFFSENSE_CONTEXT_LINES"):
        try:
            lines = int(val)
        except ValueError:
            lines = -1
        if lines >= 0:
            cfg.diff.context_lines = lines
    if val := os.environ.get("DIFFSENSE_DISABLE_PATTERNS"):
        cfg.redaction.disable.extend(n.strip() for n in val.split(",") if n.strip())


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> DiffSenseConfig:
    """Load, validate, and return a DiffSenseConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = DiffSenseConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = DiffSenseConfig(
                version=str(raw.get("version", "1.0")),
                diff=_build_section(raw, DiffConfig, "diff"),
                scope=_build_section(raw, ScopeConfig, "scope"),
                history=_build_section(raw, HistoryConfig, "history"),
                redaction=_build_section(raw, RedactionConfig, "redaction"),
                output=_build_section(raw, OutputConfig, "output"),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
