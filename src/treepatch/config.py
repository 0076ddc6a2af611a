"""Engine configuration loaded from YAML with environment overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError

DEFAULT_CONFIG_NAME = "treepatch.yaml"

_ENV_OVERRIDES = {
    "TREEPATCH_CONTEXT_LINES": "context_lines",
    "TREEPATCH_MAX_LCS_LINES": "max_lcs_lines",
}


class EngineConfig(BaseModel):
    """Tunables for diff generation and patch application."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    context_lines: int = Field(default=3, ge=0)
    # Files longer than this on either side are diffed as a full replacement.
    max_lcs_lines: int = Field(default=5000, ge=0)
    binary_probe_bytes: int = Field(default=8192, gt=0)
    follow_symlinks: bool = False
    stop_on_error: bool = True


def load_config(
    path: Path | str | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> EngineConfig:
    """Build an :class:`EngineConfig` from ``path`` and the environment.

    The YAML file may hold the settings at the top level or beneath an
    ``engine`` key. A missing file yields the defaults. Environment
    overrides must be positive integers; other values are ignored.
    """

    env_mapping = os.environ if env is None else env
    values: dict[str, Any] = {}

    if path is not None:
        values.update(_read_yaml_section(Path(path)))

    for variable, key in _ENV_OVERRIDES.items():
        raw = env_mapping.get(variable)
        if raw is None:
            continue
        try:
            parsed = int(str(raw).strip())
        except ValueError:
            continue
        if parsed > 0:
            values[key] = parsed

    try:
        return EngineConfig(**values)
    except ValidationError as error:
        raise ConfigError(f"Invalid engine configuration: {error}") from error


def _read_yaml_section(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as error:
        raise ConfigError(f"Failed to parse config {path}: {error}") from error

    if not isinstance(loaded, Mapping):
        raise ConfigError(f"Configuration must be a mapping at the top level: {path}")
    section = loaded.get("engine", loaded)
    if not isinstance(section, Mapping):
        raise ConfigError(f"The 'engine' section must be a mapping: {path}")
    return dict(section)
