"""Tool configuration loaded from an optional YAML file.

Example ``qt5_tool.yaml`` placed in the root directory::

    preferred_branches:
      qtwebkit: qt-modularization-base
      qtdeclarative: refactor
    configure_options: [-developer-build, -opensource]
    keep_going: true
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from .errors import ConfigError

CONFIG_ENV_VAR = "QT5_TOOL_CONFIG"
DEFAULT_CONFIG_NAME = "qt5_tool.yaml"

# Modules that should not follow the default branch when found detached.
DEFAULT_PREFERRED_BRANCHES: dict[str, str] = {
    "qtwebkit": "qt-modularization-base",
}

DEFAULT_CONFIGURE_OPTIONS: list[str] = ["-nokia-developer"]

_KNOWN_KEYS = frozenset({
    "preferred_branches",
    "git",
    "configure",
    "configure_options",
    "make",
    "make_args",
    "keep_going",
})


@dataclass
class ToolConfig:
    """Settings shared by all actions."""

    preferred_branches: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_PREFERRED_BRANCHES)
    )
    git: str = "git"
    configure: str = "configure"
    configure_options: list[str] = field(
        default_factory=lambda: list(DEFAULT_CONFIGURE_OPTIONS)
    )
    make: str | None = None
    make_args: list[str] | None = None
    keep_going: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], source: str | None = None) -> ToolConfig:
        """Build a config from parsed YAML, validating every key."""
        unknown = sorted(set(data) - _KNOWN_KEYS)
        if unknown:
            raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}", source)

        config = cls()
        if "preferred_branches" in data:
            branches = data["preferred_branches"] or {}
            if not isinstance(branches, dict) or not all(
                isinstance(k, str) and isinstance(v, str) for k, v in branches.items()
            ):
                raise ConfigError("'preferred_branches' must map module names to branch names", source)
            config.preferred_branches.update(branches)

        for key in ("git", "configure", "make"):
            if key in data:
                value = data[key]
                if not isinstance(value, str) or not value:
                    raise ConfigError(f"'{key}' must be a non-empty string", source)
                setattr(config, key, value)

        for key in ("configure_options", "make_args"):
            if key in data:
                value = data[key]
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise ConfigError(f"'{key}' must be a list of strings", source)
                setattr(config, key, list(value))

        if "keep_going" in data:
            if not isinstance(data["keep_going"], bool):
                raise ConfigError("'keep_going' must be true or false", source)
            config.keep_going = data["keep_going"]

        return config


def load_config(config_path: Path) -> ToolConfig:
    """Load and validate a configuration file.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read configuration file: {e}", str(config_path)) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", str(config_path)) from e

    if data is None:
        return ToolConfig()
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping", str(config_path))

    return ToolConfig.from_mapping(data, str(config_path))


def find_config(
    root: Path,
    explicit: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """Locate the configuration file: ``--config``, ``QT5_TOOL_CONFIG``, then the root."""
    if explicit:
        return Path(explicit)
    env_path = (environ if environ is not None else os.environ).get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    candidate = root / DEFAULT_CONFIG_NAME
    return candidate if candidate.is_file() else None


def resolve_config(
    root: Path,
    explicit: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> ToolConfig:
    path = find_config(root, explicit, environ)
    if path is None:
        return ToolConfig()
    return load_config(path)
