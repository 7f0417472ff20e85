"""Layered TOML configuration files.

A config directory holds `default.toml` plus one file per environment
(`development.toml`, `production.toml`, ...). Layers are merged key by key,
later layers winning; any layer may be absent, in which case the model
defaults in `maestro.config.models` apply.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "MAESTRO_CONFIG_DIR"
ENVIRONMENT_ENV = "MAESTRO_ENV"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_LAYER = "default"

# How many directories above the working directory to search for config/
SEARCH_DEPTH = 5


def get_config_dir() -> Path:
    """Locate the config directory.

    MAESTRO_CONFIG_DIR wins and must name an existing directory. Otherwise
    the nearest `config/` holding a `default.toml` at or above the working
    directory is used, falling back to a relative `config/`.

    Raises:
        FileNotFoundError: If MAESTRO_CONFIG_DIR points nowhere
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        path = Path(override)
        if not path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {override}")
        return path

    cwd = Path.cwd()
    for directory in [cwd, *cwd.parents][:SEARCH_DEPTH]:
        candidate = directory / "config"
        if (candidate / f"{DEFAULT_LAYER}.toml").is_file():
            return candidate
    return Path("config")


def get_environment() -> str:
    """Current environment name from MAESTRO_ENV (default 'development')."""
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")
    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return base updated by override, merging nested tables recursively.

    Neither argument is modified.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def config_layers(config_dir: Path, environment: str) -> list[Path]:
    """Existing layer files in merge order."""
    names = [DEFAULT_LAYER]
    if environment != DEFAULT_LAYER:
        names.append(environment)
    return [path for path in (config_dir / f"{n}.toml" for n in names) if path.is_file()]


def load_config(
    config_dir: Path | None = None,
    environment: str | None = None,
) -> dict[str, Any]:
    """Merge every existing layer for an environment.

    Args:
        config_dir: Directory to read (default: get_config_dir())
        environment: Environment layer to apply (default: get_environment())
    """
    directory = config_dir if config_dir is not None else get_config_dir()
    env = environment or get_environment()

    config: dict[str, Any] = {}
    for path in config_layers(directory, env):
        config = deep_merge(config, load_toml(path))
    return config
