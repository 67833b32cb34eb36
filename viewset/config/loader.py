"""Layered TOML configuration files.

A config directory holds up to three layers, merged in order:

    default.toml        shipped defaults (required)
    {VIEWSET_ENV}.toml  per-environment overrides, "development" if unset
    local.toml          untracked machine-local overrides

Tables are merged key by key, so a layer only needs the keys it changes.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "VIEWSET_CONFIG_DIR"
ENVIRONMENT_ENV = "VIEWSET_ENV"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_FILE = "default.toml"
LOCAL_FILE = "local.toml"


def get_environment() -> str:
    """Name of the active environment layer."""
    return os.environ.get(ENVIRONMENT_ENV) or DEFAULT_ENVIRONMENT


def find_config_dir(start: Path | None = None) -> Path:
    """Locate the config directory.

    VIEWSET_CONFIG_DIR wins when set and must exist. Otherwise the nearest
    `config/` holding a default.toml is used, looking in start (the working
    directory by default) and then each of its ancestors.

    Raises:
        FileNotFoundError: If VIEWSET_CONFIG_DIR is missing or no directory qualifies
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        path = Path(override)
        if not path.is_dir():
            raise FileNotFoundError(f"{CONFIG_DIR_ENV} is not a directory: {override}")
        return path

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / "config"
        if (candidate / DEFAULT_FILE).is_file():
            return candidate

    raise FileNotFoundError(
        f"No config/{DEFAULT_FILE} found above {here}; set {CONFIG_DIR_ENV}"
    )


def config_layers(config_dir: Path, environment: str) -> list[Path]:
    """Existing layer files of config_dir, lowest precedence first.

    Raises:
        FileNotFoundError: If default.toml is missing
    """
    default = config_dir / DEFAULT_FILE
    if not default.is_file():
        raise FileNotFoundError(f"Missing {DEFAULT_FILE} in {config_dir}")

    layers = [default]
    for optional in (f"{environment}.toml", LOCAL_FILE):
        path = config_dir / optional
        if path.is_file() and path not in layers:
            layers.append(path)
    return layers


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base, table by table."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config(
    config_dir: Path | None = None,
    environment: str | None = None,
) -> dict[str, Any]:
    """Read and merge every layer of the config directory."""
    directory = config_dir if config_dir is not None else find_config_dir()
    config: dict[str, Any] = {}
    for layer in config_layers(directory, environment or get_environment()):
        config = deep_merge(config, load_toml(layer))
    return config
