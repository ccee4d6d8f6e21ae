"""
Loading and validation of hvm configuration.

Values come from built-in defaults, then the TOML config file, then
``HVM_*`` environment variables. Everything is validated here so the rest
of the package only ever sees typed values.
"""

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from platformdirs import PlatformDirs

from ..models.config import APP_NAME, AppPaths, HvmConfig
from .error_handler import ConfigurationError
from .logger import logger


CONFIG_FILE_NAME = "config.toml"
ENV_PREFIX = "HVM_"

# TOML key -> HvmConfig field
CONFIG_KEYS = {
    "githubtoken": "github_token",
    "numtagstodisplay": "num_tags_to_display",
    "sortascending": "sort_ascending",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _platform_dirs() -> PlatformDirs:
    return PlatformDirs(appname=APP_NAME, appauthor=False)


def default_config_file() -> Path:
    return Path(_platform_dirs().user_config_path) / CONFIG_FILE_NAME


def default_app_paths(working_dir: Optional[Path] = None) -> AppPaths:
    """Build AppPaths from the user cache and config directories."""

    return AppPaths(
        cache_dir=Path(_platform_dirs().user_cache_path),
        working_dir=Path(working_dir) if working_dir is not None else Path.cwd(),
        config_file=default_config_file(),
    )


def _read_config_file(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"configuration: unable to parse {path}", e) from e


def _coerce_int(key: str, value: Any, source: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"configuration: {key} must be a non-zero integer: see {source}")
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"configuration: {key} must be a non-zero integer: see {source}", e) from e
    if isinstance(value, float) and value != number:
        raise ConfigurationError(f"configuration: {key} must be a non-zero integer: see {source}")
    if number == 0:
        raise ConfigurationError(f"configuration: {key} must be a non-zero integer: see {source}")
    return number


def _coerce_bool(key: str, value: Any, source: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUE_VALUES | _FALSE_VALUES:
        return value.strip().lower() in _TRUE_VALUES
    raise ConfigurationError(f"configuration: {key} must be a boolean: see {source}")


def _coerce_str(key: str, value: Any, source: str) -> Optional[str]:
    if not isinstance(value, str):
        raise ConfigurationError(f"configuration: {key} must be a string: see {source}")
    return value or None


def _apply(values: Dict[str, Any], raw: Mapping[str, Any], source: str) -> None:
    for key, value in raw.items():
        field = CONFIG_KEYS.get(key.lower())
        if field is None:
            logger.debug(f"Ignoring unknown configuration key {key} in {source}")
            continue
        if field == "num_tags_to_display":
            values[field] = _coerce_int(key, value, source)
        elif field == "sort_ascending":
            values[field] = _coerce_bool(key, value, source)
        else:
            values[field] = _coerce_str(key, value, source)


def load_config(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    verbose: bool = False
) -> HvmConfig:
    """
    Build an HvmConfig from the config file and environment.

    Args:
        config_file: TOML file to read; the user config file when omitted
        environ: Environment mapping; ``os.environ`` when omitted
        verbose: Verbose logging flag to carry in the config

    Returns:
        Validated HvmConfig

    Raises:
        ConfigurationError: If a value has the wrong type or is out of range
    """
    path = Path(config_file) if config_file is not None else default_config_file()
    env = os.environ if environ is None else environ

    values: Dict[str, Any] = {}
    _apply(values, _read_config_file(path), str(path))

    env_values = {
        name[len(ENV_PREFIX):]: value
        for name, value in env.items()
        if name.upper().startswith(ENV_PREFIX) and name[len(ENV_PREFIX):].lower() in CONFIG_KEYS
    }
    _apply(values, env_values, "environment")

    try:
        return HvmConfig(verbose=verbose, **values)
    except ValueError as e:
        raise ConfigurationError(f"configuration: {e}", e) from e


__all__ = [
    "CONFIG_FILE_NAME",
    "default_config_file",
    "default_app_paths",
    "load_config",
]
