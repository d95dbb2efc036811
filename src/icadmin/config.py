"""Settings for the icadmin CLI.

Settings live in ~/.icadmin/config.yaml and can be overridden per process
with ICADMIN_* environment variables.
"""

import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .shared.logging import get_logger
from .shared.paths import CONFIG_FILE

logger = get_logger(__name__)

# Default values
DEFAULT_SHELL_PATH = "mysqlsh"
DEFAULT_SHELL_TIMEOUT = 300
DEFAULT_POLL_ATTEMPTS = 10
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_LOG_LEVEL = "warning"

# Environment variable mappings
ENV_VARS = {
    "shell_path": "ICADMIN_SHELL",
    "shell_timeout": "ICADMIN_SHELL_TIMEOUT",
    "poll_attempts": "ICADMIN_POLL_ATTEMPTS",
    "poll_interval": "ICADMIN_POLL_INTERVAL",
    "log_level": "ICADMIN_LOG_LEVEL",
}

# Value converters per key
CONVERTERS = {
    "shell_path": str,
    "shell_timeout": int,
    "poll_attempts": int,
    "poll_interval": float,
    "log_level": str,
}

# Smallest accepted value for numeric keys
MINIMUMS = {
    "shell_timeout": 1,
    "poll_attempts": 1,
    "poll_interval": 0,
}


@dataclass
class CLIConfig:
    """CLI configuration."""

    shell_path: str = DEFAULT_SHELL_PATH
    shell_timeout: int = DEFAULT_SHELL_TIMEOUT
    poll_attempts: int = DEFAULT_POLL_ATTEMPTS
    poll_interval: float = DEFAULT_POLL_INTERVAL
    log_level: str = DEFAULT_LOG_LEVEL

    # Track where each value came from
    _sources: dict[str, str] = field(default_factory=dict)

    def get_source(self, key: str) -> str:
        """Get the source of a config value."""
        return self._sources.get(key, "default")

    def values(self) -> dict[str, Any]:
        """Config values without the source bookkeeping."""
        data = asdict(self)
        data.pop("_sources")
        return data


def get_config_path() -> Path:
    """Location of the config file (patched in tests)."""
    return CONFIG_FILE


def convert_value(key: str, value: Any) -> Any:
    """Convert a raw setting to its key's type.

    Raises:
        ValueError: Wrong type, or below the key's minimum
    """
    converted = CONVERTERS[key](value)
    minimum = MINIMUMS.get(key)
    if minimum is not None and converted < minimum:
        raise ValueError(f"{key} must be at least {minimum}")
    return converted


def _read_config_file(config_path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except FileNotFoundError:
        return {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("config.unreadable", path=str(config_path), error=str(e))
        return {}
    if not isinstance(data, dict):
        logger.warning("config.invalid", path=str(config_path))
        return {}
    return data


def _write_config_file(config_path: Path, data: dict[str, Any]) -> None:
    config_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    with config_path.open("w") as f:
        yaml.safe_dump(data, f, default_flow_style=False)


def load_config() -> CLIConfig:
    """Resolve settings from ICADMIN_* variables, then the config file, then defaults.

    Values that do not convert to the key's type, or fall below its minimum,
    are logged and skipped.
    """
    config = CLIConfig()
    sources: dict[str, str] = {key: "default" for key in CONVERTERS}

    file_config = _read_config_file(get_config_path())
    for key in CONVERTERS:
        if key in file_config:
            try:
                setattr(config, key, convert_value(key, file_config[key]))
                sources[key] = "config file"
            except (TypeError, ValueError):
                logger.warning("config.bad_value", key=key, value=file_config[key])

    for key, env_var in ENV_VARS.items():
        raw = os.environ.get(env_var)
        if not raw:
            continue
        try:
            setattr(config, key, convert_value(key, raw))
            sources[key] = "environment"
        except ValueError:
            logger.warning("config.bad_env", variable=env_var, value=raw)

    config._sources = sources
    return config


def save_config(key: str, value: Any) -> None:
    """Persist one setting in ~/.icadmin/config.yaml.

    The value is converted to the key's type first, so a bad value leaves the
    file untouched.

    Raises:
        KeyError: Unknown key
        ValueError: Value cannot be converted to the key's type
    """
    if key not in CONVERTERS:
        raise KeyError(key)
    stored = _read_config_file(get_config_path())
    stored[key] = convert_value(key, value)
    _write_config_file(get_config_path(), stored)


def unset_config(key: str) -> bool:
    """Drop one setting from the config file.

    Returns:
        False if the file did not set the key
    """
    path = get_config_path()
    stored = _read_config_file(path)
    if stored.pop(key, None) is None:
        return False
    _write_config_file(path, stored)
    return True
