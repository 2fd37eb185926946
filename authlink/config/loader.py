"""
Configuration file loading.

Every authlink setting has a default, so the config file is optional. An
explicit path must point at a readable file; without one, ``config.yaml`` in
the working directory is used when present.
"""

import logging
from pathlib import Path
from typing import Dict, Any, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "config.yaml"


class ConfigError(Exception):
    """Configuration file cannot be found, read or parsed."""
    pass


def find_config(config_path: Union[str, Path, None] = None) -> Optional[Path]:
    """
    Resolve which config file to read.

    Args:
        config_path: Explicit path, or None to look in the working directory

    Returns:
        Path to read, or None when no file is given and none is present

    Raises:
        ConfigError: If an explicit path does not exist
    """
    if config_path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_NAME
        return candidate if candidate.is_file() else None

    path = Path(config_path)
    if not path.is_file():
        raise ConfigError(
            f"Configuration file not found: {path}\n"
            f"See config.yaml.example for the available settings."
        )
    return path


def load_config(config_path: Union[str, Path, None] = None) -> Dict[str, Any]:
    """
    Load settings from YAML.

    An empty file, or no file at all when no path was given, yields ``{}``:
    all sections then take their defaults.

    Args:
        config_path: Explicit path, or None to look for ./config.yaml

    Returns:
        Configuration dictionary (not yet validated)

    Raises:
        ConfigError: If the file is missing, unreadable, not YAML, or not a mapping
    """
    path = find_config(config_path)
    if path is None:
        logger.debug(f"No {DEFAULT_CONFIG_NAME} in {Path.cwd()}, using defaults")
        return {}

    try:
        config = yaml.safe_load(path.read_text(encoding='utf-8'))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e

    if config is None:
        config = {}
    elif not isinstance(config, dict):
        raise ConfigError(f"{path} must contain a YAML mapping of sections")

    logger.debug(f"Loaded configuration from {path}")
    return config


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Look up a setting by dotted path, e.g. ``'verification.salt'``.

    Returns default when any part of the path is missing.
    """
    value = config
    for key in path.split('.'):
        if not isinstance(value, dict) or key not in value:
            return default
        value = value[key]
    return value
