"""
Shared pytest fixtures and utilities for the authlink test suite.
"""

from pathlib import Path
from typing import Dict, Any, Callable

import pytest
import yaml

from authlink.codec.options import ObfuscationOptions

# 2023-11-14T22:13:20Z, bucket 19675 with the default daily rotation
SCENARIO_TIMESTAMP = 1700000000000


@pytest.fixture
def project_root() -> Path:
    """
    Repository root path for locating the example config.
    """
    return Path(__file__).resolve().parent.parent


@pytest.fixture
def scenario_timestamp() -> int:
    return SCENARIO_TIMESTAMP


@pytest.fixture
def default_options() -> ObfuscationOptions:
    return ObfuscationOptions()


@pytest.fixture
def fixed_clock() -> Callable[[], int]:
    """
    Clock frozen one minute after the scenario timestamp.
    """
    return lambda: SCENARIO_TIMESTAMP + 60 * 1000


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[[Dict[str, Any]], Path]:
    """
    Create a minimal config.yaml in a temp directory.

    Usage:
        path = make_config({"obfuscation": {"shift": 5}})
    """

    def _builder(overrides: Dict[str, Any] | None = None) -> Path:
        base = {
            "obfuscation": {
                "shift": 3,
                "rotation_period_seconds": 86400,
            },
            "verification": {"salt": "test-salt"},
            "logging": {"console": False},
        }
        if overrides:
            base = merge_dicts(base, overrides)

        cfg_path = tmp_path / "config.yaml"
        cfg_path.write_text(yaml.safe_dump(base))
        return cfg_path

    return _builder


def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow+deep merge helper for fixture config dictionaries.
    """
    result: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result
