"""
Configuration loading for the experiment cookie system.

Settings come from a YAML file with optional environment overrides::

    app_name: myapp
    wire_version: 1
    cookie:
      name: fs_experiments
      path: /
      max_age_days: 365
    templates:
      myapp:
        features:
          alpha: {}
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .constants import (
    COOKIE_MAX_AGE_DAYS,
    COOKIE_PATH,
    EXPERIMENT_COOKIE_NAME,
    SUPPORTED_WIRE_VERSIONS,
    WIRE_VERSION_POSITIONAL,
)
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_APP_NAME = "FS_EXPERIMENTS_APP_NAME"
ENV_WIRE_VERSION = "FS_EXPERIMENTS_WIRE_VERSION"
ENV_COOKIE_NAME = "FS_EXPERIMENTS_COOKIE_NAME"


@dataclass
class ExperimentSettings:
    """Runtime settings of an experiment namespace manager."""

    app_name: str = ""
    cookie_name: str = EXPERIMENT_COOKIE_NAME
    cookie_path: str = COOKIE_PATH
    max_age_days: int = COOKIE_MAX_AGE_DAYS
    wire_version: int = WIRE_VERSION_POSITIONAL
    templates: Dict[str, Any] = field(default_factory=dict)

    @property
    def max_age_seconds(self) -> int:
        return self.max_age_days * 24 * 60 * 60


def _require_type(value: Any, expected: type, key: str) -> Any:
    if not isinstance(value, expected) or (isinstance(value, bool) and expected is not bool):
        raise ConfigurationError(
            f"'{key}' must be of type {expected.__name__}, got {type(value).__name__}"
        )
    return value


def _parse_wire_version(value: Any, source: str) -> int:
    try:
        version = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid wire version {value!r} from {source}") from e
    if version not in SUPPORTED_WIRE_VERSIONS:
        raise ConfigurationError(
            f"Unsupported wire version {version} from {source}; "
            f"expected one of {SUPPORTED_WIRE_VERSIONS}"
        )
    return version


def settings_from_dict(data: Optional[Dict[str, Any]]) -> ExperimentSettings:
    """
    Build settings from an already parsed configuration mapping.

    Raises:
        ConfigurationError: If any value has the wrong type
    """
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration root must be a mapping")

    settings = ExperimentSettings()
    if "app_name" in data:
        settings.app_name = _require_type(data["app_name"], str, "app_name")
    if "wire_version" in data:
        settings.wire_version = _parse_wire_version(data["wire_version"], "config file")

    cookie = data.get("cookie") or {}
    _require_type(cookie, dict, "cookie")
    if "name" in cookie:
        settings.cookie_name = _require_type(cookie["name"], str, "cookie.name")
    if "path" in cookie:
        settings.cookie_path = _require_type(cookie["path"], str, "cookie.path")
    if "max_age_days" in cookie:
        settings.max_age_days = _require_type(cookie["max_age_days"], int, "cookie.max_age_days")

    templates = data.get("templates") or {}
    settings.templates = _require_type(templates, dict, "templates")

    return apply_env_overrides(settings)


def apply_env_overrides(settings: ExperimentSettings) -> ExperimentSettings:
    """Apply FS_EXPERIMENTS_* environment variables on top of file settings."""
    if os.environ.get(ENV_APP_NAME):
        settings.app_name = os.environ[ENV_APP_NAME]
    if os.environ.get(ENV_COOKIE_NAME):
        settings.cookie_name = os.environ[ENV_COOKIE_NAME]
    if os.environ.get(ENV_WIRE_VERSION):
        settings.wire_version = _parse_wire_version(os.environ[ENV_WIRE_VERSION], ENV_WIRE_VERSION)
    return settings


def load_settings(config_path: Union[str, Path]) -> ExperimentSettings:
    """
    Load settings from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        ExperimentSettings

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            raise ConfigurationError(
                f"YAML syntax error in {path} at line {mark.line + 1}, column {mark.column + 1}: "
                f"{getattr(e, 'problem', e)}"
            ) from e
        raise ConfigurationError(f"YAML syntax error in {path}: {e}") from e
    except (IOError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e

    logger.debug(f"Loaded experiment configuration from {path}")
    return settings_from_dict(data)
