# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader: YAML on disk to a validated, frozen G3ReleaseConfig.

Where the config comes from, in order:
  1. the --config path, when given
  2. g3release.yaml at the top of the source root, when present
  3. built-in defaults (`default_config()`)

A file that exists but is broken always stops the run. We never fall back
to defaults because a file failed to parse.
"""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from g3release.config.exceptions import ConfigLoadError, ConfigValidationError
from g3release.config.schema import G3ReleaseConfig

DEFAULT_CONFIG_VERSION = "1.0.0"
CONFIG_FILENAME = "g3release.yaml"


def _parse_mapping(config_path: Path) -> dict[str, Any]:
    if not config_path.is_file():
        reason = "not found" if not config_path.exists() else "not a file"
        raise ConfigLoadError(f"Config path {config_path} is {reason}")

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            parsed = yaml.safe_load(handle)
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"{config_path} must hold a YAML mapping with a 'global' section, "
            f"got {type(parsed).__name__}"
        )
    return parsed


def load_config(config_path: Path) -> G3ReleaseConfig:
    """
    Load and validate one config file.

    Raises:
        ConfigLoadError: The file is missing, unreadable, or not a YAML mapping.
        ConfigValidationError: The mapping does not match the schema.
    """
    try:
        return G3ReleaseConfig.model_validate(_parse_mapping(config_path))
    except ValidationError as err:
        raise ConfigValidationError(f"Invalid config in {config_path}:\n{err}") from err


def find_config(source_root: Path) -> Optional[Path]:
    """The workspace's own config file, if it has one."""
    candidate = source_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def default_config(source_root: str = ".", log_level: str = "INFO") -> G3ReleaseConfig:
    """The config used when no file is given: defaults for every package."""
    return G3ReleaseConfig.model_validate(
        {
            "global": {
                "config_version": DEFAULT_CONFIG_VERSION,
                "source_root": source_root,
                "log_level": log_level,
            }
        }
    )
