"""
Configuration loader — reads eks-toolbox.yml into a ToolboxConfig.

The file is optional. When none is found the defaults apply, then
environment overrides (``EKSTB_*``) are layered on top:

    defaults  <  eks-toolbox.yml  <  environment
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from eks_toolbox.core.errors import ConfigError
from eks_toolbox.core.models.config import ToolboxConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "eks-toolbox.yml"

# Environment variable → config key
_ENV_OVERRIDES: dict[str, str] = {
    "EKSTB_BIN_DIR": "bin_dir",
    "EKSTB_SCRATCH_ROOT": "scratch_root",
    "EKSTB_SUDO_PASSWORD": "sudo_password",
}


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for eks-toolbox.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to the config file, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(
    path: Path | None = None,
    *,
    env: dict[str, str] | None = None,
) -> ToolboxConfig:
    """Load and validate toolbox configuration.

    Args:
        path: Explicit path to a config file. If None, searches upward
            and falls back to defaults when nothing is found.
        env: Environment mapping for overrides (default: ``os.environ``).

    Returns:
        Validated ToolboxConfig.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    explicit = path is not None
    if path is None:
        path = find_config_file()

    data: dict = {}
    if path is not None:
        if not path.is_file():
            if explicit:
                raise ConfigError(f"Config file not found: {path}")
        else:
            data = _read_yaml(path)

    environ = os.environ if env is None else env
    for var, key in _ENV_OVERRIDES.items():
        value = environ.get(var)
        if value:
            data[key] = value

    try:
        config = ToolboxConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid toolbox configuration: {e}") from e

    logger.debug("Config resolved: bin_dir=%s scratch_root=%s", config.bin_dir, config.scratch_root)
    return config


def _read_yaml(path: Path) -> dict:
    logger.debug("Loading toolbox config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "toolbox" key or be flat
    section = data.get("toolbox", data)
    if not isinstance(section, dict):
        raise ConfigError(
            f"Expected a mapping under 'toolbox' in {path}, got {type(section).__name__}"
        )
    return dict(section)
