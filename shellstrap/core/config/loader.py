"""
Configuration loader — reads shellstrap.yml into the config model.

This is the primary entry point for loading configuration. It reads
YAML, validates against the Pydantic schema, and returns a typed
BootstrapConfig. No file at all is fine: defaults cover everything.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from shellstrap.core.models.config import BootstrapConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "shellstrap.yml"

# Per-user fallback location
USER_CONFIG_DIR = Path("~/.config/shellstrap")


class ConfigError(Exception):
    """Raised when the configuration file is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for shellstrap.yml from the given directory upward.

    Falls back to ``~/.config/shellstrap/shellstrap.yml``.

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

    user_candidate = USER_CONFIG_DIR.expanduser() / CONFIG_FILE
    if user_candidate.is_file():
        return user_candidate

    return None


def load_config(path: Path | None = None, *, search: bool = True) -> BootstrapConfig:
    """Load and validate configuration.

    Args:
        path: Explicit path to shellstrap.yml. If None and ``search`` is
            set, searches upward and then in the user config dir.
        search: Whether to search when no explicit path is given.

    Returns:
        Validated BootstrapConfig (defaults when no file is found).

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None and search:
        path = find_config_file()

    if path is None:
        logger.debug("No %s found — using defaults", CONFIG_FILE)
        return BootstrapConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return BootstrapConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "shellstrap" key or be flat
    if "shellstrap" in data and isinstance(data["shellstrap"], dict):
        data = data["shellstrap"]

    try:
        config = BootstrapConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.info(
        "Loaded config from %s (%d tool overrides, %d skipped)",
        path, len(config.tools), len(config.skip),
    )
    return config
