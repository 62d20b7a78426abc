"""
Config check use case — validate shellstrap.yml without running anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from shellstrap.core.config.loader import ConfigError, find_config_file, load_config
from shellstrap.core.config.paths import has_unresolved
from shellstrap.core.data.catalog import TOOL_RECIPES, resolve_tools
from shellstrap.core.models.config import BootstrapConfig

logger = logging.getLogger(__name__)


@dataclass
class ConfigCheckResult:
    """Result of validating the configuration."""

    valid: bool = False
    config_path: Path | None = None
    config: BootstrapConfig | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        result: dict = {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
        }
        if self.config:
            result["tools"] = [t.name for t in resolve_tools(self.config.tools, self.config.skip)]
            result["package_manager"] = self.config.package_manager.name
        return result


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Load the config and report problems that loading alone won't catch."""
    result = ConfigCheckResult()
    result.config_path = config_path or find_config_file()

    try:
        config = load_config(result.config_path, search=False)
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    result.config = config
    result.valid = True

    if result.config_path is None:
        result.warnings.append("No shellstrap.yml found — using built-in defaults")

    for name in config.skip:
        if name not in TOOL_RECIPES and all(t.name != name for t in config.tools):
            result.warnings.append(f"skip: unknown tool '{name}'")

    manager = config.package_manager.name
    for tool in resolve_tools(config.tools, config.skip):
        if not tool.install.package_for(manager) and not tool.install.commands:
            result.warnings.append(f"tool '{tool.name}' has no install method for {manager}")

    for label, raw in (
        ("profile.source", config.profile.source),
        ("terminal.path", config.terminal.path),
        ("editor.path", config.editor.path),
    ):
        if has_unresolved(raw):
            result.warnings.append(f"{label}: unresolved environment variable in '{raw}'")

    return result
