"""
Status use case — what is installed, without changing anything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from shellstrap.adapters import build_registry
from shellstrap.core.config.loader import ConfigError, load_config
from shellstrap.core.config.paths import expand
from shellstrap.core.data.catalog import resolve_tools
from shellstrap.core.models.config import BootstrapConfig
from shellstrap.core.models.tool import ProbeResult
from shellstrap.core.persistence.sentinel import Sentinel
from shellstrap.core.services.probe import probe_tool

logger = logging.getLogger(__name__)


@dataclass
class StatusResult:
    """Snapshot of the machine as shellstrap sees it."""

    tools: list[ProbeResult] = field(default_factory=list)
    package_manager: str = ""
    package_manager_available: bool = False
    migration_done: bool = False
    settings_files: dict[str, dict] = field(default_factory=dict)
    error: str | None = None

    @property
    def missing(self) -> list[str]:
        return [t.tool for t in self.tools if not t.found]

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "tools": [t.model_dump(mode="json") for t in self.tools],
            "missing": self.missing,
            "package_manager": {
                "name": self.package_manager,
                "available": self.package_manager_available,
            },
            "migration_done": self.migration_done,
            "settings_files": self.settings_files,
        }


def get_status(
    config_path: Path | None = None,
    config: BootstrapConfig | None = None,
) -> StatusResult:
    """Probe every configured tool and report file locations."""
    result = StatusResult()

    if config is None:
        try:
            config = load_config(config_path)
        except ConfigError as e:
            result.error = str(e)
            return result

    result.tools = [probe_tool(tool) for tool in resolve_tools(config.tools, config.skip)]

    registry = build_registry(config.package_manager.name)
    manager = registry.get(config.package_manager.name)
    result.package_manager = config.package_manager.name
    result.package_manager_available = bool(manager and manager.is_available())

    flag_dir = expand(config.migration.flag_dir) if config.migration.flag_dir else None
    result.migration_done = Sentinel(config.migration.flag_name, flag_dir).is_set()

    for name, target in (("terminal", config.terminal), ("editor", config.editor)):
        path = expand(target.path)
        result.settings_files[name] = {"path": str(path), "exists": path.is_file()}

    return result
