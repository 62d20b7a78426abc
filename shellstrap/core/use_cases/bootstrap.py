"""
Bootstrap use case — the full vertical slice behind ``shellstrap run``.

Loads config, wires the adapter registry and installer, runs the
orchestrator, and hands back the report. A broken config file never
blocks shell startup: it is reported and the defaults are used instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from shellstrap.adapters import build_registry
from shellstrap.adapters.registry import AdapterRegistry
from shellstrap.core.config.loader import ConfigError, load_config
from shellstrap.core.engine.orchestrator import Orchestrator
from shellstrap.core.models.config import BootstrapConfig
from shellstrap.core.models.report import BootstrapReport, ProgressState
from shellstrap.core.persistence.sentinel import Sentinel
from shellstrap.core.services.installer import PackageInstaller
from shellstrap.core.services.progress import ProgressReporter

logger = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    """Result of a bootstrap run."""

    report: BootstrapReport | None = None
    progress: ProgressState | None = None
    config_path: Path | None = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        result: dict = {
            "config_path": str(self.config_path) if self.config_path else None,
            "warnings": self.warnings,
        }
        if self.progress:
            result["installed_count"] = self.progress.installed_count
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def run_bootstrap(
    config_path: Path | None = None,
    config: BootstrapConfig | None = None,
    profile_source: Path | None = None,
    dry_run: bool = False,
    mock_mode: bool = False,
    show_progress: bool = False,
    registry: AdapterRegistry | None = None,
    sentinel: Sentinel | None = None,
) -> BootstrapResult:
    """Provision every tool and converge profile and settings files.

    Args:
        config_path: Optional explicit path to shellstrap.yml.
        config: Pre-loaded configuration (skips loading).
        profile_source: The active profile (overrides config).
        dry_run: Report what would change without changing anything.
        mock_mode: Use the registry's mock mode (no real installs).
        show_progress: Draw the progress line on stderr.
        registry: Optional pre-configured adapter registry.
        sentinel: Optional migration sentinel (tests).

    Returns:
        BootstrapResult with the run report.
    """
    result = BootstrapResult(config_path=config_path)

    if config is None:
        try:
            config = load_config(config_path)
        except ConfigError as e:
            logger.warning("config: %s — using defaults", e)
            result.warnings.append(str(e))
            config = BootstrapConfig()

    if registry is None:
        registry = build_registry(config.package_manager.name, mock_mode=mock_mode)

    installer = PackageInstaller(
        registry,
        config.package_manager,
        config.network,
        dry_run=dry_run,
    )

    state = ProgressState()
    orchestrator = Orchestrator(
        config,
        installer,
        profile_source=profile_source,
        progress=ProgressReporter(state, enabled=show_progress),
        state=state,
        sentinel=sentinel,
    )

    result.report = orchestrator.run()
    result.progress = state
    return result
