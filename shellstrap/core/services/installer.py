"""
Package installer — install a missing tool, then prove it.

For each tool the installer builds Actions (a package-manager install
and/or explicit commands), dispatches them through the adapter registry,
refreshes the in-process PATH and re-runs the prober.

Outcomes:
    installed   — every action succeeded and the prober now finds the tool
    unverified  — every action succeeded but the prober still does not
    failed      — an action failed, the manager is unavailable, or anything raised

If the package manager is missing it is bootstrapped at most once per
installer instance: download the official script, run it, refresh PATH.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field

from shellstrap.adapters.registry import AdapterRegistry
from shellstrap.adapters.shell.command import run_command
from shellstrap.core.models.action import Action, Receipt
from shellstrap.core.models.config import NetworkConfig, PackageManagerConfig
from shellstrap.core.models.tool import ProbeResult, ToolDescriptor, ToolStatus
from shellstrap.core.services.network import download_text
from shellstrap.core.services.probe import probe_tool
from shellstrap.core.services.search_path import refresh_search_path

logger = logging.getLogger(__name__)


class InstallOutcome(BaseModel):
    """Result of one install attempt."""

    tool: str
    status: ToolStatus
    detail: str = ""
    probe: ProbeResult | None = None
    receipts: list[Receipt] = Field(default_factory=list)
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return self.status in ("present", "installed")


class PackageInstaller:
    """Install tools through the configured package manager or commands."""

    def __init__(
        self,
        registry: AdapterRegistry,
        manager: PackageManagerConfig | None = None,
        network: NetworkConfig | None = None,
        *,
        dry_run: bool = False,
    ):
        self.registry = registry
        self.manager_config = manager or PackageManagerConfig()
        self.network = network or NetworkConfig()
        self.dry_run = dry_run
        self.bootstrap_attempted = False

    @property
    def manager_name(self) -> str:
        return self.manager_config.name

    # ── Package manager availability ────────────────────────────

    def manager_available(self) -> bool:
        if self.registry.mock_mode:
            return True
        adapter = self.registry.get(self.manager_name)
        if adapter is None:
            return False
        try:
            return adapter.is_available()
        except Exception:
            return False

    def ensure_manager(self) -> bool:
        """Make sure the package manager is usable, bootstrapping once."""
        if self.manager_available():
            return True
        if self.bootstrap_attempted or self.dry_run:
            return False
        return self.bootstrap_manager()

    def bootstrap_manager(self) -> bool:
        """Download and run the manager's official installer script."""
        self.bootstrap_attempted = True
        cfg = self.manager_config
        adapter = self.registry.get(self.manager_name)
        command_for = getattr(adapter, "bootstrap_command", None)

        if not cfg.bootstrap or not cfg.bootstrap_url or command_for is None:
            logger.warning("%s is not installed and cannot be bootstrapped", self.manager_name)
            return False

        script = Path(tempfile.gettempdir()) / f"shellstrap-{self.manager_name}-install.ps1"
        download = download_text(cfg.bootstrap_url, script, timeout=self.network.download_timeout)
        if not download["ok"]:
            logger.warning(
                "bootstrap %s: download failed: %s", self.manager_name, download["error"],
            )
            return False

        cmd = command_for(str(script))
        if not cmd:
            return False

        logger.info("Bootstrapping %s from %s", self.manager_name, cfg.bootstrap_url)
        run = run_command(cmd, timeout=cfg.timeout)
        if not run["ok"]:
            logger.warning("bootstrap %s: %s", self.manager_name, run.get("error", "failed"))
            return False

        refresh_search_path(cfg.shim_dirs)
        available = self.manager_available()
        if not available:
            logger.warning("bootstrap %s: installer ran but %s is still not on PATH",
                           self.manager_name, self.manager_name)
        return available

    # ── Install ─────────────────────────────────────────────────

    def plan(self, tool: ToolDescriptor, *, upgrade: bool = False) -> list[Action]:
        """Actions that install (or upgrade) ``tool`` with the active manager."""
        actions: list[Action] = []
        package = tool.install.package_for(self.manager_name)
        if package:
            actions.append(Action(
                id=f"{tool.name}:package",
                name=f"{'upgrade' if upgrade else 'install'} {package}",
                adapter=self.manager_name,
                params={"package": package, "upgrade": upgrade},
                for_tool=tool.name,
            ))
        if upgrade and package:
            return actions
        for i, command in enumerate(tool.install.commands):
            actions.append(Action(
                id=f"{tool.name}:command:{i}",
                name=" ".join(command),
                adapter="command",
                params={"command": list(command)},
                for_tool=tool.name,
            ))
        return actions

    def install(self, tool: ToolDescriptor) -> InstallOutcome:
        """Install ``tool`` and verify. Never raises."""
        return self._run(tool, upgrade=False)

    def upgrade(self, tool: ToolDescriptor) -> InstallOutcome:
        """Upgrade (or reinstall) ``tool`` and verify. Never raises."""
        return self._run(tool, upgrade=True)

    def _run(self, tool: ToolDescriptor, *, upgrade: bool) -> InstallOutcome:
        verb = "upgrade" if upgrade else "install"
        try:
            return self._execute(tool, upgrade=upgrade)
        except Exception as e:
            logger.warning("%s %s: %s", verb, tool.name, e)
            return InstallOutcome(tool=tool.name, status="failed", detail=str(e))

    def _execute(self, tool: ToolDescriptor, *, upgrade: bool) -> InstallOutcome:
        verb = "upgrade" if upgrade else "install"
        actions = self.plan(tool, upgrade=upgrade)
        if not actions:
            detail = f"no {verb} method for {self.manager_name}"
            logger.warning("%s %s: %s", verb, tool.name, detail)
            return InstallOutcome(tool=tool.name, status="failed", detail=detail)

        if self.dry_run:
            return InstallOutcome(
                tool=tool.name,
                status="absent",
                detail="would run: " + "; ".join(a.name for a in actions),
                dry_run=True,
            )

        needs_manager = any(a.adapter == self.manager_name for a in actions)
        if needs_manager and not self.ensure_manager():
            detail = f"package manager '{self.manager_name}' is unavailable"
            logger.warning("%s %s: %s", verb, tool.name, detail)
            return InstallOutcome(tool=tool.name, status="failed", detail=detail)

        receipts: list[Receipt] = []
        for action in actions:
            receipt = self.registry.execute_action(action, timeout=tool.install.timeout)
            receipts.append(receipt)
            if receipt.failed:
                logger.warning("%s %s: %s", verb, tool.name, receipt.error)
                return InstallOutcome(
                    tool=tool.name,
                    status="failed",
                    detail=receipt.error or "install command failed",
                    receipts=receipts,
                )
            # Later commands may need what this one just put on PATH
            refresh_search_path(self.manager_config.shim_dirs)

        if tool.verify == "none":
            return InstallOutcome(
                tool=tool.name, status="installed", detail="verification disabled",
                receipts=receipts,
            )

        probe = probe_tool(tool)
        if probe.found:
            logger.info("%s %s ok → %s", verb, tool.name, probe.path)
            return InstallOutcome(
                tool=tool.name, status="installed", detail=probe.path or "",
                probe=probe, receipts=receipts,
            )

        logger.warning("%s %s: commands succeeded but the tool is still not found", verb, tool.name)
        return InstallOutcome(
            tool=tool.name,
            status="unverified",
            detail="install reported success, tool not found afterwards",
            probe=probe,
            receipts=receipts,
        )
