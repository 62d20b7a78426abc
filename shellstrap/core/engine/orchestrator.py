"""
Orchestrator — the fixed bootstrap sequence.

Flow:
    profile sync → shell migration → tools (catalog order)
    → prompt theme → terminal settings → editor settings

Every step is wrapped on its own: whatever it raises becomes a failed
StepResult and one log line, and the next step still runs. Each tool
step is a two-state check: present → satisfied, otherwise one install
attempt followed by a re-probe. No retries, no rollback.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from shellstrap.core.config.paths import expand
from shellstrap.core.data.catalog import resolve_tools
from shellstrap.core.models.config import BootstrapConfig, SettingsTargetConfig
from shellstrap.core.models.report import BootstrapReport, ProgressState, StepResult
from shellstrap.core.models.tool import ToolDescriptor
from shellstrap.core.persistence.sentinel import Sentinel
from shellstrap.core.services.installer import PackageInstaller
from shellstrap.core.services.migration import migrate_shell
from shellstrap.core.services.probe import probe_tool
from shellstrap.core.services.profile_sync import ProfileSourceMissing, sync_profile
from shellstrap.core.services.progress import ProgressReporter
from shellstrap.core.services.settings_patch import Assignments, patch_settings
from shellstrap.core.services.settings_targets import (
    editor_assignments,
    target_path,
    terminal_assignments,
)
from shellstrap.core.services.theme import ensure_theme

logger = logging.getLogger(__name__)

StepFn = Callable[[], StepResult]


class Orchestrator:
    """Runs every bootstrap step once, in order, and reports."""

    def __init__(
        self,
        config: BootstrapConfig,
        installer: PackageInstaller,
        *,
        profile_source: Path | None = None,
        progress: ProgressReporter | None = None,
        state: ProgressState | None = None,
        sentinel: Sentinel | None = None,
    ):
        self.config = config
        self.installer = installer
        self.dry_run = installer.dry_run
        self.profile_source = profile_source
        self.tools: list[ToolDescriptor] = resolve_tools(config.tools, config.skip)
        self.state = state or (progress.state if progress else ProgressState())
        self.progress = progress or ProgressReporter(self.state, enabled=False)

        if sentinel is None:
            flag_dir = expand(config.migration.flag_dir) if config.migration.flag_dir else None
            sentinel = Sentinel(config.migration.flag_name, flag_dir)
        self.sentinel = sentinel

    # ── Plan ────────────────────────────────────────────────────

    def plan(self) -> list[tuple[str, str, StepFn]]:
        """(step id, label, callable) for every step, in execution order."""
        steps: list[tuple[str, str, StepFn]] = [
            ("profile-sync", "profile", self.sync_profile),
            ("shell-migration", "migration", self.migrate_shell),
        ]
        for tool in self.tools:
            steps.append((tool.name, tool.display_name, self._tool_step(tool)))
        terminal, editor = self.config.terminal, self.config.editor
        steps += [
            ("prompt-theme", "theme", self.ensure_theme),
            (
                "terminal-settings",
                "terminal",
                self._settings_step("terminal-settings", terminal, terminal_assignments(terminal)),
            ),
            (
                "editor-settings",
                "editor",
                self._settings_step("editor-settings", editor, editor_assignments(editor)),
            ),
        ]
        return steps

    # ── Run ─────────────────────────────────────────────────────

    def run(self) -> BootstrapReport:
        report = BootstrapReport(dry_run=self.dry_run)
        steps = self.plan()
        self.state.total_steps = len(steps)

        for step_id, label, fn in steps:
            self.progress.update(label)
            start = time.monotonic()
            try:
                result = fn()
            except Exception as e:
                logger.warning("%s: %s", step_id, e)
                result = StepResult(step=step_id, outcome="failed", detail=str(e))
            result.duration_ms = int((time.monotonic() - start) * 1000)
            report.add(result)
            self.state.advance()
            self.progress.update(label)

        self.progress.finish()
        report.finish()
        logger.info(
            "bootstrap finished: %s (%d steps, %d installed, %d failed)",
            report.status, report.total, self.state.installed_count, report.failed,
        )
        return report

    # ── Steps ───────────────────────────────────────────────────

    def sync_profile(self) -> StepResult:
        step = "profile-sync"
        cfg = self.config.profile
        if not cfg.enabled:
            return StepResult(step=step, outcome="skipped", detail="disabled")

        source = self.profile_source or expand(cfg.source)
        targets = [expand(t) for t in cfg.targets]

        if self.dry_run:
            return StepResult(step=step, outcome="skipped", detail=f"would sync from {source}")

        try:
            results = sync_profile(source, targets)
        except ProfileSourceMissing as e:
            return StepResult(step=step, outcome="skipped", detail=str(e))

        meta = {"source": str(source), "targets": [r.to_dict() for r in results]}
        failed = [r for r in results if r.status == "failed"]
        written = [r for r in results if r.status == "written"]
        if failed:
            detail = "; ".join(f"{r.target}: {r.error}" for r in failed)
            return StepResult(step=step, outcome="failed", detail=detail, metadata=meta)
        if written:
            detail = ", ".join(str(r.target) for r in written)
            return StepResult(step=step, outcome="changed", detail=detail, metadata=meta)
        return StepResult(step=step, outcome="unchanged", metadata=meta)

    def migrate_shell(self) -> StepResult:
        step = "shell-migration"
        cfg = self.config.migration
        if not cfg.enabled:
            return StepResult(step=step, outcome="skipped", detail="disabled")

        tool = next((t for t in self.tools if t.name == cfg.tool), None)
        if tool is None:
            return StepResult(step=step, outcome="skipped", detail=f"unknown tool '{cfg.tool}'")

        result = migrate_shell(tool, self.installer, self.sentinel)
        if result.status == "migrated":
            self.state.record_install()
        outcome = {
            "already-done": "skipped",
            "dry-run": "skipped",
            "migrated": "installed",
            "unverified": "unverified",
            "failed": "failed",
        }[result.status]
        return StepResult(
            step=step,
            outcome=outcome,
            detail=result.detail,
            metadata={"migration": result.status},
        )

    def _tool_step(self, tool: ToolDescriptor) -> StepFn:
        def step() -> StepResult:
            probe = probe_tool(tool)
            if probe.found:
                return StepResult(
                    step=tool.name,
                    outcome="satisfied",
                    detail=probe.path or "",
                    metadata={"source": probe.source},
                )

            outcome = self.installer.install(tool)
            if outcome.dry_run:
                return StepResult(step=tool.name, outcome="skipped", detail=outcome.detail)
            if outcome.status == "installed":
                self.state.record_install()
                return StepResult(step=tool.name, outcome="installed", detail=outcome.detail)
            if outcome.status == "unverified":
                return StepResult(step=tool.name, outcome="unverified", detail=outcome.detail)
            return StepResult(step=tool.name, outcome="failed", detail=outcome.detail)

        return step

    def ensure_theme(self) -> StepResult:
        step = "prompt-theme"
        if not self.config.theme.enabled:
            return StepResult(step=step, outcome="skipped", detail="disabled")
        if self.dry_run:
            return StepResult(step=step, outcome="skipped", detail="dry run")

        result = ensure_theme(self.config.theme, self.config.network)
        if result["status"] == "present":
            return StepResult(step=step, outcome="unchanged", detail=result["path"])
        if result["status"] == "downloaded":
            return StepResult(step=step, outcome="changed", detail=result["path"])
        # Network is best effort
        return StepResult(step=step, outcome="skipped", detail=f"download failed: {result['error']}")

    def _settings_step(
        self, name: str, cfg: SettingsTargetConfig, assignments: Assignments,
    ) -> StepFn:
        def step() -> StepResult:
            path, reason = target_path(cfg)
            if path is None:
                return StepResult(step=name, outcome="skipped", detail=reason)
            if self.dry_run:
                return StepResult(step=name, outcome="skipped", detail=f"would patch {path}")

            result = patch_settings(path, assignments)
            outcome = {"changed": "changed", "unchanged": "unchanged", "failed": "failed"}[result.status]
            detail = result.error or ", ".join(result.changed)
            return StepResult(step=name, outcome=outcome, detail=detail, metadata=result.to_dict())

        return step
