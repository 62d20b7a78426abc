"""
One-time shell runtime migration.

Upgrades (or installs) the shell runtime once and records that in a
sentinel file, so later shell starts never prompt for the reinstall
again. The flag is only set after a verified upgrade; a failed attempt
is retried on the next run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from shellstrap.core.models.tool import ToolDescriptor
from shellstrap.core.persistence.sentinel import Sentinel
from shellstrap.core.services.installer import PackageInstaller
from shellstrap.core.services.probe import probe_tool

logger = logging.getLogger(__name__)

MigrationStatus = Literal["already-done", "migrated", "unverified", "failed", "dry-run"]


@dataclass
class MigrationResult:
    status: MigrationStatus
    detail: str = ""


def migrate_shell(
    tool: ToolDescriptor,
    installer: PackageInstaller,
    sentinel: Sentinel,
) -> MigrationResult:
    """Run the shell migration unless the sentinel says it already ran."""
    if sentinel.is_set():
        logger.debug("migration: %s already migrated (%s)", tool.name, sentinel.path)
        return MigrationResult(status="already-done", detail=str(sentinel.path))

    if installer.dry_run:
        return MigrationResult(status="dry-run", detail=f"would upgrade {tool.name}")

    present = probe_tool(tool).found
    outcome = installer.upgrade(tool) if present else installer.install(tool)

    if outcome.status == "installed":
        sentinel.set(note=f"{tool.name} migrated")
        return MigrationResult(status="migrated", detail=outcome.detail)
    if outcome.status == "unverified":
        return MigrationResult(status="unverified", detail=outcome.detail)
    return MigrationResult(status="failed", detail=outcome.detail)
