"""
Package manager adapter base.

A package manager installs one package id per action. Subclasses only
describe their executable and argv; running, output suppression and
receipts are shared.
"""

from __future__ import annotations

import logging
from abc import abstractmethod

from shellstrap.adapters.base import Adapter, ExecutionContext
from shellstrap.adapters.shell.command import receipt_from_run, run_command
from shellstrap.core.models.action import Receipt
from shellstrap.core.services.probe import find_on_path

logger = logging.getLogger(__name__)


class PackageManagerAdapter(Adapter):
    """Install packages through an external package manager.

    Action params:
        package (str): Package id in this manager's namespace.
        upgrade (bool): Upgrade instead of install (default: False).
    """

    executable: str = ""

    def is_available(self) -> bool:
        return find_on_path(self.executable) is not None

    @abstractmethod
    def install_args(self, package: str) -> list[str]:
        """Arguments (after the executable) that install ``package``."""

    @abstractmethod
    def upgrade_args(self, package: str) -> list[str]:
        """Arguments (after the executable) that upgrade ``package``."""

    def bootstrap_command(self, script: str) -> list[str] | None:
        """argv that runs a downloaded bootstrap script, or None if unsupported."""
        return None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        package = context.action.params.get("package", "")
        if not package:
            return False, "Missing required param: 'package'"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        package = context.action.params["package"]
        upgrade = bool(context.action.params.get("upgrade", False))
        args = self.upgrade_args(package) if upgrade else self.install_args(package)
        cmd = [self.executable, *args]

        try:
            run = run_command(cmd, timeout=context.timeout)
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"{self.name} error: {e}",
                metadata={"package": package},
            )
        return receipt_from_run(
            self.name, context.action.id, run, package=package, upgrade=upgrade,
        )
