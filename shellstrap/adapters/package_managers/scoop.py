"""
Scoop adapter — user-scope installs, no elevation.

Scoop can be bootstrapped from its official installer script, which is
what makes it the default manager for a fresh machine.
"""

from __future__ import annotations

from shellstrap.adapters.package_managers.base import PackageManagerAdapter


class ScoopAdapter(PackageManagerAdapter):
    executable = "scoop"

    @property
    def name(self) -> str:
        return "scoop"

    def install_args(self, package: str) -> list[str]:
        return ["install", package]

    def upgrade_args(self, package: str) -> list[str]:
        return ["update", package]

    def bootstrap_command(self, script: str) -> list[str] | None:
        # Windows PowerShell is always present; pwsh may not be yet
        return [
            "powershell",
            "-NoLogo",
            "-NoProfile",
            "-NonInteractive",
            "-ExecutionPolicy",
            "Bypass",
            "-File",
            script,
        ]
