"""
winget adapter — the Windows Package Manager.

Ships with App Installer; there is no script bootstrap for it.
"""

from __future__ import annotations

from shellstrap.adapters.package_managers.base import PackageManagerAdapter

_COMMON = [
    "--exact",
    "--silent",
    "--accept-package-agreements",
    "--accept-source-agreements",
]


class WingetAdapter(PackageManagerAdapter):
    executable = "winget"

    @property
    def name(self) -> str:
        return "winget"

    def install_args(self, package: str) -> list[str]:
        return ["install", "--id", package, *_COMMON]

    def upgrade_args(self, package: str) -> list[str]:
        return ["upgrade", "--id", package, *_COMMON]
