"""Package manager adapters, keyed by config name."""

from shellstrap.adapters.package_managers.base import PackageManagerAdapter
from shellstrap.adapters.package_managers.scoop import ScoopAdapter
from shellstrap.adapters.package_managers.winget import WingetAdapter

PACKAGE_MANAGERS: dict[str, type[PackageManagerAdapter]] = {
    "scoop": ScoopAdapter,
    "winget": WingetAdapter,
}

__all__ = [
    "PACKAGE_MANAGERS",
    "PackageManagerAdapter",
    "ScoopAdapter",
    "WingetAdapter",
]
