"""
Domain models — Pydantic types for shellstrap.

All models are re-exported here for convenient access:

    from shellstrap.core.models import ToolDescriptor, BootstrapConfig, StepResult
"""

from shellstrap.core.models.action import Action, Receipt
from shellstrap.core.models.config import (
    BootstrapConfig,
    MigrationConfig,
    NetworkConfig,
    PackageManagerConfig,
    ProfileConfig,
    SettingAssignment,
    EditorSettingsConfig,
    SettingsTargetConfig,
    TerminalSettingsConfig,
    ThemeConfig,
)
from shellstrap.core.models.report import (
    BootstrapReport,
    ProgressState,
    StepResult,
)
from shellstrap.core.models.tool import (
    InstallSpec,
    ProbeResult,
    ProbeSpec,
    ToolDescriptor,
)

__all__ = [
    # action.py
    "Action",
    # config.py
    "BootstrapConfig",
    "EditorSettingsConfig",
    # report.py
    "BootstrapReport",
    # tool.py
    "InstallSpec",
    "MigrationConfig",
    "NetworkConfig",
    "PackageManagerConfig",
    "ProbeResult",
    "ProbeSpec",
    "ProfileConfig",
    "ProgressState",
    "Receipt",
    "SettingAssignment",
    "SettingsTargetConfig",
    "TerminalSettingsConfig",
    "StepResult",
    "ThemeConfig",
    "ToolDescriptor",
]
