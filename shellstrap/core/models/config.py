"""
BootstrapConfig — the root configuration model.

Loaded from ``shellstrap.yml`` by ``core.config.loader``. Every field has
a default, so a missing config file yields a fully usable configuration.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from shellstrap.core.models.tool import ToolDescriptor

# Windows Terminal's generated profile GUID for PowerShell 7
PWSH_TERMINAL_GUID = "{574e775e-4f2a-5b96-ac1e-a2962a402336}"

DEFAULT_FONT_FACE = "MesloLGM Nerd Font"


class SettingAssignment(BaseModel):
    """A required key/value in a settings document.

    ``key`` is a dotted path. With ``nested=True`` each segment is an
    object level; with ``nested=False`` the dotted string is a single flat
    key (VS Code style). ``overwrite=True`` replaces an existing value,
    otherwise the user's value always wins.
    """

    key: str
    value: Any = None
    nested: bool = True
    overwrite: bool = False


class PackageManagerConfig(BaseModel):
    """Which package manager installs tools, and how to bootstrap it."""

    name: Literal["scoop", "winget"] = "scoop"
    bootstrap: bool = True
    bootstrap_url: str = "https://get.scoop.sh"
    shim_dirs: list[str] = Field(default_factory=lambda: ["~/scoop/shims"])
    timeout: int = 600


class ProfileConfig(BaseModel):
    """The active profile and its sibling copies."""

    enabled: bool = True
    source: str = "~/Documents/PowerShell/Microsoft.PowerShell_profile.ps1"
    targets: list[str] = Field(
        default_factory=lambda: [
            "~/Documents/PowerShell/Microsoft.PowerShell_profile.ps1",
            "~/Documents/WindowsPowerShell/Microsoft.PowerShell_profile.ps1",
            "~/Documents/PowerShell/Microsoft.VSCode_profile.ps1",
        ]
    )


class SettingsTargetConfig(BaseModel):
    """A companion application's JSON settings file."""

    enabled: bool = True
    path: str
    font_face: str = DEFAULT_FONT_FACE
    assignments: list[SettingAssignment] = Field(default_factory=list)


class TerminalSettingsConfig(SettingsTargetConfig):
    """Windows Terminal ``settings.json`` (the packaged Store install)."""

    path: str = (
        "%LOCALAPPDATA%/Packages/Microsoft.WindowsTerminal_8wekyb3d8bbwe"
        "/LocalState/settings.json"
    )


class EditorSettingsConfig(SettingsTargetConfig):
    """VS Code user ``settings.json``."""

    path: str = "%APPDATA%/Code/User/settings.json"


class NetworkConfig(BaseModel):
    """Endpoints and timeouts for best-effort network calls."""

    ip_endpoints: list[str] = Field(
        default_factory=lambda: ["https://api.ipify.org", "https://ifconfig.me/ip"]
    )
    timeout: int = 5
    download_timeout: int = 10


class ThemeConfig(BaseModel):
    """Prompt theme asset fetched for the prompt theme engine."""

    enabled: bool = True
    name: str = "paradox"
    url: str = (
        "https://raw.githubusercontent.com/JanDeDobbeleer/oh-my-posh"
        "/main/themes/{name}.omp.json"
    )
    dest_dir: str = "~/.config/shellstrap/themes"


class MigrationConfig(BaseModel):
    """One-time shell runtime upgrade guarded by a sentinel file."""

    enabled: bool = True
    tool: str = "pwsh"
    flag_name: str = "shellstrap-shell-migration.flag"
    flag_dir: str | None = None  # default: system temp directory


class BootstrapConfig(BaseModel):
    """Root configuration model."""

    package_manager: PackageManagerConfig = Field(default_factory=PackageManagerConfig)
    tools: list[ToolDescriptor] = Field(default_factory=list)  # catalog overrides
    skip: list[str] = Field(default_factory=list)
    profile: ProfileConfig = Field(default_factory=ProfileConfig)
    terminal: TerminalSettingsConfig = Field(default_factory=TerminalSettingsConfig)
    editor: EditorSettingsConfig = Field(default_factory=EditorSettingsConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    theme: ThemeConfig = Field(default_factory=ThemeConfig)
    migration: MigrationConfig = Field(default_factory=MigrationConfig)
