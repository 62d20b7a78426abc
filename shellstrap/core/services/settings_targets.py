"""
Required settings for the terminal emulator and the editor.

Windows Terminal: PowerShell 7 as the default profile, the Nerd Font as
the default face. VS Code: PowerShell as the integrated terminal profile,
the Nerd Font for the terminal. VS Code keys are flat dotted strings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from shellstrap.core.config.paths import expand, has_unresolved
from shellstrap.core.models.config import (
    PWSH_TERMINAL_GUID,
    SettingAssignment,
    SettingsTargetConfig,
)

_PWSH_SOURCE = "Windows.Terminal.PowershellCore"


def target_path(cfg: SettingsTargetConfig) -> tuple[Path | None, str]:
    """The settings file to patch, or None and why it is left alone.

    A target is left alone when it is disabled, when its path still holds
    an unset environment variable, or when the application's settings
    directory does not exist (the application is not installed).
    """
    if not cfg.enabled:
        return None, "disabled"
    if has_unresolved(cfg.path):
        return None, f"unresolved path {cfg.path}"
    path = expand(cfg.path)
    if not path.parent.is_dir():
        return None, f"application not installed ({path.parent})"
    return path, ""


def terminal_profile_guid(document: dict[str, Any]) -> str:
    """GUID of the PowerShell 7 profile listed in a Terminal settings doc."""
    profiles = document.get("profiles")
    if isinstance(profiles, dict):
        entries = profiles.get("list")
    else:
        entries = profiles

    if isinstance(entries, list):
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("guid"):
                continue
            if entry.get("source") == _PWSH_SOURCE or entry.get("name") == "PowerShell":
                return str(entry["guid"])
    return PWSH_TERMINAL_GUID


def terminal_assignments(cfg: SettingsTargetConfig):
    """Assignment builder for Windows Terminal (needs the loaded document)."""

    def build(document: dict[str, Any]) -> list[SettingAssignment]:
        return [
            SettingAssignment(
                key="defaultProfile",
                value=terminal_profile_guid(document),
                overwrite=True,
            ),
            SettingAssignment(key="profiles.defaults.font.face", value=cfg.font_face),
            *cfg.assignments,
        ]

    return build


def editor_assignments(cfg: SettingsTargetConfig) -> list[SettingAssignment]:
    """Assignments for VS Code user settings."""
    return [
        SettingAssignment(
            key="terminal.integrated.defaultProfile.windows",
            value="PowerShell",
            nested=False,
            overwrite=True,
        ),
        SettingAssignment(
            key="terminal.integrated.fontFamily",
            value=cfg.font_face,
            nested=False,
        ),
        *cfg.assignments,
    ]
