"""
Shared test fixtures and configuration.

Every test runs against a throwaway home directory: HOME/USERPROFILE,
APPDATA, LOCALAPPDATA and friends point into ``tmp_path`` and PATH holds
only a private ``bin`` dir, so probes never see the real machine.
"""

import stat
import sys
from pathlib import Path

import pytest

from shellstrap.core.models.config import (
    BootstrapConfig,
    ProfileConfig,
    EditorSettingsConfig,
    TerminalSettingsConfig,
    ThemeConfig,
    MigrationConfig,
)
from shellstrap.core.data.catalog import TOOL_RECIPES
from shellstrap.core.models.tool import ToolDescriptor


def make_executable(directory: Path, name: str) -> Path:
    """Create a do-nothing executable that ``shutil.which`` will resolve."""
    directory.mkdir(parents=True, exist_ok=True)
    if sys.platform == "win32":
        path = directory / f"{name}.cmd"
        path.write_text("@exit /b 0\n")
    else:
        path = directory / name
        path.write_text("#!/bin/sh\nexit 0\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def fake_home(tmp_path: Path, monkeypatch) -> Path:
    """Isolated home directory with Windows-style env vars set."""
    home = tmp_path / "home"
    home.mkdir()
    for var, sub in (
        ("APPDATA", "AppData/Roaming"),
        ("LOCALAPPDATA", "AppData/Local"),
        ("ProgramFiles", "ProgramFiles"),
        ("SystemRoot", "Windows"),
        ("WINDIR", "Windows"),
    ):
        path = home / sub
        path.mkdir(parents=True, exist_ok=True)
        monkeypatch.setenv(var, str(path))
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    monkeypatch.setenv("PSModulePath", "")
    for var in ("NVM_HOME", "NVM_SYMLINK"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def bin_dir(tmp_path: Path, fake_home: Path, monkeypatch) -> Path:
    """A private directory that is the whole PATH."""
    path = tmp_path / "bin"
    path.mkdir()
    monkeypatch.setenv("PATH", str(path))
    return path


@pytest.fixture
def executable(bin_dir: Path):
    """Factory: ``executable("git")`` puts a fake ``git`` on PATH."""

    def _make(name: str, directory: Path | None = None) -> Path:
        return make_executable(directory or bin_dir, name)

    return _make


@pytest.fixture
def tool() -> ToolDescriptor:
    """A command-probed tool installable through scoop or a command."""
    return ToolDescriptor.model_validate({
        "name": "widget",
        "probe": {"commands": ["widget"]},
        "install": {"packages": {"scoop": "widget", "winget": "Acme.Widget"}},
    })


@pytest.fixture
def bootstrap_config(tmp_path: Path, fake_home: Path) -> BootstrapConfig:
    """Config with every path inside tmp_path and the catalog skipped."""
    profile_dir = fake_home / "Documents"
    terminal_dir = tmp_path / "terminal"
    editor_dir = tmp_path / "editor"
    terminal_dir.mkdir()
    editor_dir.mkdir()
    return BootstrapConfig(
        skip=list(TOOL_RECIPES),
        profile=ProfileConfig(
            source=str(profile_dir / "PowerShell" / "profile.ps1"),
            targets=[
                str(profile_dir / "PowerShell" / "profile.ps1"),
                str(profile_dir / "WindowsPowerShell" / "profile.ps1"),
            ],
        ),
        terminal=TerminalSettingsConfig(path=str(terminal_dir / "settings.json")),
        editor=EditorSettingsConfig(path=str(editor_dir / "settings.json")),
        theme=ThemeConfig(enabled=False),
        migration=MigrationConfig(flag_dir=str(tmp_path / "flags")),
    )


@pytest.fixture(autouse=True)
def _no_registry_path(monkeypatch):
    """Never read the real registry PATH during tests."""
    monkeypatch.setattr(
        "shellstrap.core.services.search_path._registry_path_entries", lambda: [],
    )
