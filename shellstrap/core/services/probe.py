"""
Environment prober — is a tool usable right now?

Read-only probes, in order: search-path lookup, well-known install paths,
then the kind-specific check (process list, PowerShell module dirs, font
dirs). The first hit wins. Probes never raise: permission errors and
missing directories simply mean "not found".
"""

from __future__ import annotations

import csv
import io
import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path

from shellstrap.core.config.paths import expand
from shellstrap.core.models.tool import ProbeResult, ToolDescriptor

logger = logging.getLogger(__name__)

_MODULE_ROOTS = (
    "~/Documents/PowerShell/Modules",
    "~/Documents/WindowsPowerShell/Modules",
    "%ProgramFiles%/PowerShell/Modules",
    "%ProgramFiles%/WindowsPowerShell/Modules",
    "%SystemRoot%/System32/WindowsPowerShell/v1.0/Modules",
)

_FONT_DIRS = (
    "%LOCALAPPDATA%/Microsoft/Windows/Fonts",
    "%WINDIR%/Fonts",
    "~/.local/share/fonts",
)


def probe_tool(tool: ToolDescriptor) -> ProbeResult:
    """Check whether ``tool`` is currently usable.

    Returns:
        ProbeResult with the first resolved path, or ``found=False``.
    """
    spec = tool.probe

    for name in spec.commands:
        hit = find_on_path(name)
        if hit:
            return ProbeResult(tool=tool.name, found=True, path=hit, source="command")

    for raw in spec.paths:
        hit = _existing(expand(raw))
        if hit:
            return ProbeResult(tool=tool.name, found=True, path=hit, source="path")

    hit = None
    if spec.kind == "process":
        hit = find_process(spec.process_names)
    elif spec.kind == "module" and spec.module:
        hit = find_module(spec.module)
    elif spec.kind == "font" and spec.font_glob:
        hit = find_font(spec.font_glob)

    if hit:
        return ProbeResult(tool=tool.name, found=True, path=hit, source=spec.kind)

    logger.debug("Probe: %s not found", tool.name)
    return ProbeResult.missing(tool.name)


def find_on_path(name: str) -> str | None:
    """Resolve an executable on the current search path."""
    try:
        return shutil.which(name)
    except OSError:
        return None


def _existing(path: Path) -> str | None:
    try:
        if path.exists():
            return str(path)
    except OSError:
        pass
    return None


def _safe_iterdir_glob(directory: Path, pattern: str) -> list[Path]:
    try:
        if not directory.is_dir():
            return []
        return sorted(directory.glob(pattern))
    except OSError:
        return []


# ── Kind-specific checks ────────────────────────────────────────


def module_roots() -> list[Path]:
    """PowerShell module directories: PSModulePath first, then defaults."""
    roots: list[Path] = []
    for entry in os.environ.get("PSModulePath", "").split(os.pathsep):
        if entry.strip():
            roots.append(expand(entry.strip()))
    for raw in _MODULE_ROOTS:
        path = expand(raw)
        if path not in roots:
            roots.append(path)
    return roots


def find_module(module: str) -> str | None:
    """Find an installed PowerShell module directory."""
    for root in module_roots():
        hit = _existing(root / module)
        if hit:
            return hit
    return None


def font_dirs() -> list[Path]:
    return [expand(raw) for raw in _FONT_DIRS]


def find_font(pattern: str) -> str | None:
    """Find a font file matching ``pattern`` in the user/system font dirs."""
    for directory in font_dirs():
        matches = _safe_iterdir_glob(directory, pattern)
        if matches:
            return str(matches[0])
    return None


def running_processes() -> set[str]:
    """Lower-cased image names of running processes (empty on failure)."""
    if sys.platform == "win32":
        cmd = ["tasklist", "/FO", "CSV", "/NH"]
    else:
        cmd = ["ps", "-A", "-o", "comm="]

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=10)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("Process scan failed: %s", e)
        return set()

    if result.returncode != 0:
        return set()

    names: set[str] = set()
    if sys.platform == "win32":
        for row in csv.reader(io.StringIO(result.stdout)):
            if row:
                names.add(row[0].strip().lower())
    else:
        for line in result.stdout.splitlines():
            line = line.strip()
            if line:
                names.add(Path(line).name.lower())
    return names


def find_process(names: tuple[str, ...]) -> str | None:
    """Return the first of ``names`` that is currently running."""
    if not names:
        return None
    running = running_processes()
    for name in names:
        candidates = {name.lower(), f"{name.lower()}.exe"}
        hit = candidates & running
        if hit:
            return sorted(hit)[0]
    return None
