"""
In-process search path refresh.

Installers update the persistent system/user PATH, but the running
process keeps the PATH it started with. After an install we re-read the
persistent values (registry on Windows) and merge them into
``os.environ["PATH"]`` so newly installed tools resolve without a restart.
"""

from __future__ import annotations

import logging
import os
import sys

from shellstrap.core.config.paths import expand

logger = logging.getLogger(__name__)

_MACHINE_KEY = r"SYSTEM\CurrentControlSet\Control\Session Manager\Environment"
_USER_KEY = "Environment"


def _registry_path_entries() -> list[str]:
    """Machine then user PATH entries from the registry (Windows only)."""
    if sys.platform != "win32":
        return []

    import winreg

    entries: list[str] = []
    for hive, key in (
        (winreg.HKEY_LOCAL_MACHINE, _MACHINE_KEY),
        (winreg.HKEY_CURRENT_USER, _USER_KEY),
    ):
        try:
            with winreg.OpenKey(hive, key) as handle:
                value, _kind = winreg.QueryValueEx(handle, "Path")
        except OSError:
            continue
        for part in str(value).split(os.pathsep):
            part = part.strip()
            if part:
                entries.append(os.path.expandvars(part))
    return entries


def _norm(entry: str) -> str:
    return os.path.normcase(os.path.normpath(entry)).rstrip("\\/")


def merge_path(current: str, fresh: list[str], prepend: list[str] | None = None) -> str:
    """Merge PATH strings, keeping the first occurrence of each entry.

    Order: ``prepend`` entries, the current entries, then fresh entries
    that were not already present.
    """
    seen: set[str] = set()
    merged: list[str] = []
    for entry in [*(prepend or []), *current.split(os.pathsep), *fresh]:
        if not entry:
            continue
        key = _norm(entry)
        if key in seen:
            continue
        seen.add(key)
        merged.append(entry)
    return os.pathsep.join(merged)


def refresh_search_path(extra_dirs: list[str] | None = None) -> list[str]:
    """Update ``os.environ["PATH"]`` from the persistent environment.

    Args:
        extra_dirs: Well-known directories (e.g. package manager shims)
            to put in front when they exist.

    Returns:
        Entries that were not on PATH before.
    """
    current = os.environ.get("PATH", "")
    before = {_norm(e) for e in current.split(os.pathsep) if e}

    prepend = []
    for raw in extra_dirs or []:
        path = expand(raw)
        try:
            if path.is_dir():
                prepend.append(str(path))
        except OSError:
            continue

    merged = merge_path(current, _registry_path_entries(), prepend)
    os.environ["PATH"] = merged

    added = [e for e in merged.split(os.pathsep) if e and _norm(e) not in before]
    if added:
        logger.info("PATH refreshed, %d new entries: %s", len(added), ", ".join(added))
    return added
