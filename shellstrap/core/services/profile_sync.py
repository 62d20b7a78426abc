"""
Profile synchronizer — one profile script, every shell runtime.

The active profile is read once and copied to the canonical profile path
of each sibling runtime (Windows PowerShell, PowerShell 7, the VS Code
host). A sibling is only written when it is missing or its content
differs, so a converged machine sees no writes at all.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from shellstrap.core.persistence.files import atomic_write_bytes, content_hash, read_bytes

logger = logging.getLogger(__name__)

SyncStatus = Literal["written", "unchanged", "failed"]


@dataclass
class SyncResult:
    """Outcome for one sibling profile path."""

    target: Path
    status: SyncStatus
    error: str = ""

    def to_dict(self) -> dict:
        d = {"target": str(self.target), "status": self.status}
        if self.error:
            d["error"] = self.error
        return d


class ProfileSourceMissing(Exception):
    """The active profile to copy from does not exist or cannot be read."""


def _same_file(a: Path, b: Path) -> bool:
    try:
        if a.exists() and b.exists():
            return os.path.samefile(a, b)
    except OSError:
        pass
    return os.path.normcase(os.path.abspath(a)) == os.path.normcase(os.path.abspath(b))


def sync_profile(source: Path, targets: list[Path]) -> list[SyncResult]:
    """Copy ``source`` byte for byte into every target that differs.

    Bytes are compared as-is, so an encoding marker on the source (the
    UTF-8 BOM Windows PowerShell needs) is carried to every sibling.

    The source itself is skipped when it appears in ``targets``. Each
    target is handled independently: a failure on one does not stop the
    others.

    Raises:
        ProfileSourceMissing: If ``source`` cannot be read.
    """
    content = read_bytes(source)
    if content is None:
        raise ProfileSourceMissing(f"Profile not found: {source}")

    wanted = content_hash(content)
    results: list[SyncResult] = []

    for target in targets:
        if _same_file(source, target):
            continue

        existing = read_bytes(target)
        if existing is not None and content_hash(existing) == wanted:
            results.append(SyncResult(target=target, status="unchanged"))
            continue

        try:
            atomic_write_bytes(target, content)
        except OSError as e:
            logger.warning("profile sync: cannot write %s: %s", target, e)
            results.append(SyncResult(target=target, status="failed", error=str(e)))
            continue

        logger.info("profile sync: %s %s", "updated" if existing is not None else "created", target)
        results.append(SyncResult(target=target, status="written"))

    return results
