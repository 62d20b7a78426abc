"""
File persistence helpers — atomic writes and pre-mutation backups.

Writes go to a temp file in the target directory and are then renamed
over the target, so a crash mid-write never leaves a truncated profile
or settings file behind.
"""

from __future__ import annotations

import hashlib
import logging
import os
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"


def read_text(path: Path) -> str | None:
    """Read a UTF-8 text file, or None if it is missing or unreadable."""
    try:
        return path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s", path, e)
        return None


def read_bytes(path: Path) -> bytes | None:
    """Raw file content, or None if it is missing or unreadable."""
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning("Cannot read %s: %s", path, e)
        return None


def content_hash(data: bytes) -> str:
    """Stable digest used to compare file contents."""
    return hashlib.sha256(data).hexdigest()


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write ``data`` to ``path`` atomically.

    Creates the parent directory when needed. Raises on failure, leaving
    any existing file untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    tmp = Path(tmp_path)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.replace(tmp, path)
        logger.debug("Wrote %s (%d bytes)", path, len(data))
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def atomic_write_text(path: Path, content: str) -> None:
    """UTF-8 (no BOM) variant of :func:`atomic_write_bytes`; newlines are kept as given."""
    atomic_write_bytes(path, content.encode("utf-8"))


def backup_path(path: Path) -> Path:
    return path.with_name(path.name + BACKUP_SUFFIX)


def backup_file(path: Path) -> Path | None:
    """Copy ``path`` to ``<path>.bak`` (preserving metadata).

    Returns:
        The backup path, or None when there was nothing to back up.
    """
    if not path.is_file():
        logger.debug("backup: %s does not exist, nothing to back up", path)
        return None
    dest = backup_path(path)
    shutil.copy2(path, dest)
    logger.info("Backed up %s → %s", path, dest)
    return dest


def restore_backup(path: Path, backup: Path | None) -> bool:
    """Put ``backup`` back in place of ``path``.

    With no backup (the file did not exist before), the partially written
    target is removed instead.
    """
    try:
        if backup is None:
            path.unlink(missing_ok=True)
            return True
        shutil.copy2(backup, path)
        logger.warning("Restored %s from %s", path, backup)
        return True
    except OSError as e:
        logger.error("Failed to restore %s from %s: %s", path, backup, e)
        return False
