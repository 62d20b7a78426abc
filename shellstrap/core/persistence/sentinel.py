"""
Sentinel files — markers whose existence is the whole state.

The body is a human-readable timestamp for whoever finds the file; it is
never parsed back.
"""

from __future__ import annotations

import logging
import tempfile
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


class Sentinel:
    """A boolean flag stored as the presence of a marker file."""

    def __init__(self, name: str, directory: Path | None = None):
        self.path = (directory or Path(tempfile.gettempdir())) / name

    def is_set(self) -> bool:
        try:
            return self.path.exists()
        except OSError:
            return False

    def set(self, note: str = "") -> None:
        """Create the marker. Idempotent; an existing marker is left as is."""
        if self.is_set():
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        body = f"{note} {stamp}".strip() + "\n"
        self.path.write_text(body, encoding="utf-8")
        logger.info("Sentinel set: %s", self.path)

    def __repr__(self) -> str:
        return f"<Sentinel path={str(self.path)!r} set={self.is_set()}>"
