"""
Path expansion for config values.

Config paths are written the Windows way (``%APPDATA%/Code/...``) but may
also use ``$VAR`` and ``~``. Unknown variables are left in place, so the
resulting path simply does not exist.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

_PERCENT_VAR = re.compile(r"%([A-Za-z_][A-Za-z0-9_()]*)%")


def expand(raw: str) -> Path:
    """Expand ``%VAR%``, ``$VAR`` / ``${VAR}`` and ``~`` in a path string."""

    def _sub(match: re.Match[str]) -> str:
        return os.environ.get(match.group(1), match.group(0))

    text = _PERCENT_VAR.sub(_sub, raw)
    text = os.path.expandvars(text)
    return Path(os.path.expanduser(text))


def has_unresolved(raw: str) -> bool:
    """Whether ``raw`` still references an unset ``%VAR%`` after expansion."""
    return bool(_PERCENT_VAR.search(str(expand(raw))))
