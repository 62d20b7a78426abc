"""
Settings patcher — non-destructive edits to JSON settings files.

Used for Windows Terminal and VS Code settings. The document is treated
as a generic JSON tree; required keys are merged in without touching
anything the user already set.

Commit protocol:
    1. nothing changed        → no write at all
    2. back up the original   → ``<name>.bak``
    3. serialize and re-parse → must round-trip to the same tree
    4. atomic write
    on any failure in 3–4     → restore the backup byte-for-byte
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from shellstrap.core.models.config import SettingAssignment
from shellstrap.core.persistence.files import (
    atomic_write_text,
    backup_file,
    read_text,
    restore_backup,
)

logger = logging.getLogger(__name__)

LoadStatus = Literal["missing", "ok", "malformed"]
PatchStatus = Literal["changed", "unchanged", "failed"]

Assignments = list[SettingAssignment] | Callable[[dict[str, Any]], list[SettingAssignment]]


# ── JSON with comments ──────────────────────────────────────────


def strip_jsonc(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments and trailing commas.

    String literals are copied verbatim, so ``"http://x"`` survives.
    """
    out: list[str] = []
    i, n = 0, len(text)
    in_string = False

    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
        elif ch == ",":
            j = i + 1
            while j < n and text[j] in " \t\r\n":
                j += 1
            if j < n and text[j] in "}]":
                i += 1  # trailing comma
            else:
                out.append(ch)
                i += 1
        else:
            out.append(ch)
            i += 1

    return "".join(out)


def load_document(path: Path) -> tuple[dict[str, Any], LoadStatus]:
    """Load a settings document, falling back to ``{}``.

    Absent, empty, non-object, and unparseable files all yield an empty
    document; the status says which case applied.
    """
    raw = read_text(path)
    if raw is None:
        return {}, "missing"
    if not raw.strip():
        return {}, "ok"

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        try:
            data = json.loads(strip_jsonc(raw))
        except json.JSONDecodeError as e:
            logger.warning("settings: %s is not valid JSON (%s) — starting empty", path, e)
            return {}, "malformed"

    if not isinstance(data, dict):
        logger.warning("settings: %s is not a JSON object — starting empty", path)
        return {}, "malformed"
    return data, "ok"


# ── Merge ───────────────────────────────────────────────────────


@dataclass
class MergeResult:
    document: dict[str, Any]
    changed: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)


def merge_preserving(
    document: dict[str, Any],
    assignments: list[SettingAssignment],
) -> MergeResult:
    """Apply ``assignments`` to a copy of ``document``.

    Missing intermediate objects are created; existing siblings are kept.
    Existing values are only replaced for ``overwrite=True`` assignments.
    A non-object value sitting where an intermediate object is needed is
    left alone and reported as a conflict.
    """
    doc = copy.deepcopy(document)
    result = MergeResult(document=doc)

    for assignment in assignments:
        parts = assignment.key.split(".") if assignment.nested else [assignment.key]
        node: dict[str, Any] = doc
        blocked = False

        for seg in parts[:-1]:
            child = node.get(seg)
            if child is None:
                child = node[seg] = {}
            elif not isinstance(child, dict):
                blocked = True
                break
            node = child

        if blocked:
            result.conflicts.append(assignment.key)
            continue

        leaf = parts[-1]
        if leaf in node:
            if not assignment.overwrite or node[leaf] == assignment.value:
                continue
        node[leaf] = copy.deepcopy(assignment.value)
        result.changed.append(assignment.key)

    return result


# ── Commit ──────────────────────────────────────────────────────


@dataclass
class PatchResult:
    path: Path
    status: PatchStatus
    changed: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)
    load_status: LoadStatus = "ok"
    backup: Path | None = None
    error: str = ""

    def to_dict(self) -> dict:
        return {
            "path": str(self.path),
            "status": self.status,
            "changed": self.changed,
            "conflicts": self.conflicts,
            "load_status": self.load_status,
            "backup": str(self.backup) if self.backup else None,
            "error": self.error,
        }


def _serialize(document: dict[str, Any]) -> str:
    return json.dumps(document, indent=4, ensure_ascii=False) + "\n"


def render_document(document: dict[str, Any]) -> str:
    """Serialize and prove the text parses back to the same tree."""
    text = _serialize(document)
    if json.loads(text) != document:
        raise ValueError("serialized settings do not round-trip")
    return text


def patch_settings(path: Path, assignments: Assignments) -> PatchResult:
    """Merge required settings into the JSON file at ``path``.

    ``assignments`` may be a callable receiving the loaded document, for
    values that depend on it (e.g. a profile GUID listed in the file).
    Never raises.
    """
    document, load_status = load_document(path)
    result = PatchResult(path=path, status="unchanged", load_status=load_status)

    try:
        wanted = assignments(document) if callable(assignments) else assignments
    except Exception as e:
        logger.warning("settings: cannot compute assignments for %s: %s", path, e)
        result.status = "failed"
        result.error = str(e)
        return result

    merged = merge_preserving(document, wanted)
    result.changed = merged.changed
    result.conflicts = merged.conflicts
    for key in merged.conflicts:
        logger.warning("settings: %s: '%s' blocked by a non-object value", path.name, key)

    if not merged.changed:
        return result

    try:
        backup = backup_file(path)
    except OSError as e:
        logger.warning("settings: cannot back up %s, not patching: %s", path, e)
        result.status = "failed"
        result.error = f"backup failed: {e}"
        return result
    result.backup = backup

    try:
        text = render_document(merged.document)
        atomic_write_text(path, text)
    except Exception as e:
        logger.warning("settings: writing %s failed, restoring backup: %s", path, e)
        restore_backup(path, backup)
        result.status = "failed"
        result.error = str(e)
        return result

    logger.info("settings: %s updated (%s)", path, ", ".join(merged.changed))
    result.status = "changed"
    return result
