"""
Command adapter — run an argv command with its output suppressed.

``run_command`` is the single place where install subprocesses are
started. The child's stdout/stderr are captured rather than inherited,
so shell startup output stays clean; the tail is kept for diagnostics.
"""

from __future__ import annotations

import logging
import subprocess
import time
from typing import Any

from shellstrap.adapters.base import Adapter, ExecutionContext
from shellstrap.core.models.action import Receipt
from shellstrap.core.services.probe import find_on_path

logger = logging.getLogger(__name__)

_TAIL = 2000


def run_command(cmd: list[str], *, timeout: int = 600) -> dict[str, Any]:
    """Run ``cmd`` with captured output.

    The executable is resolved through the current PATH first, so tools
    installed earlier in the same run (after a PATH refresh) are found.

    Returns:
        ``{"ok": True, "stdout": "...", "elapsed_ms": N}`` on success,
        ``{"ok": False, "error": "...", ...}`` on failure.
    """
    if not cmd:
        return {"ok": False, "error": "Empty command"}

    resolved = find_on_path(cmd[0])
    if resolved is None:
        return {"ok": False, "error": f"Executable not found: {cmd[0]}", "missing": True}

    argv = [resolved, *cmd[1:]]
    logger.debug("Executing: %s", " ".join(cmd))
    start = time.monotonic()
    try:
        result = subprocess.run(
            argv,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        return {"ok": False, "error": f"Command timed out ({timeout}s)"}
    except OSError as e:
        return {"ok": False, "error": str(e)}

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = result.stdout[-_TAIL:] if result.stdout else ""

    if result.returncode == 0:
        return {"ok": True, "stdout": stdout, "elapsed_ms": elapsed_ms}

    return {
        "ok": False,
        "error": f"Command failed (exit {result.returncode})",
        "returncode": result.returncode,
        "stderr": result.stderr[-_TAIL:] if result.stderr else "",
        "stdout": stdout,
        "elapsed_ms": elapsed_ms,
    }


def receipt_from_run(adapter: str, action_id: str, run: dict[str, Any], **meta: Any) -> Receipt:
    """Convert a ``run_command`` result dict into a Receipt."""
    if run.get("ok"):
        return Receipt.success(
            adapter=adapter,
            action_id=action_id,
            output=run.get("stdout", "").strip(),
            duration_ms=run.get("elapsed_ms", 0),
            metadata=meta,
        )
    detail = run.get("stderr", "").strip().splitlines()
    error = run.get("error", "unknown error")
    if detail:
        error = f"{error}: {detail[-1]}"
    return Receipt.failure(
        adapter=adapter,
        action_id=action_id,
        error=error,
        duration_ms=run.get("elapsed_ms", 0),
        metadata={**meta, "returncode": run.get("returncode")},
    )


class CommandAdapter(Adapter):
    """Run an explicit argv command.

    Action params:
        command (list[str]): argv to execute.
    """

    @property
    def name(self) -> str:
        return "command"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        command = context.action.params.get("command")
        if not command or not isinstance(command, (list, tuple)):
            return False, "Missing required param: 'command' (argv list)"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        command = [str(part) for part in context.action.params["command"]]
        try:
            run = run_command(command, timeout=context.timeout)
        except Exception as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Command execution error: {e}",
                metadata={"command": command},
            )
        return receipt_from_run(self.name, context.action.id, run, command=command)
