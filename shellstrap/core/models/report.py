"""
Run report models — per-step outcomes and progress counters.

The orchestrator appends one StepResult per step and hands the
BootstrapReport back to the caller, which renders it once at the end
instead of interleaving console writes with the steps.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

StepOutcome = Literal[
    "satisfied",   # already present, nothing to do
    "installed",   # installed and verified by the prober
    "unverified",  # install commands succeeded, prober still negative
    "changed",     # files written (profile sync, settings)
    "unchanged",   # files already converged
    "skipped",     # not applicable, dry run, or flag already set
    "failed",
]

_OK_OUTCOMES = frozenset({"satisfied", "installed", "changed", "unchanged", "skipped"})


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class StepResult(BaseModel):
    """Outcome of one orchestrator step."""

    step: str
    outcome: StepOutcome
    detail: str = ""
    duration_ms: int = 0
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.outcome in _OK_OUTCOMES


class BootstrapReport(BaseModel):
    """Ordered results of a full bootstrap run."""

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = ""
    dry_run: bool = False
    steps: list[StepResult] = Field(default_factory=list)

    def add(self, result: StepResult) -> None:
        self.steps.append(result)

    def get(self, step: str) -> StepResult | None:
        for result in self.steps:
            if result.step == step:
                return result
        return None

    def count(self, outcome: str) -> int:
        return sum(1 for r in self.steps if r.outcome == outcome)

    @property
    def total(self) -> int:
        return len(self.steps)

    @property
    def failed(self) -> int:
        return self.count("failed")

    @property
    def status(self) -> str:
        bad = sum(1 for r in self.steps if not r.ok)
        if bad == 0:
            return "ok"
        if bad < self.total:
            return "partial"
        return "failed"

    def finish(self) -> None:
        self.ended_at = _now_iso()

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "dry_run": self.dry_run,
            "started_at": self.started_at,
            "ended_at": self.ended_at,
            "total": self.total,
            "failed": self.failed,
            "installed": self.count("installed"),
            "unverified": self.count("unverified"),
            "steps": [r.model_dump(mode="json") for r in self.steps],
        }


@dataclass
class ProgressState:
    """Counters shared between the orchestrator and the progress reporter.

    Only moves forward: ``advance`` and ``record_install`` never decrement.
    """

    total_steps: int = 0
    current_step: int = 0
    installed_count: int = 0

    def advance(self) -> None:
        if self.current_step < self.total_steps:
            self.current_step += 1

    def record_install(self) -> None:
        self.installed_count += 1

    @property
    def fraction(self) -> float:
        if self.total_steps <= 0:
            return 1.0
        return self.current_step / self.total_steps
