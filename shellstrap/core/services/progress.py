"""
Progress reporter — a single carriage-return-overwritten status line.

Reads the ProgressState the orchestrator advances; holds no counters of
its own.
"""

from __future__ import annotations

import click

from shellstrap.core.models.report import ProgressState

BAR_WIDTH = 30


def render_bar(state: ProgressState, label: str = "", width: int = BAR_WIDTH) -> str:
    """Render ``[#####-----] 3/10 label`` for the current state."""
    filled = int(round(state.fraction * width))
    filled = max(0, min(width, filled))
    bar = "#" * filled + "-" * (width - filled)
    line = f"[{bar}] {state.current_step}/{state.total_steps}"
    if label:
        line += f" {label}"
    return line


class ProgressReporter:
    """Draws the progress line on stderr (or nowhere, when disabled)."""

    def __init__(self, state: ProgressState, enabled: bool = True, width: int = BAR_WIDTH):
        self.state = state
        self.enabled = enabled
        self.width = width
        self._last_len = 0

    def update(self, label: str = "") -> None:
        if not self.enabled:
            return
        line = render_bar(self.state, label, self.width)
        pad = " " * max(0, self._last_len - len(line))
        self._last_len = len(line)
        click.echo("\r" + line + pad, nl=False, err=True)

    def finish(self) -> None:
        if not self.enabled or self._last_len == 0:
            return
        click.echo("\r" + " " * self._last_len + "\r", nl=False, err=True)
        self._last_len = 0
