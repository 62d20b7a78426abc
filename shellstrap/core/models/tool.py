"""
Tool models — what to look for and how to install it.

A ToolDescriptor is defined once per tool (see ``core.data.catalog``) and
consumed by the orchestrator in a fixed sequence. Descriptors are frozen:
config overrides produce a new descriptor, never mutate the catalog.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ProbeKind = Literal["command", "paths", "process", "module", "font"]


class ProbeSpec(BaseModel):
    """How the prober decides whether a tool is usable.

    ``commands`` and ``paths`` are always tried (search path first, then
    well-known locations). ``kind`` adds a kind-specific check on top.
    """

    model_config = ConfigDict(frozen=True)

    kind: ProbeKind = "command"
    commands: tuple[str, ...] = ()
    paths: tuple[str, ...] = ()          # may contain %VAR%, $VAR and ~
    process_names: tuple[str, ...] = ()  # for kind="process"
    module: str | None = None            # for kind="module"
    font_glob: str | None = None         # for kind="font"


class InstallSpec(BaseModel):
    """How to install a missing tool.

    ``packages`` maps a package manager name to its package id. ``commands``
    are argv lists run in order after the package step (or instead of it,
    when the active manager has no package id for the tool).
    """

    model_config = ConfigDict(frozen=True)

    packages: dict[str, str] = Field(default_factory=dict)
    commands: tuple[tuple[str, ...], ...] = ()
    timeout: int = 600

    def package_for(self, manager: str) -> str | None:
        return self.packages.get(manager)


class ToolDescriptor(BaseModel):
    """One provisioning target."""

    model_config = ConfigDict(frozen=True)

    name: str
    label: str = ""
    probe: ProbeSpec = Field(default_factory=ProbeSpec)
    install: InstallSpec = Field(default_factory=InstallSpec)
    verify: Literal["probe", "none"] = "probe"

    @property
    def display_name(self) -> str:
        return self.label or self.name


class ProbeResult(BaseModel):
    """Outcome of a single probe."""

    tool: str
    found: bool = False
    path: str | None = None
    source: str | None = None  # command, path, process, module, font

    @classmethod
    def missing(cls, tool: str) -> ProbeResult:
        return cls(tool=tool, found=False)


ToolStatus = Literal["absent", "present", "installed", "unverified", "failed"]
