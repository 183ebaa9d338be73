# model.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Union


@dataclass(frozen=True)
class CommandOptions:
    """Per-command switches understood by the executor."""
    dryrun: bool = False        # append --dry-run when the run is a dry run
    enterprise: bool = False    # only runs for enterprise plugins
    ok_on_error: Tuple[Union[str, re.Pattern[str]], ...] = ()


@dataclass(frozen=True)
class Command:
    """
    A single external command: program + args + options.

    An empty program is a placeholder that the executor skips.
    """
    program: str
    args: Tuple[str, ...] = ()
    options: CommandOptions = field(default_factory=CommandOptions)

    def __post_init__(self) -> None:
        # callers pass lists; store a tuple so the record stays hashable
        object.__setattr__(self, "args", tuple(self.args))

    @classmethod
    def noop(cls) -> Command:
        return cls(program="")

    @property
    def is_noop(self) -> bool:
        return not self.program

    def __str__(self) -> str:
        return " ".join([self.program, *self.args]).strip()


@dataclass
class PluginManifest:
    """The parts of plugin.json the release task cares about."""
    id: str
    type: str
    name: str
    version: str
    enterprise: bool = False
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def build_hash(self) -> str | None:
        build = self.raw.get("info", {}).get("build") or {}
        return build.get("hash")

    @property
    def release_branch(self) -> str:
        return f"release-{self.version}"
