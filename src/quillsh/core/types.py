"""Shared core dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Operator = Literal["&&", "||", ";", "|"]
RedirectType = Literal[">", ">>"]


@dataclass(frozen=True)
class CommandSpec:
    """Static metadata of one registered command."""

    name: str
    description: str
    usage: str
    is_easter_egg: bool = False


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command execution."""

    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    new_cwd: str | None = None

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class CompoundSegment:
    """One sub-command of a compound line and the operator that follows it."""

    command_text: str
    operator_after: Operator | None = None


@dataclass(frozen=True)
class ParsedInvocation:
    """A segment split into command name, arguments and redirection."""

    name: str
    args: list[str] = field(default_factory=list)
    redirect_type: RedirectType | None = None
    redirect_file: str | None = None
