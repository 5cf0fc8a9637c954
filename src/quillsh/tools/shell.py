"""Shell tools bound to one session."""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..core.executor import ShellSession, format_result
from .registry import ToolRegistry


class ShellInput(BaseModel):
    command: str = Field(..., description="Shell command line, e.g. \"grep -n TODO src/app.py | head -5\"")


class CommandNameInput(BaseModel):
    name: str = Field(..., description="Command name")


class EmptyInput(BaseModel):
    pass


def register_shell_tools(registry: ToolRegistry, session: ShellSession) -> None:
    """Register the shell tools for ``session``."""

    register = registry.register

    @register(
        name="shell.run",
        short_description="Run a shell command line",
        detail="Supports pipes (|), &&, ||, ; and > / >> redirection. Returns stdout, stderr and non-zero exit codes.",
        model=ShellInput,
    )
    def shell_run(params: ShellInput) -> str:
        return session.execute(params.command)

    @register(name="shell.commands", short_description="List available shell commands", model=EmptyInput)
    def shell_commands(_params: EmptyInput) -> str:
        return session.execute("help")

    @register(name="shell.describe", short_description="Show usage of one shell command", model=CommandNameInput)
    def shell_describe(params: CommandNameInput) -> str:
        return format_result(session.registry.invoke("help", [params.name], session.cwd))

    @register(name="shell.cwd", short_description="Show the current working directory", model=EmptyInput)
    def shell_cwd(_params: EmptyInput) -> str:
        return session.cwd

    @register(name="tools", short_description="List available tools", model=EmptyInput)
    def list_tools(_params: EmptyInput) -> str:
        return "\n".join(registry.compact_rows())
