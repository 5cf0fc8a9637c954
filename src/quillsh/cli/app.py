"""CLI entry points for quillsh."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from loguru import logger

from ..config import Settings, get_settings
from ..core.executor import ShellSession
from ..errors import ConfigurationError
from ..logging_utils import configure_logging
from ..session import create_session
from .render import Renderer

app = typer.Typer(
    name="quillsh",
    help="A sandboxed shell with POSIX-like text commands.",
    add_completion=False,
)

EXIT_WORDS = {"exit", "quit"}

WorkspaceOption = typer.Option(None, "--workspace", "-w", help="Host directory mounted as '/'")
CwdOption = typer.Option(None, "--cwd", help="Initial working directory inside the sandbox")


def _build_session(workspace: Optional[Path], cwd: Optional[str]) -> tuple[Settings, ShellSession]:
    settings = get_settings(workspace)
    if cwd is not None:
        settings = settings.model_copy(update={"cwd": cwd})
    try:
        return settings, create_session(settings)
    except ConfigurationError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from exc


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        repl(workspace=None, cwd=None)


@app.command()
def run(
    command: str = typer.Argument(..., help="Command line to execute"),
    workspace: Optional[Path] = WorkspaceOption,
    cwd: Optional[str] = CwdOption,
) -> None:
    """Run one command line and print its output."""
    _, session = _build_session(workspace, cwd)
    typer.echo(session.execute(command))
    if session.last_exit_code != 0:
        raise typer.Exit(session.last_exit_code)


@app.command()
def commands(workspace: Optional[Path] = WorkspaceOption) -> None:
    """Show the available commands."""
    _, session = _build_session(workspace, None)
    Renderer().command_table(session.registry.list_commands())


def run_repl(session: ShellSession, settings: Settings, renderer: Renderer) -> None:
    """Read lines until exit or EOF and run each one in ``session``."""
    renderer.welcome(str(settings.workspace) if settings.workspace else None)
    while True:
        try:
            line = renderer.prompt(f"{settings.user}@{settings.hostname}:{session.cwd}$ ")
        except KeyboardInterrupt:
            continue
        except EOFError:
            break

        stripped = line.strip()
        if not stripped:
            continue
        if stripped in EXIT_WORDS:
            break
        if stripped == "clear":
            renderer.clear()
            continue
        try:
            renderer.output(session.execute(line))
        except Exception as exc:
            logger.exception("repl.line.error")
            renderer.error(str(exc))


@app.command()
def repl(
    workspace: Optional[Path] = WorkspaceOption,
    cwd: Optional[str] = CwdOption,
) -> None:
    """Start an interactive shell."""
    settings, session = _build_session(workspace, cwd)
    configure_logging(profile="repl", level=settings.log_level)
    run_repl(session, settings, Renderer())
