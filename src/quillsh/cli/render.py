"""Terminal rendering for the quillsh CLI."""

from __future__ import annotations

from prompt_toolkit import PromptSession
from rich.console import Console
from rich.table import Table

from ..core.types import CommandSpec


class Renderer:
    """Rich output plus a prompt_toolkit prompt for the REPL."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self._prompt_session: PromptSession[str] | None = None

    def prompt(self, message: str) -> str:
        if self._prompt_session is None:
            self._prompt_session = PromptSession()
        return self._prompt_session.prompt(message)

    def welcome(self, workspace: str | None) -> None:
        self.console.print("[bold blue]quillsh[/bold blue] - type 'help' for commands, 'exit' to leave")
        self.console.print(f"[bold]Workspace:[/bold] [cyan]{workspace or '(in-memory)'}[/cyan]")

    def output(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False)

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def clear(self) -> None:
        self.console.clear()

    def command_table(self, specs: list[CommandSpec]) -> None:
        table = Table(title="Available commands")
        table.add_column("Command", style="green", no_wrap=True)
        table.add_column("Description")
        table.add_column("Usage", style="dim")
        for spec in specs:
            table.add_row(spec.name, spec.description, spec.usage)
        self.console.print(table)
