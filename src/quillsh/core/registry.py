"""Command registry and the command boundary."""

from __future__ import annotations

from loguru import logger

from ..commands import (
    CatCommand,
    CdCommand,
    ClearCommand,
    Command,
    CpCommand,
    CurlCommand,
    CutCommand,
    DateCommand,
    DiffCommand,
    EchoCommand,
    EnvCommand,
    FindCommand,
    GitCommand,
    GrepCommand,
    HeadCommand,
    HelpCommand,
    HexdumpCommand,
    LnCommand,
    LsCommand,
    MkdirCommand,
    MvCommand,
    PwdCommand,
    RmCommand,
    SedCommand,
    ShakespeareCommand,
    SortCommand,
    TailCommand,
    TouchCommand,
    TrCommand,
    UniqCommand,
    UnzipCommand,
    WcCommand,
    WhichCommand,
    WhoamiCommand,
    ZipCommand,
)
from ..commands.base import describe_os_error, fail
from ..config import Settings
from ..errors import CommandError
from ..fs import FileSystem
from .types import CommandResult, CommandSpec


class CommandRegistry:
    """Name to command mapping for one shell session."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    def register(self, command: Command) -> None:
        self._commands[command.name] = command

    def has(self, name: str) -> bool:
        return name in self._commands

    def get(self, name: str) -> Command | None:
        return self._commands.get(name)

    def names(self) -> list[str]:
        return sorted(self._commands)

    def list_commands(self) -> list[CommandSpec]:
        """Metadata of every command meant to be discovered, sorted by name."""
        return [
            self._commands[name].spec for name in self.names() if not self._commands[name].is_easter_egg
        ]

    def invoke(self, name: str, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        """Run a command and flatten every failure into a ``CommandResult``."""
        command = self.get(name)
        if command is None:
            return fail(
                f"Error: Command '{name}' not found\nAvailable commands: {', '.join(self.names())}",
                exit_code=127,
            )

        try:
            return command.run(args, cwd, stdin)
        except CommandError as exc:
            return fail(exc.message, exc.exit_code)
        except OSError as exc:
            return fail(f"{name}: {describe_os_error(exc)}")
        except Exception as exc:
            logger.exception("shell.command.error name={}", name)
            return fail(f"Error executing command '{name}': {exc!s}")


def build_default_registry(fs: FileSystem, settings: Settings | None = None) -> CommandRegistry:
    """Register every built-in command against ``fs``."""
    settings = settings or Settings()
    registry = CommandRegistry()
    commands: list[Command] = [
        CatCommand(fs),
        CdCommand(fs),
        ClearCommand(fs),
        CpCommand(fs),
        CurlCommand(fs, settings),
        CutCommand(fs),
        DateCommand(fs),
        DiffCommand(fs),
        EchoCommand(fs),
        EnvCommand(fs, settings),
        FindCommand(fs),
        GitCommand(fs),
        GrepCommand(fs),
        HeadCommand(fs),
        HexdumpCommand(fs),
        LnCommand(fs),
        LsCommand(fs),
        MkdirCommand(fs),
        MvCommand(fs),
        PwdCommand(fs),
        RmCommand(fs),
        SedCommand(fs),
        ShakespeareCommand(fs),
        SortCommand(fs),
        TailCommand(fs),
        TouchCommand(fs),
        TrCommand(fs),
        UniqCommand(fs),
        UnzipCommand(fs),
        WcCommand(fs),
        WhoamiCommand(fs, settings),
        ZipCommand(fs),
    ]
    for command in commands:
        registry.register(command)
    # Registered last so they see the complete table.
    registry.register(WhichCommand(fs, registry))
    registry.register(HelpCommand(fs, registry))
    logger.debug("shell.registry.ready commands={}", len(registry.names()))
    return registry
