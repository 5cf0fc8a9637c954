"""Session and environment commands."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from ..config import Settings
from ..core.types import CommandResult
from ..errors import CommandError
from ..fs import FileSystem
from .base import Command, describe_os_error, fail, join_lines, ok

if TYPE_CHECKING:
    from ..core.registry import CommandRegistry

_ECHO_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", "a": "\a", "b": "\b", "v": "\v", "f": "\f"}


def _interpret_escapes(text: str) -> str:
    out: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == "\\" and index + 1 < len(text) and text[index + 1] in _ECHO_ESCAPES:
            out.append(_ECHO_ESCAPES[text[index + 1]])
            index += 2
            continue
        out.append(char)
        index += 1
    return "".join(out)


class EchoCommand(Command):
    name = "echo"
    description = "Display text"
    usage = "echo [-n] [-e] [text...]"

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        newline = True
        escapes = False
        words = list(args)
        while words and len(words[0]) > 1 and words[0][0] == "-" and set(words[0][1:]) <= set("neE"):
            flags = words.pop(0)[1:]
            newline = newline and "n" not in flags
            if "e" in flags:
                escapes = True
            if "E" in flags:
                escapes = False

        text = " ".join(words)
        if escapes:
            text = _interpret_escapes(text)
        return ok(text + "\n" if newline else text)


class PwdCommand(Command):
    name = "pwd"
    description = "Print working directory"
    usage = "pwd"

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        return ok(f"{cwd}\n")


class CdCommand(Command):
    name = "cd"
    description = "Change directory"
    usage = "cd [directory]"

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        if not args:
            return ok(new_cwd=cwd)
        if len(args) > 1:
            raise CommandError(f"{self.name}: too many arguments")

        target = self.resolve(cwd, args[0])
        try:
            info = self.fs.stat(target)
        except OSError as exc:
            raise CommandError(f"{self.name}: {args[0]}: {describe_os_error(exc)}") from exc
        if not info.is_dir:
            raise CommandError(f"{self.name}: {args[0]}: Not a directory")
        return ok(new_cwd=target)


class EnvCommand(Command):
    name = "env"
    description = "Display environment variables"
    usage = "env"

    def __init__(self, fs: FileSystem, settings: Settings) -> None:
        super().__init__(fs)
        self.settings = settings

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        variables = self.settings.environment(cwd)
        return ok(join_lines([f"{key}={value}" for key, value in sorted(variables.items())]))


class DateCommand(Command):
    name = "date"
    description = "Display the current date and time"
    usage = "date [-u] [-I] [+FORMAT]"

    DEFAULT_FORMAT = "%a %b %d %H:%M:%S %Z %Y"

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        fmt = self.DEFAULT_FORMAT
        for arg in args:
            if arg.startswith("+"):
                fmt = arg[1:]
            elif arg == "-I":
                fmt = "%Y-%m-%d"
            elif arg != "-u":
                raise CommandError(f"{self.name}: invalid date '{arg}'")
        return ok(datetime.now(timezone.utc).strftime(fmt) + "\n")


class WhoamiCommand(Command):
    name = "whoami"
    description = "Display current username"
    usage = "whoami"

    def __init__(self, fs: FileSystem, settings: Settings) -> None:
        super().__init__(fs)
        self.settings = settings

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        return ok(f"{self.settings.user}\n")


class ClearCommand(Command):
    name = "clear"
    description = "Clear the terminal screen"
    usage = "clear"

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        return ok()


class _RegistryCommand(Command):
    def __init__(self, fs: FileSystem, registry: CommandRegistry) -> None:
        super().__init__(fs)
        self.registry = registry


class WhichCommand(_RegistryCommand):
    name = "which"
    description = "Locate a command"
    usage = "which command..."

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        if not args:
            raise self.usage_error("missing command name")
        found: list[str] = []
        missing: list[str] = []
        for name in args:
            if self.registry.has(name):
                found.append(f"{name}: shell builtin")
            else:
                missing.append(f"which: no {name} in (quillsh builtins)")
        if missing:
            return fail("\n".join(missing), stdout=join_lines(found))
        return ok(join_lines(found))


class HelpCommand(_RegistryCommand):
    name = "help"
    description = "Show available commands or the usage of one command"
    usage = "help [command]"

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        specs = self.registry.list_commands()
        if not args:
            width = max(len(spec.name) for spec in specs)
            rows = [f"  {spec.name.ljust(width)}  {spec.description}" for spec in specs]
            return ok(join_lines(["Available commands:", *rows]))

        for spec in specs:
            if spec.name == args[0]:
                return ok(f"{spec.name} - {spec.description}\nUsage: {spec.usage}\n")
        raise CommandError(f"{self.name}: no help topics match '{args[0]}'")
