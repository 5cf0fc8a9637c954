"""Command contract and shared helpers."""

from __future__ import annotations

import errno
from abc import ABC, abstractmethod
from typing import ClassVar

from ..core.types import CommandResult, CommandSpec
from ..errors import CommandError
from ..fs import FileSystem
from ..fs.paths import is_absolute, resolve

_ERRNO_MESSAGES = {
    errno.ENOENT: "No such file or directory",
    errno.EISDIR: "Is a directory",
    errno.ENOTDIR: "Not a directory",
    errno.EEXIST: "File exists",
    errno.EACCES: "Permission denied",
    errno.EPERM: "Operation not permitted",
    errno.ENOTEMPTY: "Directory not empty",
    errno.EBUSY: "Device or resource busy",
    errno.EINVAL: "Invalid argument",
}


def describe_os_error(exc: OSError) -> str:
    """Render a filesystem error the way coreutils would."""
    if exc.errno in _ERRNO_MESSAGES:
        return _ERRNO_MESSAGES[exc.errno]
    return exc.strerror or str(exc)


def ok(stdout: str = "", stderr: str = "", *, new_cwd: str | None = None) -> CommandResult:
    return CommandResult(stdout=stdout, stderr=stderr, exit_code=0, new_cwd=new_cwd)


def fail(message: str, exit_code: int = 1, *, stdout: str = "") -> CommandResult:
    return CommandResult(stdout=stdout, stderr=message, exit_code=exit_code)


def split_lines(content: str) -> list[str]:
    """Split text into lines, ignoring the empty element after a final newline."""
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def join_lines(lines: list[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


class Command(ABC):
    """A named shell command.

    Subclasses declare their metadata as class attributes and implement
    ``run``. Instances hold only the collaborators handed to them at
    construction; every invocation starts from scratch.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    usage: ClassVar[str]
    is_easter_egg: ClassVar[bool] = False
    allow_absolute: ClassVar[bool] = False

    def __init__(self, fs: FileSystem) -> None:
        self.fs = fs

    @property
    def spec(self) -> CommandSpec:
        return CommandSpec(
            name=self.name,
            description=self.description,
            usage=self.usage,
            is_easter_egg=self.is_easter_egg,
        )

    @abstractmethod
    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        """Execute with parsed arguments; ``stdin`` is set only when piped."""

    def usage_error(self, message: str) -> CommandError:
        return CommandError(f"{self.name}: {message}\nUsage: {self.usage}")

    def resolve(self, cwd: str, path: str) -> str:
        """Resolve a user path, rejecting absolute ones unless allowed."""
        if is_absolute(path) and not self.allow_absolute:
            raise CommandError(f"{self.name}: absolute paths are not supported: {path}")
        return resolve(cwd, path)

    def file_error(self, path: str, exc: OSError) -> CommandError:
        return CommandError(f"{self.name}: {path}: {describe_os_error(exc)}")

    def read_text(self, cwd: str, path: str) -> str:
        """Read a regular file as text, turning failures into command errors."""
        target = self.resolve(cwd, path)
        try:
            if self.fs.stat(target).is_dir:
                raise CommandError(f"{self.name}: {path}: Is a directory")
            return self.fs.read_text(target)
        except OSError as exc:
            raise self.file_error(path, exc) from exc

    def read_inputs(self, cwd: str, paths: list[str], stdin: str | None) -> str:
        """Piped input when present, otherwise the concatenated files."""
        if stdin is not None:
            return stdin
        return "".join(self.read_text(cwd, path) for path in paths)
