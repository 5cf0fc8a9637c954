"""File and directory manipulation commands."""

from __future__ import annotations

import posixpath
from datetime import datetime, timezone

from ..core.types import CommandResult
from ..errors import CommandError
from ..fs import DirEntry, FileStat
from ..fs.paths import basename
from .base import Command, describe_os_error, join_lines, ok, split_lines


def _split_flags(args: list[str], allowed: str, command: Command) -> tuple[set[str], list[str]]:
    flags: set[str] = set()
    operands: list[str] = []
    for arg in args:
        if arg.startswith("-") and len(arg) > 1:
            for flag in arg[1:]:
                if flag not in allowed:
                    raise command.usage_error(f"invalid option -- '{flag}'")
                flags.add(flag)
        else:
            operands.append(arg)
    return flags, operands


class CatCommand(Command):
    name = "cat"
    description = "Concatenate and display file contents"
    usage = "cat [-n] [file...]"
    allow_absolute = True

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        flags, files = _split_flags(args, "n", self)
        if not files:
            if stdin is None:
                raise self.usage_error("missing file operand")
            content = stdin
        else:
            content = "".join(self.read_text(cwd, path) for path in files)
        if "n" not in flags:
            return ok(content)
        numbered = [f"{number:>6}\t{line}" for number, line in enumerate(split_lines(content), start=1)]
        return ok(join_lines(numbered))


def _format_mtime(info: FileStat) -> str:
    if info.mtime_ms is None:
        return "unknown         "
    moment = datetime.fromtimestamp(info.mtime_ms / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M")


class LsCommand(Command):
    name = "ls"
    description = "List directory contents"
    usage = "ls [-la] [file...]"

    def _long_row(self, path: str, name: str, info: FileStat) -> str:
        if info.is_symlink:
            target = self.fs.readlink(path)
            return f"lrwxrwxrwx 1 user user {info.size:>8} {_format_mtime(info)} {name} -> {target}"
        mode = "drwxr-xr-x" if info.is_dir else "-rw-r--r--"
        label = f"{name}/" if info.is_dir else name
        return f"{mode} 1 user user {info.size:>8} {_format_mtime(info)} {label}"

    def _list_directory(self, path: str, *, long: bool, show_all: bool) -> list[str]:
        entries: list[DirEntry] = self.fs.readdir(path, with_file_types=True)
        if not show_all:
            entries = [entry for entry in entries if not entry.name.startswith(".")]
        if long:
            rows: list[str] = []
            for entry in entries:
                child = posixpath.join(path, entry.name)
                rows.append(self._long_row(child, entry.name, self.fs.stat(child)))
            return rows
        ordered = sorted(entries, key=lambda entry: not entry.is_dir)
        names = [f"{entry.name}/" if entry.is_dir else entry.name for entry in ordered]
        return ["  ".join(names)] if names else []

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        flags, paths = _split_flags(args, "la", self)
        long, show_all = "l" in flags, "a" in flags
        targets = paths or ["."]

        output: list[str] = []
        for position, operand in enumerate(targets):
            path = self.resolve(cwd, operand)
            try:
                info = self.fs.stat(path)
                if not info.is_dir:
                    name = basename(operand)
                    output.append(self._long_row(path, name, info) if long else name)
                    continue
                if len(targets) > 1:
                    if position:
                        output.append("")
                    output.append(f"{operand}:")
                output.extend(self._list_directory(path, long=long, show_all=show_all))
            except OSError as exc:
                raise CommandError(f"{self.name}: cannot access '{operand}': {describe_os_error(exc)}") from exc
        return ok(join_lines(output))


class TouchCommand(Command):
    name = "touch"
    description = "Create empty files or update timestamps"
    usage = "touch file..."
    allow_absolute = True

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        if not args:
            raise self.usage_error("missing file operand")
        for operand in args:
            path = self.resolve(cwd, operand)
            try:
                if self.fs.is_dir(path):
                    continue
                data = self.fs.read_bytes(path) if self.fs.exists(path) else b""
                self.fs.write_bytes(path, data)
            except OSError as exc:
                raise CommandError(f"{self.name}: cannot touch '{operand}': {describe_os_error(exc)}") from exc
        return ok()


class MkdirCommand(Command):
    name = "mkdir"
    description = "Create directories"
    usage = "mkdir [-p] directory..."
    allow_absolute = True

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        flags, directories = _split_flags(args, "p", self)
        if not directories:
            raise self.usage_error("missing operand")
        for operand in directories:
            path = self.resolve(cwd, operand)
            try:
                self.fs.mkdir(path, parents="p" in flags)
            except OSError as exc:
                raise CommandError(
                    f"{self.name}: cannot create directory '{operand}': {describe_os_error(exc)}"
                ) from exc
        return ok()


def _destination(command: Command, cwd: str, sources: list[str], destination: str) -> tuple[str, bool]:
    """Resolve the destination and tell whether sources go inside it."""
    target = command.resolve(cwd, destination)
    into_directory = command.fs.is_dir(target)
    if len(sources) > 1 and not into_directory:
        raise CommandError(f"{command.name}: target '{destination}' is not a directory")
    return target, into_directory


class CpCommand(Command):
    name = "cp"
    description = "Copy files and directories"
    usage = "cp [-r] source... destination"
    allow_absolute = True

    def _copy_tree(self, source: str, target: str) -> None:
        self.fs.mkdir(target, parents=True)
        for entry in self.fs.readdir(source, with_file_types=True):
            child_source = posixpath.join(source, entry.name)
            child_target = posixpath.join(target, entry.name)
            if entry.is_dir:
                self._copy_tree(child_source, child_target)
            else:
                self.fs.write_bytes(child_target, self.fs.read_bytes(child_source))

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        flags, paths = _split_flags(args, "rR", self)
        if not paths:
            raise self.usage_error("missing file operand")
        if len(paths) == 1:
            raise self.usage_error(f"missing destination file operand after '{paths[0]}'")
        *sources, destination = paths
        destination_path, into_directory = _destination(self, cwd, sources, destination)
        recursive = bool(flags & {"r", "R"})

        for operand in sources:
            source = self.resolve(cwd, operand)
            target = posixpath.join(destination_path, basename(source)) if into_directory else destination_path
            try:
                info = self.fs.stat(source)
            except OSError as exc:
                raise CommandError(f"{self.name}: cannot stat '{operand}': {describe_os_error(exc)}") from exc
            try:
                if not info.is_dir:
                    self.fs.write_bytes(target, self.fs.read_bytes(source))
                    continue
                if not recursive:
                    raise CommandError(f"{self.name}: -r not specified; omitting directory '{operand}'")
                if target == source or target.startswith(source.rstrip("/") + "/"):
                    raise CommandError(
                        f"{self.name}: cannot copy a directory, '{operand}', into itself, '{destination}'"
                    )
                self._copy_tree(source, target)
            except OSError as exc:
                raise CommandError(f"{self.name}: cannot copy '{operand}': {describe_os_error(exc)}") from exc
        return ok()


class MvCommand(Command):
    name = "mv"
    description = "Move/rename files and directories"
    usage = "mv source... destination"

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        if len(args) < 2:
            raise self.usage_error("missing file operand")
        *sources, destination = args
        destination_path, into_directory = _destination(self, cwd, sources, destination)

        for operand in sources:
            source = self.resolve(cwd, operand)
            target = posixpath.join(destination_path, basename(source)) if into_directory else destination_path
            try:
                info = self.fs.stat(source)
            except OSError as exc:
                raise CommandError(f"{self.name}: cannot stat '{operand}': {describe_os_error(exc)}") from exc
            if info.is_dir and self.fs.exists(target):
                raise CommandError(f"{self.name}: cannot move '{operand}' to '{destination}': File exists")
            try:
                self.fs.rename(source, target)
            except OSError as exc:
                raise CommandError(f"{self.name}: cannot move '{operand}': {describe_os_error(exc)}") from exc
        return ok()


class RmCommand(Command):
    name = "rm"
    description = "Remove files and directories"
    usage = "rm [-rf] file..."

    def _remove_tree(self, path: str) -> None:
        for entry in self.fs.readdir(path, with_file_types=True):
            child = posixpath.join(path, entry.name)
            if entry.is_dir:
                self._remove_tree(child)
            else:
                self.fs.unlink(child)
        self.fs.rmdir(path)

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        flags, paths = _split_flags(args, "rRf", self)
        force = "f" in flags
        if not paths:
            if force:
                return ok()
            raise self.usage_error("missing operand")

        for operand in paths:
            if operand.rstrip("/") in (".", ".."):
                raise CommandError(f"{self.name}: refusing to remove '.' or '..' directory: skipping '{operand}'")
            path = self.resolve(cwd, operand)
            try:
                info = self.fs.stat(path)
                if not info.is_dir:
                    self.fs.unlink(path)
                elif flags & {"r", "R"}:
                    self._remove_tree(path)
                else:
                    raise CommandError(f"{self.name}: cannot remove '{operand}': Is a directory")
            except FileNotFoundError as exc:
                if not force:
                    raise CommandError(f"{self.name}: cannot remove '{operand}': {describe_os_error(exc)}") from exc
            except OSError as exc:
                raise CommandError(f"{self.name}: cannot remove '{operand}': {describe_os_error(exc)}") from exc
        return ok()


class LnCommand(Command):
    name = "ln"
    description = "Create symbolic links"
    usage = "ln -s target [link_name]"

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        flags, operands = _split_flags(args, "sf", self)
        if "s" not in flags:
            raise CommandError(f"{self.name}: hard links are not supported, use -s")
        if not operands or len(operands) > 2:
            raise self.usage_error("missing file operand" if not operands else "extra operand")

        target = operands[0]
        link_operand = operands[1] if len(operands) == 2 else basename(target)
        link = self.resolve(cwd, link_operand)
        if self.fs.is_dir(link):
            link = posixpath.join(link, basename(target))
        try:
            if "f" in flags and self.fs.exists(link):
                self.fs.unlink(link)
            self.fs.symlink(target, link)
        except OSError as exc:
            raise CommandError(
                f"{self.name}: failed to create symbolic link '{link_operand}': {describe_os_error(exc)}"
            ) from exc
        return ok()
