"""Byte level commands: hexdump and zip archives."""

from __future__ import annotations

import io
import posixpath
import zipfile
from datetime import datetime

from ..core.types import CommandResult
from ..errors import CommandError
from ..fs.paths import normalize, parent, resolve
from .base import Command, describe_os_error, fail, ok

_BYTES_PER_LINE = 16


def _printable(data: bytes) -> str:
    return "".join(chr(byte) if 32 <= byte <= 126 else "." for byte in data)


def format_hexdump(data: bytes, *, canonical: bool = False, skip: int = 0, length: int | None = None) -> str:
    """Render ``data`` like BSD ``hexdump`` (default) or ``hexdump -C``."""
    if skip >= len(data):
        return ""
    end = len(data) if length is None else min(skip + length, len(data))
    lines: list[str] = []
    for offset in range(skip, end, _BYTES_PER_LINE):
        chunk = data[offset : min(offset + _BYTES_PER_LINE, end)]
        if canonical:
            cells = [f"{byte:02x}" for byte in chunk] + ["  "] * (_BYTES_PER_LINE - len(chunk))
            hex_part = " ".join(cells[:8]) + "  " + " ".join(cells[8:])
            lines.append(f"{offset:08x}  {hex_part}  |{_printable(chunk)}|")
            continue
        words = []
        for index in range(0, len(chunk), 2):
            pair = chunk[index : index + 2]
            words.append(f"{pair[1] << 8 | pair[0]:04x}" if len(pair) == 2 else f"{pair[0]:02x}  ")
        lines.append(f"{offset:07x} {' '.join(words)}")
    if end > skip:
        lines.append(f"{end:08x}" if canonical else f"{end:07x}")
    return "\n".join(lines)


class HexdumpCommand(Command):
    name = "hexdump"
    description = "Display file contents in hexadecimal format"
    usage = "hexdump [-C] [-n length] [-s skip] [file...]"
    allow_absolute = True

    def _number(self, args: list[str], index: int, flag: str, label: str) -> int:
        if index >= len(args):
            raise CommandError(f"{self.name}: option requires an argument -- {flag}")
        try:
            value = int(args[index])
        except ValueError as exc:
            raise CommandError(f"{self.name}: invalid {label}: {args[index]}") from exc
        if value < 0:
            raise CommandError(f"{self.name}: invalid {label}: {args[index]}")
        return value

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        canonical = False
        length: int | None = None
        skip = 0
        files: list[str] = []
        index = 0
        while index < len(args):
            arg = args[index]
            if arg == "-C":
                canonical = True
            elif arg == "-n":
                index += 1
                length = self._number(args, index, "n", "length")
            elif arg == "-s":
                index += 1
                skip = self._number(args, index, "s", "skip offset")
            elif arg.startswith("-"):
                raise CommandError(f"{self.name}: invalid option -- {arg[1:]}")
            else:
                files.append(arg)
            index += 1

        if stdin is not None:
            return ok(format_hexdump(stdin.encode("utf-8"), canonical=canonical, skip=skip, length=length))
        if not files:
            raise self.usage_error("missing file operand")

        outputs: list[str] = []
        for operand in files:
            path = self.resolve(cwd, operand)
            try:
                if self.fs.stat(path).is_dir:
                    raise CommandError(f"{self.name}: {operand}: Is a directory")
                data = self.fs.read_bytes(path)
            except OSError as exc:
                raise self.file_error(operand, exc) from exc
            if len(files) > 1:
                outputs.append(f"==> {operand} <==")
            outputs.append(format_hexdump(data, canonical=canonical, skip=skip, length=length))
        return ok("\n".join(outputs))


def _allowed_destination(path: str, cwd: str) -> bool:
    for base in (normalize(cwd), "/tmp"):
        if path == base or path.startswith(base.rstrip("/") + "/"):
            return True
    return False


def _listing(archive: str, bundle: zipfile.ZipFile) -> str:
    rows = [f"Archive: {archive}"]
    for info in bundle.infolist():
        stamp = datetime(*info.date_time).strftime("%Y-%m-%d %H:%M:%S")
        kind = "d" if info.is_dir() else "-"
        rows.append(f"{kind}rw-r--r-- 1 user user {info.file_size:>8} {stamp} {info.filename}")
    return "\n".join(rows) + "\n"


class UnzipCommand(Command):
    name = "unzip"
    description = "Extract files from ZIP archives"
    usage = "unzip [-d directory] [-o] [-l] [-q] archive.zip"
    allow_absolute = True

    def _parse(self, args: list[str]) -> tuple[str | None, str, bool, bool, bool]:
        archive: str | None = None
        directory = "."
        overwrite = list_only = quiet = False
        index = 0
        while index < len(args):
            arg = args[index]
            if arg == "-d":
                index += 1
                if index >= len(args):
                    raise self.usage_error("option requires an argument -- d")
                directory = args[index]
            elif arg.startswith("-") and len(arg) > 1:
                for flag in arg[1:]:
                    if flag == "o":
                        overwrite = True
                    elif flag == "l":
                        list_only = True
                    elif flag == "q":
                        quiet = True
                    else:
                        raise self.usage_error(f"invalid option '{arg}'")
            elif archive is None:
                archive = arg
            index += 1
        return archive, directory, overwrite, list_only, quiet

    def _open(self, cwd: str, archive: str) -> zipfile.ZipFile:
        path = self.resolve(cwd, archive)
        try:
            if self.fs.stat(path).is_dir:
                raise CommandError(f"{self.name}: {archive}: Is a directory")
            data = self.fs.read_bytes(path)
        except OSError as exc:
            raise self.file_error(archive, exc) from exc
        try:
            return zipfile.ZipFile(io.BytesIO(data))
        except zipfile.BadZipFile as exc:
            raise CommandError(f"{self.name}: {archive}: Archive is corrupted or invalid") from exc

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        archive, directory, overwrite, list_only, quiet = self._parse(args)
        if archive is None:
            raise self.usage_error("missing archive operand")
        with self._open(cwd, archive) as bundle:
            if list_only:
                return ok(_listing(archive, bundle))
            extracted, errors = self._extract(bundle, cwd, directory, overwrite)

        lines = [] if quiet else [f"Archive: {archive}", *extracted]
        if errors:
            return fail("\n".join(errors), stdout="".join(f"{line}\n" for line in lines))
        return ok("".join(f"{line}\n" for line in lines))

    def _extract(
        self, bundle: zipfile.ZipFile, cwd: str, directory: str, overwrite: bool
    ) -> tuple[list[str], list[str]]:
        destination = resolve(cwd, directory)
        if not _allowed_destination(destination, cwd):
            raise CommandError(
                f"{self.name}: extraction directory '{directory}' is outside allowed paths (cwd or /tmp)"
            )
        self.fs.mkdir(destination, parents=True)

        extracted: list[str] = []
        errors: list[str] = []
        for info in bundle.infolist():
            target = normalize(posixpath.join(destination, info.filename))
            if not target.startswith(destination.rstrip("/") + "/"):
                errors.append(f"{self.name}: {info.filename}: Path is outside allowed directories (skipped for security)")
                continue
            try:
                if info.is_dir():
                    self.fs.mkdir(target, parents=True)
                    extracted.append(f"   creating: {info.filename}")
                    continue
                if not overwrite and self.fs.exists(target):
                    errors.append(f"{self.name}: {info.filename}: File exists (use -o to overwrite)")
                    continue
                self.fs.mkdir(parent(target), parents=True)
                self.fs.write_bytes(target, bundle.read(info))
                extracted.append(f"  inflating: {info.filename}")
            except OSError as exc:
                errors.append(f"{self.name}: {info.filename}: {describe_os_error(exc)}")
        return extracted, errors


class ZipCommand(Command):
    name = "zip"
    description = "Package files into a ZIP archive"
    usage = "zip [-r] [-q] archive.zip file1 [file2 ...]"

    def _add(self, bundle: zipfile.ZipFile, path: str, entry: str, recursive: bool, added: list[str]) -> None:
        info = self.fs.stat(path)
        if not info.is_dir:
            bundle.writestr(entry, self.fs.read_bytes(path))
            added.append(f"  adding: {entry}")
            return
        if not recursive:
            raise CommandError(f"{self.name}: {entry}: Is a directory (use -r to include)")
        bundle.writestr(entry.rstrip("/") + "/", b"")
        added.append(f"  adding: {entry.rstrip('/')}/")
        for child in self.fs.readdir(path):
            self._add(bundle, posixpath.join(path, child), f"{entry.rstrip('/')}/{child}", recursive, added)

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        recursive = quiet = False
        operands: list[str] = []
        for arg in args:
            if arg.startswith("-") and len(arg) > 1:
                for flag in arg[1:]:
                    if flag == "r":
                        recursive = True
                    elif flag == "q":
                        quiet = True
                    else:
                        raise self.usage_error(f"invalid option '{arg}'")
            else:
                operands.append(arg)
        if not operands:
            raise self.usage_error("missing archive operand")
        if len(operands) == 1:
            raise self.usage_error("no files to add")

        archive, *sources = operands
        archive_path = self.resolve(cwd, archive)
        buffer = io.BytesIO()
        added: list[str] = []
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as bundle:
            for operand in sources:
                path = self.resolve(cwd, operand)
                try:
                    self._add(bundle, path, operand.strip("/"), recursive, added)
                except OSError as exc:
                    raise self.file_error(operand, exc) from exc
        try:
            self.fs.write_bytes(archive_path, buffer.getvalue())
        except OSError as exc:
            raise self.file_error(archive, exc) from exc
        return ok("" if quiet else "".join(f"{line}\n" for line in added))
