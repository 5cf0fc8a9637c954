"""Line and character oriented text filters."""

from __future__ import annotations

import re
import string
from abc import abstractmethod

from ..core.types import CommandResult
from ..errors import CommandError
from .base import Command, join_lines, ok, split_lines

_LEADING_NUMBER_RE = re.compile(r"\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def _numeric_key(line: str) -> float:
    match = _LEADING_NUMBER_RE.match(line)
    return float(match.group()) if match else 0.0


def _collect_flags(args: list[str], allowed: str, command: Command) -> tuple[set[str], list[str]]:
    """Split ``-abc`` style switches from operands."""
    flags: set[str] = set()
    operands: list[str] = []
    for arg in args:
        if arg.startswith("-") and arg != "-":
            for flag in arg[1:]:
                if flag not in allowed:
                    raise command.usage_error(f"invalid option -- '{flag}'")
                flags.add(flag)
        else:
            operands.append(arg)
    return flags, operands


class SortCommand(Command):
    name = "sort"
    description = "Sort lines of text"
    usage = "sort [-r] [-n] [-u] [file...]"

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        flags, files = _collect_flags(args, "rnu", self)
        if stdin is None and not files:
            return ok()

        if stdin is not None:
            lines = split_lines(stdin)
        else:
            lines = [line for path in files for line in split_lines(self.read_text(cwd, path))]

        reverse = "r" in flags
        if "n" in flags:
            lines.sort(key=_numeric_key, reverse=reverse)
        else:
            lines.sort(key=lambda line: (line.casefold(), line), reverse=reverse)
        if "u" in flags:
            lines = list(dict.fromkeys(lines))
        return ok(join_lines(lines))


class UniqCommand(Command):
    name = "uniq"
    description = "Report or omit repeated lines"
    usage = "uniq [-c] [-d] [-u] [file]"

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        flags, files = _collect_flags(args, "cdu", self)
        if stdin is not None:
            lines = split_lines(stdin)
        elif files:
            lines = split_lines(self.read_text(cwd, files[0]))
        else:
            return ok()

        groups: list[tuple[str, int]] = []
        for line in lines:
            if groups and groups[-1][0] == line:
                groups[-1] = (line, groups[-1][1] + 1)
            else:
                groups.append((line, 1))

        output: list[str] = []
        for line, count in groups:
            if "d" in flags and count == 1:
                continue
            if "u" in flags and count > 1:
                continue
            output.append(f"{count:>7} {line}" if "c" in flags else line)
        return ok(join_lines(output))


def _parse_ranges(spec: str, command: Command) -> list[tuple[int, int | None]]:
    """Parse a cut list such as ``1,3-5,7-`` into inclusive ranges."""
    ranges: list[tuple[int, int | None]] = []
    for part in spec.split(","):
        start_text, dash, end_text = part.partition("-")
        try:
            start = int(start_text) if start_text else 1
            end = (int(end_text) if end_text else None) if dash else start
        except ValueError as exc:
            raise CommandError(f"{command.name}: invalid byte, character or field list: '{spec}'") from exc
        if start < 1 or (end is not None and end < 1):
            raise CommandError(f"{command.name}: fields and positions are numbered from 1")
        if end is not None and end < start:
            raise CommandError(f"{command.name}: invalid decreasing range: '{part}'")
        ranges.append((start, end))
    return ranges


def _selected(position: int, ranges: list[tuple[int, int | None]]) -> bool:
    return any(start <= position and (end is None or position <= end) for start, end in ranges)


class CutCommand(Command):
    name = "cut"
    description = "Extract sections from lines"
    usage = "cut -c LIST | -b LIST | -f LIST [-d DELIM] [-s] [file...]"

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        characters: list[tuple[int, int | None]] | None = None
        fields: list[tuple[int, int | None]] | None = None
        delimiter = "\t"
        only_delimited = False
        files: list[str] = []
        index = 0
        while index < len(args):
            arg = args[index]
            if arg in ("-c", "-b", "-f", "-d") and index + 1 < len(args):
                index += 1
                value = args[index]
            elif arg[:2] in ("-c", "-b", "-f", "-d") and len(arg) > 2:
                value = arg[2:]
            elif arg == "-s":
                only_delimited = True
                index += 1
                continue
            elif arg.startswith("-") and arg != "-":
                raise self.usage_error(f"invalid option -- '{arg[1:2]}'")
            else:
                files.append(arg)
                index += 1
                continue

            option = arg[:2]
            if option == "-d":
                delimiter = value
            elif option == "-f":
                fields = _parse_ranges(value, self)
            else:
                characters = _parse_ranges(value, self)
            index += 1

        if characters is None and fields is None:
            raise CommandError(f"{self.name}: you must specify a list of bytes, characters, or fields")
        if len(delimiter) != 1:
            raise CommandError(f"{self.name}: the delimiter must be a single character")
        if stdin is None and not files:
            return ok()

        output: list[str] = []
        for line in split_lines(self.read_inputs(cwd, files, stdin)):
            if characters is not None:
                output.append("".join(char for pos, char in enumerate(line, start=1) if _selected(pos, characters)))
                continue
            if delimiter not in line:
                if not only_delimited:
                    output.append(line)
                continue
            parts = line.split(delimiter)
            output.append(
                delimiter.join(part for pos, part in enumerate(parts, start=1) if _selected(pos, fields or []))
            )
        return ok(join_lines(output))


_TR_CLASSES = {
    "[:alnum:]": string.ascii_letters + string.digits,
    "[:alpha:]": string.ascii_letters,
    "[:blank:]": " \t",
    "[:digit:]": string.digits,
    "[:lower:]": string.ascii_lowercase,
    "[:punct:]": string.punctuation,
    "[:space:]": " \t\n\r\v\f",
    "[:upper:]": string.ascii_uppercase,
}
_TR_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\"}


def _read_char(spec: str, index: int) -> tuple[str, int]:
    if spec[index] == "\\" and index + 1 < len(spec):
        following = spec[index + 1]
        return _TR_ESCAPES.get(following, following), index + 2
    return spec[index], index + 1


def expand_set(spec: str) -> list[str]:
    """Expand a tr set with ranges, classes and backslash escapes."""
    chars: list[str] = []
    index = 0
    while index < len(spec):
        class_name = next((name for name in _TR_CLASSES if spec.startswith(name, index)), None)
        if class_name is not None:
            chars.extend(_TR_CLASSES[class_name])
            index += len(class_name)
            continue

        char, index = _read_char(spec, index)
        if index + 1 < len(spec) and spec[index] == "-":
            end, after = _read_char(spec, index + 1)
            if ord(char) <= ord(end):
                chars.extend(chr(code) for code in range(ord(char), ord(end) + 1))
                index = after
                continue
        chars.append(char)
    return chars


class TrCommand(Command):
    name = "tr"
    description = "Translate or delete characters"
    usage = "tr [-d] SET1 [SET2] [file...]"

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        flags, operands = _collect_flags(args, "d", self)
        delete = "d" in flags
        wanted = 1 if delete else 2
        if not operands:
            raise CommandError(f"{self.name}: missing operand")
        if len(operands) < wanted:
            raise CommandError(f"{self.name}: missing operand after '{operands[0]}'")
        sets, files = operands[:wanted], operands[wanted:]
        if stdin is None and not files:
            return ok()

        content = self.read_inputs(cwd, files, stdin)
        source = expand_set(sets[0])
        if delete:
            removed = set(source)
            return ok("".join(char for char in content if char not in removed))

        target = expand_set(sets[1])
        if not target:
            raise CommandError(f"{self.name}: when not truncating set1, string2 must be non-empty")
        table = {char: target[min(pos, len(target) - 1)] for pos, char in enumerate(source)}
        return ok("".join(table.get(char, char) for char in content))


class WcCommand(Command):
    name = "wc"
    description = "Count lines, words, and characters in files"
    usage = "wc [-l] [-w] [-c] [file...]"

    @staticmethod
    def _count(content: str) -> tuple[int, int, int]:
        lines = 0 if not content else content.count("\n") + (0 if content.endswith("\n") else 1)
        return lines, len(content.split()), len(content)

    def _row(self, counts: tuple[int, int, int], flags: set[str], label: str | None) -> str:
        selected = [count for flag, count in zip("lwc", counts) if flag in flags]
        parts = [f"{count:>8}" for count in selected]
        if label is not None:
            parts.append(label)
        return " ".join(parts)

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        flags, files = _collect_flags(args, "lwc", self)
        flags = flags or set("lwc")
        if stdin is not None and not files:
            return ok(self._row(self._count(stdin), flags, None) + "\n")
        if not files:
            raise CommandError(f"{self.name}: reading from stdin is not supported")

        rows: list[str] = []
        totals = [0, 0, 0]
        for path in files:
            counts = self._count(self.read_text(cwd, path))
            totals = [total + count for total, count in zip(totals, counts)]
            rows.append(self._row(counts, flags, path))
        if len(files) > 1:
            rows.append(self._row((totals[0], totals[1], totals[2]), flags, "total"))
        return ok(join_lines(rows))


class _LineWindowCommand(Command):
    """Shared option handling of ``head`` and ``tail``."""

    def _parse(self, args: list[str]) -> tuple[str, list[str]]:
        count = "10"
        files: list[str] = []
        index = 0
        while index < len(args):
            arg = args[index]
            if arg == "-n":
                index += 1
                if index >= len(args):
                    raise self.usage_error("option requires an argument -- 'n'")
                count = args[index]
            elif arg.startswith("-n"):
                count = arg[2:]
            elif len(arg) > 1 and arg[0] == "-" and arg[1:].isdigit():
                count = arg[1:]
            elif arg.startswith("-") and arg != "-":
                raise self.usage_error(f"invalid option -- '{arg[1:2]}'")
            else:
                files.append(arg)
            index += 1
        return count, files

    @abstractmethod
    def _window(self, lines: list[str], count: str) -> list[str]:
        """Select the lines this command keeps."""

    def _valid_count(self, count: str) -> int:
        try:
            value = int(count.lstrip("+"))
        except ValueError as exc:
            raise CommandError(f"{self.name}: invalid number of lines: '{count}'") from exc
        if value < 0:
            raise CommandError(f"{self.name}: invalid number of lines: '{count}'")
        return value

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        count, files = self._parse(args)
        self._valid_count(count)
        if stdin is not None and not files:
            return ok(join_lines(self._window(split_lines(stdin), count)))
        if not files:
            raise CommandError(f"{self.name}: reading from stdin is not supported")

        output: list[str] = []
        for position, path in enumerate(files):
            selected = self._window(split_lines(self.read_text(cwd, path)), count)
            if len(files) > 1:
                if position:
                    output.append("")
                output.append(f"==> {path} <==")
            output.extend(selected)
        return ok(join_lines(output))


class HeadCommand(_LineWindowCommand):
    name = "head"
    description = "Display the first lines of files"
    usage = "head [-n lines] [file...]"

    def _window(self, lines: list[str], count: str) -> list[str]:
        return lines[: self._valid_count(count)]


class TailCommand(_LineWindowCommand):
    name = "tail"
    description = "Display the last lines of files"
    usage = "tail [-n lines | -n +start] [file...]"

    def _window(self, lines: list[str], count: str) -> list[str]:
        value = self._valid_count(count)
        if count.startswith("+"):
            return lines[max(value - 1, 0) :]
        return lines[-value:] if value else []
