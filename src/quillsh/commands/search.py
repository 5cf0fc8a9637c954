"""Searching and comparing: grep, find and diff."""

from __future__ import annotations

import difflib
import fnmatch
import posixpath
import re
from collections.abc import Iterator
from dataclasses import dataclass

from loguru import logger

from ..core.types import CommandResult
from ..errors import CommandError
from .base import Command, fail, join_lines, ok, split_lines


@dataclass(frozen=True)
class _GrepOptions:
    ignore_case: bool = False
    line_numbers: bool = False
    recursive: bool = False
    invert: bool = False
    count: bool = False
    files_with_matches: bool = False
    fixed: bool = False


class GrepCommand(Command):
    name = "grep"
    description = "Search for patterns in files"
    usage = "grep [-i] [-n] [-r] [-v] [-c] [-l] [-F] [-E] pattern [file...]"

    _FLAGS = {
        "i": "ignore_case",
        "n": "line_numbers",
        "r": "recursive",
        "R": "recursive",
        "v": "invert",
        "c": "count",
        "l": "files_with_matches",
        "F": "fixed",
    }

    def _parse(self, args: list[str]) -> tuple[_GrepOptions, str | None, list[str]]:
        enabled: dict[str, bool] = {}
        pattern: str | None = None
        files: list[str] = []
        for arg in args:
            if arg.startswith("-") and arg != "-" and pattern is None:
                for flag in arg[1:]:
                    if flag == "E":
                        continue
                    if flag not in self._FLAGS:
                        raise self.usage_error(f"invalid option -- '{flag}'")
                    enabled[self._FLAGS[flag]] = True
            elif pattern is None:
                pattern = arg
            else:
                files.append(arg)
        return _GrepOptions(**enabled), pattern, files

    def _compile(self, pattern: str, options: _GrepOptions) -> re.Pattern[str]:
        flags = re.IGNORECASE if options.ignore_case else 0
        if options.fixed:
            return re.compile(re.escape(pattern), flags)
        try:
            return re.compile(pattern, flags)
        except re.error as exc:
            logger.warning("grep.pattern.invalid pattern={} error={}", pattern, exc)
            return re.compile(re.escape(pattern), flags)

    def _walk(self, display: str, path: str) -> Iterator[tuple[str, str]]:
        """Yield ``(display name, absolute path)`` for files below ``path``."""
        for entry in self.fs.readdir(path, with_file_types=True):
            child_display = f"{display.rstrip('/')}/{entry.name}"
            child_path = posixpath.join(path, entry.name)
            if entry.is_dir:
                yield from self._walk(child_display, child_path)
            else:
                yield child_display, child_path

    def _sources(self, cwd: str, files: list[str], options: _GrepOptions) -> Iterator[tuple[str, str]]:
        for operand in files:
            target = self.resolve(cwd, operand)
            try:
                is_dir = self.fs.stat(target).is_dir
            except OSError as exc:
                raise self.file_error(operand, exc) from exc
            if not is_dir:
                yield operand, target
            elif options.recursive:
                yield from self._walk(operand, target)
            else:
                raise CommandError(f"{self.name}: {operand}: Is a directory")

    def _search(self, lines: list[str], regex: re.Pattern[str], options: _GrepOptions) -> list[tuple[int, str]]:
        return [
            (number, line)
            for number, line in enumerate(lines, start=1)
            if (regex.search(line) is not None) != options.invert
        ]

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        options, pattern, files = self._parse(args)
        if pattern is None:
            raise self.usage_error("missing pattern")
        regex = self._compile(pattern, options)

        sources: list[tuple[str | None, str]] = []
        if not files:
            if stdin is not None:
                sources = [(None, stdin)]
            elif options.recursive:
                files = ["."]
            else:
                raise CommandError(f"{self.name}: reading from stdin is not supported")
        if files:
            show_names = len(files) > 1 or options.recursive
            sources = [
                (display if show_names else None, self.fs.read_text(path))
                for display, path in self._sources(cwd, files, options)
            ]

        output: list[str] = []
        matched = False
        for display, content in sources:
            hits = self._search(split_lines(content), regex, options)
            matched = matched or bool(hits)
            prefix = f"{display}:" if display is not None else ""
            if options.files_with_matches:
                if hits:
                    output.append(display if display is not None else "(standard input)")
            elif options.count:
                output.append(f"{prefix}{len(hits)}")
            else:
                for number, line in hits:
                    numbered = f"{number}:" if options.line_numbers else ""
                    output.append(f"{prefix}{numbered}{line}")

        if not matched:
            return CommandResult(stdout=join_lines(output), exit_code=1)
        return ok(join_lines(output))


class FindCommand(Command):
    name = "find"
    description = "Search for files and directories"
    usage = "find [path...] [-name pattern] [-iname pattern] [-type f|d] [-maxdepth N]"

    def _parse(self, args: list[str]) -> tuple[list[str], dict[str, str]]:
        paths: list[str] = []
        predicates: dict[str, str] = {}
        index = 0
        while index < len(args):
            arg = args[index]
            if arg in ("-name", "-iname", "-type", "-maxdepth"):
                if index + 1 >= len(args):
                    raise CommandError(f"{self.name}: missing argument to '{arg}'")
                predicates[arg] = args[index + 1]
                index += 2
                continue
            if arg.startswith("-"):
                raise CommandError(f"{self.name}: unknown predicate '{arg}'")
            paths.append(arg)
            index += 1

        if predicates.get("-type", "f") not in ("f", "d"):
            raise CommandError(f"{self.name}: Unknown argument to -type: {predicates['-type']}")
        if not predicates.get("-maxdepth", "0").isdigit():
            raise CommandError(f"{self.name}: Expected a positive decimal integer argument to -maxdepth")
        return paths or ["."], predicates

    @staticmethod
    def _matches(name: str, is_dir: bool, predicates: dict[str, str]) -> bool:
        kind = predicates.get("-type")
        if kind is not None and kind != ("d" if is_dir else "f"):
            return False
        if "-name" in predicates and not fnmatch.fnmatchcase(name, predicates["-name"]):
            return False
        if "-iname" in predicates and not fnmatch.fnmatchcase(name.lower(), predicates["-iname"].lower()):
            return False
        return True

    def _visit(self, path: str, display: str, depth: int, predicates: dict[str, str]) -> Iterator[str]:
        if self._matches(posixpath.basename(display) or display, True, predicates):
            yield display
        max_depth = int(predicates.get("-maxdepth", -1))
        if max_depth != -1 and depth >= max_depth:
            return
        for entry in self.fs.readdir(path, with_file_types=True):
            child_display = f"{display.rstrip('/')}/{entry.name}"
            child_path = posixpath.join(path, entry.name)
            if entry.is_dir:
                yield from self._visit(child_path, child_display, depth + 1, predicates)
            elif self._matches(entry.name, False, predicates):
                yield child_display

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        paths, predicates = self._parse(args)
        results: list[str] = []
        for operand in paths:
            target = self.resolve(cwd, operand)
            try:
                info = self.fs.stat(target)
            except OSError as exc:
                raise self.file_error(operand, exc) from exc
            if info.is_dir:
                results.extend(self._visit(target, operand, 0, predicates))
            elif self._matches(posixpath.basename(operand), False, predicates):
                results.append(operand)
        return ok(join_lines(results))


def _diff_range(start: int, end: int) -> str:
    if end - start <= 1:
        return str(start + 1) if end > start else str(start)
    return f"{start + 1},{end}"


def normal_diff(old: list[str], new: list[str]) -> list[str]:
    """Classic ``diff`` output built from ``difflib`` opcodes."""
    output: list[str] = []
    matcher = difflib.SequenceMatcher(a=old, b=new, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        if tag == "delete":
            output.append(f"{_diff_range(i1, i2)}d{j1}")
            output.extend(f"< {line}" for line in old[i1:i2])
        elif tag == "insert":
            output.append(f"{i1}a{_diff_range(j1, j2)}")
            output.extend(f"> {line}" for line in new[j1:j2])
        else:
            output.append(f"{_diff_range(i1, i2)}c{_diff_range(j1, j2)}")
            output.extend(f"< {line}" for line in old[i1:i2])
            output.append("---")
            output.extend(f"> {line}" for line in new[j1:j2])
    return output


class DiffCommand(Command):
    name = "diff"
    description = "Compare files line by line"
    usage = "diff [-u] [-q] file1 file2"

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        unified = brief = False
        files: list[str] = []
        for arg in args:
            if arg.startswith("-") and arg != "-":
                for flag in arg[1:]:
                    if flag == "u":
                        unified = True
                    elif flag == "q":
                        brief = True
                    else:
                        raise self.usage_error(f"invalid option -- '{flag}'")
            else:
                files.append(arg)
        if len(files) != 2:
            raise CommandError(f"{self.name}: missing operand (need exactly 2 files)")

        first, second = files
        old_text, new_text = self.read_text(cwd, first), self.read_text(cwd, second)
        if old_text == new_text:
            return ok()
        if brief:
            return fail("", stdout=f"Files {first} and {second} differ\n")

        old, new = split_lines(old_text), split_lines(new_text)
        if unified:
            lines = list(difflib.unified_diff(old, new, fromfile=first, tofile=second, lineterm=""))
        else:
            lines = normal_diff(old, new)
        return fail("", stdout=join_lines(lines))
