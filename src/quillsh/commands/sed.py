"""Stream editor.

A script is parsed once into a :class:`SedSpec` and then applied line by line
by :func:`apply_script`, which is pure and knows nothing about files.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Literal

from loguru import logger

from ..core.types import CommandResult
from ..errors import SedScriptError
from .base import Command, ok

SedVerb = Literal["s", "d", "p", "q", "a", "i", "c"]

_ADDRESS_RE = re.compile(r"(\d+|\$|/(?:\\.|[^/\\])*/)?")
_SUBSTITUTE_FLAGS = frozenset("giI")


@dataclass(frozen=True)
class SedSpec:
    """One parsed sed command."""

    verb: SedVerb
    address: str | None = None
    pattern: str | None = None
    replacement: str | None = None
    flags: str = ""
    text: str | None = None


def _split_unescaped(body: str, delimiter: str) -> list[str]:
    parts: list[str] = []
    current: list[str] = []
    index = 0
    while index < len(body):
        char = body[index]
        if char == "\\" and index + 1 < len(body):
            following = body[index + 1]
            # An escaped delimiter stands for itself; other escapes stay for the regex engine.
            current.append(following if following == delimiter else char + following)
            index += 2
            continue
        if char == delimiter:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
        index += 1
    parts.append("".join(current))
    return parts


def _parse_substitute(script: str, address: str | None, rest: str) -> SedSpec:
    if len(rest) < 2 or rest[1].isalnum() or rest[1] in "\\\n":
        raise SedScriptError(f"Invalid sed script: {script}")
    parts = _split_unescaped(rest[2:], rest[1])
    if len(parts) != 3 or not set(parts[2]) <= _SUBSTITUTE_FLAGS:
        raise SedScriptError(f"Invalid sed script: {script}")
    pattern, replacement, flags = parts
    return SedSpec(verb="s", address=address, pattern=pattern, replacement=replacement, flags=flags)


def parse_script(script: str) -> SedSpec:
    """Parse ``[address]verb[body]`` into a :class:`SedSpec`.

    Raises:
        SedScriptError: when the script matches none of the supported forms.
    """
    match = _ADDRESS_RE.match(script)
    address = match.group(1) if match else None
    rest = script[match.end() :] if match else script

    if rest.startswith("s"):
        return _parse_substitute(script, address, rest)
    if rest in ("d", "p", "q"):
        return SedSpec(verb=rest, address=address)  # type: ignore[arg-type]
    if rest[:1] in ("a", "i", "c") and len(rest) > 1:
        if rest[1] == "\\":
            return SedSpec(verb=rest[0], address=address, text=rest[2:])  # type: ignore[arg-type]
        if rest[1] in " \t":
            return SedSpec(verb=rest[0], address=address, text=rest[2:].lstrip())  # type: ignore[arg-type]
    raise SedScriptError(f"Invalid sed script: {script}")


def _expand_replacement(template: str, match: re.Match[str]) -> str:
    out: list[str] = []
    index = 0
    while index < len(template):
        char = template[index]
        if char == "\\" and index + 1 < len(template):
            following = template[index + 1]
            if following.isdigit():
                out.append(match.group(int(following)) or "")
            elif following == "n":
                out.append("\n")
            elif following == "t":
                out.append("\t")
            else:
                out.append(following)
            index += 2
            continue
        out.append(match.group(0) if char == "&" else char)
        index += 1
    return "".join(out)


def _address_matcher(address: str | None) -> Callable[[int, str], bool]:
    if address is None:
        return lambda number, line: True
    if address.isdigit():
        target = int(address)
        return lambda number, line: number == target
    if address == "$":
        # Last-line addressing is parsed but never selects a line.
        return lambda number, line: False
    try:
        regex = re.compile(address[1:-1])
    except re.error as exc:
        logger.warning("sed.address.invalid address={} error={}", address, exc)
        return lambda number, line: False
    return lambda number, line: regex.search(line) is not None


def _substituter(spec: SedSpec) -> Callable[[str], str]:
    flags = re.IGNORECASE if ("i" in spec.flags or "I" in spec.flags) else 0
    try:
        regex = re.compile(spec.pattern or "", flags)
    except re.error as exc:
        logger.warning("sed.pattern.invalid pattern={} error={}", spec.pattern, exc)
        return lambda line: line
    count = 0 if "g" in spec.flags else 1
    replacement = spec.replacement or ""

    def substitute(line: str) -> str:
        try:
            return regex.sub(lambda match: _expand_replacement(replacement, match), line, count=count)
        except (re.error, IndexError):
            # A back-reference to a group the pattern does not have.
            return line

    return substitute


def apply_script(spec: SedSpec, content: str, *, quiet: bool = False) -> str:
    """Apply one parsed command to ``content``.

    The trailing newline of the input is preserved exactly: present in the
    output if and only if the input had one, even when every line is
    deleted.
    """
    ends_with_newline = content.endswith("\n")
    lines = content.split("\n") if content else []
    if ends_with_newline:
        lines.pop()

    selects = _address_matcher(spec.address)
    substitute = _substituter(spec) if spec.verb == "s" else None
    text = spec.text or ""
    output: list[str] = []
    for number, line in enumerate(lines, start=1):
        selected = selects(number, line)
        if spec.verb == "s":
            if selected and substitute is not None:
                line = substitute(line)
            if not quiet:
                output.append(line)
        elif spec.verb == "d":
            if not selected and not quiet:
                output.append(line)
        elif spec.verb == "p":
            if selected:
                output.append(line)
            if not quiet:
                output.append(line)
        elif spec.verb == "q":
            if not quiet:
                output.append(line)
            if selected:
                break
        elif spec.verb == "a":
            if not quiet:
                output.append(line)
            if selected:
                output.append(text)
        elif spec.verb == "i":
            if selected:
                output.append(text)
            if not quiet:
                output.append(line)
        elif spec.verb == "c":
            if selected:
                output.append(text)
            elif not quiet:
                output.append(line)

    if not output:
        return "\n" if ends_with_newline else ""
    result = "\n".join(output)
    return result + "\n" if ends_with_newline else result


class SedCommand(Command):
    name = "sed"
    description = "Stream editor for filtering and transforming text"
    usage = "sed [-i] [-n] [-e script] [script] [file...]"

    def _parse_args(self, args: list[str]) -> tuple[bool, bool, list[str], list[str]]:
        quiet = in_place = False
        scripts: list[str] = []
        files: list[str] = []
        expecting_script = False
        for arg in args:
            if expecting_script:
                scripts.append(arg)
                expecting_script = False
            elif arg.startswith("-") and arg != "-":
                for flag in arg[1:]:
                    if flag == "n":
                        quiet = True
                    elif flag == "i":
                        in_place = True
                    elif flag == "e":
                        expecting_script = True
                    elif flag not in ("E", "r"):
                        raise self.usage_error(f"invalid option -- '{flag}'")
            elif not scripts:
                scripts.append(arg)
            else:
                files.append(arg)
        return quiet, in_place, scripts, files

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        quiet, in_place, scripts, files = self._parse_args(args)
        if not scripts:
            raise self.usage_error("missing script")
        try:
            specs = [parse_script(script) for script in scripts]
        except SedScriptError as exc:
            raise SedScriptError(f"{self.name}: {exc.message}") from exc

        if in_place and not files:
            raise self.usage_error("no input files")
        if stdin is not None and not in_place:
            content = stdin
        elif files:
            content = "".join(self.read_text(cwd, path) for path in files)
        else:
            return ok()

        for spec in specs:
            content = apply_script(spec, content, quiet=quiet)

        if in_place:
            for path in files:
                self.fs.write_text(self.resolve(cwd, path), content)
            return ok()
        return ok(content)
