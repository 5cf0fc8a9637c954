"""Compound command execution for one shell session."""

from __future__ import annotations

from dataclasses import replace

from loguru import logger

from ..commands.base import describe_os_error, fail
from ..config import Settings
from ..fs import FileSystem
from ..fs.paths import normalize, resolve
from .parser import parse_invocation, split_compound
from .registry import CommandRegistry, build_default_registry
from .types import CommandResult, CompoundSegment, Operator, ParsedInvocation

NO_OUTPUT = "(no output)"


def format_result(result: CommandResult) -> str:
    """Render stdout, stderr and a non-zero exit code as one block."""
    parts = [part for part in (result.stdout, result.stderr) if part]
    if not result.ok:
        parts.append(f"Exit code: {result.exit_code}")
    return "\n".join(parts)


def _join_stderr(first: str, second: str) -> str:
    return f"{first}\n{second}" if first else second


class ShellSession:
    """Interpreter state for one shell: a filesystem, a registry and a cwd.

    Segments of a compound line run strictly one after another. ``&&`` and
    ``||`` look at the exit code of the last segment that actually ran, a
    ``|`` hands stdout to the next segment instead of showing it, and a
    ``cd`` anywhere in the line moves every later segment.
    """

    def __init__(
        self,
        fs: FileSystem,
        *,
        cwd: str = "/",
        settings: Settings | None = None,
        registry: CommandRegistry | None = None,
    ) -> None:
        self.fs = fs
        self.settings = settings or Settings()
        self.registry = registry or build_default_registry(fs, self.settings)
        self._cwd = normalize(cwd)
        self.last_exit_code = 0

    @property
    def cwd(self) -> str:
        return self._cwd

    def execute(self, raw: str) -> str:
        """Run one line and return its formatted, human-readable output."""
        if not raw.strip():
            self.last_exit_code = 1
            return "Error: Empty command"

        logger.debug("shell.run.start cwd={} line={!r}", self._cwd, raw)
        results = self.run_segments(raw)
        if not results:
            self.last_exit_code = 1
            return "Error: No command specified"

        outputs: list[str] = []
        for index, (segment, result) in enumerate(results):
            if segment.operator_after == "|":
                # Output of a trailing pipe has no consumer, so it is shown.
                if index == len(results) - 1 and result.stdout:
                    outputs.append(result.stdout)
                continue
            text = format_result(result)
            if text:
                outputs.append(text)

        logger.debug("shell.run.end cwd={} segments={}", self._cwd, len(results))
        return "\n".join(outputs) or NO_OUTPUT

    def run_segments(self, raw: str) -> list[tuple[CompoundSegment, CommandResult]]:
        """Run a line and return the raw result of every segment that ran."""
        results: list[tuple[CompoundSegment, CommandResult]] = []
        last_exit_code = 0
        pipe_input: str | None = None
        previous: Operator | None = None

        for segment in split_compound(raw):
            skipped = (previous == "&&" and last_exit_code != 0) or (previous == "||" and last_exit_code == 0)
            if skipped:
                logger.debug("shell.segment.skip text={!r} operator={}", segment.command_text, previous)
                previous = segment.operator_after
                continue

            stdin = (pipe_input or "") if previous == "|" else None
            result = self._run_segment(segment.command_text, stdin)
            if result.new_cwd:
                self._cwd = result.new_cwd
            last_exit_code = result.exit_code
            pipe_input = result.stdout if segment.operator_after == "|" else None
            previous = segment.operator_after
            results.append((segment, result))

        self.last_exit_code = last_exit_code
        return results

    def _run_segment(self, text: str, stdin: str | None) -> CommandResult:
        invocation = parse_invocation(text)
        if not invocation.name:
            return fail("Error: No command specified")

        result = self.registry.invoke(invocation.name, invocation.args, self._cwd, stdin)
        logger.debug("shell.segment name={} exit={}", invocation.name, result.exit_code)
        if invocation.redirect_type is None:
            return result
        return self._redirect(result, invocation)

    def _redirect(self, result: CommandResult, invocation: ParsedInvocation) -> CommandResult:
        target = invocation.redirect_file
        if not target:
            message = "Redirection error: missing target file"
            return replace(result, stdout="", stderr=_join_stderr(result.stderr, message), exit_code=1)

        path = resolve(self._cwd, target)
        try:
            existing = ""
            if invocation.redirect_type == ">>" and self.fs.exists(path):
                existing = self.fs.read_text(path)
            self.fs.write_text(path, existing + result.stdout)
        except OSError as exc:
            logger.warning("shell.redirect.error target={} error={}", path, exc)
            message = f"Redirection error: {target}: {describe_os_error(exc)}"
            return replace(result, stdout="", stderr=_join_stderr(result.stderr, message), exit_code=1)
        return replace(result, stdout="")
