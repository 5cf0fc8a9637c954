"""Version control dispatcher."""

from __future__ import annotations

import os
import shutil
import subprocess

from loguru import logger

from ..core.types import CommandResult
from ..errors import CommandError
from ..fs import HostFileSystem
from .base import Command, ok

GIT_TIMEOUT_SECONDS = 60

SUBCOMMAND_GROUPS: dict[str, dict[str, str]] = {
    "start a working area": {
        "clone": "Clone a repository into a new directory",
        "init": "Create an empty Git repository or reinitialize an existing one",
    },
    "work on the current change": {
        "add": "Add file contents to the index",
        "reset": "Reset current HEAD to the specified state",
        "stash": "Stash the changes in a dirty working directory away",
    },
    "examine the history and state": {
        "log": "Show commit logs",
        "show": "Show various types of objects",
        "status": "Show the working tree status",
        "diff": "Show changes between commits, commit and working tree, etc",
    },
    "grow, mark and tweak your common history": {
        "branch": "List, create, or delete branches",
        "checkout": "Switch branches or restore working tree files",
        "commit": "Record changes to the repository",
        "tag": "Create, list, delete or verify a tag object",
    },
    "collaborate": {
        "fetch": "Download objects and refs from another repository",
        "pull": "Fetch from and integrate with another repository or a local branch",
        "push": "Update remote refs along with associated objects",
        "remote": "Manage set of tracked repositories",
    },
    "configuration": {
        "config": "Get and set repository or global options",
    },
}
SUBCOMMANDS = {name for group in SUBCOMMAND_GROUPS.values() for name in group}


def help_text() -> str:
    lines = ["usage: git [--version] [--help] <command> [<args>]", "", "These are common Git commands:"]
    for title, commands in SUBCOMMAND_GROUPS.items():
        lines.append("")
        lines.append(title)
        lines.extend(f"   {name.ljust(10)} {description}" for name, description in commands.items())
    return "\n".join(lines) + "\n"


class GitCommand(Command):
    """Dispatch known subcommands to the host ``git`` binary.

    Only a host-backed workspace has a real directory for git to work in; on
    any other filesystem the command explains why it cannot run.
    """

    name = "git"
    description = "Git version control system"
    usage = "git <command> [<args>]"

    def run(self, args: list[str], cwd: str, stdin: str | None = None) -> CommandResult:
        if not args or args[0] in ("--help", "-h", "help"):
            return ok(help_text())
        if args[0] != "--version" and args[0] not in SUBCOMMANDS:
            raise CommandError(f"{self.name}: '{args[0]}' is not a git command. See 'git --help'.")
        if not isinstance(self.fs, HostFileSystem):
            raise CommandError(f"{self.name}: repositories are only available in a host-backed workspace")
        executable = shutil.which("git")
        if executable is None:
            raise CommandError(f"{self.name}: executable not found on the host")

        workdir = self.fs.host_path(cwd)
        logger.info("git.run args={} cwd={}", args, cwd)
        try:
            completed = subprocess.run(  # noqa: S603
                [executable, *args],
                cwd=workdir,
                input=stdin,
                capture_output=True,
                text=True,
                timeout=GIT_TIMEOUT_SECONDS,
                env={**os.environ, "GIT_TERMINAL_PROMPT": "0"},
            )
        except subprocess.TimeoutExpired as exc:
            raise CommandError(f"{self.name}: timed out after {GIT_TIMEOUT_SECONDS} seconds") from exc
        return CommandResult(
            stdout=completed.stdout or "",
            stderr=(completed.stderr or "").rstrip("\n"),
            exit_code=completed.returncode,
        )
