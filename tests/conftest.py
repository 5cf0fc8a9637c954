from __future__ import annotations

import pytest

from quillsh.config import Settings
from quillsh.core.executor import ShellSession
from quillsh.core.types import CommandResult
from quillsh.fs import InMemoryFileSystem
from quillsh.logging_utils import configure_logging

# Install the sink once, against the stream pytest captures for the whole run.
configure_logging(level="WARNING")

PROJECT_FILES: dict[str, str | bytes] = {
    "/home/user/notes.txt": "hello world\nsecond line\n",
    "/project/README.md": "# Demo\n",
    "/project/src/app.py": "print('hi')\n# TODO fix\n",
    "/project/subdir/data.txt": "b\na\nc\n",
}


@pytest.fixture
def settings() -> Settings:
    return Settings(user="user", hostname="quillsh", env={}, curl_proxy=None, curl_timeout=30.0)


@pytest.fixture
def fs() -> InMemoryFileSystem:
    return InMemoryFileSystem(dict(PROJECT_FILES))


@pytest.fixture
def session(fs: InMemoryFileSystem, settings: Settings) -> ShellSession:
    return ShellSession(fs, cwd="/project", settings=settings)


@pytest.fixture
def invoke(session: ShellSession):
    """Call one command directly, bypassing the line parser."""

    def _invoke(name: str, *args: str, stdin: str | None = None) -> CommandResult:
        return session.registry.invoke(name, list(args), session.cwd, stdin)

    return _invoke
