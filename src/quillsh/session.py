"""Session construction from settings."""

from __future__ import annotations

from .config import Settings
from .core.executor import ShellSession
from .errors import WorkspaceNotFoundError
from .fs import FileSystem, HostFileSystem, InMemoryFileSystem


def create_filesystem(settings: Settings) -> FileSystem:
    """Mount the configured workspace, or an empty in-memory tree when none is set."""
    if settings.workspace is None:
        return InMemoryFileSystem()
    workspace = settings.workspace.expanduser()
    if not workspace.is_dir():
        raise WorkspaceNotFoundError(f"workspace directory does not exist: {workspace}")
    return HostFileSystem(workspace.resolve())


def create_session(settings: Settings) -> ShellSession:
    return ShellSession(create_filesystem(settings), cwd=settings.cwd, settings=settings)
