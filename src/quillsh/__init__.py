"""quillsh - a sandboxed shell interpreter for agents and humans."""

from .config import Settings, get_settings
from .core.executor import ShellSession, format_result
from .core.registry import CommandRegistry, build_default_registry
from .core.types import CommandResult, CommandSpec
from .fs import FileSystem, HostFileSystem, InMemoryFileSystem
from .session import create_session

__version__ = "0.1.0"

__all__ = [
    "CommandRegistry",
    "CommandResult",
    "CommandSpec",
    "FileSystem",
    "HostFileSystem",
    "InMemoryFileSystem",
    "Settings",
    "ShellSession",
    "build_default_registry",
    "create_session",
    "format_result",
    "get_settings",
]
