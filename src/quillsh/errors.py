"""Application-level exception types for quillsh."""

from __future__ import annotations


class QuillshError(Exception):
    """Base exception for quillsh."""


class ConfigurationError(QuillshError):
    """Raised when settings cannot be turned into a working session."""


class WorkspaceNotFoundError(ConfigurationError):
    """Raised when the configured workspace path does not exist."""


class CommandError(QuillshError):
    """Raised inside a command to end it with a message on stderr.

    The registry turns it into a ``CommandResult`` at the command boundary, so
    commands can bail out from helpers without threading results back up.
    """

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class SedScriptError(CommandError):
    """Raised when a sed script does not match any supported form."""
