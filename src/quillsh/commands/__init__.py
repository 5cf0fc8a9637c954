"""Built-in shell commands."""

from .base import Command
from .binary import HexdumpCommand, UnzipCommand, ZipCommand
from .easter import ShakespeareCommand
from .files import CatCommand, CpCommand, LnCommand, LsCommand, MkdirCommand, MvCommand, RmCommand, TouchCommand
from .git import GitCommand
from .search import DiffCommand, FindCommand, GrepCommand
from .sed import SedCommand
from .system import (
    CdCommand,
    ClearCommand,
    DateCommand,
    EchoCommand,
    EnvCommand,
    HelpCommand,
    PwdCommand,
    WhichCommand,
    WhoamiCommand,
)
from .text import CutCommand, HeadCommand, SortCommand, TailCommand, TrCommand, UniqCommand, WcCommand
from .web import CurlCommand

__all__ = [
    "CatCommand",
    "CdCommand",
    "ClearCommand",
    "Command",
    "CpCommand",
    "CurlCommand",
    "CutCommand",
    "DateCommand",
    "DiffCommand",
    "EchoCommand",
    "EnvCommand",
    "FindCommand",
    "GitCommand",
    "GrepCommand",
    "HeadCommand",
    "HelpCommand",
    "HexdumpCommand",
    "LnCommand",
    "LsCommand",
    "MkdirCommand",
    "MvCommand",
    "PwdCommand",
    "RmCommand",
    "SedCommand",
    "ShakespeareCommand",
    "SortCommand",
    "TailCommand",
    "TouchCommand",
    "TrCommand",
    "UniqCommand",
    "UnzipCommand",
    "WcCommand",
    "WhichCommand",
    "WhoamiCommand",
    "ZipCommand",
]
