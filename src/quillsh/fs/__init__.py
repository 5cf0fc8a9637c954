"""Virtual filesystem backends."""

from .base import DirEntry, FileStat, FileSystem
from .host import HostFileSystem
from .memory import InMemoryFileSystem

__all__ = [
    "DirEntry",
    "FileStat",
    "FileSystem",
    "HostFileSystem",
    "InMemoryFileSystem",
]
