"""Filesystem capability consumed by shell commands."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal, overload


@dataclass(frozen=True)
class FileStat:
    """Subset of stat information the commands rely on."""

    is_file: bool
    is_dir: bool
    size: int = 0
    mtime_ms: float | None = None
    is_symlink: bool = False


@dataclass(frozen=True)
class DirEntry:
    """One directory listing entry."""

    name: str
    is_file: bool
    is_dir: bool

    def __str__(self) -> str:
        return self.name


class FileSystem(ABC):
    """Abstract virtual filesystem.

    Paths are absolute POSIX-style strings rooted at ``/``. Implementations
    report failures with the builtin ``OSError`` family so that callers can
    handle them the same way they would handle ``pathlib`` errors.
    """

    @abstractmethod
    def read_bytes(self, path: str) -> bytes: ...

    @abstractmethod
    def write_bytes(self, path: str, data: bytes) -> None: ...

    @abstractmethod
    def stat(self, path: str) -> FileStat: ...

    @abstractmethod
    def _list_entries(self, path: str) -> list[DirEntry]: ...

    @abstractmethod
    def mkdir(self, path: str, *, parents: bool = False) -> None: ...

    @abstractmethod
    def rename(self, source: str, target: str) -> None: ...

    @abstractmethod
    def unlink(self, path: str) -> None: ...

    @abstractmethod
    def rmdir(self, path: str) -> None: ...

    @abstractmethod
    def symlink(self, target: str, path: str) -> None: ...

    @abstractmethod
    def readlink(self, path: str) -> str: ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        return self.read_bytes(path).decode(encoding, errors="replace")

    def write_text(self, path: str, text: str, encoding: str = "utf-8") -> None:
        self.write_bytes(path, text.encode(encoding))

    @overload
    def read_file(self, path: str, encoding: None = None) -> bytes: ...

    @overload
    def read_file(self, path: str, encoding: str) -> str: ...

    def read_file(self, path: str, encoding: str | None = None) -> bytes | str:
        if encoding is None:
            return self.read_bytes(path)
        return self.read_text(path, encoding)

    def write_file(self, path: str, data: bytes | str, encoding: str = "utf-8") -> None:
        if isinstance(data, str):
            self.write_text(path, data, encoding)
        else:
            self.write_bytes(path, data)

    @overload
    def readdir(self, path: str, *, with_file_types: Literal[False] = False) -> list[str]: ...

    @overload
    def readdir(self, path: str, *, with_file_types: Literal[True]) -> list[DirEntry]: ...

    def readdir(self, path: str, *, with_file_types: bool = False) -> list[str] | list[DirEntry]:
        entries = sorted(self._list_entries(path), key=lambda entry: entry.name)
        if with_file_types:
            return entries
        return [entry.name for entry in entries]

    def exists(self, path: str) -> bool:
        try:
            self.stat(path)
        except OSError:
            return False
        return True

    def is_dir(self, path: str) -> bool:
        try:
            return self.stat(path).is_dir
        except OSError:
            return False
