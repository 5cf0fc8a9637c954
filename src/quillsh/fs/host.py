"""Filesystem backed by a directory on the host."""

from __future__ import annotations

import errno
import os
import posixpath
from pathlib import Path

from .base import DirEntry, FileStat, FileSystem
from .paths import normalize


def is_within_directory(directory: str | Path, path: str | Path) -> bool:
    """Check if a path is within a directory.

    Args:
        directory: The directory to check within
        path: The path to check

    Returns:
        True if the path is within the directory
    """
    try:
        directory = Path(directory).resolve()
        path = Path(path).resolve()
        path.relative_to(directory)
    except ValueError:
        return False

    return True


class HostFileSystem(FileSystem):
    """Expose a host directory as the sandbox root ``/``.

    Every virtual path is mapped below ``root``; paths that resolve outside of
    it (through ``..`` or symlinks) are refused with ``PermissionError``.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()
        if not self.root.is_dir():
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(root))

    def host_path(self, path: str) -> Path:
        """Map a virtual path to the host path it stands for."""
        relative = normalize(path).lstrip("/")
        candidate = self.root / relative if relative else self.root
        if not is_within_directory(self.root, candidate):
            raise PermissionError(errno.EACCES, os.strerror(errno.EACCES), path)
        return candidate

    def read_bytes(self, path: str) -> bytes:
        return self.host_path(path).read_bytes()

    def write_bytes(self, path: str, data: bytes) -> None:
        self.host_path(path).write_bytes(data)

    def stat(self, path: str) -> FileStat:
        host = self.host_path(path)
        info = host.stat()
        return FileStat(
            is_file=host.is_file(),
            is_dir=host.is_dir(),
            size=info.st_size,
            mtime_ms=info.st_mtime * 1000,
            is_symlink=host.is_symlink(),
        )

    def _list_entries(self, path: str) -> list[DirEntry]:
        host = self.host_path(path)
        with os.scandir(host) as scan:
            return [DirEntry(name=entry.name, is_file=entry.is_file(), is_dir=entry.is_dir()) for entry in scan]

    def mkdir(self, path: str, *, parents: bool = False) -> None:
        self.host_path(path).mkdir(parents=parents, exist_ok=parents)

    def rename(self, source: str, target: str) -> None:
        self.host_path(source).rename(self.host_path(target))

    def unlink(self, path: str) -> None:
        self.host_path(path).unlink()

    def rmdir(self, path: str) -> None:
        if normalize(path) == "/":
            raise OSError(errno.EBUSY, os.strerror(errno.EBUSY), path)
        self.host_path(path).rmdir()

    def symlink(self, target: str, path: str) -> None:
        link = self.host_path(path)
        if not is_within_directory(self.root, link.parent / target):
            raise PermissionError(errno.EACCES, os.strerror(errno.EACCES), target)
        os.symlink(target, link)

    def readlink(self, path: str) -> str:
        normalized = normalize(path)
        # Only the parent goes through host_path(); resolving the link itself would follow it.
        parent = self.host_path(posixpath.dirname(normalized))
        return os.readlink(parent / posixpath.basename(normalized))
