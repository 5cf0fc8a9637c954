"""Dictionary-backed filesystem used for sandboxes and tests."""

from __future__ import annotations

import errno
import os
import posixpath
import time
from dataclasses import dataclass, field

from .base import DirEntry, FileStat, FileSystem
from .paths import normalize, parent


def _error(code: int, path: str) -> OSError:
    # OSError picks the matching subclass (FileNotFoundError, ...) from the errno.
    return OSError(code, os.strerror(code), path)


def _now_ms() -> float:
    return time.time() * 1000


@dataclass
class _FileNode:
    data: bytes = b""
    mtime_ms: float = field(default_factory=_now_ms)


class InMemoryFileSystem(FileSystem):
    """A virtual filesystem kept entirely in process memory.

    Symlinks are emulated: the link path receives a copy of the target file
    and the original target string is kept as metadata, so ``readlink``
    returns exactly what was passed to ``symlink``.
    """

    def __init__(self, files: dict[str, str | bytes] | None = None) -> None:
        self._dirs: dict[str, float] = {"/": _now_ms()}
        self._files: dict[str, _FileNode] = {}
        self._links: dict[str, str] = {}
        for path, content in (files or {}).items():
            self.mkdir(parent(path), parents=True)
            self.write_file(path, content)

    def _require_parent_dir(self, path: str) -> None:
        directory = parent(path)
        if directory in self._dirs:
            return
        if directory in self._files:
            raise _error(errno.ENOTDIR, directory)
        raise _error(errno.ENOENT, path)

    def read_bytes(self, path: str) -> bytes:
        path = normalize(path)
        if path in self._dirs:
            raise _error(errno.EISDIR, path)
        node = self._files.get(path)
        if node is None:
            raise _error(errno.ENOENT, path)
        return node.data

    def write_bytes(self, path: str, data: bytes) -> None:
        path = normalize(path)
        if path in self._dirs:
            raise _error(errno.EISDIR, path)
        self._require_parent_dir(path)
        self._files[path] = _FileNode(data=bytes(data))

    def stat(self, path: str) -> FileStat:
        path = normalize(path)
        if path in self._dirs:
            return FileStat(is_file=False, is_dir=True, size=0, mtime_ms=self._dirs[path])
        node = self._files.get(path)
        if node is None:
            raise _error(errno.ENOENT, path)
        return FileStat(
            is_file=True,
            is_dir=False,
            size=len(node.data),
            mtime_ms=node.mtime_ms,
            is_symlink=path in self._links,
        )

    def _list_entries(self, path: str) -> list[DirEntry]:
        path = normalize(path)
        if path in self._files:
            raise _error(errno.ENOTDIR, path)
        if path not in self._dirs:
            raise _error(errno.ENOENT, path)
        entries = [
            DirEntry(name=posixpath.basename(child), is_file=False, is_dir=True)
            for child in self._dirs
            if child != "/" and posixpath.dirname(child) == path
        ]
        entries.extend(
            DirEntry(name=posixpath.basename(child), is_file=True, is_dir=False)
            for child in self._files
            if posixpath.dirname(child) == path
        )
        return entries

    def mkdir(self, path: str, *, parents: bool = False) -> None:
        path = normalize(path)
        if path in self._files:
            raise _error(errno.EEXIST, path)
        if path in self._dirs:
            if parents:
                return
            raise _error(errno.EEXIST, path)
        if parents:
            self.mkdir(posixpath.dirname(path), parents=True)
        else:
            self._require_parent_dir(path)
        self._dirs[path] = _now_ms()

    def rename(self, source: str, target: str) -> None:
        source, target = normalize(source), normalize(target)
        self._require_parent_dir(target)
        if source in self._files:
            if target in self._dirs:
                raise _error(errno.EISDIR, target)
            self._files[target] = self._files.pop(source)
            if source in self._links:
                self._links[target] = self._links.pop(source)
            return
        if source not in self._dirs:
            raise _error(errno.ENOENT, source)
        if source == "/" or target.startswith(source + "/"):
            raise _error(errno.EINVAL, target)
        if target in self._files or target in self._dirs:
            raise _error(errno.EEXIST, target)
        prefix = source + "/"
        for old in sorted(self._dirs):
            if old == source or old.startswith(prefix):
                self._dirs[target + old[len(source) :]] = self._dirs.pop(old)
        for old in list(self._files):
            if old.startswith(prefix):
                new = target + old[len(source) :]
                self._files[new] = self._files.pop(old)
                if old in self._links:
                    self._links[new] = self._links.pop(old)

    def unlink(self, path: str) -> None:
        path = normalize(path)
        if path in self._dirs:
            raise _error(errno.EISDIR, path)
        if path not in self._files:
            raise _error(errno.ENOENT, path)
        del self._files[path]
        self._links.pop(path, None)

    def rmdir(self, path: str) -> None:
        path = normalize(path)
        if path in self._files:
            raise _error(errno.ENOTDIR, path)
        if path not in self._dirs:
            raise _error(errno.ENOENT, path)
        if path == "/":
            raise _error(errno.EBUSY, path)
        if self._list_entries(path):
            raise _error(errno.ENOTEMPTY, path)
        del self._dirs[path]

    def symlink(self, target: str, path: str) -> None:
        path = normalize(path)
        if path in self._files or path in self._dirs:
            raise _error(errno.EEXIST, path)
        resolved = normalize(posixpath.join(posixpath.dirname(path), target))
        if resolved in self._dirs:
            # Directory links cannot be emulated by copying a single file.
            raise _error(errno.EPERM, path)
        content = self.read_bytes(resolved)
        self.write_bytes(path, content)
        self._links[path] = target

    def readlink(self, path: str) -> str:
        path = normalize(path)
        if path in self._links:
            return self._links[path]
        if path in self._files or path in self._dirs:
            raise _error(errno.EINVAL, path)
        raise _error(errno.ENOENT, path)
