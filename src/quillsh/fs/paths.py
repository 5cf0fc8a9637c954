"""Path helpers for the sandbox's POSIX-style virtual paths."""

from __future__ import annotations

import posixpath
import re

_WINDOWS_DRIVE_RE = re.compile(r"^[A-Za-z]:[\\/]")


def is_absolute(path: str) -> bool:
    """Return True for POSIX, UNC-ish and drive-letter absolute paths."""
    return path.startswith(("/", "\\")) or _WINDOWS_DRIVE_RE.match(path) is not None


def normalize(path: str) -> str:
    """Normalize a virtual path, always anchored at '/'."""
    return posixpath.normpath("/" + path.lstrip("/"))


def resolve(cwd: str, path: str) -> str:
    """Resolve ``path`` against ``cwd`` unless it is already absolute."""
    if is_absolute(path):
        return normalize(path.replace("\\", "/"))
    return normalize(posixpath.join(cwd, path))


def parent(path: str) -> str:
    return posixpath.dirname(normalize(path)) or "/"


def basename(path: str) -> str:
    return posixpath.basename(path.rstrip("/")) or path
