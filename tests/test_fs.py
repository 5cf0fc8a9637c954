import errno
from pathlib import Path

import pytest

from quillsh.fs import HostFileSystem, InMemoryFileSystem
from quillsh.fs.paths import basename, is_absolute, normalize, parent, resolve


def test_path_helpers() -> None:
    assert resolve("/a/b", "../c") == "/a/c"
    assert resolve("/a", "/x/./y/") == "/x/y"
    assert normalize("//a//b/..") == "/a"
    assert parent("/a/b") == "/a"
    assert parent("/") == "/"
    assert basename("dir/file.txt") == "file.txt"
    assert basename("dir/") == "dir"
    assert is_absolute("/x")
    assert is_absolute("C:\\tmp")
    assert not is_absolute("x/y")


def test_memory_read_write_and_listing() -> None:
    fs = InMemoryFileSystem({"/a/b.txt": "B", "/a/c/d.txt": b"D"})
    assert fs.read_text("/a/b.txt") == "B"
    assert fs.read_file("/a/c/d.txt") == b"D"
    assert fs.readdir("/a") == ["b.txt", "c"]
    entries = fs.readdir("/a", with_file_types=True)
    assert [(entry.name, entry.is_dir) for entry in entries] == [("b.txt", False), ("c", True)]


def test_memory_errors_use_os_error_subclasses() -> None:
    fs = InMemoryFileSystem({"/a/b.txt": "B"})
    with pytest.raises(FileNotFoundError):
        fs.read_bytes("/missing")
    with pytest.raises(IsADirectoryError):
        fs.read_bytes("/a")
    with pytest.raises(FileNotFoundError):
        fs.mkdir("/x/y")
    with pytest.raises(NotADirectoryError):
        fs.write_text("/a/b.txt/inner", "")
    with pytest.raises(OSError) as info:
        fs.rmdir("/a")
    assert info.value.errno == errno.ENOTEMPTY


def test_memory_rename_moves_subtree() -> None:
    fs = InMemoryFileSystem({"/a/c/d.txt": "D"})
    fs.rename("/a", "/z")
    assert fs.read_text("/z/c/d.txt") == "D"
    assert not fs.exists("/a")
    with pytest.raises(OSError):
        fs.rename("/z", "/z/c/inside")


def test_memory_symlink_keeps_target_string() -> None:
    fs = InMemoryFileSystem({"/a/b.txt": "B"})
    fs.symlink("b.txt", "/a/link")
    assert fs.read_text("/a/link") == "B"
    assert fs.readlink("/a/link") == "b.txt"
    assert fs.stat("/a/link").is_symlink
    with pytest.raises(OSError):
        fs.readlink("/a/b.txt")


def test_host_filesystem_maps_root(tmp_path: Path) -> None:
    fs = HostFileSystem(tmp_path)
    fs.mkdir("/docs")
    fs.write_text("/docs/readme.txt", "hi")
    assert (tmp_path / "docs" / "readme.txt").read_text(encoding="utf-8") == "hi"
    assert fs.readdir("/") == ["docs"]
    assert fs.stat("/docs").is_dir
    # ".." cannot climb above the mounted root.
    assert fs.host_path("/../..") == tmp_path.resolve()


def test_host_filesystem_refuses_escaping_symlinks(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    (tmp_path / "secret.txt").write_text("s", encoding="utf-8")
    (root / "escape").symlink_to(tmp_path / "secret.txt")

    fs = HostFileSystem(root)
    with pytest.raises(PermissionError):
        fs.read_text("/escape")
    with pytest.raises(PermissionError):
        fs.symlink("../secret.txt", "/link")
