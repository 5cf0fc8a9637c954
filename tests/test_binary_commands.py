import io
import zipfile


def test_hexdump_default_words(invoke) -> None:
    assert invoke("hexdump", stdin="AB").stdout == "0000000 4241\n0000002"
    assert invoke("hexdump", stdin="ABC").stdout == "0000000 4241 43  \n0000003"


def test_hexdump_canonical(invoke) -> None:
    output = invoke("hexdump", "-C", stdin="hi").stdout
    first, last = output.split("\n")
    assert first.startswith("00000000  68 69 ")
    assert first.endswith("  |hi|")
    assert last == "00000002"


def test_hexdump_length_and_skip(invoke) -> None:
    assert invoke("hexdump", "-n", "1", stdin="AB").stdout == "0000000 41  \n0000001"
    assert invoke("hexdump", "-s", "1", stdin="ABC").stdout == "0000001 4342\n0000003"


def test_hexdump_errors(invoke) -> None:
    assert invoke("hexdump", "-n", "x", stdin="A").stderr == "hexdump: invalid length: x"
    assert invoke("hexdump", "-n").stderr == "hexdump: option requires an argument -- n"
    assert invoke("hexdump", "-z").stderr == "hexdump: invalid option -- z"
    assert invoke("hexdump").stderr.startswith("hexdump: missing file operand")


def test_hexdump_reads_files_with_headers(invoke) -> None:
    output = invoke("hexdump", "README.md", "subdir/data.txt").stdout
    assert output.startswith("==> README.md <==\n0000000 2023")
    assert "==> subdir/data.txt <==" in output


def test_zip_then_unzip_into_directory(session, invoke) -> None:
    zipped = invoke("zip", "-r", "bundle.zip", "subdir")
    assert zipped.stdout == "  adding: subdir/\n  adding: subdir/data.txt\n"

    listing = invoke("unzip", "-l", "bundle.zip").stdout
    assert "subdir/data.txt" in listing

    extracted = invoke("unzip", "-d", "out", "bundle.zip")
    assert extracted.stdout == "Archive: bundle.zip\n   creating: subdir/\n  inflating: subdir/data.txt\n"
    assert session.fs.read_text("/project/out/subdir/data.txt") == "b\na\nc\n"

    again = invoke("unzip", "-d", "out", "bundle.zip")
    assert again.exit_code == 1
    assert again.stderr == "unzip: subdir/data.txt: File exists (use -o to overwrite)"
    assert invoke("unzip", "-o", "-q", "-d", "out", "bundle.zip").exit_code == 0


def test_zip_requires_recursion_for_directories(invoke) -> None:
    result = invoke("zip", "bundle.zip", "subdir")
    assert result.stderr == "zip: subdir: Is a directory (use -r to include)"
    assert invoke("zip", "bundle.zip").stderr.startswith("zip: no files to add")


def test_unzip_rejects_corrupted_archives(session, invoke) -> None:
    session.fs.write_text("/project/bad.zip", "not a zip")
    assert invoke("unzip", "bad.zip").stderr == "unzip: bad.zip: Archive is corrupted or invalid"


def test_unzip_skips_entries_outside_the_target(session, invoke) -> None:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as bundle:
        bundle.writestr("../evil.txt", "x")
        bundle.writestr("fine.txt", "ok")
    session.fs.write_bytes("/project/evil.zip", buffer.getvalue())

    result = invoke("unzip", "evil.zip")
    assert result.exit_code == 1
    assert "Path is outside allowed directories (skipped for security)" in result.stderr
    assert session.fs.read_text("/project/fine.txt") == "ok"
    assert not session.fs.exists("/evil.txt")


def test_unzip_rejects_destinations_outside_cwd(invoke) -> None:
    invoke("zip", "bundle.zip", "README.md")
    result = invoke("unzip", "-d", "/etc", "bundle.zip")
    assert result.exit_code == 1
    assert "outside allowed paths" in result.stderr


def test_unzip_closes_the_archive(session, invoke, monkeypatch) -> None:
    command = session.registry.get("unzip")
    original = command._open
    opened: list[zipfile.ZipFile] = []

    def _tracking(cwd: str, archive: str) -> zipfile.ZipFile:
        bundle = original(cwd, archive)
        opened.append(bundle)
        return bundle

    monkeypatch.setattr(command, "_open", _tracking)
    invoke("zip", "bundle.zip", "README.md")
    assert invoke("unzip", "-l", "bundle.zip").exit_code == 0
    assert invoke("unzip", "-d", "out", "bundle.zip").exit_code == 0
    assert len(opened) == 2
    assert all(bundle.fp is None for bundle in opened)


def test_unzip_creates_missing_parent_directories(session, invoke) -> None:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as bundle:
        bundle.writestr("deep/nested/file.txt", "x")
    session.fs.write_bytes("/project/nested.zip", buffer.getvalue())

    assert invoke("unzip", "nested.zip").stdout == "Archive: nested.zip\n  inflating: deep/nested/file.txt\n"
    assert session.fs.read_text("/project/deep/nested/file.txt") == "x"


def test_hexdump_canonical_final_offset_is_eight_digits(invoke) -> None:
    output = invoke("hexdump", "-C", stdin="x" * 17).stdout
    assert output.split("\n") == [
        "00000000  78 78 78 78 78 78 78 78  78 78 78 78 78 78 78 78  |xxxxxxxxxxxxxxxx|",
        "00000010  78                                                |x|",
        "00000011",
    ]
