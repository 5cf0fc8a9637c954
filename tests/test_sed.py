import pytest

from quillsh.commands.sed import apply_script, parse_script
from quillsh.errors import SedScriptError


def _sed(script: str, content: str, *, quiet: bool = False) -> str:
    return apply_script(parse_script(script), content, quiet=quiet)


def test_global_substitution() -> None:
    assert _sed("s/hello/hi/g", "hello hello world\n") == "hi hi world\n"


def test_substitution_replaces_first_match_without_g() -> None:
    assert _sed("s/o/0/", "foo boo\n") == "f0o boo\n"


def test_substitution_with_custom_delimiter_and_escaped_delimiter() -> None:
    assert parse_script("s|/usr|/opt|g").pattern == "/usr"
    spec = parse_script(r"s/a\/b/c/")
    assert spec.pattern == "a/b"
    assert _sed(r"s/a\/b/c/", "xa/by\n") == "xcy\n"


def test_replacement_groups_and_ampersand() -> None:
    assert _sed(r"s/(\w+) (\w+)/\2 \1/", "hello world\n") == "world hello\n"
    assert _sed("s/o/[&]/g", "foo\n") == "f[o][o]\n"


def test_case_insensitive_flag() -> None:
    assert _sed("s/HELLO/bye/I", "Hello there\n") == "bye there\n"


def test_invalid_regex_leaves_lines_unchanged() -> None:
    assert _sed("s/[/x/", "a[b\n") == "a[b\n"


def test_address_limits_substitution() -> None:
    assert _sed("2s/a/A/", "a\na\na\n") == "a\nA\na\n"
    assert _sed("/keep/s/x/y/", "keep x\ndrop x\n") == "keep y\ndrop x\n"


def test_delete_by_line_number_and_regex() -> None:
    assert _sed("2d", "a\nb\nc\n") == "a\nc\n"
    assert _sed("/b/d", "a\nb\nc\n") == "a\nc\n"


def test_last_line_address_never_matches() -> None:
    assert _sed("$d", "a\nb\n") == "a\nb\n"


def test_quit_after_line() -> None:
    assert _sed("2q", "a\nb\nc\n") == "a\nb\n"


def test_print_duplicates_or_filters_with_quiet() -> None:
    assert _sed("2p", "a\nb\n") == "a\nb\nb\n"
    assert _sed("/b/p", "a\nb\n", quiet=True) == "b\n"


def test_append_insert_and_change() -> None:
    assert _sed("1a\\inserted", "x\ny\n") == "x\ninserted\ny\n"
    assert _sed("1i top", "x\ny\n") == "top\nx\ny\n"
    assert _sed("2c\\new", "x\ny\n") == "x\nnew\n"


@pytest.mark.parametrize(
    ("script", "expected"),
    [
        ("s/b/B/", "a\nB\nc"),
        ("2d", "a\nc"),
        ("2p", "a\nb\nb\nc"),
        ("2q", "a\nb"),
        ("2a\\x", "a\nb\nx\nc"),
        ("2i\\x", "a\nx\nb\nc"),
        ("2c\\x", "a\nx\nc"),
    ],
)
@pytest.mark.parametrize("ending", ["", "\n"])
def test_every_verb_keeps_the_input_line_ending(script: str, expected: str, ending: str) -> None:
    assert _sed(script, "a\nb\nc" + ending) == expected + ending


def test_trailing_newline_is_preserved_exactly() -> None:
    assert _sed("s/hello/hi/", "hello") == "hi"
    assert _sed("d", "a\nb") == ""
    assert _sed("s/a/b/", "") == ""


@pytest.mark.parametrize("script", ["s/a/b", "s/a/b/z", "x", "sabc", "1a"])
def test_invalid_scripts_raise(script: str) -> None:
    with pytest.raises(SedScriptError, match="Invalid sed script"):
        parse_script(script)


def test_sed_command_reports_bad_script(invoke) -> None:
    result = invoke("sed", "s/a/b", stdin="a\n")
    assert result.exit_code == 1
    assert result.stderr == "sed: Invalid sed script: s/a/b"


def test_sed_command_chains_expressions(invoke) -> None:
    result = invoke("sed", "-e", "s/a/b/", "-e", "s/b/c/", stdin="a\n")
    assert result.stdout == "c\n"


def test_sed_in_place_rewrites_file(session, fs) -> None:
    assert session.execute("sed -i 's/Demo/Project/' README.md") == "(no output)"
    assert fs.read_text("/project/README.md") == "# Project\n"


def test_sed_in_place_requires_files(invoke) -> None:
    result = invoke("sed", "-i", "s/a/b/", stdin="a\n")
    assert result.exit_code == 1
    assert "no input files" in result.stderr


def test_sed_reads_files(invoke) -> None:
    assert invoke("sed", "-n", "/TODO/p", "src/app.py").stdout == "# TODO fix\n"


def test_sed_rejects_absolute_paths(invoke) -> None:
    result = invoke("sed", "s/a/b/", "/home/user/notes.txt")
    assert result.exit_code == 1
    assert result.stderr == "sed: absolute paths are not supported: /home/user/notes.txt"
