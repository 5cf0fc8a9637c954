def test_grep_with_line_numbers(invoke) -> None:
    assert invoke("grep", "-n", "TODO", "src/app.py").stdout == "2:# TODO fix\n"


def test_grep_recursive_prefixes_file_names(invoke) -> None:
    assert invoke("grep", "-r", "TODO", ".").stdout == "./src/app.py:# TODO fix\n"
    assert invoke("grep", "-r", "TODO").stdout == "./src/app.py:# TODO fix\n"


def test_grep_flags(invoke) -> None:
    content = "Alpha\nbeta\nALPHA beta\n"
    assert invoke("grep", "-i", "alpha", stdin=content).stdout == "Alpha\nALPHA beta\n"
    assert invoke("grep", "-v", "beta", stdin=content).stdout == "Alpha\n"
    assert invoke("grep", "-c", "beta", stdin=content).stdout == "2\n"
    assert invoke("grep", "-F", "a.", stdin="a.b\nab\n").stdout == "a.b\n"


def test_grep_lists_matching_files(invoke) -> None:
    result = invoke("grep", "-l", ".", "README.md", "subdir/data.txt")
    assert result.stdout == "README.md\nsubdir/data.txt\n"


def test_grep_without_match_exits_one(invoke) -> None:
    result = invoke("grep", "absent", "README.md")
    assert result.exit_code == 1
    assert result.stdout == ""
    assert result.stderr == ""


def test_grep_invalid_regex_falls_back_to_literal(invoke) -> None:
    assert invoke("grep", "[", stdin="a[b\nab\n").stdout == "a[b\n"


def test_grep_directory_without_recursion(invoke) -> None:
    result = invoke("grep", "x", "src")
    assert result.stderr == "grep: src: Is a directory"


def test_find_by_name_and_type(invoke) -> None:
    assert invoke("find", ".", "-name", "*.py").stdout == "./src/app.py\n"
    assert invoke("find", "-type", "d").stdout == ".\n./src\n./subdir\n"
    assert invoke("find", ".", "-maxdepth", "1", "-type", "f").stdout == "./README.md\n"
    assert invoke("find", "subdir", "-iname", "DATA.TXT").stdout == "subdir/data.txt\n"


def test_find_rejects_unknown_predicate(invoke) -> None:
    result = invoke("find", ".", "-newer", "x")
    assert result.stderr == "find: unknown predicate '-newer'"


def test_diff_normal_format(session, invoke) -> None:
    session.fs.write_text("/project/a.txt", "x\ny\n")
    session.fs.write_text("/project/b.txt", "x\nz\n")
    result = invoke("diff", "a.txt", "b.txt")
    assert result.exit_code == 1
    assert result.stdout == "2c2\n< y\n---\n> z\n"


def test_diff_unified_and_brief(session, invoke) -> None:
    session.fs.write_text("/project/a.txt", "x\ny\n")
    session.fs.write_text("/project/b.txt", "x\nz\n")
    unified = invoke("diff", "-u", "a.txt", "b.txt").stdout.splitlines()
    assert unified[:2] == ["--- a.txt", "+++ b.txt"]
    assert unified[-2:] == ["-y", "+z"]
    assert invoke("diff", "-q", "a.txt", "b.txt").stdout == "Files a.txt and b.txt differ\n"


def test_diff_identical_files(invoke) -> None:
    result = invoke("diff", "README.md", "README.md")
    assert result.exit_code == 0
    assert result.stdout == ""


def test_diff_needs_two_files(invoke) -> None:
    assert invoke("diff", "README.md").stderr == "diff: missing operand (need exactly 2 files)"
