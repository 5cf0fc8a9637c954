import re


def test_ls_lists_directories_first(invoke) -> None:
    assert invoke("ls").stdout == "src/  subdir/  README.md\n"
    assert invoke("ls", "subdir").stdout == "data.txt\n"


def test_ls_long_format(invoke) -> None:
    lines = invoke("ls", "-l").stdout.splitlines()
    assert lines[0].startswith("-rw-r--r-- 1 user user        7 ")
    assert lines[0].endswith(" README.md")
    assert lines[1].startswith("drwxr-xr-x") and lines[1].endswith(" src/")


def test_ls_hides_dotfiles_unless_all(session, invoke) -> None:
    session.fs.write_text("/project/subdir/.hidden", "")
    assert ".hidden" not in invoke("ls", "subdir").stdout
    assert ".hidden" in invoke("ls", "-a", "subdir").stdout


def test_ls_missing_path(invoke) -> None:
    result = invoke("ls", "nope")
    assert result.stderr == "ls: cannot access 'nope': No such file or directory"


def test_cat_numbers_lines_and_reads_absolute_paths(invoke) -> None:
    assert invoke("cat", "-n", "subdir/data.txt").stdout == "     1\tb\n     2\ta\n     3\tc\n"
    assert invoke("cat", "/home/user/notes.txt").stdout == "hello world\nsecond line\n"


def test_cat_directory(invoke) -> None:
    assert invoke("cat", "src").stderr == "cat: src: Is a directory"


def test_mkdir_touch_and_rm(session, invoke) -> None:
    fs = session.fs
    assert invoke("mkdir", "-p", "a/b/c").exit_code == 0
    assert fs.is_dir("/project/a/b/c")
    assert invoke("mkdir", "a").stderr == "mkdir: cannot create directory 'a': File exists"

    invoke("touch", "a/new.txt")
    assert fs.read_text("/project/a/new.txt") == ""

    assert invoke("rm", "a").stderr == "rm: cannot remove 'a': Is a directory"
    assert invoke("rm", "-r", "a").exit_code == 0
    assert not fs.exists("/project/a")


def test_rm_force_and_refusals(invoke) -> None:
    assert invoke("rm", "-f", "missing.txt").exit_code == 0
    assert invoke("rm", "missing.txt").stderr == "rm: cannot remove 'missing.txt': No such file or directory"
    assert "refusing to remove" in invoke("rm", "-rf", ".").stderr


def test_cp_files_and_trees(session, invoke) -> None:
    fs = session.fs
    invoke("cp", "README.md", "copy.md")
    assert fs.read_text("/project/copy.md") == "# Demo\n"

    invoke("cp", "README.md", "subdir")
    assert fs.read_text("/project/subdir/README.md") == "# Demo\n"

    assert invoke("cp", "src", "other").stderr == "cp: -r not specified; omitting directory 'src'"
    invoke("cp", "-r", "src", "other")
    assert fs.read_text("/project/other/app.py") == "print('hi')\n# TODO fix\n"

    result = invoke("cp", "-r", "src", "src/inner")
    assert "cannot copy a directory, 'src', into itself" in result.stderr


def test_mv_renames_and_moves_into_directories(session, invoke) -> None:
    fs = session.fs
    invoke("mv", "README.md", "INTRO.md")
    assert fs.exists("/project/INTRO.md") and not fs.exists("/project/README.md")

    invoke("mv", "INTRO.md", "subdir")
    assert fs.read_text("/project/subdir/INTRO.md") == "# Demo\n"

    invoke("mv", "src", "lib")
    assert fs.read_text("/project/lib/app.py").startswith("print")
    assert invoke("mv", "/project/lib", "x").stderr == "mv: absolute paths are not supported: /project/lib"


def test_ln_creates_symbolic_links(invoke) -> None:
    assert invoke("ln", "README.md", "link").stderr == "ln: hard links are not supported, use -s"
    assert invoke("ln", "-s", "README.md", "link").exit_code == 0
    assert invoke("cat", "link").stdout == "# Demo\n"
    long_listing = invoke("ls", "-l").stdout
    assert re.search(r"^lrwxrwxrwx .* link -> README\.md$", long_listing, re.MULTILINE)


def test_echo_options(invoke) -> None:
    assert invoke("echo", "a", "b").stdout == "a b\n"
    assert invoke("echo", "-n", "a").stdout == "a"
    assert invoke("echo", "-e", "a\\tb").stdout == "a\tb\n"
    assert invoke("echo", "a\\tb").stdout == "a\\tb\n"


def test_cd_errors(invoke) -> None:
    assert invoke("cd", "missing").stderr == "cd: missing: No such file or directory"
    assert invoke("cd", "README.md").stderr == "cd: README.md: Not a directory"
    assert invoke("cd", "a", "b").stderr == "cd: too many arguments"
    assert invoke("cd", "..").new_cwd == "/"


def test_env_and_whoami(invoke) -> None:
    env = invoke("env").stdout.splitlines()
    assert "PWD=/project" in env
    assert "USER=user" in env
    assert env == sorted(env)
    assert invoke("whoami").stdout == "user\n"


def test_date_formats(invoke) -> None:
    assert re.fullmatch(r"\d{4}\n", invoke("date", "+%Y").stdout)
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}\n", invoke("date", "-I").stdout)


def test_which_and_help(invoke) -> None:
    assert invoke("which", "cat").stdout == "cat: shell builtin\n"
    missing = invoke("which", "cat", "nope")
    assert missing.exit_code == 1
    assert missing.stdout == "cat: shell builtin\n"
    assert missing.stderr == "which: no nope in (quillsh builtins)"

    listing = invoke("help").stdout
    assert listing.startswith("Available commands:\n")
    assert "  sed " in listing
    assert "shakespeare" not in listing
    assert invoke("help", "wc").stdout == "wc - Count lines, words, and characters in files\nUsage: wc [-l] [-w] [-c] [file...]\n"
    assert invoke("help", "nope").stderr == "help: no help topics match 'nope'"


def test_shakespeare_is_hidden_but_runs(session, invoke) -> None:
    assert session.registry.has("shakespeare")
    assert "shakespeare" not in [spec.name for spec in session.registry.list_commands()]
    assert "From " in invoke("shakespeare").stdout


def test_git_needs_a_host_workspace(invoke) -> None:
    assert invoke("git").stdout.startswith("usage: git")
    assert invoke("git", "frobnicate").stderr == "git: 'frobnicate' is not a git command. See 'git --help'."
    assert invoke("git", "status").stderr == "git: repositories are only available in a host-backed workspace"
