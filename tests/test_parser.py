import pytest

from quillsh.core.parser import extract_redirection, parse_invocation, split_compound, tokenize


def test_tokenize_keeps_quoted_words_together() -> None:
    assert tokenize('grep -n "hello world" file.txt') == ["grep", "-n", "hello world", "file.txt"]
    assert tokenize("echo 'single quoted'  tail") == ["echo", "single quoted", "tail"]


def test_tokenize_splits_on_tabs_and_repeated_blanks() -> None:
    assert tokenize("a\t  b   c") == ["a", "b", "c"]
    assert tokenize("   ") == []


def test_tokenize_keeps_explicit_empty_argument() -> None:
    assert tokenize("echo '' x") == ["echo", "", "x"]


def test_tokenize_unterminated_quote_swallows_rest_of_line() -> None:
    assert tokenize("echo 'never closed here") == ["echo", "never closed here"]


def test_tokenize_other_quote_is_literal_inside_quotes() -> None:
    assert tokenize("echo \"it's\"") == ["echo", "it's"]


def test_extract_redirection_ignores_quoted_gt() -> None:
    redirection = extract_redirection('echo "a > b" > out.txt')
    assert redirection.command == 'echo "a > b"'
    assert redirection.redirect_type == ">"
    assert redirection.redirect_file == "out.txt"


def test_extract_redirection_append_with_quoted_target() -> None:
    redirection = extract_redirection("echo hi >> 'log file.txt'")
    assert redirection.redirect_type == ">>"
    assert redirection.redirect_file == "log file.txt"


def test_extract_redirection_without_operator() -> None:
    redirection = extract_redirection("  ls -l  ")
    assert redirection.command == "ls -l"
    assert redirection.redirect_type is None
    assert redirection.redirect_file is None


def test_split_compound_records_operators_left_to_right() -> None:
    segments = split_compound("a && b || c; d | e")
    assert [segment.command_text for segment in segments] == ["a", "b", "c", "d", "e"]
    assert [segment.operator_after for segment in segments] == ["&&", "||", ";", "|", None]


def test_split_compound_respects_quotes() -> None:
    segments = split_compound("echo 'a && b | c' && echo done")
    assert [segment.command_text for segment in segments] == ["echo 'a && b | c'", "echo done"]


def test_split_compound_drops_blank_segments() -> None:
    assert split_compound(" ; ;  ") == []
    segments = split_compound("echo a;; echo b")
    assert [segment.command_text for segment in segments] == ["echo a", "echo b"]


def test_parse_invocation_splits_name_args_and_redirection() -> None:
    invocation = parse_invocation("grep -i 'two words' notes.txt >> hits.txt")
    assert invocation.name == "grep"
    assert invocation.args == ["-i", "two words", "notes.txt"]
    assert invocation.redirect_type == ">>"
    assert invocation.redirect_file == "hits.txt"


def test_parse_invocation_of_empty_text() -> None:
    invocation = parse_invocation("")
    assert invocation.name == ""
    assert invocation.args == []


def _join(words: list[str]) -> str:
    quoted = []
    for word in words:
        if word and not any(char in word for char in " \t'\""):
            quoted.append(word)
        elif "'" in word:
            quoted.append(f'"{word}"')
        else:
            quoted.append(f"'{word}'")
    return " ".join(quoted)


@pytest.mark.parametrize(
    "line",
    [
        "ls -la src",
        'grep -n "hello world" file.txt',
        "echo 'a  b'\tc",
        "echo \"it's\" 'say \"hi\"'",
        "echo '' x",
    ],
)
def test_tokenize_join_tokenize_is_stable(line: str) -> None:
    words = tokenize(line)
    assert tokenize(_join(words)) == words
