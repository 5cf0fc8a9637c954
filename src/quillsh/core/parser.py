"""Command line parsing: words, redirections and compound operators.

The three scanners share the same quoting rules but run independently of each
other: a ``>`` or ``&&`` inside single or double quotes is plain text, the
quote that opened a span is the only one that closes it, and there is no
backslash escaping.
"""

from __future__ import annotations

from dataclasses import dataclass

from .types import CompoundSegment, Operator, ParsedInvocation, RedirectType

_QUOTES = ("'", '"')
_BLANKS = (" ", "\t")


@dataclass(frozen=True)
class Redirection:
    """A segment with its trailing output redirection split off."""

    command: str
    redirect_type: RedirectType | None = None
    redirect_file: str | None = None


def tokenize(text: str) -> list[str]:
    """Split one segment into argument words, removing quotes.

    An unterminated quote swallows the rest of the line into the current
    word. An explicitly quoted empty string is kept as an empty argument.
    """

    words: list[str] = []
    current: list[str] = []
    quote: str | None = None
    quoted = False
    for char in text:
        if quote is None and char in _QUOTES:
            quote = char
            quoted = True
        elif quote is not None and char == quote:
            quote = None
        elif quote is None and char in _BLANKS:
            if current or quoted:
                words.append("".join(current))
            current, quoted = [], False
        else:
            current.append(char)

    if current or quoted:
        words.append("".join(current))
    return words


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def extract_redirection(text: str) -> Redirection:
    """Find the first unquoted ``>``/``>>`` and split the target off."""

    quote: str | None = None
    for index, char in enumerate(text):
        if quote is None and char in _QUOTES:
            quote = char
        elif quote is not None and char == quote:
            quote = None
        elif quote is None and char == ">":
            append = text[index + 1 : index + 2] == ">"
            target = text[index + (2 if append else 1) :].strip()
            return Redirection(
                command=text[:index].strip(),
                redirect_type=">>" if append else ">",
                redirect_file=_strip_quotes(target),
            )
    return Redirection(command=text.strip())


def split_compound(line: str) -> list[CompoundSegment]:
    """Split a line on top-level ``&&``, ``||``, ``;`` and ``|``.

    Operators bind strictly left to right; each one is attached to the
    segment before it. Blank segments are dropped.
    """

    segments: list[CompoundSegment] = []
    current: list[str] = []
    quote: str | None = None

    def flush(operator: Operator | None) -> None:
        text = "".join(current).strip()
        if text:
            segments.append(CompoundSegment(command_text=text, operator_after=operator))
        current.clear()

    index = 0
    while index < len(line):
        char = line[index]
        pair = line[index : index + 2]
        if quote is None and char in _QUOTES:
            quote = char
            current.append(char)
        elif quote is not None:
            if char == quote:
                quote = None
            current.append(char)
        elif pair in ("&&", "||"):
            flush(pair)  # type: ignore[arg-type]
            index += 1
        elif char in ("|", ";"):
            flush(char)  # type: ignore[arg-type]
        else:
            current.append(char)
        index += 1

    flush(None)
    return segments


def parse_invocation(segment: str) -> ParsedInvocation:
    """Turn one segment into command name, arguments and redirection."""

    redirection = extract_redirection(segment)
    words = tokenize(redirection.command)
    name, args = (words[0], words[1:]) if words else ("", [])
    return ParsedInvocation(
        name=name,
        args=args,
        redirect_type=redirection.redirect_type,
        redirect_file=redirection.redirect_file,
    )
