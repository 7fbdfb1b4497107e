"""Translate Jira wiki markup into GitHub-flavored Markdown.

Translation Flow
----------------
The translator is an ordered list of passes, highest precedence first. Each
pass looks for its own construct in a text segment and reports a ``Match``:

    text ──► pass.match() ──► Match(before, token, after)
                                 │       │       │
                                 │       │       └─► same pass again
                                 │       └─► output
                                 └─► next (lower precedence) pass

Text no pass claims reaches the leaf, which escapes Markdown-significant
sequences and picks out ``{quote}`` markers. Blockquotes are resolved last,
over the whole output, so that quoted lines rendered by higher-precedence
passes (links, code blocks) are prefixed as well.

The translator never raises: unmatched delimiters are left as literal text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, NamedTuple, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable

# GitHub rejects issue bodies above 65536 characters
MAX_DESCRIPTION_LENGTH: Final[int] = 65000
TRUNCATION_NOTICE: Final[str] = "\n\n issue truncated because of its length - to see full context, see original Jira"

# Jira soft-wraps long code lines when displaying them, GitHub doesn't
CODE_WRAP_COLUMN: Final[int] = 100

QUOTE_MARKER: Final[str] = "{quote}"

# "{{code}}" is inline code, not a block opener
_CODE_OPEN: Final[re.Pattern[str]] = re.compile(r"(?<!\{)\{code(?::([^}]*))?\}")
_CODE_CLOSE: Final[str] = "{code}"
_NOFORMAT: Final[str] = "{noformat}"
_NOFORMAT_OPEN: Final[re.Pattern[str]] = re.compile(r"(?<!\{)\{noformat\}")
_HEADER: Final[re.Pattern[str]] = re.compile(r"^h([1-5])\.", re.MULTILINE)
_LIST_ITEM: Final[re.Pattern[str]] = re.compile(r"^( *)(#+) ", re.MULTILINE)
_ESCAPES: Final[tuple[tuple[str, str], ...]] = (("==", "\\=="), ("--", "\\--"), (">", "\\>"))


@dataclass(frozen=True)
class Match:
    """A construct found by a pass.

    ``before`` is a prefix and ``after`` a suffix of the scanned text. ``token``
    is the rendered construct; it is empty when the pass only skipped over
    literal text.
    """

    before: str
    token: str
    after: str


class Pass(Protocol):
    """A single-construct matcher. ``None`` means the text holds no such construct."""

    def match(self, text: str, at_line_start: bool) -> Match | None: ...


class _Piece(NamedTuple):
    text: str
    quote_marker: bool = False


def _literal(text: str, upto: int) -> Match:
    """Hand ``text[:upto]`` down unchanged and keep scanning after it."""
    return Match(text[:upto], "", text[upto:])


def _strip_one_newline(content: str) -> str:
    for newline in ("\r\n", "\n"):
        if content.startswith(newline):
            content = content[len(newline) :]
            break
    for newline in ("\r\n", "\n"):
        if content.endswith(newline):
            content = content[: -len(newline)]
            break
    return content


def wrap_code_lines(block: str, column: int = CODE_WRAP_COLUMN) -> str:
    """Break lines longer than ``column`` at the first space at or past ``column``."""
    wrapped: list[str] = []
    for line in block.split("\n"):
        while len(line) > column:
            space = line.find(" ", column)
            if space < 0:
                break
            wrapped.append(line[:space])
            line = line[space + 1 :]
        wrapped.append(line)
    return "\n".join(wrapped)


def _code_language(params: str | None) -> str:
    """``{code:java}`` -> ``java``; ``{code:title=Foo.java|borderStyle=solid}`` -> no language."""
    if not params:
        return ""
    first = params.split("|", 1)[0].strip()
    return "" if "=" in first else first


class CodeBlockPass:
    """``{code}`` and ``{noformat}`` blocks become fenced code blocks."""

    def match(self, text: str, at_line_start: bool) -> Match | None:
        code_open = _CODE_OPEN.search(text)
        noformat_open = _NOFORMAT_OPEN.search(text)
        noformat_start = noformat_open.start() if noformat_open else -1

        if code_open and (noformat_start < 0 or code_open.start() < noformat_start):
            start = code_open.start()
            content_start = code_open.end()
            closer = _CODE_CLOSE
            language = _code_language(code_open.group(1))
        elif noformat_start >= 0:
            start = noformat_start
            content_start = noformat_start + len(_NOFORMAT)
            closer = _NOFORMAT
            language = ""
        else:
            return None

        end = text.find(closer, content_start)
        if end < 0:
            return _literal(text, content_start)

        body = wrap_code_lines(_strip_one_newline(text[content_start:end]))
        token = f"```{language}\n{body}\n```\n"
        before = text[:start]
        # A fence only opens at the start of a line
        if (before and not before.endswith("\n")) or (not before and not at_line_start):
            token = "\n" + token
        return Match(before, token, text[end + len(closer) :])


class DelimitedPass:
    """An inline construct delimited by ``opener``/``closer`` on a single line.

    A pair whose closer falls on a later line does not match: the opener is
    kept as literal text and scanning resumes right after it. With
    ``emphasis`` set, empty content and content with leading or trailing
    whitespace are rejected the same way.
    """

    def __init__(self, opener: str, closer: str, render: Callable[[str], str], *, emphasis: bool = False) -> None:
        self.opener: str = opener
        self.closer: str = closer
        self.render: Callable[[str], str] = render
        self.emphasis: bool = emphasis

    def match(self, text: str, at_line_start: bool) -> Match | None:
        start = text.find(self.opener)
        if start < 0:
            return None
        content_start = start + len(self.opener)
        end = text.find(self.closer, content_start)
        if end < 0:
            return None

        newline = text.find("\n", start)
        content = text[content_start:end]
        if -1 < newline < end or (self.emphasis and not _is_emphasis(content)):
            return _literal(text, content_start)

        return Match(text[:start], self.render(content), text[end + len(self.closer) :])


def _is_emphasis(content: str) -> bool:
    return bool(content) and not content[0].isspace() and not content[-1].isspace()


class HeaderPass:
    """``h1.`` .. ``h5.`` at the start of a line become ``#`` .. ``#####``."""

    def match(self, text: str, at_line_start: bool) -> Match | None:
        for header in _HEADER.finditer(text):
            if header.start() == 0 and not at_line_start:
                continue
            return Match(text[: header.start()], "#" * int(header.group(1)), text[header.end() :])
        return None


class LinkPass:
    """``[caption|url]`` and ``[url]`` become Markdown links.

    Only spans whose url has a ``://`` scheme marker are links; anything else
    stays literal bracket text.
    """

    def match(self, text: str, at_line_start: bool) -> Match | None:
        start = text.find("[")
        if start < 0:
            return None
        end = text.find("]", start)
        if end < 0:
            return None

        end_of_line = text.find("\n", start)
        if -1 < end_of_line < end:
            # Brackets spanning lines are no link, look again on the next line
            return _literal(text, end_of_line + 1)

        caption, separator, url = text[start + 1 : end].partition("|")
        if not separator:
            url = caption
        if "://" not in url:
            return _literal(text, end + 1)

        return Match(text[:start], f"[{caption}]({url})", text[end + 1 :])


class ListPass:
    """``# item`` lines become ``- item``; ``## item`` nests one level deeper."""

    def match(self, text: str, at_line_start: bool) -> Match | None:
        for item in _LIST_ITEM.finditer(text):
            if item.start() == 0 and not at_line_start:
                continue
            indent = "  " * (len(item.group(2)) - 1)
            return Match(text[: item.end(1)], f"{indent}- ", text[item.end() :])
        return None


PASSES: Final[tuple[Pass, ...]] = (
    CodeBlockPass(),
    DelimitedPass("{{", "}}", lambda content: f"`{content}`"),
    HeaderPass(),
    LinkPass(),
    # Markdown has no underline, bold is the closest
    DelimitedPass("+", "+", lambda content: f"**{content}**", emphasis=True),
    DelimitedPass("{_}", "{_}", lambda content: f"_{content}_", emphasis=True),
    DelimitedPass("{*}", "{*}", lambda content: f"_{content}_", emphasis=True),
    ListPass(),
)


def _escape_and_split_quotes(text: str, pieces: list[_Piece]) -> None:
    for old, new in _ESCAPES:
        text = text.replace(old, new)
    for i, part in enumerate(text.split(QUOTE_MARKER)):
        if i:
            pieces.append(_Piece(QUOTE_MARKER, quote_marker=True))
        if part:
            pieces.append(_Piece(part))


def _dispatch(text: str, level: int, at_line_start: bool, pieces: list[_Piece]) -> None:
    while text:
        if level == len(PASSES):
            _escape_and_split_quotes(text, pieces)
            return

        match = PASSES[level].match(text, at_line_start)
        if match is None:
            level += 1
            continue

        _dispatch(match.before, level + 1, at_line_start, pieces)
        if match.token:
            pieces.append(_Piece(match.token))

        consumed = text[: len(text) - len(match.after)]
        at_line_start = consumed.endswith("\n")
        text = match.after


def _render(pieces: list[_Piece]) -> str:
    """Join pieces, turning paired quote markers into ``> `` prefixed lines."""
    markers = sum(1 for piece in pieces if piece.quote_marker)
    paired = markers - markers % 2

    rendered: list[str] = []
    seen = 0
    quoting = False
    for piece in pieces:
        if not piece.quote_marker:
            rendered.append(piece.text.replace("\n", "\n> ") if quoting else piece.text)
            continue

        seen += 1
        if seen > paired:
            rendered.append(piece.text)
        elif quoting:
            # Keep following text out of the quote (lazy continuation)
            rendered.append("\n")
            quoting = False
        else:
            # A quote only opens at the start of a line
            rendered.append("> " if not rendered or rendered[-1].endswith("\n") else "\n> ")
            quoting = True

    return "".join(rendered)


def translate(source_text: str | None) -> str:
    """Translate Jira wiki markup to GitHub-flavored Markdown.

    Args:
        source_text: Jira markup, e.g. an issue description (may be empty or None)

    Returns:
        Markdown that renders like the Jira original. Never raises; malformed
        markup passes through as literal text.
    """
    if not source_text:
        return ""

    pieces: list[_Piece] = []
    _dispatch(source_text, 0, True, pieces)
    return _render(pieces)


def truncate(text: str, limit: int = MAX_DESCRIPTION_LENGTH) -> str:
    """Cut ``text`` to ``limit`` characters, appending a notice if anything was cut."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}{TRUNCATION_NOTICE}"
