"""Tests for the Jira markup to Markdown translator."""

from __future__ import annotations

import pytest

from jira_to_github_migrator.markup import (
    MAX_DESCRIPTION_LENGTH,
    TRUNCATION_NOTICE,
    translate,
    truncate,
    wrap_code_lines,
)


@pytest.mark.unit
class TestPassThrough:
    @pytest.mark.parametrize(
        "text",
        [
            "Just some text, nothing special.",
            "Multiple\nlines\n\nof text",
            "Issue #1 is open",
            "no scheme [bracket] text",
            "h1 without a dot",
            "price: 5 + tax",
        ],
    )
    def test_text_without_constructs_is_unchanged(self, text: str) -> None:
        assert translate(text) == text

    def test_empty_input(self) -> None:
        assert translate("") == ""

    def test_none_input(self) -> None:
        assert translate(None) == ""

    def test_repeatable(self) -> None:
        text = "h2. Steps\n# open {{app}}\n# click [here|https://example.com]\n{quote}it +breaks+{quote}"
        assert translate(text) == translate(text)

    def test_windows_line_endings_are_kept(self) -> None:
        assert translate("line one\r\nline two") == "line one\r\nline two"

    def test_windows_line_endings_around_markup(self) -> None:
        assert translate("h1. Title\r\nbody") == "# Title\r\nbody"
        assert translate("# one\r\n# two") == "- one\r\n- two"


@pytest.mark.unit
class TestCodeBlocks:
    def test_code_block(self) -> None:
        assert translate("{code}x{code}") == "```\nx\n```\n"

    def test_code_block_with_language(self) -> None:
        assert translate("{code:java}\nint x = 1;\n{code}") == "```java\nint x = 1;\n```\n"

    def test_code_block_with_parameters_has_no_language(self) -> None:
        assert translate("{code:title=Foo.java|borderStyle=solid}\nfoo()\n{code}") == "```\nfoo()\n```\n"

    def test_noformat_block(self) -> None:
        assert translate("{noformat}a > b{noformat}") == "```\na > b\n```\n"

    def test_content_is_not_translated(self) -> None:
        text = "{code}{{x}} [a|http://b] +u+ h1. no{code}"
        assert translate(text) == "```\n{{x}} [a|http://b] +u+ h1. no\n```\n"

    def test_fence_starts_on_its_own_line(self) -> None:
        assert translate("see {code}x{code}") == "see \n```\nx\n```\n"

    def test_text_around_block_is_translated(self) -> None:
        result = translate("h1. Log\n{noformat}\nerror\n{noformat}\nmore +text+")
        assert result == "# Log\n```\nerror\n```\n\nmore **text**"

    def test_block_with_windows_line_endings(self) -> None:
        assert translate("{code}\r\nx\r\n{code}") == "```\nx\n```\n"

    @pytest.mark.parametrize("name", ["code", "noformat"])
    def test_block_keyword_inside_inline_code(self, name: str) -> None:
        assert translate(f"# {{{{{name}}}}} item") == f"- `{name}` item"

    def test_unclosed_block_is_literal(self) -> None:
        assert translate("{code}x") == "{code}x"

    def test_long_lines_are_wrapped(self) -> None:
        line = "a" * 95 + " " + "b" * 10 + " cccc"
        result = translate(f"{{code}}{line}{{code}}")
        assert result == "```\n" + "a" * 95 + " " + "b" * 10 + "\ncccc\n```\n"

    def test_wrap_code_lines_without_spaces(self) -> None:
        line = "x" * 150
        assert wrap_code_lines(line) == line

    def test_wrap_code_lines_repeats(self) -> None:
        line = " ".join(["word"] * 50)  # 249 characters
        wrapped = wrap_code_lines(line)
        assert all(len(part) <= 104 for part in wrapped.split("\n"))
        assert wrapped.replace("\n", " ") == line

    def test_short_lines_are_not_wrapped(self) -> None:
        block = "short line\nanother one"
        assert wrap_code_lines(block) == block


@pytest.mark.unit
class TestInlineCode:
    def test_inline_code(self) -> None:
        assert translate("{{x}}") == "`x`"

    def test_inline_code_in_sentence(self) -> None:
        assert translate("call {{foo()}} first") == "call `foo()` first"

    def test_inline_code_spanning_lines_is_literal(self) -> None:
        assert translate("{{a\nb}}") == "{{a\nb}}"

    def test_list_marker_after_inline_code_is_not_a_list(self) -> None:
        assert translate("{{x}} # not a list") == "`x` # not a list"


@pytest.mark.unit
class TestHeaders:
    def test_header_at_start(self) -> None:
        assert translate("h1. Title").startswith("# Title")

    @pytest.mark.parametrize(("level", "prefix"), [(1, "#"), (2, "##"), (3, "###"), (4, "####"), (5, "#####")])
    def test_header_levels(self, level: int, prefix: str) -> None:
        assert translate(f"intro\nh{level}. Section\nbody") == f"intro\n{prefix} Section\nbody"

    def test_header_not_at_line_start(self) -> None:
        assert translate("see h1. not a header") == "see h1. not a header"

    def test_header_with_inline_code(self) -> None:
        assert translate("h2. The {{main}} loop") == "## The `main` loop"


@pytest.mark.unit
class TestLinks:
    def test_bare_url(self) -> None:
        assert translate("[https://a.b]") == "[https://a.b](https://a.b)"

    def test_captioned_link(self) -> None:
        assert translate("[Label|https://a.b]") == "[Label](https://a.b)"

    def test_bracket_without_scheme_is_literal(self) -> None:
        assert translate("no scheme [bracket] text") == "no scheme [bracket] text"

    def test_brackets_spanning_lines_are_literal(self) -> None:
        text = "[broken\nlink|http://x]"
        assert translate(text) == text

    def test_link_on_line_after_unclosed_bracket(self) -> None:
        assert translate("[oops\nsee [docs|https://d.io]") == "[oops\nsee [docs](https://d.io)"

    def test_unclosed_bracket(self) -> None:
        assert translate("[no closing") == "[no closing"

    def test_url_is_not_escaped(self) -> None:
        assert translate("Docs: [https://a.b/x--y]") == "Docs: [https://a.b/x--y](https://a.b/x--y)"

    def test_several_links(self) -> None:
        result = translate("[a|http://a.io] and [b|http://b.io]")
        assert result == "[a](http://a.io) and [b](http://b.io)"


@pytest.mark.unit
class TestEmphasis:
    def test_underline_becomes_bold(self) -> None:
        assert translate("+under+") == "**under**"

    def test_italics(self) -> None:
        assert translate("{_}it{_}") == "_it_"

    def test_bold_becomes_underscore_emphasis(self) -> None:
        assert translate("{*}bold{*}") == "_bold_"
        assert "**" not in translate("{*}bold{*}")

    def test_plus_signs_in_prose_are_literal(self) -> None:
        assert translate("C++ and D++") == "C++ and D++"

    def test_underline_spanning_lines_is_literal(self) -> None:
        assert translate("a + b\nc + d") == "a + b\nc + d"

    def test_scanning_continues_after_rejected_opener(self) -> None:
        assert translate("{*}a\nb{*} {*}c{*}") == "{*}a\nb{*} _c_"


@pytest.mark.unit
class TestLists:
    def test_numbered_list(self) -> None:
        assert translate("# one\n# two") == "- one\n- two"

    def test_nested_list(self) -> None:
        assert translate("# one\n## nested") == "- one\n  - nested"

    def test_leading_spaces_are_kept(self) -> None:
        assert translate("  # indented") == "  - indented"

    def test_hash_without_space_is_not_a_list(self) -> None:
        assert translate("#hashtag") == "#hashtag"


@pytest.mark.unit
class TestEscaping:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("a == b", "a \\== b"),
            ("x -- y", "x \\-- y"),
            ("a > b", "a \\> b"),
        ],
    )
    def test_escapes(self, text: str, expected: str) -> None:
        assert translate(text) == expected


@pytest.mark.unit
class TestQuotes:
    def test_quote_lines_are_prefixed(self) -> None:
        lines = translate("{quote}hi\nthere{quote}").splitlines()
        assert lines == ["> hi", "> there"]

    def test_quote_with_link_inside(self) -> None:
        result = translate("{quote}see [docs|https://d.io]\nok{quote}")
        assert result == "> see [docs](https://d.io)\n> ok\n"

    def test_text_after_quote_is_not_quoted(self) -> None:
        assert translate("{quote}q{quote}\nafter") == "> q\n\nafter"

    def test_quote_opening_mid_line_starts_a_new_line(self) -> None:
        assert translate("text {quote}q\nr{quote}") == "text \n> q\n> r\n"

    def test_unpaired_quote_is_literal(self) -> None:
        assert translate("{quote}alone") == "{quote}alone"

    def test_quote_inside_code_is_literal(self) -> None:
        assert translate("{code}{quote}x{quote}{code}") == "```\n{quote}x{quote}\n```\n"


@pytest.mark.unit
class TestTruncate:
    def test_text_over_limit(self) -> None:
        text = "a" * (MAX_DESCRIPTION_LENGTH + 1)
        result = truncate(text)
        assert len(result) == MAX_DESCRIPTION_LENGTH + len(TRUNCATION_NOTICE)
        assert result.endswith(TRUNCATION_NOTICE)

    def test_text_at_limit_is_unchanged(self) -> None:
        text = "a" * MAX_DESCRIPTION_LENGTH
        assert truncate(text) == text

    def test_custom_limit(self) -> None:
        assert truncate("abcdef", limit=3) == f"abc{TRUNCATION_NOTICE}"
