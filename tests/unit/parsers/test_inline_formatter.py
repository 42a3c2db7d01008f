#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/parsers/test_inline_formatter.py
"""Unit tests for InlineFormatter.

Tests cover:
- Strong, emphasis and strikethrough with their source markers
- Code spans binding tighter than other delimiters
- Links, images and autolinks
- Hard and soft line breaks
- Unmatched delimiters kept as text
- Nesting depth guard

"""

import pytest

from roundmark.ast import (
    Autolink,
    Code,
    Emphasis,
    Image,
    LineBreak,
    Link,
    Strikethrough,
    Strong,
    Text,
)
from roundmark.exceptions import NestingDepthError
from roundmark.parsers.inline import InlineFormatter


@pytest.fixture
def formatter() -> InlineFormatter:
    return InlineFormatter()


@pytest.mark.unit
class TestDelimitedSpans:
    """Tests for strong, emphasis and strikethrough."""

    def test_plain_text(self, formatter):
        """Test text without syntax is a single Text node."""
        assert formatter.format("just words") == [Text(content="just words")]

    def test_strong_with_asterisks(self, formatter):
        """Test ``**`` produces Strong with its marker."""
        assert formatter.format("**bold**") == [Strong(content=[Text(content="bold")], marker="**")]

    def test_strong_with_underscores(self, formatter):
        """Test ``__`` produces Strong with the underscore marker."""
        assert formatter.format("__bold__") == [Strong(content=[Text(content="bold")], marker="__")]

    def test_emphasis_markers(self, formatter):
        """Test both emphasis delimiters keep their own marker."""
        nodes = formatter.format("*a* _b_")
        assert nodes == [
            Emphasis(content=[Text(content="a")], marker="*"),
            Text(content=" "),
            Emphasis(content=[Text(content="b")], marker="_"),
        ]

    def test_strikethrough(self, formatter):
        """Test ``~~`` produces Strikethrough."""
        assert formatter.format("~~gone~~") == [Strikethrough(content=[Text(content="gone")], marker="~~")]

    def test_nested_formatting(self, formatter):
        """Test emphasis nested inside strong."""
        nodes = formatter.format("**bold _and em_**")
        assert nodes == [
            Strong(
                content=[Text(content="bold "), Emphasis(content=[Text(content="and em")], marker="_")],
                marker="**",
            )
        ]

    def test_unclosed_strong_is_literal(self, formatter):
        """Test an unmatched doubled delimiter stays text."""
        assert formatter.format("**unclosed") == [Text(content="**unclosed")]

    def test_single_delimiter_does_not_close_inside_run(self, formatter):
        """Test ``*a**`` has no emphasis because the closer touches a run."""
        assert formatter.format("*a**") == [Text(content="*a**")]

    def test_delimiters_do_not_span_lines(self, formatter):
        """Test strong never closes on a later line."""
        assert formatter.format("**a\nb**") == [Text(content="**a\nb**")]


@pytest.mark.unit
class TestCodeSpans:
    """Tests for code span precedence."""

    def test_code_content_is_raw(self, formatter):
        """Test delimiters inside a code span are not formatted."""
        assert formatter.format("`a*b*`") == [Code(content="a*b*", marker="`")]

    def test_emphasis_skips_code_span(self, formatter):
        """Test a delimiter inside a code span never closes emphasis."""
        nodes = formatter.format("*a `b*` c*")
        assert nodes == [
            Emphasis(
                content=[Text(content="a "), Code(content="b*", marker="`"), Text(content=" c")],
                marker="*",
            )
        ]

    def test_html_is_not_escaped_in_ast(self, formatter):
        """Test text is stored unescaped."""
        assert formatter.format("`<div>`") == [Code(content="<div>", marker="`")]

    def test_empty_backticks_are_literal(self, formatter):
        """Test a doubled backtick is not an empty code span."""
        assert formatter.format("``") == [Text(content="``")]


@pytest.mark.unit
class TestLinksAndImages:
    """Tests for links, images and autolinks."""

    def test_link(self, formatter):
        """Test a link keeps its source text and marker."""
        nodes = formatter.format("[docs](https://example.com)")
        assert nodes == [
            Link(
                url="https://example.com",
                content=[Text(content="docs")],
                marker="[",
                source_text="docs",
            )
        ]

    def test_link_text_is_formatted(self, formatter):
        """Test formatting inside link text is parsed while the raw text is kept."""
        link = formatter.format("[**bold** link](u)")[0]
        assert isinstance(link, Link)
        assert link.source_text == "**bold** link"
        assert isinstance(link.content[0], Strong)

    def test_link_url_with_balanced_parentheses(self, formatter):
        """Test balanced parentheses stay in the URL."""
        link = formatter.format("[t](https://a.com/x_(y))")[0]
        assert link.url == "https://a.com/x_(y)"

    def test_link_with_nested_brackets(self, formatter):
        """Test link text uses balanced bracket counting."""
        link = formatter.format("[a [b] c](u)")[0]
        assert link.source_text == "a [b] c"

    def test_url_with_whitespace_is_not_a_link(self, formatter):
        """Test whitespace in the URL leaves the text literal."""
        assert formatter.format("[t](a b)") == [Text(content="[t](a b)")]

    def test_emphasis_does_not_close_inside_link(self, formatter):
        """Test a delimiter inside a link does not close emphasis opened before it."""
        nodes = formatter.format("*see [a*b](u)*")
        assert len(nodes) == 1
        emphasis = nodes[0]
        assert isinstance(emphasis, Emphasis)
        assert isinstance(emphasis.content[1], Link)

    def test_unmatched_bracket_before_link(self, formatter):
        """Test an unclosed bracket stays literal without hiding a later link."""
        assert formatter.format("[x [a](u)") == [
            Text(content="[x "),
            Link(url="u", content=[Text(content="a")], marker="[", source_text="a"),
        ]

    def test_repeated_labels_resolve_independently(self, formatter):
        """Test sibling links each find their own closing bracket."""
        nodes = formatter.format("[a](1) [b](2) [c")
        assert [node.url for node in nodes if isinstance(node, Link)] == ["1", "2"]
        assert nodes[-1] == Text(content=" [c")

    def test_image(self, formatter):
        """Test an image records alt text, marker and source URL."""
        assert formatter.format("![alt](src.png)") == [
            Image(url="src.png", alt_text="alt", marker="!", source_url="src.png")
        ]

    def test_bare_autolink(self, formatter):
        """Test a bare URL after whitespace becomes an Autolink."""
        assert formatter.format("x https://a.com y") == [
            Text(content="x "),
            Autolink(url="https://a.com"),
            Text(content=" y"),
        ]

    def test_autolink_requires_boundary(self, formatter):
        """Test a URL glued to a word is not linked."""
        assert formatter.format("xhttps://a.com") == [Text(content="xhttps://a.com")]

    def test_bracketed_autolink(self, formatter):
        """Test the angle bracket form."""
        assert formatter.format("<https://a.com>") == [Autolink(url="https://a.com", bracketed=True)]

    def test_angle_bracket_text_is_literal(self, formatter):
        """Test markup-like text that is not an autolink stays text."""
        assert formatter.format("<script>") == [Text(content="<script>")]


@pytest.mark.unit
class TestLineBreaks:
    """Tests for hard and soft line breaks."""

    def test_hard_break(self, formatter):
        """Test two trailing spaces produce a hard break."""
        assert formatter.format("a  \nb") == [Text(content="a"), LineBreak(soft=False), Text(content="b")]

    def test_long_space_run_without_newline(self, formatter):
        """Test a run of spaces not ending a line stays text."""
        assert formatter.format("a" + " " * 6 + "b") == [Text(content="a" + " " * 6 + "b")]

    def test_long_space_run_before_newline(self, formatter):
        """Test the whole run of spaces is consumed by the break."""
        assert formatter.format("a     \nb") == [Text(content="a"), LineBreak(soft=False), Text(content="b")]

    def test_newline_kept_without_lazy_linefeeds(self, formatter):
        """Test a single newline stays in the text by default."""
        assert formatter.format("a\nb") == [Text(content="a\nb")]

    def test_lazy_linefeeds(self):
        """Test every newline is a soft break with lazy linefeeds."""
        nodes = InlineFormatter(lazy_linefeeds=True).format("a\nb")
        assert nodes == [Text(content="a"), LineBreak(soft=True), Text(content="b")]


@pytest.mark.unit
class TestDepthGuard:
    """Tests for the inline nesting limit."""

    def test_deeply_nested_links_raise(self):
        """Test nesting past the limit raises NestingDepthError."""
        text = "[" * 10 + "x" + "](u)" * 10
        with pytest.raises(NestingDepthError) as exc_info:
            InlineFormatter(max_nesting_depth=5).format(text)
        assert exc_info.value.stage == "inline"
        assert exc_info.value.limit == 5

    def test_nesting_within_limit(self):
        """Test nesting under the limit parses."""
        text = "[" * 3 + "x" + "](u)" * 3
        nodes = InlineFormatter(max_nesting_depth=5).format(text)
        assert isinstance(nodes[0], Link)
