#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/security/test_nesting_depth.py
"""Security tests for the nesting depth limit through the public API.

Tests cover:
- Blockquote, list, inline and HTML stages
- The default limit of 64 and custom limits
- Input at the limit still being accepted

"""

import pytest

from roundmark import NestingDepthError, SecurityError, parse, reconstruct, render


@pytest.mark.unit
@pytest.mark.security
class TestMarkdownDepth:
    """Tests for pathological Markdown."""

    def test_many_quote_markers(self):
        """Test hundreds of ``>`` markers fail fast with the default limit."""
        with pytest.raises(NestingDepthError) as exc_info:
            render(">" * 500 + " boom")
        assert exc_info.value.stage == "blockquote"
        assert exc_info.value.limit == 64

    def test_spaced_quote_markers(self):
        """Test ``> > >`` nesting counts the same way."""
        with pytest.raises(NestingDepthError):
            render("> " * 10 + "x", max_nesting_depth=5)

    def test_quote_depth_at_default_limit(self):
        """Test 64 levels are still rendered."""
        html = render(">" * 64 + " fine")
        assert html.count("<blockquote") == 64

    def test_nested_links(self):
        """Test inline nesting raises at the inline stage."""
        text = "[" * 80 + "x" + "](u)" * 80
        with pytest.raises(NestingDepthError) as exc_info:
            parse(text)
        assert exc_info.value.stage == "inline"

    def test_deep_list(self):
        """Test list indentation past the limit."""
        text = "\n".join("  " * level + "- item" for level in range(8))
        with pytest.raises(NestingDepthError) as exc_info:
            render(text, max_nesting_depth=4)
        assert exc_info.value.stage == "list"

    def test_is_security_error(self):
        """Test callers can catch the security base class."""
        with pytest.raises(SecurityError):
            render(">" * 10 + " x", max_nesting_depth=3)


@pytest.mark.unit
@pytest.mark.security
class TestHtmlDepth:
    """Tests for pathological HTML."""

    def test_deep_divs(self):
        """Test deeply nested elements raise at the html stage."""
        html = "<div>" * 200 + "x" + "</div>" * 200
        with pytest.raises(NestingDepthError) as exc_info:
            reconstruct(html)
        assert exc_info.value.stage == "html"

    def test_deep_blockquotes(self):
        """Test nested quotes in HTML."""
        html = "<blockquote>" * 20 + "<p>x</p>" + "</blockquote>" * 20
        with pytest.raises(NestingDepthError):
            reconstruct(html, max_nesting_depth=10)

    def test_rendered_output_reconstructs(self):
        """Test output rendered within the limit can be reconstructed with the same limit."""
        html = render(">" * 10 + " x", bidirectional=True, max_nesting_depth=30)
        assert reconstruct(html, max_nesting_depth=30) == ">" * 10 + " x"
