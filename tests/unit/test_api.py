#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_api.py
"""Unit tests for the public API functions.

Tests cover:
- render, parse, reconstruct and configure entry points
- Keyword overrides and options objects
- Non-string input handling
- Options type checking
- Missing BeautifulSoup reported as DependencyError

"""

import importlib

import pytest
from bs4 import BeautifulSoup

import roundmark
from roundmark import (
    DependencyError,
    Document,
    InvalidOptionsError,
    ReconstructOptions,
    RenderOptions,
    configure,
    get_version,
    parse,
    reconstruct,
    render,
)


@pytest.mark.unit
class TestRender:
    """Tests for render()."""

    def test_basic(self):
        """Test class-mode output without provenance."""
        assert render("Hello **world**") == '<p>Hello <strong class="rm-strong">world</strong></p>'

    def test_keyword_override(self):
        """Test option fields as keywords."""
        assert render("# Hi", bidirectional=True) == '<h1 class="rm-h1" data-qd="#">Hi</h1>'

    def test_options_object(self):
        """Test an explicit options object."""
        assert render("# Hi", RenderOptions(class_prefix="c-")) == '<h1 class="c-h1">Hi</h1>'

    def test_keywords_applied_over_options(self):
        """Test keywords override fields of the supplied options."""
        html = render("# Hi", RenderOptions(class_prefix="c-"), bidirectional=True)
        assert html == '<h1 class="c-h1" data-qd="#">Hi</h1>'

    @pytest.mark.parametrize("value", [None, 42, b"# bytes", ["# list"]])
    def test_non_string_input(self, value):
        """Test anything but a string renders as empty output."""
        assert render(value) == ""

    def test_empty_string(self):
        """Test empty input gives empty output."""
        assert render("") == ""

    def test_wrong_options_type(self):
        """Test ReconstructOptions are rejected."""
        with pytest.raises(InvalidOptionsError) as exc_info:
            render("x", ReconstructOptions())
        assert exc_info.value.expected_type is RenderOptions

    def test_unknown_keyword(self):
        """Test unknown keywords are rejected."""
        with pytest.raises(InvalidOptionsError):
            render("x", bogus=True)


@pytest.mark.unit
class TestParse:
    """Tests for parse()."""

    def test_returns_document(self):
        """Test the AST keeps markers."""
        doc = parse("## Title")
        assert isinstance(doc, Document)
        assert doc.children[0].marker == "##"

    def test_non_string_input(self):
        """Test non-string input gives an empty document."""
        assert parse(None) == Document()

    def test_lazy_linefeeds(self):
        """Test the linefeed option reaches the inline formatter."""
        soft = parse("a\nb").children[0].content
        lazy = parse("a\nb", lazy_linefeeds=True).children[0].content
        assert len(soft) == 1
        assert len(lazy) == 3


@pytest.mark.unit
class TestReconstruct:
    """Tests for reconstruct()."""

    def test_basic(self):
        """Test provenance markers are honored."""
        html = '<h2 data-qd="##">Title</h2><p>Some <em data-qd="_">text</em></p>'
        assert reconstruct(html) == "## Title\n\nSome _text_"

    def test_canonical_fallback(self):
        """Test unmarked elements use canonical syntax."""
        assert reconstruct("<h3>T</h3><p><b>x</b> <i>y</i></p>") == "### T\n\n**x** *y*"

    def test_soup_and_tag_input(self):
        """Test parsed documents and single elements are accepted."""
        soup = BeautifulSoup("<div><p>a</p></div><p>b</p>", "html.parser")
        assert reconstruct(soup) == "a\n\nb"
        assert reconstruct(soup.div) == "a"

    @pytest.mark.parametrize("value", [None, 42, b"<p>x</p>"])
    def test_unsupported_input(self, value):
        """Test other input types give an empty string."""
        assert reconstruct(value) == ""

    def test_empty_formatting_dropped(self):
        """Test empty inline formatting leaves no markers."""
        assert reconstruct("<strong></strong>") == ""

    def test_wrong_options_type(self):
        """Test RenderOptions are rejected."""
        with pytest.raises(InvalidOptionsError):
            reconstruct("<p>x</p>", RenderOptions())

    def test_missing_beautifulsoup(self, monkeypatch):
        """Test a missing bs4 raises DependencyError with an install hint."""
        real_import = importlib.import_module

        def fake_import(name, *args, **kwargs):
            if name == "bs4":
                raise ImportError("No module named 'bs4'")
            return real_import(name, *args, **kwargs)

        monkeypatch.setattr("roundmark.utils.decorators.importlib.import_module", fake_import)
        with pytest.raises(DependencyError) as exc_info:
            reconstruct("<p>x</p>")
        assert exc_info.value.missing_packages == [("beautifulsoup4", ">=4.12")]
        assert "pip install --upgrade" in str(exc_info.value)


@pytest.mark.unit
class TestConfigure:
    """Tests for configure()."""

    def test_bound_options(self):
        """Test the returned function uses the configured options."""
        chat_render = configure(bidirectional=True, lazy_linefeeds=True)
        assert chat_render("a\nb") == '<p>a<br class="rm-br">b</p>'

    def test_options_object(self):
        """Test configuring from an options object."""
        styled = configure(RenderOptions(inline_styles=True))
        assert 'style="font-weight: bold"' in styled("**b**")

    def test_validates_eagerly(self):
        """Test invalid options fail when configuring, not when rendering."""
        with pytest.raises(InvalidOptionsError):
            configure(ReconstructOptions())


@pytest.mark.unit
class TestVersion:
    """Tests for version reporting."""

    def test_get_version(self):
        """Test a non-empty version string."""
        assert isinstance(get_version(), str)
        assert get_version()

    def test_dunder_version(self):
        """Test the module attribute."""
        assert roundmark.__version__ == "0.1.0"
