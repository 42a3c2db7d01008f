#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_fences.py
"""Unit tests for the fence subsystem.

Tests cover:
- Opening and closing fence matching
- Default rendering and plugin dispatch
- Provenance tagging of plugin markup
- Reverse recovery order (plugin, stored source, element text)
- Plugin exceptions propagating unchanged

"""

import pytest
from bs4 import BeautifulSoup

from roundmark import reconstruct, render
from roundmark.ast import CodeBlock
from roundmark.fences import (
    FencePlugin,
    FenceSource,
    extract_language,
    is_fence_close,
    is_fence_element,
    match_fence_open,
    parse_fence_string,
    render_fence,
    reverse_fence,
    tag_plugin_markup,
)


def element(html: str):
    return next(iter(BeautifulSoup(html, "html.parser").children))


@pytest.mark.unit
class TestFenceMatching:
    """Tests for fence marker matching."""

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("```", ("```", "")),
            ("```python", ("```", "python")),
            ("~~~~ sh ", ("~~~~", "sh")),
            ("``", None),
            ("```a`b", None),
            ("text", None),
        ],
    )
    def test_match_fence_open(self, line, expected):
        """Test opening fence detection."""
        assert match_fence_open(line) == expected

    @pytest.mark.parametrize(
        "line,fence,expected",
        [
            ("```", "```", True),
            ("`````", "```", True),
            ("```  ", "```", True),
            ("``", "```", False),
            ("~~~", "```", False),
            ("``` x", "```", False),
        ],
    )
    def test_is_fence_close(self, line, fence, expected):
        """Test closing fence rules."""
        assert is_fence_close(line, fence) is expected

    def test_parse_fence_string(self):
        """Test fence strings split into character and length."""
        assert parse_fence_string("~~~~") == ("~", 4)
        assert parse_fence_string(None) == ("`", 3)
        assert parse_fence_string("abc") == ("`", 3)


@pytest.mark.unit
class TestRenderFence:
    """Tests for forward fence rendering."""

    def test_default_rendering(self):
        """Test escaped content inside pre and code."""
        block = CodeBlock(content="<b>", language="html")
        assert render_fence(block, None) == "<pre><code>&lt;b&gt;</code></pre>"

    def test_plugin_receives_raw_content(self):
        """Test the plugin sees unescaped content and the trimmed language."""
        calls = []

        def plugin_render(content, lang):
            calls.append((content, lang))
            return "<div>ok</div>"

        block = CodeBlock(content="a < b", language=" math ")
        assert render_fence(block, FencePlugin(render=plugin_render)) == "<div>ok</div>"
        assert calls == [("a < b", "math")]

    def test_plugin_decline_falls_back(self):
        """Test a None result uses default rendering."""
        plugin = FencePlugin(render=lambda content, lang: None)
        assert render_fence(CodeBlock(content="x"), plugin, code_attr=' class="c"') == (
            '<pre><code class="c">x</code></pre>'
        )

    def test_plugin_markup_tagged(self):
        """Test plugin output gets fence provenance on its first element."""
        plugin = FencePlugin(render=lambda content, lang: "<svg><g/></svg>")
        block = CodeBlock(content='a "b"', language="dot", fence_char="~", fence_length=3)
        markup = render_fence(block, plugin, bidirectional=True)
        assert markup == '<svg data-qd-fence="~~~" data-qd-lang="dot" data-qd-source="a &quot;b&quot;"><g/></svg>'

    def test_plugin_exception_propagates(self):
        """Test plugin errors are not wrapped."""

        def broken(content, lang):
            raise RuntimeError("renderer down")

        with pytest.raises(RuntimeError, match="renderer down"):
            render("```x\ny\n```", fence_plugin=broken)

    def test_tag_plugin_markup_without_element(self):
        """Test markup that does not start with an element is unchanged."""
        assert tag_plugin_markup("plain text", "```", "", "x") == "plain text"

    def test_bare_callable_plugin(self):
        """Test a bare callable is accepted as the render function."""
        html = render("```shout\nhi\n```", fence_plugin=lambda c, lang: f"<b>{c.upper()}</b>" if lang else None)
        assert html == "<b>HI</b>"


@pytest.mark.unit
class TestReverseFence:
    """Tests for fence recovery from rendered markup."""

    def test_is_fence_element(self):
        """Test pre and attribute-tagged elements are fences."""
        assert is_fence_element(element("<pre></pre>"))
        assert is_fence_element(element('<div data-qd-source="x"></div>'))
        assert not is_fence_element(element("<div></div>"))

    def test_extract_language(self):
        """Test language lookup order."""
        assert extract_language(element('<pre data-qd-lang="py"><code class="language-js"></code></pre>')) == "py"
        assert extract_language(element('<pre><code class="hl language-js"></code></pre>')) == "js"
        assert extract_language(element('<pre class="lang-rb"></pre>')) == "rb"
        assert extract_language(element("<pre><code></code></pre>")) == ""

    def test_stored_source_used(self):
        """Test data-qd-source wins over the element text."""
        block = reverse_fence(element('<div data-qd-fence="```" data-qd-source="raw\n">rendered</div>'), None)
        assert block.content == "raw\n"

    def test_element_text_trailing_whitespace_removed(self):
        """Test the code text is right-stripped."""
        block = reverse_fence(element("<pre><code>a\n  \n</code></pre>"), None)
        assert block.content == "a"
        assert block.fence == "```"

    def test_plugin_reverse(self):
        """Test a FenceSource from the plugin is used verbatim."""
        plugin = FencePlugin(
            render=lambda c, lang: None,
            reverse=lambda el: FenceSource(content="from plugin", fence="~~~~"),
        )
        block = reverse_fence(element('<div data-qd-lang="math" data-qd-source="stored">x</div>'), plugin)
        assert block.content == "from plugin"
        assert block.language == "math"
        assert block.fence == "~~~~"

    def test_plugin_reverse_called_without_language(self):
        """Test the plugin is consulted for a fence with no language."""
        calls = []

        def reverse(el):
            calls.append(el.name)
            if "widget" not in (el.get("class") or []):
                return None
            return FenceSource(content=el.get_text())

        plugin = FencePlugin(render=lambda c, lang: None, reverse=reverse)
        edited = element('<pre class="widget" data-qd-fence="```" data-qd-source="old"><code>new</code></pre>')
        block = reverse_fence(edited, plugin)
        assert calls == ["pre"]
        assert block.content == "new"
        assert block.language is None
        assert block.fence == "```"

    def test_plugin_reverse_decline(self):
        """Test a None result falls back to the stored source."""
        plugin = FencePlugin(render=lambda c, lang: None, reverse=lambda el: None)
        block = reverse_fence(element('<div data-qd-lang="m" data-qd-source="s">x</div>'), plugin)
        assert block.content == "s"

    def test_reverse_exception_propagates(self):
        """Test reverse errors reach the caller."""

        def broken(el):
            raise ValueError("cannot reverse")

        plugin = FencePlugin(render=lambda c, lang: None, reverse=broken)
        with pytest.raises(ValueError, match="cannot reverse"):
            reconstruct('<pre data-qd-lang="m"><code>x</code></pre>', fence_plugin=plugin)


@pytest.mark.unit
class TestFencePlugin:
    """Tests for FencePlugin validation."""

    def test_render_must_be_callable(self):
        """Test a non-callable render hook is rejected."""
        with pytest.raises(TypeError):
            FencePlugin(render="nope")

    def test_reverse_must_be_callable(self):
        """Test a non-callable reverse hook is rejected."""
        with pytest.raises(TypeError):
            FencePlugin(render=lambda c, lang: None, reverse=42)
