#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/renderers/html.py
"""HTML rendering from AST.

This module provides the HtmlRenderer class which converts AST nodes to an
HTML fragment. Elements are styled either with prefixed class names
(``class="rm-h1"``) or, with ``inline_styles``, with ``style`` attributes
taken from :data:`roundmark.styles.RENDER_STYLES`.

With ``bidirectional`` enabled every element that came from a distinct
piece of source syntax is tagged with provenance attributes:

- ``data-qd``: literal marker (``"##"``, ``"__"``, ``"-"``, ``"1."``, ``">"``, ``"["``, ``"!"``)
- ``data-qd-fence`` / ``data-qd-lang`` / ``data-qd-source``: fenced code blocks
- ``data-qd-text``: original link text
- ``data-qd-alt`` / ``data-qd-src``: original image alt text and source
- ``data-qd-align``: table column alignments

Paragraphs and table cells carry no provenance. Tagging never changes the
visible structure.

"""

from __future__ import annotations

import logging
from typing import Optional

from roundmark.ast.nodes import (
    Autolink,
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from roundmark.ast.visitors import NodeVisitor
from roundmark.constants import (
    ATTR_ALIGN,
    ATTR_IMAGE_ALT,
    ATTR_IMAGE_SRC,
    ATTR_LINK_TEXT,
    ATTR_MARKER,
    EXTERNAL_LINK_REL,
)
from roundmark.fences import render_fence
from roundmark.options.render import RenderOptions
from roundmark.renderers.base import BaseRenderer, InlineContentMixin
from roundmark.styles import get_style
from roundmark.utils.sanitize import escape_html, is_external_url, sanitize_url

logger = logging.getLogger(__name__)


class HtmlRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
    """Render AST nodes to an HTML fragment.

    Parameters
    ----------
    options : RenderOptions or None, default = None
        Rendering options

    Examples
    --------
        >>> from roundmark.ast import Document, Heading, Text
        >>> doc = Document(children=[Heading(level=2, content=[Text(content="Hi")], marker="##")])
        >>> HtmlRenderer(RenderOptions(bidirectional=True)).render_to_string(doc)
        '<h2 class="rm-h2" data-qd="##">Hi</h2>'

    """

    def __init__(self, options: RenderOptions | None = None):
        """Initialize the HTML renderer with options."""
        BaseRenderer._validate_options_type(options, RenderOptions, "html")
        options = options or RenderOptions()
        BaseRenderer.__init__(self, options)
        self.options: RenderOptions = options
        self._output: list[str] = []

    def render_to_string(self, doc: Document) -> str:
        """Render a document AST to an HTML string.

        Parameters
        ----------
        doc : Document
            The document node to render

        Returns
        -------
        str
            HTML fragment, blocks separated by newlines

        """
        self._require_document(doc, "HtmlRenderer")
        self._output = []
        doc.accept(self)
        return "".join(self._output).rstrip("\n")

    # ------------------------------------------------------------------
    # Attribute helpers
    # ------------------------------------------------------------------

    def _attr(self, tag: str, additional_style: str = "") -> str:
        """Return the class or style attribute for ``tag``."""
        if self.options.inline_styles:
            style = get_style(tag, additional_style)
            return f' style="{style}"' if style else ""
        attr = f' class="{self.options.class_prefix}{tag}"'
        if additional_style:
            attr += f' style="{additional_style}"'
        return attr

    def _provenance(self, marker: Optional[str]) -> str:
        if not self.options.bidirectional or marker is None:
            return ""
        return f' {ATTR_MARKER}="{escape_html(marker)}"'

    def _shadow(self, name: str, value: Optional[str]) -> str:
        """Return a provenance shadow attribute holding an original value."""
        if not self.options.bidirectional or value is None:
            return ""
        return f' {name}="{escape_html(value)}"'

    def _url(self, url: str) -> str:
        return sanitize_url(url, allow_unsafe=self.options.allow_unsafe_urls)

    # ------------------------------------------------------------------
    # Block nodes
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> None:
        """Render a Document node."""
        for child in node.children:
            child.accept(self)

    def visit_heading(self, node: Heading) -> None:
        """Render a Heading node."""
        tag = f"h{node.level}"
        content = self._render_inline_content(node.content)
        self._output.append(f"<{tag}{self._attr(tag)}{self._provenance(node.marker)}>{content}</{tag}>\n")

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node."""
        content = self._render_inline_content(node.content)
        self._output.append(f"<p>{content}</p>\n")

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a CodeBlock node through the fence subsystem."""
        lang = (node.language or "").strip()
        if self.options.inline_styles:
            code_attr = self._attr("code")
        else:
            code_attr = f' class="language-{escape_html(lang)}"' if lang else ""

        markup = render_fence(
            node,
            self.options.fence_plugin,
            pre_attr=self._attr("pre"),
            code_attr=code_attr,
            bidirectional=self.options.bidirectional,
        )
        self._output.append(f"{markup}\n")

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Render a BlockQuote node."""
        self._output.append(f"<blockquote{self._attr('blockquote')}{self._provenance(node.marker)}>\n")
        for child in node.children:
            child.accept(self)
        self._output.append("</blockquote>\n")

    def visit_list(self, node: List) -> None:
        """Render a List node."""
        tag = "ol" if node.ordered else "ul"
        start_attr = f' start="{node.start}"' if node.ordered and node.start != 1 else ""
        self._output.append(f"<{tag}{self._attr(tag)}{start_attr}>\n")
        for item in node.items:
            item.accept(self)
        self._output.append(f"</{tag}>\n")

    def visit_list_item(self, node: ListItem) -> None:
        """Render a ListItem node.

        The leading paragraph is rendered without a ``<p>`` wrapper; nested
        lists follow it inside the same ``<li>``.
        """
        if node.task_status:
            checked = " checked" if node.task_status == "checked" else ""
            checkbox = f'<input type="checkbox"{self._attr("task-checkbox")}{checked} disabled> '
            li_attr = self._attr("task-item")
        else:
            checkbox = ""
            li_attr = self._attr("li")

        self._output.append(f"<li{li_attr}{self._provenance(node.marker)}>{checkbox}")

        children = node.children
        if children and isinstance(children[0], Paragraph):
            self._output.append(self._render_inline_content(children[0].content))
            children = children[1:]
        for child in children:
            child.accept(self)

        self._output.append("</li>\n")

    def visit_table(self, node: Table) -> None:
        """Render a Table node."""
        align_attr = ""
        if node.alignments:
            align_attr = self._shadow(ATTR_ALIGN, ",".join(a or "left" for a in node.alignments))

        head_rows = ([node.header] if node.header else []) + [row for row in node.rows if row.is_header]
        body_rows = [row for row in node.rows if not row.is_header]

        self._output.append(f"<table{self._attr('table')}{align_attr}>\n")
        if head_rows:
            self._output.append(f"<thead{self._attr('thead')}>\n")
            for row in head_rows:
                self._render_row(row, "th")
            self._output.append("</thead>\n")
        if body_rows:
            self._output.append(f"<tbody{self._attr('tbody')}>\n")
            for row in body_rows:
                self._render_row(row, "td")
            self._output.append("</tbody>\n")
        self._output.append("</table>\n")

    def _render_row(self, row: TableRow, cell_tag: str) -> None:
        self._output.append(f"<tr{self._attr('tr')}>\n")
        for cell in row.cells:
            self._render_cell(cell, cell_tag)
        self._output.append("</tr>\n")

    def _render_cell(self, cell: TableCell, cell_tag: str) -> None:
        align_style = f"text-align: {cell.alignment}" if cell.alignment and cell.alignment != "left" else ""
        content = self._render_inline_content(cell.content)
        self._output.append(f"<{cell_tag}{self._attr(cell_tag, align_style)}>{content}</{cell_tag}>\n")

    def visit_table_row(self, node: TableRow) -> None:
        """Render a TableRow node outside of a table."""
        self._render_row(node, "th" if node.is_header else "td")

    def visit_table_cell(self, node: TableCell) -> None:
        """Render a TableCell node outside of a row."""
        self._render_cell(node, "td")

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Render a ThematicBreak node."""
        self._output.append(f"<hr{self._attr('hr')}{self._provenance(node.marker)}>\n")

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        """Render a Text node."""
        self._output.append(escape_html(node.content))

    def _render_wrapped(self, tag: str, node: Emphasis | Strong | Strikethrough) -> None:
        content = self._render_inline_content(node.content)
        self._output.append(f"<{tag}{self._attr(tag)}{self._provenance(node.marker)}>{content}</{tag}>")

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render an Emphasis node."""
        self._render_wrapped("em", node)

    def visit_strong(self, node: Strong) -> None:
        """Render a Strong node."""
        self._render_wrapped("strong", node)

    def visit_strikethrough(self, node: Strikethrough) -> None:
        """Render a Strikethrough node."""
        self._render_wrapped("del", node)

    def visit_code(self, node: Code) -> None:
        """Render an inline Code node."""
        self._output.append(
            f"<code{self._attr('code')}{self._provenance(node.marker)}>{escape_html(node.content)}</code>"
        )

    def visit_link(self, node: Link) -> None:
        """Render a Link node.

        The target is sanitized; http(s) targets get ``rel="noopener noreferrer"``.
        """
        href = self._url(node.url)
        content = self._render_inline_content(node.content)
        title_attr = f' title="{escape_html(node.title)}"' if node.title else ""
        rel_attr = f' rel="{EXTERNAL_LINK_REL}"' if is_external_url(href) else ""
        provenance = self._provenance(node.marker) + self._shadow(ATTR_LINK_TEXT, node.source_text)
        self._output.append(
            f'<a{self._attr("a")} href="{escape_html(href)}"{title_attr}{rel_attr}{provenance}>{content}</a>'
        )

    def visit_image(self, node: Image) -> None:
        """Render an Image node."""
        src = self._url(node.url)
        title_attr = f' title="{escape_html(node.title)}"' if node.title else ""
        provenance = (
            self._provenance(node.marker)
            + self._shadow(ATTR_IMAGE_ALT, node.alt_text)
            + self._shadow(ATTR_IMAGE_SRC, node.source_url if node.source_url is not None else node.url)
        )
        self._output.append(
            f'<img{self._attr("img")} src="{escape_html(src)}" alt="{escape_html(node.alt_text)}"'
            f"{title_attr}{provenance}>"
        )

    def visit_autolink(self, node: Autolink) -> None:
        """Render an Autolink node; the URL is also the link text."""
        href = self._url(node.url)
        self._output.append(
            f'<a{self._attr("a")} href="{escape_html(href)}" rel="{EXTERNAL_LINK_REL}">{escape_html(node.url)}</a>'
        )

    def visit_line_break(self, node: LineBreak) -> None:
        """Render a LineBreak node; soft breaks from lazy linefeeds render the same as hard ones."""
        self._output.append(f"<br{self._attr('br')}>")
