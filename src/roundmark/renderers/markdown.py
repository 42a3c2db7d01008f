#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/renderers/markdown.py
"""Markdown rendering from AST.

The MarkdownRenderer is the second half of reconstruction: it turns the AST
recovered from rendered HTML (or produced directly by the Markdown parser)
back into Markdown text. Wherever a node carries a provenance ``marker`` the
marker is written verbatim; otherwise the canonical spelling is used:

========================  ====================
Node                      Canonical syntax
========================  ====================
Heading                   ``#`` x level
Strong                    ``**``
Emphasis                  ``*``
Strikethrough             ``~~``
Code                      single backtick
Unordered list item       ``-``
Ordered list item         ``{start + index}.``
Blockquote                ``>``
Thematic break            ``---``
Fenced code               three backticks
========================  ====================

Text is written as-is; the dialect has no backslash escapes.

"""

from __future__ import annotations

import logging
import re
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
    Node,
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
    DEFAULT_BLOCKQUOTE_MARKER,
    DEFAULT_BULLET_MARKER,
    DEFAULT_CODE_MARKER,
    DEFAULT_EMPHASIS_MARKER,
    DEFAULT_HEADING_MARKER,
    DEFAULT_STRIKETHROUGH_MARKER,
    DEFAULT_STRONG_MARKER,
    DEFAULT_THEMATIC_BREAK,
    IMAGE_MARKER,
    LIST_INDENT_WIDTH,
    THEMATIC_BREAK_PATTERN,
    Alignment,
)
from roundmark.options.reconstruct import ReconstructOptions
from roundmark.renderers.base import BaseRenderer, InlineContentMixin

logger = logging.getLogger(__name__)

_BLANK_LINE_RUNS = re.compile(r"\n{3,}")
_BULLET_MARKERS = frozenset({"-", "*", "+"})
_ORDERED_MARKER_PATTERN = re.compile(r"^\d+\.$")

_SEPARATOR_CELLS: dict[Alignment, str] = {
    "left": "---",
    "center": ":---:",
    "right": "---:",
}


class MarkdownRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
    r"""Render AST nodes to Markdown.

    Parameters
    ----------
    options : ReconstructOptions or None, default = None
        Reconstruction options

    Examples
    --------
        >>> from roundmark.ast import Document, Paragraph, Strong, Text
        >>> doc = Document(children=[Paragraph(content=[Strong(content=[Text(content="hi")], marker="__")])])
        >>> MarkdownRenderer().render_to_string(doc)
        '__hi__'

    """

    def __init__(self, options: ReconstructOptions | None = None):
        """Initialize the Markdown renderer with options."""
        BaseRenderer._validate_options_type(options, ReconstructOptions, "markdown")
        options = options or ReconstructOptions()
        BaseRenderer.__init__(self, options)
        self.options: ReconstructOptions = options
        self._output: list[str] = []
        self._list_depth = 0

    def render_to_string(self, doc: Document) -> str:
        """Render a document AST to Markdown.

        Parameters
        ----------
        doc : Document
            The document node to render

        Returns
        -------
        str
            Markdown text with blocks separated by one blank line and no
            leading or trailing whitespace

        """
        self._require_document(doc, "MarkdownRenderer")
        self._output = []
        self._list_depth = 0
        doc.accept(self)
        return self._cleanup_output("".join(self._output))

    def _cleanup_output(self, text: str) -> str:
        """Clean up the final output."""
        return text.strip()

    def _render_block(self, node: Node) -> str:
        """Render a block node to a string without touching the current output."""
        saved_output = self._output
        self._output = []
        node.accept(self)
        result = "".join(self._output)
        self._output = saved_output
        return result

    def _render_blocks(self, blocks: list[Node]) -> str:
        """Render blocks separated by one blank line.

        Runs of blank lines are collapsed everywhere except inside fenced code.
        """
        rendered = []
        for block in blocks:
            text = self._render_block(block)
            if not isinstance(block, CodeBlock):
                text = _BLANK_LINE_RUNS.sub("\n\n", text).strip("\n")
            if text.strip():
                rendered.append(text)
        return "\n\n".join(rendered)

    # ------------------------------------------------------------------
    # Block nodes
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> None:
        """Render a Document node."""
        self._output.append(self._render_blocks(node.children))

    def visit_heading(self, node: Heading) -> None:
        """Render a Heading node.

        A stored marker whose length disagrees with the heading level is
        stale (the level was edited) and is replaced.
        """
        marker = node.marker
        if not marker or marker != DEFAULT_HEADING_MARKER * node.level:
            marker = DEFAULT_HEADING_MARKER * node.level
        content = self._render_inline_content(node.content)
        self._output.append(f"{marker} {content}")

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node."""
        self._output.append(self._render_inline_content(node.content))

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a CodeBlock node with its original fence."""
        lang = (node.language or "").strip()
        if not node.content:
            self._output.append(f"{node.fence}{lang}\n{node.fence}")
            return
        self._output.append(f"{node.fence}{lang}\n{node.content}\n{node.fence}")

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Render a BlockQuote node, prefixing every line with the marker.

        A stored marker is used verbatim, so ``>`` without a following space
        stays that way; blank lines get the marker without trailing whitespace.
        """
        marker = node.marker if node.marker and node.marker.startswith(">") else DEFAULT_BLOCKQUOTE_MARKER
        inner = self._render_blocks(node.children)
        lines = [marker + line if line else marker.rstrip() for line in inner.split("\n")]
        self._output.append("\n".join(lines))

    def visit_list(self, node: List) -> None:
        """Render a List node; nested lists are indented two spaces per level."""
        lines = []
        for index, item in enumerate(node.items):
            lines.append(self._render_list_item(item, node, index))
        self._output.append("\n".join(line for line in lines if line))

    def _item_marker(self, item: ListItem, parent: List, index: int) -> str:
        if item.task_status:
            return DEFAULT_BULLET_MARKER
        marker = item.marker
        if parent.ordered:
            if marker and _ORDERED_MARKER_PATTERN.match(marker):
                return marker
            return f"{parent.start + index}."
        if marker in _BULLET_MARKERS:
            return marker
        return DEFAULT_BULLET_MARKER

    def _render_list_item(self, item: ListItem, parent: List, index: int) -> str:
        indent = " " * (LIST_INDENT_WIDTH * self._list_depth)
        marker = self._item_marker(item, parent, index)
        task = ""
        if item.task_status:
            task = "[x] " if item.task_status == "checked" else "[ ] "

        children = item.children
        text = ""
        if children and isinstance(children[0], Paragraph):
            text = self._render_inline_content(children[0].content)
            children = children[1:]

        lines = [f"{indent}{marker} {task}{text}".rstrip()]

        self._list_depth += 1
        try:
            for child in children:
                rendered = self._render_block(child)
                if not rendered.strip():
                    continue
                if isinstance(child, List):
                    lines.append(rendered)
                else:
                    # other blocks sit under the item text, indented to the content column
                    pad = " " * (len(indent) + len(marker) + 1)
                    lines.extend(f"{pad}{line}" if line else "" for line in rendered.split("\n"))
        finally:
            self._list_depth -= 1

        return "\n".join(lines)

    def visit_list_item(self, node: ListItem) -> None:
        """Render a ListItem found outside of a list as an unordered item."""
        self._output.append(self._render_list_item(node, List(ordered=False), 0))

    def visit_table(self, node: Table) -> None:
        """Render a Table node as a pipe table."""
        head_rows = ([node.header] if node.header else []) + [row for row in node.rows if row.is_header]
        body_rows = [row for row in node.rows if not row.is_header]
        if not head_rows:
            if not body_rows:
                return
            head_rows, body_rows = body_rows[:1], body_rows[1:]

        columns = max(len(node.alignments), *(len(row.cells) for row in head_rows + body_rows))
        header_cells = head_rows[0].cells

        separator = []
        for column in range(columns):
            alignment: Optional[Alignment] = node.alignments[column] if column < len(node.alignments) else None
            if alignment is None and column < len(header_cells):
                alignment = header_cells[column].alignment
            separator.append(_SEPARATOR_CELLS.get(alignment or "left", "---"))

        lines = [self._render_row_line(row) for row in head_rows]
        lines.append("| " + " | ".join(separator) + " |")
        lines.extend(self._render_row_line(row) for row in body_rows)
        self._output.append("\n".join(lines))

    def _render_row_line(self, row: TableRow) -> str:
        cells = [self._render_inline_content(cell.content).replace("\n", " ") for cell in row.cells]
        return "| " + " | ".join(cells) + " |"

    def visit_table_row(self, node: TableRow) -> None:
        """Render a TableRow node as a single pipe line."""
        self._output.append(self._render_row_line(node))

    def visit_table_cell(self, node: TableCell) -> None:
        """Render a TableCell node's content."""
        self._output.append(self._render_inline_content(node.content))

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Render a ThematicBreak node."""
        marker = node.marker
        if not marker or not THEMATIC_BREAK_PATTERN.match(marker):
            marker = DEFAULT_THEMATIC_BREAK
        self._output.append(marker)

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        """Render a Text node verbatim."""
        self._output.append(node.content)

    def _render_delimited(self, content: list[Node], marker: Optional[str], default: str) -> None:
        """Wrap rendered content in its delimiter; empty content gets no delimiters."""
        inner = self._render_inline_content(content)
        if not inner.strip():
            self._output.append(inner)
            return
        delimiter = marker or default
        self._output.append(f"{delimiter}{inner}{delimiter}")

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render an Emphasis node."""
        self._render_delimited(node.content, node.marker, DEFAULT_EMPHASIS_MARKER)

    def visit_strong(self, node: Strong) -> None:
        """Render a Strong node."""
        self._render_delimited(node.content, node.marker, DEFAULT_STRONG_MARKER)

    def visit_strikethrough(self, node: Strikethrough) -> None:
        """Render a Strikethrough node."""
        self._render_delimited(node.content, node.marker, DEFAULT_STRIKETHROUGH_MARKER)

    def visit_code(self, node: Code) -> None:
        """Render an inline Code node."""
        if not node.content:
            return
        marker = node.marker or DEFAULT_CODE_MARKER
        self._output.append(f"{marker}{node.content}{marker}")

    def visit_link(self, node: Link) -> None:
        """Render a Link node, preferring the original source text."""
        text = node.source_text if node.source_text is not None else self._render_inline_content(node.content)
        self._output.append(f"[{text}]({node.url})")

    def visit_image(self, node: Image) -> None:
        """Render an Image node, preferring the original source URL."""
        marker = node.marker or IMAGE_MARKER
        url = node.source_url if node.source_url is not None else node.url
        self._output.append(f"{marker}[{node.alt_text}]({url})")

    def visit_autolink(self, node: Autolink) -> None:
        """Render an Autolink node."""
        self._output.append(f"<{node.url}>" if node.bracketed else node.url)

    def visit_line_break(self, node: LineBreak) -> None:
        """Render a LineBreak node; soft breaks are plain newlines."""
        self._output.append("\n" if node.soft else "  \n")
