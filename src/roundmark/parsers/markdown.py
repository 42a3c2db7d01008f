#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/parsers/markdown.py
"""Markdown to AST parser.

The parser walks the document line by line and classifies each run of
lines into a block. The first rule that matches wins:

1. blank line (ends an open paragraph)
2. ATX heading
3. fenced code block
4. thematic break
5. blockquote (re-parsed recursively)
6. list item
7. pipe table
8. paragraph

Inline content of headings, paragraphs, list items and table cells is
handed to :class:`~roundmark.parsers.inline.InlineFormatter`. Malformed
structures degrade to plain text and never raise; only the nesting depth
guard is fatal.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from roundmark.ast import (
    BlockQuote,
    CodeBlock,
    Document,
    Heading,
    List,
    ListItem,
    Node,
    Paragraph,
    SourceLocation,
    Table,
    TableCell,
    TableRow,
    ThematicBreak,
)
from roundmark.constants import (
    BLOCKQUOTE_PATTERN,
    HEADING_PATTERN,
    LIST_INDENT_WIDTH,
    LIST_ITEM_PATTERN,
    TABLE_SEPARATOR_PATTERN,
    TASK_ITEM_PATTERN,
    THEMATIC_BREAK_PATTERN,
    Alignment,
)
from roundmark.fences import is_fence_close, match_fence_open
from roundmark.options.render import RenderOptions
from roundmark.parsers.base import BaseParser
from roundmark.parsers.inline import InlineFormatter

logger = logging.getLogger(__name__)

_LINE_ENDINGS = re.compile(r"\r\n?")


class MarkdownParser(BaseParser):
    r"""Convert Markdown text to an AST.

    Parameters
    ----------
    options : RenderOptions or None, default = None
        Render options; ``lazy_linefeeds`` and ``max_nesting_depth`` affect parsing

    Examples
    --------
        >>> doc = MarkdownParser().parse("## Title\n\n- a\n- b")
        >>> [type(block).__name__ for block in doc.children]
        ['Heading', 'List']
        >>> doc.children[0].marker
        '##'

    """

    def __init__(self, options: RenderOptions | None = None):
        """Initialize the parser."""
        BaseParser._validate_options_type(options, RenderOptions, "markdown")
        options = options or RenderOptions()
        super().__init__(options)
        self.options: RenderOptions = options
        self._inline = InlineFormatter(
            lazy_linefeeds=options.lazy_linefeeds,
            max_nesting_depth=options.max_nesting_depth,
        )

    def parse(self, input_data: str) -> Document:
        """Parse Markdown text into a Document.

        Parameters
        ----------
        input_data : str
            Markdown source; ``\\r\\n`` and ``\\r`` line endings are normalized

        Returns
        -------
        Document
            Document whose children are the top-level blocks

        Raises
        ------
        NestingDepthError
            If blockquotes, lists or inline formatting nest deeper than ``max_nesting_depth``

        """
        text = _LINE_ENDINGS.sub("\n", input_data)
        return Document(children=self.segment(text))

    def segment(self, text: str, depth: int = 0, line_offset: int = 0) -> list[Node]:
        """Split text into block nodes.

        Parameters
        ----------
        text : str
            Newline-normalized Markdown
        depth : int, default 0
            Blockquote nesting depth of ``text``
        line_offset : int, default 0
            Number of source lines before ``text``, for source locations

        Returns
        -------
        list of Node
            Block nodes in document order

        """
        self._check_depth(depth, "blockquote")

        lines = text.split("\n")
        blocks: list[Node] = []
        paragraph: list[str] = []
        paragraph_start = 0
        i = 0

        def flush_paragraph() -> None:
            if paragraph:
                blocks.append(self._make_paragraph(paragraph, line_offset + paragraph_start + 1))
                paragraph.clear()

        while i < len(lines):
            line = lines[i]
            line_no = line_offset + i + 1

            if not line.strip():
                flush_paragraph()
                i += 1
                continue

            block: Optional[Node] = None
            consumed = 0

            heading = HEADING_PATTERN.match(line)
            if heading:
                block, consumed = self._make_heading(heading), 1
            elif match_fence_open(line):
                block, consumed = self._parse_fence(lines, i)
            elif THEMATIC_BREAK_PATTERN.match(line):
                block, consumed = ThematicBreak(marker=line.strip()), 1
            elif BLOCKQUOTE_PATTERN.match(line):
                block, consumed = self._parse_blockquote(lines, i, depth, line_offset)
            elif LIST_ITEM_PATTERN.match(line):
                block, consumed = self._parse_list(lines, i, depth, line_offset)
            elif "|" in line:
                table_lines = self._collect_table_lines(lines, i)
                block = self._make_table(table_lines)
                consumed = len(table_lines)
                if block is None:
                    logger.debug(f"Pipe lines at line {line_no} are not a valid table; keeping them as text")
                    if not paragraph:
                        paragraph_start = i
                    paragraph.extend(table_lines)
                    i += consumed
                    continue

            if block is None:
                if not paragraph:
                    paragraph_start = i
                paragraph.append(line)
                i += 1
                continue

            flush_paragraph()
            block.source_location = SourceLocation(format="markdown", line=line_no)
            blocks.append(block)
            i += consumed

        flush_paragraph()
        return blocks

    # ------------------------------------------------------------------
    # Block builders
    # ------------------------------------------------------------------

    def _make_paragraph(self, lines: list[str], line_no: int) -> Paragraph:
        text = "\n".join(lines).strip()
        return Paragraph(
            content=self._inline.format(text),
            source_location=SourceLocation(format="markdown", line=line_no),
        )

    def _make_heading(self, match: re.Match[str]) -> Heading:
        hashes, text = match.group(1), match.group(2).strip()
        return Heading(level=len(hashes), content=self._inline.format(text), marker=hashes)

    def _parse_fence(self, lines: list[str], start: int) -> tuple[CodeBlock, int]:
        """Collect a fenced block; an unterminated fence runs to the end of the text."""
        opened = match_fence_open(lines[start])
        assert opened is not None
        fence, lang = opened

        body: list[str] = []
        i = start + 1
        while i < len(lines) and not is_fence_close(lines[i], fence):
            body.append(lines[i])
            i += 1

        if i >= len(lines):
            logger.debug(f"Unterminated fence {fence!r} opened at line {start + 1}; consuming rest of document")
            consumed = i - start
        else:
            consumed = i - start + 1

        block = CodeBlock(
            content="\n".join(body),
            language=lang or None,
            fence_char=fence[0],  # type: ignore[arg-type]
            fence_length=len(fence),
        )
        return block, consumed

    def _parse_blockquote(self, lines: list[str], start: int, depth: int, line_offset: int) -> tuple[BlockQuote, int]:
        inner: list[str] = []
        # the first line's prefix, including any space after ">"
        marker = None
        i = start
        while i < len(lines):
            match = BLOCKQUOTE_PATTERN.match(lines[i])
            if not match:
                break
            if marker is None:
                marker = match.group(1)
            inner.append(match.group(2))
            i += 1

        children = self.segment("\n".join(inner), depth + 1, line_offset + start)
        return BlockQuote(children=children, marker=marker), i - start

    @staticmethod
    def _indent_level(indent: str) -> int:
        return len(indent.replace("\t", "    ")) // LIST_INDENT_WIDTH

    def _new_list(self, marker: str) -> List:
        ordered = marker.endswith(".")
        return List(ordered=ordered, start=int(marker[:-1]) if ordered else 1)

    def _make_list_item(self, marker: str, text: str) -> ListItem:
        task_status = None
        if not marker.endswith("."):
            task = TASK_ITEM_PATTERN.match(text)
            if task:
                task_status = "unchecked" if task.group(1) == " " else "checked"
                text = task.group(2)
        return ListItem(
            children=[Paragraph(content=self._inline.format(text.strip()))],
            task_status=task_status,
            marker=marker,
        )

    def _parse_list(self, lines: list[str], start: int, depth: int, line_offset: int) -> tuple[List, int]:
        """Group consecutive list item lines into a (possibly nested) list.

        Items at the same indentation continue the current list whatever their
        bullet character. Deeper items nest into the previous item. Switching
        between ordered and unordered at the top level ends the list; below the
        top level it opens a sibling list inside the same parent item.
        """
        first = LIST_ITEM_PATTERN.match(lines[start])
        assert first is not None
        root = self._new_list(first.group(2))
        stack: list[tuple[int, List]] = [(self._indent_level(first.group(1)), root)]

        i = start
        while i < len(lines):
            line = lines[i]
            match = LIST_ITEM_PATTERN.match(line)
            if not match or THEMATIC_BREAK_PATTERN.match(line):
                break

            level = self._indent_level(match.group(1))
            marker = match.group(2)
            ordered = marker.endswith(".")

            while len(stack) > 1 and level < stack[-1][0]:
                stack.pop()
            current_level, current = stack[-1]

            if level > current_level and current.items:
                nested = self._new_list(marker)
                current.items[-1].children.append(nested)
                stack.append((level, nested))
                self._check_depth(depth + len(stack) - 1, "list")
                current = nested
            elif current.ordered != ordered:
                if len(stack) == 1:
                    break
                stack.pop()
                sibling = self._new_list(marker)
                stack[-1][1].items[-1].children.append(sibling)
                stack.append((level, sibling))
                current = sibling

            item = self._make_list_item(marker, match.group(3))
            item.source_location = SourceLocation(format="markdown", line=line_offset + i + 1)
            current.items.append(item)
            i += 1

        return root, i - start

    @staticmethod
    def _starts_other_block(line: str) -> bool:
        return bool(
            HEADING_PATTERN.match(line)
            or match_fence_open(line)
            or THEMATIC_BREAK_PATTERN.match(line)
            or BLOCKQUOTE_PATTERN.match(line)
            or LIST_ITEM_PATTERN.match(line)
        )

    def _collect_table_lines(self, lines: list[str], start: int) -> list[str]:
        collected = [lines[start]]
        i = start + 1
        while i < len(lines):
            line = lines[i]
            if not line.strip() or "|" not in line or self._starts_other_block(line):
                break
            collected.append(line)
            i += 1
        return collected

    @staticmethod
    def _split_row(line: str) -> list[str]:
        row = line.strip()
        if row.startswith("|"):
            row = row[1:]
        if row.endswith("|"):
            row = row[:-1]
        return [cell.strip() for cell in row.split("|")]

    @staticmethod
    def _is_separator(line: str) -> bool:
        stripped = line.strip()
        return "-" in stripped and bool(TABLE_SEPARATOR_PATTERN.match(stripped))

    @staticmethod
    def _alignment(cell: str) -> Alignment:
        if len(cell) > 1 and cell.startswith(":") and cell.endswith(":"):
            return "center"
        if cell.endswith(":"):
            return "right"
        return "left"

    def _make_row(self, line: str, alignments: list[Alignment], is_header: bool) -> TableRow:
        cells = [
            TableCell(
                content=self._inline.format(text),
                alignment=alignments[index] if index < len(alignments) else None,
            )
            for index, text in enumerate(self._split_row(line))
        ]
        return TableRow(cells=cells, is_header=is_header)

    def _make_table(self, lines: list[str]) -> Optional[Table]:
        """Build a table, or return None when the lines fail the table gate."""
        if len(lines) < 2:
            return None
        separator = next((index for index in range(1, len(lines)) if self._is_separator(lines[index])), None)
        if separator is None:
            return None

        alignments = [self._alignment(cell) for cell in self._split_row(lines[separator])]
        header_rows = [self._make_row(line, alignments, is_header=True) for line in lines[:separator]]
        body_rows = [self._make_row(line, alignments, is_header=False) for line in lines[separator + 1 :]]

        return Table(
            header=header_rows[0],
            rows=header_rows[1:] + body_rows,
            alignments=list(alignments),
        )
