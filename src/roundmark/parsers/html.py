#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/parsers/html.py
"""Rendered HTML to AST converter (the reverse walker).

Walks a BeautifulSoup tree produced by :class:`~roundmark.renderers.html.HtmlRenderer`,
possibly after a rich-text editor has changed it, and rebuilds the AST.
Provenance attributes are copied back into the node ``marker`` fields so the
Markdown renderer can restore the author's original spelling. Elements without
provenance produce nodes with ``marker=None``, which render with canonical
syntax.

Unknown elements are transparent: their children are processed in place.
``script``, ``style`` and comments are dropped.

"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Optional, cast

from roundmark.ast import (
    Autolink,
    BlockQuote,
    Code,
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
from roundmark.constants import (
    ATTR_ALIGN,
    ATTR_IMAGE_ALT,
    ATTR_IMAGE_SRC,
    ATTR_LINK_TEXT,
    ATTR_MARKER,
    DEPS_HTML,
    IGNORED_HTML_ELEMENTS,
    Alignment,
)
from roundmark.exceptions import ParsingError
from roundmark.fences import is_fence_element, reverse_fence
from roundmark.options.reconstruct import ReconstructOptions
from roundmark.parsers.base import BaseParser
from roundmark.utils.decorators import requires_dependencies

logger = logging.getLogger(__name__)

_HTML_PARSER = "html.parser"
_TEXT_ALIGN_PATTERN = re.compile(r"text-align\s*:\s*(left|center|right)", re.IGNORECASE)
_VALID_ALIGNMENTS = ("left", "center", "right")


class HtmlToAstConverter(BaseParser):
    """Convert rendered HTML back to an AST.

    Parameters
    ----------
    options : ReconstructOptions or None, default = None
        Reconstruction options; ``fence_plugin`` supplies the reverse function
        for plugin-rendered fences

    Examples
    --------
        >>> doc = HtmlToAstConverter().parse('<h2 data-qd="##">Title</h2>')
        >>> doc.children[0].marker
        '##'

    """

    # Elements that start blocks in the reconstructed document
    BLOCK_ELEMENTS = frozenset(
        {
            "html",
            "body",
            "div",
            "p",
            "h1",
            "h2",
            "h3",
            "h4",
            "h5",
            "h6",
            "section",
            "article",
            "header",
            "footer",
            "nav",
            "aside",
            "main",
            "ul",
            "ol",
            "li",
            "blockquote",
            "pre",
            "hr",
            "table",
            "thead",
            "tbody",
            "tfoot",
            "tr",
            "th",
            "td",
            "figure",
            "figcaption",
            "details",
            "summary",
            "address",
        }
    )

    # Dispatch table mapping HTML element names to processing methods
    _ELEMENT_HANDLERS = {
        # Block elements
        "p": "_process_block_to_ast",
        "div": "_process_block_to_ast",
        "h1": "_process_heading_to_ast",
        "h2": "_process_heading_to_ast",
        "h3": "_process_heading_to_ast",
        "h4": "_process_heading_to_ast",
        "h5": "_process_heading_to_ast",
        "h6": "_process_heading_to_ast",
        "ul": "_process_list_to_ast",
        "ol": "_process_list_to_ast",
        "blockquote": "_process_blockquote_to_ast",
        "table": "_process_table_to_ast",
        "hr": "_process_thematic_break_to_ast",
        # Inline elements
        "strong": "_process_strong_to_ast",
        "b": "_process_strong_to_ast",
        "em": "_process_emphasis_to_ast",
        "i": "_process_emphasis_to_ast",
        "del": "_process_strikethrough_to_ast",
        "s": "_process_strikethrough_to_ast",
        "strike": "_process_strikethrough_to_ast",
        "code": "_process_code_to_ast",
        "a": "_process_link_to_ast",
        "img": "_process_image_to_ast",
        "br": "_process_line_break_to_ast",
    }

    def __init__(self, options: ReconstructOptions | None = None):
        """Initialize the converter with options."""
        BaseParser._validate_options_type(options, ReconstructOptions, "html")
        options = options or ReconstructOptions()
        super().__init__(options)
        self.options: ReconstructOptions = options
        self._depth = 0

    @requires_dependencies("html", DEPS_HTML)
    def parse(self, input_data: Any) -> Document:
        """Parse rendered HTML into an AST.

        Parameters
        ----------
        input_data : str, bs4.BeautifulSoup or bs4.element.Tag
            HTML text, a parsed document, or a single element (the element
            itself is reconstructed, not only its children)

        Returns
        -------
        Document
            AST Document node

        Raises
        ------
        TypeError
            If input_data is none of the supported types
        NestingDepthError
            If the element tree is deeper than ``max_nesting_depth``
        ParsingError
            If BeautifulSoup rejects the markup

        """
        from bs4 import BeautifulSoup
        from bs4.builder import ParserRejectedMarkup
        from bs4.element import Tag

        self._depth = 0

        if isinstance(input_data, str):
            try:
                soup = BeautifulSoup(input_data, _HTML_PARSER)
            except ParserRejectedMarkup as e:
                raise ParsingError(f"Failed to parse HTML: {e}", parsing_stage="html", original_error=e) from e
            return Document(children=self._process_block_container(soup))
        if isinstance(input_data, BeautifulSoup):
            return Document(children=self._process_block_container(input_data))
        if isinstance(input_data, Tag):
            return Document(children=self._blocks_from_nodes([input_data]))

        raise TypeError(f"Expected HTML string or BeautifulSoup element, got {type(input_data).__name__}")

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _process_node_to_ast(self, node: Any) -> Node | list[Node] | None:
        """Process a BeautifulSoup node to AST nodes.

        Parameters
        ----------
        node : Any
            BeautifulSoup node to process

        Returns
        -------
        Node, list of Node, or None
            Resulting AST node(s)

        """
        from bs4.element import NavigableString, PreformattedString

        # comments, CDATA, doctypes and processing instructions
        if isinstance(node, PreformattedString):
            return None

        if isinstance(node, NavigableString):
            text = str(node)
            return Text(content=text) if text else None

        if not getattr(node, "name", None) or node.name in IGNORED_HTML_ELEMENTS:
            return None

        with self._nested():
            if is_fence_element(node):
                return reverse_fence(node, self.options.fence_plugin)

            handler_name = self._ELEMENT_HANDLERS.get(node.name)
            if handler_name:
                handler = getattr(self, handler_name)
                return handler(node)

            if self._is_block_element(node):
                return self._process_block_to_ast(node)
            return self._process_children_to_inline(node)

    @contextmanager
    def _nested(self) -> Iterator[None]:
        """Count one level of element nesting for the duration of the block."""
        self._depth += 1
        try:
            self._check_depth(self._depth, "html")
            yield
        finally:
            self._depth -= 1

    def _is_block_element(self, node: Any, lookahead: int = 0) -> bool:
        """Check whether a node starts a block of its own."""
        name = getattr(node, "name", None)
        if not isinstance(name, str):
            return False
        if name in self.BLOCK_ELEMENTS or is_fence_element(node):
            return True
        # unknown wrappers holding blocks (custom elements, editor containers)
        if name in self._ELEMENT_HANDLERS or lookahead >= self.options.max_nesting_depth:
            return False
        return self._has_block_children(node, lookahead + 1)

    def _has_block_children(self, node: Any, lookahead: int = 0) -> bool:
        return any(self._is_block_element(child, lookahead) for child in getattr(node, "children", ()))

    @staticmethod
    def _extend(target: list[Node], produced: Node | list[Node] | None) -> None:
        if produced is None:
            return
        if isinstance(produced, list):
            target.extend(produced)
        else:
            target.append(produced)

    # ------------------------------------------------------------------
    # Block structure
    # ------------------------------------------------------------------

    def _process_block_container(self, node: Any) -> list[Node]:
        """Process the children of a block container element.

        Inline content found between blocks is wrapped in a Paragraph;
        whitespace-only runs are dropped.
        """
        return self._blocks_from_nodes(node.children)

    def _blocks_from_nodes(self, nodes: Iterable[Any]) -> list[Node]:
        blocks: list[Node] = []
        inline_buffer: list[Node] = []

        def flush_inline() -> None:
            content = _trim_inline(inline_buffer)
            if content:
                blocks.append(Paragraph(content=content))
            inline_buffer.clear()

        for child in nodes:
            if self._is_block_element(child):
                flush_inline()
                self._extend(blocks, self._process_node_to_ast(child))
            else:
                self._extend(inline_buffer, self._process_node_to_ast(child))

        flush_inline()
        return blocks

    def _process_block_to_ast(self, node: Any) -> Paragraph | list[Node] | None:
        """Process a ``p``, ``div`` or unknown block element."""
        if self._has_block_children(node):
            return self._process_block_container(node)
        content = _trim_inline(self._process_children_to_inline(node))
        if content:
            return Paragraph(content=content)
        return None

    def _process_heading_to_ast(self, node: Any) -> Heading:
        level = int(node.name[1])
        content = _trim_inline(self._process_children_to_inline(node))
        return Heading(level=level, content=content, marker=node.get(ATTR_MARKER))

    def _process_blockquote_to_ast(self, node: Any) -> BlockQuote:
        return BlockQuote(children=self._process_block_container(node), marker=node.get(ATTR_MARKER))

    def _process_thematic_break_to_ast(self, node: Any) -> ThematicBreak:
        return ThematicBreak(marker=node.get(ATTR_MARKER))

    def _process_list_to_ast(self, node: Any) -> List:
        """Process a ``ul`` or ``ol`` element.

        A list nested directly inside another list (rather than inside an
        ``li``) is attached to the preceding item.
        """
        ordered = node.name == "ol"
        try:
            start = int(node.get("start", 1))
        except ValueError:
            start = 1

        items: list[ListItem] = []
        for child in node.children:
            name = getattr(child, "name", None)
            if name == "li":
                items.append(self._guarded_list_item(child))
            elif name in ("ul", "ol"):
                nested = self._process_node_to_ast(child)
                if not isinstance(nested, List):
                    continue
                if items:
                    items[-1].children.append(nested)
                else:
                    items.append(ListItem(children=[nested]))

        return List(ordered=ordered, items=items, start=start)

    def _guarded_list_item(self, node: Any) -> ListItem:
        """Process an ``li`` element under the depth guard."""
        with self._nested():
            return self._process_list_item_to_ast(node)

    def _process_list_item_to_ast(self, node: Any) -> ListItem:
        """Process an ``li`` element.

        A direct checkbox child marks a task item; inline content becomes the
        leading paragraph and nested lists follow it.
        """
        checkbox = node.find("input", attrs={"type": "checkbox"}, recursive=False)
        task_status = None
        if checkbox is not None:
            task_status = "checked" if checkbox.has_attr("checked") else "unchecked"

        children: list[Node] = []
        inline_content: list[Node] = []

        def flush_inline() -> None:
            content = _trim_inline(inline_content)
            if content:
                children.append(Paragraph(content=content))
            inline_content.clear()

        for child in node.children:
            if child is checkbox:
                continue
            if self._is_block_element(child):
                flush_inline()
                self._extend(children, self._process_node_to_ast(child))
            else:
                self._extend(inline_content, self._process_node_to_ast(child))
        flush_inline()

        return ListItem(children=children, task_status=task_status, marker=node.get(ATTR_MARKER))

    def _process_table_to_ast(self, node: Any) -> Table:
        """Process a ``table`` element.

        Rows inside ``thead`` (or rows made only of ``th`` cells) are header
        rows; the first header row becomes ``Table.header``. Without any header
        row the first row is promoted.
        """
        row_elements: list[Any] = []
        for child in node.children:
            name = getattr(child, "name", None)
            if name in ("thead", "tbody", "tfoot"):
                row_elements.extend(child.find_all("tr", recursive=False))
            elif name == "tr":
                row_elements.append(child)

        stored_alignments = _parse_stored_alignments(node.get(ATTR_ALIGN))
        rows: list[TableRow] = []
        for tr in row_elements:
            cells = tr.find_all(["th", "td"], recursive=False)
            is_header = tr.parent.name == "thead" or (bool(cells) and all(cell.name == "th" for cell in cells))
            table_cells = [
                TableCell(
                    content=_trim_inline(self._process_children_to_inline(cell)),
                    alignment=self._get_alignment(cell) or _alignment_at(stored_alignments, index),
                )
                for index, cell in enumerate(cells)
            ]
            rows.append(TableRow(cells=table_cells, is_header=is_header))

        if not rows:
            return Table()

        header = rows.pop(0)
        header.is_header = True

        alignments: list[Optional[Alignment]]
        if stored_alignments:
            alignments = list(stored_alignments)
        else:
            alignments = [cell.alignment or "left" for cell in header.cells]

        return Table(header=header, rows=rows, alignments=alignments)

    @staticmethod
    def _get_alignment(cell: Any) -> Optional[Alignment]:
        """Get table cell alignment from the ``align`` attribute or the last ``text-align`` declaration."""
        align = str(cell.get("align", "")).lower()
        if align in _VALID_ALIGNMENTS:
            return cast(Alignment, align)

        declarations = _TEXT_ALIGN_PATTERN.findall(str(cell.get("style", "")))
        if declarations:
            return cast(Alignment, declarations[-1].lower())
        return None

    # ------------------------------------------------------------------
    # Inline content
    # ------------------------------------------------------------------

    def _process_children_to_inline(self, node: Any) -> list[Node]:
        """Process node children to inline nodes.

        Block elements met in inline context are flattened into their inline
        content. A newline directly following a ``<br>`` is dropped, since the
        break already produces one.
        """
        result: list[Node] = []
        after_break = False

        for child in node.children:
            if self._is_block_element(child) and not is_fence_element(child):
                with self._nested():
                    produced: Node | list[Node] | None = self._process_children_to_inline(child)
            else:
                produced = self._process_node_to_ast(child)

            nodes = produced if isinstance(produced, list) else [produced] if produced is not None else []
            for ast_node in nodes:
                if after_break and isinstance(ast_node, Text) and ast_node.content.startswith("\n"):
                    ast_node = Text(content=ast_node.content[1:])
                    if not ast_node.content:
                        continue
                after_break = isinstance(ast_node, LineBreak)
                result.append(ast_node)

        return result

    def _process_strong_to_ast(self, node: Any) -> Strong:
        return Strong(content=self._process_children_to_inline(node), marker=node.get(ATTR_MARKER))

    def _process_emphasis_to_ast(self, node: Any) -> Emphasis:
        return Emphasis(content=self._process_children_to_inline(node), marker=node.get(ATTR_MARKER))

    def _process_strikethrough_to_ast(self, node: Any) -> Strikethrough:
        return Strikethrough(content=self._process_children_to_inline(node), marker=node.get(ATTR_MARKER))

    def _process_code_to_ast(self, node: Any) -> Code:
        return Code(content=node.get_text(), marker=node.get(ATTR_MARKER))

    def _process_line_break_to_ast(self, node: Any) -> LineBreak:
        return LineBreak()

    def _process_link_to_ast(self, node: Any) -> Link | Autolink:
        """Process an ``a`` element.

        The stored original text wins over the live text. A link without
        provenance whose text equals its target is an autolink.
        """
        href = str(node.get("href", ""))
        marker = node.get(ATTR_MARKER)
        source_text = node.get(ATTR_LINK_TEXT)

        if marker is None and source_text is None and href and node.get_text() == href:
            return Autolink(url=href, bracketed=True)

        if source_text is not None:
            content: list[Node] = [Text(content=source_text)]
        else:
            content = self._process_children_to_inline(node)

        return Link(url=href, content=content, title=node.get("title"), marker=marker, source_text=source_text)

    def _process_image_to_ast(self, node: Any) -> Image:
        stored_src = node.get(ATTR_IMAGE_SRC)
        stored_alt = node.get(ATTR_IMAGE_ALT)
        return Image(
            url=str(stored_src if stored_src is not None else node.get("src", "")),
            alt_text=str(stored_alt if stored_alt is not None else node.get("alt", "")),
            title=node.get("title"),
            marker=node.get(ATTR_MARKER),
            source_url=stored_src,
        )


def _trim_inline(nodes: list[Node]) -> list[Node]:
    """Strip leading and trailing whitespace from a run of inline nodes."""
    trimmed = list(nodes)
    while trimmed and isinstance(trimmed[0], Text):
        stripped = trimmed[0].content.lstrip()
        if stripped:
            trimmed[0] = Text(content=stripped)
            break
        trimmed.pop(0)
    while trimmed and isinstance(trimmed[-1], Text):
        stripped = trimmed[-1].content.rstrip()
        if stripped:
            trimmed[-1] = Text(content=stripped)
            break
        trimmed.pop()
    return trimmed


def _parse_stored_alignments(value: Any) -> list[Alignment]:
    if not value:
        return []
    return [
        cast(Alignment, part.strip()) if part.strip() in _VALID_ALIGNMENTS else "left" for part in str(value).split(",")
    ]


def _alignment_at(alignments: list[Alignment], index: int) -> Optional[Alignment]:
    return alignments[index] if index < len(alignments) else None
