#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/ast/nodes.py
"""AST node classes for document representation.

This module defines the node hierarchy shared by both directions of the
Markdown/HTML round trip. The Markdown parser and the HTML reverse parser
both produce these nodes; the HTML renderer and the Markdown renderer both
consume them.

Provenance
----------
Nodes produced from syntax with more than one spelling carry a ``marker``
field holding the literal source token (``"##"``, ``"__"``, ``"*"``, ``"1."``,
``">"``). The marker is ``None`` when the spelling is unknown, in which case
renderers fall back to the canonical spelling. Fenced code keeps its fence in
``fence_char`` and ``fence_length``.

Node Hierarchy
--------------
Block-level nodes:
    - Document, Heading, Paragraph, CodeBlock, BlockQuote
    - List, ListItem, Table, TableRow, TableCell, ThematicBreak

Inline nodes:
    - Text, Emphasis, Strong, Strikethrough, Code
    - Link, Image, Autolink, LineBreak

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from roundmark.constants import Alignment, CodeFenceChar, TaskStatus


@dataclass
class SourceLocation:
    """Source location information for AST nodes.

    Parameters
    ----------
    format : str
        Source format ('markdown' or 'html')
    line : int or None, default = None
        1-based line number of the block that produced the node (Markdown input)
    element_id : str or None, default = None
        Source element identifier (HTML input)
    metadata : dict, default = empty dict
        Additional format-specific location information

    """

    format: str
    line: Optional[int] = None
    element_id: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)


class Node(ABC):
    """Base class for all AST nodes.

    Parameters
    ----------
    metadata : dict, default = empty dict
        Arbitrary metadata associated with this node
    source_location : SourceLocation or None, default = None
        Information about where this node came from in the source

    """

    metadata: dict[str, Any]
    source_location: Optional[SourceLocation]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root document node containing all block-level nodes.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the document
    metadata : dict, default = empty dict
        Document-level metadata
    source_location : SourceLocation or None, default = None
        Source location information

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_document``."""
        return visitor.visit_document(self)


@dataclass
class Heading(Node):
    """Heading node (h1-h6).

    Parameters
    ----------
    level : int
        Heading level (1-6)
    content : list of Node, default = empty list
        Inline nodes representing heading text
    marker : str or None, default = None
        Literal hash run from the source (e.g. ``"##"``)

    """

    level: int
    content: list[Node] = field(default_factory=list)
    marker: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def __post_init__(self) -> None:
        """Validate heading level is between 1 and 6."""
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_heading``."""
        return visitor.visit_heading(self)


@dataclass
class Paragraph(Node):
    """Paragraph node containing inline content.

    Paragraphs have no single originating token and therefore no marker.

    Parameters
    ----------
    content : list of Node, default = empty list
        Inline nodes in the paragraph

    """

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_paragraph``."""
        return visitor.visit_paragraph(self)


@dataclass
class CodeBlock(Node):
    """Fenced code block.

    Parameters
    ----------
    content : str
        Raw, unescaped code between the fences
    language : str or None, default = None
        Trimmed info string after the opening fence
    fence_char : {'`', '~'}, default = '`'
        Fence character
    fence_length : int, default = 3
        Number of fence characters in the opening fence

    """

    content: str
    language: Optional[str] = None
    fence_char: CodeFenceChar = "`"
    fence_length: int = 3
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def __post_init__(self) -> None:
        """Validate the fence."""
        if self.fence_char not in ("`", "~"):
            raise ValueError(f"Fence character must be '`' or '~', got {self.fence_char!r}")
        if self.fence_length < 3:
            raise ValueError(f"Fence length must be at least 3, got {self.fence_length}")

    @property
    def fence(self) -> str:
        """The literal fence string, e.g. ``"~~~~"``."""
        return self.fence_char * self.fence_length

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_code_block``."""
        return visitor.visit_code_block(self)


@dataclass
class BlockQuote(Node):
    """Block quote containing nested blocks.

    Parameters
    ----------
    children : list of Node, default = empty list
        Blocks parsed from the quote's dedented text
    marker : str or None, default = None
        Quote marker (``">"``)

    """

    children: list[Node] = field(default_factory=list)
    marker: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_block_quote``."""
        return visitor.visit_block_quote(self)


@dataclass
class List(Node):
    """Ordered or unordered list.

    Parameters
    ----------
    ordered : bool
        True for ``<ol>``, False for ``<ul>``
    items : list of ListItem, default = empty list
        List items
    start : int, default = 1
        Number of the first item of an ordered list
    tight : bool, default = True
        Whether items render without paragraph wrappers

    """

    ordered: bool
    items: list[ListItem] = field(default_factory=list)
    start: int = 1
    tight: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list``."""
        return visitor.visit_list(self)


@dataclass
class ListItem(Node):
    """List item.

    The first child is normally a Paragraph holding the item text; nested
    lists follow it.

    Parameters
    ----------
    children : list of Node, default = empty list
        Blocks inside the item
    task_status : {'checked', 'unchecked'} or None, default = None
        Checkbox state of a task list item
    marker : str or None, default = None
        Literal bullet (``"-"``, ``"*"``, ``"+"``) or number (``"3."``)

    """

    children: list[Node] = field(default_factory=list)
    task_status: Optional[TaskStatus] = None
    marker: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list_item``."""
        return visitor.visit_list_item(self)


@dataclass
class Table(Node):
    """Pipe table.

    Parameters
    ----------
    rows : list of TableRow, default = empty list
        Rows after the header; rows flagged ``is_header`` belong in the table head
    header : TableRow or None, default = None
        First header row
    alignments : list of Alignment or None, default = empty list
        Column alignments from the separator row

    """

    rows: list[TableRow] = field(default_factory=list)
    header: Optional[TableRow] = None
    alignments: list[Optional[Alignment]] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table``."""
        return visitor.visit_table(self)


@dataclass
class TableRow(Node):
    """Table row.

    Parameters
    ----------
    cells : list of TableCell, default = empty list
        Cells in the row
    is_header : bool, default = False
        Whether the row belongs to the table head

    """

    cells: list[TableCell] = field(default_factory=list)
    is_header: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_row``."""
        return visitor.visit_table_row(self)


@dataclass
class TableCell(Node):
    """Table cell with inline content.

    Parameters
    ----------
    content : list of Node, default = empty list
        Inline nodes in the cell
    alignment : Alignment or None, default = None
        Cell alignment

    """

    content: list[Node] = field(default_factory=list)
    alignment: Optional[Alignment] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_cell``."""
        return visitor.visit_table_cell(self)


@dataclass
class ThematicBreak(Node):
    """Horizontal rule.

    Parameters
    ----------
    marker : str or None, default = None
        The literal source line (``"***"``, ``"- - -"``)

    """

    marker: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_thematic_break``."""
        return visitor.visit_thematic_break(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text, stored unescaped."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_text``."""
        return visitor.visit_text(self)


@dataclass
class Emphasis(Node):
    """Emphasis (``<em>``), delimited by ``*`` or ``_``."""

    content: list[Node] = field(default_factory=list)
    marker: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_emphasis``."""
        return visitor.visit_emphasis(self)


@dataclass
class Strong(Node):
    """Strong emphasis (``<strong>``), delimited by ``**`` or ``__``."""

    content: list[Node] = field(default_factory=list)
    marker: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_strong``."""
        return visitor.visit_strong(self)


@dataclass
class Strikethrough(Node):
    """Strikethrough (``<del>``), delimited by ``~~``."""

    content: list[Node] = field(default_factory=list)
    marker: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_strikethrough``."""
        return visitor.visit_strikethrough(self)


@dataclass
class Code(Node):
    """Inline code span; content is raw and never re-scanned."""

    content: str
    marker: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_code``."""
        return visitor.visit_code(self)


@dataclass
class Link(Node):
    """Inline link ``[text](url)``.

    Parameters
    ----------
    url : str
        Link target as written (sanitized at render time)
    content : list of Node, default = empty list
        Inline nodes of the display text
    title : str or None, default = None
        Link title
    marker : str or None, default = None
        Leading sigil (``"["``)
    source_text : str or None, default = None
        Display text exactly as written in the source, formatting included.
        Reconstruction emits it instead of re-rendering ``content``.

    """

    url: str
    content: list[Node] = field(default_factory=list)
    title: Optional[str] = None
    marker: Optional[str] = None
    source_text: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_link``."""
        return visitor.visit_link(self)


@dataclass
class Image(Node):
    """Inline image ``![alt](url)``.

    Parameters
    ----------
    url : str, default = ''
        Image source (sanitized at render time)
    alt_text : str, default = ''
        Alternative text, kept verbatim
    title : str or None, default = None
        Image title
    marker : str or None, default = None
        Leading sigil (``"!"``)
    source_url : str or None, default = None
        Source as written, before sanitization

    """

    url: str = ""
    alt_text: str = ""
    title: Optional[str] = None
    marker: Optional[str] = None
    source_url: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_image``."""
        return visitor.visit_image(self)


@dataclass
class Autolink(Node):
    """Bare or angle-bracketed URL rendered as a link to itself.

    Parameters
    ----------
    url : str
        The URL, also used as display text
    bracketed : bool, default = False
        True when written as ``<https://...>``

    """

    url: str
    bracketed: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_autolink``."""
        return visitor.visit_autolink(self)


@dataclass
class LineBreak(Node):
    """Line break.

    Parameters
    ----------
    soft : bool, default = False
        True for a break produced from a single newline in lazy-linefeed mode,
        False for a hard break (two trailing spaces)

    """

    soft: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    source_location: Optional[SourceLocation] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_line_break``."""
        return visitor.visit_line_break(self)


BLOCK_NODE_TYPES: tuple[type[Node], ...] = (
    Document,
    Heading,
    Paragraph,
    CodeBlock,
    BlockQuote,
    List,
    ListItem,
    Table,
    TableRow,
    TableCell,
    ThematicBreak,
)

INLINE_NODE_TYPES: tuple[type[Node], ...] = (
    Text,
    Emphasis,
    Strong,
    Strikethrough,
    Code,
    Link,
    Image,
    Autolink,
    LineBreak,
)


def get_node_children(node: Node) -> list[Node]:
    """Return the direct child nodes of any node.

    Parameters
    ----------
    node : Node
        Node to inspect

    Returns
    -------
    list of Node
        Children in document order (table header first)

    """
    if isinstance(node, (Document, BlockQuote, ListItem)):
        return list(node.children)
    if isinstance(node, List):
        return list(node.items)
    if isinstance(node, Table):
        return ([node.header] if node.header else []) + list(node.rows)
    if isinstance(node, TableRow):
        return list(node.cells)
    content = getattr(node, "content", None)
    if isinstance(content, list):
        return list(content)
    return []
