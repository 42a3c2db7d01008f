#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/ast/__init__.py
"""Abstract Syntax Tree (AST) module for document representation.

The AST is the single structured representation shared by both directions
of the round trip:

- nodes: AST node classes, including provenance ``marker`` fields
- visitors: visitor base class used by the renderers
- serialization: JSON and YAML serialization of AST structures

Examples
--------
    >>> from roundmark.ast import Document, Heading, Paragraph, Text
    >>> from roundmark.renderers.markdown import MarkdownRenderer
    >>> doc = Document(children=[
    ...     Heading(level=1, content=[Text(content="Title")]),
    ...     Paragraph(content=[Text(content="Hello world")])
    ... ])
    >>> MarkdownRenderer().render_to_string(doc)
    '# Title\\n\\nHello world'

"""

from __future__ import annotations

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
    SourceLocation,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    get_node_children,
)
from roundmark.ast.serialization import (
    ast_to_dict,
    ast_to_json,
    ast_to_yaml,
    dict_to_ast,
    json_to_ast,
    yaml_to_ast,
)
from roundmark.ast.visitors import NodeVisitor

__all__ = [
    # Base
    "Node",
    "SourceLocation",
    # Block nodes
    "Document",
    "Heading",
    "Paragraph",
    "CodeBlock",
    "BlockQuote",
    "List",
    "ListItem",
    "Table",
    "TableRow",
    "TableCell",
    "ThematicBreak",
    # Inline nodes
    "Text",
    "Emphasis",
    "Strong",
    "Strikethrough",
    "Code",
    "Link",
    "Image",
    "Autolink",
    "LineBreak",
    # Traversal
    "NodeVisitor",
    "get_node_children",
    # Serialization
    "ast_to_dict",
    "dict_to_ast",
    "ast_to_json",
    "json_to_ast",
    "ast_to_yaml",
    "yaml_to_ast",
]
