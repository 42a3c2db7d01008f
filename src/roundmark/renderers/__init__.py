#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/roundmark/renderers/__init__.py
"""AST renderers for both directions of the round trip.

Available renderers:
- HtmlRenderer: Render to an HTML fragment, optionally tagged with provenance
- MarkdownRenderer: Render to Markdown, honoring stored provenance markers

Examples
--------
Convert AST to Markdown:

    >>> from roundmark.ast import Document, Heading, Text
    >>> from roundmark.renderers import MarkdownRenderer
    >>> doc = Document(children=[
    ...     Heading(level=1, content=[Text(content="Title")])
    ... ])
    >>> MarkdownRenderer().render_to_string(doc)
    '# Title'

"""

from roundmark.renderers.base import BaseRenderer, InlineContentMixin
from roundmark.renderers.html import HtmlRenderer
from roundmark.renderers.markdown import MarkdownRenderer

__all__ = [
    "BaseRenderer",
    "HtmlRenderer",
    "InlineContentMixin",
    "MarkdownRenderer",
]
