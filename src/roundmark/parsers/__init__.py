#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/parsers/__init__.py
"""Parsers producing the shared AST.

- MarkdownParser: Markdown source to AST (block segmenter plus InlineFormatter)
- HtmlToAstConverter: rendered HTML to AST, reading provenance attributes
  (requires beautifulsoup4 at parse time)
"""

from roundmark.parsers.base import BaseParser
from roundmark.parsers.html import HtmlToAstConverter
from roundmark.parsers.inline import InlineFormatter
from roundmark.parsers.markdown import MarkdownParser

__all__ = [
    "BaseParser",
    "HtmlToAstConverter",
    "InlineFormatter",
    "MarkdownParser",
]
