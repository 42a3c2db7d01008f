#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/renderers/base.py
"""Base classes for AST renderers.

Both output formats of the round trip, HTML and Markdown, are produced by
visitors over the same AST. The BaseRenderer provides the shared interface
and the InlineContentMixin the output-capture pattern they both use for
nested inline content.

"""

from __future__ import annotations

from abc import ABC, abstractmethod

from roundmark.ast import Document
from roundmark.ast.nodes import Node
from roundmark.exceptions import InvalidOptionsError, RenderingError
from roundmark.options.base import BaseOptions


class BaseRenderer(ABC):
    """Abstract base class for AST renderers.

    Parameters
    ----------
    options : BaseOptions or None, default = None
        Renderer options

    Examples
    --------
        >>> class PlainRenderer(BaseRenderer):
        ...     def render_to_string(self, doc):
        ...         return "rendered output"

    """

    def __init__(self, options: BaseOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @abstractmethod
    def render_to_string(self, doc: Document) -> str:
        """Render the AST to a string.

        Parameters
        ----------
        doc : Document
            AST Document node to render

        Returns
        -------
        str
            Rendered document

        """
        pass

    @staticmethod
    def _validate_options_type(options: BaseOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Parameters
        ----------
        options : BaseOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        renderer_name : str
            Name of the renderer (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @staticmethod
    def _require_document(doc: Document, renderer_name: str) -> None:
        """Raise RenderingError unless ``doc`` is a Document node."""
        if not isinstance(doc, Document):
            raise RenderingError(
                f"{renderer_name} expected a Document node, got {type(doc).__name__}", rendering_stage="input"
            )


class InlineContentMixin:
    """Mixin providing inline content rendering for text-based renderers.

    The implementing class must have an ``_output`` attribute (list[str])
    that its visitor methods append to.

    Examples
    --------
        >>> class MyRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
        ...     def visit_emphasis(self, node):
        ...         content = self._render_inline_content(node.content)
        ...         self._output.append(f"*{content}*")

    """

    _output: list[str]

    def _render_inline_content(self, content: list[Node]) -> str:
        """Render a list of inline nodes to text.

        Parameters
        ----------
        content : list of Node
            Inline nodes to render

        Returns
        -------
        str
            Rendered inline content

        """
        saved_output = self._output
        self._output = []

        for node in content:
            node.accept(self)

        result = "".join(self._output)
        self._output = saved_output
        return result
