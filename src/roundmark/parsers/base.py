#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/parsers/base.py
"""Base class for parsers.

Both directions of the round trip start with a parser: Markdown text is
segmented into an AST by :class:`~roundmark.parsers.markdown.MarkdownParser`,
and rendered HTML is walked back into the same AST by
:class:`~roundmark.parsers.html.HtmlToAstConverter`.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from roundmark.ast import Document
from roundmark.exceptions import InvalidOptionsError, NestingDepthError
from roundmark.options.base import BaseOptions

logger = logging.getLogger(__name__)


class BaseParser(ABC):
    """Abstract base class for parsers producing a :class:`Document`.

    Parameters
    ----------
    options : BaseOptions or None, default = None
        Parser options

    Examples
    --------
        >>> class NullParser(BaseParser):
        ...     def parse(self, input_data):
        ...         return Document(children=[])

    """

    def __init__(self, options: BaseOptions | None = None):
        """Initialize the parser with optional configuration."""
        self.options: BaseOptions | None = options

    @staticmethod
    def _validate_options_type(options: BaseOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Parameters
        ----------
        options : BaseOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        parser_name : str
            Name of the parser (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    def _check_depth(self, depth: int, stage: str) -> None:
        """Raise NestingDepthError when ``depth`` exceeds the configured limit."""
        limit = self.options.max_nesting_depth if self.options is not None else None
        if limit is not None and depth > limit:
            raise NestingDepthError(depth, limit, stage=stage)

    @abstractmethod
    def parse(self, input_data: Any) -> Document:
        """Parse the input into an AST.

        Parameters
        ----------
        input_data : Any
            Source to parse; each parser documents the types it accepts

        Returns
        -------
        Document
            AST Document node

        """
        pass
