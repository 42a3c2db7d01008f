#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for rendering Markdown to HTML."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from roundmark.constants import (
    DEFAULT_ALLOW_UNSAFE_URLS,
    DEFAULT_BIDIRECTIONAL,
    DEFAULT_CLASS_PREFIX,
    DEFAULT_INLINE_STYLES,
    DEFAULT_LAZY_LINEFEEDS,
)
from roundmark.fences import FencePlugin
from roundmark.options.base import BaseOptions

_CLASS_PREFIX_PATTERN = re.compile(r"^[A-Za-z0-9_-]*$")


# src/roundmark/options/render.py
@dataclass(frozen=True)
class RenderOptions(BaseOptions):
    """Configuration options for the Markdown to HTML direction.

    Parameters
    ----------
    fence_plugin : FencePlugin or None, default None
        Plugin consulted for every fenced code block. A bare callable is
        accepted and treated as ``FencePlugin(render=callable)``.
    inline_styles : bool, default False
        Emit ``style="..."`` attributes from the built-in style table instead
        of ``class="{class_prefix}{tag}"``.
    class_prefix : str, default "rm-"
        Prefix for generated class names.
    bidirectional : bool, default False
        Tag generated elements with provenance attributes so the original
        Markdown spelling can be reconstructed.
    lazy_linefeeds : bool, default False
        Render every single newline inside a paragraph as a line break.
    allow_unsafe_urls : bool, default False
        Skip URL scheme sanitization. Use only with trusted input.
    max_nesting_depth : int, default 64
        See BaseOptions.

    Examples
    --------
        >>> options = RenderOptions(bidirectional=True)
        >>> options.create_updated(inline_styles=True).inline_styles
        True

    """

    fence_plugin: Optional[FencePlugin] = field(
        default=None,
        metadata={"help": "Fence plugin with render(content, lang) and optional reverse(element)", "importance": "core"},
    )
    inline_styles: bool = field(
        default=DEFAULT_INLINE_STYLES,
        metadata={"help": "Use inline style attributes instead of CSS classes", "importance": "core"},
    )
    class_prefix: str = field(
        default=DEFAULT_CLASS_PREFIX,
        metadata={"help": "Prefix for generated CSS class names", "importance": "advanced"},
    )
    bidirectional: bool = field(
        default=DEFAULT_BIDIRECTIONAL,
        metadata={"help": "Attach provenance attributes for Markdown reconstruction", "importance": "core"},
    )
    lazy_linefeeds: bool = field(
        default=DEFAULT_LAZY_LINEFEEDS,
        metadata={"help": "Treat single newlines inside paragraphs as line breaks", "importance": "core"},
    )
    allow_unsafe_urls: bool = field(
        default=DEFAULT_ALLOW_UNSAFE_URLS,
        metadata={
            "help": "Keep javascript:, vbscript: and data: URLs unchanged (trusted input only)",
            "importance": "security",
        },
    )

    def __post_init__(self) -> None:
        """Validate and normalize option values.

        Raises
        ------
        ValueError
            If the class prefix contains characters outside ``[A-Za-z0-9_-]``
        TypeError
            If fence_plugin is neither a FencePlugin nor callable

        """
        super().__post_init__()

        if not _CLASS_PREFIX_PATTERN.match(self.class_prefix):
            raise ValueError(f"class_prefix may only contain letters, digits, '_' and '-', got {self.class_prefix!r}")

        if self.fence_plugin is not None and not isinstance(self.fence_plugin, FencePlugin):
            if not callable(self.fence_plugin):
                raise TypeError(
                    f"fence_plugin must be a FencePlugin or a callable, got {type(self.fence_plugin).__name__}"
                )
            object.__setattr__(self, "fence_plugin", FencePlugin(render=self.fence_plugin))
