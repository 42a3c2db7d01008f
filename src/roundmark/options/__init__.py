#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for roundmark.

Each direction of the round trip has its own frozen options dataclass:
RenderOptions for Markdown to HTML and ReconstructOptions for HTML to Markdown.
"""

from __future__ import annotations

from roundmark.options.base import BaseOptions, CloneFrozenMixin
from roundmark.options.reconstruct import ReconstructOptions
from roundmark.options.render import RenderOptions

__all__ = [
    "BaseOptions",
    "CloneFrozenMixin",
    "RenderOptions",
    "ReconstructOptions",
]
