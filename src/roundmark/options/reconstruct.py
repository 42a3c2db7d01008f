#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for reconstructing Markdown from rendered HTML."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from roundmark.fences import FencePlugin
from roundmark.options.base import BaseOptions


# src/roundmark/options/reconstruct.py
@dataclass(frozen=True)
class ReconstructOptions(BaseOptions):
    """Configuration options for the HTML to Markdown direction.

    Parameters
    ----------
    fence_plugin : FencePlugin or None, default None
        Plugin whose ``reverse`` function recovers fence content from
        elements rendered by its ``render`` function.
    max_nesting_depth : int, default 64
        See BaseOptions.

    """

    fence_plugin: Optional[FencePlugin] = field(
        default=None,
        metadata={"help": "Fence plugin whose reverse(element) recovers fence content", "importance": "core"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        TypeError
            If fence_plugin is not a FencePlugin

        """
        super().__post_init__()
        if self.fence_plugin is not None and not isinstance(self.fence_plugin, FencePlugin):
            raise TypeError(f"fence_plugin must be a FencePlugin, got {type(self.fence_plugin).__name__}")
