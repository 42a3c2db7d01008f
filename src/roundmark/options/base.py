#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/options/base.py
"""Base classes for parser and renderer options.

Options are frozen dataclasses: they can be shared freely between threads
and calls, and changed only by creating an updated copy.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from roundmark.constants import DEFAULT_MAX_NESTING_DEPTH
from roundmark.exceptions import InvalidOptionsError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        Raises
        ------
        InvalidOptionsError
            If a keyword does not name a field of this options class

        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise InvalidOptionsError(
                converter_name=type(self).__name__,
                expected_type=type(self),
                received_type=type(self),
                message=f"Unknown option(s) for {type(self).__name__}: {', '.join(unknown)}",
            )
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseOptions(CloneFrozenMixin):
    """Options shared by both directions of the round trip.

    Parameters
    ----------
    max_nesting_depth : int, default 64
        Maximum depth of nested blockquotes, inline formatting or HTML
        elements before NestingDepthError is raised.

    """

    max_nesting_depth: int = field(
        default=DEFAULT_MAX_NESTING_DEPTH,
        metadata={
            "help": "Maximum nesting depth of quotes, inline formatting and HTML elements",
            "type": int,
            "importance": "security",
        },
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.max_nesting_depth <= 0:
            raise ValueError(f"max_nesting_depth must be positive, got {self.max_nesting_depth}")
