#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/utils/__init__.py
"""Utility modules for the roundmark package.

This package contains the sanitizer shared by the renderer and reverse walker,
dependency checks, and timing helpers.
"""

from roundmark.utils.sanitize import escape_html, is_external_url, sanitize_url

__all__ = [
    "escape_html",
    "is_external_url",
    "sanitize_url",
]
