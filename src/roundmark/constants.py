#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the roundmark library.

This module centralizes hardcoded values used across the library so that the
forward renderer and the reverse walker agree on them.

Constants are organized by category:
1. Type Definitions
2. Rendering Defaults
3. Provenance Attributes
4. Block and Inline Syntax
5. Security Constants
6. Dependency Specifications
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

Alignment = Literal["left", "center", "right"]
TaskStatus = Literal["checked", "unchecked"]
StyleTheme = Literal["light", "dark"]
CodeFenceChar = Literal["`", "~"]

# =============================================================================
# Rendering Defaults
# =============================================================================

DEFAULT_CLASS_PREFIX = "rm-"
DEFAULT_INLINE_STYLES = False
DEFAULT_BIDIRECTIONAL = False
DEFAULT_LAZY_LINEFEEDS = False
DEFAULT_ALLOW_UNSAFE_URLS = False

# Depth of blockquote, inline and HTML element nesting before NestingDepthError
DEFAULT_MAX_NESTING_DEPTH = 64

# Spaces per list nesting level, both when parsing and when reconstructing
LIST_INDENT_WIDTH = 2

DEFAULT_FENCE = "```"
DEFAULT_HEADING_MARKER = "#"
DEFAULT_STRONG_MARKER = "**"
DEFAULT_EMPHASIS_MARKER = "*"
DEFAULT_STRIKETHROUGH_MARKER = "~~"
DEFAULT_CODE_MARKER = "`"
DEFAULT_BLOCKQUOTE_MARKER = "> "
DEFAULT_BULLET_MARKER = "-"
DEFAULT_THEMATIC_BREAK = "---"
LINK_MARKER = "["
IMAGE_MARKER = "!"

# =============================================================================
# Provenance Attributes
# =============================================================================

ATTR_MARKER = "data-qd"
ATTR_FENCE = "data-qd-fence"
ATTR_LANG = "data-qd-lang"
ATTR_SOURCE = "data-qd-source"
ATTR_LINK_TEXT = "data-qd-text"
ATTR_IMAGE_ALT = "data-qd-alt"
ATTR_IMAGE_SRC = "data-qd-src"
ATTR_ALIGN = "data-qd-align"

# Attributes whose presence marks an element as a rendered fence
FENCE_ATTRIBUTES = (ATTR_FENCE, ATTR_LANG, ATTR_SOURCE)

# =============================================================================
# Block and Inline Syntax
# =============================================================================

HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$")
FENCE_OPEN_PATTERN = re.compile(r"^(`{3,}|~{3,})(.*)$")
THEMATIC_BREAK_PATTERN = re.compile(r"^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")
BLOCKQUOTE_PATTERN = re.compile(r"^ {0,3}(>[ ]?)(.*)$")
LIST_ITEM_PATTERN = re.compile(r"^(\s*)([*+\-]|\d+\.)\s+(.*\S.*)$")
TASK_ITEM_PATTERN = re.compile(r"^\[([xX ])\]\s+(.*)$")
TABLE_SEPARATOR_PATTERN = re.compile(r"^\|?[\s\-:|]+\|?$")

AUTOLINK_PATTERN = re.compile(r"https?://[^\s<]+")
BRACKETED_AUTOLINK_PATTERN = re.compile(r"<(https?://[^\s<>]+)>")
LANGUAGE_CLASS_PREFIXES = ("language-", "lang-")

# =============================================================================
# Security Constants
# =============================================================================

# Escape table for HTML text and attribute values
HTML_ESCAPE_MAP = MappingProxyType(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
    }
)

# URL scheme prefixes replaced with SAFE_URL_REPLACEMENT
DANGEROUS_SCHEMES = ("javascript:", "vbscript:", "data:")

# Data URLs with this prefix are allowed through (inline images)
SAFE_DATA_URL_PREFIX = "data:image/"

SAFE_URL_REPLACEMENT = "#"

EXTERNAL_LINK_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
EXTERNAL_LINK_REL = "noopener noreferrer"

# Elements whose content is never reconstructed
IGNORED_HTML_ELEMENTS = frozenset({"script", "style", "template", "noscript", "head", "title", "meta", "link"})

# =============================================================================
# Dependency Specifications for @requires_dependencies decorator
# =============================================================================
# Each spec is a list of tuples: (pip_package, import_name, version_constraint)

DEPS_HTML = [("beautifulsoup4", "bs4", ">=4.12")]
