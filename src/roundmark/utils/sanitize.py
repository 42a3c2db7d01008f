#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/utils/sanitize.py
"""Sanitization utilities shared by the renderer and the reverse walker.

Two concerns live here:

- entity escaping of text and attribute values, using a fixed five-character
  table so that single quotes are escaped as ``&#39;``
- URL scheme allow-listing, which replaces ``javascript:``, ``vbscript:`` and
  ``data:`` URLs with ``#`` while letting ``data:image/`` URLs through

Both tables are read-only module constants in :mod:`roundmark.constants`.
"""

from __future__ import annotations

import logging
import re

from roundmark.constants import (
    DANGEROUS_SCHEMES,
    EXTERNAL_LINK_PATTERN,
    HTML_ESCAPE_MAP,
    SAFE_DATA_URL_PREFIX,
    SAFE_URL_REPLACEMENT,
)

logger = logging.getLogger(__name__)

_ESCAPE_PATTERN = re.compile("[" + re.escape("".join(HTML_ESCAPE_MAP)) + "]")


def escape_html(text: str, *, enabled: bool = True) -> str:
    """Escape HTML special characters when enabled.

    Parameters
    ----------
    text : str
        Text to escape
    enabled : bool, default True
        When False the text is returned unchanged

    Returns
    -------
    str
        Text with ``& < > " '`` replaced by entities

    Examples
    --------
    >>> escape_html("<b>\\"Tom\\" & 'Jerry'</b>")
    '&lt;b&gt;&quot;Tom&quot; &amp; &#39;Jerry&#39;&lt;/b&gt;'

    """
    if not enabled or not text:
        return text
    return _ESCAPE_PATTERN.sub(lambda m: HTML_ESCAPE_MAP[m.group(0)], text)


def is_url_scheme_dangerous(url: str) -> bool:
    """Check if a URL uses a blocked scheme.

    Parameters
    ----------
    url : str
        URL to check

    Returns
    -------
    bool
        True for ``javascript:``, ``vbscript:`` and non-image ``data:`` URLs

    """
    if not url:
        return False

    url_lower = url.strip().lower()
    for scheme in DANGEROUS_SCHEMES:
        if url_lower.startswith(scheme):
            return not url_lower.startswith(SAFE_DATA_URL_PREFIX)
    return False


def sanitize_url(url: str, *, allow_unsafe: bool = False) -> str:
    """Sanitize a URL for use in ``href`` or ``src``.

    Parameters
    ----------
    url : str
        URL as written in the source
    allow_unsafe : bool, default False
        Return the URL untouched, skipping the scheme check

    Returns
    -------
    str
        The trimmed URL, ``"#"`` if it uses a blocked scheme, or ``""`` for empty input

    Examples
    --------
    >>> sanitize_url("  https://example.com ")
    'https://example.com'
    >>> sanitize_url("JavaScript:alert(1)")
    '#'
    >>> sanitize_url("data:image/png;base64,AAA")
    'data:image/png;base64,AAA'

    """
    if not url:
        return ""
    if allow_unsafe:
        return url

    trimmed = url.strip()
    if is_url_scheme_dangerous(trimmed):
        logger.warning(f"Blocked URL with dangerous scheme: {trimmed[:100]}{'...' if len(trimmed) > 100 else ''}")
        return SAFE_URL_REPLACEMENT
    return trimmed


def is_external_url(url: str) -> bool:
    """Return True for absolute http(s) URLs, which get ``rel="noopener noreferrer"``."""
    return bool(url) and EXTERNAL_LINK_PATTERN.match(url) is not None
