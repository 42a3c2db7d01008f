#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/styles.py
"""Built-in style table and CSS generation.

``RENDER_STYLES`` is the single source of truth for element styling. The
HTML renderer copies entries into ``style`` attributes when inline styles
are requested; :func:`emit_styles` turns the same table into a style sheet
for the class-based output.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping

from roundmark.constants import DEFAULT_CLASS_PREFIX, StyleTheme
from roundmark.exceptions import ValidationError

logger = logging.getLogger(__name__)

RENDER_STYLES: Mapping[str, str] = MappingProxyType(
    {
        "h1": "font-size: 2em; font-weight: 600; margin: 0.67em 0; text-align: left",
        "h2": "font-size: 1.5em; font-weight: 600; margin: 0.83em 0",
        "h3": "font-size: 1.25em; font-weight: 600; margin: 1em 0",
        "h4": "font-size: 1em; font-weight: 600; margin: 1.33em 0",
        "h5": "font-size: 0.875em; font-weight: 600; margin: 1.67em 0",
        "h6": "font-size: 0.85em; font-weight: 600; margin: 2em 0",
        "pre": "background: #f4f4f4; padding: 10px; border-radius: 4px; overflow-x: auto; margin: 1em 0",
        "code": "background: #f0f0f0; padding: 2px 4px; border-radius: 3px; font-family: monospace",
        "blockquote": "border-left: 4px solid #ddd; margin-left: 0; padding-left: 1em",
        "table": "border-collapse: collapse; width: 100%; margin: 1em 0",
        "thead": "",
        "tbody": "",
        "tr": "",
        "th": "border: 1px solid #ddd; padding: 8px; background-color: #f2f2f2; font-weight: bold; text-align: left",
        "td": "border: 1px solid #ddd; padding: 8px; text-align: left",
        "hr": "border: none; border-top: 1px solid #ddd; margin: 1em 0",
        "img": "max-width: 100%; height: auto",
        "a": "color: #0066cc; text-decoration: underline",
        "strong": "font-weight: bold",
        "em": "font-style: italic",
        "del": "text-decoration: line-through",
        "ul": "margin: 0.5em 0; padding-left: 2em",
        "ol": "margin: 0.5em 0; padding-left: 2em",
        "li": "margin: 0.25em 0",
        "br": "",
        "task-item": "list-style: none",
        "task-checkbox": "margin-right: 0.5em",
    }
)

# Light palette colors and their dark replacements
DARK_THEME_COLORS: Mapping[str, str] = MappingProxyType(
    {
        "#f4f4f4": "#2a2a2a",
        "#f0f0f0": "#2a2a2a",
        "#f2f2f2": "#2a2a2a",
        "#ddd": "#3a3a3a",
        "#0066cc": "#6db3f2",
    }
)

DARK_TEXT_COLOR = "#e0e0e0"

# Elements that get an explicit text color in the dark theme
_DARK_TEXT_ELEMENTS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6", "td", "li", "blockquote"})


def get_style(tag: str, additional: str = "") -> str:
    """Return the inline style for ``tag``, joined with ``additional`` when given.

    Examples
    --------
    >>> get_style("td", "text-align: right")
    'border: 1px solid #ddd; padding: 8px; text-align: left; text-align: right'
    >>> get_style("tr")
    ''

    """
    base = RENDER_STYLES.get(tag, "")
    if base and additional:
        return f"{base}; {additional}"
    return base or additional


def _apply_dark_palette(style: str) -> str:
    for light, dark in DARK_THEME_COLORS.items():
        style = style.replace(light, dark)
    return style


def emit_styles(prefix: str = DEFAULT_CLASS_PREFIX, theme: StyleTheme = "light") -> str:
    """Generate a style sheet matching the class-based HTML output.

    Parameters
    ----------
    prefix : str, default "rm-"
        Class prefix used when rendering
    theme : {"light", "dark"}, default "light"
        Color theme

    Returns
    -------
    str
        One ``.{prefix}{tag} { ... }`` rule per styled element

    Raises
    ------
    ValidationError
        If ``theme`` is not "light" or "dark"

    Examples
    --------
    >>> emit_styles("md-").splitlines()[0]
    '.md-h1 { font-size: 2em; font-weight: 600; margin: 0.67em 0; text-align: left }'

    """
    if theme not in ("light", "dark"):
        raise ValidationError(
            f"Unknown style theme {theme!r}; expected 'light' or 'dark'", parameter_name="theme", parameter_value=theme
        )

    rules = []
    for tag, style in RENDER_STYLES.items():
        if not style:
            continue
        if theme == "dark":
            style = _apply_dark_palette(style)
            if tag in _DARK_TEXT_ELEMENTS:
                style = f"{style}; color: {DARK_TEXT_COLOR}"
        rules.append(f".{prefix}{tag} {{ {style} }}")

    logger.debug(f"Emitted {len(rules)} style rules for theme {theme!r}")
    return "\n".join(rules) + "\n"
