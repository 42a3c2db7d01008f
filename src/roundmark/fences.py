#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/fences.py
"""Fenced code blocks: marker matching, plugin dispatch and reverse recovery.

A fence plugin lets callers hand the raw content of fenced blocks to an
external renderer (diagrams, math, syntax highlighting) and later recover
that content from the rendered markup. Plugins are passed per call through
the options objects and are never registered globally.

Plugin contract
---------------
``render(content, lang)``
    Receives the unescaped fence content and the trimmed info string
    (``""`` when absent). Returns markup, or ``None`` to request the default
    ``<pre><code>`` rendering.
``reverse(element)``
    Optional. Receives the rendered element (a BeautifulSoup ``Tag``) and
    returns a :class:`FenceSource`, or ``None`` to fall back to the stored
    source attribute or the element text.

Exceptions raised by either function are not caught here.

Examples
--------
    >>> def render_mermaid(content, lang):
    ...     if lang != "mermaid":
    ...         return None
    ...     return f'<div class="mermaid">{content}</div>'
    >>> plugin = FencePlugin(render=render_mermaid)

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from roundmark.ast.nodes import CodeBlock
from roundmark.constants import (
    ATTR_FENCE,
    ATTR_LANG,
    ATTR_SOURCE,
    DEFAULT_FENCE,
    FENCE_ATTRIBUTES,
    FENCE_OPEN_PATTERN,
    LANGUAGE_CLASS_PREFIXES,
)
from roundmark.utils.sanitize import escape_html

logger = logging.getLogger(__name__)

FenceRenderFunction = Callable[[str, str], Optional[str]]
FenceReverseFunction = Callable[[Any], Optional["FenceSource"]]

_FENCE_STRING_PATTERN = re.compile(r"^(`{3,}|~{3,})$")
_FIRST_TAG_PATTERN = re.compile(r"^(\s*<[A-Za-z][\w:-]*)")


@dataclass(frozen=True)
class FenceSource:
    """Fence content recovered by a plugin's reverse function.

    Parameters
    ----------
    content : str
        Raw fence content, used verbatim
    lang : str or None, default None
        Info string; falls back to the element's stored language when None
    fence : str or None, default None
        Fence string (e.g. ``"~~~"``); falls back to the stored fence, then ``"```"``

    """

    content: str
    lang: Optional[str] = None
    fence: Optional[str] = None


@dataclass(frozen=True)
class FencePlugin:
    """Capability object for rendering and reversing fenced blocks.

    Parameters
    ----------
    render : callable
        ``render(content, lang) -> str | None``
    reverse : callable or None, default None
        ``reverse(element) -> FenceSource | None``

    """

    render: FenceRenderFunction
    reverse: Optional[FenceReverseFunction] = None

    def __post_init__(self) -> None:
        """Validate that the hooks are callable."""
        if not callable(self.render):
            raise TypeError(f"FencePlugin.render must be callable, got {type(self.render).__name__}")
        if self.reverse is not None and not callable(self.reverse):
            raise TypeError(f"FencePlugin.reverse must be callable, got {type(self.reverse).__name__}")


def match_fence_open(line: str) -> Optional[tuple[str, str]]:
    """Match an opening fence line.

    Parameters
    ----------
    line : str
        A single source line

    Returns
    -------
    tuple of (str, str) or None
        ``(fence, lang)`` with the literal fence run and the trimmed info string,
        or None if the line does not open a fence

    Examples
    --------
    >>> match_fence_open("~~~~ python ")
    ('~~~~', 'python')
    >>> match_fence_open("``")

    """
    match = FENCE_OPEN_PATTERN.match(line)
    if not match:
        return None
    fence, info = match.group(1), match.group(2).strip()
    # a backtick info string may not contain backticks
    if fence[0] == "`" and "`" in info:
        return None
    return fence, info


def is_fence_close(line: str, fence: str) -> bool:
    """Return True if ``line`` closes a block opened with ``fence``.

    The closing run must use the same character and be at least as long as
    the opening run; only trailing whitespace may follow it.
    """
    stripped = line.rstrip()
    if len(stripped) < len(fence):
        return False
    return stripped == fence[0] * len(stripped)


def parse_fence_string(fence: Optional[str]) -> tuple[str, int]:
    """Split a fence string into ``(fence_char, fence_length)``, defaulting to three backticks."""
    if fence and _FENCE_STRING_PATTERN.match(fence):
        return fence[0], len(fence)
    return DEFAULT_FENCE[0], len(DEFAULT_FENCE)


def fence_attributes(fence: str, lang: str, source: Optional[str] = None) -> str:
    """Build the provenance attributes for a rendered fence.

    Parameters
    ----------
    fence : str
        Literal fence string
    lang : str
        Info string; omitted when empty
    source : str or None, default None
        Raw fence content, stored when a plugin produced the markup

    Returns
    -------
    str
        Attribute string with a leading space

    """
    attrs = f' {ATTR_FENCE}="{escape_html(fence)}"'
    if lang:
        attrs += f' {ATTR_LANG}="{escape_html(lang)}"'
    if source is not None:
        attrs += f' {ATTR_SOURCE}="{escape_html(source)}"'
    return attrs


def tag_plugin_markup(markup: str, fence: str, lang: str, source: str) -> str:
    """Add fence provenance attributes to the first element of plugin markup.

    Markup that does not start with an element is returned unchanged.
    """
    match = _FIRST_TAG_PATTERN.match(markup)
    if not match:
        logger.debug("Fence plugin markup does not start with an element; provenance not attached")
        return markup
    return markup[: match.end()] + fence_attributes(fence, lang, source) + markup[match.end() :]


def render_fence(
    block: CodeBlock,
    plugin: Optional[FencePlugin],
    *,
    pre_attr: str = "",
    code_attr: str = "",
    bidirectional: bool = False,
) -> str:
    """Render a fenced code block to HTML.

    Parameters
    ----------
    block : CodeBlock
        Fenced block with raw content
    plugin : FencePlugin or None
        Plugin consulted before the default rendering
    pre_attr : str, default ""
        Class or style attribute for the default ``<pre>``
    code_attr : str, default ""
        Class or style attribute for the default ``<code>``
    bidirectional : bool, default False
        Attach fence provenance attributes

    Returns
    -------
    str
        Rendered markup

    """
    lang = (block.language or "").strip()

    if plugin is not None:
        markup = plugin.render(block.content, lang)
        if markup is not None:
            if bidirectional:
                markup = tag_plugin_markup(markup, block.fence, lang, block.content)
            return markup
        logger.debug(f"Fence plugin declined block with language {lang!r}; using default rendering")

    provenance = fence_attributes(block.fence, lang) if bidirectional else ""
    return f"<pre{pre_attr}{provenance}><code{code_attr}>{escape_html(block.content)}</code></pre>"


def is_fence_element(element: Any) -> bool:
    """Return True for ``<pre>`` and for any element carrying fence provenance attributes."""
    if getattr(element, "name", None) == "pre":
        return True
    attrs = getattr(element, "attrs", None) or {}
    return any(attr in attrs for attr in FENCE_ATTRIBUTES)


def extract_language(element: Any) -> str:
    """Find the language of a rendered fence.

    Checks ``data-qd-lang`` first, then ``language-*``/``lang-*`` classes on the
    element and on its ``<code>`` child.
    """
    stored = element.get(ATTR_LANG)
    if stored:
        return str(stored).strip()

    candidates = [element]
    code = element.find("code")
    if code is not None:
        candidates.append(code)

    for candidate in candidates:
        for css_class in candidate.get("class") or []:
            for prefix in LANGUAGE_CLASS_PREFIXES:
                if css_class.startswith(prefix) and len(css_class) > len(prefix):
                    return css_class[len(prefix) :]
    return ""


def reverse_fence(element: Any, plugin: Optional[FencePlugin]) -> CodeBlock:
    """Recover a fenced code block from a rendered element.

    Resolution order:

    1. the plugin's ``reverse`` function, when registered, for every fence element
    2. the stored ``data-qd-source`` attribute
    3. the text of the ``<code>`` child (or the element), trailing whitespace removed

    Parameters
    ----------
    element : bs4.element.Tag
        Rendered fence container
    plugin : FencePlugin or None
        Plugin whose ``reverse`` function is consulted

    Returns
    -------
    CodeBlock
        Block carrying the recovered fence, language and content

    """
    stored_fence = element.get(ATTR_FENCE)
    lang = extract_language(element)

    if plugin is not None and plugin.reverse is not None:
        recovered = plugin.reverse(element)
        if recovered is not None:
            fence_char, fence_length = parse_fence_string(recovered.fence or stored_fence)
            return CodeBlock(
                content=recovered.content,
                language=recovered.lang if recovered.lang is not None else lang or None,
                fence_char=fence_char,  # type: ignore[arg-type]
                fence_length=fence_length,
            )
        logger.debug(f"Fence plugin reverse declined element <{element.name}> with language {lang!r}")

    fence_char, fence_length = parse_fence_string(stored_fence)

    source = element.get(ATTR_SOURCE)
    if source is not None:
        content = str(source)
    else:
        code = element if element.name == "code" else element.find("code")
        content = (code if code is not None else element).get_text().rstrip()

    return CodeBlock(
        content=content,
        language=lang or None,
        fence_char=fence_char,  # type: ignore[arg-type]
        fence_length=fence_length,
    )
