"""The exported API functions for rendering and reconstructing Markdown."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/roundmark/api.py
import logging
from functools import partial
from typing import Any, Callable, Optional, TypeVar

from roundmark.ast.nodes import Document
from roundmark.constants import DEPS_HTML
from roundmark.exceptions import InvalidOptionsError
from roundmark.options.base import BaseOptions
from roundmark.options.reconstruct import ReconstructOptions
from roundmark.options.render import RenderOptions
from roundmark.parsers.html import HtmlToAstConverter
from roundmark.parsers.markdown import MarkdownParser
from roundmark.renderers.html import HtmlRenderer
from roundmark.renderers.markdown import MarkdownRenderer
from roundmark.utils.decorators import debug_timer, requires_dependencies

logger = logging.getLogger(__name__)

OptionsT = TypeVar("OptionsT", bound=BaseOptions)


def _create_options_from_kwargs(
    options: Optional[BaseOptions],
    options_class: type[OptionsT],
    operation: str,
    **kwargs: Any,
) -> OptionsT:
    """Resolve the options object for a call.

    Parameters
    ----------
    options : BaseOptions or None
        Options supplied by the caller
    options_class : type
        Options class the operation expects
    operation : str
        Name of the calling operation (for error messages)
    **kwargs
        Field overrides applied with ``create_updated``

    Returns
    -------
    OptionsT
        The supplied options (or defaults) with overrides applied

    Raises
    ------
    InvalidOptionsError
        If options has the wrong type or a keyword names no field

    """
    if options is not None and not isinstance(options, options_class):
        raise InvalidOptionsError(
            converter_name=operation,
            expected_type=options_class,
            received_type=type(options),
        )
    resolved = options if options is not None else options_class()
    if kwargs:
        logger.debug(f"Applying {operation} option overrides: {sorted(kwargs)}")
        resolved = resolved.create_updated(**kwargs)
    return resolved


def parse(markdown: Any, options: Optional[RenderOptions] = None, **kwargs: Any) -> Document:
    """Parse Markdown into a Document AST.

    Parameters
    ----------
    markdown : str
        Markdown source text. Any other type yields an empty Document.
    options : RenderOptions, optional
        Rendering options; only ``lazy_linefeeds`` and ``max_nesting_depth``
        affect parsing
    **kwargs
        Overrides for individual RenderOptions fields

    Returns
    -------
    Document
        AST with provenance markers recorded on every node

    Raises
    ------
    InvalidOptionsError
        If options has the wrong type or a keyword is unknown
    NestingDepthError
        If the input nests deeper than ``max_nesting_depth``

    Examples
    --------
        >>> doc = parse("## Title")
        >>> doc.children[0].marker
        '##'

    """
    render_options = _create_options_from_kwargs(options, RenderOptions, "parse", **kwargs)
    if not isinstance(markdown, str):
        logger.debug(f"parse() received {type(markdown).__name__}, returning empty document")
        return Document()
    return MarkdownParser(render_options).parse(markdown)


def render(markdown: Any, options: Optional[RenderOptions] = None, **kwargs: Any) -> str:
    """Render Markdown to an HTML fragment.

    Parameters
    ----------
    markdown : str
        Markdown source text. Any other type renders as an empty string.
    options : RenderOptions, optional
        Rendering options. Defaults to class-mode output without provenance.
    **kwargs
        Overrides for individual RenderOptions fields, e.g. ``bidirectional=True``

    Returns
    -------
    str
        HTML fragment

    Raises
    ------
    InvalidOptionsError
        If options has the wrong type or a keyword is unknown
    NestingDepthError
        If the input nests deeper than ``max_nesting_depth``

    Notes
    -----
    Exceptions raised by ``options.fence_plugin`` propagate unchanged.

    Examples
    --------
        >>> render("Hello **world**")
        '<p>Hello <strong class="rm-strong">world</strong></p>'

        >>> render("# Hi", bidirectional=True)
        '<h1 class="rm-h1" data-qd="#">Hi</h1>'

    """
    render_options = _create_options_from_kwargs(options, RenderOptions, "render", **kwargs)
    if not isinstance(markdown, str):
        logger.debug(f"render() received {type(markdown).__name__}, returning empty string")
        return ""

    with debug_timer(logger, "Rendering markdown"):
        doc = MarkdownParser(render_options).parse(markdown)
        return HtmlRenderer(render_options).render_to_string(doc)


@requires_dependencies("html", DEPS_HTML)
def reconstruct(html: Any, options: Optional[ReconstructOptions] = None, **kwargs: Any) -> str:
    """Reconstruct Markdown from rendered (and possibly edited) HTML.

    Provenance attributes written by ``render(..., bidirectional=True)``
    are honored; elements without them fall back to canonical syntax.

    Parameters
    ----------
    html : str, bs4.BeautifulSoup or bs4.element.Tag
        Rendered markup. None or any other type yields an empty string.
    options : ReconstructOptions, optional
        Reconstruction options
    **kwargs
        Overrides for individual ReconstructOptions fields

    Returns
    -------
    str
        Markdown text

    Raises
    ------
    DependencyError
        If beautifulsoup4 is not installed
    InvalidOptionsError
        If options has the wrong type or a keyword is unknown
    NestingDepthError
        If the element tree nests deeper than ``max_nesting_depth``

    Examples
    --------
        >>> reconstruct('<h2 data-qd="##">Title</h2><p>Some <em data-qd="_">text</em></p>')
        '## Title\\n\\nSome _text_'

    """
    from bs4.element import Tag

    reconstruct_options = _create_options_from_kwargs(options, ReconstructOptions, "reconstruct", **kwargs)
    if not isinstance(html, (str, Tag)):
        logger.debug(f"reconstruct() received {type(html).__name__}, returning empty string")
        return ""

    with debug_timer(logger, "Reconstructing markdown"):
        doc = HtmlToAstConverter(reconstruct_options).parse(html)
        return MarkdownRenderer(reconstruct_options).render_to_string(doc)


def configure(options: Optional[RenderOptions] = None, **kwargs: Any) -> Callable[..., str]:
    """Create a render function bound to fixed options.

    Parameters
    ----------
    options : RenderOptions, optional
        Base options for every call
    **kwargs
        Overrides for individual RenderOptions fields

    Returns
    -------
    Callable[..., str]
        ``render`` with the resolved options bound

    Examples
    --------
        >>> chat_render = configure(bidirectional=True, lazy_linefeeds=True)
        >>> chat_render("a\\nb")
        '<p>a<br class="rm-br">b</p>'

    """
    render_options = _create_options_from_kwargs(options, RenderOptions, "configure", **kwargs)
    return partial(render, options=render_options)
