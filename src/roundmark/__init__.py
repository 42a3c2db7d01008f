"""roundmark - Markdown to HTML rendering with lossless reconstruction.

roundmark renders a compact Markdown dialect (the kind produced by chat
assistants and LLMs) to an HTML fragment, and reconstructs the Markdown
from that HTML after it has been edited, for example by a rich-text editor.

With ``bidirectional=True`` every generated element records the exact
source syntax it came from (``__bold__`` versus ``**bold**``, ``*`` versus
``-`` bullets, the fence and language of code blocks) in ``data-qd``
attributes. The reverse walker reads those attributes back and falls back to
canonical syntax for elements that were added after rendering.

Key Features
------------
- Single-pass block and inline parsing into a typed AST
- Class-based or inline-style HTML output
- URL sanitization of ``javascript:``, ``vbscript:`` and ``data:`` targets
- Fence plugins for diagrams, math or highlighting, with reverse recovery
- JSON and YAML serialization of the AST

Requirements
------------
- Python 3.10+
- beautifulsoup4 for reconstruction

Examples
--------
Round trip through edited HTML:

    >>> from roundmark import render, reconstruct
    >>> html = render("Some __bold__ text", bidirectional=True)
    >>> html
    '<p>Some <strong class="rm-strong" data-qd="__">bold</strong> text</p>'
    >>> reconstruct(html.replace("bold", "strong"))
    'Some __strong__ text'

Generate a style sheet for class-based output:

    >>> from roundmark import emit_styles
    >>> css = emit_styles(prefix="chat-", theme="dark")

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "roundmark requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "0.1.0"

from roundmark.api import configure, parse, reconstruct, render
from roundmark.ast import (
    Document,
    ast_to_dict,
    ast_to_json,
    ast_to_yaml,
    dict_to_ast,
    json_to_ast,
    yaml_to_ast,
)
from roundmark.exceptions import (
    DependencyError,
    InvalidOptionsError,
    NestingDepthError,
    ParsingError,
    RenderingError,
    RoundmarkError,
    SecurityError,
    ValidationError,
)
from roundmark.fences import FencePlugin, FenceSource
from roundmark.options import ReconstructOptions, RenderOptions
from roundmark.styles import emit_styles
from roundmark.utils.packages import get_package_version


def get_version() -> str:
    """Return the installed roundmark version.

    Falls back to ``__version__`` when running from a source checkout
    without package metadata.
    """
    return get_package_version("roundmark") or __version__


__all__ = [
    "__version__",
    "get_version",
    "render",
    "parse",
    "reconstruct",
    "configure",
    "emit_styles",
    # AST
    "Document",
    "ast_to_dict",
    "dict_to_ast",
    "ast_to_json",
    "json_to_ast",
    "ast_to_yaml",
    "yaml_to_ast",
    # Options and plugins
    "RenderOptions",
    "ReconstructOptions",
    "FencePlugin",
    "FenceSource",
    # Exceptions
    "RoundmarkError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "RenderingError",
    "SecurityError",
    "NestingDepthError",
    "DependencyError",
]
