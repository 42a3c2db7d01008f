#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/roundmark/parsers/inline.py
"""Inline Markdown formatter.

Scans the text of a paragraph, heading, list item or table cell once, left
to right, and produces inline AST nodes. Precedence between constructs is
kept by the scanner rather than by ordering a series of substitutions:

1. code spans bind tightest; their content is never re-scanned
2. images, then links (balanced brackets in the text, balanced parentheses in the URL)
3. autolinks, bare (after start or whitespace) or in angle brackets
4. strong (``**``/``__``), then emphasis (``*``/``_``), then strikethrough (``~~``)
5. hard line breaks (two or more spaces before a newline)

While looking for a closing delimiter the scanner steps over complete code
spans, links and images, so a ``*`` inside ``[a*b](url)`` never closes an
emphasis opened before the link. Delimiters that never close are kept as
literal text.

Boundary lookups (code span ends, matching brackets and parentheses, closing
delimiters) are memoized per scanned text, so adversarial input such as a
long run of unmatched ``[`` is still scanned in linear time.

Text is stored unescaped; escaping happens when HTML is emitted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from roundmark.ast.nodes import (
    Autolink,
    Code,
    Emphasis,
    Image,
    LineBreak,
    Link,
    Node,
    Strikethrough,
    Strong,
    Text,
)
from roundmark.constants import (
    AUTOLINK_PATTERN,
    BRACKETED_AUTOLINK_PATTERN,
    DEFAULT_CODE_MARKER,
    DEFAULT_MAX_NESTING_DEPTH,
    DEFAULT_STRIKETHROUGH_MARKER,
    IMAGE_MARKER,
    LINK_MARKER,
)
from roundmark.exceptions import NestingDepthError

logger = logging.getLogger(__name__)

# (nodes, index after the construct)
ScanResult = Optional[tuple[list[Node], int]]


@dataclass
class _BoundaryMemo:
    """Boundary lookups already resolved for one scanned text.

    Each lookup is a pure function of the text and a start index, so results
    can be shared by every scanner working on that text.
    """

    code_span_ends: dict[int, int] = field(default_factory=dict)
    label_ends: dict[int, int] = field(default_factory=dict)
    paren_ends: dict[int, int] = field(default_factory=dict)
    closings: dict[str, dict[int, int]] = field(default_factory=dict)
    # (search start, index found) of the last forward search for "]"
    close_bracket: Optional[tuple[int, int]] = None


class InlineFormatter:
    """Convert inline Markdown text into inline AST nodes.

    Parameters
    ----------
    lazy_linefeeds : bool, default False
        Turn every newline into a soft LineBreak
    max_nesting_depth : int, default 64
        Maximum recursion depth for nested inline constructs

    Examples
    --------
        >>> nodes = InlineFormatter().format("**bold** and _em_")
        >>> [type(n).__name__ for n in nodes]
        ['Strong', 'Text', 'Emphasis']

    """

    def __init__(self, *, lazy_linefeeds: bool = False, max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH):
        """Initialize the formatter."""
        self.lazy_linefeeds = lazy_linefeeds
        self.max_nesting_depth = max_nesting_depth
        self._scanners: dict[str, Callable[[str, int, int], ScanResult]] = {
            "`": self._scan_code_span,
            "!": self._scan_image,
            "[": self._scan_link,
            "<": self._scan_bracketed_autolink,
            "h": self._scan_autolink,
            "*": self._scan_emphasis,
            "_": self._scan_emphasis,
            "~": self._scan_strikethrough,
            " ": self._scan_hard_break,
            "\n": self._scan_newline,
        }
        self._memos: list[_BoundaryMemo] = []

    def format(self, text: str, depth: int = 0) -> list[Node]:
        """Scan ``text`` and return its inline nodes.

        Parameters
        ----------
        text : str
            Raw inline Markdown
        depth : int, default 0
            Current nesting depth; nested constructs re-scan their inner text
            with ``depth + 1``

        Returns
        -------
        list of Node
            Inline nodes; adjacent text is merged into a single Text node

        Raises
        ------
        NestingDepthError
            If nested formatting exceeds ``max_nesting_depth``

        """
        if depth > self.max_nesting_depth:
            raise NestingDepthError(depth, self.max_nesting_depth, stage="inline")

        self._memos.append(_BoundaryMemo())
        try:
            return self._scan(text, depth)
        finally:
            self._memos.pop()

    def _scan(self, text: str, depth: int) -> list[Node]:
        nodes: list[Node] = []
        pending: list[str] = []
        i = 0
        length = len(text)

        while i < length:
            scanner = self._scanners.get(text[i])
            result = scanner(text, i, depth) if scanner else None
            if result is None:
                pending.append(text[i])
                i += 1
                continue

            if pending:
                nodes.append(Text(content="".join(pending)))
                pending = []
            produced, i = result
            nodes.extend(produced)

        if pending:
            nodes.append(Text(content="".join(pending)))
        return nodes

    # ------------------------------------------------------------------
    # Construct boundaries
    # ------------------------------------------------------------------

    def _code_span_end(self, text: str, start: int) -> int:
        """Return the index after a code span opening at ``start``, or -1."""
        ends = self._memos[-1].code_span_ends
        if start not in ends:
            close = text.find("`", start + 1)
            ends[start] = close + 1 if close > start + 1 else -1
        return ends[start]

    def _balanced_end(
        self,
        text: str,
        start: int,
        memo: dict[int, int],
        opener: str,
        closer: str,
        *,
        skip_code_spans: bool = False,
        stop_at_space: bool = False,
    ) -> int:
        """Return the index of the ``closer`` balancing ``text[start]``, or -1.

        Every opener met on the way is resolved in the same pass and recorded
        in ``memo``; an opener already in ``memo`` is jumped over. Each
        position of ``text`` is therefore visited at most once per memo.

        Parameters
        ----------
        text : str
            Text being scanned
        start : int
            Index of the opener
        memo : dict of int to int
            Resolved closer index (or -1) per opener index
        opener, closer : str
            The bracket pair
        skip_code_spans : bool, default False
            Step over complete code spans
        stop_at_space : bool, default False
            Whitespace fails every pending opener

        """
        if start in memo:
            return memo[start]

        pending = [start]
        j = start + 1
        while j < len(text):
            char = text[j]
            if char == "`" and skip_code_spans:
                span_end = self._code_span_end(text, j)
                if span_end != -1:
                    j = span_end
                    continue
            elif char.isspace() and stop_at_space:
                break
            elif char == opener:
                known = memo.get(j)
                if known == -1:
                    break
                if known is not None:
                    j = known + 1
                    continue
                pending.append(j)
            elif char == closer:
                memo[pending.pop()] = j
                if not pending:
                    return j
            j += 1

        for index in pending:
            memo[index] = -1
        return -1

    def _url_end(self, text: str, open_paren: int) -> int:
        """Return the index after ``(url)`` starting at ``open_paren``, or -1.

        Parentheses inside the URL must balance; whitespace ends the search.
        """
        if open_paren >= len(text) or text[open_paren] != "(":
            return -1
        close = self._balanced_end(text, open_paren, self._memos[-1].paren_ends, "(", ")", stop_at_space=True)
        return close + 1 if close > open_paren + 1 else -1

    def _label_end(self, text: str, open_bracket: int) -> int:
        """Return the index of the ``]`` matching ``open_bracket``, or -1."""
        return self._balanced_end(text, open_bracket, self._memos[-1].label_ends, "[", "]", skip_code_spans=True)

    def _next_close_bracket(self, text: str, start: int) -> int:
        """Return the index of the first ``]`` at or after ``start``, or -1."""
        memo = self._memos[-1]
        if memo.close_bracket is not None:
            searched_from, found = memo.close_bracket
            if searched_from <= start and (found == -1 or start <= found):
                return found
        found = text.find("]", start)
        memo.close_bracket = (start, found)
        return found

    def _link_end(self, text: str, start: int) -> int:
        """Return the index after a link or image starting at ``start``, or -1."""
        bracket = start + 1 if text.startswith("![", start) else start
        if bracket >= len(text) or text[bracket] != "[":
            return -1
        label_end = self._label_end(text, bracket)
        if label_end == -1:
            return -1
        return self._url_end(text, label_end + 1)

    def _find_closing(self, text: str, start: int, delimiter: str) -> int:
        """Find the next closing ``delimiter`` at or after ``start`` on the same line.

        Code spans, links, images and bracketed autolinks are stepped over as
        units. For single-character delimiters a match must not touch another
        copy of the same character. The outcome from any visited index is
        remembered, so later searches stop as soon as they reach one.

        Returns
        -------
        int
            Index of the closing delimiter, or -1

        """
        memo = self._memos[-1].closings.setdefault(delimiter, {})
        single = len(delimiter) == 1
        visited: list[int] = []
        result = -1
        j = start
        while j < len(text):
            if j in memo:
                result = memo[j]
                break
            visited.append(j)
            char = text[j]
            if char == "\n":
                break
            if char == "`":
                span_end = self._code_span_end(text, j)
                if span_end != -1:
                    j = span_end
                    continue
            elif char in "[!":
                link_end = self._link_end(text, j)
                if link_end != -1:
                    j = link_end
                    continue
            elif char == "<":
                match = BRACKETED_AUTOLINK_PATTERN.match(text, j)
                if match:
                    j = match.end()
                    continue

            if text.startswith(delimiter, j):
                if not single:
                    result = j
                    break
                touches_run = text[j - 1] == delimiter or text[j + 1 : j + 2] == delimiter
                if not touches_run:
                    result = j
                    break
            j += 1

        for index in visited:
            memo[index] = result
        return result

    # ------------------------------------------------------------------
    # Scanners: each returns (nodes, next_index) or None for literal text
    # ------------------------------------------------------------------

    def _scan_code_span(self, text: str, i: int, depth: int) -> ScanResult:
        end = self._code_span_end(text, i)
        if end == -1:
            return None
        return [Code(content=text[i + 1 : end - 1], marker=DEFAULT_CODE_MARKER)], end

    def _scan_image(self, text: str, i: int, depth: int) -> ScanResult:
        if not text.startswith("![", i):
            return None
        alt_end = self._next_close_bracket(text, i + 2)
        if alt_end == -1:
            return None
        end = self._url_end(text, alt_end + 1)
        if end == -1:
            return None
        url = text[alt_end + 2 : end - 1]
        image = Image(url=url.strip(), alt_text=text[i + 2 : alt_end], marker=IMAGE_MARKER, source_url=url)
        return [image], end

    def _scan_link(self, text: str, i: int, depth: int) -> ScanResult:
        label_end = self._label_end(text, i)
        if label_end <= i + 1:
            return None
        end = self._url_end(text, label_end + 1)
        if end == -1:
            return None
        label = text[i + 1 : label_end]
        link = Link(
            url=text[label_end + 2 : end - 1].strip(),
            content=self.format(label, depth + 1),
            marker=LINK_MARKER,
            source_text=label,
        )
        return [link], end

    def _scan_bracketed_autolink(self, text: str, i: int, depth: int) -> ScanResult:
        match = BRACKETED_AUTOLINK_PATTERN.match(text, i)
        if not match:
            return None
        return [Autolink(url=match.group(1), bracketed=True)], match.end()

    def _scan_autolink(self, text: str, i: int, depth: int) -> ScanResult:
        if i > 0 and not text[i - 1].isspace():
            return None
        match = AUTOLINK_PATTERN.match(text, i)
        if not match:
            return None
        return [Autolink(url=match.group(0))], match.end()

    def _scan_emphasis(self, text: str, i: int, depth: int) -> ScanResult:
        char = text[i]
        double = char * 2

        if text.startswith(double, i):
            close = self._find_closing(text, i + 3, double)
            if close == -1:
                return None
            inner = text[i + 2 : close]
            return [Strong(content=self.format(inner, depth + 1), marker=double)], close + 2

        # a single delimiter directly after the same character is part of a run
        if i > 0 and text[i - 1] == char:
            return None
        close = self._find_closing(text, i + 2, char)
        if close == -1:
            return None
        inner = text[i + 1 : close]
        return [Emphasis(content=self.format(inner, depth + 1), marker=char)], close + 1

    def _scan_strikethrough(self, text: str, i: int, depth: int) -> ScanResult:
        marker = DEFAULT_STRIKETHROUGH_MARKER
        if not text.startswith(marker, i):
            return None
        close = self._find_closing(text, i + 3, marker)
        if close == -1:
            return None
        inner = text[i + 2 : close]
        return [Strikethrough(content=self.format(inner, depth + 1), marker=marker)], close + 2

    def _scan_hard_break(self, text: str, i: int, depth: int) -> ScanResult:
        # only the start of a run can be a break; the rest was already tried
        if i > 0 and text[i - 1] == " ":
            return None
        j = i
        while j < len(text) and text[j] == " ":
            j += 1
        if j - i >= 2 and j < len(text) and text[j] == "\n":
            return [LineBreak(soft=False)], j + 1
        return None

    def _scan_newline(self, text: str, i: int, depth: int) -> ScanResult:
        if not self.lazy_linefeeds:
            return None
        return [LineBreak(soft=True)], i + 1
