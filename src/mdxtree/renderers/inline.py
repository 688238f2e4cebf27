#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/renderers/inline.py
"""Inline content rendering shared by block writers.

Text leaves carry flat, canonically ordered mark sets rather than nested
emphasis nodes. :class:`InlineWriter` turns a run of leaves back into nested
delimiters by keeping a stack of open marks: a mark stays open across
neighbouring leaves that share it, so ``**a _b_ c**`` is written as one bold
span instead of three.

Italic delimiters are chosen after the whole run is laid out, because whether
``*`` or ``_`` reads back correctly depends on the characters on both sides.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Literal, Optional, Union

from mdxtree.ast.nodes import Mark, MarkType, Node, NodeKind, sort_marks
from mdxtree.options.mdx import MdxRendererOptions
from mdxtree.utils.escape import escape_markdown, escape_table_cell, inline_code_span

logger = logging.getLogger(__name__)

InlineMode = Literal["text", "heading", "cell"]

_HREF_NEEDS_BRACKETS_RE = re.compile(r"[\s()<>]")


@dataclass(eq=False)
class _ItalicDelimiter:
    """Placeholder for an italic opener or closer resolved after layout."""

    opener: bool
    preferred: str
    partner: Optional[_ItalicDelimiter] = None
    chosen: Optional[str] = None


_Segment = Union[str, _ItalicDelimiter]


def merge_text_runs(nodes: list[Node]) -> list[Node]:
    """Merge neighbouring text leaves that carry the same marks.

    Empty text leaves are dropped. The input nodes are not modified.

    Parameters
    ----------
    nodes : list of Node
        Inline nodes

    Returns
    -------
    list of Node
        Inline nodes with no two adjacent text leaves sharing a mark set

    """
    merged: list[Node] = []
    for node in nodes:
        if node.kind is NodeKind.TEXT:
            if not node.text:
                continue
            marks = sort_marks(node.marks)
            previous = merged[-1] if merged else None
            if previous is not None and previous.kind is NodeKind.TEXT and previous.marks == marks:
                merged[-1] = Node(NodeKind.TEXT, text=(previous.text or "") + node.text, marks=marks)
                continue
            merged.append(Node(NodeKind.TEXT, text=node.text, marks=marks))
        else:
            merged.append(node)
    return merged


def format_href(href: str) -> str:
    """Return a link destination, wrapped in angle brackets when it needs them."""
    if not href:
        return "<>"
    if _HREF_NEEDS_BRACKETS_RE.search(href):
        return "<" + href.replace("<", "%3C").replace(">", "%3E") + ">"
    return href


def format_link_title(title: str) -> str:
    """Return a quoted link or image title."""
    return '"' + title.replace("\\", "\\\\").replace('"', '\\"') + '"'


def format_image(src: str, alt: str, title: Optional[str] = None) -> str:
    """Return ``![alt](src "title")`` markup."""
    alt_text = alt.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
    target = format_href(src)
    if title:
        target += " " + format_link_title(title)
    return f"![{alt_text}]({target})"


class InlineWriter:
    """Render inline nodes (text leaves, hard breaks, inline images) to markup.

    Parameters
    ----------
    options : MdxRendererOptions
        Renderer options (emphasis symbol, escaping)
    mode : {"text", "heading", "cell"}, default = "text"
        Where the markup lands. Headings cannot hold line breaks, so a hard
        break becomes a space; table cells write hard breaks as ``<br>`` and
        escape pipes.
    on_invalid : callable, optional
        Called with ``(index, node)`` for a non-inline child, which is skipped

    Examples
    --------
        >>> from mdxtree.ast.builder import text, bold
        >>> InlineWriter(MdxRendererOptions()).write([text("Hello "), text("world", bold())])
        'Hello **world**'

    """

    def __init__(
        self,
        options: MdxRendererOptions,
        mode: InlineMode = "text",
        on_invalid: Optional[Callable[[int, Node], None]] = None,
    ):
        """Initialize the writer."""
        self.options = options
        self.mode = mode
        self.on_invalid = on_invalid

    def write(self, nodes: list[Node]) -> str:
        """Render ``nodes`` to inline markup.

        Parameters
        ----------
        nodes : list of Node
            Inline children of a paragraph, heading or table cell

        Returns
        -------
        str
            Inline markup; hard breaks in ``"text"`` mode produce newlines

        """
        self._segments: list[_Segment] = []
        self._open: list[tuple[Mark, Optional[_ItalicDelimiter]]] = []
        self._pending_space = ""

        positions = {id(node): index for index, node in enumerate(nodes)}
        for node in merge_text_runs(nodes):
            if node.kind is NodeKind.TEXT:
                self._write_text(node)
            elif node.kind is NodeKind.HARD_BREAK:
                self._close_to(0)
                self._flush_space()
                self._emit(self._hard_break())
            elif node.kind is NodeKind.IMAGE:
                self._close_to(0)
                self._flush_space()
                src, alt = str(node.attrs.get("src", "")), str(node.attrs.get("alt", ""))
                self._emit(format_image(src, alt, node.attrs.get("caption")))
            elif self.on_invalid is not None:
                self.on_invalid(positions.get(id(node), -1), node)
            else:
                logger.debug("Skipping non-inline %s node inside inline content", node.kind_name)

        self._close_to(0)
        self._flush_space()
        return self._resolve()

    def _hard_break(self) -> str:
        if self.mode == "heading":
            return " "
        if self.mode == "cell":
            return "<br>"
        return "  \n"

    def _emit(self, segment: _Segment) -> None:
        self._segments.append(segment)

    def _flush_space(self) -> None:
        if self._pending_space:
            self._emit(self._pending_space)
            self._pending_space = ""

    def _escape(self, content: str) -> str:
        if not self.options.escape_special:
            return content
        escaped = escape_markdown(content)
        if self.mode == "cell":
            escaped = escape_table_cell(escaped)
        return escaped

    def _write_text(self, node: Node) -> None:
        content = node.text or ""
        if self.mode != "text":
            # Headings and table cells are single lines
            content = content.replace("\n", " ")
        is_code = any(mark.type is MarkType.CODE for mark in node.marks)
        wanted = [mark for mark in node.marks if mark.type is not MarkType.CODE]

        if not is_code and not content.strip():
            # Whitespace carries no formatting
            keep = self._common_prefix(wanted)
            self._close_to(keep)
            self._pending_space += content
            return

        keep = self._common_prefix(wanted)
        self._close_to(keep)

        if is_code:
            lead, body, trail = "", content, ""
        else:
            stripped = content.lstrip()
            lead = content[: len(content) - len(stripped)]
            body = stripped.rstrip()
            trail = stripped[len(body) :]

        # Delimiters hug the text: whitespace moves outside the spans
        self._flush_space()
        self._emit(lead)
        for mark in wanted[keep:]:
            self._open_mark(mark)

        if is_code:
            span = inline_code_span(body.replace("\n", " "))
            self._emit(escape_table_cell(span) if self.mode == "cell" else span)
        else:
            self._emit(self._escape(body))
        self._pending_space = trail

    def _common_prefix(self, wanted: list[Mark]) -> int:
        keep = 0
        while keep < len(self._open) and keep < len(wanted) and self._open[keep][0] == wanted[keep]:
            keep += 1
        return keep

    def _open_mark(self, mark: Mark) -> None:
        delimiter: Optional[_ItalicDelimiter] = None
        if mark.type is MarkType.LINK:
            self._escape_image_bang()
            self._emit("[")
        elif mark.type is MarkType.BOLD:
            self._emit("**")
        elif mark.type is MarkType.ITALIC:
            delimiter = _ItalicDelimiter(opener=True, preferred=self.options.emphasis_symbol)
            self._emit(delimiter)
        elif mark.type is MarkType.STRIKE:
            self._emit("~~")
        elif mark.type is MarkType.UNDERLINE:
            self._emit("<u>")
        self._open.append((mark, delimiter))

    def _close_to(self, depth: int) -> None:
        while len(self._open) > depth:
            mark, opener = self._open.pop()
            if mark.type is MarkType.LINK:
                self._emit("](" + format_href(mark.href or "") + ")")
            elif mark.type is MarkType.BOLD:
                self._emit("**")
            elif mark.type is MarkType.ITALIC and opener is not None:
                closer = _ItalicDelimiter(opener=False, preferred=opener.preferred, partner=opener)
                opener.partner = closer
                self._emit(closer)
            elif mark.type is MarkType.STRIKE:
                self._emit("~~")
            elif mark.type is MarkType.UNDERLINE:
                self._emit("</u>")

    def _escape_image_bang(self) -> None:
        # "!" right before "[" would turn the link into an image
        for index in range(len(self._segments) - 1, -1, -1):
            segment = self._segments[index]
            if isinstance(segment, str) and segment == "":
                continue
            if isinstance(segment, str) and segment.endswith("!"):
                self._segments[index] = segment[:-1] + "\\!"
            break

    def _neighbour(self, index: int, step: int) -> str:
        """Return the nearest character beside segment ``index`` ("" at the edges)."""
        index += step
        while 0 <= index < len(self._segments):
            segment = self._segments[index]
            if isinstance(segment, _ItalicDelimiter):
                return segment.chosen or "*"
            if segment:
                return segment[-1] if step < 0 else segment[0]
            index += step
        return ""

    def _resolve(self) -> str:
        for index, segment in enumerate(self._segments):
            if not isinstance(segment, _ItalicDelimiter) or not segment.opener or segment.chosen:
                continue
            closer = segment.partner
            closer_index = next((i for i, s in enumerate(self._segments) if s is closer), index)
            before = self._neighbour(index, -1)
            after = self._neighbour(closer_index, 1)

            def fits(symbol: str, before: str = before, after: str = after) -> bool:
                if symbol == "*":
                    return before != "*" and after != "*"
                return not before.isalnum() and not after.isalnum() and before != "_" and after != "_"

            preferred = segment.preferred
            other = "_" if preferred == "*" else "*"
            choice = preferred if fits(preferred) else other if fits(other) else "*"
            segment.chosen = choice
            if closer is not None:
                closer.chosen = choice

        return "".join(
            segment if isinstance(segment, str) else (segment.chosen or segment.preferred) for segment in self._segments
        )
