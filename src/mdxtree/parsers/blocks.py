#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/parsers/blocks.py
"""Block-level scanning of MDX-like markup.

A page is a sequence of Markdown runs interleaved with component blocks and
block quotes that start in the first column. :func:`scan_blocks` splits one
level of source into those pieces without looking inside them; the parser
then scans each component's inner content as its own level, driven by an
explicit work stack, so nesting depth is never limited by recursion.

Lines carry their absolute offset in the source so that errors raised deep
inside nested, dedented content still point at the right place.

"""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from mdxtree.exceptions import UnterminatedBlockError
from mdxtree.parsers.attributes import find_tag_end

COMPONENT_START_RE = re.compile(r"<([A-Z][A-Za-z0-9]*|img)(?=[\s/>]|$)")
_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
# Nested content has not been dedented yet while looking for a closing tag
_NESTED_FENCE_RE = re.compile(r"^[ \t]*(`{3,}|~{3,})")

# HTML void elements never have a closing tag
VOID_TAGS = frozenset({"img"})


@dataclass(frozen=True)
class Line:
    """One source line and the absolute offset of its first character."""

    text: str
    offset: int

    @property
    def is_blank(self) -> bool:
        """Whether the line holds only whitespace."""
        return not self.text.strip()


def split_lines(text: str, base_offset: int = 0) -> list[Line]:
    """Split ``text`` into lines with absolute offsets."""
    lines: list[Line] = []
    offset = base_offset
    for raw in text.split("\n"):
        lines.append(Line(raw, offset))
        offset += len(raw) + 1
    return lines


def indent_width(text: str) -> int:
    """Count leading spaces, with a tab advancing to the next multiple of 4."""
    width = 0
    for char in text:
        if char == " ":
            width += 1
        elif char == "\t":
            width += 4 - width % 4
        else:
            break
    return width


def strip_indent(lines: list[Line], limit: Optional[int] = None) -> list[Line]:
    """Remove the common leading indentation of the non-blank lines.

    Parameters
    ----------
    lines : list of Line
        Lines to dedent
    limit : int, optional
        Remove at most this many columns

    Returns
    -------
    list of Line
        Dedented lines; blank lines become empty

    """
    widths = [indent_width(line.text) for line in lines if not line.is_blank]
    common = min(widths) if widths else 0
    if limit is not None:
        common = min(common, limit)

    result: list[Line] = []
    for line in lines:
        if line.is_blank:
            result.append(Line("", line.offset))
            continue
        removed = 0
        cut = 0
        while cut < len(line.text) and removed < common and line.text[cut] in " \t":
            removed += 1 if line.text[cut] == " " else 4 - removed % 4
            cut += 1
        result.append(Line(line.text[cut:], line.offset + cut))
    return result


def lines_text(lines: list[Line]) -> str:
    """Join lines back into text."""
    return "\n".join(line.text for line in lines)


class SourceFrame:
    """A list of lines viewed as one string, with offset mapping.

    Parameters
    ----------
    lines : list of Line
        Lines of one nesting level

    """

    def __init__(self, lines: list[Line]):
        """Join the lines and index their start positions."""
        self.lines = lines
        self.text = lines_text(lines)
        self.starts: list[int] = []
        position = 0
        for line in lines:
            self.starts.append(position)
            position += len(line.text) + 1

    def line_index(self, position: int) -> int:
        """Return the index of the line containing ``position``."""
        return max(0, bisect_right(self.starts, position) - 1)

    def absolute(self, position: int) -> int:
        """Map a position in :attr:`text` to an absolute source offset."""
        if not self.lines:
            return 0
        index = self.line_index(position)
        return self.lines[index].offset + (position - self.starts[index])

    def line_end(self, index: int) -> int:
        """Position just past the last character of line ``index``."""
        return self.starts[index] + len(self.lines[index].text)

    def slice_lines(self, start: int, end: int) -> list[Line]:
        """Return the text between two positions as lines with absolute offsets."""
        if start >= end:
            return []
        return [Line(part.text, self.absolute(start + part.offset)) for part in split_lines(self.text[start:end])]


@dataclass
class MarkdownRun:
    """Consecutive lines of plain Markdown."""

    lines: list[Line]


@dataclass
class QuoteRun:
    """Consecutive lines starting with ``>`` in the first column."""

    lines: list[Line]

    def content(self) -> list[Line]:
        """Return the lines with one level of ``>`` prefix removed."""
        stripped: list[Line] = []
        for line in self.lines:
            text = line.text[1:]
            cut = 1
            if text.startswith(" "):
                text = text[1:]
                cut = 2
            stripped.append(Line(text, line.offset + cut))
        return stripped


@dataclass
class ComponentPiece:
    """A component block: opening tag, inner lines and closing tag.

    Parameters
    ----------
    tag : str
        Tag name
    attr_source : str
        Text between the tag name and the ``>`` of the opening tag
    attr_offset : int
        Absolute offset of ``attr_source``
    inner : list of Line
        Lines between the opening and closing tags; a first or last partial
        line holding only whitespace is dropped
    raw : str
        Full source text from ``<`` through the closing ``>``
    offset : int
        Absolute offset of the opening ``<``
    self_closing : bool
        Whether the component was written as ``<Tag ... />``

    """

    tag: str
    attr_source: str
    attr_offset: int
    inner: list[Line] = field(default_factory=list)
    raw: str = ""
    offset: int = 0
    self_closing: bool = False


Piece = Union[MarkdownRun, QuoteRun, ComponentPiece]


class _FenceTracker:
    """Track whether lines fall inside a fenced code block."""

    def __init__(self, pattern: re.Pattern[str] = _FENCE_RE) -> None:
        self.pattern = pattern
        self.fence: Optional[str] = None

    def feed(self, text: str) -> bool:
        """Consume one line; return True if it belongs to a fence (markers included)."""
        match = self.pattern.match(text)
        if self.fence is not None:
            if match and match.group(1)[0] == self.fence[0] and len(match.group(1)) >= len(self.fence):
                if not text[match.end() :].strip():
                    self.fence = None
            return True
        if match:
            self.fence = match.group(1)
            return True
        return False


def _find_close(
    frame: SourceFrame, tag: str, start: int, fence_aware: bool, open_offset: int
) -> tuple[int, int]:
    """Find the closing tag matching an opening tag that ends at ``start``.

    Returns
    -------
    tuple of (int, int)
        Positions of the ``<`` and just past the ``>`` of the closing tag

    Raises
    ------
    UnterminatedBlockError
        If no matching closing tag exists

    """
    token_re = re.compile(rf"<{tag}(?=[\s/>]|$)|</{tag}\s*>")
    depth = 1
    fences = _FenceTracker(_NESTED_FENCE_RE)
    index = frame.line_index(start)
    position = start

    while index < len(frame.lines):
        line_start = frame.starts[index]
        line_end = frame.line_end(index)
        if fence_aware and position <= line_start and fences.feed(frame.lines[index].text):
            index += 1
            position = frame.starts[index] if index < len(frame.lines) else len(frame.text)
            continue

        jumped = False
        for match in token_re.finditer(frame.text, max(position, line_start), line_end):
            if match.group(0).startswith("</"):
                depth -= 1
                if depth == 0:
                    return match.start(), match.end()
                continue
            found = find_tag_end(frame.text, match.end())
            if found is None:
                raise UnterminatedBlockError(tag, frame.absolute(match.start()))
            end, self_closing = found
            if not self_closing:
                depth += 1
            if end > line_end:
                position = end
                index = frame.line_index(end)
                jumped = True
                break
        if not jumped:
            index += 1
            position = frame.starts[index] if index < len(frame.lines) else len(frame.text)

    raise UnterminatedBlockError(tag, open_offset)


def _read_component(
    frame: SourceFrame, index: int, is_raw: Callable[[str], bool]
) -> tuple[ComponentPiece, int]:
    """Read the component starting at the first column of line ``index``.

    Returns
    -------
    tuple of (ComponentPiece, int)
        The piece and the index of the first line after it

    """
    line_start = frame.starts[index]
    match = COMPONENT_START_RE.match(frame.text, line_start)
    assert match is not None
    tag = match.group(1)
    offset = frame.absolute(line_start)

    found = find_tag_end(frame.text, match.end())
    if found is None:
        raise UnterminatedBlockError(tag, offset)
    open_end, self_closing = found
    self_closing = self_closing or tag in VOID_TAGS
    attr_source = frame.text[match.end() : open_end - 1]
    attr_offset = frame.absolute(match.end())

    if self_closing:
        end = open_end
        inner: list[Line] = []
    else:
        close_start, end = _find_close(frame, tag, open_end, not is_raw(tag), offset)
        inner = frame.slice_lines(open_end, close_start)
        if inner and inner[0].is_blank:
            inner = inner[1:]
        if inner and inner[-1].is_blank:
            inner = inner[:-1]

    last_index = frame.line_index(max(end - 1, line_start))
    piece = ComponentPiece(
        tag=tag,
        attr_source=attr_source,
        attr_offset=attr_offset,
        inner=inner,
        raw=frame.text[line_start:end],
        offset=offset,
        self_closing=self_closing,
    )
    trailing = frame.text[end : frame.line_end(last_index)]
    if trailing.strip():
        raise UnterminatedBlockError(
            tag, frame.absolute(end), f"Unexpected text after </{tag}>: {trailing.strip()[:40]!r}"
        )
    return piece, last_index + 1


def starts_component(text: str) -> bool:
    """Whether ``text`` begins with a component tag in its first column."""
    return COMPONENT_START_RE.match(text) is not None


def scan_blocks(
    lines: list[Line],
    is_raw: Callable[[str], bool] = lambda tag: False,
    fence_aware: bool = True,
    quotes: bool = True,
) -> list[Piece]:
    """Split one nesting level of source into Markdown, quote and component pieces.

    Parameters
    ----------
    lines : list of Line
        Dedented lines of one level
    is_raw : callable, default = always False
        Whether a tag's content is raw text; closing tags inside fenced code
        are only skipped for non-raw tags
    fence_aware : bool, default = True
        Ignore component and quote syntax inside fenced code blocks
    quotes : bool, default = True
        Split out first-column block quotes

    Returns
    -------
    list of Piece
        Pieces in source order

    Raises
    ------
    UnterminatedBlockError
        If a component's opening tag or closing tag is missing

    """
    frame = SourceFrame(lines)
    pieces: list[Piece] = []
    markdown: list[Line] = []
    quote: list[Line] = []
    fences = _FenceTracker()

    def flush() -> None:
        if quote:
            pieces.append(QuoteRun(list(quote)))
            quote.clear()
        if markdown:
            pieces.append(MarkdownRun(list(markdown)))
            markdown.clear()

    index = 0
    while index < len(lines):
        line = lines[index]
        if fence_aware and not quote and fences.feed(line.text):
            markdown.append(line)
            index += 1
            continue

        if quotes and line.text.startswith(">"):
            if markdown:
                flush()
            quote.append(line)
            index += 1
            continue
        if quote:
            flush()

        if starts_component(line.text):
            flush()
            piece, index = _read_component(frame, index, is_raw)
            pieces.append(piece)
            continue

        markdown.append(line)
        index += 1

    flush()
    return pieces
