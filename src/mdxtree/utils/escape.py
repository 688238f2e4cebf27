#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/utils/escape.py
"""Text escaping utilities for the MDX-like markup.

This module holds the pure string functions shared by the parser and the
renderer: quoted attribute escaping (and its inverse), Markdown punctuation
escaping for text content, line-start escaping, table cell escaping and inline
code span delimiting.

"""

from __future__ import annotations

import re

_ATTRIBUTE_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r"}
_ATTRIBUTE_UNESCAPES = {"\\": "\\", '"': '"', "'": "'", "n": "\n", "r": "\r", "t": "\t"}

_ENTITY_RE = re.compile(r"&(#[0-9]{1,7}|#[xX][0-9a-fA-F]{1,6}|[A-Za-z][A-Za-z0-9]{1,31});")
_ORDERED_MARKER_RE = re.compile(r"^(\d{1,9})([.)])(?=\s|$)")
_SETEXT_RE = re.compile(r"^(=+|-+)\s*$")
# A pipe preceded by an even number of backslashes still splits table cells
_UNESCAPED_PIPE_RE = re.compile(r"(?<!\\)((?:\\\\)*)\|")


def escape_attribute(value: str) -> str:
    r"""Escape a string for embedding in a double-quoted attribute.

    Backslashes are escaped first so the transformation is reversible, then
    double quotes and line breaks.

    Parameters
    ----------
    value : str
        Attribute value

    Returns
    -------
    str
        Escaped value, without the surrounding quotes

    Examples
    --------
        >>> escape_attribute('He said "hi"\nagain')
        'He said \\"hi\\"\\nagain'

    """
    return "".join(_ATTRIBUTE_ESCAPES.get(char, char) for char in value)


def unescape_attribute(value: str) -> str:
    r"""Reverse :func:`escape_attribute`.

    Unknown escape sequences are kept verbatim, backslash included, so values
    written by hand (``C:\path``) survive unchanged.

    Parameters
    ----------
    value : str
        Attribute text between the quotes

    Returns
    -------
    str
        Literal value

    Examples
    --------
        >>> unescape_attribute('He said \\"hi\\"\\nagain')
        'He said "hi"\nagain'

    """
    if "\\" not in value:
        return value

    result: list[str] = []
    i = 0
    while i < len(value):
        char = value[i]
        if char == "\\" and i + 1 < len(value) and value[i + 1] in _ATTRIBUTE_UNESCAPES:
            result.append(_ATTRIBUTE_UNESCAPES[value[i + 1]])
            i += 2
            continue
        result.append(char)
        i += 1
    return "".join(result)


def escape_markdown(text: str) -> str:
    r"""Escape Markdown punctuation in inline text content.

    - Always escaped: backslash, backtick, asterisk, braces, brackets, tilde,
      pipe and ``<`` (which would otherwise open inline HTML or a component tag)
    - Underscores only at word boundaries (``snake_case`` stays readable)
    - Ampersands only when they would start a character reference

    Line-start constructs (headings, list markers, quotes) depend on where the
    text lands in the output and are handled by :func:`escape_line_start`.

    Parameters
    ----------
    text : str
        Text to escape

    Returns
    -------
    str
        Escaped text

    Examples
    --------
        >>> escape_markdown("Use *stars* and [brackets]")
        'Use \\*stars\\* and \\[brackets\\]'
        >>> escape_markdown("snake_case")
        'snake_case'

    """
    always_escape = "\\`*{}[]~<|"

    escaped_chars: list[str] = []
    for i, char in enumerate(text):
        if char in always_escape:
            escaped_chars.append("\\")
            escaped_chars.append(char)
        elif char == "_":
            prev_alnum = i > 0 and text[i - 1].isalnum()
            next_alnum = i < len(text) - 1 and text[i + 1].isalnum()
            if not (prev_alnum and next_alnum):
                escaped_chars.append("\\")
            escaped_chars.append(char)
        elif char == "&" and _ENTITY_RE.match(text, i):
            escaped_chars.append("\\&")
        else:
            escaped_chars.append(char)

    return "".join(escaped_chars)


def escape_line_start(line: str) -> str:
    r"""Escape block syntax that would be recognized at the start of a line.

    Parameters
    ----------
    line : str
        One output line of already-escaped inline content

    Returns
    -------
    str
        The line, with a backslash inserted before any heading, quote, list
        marker or setext underline it starts with

    Examples
    --------
        >>> escape_line_start("# not a heading")
        '\\# not a heading'
        >>> escape_line_start("1. not a list")
        '1\\. not a list'

    """
    if not line:
        return line
    first = line[0]
    if first in "#>":
        return "\\" + line
    if first in "-+" and (len(line) == 1 or line[1] in " \t"):
        return "\\" + line
    if _SETEXT_RE.match(line):
        return "\\" + line
    match = _ORDERED_MARKER_RE.match(line)
    if match:
        return f"{match.group(1)}\\{match.group(2)}{line[match.end():]}"
    return line


def escape_table_cell(markup: str) -> str:
    r"""Escape unescaped pipes so cell markup stays inside its cell.

    Examples
    --------
        >>> escape_table_cell("a | b")
        'a \\| b'
        >>> escape_table_cell("a \\| b")
        'a \\| b'

    """
    return _UNESCAPED_PIPE_RE.sub(r"\1\\|", markup)


def inline_code_span(code: str, delimiter: str = "`") -> str:
    """Wrap ``code`` in a code span that reads back as exactly ``code``.

    The delimiter grows past the longest run of backticks inside the code, and
    the content is padded with one space on each side when it starts or ends
    with a backtick, or when it both starts and ends with a space (a reader
    strips one such pair).

    Parameters
    ----------
    code : str
        Code span content
    delimiter : str, default = '`'
        Delimiter character

    Returns
    -------
    str
        Complete code span including delimiters

    Examples
    --------
        >>> inline_code_span("simple code")
        '`simple code`'
        >>> inline_code_span("code with ` backtick")
        '``code with ` backtick``'

    """
    max_consecutive = 0
    current_consecutive = 0
    for char in code:
        if char == delimiter:
            current_consecutive += 1
            max_consecutive = max(max_consecutive, current_consecutive)
        else:
            current_consecutive = 0

    fence = delimiter * (max_consecutive + 1)
    needs_padding = (
        code.startswith(delimiter)
        or code.endswith(delimiter)
        or (len(code) >= 2 and code.startswith(" ") and code.endswith(" ") and code.strip() != "")
    )
    if needs_padding:
        code = f" {code} "
    return f"{fence}{code}{fence}"


def longest_run(text: str, char: str) -> int:
    """Return the length of the longest run of ``char`` in ``text``."""
    longest = current = 0
    for c in text:
        if c == char:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest
