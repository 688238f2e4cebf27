#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/parsers/attributes.py
"""Component tag attribute reading.

Attributes on a component's opening tag take one of four shapes:

- ``name="value"``: a string, with ``\\"``, ``\\n`` and ``\\\\`` escapes
- ``name='value'``: a string, same escapes
- ``name={expression}``: a JSON-shaped expression such as ``{true}``,
  ``{2}`` or ``{[["a", "b"]]}``
- ``name``: a bare flag, read as True

Expressions are decoded as JSON first. In relaxed mode a JavaScript-style
literal (single-quoted strings, bare object keys, trailing commas) is then
normalized and tried again. When both fail, the literal expression text is
kept as a string: a malformed expression never fails the whole parse.

"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from mdxtree.constants import JsonExpressionMode
from mdxtree.exceptions import UnknownAttributeShapeError
from mdxtree.utils.escape import unescape_attribute

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"[A-Za-z_:][\w:.\-]*")
_IDENTIFIER_RE = re.compile(r"[A-Za-z_$][\w$]*")
_QUOTES = "\"'`"


def find_tag_end(text: str, start: int) -> Optional[tuple[int, bool]]:
    """Find the ``>`` that ends an opening tag.

    Quotes and brace expressions are skipped, so a ``>`` inside an attribute
    value (``data={[["a<sortable>"]]}``) does not end the tag. The tag may span
    several lines.

    Parameters
    ----------
    text : str
        Source text
    start : int
        Position just after the tag name

    Returns
    -------
    tuple of (int, bool) or None
        Position just after the ``>`` and whether the tag is self-closing, or
        None when the text ends (or another tag starts) before the ``>``

    """
    i = start
    depth = 0
    quote: Optional[str] = None
    while i < len(text):
        char = text[i]
        if quote:
            if char == "\\":
                i += 2
                continue
            if char == quote:
                quote = None
        elif char in _QUOTES:
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth = max(0, depth - 1)
        elif depth == 0 and char == ">":
            return i + 1, i > start and text[i - 1] == "/"
        elif depth == 0 and char == "<":
            return None
        i += 1
    return None


def _read_quoted(source: str, pos: int) -> tuple[str, int]:
    """Read a quoted string starting at ``source[pos]``; return (content, end)."""
    quote = source[pos]
    i = pos + 1
    while i < len(source):
        if source[i] == "\\":
            i += 2
            continue
        if source[i] == quote:
            return source[pos + 1 : i], i + 1
        i += 1
    raise ValueError("unterminated string")


def _read_braced(source: str, pos: int) -> tuple[str, int]:
    """Read a ``{...}`` expression starting at ``source[pos]``; return (inner, end)."""
    depth = 0
    i = pos
    while i < len(source):
        char = source[i]
        if char in _QUOTES:
            _, i = _read_quoted(source, i)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return source[pos + 1 : i], i + 1
        i += 1
    raise ValueError("unbalanced braces")


def relax_js_literal(expression: str) -> str:
    """Normalize a JavaScript object/array literal into JSON text.

    Single-quoted strings become double-quoted, bare object keys are quoted
    and trailing commas are dropped. Everything else is copied unchanged.

    Parameters
    ----------
    expression : str
        Literal source, e.g. ``[{id: 'a', text: 'Beta',}]``

    Returns
    -------
    str
        JSON candidate, e.g. ``[{"id": "a", "text": "Beta"}]``

    """
    out: list[str] = []
    i = 0
    n = len(expression)
    while i < n:
        char = expression[i]
        if char in _QUOTES:
            content, end = _read_quoted(expression, i)
            if char == '"':
                out.append(expression[i:end])
            else:
                literal = unescape_attribute(content)
                out.append(json.dumps(literal, ensure_ascii=False))
            i = end
            continue
        if char == ",":
            j = i + 1
            while j < n and expression[j].isspace():
                j += 1
            if j < n and expression[j] in "]}":
                i += 1
                continue
        match = _IDENTIFIER_RE.match(expression, i)
        if match and (i == 0 or not (expression[i - 1].isalnum() or expression[i - 1] in "_$.")):
            word = match.group(0)
            j = match.end()
            while j < n and expression[j].isspace():
                j += 1
            if j < n and expression[j] == ":" and word not in ("true", "false", "null"):
                out.append(json.dumps(word))
            elif word == "undefined":
                out.append("null")
            else:
                out.append(word)
            i = match.end()
            continue
        out.append(char)
        i += 1
    return "".join(out)


def decode_expression(expression: str, mode: JsonExpressionMode = "relaxed") -> Any:
    """Decode the text of a ``{...}`` attribute expression.

    Parameters
    ----------
    expression : str
        Text between the braces
    mode : {"relaxed", "strict"}, default = "relaxed"
        Whether JavaScript-style literals are normalized before giving up

    Returns
    -------
    Any
        The decoded JSON value, or the stripped expression text when it is not
        valid JSON

    Examples
    --------
        >>> decode_expression("true")
        True
        >>> decode_expression("[5, 10, 25]")
        [5, 10, 25]
        >>> decode_expression("{id: 'a'}")
        {'id': 'a'}
        >>> decode_expression("props.title")
        'props.title'

    """
    text = expression.strip()
    try:
        return json.loads(text)
    except ValueError:
        pass

    if mode == "relaxed":
        try:
            value = json.loads(relax_js_literal(text))
        except ValueError:
            pass
        else:
            logger.debug("Read attribute expression as a JavaScript literal: %.60s", text)
            return value

    logger.debug("Attribute expression is not JSON, keeping literal text: %.60s", text)
    return text


def parse_attributes(source: str, base_offset: int = 0, mode: JsonExpressionMode = "relaxed") -> dict[str, Any]:
    """Decode the attribute list of an opening tag.

    Parameters
    ----------
    source : str
        Text between the tag name and the closing ``>`` (a trailing ``/`` of a
        self-closing tag is ignored)
    base_offset : int, default = 0
        Absolute offset of ``source[0]``, used in error reports
    mode : {"relaxed", "strict"}, default = "relaxed"
        Expression decoding mode, see :func:`decode_expression`

    Returns
    -------
    dict
        Attribute name to decoded value, in source order

    Raises
    ------
    UnknownAttributeShapeError
        If a value is neither quoted nor an expression, or is unterminated

    Examples
    --------
        >>> parse_attributes(' title="Hi" multiple={true} open')
        {'title': 'Hi', 'multiple': True, 'open': True}

    """
    attrs: dict[str, Any] = {}
    body = source.rstrip()
    if body.endswith("/"):
        body = body[:-1]

    i = 0
    n = len(body)
    while i < n:
        if body[i].isspace():
            i += 1
            continue
        match = _NAME_RE.match(body, i)
        if not match:
            raise UnknownAttributeShapeError(body[i], base_offset + i, f"Unexpected {body[i]!r} in tag attributes")
        name = match.group(0)
        i = match.end()
        while i < n and body[i].isspace():
            i += 1
        if i >= n or body[i] != "=":
            attrs[name] = True
            continue

        i += 1
        while i < n and body[i].isspace():
            i += 1
        value_offset = base_offset + i
        if i >= n:
            raise UnknownAttributeShapeError(name, value_offset)
        try:
            if body[i] in "\"'":
                raw, i = _read_quoted(body, i)
                attrs[name] = unescape_attribute(raw)
            elif body[i] == "{":
                raw, i = _read_braced(body, i)
                attrs[name] = decode_expression(raw, mode)
            else:
                raise UnknownAttributeShapeError(name, value_offset)
        except ValueError as e:
            raise UnknownAttributeShapeError(name, value_offset, f"Attribute {name!r} value is {e}") from e

    return attrs
