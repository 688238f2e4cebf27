#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/ast/builder.py
"""Shorthand constructors for building trees in code.

Parsers and tests build many small nodes; these helpers keep that readable and
make sure attributes are spelled the way the parser spells them.

Examples
--------
    >>> doc = document(
    ...     heading(1, text("Title")),
    ...     paragraph(text("Hello "), text("world", bold())),
    ... )

"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from mdxtree.ast.nodes import (
    CodeFile,
    LabelItem,
    Mark,
    MarkType,
    Node,
    NodeKind,
    TableColumn,
    TableRow,
    sort_marks,
)
from mdxtree.constants import DEFAULT_CODE_LANGUAGE


def text(content: str, *marks: Mark) -> Node:
    """Create a text leaf with marks in canonical order."""
    return Node(NodeKind.TEXT, text=content, marks=sort_marks(list(marks)))


def bold() -> Mark:
    """Return a bold mark."""
    return Mark(MarkType.BOLD)


def italic() -> Mark:
    """Return an italic mark."""
    return Mark(MarkType.ITALIC)


def strike() -> Mark:
    """Return a strikethrough mark."""
    return Mark(MarkType.STRIKE)


def underline() -> Mark:
    """Return an underline mark."""
    return Mark(MarkType.UNDERLINE)


def code() -> Mark:
    """Return an inline code mark."""
    return Mark(MarkType.CODE)


def link(href: str) -> Mark:
    """Return a link mark pointing at ``href``."""
    return Mark(MarkType.LINK, href=href)


def document(*children: Node, frontmatter: Optional[dict[str, Any]] = None) -> Node:
    """Create a document root."""
    attrs = {"frontmatter": frontmatter} if frontmatter else {}
    return Node(NodeKind.DOCUMENT, attrs, list(children))


def heading(level: int, *children: Node) -> Node:
    """Create a heading of ``level`` 1-6."""
    return Node(NodeKind.HEADING, {"level": level}, list(children))


def paragraph(*children: Node) -> Node:
    """Create a paragraph of inline children."""
    return Node(NodeKind.PARAGRAPH, children=list(children))


def hard_break() -> Node:
    """Create a hard line break."""
    return Node(NodeKind.HARD_BREAK)


def horizontal_rule() -> Node:
    """Create a thematic break."""
    return Node(NodeKind.HORIZONTAL_RULE)


def blockquote(*children: Node) -> Node:
    """Create a block quote."""
    return Node(NodeKind.BLOCKQUOTE, children=list(children))


def callout(kind: NodeKind | str, *children: Node, title: Optional[str] = None) -> Node:
    """Create a tip/info/note/warning/danger callout."""
    attrs = {"title": title} if title else {}
    return Node(kind, attrs, list(children))


def list_item(*children: Node) -> Node:
    """Create a list item."""
    return Node(NodeKind.LIST_ITEM, children=list(children))


def task_item(checked: bool, *children: Node) -> Node:
    """Create a task list item."""
    return Node(NodeKind.TASK_ITEM, {"checked": checked}, list(children))


def bullet_list(*items: Node) -> Node:
    """Create a bullet list."""
    return Node(NodeKind.BULLET_LIST, children=list(items))


def ordered_list(*items: Node, start: int = 1) -> Node:
    """Create an ordered list numbered from ``start``."""
    return Node(NodeKind.ORDERED_LIST, {"start": start}, list(items))


def task_list(*items: Node) -> Node:
    """Create a task list."""
    return Node(NodeKind.TASK_LIST, children=list(items))


def code_block(content: str, language: str = DEFAULT_CODE_LANGUAGE) -> Node:
    """Create a fenced code block; empty code has no text child."""
    children = [Node(NodeKind.TEXT, text=content)] if content else []
    return Node(NodeKind.CODE_BLOCK, {"language": language}, children)


def code_group(files: Iterable[CodeFile]) -> Node:
    """Create a code group from file records."""
    return Node(NodeKind.CODE_GROUP, {"files": list(files)})


def image(src: str, alt: str = "", **extra: Any) -> Node:
    """Create a block image; ``extra`` may carry ``caption`` or ``width``."""
    return Node(NodeKind.IMAGE, {"src": src, "alt": alt, **extra})


def table(columns: Iterable[TableColumn], rows: Iterable[TableRow], **features: Any) -> Node:
    """Create a table; ``features`` holds pagination and scroll attributes."""
    return Node(NodeKind.TABLE, {"columns": list(columns), "rows": list(rows), **features})


def label(*items: LabelItem) -> Node:
    """Create a label group."""
    return Node(NodeKind.LABEL, {"items": list(items)})


def endpoint(method: str, path: str) -> Node:
    """Create an API endpoint widget."""
    return Node(NodeKind.ENDPOINT, {"method": method, "path": path})
