#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/nodetypes/markdown.py
"""Node types with plain Markdown syntax.

Headings, paragraphs, quotes, rules, lists, fenced code and images are read
by the mistune token conversion in :mod:`mdxtree.parsers.mdx`; only their
component aliases (``<CheckList>``, ``<img>``) have readers here. Every kind
has a writer.

List markers alternate between adjacent lists of the same kind (``-`` then
``*`` for bullets, ``.`` then ``)`` for ordered lists) because a change of
marker is what keeps two neighbouring lists apart when the markup is read
back.

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from mdxtree.ast.nodes import Node, NodeKind
from mdxtree.constants import (
    BULLET_MARKERS,
    DEFAULT_CODE_LANGUAGE,
    LIST_CONTINUATION_INDENT,
    ORDERED_DELIMITERS,
)
from mdxtree.nodetypes.base import open_tag, read_leaf
from mdxtree.parsers.blocks import lines_text, strip_indent
from mdxtree.registry import AttrSpec, ComponentSource, NodeShape, NodeTypeDescriptor
from mdxtree.renderers.inline import format_image
from mdxtree.renderers.mdx import WriteContext, indent_lines, prefix_lines
from mdxtree.utils.escape import escape_line_start, longest_run

if TYPE_CHECKING:
    from mdxtree.parsers.mdx import MdxParser

logger = logging.getLogger(__name__)

_ITEM_KINDS = frozenset({NodeKind.LIST_ITEM.value, NodeKind.TASK_ITEM.value})


def write_heading(node: Node, ctx: WriteContext) -> str:
    hashes = "#" * ctx.get("level")
    content = ctx.inline(mode="heading").strip()
    if content.endswith("#"):
        # A trailing run of hashes would be read as a closing sequence
        content = content[:-1] + "\\#"
    return f"{hashes} {content}" if content else hashes


def write_paragraph(node: Node, ctx: WriteContext) -> Optional[str]:
    content = ctx.inline()
    if not content.strip():
        return None
    # Indentation would turn the paragraph into a code block, and trailing
    # whitespace does not survive a read
    lines = [line.lstrip(" \t") for line in content.rstrip(" \t\n").split("\n")]
    if ctx.options.escape_special:
        lines = [escape_line_start(line) for line in lines]
    return "\n".join(lines)


def write_blockquote(node: Node, ctx: WriteContext) -> str:
    body = ctx.blocks()
    return prefix_lines(body, "> ") if body else ">"


def write_horizontal_rule(node: Node, ctx: WriteContext) -> str:
    # "- ***" and "* ---" would read as a rule instead of a list item
    if ctx.parent is not None and ctx.parent.kind_name in _ITEM_KINDS and ctx.previous is None:
        return "___"
    return "***"


def _item_marker(node: Node, item: Node, ctx: WriteContext, position: int) -> str:
    if node.kind is NodeKind.ORDERED_LIST:
        delimiter = ORDERED_DELIMITERS[ctx.marker_index % len(ORDERED_DELIMITERS)]
        return f"{int(ctx.get('start')) + position}{delimiter} "
    bullet = BULLET_MARKERS[ctx.marker_index % len(BULLET_MARKERS)]
    if node.kind is NodeKind.TASK_LIST:
        checked = bool(item.attrs.get("checked"))
        return f"{bullet} [{'x' if checked else ' '}] "
    return f"{bullet} "


def write_list(node: Node, ctx: WriteContext) -> Optional[str]:
    """Write a bullet, ordered or task list.

    Ordered items are numbered ``start + index`` at write time; any number an
    item carried before is ignored.
    """
    item_kind = NodeKind.TASK_ITEM if node.kind is NodeKind.TASK_LIST else NodeKind.LIST_ITEM
    items: list[str] = []
    for position, (index, item) in enumerate(ctx.iter_children([item_kind])):
        marker = _item_marker(node, item, ctx, position)
        width = LIST_CONTINUATION_INDENT if node.kind is NodeKind.TASK_LIST else len(marker)
        body = ctx.child_blocks(index)
        if not body:
            items.append(marker.rstrip())
            continue
        first, _, rest = body.partition("\n")
        text = marker + first
        if rest:
            text += "\n" + indent_lines(rest, width)
        items.append(text)
    if not items:
        ctx.warn("malformed_composite", f"{node.kind_name} has no items")
        return None
    return "\n".join(items)


def write_code_block(node: Node, ctx: WriteContext) -> str:
    code = "".join(child.text or "" for child in node.children if child.is_text)
    char = ctx.options.code_fence_char
    fence = char * max(ctx.options.code_fence_min, longest_run(code, char) + 1)
    language = str(ctx.get("language") or DEFAULT_CODE_LANGUAGE)
    if not code:
        return f"{fence}{language}\n{fence}"
    return f"{fence}{language}\n{code}\n{fence}"


def write_image(node: Node, ctx: WriteContext) -> str:
    src = str(ctx.get("src"))
    alt = str(ctx.get("alt"))
    caption = ctx.get("caption")
    width = ctx.get("width")
    if width is None:
        return format_image(src, alt, caption)
    # Markdown image syntax has no width
    return open_tag("img", [("src", src), ("alt", alt), ("title", caption), ("width", width)], self_closing=True)


def write_unsupported(node: Node, ctx: WriteContext) -> Optional[str]:
    raw = node.attrs.get("raw")
    if not isinstance(raw, str) or not raw.strip():
        ctx.warn("malformed_composite", "unsupported content has no raw text")
        return None
    return raw


def read_checklist(descriptor: NodeTypeDescriptor, source: ComponentSource, parser: MdxParser) -> Node:
    """Read ``<CheckList><CheckItem variant="do">...</CheckItem></CheckList>`` as a task list."""
    items: list[Node] = []
    for piece in parser.scan_raw_children(source, "CheckItem"):
        attrs = parser.parse_attrs(piece)
        checked = attrs.get("variant") == "do" or attrs.get("checked") is True
        content = lines_text(strip_indent(piece.inner)).strip()
        children = [Node(NodeKind.PARAGRAPH, children=parser.parse_inline(content))] if content else []
        items.append(Node(NodeKind.TASK_ITEM, {"checked": checked}, children))
    return Node(NodeKind.TASK_LIST, children=items)


DESCRIPTORS = (
    NodeTypeDescriptor(
        NodeKind.DOCUMENT,
        NodeShape.CONTAINER,
        attrs=(AttrSpec("frontmatter", dict),),
        parents=frozenset(),
        description="Root of a page",
    ),
    NodeTypeDescriptor(NodeKind.TEXT, NodeShape.INLINE, description="Inline text with marks"),
    NodeTypeDescriptor(
        NodeKind.HARD_BREAK, NodeShape.INLINE, blank_line_after=False, description="Line break inside inline content"
    ),
    NodeTypeDescriptor(
        NodeKind.HEADING,
        NodeShape.CONTAINER,
        attrs=(AttrSpec("level", int, default=1, choices=(1, 2, 3, 4, 5, 6)),),
        write=write_heading,
        description="Section heading, levels 1 to 6",
    ),
    NodeTypeDescriptor(NodeKind.PARAGRAPH, NodeShape.CONTAINER, write=write_paragraph, description="Paragraph"),
    NodeTypeDescriptor(NodeKind.BLOCKQUOTE, NodeShape.CONTAINER, write=write_blockquote, description="Block quote"),
    NodeTypeDescriptor(
        NodeKind.HORIZONTAL_RULE,
        NodeShape.LEAF,
        blank_line_after=False,
        write=write_horizontal_rule,
        description="Thematic break",
    ),
    NodeTypeDescriptor(
        NodeKind.BULLET_LIST,
        NodeShape.CONTAINER,
        children=frozenset({NodeKind.LIST_ITEM.value}),
        write=write_list,
        description="Unordered list",
    ),
    NodeTypeDescriptor(
        NodeKind.ORDERED_LIST,
        NodeShape.CONTAINER,
        attrs=(AttrSpec("start", int, default=1),),
        children=frozenset({NodeKind.LIST_ITEM.value}),
        write=write_list,
        description="Numbered list starting at start",
    ),
    NodeTypeDescriptor(
        NodeKind.TASK_LIST,
        NodeShape.CONTAINER,
        tag_aliases=("CheckList",),
        child_tags=("CheckItem",),
        content="raw",
        children=frozenset({NodeKind.TASK_ITEM.value}),
        read=read_checklist,
        write=write_list,
        description="Checklist of task items",
    ),
    NodeTypeDescriptor(
        NodeKind.LIST_ITEM,
        NodeShape.CONTAINER,
        parents=frozenset({NodeKind.BULLET_LIST.value, NodeKind.ORDERED_LIST.value}),
        description="Item of a bullet or ordered list",
    ),
    NodeTypeDescriptor(
        NodeKind.TASK_ITEM,
        NodeShape.CONTAINER,
        attrs=(AttrSpec("checked", bool, default=False),),
        parents=frozenset({NodeKind.TASK_LIST.value}),
        description="Checkable item of a task list",
    ),
    NodeTypeDescriptor(
        NodeKind.CODE_BLOCK,
        NodeShape.CONTAINER,
        attrs=(AttrSpec("language", default=DEFAULT_CODE_LANGUAGE),),
        write=write_code_block,
        description="Fenced code block",
    ),
    NodeTypeDescriptor(
        NodeKind.IMAGE,
        NodeShape.LEAF,
        attrs=(
            AttrSpec("src", default=""),
            AttrSpec("alt", default=""),
            AttrSpec("caption", sources=("caption", "title"), omit_empty=True),
            AttrSpec("width", type=None),
        ),
        tag="img",
        content="none",
        read=read_leaf,
        write=write_image,
        description="Block image with optional caption and width",
    ),
    NodeTypeDescriptor(
        NodeKind.UNSUPPORTED,
        NodeShape.LEAF,
        attrs=(AttrSpec("raw", default=""),),
        write=write_unsupported,
        description="Markup the parser keeps verbatim",
    ),
)
