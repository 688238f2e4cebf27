#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/nodetypes/layout.py
"""Layout container node types.

Cards, accordions, tabs, columns and the right panel hold ordinary block
content. Accordion tabs, tabs and columns are written indented one step
inside their container, with their own content indented a second step::

    <Tabs>
      <Tab title="Python">

        pip install mdxtree

      </Tab>

    </Tabs>

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from mdxtree.ast.nodes import Node, NodeKind
from mdxtree.constants import (
    COMPONENT_CHILD_INDENT,
    COMPONENT_CONTENT_INDENT,
    DEFAULT_ACCORDION_HEADER,
    DEFAULT_CARD_ICON_ALIGN,
    DEFAULT_COLUMN_COUNT,
    DEFAULT_TAB_LABEL,
)
from mdxtree.nodetypes.base import open_tag, read_container, wrap_blocks
from mdxtree.registry import AttrSpec, ComponentSource, NodeShape, NodeTypeDescriptor
from mdxtree.renderers.mdx import WriteContext, indent_lines

if TYPE_CHECKING:
    from mdxtree.parsers.mdx import MdxParser


def write_card(node: Node, ctx: WriteContext) -> str:
    attrs: list[tuple[str, Any]] = []
    for name in ("title", "icon"):
        if ctx.get(name):
            attrs.append((name, str(ctx.get(name))))
    if ctx.get("iconAlign") != DEFAULT_CARD_ICON_ALIGN:
        attrs.append(("iconAlign", str(ctx.get("iconAlign"))))
    if ctx.get("href"):
        attrs.append(("href", str(ctx.get("href"))))
    return wrap_blocks("Card", attrs, ctx.blocks())


def _panel_attrs(child: Node, ctx: WriteContext, kind: NodeKind, label_attr: str) -> list[tuple[str, Any]]:
    descriptor = ctx.renderer.registry.lookup(kind)
    attrs: list[tuple[str, Any]] = [("title", str(descriptor.get(child, label_attr)))]
    icon = child.attrs.get("icon")
    if icon:
        attrs.append(("icon", str(icon)))
    return attrs


def _write_panels(ctx: WriteContext, kind: NodeKind, tag: str, label_attr: str) -> str:
    """Write accordion tabs or tabs, each followed by a blank line."""
    pad = " " * COMPONENT_CHILD_INDENT
    parts: list[str] = []
    for index, child in ctx.iter_children([kind]):
        opening = pad + open_tag(tag, _panel_attrs(child, ctx, kind, label_attr))
        body = ctx.child_blocks(index)
        if body:
            parts.append(f"{opening}\n\n{indent_lines(body, COMPONENT_CONTENT_INDENT)}\n\n{pad}</{tag}>\n")
        else:
            parts.append(f"{opening}\n{pad}</{tag}>\n")
    return "\n".join(parts)


def write_accordion(node: Node, ctx: WriteContext) -> str:
    """Write an accordion; ``multiple`` is always spelled out."""
    opening = open_tag("Accordion", [("multiple", bool(ctx.get("multiple")))])
    panels = _write_panels(ctx, NodeKind.ACCORDION_TAB, "AccordionTab", "header")
    return f"{opening}\n{panels}\n</Accordion>" if panels else f"{opening}\n</Accordion>"


def write_tabs(node: Node, ctx: WriteContext) -> str:
    panels = _write_panels(ctx, NodeKind.TAB, "Tab", "label")
    return f"<Tabs>\n{panels}\n</Tabs>" if panels else "<Tabs>\n</Tabs>"


def read_columns(descriptor: NodeTypeDescriptor, source: ComponentSource, parser: MdxParser) -> Node:
    """Read a column group; the column count defaults to the number of columns."""
    node = read_container(descriptor, source, parser)
    if "columns" not in source.attrs:
        node.attrs["columns"] = len(node.children) or DEFAULT_COLUMN_COUNT
    return node


def write_columns(node: Node, ctx: WriteContext) -> str:
    count = node.attrs.get("columns") or len(node.children) or DEFAULT_COLUMN_COUNT
    pad = " " * COMPONENT_CHILD_INDENT
    parts = [open_tag("Columns", [("columns", int(count))])]
    for index, _column in ctx.iter_children([NodeKind.COLUMN]):
        body = ctx.child_blocks(index)
        parts.append(f"{pad}<Column>")
        if body:
            parts.append(indent_lines(body, COMPONENT_CONTENT_INDENT))
        parts.append(f"{pad}</Column>")
    parts.append("</Columns>")
    return "\n".join(parts)


def write_right_panel(node: Node, ctx: WriteContext) -> Optional[str]:
    return wrap_blocks("RightPanel", [], ctx.blocks(), indent=" " * COMPONENT_CHILD_INDENT)


DESCRIPTORS = (
    NodeTypeDescriptor(
        NodeKind.CARD,
        NodeShape.CONTAINER,
        attrs=(
            AttrSpec("title", default=""),
            AttrSpec("icon", default=""),
            AttrSpec("iconAlign", default=DEFAULT_CARD_ICON_ALIGN),
            AttrSpec("href", omit_empty=True),
        ),
        tag="Card",
        read=read_container,
        write=write_card,
        description="Card with optional icon and link",
    ),
    NodeTypeDescriptor(
        NodeKind.ACCORDION,
        NodeShape.CONTAINER,
        attrs=(AttrSpec("multiple", bool, default=True),),
        tag="Accordion",
        children=frozenset({NodeKind.ACCORDION_TAB.value}),
        read=read_container,
        write=write_accordion,
        description="Collapsible sections",
    ),
    NodeTypeDescriptor(
        NodeKind.ACCORDION_TAB,
        NodeShape.CONTAINER,
        attrs=(
            AttrSpec("header", sources=("header", "title"), default=DEFAULT_ACCORDION_HEADER),
            AttrSpec("icon", omit_empty=True),
        ),
        tag="AccordionTab",
        parents=frozenset({NodeKind.ACCORDION.value}),
        read=read_container,
        description="One collapsible section of an accordion",
    ),
    NodeTypeDescriptor(
        NodeKind.TABS,
        NodeShape.CONTAINER,
        tag="Tabs",
        children=frozenset({NodeKind.TAB.value}),
        read=read_container,
        write=write_tabs,
        description="Tabbed panels",
    ),
    NodeTypeDescriptor(
        NodeKind.TAB,
        NodeShape.CONTAINER,
        attrs=(
            AttrSpec("label", sources=("label", "title"), default=DEFAULT_TAB_LABEL),
            AttrSpec("icon", omit_empty=True),
        ),
        tag="Tab",
        parents=frozenset({NodeKind.TABS.value}),
        read=read_container,
        description="One panel of a tab set",
    ),
    NodeTypeDescriptor(
        NodeKind.COLUMNS,
        NodeShape.CONTAINER,
        attrs=(AttrSpec("columns", int, default=DEFAULT_COLUMN_COUNT),),
        tag="Columns",
        tag_aliases=("ColumnGroup",),
        children=frozenset({NodeKind.COLUMN.value}),
        read=read_columns,
        write=write_columns,
        description="Side-by-side columns",
    ),
    NodeTypeDescriptor(
        NodeKind.COLUMN,
        NodeShape.CONTAINER,
        tag="Column",
        parents=frozenset({NodeKind.COLUMNS.value}),
        read=read_container,
        description="One column of a column group",
    ),
    NodeTypeDescriptor(
        NodeKind.RIGHT_PANEL,
        NodeShape.CONTAINER,
        tag="RightPanel",
        read=read_container,
        write=write_right_panel,
        description="Content shown beside the page body",
    ),
)
