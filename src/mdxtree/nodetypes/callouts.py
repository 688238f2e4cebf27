#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/nodetypes/callouts.py
"""Callout node types: tip, info, note, warning and danger.

A callout is written as an admonition block quote::

    > [!WARNING]
    > Back up the database first.

The admonition marker has nowhere to keep a title, so a titled callout is
written as its component tag (``<Warning title="...">``) instead. Both forms
read back to the same node.

"""

from __future__ import annotations

from typing import Optional

from mdxtree.ast.nodes import Node, NodeKind
from mdxtree.nodetypes.base import read_container, wrap_blocks
from mdxtree.registry import AttrSpec, NodeShape, NodeTypeDescriptor
from mdxtree.renderers.mdx import WriteContext, prefix_lines


def write_callout(node: Node, ctx: WriteContext) -> Optional[str]:
    body = ctx.blocks()
    title = ctx.get("title")
    if title:
        return wrap_blocks(str(ctx.descriptor.tag), [("title", str(title))], body)
    marker = f"> [!{node.kind_name.upper()}]"
    return f"{marker}\n{prefix_lines(body, '> ')}" if body else marker


def _callout(kind: NodeKind, tag: str, description: str) -> NodeTypeDescriptor:
    return NodeTypeDescriptor(
        kind,
        NodeShape.CONTAINER,
        attrs=(AttrSpec("title", omit_empty=True),),
        tag=tag,
        read=read_container,
        write=write_callout,
        description=description,
    )


DESCRIPTORS = (
    _callout(NodeKind.TIP, "Tip", "Helpful suggestion"),
    _callout(NodeKind.INFO, "Info", "Background information"),
    _callout(NodeKind.NOTE, "Note", "Side note"),
    _callout(NodeKind.WARNING, "Warning", "Something to be careful about"),
    _callout(NodeKind.DANGER, "Danger", "Risk of data loss or breakage"),
)
