#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/nodetypes/base.py
"""Readers and tag helpers shared by the node type modules."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Optional

from mdxtree.ast.nodes import Node
from mdxtree.registry import ComponentSource, NodeTypeDescriptor
from mdxtree.renderers.mdx import format_attribute

if TYPE_CHECKING:
    from mdxtree.parsers.mdx import MdxParser


def read_container(descriptor: NodeTypeDescriptor, source: ComponentSource, parser: MdxParser) -> Node:
    """Read a component whose content is parsed blocks."""
    attrs = descriptor.resolve_attrs(source.attrs, source.offset)
    return Node(descriptor.kind, attrs, list(source.children))


def read_leaf(descriptor: NodeTypeDescriptor, source: ComponentSource, parser: MdxParser) -> Node:
    """Read a component that is fully described by its attributes."""
    return Node(descriptor.kind, descriptor.resolve_attrs(source.attrs, source.offset))


def open_tag(tag: str, attrs: Iterable[tuple[str, Any]] = (), self_closing: bool = False) -> str:
    """Format an opening tag.

    Parameters
    ----------
    tag : str
        Component name
    attrs : iterable of (str, Any)
        Attributes in the order they are written; None values are skipped
    self_closing : bool, default = False
        Close the tag with ``/>``

    Examples
    --------
        >>> open_tag("Card", [("title", "Setup"), ("href", None)], self_closing=True)
        '<Card title="Setup" />'

    """
    parts = [tag] + [format_attribute(name, value) for name, value in attrs if value is not None]
    return "<" + " ".join(parts) + (" />" if self_closing else ">")


def wrap_blocks(tag: str, attrs: Iterable[tuple[str, Any]], body: str, indent: Optional[str] = None) -> str:
    """Write a container component around already rendered blocks.

    An empty body gives a self-closing tag. Otherwise the body sits between
    the tags, separated by blank lines, or indented by ``indent`` with no
    blank lines when ``indent`` is given.
    """
    attrs = list(attrs)
    if not body:
        return open_tag(tag, attrs, self_closing=True)
    if indent is not None:
        body = "\n".join(indent + line if line else "" for line in body.split("\n"))
        return f"{open_tag(tag, attrs)}\n{body}\n</{tag}>"
    return f"{open_tag(tag, attrs)}\n\n{body}\n\n</{tag}>"
