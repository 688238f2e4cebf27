#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/nodetypes/__init__.py
"""Built-in node types.

Each module contributes a ``DESCRIPTORS`` tuple:

- :mod:`~mdxtree.nodetypes.markdown`: structural kinds, lists, code blocks,
  images and unsupported content
- :mod:`~mdxtree.nodetypes.callouts`: tip, info, note, warning and danger
- :mod:`~mdxtree.nodetypes.layout`: cards, accordions, tabs, columns and the
  right panel
- :mod:`~mdxtree.nodetypes.data`: code groups, tables, endpoints and labels

Examples
--------
Register a custom component next to the built-in ones:

    >>> from mdxtree.nodetypes import build_default_registry
    >>> from mdxtree.nodetypes.base import read_container
    >>> from mdxtree.registry import NodeShape, NodeTypeDescriptor
    >>> registry = build_default_registry()
    >>> registry.register(NodeTypeDescriptor("steps", NodeShape.CONTAINER, tag="Steps", read=read_container))
    >>> registry.for_tag("Steps").kind_name
    'steps'

"""

from __future__ import annotations

from mdxtree.nodetypes import callouts, data, layout, markdown
from mdxtree.registry import NodeTypeDescriptor, NodeTypeRegistry

DEFAULT_DESCRIPTORS: tuple[NodeTypeDescriptor, ...] = (
    *markdown.DESCRIPTORS,
    *callouts.DESCRIPTORS,
    *layout.DESCRIPTORS,
    *data.DESCRIPTORS,
)


def build_default_registry() -> NodeTypeRegistry:
    """Return a new registry holding every built-in node type."""
    return NodeTypeRegistry(DEFAULT_DESCRIPTORS)


__all__ = ["DEFAULT_DESCRIPTORS", "build_default_registry"]
