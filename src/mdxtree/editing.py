#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/editing.py
"""Tree edits made on behalf of an editor surface.

The serializer relies on a few invariants that an editor can break while
mutating a tree: a label group always has at least one item, an ordered list
stores only its ``start`` and never per-item numbers, and marks are a set.
These helpers make those edits in the form the serializer expects.

Examples
--------
Remove the only chip of a label group:

    >>> from mdxtree.ast.builder import document, label
    >>> from mdxtree.ast.nodes import LabelItem
    >>> doc = document(label(LabelItem("label-1", "Beta")))
    >>> remove_label_item(doc, doc.children[0], "label-1")
    True
    >>> doc.children
    []

"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from mdxtree.ast.nodes import LabelItem, Mark, Node, NodeKind, coerce_composite_attrs, default_label_id
from mdxtree.ast.utils import find_parent, walk
from mdxtree.constants import DEFAULT_LABEL_COLOR, DEFAULT_LABEL_SIZE, LABEL_SIZES
from mdxtree.exceptions import TreeShapeError

logger = logging.getLogger(__name__)


def _require_kind(node: Node, kind: NodeKind) -> None:
    if node.kind is not kind:
        raise TreeShapeError(f"Expected a {kind.value} node, got {node.kind_name!r}")


def _label_items(node: Node) -> list[LabelItem]:
    try:
        return list(coerce_composite_attrs(node.kind, node.attrs).get("items", []))
    except ValueError as e:
        raise TreeShapeError(f"Label group has malformed items: {e}") from e


def add_label_item(
    node: Node,
    text: str,
    color: str = DEFAULT_LABEL_COLOR,
    size: str = DEFAULT_LABEL_SIZE,
    icon: Optional[str] = None,
    item_id: Optional[str] = None,
) -> LabelItem:
    """Append a chip to a label group.

    The items list is replaced as a whole, never mutated in place.

    Parameters
    ----------
    node : Node
        A ``label`` node
    text : str
        Chip text
    color : str, default = DEFAULT_LABEL_COLOR
        CSS color
    size : str, default = "md"
        One of ``sm``, ``md`` or ``lg``
    icon : str, optional
        Icon name
    item_id : str, optional
        Identifier; the first unused ``label-N`` when omitted

    Returns
    -------
    LabelItem
        The new item

    Raises
    ------
    TreeShapeError
        If ``node`` is not a label group
    ValueError
        If ``size`` or ``item_id`` is invalid

    """
    _require_kind(node, NodeKind.LABEL)
    if size not in LABEL_SIZES:
        raise ValueError(f"size must be one of {list(LABEL_SIZES)}, got {size!r}")
    items = _label_items(node)
    used = {item.id for item in items}
    if item_id is None:
        index = len(items)
        while default_label_id(index) in used:
            index += 1
        item_id = default_label_id(index)
    elif item_id in used:
        raise ValueError(f"Label item id already in use: {item_id!r}")

    item = LabelItem(id=item_id, text=text, color=color, size=size, icon=icon)
    node.attrs["items"] = [*items, item]
    return item


def remove_label_item(root: Node, node: Node, item_id: str) -> bool:
    """Remove a chip from a label group.

    Removing the last chip removes the whole ``label`` node from its parent,
    since an empty group cannot be saved.

    Parameters
    ----------
    root : Node
        Tree containing ``node``
    node : Node
        A ``label`` node
    item_id : str
        Identifier of the chip to remove

    Returns
    -------
    bool
        True if the group node itself was removed

    Raises
    ------
    TreeShapeError
        If ``node`` is not a label group, or is not inside ``root``
    KeyError
        If the group has no chip with ``item_id``

    """
    _require_kind(node, NodeKind.LABEL)
    items = _label_items(node)
    remaining = [item for item in items if item.id != item_id]
    if len(remaining) == len(items):
        raise KeyError(item_id)
    if remaining:
        node.attrs["items"] = remaining
        return False

    located = find_parent(root, node)
    if located is None:
        raise TreeShapeError("Label group is not part of the tree")
    parent, index = located
    del parent.children[index]
    logger.debug("Removed empty label group from %s", parent.kind_name)
    return True


def set_list_start(node: Node, start: int) -> None:
    """Renumber an ordered list from ``start``.

    Item numbers are derived at write time, so only ``start`` changes.

    Raises
    ------
    TreeShapeError
        If ``node`` is not an ordered list
    ValueError
        If ``start`` is negative or not an integer

    """
    _require_kind(node, NodeKind.ORDERED_LIST)
    if isinstance(start, bool) or not isinstance(start, int) or start < 0:
        raise ValueError(f"List start must be a non-negative integer, got {start!r}")
    node.attrs["start"] = start


def text_leaves(nodes: Union[Node, Iterable[Node]]) -> list[Node]:
    """Return the text leaves of one node or a selection of nodes, in order."""
    roots = [nodes] if isinstance(nodes, Node) else list(nodes)
    leaves: list[Node] = []
    for root in roots:
        leaves.extend(node for _, node in walk(root) if node.is_text)
    return leaves


def toggle_mark(nodes: Union[Node, Iterable[Node]], mark: Mark) -> bool:
    """Toggle a mark over a selection, the way an editor toolbar does.

    If every selected text leaf already carries the mark type it is removed
    from all of them; otherwise it is applied to all of them.

    Returns
    -------
    bool
        True if the mark is now applied

    """
    leaves = text_leaves(nodes)
    if leaves and all(leaf.has_mark(mark.type) for leaf in leaves):
        for leaf in leaves:
            leaf.remove_mark(mark.type)
        return False
    for leaf in leaves:
        if mark.href is not None:
            # A new link target replaces the old one
            leaf.remove_mark(mark.type)
        leaf.add_mark(mark)
    return bool(leaves)


__all__ = [
    "add_label_item",
    "find_parent",
    "remove_label_item",
    "set_list_start",
    "text_leaves",
    "toggle_mark",
    "walk",
]
