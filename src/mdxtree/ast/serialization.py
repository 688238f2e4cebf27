#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/ast/serialization.py
"""JSON interchange for document trees.

The dictionary shape produced here is the contract with the editor surface:
non-text nodes are ``{"kind", "attrs", "children"}`` and text leaves are
``{"kind": "text", "text", "marks"}``. Composite records are flattened to plain
mappings. Reading also accepts the ProseMirror spellings ``type`` and
``content``, so trees exported by the editor can be loaded directly.

Examples
--------
Serialize a tree to JSON:

    >>> from mdxtree.ast import Node, NodeKind
    >>> from mdxtree.ast.serialization import tree_to_json
    >>> doc = Node(NodeKind.DOCUMENT, children=[
    ...     Node(NodeKind.HEADING, {"level": 1}, [Node(NodeKind.TEXT, text="Title")])
    ... ])
    >>> json_str = tree_to_json(doc, indent=2)

Load it back:

    >>> json_to_tree(json_str).children[0].attrs["level"]
    1

"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from mdxtree.ast.nodes import (
    CodeFile,
    LabelItem,
    Mark,
    Node,
    NodeKind,
    TableColumn,
    TableRow,
    coerce_composite_attrs,
    sort_marks,
)
from mdxtree.exceptions import TreeShapeError
from mdxtree.logging_utils import node_path

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_RECORD_TYPES = (CodeFile, TableColumn, TableRow, LabelItem)


def _plain_value(value: Any) -> Any:
    """Flatten records (and lists of records) into interchange values."""
    if isinstance(value, _RECORD_TYPES):
        return value.to_value()
    if isinstance(value, (list, tuple)):
        return [_plain_value(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _plain_value(item) for key, item in value.items()}
    return value


def _mark_to_dict(mark: Mark) -> dict[str, Any]:
    result: dict[str, Any] = {"type": mark.type.value}
    if mark.href is not None:
        result["attrs"] = {"href": mark.href}
    return result


def _shallow_dict(node: Node) -> dict[str, Any]:
    if node.is_text:
        return {
            "kind": "text",
            "text": node.text or "",
            "marks": [_mark_to_dict(mark) for mark in node.marks],
        }
    return {
        "kind": node.kind_name,
        "attrs": {name: _plain_value(value) for name, value in node.attrs.items()},
        "children": [],
    }


def node_to_dict(node: Node) -> dict[str, Any]:
    """Convert a node and its subtree to the interchange dictionary.

    Parameters
    ----------
    node : Node
        Root of the subtree to convert

    Returns
    -------
    dict
        Interchange representation

    Examples
    --------
        >>> node_to_dict(Node(NodeKind.TEXT, text="Hello"))
        {'kind': 'text', 'text': 'Hello', 'marks': []}

    """
    root = _shallow_dict(node)
    stack = [(node, root)]
    while stack:
        current, out = stack.pop()
        for child in current.children:
            child_out = _shallow_dict(child)
            out.setdefault("children", []).append(child_out)
            stack.append((child, child_out))
    return root


def trees_equal(left: Node, right: Node) -> bool:
    """Return whether two trees have the same interchange form.

    Equivalent to ``node_to_dict(left) == node_to_dict(right)`` but compares
    node by node from an explicit stack, so it works at any depth.
    """
    stack = [(left, right)]
    while stack:
        first, second = stack.pop()
        if len(first.children) != len(second.children) or _shallow_dict(first) != _shallow_dict(second):
            return False
        stack.extend(zip(first.children, second.children))
    return True


def _mark_from_dict(data: Any, path: str) -> Mark:
    if isinstance(data, str):
        data = {"type": data}
    if not isinstance(data, Mapping) or "type" not in data:
        raise TreeShapeError("Mark must be an object with a 'type' field", path)
    attrs = data.get("attrs") or {}
    try:
        return Mark(data["type"], href=attrs.get("href") if isinstance(attrs, Mapping) else None)
    except ValueError as e:
        raise TreeShapeError(f"Unknown mark type: {data['type']!r}", path) from e


def _shallow_node(data: Any, path: str) -> Node:
    if not isinstance(data, Mapping):
        raise TreeShapeError(f"Node must be an object, got {type(data).__name__}", path)
    kind = data.get("kind", data.get("type"))
    if not kind:
        raise TreeShapeError("Node is missing its 'kind' field", path)

    if kind == NodeKind.TEXT.value:
        text = data.get("text", "")
        if not isinstance(text, str):
            raise TreeShapeError("Text node 'text' must be a string", path)
        marks = [_mark_from_dict(mark, path) for mark in data.get("marks") or []]
        return Node(NodeKind.TEXT, text=text, marks=sort_marks(marks))

    attrs = data.get("attrs") or {}
    if not isinstance(attrs, Mapping):
        raise TreeShapeError("Node 'attrs' must be an object", path)
    try:
        attrs = coerce_composite_attrs(kind, attrs)
    except ValueError as e:
        raise TreeShapeError(str(e), path) from e
    node = Node(kind, attrs=attrs)
    if not isinstance(node.kind, NodeKind):
        logger.debug("Loaded node of unregistered kind %r at %s", kind, path)
    return node


def dict_to_node(data: Mapping[str, Any]) -> Node:
    """Build a node tree from its interchange dictionary.

    Parameters
    ----------
    data : Mapping
        Interchange representation, using either ``kind``/``children`` or the
        ProseMirror spellings ``type``/``content``

    Returns
    -------
    Node
        Reconstructed tree

    Raises
    ------
    TreeShapeError
        If any node is not a mapping, lacks a kind, or carries malformed
        marks or composite attributes

    """
    root = _shallow_node(data, node_path([]))
    stack: list[tuple[Mapping[str, Any], Node, tuple[int, ...]]] = [(data, root, ())]
    while stack:
        current, node, indices = stack.pop()
        children = current.get("children", current.get("content")) or []
        if not isinstance(children, list):
            raise TreeShapeError("Node 'children' must be a list", node_path(list(indices)))
        for index, child_data in enumerate(children):
            child_indices = (*indices, index)
            child = _shallow_node(child_data, node_path(list(child_indices)))
            node.children.append(child)
            stack.append((child_data, child, child_indices))
    return root


def tree_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize a tree to a JSON string with a schema version.

    Parameters
    ----------
    node : Node
        Root of the tree
    indent : int or None, default = None
        Number of spaces for indentation (None for compact output)

    Returns
    -------
    str
        JSON text of the form ``{"schema_version": 1, "kind": ..., ...}``

    """
    return json.dumps({"schema_version": SCHEMA_VERSION, **node_to_dict(node)}, indent=indent, ensure_ascii=False)


def json_to_tree(json_str: str) -> Node:
    """Load a tree from JSON produced by :func:`tree_to_json` or the editor.

    Raises
    ------
    TreeShapeError
        If the JSON is malformed, describes a newer schema, or is not a tree

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise TreeShapeError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise TreeShapeError("Tree JSON must be an object")

    version = data.pop("schema_version", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise TreeShapeError(f"Unsupported schema version: {version}")
    return dict_to_node(data)
