#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/ast/__init__.py
"""Structured document tree.

The tree is what an editor surface manipulates: every node carries a kind, an
attribute mapping and ordered children, and text leaves carry their content
and formatting marks.

The module consists of several components:

- nodes: the node, mark and composite record types
- builder: shorthand constructors
- serialization: the JSON interchange format shared with the editor
- utils: stack-safe traversal helpers

Examples
--------
    >>> from mdxtree.ast import Node, NodeKind
    >>> from mdxtree.ast.builder import document, heading, text
    >>> doc = document(heading(1, text("Title")))
    >>> doc.children[0].kind is NodeKind.HEADING
    True

"""

from mdxtree.ast.nodes import (
    CALLOUT_KINDS,
    COMPOSITE_ATTRIBUTES,
    LIST_KINDS,
    MARK_ORDER,
    CodeFile,
    LabelItem,
    Mark,
    MarkType,
    Node,
    NodeKind,
    TableColumn,
    TableRow,
    coerce_composite_attrs,
    sort_marks,
)
from mdxtree.ast.serialization import dict_to_node, json_to_tree, node_to_dict, tree_to_json, trees_equal
from mdxtree.ast.utils import extract_text, find_kind, find_parent, node_at, walk

__all__ = [
    "CALLOUT_KINDS",
    "COMPOSITE_ATTRIBUTES",
    "LIST_KINDS",
    "MARK_ORDER",
    "CodeFile",
    "LabelItem",
    "Mark",
    "MarkType",
    "Node",
    "NodeKind",
    "TableColumn",
    "TableRow",
    "coerce_composite_attrs",
    "sort_marks",
    "dict_to_node",
    "json_to_tree",
    "node_to_dict",
    "tree_to_json",
    "trees_equal",
    "extract_text",
    "find_kind",
    "find_parent",
    "node_at",
    "walk",
]
