#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/ast/utils.py
"""Traversal helpers for document trees.

All helpers walk with an explicit stack, so arbitrarily deep trees never hit
the interpreter's recursion limit.

"""

from __future__ import annotations

from typing import Iterator, Optional, Union

from mdxtree.ast.nodes import Node, NodeKind


def walk(root: Node) -> Iterator[tuple[tuple[int, ...], Node]]:
    """Yield ``(indices, node)`` pairs in document order, root first.

    Parameters
    ----------
    root : Node
        Tree to walk

    Yields
    ------
    tuple of (tuple of int, Node)
        Child-index path from ``root`` and the node at that path

    """
    stack: list[tuple[tuple[int, ...], Node]] = [((), root)]
    while stack:
        indices, node = stack.pop()
        yield indices, node
        for index in range(len(node.children) - 1, -1, -1):
            stack.append(((*indices, index), node.children[index]))


def find_parent(root: Node, target: Node) -> Optional[tuple[Node, int]]:
    """Locate the parent of ``target`` by identity.

    Returns
    -------
    tuple of (Node, int) or None
        The parent node and the index of ``target`` among its children, or
        None if ``target`` is the root or not in the tree

    """
    for _, node in walk(root):
        for index, child in enumerate(node.children):
            if child is target:
                return node, index
    return None


def node_at(root: Node, indices: tuple[int, ...] | list[int]) -> Node:
    """Return the node at a child-index path.

    Raises
    ------
    IndexError
        If the path leaves the tree

    """
    node = root
    for index in indices:
        node = node.children[index]
    return node


def extract_text(node_or_nodes: Union[Node, list[Node]], joiner: str = "") -> str:
    """Concatenate the text leaves of one node or a list of nodes."""
    nodes = node_or_nodes if isinstance(node_or_nodes, list) else [node_or_nodes]
    return joiner.join(node.plain_text() for node in nodes)


def find_kind(root: Node, kind: NodeKind) -> list[Node]:
    """Return every node of ``kind`` in document order."""
    return [node for _, node in walk(root) if node.kind is kind]
