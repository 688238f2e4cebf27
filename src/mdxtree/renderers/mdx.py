#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/renderers/mdx.py
"""MDX-like markup rendering from the document tree.

This module provides :class:`MdxRenderer`, which turns a ``document`` tree
back into markup. Each node is written by the ``write`` function of its
descriptor in the node type registry; the renderer itself only owns the
rules shared by every kind:

- sibling separation (the blank-line policy, with its two exceptions:
  no blank line before a horizontal rule, and none between two adjacent
  lists of the same kind)
- marker alternation for adjacent lists of the same kind, so they stay
  separate lists when read back
- warning handling for subtrees that cannot be written (unknown kinds,
  malformed composite attributes, children in the wrong place)

Nested block content is rendered bottom-up from an explicit stack before the
document itself is written, so a kind's writer only ever reaches one level
down and nesting depth is not limited by recursion.

Ill-formed subtrees never abort a save: the renderer records a
:class:`~mdxtree.exceptions.SerializeWarning`, logs it and leaves the subtree
out, unless ``fail_on_warning`` is set.

"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Optional

import yaml

from mdxtree.ast.nodes import LIST_KINDS, Node, NodeKind, coerce_composite_attrs
from mdxtree.exceptions import RenderingError, SerializeWarning, TreeShapeError, UnknownKindError, WarningCode
from mdxtree.logging_utils import node_path
from mdxtree.options.mdx import MdxRendererOptions
from mdxtree.registry import NodeShape, NodeTypeDescriptor, NodeTypeRegistry
from mdxtree.renderers.base import BaseRenderer
from mdxtree.renderers.inline import InlineMode, InlineWriter
from mdxtree.utils.escape import escape_attribute

logger = logging.getLogger(__name__)


def indent_lines(text: str, width: int) -> str:
    """Indent every non-empty line of ``text`` by ``width`` spaces."""
    pad = " " * width
    return "\n".join(pad + line if line.strip() else "" for line in text.split("\n"))


def prefix_lines(text: str, prefix: str, bare: Optional[str] = None) -> str:
    """Prefix every line of ``text``; empty lines get ``bare`` (default: ``prefix`` stripped)."""
    bare = prefix.rstrip() if bare is None else bare
    return "\n".join(prefix + line if line else bare for line in text.split("\n"))


_INLINE_KINDS = frozenset({NodeKind.TEXT, NodeKind.HARD_BREAK})


def _has_block_children(node: Node) -> bool:
    return any(not (isinstance(child, Node) and child.kind in _INLINE_KINDS) for child in node.children)


def format_attribute(name: str, value: Any) -> str:
    """Format one tag attribute.

    Strings are written quoted with :func:`~mdxtree.utils.escape.escape_attribute`;
    everything else becomes a ``{...}`` JSON expression.

    Examples
    --------
        >>> format_attribute("title", 'He said "hi"')
        'title="He said \\\\"hi\\\\""'
        >>> format_attribute("multiple", True)
        'multiple={true}'

    """
    if isinstance(value, str):
        return f'{name}="{escape_attribute(value)}"'
    return f"{name}={{{json.dumps(value, ensure_ascii=False)}}}"


@dataclass
class WriteContext:
    """What a kind's ``write`` function knows about the node being written.

    Parameters
    ----------
    renderer : MdxRenderer
        The renderer, for recursive block rendering and warnings
    node : Node
        The node to write; composite attributes are already typed records
    descriptor : NodeTypeDescriptor
        The node's descriptor
    path : tuple of int
        Child-index path from the document root
    parent : Node or None
        The node's parent
    previous : Node or None
        The sibling written just before this node, if any
    marker_index : int
        How many preceding siblings in a row have the same list kind

    """

    renderer: MdxRenderer
    node: Node
    descriptor: NodeTypeDescriptor
    path: tuple[int, ...]
    parent: Optional[Node] = None
    previous: Optional[Node] = None
    marker_index: int = 0

    @property
    def options(self) -> MdxRendererOptions:
        """Renderer options."""
        return self.renderer.options

    def get(self, name: str) -> Any:
        """Return an attribute of the node, falling back to its schema default."""
        return self.descriptor.get(self.node, name)

    def blocks(self) -> str:
        """Render this node's children as blocks."""
        return self.renderer.write_blocks(self.node.children, self.node, self.path)

    def child_blocks(self, index: int) -> str:
        """Render the children of this node's ``index``-th child as blocks."""
        child = self.node.children[index]
        return self.renderer.write_blocks(child.children, child, (*self.path, index))

    def inline(self, children: Optional[list[Node]] = None, mode: InlineMode = "text") -> str:
        """Render inline children (this node's by default)."""
        nodes = self.node.children if children is None else children

        def on_invalid(index: int, child: Node) -> None:
            self.warn("invalid_placement", f"{child.kind_name} cannot appear inline", index, child.kind_name)

        return InlineWriter(self.options, mode, on_invalid).write(nodes)

    def attr(self, name: str, value: Any) -> str:
        """Format one tag attribute, see :func:`format_attribute`."""
        return format_attribute(name, value)

    def warn(self, code: WarningCode, message: str, index: Optional[int] = None, kind: Optional[str] = None) -> None:
        """Record a warning about this node, or about its ``index``-th child."""
        path = self.path if index is None else (*self.path, index)
        self.renderer.warn(code, kind or self.node.kind_name, path, message)

    def iter_children(self, kinds: Iterable[NodeKind]) -> Iterator[tuple[int, Node]]:
        """Yield ``(index, child)`` for children of ``kinds``; warn about and skip the rest."""
        allowed = frozenset(kinds)
        for index, child in enumerate(self.node.children):
            if child.kind in allowed:
                yield index, child
            else:
                self.warn(
                    "invalid_placement", f"{child.kind_name} cannot be a child of {self.node.kind_name}", index,
                    child.kind_name,
                )

    @staticmethod
    def indent(text: str, width: int) -> str:
        """Indent every non-empty line of ``text``, see :func:`indent_lines`."""
        return indent_lines(text, width)


class MdxRenderer(BaseRenderer):
    """Render a document tree to MDX-like markup.

    Parameters
    ----------
    options : MdxRendererOptions or None, default = None
        Rendering options
    registry : NodeTypeRegistry or None, default = None
        Node types to render with; the default registry when None

    Attributes
    ----------
    warnings : list of SerializeWarning
        Problems found by the last :meth:`render_to_string` call

    Examples
    --------
        >>> from mdxtree.ast.builder import document, heading, paragraph, text, bold
        >>> doc = document(heading(1, text("Title")), paragraph(text("Hello "), text("world", bold())))
        >>> MdxRenderer().render_to_string(doc)
        '# Title\\n\\nHello **world**'

    """

    def __init__(self, options: MdxRendererOptions | None = None, registry: NodeTypeRegistry | None = None):
        """Initialize the renderer with options and a node type registry."""
        BaseRenderer._validate_options_type(options, MdxRendererOptions, "mdx")
        options = options or MdxRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: MdxRendererOptions = options
        if registry is None:
            from mdxtree.nodetypes import build_default_registry

            registry = build_default_registry()
        self.registry = registry
        self.warnings: list[SerializeWarning] = []
        self._prepared: dict[tuple[int, ...], tuple[str, list[SerializeWarning]]] = {}
        self._buffer: Optional[list[SerializeWarning]] = None

    def render_to_string(self, doc: Node) -> str:
        """Render a document tree to markup.

        Parameters
        ----------
        doc : Node
            ``document`` root

        Returns
        -------
        str
            Markup without a trailing newline

        Raises
        ------
        TreeShapeError
            If ``doc`` is not a ``document`` node
        RenderingError
            If ``fail_on_warning`` is set and a subtree cannot be written

        """
        if not isinstance(doc, Node) or doc.kind is not NodeKind.DOCUMENT:
            kind = doc.kind_name if isinstance(doc, Node) else type(doc).__name__
            raise TreeShapeError(f"Only a document node can be serialized, got {kind!r}", "document")

        self.warnings = []
        try:
            self._prepare(doc)
            body = self.write_blocks(doc.children, doc, ())
        finally:
            self._prepared = {}
            self._buffer = None

        frontmatter = doc.attrs.get("frontmatter")
        if not (self.options.include_frontmatter and frontmatter):
            return body
        if not isinstance(frontmatter, dict):
            self.warn("malformed_composite", "document", (), "frontmatter must be a mapping")
            return body
        try:
            header = self._format_frontmatter(frontmatter)
        except yaml.YAMLError as e:
            self.warn("malformed_composite", "document", (), f"frontmatter cannot be written as YAML: {e}")
            return body
        return f"{header}\n\n{body}" if body else header

    def write_blocks(self, children: list[Node], owner: Node, path: tuple[int, ...]) -> str:
        """Render sibling block nodes and join them with the blank-line policy.

        Parameters
        ----------
        children : list of Node
            Siblings to render
        owner : Node
            Their parent
        path : tuple of int
            Child-index path of ``owner``

        Returns
        -------
        str
            The joined markup of every sibling that could be written

        """
        prepared = self._prepared.get(path)
        if prepared is not None:
            markup, warnings = prepared
            for warning in warnings:
                self._record(warning)
            return markup

        parts: list[str] = []
        previous: Optional[Node] = None
        marker_index = 0
        for index, child in enumerate(children):
            if previous is not None and child.kind in LIST_KINDS and child.kind is previous.kind:
                marker_index += 1
            else:
                marker_index = 0
            markup = self._write_node(child, owner, (*path, index), previous, marker_index)
            if markup is None:
                continue
            if previous is not None:
                parts.append(self._separator(previous, child, owner))
            parts.append(markup)
            previous = child
        return "".join(parts)

    def _prepare(self, doc: Node) -> None:
        """Render the block content of every container, deepest first.

        Results are keyed by path and read by :meth:`write_blocks`, either
        from the parent's writer or, through ``child_blocks``, from the
        grandparent's. Warnings raised while preparing are held back and
        recorded only when the prepared markup is used, so a subtree its
        parent never writes does not report anything.
        """
        order: list[tuple[Node, tuple[int, ...]]] = []
        stack: list[tuple[Node, tuple[int, ...]]] = [(doc, ())]
        while stack:
            node, path = stack.pop()
            if not _has_block_children(node):
                continue
            order.append((node, path))
            stack.extend((child, (*path, index)) for index, child in enumerate(node.children) if isinstance(child, Node))

        # Reversed pre-order visits every node after all of its descendants
        for node, path in reversed(order):
            held: list[SerializeWarning] = []
            outer, self._buffer = self._buffer, held
            try:
                markup = self.write_blocks(node.children, node, path)
            finally:
                self._buffer = outer
            self._prepared[path] = (markup, held)
            # Grandchildren are read only by this node's writer (through child_blocks)
            for index, child in enumerate(node.children):
                if isinstance(child, Node):
                    for inner in range(len(child.children)):
                        self._prepared.pop((*path, index, inner), None)

    def _separator(self, previous: Node, current: Node, owner: Node) -> str:
        if owner.kind in (NodeKind.LIST_ITEM, NodeKind.TASK_ITEM) and current.kind in LIST_KINDS:
            # A nested list follows its item text directly, except an ordered
            # list not starting at 1, which cannot interrupt a paragraph
            if current.kind is NodeKind.ORDERED_LIST and current.attrs.get("start", 1) != 1:
                return "\n\n"
            return "\n"
        if current.kind is NodeKind.HORIZONTAL_RULE:
            return "\n"
        if current.kind in LIST_KINDS and current.kind is previous.kind:
            return "\n"
        return "\n\n" if self.registry.lookup(previous.kind).blank_line_after else "\n"

    def _write_node(
        self, node: Node, parent: Node, path: tuple[int, ...], previous: Optional[Node], marker_index: int
    ) -> Optional[str]:
        kind = node.kind_name if isinstance(node, Node) else type(node).__name__
        if not isinstance(node, Node):
            self.warn("unknown_kind", kind, path, "Child is not a node")
            return None
        try:
            descriptor = self.registry.lookup(node.kind)
        except UnknownKindError:
            self.warn("unknown_kind", kind, path, f"No node type is registered for {kind!r}")
            return None

        if descriptor.shape is NodeShape.INLINE:
            self.warn("invalid_placement", kind, path, f"{kind} cannot appear at block level")
            return None
        problem = self._placement_problem(descriptor, parent)
        if problem:
            self.warn("invalid_placement", kind, path, problem)
            return None
        if descriptor.write is None:
            self.warn("unknown_kind", kind, path, f"{kind} has no markup form")
            return None

        try:
            attrs = coerce_composite_attrs(node.kind, node.attrs)
        except ValueError as e:
            self.warn("malformed_composite", kind, path, str(e))
            return None

        # Writers see typed records without touching the caller's tree
        view = Node(node.kind, attrs, node.children, node.text, node.marks)
        context = WriteContext(self, view, descriptor, path, parent, previous, marker_index)
        return descriptor.write(view, context)

    def _placement_problem(self, descriptor: NodeTypeDescriptor, parent: Node) -> Optional[str]:
        if descriptor.parents is not None and parent.kind_name not in descriptor.parents:
            return f"{descriptor.kind_name} cannot be a child of {parent.kind_name}"
        try:
            parent_descriptor = self.registry.lookup(parent.kind)
        except UnknownKindError:
            return None
        if parent_descriptor.children is not None and descriptor.kind_name not in parent_descriptor.children:
            return f"{parent.kind_name} cannot contain {descriptor.kind_name}"
        return None

    def warn(self, code: WarningCode, kind: str, path: tuple[int, ...], message: str) -> None:
        """Record a serialize warning and log it.

        Raises
        ------
        RenderingError
            If ``fail_on_warning`` is set

        """
        self._record(SerializeWarning(code=code, kind=kind, path=node_path(path), message=message))

    def _record(self, warning: SerializeWarning) -> None:
        if self._buffer is not None:
            self._buffer.append(warning)
            return
        self.warnings.append(warning)
        if self.options.fail_on_warning:
            raise RenderingError(str(warning), warnings=self.warnings)
        logger.warning("Skipping %s at %s: %s", warning.kind, warning.path, warning.message)

    @staticmethod
    def _format_frontmatter(frontmatter: dict[str, Any]) -> str:
        dumped = yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True, default_flow_style=False)
        return f"---\n{dumped.rstrip()}\n---"
