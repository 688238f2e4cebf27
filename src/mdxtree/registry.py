#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/registry.py
"""Node type registry for the mdxtree transcoder.

The registry is the single source of truth for what each node kind means. A
:class:`NodeTypeDescriptor` declares, for one kind:

- its tree shape (leaf, container or inline)
- its attribute schema (:class:`AttrSpec` entries with types and defaults)
- its component tag name and accepted aliases, if it has a tag grammar
- how the content between its tags is read (parsed blocks, raw text, or none)
- where it may appear (allowed parent kinds) and what it may contain
- whether a blank line follows it among its siblings
- the functions that read it from markup and write it back

The parser and the renderer dispatch through the registry and never switch on
kind names themselves, so a new kind is supported by registering a descriptor.

Examples
--------
Look up a descriptor:

    >>> from mdxtree.nodetypes import build_default_registry
    >>> registry = build_default_registry()
    >>> registry.lookup("card").tag
    'Card'
    >>> registry.for_tag("ColumnGroup").kind_name
    'columns'

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterator, Literal, Optional, Sequence, Union

from mdxtree.ast.nodes import Node, NodeKind
from mdxtree.exceptions import SchemaViolationError, UnknownKindError

if TYPE_CHECKING:
    from mdxtree.parsers.blocks import Line
    from mdxtree.parsers.mdx import MdxParser
    from mdxtree.renderers.mdx import WriteContext

logger = logging.getLogger(__name__)

ContentMode = Literal["blocks", "raw", "none"]


class NodeShape(str, Enum):
    """Tree shape of a node kind."""

    LEAF = "leaf"
    CONTAINER = "container"
    INLINE = "inline"


class _Omit:
    """Sentinel default: leave the attribute out when the source has no value."""

    def __repr__(self) -> str:
        return "OMIT"


OMIT: Any = _Omit()

AttrType = Union[type, tuple[type, ...], None]


@dataclass(frozen=True)
class AttrSpec:
    """Schema entry for one node attribute.

    Parameters
    ----------
    name : str
        Attribute name on the node
    type : type, tuple of type or None
        Expected Python type (``str``, ``int``, ``bool``, ``list``); values are
        coerced to it when read from markup. None accepts any value as-is.
    default : Any, default = OMIT
        Value used when the source does not give one. ``OMIT`` leaves the
        attribute out entirely.
    sources : tuple of str, default = ()
        Markup attribute names to read the value from, in order of preference.
        Defaults to ``(name,)``.
    choices : tuple, optional
        Allowed values, checked after coercion
    required : bool, default = False
        Whether reading fails when the source has no value
    omit_empty : bool, default = False
        Treat an empty string from the source as absent

    """

    name: str
    type: AttrType = str
    default: Any = OMIT
    sources: tuple[str, ...] = ()
    choices: Optional[tuple[Any, ...]] = None
    required: bool = False
    omit_empty: bool = False

    @property
    def source_names(self) -> tuple[str, ...]:
        """Markup attribute names this entry reads from."""
        return self.sources or (self.name,)


@dataclass
class ComponentSource:
    """A component tag as found in markup, handed to a descriptor's reader.

    Parameters
    ----------
    tag : str
        Tag name as written (may be an alias)
    attrs : dict
        Attribute values decoded from the opening tag
    children : list of Node
        Parsed block children (only for ``content="blocks"``)
    inner : list of Line
        Undedented source lines between the tags (only for ``content="raw"``)
    raw : str
        Full source text of the component, tags included
    offset : int
        Absolute offset of the opening ``<``
    self_closing : bool
        Whether the tag was written as ``<Tag ... />``

    """

    tag: str
    attrs: dict[str, Any]
    children: list[Node] = field(default_factory=list)
    inner: list["Line"] = field(default_factory=list)
    raw: str = ""
    offset: int = 0
    self_closing: bool = False


ReadFn = Callable[["NodeTypeDescriptor", ComponentSource, "MdxParser"], Node]
WriteFn = Callable[[Node, "WriteContext"], Optional[str]]


def _coerce(kind: str, spec: AttrSpec, value: Any, offset: int) -> Any:
    expected = spec.type
    if expected is None or (isinstance(expected, type) and isinstance(value, expected) and not (
        expected is int and isinstance(value, bool)
    )):
        return value
    if expected is str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
    elif expected is bool:
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
    elif expected is int:
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                pass
        elif isinstance(value, float) and value.is_integer():
            return int(value)
    elif isinstance(expected, tuple) and isinstance(value, expected):
        return value
    raise SchemaViolationError(
        kind, f"attribute {spec.name!r} expects {getattr(expected, '__name__', expected)}, got {value!r}", offset
    )


@dataclass(frozen=True)
class NodeTypeDescriptor:
    """Everything the transcoder knows about one node kind.

    Parameters
    ----------
    kind : NodeKind or str
        The kind described
    shape : NodeShape
        Leaf, container or inline
    attrs : tuple of AttrSpec, default = ()
        Attribute schema
    tag : str, optional
        Canonical component tag written by the renderer
    tag_aliases : tuple of str, default = ()
        Further tags the parser accepts for this kind
    child_tags : tuple of str, default = ()
        Tags that only appear inside this component and are read by its reader
        (for example ``Code`` inside ``CodeGroup``)
    content : {"blocks", "raw", "none"}, default = "blocks"
        How the text between the tags is read
    parents : frozenset of str, optional
        Kinds this kind may be a direct child of; None means anywhere
    children : frozenset of str, optional
        Kinds this kind may directly contain; None means any block
    blank_line_after : bool, default = True
        Whether a blank line separates this node from its next sibling
    read : callable, optional
        ``read(descriptor, source, parser) -> Node`` for tag grammars
    write : callable, optional
        ``write(node, context) -> str or None``
    description : str, default = ""
        One-line description for listings

    """

    kind: Union[NodeKind, str]
    shape: NodeShape
    attrs: tuple[AttrSpec, ...] = ()
    tag: Optional[str] = None
    tag_aliases: tuple[str, ...] = ()
    child_tags: tuple[str, ...] = ()
    content: ContentMode = "blocks"
    parents: Optional[frozenset[str]] = None
    children: Optional[frozenset[str]] = None
    blank_line_after: bool = True
    read: Optional[ReadFn] = None
    write: Optional[WriteFn] = None
    description: str = ""

    @property
    def kind_name(self) -> str:
        """The interchange spelling of the kind."""
        return str(self.kind)

    @property
    def tags(self) -> tuple[str, ...]:
        """All tags the parser maps to this kind."""
        return ((self.tag,) if self.tag else ()) + self.tag_aliases

    def spec(self, name: str) -> AttrSpec:
        """Return the schema entry for attribute ``name``.

        Raises
        ------
        KeyError
            If the kind declares no such attribute

        """
        for spec in self.attrs:
            if spec.name == name:
                return spec
        raise KeyError(f"{self.kind_name} has no attribute {name!r}")

    def get(self, node: Node, name: str) -> Any:
        """Return ``node.attrs[name]``, falling back to the schema default."""
        value = node.attrs.get(name)
        if value is None:
            default = self.spec(name).default
            return None if default is OMIT else default
        return value

    def resolve_attrs(self, raw: dict[str, Any], offset: int = 0) -> dict[str, Any]:
        """Build node attributes from decoded markup attributes.

        Each schema entry takes the first of its source names present in
        ``raw``, coerces it to the declared type, checks choices, and falls
        back to the default when absent.

        Parameters
        ----------
        raw : dict
            Attribute values from the opening tag
        offset : int, default = 0
            Source offset used in error reports

        Returns
        -------
        dict
            Node attributes in schema order

        Raises
        ------
        SchemaViolationError
            If a required attribute is missing, or a value has the wrong type
            or is not among the allowed choices

        """
        resolved: dict[str, Any] = {}
        for spec in self.attrs:
            value = next((raw[name] for name in spec.source_names if name in raw), None)
            if spec.omit_empty and value == "":
                value = None
            if value is None:
                if spec.required:
                    raise SchemaViolationError(self.kind_name, f"missing required attribute {spec.name!r}", offset)
                if spec.default is not OMIT:
                    resolved[spec.name] = list(spec.default) if isinstance(spec.default, tuple) else spec.default
                continue
            value = _coerce(self.kind_name, spec, value, offset)
            if spec.choices is not None and value not in spec.choices:
                message = f"attribute {spec.name!r} must be one of {list(spec.choices)}, got {value!r}"
                raise SchemaViolationError(self.kind_name, message, offset)
            resolved[spec.name] = value
        return resolved


class NodeTypeRegistry:
    """Registry mapping node kinds and component tags to descriptors.

    Unlike a process-wide singleton, each registry is an ordinary object: the
    transcoder builds one per configuration and never mutates it while parsing
    or rendering, so independent documents can be processed concurrently.

    Parameters
    ----------
    descriptors : sequence of NodeTypeDescriptor, optional
        Descriptors to register up front

    """

    def __init__(self, descriptors: Sequence[NodeTypeDescriptor] = ()):
        """Initialize the registry with optional descriptors."""
        self._by_kind: dict[str, NodeTypeDescriptor] = {}
        self._by_tag: dict[str, NodeTypeDescriptor] = {}
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: NodeTypeDescriptor, replace: bool = False) -> None:
        """Register a descriptor.

        Parameters
        ----------
        descriptor : NodeTypeDescriptor
            Descriptor to add
        replace : bool, default = False
            Allow replacing an existing descriptor for the same kind or tag

        Raises
        ------
        ValueError
            If the kind or one of its tags is already registered and
            ``replace`` is False

        """
        kind = descriptor.kind_name
        if kind in self._by_kind and not replace:
            raise ValueError(f"Node kind already registered: {kind!r}")
        for tag in descriptor.tags:
            owner = self._by_tag.get(tag)
            if owner is not None and owner.kind_name != kind and not replace:
                raise ValueError(f"Tag <{tag}> already registered for {owner.kind_name!r}")

        previous = self._by_kind.get(kind)
        if previous is not None:
            for tag in previous.tags:
                self._by_tag.pop(tag, None)
        self._by_kind[kind] = descriptor
        for tag in descriptor.tags:
            self._by_tag[tag] = descriptor
        logger.debug("Registered node kind %s (tags: %s)", kind, ", ".join(descriptor.tags) or "-")

    def unregister(self, kind: NodeKind | str) -> bool:
        """Remove a kind and its tags; return True if it was registered."""
        descriptor = self._by_kind.pop(str(kind), None)
        if descriptor is None:
            return False
        for tag in descriptor.tags:
            self._by_tag.pop(tag, None)
        return True

    def lookup(self, kind: NodeKind | str) -> NodeTypeDescriptor:
        """Return the descriptor for ``kind``.

        Raises
        ------
        UnknownKindError
            If no descriptor is registered for the kind

        """
        try:
            return self._by_kind[str(kind)]
        except KeyError:
            raise UnknownKindError(str(kind)) from None

    def for_tag(self, tag: str) -> Optional[NodeTypeDescriptor]:
        """Return the descriptor reading component ``tag``, or None."""
        return self._by_tag.get(tag)

    def is_raw_tag(self, tag: str) -> bool:
        """Whether the content of ``tag`` is raw text rather than markup."""
        descriptor = self._by_tag.get(tag)
        if descriptor is not None:
            return descriptor.content != "blocks"
        return any(tag in d.child_tags for d in self._by_kind.values())

    def kinds(self) -> list[str]:
        """Return the registered kind names in registration order."""
        return list(self._by_kind)

    def copy(self) -> NodeTypeRegistry:
        """Return an independent registry with the same descriptors."""
        return NodeTypeRegistry(list(self._by_kind.values()))

    def __contains__(self, kind: object) -> bool:
        """Whether a descriptor is registered for ``kind``."""
        return str(kind) in self._by_kind

    def __iter__(self) -> Iterator[NodeTypeDescriptor]:
        """Iterate descriptors in registration order."""
        return iter(list(self._by_kind.values()))

    def __len__(self) -> int:
        """Number of registered kinds."""
        return len(self._by_kind)
