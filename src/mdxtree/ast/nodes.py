#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/ast/nodes.py
"""Tree node classes for the structured document representation.

This module defines the attributed tree an editor surface manipulates. Unlike a
class-per-element hierarchy, every node is a :class:`Node` tagged with a
:class:`NodeKind`; what a kind means (its shape, attribute schema and markup
grammar) lives in the node type registry.

Node Model
----------
Every node carries:
    - ``kind``: one tag from the closed :class:`NodeKind` set
    - ``attrs``: attribute name to value (primitives, or typed composite records)
    - ``children``: ordered child nodes (empty for leaves)
    - ``text`` and ``marks``: only on ``text`` leaves

Composite attributes (code group files, table columns and rows, label items)
are held as typed records rather than loose dictionaries, so a malformed value
is caught once, when the tree is built, instead of at every use site.

"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Mapping, Optional, Union

from mdxtree.constants import DEFAULT_LABEL_COLOR, DEFAULT_LABEL_SIZE


class NodeKind(str, Enum):
    """The closed set of node kinds."""

    # Structural
    DOCUMENT = "document"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    BLOCKQUOTE = "blockquote"
    HORIZONTAL_RULE = "horizontalRule"
    HARD_BREAK = "hardBreak"
    TEXT = "text"

    # Lists
    BULLET_LIST = "bulletList"
    ORDERED_LIST = "orderedList"
    TASK_LIST = "taskList"
    LIST_ITEM = "listItem"
    TASK_ITEM = "taskItem"

    # Code and media
    CODE_BLOCK = "codeBlock"
    CODE_GROUP = "codeGroup"
    IMAGE = "image"

    # Callouts
    TIP = "tip"
    INFO = "info"
    NOTE = "note"
    WARNING = "warning"
    DANGER = "danger"

    # Layout containers
    CARD = "card"
    ACCORDION = "accordion"
    ACCORDION_TAB = "accordionTab"
    TABS = "tabs"
    TAB = "tab"
    COLUMNS = "columns"
    COLUMN = "column"
    RIGHT_PANEL = "rightPanel"

    # Data and domain widgets
    TABLE = "table"
    ENDPOINT = "endpoint"
    LABEL = "label"

    # Opaque content the parser could not interpret
    UNSUPPORTED = "unsupported"

    def __str__(self) -> str:
        """Return the interchange spelling of the kind."""
        return self.value


LIST_KINDS = frozenset({NodeKind.BULLET_LIST, NodeKind.ORDERED_LIST, NodeKind.TASK_LIST})
CALLOUT_KINDS = frozenset({NodeKind.TIP, NodeKind.INFO, NodeKind.NOTE, NodeKind.WARNING, NodeKind.DANGER})


class MarkType(str, Enum):
    """Inline formatting annotations for text leaves."""

    LINK = "link"
    CODE = "code"
    BOLD = "bold"
    ITALIC = "italic"
    STRIKE = "strike"
    UNDERLINE = "underline"

    def __str__(self) -> str:
        """Return the interchange spelling of the mark."""
        return self.value


# Canonical mark order; marks on a text leaf are kept sorted by it
MARK_ORDER: tuple[MarkType, ...] = (
    MarkType.LINK,
    MarkType.CODE,
    MarkType.BOLD,
    MarkType.ITALIC,
    MarkType.STRIKE,
    MarkType.UNDERLINE,
)


@dataclass(frozen=True)
class Mark:
    """A formatting annotation on a text leaf.

    Parameters
    ----------
    type : MarkType
        The kind of formatting
    href : str or None, default = None
        Link target, only meaningful for ``MarkType.LINK``

    """

    type: MarkType
    href: Optional[str] = None

    def __post_init__(self) -> None:
        """Coerce string mark types to :class:`MarkType`."""
        if not isinstance(self.type, MarkType):
            object.__setattr__(self, "type", MarkType(self.type))
        if self.type is not MarkType.LINK and self.href is not None:
            object.__setattr__(self, "href", None)

    @property
    def rank(self) -> int:
        """Position of this mark in the canonical order."""
        return MARK_ORDER.index(self.type)


def sort_marks(marks: list[Mark]) -> list[Mark]:
    """Return marks in canonical order with duplicate types removed.

    A mark type is idempotent: applying bold twice is the same as applying it
    once. When two links are present the first one wins.

    Parameters
    ----------
    marks : list of Mark
        Marks in any order

    Returns
    -------
    list of Mark
        Deduplicated marks sorted by :data:`MARK_ORDER`

    """
    seen: dict[MarkType, Mark] = {}
    for mark in marks:
        seen.setdefault(mark.type, mark)
    return sorted(seen.values(), key=lambda m: m.rank)


# ============================================================================
# Composite attribute records
# ============================================================================


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{what} must be an object, got {type(value).__name__}")
    return value


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


@dataclass
class CodeFile:
    """One file of a code group.

    Parameters
    ----------
    filename : str
        Display name of the file tab
    language : str
        Highlighting language
    code : str
        File contents

    """

    filename: str
    language: str
    code: str = ""

    @classmethod
    def from_value(cls, value: Any, index: int = 0) -> CodeFile:
        """Build a record from a plain mapping or pass a record through.

        Raises
        ------
        ValueError
            If the value is not a mapping with string fields

        """
        if isinstance(value, CodeFile):
            return value
        data = _require_mapping(value, "code group file")
        language = str(data.get("language") or data.get("lang") or "plaintext")
        filename = str(data.get("filename") or f"example.{language}")
        code = data.get("code", "")
        if not isinstance(code, str):
            raise ValueError("code group file 'code' must be a string")
        return cls(filename=filename, language=language, code=code)

    def to_value(self) -> dict[str, Any]:
        """Return the plain interchange form."""
        return {"filename": self.filename, "language": self.language, "code": self.code}


@dataclass
class TableColumn:
    """Column configuration of a table.

    Parameters
    ----------
    id : str
        Key of this column's cell in every :class:`TableRow`
    label : str
        Header text
    sortable : bool, default = False
        Whether the rendered table lets readers sort by this column
    filterable : bool, default = False
        Whether the rendered table lets readers filter by this column

    """

    id: str
    label: str
    sortable: bool = False
    filterable: bool = False

    @classmethod
    def from_value(cls, value: Any, index: int = 0) -> TableColumn:
        """Build a record from a plain mapping or pass a record through.

        Raises
        ------
        ValueError
            If the value is not a mapping

        """
        if isinstance(value, TableColumn):
            return value
        data = _require_mapping(value, "table column")
        column_id = str(data.get("id") or f"col{index + 1}")
        label = data.get("label")
        return cls(
            id=column_id,
            label=str(label) if label is not None else column_id,
            sortable=_as_bool(data.get("sortable", False)),
            filterable=_as_bool(data.get("filterable", False)),
        )

    @property
    def has_features(self) -> bool:
        """Whether this column needs the component form of the table."""
        return self.sortable or self.filterable

    def to_value(self) -> dict[str, Any]:
        """Return the plain interchange form."""
        return {"id": self.id, "label": self.label, "sortable": self.sortable, "filterable": self.filterable}


@dataclass
class TableRow:
    """One data row of a table.

    Parameters
    ----------
    id : str
        Row identifier
    cells : dict of str to str
        Cell markup keyed by :attr:`TableColumn.id`

    """

    id: str
    cells: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_value(cls, value: Any, index: int = 0) -> TableRow:
        """Build a record from a flat mapping (``{"id": ..., "col1": ...}``).

        Raises
        ------
        ValueError
            If the value is not a mapping

        """
        if isinstance(value, TableRow):
            return value
        data = _require_mapping(value, "table row")
        row_id = str(data.get("id") or f"row{index + 1}")
        cells = {str(key): "" if cell is None else str(cell) for key, cell in data.items() if key != "id"}
        return cls(id=row_id, cells=cells)

    def get(self, column_id: str) -> str:
        """Return the cell for ``column_id``, or an empty string."""
        return self.cells.get(column_id, "")

    def to_value(self) -> dict[str, Any]:
        """Return the flat interchange form."""
        return {"id": self.id, **self.cells}


@dataclass
class LabelItem:
    """One chip of a label group.

    Parameters
    ----------
    id : str
        Stable identifier used by the editor to add and remove chips
    text : str
        Chip text
    color : str
        CSS color of the chip
    size : str
        Chip size (``sm``, ``md`` or ``lg``)
    icon : str or None, default = None
        Optional icon name

    """

    id: str
    text: str
    color: str = DEFAULT_LABEL_COLOR
    size: str = DEFAULT_LABEL_SIZE
    icon: Optional[str] = None

    @classmethod
    def from_value(cls, value: Any, index: int = 0) -> LabelItem:
        """Build a record from a plain mapping or pass a record through.

        Raises
        ------
        ValueError
            If the value is not a mapping or has no text

        """
        if isinstance(value, LabelItem):
            return value
        data = _require_mapping(value, "label item")
        text = data.get("text", data.get("label"))
        if text is None:
            raise ValueError("label item needs a 'text' value")
        icon = data.get("icon")
        return cls(
            id=str(data.get("id") or default_label_id(index)),
            text=str(text),
            color=str(data.get("color") or DEFAULT_LABEL_COLOR),
            size=str(data.get("size") or DEFAULT_LABEL_SIZE),
            icon=str(icon) if icon else None,
        )

    def to_value(self) -> dict[str, Any]:
        """Return the plain interchange form."""
        value: dict[str, Any] = {"id": self.id, "text": self.text, "color": self.color, "size": self.size}
        if self.icon:
            value["icon"] = self.icon
        return value


def default_label_id(index: int) -> str:
    """Return the positional id given to the ``index``-th label item."""
    return f"label-{index + 1}"


CompositeRecord = Union[CodeFile, TableColumn, TableRow, LabelItem]


# ============================================================================
# Node
# ============================================================================


@dataclass
class Node:
    """A node of the structured document tree.

    Parameters
    ----------
    kind : NodeKind or str
        The node's kind. Strings naming a known kind are converted to
        :class:`NodeKind`; unknown strings are kept so that an externally
        mutated tree can still be handed to the serializer, which reports them.
    attrs : dict, default = empty dict
        Attribute values, validated against the kind's schema by the parser
    children : list of Node, default = empty list
        Ordered children; empty for leaf kinds
    text : str or None, default = None
        Literal content of a ``text`` leaf
    marks : list of Mark, default = empty list
        Formatting of a ``text`` leaf

    Examples
    --------
        >>> para = Node(NodeKind.PARAGRAPH, children=[
        ...     Node(NodeKind.TEXT, text="Hello "),
        ...     Node(NodeKind.TEXT, text="world", marks=[Mark(MarkType.BOLD)]),
        ... ])
        >>> para.plain_text()
        'Hello world'

    """

    kind: Union[NodeKind, str]
    attrs: dict[str, Any] = field(default_factory=dict)
    children: list[Node] = field(default_factory=list)
    text: Optional[str] = None
    marks: list[Mark] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Normalize the kind to :class:`NodeKind` when it names a known kind."""
        if not isinstance(self.kind, NodeKind):
            try:
                self.kind = NodeKind(self.kind)
            except ValueError:
                pass

    @property
    def kind_name(self) -> str:
        """The interchange spelling of this node's kind."""
        return str(self.kind)

    @property
    def is_text(self) -> bool:
        """Whether this node is an inline text leaf."""
        return self.kind is NodeKind.TEXT

    def has_mark(self, mark_type: MarkType | str) -> bool:
        """Return True if this text leaf carries a mark of ``mark_type``."""
        mark_type = MarkType(mark_type)
        return any(mark.type is mark_type for mark in self.marks)

    def add_mark(self, mark: Mark) -> None:
        """Apply ``mark``; applying an already present mark type is a no-op."""
        if not self.has_mark(mark.type):
            self.marks = sort_marks([*self.marks, mark])

    def remove_mark(self, mark_type: MarkType | str) -> None:
        """Remove every mark of ``mark_type``; removing an absent mark is a no-op."""
        mark_type = MarkType(mark_type)
        self.marks = [mark for mark in self.marks if mark.type is not mark_type]

    def toggle_mark(self, mark: Mark) -> None:
        """Remove ``mark`` if its type is present, otherwise apply it."""
        if self.has_mark(mark.type):
            self.remove_mark(mark.type)
        else:
            self.add_mark(mark)

    def iter_descendants(self) -> Iterator[Node]:
        """Yield every descendant in document order, without recursion."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def plain_text(self) -> str:
        """Concatenate the text of every text leaf below this node."""
        if self.is_text:
            return self.text or ""
        return "".join(node.text or "" for node in self.iter_descendants() if node.is_text)

    def copy(self) -> Node:
        """Return a deep copy of this subtree."""
        return copy.deepcopy(self)


# Composite attributes per kind, and the record type each list element becomes
COMPOSITE_ATTRIBUTES: dict[NodeKind, dict[str, type]] = {
    NodeKind.CODE_GROUP: {"files": CodeFile},
    NodeKind.TABLE: {"columns": TableColumn, "rows": TableRow},
    NodeKind.LABEL: {"items": LabelItem},
}


def coerce_composite_attrs(kind: NodeKind | str, attrs: Mapping[str, Any]) -> dict[str, Any]:
    """Convert the composite attributes of ``kind`` into typed records.

    Parameters
    ----------
    kind : NodeKind or str
        Kind of the node owning ``attrs``
    attrs : Mapping
        Attribute values; composite values may be plain lists of mappings

    Returns
    -------
    dict
        A copy of ``attrs`` whose composite values are lists of records

    Raises
    ------
    ValueError
        If a composite value is not a list or an element has the wrong shape

    """
    result = dict(attrs)
    try:
        spec = COMPOSITE_ATTRIBUTES.get(NodeKind(kind), {})
    except ValueError:
        return result
    for name, record_type in spec.items():
        if name not in result:
            continue
        value = result[name]
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"{kind}.{name} must be a list, got {type(value).__name__}")
        result[name] = [record_type.from_value(item, index) for index, item in enumerate(value)]  # type: ignore[attr-defined]
    return result
