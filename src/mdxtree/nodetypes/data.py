#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/nodetypes/data.py
"""Data node types: code groups, tables, API endpoints and labels.

These kinds keep their content in composite attributes (file lists, table
columns and rows, label items) rather than in child nodes. Each composite is
written as one value, so an edit to it is a single attribute replacement.

Tables have two markup forms. A plain table is a pipe table; a table that asks
for sorting, filtering, pagination or scrolling is a ``<Table>`` component
with a row-major ``data`` array whose header cells carry ``<sortable>`` and
``<filterable>`` markers. Which form is written depends only on the table's
attributes (see :func:`is_featured_table`).

"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Optional

from mdxtree.ast.nodes import CodeFile, LabelItem, Node, NodeKind, TableColumn, TableRow, default_label_id
from mdxtree.constants import (
    COMPONENT_CHILD_INDENT,
    COMPONENT_CONTENT_INDENT,
    DEFAULT_CODE_LANGUAGE,
    DEFAULT_ENDPOINT_METHOD,
    DEFAULT_ENDPOINT_PATH,
    DEFAULT_LABEL_COLOR,
    DEFAULT_LABEL_SIZE,
    DEFAULT_TABLE_ROWS_PER_PAGE,
    DEFAULT_TABLE_ROWS_PER_PAGE_OPTIONS,
    DEFAULT_TABLE_SCROLL_HEIGHT,
    HTTP_METHODS,
    LABEL_SIZES,
    TABLE_FILTERABLE_TAG,
    TABLE_SORTABLE_TAG,
)
from mdxtree.nodetypes.base import open_tag
from mdxtree.parsers.blocks import lines_text, strip_indent
from mdxtree.registry import AttrSpec, ComponentSource, NodeShape, NodeTypeDescriptor
from mdxtree.renderers.mdx import WriteContext, format_attribute, indent_lines
from mdxtree.utils.escape import escape_table_cell

if TYPE_CHECKING:
    from mdxtree.parsers.mdx import MdxParser

logger = logging.getLogger(__name__)


# ============================================================================
# Code groups
# ============================================================================


def read_code_group(descriptor: NodeTypeDescriptor, source: ComponentSource, parser: MdxParser) -> Node:
    """Read ``<CodeGroup>`` with one ``<Code lang="..." filename="...">`` child per file."""
    files: list[CodeFile] = []
    for piece in parser.scan_raw_children(source, "Code"):
        attrs = parser.parse_attrs(piece)
        language = str(attrs.get("lang") or attrs.get("language") or DEFAULT_CODE_LANGUAGE)
        filename = str(attrs.get("filename") or f"example.{language}")
        code = lines_text(strip_indent(piece.inner, limit=COMPONENT_CHILD_INDENT))
        files.append(CodeFile(filename=filename, language=language, code=code))
    return Node(NodeKind.CODE_GROUP, {"files": files})


def write_code_group(node: Node, ctx: WriteContext) -> str:
    pad = " " * COMPONENT_CHILD_INDENT
    parts = ["<CodeGroup>"]
    for file in ctx.get("files"):
        parts.append(pad + open_tag("Code", [("lang", file.language), ("filename", file.filename)]))
        if file.code:
            parts.append(indent_lines(file.code, COMPONENT_CONTENT_INDENT))
        parts.append(f"{pad}</Code>")
    parts.append("</CodeGroup>")
    return "\n".join(parts)


# ============================================================================
# Tables
# ============================================================================


def is_featured_table(attrs: dict[str, Any]) -> bool:
    """Whether a table needs the ``<Table>`` component form.

    Parameters
    ----------
    attrs : dict
        Table attributes with ``columns`` as :class:`TableColumn` records

    Returns
    -------
    bool
        True when any column is sortable or filterable, scrolling or
        pagination is on, or a scroll or pagination setting differs from its
        default

    """
    if attrs.get("scrollable") or attrs.get("pagination"):
        return True
    if any(column.has_features for column in attrs.get("columns") or []):
        return True
    if attrs.get("scrollHeight", DEFAULT_TABLE_SCROLL_HEIGHT) != DEFAULT_TABLE_SCROLL_HEIGHT:
        return True
    if attrs.get("rowsPerPage", DEFAULT_TABLE_ROWS_PER_PAGE) != DEFAULT_TABLE_ROWS_PER_PAGE:
        return True
    options = attrs.get("rowsPerPageOptions", DEFAULT_TABLE_ROWS_PER_PAGE_OPTIONS)
    return list(options) != list(DEFAULT_TABLE_ROWS_PER_PAGE_OPTIONS)


def _cell_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _header_label(cell: str) -> tuple[str, bool, bool]:
    sortable = TABLE_SORTABLE_TAG in cell
    filterable = TABLE_FILTERABLE_TAG in cell
    label = cell.replace(TABLE_SORTABLE_TAG, "").replace(TABLE_FILTERABLE_TAG, "").strip()
    return label, sortable, filterable


def read_table(descriptor: NodeTypeDescriptor, source: ComponentSource, parser: MdxParser) -> Node:
    """Read a ``<Table data={[[header...], [row...], ...]} />`` component.

    Raises
    ------
    SchemaViolationError
        If ``data`` is missing or not a non-empty list of equally long rows

    """
    data = parser.decode_value(source.attrs.get("data"))
    if data is None:
        raise ValueError("<Table> needs a data attribute")
    if not isinstance(data, list) or not data or not all(isinstance(row, list) for row in data):
        raise ValueError("<Table> data must be a non-empty list of rows")

    header = [_cell_value(cell) for cell in data[0]]
    config = parser.decode_value(source.attrs.get("columns"))
    if config is not None and (not isinstance(config, list) or len(config) != len(header)):
        raise ValueError(f"<Table> columns must list {len(header)} column settings")
    all_sortable = source.attrs.get("sortable") is True
    all_filterable = source.attrs.get("filterable") is True

    columns: list[TableColumn] = []
    for index, cell in enumerate(header):
        label, sortable, filterable = _header_label(cell)
        base = TableColumn.from_value(config[index], index) if config else TableColumn(f"col{index + 1}", label)
        columns.append(
            TableColumn(
                id=base.id,
                label=label,
                sortable=sortable or base.sortable or all_sortable,
                filterable=filterable or base.filterable or all_filterable,
            )
        )

    rows: list[TableRow] = []
    for index, row in enumerate(data[1:]):
        if len(row) != len(columns):
            raise ValueError(f"<Table> row {index + 1} has {len(row)} cells, expected {len(columns)}")
        cells = {column.id: _cell_value(value) for column, value in zip(columns, row)}
        rows.append(TableRow(id=f"row{index + 1}", cells=cells))

    features = {key: value for key, value in source.attrs.items() if key not in ("data", "columns")}
    attrs = descriptor.resolve_attrs(features, source.offset)
    attrs["columns"] = columns
    attrs["rows"] = rows
    return Node(NodeKind.TABLE, attrs)


def _write_pipe_table(columns: list[TableColumn], rows: list[TableRow]) -> str:
    def cell(markup: str) -> str:
        return escape_table_cell(markup.replace("\n", "<br>"))

    lines = [
        "| " + " | ".join(cell(column.label) for column in columns) + " |",
        "| " + " | ".join("---" for _ in columns) + " |",
    ]
    for row in rows:
        lines.append("| " + " | ".join(cell(row.get(column.id)) for column in columns) + " |")
    return "\n".join(lines)


def _write_table_component(node: Node, ctx: WriteContext, columns: list[TableColumn], rows: list[TableRow]) -> str:
    pad = " " * COMPONENT_CHILD_INDENT
    header = []
    for column in columns:
        text = column.label
        if column.sortable:
            text += " " + TABLE_SORTABLE_TAG
        if column.filterable:
            text += " " + TABLE_FILTERABLE_TAG
        header.append(text)

    data_rows = [header] + [[row.get(column.id) for column in columns] for row in rows]
    data = ",\n".join(pad * 2 + json.dumps(row, ensure_ascii=False) for row in data_rows)

    lines = ["<Table"]
    if any(column.id != f"col{index + 1}" for index, column in enumerate(columns)):
        lines.append(pad + format_attribute("columns", [{"id": column.id} for column in columns]))
    lines.append(f"{pad}data={{[\n{data}\n{pad}]}}")

    scroll_height = ctx.get("scrollHeight")
    if ctx.get("scrollable"):
        lines.append(pad + format_attribute("scrollable", True))
    if ctx.get("scrollable") or scroll_height != DEFAULT_TABLE_SCROLL_HEIGHT:
        lines.append(pad + format_attribute("scrollHeight", scroll_height))

    rows_per_page = ctx.get("rowsPerPage")
    options = list(ctx.get("rowsPerPageOptions"))
    if ctx.get("pagination"):
        lines.append(pad + format_attribute("pagination", True))
    if ctx.get("pagination") or rows_per_page != DEFAULT_TABLE_ROWS_PER_PAGE:
        lines.append(pad + format_attribute("rowsPerPage", rows_per_page))
    if ctx.get("pagination") or options != list(DEFAULT_TABLE_ROWS_PER_PAGE_OPTIONS):
        lines.append(pad + format_attribute("rowsPerPageOptions", options))
    lines.append("/>")
    return "\n".join(lines)


def write_table(node: Node, ctx: WriteContext) -> Optional[str]:
    """Write a table as a pipe table or a ``<Table>`` component, see :func:`is_featured_table`."""
    columns: list[TableColumn] = ctx.get("columns")
    rows: list[TableRow] = ctx.get("rows")
    if not columns:
        ctx.warn("malformed_composite", "table has no columns")
        return None
    if is_featured_table(node.attrs):
        return _write_table_component(node, ctx, columns, rows)
    return _write_pipe_table(columns, rows)


# ============================================================================
# Endpoints and labels
# ============================================================================


def read_endpoint(descriptor: NodeTypeDescriptor, source: ComponentSource, parser: MdxParser) -> Node:
    attrs = dict(source.attrs)
    if isinstance(attrs.get("method"), str):
        attrs["method"] = attrs["method"].strip().upper()
    return Node(NodeKind.ENDPOINT, descriptor.resolve_attrs(attrs, source.offset))


def write_endpoint(node: Node, ctx: WriteContext) -> str:
    method = str(ctx.get("method")).upper()
    return open_tag("Endpoint", [("method", method), ("path", str(ctx.get("path")))], self_closing=True)


def read_label(descriptor: NodeTypeDescriptor, source: ComponentSource, parser: MdxParser) -> Node:
    """Read a label group.

    The items come from an ``items`` array when present. Otherwise a single
    chip is built from the ``label`` attribute, or from the text between the
    tags, with the tag's ``color``, ``size`` and ``icon``.

    Raises
    ------
    SchemaViolationError
        If the group has no items or an item has an unknown size

    """
    attrs = source.attrs
    if "items" in attrs:
        value = parser.decode_value(attrs["items"])
        if not isinstance(value, list):
            raise ValueError("<Label> items must be a list")
        items = [LabelItem.from_value(item, index) for index, item in enumerate(value)]
    else:
        text = attrs.get("label")
        if text is None:
            text = lines_text(strip_indent(source.inner)).strip()
        items = []
        if text:
            icon = attrs.get("icon")
            items.append(
                LabelItem(
                    id=default_label_id(0),
                    text=str(text),
                    color=str(attrs.get("color") or DEFAULT_LABEL_COLOR),
                    size=str(attrs.get("size") or DEFAULT_LABEL_SIZE),
                    icon=str(icon) if icon else None,
                )
            )

    if not items:
        raise ValueError("a label group needs at least one item")
    for item in items:
        if item.size not in LABEL_SIZES:
            raise ValueError(f"label size must be one of {list(LABEL_SIZES)}, got {item.size!r}")
    return Node(NodeKind.LABEL, {"items": items})


def write_label(node: Node, ctx: WriteContext) -> Optional[str]:
    items: list[LabelItem] = ctx.get("items")
    if not items:
        ctx.warn("malformed_composite", "label group has no items")
        return None
    if len(items) == 1 and items[0].id == default_label_id(0):
        item = items[0]
        attrs = [("label", item.text), ("color", item.color), ("size", item.size), ("icon", item.icon)]
        return open_tag("Label", attrs, self_closing=True)
    return open_tag("Label", [("items", [item.to_value() for item in items])], self_closing=True)


DESCRIPTORS = (
    NodeTypeDescriptor(
        NodeKind.CODE_GROUP,
        NodeShape.LEAF,
        attrs=(AttrSpec("files", list, default=()),),
        tag="CodeGroup",
        child_tags=("Code",),
        content="raw",
        read=read_code_group,
        write=write_code_group,
        description="Tabbed group of code files",
    ),
    NodeTypeDescriptor(
        NodeKind.TABLE,
        NodeShape.LEAF,
        attrs=(
            AttrSpec("columns", list, default=()),
            AttrSpec("rows", list, default=()),
            AttrSpec("scrollable", bool, default=False),
            AttrSpec("scrollHeight", int, default=DEFAULT_TABLE_SCROLL_HEIGHT),
            AttrSpec("pagination", bool, default=False),
            AttrSpec("rowsPerPage", int, default=DEFAULT_TABLE_ROWS_PER_PAGE),
            AttrSpec("rowsPerPageOptions", list, default=DEFAULT_TABLE_ROWS_PER_PAGE_OPTIONS),
        ),
        tag="Table",
        content="none",
        read=read_table,
        write=write_table,
        description="Data table, plain or with sorting, filtering and pagination",
    ),
    NodeTypeDescriptor(
        NodeKind.ENDPOINT,
        NodeShape.LEAF,
        attrs=(
            AttrSpec("method", default=DEFAULT_ENDPOINT_METHOD, choices=HTTP_METHODS),
            AttrSpec("path", default=DEFAULT_ENDPOINT_PATH),
        ),
        tag="Endpoint",
        content="none",
        read=read_endpoint,
        write=write_endpoint,
        description="API endpoint method and path",
    ),
    NodeTypeDescriptor(
        NodeKind.LABEL,
        NodeShape.LEAF,
        attrs=(AttrSpec("items", list, default=()),),
        tag="Label",
        content="raw",
        blank_line_after=False,
        read=read_label,
        write=write_label,
        description="Group of label chips",
    ),
)
