#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/parsers/mdx.py
"""MDX-like markup to document tree parser.

This module provides :class:`MdxParser`, which reads a Markdown page extended
with component blocks (``<Card title="...">...</Card>``, ``<Table data={...} />``,
``> [!TIP]`` admonitions and so on) into the structured tree.

Parsing happens in two layers:

- :mod:`mdxtree.parsers.blocks` splits one nesting level of source into
  Markdown runs, block quotes and component blocks.
- Markdown runs are tokenized with mistune (CommonMark plus strikethrough,
  tables and task lists) and the tokens are converted into nodes; component
  blocks are interpreted by the ``read`` function of the tag's descriptor in
  the node type registry.

Component content is itself a nesting level. Levels are processed from an
explicit work stack rather than by recursion, so arbitrarily deep component
nesting cannot exhaust the interpreter stack.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

import mistune
import yaml

from mdxtree.ast.nodes import Mark, MarkType, Node, NodeKind, TableColumn, TableRow, sort_marks
from mdxtree.constants import DEFAULT_CODE_LANGUAGE, MISTUNE_PLUGINS
from mdxtree.exceptions import ParsingError, SchemaViolationError, UnknownAttributeShapeError
from mdxtree.options.mdx import MdxParserOptions, MdxRendererOptions
from mdxtree.parsers.attributes import decode_expression, parse_attributes
from mdxtree.parsers.base import BaseParser, ParserInput
from mdxtree.parsers.blocks import (
    ComponentPiece,
    Line,
    MarkdownRun,
    Piece,
    QuoteRun,
    SourceFrame,
    _read_component,
    lines_text,
    scan_blocks,
    split_lines,
    strip_indent,
)
from mdxtree.registry import ComponentSource, NodeTypeDescriptor, NodeTypeRegistry
from mdxtree.renderers.inline import InlineWriter

logger = logging.getLogger(__name__)

_CALLOUT_MARKER_RE = re.compile(r"^\[!(TIP|INFO|NOTE|WARNING|DANGER)\][ \t]*(.*)$", re.IGNORECASE)
_UNDERLINE_OPEN_RE = re.compile(r"^<u(?:\s[^>]*)?>$", re.IGNORECASE)
_UNDERLINE_CLOSE_RE = re.compile(r"^</u\s*>$", re.IGNORECASE)
_BREAK_RE = re.compile(r"^<br\s*/?>$", re.IGNORECASE)
_IMG_TAG_RE = re.compile(r"^<img(?=[\s/>])", re.IGNORECASE)

COMPONENT_BLOCK_PATTERN = r"^ {0,3}<(?:[A-Z][A-Za-z0-9]*|img)(?=[\s/>]|$)"


def component_block_plugin(is_raw: Callable[[str], bool]) -> Callable[[Any], None]:
    """Build a mistune plugin that reads component blocks nested in Markdown.

    Components that start in the first column of a nesting level are split
    out before mistune runs. Inside list items and block quotes they reach
    mistune, which would otherwise read them as HTML that ends at the first
    blank line. The plugin consumes a component through its matching closing
    tag and emits a ``component`` token holding its raw text.

    Parameters
    ----------
    is_raw : callable
        Whether a tag's content is raw text

    Returns
    -------
    callable
        Plugin for ``mistune.create_markdown(plugins=[...])``

    """

    def parse_component(block: Any, m: re.Match[str], state: Any) -> Optional[int]:
        start = state.cursor
        source = state.src[start:]
        raw_lines = split_lines(source.rstrip("\n"), start)
        indent = len(raw_lines[0].text) - len(raw_lines[0].text.lstrip(" "))
        lines = [
            Line(line.text[min(indent, len(line.text) - len(line.text.lstrip(" "))) :], line.offset)
            for line in raw_lines
        ]
        _, next_index = _read_component(SourceFrame(lines), 0, is_raw)
        consumed = sum(len(line.text) + 1 for line in raw_lines[:next_index])
        state.append_token({"type": "component", "raw": lines_text(lines[:next_index]), "offset": start})
        return min(start + consumed, state.cursor_max)

    def plugin(md: Any) -> None:
        md.block.register("component", COMPONENT_BLOCK_PATTERN, parse_component, before="raw_html")
        for rules in (md.block.list_rules, md.block.block_quote_rules):
            md.block.insert_rule(rules, "component", before="raw_html")

    return plugin


@dataclass
class _Level:
    """Work item: parse ``lines`` as blocks appended to ``sink``."""

    lines: list[Line]
    sink: list[Node]
    parent: str


@dataclass
class _Finish:
    """Work item: build a component node once its content is parsed."""

    build: Callable[[], None]


_Task = Union[_Level, _Finish]


@dataclass
class _MarkState:
    """Inline conversion state shared across one run of inline tokens."""

    nodes: list[Node] = field(default_factory=list)
    underline: bool = False


class MdxParser(BaseParser):
    """Convert MDX-like markup to a document tree.

    Parameters
    ----------
    options : MdxParserOptions or None, default = None
        Parser configuration options
    registry : NodeTypeRegistry or None, default = None
        Node types to read components with; the default registry when None

    Examples
    --------
        >>> parser = MdxParser()
        >>> doc = parser.parse("# Title\\n\\nHello **world**")
        >>> [child.kind_name for child in doc.children]
        ['heading', 'paragraph']

    """

    def __init__(self, options: MdxParserOptions | None = None, registry: NodeTypeRegistry | None = None):
        """Initialize the parser with options and a node type registry."""
        BaseParser._validate_options_type(options, MdxParserOptions, "mdx")
        options = options or MdxParserOptions()
        super().__init__(options)
        self.options: MdxParserOptions = options
        if registry is None:
            from mdxtree.nodetypes import build_default_registry

            registry = build_default_registry()
        self.registry = registry
        self._markdown = mistune.create_markdown(
            plugins=[*MISTUNE_PLUGINS, component_block_plugin(self.registry.is_raw_tag)],
            renderer=None,
        )
        self._stack: list[_Task] = []

    def parse(self, input_data: ParserInput) -> Node:
        """Parse markup into a ``document`` tree.

        Parameters
        ----------
        input_data : str, Path, IO or bytes
            Markup text, a path to a markup file, a file-like object or raw
            UTF-8 bytes

        Returns
        -------
        Node
            The ``document`` root. Empty input gives a document with no
            children.

        Raises
        ------
        UnterminatedBlockError
            If a component's closing tag is missing
        SchemaViolationError
            If a component breaks its kind's schema
        UnknownAttributeShapeError
            If a tag attribute value has an unsupported shape

        """
        text = self._load_text_content(input_data)
        text = text.replace("\r\n", "\n").replace("\r", "\n")

        document = Node(NodeKind.DOCUMENT)
        body_start = 0
        if self.options.parse_frontmatter:
            frontmatter, body_start = self._extract_frontmatter(text)
            if frontmatter:
                document.attrs["frontmatter"] = frontmatter

        self._stack = [_Level(split_lines(text[body_start:], body_start), document.children, NodeKind.DOCUMENT.value)]
        try:
            self._drain()
        except ParsingError as e:
            e.locate(text)
            raise
        finally:
            self._stack = []
        return document

    @staticmethod
    def _extract_frontmatter(text: str) -> tuple[Optional[dict[str, Any]], int]:
        """Read a leading ``---`` delimited YAML block.

        Returns
        -------
        tuple of (dict or None, int)
            The frontmatter mapping (None when absent, empty or not a mapping)
            and the offset where the body starts

        """
        if not text.startswith("---\n"):
            return None, 0
        end = text.find("\n---", 3)
        while end != -1:
            line_end = text.find("\n", end + 1)
            line_end = len(text) if line_end == -1 else line_end
            if not text[end + 4 : line_end].strip():
                break
            end = text.find("\n---", end + 1)
        if end == -1:
            return None, 0

        try:
            data = yaml.safe_load(text[4 : end + 1])
        except yaml.YAMLError as e:
            logger.debug("Leading --- block is not YAML, reading it as content: %s", e)
            return None, 0
        if not isinstance(data, dict) or not data:
            return None, 0
        body_start = min(line_end + 1, len(text))
        return data, body_start

    def _drain(self) -> None:
        while self._stack:
            task = self._stack.pop()
            if isinstance(task, _Finish):
                task.build()
                continue
            pieces = scan_blocks(task.lines, is_raw=self.registry.is_raw_tag)
            self._process_pieces(pieces, task.sink, task.parent)

    def _process_pieces(self, pieces: list[Piece], sink: list[Node], parent: str) -> None:
        for piece in pieces:
            if isinstance(piece, MarkdownRun):
                self._convert_markdown(piece.lines, sink, parent)
            elif isinstance(piece, QuoteRun):
                self._schedule_quote(piece, sink)
            else:
                self._schedule_component(piece, sink, parent)

    # ------------------------------------------------------------------
    # Component and quote blocks
    # ------------------------------------------------------------------

    def _schedule_quote(self, piece: QuoteRun, sink: list[Node]) -> None:
        lines = piece.content()
        node = Node(NodeKind.BLOCKQUOTE)
        first = next((i for i, line in enumerate(lines) if not line.is_blank), None)
        if first is not None:
            match = _CALLOUT_MARKER_RE.match(lines[first].text.strip())
            if match:
                node = Node(match.group(1).lower())
                rest = match.group(2)
                lead = lines[first].text.find(rest) if rest else 0
                remainder = [Line(rest, lines[first].offset + lead)] if rest.strip() else []
                lines = remainder + lines[first + 1 :]
        sink.append(node)
        self._stack.append(_Level(lines, node.children, node.kind_name))

    def _schedule_component(self, piece: ComponentPiece, sink: list[Node], parent: str) -> None:
        descriptor = self.registry.for_tag(piece.tag)
        if descriptor is None:
            if self.options.unknown_component_mode == "error":
                raise SchemaViolationError(piece.tag, f"unknown component <{piece.tag}>", piece.offset)
            logger.debug("Keeping unknown component <%s> as unsupported content", piece.tag)
            sink.append(Node(NodeKind.UNSUPPORTED, {"raw": piece.raw}))
            return

        if descriptor.parents is not None and parent not in descriptor.parents:
            raise SchemaViolationError(
                descriptor.kind_name, f"<{piece.tag}> cannot appear inside {parent}", piece.offset
            )

        attrs = parse_attributes(piece.attr_source, piece.attr_offset, self.options.json_expressions)
        source = ComponentSource(
            tag=piece.tag,
            attrs=attrs,
            inner=piece.inner,
            raw=piece.raw,
            offset=piece.offset,
            self_closing=piece.self_closing,
        )

        if descriptor.content == "none" and any(not line.is_blank for line in piece.inner):
            raise SchemaViolationError(descriptor.kind_name, f"<{piece.tag}> takes no content", piece.offset)

        if descriptor.content != "blocks" or not piece.inner:
            sink.append(self._read(descriptor, source))
            return

        slot = len(sink)
        sink.append(Node(NodeKind.UNSUPPORTED, {"raw": piece.raw}))

        def build() -> None:
            sink[slot] = self._read(descriptor, source)

        self._stack.append(_Finish(build))
        self._stack.append(_Level(strip_indent(piece.inner), source.children, descriptor.kind_name))

    def _read(self, descriptor: NodeTypeDescriptor, source: ComponentSource) -> Node:
        if descriptor.read is None:
            raise SchemaViolationError(descriptor.kind_name, f"<{source.tag}> has no reader", source.offset)
        try:
            node = descriptor.read(descriptor, source, self)
        except ValueError as e:
            raise SchemaViolationError(descriptor.kind_name, str(e), source.offset) from e

        if descriptor.children is not None:
            for child in node.children:
                if child.kind_name not in descriptor.children:
                    raise SchemaViolationError(
                        descriptor.kind_name, f"<{source.tag}> cannot contain {child.kind_name}", source.offset
                    )
        return node

    # ------------------------------------------------------------------
    # Helpers for node type readers
    # ------------------------------------------------------------------

    def decode_value(self, value: Any) -> Any:
        """Decode a composite attribute given as a string, e.g. ``items='[...]'``."""
        if isinstance(value, str):
            return decode_expression(value, self.options.json_expressions)
        return value

    def scan_raw_children(self, source: ComponentSource, tag: str) -> list[ComponentPiece]:
        """Split raw component content into ``<tag>`` child components.

        Raises
        ------
        SchemaViolationError
            If the content holds anything other than ``<tag>`` components

        """
        pieces = scan_blocks(strip_indent(source.inner), is_raw=lambda name: True, fence_aware=False, quotes=False)
        children: list[ComponentPiece] = []
        for piece in pieces:
            if isinstance(piece, ComponentPiece) and piece.tag == tag:
                children.append(piece)
                continue
            lines = piece.lines if isinstance(piece, (MarkdownRun, QuoteRun)) else []
            if isinstance(piece, ComponentPiece) or any(not line.is_blank for line in lines):
                offset = piece.offset if isinstance(piece, ComponentPiece) else lines[0].offset
                raise SchemaViolationError(source.tag, f"only <{tag}> children are allowed", offset)
        return children

    def parse_attrs(self, piece: ComponentPiece) -> dict[str, Any]:
        """Decode the attributes of a child component found by :meth:`scan_raw_children`."""
        return parse_attributes(piece.attr_source, piece.attr_offset, self.options.json_expressions)

    def parse_inline(self, text: str) -> list[Node]:
        """Parse a snippet of inline markup into inline nodes."""
        tokens = self._markdown.inline(text.strip(), {"ref_links": {}})
        return self._convert_inline(tokens)

    # ------------------------------------------------------------------
    # Markdown runs
    # ------------------------------------------------------------------

    def _convert_markdown(self, lines: list[Line], sink: list[Node], parent: str) -> None:
        text = lines_text(lines)
        if not text.strip():
            return
        frame = SourceFrame(lines)
        try:
            tokens, _ = self._markdown.parse(text)
        except ParsingError as e:
            # Offsets from inside mistune are relative to the run
            if e.offset is not None:
                e.offset = frame.absolute(min(e.offset, len(frame.text)))
            raise
        self._convert_blocks(tokens, sink, parent, frame)

    def _convert_blocks(
        self, tokens: list[dict[str, Any]], out: list[Node], parent: str, frame: SourceFrame
    ) -> None:
        """Convert block tokens, appending nodes to ``out`` in source order.

        Component offsets inside list items and quotes are relative to the
        item text, so errors there point at the start of the enclosing run.
        """
        for token in tokens:
            token_type = token.get("type", "")
            if token_type == "blank_line":
                continue
            if token_type in ("paragraph", "block_text"):
                out.extend(self._convert_paragraph(token))
            elif token_type == "heading":
                level = token.get("attrs", {}).get("level", 1)
                out.append(Node(NodeKind.HEADING, {"level": level}, self._convert_inline(token.get("children", []))))
            elif token_type == "thematic_break":
                out.append(Node(NodeKind.HORIZONTAL_RULE))
            elif token_type == "block_code":
                out.append(self._convert_code_block(token))
            elif token_type == "block_quote":
                children: list[Node] = []
                self._convert_blocks(token.get("children", []), children, NodeKind.BLOCKQUOTE.value, frame)
                out.append(self._quote_or_callout(children))
            elif token_type == "list":
                out.extend(self._convert_list(token, frame))
            elif token_type == "table":
                out.append(self._convert_pipe_table(token))
            elif token_type == "component":
                start = frame.absolute(min(token.get("offset", 0), len(frame.text)))
                lines = split_lines(token.get("raw", ""), start)
                self._process_pieces(scan_blocks(lines, is_raw=self.registry.is_raw_tag), out, parent)
            elif token_type == "block_html":
                out.append(Node(NodeKind.UNSUPPORTED, {"raw": token.get("raw", "").rstrip("\n")}))
            else:
                logger.debug("Keeping unhandled %s token as unsupported content", token_type)
                out.append(Node(NodeKind.UNSUPPORTED, {"raw": token.get("raw", "")}))

    def _convert_code_block(self, token: dict[str, Any]) -> Node:
        info = (token.get("attrs", {}).get("info") or "").strip()
        code = token.get("raw", "")
        if code.endswith("\n"):
            code = code[:-1]
        children = [Node(NodeKind.TEXT, text=code)] if code else []
        return Node(NodeKind.CODE_BLOCK, {"language": info or DEFAULT_CODE_LANGUAGE}, children)

    def _quote_or_callout(self, children: list[Node]) -> Node:
        """Turn a block quote whose first text is an admonition marker into a callout."""
        first = children[0] if children else None
        if first is None or first.kind is not NodeKind.PARAGRAPH or not first.children:
            return Node(NodeKind.BLOCKQUOTE, children=children)
        lead = first.children[0]
        match = _CALLOUT_MARKER_RE.match(lead.text or "") if lead.is_text and not lead.marks else None
        if match is None:
            return Node(NodeKind.BLOCKQUOTE, children=children)

        rest = match.group(2)
        if rest:
            lead.text = rest
        else:
            del first.children[0]
            if first.children and first.children[0].kind is NodeKind.HARD_BREAK:
                del first.children[0]
        if not first.children:
            del children[0]
        return Node(match.group(1).lower(), children=children)

    def _convert_list(self, token: dict[str, Any], frame: SourceFrame) -> list[Node]:
        attrs = token.get("attrs", {})
        ordered = bool(attrs.get("ordered"))
        start = attrs.get("start", 1)

        # Task items and plain items cannot share a list node
        lists: list[Node] = []
        for item_token in token.get("children", []):
            is_task = item_token.get("type") == "task_list_item"
            if is_task:
                item = Node(NodeKind.TASK_ITEM, {"checked": bool(item_token.get("attrs", {}).get("checked"))})
                kind = NodeKind.TASK_LIST
            else:
                item = Node(NodeKind.LIST_ITEM)
                kind = NodeKind.ORDERED_LIST if ordered else NodeKind.BULLET_LIST
            self._convert_blocks(item_token.get("children", []), item.children, item.kind_name, frame)

            if not lists or lists[-1].kind is not kind:
                list_attrs = {"start": start + sum(len(node.children) for node in lists)} if ordered else {}
                lists.append(Node(kind, list_attrs if kind is NodeKind.ORDERED_LIST else {}))
            lists[-1].children.append(item)
        return lists

    def _convert_pipe_table(self, token: dict[str, Any]) -> Node:
        head: list[dict[str, Any]] = []
        body: list[dict[str, Any]] = []
        for part in token.get("children", []):
            if part.get("type") == "table_head":
                head = part.get("children", [])
            elif part.get("type") == "table_body":
                body = part.get("children", [])

        columns = [
            TableColumn(id=f"col{index + 1}", label=self._cell_markup(cell) or f"Column {index + 1}")
            for index, cell in enumerate(head)
        ]
        rows = [
            TableRow(
                id=f"row{index + 1}",
                cells={
                    column.id: self._cell_markup(cell) for column, cell in zip(columns, row.get("children", []))
                },
            )
            for index, row in enumerate(body)
        ]
        descriptor = self.registry.lookup(NodeKind.TABLE)
        attrs = descriptor.resolve_attrs({})
        attrs["columns"] = columns
        attrs["rows"] = rows
        return Node(NodeKind.TABLE, attrs)

    def _cell_markup(self, cell: dict[str, Any]) -> str:
        nodes = self._convert_inline(cell.get("children", []))
        return InlineWriter(MdxRendererOptions(), mode="cell").write(nodes).strip()

    # ------------------------------------------------------------------
    # Inline content
    # ------------------------------------------------------------------

    def _convert_paragraph(self, token: dict[str, Any]) -> list[Node]:
        """Convert a paragraph, splitting any images out into block image nodes."""
        inline = self._convert_inline(token.get("children", []))
        if not any(node.kind is NodeKind.IMAGE for node in inline):
            return [Node(NodeKind.PARAGRAPH, children=inline)] if inline else []

        result: list[Node] = []
        run: list[Node] = []
        for node in [*inline, None]:
            if node is not None and node.kind is not NodeKind.IMAGE:
                run.append(node)
                continue
            paragraph = _trim_inline(run)
            if paragraph:
                result.append(Node(NodeKind.PARAGRAPH, children=paragraph))
            run = []
            if node is not None:
                result.append(node)
        return result

    def _convert_inline(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Convert inline tokens to text leaves with flat, canonically ordered marks."""
        state = _MarkState()
        stack: list[tuple[int, list[dict[str, Any]], tuple[Mark, ...]]] = [(0, tokens, ())]
        while stack:
            index, items, marks = stack.pop()
            if index >= len(items):
                continue
            stack.append((index + 1, items, marks))
            token = items[index]
            token_type = token.get("type", "")

            if token_type == "text":
                self._emit_text(state, token.get("raw", ""), marks)
            elif token_type == "codespan":
                self._emit_text(state, token.get("raw", ""), (*marks, Mark(MarkType.CODE)))
            elif token_type in _NESTING_MARKS:
                stack.append((0, token.get("children", []), (*marks, _NESTING_MARKS[token_type])))
            elif token_type == "link":
                href = token.get("attrs", {}).get("url", "")
                stack.append((0, token.get("children", []), (*marks, Mark(MarkType.LINK, href=href))))
            elif token_type == "image":
                state.nodes.append(self._convert_image(token))
            elif token_type in ("softbreak", "linebreak"):
                state.nodes.append(Node(NodeKind.HARD_BREAK))
            elif token_type == "inline_html":
                self._convert_inline_html(state, token.get("raw", ""), marks)
            else:
                self._emit_text(state, token.get("raw", ""), marks)
        return state.nodes

    @staticmethod
    def _emit_text(state: _MarkState, content: str, marks: tuple[Mark, ...]) -> None:
        if not content:
            return
        mark_list = list(marks)
        if state.underline:
            mark_list.append(Mark(MarkType.UNDERLINE))
        ordered = sort_marks(mark_list)
        previous = state.nodes[-1] if state.nodes else None
        if previous is not None and previous.is_text and previous.marks == ordered:
            previous.text = (previous.text or "") + content
            return
        state.nodes.append(Node(NodeKind.TEXT, text=content, marks=ordered))

    def _convert_inline_html(self, state: _MarkState, raw: str, marks: tuple[Mark, ...]) -> None:
        tag = raw.strip()
        if _UNDERLINE_OPEN_RE.match(tag):
            state.underline = True
        elif _UNDERLINE_CLOSE_RE.match(tag):
            state.underline = False
        elif _BREAK_RE.match(tag):
            state.nodes.append(Node(NodeKind.HARD_BREAK))
        elif _IMG_TAG_RE.match(tag):
            descriptor = self.registry.for_tag("img")
            try:
                attrs = parse_attributes(tag[4:-1], 0, self.options.json_expressions)
            except UnknownAttributeShapeError:
                logger.debug("Keeping inline image tag with unquoted attributes as text: %.60s", tag)
                descriptor = None
                attrs = {}
            if descriptor is not None and descriptor.read is not None:
                state.nodes.append(descriptor.read(descriptor, ComponentSource(tag="img", attrs=attrs), self))
            else:
                self._emit_text(state, raw, marks)
        else:
            self._emit_text(state, raw, marks)

    @staticmethod
    def _convert_image(token: dict[str, Any]) -> Node:
        attrs = token.get("attrs", {})
        node_attrs: dict[str, Any] = {"src": attrs.get("url", ""), "alt": _plain_text(token.get("children", []))}
        if attrs.get("title"):
            node_attrs["caption"] = attrs["title"]
        return Node(NodeKind.IMAGE, node_attrs)


_NESTING_MARKS: dict[str, Mark] = {
    "strong": Mark(MarkType.BOLD),
    "emphasis": Mark(MarkType.ITALIC),
    "strikethrough": Mark(MarkType.STRIKE),
}


def _plain_text(tokens: list[dict[str, Any]]) -> str:
    """Concatenate the text of inline tokens, ignoring formatting."""
    parts: list[str] = []
    stack = list(reversed(tokens))
    while stack:
        token = stack.pop()
        if "children" in token:
            stack.extend(reversed(token["children"]))
        elif token.get("type") in ("softbreak", "linebreak"):
            parts.append(" ")
        else:
            parts.append(token.get("raw", ""))
    return "".join(parts)


def _is_blank_inline(node: Node) -> bool:
    return node.kind is NodeKind.HARD_BREAK or (node.is_text and not (node.text or "").strip())


def _trim_inline(nodes: list[Node]) -> list[Node]:
    """Drop breaks and whitespace at the edges of an inline run."""
    result = list(nodes)
    while result and _is_blank_inline(result[0]):
        result.pop(0)
    while result and _is_blank_inline(result[-1]):
        result.pop()
    if result and result[0].is_text and not result[0].has_mark(MarkType.CODE):
        result[0].text = (result[0].text or "").lstrip()
    if result and result[-1].is_text and not result[-1].has_mark(MarkType.CODE):
        result[-1].text = (result[-1].text or "").rstrip()
    return result
