#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for JSON interchange of document trees."""

import json

import pytest

from mdxtree.ast import builder as b
from mdxtree.ast.nodes import LabelItem, MarkType, Node, NodeKind, TableColumn, TableRow
from mdxtree.ast.serialization import (
    SCHEMA_VERSION,
    dict_to_node,
    json_to_tree,
    node_to_dict,
    tree_to_json,
    trees_equal,
)
from mdxtree.exceptions import TreeShapeError


@pytest.mark.unit
class TestNodeToDict:
    """Test converting trees to interchange dictionaries."""

    def test_text_leaf(self) -> None:
        """Test the text leaf shape."""
        assert node_to_dict(b.text("Hello")) == {"kind": "text", "text": "Hello", "marks": []}

    def test_link_mark_has_href(self) -> None:
        """Test that link marks carry their href in attrs."""
        result = node_to_dict(b.text("docs", b.link("/docs"), b.bold()))
        assert result["marks"] == [{"type": "link", "attrs": {"href": "/docs"}}, {"type": "bold"}]

    def test_container_shape(self) -> None:
        """Test the container shape with attrs and children."""
        result = node_to_dict(b.heading(2, b.text("Title")))
        assert result == {
            "kind": "heading",
            "attrs": {"level": 2},
            "children": [{"kind": "text", "text": "Title", "marks": []}],
        }

    def test_composites_flattened(self) -> None:
        """Test that records become plain mappings."""
        node = b.table([TableColumn("col1", "Name")], [TableRow("row1", {"col1": "Ann"})])
        result = node_to_dict(node)

        assert result["attrs"]["columns"] == [
            {"id": "col1", "label": "Name", "sortable": False, "filterable": False}
        ]
        assert result["attrs"]["rows"] == [{"id": "row1", "col1": "Ann"}]

    def test_deep_tree(self) -> None:
        """Test converting a tree deeper than the recursion limit."""
        root = b.blockquote()
        current = root
        for _ in range(3000):
            child = b.blockquote()
            current.children.append(child)
            current = child

        result = node_to_dict(root)
        depth = 0
        while result.get("children"):
            result = result["children"][0]
            depth += 1
        assert depth == 3000


@pytest.mark.unit
class TestDictToNode:
    """Test building trees from interchange dictionaries."""

    def test_round_trip(self) -> None:
        """Test that a converted tree converts back to an equal tree."""
        doc = b.document(
            b.paragraph(b.text("Hello "), b.text("world", b.bold(), b.italic())),
            b.label(LabelItem("label-1", "Beta")),
            frontmatter={"title": "Page"},
        )
        assert dict_to_node(node_to_dict(doc)) == doc

    def test_prosemirror_spelling(self) -> None:
        """Test that type and content are accepted for kind and children."""
        data = {"type": "paragraph", "content": [{"type": "text", "text": "x", "marks": ["italic"]}]}
        node = dict_to_node(data)

        assert node.kind is NodeKind.PARAGRAPH
        assert node.children[0].marks[0].type is MarkType.ITALIC

    def test_marks_sorted(self) -> None:
        """Test that marks are put in canonical order."""
        node = dict_to_node({"kind": "text", "text": "x", "marks": [{"type": "italic"}, {"type": "bold"}]})
        assert [mark.type for mark in node.marks] == [MarkType.BOLD, MarkType.ITALIC]

    def test_unknown_kind_loaded(self) -> None:
        """Test that an unregistered kind is loaded for the serializer to report."""
        node = dict_to_node({"kind": "document", "children": [{"kind": "sparkle"}]})
        assert node.children[0].kind == "sparkle"

    def test_missing_kind(self) -> None:
        """Test that a node without a kind raises with its path."""
        with pytest.raises(TreeShapeError) as exc_info:
            dict_to_node({"kind": "document", "children": [{"attrs": {}}]})
        assert exc_info.value.path == "document/0"

    def test_unknown_mark(self) -> None:
        """Test that an unknown mark type raises."""
        with pytest.raises(TreeShapeError):
            dict_to_node({"kind": "text", "text": "x", "marks": [{"type": "sparkle"}]})

    def test_malformed_composite(self) -> None:
        """Test that a label item without text raises."""
        with pytest.raises(TreeShapeError):
            dict_to_node({"kind": "label", "attrs": {"items": [{"color": "red"}]}})

    def test_children_must_be_list(self) -> None:
        """Test that a non-list children value raises."""
        with pytest.raises(TreeShapeError):
            dict_to_node({"kind": "paragraph", "children": "text"})


@pytest.mark.unit
class TestJson:
    """Test JSON text conversion."""

    def test_schema_version_written(self) -> None:
        """Test that the JSON carries the schema version."""
        data = json.loads(tree_to_json(b.document()))
        assert data["schema_version"] == SCHEMA_VERSION
        assert data["kind"] == "document"

    def test_json_round_trip(self) -> None:
        """Test that JSON output loads back to an equal tree."""
        doc = b.document(b.heading(1, b.text("Título")), b.code_block("x = 1", "python"))
        text = tree_to_json(doc, indent=2)

        assert "Título" in text
        assert json_to_tree(text) == doc

    def test_version_optional(self) -> None:
        """Test that editor JSON without a version is accepted."""
        assert json_to_tree('{"kind": "document"}').kind is NodeKind.DOCUMENT

    def test_newer_version_rejected(self) -> None:
        """Test that a newer schema version raises."""
        with pytest.raises(TreeShapeError, match="schema version"):
            json_to_tree('{"schema_version": 99, "kind": "document"}')

    def test_invalid_json(self) -> None:
        """Test that malformed JSON raises TreeShapeError."""
        with pytest.raises(TreeShapeError, match="Invalid JSON"):
            json_to_tree("{not json")

    def test_non_object(self) -> None:
        """Test that a JSON array is rejected."""
        with pytest.raises(TreeShapeError):
            json_to_tree("[]")

    def test_tree_equality_ignores_identity(self) -> None:
        """Test that separately built equal trees compare equal."""
        assert Node(NodeKind.DOCUMENT) == json_to_tree(tree_to_json(Node(NodeKind.DOCUMENT)))


@pytest.mark.unit
class TestTreesEqual:
    """Test structural comparison of trees."""

    def test_equal_trees(self) -> None:
        """Test that two builds of the same page compare equal."""
        def build() -> Node:
            return b.document(b.heading(2, b.text("Title")), b.paragraph(b.text("x", b.bold())))

        assert trees_equal(build(), build())

    @pytest.mark.parametrize(
        "other",
        [
            b.document(b.heading(3, b.text("Title"))),
            b.document(b.heading(2, b.text("Title", b.italic()))),
            b.document(b.heading(2, b.text("Other"))),
            b.document(b.heading(2, b.text("Title")), b.paragraph()),
            b.document(b.heading(2)),
        ],
    )
    def test_different_trees(self, other: Node) -> None:
        """Test that a change in attrs, marks, text or children is noticed."""
        assert not trees_equal(b.document(b.heading(2, b.text("Title"))), other)

    def test_deep_trees(self) -> None:
        """Test comparing trees deeper than the recursion limit."""
        def chain(leaf: str) -> Node:
            root = b.blockquote()
            current = root
            for _ in range(3000):
                child = b.blockquote()
                current.children.append(child)
                current = child
            current.children.append(b.paragraph(b.text(leaf)))
            return root

        assert trees_equal(chain("core"), chain("core"))
        assert not trees_equal(chain("core"), chain("edge"))
