#  Copyright (c) 2025 Tom Villani, Ph.D.
"""End-to-end tests over a page that uses every built-in component."""

import pytest

from mdxtree import MdxTranscoder, json_to_tree, tree_to_json
from mdxtree.ast.nodes import Mark, MarkType, NodeKind
from mdxtree.ast.serialization import node_to_dict
from mdxtree.ast.utils import find_kind
from mdxtree.editing import add_label_item, toggle_mark


@pytest.mark.integration
class TestSamplePage:
    """Parse, edit and write back a complete documentation page."""

    def test_top_level_kinds(self, transcoder: MdxTranscoder, sample_page: str) -> None:
        """Test the block structure of the page."""
        tree = transcoder.parse(sample_page)

        assert [child.kind_name for child in tree.children] == [
            "heading",
            "paragraph",
            "tip",
            "warning",
            "heading",
            "tabs",
            "codeGroup",
            "heading",
            "endpoint",
            "label",
            "paragraph",
            "table",
            "table",
            "accordion",
            "columns",
            "card",
            "rightPanel",
            "orderedList",
            "taskList",
            "horizontalRule",
            "image",
        ]
        assert tree.attrs["frontmatter"] == {"title": "Getting started", "tags": ["intro", "setup"]}

    def test_component_details(self, transcoder: MdxTranscoder, sample_page: str) -> None:
        """Test attributes read from the components."""
        tree = transcoder.parse(sample_page)

        tabs = find_kind(tree, NodeKind.TABS)[0]
        assert [tab.attrs["label"] for tab in tabs.children] == ["pip", "source"]

        group = find_kind(tree, NodeKind.CODE_GROUP)[0]
        assert [file.filename for file in group.attrs["files"]] == ["install.sh", "check.py"]
        assert group.attrs["files"][1].code == "import mdxtree\nprint(mdxtree.__version__)"

        plain, featured = find_kind(tree, NodeKind.TABLE)
        assert plain.attrs["pagination"] is False
        assert featured.attrs["pagination"] is True
        assert [row.get("col2") for row in featured.attrs["rows"]] == ["Admin", "Editor"]

        card = find_kind(tree, NodeKind.CARD)[0]
        assert card.attrs["href"] == "/guides/next"
        assert card.attrs["icon"] == "rocket"

    def test_inline_marks(self, transcoder: MdxTranscoder, sample_page: str) -> None:
        """Test the marks of the welcome paragraph."""
        paragraph = transcoder.parse(sample_page).children[1]
        marked = {leaf.text: [mark.type for mark in leaf.marks] for leaf in paragraph.children if leaf.marks}

        assert marked == {
            "mdxtree": [MarkType.BOLD],
            "installation": [MarkType.ITALIC],
            "configuration": [MarkType.CODE],
        }

    def test_round_trip_is_stable(self, transcoder: MdxTranscoder, sample_page: str) -> None:
        """Test that the page reads back to the same tree and the output is a fixed point."""
        _, rendered, stable = transcoder.roundtrip(sample_page)

        assert stable
        assert transcoder.serialize(transcoder.parse(rendered)) == rendered
        assert rendered.startswith("---\ntitle: Getting started\n")

    def test_json_interchange(self, transcoder: MdxTranscoder, sample_page: str) -> None:
        """Test that the tree survives JSON and serializes the same way."""
        tree = transcoder.parse(sample_page)
        restored = json_to_tree(tree_to_json(tree))

        assert node_to_dict(restored) == node_to_dict(tree)
        assert transcoder.serialize(restored) == transcoder.serialize(tree)

    def test_edit_then_write(self, transcoder: MdxTranscoder, sample_page: str) -> None:
        """Test editor operations followed by a round trip."""
        tree = transcoder.parse(sample_page)
        label = find_kind(tree, NodeKind.LABEL)[0]
        add_label_item(label, "New", size="lg")
        toggle_mark(tree.children[0], Mark(MarkType.ITALIC))

        markup = transcoder.serialize(tree)
        reparsed = transcoder.parse(markup)

        assert node_to_dict(reparsed) == node_to_dict(tree)
        assert "# *Getting started*" in markup.splitlines()
