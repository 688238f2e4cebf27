#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the node type registry."""

import pytest

from mdxtree import MdxTranscoder
from mdxtree.ast import builder as b
from mdxtree.ast.nodes import NodeKind
from mdxtree.exceptions import SchemaViolationError, UnknownKindError
from mdxtree.nodetypes import build_default_registry
from mdxtree.nodetypes.base import read_container, wrap_blocks
from mdxtree.registry import AttrSpec, NodeShape, NodeTypeDescriptor, NodeTypeRegistry


def _steps_descriptor(**overrides) -> NodeTypeDescriptor:
    values = dict(
        kind="steps",
        shape=NodeShape.CONTAINER,
        tag="Steps",
        read=read_container,
        write=lambda node, ctx: wrap_blocks("Steps", [], ctx.blocks()),
    )
    values.update(overrides)
    return NodeTypeDescriptor(**values)


@pytest.mark.unit
class TestDefaultRegistry:
    """Test the built-in node types."""

    def setup_method(self) -> None:
        """Create a fresh registry."""
        self.registry = build_default_registry()

    def test_every_kind_registered(self) -> None:
        """Test that every node kind has a descriptor."""
        assert set(self.registry.kinds()) == {kind.value for kind in NodeKind}
        assert len(self.registry) == len(NodeKind)

    def test_lookup_by_kind_and_tag(self) -> None:
        """Test finding descriptors by kind, tag and alias."""
        assert self.registry.lookup("card").tag == "Card"
        assert self.registry.lookup(NodeKind.TAB).kind_name == "tab"
        assert self.registry.for_tag("ColumnGroup").kind_name == "columns"
        assert self.registry.for_tag("CheckList").kind_name == "taskList"
        assert self.registry.for_tag("Sparkle") is None

    def test_lookup_unknown_kind(self) -> None:
        """Test that an unknown kind raises UnknownKindError."""
        with pytest.raises(UnknownKindError) as exc_info:
            self.registry.lookup("sparkle")
        assert exc_info.value.kind == "sparkle"

    def test_raw_tags(self) -> None:
        """Test which tags hold raw text rather than blocks."""
        assert self.registry.is_raw_tag("CodeGroup")
        assert self.registry.is_raw_tag("Code")
        assert self.registry.is_raw_tag("Label")
        assert not self.registry.is_raw_tag("Card")
        assert not self.registry.is_raw_tag("Sparkle")

    def test_contains(self) -> None:
        """Test membership by kind."""
        assert NodeKind.LABEL in self.registry
        assert "sparkle" not in self.registry

    def test_list_and_label_spacing(self) -> None:
        """Test which kinds are followed by a blank line."""
        assert self.registry.lookup("paragraph").blank_line_after
        assert not self.registry.lookup("label").blank_line_after
        assert not self.registry.lookup("horizontalRule").blank_line_after


@pytest.mark.unit
class TestRegistration:
    """Test registering and removing node types."""

    def test_register_custom_kind(self) -> None:
        """Test that a new kind is reachable by kind and tag."""
        registry = build_default_registry()
        registry.register(_steps_descriptor())

        assert registry.lookup("steps").tag == "Steps"
        assert registry.for_tag("Steps").kind_name == "steps"

    def test_duplicate_kind_rejected(self) -> None:
        """Test that registering a kind twice raises."""
        registry = NodeTypeRegistry([_steps_descriptor()])
        with pytest.raises(ValueError, match="already registered"):
            registry.register(_steps_descriptor())

    def test_tag_conflict_rejected(self) -> None:
        """Test that claiming another kind's tag raises."""
        registry = build_default_registry()
        with pytest.raises(ValueError, match="<Card>"):
            registry.register(_steps_descriptor(tag="Card"))

    def test_replace(self) -> None:
        """Test replacing a descriptor drops its old tags."""
        registry = NodeTypeRegistry([_steps_descriptor()])
        registry.register(_steps_descriptor(tag="Procedure"), replace=True)

        assert registry.for_tag("Steps") is None
        assert registry.for_tag("Procedure").kind_name == "steps"

    def test_unregister(self) -> None:
        """Test removing a kind and its tags."""
        registry = build_default_registry()
        assert registry.unregister("card")
        assert not registry.unregister("card")
        assert registry.for_tag("Card") is None

    def test_copy_is_independent(self) -> None:
        """Test that registering on a copy leaves the original alone."""
        registry = build_default_registry()
        clone = registry.copy()
        clone.register(_steps_descriptor())

        assert "steps" in clone
        assert "steps" not in registry

    def test_custom_kind_round_trip(self) -> None:
        """Test that a registered component is parsed and written back."""
        registry = build_default_registry()
        registry.register(_steps_descriptor())
        transcoder = MdxTranscoder(registry=registry)
        markup = "<Steps>\n\ntext\n\n</Steps>"

        tree = transcoder.parse(markup)

        assert tree.children[0].kind == "steps"
        assert tree.children[0].children[0].kind is NodeKind.PARAGRAPH
        assert transcoder.serialize(tree) == markup


@pytest.mark.unit
class TestResolveAttrs:
    """Test reading node attributes against a schema."""

    def setup_method(self) -> None:
        """Create a fresh registry."""
        self.registry = build_default_registry()

    def test_defaults_filled(self) -> None:
        """Test that defaults are filled and omitted attributes left out."""
        attrs = self.registry.lookup("card").resolve_attrs({"title": "Setup"})
        assert attrs == {"title": "Setup", "icon": "", "iconAlign": "left"}

    def test_source_alias(self) -> None:
        """Test that a tab reads its label from title."""
        assert self.registry.lookup("tab").resolve_attrs({"title": "Python"}) == {"label": "Python"}

    def test_string_coerced_to_int(self) -> None:
        """Test numeric strings for integer attributes."""
        assert self.registry.lookup("columns").resolve_attrs({"columns": "3"}) == {"columns": 3}

    def test_string_coerced_to_bool(self) -> None:
        """Test boolean strings for boolean attributes."""
        assert self.registry.lookup("accordion").resolve_attrs({"multiple": "false"}) == {"multiple": False}

    def test_bool_rejected_for_int(self) -> None:
        """Test that a boolean is not accepted as an integer."""
        with pytest.raises(SchemaViolationError):
            self.registry.lookup("columns").resolve_attrs({"columns": True})

    def test_choice_violation(self) -> None:
        """Test that a value outside the choices raises with the offset."""
        with pytest.raises(SchemaViolationError) as exc_info:
            self.registry.lookup("heading").resolve_attrs({"level": 7}, offset=12)

        assert exc_info.value.kind == "heading"
        assert exc_info.value.offset == 12

    def test_required_attribute(self) -> None:
        """Test that a missing required attribute raises."""
        descriptor = _steps_descriptor(attrs=(AttrSpec("id", required=True),))
        with pytest.raises(SchemaViolationError, match="missing required"):
            descriptor.resolve_attrs({})

    def test_tuple_default_becomes_list(self) -> None:
        """Test that tuple defaults are handed out as fresh lists."""
        attrs = self.registry.lookup("table").resolve_attrs({})
        assert attrs["rowsPerPageOptions"] == [5, 10, 25, 50]
        assert attrs["columns"] == []

    def test_omit_empty(self) -> None:
        """Test that an empty string counts as absent."""
        assert "href" not in self.registry.lookup("card").resolve_attrs({"href": ""})

    def test_get_falls_back_to_default(self) -> None:
        """Test reading an attribute missing from a node."""
        descriptor = self.registry.lookup("orderedList")
        assert descriptor.get(b.ordered_list(), "start") == 1
        assert descriptor.get(b.ordered_list(start=4), "start") == 4

    def test_unknown_spec(self) -> None:
        """Test that asking for an undeclared attribute raises KeyError."""
        with pytest.raises(KeyError):
            self.registry.lookup("card").spec("sparkle")
