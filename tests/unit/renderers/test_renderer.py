#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the markup renderer."""

import logging

import pytest

from mdxtree.ast import builder as b
from mdxtree.ast.nodes import CodeFile, LabelItem, Node, NodeKind, TableColumn, TableRow
from mdxtree.exceptions import RenderingError, TreeShapeError
from mdxtree.options import MdxRendererOptions
from mdxtree.renderers.inline import InlineWriter, format_href, merge_text_runs
from mdxtree.renderers.mdx import MdxRenderer, format_attribute, indent_lines, prefix_lines


def render(doc, **options):
    return MdxRenderer(MdxRendererOptions(**options)).render_to_string(doc)


def para(*children):
    return b.document(b.paragraph(*children))


@pytest.mark.unit
class TestLayoutHelpers:
    """Test the text layout helpers."""

    def test_indent_lines_skips_blank(self) -> None:
        """Test that blank lines stay empty."""
        assert indent_lines("a\n\nb", 2) == "  a\n\n  b"

    def test_prefix_lines(self) -> None:
        """Test quoting lines."""
        assert prefix_lines("a\n\nb", "> ") == "> a\n>\n> b"

    @pytest.mark.parametrize(
        "name,value,expected",
        [
            ("title", "Setup", 'title="Setup"'),
            ("title", 'say "hi"', 'title="say \\"hi\\""'),
            ("columns", 2, "columns={2}"),
            ("multiple", False, "multiple={false}"),
            ("items", [{"text": "Beta"}], 'items={[{"text": "Beta"}]}'),
        ],
    )
    def test_format_attribute(self, name, value, expected) -> None:
        """Test writing string and expression attributes."""
        assert format_attribute(name, value) == expected


@pytest.mark.unit
class TestBlockLayout:
    """Test block separators and list numbering."""

    def test_blocks_separated_by_blank_line(self) -> None:
        """Test the default blank line between blocks."""
        doc = b.document(b.heading(1, b.text("Title")), b.paragraph(b.text("Hello "), b.text("world", b.bold())))
        assert render(doc) == "# Title\n\nHello **world**"

    def test_empty_document(self) -> None:
        """Test that an empty document renders to an empty string."""
        assert render(b.document()) == ""

    def test_ordered_list_numbered_from_start(self) -> None:
        """Test that item numbers follow the start attribute."""
        items = [b.list_item(b.paragraph(b.text(word))) for word in "abc"]
        assert render(b.document(b.ordered_list(*items, start=5))) == "5. a\n6. b\n7. c"

    def test_adjacent_lists_alternate_markers(self) -> None:
        """Test that neighbouring lists of one kind use different markers."""
        doc = b.document(
            b.bullet_list(b.list_item(b.paragraph(b.text("a")))),
            b.bullet_list(b.list_item(b.paragraph(b.text("b")))),
        )
        assert render(doc) == "- a\n* b"

    def test_adjacent_ordered_lists(self) -> None:
        """Test that neighbouring ordered lists switch delimiters."""
        doc = b.document(
            b.ordered_list(b.list_item(b.paragraph(b.text("a")))),
            b.ordered_list(b.list_item(b.paragraph(b.text("b")))),
        )
        assert render(doc) == "1. a\n1) b"

    def test_task_list(self) -> None:
        """Test checked and unchecked items."""
        doc = b.document(
            b.task_list(b.task_item(True, b.paragraph(b.text("done"))), b.task_item(False, b.paragraph(b.text("todo"))))
        )
        assert render(doc) == "- [x] done\n- [ ] todo"

    def test_nested_list(self) -> None:
        """Test a list nested inside an item."""
        inner = b.bullet_list(b.list_item(b.paragraph(b.text("b"))))
        doc = b.document(b.bullet_list(b.list_item(b.paragraph(b.text("a")), inner)))
        assert render(doc) == "- a\n  - b"

    def test_horizontal_rule_follows_directly(self) -> None:
        """Test that a rule is preceded by a single newline."""
        assert render(b.document(b.paragraph(b.text("text")), b.horizontal_rule())) == "text\n***"

    def test_horizontal_rule_first_in_item(self) -> None:
        """Test the underscore rule as the first block of a list item."""
        doc = b.document(b.bullet_list(b.list_item(b.horizontal_rule())))
        assert render(doc) == "- ___"

    def test_blockquote(self) -> None:
        """Test quoting several blocks."""
        doc = b.document(b.blockquote(b.paragraph(b.text("a")), b.paragraph(b.text("b"))))
        assert render(doc) == "> a\n>\n> b"


@pytest.mark.unit
class TestCodeBlocks:
    """Test fenced code blocks."""

    def test_language_written(self) -> None:
        """Test the info string."""
        assert render(b.document(b.code_block("print(1)", "python"))) == "```python\nprint(1)\n```"

    def test_fence_longer_than_content(self) -> None:
        """Test that the fence grows past backtick runs in the code."""
        assert render(b.document(b.code_block("````", "md"))) == "`````md\n````\n`````"

    def test_tilde_fence(self) -> None:
        """Test the tilde fence option."""
        assert render(b.document(b.code_block("x", "js")), code_fence_char="~") == "~~~js\nx\n~~~"

    def test_empty_code(self) -> None:
        """Test an empty code block."""
        assert render(b.document(b.code_block("", "js"))) == "```js\n```"


@pytest.mark.unit
class TestInlineMarks:
    """Test inline mark delimiters."""

    def test_nested_marks(self) -> None:
        """Test bold wrapping italic."""
        assert render(para(b.text("x", b.italic(), b.bold()))) == "**_x_**"

    def test_italic_default(self) -> None:
        """Test a lone italic span."""
        assert render(para(b.text("x", b.italic()))) == "*x*"

    def test_two_italic_spans(self) -> None:
        """Test that each italic span gets its own delimiters."""
        doc = para(b.text("Use "), b.text("this", b.italic()), b.text(" or "), b.text("that", b.italic()), b.text("."))
        assert render(doc) == "Use *this* or *that*."

    def test_italic_spans_around_bold(self) -> None:
        """Test italic spans on both sides of a bold span."""
        doc = para(b.text("a", b.italic()), b.text(" "), b.text("b", b.bold()), b.text(" "), b.text("c", b.italic()))
        assert render(doc, emphasis_symbol="_") == "_a_ **b** _c_"

    def test_emphasis_symbol_option(self) -> None:
        """Test the underscore emphasis option."""
        assert render(para(b.text("x", b.italic())), emphasis_symbol="_") == "_x_"

    def test_intraword_italic_uses_star(self) -> None:
        """Test that underscores are avoided inside words."""
        doc = para(b.text("un"), b.text("believ", b.italic()), b.text("able"))
        assert render(doc, emphasis_symbol="_") == "un*believ*able"

    def test_link_code_strike_underline(self) -> None:
        """Test the remaining mark types."""
        doc = para(
            b.text("docs", b.link("/docs")),
            b.text(" "),
            b.text("x", b.code()),
            b.text(" "),
            b.text("gone", b.strike()),
            b.text(" "),
            b.text("under", b.underline()),
        )
        assert render(doc) == "[docs](/docs) `x` ~~gone~~ <u>under</u>"

    def test_whitespace_moves_outside_marks(self) -> None:
        """Test that delimiters hug the marked text."""
        assert render(para(b.text("a"), b.text(" b ", b.bold()), b.text("c"))) == "a **b** c"

    def test_hard_break(self) -> None:
        """Test the trailing-space hard break."""
        doc = para(b.text("line one"), b.hard_break(), b.text("line two"))
        assert render(doc) == "line one  \nline two"

    def test_special_characters_escaped(self) -> None:
        """Test that literal asterisks are escaped."""
        assert render(para(b.text("Use *stars*"))) == "Use \\*stars\\*"

    def test_escaping_disabled(self) -> None:
        """Test writing text verbatim."""
        assert render(para(b.text("Use *stars*")), escape_special=False) == "Use *stars*"

    def test_line_start_escaped(self) -> None:
        """Test that a paragraph looking like a heading is escaped."""
        assert render(para(b.text("# not a heading"))) == "\\# not a heading"

    @pytest.mark.parametrize(
        "content,expected",
        [
            ("    indented", "indented"),
            ("\tTab", "Tab"),
            ("  # not a heading", "\\# not a heading"),
            ("=== ", "\\==="),
        ],
    )
    def test_leading_indentation_dropped(self, content, expected) -> None:
        """Test that paragraph text never starts with indentation."""
        assert render(para(b.text(content))) == expected

    def test_indentation_after_hard_break(self) -> None:
        """Test that a line after a hard break starts at the margin."""
        doc = para(b.text("one"), b.hard_break(), b.text("\t  two "))
        assert render(doc) == "one  \ntwo"

    def test_heading_break_becomes_space(self) -> None:
        """Test that a heading stays on one line."""
        doc = b.document(b.heading(2, b.text("a"), b.hard_break(), b.text("b")))
        assert render(doc) == "## a b"

    def test_merge_text_runs(self) -> None:
        """Test merging neighbouring leaves with equal marks."""
        merged = merge_text_runs([b.text("a", b.bold()), b.text("b", b.bold()), b.text("c")])
        assert [(leaf.text, len(leaf.marks)) for leaf in merged] == [("ab", 1), ("c", 0)]

    def test_format_href_with_space(self) -> None:
        """Test that an href with spaces is wrapped in angle brackets."""
        assert format_href("a b.html") == "<a b.html>"
        assert format_href("/docs") == "/docs"

    def test_inline_writer_cell_mode(self) -> None:
        """Test pipes and breaks inside table cells."""
        writer = InlineWriter(MdxRendererOptions(), mode="cell")
        assert writer.write([b.text("a|b"), b.hard_break(), b.text("c")]) == "a\\|b<br>c"


@pytest.mark.unit
class TestTables:
    """Test the two table forms."""

    def setup_method(self) -> None:
        """Build a two-column table."""
        self.columns = [TableColumn("col1", "Name"), TableColumn("col2", "Age")]
        self.rows = [TableRow("row1", {"col1": "Ann", "col2": "30"})]

    def test_plain_table_is_pipe_table(self) -> None:
        """Test a table without features."""
        doc = b.document(b.table(self.columns, self.rows))
        assert render(doc) == "| Name | Age |\n| --- | --- |\n| Ann | 30 |"

    def test_featured_table_is_component(self) -> None:
        """Test that a sortable column selects the component form."""
        self.columns[0] = TableColumn("col1", "Name", sortable=True)
        markup = render(b.document(b.table(self.columns, self.rows)))

        assert markup.startswith("<Table")
        assert "data={[" in markup
        assert '"Name <sortable>"' in markup
        assert markup.endswith("/>")

    def test_pagination_written(self) -> None:
        """Test pagination attributes."""
        markup = render(b.document(b.table(self.columns, self.rows, pagination=True, rowsPerPage=25)))
        assert "pagination={true}" in markup
        assert "rowsPerPage={25}" in markup

    def test_table_without_columns(self) -> None:
        """Test that a table with no columns is skipped with a warning."""
        renderer = MdxRenderer()
        assert renderer.render_to_string(b.document(b.table([], []))) == ""
        assert renderer.warnings[0].code == "malformed_composite"


@pytest.mark.unit
class TestComponents:
    """Test component writers."""

    def test_card_attribute_escaping(self) -> None:
        """Test quotes and newlines in a card title."""
        card = Node(NodeKind.CARD, {"title": 'He said "hi"\nagain'})
        assert render(b.document(card)) == '<Card title="He said \\"hi\\"\\nagain" />'

    def test_card_with_content(self) -> None:
        """Test a card around blocks."""
        card = Node(NodeKind.CARD, {"title": "Next", "href": "/next"}, [b.paragraph(b.text("body"))])
        assert render(b.document(card)) == '<Card title="Next" href="/next">\n\nbody\n\n</Card>'

    def test_callout_admonition(self) -> None:
        """Test a callout without a title."""
        assert render(b.document(b.callout(NodeKind.TIP, b.paragraph(b.text("text"))))) == "> [!TIP]\n> text"

    def test_callout_with_title(self) -> None:
        """Test that a titled callout is a component."""
        doc = b.document(b.callout(NodeKind.WARNING, b.paragraph(b.text("body")), title="Careful"))
        assert render(doc) == '<Warning title="Careful">\n\nbody\n\n</Warning>'

    def test_tabs(self) -> None:
        """Test tabs indentation."""
        tab = Node(NodeKind.TAB, {"label": "Python"}, [b.paragraph(b.text("body"))])
        doc = b.document(Node(NodeKind.TABS, children=[tab]))
        assert render(doc) == '<Tabs>\n  <Tab title="Python">\n\n    body\n\n  </Tab>\n\n</Tabs>'

    def test_accordion_writes_multiple(self) -> None:
        """Test that the multiple flag is always written."""
        section = Node(NodeKind.ACCORDION_TAB, {"header": "Q"}, [b.paragraph(b.text("A"))])
        markup = render(b.document(Node(NodeKind.ACCORDION, {"multiple": False}, [section])))

        assert markup.startswith("<Accordion multiple={false}>\n")
        assert '<AccordionTab title="Q">' in markup

    def test_code_group(self) -> None:
        """Test code group files."""
        doc = b.document(b.code_group([CodeFile("x.py", "python", "code")]))
        expected = '<CodeGroup>\n  <Code lang="python" filename="x.py">\n    code\n  </Code>\n</CodeGroup>'
        assert render(doc) == expected

    def test_columns(self) -> None:
        """Test a column group."""
        columns = [Node(NodeKind.COLUMN, children=[b.paragraph(b.text(word))]) for word in ("Left", "Right")]
        markup = render(b.document(Node(NodeKind.COLUMNS, {"columns": 2}, columns)))
        assert markup.startswith("<Columns columns={2}>\n  <Column>\n    Left\n  </Column>")

    def test_right_panel(self) -> None:
        """Test the right panel container."""
        panel = Node(NodeKind.RIGHT_PANEL, children=[b.paragraph(b.text("text"))])
        assert render(b.document(panel)) == "<RightPanel>\n  text\n</RightPanel>"

    def test_endpoint(self) -> None:
        """Test an endpoint."""
        assert render(b.document(b.endpoint("GET", "/x"))) == '<Endpoint method="GET" path="/x" />'

    def test_single_label(self) -> None:
        """Test a label written with tag attributes."""
        doc = b.document(b.label(LabelItem("label-1", "Beta")))
        assert render(doc) == '<Label label="Beta" color="#3b82f6" size="md" />'

    def test_label_group(self) -> None:
        """Test several label chips written as an items array."""
        doc = b.document(b.label(LabelItem("a", "Beta"), LabelItem("b", "GA")))
        assert render(doc).startswith("<Label items={[")

    def test_label_followed_by_single_newline(self) -> None:
        """Test the spacing after a label."""
        doc = b.document(b.label(LabelItem("label-1", "Beta")), b.paragraph(b.text("x")))
        assert render(doc).endswith(' />\nx')

    def test_image(self) -> None:
        """Test Markdown and tag image forms."""
        assert render(b.document(b.image("logo.png", "Logo"))) == "![Logo](logo.png)"
        assert render(b.document(b.image("logo.png", "Logo", width=200))) == (
            '<img src="logo.png" alt="Logo" width={200} />'
        )

    def test_unsupported_written_verbatim(self) -> None:
        """Test that kept markup is written back unchanged."""
        assert render(b.document(Node(NodeKind.UNSUPPORTED, {"raw": "<Foo />"}))) == "<Foo />"


@pytest.mark.unit
class TestFrontmatter:
    """Test YAML frontmatter output."""

    def test_frontmatter_written(self) -> None:
        """Test frontmatter before the body."""
        doc = b.document(b.paragraph(b.text("x")), frontmatter={"title": "Page"})
        assert render(doc) == "---\ntitle: Page\n---\n\nx"

    def test_frontmatter_disabled(self) -> None:
        """Test leaving frontmatter out."""
        doc = b.document(b.paragraph(b.text("x")), frontmatter={"title": "Page"})
        assert render(doc, include_frontmatter=False) == "x"


@pytest.mark.unit
class TestWarnings:
    """Test skipped subtrees."""

    def test_unknown_kind(self, caplog) -> None:
        """Test that an unregistered kind is skipped and logged."""
        renderer = MdxRenderer()
        doc = b.document(Node("sparkle"), b.paragraph(b.text("kept")))

        with caplog.at_level(logging.WARNING, logger="mdxtree"):
            markup = renderer.render_to_string(doc)

        assert markup == "kept"
        warning = renderer.warnings[0]
        assert (warning.code, warning.kind, warning.path) == ("unknown_kind", "sparkle", "document/0")
        assert "sparkle" in caplog.text

    def test_empty_label_items(self) -> None:
        """Test a label group without items."""
        renderer = MdxRenderer()
        renderer.render_to_string(b.document(b.label()))
        assert renderer.warnings[0].code == "malformed_composite"

    def test_list_item_at_root(self) -> None:
        """Test a list item outside a list."""
        renderer = MdxRenderer()
        renderer.render_to_string(b.document(b.list_item(b.paragraph(b.text("x")))))
        assert renderer.warnings[0].code == "invalid_placement"

    def test_inline_node_at_block_level(self) -> None:
        """Test a text leaf directly under the document."""
        renderer = MdxRenderer()
        renderer.render_to_string(b.document(b.text("loose")))
        assert renderer.warnings[0].code == "invalid_placement"

    def test_warning_str(self) -> None:
        """Test the warning text."""
        renderer = MdxRenderer()
        renderer.render_to_string(b.document(Node("sparkle")))
        assert str(renderer.warnings[0]).startswith("[unknown_kind] sparkle at document/0")

    def test_fail_on_warning(self) -> None:
        """Test that strict rendering raises with the warnings."""
        with pytest.raises(RenderingError) as exc_info:
            render(b.document(Node("sparkle")), fail_on_warning=True)
        assert exc_info.value.warnings[0].kind == "sparkle"

    def test_nested_warning_reported_once(self) -> None:
        """Test a skipped node two containers down."""
        renderer = MdxRenderer()
        inner = Node(NodeKind.CARD, {"title": "inner"}, [Node("sparkle"), b.paragraph(b.text("kept"))])
        doc = b.document(Node(NodeKind.CARD, {"title": "outer"}, [inner]))

        markup = renderer.render_to_string(doc)

        assert "kept" in markup
        assert [(warning.code, warning.path) for warning in renderer.warnings] == [("unknown_kind", "document/0/0/0")]

    def test_skipped_subtree_is_silent(self) -> None:
        """Test that nothing inside a skipped node is reported."""
        renderer = MdxRenderer()
        renderer.render_to_string(b.document(b.list_item(Node("sparkle"), b.paragraph(b.text("x")))))
        assert [warning.code for warning in renderer.warnings] == ["invalid_placement"]

    def test_fail_on_nested_warning(self) -> None:
        """Test that strict rendering raises for a problem inside a container."""
        doc = b.document(Node(NodeKind.RIGHT_PANEL, children=[Node("sparkle")]))
        with pytest.raises(RenderingError) as exc_info:
            render(doc, fail_on_warning=True)
        assert exc_info.value.warnings[0].path == "document/0/0"

    def test_non_document_root(self) -> None:
        """Test that only documents can be rendered."""
        with pytest.raises(TreeShapeError):
            render(b.paragraph(b.text("x")))

    def test_warnings_reset_per_call(self) -> None:
        """Test that each render starts with no warnings."""
        renderer = MdxRenderer()
        renderer.render_to_string(b.document(Node("sparkle")))
        renderer.render_to_string(b.document())
        assert renderer.warnings == []


@pytest.mark.unit
class TestRendererOptions:
    """Test option validation."""

    @pytest.mark.parametrize(
        "options",
        [{"emphasis_symbol": "+"}, {"code_fence_char": "'"}, {"code_fence_min": 2}],
    )
    def test_invalid_options(self, options) -> None:
        """Test that bad option values raise ValueError."""
        with pytest.raises(ValueError):
            MdxRendererOptions(**options)
