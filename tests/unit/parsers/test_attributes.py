#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for component tag attribute reading."""

import pytest

from mdxtree.exceptions import UnknownAttributeShapeError
from mdxtree.parsers.attributes import decode_expression, find_tag_end, parse_attributes, relax_js_literal


@pytest.mark.unit
class TestFindTagEnd:
    """Test locating the end of an opening tag."""

    def test_simple_tag(self) -> None:
        """Test a tag with one quoted attribute."""
        text = '<Card title="Setup">'
        assert find_tag_end(text, 5) == (len(text), False)

    def test_self_closing(self) -> None:
        """Test that a trailing slash is reported."""
        text = '<Endpoint method="GET" />'
        assert find_tag_end(text, 9) == (len(text), True)

    def test_angle_bracket_in_expression(self) -> None:
        """Test that a > inside an expression does not end the tag."""
        text = '<Table data={[["a <sortable>"]]} />'
        assert find_tag_end(text, 6) == (len(text), True)

    def test_angle_bracket_in_string(self) -> None:
        """Test that a > inside a quoted value does not end the tag."""
        text = '<Card title="a > b">'
        assert find_tag_end(text, 5) == (len(text), False)

    def test_multiline_tag(self) -> None:
        """Test a tag whose attributes span several lines."""
        text = '<Table\n  data={[["a"]]}\n/>'
        assert find_tag_end(text, 6) == (len(text), True)

    def test_missing_end(self) -> None:
        """Test that an unfinished tag gives None."""
        assert find_tag_end('<Card title="x"', 5) is None


@pytest.mark.unit
class TestParseAttributes:
    """Test decoding attribute lists."""

    def test_mixed_shapes(self) -> None:
        """Test strings, expressions and bare flags together."""
        assert parse_attributes(' title="Hi" multiple={true} open') == {
            "title": "Hi",
            "multiple": True,
            "open": True,
        }

    def test_self_closing_slash_ignored(self) -> None:
        """Test that the slash of a self-closing tag is not an attribute."""
        assert parse_attributes(' label="Beta" /') == {"label": "Beta"}

    def test_single_quoted_value(self) -> None:
        """Test a single-quoted value with an escaped quote."""
        assert parse_attributes(" title='It\\'s'") == {"title": "It's"}

    def test_escaped_double_quote(self) -> None:
        """Test that escapes in a double-quoted value are undone."""
        assert parse_attributes(' title="He said \\"hi\\"\\nagain"') == {"title": 'He said "hi"\nagain'}

    def test_numeric_expression(self) -> None:
        """Test a number in braces."""
        assert parse_attributes(" columns={3}") == {"columns": 3}

    def test_nested_expression(self) -> None:
        """Test an array expression with nested brackets and quotes."""
        attrs = parse_attributes(' data={[["Name", "Role"], ["Ann", "Admin"]]}')
        assert attrs == {"data": [["Name", "Role"], ["Ann", "Admin"]]}

    def test_spaces_around_equals(self) -> None:
        """Test whitespace around the equals sign."""
        assert parse_attributes(' title = "Hi"') == {"title": "Hi"}

    def test_unquoted_value_rejected(self) -> None:
        """Test that an unquoted value raises with the value offset."""
        with pytest.raises(UnknownAttributeShapeError) as exc_info:
            parse_attributes(" title=unquoted", base_offset=10)

        assert exc_info.value.name == "title"
        assert exc_info.value.offset == 17

    def test_unterminated_string_rejected(self) -> None:
        """Test that an unterminated quoted value raises."""
        with pytest.raises(UnknownAttributeShapeError):
            parse_attributes(' title="abc')

    def test_missing_value_rejected(self) -> None:
        """Test that a dangling equals sign raises."""
        with pytest.raises(UnknownAttributeShapeError):
            parse_attributes(" title=")

    def test_unexpected_character_rejected(self) -> None:
        """Test that a value without a name raises."""
        with pytest.raises(UnknownAttributeShapeError):
            parse_attributes(' "orphan"')


@pytest.mark.unit
class TestDecodeExpression:
    """Test decoding of brace expressions."""

    @pytest.mark.parametrize(
        "expression,expected",
        [
            ("true", True),
            ("false", False),
            ("2", 2),
            (" [5, 10, 25] ", [5, 10, 25]),
            ('"text"', "text"),
            ("null", None),
        ],
    )
    def test_json_values(self, expression: str, expected: object) -> None:
        """Test plain JSON values."""
        assert decode_expression(expression) == expected

    def test_relaxed_object(self) -> None:
        """Test a JavaScript object literal in relaxed mode."""
        assert decode_expression("{id: 'a'}") == {"id": "a"}

    def test_relaxed_trailing_comma(self) -> None:
        """Test that trailing commas are accepted in relaxed mode."""
        assert decode_expression("[1, 2,]") == [1, 2]

    def test_undefined_becomes_null(self) -> None:
        """Test that undefined is read as None."""
        assert decode_expression("[undefined]") == [None]

    def test_strict_mode_keeps_literal(self) -> None:
        """Test that strict mode falls back to the expression text."""
        assert decode_expression(" {id: 'a'} ", mode="strict") == "{id: 'a'}"

    def test_non_json_kept_as_text(self) -> None:
        """Test that a JavaScript reference is kept as its text."""
        assert decode_expression("props.title") == "props.title"


@pytest.mark.unit
class TestRelaxJsLiteral:
    """Test normalization of JavaScript literals."""

    def test_keys_quotes_and_commas(self) -> None:
        """Test bare keys, single quotes and a trailing comma together."""
        assert relax_js_literal("[{id: 'a', text: 'Beta',}]") == '[{"id": "a", "text": "Beta"}]'

    def test_double_quoted_strings_untouched(self) -> None:
        """Test that double-quoted strings are copied verbatim."""
        assert relax_js_literal('{"a": "x, }"}') == '{"a": "x, }"}'

    def test_keywords_not_quoted(self) -> None:
        """Test that true, false and null stay keywords."""
        assert relax_js_literal("{open: true, size: null}") == '{"open": true, "size": null}'
