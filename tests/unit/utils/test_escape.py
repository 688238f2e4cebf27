#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the text escaping helpers."""

import pytest

from mdxtree.utils.escape import (
    escape_attribute,
    escape_line_start,
    escape_markdown,
    escape_table_cell,
    inline_code_span,
    longest_run,
    unescape_attribute,
)


@pytest.mark.unit
class TestAttributeEscaping:
    """Test quoted attribute escaping."""

    def test_quotes_and_newlines(self) -> None:
        """Test that quotes and newlines are escaped."""
        assert escape_attribute('He said "hi"\nagain') == 'He said \\"hi\\"\\nagain'

    def test_backslash_escaped_first(self) -> None:
        """Test that an existing backslash is doubled."""
        assert escape_attribute("C:\\path") == "C:\\\\path"

    def test_plain_value_unchanged(self) -> None:
        """Test that a value without special characters is returned as-is."""
        assert escape_attribute("Getting started") == "Getting started"

    @pytest.mark.parametrize(
        "value",
        ['He said "hi"\nagain', "C:\\path\\to", "tab\there", 'ends with \\"', "\r\n", ""],
    )
    def test_unescape_reverses_escape(self, value: str) -> None:
        """Test that unescaping an escaped value gives the original."""
        assert unescape_attribute(escape_attribute(value)) == value

    def test_unknown_escape_kept(self) -> None:
        """Test that an unknown escape sequence keeps its backslash."""
        assert unescape_attribute("C:\\data") == "C:\\data"

    def test_single_quote_escape(self) -> None:
        """Test that an escaped single quote is read back."""
        assert unescape_attribute("it\\'s") == "it's"


@pytest.mark.unit
class TestMarkdownEscaping:
    """Test escaping of inline text content."""

    def test_emphasis_and_brackets(self) -> None:
        """Test that emphasis and link punctuation is escaped."""
        assert escape_markdown("Use *stars* and [brackets]") == "Use \\*stars\\* and \\[brackets\\]"

    def test_underscore_inside_word(self) -> None:
        """Test that intra-word underscores stay readable."""
        assert escape_markdown("snake_case") == "snake_case"

    def test_underscore_at_word_boundary(self) -> None:
        """Test that an underscore at a word edge is escaped."""
        assert escape_markdown("_private") == "\\_private"

    def test_angle_bracket_escaped(self) -> None:
        """Test that a component tag in text is not read as a tag."""
        assert escape_markdown("<Card>") == "\\<Card>"

    def test_entity_ampersand(self) -> None:
        """Test that only ampersands starting a character reference are escaped."""
        assert escape_markdown("R&D") == "R&D"
        assert escape_markdown("&amp;") == "\\&amp;"

    def test_braces_and_pipes(self) -> None:
        """Test that expression braces and pipes are escaped."""
        assert escape_markdown("{a|b}") == "\\{a\\|b\\}"


@pytest.mark.unit
class TestLineStartEscaping:
    """Test escaping of block syntax at the start of a line."""

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("# not a heading", "\\# not a heading"),
            ("> not a quote", "\\> not a quote"),
            ("- not a bullet", "\\- not a bullet"),
            ("+ not a bullet", "\\+ not a bullet"),
            ("1. not a list", "1\\. not a list"),
            ("12) not a list", "12\\) not a list"),
            ("===", "\\==="),
            ("---", "\\---"),
        ],
    )
    def test_block_syntax_escaped(self, line: str, expected: str) -> None:
        """Test that each block construct gets a backslash."""
        assert escape_line_start(line) == expected

    @pytest.mark.parametrize("line", ["", "plain text", "-dash", "1.5 liters", "*not a bullet"])
    def test_plain_lines_unchanged(self, line: str) -> None:
        """Test that lines which cannot start a block are not changed."""
        assert escape_line_start(line) == line


@pytest.mark.unit
class TestTableCellEscaping:
    """Test pipe escaping in table cells."""

    def test_pipe_escaped(self) -> None:
        """Test that an unescaped pipe is escaped."""
        assert escape_table_cell("a | b") == "a \\| b"

    def test_escaped_pipe_unchanged(self) -> None:
        """Test that an already escaped pipe is left alone."""
        assert escape_table_cell("a \\| b") == "a \\| b"

    def test_pipe_after_escaped_backslash(self) -> None:
        """Test that a pipe after an escaped backslash is still escaped."""
        assert escape_table_cell("a \\\\| b") == "a \\\\\\| b"


@pytest.mark.unit
class TestInlineCodeSpan:
    """Test code span delimiting."""

    def test_simple_code(self) -> None:
        """Test a span without backticks."""
        assert inline_code_span("simple code") == "`simple code`"

    def test_inner_backtick(self) -> None:
        """Test that the fence grows past inner backticks."""
        assert inline_code_span("code with ` backtick") == "``code with ` backtick``"

    def test_leading_backtick_padded(self) -> None:
        """Test that code starting with a backtick is padded."""
        assert inline_code_span("`tick") == "`` `tick ``"

    def test_surrounding_spaces_padded(self) -> None:
        """Test that code with a space at both ends keeps them."""
        assert inline_code_span(" x ") == "`  x  `"

    def test_longest_run(self) -> None:
        """Test counting the longest run of a character."""
        assert longest_run("a``b```c", "`") == 3
        assert longest_run("abc", "`") == 0
