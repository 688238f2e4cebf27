#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for MDX-like markup parsing and rendering."""
# src/mdxtree/options/mdx.py


from __future__ import annotations

from dataclasses import dataclass, field

from mdxtree.constants import (
    DEFAULT_CODE_FENCE_CHAR,
    DEFAULT_CODE_FENCE_MIN,
    DEFAULT_EMPHASIS_SYMBOL,
    DEFAULT_ESCAPE_SPECIAL,
    DEFAULT_FAIL_ON_WARNING,
    DEFAULT_INCLUDE_FRONTMATTER,
    DEFAULT_JSON_EXPRESSION_MODE,
    DEFAULT_PARSE_FRONTMATTER,
    DEFAULT_UNKNOWN_COMPONENT_MODE,
    CodeFenceChar,
    EmphasisSymbol,
    JsonExpressionMode,
    UnknownComponentMode,
)
from mdxtree.options.base import BaseParserOptions, BaseRendererOptions


@dataclass(frozen=True)
class MdxParserOptions(BaseParserOptions):
    """Configuration options for markup-to-tree parsing.

    Parameters
    ----------
    parse_frontmatter : bool, default True
        Whether a leading YAML block delimited by ``---`` lines is read into
        ``document.attrs["frontmatter"]``.
    unknown_component_mode : {"preserve", "error"}, default "preserve"
        What to do with a capitalized component tag that has no registered node
        type. ``"preserve"`` keeps its raw text in an ``unsupported`` leaf so it
        survives an edit-then-save cycle; ``"error"`` raises ``SchemaViolation``.
    json_expressions : {"relaxed", "strict"}, default "relaxed"
        How ``{...}`` attribute expressions are read. Both modes try JSON first and
        fall back to the literal expression text; ``"relaxed"`` additionally accepts
        JavaScript-style literals (single quotes, bare keys, trailing commas).

    """

    parse_frontmatter: bool = field(
        default=DEFAULT_PARSE_FRONTMATTER,
        metadata={"help": "Read a leading YAML frontmatter block into the document attributes"},
    )
    unknown_component_mode: UnknownComponentMode = field(
        default=DEFAULT_UNKNOWN_COMPONENT_MODE,
        metadata={
            "help": "How to handle component tags with no registered node type",
            "choices": ["preserve", "error"],
        },
    )
    json_expressions: JsonExpressionMode = field(
        default=DEFAULT_JSON_EXPRESSION_MODE,
        metadata={
            "help": "How {...} attribute expressions are read before falling back to literal text",
            "choices": ["relaxed", "strict"],
        },
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If a choice field holds an unsupported value.

        """
        if self.unknown_component_mode not in ("preserve", "error"):
            raise ValueError(f"Invalid unknown_component_mode: {self.unknown_component_mode!r}")
        if self.json_expressions not in ("relaxed", "strict"):
            raise ValueError(f"Invalid json_expressions: {self.json_expressions!r}")


@dataclass(frozen=True)
class MdxRendererOptions(BaseRendererOptions):
    """Configuration options for tree-to-markup serialization.

    Parameters
    ----------
    emphasis_symbol : {"*", "_"}, default "*"
        Delimiter for italic text. The renderer switches to the other symbol when
        the italic delimiter would touch a bold ``**`` delimiter.
    code_fence_char : {"`", "~"}, default "`"
        Character used for fenced code blocks.
    code_fence_min : int, default 3
        Minimum fence length; fences grow past any run of the fence character
        found inside the code.
    escape_special : bool, default True
        Escape Markdown punctuation in text so it is not re-read as markup.
    include_frontmatter : bool, default True
        Emit ``document.attrs["frontmatter"]`` as a leading YAML block.
    fail_on_warning : bool, default False
        Raise ``RenderingError`` instead of logging and skipping ill-formed subtrees.

    """

    emphasis_symbol: EmphasisSymbol = field(
        default=DEFAULT_EMPHASIS_SYMBOL,
        metadata={"help": "Symbol to use for italic text", "choices": ["*", "_"]},
    )
    code_fence_char: CodeFenceChar = field(
        default=DEFAULT_CODE_FENCE_CHAR,
        metadata={"help": "Character used for code fences", "choices": ["`", "~"]},
    )
    code_fence_min: int = field(
        default=DEFAULT_CODE_FENCE_MIN,
        metadata={"help": "Minimum code fence length", "type": int},
    )
    escape_special: bool = field(
        default=DEFAULT_ESCAPE_SPECIAL,
        metadata={"help": "Escape Markdown punctuation in text content"},
    )
    include_frontmatter: bool = field(
        default=DEFAULT_INCLUDE_FRONTMATTER,
        metadata={"help": "Render document frontmatter as a YAML block"},
    )
    fail_on_warning: bool = field(
        default=DEFAULT_FAIL_ON_WARNING,
        metadata={"help": "Raise RenderingError on ill-formed subtrees instead of skipping them"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.emphasis_symbol not in ("*", "_"):
            raise ValueError(f"Invalid emphasis_symbol: {self.emphasis_symbol!r}")
        if self.code_fence_char not in ("`", "~"):
            raise ValueError(f"Invalid code_fence_char: {self.code_fence_char!r}")
        if self.code_fence_min < 3:
            raise ValueError(f"code_fence_min must be at least 3, got {self.code_fence_min}")
