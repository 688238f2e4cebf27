#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/constants.py
"""Constants and default values for the mdxtree transcoder.

This module centralizes the defaults shared by the parser, the renderer and the
node type registry so that options classes and node descriptors agree on the
same values.

"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type aliases
# =============================================================================

EmphasisSymbol = Literal["*", "_"]
CodeFenceChar = Literal["`", "~"]
UnknownComponentMode = Literal["preserve", "error"]
JsonExpressionMode = Literal["relaxed", "strict"]

# =============================================================================
# Parser defaults
# =============================================================================

DEFAULT_PARSE_FRONTMATTER = True
DEFAULT_UNKNOWN_COMPONENT_MODE: UnknownComponentMode = "preserve"
DEFAULT_JSON_EXPRESSION_MODE: JsonExpressionMode = "relaxed"

# mistune plugins the Markdown portions of a page are read with
MISTUNE_PLUGINS = [
    "strikethrough",
    "table",
    "mistune.plugins.table.table_in_list",
    "mistune.plugins.table.table_in_quote",
    "task_lists",
]

# =============================================================================
# Renderer defaults
# =============================================================================

DEFAULT_EMPHASIS_SYMBOL: EmphasisSymbol = "*"
DEFAULT_CODE_FENCE_CHAR: CodeFenceChar = "`"
DEFAULT_CODE_FENCE_MIN = 3
DEFAULT_ESCAPE_SPECIAL = True
DEFAULT_INCLUDE_FRONTMATTER = True
DEFAULT_FAIL_ON_WARNING = False

# Indentation steps for nested content
LIST_CONTINUATION_INDENT = 2
COMPONENT_CHILD_INDENT = 2
COMPONENT_CONTENT_INDENT = 4

BULLET_MARKERS = ("-", "*")
ORDERED_DELIMITERS = (".", ")")

# =============================================================================
# Node attribute defaults
# =============================================================================

DEFAULT_CODE_LANGUAGE = "plaintext"
DEFAULT_CARD_ICON_ALIGN = "left"
DEFAULT_ACCORDION_HEADER = "Accordion Item"
DEFAULT_TAB_LABEL = "Tab"
DEFAULT_COLUMN_COUNT = 2
DEFAULT_ENDPOINT_METHOD = "GET"
DEFAULT_ENDPOINT_PATH = "/"
DEFAULT_LABEL_COLOR = "#3b82f6"
DEFAULT_LABEL_SIZE = "md"
DEFAULT_TABLE_SCROLL_HEIGHT = 400
DEFAULT_TABLE_ROWS_PER_PAGE = 10
DEFAULT_TABLE_ROWS_PER_PAGE_OPTIONS = (5, 10, 25, 50)

CALLOUT_KINDS = ("tip", "info", "note", "warning", "danger")
HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")
LABEL_SIZES = ("sm", "md", "lg")

# Inline feature tags appended to featured table header labels
TABLE_SORTABLE_TAG = "<sortable>"
TABLE_FILTERABLE_TAG = "<filterable>"

# =============================================================================
# CLI exit codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_PARSING_ERROR = 6
EXIT_RENDERING_ERROR = 7
