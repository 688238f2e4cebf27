#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/utils/__init__.py
"""Utility functions shared by the mdxtree parser and renderer."""

from mdxtree.utils.escape import (
    escape_attribute,
    escape_line_start,
    escape_markdown,
    escape_table_cell,
    inline_code_span,
    longest_run,
    unescape_attribute,
)

__all__ = [
    "escape_attribute",
    "escape_line_start",
    "escape_markdown",
    "escape_table_cell",
    "inline_code_span",
    "longest_run",
    "unescape_attribute",
]
