#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/options/__init__.py
"""Configuration options for the mdxtree parser and renderer."""

from mdxtree.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from mdxtree.options.mdx import MdxParserOptions, MdxRendererOptions

__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "MdxParserOptions",
    "MdxRendererOptions",
]
