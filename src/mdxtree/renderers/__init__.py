#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/renderers/__init__.py
"""Renderers from the document tree to MDX-like markup.

- :class:`MdxRenderer`: write a ``document`` tree back to markup
- :class:`InlineWriter`: write a run of inline nodes, shared by block writers

Examples
--------
    >>> from mdxtree.ast.builder import document, heading, text
    >>> from mdxtree.renderers import MdxRenderer
    >>> MdxRenderer().render_to_string(document(heading(2, text("Setup"))))
    '## Setup'

"""

from mdxtree.renderers.base import BaseRenderer
from mdxtree.renderers.inline import InlineWriter
from mdxtree.renderers.mdx import MdxRenderer, WriteContext

__all__ = ["BaseRenderer", "InlineWriter", "MdxRenderer", "WriteContext"]
