#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/parsers/__init__.py
"""Parsers from MDX-like markup to the document tree.

- :class:`MdxParser`: read a page into a ``document`` tree
- :mod:`mdxtree.parsers.blocks`: split one nesting level into Markdown runs,
  block quotes and component blocks
- :mod:`mdxtree.parsers.attributes`: decode component tag attributes

Examples
--------
    >>> from mdxtree.parsers import MdxParser
    >>> doc = MdxParser().parse('<Endpoint method="post" path="/users" />')
    >>> doc.children[0].attrs
    {'method': 'POST', 'path': '/users'}

"""

from mdxtree.parsers.base import BaseParser
from mdxtree.parsers.mdx import MdxParser

__all__ = ["BaseParser", "MdxParser"]
