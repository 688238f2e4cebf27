#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/api.py
"""The public parse and serialize functions.

:class:`MdxTranscoder` pairs a parser and a renderer configuration. It keeps
no state between calls: every call builds its own parser or renderer, so one
transcoder can serve independent documents from several threads at once.

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Any, Optional, Union

from mdxtree.ast.nodes import Node
from mdxtree.ast.serialization import trees_equal
from mdxtree.exceptions import SerializeWarning
from mdxtree.nodetypes import build_default_registry
from mdxtree.options.mdx import MdxParserOptions, MdxRendererOptions
from mdxtree.parsers.base import BaseParser, ParserInput
from mdxtree.parsers.mdx import MdxParser
from mdxtree.registry import NodeTypeRegistry
from mdxtree.renderers.base import BaseRenderer
from mdxtree.renderers.mdx import MdxRenderer
from mdxtree.utils.decorators import debug_timer

logger = logging.getLogger(__name__)


class MdxTranscoder:
    """Convert MDX-like markup to document trees and back.

    Parameters
    ----------
    parser_options : MdxParserOptions or None, default = None
        Options for :meth:`parse`
    renderer_options : MdxRendererOptions or None, default = None
        Options for :meth:`serialize`
    registry : NodeTypeRegistry or None, default = None
        Node types to use; the built-in ones when None. The registry must not
        be changed while calls are running.

    Examples
    --------
        >>> transcoder = MdxTranscoder()
        >>> tree = transcoder.parse("# Title\\n\\nHello **world**")
        >>> transcoder.serialize(tree)
        '# Title\\n\\nHello **world**'

    """

    def __init__(
        self,
        parser_options: MdxParserOptions | None = None,
        renderer_options: MdxRendererOptions | None = None,
        registry: NodeTypeRegistry | None = None,
    ):
        """Initialize the transcoder, validating both option objects."""
        BaseParser._validate_options_type(parser_options, MdxParserOptions, "mdx")
        BaseRenderer._validate_options_type(renderer_options, MdxRendererOptions, "mdx")
        self.parser_options = parser_options or MdxParserOptions()
        self.renderer_options = renderer_options or MdxRendererOptions()
        self.registry = registry or build_default_registry()

    def parse(self, markup: ParserInput) -> Node:
        """Parse markup into a ``document`` tree.

        Parameters
        ----------
        markup : str, Path, IO or bytes
            Markup text, a path to a markup file, a file-like object or raw
            UTF-8 bytes

        Returns
        -------
        Node
            The ``document`` root

        Raises
        ------
        ParsingError
            ``UnterminatedBlockError``, ``SchemaViolationError`` or
            ``UnknownAttributeShapeError``, with the offset, line and column
            of the problem

        """
        parser = MdxParser(self.parser_options, self.registry)
        size = f"{len(markup)} chars" if isinstance(markup, str) else type(markup).__name__
        with debug_timer(logger, f"Parsing ({size})"):
            return parser.parse(markup)

    def parse_file(self, path: Union[str, Path]) -> Node:
        """Parse a UTF-8 markup file."""
        return self.parse(Path(path))

    def serialize_with_warnings(self, tree: Node) -> tuple[str, list[SerializeWarning]]:
        """Serialize a tree and report the subtrees that were left out.

        Returns
        -------
        tuple of (str, list of SerializeWarning)
            The markup and one warning per omitted subtree

        Raises
        ------
        TreeShapeError
            If ``tree`` is not a ``document`` node
        RenderingError
            If ``fail_on_warning`` is set and a subtree cannot be written

        """
        renderer = MdxRenderer(self.renderer_options, self.registry)
        with debug_timer(logger, "Serializing"):
            markup = renderer.render_to_string(tree)
        return markup, list(renderer.warnings)

    def serialize(self, tree: Node) -> str:
        """Serialize a tree to markup.

        Ill-formed subtrees are logged and left out unless ``fail_on_warning``
        is set; use :meth:`serialize_with_warnings` to inspect them.
        """
        markup, _ = self.serialize_with_warnings(tree)
        return markup

    def serialize_to(self, tree: Node, output: Union[str, Path, IO[bytes], IO[str]]) -> list[SerializeWarning]:
        """Serialize a tree to a file or stream and return the warnings."""
        markup, warnings = self.serialize_with_warnings(tree)
        BaseRenderer.write_text_output(markup, output)
        return warnings

    def roundtrip(self, markup: ParserInput) -> tuple[Node, str, bool]:
        """Parse, serialize and parse again.

        Returns
        -------
        tuple of (Node, str, bool)
            The first tree, its serialized markup, and whether reading that
            markup gives a structurally equal tree

        """
        tree = self.parse(markup)
        rendered = self.serialize(tree)
        stable = trees_equal(self.parse(rendered), tree)
        if not stable:
            logger.info("Document does not survive a parse/serialize round trip")
        return tree, rendered, stable


def parse(markup: ParserInput, options: Optional[MdxParserOptions] = None, **kwargs: Any) -> Node:
    """Parse markup into a ``document`` tree, see :meth:`MdxTranscoder.parse`.

    Keyword arguments override fields of ``options``, or of the defaults.
    """
    if kwargs:
        options = (options or MdxParserOptions()).create_updated(**kwargs)
    return MdxTranscoder(parser_options=options).parse(markup)


def serialize(tree: Node, options: Optional[MdxRendererOptions] = None, **kwargs: Any) -> str:
    """Serialize a ``document`` tree to markup, see :meth:`MdxTranscoder.serialize`.

    Keyword arguments override fields of ``options``, or of the defaults.
    """
    if kwargs:
        options = (options or MdxRendererOptions()).create_updated(**kwargs)
    return MdxTranscoder(renderer_options=options).serialize(tree)


def roundtrip(markup: ParserInput) -> bool:
    """Return whether ``markup`` parses to the same tree after one serialize pass."""
    _, _, stable = MdxTranscoder().roundtrip(markup)
    return stable
