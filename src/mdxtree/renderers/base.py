#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/renderers/base.py
"""Base classes for tree renderers.

This module defines the abstract base class renderers inherit from. A renderer
turns a ``document`` :class:`~mdxtree.ast.nodes.Node` into markup.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from io import TextIOBase
from pathlib import Path
from typing import IO, Union

from mdxtree.ast.nodes import Node
from mdxtree.exceptions import InvalidOptionsError
from mdxtree.options.base import BaseRendererOptions

RendererOutput = Union[str, Path, IO[bytes], IO[str]]


class BaseRenderer(ABC):
    """Abstract base class for tree renderers.

    Parameters
    ----------
    options : BaseRendererOptions or None, default = None
        Rendering options

    Examples
    --------
    Creating a custom renderer:

        >>> from mdxtree.renderers.base import BaseRenderer
        >>>
        >>> class OutlineRenderer(BaseRenderer):
        ...     def render_to_string(self, doc):
        ...         return "\\n".join(child.kind_name for child in doc.children)

    """

    def __init__(self, options: BaseRendererOptions | None = None):
        """Initialize the renderer with optional configuration."""
        self.options = options

    @abstractmethod
    def render_to_string(self, doc: Node) -> str:
        """Render the tree to a string.

        Parameters
        ----------
        doc : Node
            ``document`` root to render

        Returns
        -------
        str
            Rendered markup

        """
        raise NotImplementedError

    def render(self, doc: Node, output: RendererOutput) -> None:
        """Render the tree and write it to a file or stream.

        Parameters
        ----------
        doc : Node
            ``document`` root to render
        output : str, Path, IO[bytes] or IO[str]
            File path, or a binary or text file-like object

        """
        self.write_text_output(self.render_to_string(doc), output)

    @staticmethod
    def _validate_options_type(options: BaseRendererOptions | None, expected_type: type, renderer_name: str) -> None:
        """Validate that options are of the correct type for this renderer.

        Parameters
        ----------
        options : BaseRendererOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        renderer_name : str
            Name of the renderer (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @staticmethod
    def write_text_output(text: str, output: RendererOutput) -> None:
        """Write text output to a file or IO stream.

        Parameters
        ----------
        text : str
            Rendered text to write
        output : str, Path, IO[bytes] or IO[str]
            Output destination. Strings and paths name a file, written as
            UTF-8; binary streams receive UTF-8 bytes.

        Raises
        ------
        TypeError
            If the output type is not supported

        Examples
        --------
        Write to StringIO:
            >>> from io import StringIO
            >>> buffer = StringIO()
            >>> BaseRenderer.write_text_output("# Hello", buffer)
            >>> buffer.getvalue()
            '# Hello'

        """
        if isinstance(output, (str, Path)):
            Path(output).write_text(text, encoding="utf-8")
            return
        if not hasattr(output, "write"):
            raise TypeError(f"Unsupported output type: {type(output).__name__}")
        if isinstance(output, TextIOBase) or "b" not in getattr(output, "mode", "b"):
            output.write(text)  # type: ignore[arg-type]
        else:
            output.write(text.encode("utf-8"))  # type: ignore[arg-type]
