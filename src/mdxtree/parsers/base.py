#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/parsers/base.py
"""Base class for markup parsers.

This module defines the abstract base class parsers inherit from. A parser turns
markup into a ``document`` :class:`~mdxtree.ast.nodes.Node`.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Union

from mdxtree.ast.nodes import Node
from mdxtree.exceptions import InvalidOptionsError, ValidationError
from mdxtree.options.base import BaseParserOptions

logger = logging.getLogger(__name__)

ParserInput = Union[str, Path, IO[bytes], IO[str], bytes]


class BaseParser(ABC):
    """Abstract base class for markup parsers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Parser options

    Examples
    --------
    Creating a custom parser:

        >>> from mdxtree.parsers.base import BaseParser
        >>> from mdxtree.ast import Node, NodeKind
        >>>
        >>> class EmptyParser(BaseParser):
        ...     def parse(self, input_data):
        ...         return Node(NodeKind.DOCUMENT)

    """

    def __init__(self, options: BaseParserOptions | None = None):
        """Initialize the parser with optional configuration."""
        self.options: BaseParserOptions | None = options

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Parameters
        ----------
        options : BaseParserOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        parser_name : str
            Name of the parser (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, input_data: ParserInput) -> Node:
        """Parse the input into a ``document`` node.

        Parameters
        ----------
        input_data : str, Path, IO or bytes
            Markup text, a path to a markup file, a file-like object or raw
            UTF-8 bytes

        Returns
        -------
        Node
            The ``document`` root

        Raises
        ------
        ParsingError
            If the markup cannot be read into a tree

        """
        raise NotImplementedError

    @staticmethod
    def _load_text_content(input_data: ParserInput) -> str:
        """Load markup text from the supported input types.

        A ``str`` is always markup; pass a :class:`~pathlib.Path` to read a
        file. Bytes are decoded as UTF-8 (a byte order mark is dropped).

        Raises
        ------
        ValidationError
            If the input type is not supported or the bytes are not UTF-8

        """
        if isinstance(input_data, bytes):
            return _decode_utf8(input_data)
        if isinstance(input_data, Path):
            return _decode_utf8(input_data.read_bytes())
        if isinstance(input_data, str):
            return input_data
        if hasattr(input_data, "read"):
            data = input_data.read()
            return _decode_utf8(data) if isinstance(data, bytes) else data
        raise ValidationError(
            f"Unsupported input type: {type(input_data).__name__}",
            parameter_name="input_data",
            parameter_value=input_data,
        )


def _decode_utf8(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValidationError("Markup is not valid UTF-8", parameter_name="input_data", original_error=e) from e
