"""mdxtree - convert MDX-like documentation markup to a structured tree and back.

mdxtree reads documentation pages written in Markdown extended with
capitalized component tags (``<Tip>``, ``<Tabs>``, ``<CodeGroup>``,
``<Table data={...} />`` and so on) into a tree of typed nodes that a
block editor can manipulate, and writes such trees back to markup that reads
the same way again.

Key Features
------------
- Markdown block and inline syntax read through mistune
- Component tags with quoted and ``{...}`` expression attributes
- YAML frontmatter kept on the document node
- A registry of node types, so new components plug in without touching the
  scanner or the writer
- A versioned JSON interchange format for the tree
- Editor helpers that keep composite attributes consistent

Examples
--------
    >>> from mdxtree import parse, serialize
    >>> tree = parse("# Title\\n\\nHello **world**")
    >>> tree.children[0].kind_name
    'heading'
    >>> serialize(tree)
    '# Title\\n\\nHello **world**'

See Also
--------
mdxtree.ast : node types and the JSON interchange format
mdxtree.nodetypes : the built-in component node types

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

__version__ = "1.0.0"

from mdxtree.api import MdxTranscoder, parse, roundtrip, serialize  # noqa: E402
from mdxtree.ast import Mark, MarkType, Node, NodeKind, json_to_tree, tree_to_json  # noqa: E402
from mdxtree.exceptions import (  # noqa: E402
    InvalidOptionsError,
    MdxTreeError,
    ParsingError,
    RenderingError,
    SchemaViolationError,
    SerializeWarning,
    TreeShapeError,
    UnknownAttributeShapeError,
    UnknownKindError,
    UnterminatedBlockError,
    ValidationError,
)
from mdxtree.nodetypes import build_default_registry  # noqa: E402
from mdxtree.options import MdxParserOptions, MdxRendererOptions  # noqa: E402
from mdxtree.registry import NodeTypeDescriptor, NodeTypeRegistry  # noqa: E402

__all__ = [
    "__version__",
    "MdxTranscoder",
    "parse",
    "serialize",
    "roundtrip",
    "Mark",
    "MarkType",
    "Node",
    "NodeKind",
    "json_to_tree",
    "tree_to_json",
    "MdxParserOptions",
    "MdxRendererOptions",
    "NodeTypeDescriptor",
    "NodeTypeRegistry",
    "build_default_registry",
    "MdxTreeError",
    "ValidationError",
    "InvalidOptionsError",
    "UnknownKindError",
    "TreeShapeError",
    "ParsingError",
    "UnterminatedBlockError",
    "SchemaViolationError",
    "UnknownAttributeShapeError",
    "RenderingError",
    "SerializeWarning",
]
