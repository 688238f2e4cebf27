#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdxtree/cli.py
"""Command-line interface for mdxtree.

Three subcommands cover the transcoder surface::

    mdxtree parse page.mdx > page.json
    mdxtree serialize page.json > page.mdx
    mdxtree roundtrip page.mdx

Parser and renderer flags are generated from the option dataclasses, so a
new option field shows up here without further wiring. ``-`` reads from
standard input.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import MISSING, fields
from pathlib import Path
from typing import Any, Optional, Sequence

from mdxtree import __version__
from mdxtree.api import MdxTranscoder
from mdxtree.ast.serialization import json_to_tree, tree_to_json
from mdxtree.constants import (
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_PARSING_ERROR,
    EXIT_RENDERING_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
)
from mdxtree.exceptions import ParsingError, RenderingError, SerializeWarning, ValidationError
from mdxtree.logging_utils import configure_logging
from mdxtree.options.base import CloneFrozenMixin
from mdxtree.options.mdx import MdxParserOptions, MdxRendererOptions

logger = logging.getLogger(__name__)

_RICH_MISSING = "Warning: Rich library not installed. Install with: pip install mdxtree[rich]"


def snake_to_kebab(name: str) -> str:
    """Convert an option field name to its flag spelling."""
    return name.replace("_", "-")


def add_options_arguments(parser: argparse.ArgumentParser, options_class: type[CloneFrozenMixin], title: str) -> None:
    """Add one flag per field of an options dataclass.

    Boolean fields get a ``--flag/--no-flag`` pair; ``choices`` and ``type``
    come from the field metadata. Flags default to ``None`` so that only the
    ones given on the command line override the dataclass defaults.

    Parameters
    ----------
    parser : argparse.ArgumentParser
        Parser or subparser to extend
    options_class : type
        Frozen options dataclass
    title : str
        Argument group title shown in ``--help``

    """
    group = parser.add_argument_group(title)
    for field in fields(options_class):
        flag = f"--{snake_to_kebab(field.name)}"
        help_text = field.metadata.get("help", "")
        if field.default is not MISSING:
            help_text = f"{help_text} (default: {field.default})"

        if isinstance(field.default, bool):
            group.add_argument(
                flag, dest=field.name, action=argparse.BooleanOptionalAction, default=None, help=help_text
            )
            continue

        kwargs: dict[str, Any] = {"dest": field.name, "default": None, "help": help_text}
        if "choices" in field.metadata:
            kwargs["choices"] = field.metadata["choices"]
        if "type" in field.metadata:
            kwargs["type"] = field.metadata["type"]
        group.add_argument(flag, **kwargs)


def build_options(parsed_args: argparse.Namespace, options_class: type[CloneFrozenMixin]) -> Any:
    """Create an options object from the flags that were given.

    Raises
    ------
    argparse.ArgumentTypeError
        If the combination of values is rejected by the options class

    """
    overrides = {
        field.name: getattr(parsed_args, field.name)
        for field in fields(options_class)
        if getattr(parsed_args, field.name, None) is not None
    }
    try:
        return options_class().create_updated(**overrides)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="mdxtree",
        description="Convert MDX-like documentation markup to a JSON document tree and back.",
    )
    parser.add_argument("--version", action="version", version=f"mdxtree {__version__}")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log messages to this file")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")
    parser.add_argument("--rich", action="store_true", help="Pretty-print output to the terminal with rich")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    parse_cmd = subparsers.add_parser("parse", help="Parse markup into a JSON document tree")
    parse_cmd.add_argument("input", help="Markup file, or - for standard input")
    parse_cmd.add_argument("-o", "--out", help="Write the JSON here instead of standard output")
    parse_cmd.add_argument("--indent", type=int, default=2, help="JSON indentation, 0 for compact (default: 2)")
    add_options_arguments(parse_cmd, MdxParserOptions, "parser options")

    serialize_cmd = subparsers.add_parser("serialize", help="Serialize a JSON document tree to markup")
    serialize_cmd.add_argument("input", help="JSON tree file, or - for standard input")
    serialize_cmd.add_argument("-o", "--out", help="Write the markup here instead of standard output")
    add_options_arguments(serialize_cmd, MdxRendererOptions, "renderer options")

    roundtrip_cmd = subparsers.add_parser(
        "roundtrip", help="Check that markup parses to the same tree after one serialize pass"
    )
    roundtrip_cmd.add_argument("input", help="Markup file, or - for standard input")
    roundtrip_cmd.add_argument("--show", action="store_true", help="Print the re-serialized markup")
    add_options_arguments(roundtrip_cmd, MdxParserOptions, "parser options")
    add_options_arguments(roundtrip_cmd, MdxRendererOptions, "renderer options")

    return parser


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to a CLI exit code."""
    if isinstance(exception, ValidationError):
        return EXIT_VALIDATION_ERROR
    if isinstance(exception, OSError):
        return EXIT_FILE_ERROR
    if isinstance(exception, ParsingError):
        return EXIT_PARSING_ERROR
    if isinstance(exception, RenderingError):
        return EXIT_RENDERING_ERROR
    return EXIT_ERROR


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level.upper())
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _write_output(text: str, destination: Optional[str]) -> None:
    if destination:
        Path(destination).write_text(text, encoding="utf-8")
        logger.info("Wrote %s", destination)
    else:
        print(text)


def _print_rich_syntax(text: str, lexer: str) -> bool:
    """Print text with rich syntax highlighting, returning False if rich is unavailable."""
    try:
        from rich.console import Console
        from rich.syntax import Syntax
    except ImportError:
        print(_RICH_MISSING, file=sys.stderr)
        return False

    Console().print(Syntax(text, lexer, theme="monokai", word_wrap=True))
    return True


def _emit(text: str, parsed_args: argparse.Namespace, lexer: str) -> None:
    if parsed_args.rich and not parsed_args.out:
        if _print_rich_syntax(text, lexer):
            return
    _write_output(text, parsed_args.out)


def _report_warnings(warnings: Sequence[SerializeWarning]) -> None:
    for warning in warnings:
        print(f"Warning: {warning}", file=sys.stderr)


def _render_roundtrip_rich(source: str, stable: bool, rendered: Optional[str]) -> bool:
    try:
        from rich.console import Console
        from rich.panel import Panel
        from rich.syntax import Syntax
    except ImportError:
        print(_RICH_MISSING, file=sys.stderr)
        return False

    console = Console()
    if stable:
        console.print(f"[green][OK][/green] {source} is stable")
    else:
        console.print(f"[red][X][/red] {source} changes after a parse/serialize round trip")
    if rendered is not None:
        console.print(Panel(Syntax(rendered, "markdown", word_wrap=True), title="Serialized markup"))
    return True


def run_parse(parsed_args: argparse.Namespace) -> int:
    """Handle ``mdxtree parse``."""
    transcoder = MdxTranscoder(parser_options=build_options(parsed_args, MdxParserOptions))
    tree = transcoder.parse(_read_input(parsed_args.input))
    _emit(tree_to_json(tree, indent=parsed_args.indent or None), parsed_args, "json")
    return EXIT_SUCCESS


def run_serialize(parsed_args: argparse.Namespace) -> int:
    """Handle ``mdxtree serialize``."""
    transcoder = MdxTranscoder(renderer_options=build_options(parsed_args, MdxRendererOptions))
    tree = json_to_tree(_read_input(parsed_args.input))
    markup, warnings = transcoder.serialize_with_warnings(tree)
    _report_warnings(warnings)
    _emit(markup, parsed_args, "markdown")
    return EXIT_SUCCESS


def run_roundtrip(parsed_args: argparse.Namespace) -> int:
    """Handle ``mdxtree roundtrip``, exiting with 1 when the tree changes."""
    transcoder = MdxTranscoder(
        parser_options=build_options(parsed_args, MdxParserOptions),
        renderer_options=build_options(parsed_args, MdxRendererOptions),
    )
    _, rendered, stable = transcoder.roundtrip(_read_input(parsed_args.input))
    shown = rendered if parsed_args.show else None

    if not (parsed_args.rich and _render_roundtrip_rich(parsed_args.input, stable, shown)):
        print(f"[OK] {parsed_args.input} is stable" if stable else f"[X] {parsed_args.input} is not stable")
        if shown is not None:
            print(shown)
    return EXIT_SUCCESS if stable else EXIT_ERROR


_COMMANDS = {
    "parse": run_parse,
    "serialize": run_serialize,
    "roundtrip": run_roundtrip,
}


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return its exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    _setup_logging_level(parsed_args)

    try:
        return _COMMANDS[parsed_args.command](parsed_args)
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)


if __name__ == "__main__":
    sys.exit(main())
