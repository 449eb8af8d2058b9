"""Main CLI entry point for the markup-tree command-line tool.

Prints the token listing, the indented tree dump, a JSON parse summary, or a
profiling report for a file, standard input, an inline string, or the
built-in sample markup.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from markup_tree import __version__
from markup_tree.api import SAMPLE_MARKUP, MarkupParser
from markup_tree.shared import ConfigError, ParserConfig, configure_logging
from markup_tree.shared.logging import get_logger
from markup_tree.tools import PerformanceProfiler
from markup_tree.tree import ParseResult, node_to_dict, render_tokens, render_tree

logger = get_logger(__name__, None, "cli")


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="markup-tree",
        description="Tokenize markup and build an element/text tree"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    input_parent = argparse.ArgumentParser(add_help=False)
    input_parent.add_argument(
        "input",
        nargs="?",
        help="Markup file, or '-' for stdin (default: built-in sample)"
    )
    input_parent.add_argument(
        "--string", "-s",
        dest="markup",
        help="Markup given inline instead of a file"
    )

    subparsers.add_parser(
        "tokens", parents=[input_parent], help="Print the token listing"
    )
    subparsers.add_parser(
        "tree", parents=[input_parent], help="Print the indented tree"
    )

    parse_parser = subparsers.add_parser(
        "parse", parents=[input_parent], help="Print the tree with diagnostics"
    )
    parse_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="json",
        help="Output format (default: json)"
    )

    profile_parser = subparsers.add_parser(
        "profile", parents=[input_parent], help="Profile tokenization and tree building"
    )
    profile_parser.add_argument(
        "--runs", "-n",
        type=int,
        default=5,
        help="Number of profiled runs (default: 5)"
    )

    return parser


def read_input(args: argparse.Namespace, encoding: str = "utf-8") -> str:
    """Resolve the markup to process from the parsed arguments.

    Files are decoded with ``encoding``; stdin uses the stream's own encoding.
    """
    if args.markup is not None:
        return args.markup
    if args.input is None:
        return SAMPLE_MARKUP
    if args.input == "-":
        return sys.stdin.read()
    return Path(args.input).read_text(encoding=encoding)


def load_config(args: argparse.Namespace) -> ParserConfig:
    if args.config:
        return ParserConfig.from_file(args.config)
    return ParserConfig()


def format_result(result: ParseResult, format_type: str) -> str:
    """Format a parse result for output."""
    if format_type == "text":
        lines = [render_tree(result.root)]
        if result.diagnostics:
            lines.append("")
            lines.append("Diagnostics:")
            for diag in result.diagnostics:
                lines.append(f"  {diag.severity.name}: {diag.message}")
        return "\n".join(lines)

    payload = {
        "tree": node_to_dict(result.root),
        "summary": result.summary(),
    }
    return json.dumps(payload, indent=2)


def cmd_tokens(args: argparse.Namespace, parser: MarkupParser) -> int:
    """Handle tokens command."""
    print("Tokens:")
    print(render_tokens(parser.tokenize(read_input(args, parser.config.encoding))))
    return 0


def cmd_tree(args: argparse.Namespace, parser: MarkupParser) -> int:
    """Handle tree command."""
    result = parser.parse_string(read_input(args, parser.config.encoding))
    print("DOM Tree:")
    print(render_tree(result.root))
    return 0


def cmd_parse(args: argparse.Namespace, parser: MarkupParser) -> int:
    """Handle parse command."""
    result = parser.parse_string(read_input(args, parser.config.encoding))
    try:
        output = format_result(result, args.format)
    except RecursionError:
        depth = result.root.depth
        logger.warning("Tree too deep for JSON output", extra={"max_depth": depth})
        print(
            f"Error: tree too deeply nested for JSON output "
            f"(depth {depth}); use --format text",
            file=sys.stderr
        )
        return 1
    print(output)
    return 0


def cmd_profile(args: argparse.Namespace, parser: MarkupParser) -> int:
    """Handle profile command."""
    if args.runs < 1:
        print("Error: --runs must be at least 1", file=sys.stderr)
        return 1

    markup = read_input(args, parser.config.encoding)
    profiler = PerformanceProfiler(config=parser.config)
    for run in range(args.runs):
        profiler.profile(markup, f"run_{run}")
    print(json.dumps(profiler.generate_report().to_dict(), indent=2))
    return 0


COMMANDS = {
    "tokens": cmd_tokens,
    "tree": cmd_tree,
    "parse": cmd_parse,
    "profile": cmd_profile,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    arg_parser = create_argument_parser()
    args = arg_parser.parse_args(argv)

    if not args.command:
        arg_parser.print_help()
        return 1

    try:
        config = load_config(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Set up logging verbosity
    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.log_level)

    parser = MarkupParser(config=config)

    try:
        return COMMANDS[args.command](args, parser)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Failed to read input", extra={"error": str(e)})
        print(f"Error reading input: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
