"""Main CLI entry point for the chained-markup command-line tool.

Renders the bundled example page, renders element trees stored as JSON and
reports tree statistics.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

from chained_markup import __version__
from chained_markup.shared import (
    BuilderConfig,
    ConfigValidationError,
    configure_logging,
    get_logger,
)
from chained_markup.tree import Document, TagNode

logger = get_logger(__name__, None, "cli")


def table_row(cells: Sequence[str], header: bool = False) -> Callable[[TagNode], None]:
    """Return a handler that appends one table row to the element it is given."""
    def add_row(table: TagNode) -> None:
        row = table.tr()
        for cell in cells:
            (row.th() if header else row.td()).text(cell)
    return add_row


def build_demo_document(rows: int = 3, config: Optional[BuilderConfig] = None) -> Document:
    """Build the example page: a styled div, an image and a table of squares."""
    def add_squares(table: TagNode) -> None:
        for index in range(1, rows + 1):
            table.apply(table_row([str(index), str(index * index)]))

    doc = Document(config).title("Chained markup demo")
    (doc.body
        .div().attr("style", "bold").text("Hello from a chained builder").up
        .img().attr("src", "logo.png").attr("alt", "logo").up
        .table().attr("border", "1")
            .apply(table_row(["Number", "Square"], header=True))
            .apply(add_squares)
        .up)
    return doc


def load_config(path: Optional[Path]) -> BuilderConfig:
    """Load a BuilderConfig from a JSON file, or return the default one."""
    if path is None:
        return BuilderConfig()
    try:
        return BuilderConfig.from_json(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigValidationError(f"Could not read config file {path}: {e}") from e


def load_tree(path: Path, config: BuilderConfig) -> TagNode:
    """Load an element tree saved in ``TagNode.to_dict`` form."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except RecursionError as e:
        raise ValueError(f"{path} is nested too deeply to decode") from e
    return TagNode.from_dict(data, config)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="chained-markup",
        description="Build and render markup trees with chained method calls",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )
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

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Render the example page")
    demo_parser.add_argument(
        "--rows",
        type=int,
        default=3,
        help="Number of table rows (default: 3)"
    )
    demo_parser.add_argument(
        "--format", "-f",
        choices=["html", "json", "stats"],
        default="html",
        help="Output format (default: html)"
    )
    demo_parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent the rendered markup"
    )

    # Render command
    render_parser = subparsers.add_parser("render", help="Render a JSON element tree")
    render_parser.add_argument("path", type=Path, help="JSON file with the element tree")
    render_parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent the rendered markup"
    )
    render_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )

    # Stats command
    stats_parser = subparsers.add_parser("stats", help="Show statistics of a JSON element tree")
    stats_parser.add_argument("path", type=Path, help="JSON file with the element tree")

    return parser


def _apply_pretty(config: BuilderConfig, pretty: bool) -> BuilderConfig:
    if pretty and not config.render.is_pretty:
        return config.override(render__indent=2)
    return config


def cmd_demo(args: argparse.Namespace, config: BuilderConfig) -> int:
    """Handle demo command."""
    if args.rows < 0:
        print("--rows must be >= 0", file=sys.stderr)
        return 1

    doc = build_demo_document(args.rows, _apply_pretty(config, args.pretty))
    if args.format == "json":
        print(json.dumps(doc.to_dict(), indent=2))
    elif args.format == "stats":
        print(json.dumps(doc.statistics().to_dict(), indent=2))
    else:
        print(doc.render())
    return 0


def cmd_render(args: argparse.Namespace, config: BuilderConfig) -> int:
    """Handle render command."""
    tree = load_tree(args.path, _apply_pretty(config, args.pretty))
    output = tree.render()

    if args.output:
        args.output.write_text(output, encoding="utf-8")
        print(f"Markup written to {args.output}", file=sys.stderr)
    else:
        print(output)
    return 0


def cmd_stats(args: argparse.Namespace, config: BuilderConfig) -> int:
    """Handle stats command."""
    tree = load_tree(args.path, config)
    print(json.dumps(tree.statistics().to_dict(), indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
    except ConfigValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")
    else:
        configure_logging(config.global_.logging_level)

    handlers = {"demo": cmd_demo, "render": cmd_render, "stats": cmd_stats}
    try:
        return handlers[args.command](args, config)
    except (OSError, ValueError, TypeError) as e:
        logger.error(f"{args.command} failed: {e}", exc_info=args.verbose)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
