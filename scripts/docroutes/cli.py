"""Command-line interface for docroutes."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from enum import IntEnum
from pathlib import Path
from typing import Optional

from scripts.docroutes.config import DEFAULT_CONFIG_PATH, DocsConfig, load_config
from scripts.docroutes.context import DocsContext
from scripts.docroutes.errors import ConfigError, RegistryLoadError, ResolutionError
from scripts.docroutes.symbol_index import ROUTES_PATH, save_routes


class ExitCode(IntEnum):
    """Exit codes."""

    SUCCESS = 0
    CONFIG_ERROR = 1
    RESOLUTION_ERROR = 2
    NOT_FOUND = 3


def _get_config(config_path: Optional[str]) -> DocsConfig:
    """Load config from path, the default location, or built-in defaults."""
    if config_path:
        return load_config(config_path)
    return load_config(Path.cwd() / DEFAULT_CONFIG_PATH)


def _get_context(args: argparse.Namespace) -> DocsContext:
    return DocsContext.from_config(_get_config(args.config))


def cmd_resolve(args: argparse.Namespace) -> int:
    """Resolve an intra-doc link."""
    ctx = _get_context(args)
    try:
        print(ctx.resolve(args.link, args.base))
    except ResolutionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return ExitCode.RESOLUTION_ERROR
    return ExitCode.SUCCESS


def cmd_route(args: argparse.Namespace) -> int:
    """Show the route of the definition at a dotted path."""
    ctx = _get_context(args)
    try:
        binding, _ = ctx.tree.locate(args.path)
    except ResolutionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return ExitCode.RESOLUTION_ERROR

    route = ctx.route_of_value(binding.read())
    if route is None:
        print(f"{args.path}: not indexed")
        return ExitCode.NOT_FOUND

    print(ctx.config.docs_base + route if args.absolute else route)
    return ExitCode.SUCCESS


def cmd_docs(args: argparse.Namespace) -> int:
    """Rewrite the links of a documentation text."""
    ctx = _get_context(args)
    if args.file:
        try:
            text = Path(args.file).read_text(encoding="utf-8")
        except OSError as e:
            print(f"Error: cannot read {args.file}: {e.strerror or e}", file=sys.stderr)
            return ExitCode.NOT_FOUND
    else:
        text = sys.stdin.read()
    sys.stdout.write(ctx.plain_docs_sentence(text))
    return ExitCode.SUCCESS


def cmd_hover(args: argparse.Namespace) -> int:
    """Print the hover summary of a definition."""
    ctx = _get_context(args)
    try:
        info = ctx.hover_info(args.path)
    except ResolutionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return ExitCode.RESOLUTION_ERROR

    if args.json:
        print(json.dumps(info, indent=2))
        return ExitCode.SUCCESS

    print(f"{info['name']} ({info['kind']})")
    if info["category"]:
        print(f"  Category: {info['category']}")
    print(f"  Docs: {info['route'] or 'not indexed'}")
    if info["docs"]:
        print()
        print(info["docs"])
    return ExitCode.SUCCESS


def cmd_groups(args: argparse.Namespace) -> int:
    """List function groups and their members."""
    ctx = _get_context(args)
    groups = ctx.groups.groups()
    if args.category:
        groups = [g for g in groups if g.category == args.category]

    for group in groups:
        print(f"{group.category}/{group.name}: {group.title or group.name}")
        print(f"  {', '.join(group.filter) if group.filter else '(no functions)'}")
    return ExitCode.SUCCESS


def cmd_export(args: argparse.Namespace) -> int:
    """Export the full route map as JSON."""
    ctx = _get_context(args)
    route_map = ctx.index.export()
    output = Path(args.output) if args.output else ROUTES_PATH
    save_routes(route_map, path=output)
    print(f"Exported {route_map['route_count']} routes")
    print(f"Saved to {output}")
    return ExitCode.SUCCESS


def _add_config_arg(parser: argparse.ArgumentParser) -> None:
    """Add --config argument to a parser."""
    parser.add_argument(
        "--config",
        "-c",
        help=f"Path to config file (default: {DEFAULT_CONFIG_PATH})",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="docroutes",
        description="Documentation routes for standard library symbols",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Log build and resolution details (repeat for debug output)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # resolve command
    resolve_parser = subparsers.add_parser("resolve", help="Resolve an intra-doc link")
    _add_config_arg(resolve_parser)
    resolve_parser.add_argument("link", help="Link to resolve, e.g. '$calc.round'")
    resolve_parser.add_argument("--base", help="Docs base URL (default: from config)")

    # route command
    route_parser = subparsers.add_parser("route", help="Show the route of a definition")
    _add_config_arg(route_parser)
    route_parser.add_argument("path", help="Dotted path, e.g. 'calc.abs'")
    route_parser.add_argument("--absolute", action="store_true", help="Prefix the docs base")

    # docs command
    docs_parser = subparsers.add_parser("docs", help="Rewrite the links of documentation text")
    _add_config_arg(docs_parser)
    docs_parser.add_argument("file", nargs="?", help="Input file (default: stdin)")

    # hover command
    hover_parser = subparsers.add_parser("hover", help="Show the hover summary of a definition")
    _add_config_arg(hover_parser)
    hover_parser.add_argument("path", help="Dotted path, e.g. 'text'")
    hover_parser.add_argument("--json", action="store_true", help="Output JSON")

    # groups command
    groups_parser = subparsers.add_parser("groups", help="List function groups")
    _add_config_arg(groups_parser)
    groups_parser.add_argument("--category", help="Only groups of this category")

    # export command
    export_parser = subparsers.add_parser("export", help="Export the route map as JSON")
    _add_config_arg(export_parser)
    export_parser.add_argument("--output", "-o", help=f"Output file (default: {ROUTES_PATH})")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )

    commands = {
        "resolve": cmd_resolve,
        "route": cmd_route,
        "docs": cmd_docs,
        "hover": cmd_hover,
        "groups": cmd_groups,
        "export": cmd_export,
    }

    try:
        return commands[args.command](args)
    except (ConfigError, RegistryLoadError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return ExitCode.CONFIG_ERROR


if __name__ == "__main__":
    sys.exit(main())
