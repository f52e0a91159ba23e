#!/usr/bin/env python3
"""
CLI tool for resolving locations from a catalog file.

Usage:
    python -m locator_svc.cli --catalog locations.yaml resolve cd17:accounts --path /#/users
    python -m locator_svc.cli --catalog locations.yaml --environment integration resolve global:api
    python -m locator_svc.cli --catalog locations.yaml identify https://console.search.alertlogic.co.uk/
    python -m locator_svc.cli --catalog locations.yaml list --type cd17:search
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any

from colorama import Fore, Style, init as colorama_init

from .errors import LocatorError
from .locations.loader import load_locations
from .locations.types import LocationDescriptor
from .matrix.matrix import LocatorMatrix

COLOR_ENABLED = True


def colorize(text: str, color: str) -> str:
    """Apply color if enabled."""
    if COLOR_ENABLED:
        return f"{color}{text}{Style.RESET_ALL}"
    return text


def print_json(data: Any, indent: int = 2) -> None:
    print(json.dumps(data, indent=indent, default=str))


def format_location(node: LocationDescriptor, url: str) -> str:
    """One-line summary of a location node."""
    scope = f"{node.environment or '*'}/{node.residency or '*'}"
    if node.data_center_id:
        scope += f"/{node.data_center_id}"
    return f"{colorize(node.type_id, Fore.YELLOW)} {colorize(scope, Fore.MAGENTA)} {colorize(url, Fore.GREEN)}"


def build_matrix(args) -> LocatorMatrix:
    """Load the catalog and apply the context given on the command line."""
    matrix = LocatorMatrix(load_locations(args.catalog))
    matrix.set_context(
        environment=args.environment,
        residency=args.residency,
        data_center_id=args.data_center,
        accessible=args.accessible.split(",") if args.accessible else None,
    )
    if args.acting_uri:
        matrix.set_acting_uri(args.acting_uri)
    return matrix


def cmd_resolve(args, matrix: LocatorMatrix) -> int:
    """Resolve a location type to a URL."""
    node = matrix.get_node(args.type_id)
    url = matrix.resolve_url(args.type_id, args.path)

    if args.json:
        print_json({
            "type_id": args.type_id,
            "url": url,
            "found": node is not None,
            "context": matrix.get_context().to_dict(),
        })
        return 0 if node is not None else 1

    if node is None:
        print(colorize(f"No location for '{args.type_id}', using fallback origin", Fore.RED), file=sys.stderr)
        print(url)
        return 1
    print(url)
    return 0


def cmd_identify(args, matrix: LocatorMatrix) -> int:
    """Identify the location a URL belongs to."""
    node = matrix.find_by_uri(args.url)
    if node is None:
        print(colorize(f"No location matches {args.url}", Fore.RED), file=sys.stderr)
        return 1

    if args.json:
        data = node.to_dict()
        data["full_uri"] = matrix.resolve_node_uri(node)
        print_json(data)
    else:
        print(format_location(node, matrix.resolve_node_uri(node)))
    return 0


def cmd_list(args, matrix: LocatorMatrix) -> int:
    """List catalog locations."""
    nodes = matrix.search(lambda n: args.type is None or n.type_id == args.type)

    if args.json:
        print_json([n.to_dict() for n in nodes])
        return 0

    print(colorize(f"\nLocations ({len(nodes)}):", Style.BRIGHT))
    for node in nodes:
        print(f"  {format_location(node, matrix.resolve_node_uri(node))}")
    return 0


COMMANDS = {
    "resolve": cmd_resolve,
    "identify": cmd_identify,
    "list": cmd_list,
}


def main(argv: list[str] | None = None) -> int:
    global COLOR_ENABLED

    parser = argparse.ArgumentParser(
        description="Resolve locations from a location catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--catalog",
        default=os.environ.get("LOCATOR_CATALOG"),
        help="Location catalog file or directory (default: $LOCATOR_CATALOG)",
    )
    parser.add_argument("--environment", help="Environment (production, integration, development)")
    parser.add_argument("--residency", help="Data residency (US, EMEA)")
    parser.add_argument("--data-center", help="Insight location id, e.g. defender-us-ashburn")
    parser.add_argument("--accessible", help="Comma-separated accessible insight location ids")
    parser.add_argument("--acting-uri", help="URL of the running application (seeds the context)")
    parser.add_argument("--json", action="store_true", help="Print JSON output")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log resolution notices")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a location type to a URL")
    resolve_parser.add_argument("type_id", help="Location type (e.g., cd17:accounts)")
    resolve_parser.add_argument("--path", help="Path appended to the resolved URL")

    identify_parser = subparsers.add_parser("identify", help="Identify the location of a URL")
    identify_parser.add_argument("url", help="URL to identify")

    list_parser = subparsers.add_parser("list", help="List catalog locations")
    list_parser.add_argument("--type", help="Only list this location type")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1
    if not args.catalog:
        parser.error("--catalog is required (or set LOCATOR_CATALOG)")

    COLOR_ENABLED = not args.no_color
    if COLOR_ENABLED:
        colorama_init()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        matrix = build_matrix(args)
    except (FileNotFoundError, NotADirectoryError, LocatorError) as e:
        print(colorize(f"Error: {e}", Fore.RED), file=sys.stderr)
        return 2

    return COMMANDS[args.command](args, matrix)


if __name__ == "__main__":
    sys.exit(main() or 0)
