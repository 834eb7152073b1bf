"""Roost CLI — inspect a router's route table.

Entry point registered as ``roost`` in ``pyproject.toml``::

    [project.scripts]
    roost = "roost.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``roost`` command."""
    parser = argparse.ArgumentParser(
        prog="roost",
        description="Roost — a client-side navigation engine for async Python.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- roost routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List route definitions in match order")
    routes_parser.add_argument(
        "app",
        help="Import string of a Router, RouteTable or pages mapping (e.g. myapp:router)",
    )

    # -- roost match ------------------------------------------------------
    match_parser = subparsers.add_parser("match", help="Show which route a path resolves to")
    match_parser.add_argument(
        "app",
        help="Import string of a Router, RouteTable or pages mapping (e.g. myapp:router)",
    )
    match_parser.add_argument("path", help="Relative path to resolve (e.g. profile/32)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from roost.cli._routes import run_routes

        run_routes(args)
    elif args.command == "match":
        from roost.cli._match import run_match

        run_match(args)
