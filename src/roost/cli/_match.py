"""``roost match`` — resolve one path against a router's route table.

Exits with code 1 when no route matches.
"""

import argparse
import sys

from roost.cli._resolve import resolve_route_table


def run_match(args: argparse.Namespace) -> None:
    """Print the winning route, its capture groups and expanded data."""
    try:
        table = resolve_route_table(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    match = table.find(args.path)
    if match is None:
        print(f"No route matches {args.path!r}", file=sys.stderr)
        raise SystemExit(1)

    definition = match.definition
    print(f"pattern: {definition.pattern}")
    print(f"key:     {match.path}")
    print(f"script:  {definition.script or '(default Module)'}")
    print(f"groups:  {list(match.groups)}")
    if match.data is not None:
        print(f"data:    {match.data}")
    if definition.modules:
        print(f"modules: {', '.join(definition.modules)}")
